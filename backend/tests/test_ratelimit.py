import pytest

from playroom.errors import RateLimitExceeded
from playroom.ratelimit import RateLimiter

T0 = 1_700_000_000.0


def test_51st_call_in_window_is_rejected():
    limiter = RateLimiter()
    for i in range(50):
        limiter.check("alice", T0 + i * 0.1)
    with pytest.raises(RateLimitExceeded) as exc:
        limiter.check("alice", T0 + 5.0)
    # oldest at T0, window 10s, now T0+5 -> 5 seconds left
    assert exc.value.retry_after == 5
    assert "Try again in 5 seconds" in exc.value.message


def test_rejected_call_is_not_recorded():
    limiter = RateLimiter(window=10, limit=2)
    limiter.check("alice", T0)
    limiter.check("alice", T0 + 1)
    with pytest.raises(RateLimitExceeded):
        limiter.check("alice", T0 + 2)
    assert limiter.count("alice", T0 + 2) == 2


def test_spread_calls_never_fail():
    limiter = RateLimiter()
    for i in range(51):
        limiter.check("alice", T0 + i * 10.5)


def test_window_slides():
    limiter = RateLimiter(window=10, limit=3)
    for i in range(3):
        limiter.check("bob", T0 + i)
    with pytest.raises(RateLimitExceeded):
        limiter.check("bob", T0 + 5)
    limiter.check("bob", T0 + 10)


def test_users_are_independent():
    limiter = RateLimiter(window=10, limit=1)
    limiter.check("alice", T0)
    limiter.check("bob", T0)
    with pytest.raises(RateLimitExceeded):
        limiter.check("alice", T0 + 1)


def test_separate_instances_do_not_share_counts():
    chat, game = RateLimiter(limit=1), RateLimiter(limit=1)
    chat.check("alice", T0)
    game.check("alice", T0)


def test_sweep_drops_idle_users():
    limiter = RateLimiter(window=10, limit=5)
    limiter.check("alice", T0)
    limiter.check("bob", T0 + 8)
    assert limiter.sweep(T0 + 12) == 1
    assert len(limiter) == 1
    assert limiter.count("bob", T0 + 12) == 1
