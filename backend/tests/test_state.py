import asyncio
import time

from playroom.chat import ChatRelay
from playroom.config import Config
from playroom.game import GameEngine
from playroom.main import sweep_expired
from playroom.ratelimit import RateLimiter
from playroom.sessions import SessionRegistry
from playroom.state import AppState

HOUR = 3600


def test_engines_keep_injected_stores():
    limiter, sessions = RateLimiter(limit=1), SessionRegistry(idle_ttl=5)
    relay = ChatRelay(rate_limiter=limiter, sessions=sessions)
    engine = GameEngine(rate_limiter=limiter, sessions=sessions)
    assert relay.rate_limiter is limiter
    assert relay.sessions is sessions
    assert engine.rate_limiter is limiter
    assert engine.sessions is sessions


def test_app_state_applies_config():
    state = AppState(Config(rate_limit_max_requests=2, rate_limit_window_seconds=3, session_idle_seconds=7))
    for store in (state.chat, state.games):
        assert store.rate_limiter.limit == 2
        assert store.rate_limiter.window == 3
        assert store.sessions.idle_ttl == 7
    assert state.chat.rate_limiter is not state.games.rate_limiter
    assert state.chat.sessions is not state.games.sessions


def test_sweep_job_removes_expired_state():
    state = AppState(Config())
    past = time.time() - 2 * HOUR
    state.games.fetch("alice", "OLD", now=past)
    state.chat.send_message("alice", "hi", "S1", now=past)
    state.games.fetch("bob", "NEW")
    asyncio.run(sweep_expired(state))
    assert "OLD" not in state.games
    assert "NEW" in state.games
    assert len(state.chat.sessions) == 0
