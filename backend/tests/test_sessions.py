import pytest

from playroom.errors import SessionMismatch
from playroom.sessions import SessionRegistry

T0 = 1_700_000_000.0
HOUR = 3600


def test_first_action_binds_token():
    reg = SessionRegistry()
    record = reg.bind_or_validate("alice", "S1", T0)
    assert record.bound_token == "S1"
    assert record.last_activity_at == T0
    assert "alice" in reg


def test_other_token_is_rejected_same_token_succeeds():
    reg = SessionRegistry()
    reg.bind_or_validate("alice", "S1", T0)
    with pytest.raises(SessionMismatch):
        reg.bind_or_validate("alice", "S2", T0 + 1)
    record = reg.bind_or_validate("alice", "S1", T0 + 2)
    assert record.last_activity_at == T0 + 2


def test_idle_session_expires_and_can_rebind():
    reg = SessionRegistry()
    reg.bind_or_validate("alice", "S1", T0)
    assert reg.get("alice", T0 + HOUR) is None
    record = reg.bind_or_validate("alice", "S2", T0 + HOUR + 1)
    assert record.bound_token == "S2"


def test_activity_postpones_expiry():
    reg = SessionRegistry()
    reg.bind_or_validate("alice", "S1", T0)
    reg.bind_or_validate("alice", "S1", T0 + HOUR - 10)
    assert reg.sweep(T0 + HOUR) == 0
    with pytest.raises(SessionMismatch):
        reg.bind_or_validate("alice", "S2", T0 + HOUR + 5)


def test_sweep_removes_only_idle_records():
    reg = SessionRegistry(idle_ttl=100)
    reg.bind_or_validate("alice", "S1", T0)
    reg.bind_or_validate("bob", "S2", T0 + 50)
    assert reg.sweep(T0 + 100) == 1
    assert "alice" not in reg
    assert "bob" in reg
