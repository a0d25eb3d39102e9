import pytest
from fastapi.testclient import TestClient

from playroom.chat import ChatRelay
from playroom.config import Config
from playroom.game import GameEngine, PlayRequest, parse_cell
from playroom.main import create_app

T0 = 1_700_000_000.0


@pytest.fixture
def engine():
    return GameEngine()


@pytest.fixture
def relay():
    return ChatRelay()


@pytest.fixture
def play(engine):
    """Сделать ход: play("alice", "2-2", "SA", "G1", now=...)."""

    def _play(username, move, session, game_id="G1", now=T0):
        request = PlayRequest(username=username, cell=parse_cell(move), session=session, game_id=game_id)
        return engine.play(request, now=now)

    return _play


@pytest.fixture
def config():
    return Config(sweep_interval_seconds=0, documentation_url="https://docs.example.test")


@pytest.fixture
def client(config):
    return TestClient(create_app(config))
