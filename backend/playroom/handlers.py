"""
Разбор тел запросов чата и игры: проверка параметров, приведение типов,
диспетчеризация по полю method.
"""
import logging
from typing import Any

from .chat import ChatRelay
from .constants import CHAT_METHODS, GAME_METHODS
from .errors import InvalidAction, InvalidMove, MissingParameter
from .game import GameEngine, PlayRequest, parse_cell

logger = logging.getLogger(__name__)


def _text(data: dict[str, Any], key: str) -> str:
    """Строковое поле тела или "". Значения других типов JSON отклоняются."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MissingParameter(f"Parameter '{key}' must be a string.")
    return value.strip()


def parse_play_request(data: dict[str, Any]) -> PlayRequest:
    """Проверки в порядке: username, move, session, game, допустимость хода."""
    username = _text(data, "username")
    if not username:
        raise MissingParameter("Please provide a username")
    move = data.get("move")
    if move is not None and not isinstance(move, str):
        raise InvalidMove()
    if not move or not move.strip():
        raise MissingParameter("Please provide a valid move")
    session = _text(data, "session")
    if not session:
        raise MissingParameter("Please provide a valid session ID")
    game_id = _text(data, "game")
    if not game_id:
        raise MissingParameter("Please provide a valid game ID")
    return PlayRequest(username=username, cell=parse_cell(move), session=session, game_id=game_id)


def handle_chat(relay: ChatRelay, data: dict[str, Any], now: float | None = None) -> Any:
    method = _text(data, "method")
    username = _text(data, "username")
    logger.debug("Chat method=%s user=%s", method, username)
    if not username:
        raise MissingParameter("Please provide a username")
    if method == "message":
        return relay.send_message(
            username=username,
            message=_text(data, "message"),
            session=_text(data, "session"),
            token=_text(data, "token") or None,
            timestamp=_text(data, "timestamp") or None,
            now=now,
        )
    if method not in CHAT_METHODS:
        raise InvalidAction('Invalid action. Use "message", "private", or "fetch"')
    relay.check_rate(username, now)
    if method == "private":
        return relay.fetch_private(_text(data, "token"), now)
    return relay.fetch_public(now)


def handle_tic_tac_toe(engine: GameEngine, data: dict[str, Any], now: float | None = None) -> Any:
    method = _text(data, "method")
    username = _text(data, "username")
    logger.debug("Game method=%s user=%s", method, username)
    if not username:
        raise MissingParameter("Please provide a username")
    if method not in GAME_METHODS:
        raise InvalidAction('Invalid action. Use "play" or "fetch"')
    if method == "play":
        return engine.play(parse_play_request(data), now)
    return engine.fetch(username, _text(data, "game") or None, now)
