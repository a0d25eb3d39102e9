"""
Хранилища процесса: лимиты, сессии, чат, партии.
Объекты создаются один раз на приложение и дальше только изменяются.
"""
import logging
import time

from .chat import ChatRelay
from .config import Config
from .game import GameEngine
from .ratelimit import RateLimiter
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)


class AppState:
    def __init__(self, config: Config):
        window = config.rate_limit_window_seconds
        limit = config.rate_limit_max_requests
        self.chat = ChatRelay(
            rate_limiter=RateLimiter(window=window, limit=limit),
            sessions=SessionRegistry(idle_ttl=config.session_idle_seconds),
            message_ttl=config.message_ttl_seconds,
        )
        self.games = GameEngine(
            rate_limiter=RateLimiter(window=window, limit=limit),
            sessions=SessionRegistry(idle_ttl=config.session_idle_seconds),
            idle_ttl=config.game_idle_seconds,
            decided_ttl=config.game_decided_seconds,
        )

    def sweep(self, now: float | None = None) -> dict[str, int]:
        """Удалить всё просроченное. Возвращает счётчики по хранилищам."""
        now = time.time() if now is None else now
        counts = {
            "messages": self.chat.sweep(now),
            "chat_sessions": self.chat.sessions.sweep(now),
            "chat_rate_limits": self.chat.rate_limiter.sweep(now),
            "games": self.games.sweep(now),
            "game_sessions": self.games.sessions.sweep(now),
            "game_rate_limits": self.games.rate_limiter.sweep(now),
        }
        if any(counts.values()):
            logger.info("Sweep removed %s", counts)
        else:
            logger.debug("Sweep: nothing expired")
        return counts
