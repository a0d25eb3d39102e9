"""
Скользящее окно запросов на пользователя.
Чат и игра держат отдельные экземпляры (независимые пространства имён).
"""
import logging
import math
from collections import defaultdict, deque

from .constants import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS
from .errors import RateLimitExceeded

logger = logging.getLogger(__name__)


class RateLimiter:
    def __init__(self, window: float = RATE_LIMIT_WINDOW_SECONDS, limit: int = RATE_LIMIT_MAX_REQUESTS):
        self.window = window
        self.limit = limit
        self._hits: dict[str, deque[float]] = defaultdict(deque)

    def _prune(self, user_id: str, now: float) -> deque[float]:
        hits = self._hits[user_id]
        while hits and now - hits[0] >= self.window:
            hits.popleft()
        return hits

    def check(self, user_id: str, now: float) -> None:
        """
        Учесть запрос пользователя. После вставки в окне не больше `limit` отметок,
        иначе RateLimitExceeded с подсказкой, через сколько секунд повторить.
        """
        hits = self._prune(user_id, now)
        if len(hits) >= self.limit:
            retry_after = max(1, math.ceil(hits[0] + self.window - now))
            logger.warning("Rate limit hit user=%s retry_after=%ss", user_id, retry_after)
            raise RateLimitExceeded(retry_after)
        hits.append(now)

    def count(self, user_id: str, now: float) -> int:
        if user_id not in self._hits:
            return 0
        return len(self._prune(user_id, now))

    def sweep(self, now: float) -> int:
        """Удалить пользователей без отметок в текущем окне."""
        stale = [u for u in self._hits if not self._prune(u, now)]
        for user_id in stale:
            del self._hits[user_id]
        return len(stale)

    def __len__(self) -> int:
        return len(self._hits)
