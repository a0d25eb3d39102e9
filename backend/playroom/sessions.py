"""
Привязка пользователя к одному токену сессии.
Не аутентификация: защищает только от случайных коллизий одинаковых имён.
"""
import logging
from dataclasses import dataclass

from .constants import SESSION_IDLE_SECONDS
from .errors import SessionMismatch

logger = logging.getLogger(__name__)


@dataclass
class SessionRecord:
    bound_token: str
    last_activity_at: float


class SessionRegistry:
    def __init__(self, idle_ttl: float = SESSION_IDLE_SECONDS):
        self.idle_ttl = idle_ttl
        self._sessions: dict[str, SessionRecord] = {}

    def _expired(self, record: SessionRecord, now: float) -> bool:
        return now - record.last_activity_at >= self.idle_ttl

    def get(self, user_id: str, now: float) -> SessionRecord | None:
        """Живая запись или None. Просроченная удаляется при обращении."""
        record = self._sessions.get(user_id)
        if record is None:
            return None
        if self._expired(record, now):
            del self._sessions[user_id]
            logger.debug("Session expired user=%s", user_id)
            return None
        return record

    def bind_or_validate(self, user_id: str, token: str, now: float) -> SessionRecord:
        record = self.get(user_id, now)
        if record is None:
            record = SessionRecord(bound_token=token, last_activity_at=now)
            self._sessions[user_id] = record
            logger.info("Session bound user=%s", user_id)
            return record
        if record.bound_token != token:
            logger.warning("Session mismatch user=%s", user_id)
            raise SessionMismatch()
        record.last_activity_at = now
        return record

    def sweep(self, now: float) -> int:
        expired = [u for u, r in self._sessions.items() if self._expired(r, now)]
        for user_id in expired:
            del self._sessions[user_id]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._sessions
