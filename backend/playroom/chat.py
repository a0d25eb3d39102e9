"""
Чат: общий журнал сообщений и приватные каналы по токену (in-memory).
Каждое сообщение живёт message_ttl секунд с момента вставки.
"""
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .constants import MESSAGE_TTL_SECONDS
from .errors import InvalidOrExpiredToken, MissingParameter, NoMessagesStored
from .ratelimit import RateLimiter
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ChatMessage:
    username: str
    message: str
    timestamp: str
    expires_at: float = field(repr=False, default=0.0)


def iso_timestamp(now: float) -> str:
    """ISO-8601 в UTC с миллисекундами и суффиксом Z."""
    dt = datetime.fromtimestamp(now, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def message_payload(msg: ChatMessage) -> dict:
    return {"username": msg.username, "message": msg.message, "timestamp": msg.timestamp}


class ChatRelay:
    def __init__(
        self,
        rate_limiter: RateLimiter | None = None,
        sessions: SessionRegistry | None = None,
        message_ttl: float = MESSAGE_TTL_SECONDS,
    ):
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
        self.sessions = sessions if sessions is not None else SessionRegistry()
        self.message_ttl = message_ttl
        self._public: list[ChatMessage] = []
        self._private: dict[str, list[ChatMessage]] = {}

    @staticmethod
    def _live(messages: list[ChatMessage], now: float) -> list[ChatMessage]:
        # Удаление по идентичности объекта: порядок остальных не меняется.
        expired = [m for m in messages if m.expires_at <= now]
        for msg in expired:
            messages.remove(msg)
        return messages

    def check_rate(self, username: str, now: float | None = None) -> None:
        if not username:
            raise MissingParameter("Please provide a username")
        now = time.time() if now is None else now
        self.rate_limiter.check(username.lower(), now)

    def send_message(
        self,
        username: str,
        message: str,
        session: str,
        token: str | None = None,
        timestamp: str | None = None,
        now: float | None = None,
    ) -> dict:
        if not username:
            raise MissingParameter("Please provide a username")
        if not message:
            raise MissingParameter("Please provide a message")
        if not session:
            raise MissingParameter("Please provide a valid session ID")
        now = time.time() if now is None else now
        user_id = username.lower()

        self.rate_limiter.check(user_id, now)
        self.sessions.bind_or_validate(user_id, session, now)

        msg = ChatMessage(
            username=username,
            message=message,
            timestamp=timestamp or iso_timestamp(now),
            expires_at=now + self.message_ttl,
        )
        if token:
            self._private.setdefault(token, []).append(msg)
            logger.debug("Private message user=%s token=%s", user_id, token)
        else:
            self._public.append(msg)
            logger.debug("Public message user=%s", user_id)
        return {"message": "Message sent successfully"}

    def fetch_private(self, token: str, now: float | None = None) -> list[dict]:
        if not token:
            raise MissingParameter("Please provide a valid token")
        now = time.time() if now is None else now
        channel = self._private.get(token)
        if channel is None or not self._live(channel, now):
            self._private.pop(token, None)
            raise InvalidOrExpiredToken()
        return [message_payload(m) for m in channel]

    def fetch_public(self, now: float | None = None) -> list[dict]:
        now = time.time() if now is None else now
        if not self._live(self._public, now):
            raise NoMessagesStored()
        return [message_payload(m) for m in self._public]

    def sweep(self, now: float) -> int:
        """Удалить просроченные сообщения и опустевшие каналы. Возвращает число удалённых сообщений."""
        removed = len(self._public)
        self._live(self._public, now)
        removed -= len(self._public)
        for token in list(self._private):
            channel = self._private[token]
            before = len(channel)
            self._live(channel, now)
            removed += before - len(channel)
            if not channel:
                del self._private[token]
        return removed
