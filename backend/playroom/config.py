"""Конфигурация приложения (переменные окружения)."""
import os
from dataclasses import dataclass
from functools import lru_cache

from . import constants


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else default


@dataclass(frozen=True)
class Config:
    debug: bool = False
    allowed_origins: tuple[str, ...] = ("*",)
    documentation_url: str = ""
    api_version: str = "v3"
    rate_limit_window_seconds: int = constants.RATE_LIMIT_WINDOW_SECONDS
    rate_limit_max_requests: int = constants.RATE_LIMIT_MAX_REQUESTS
    session_idle_seconds: int = constants.SESSION_IDLE_SECONDS
    message_ttl_seconds: int = constants.MESSAGE_TTL_SECONDS
    game_idle_seconds: int = constants.GAME_IDLE_SECONDS
    game_decided_seconds: int = constants.GAME_DECIDED_SECONDS
    sweep_interval_seconds: int = 60
    global_request_limit: int = 1000
    host: str = "0.0.0.0"
    port: int = 3000


@lru_cache
def get_config() -> Config:
    return Config(
        debug=os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes"),
        allowed_origins=tuple(os.environ.get("ALLOWED_ORIGINS", "*").split(",")),
        documentation_url=os.environ.get("DOCUMENTATION_URL", ""),
        api_version=os.environ.get("API_VERSION", "v3"),
        rate_limit_window_seconds=_env_int("RATE_LIMIT_WINDOW_SECONDS", constants.RATE_LIMIT_WINDOW_SECONDS),
        rate_limit_max_requests=_env_int("RATE_LIMIT_MAX_REQUESTS", constants.RATE_LIMIT_MAX_REQUESTS),
        session_idle_seconds=_env_int("SESSION_IDLE_SECONDS", constants.SESSION_IDLE_SECONDS),
        message_ttl_seconds=_env_int("MESSAGE_TTL_SECONDS", constants.MESSAGE_TTL_SECONDS),
        game_idle_seconds=_env_int("GAME_IDLE_SECONDS", constants.GAME_IDLE_SECONDS),
        game_decided_seconds=_env_int("GAME_DECIDED_SECONDS", constants.GAME_DECIDED_SECONDS),
        sweep_interval_seconds=_env_int("SWEEP_INTERVAL_SECONDS", 60),
        global_request_limit=_env_int("GLOBAL_REQUEST_LIMIT", 1000),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
    )
