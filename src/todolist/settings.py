from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class StoreKind(str, Enum):
    """Storage backends selectable at startup."""

    MEMORY = "memory"
    REDIS = "redis"
    SQLITE = "sqlite"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default), 'redis' or 'sqlite'
    - REDIS_HOST / REDIS_PORT / REDIS_DB: Redis endpoint. Default 127.0.0.1:6379, db 0
    - REDIS_PASSWORD: optional Redis password
    - REDIS_TODO_KEY: name of the Redis hash holding the todos. Default 'todos'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - HTTP_HOST / HTTP_PORT: listening address. Default 0.0.0.0:8082
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - SEED_SAMPLE_TODO: 'true' to insert a sample todo into an empty store at startup
    - LOG_LEVEL: root log level name. Default 'INFO'
    """

    persistence_backend: StoreKind = StoreKind.MEMORY
    redis_host: str = "127.0.0.1"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None
    redis_todo_key: str = "todos"
    sqlite_db_path: str = "./data/todos.db"
    http_host: str = "0.0.0.0"
    http_port: int = 8082
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    seed_sample_todo: bool = False
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(name: str, default: int) -> int:
    raw = _get_env(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_backend(value: str) -> StoreKind:
    try:
        return StoreKind(value.strip().lower())
    except ValueError:
        logger.warning("Unsupported PERSISTENCE_BACKEND %r, falling back to memory", value)
        return StoreKind.MEMORY


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    return Settings(
        persistence_backend=_parse_backend(_get_env("PERSISTENCE_BACKEND", "memory")),
        redis_host=_get_env("REDIS_HOST", "127.0.0.1").strip(),
        redis_port=_parse_int("REDIS_PORT", 6379),
        redis_db=_parse_int("REDIS_DB", 0),
        redis_password=os.getenv("REDIS_PASSWORD") or None,
        redis_todo_key=_get_env("REDIS_TODO_KEY", "todos").strip(),
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/todos.db").strip(),
        http_host=_get_env("HTTP_HOST", "0.0.0.0").strip(),
        http_port=_parse_int("HTTP_PORT", 8082),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        seed_sample_todo=_parse_bool(_get_env("SEED_SAMPLE_TODO", "false"), False),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
