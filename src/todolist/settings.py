from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "./data/todolist.db"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables (and a .env file).

    Env vars:
    - DATABASE_URL: storage locator, a SQLAlchemy URL or a sqlite file path. Default './data/todolist.db'
    - DB_POOL_SIZE: maximum number of pooled connections (default: 5)
    - DB_POOL_TIMEOUT: seconds to wait for a free connection before failing (default: 5)
    - HTTP_HOST: bind host for the HTTP server (default: 127.0.0.1)
    - HTTP_PORT: bind port for the HTTP server (default: 8000)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level (default: INFO)
    """

    database_url: str
    pool_size: int
    pool_timeout: float
    http_host: str
    http_port: int
    cors_allow_origins: List[str]
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int, minimum: int = 0) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


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


# PUBLIC_INTERFACE
def get_settings(database_url: str | None = None) -> Settings:
    """
    Return application settings loaded from environment variables.

    ``database_url`` is used only when DATABASE_URL is not set, so the locator
    can also be given on the command line.
    """
    load_dotenv()

    locator = os.getenv("DATABASE_URL", "").strip() or (database_url or "").strip() or DEFAULT_DATABASE_URL

    level = _get_env("LOG_LEVEL", "INFO").strip().upper()

    return Settings(
        database_url=locator,
        pool_size=_parse_int(_get_env("DB_POOL_SIZE", "5"), 5, minimum=1),
        pool_timeout=_parse_float(_get_env("DB_POOL_TIMEOUT", "5"), 5.0),
        http_host=_get_env("HTTP_HOST", "127.0.0.1").strip(),
        http_port=_parse_int(_get_env("HTTP_PORT", "8000"), 8000),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=level,
    )
