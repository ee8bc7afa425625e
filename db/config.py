"""
db/config.py

Environment-driven settings for the inspection store's PostgreSQL client.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILENAMES: tuple[str, ...] = (".env", ".env.local")
CLOUD_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})
_PSYCOPG_SCHEME = "postgresql+psycopg://"


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip().strip('"').strip("'")


def load_env_files(root: Path = PROJECT_ROOT) -> None:
    """
    Copy KEY=VALUE pairs from ``.env`` then ``.env.local`` under ``root`` into
    ``os.environ``. Variables already set in the process win.
    """

    for filename in ENV_FILENAMES:
        env_path = root / filename
        if not env_path.is_file():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            parsed = _parse_env_line(raw_line)
            if parsed is not None:
                os.environ.setdefault(*parsed)


def to_psycopg_url(url: str) -> str:
    """Rewrite ``postgres://`` and ``postgresql://`` URLs to the psycopg 3 driver."""
    for scheme in ("postgres://", "postgresql://"):
        if url.startswith(scheme):
            return _PSYCOPG_SCHEME + url[len(scheme):]
    return url


def _database_url_variables() -> tuple[str, ...]:
    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    if environment in CLOUD_ENVIRONMENTS:
        return ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")
    return ("DATABASE_URL", "LOCAL_DATABASE_URL")


def resolve_database_url() -> str:
    """
    Return the inspection store URL.

    ``DATABASE_URL`` always wins. ``CLOUD_DATABASE_URL`` is consulted only
    when ``ENVIRONMENT`` names a deployed tier; ``LOCAL_DATABASE_URL`` is the
    last resort.
    """

    load_env_files()
    for name in _database_url_variables():
        value = os.getenv(name, "").strip()
        if value:
            return to_psycopg_url(value)

    raise RuntimeError(
        "No database URL configured. Set DATABASE_URL, or configure "
        "LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )


def _get_bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Connection pool and per-call timeout settings for the storage client.

    Every statement is bounded by ``statement_timeout_ms`` so no storage
    call can block a request indefinitely.
    """

    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_recycle_seconds: int = 1800
    pool_timeout_seconds: int = 30
    connect_timeout_seconds: int = 10
    statement_timeout_ms: int = 15000


def load_database_settings() -> DatabaseSettings:
    """
    Build database settings from the environment. PostgreSQL only.
    """

    url = resolve_database_url()
    if not url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported.")

    return DatabaseSettings(
        url=url,
        echo=_get_bool_env("SQL_ECHO", default=False),
        pool_size=max(1, _get_int_env("DB_POOL_SIZE", 5)),
        max_overflow=max(0, _get_int_env("DB_MAX_OVERFLOW", 10)),
        pool_recycle_seconds=_get_int_env("DB_POOL_RECYCLE", 1800),
        pool_timeout_seconds=max(1, _get_int_env("DB_POOL_TIMEOUT_SECONDS", 30)),
        connect_timeout_seconds=max(1, _get_int_env("DB_CONNECT_TIMEOUT_SECONDS", 10)),
        statement_timeout_ms=max(100, _get_int_env("DB_STATEMENT_TIMEOUT_MS", 15000)),
    )
