"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for bulk inspection ingestion and retrieval.
    """

    chunk_size: int = 1000
    max_submission_size: int = 10000
    list_limit: int = 1000
    max_reported_violations: int = 500


@dataclass(frozen=True)
class AuthSettings:
    """
    Supabase access-token verification settings.
    """

    jwt_secret: str | None = None
    supabase_url: str | None = None
    audience: str = "authenticated"


@dataclass(frozen=True)
class RateLimitSettings:
    """
    Per-caller request budgets. Bulk ingest is throttled harder than reads.
    """

    bulk_calls: int = 3
    default_calls: int = 10
    window_seconds: int = 60


@dataclass(frozen=True)
class CORSSettings:
    """
    Browser origin allowed to call the API.
    """

    frontend_url: str | None = None
    max_age_seconds: int = 3600


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    return IngestionSettings(
        chunk_size=max(1, _get_int_env("INSPECTION_CHUNK_SIZE", 1000)),
        max_submission_size=max(1, _get_int_env("INSPECTION_MAX_SUBMISSION_SIZE", 10000)),
        list_limit=max(1, _get_int_env("INSPECTION_LIST_LIMIT", 1000)),
        max_reported_violations=max(1, _get_int_env("INSPECTION_MAX_REPORTED_VIOLATIONS", 500)),
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """
    Return cached token verification settings.
    """

    return AuthSettings(
        jwt_secret=_get_optional_str_env("SUPABASE_JWT_SECRET"),
        supabase_url=_get_optional_str_env("SUPABASE_URL"),
        audience=_get_str_env("SUPABASE_JWT_AUDIENCE", "authenticated"),
    )


@lru_cache(maxsize=1)
def get_rate_limit_settings() -> RateLimitSettings:
    """
    Return cached rate limit settings.
    """

    return RateLimitSettings(
        bulk_calls=max(1, _get_int_env("RATE_LIMIT_BULK_CALLS", 3)),
        default_calls=max(1, _get_int_env("RATE_LIMIT_DEFAULT_CALLS", 10)),
        window_seconds=max(1, _get_int_env("RATE_LIMIT_WINDOW_SECONDS", 60)),
    )


@lru_cache(maxsize=1)
def get_cors_settings() -> CORSSettings:
    """
    Return cached CORS settings.
    """

    return CORSSettings(frontend_url=_get_optional_str_env("FRONTEND_URL"))
