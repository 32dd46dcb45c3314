"""
Environment-backed settings for the API process.

Values are read on every call so tests (and a reloaded process) can change
them through the environment without a restart.
"""

from __future__ import annotations

import os

DEFAULT_PORT = 8080


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def database_url_raw() -> str:
    return os.environ.get("DATABASE_URL", "").strip()


def database_ssl_enabled() -> bool:
    # Only an explicit "false" turns TLS off.
    return os.environ.get("DATABASE_SSL", "").strip().lower() != "false"


def api_key() -> str:
    return os.environ.get("CRM_API_KEY", "").strip()


def host() -> str:
    return os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0"


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def pool_min_size() -> int:
    return max(0, _env_int("DB_POOL_MIN_SIZE", 1))


def pool_max_size() -> int:
    return max(1, _env_int("DB_POOL_MAX_SIZE", 10))


def connect_timeout_s() -> float:
    return _env_float("DB_CONNECT_TIMEOUT", 5.0)


def command_timeout_s() -> float:
    return _env_float("DB_COMMAND_TIMEOUT", 30.0)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
