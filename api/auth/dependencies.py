"""
Auth dependencies for protected FastAPI routes.

Only a static API key is checked here; identity tokens are verified upstream.
"""

from __future__ import annotations

import logging
import secrets

from fastapi import Header

from core import errors, settings

logger = logging.getLogger(__name__)


def _check_api_key(provided: str | None, expected: str) -> None:
    if not expected:
        # Development mode: no key configured.
        return None

    provided = (provided or "").strip()
    if not provided or not secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise errors.UnauthorizedError("Invalid API key")
    return None


async def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
    _check_api_key(x_api_key, settings.api_key())


def log_api_key_mode() -> None:
    if settings.api_key():
        logger.info("api_key_check enabled=true")
    else:
        logger.warning("api_key_check enabled=false reason=CRM_API_KEY not set")
