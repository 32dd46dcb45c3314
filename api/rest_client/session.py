"""
Caller session used to attach a bearer token to outgoing requests.

Tokens are only decoded here (to read `exp` and `sub`); signature
verification is the server's job.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Protocol

import jwt

logger = logging.getLogger(__name__)

# Used when the token carries no `exp` claim.
DEFAULT_SESSION_TTL_S = 3600


def now_epoch_s() -> int:
    return int(time.time())


@dataclass(frozen=True)
class Session:
    access_token: str
    expires_at: int
    user_id: str | None = None

    @classmethod
    def from_token(cls, access_token: str) -> Session:
        token = (access_token or "").strip()
        if not token:
            raise ValueError("Access token is empty.")

        try:
            claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
        except jwt.InvalidTokenError as exc:
            raise ValueError("Access token is not a JWT.") from exc

        exp = claims.get("exp")
        expires_at = int(exp) if isinstance(exp, (int, float)) else now_epoch_s() + DEFAULT_SESSION_TTL_S
        subject = claims.get("sub")
        return cls(access_token=token, expires_at=expires_at, user_id=str(subject) if subject else None)

    def is_expired(self, now: int | None = None) -> bool:
        return (now if now is not None else now_epoch_s()) >= self.expires_at


class SessionProvider(Protocol):
    async def get_session(self) -> Session | None: ...


class StaticSessionProvider:
    """
    Holds one session; hands it out until it expires.
    """

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @classmethod
    def from_token(cls, access_token: str) -> StaticSessionProvider:
        return cls(Session.from_token(access_token))

    def set_session(self, session: Session | None) -> None:
        self._session = session

    async def get_session(self) -> Session | None:
        session = self._session
        if session is None:
            return None
        if session.is_expired():
            logger.info("session_expired user_id=%s", session.user_id)
            return None
        return session
