"""Session decoding and the static provider."""

from __future__ import annotations

import jwt
import pytest

from rest_client import Session, StaticSessionProvider
from rest_client.session import DEFAULT_SESSION_TTL_S, now_epoch_s


def _token(**claims: object) -> str:
    return jwt.encode(claims, "test-secret", algorithm="HS256")


class TestSession:
    def test_reads_exp_and_sub(self) -> None:
        session = Session.from_token(_token(sub="user-1", exp=2_000_000_000))
        assert session.user_id == "user-1"
        assert session.expires_at == 2_000_000_000

    def test_missing_exp_defaults_to_an_hour(self) -> None:
        before = now_epoch_s()
        session = Session.from_token(_token(sub="user-1"))
        assert before + DEFAULT_SESSION_TTL_S <= session.expires_at <= now_epoch_s() + DEFAULT_SESSION_TTL_S

    def test_expired_token_still_decodes(self) -> None:
        session = Session.from_token(_token(exp=1))
        assert session.is_expired()

    @pytest.mark.parametrize("token", ["", "   ", "not-a-jwt"])
    def test_rejects_garbage(self, token: str) -> None:
        with pytest.raises(ValueError):
            Session.from_token(token)

    def test_is_expired_boundary(self) -> None:
        session = Session(access_token="t", expires_at=100)
        assert not session.is_expired(now=99)
        assert session.is_expired(now=100)


class TestStaticSessionProvider:
    async def test_hands_out_live_session(self) -> None:
        provider = StaticSessionProvider.from_token(_token(sub="u", exp=now_epoch_s() + 60))
        session = await provider.get_session()
        assert session is not None and session.user_id == "u"

    async def test_expired_session_is_withheld(self) -> None:
        provider = StaticSessionProvider(Session(access_token="t", expires_at=1))
        assert await provider.get_session() is None

    async def test_set_session(self) -> None:
        provider = StaticSessionProvider()
        assert await provider.get_session() is None
        provider.set_session(Session(access_token="t", expires_at=now_epoch_s() + 60))
        assert (await provider.get_session()).access_token == "t"
