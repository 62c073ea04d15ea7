"""Tests for JWT verification and the auth dependencies."""

import pytest
from datetime import timedelta

from common.auth import JWTAuth, create_auth_dependency, create_optional_auth_dependency
from common.utils.exceptions import UnauthorizedException


SECRET = "test-secret"


@pytest.fixture
def auth():
    return JWTAuth(secret=SECRET, audience="authenticated")


@pytest.fixture
def require_user(auth):
    return create_auth_dependency(lambda: auth)


@pytest.fixture
def optional_user(auth):
    return create_optional_auth_dependency(lambda: auth)


class TestJWTAuth:
    @pytest.mark.asyncio
    async def test_round_trips_claims(self, auth, sample_user_id):
        token = auth.create_token(sample_user_id, email="ada@example.com")

        claims = await auth.verify_token(token)

        assert claims["sub"] == sample_user_id
        assert claims["aud"] == "authenticated"

    @pytest.mark.asyncio
    async def test_rejects_expired_token(self, auth, sample_user_id):
        token = auth.create_token(sample_user_id, expires_in=timedelta(seconds=-10))

        with pytest.raises(ValueError):
            await auth.verify_token(token)

    @pytest.mark.asyncio
    async def test_rejects_wrong_audience(self, auth, sample_user_id):
        token = auth.create_token(sample_user_id, aud="anon")

        with pytest.raises(ValueError):
            await auth.verify_token(token)

    @pytest.mark.asyncio
    async def test_rejects_other_secret(self, sample_user_id):
        token = JWTAuth(secret="other", audience="authenticated").create_token(sample_user_id)

        with pytest.raises(ValueError):
            await JWTAuth(secret=SECRET, audience="authenticated").verify_token(token)


class TestRequireAuth:
    @pytest.mark.asyncio
    async def test_returns_user_context(self, auth, require_user, sample_user_id):
        token = auth.create_token(sample_user_id, email="ada@example.com", role="authenticated")

        user = await require_user(authorization=f"Bearer {token}")

        assert user == {"id": sample_user_id, "email": "ada@example.com", "role": "authenticated"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header,code", [
        (None, "AUTH_REQUIRED"),
        ("Basic abc", "INVALID_AUTH_SCHEME"),
        ("Bearer    ", "EMPTY_TOKEN"),
        ("Bearer not-a-jwt", "INVALID_TOKEN"),
    ])
    async def test_rejects_bad_headers(self, require_user, header, code):
        with pytest.raises(UnauthorizedException) as exc_info:
            await require_user(authorization=header)

        assert exc_info.value.code == code
        assert exc_info.value.status_code == 401


class TestOptionalAuth:
    @pytest.mark.asyncio
    async def test_anonymous_is_none(self, optional_user):
        assert await optional_user(authorization=None) is None
        assert await optional_user(authorization="Bearer garbage") is None

    @pytest.mark.asyncio
    async def test_valid_token_returns_user(self, auth, optional_user, sample_user_id):
        user = await optional_user(authorization=f"Bearer {auth.create_token(sample_user_id)}")

        assert user["id"] == sample_user_id
