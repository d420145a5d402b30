from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import jwt
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from govassist.ai_main import lifespan as ai_lifespan
from govassist.core.cache import ResponseCache
from govassist.core.config import AuthSettings, settings
from govassist.core.dependencies import get_chat_service
from govassist.core.exceptions import CacheError, ConfigurationError
from govassist.core.jwt import JWTVerifier, jwt_verifier
from govassist.main import app, lifespan
from govassist.schemas.procedure import Pagination
from govassist.utils.responses import create_api_response


class TestJWTVerifier:

    @pytest.mark.asyncio
    async def test_verifies_token(self, token_factory, user_id):
        verifier = JWTVerifier(settings.auth.jwt_secret)
        claims = await verifier.verify_token(token_factory(role="ADMIN"))

        assert claims.sub == str(user_id)
        assert claims.role == "ADMIN"

    @pytest.mark.asyncio
    async def test_wrong_secret(self, token_factory):
        with pytest.raises(jwt.InvalidTokenError):
            await JWTVerifier("another-secret-that-is-long-enough").verify_token(token_factory())

    @pytest.mark.asyncio
    async def test_issuer_is_checked_when_configured(self, token_factory):
        with pytest.raises(jwt.InvalidTokenError):
            await JWTVerifier(settings.auth.jwt_secret, issuer="govassist-auth").verify_token(token_factory())

    def test_secret_has_no_default(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)
        assert AuthSettings(_env_file=None).jwt_secret == ""

    @pytest.mark.parametrize("secret", ["", "   ", "change-me", "CHANGE-ME"])
    @pytest.mark.asyncio
    async def test_placeholder_secret_refuses_tokens(self, secret, user_id):
        forged = jwt.encode(
            {"sub": str(user_id), "role": "ADMIN", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "change-me",
            algorithm="HS256",
        )

        with pytest.raises(ConfigurationError):
            await JWTVerifier(secret).verify_token(forged)

    @pytest.mark.asyncio
    async def test_services_refuse_to_start_without_secret(self, monkeypatch):
        monkeypatch.setattr(jwt_verifier, "secret", "")

        with pytest.raises(ConfigurationError):
            async with lifespan(app):
                pass
        with pytest.raises(ConfigurationError):
            async with ai_lifespan(app):
                pass

    def test_protected_route_unavailable_without_secret(self, monkeypatch, test_client, auth_headers):
        app.dependency_overrides[get_chat_service] = lambda: AsyncMock()
        monkeypatch.setattr(jwt_verifier, "secret", "")

        response = test_client.get("/api/v1/chat/sessions", headers=auth_headers)

        assert response.status_code == 503


class TestResponseCache:

    @pytest.mark.asyncio
    async def test_delete_pattern(self):
        client = AsyncMock()
        client.keys.return_value = ["ai:1", "ai:2"]
        client.delete.return_value = 2

        assert await ResponseCache(client).delete_pattern("ai:*") == 2
        client.delete.assert_awaited_once_with("ai:1", "ai:2")

    @pytest.mark.asyncio
    async def test_delete_pattern_without_matches(self):
        client = AsyncMock()
        client.keys.return_value = []

        assert await ResponseCache(client).delete_pattern("ai:*") == 0
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_redis_errors_become_cache_errors(self):
        client = AsyncMock()
        client.get.side_effect = RedisConnectionError("refused")

        with pytest.raises(CacheError):
            await ResponseCache(client).get("ai:1")

    @pytest.mark.asyncio
    async def test_ping_failure_is_false(self):
        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("refused")
        assert await ResponseCache(client).ping() is False


class TestApiResponse:

    def test_envelope_reuses_correlation_id(self):
        request = SimpleNamespace(state=SimpleNamespace(correlation_id="abc-123"))

        body = create_api_response(data=[1, 2], message="ok", request=request)

        assert body["status"] is True
        assert body["data"] == {"items": [1, 2]}
        assert body["meta"]["request_id"] == "abc-123"
        assert body["meta"]["api_version"] == "v1"

    def test_pagination(self):
        assert Pagination.build(limit=10, offset=20, total=45).model_dump() == {
            "page": 3,
            "limit": 10,
            "total": 45,
            "total_pages": 5,
        }
