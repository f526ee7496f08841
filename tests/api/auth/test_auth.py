from __future__ import annotations

import time

import httpx
import pytest
from jose import jwt

from src.api.auth.auth import SupabaseTokenValidator, TokenCache, scope_user, token_expiry
from src.api.errors import AuthError, ConfigurationError, UpstreamError, ValidationError
from src.config import get_settings


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.test/")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
    return get_settings()


def _token(exp: float) -> str:
    return jwt.encode({"sub": "u1", "exp": int(exp)}, "test-secret", algorithm="HS256")


def _validator(settings, handler, cache=None) -> SupabaseTokenValidator:
    return SupabaseTokenValidator(settings, httpx.Client(transport=httpx.MockTransport(handler)), cache)


def test_scope_user_without_token_trusts_claimed_id() -> None:
    assert scope_user(None, " u1 ") == "u1"


def test_scope_user_without_token_or_claim_is_rejected() -> None:
    with pytest.raises(ValidationError, match="User ID is required"):
        scope_user(None, None)


def test_scope_user_prefers_token_and_rejects_mismatch() -> None:
    assert scope_user("u1", None) == "u1"
    assert scope_user("u1", "u1") == "u1"
    with pytest.raises(AuthError):
        scope_user("u1", "u2")


def test_validator_asks_supabase_for_the_user(settings) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["apikey"] = request.headers["apikey"]
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"id": "user-123", "email": "a@b.test"})

    user_id = _validator(settings, handler).validate("tok")

    assert user_id == "user-123"
    assert seen == {
        "url": "https://project.supabase.test/auth/v1/user",
        "apikey": "anon-key",
        "auth": "Bearer tok",
    }


@pytest.mark.parametrize("status", [401, 403])
def test_validator_rejects_invalid_token(settings, status: int) -> None:
    with pytest.raises(AuthError):
        _validator(settings, lambda request: httpx.Response(status)).validate("tok")


def test_validator_provider_error_is_upstream(settings) -> None:
    with pytest.raises(UpstreamError) as excinfo:
        _validator(settings, lambda request: httpx.Response(500)).validate("tok")

    assert excinfo.value.upstream_status == 500


def test_validator_requires_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)

    with pytest.raises(ConfigurationError):
        SupabaseTokenValidator(get_settings(), httpx.Client())


def test_validator_uses_cache_until_token_expires(settings) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"id": "u1"})

    validator = _validator(settings, handler, TokenCache(ttl_seconds=60))
    token = _token(time.time() + 3600)

    assert validator.validate(token) == "u1"
    assert validator.validate(token) == "u1"
    assert len(calls) == 1


def test_cache_never_outlives_token_exp() -> None:
    cache = TokenCache(ttl_seconds=600)
    expired = _token(time.time() - 10)

    cache.put(expired, "u1")

    assert cache.get(expired) is None


def test_cache_drops_expired_entries_on_put() -> None:
    now = [1000.0]
    cache = TokenCache(ttl_seconds=1, clock=lambda: now[0])
    for i in range(5000):
        cache.put(f"opaque-{i}", "u1")
    assert len(cache) == 5000

    now[0] += 1.1
    cache.put("fresh", "u2")

    assert len(cache) == 1
    assert cache.get("fresh") == "u2"
    assert cache.get("opaque-0") is None


def test_cache_is_capped_and_drops_soonest_expiry() -> None:
    now = [1000.0]
    cache = TokenCache(ttl_seconds=60, max_entries=2, clock=lambda: now[0])
    cache.put("first", "u1")
    now[0] += 1
    cache.put("second", "u2")
    now[0] += 1
    cache.put("third", "u3")

    assert len(cache) == 2
    assert cache.get("first") is None
    assert cache.get("second") == "u2"
    assert cache.get("third") == "u3"


def test_cache_disabled_with_zero_ttl() -> None:
    cache = TokenCache(ttl_seconds=0)
    token = _token(time.time() + 3600)

    cache.put(token, "u1")

    assert cache.get(token) is None


def test_token_expiry_of_opaque_token() -> None:
    assert token_expiry("not-a-jwt") is None
    assert token_expiry(_token(2_000_000_000)) == 2_000_000_000.0
