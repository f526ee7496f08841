import logging
import threading
import time
from typing import Callable, Optional

import httpx
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from src.api.errors import AuthError, ConfigurationError, UpstreamError, ValidationError
from src.config import Settings, get_settings

logger = logging.getLogger("stockwatch.api.auth")

# auto_error=False: a missing header is allowed unless AUTH_REQUIRED is set
bearer_scheme = HTTPBearer(auto_error=False)


class TokenCache:
    """
    Short-lived token -> user id cache. Entries never outlive the token's own exp claim.

    Expired entries are pruned on every put, and the cache holds at most `max_entries`
    tokens; when full, the entry closest to expiry is dropped. `clock` defaults to
    time.time; pass a fake to drive it without sleeping.
    """

    def __init__(
        self,
        ttl_seconds: int,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl = ttl_seconds
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._soonest = float("inf")
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, token: str) -> Optional[str]:
        if self.ttl <= 0:
            return None
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[token]
                return None
            return user_id

    def put(self, token: str, user_id: str) -> None:
        if self.ttl <= 0:
            return
        now = self._clock()
        expires_at = now + self.ttl
        token_exp = token_expiry(token)
        if token_exp is not None:
            expires_at = min(expires_at, token_exp)
        with self._lock:
            self._prune(now)
            if expires_at <= now:
                return
            if token not in self._entries and len(self._entries) >= self.max_entries:
                soonest = min(self._entries, key=lambda key: self._entries[key][1])
                del self._entries[soonest]
            self._entries[token] = (user_id, expires_at)
            self._soonest = min(self._soonest, expires_at)

    def evict(self, token: str) -> None:
        with self._lock:
            self._entries.pop(token, None)

    def _prune(self, now: float) -> None:
        """Drop expired entries. Caller holds the lock."""
        if now < self._soonest:
            return
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._soonest = min((expires_at for _, expires_at in self._entries.values()), default=float("inf"))


def token_expiry(token: str) -> Optional[float]:
    """The exp claim of a JWT, read without verifying it. The identity provider does the verifying."""
    try:
        exp = jwt.get_unverified_claims(token).get("exp")
    except JWTError:
        return None
    return float(exp) if isinstance(exp, (int, float)) else None


class SupabaseTokenValidator:
    """Validates bearer tokens by asking Supabase Auth who the token belongs to."""

    def __init__(self, settings: Settings, http: httpx.Client, cache: Optional[TokenCache] = None) -> None:
        if not settings.auth_provider_configured:
            raise ConfigurationError("Authentication provider is not configured")
        self._url = f"{settings.supabase_url}/auth/v1/user"
        self._api_key = settings.supabase_anon_key or settings.supabase_service_role_key
        self._http = http
        self._cache = cache

    def validate(self, token: str) -> str:
        if self._cache is not None:
            cached = self._cache.get(token)
            if cached is not None:
                return cached

        try:
            response = self._http.get(
                self._url,
                headers={"apikey": self._api_key, "Authorization": f"Bearer {token}"},
            )
        except httpx.RequestError as e:
            logger.warning("Auth provider request failed: %s", e)
            raise UpstreamError("Authentication provider is unreachable", status_code=503)

        if response.status_code in (401, 403):
            if self._cache is not None:
                self._cache.evict(token)
            raise AuthError("Invalid or expired token")
        if response.status_code != 200:
            raise UpstreamError(
                f"Authentication provider returned HTTP {response.status_code}",
                upstream_status=response.status_code,
            )

        user_id = (response.json() or {}).get("id")
        if not user_id:
            raise AuthError("Could not validate credentials")
        if self._cache is not None:
            self._cache.put(token, user_id)
        return user_id


_token_cache: Optional[TokenCache] = None


def _shared_cache(ttl_seconds: int) -> Optional[TokenCache]:
    global _token_cache
    if ttl_seconds <= 0:
        return None
    if _token_cache is None or _token_cache.ttl != ttl_seconds:
        _token_cache = TokenCache(ttl_seconds)
    return _token_cache


def get_authenticated_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """User id behind the bearer token, or None when no token was sent and auth is optional."""
    settings = get_settings()
    if credentials is None or not credentials.credentials:
        if settings.auth_required:
            raise AuthError("Authentication required")
        return None

    with httpx.Client(timeout=10) as http:
        validator = SupabaseTokenValidator(settings, http, _shared_cache(settings.auth_cache_seconds))
        return validator.validate(credentials.credentials)


def scope_user(authenticated_user_id: Optional[str], claimed_user_id: Optional[str]) -> str:
    """
    The user id a request acts for.

    With a token, the token's user wins and a conflicting userId is rejected.
    Without one, the supplied userId is trusted.
    """
    claimed = (claimed_user_id or "").strip() or None
    if authenticated_user_id is None:
        if claimed is None:
            raise ValidationError("User ID is required")
        return claimed
    if claimed is not None and claimed != authenticated_user_id:
        raise AuthError("Token does not match userId")
    return authenticated_user_id
