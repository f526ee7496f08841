import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str]
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    supabase_service_role_key: Optional[str]
    auth_required: bool
    auth_cache_seconds: int
    razorpay_key_id: Optional[str]
    razorpay_key_secret: Optional[str]
    app_base_url: str
    frontend_base_url: Optional[str]
    yahoo_timeout_seconds: float
    log_level: str
    app_version: str
    run_migrations_on_startup: bool
    celery_broker_url: str
    celery_result_backend: str
    celery_timezone: str

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url)

    @property
    def auth_provider_configured(self) -> bool:
        return bool(self.supabase_url and (self.supabase_anon_key or self.supabase_service_role_key))

    @property
    def billing_configured(self) -> bool:
        return bool(self.razorpay_key_id and self.razorpay_key_secret)


def get_settings() -> Settings:
    """Read the current environment. Cheap enough to call per request."""
    return Settings(
        database_url=os.getenv("DATABASE_URL") or None,
        supabase_url=(os.getenv("SUPABASE_URL") or "").rstrip("/") or None,
        supabase_anon_key=os.getenv("SUPABASE_ANON_KEY") or None,
        supabase_service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY") or None,
        auth_required=_env_flag("AUTH_REQUIRED"),
        auth_cache_seconds=int(os.getenv("AUTH_CACHE_SECONDS", "0")),
        razorpay_key_id=os.getenv("RAZORPAY_KEY_ID") or None,
        razorpay_key_secret=os.getenv("RAZORPAY_KEY_SECRET") or None,
        app_base_url=os.getenv("APP_BASE_URL", "http://localhost:3000").rstrip("/"),
        frontend_base_url=os.getenv("FRONTEND_BASE_URL") or None,
        yahoo_timeout_seconds=float(os.getenv("YAHOO_TIMEOUT_SECONDS", "10")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        run_migrations_on_startup=_env_flag("RUN_MIGRATIONS_ON_STARTUP"),
        celery_broker_url=os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0"),
        celery_result_backend=os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
        celery_timezone=os.getenv("CELERY_TIMEZONE", "UTC"),
    )
