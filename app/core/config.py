# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key, used for phone OTP)
      - DATABASE_URL (Supabase Postgres connection string)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - phone sign-in and ordering knobs (timeouts, orphan-order compensation)
    """

    PROJECT_NAME: str = "Cafe Ordering API"
    API_V1_STR: str = "/api/v1"

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Phone sign-in
    DEFAULT_COUNTRY_CODE: str = "+1"
    OTP_LENGTH: int = 6

    # Ordering
    CURRENCY: str = "USD"
    ORDER_PHASE_TIMEOUT_SECONDS: float = 10.0
    # Delete the order row again when its line items could not be written
    COMPENSATE_ORPHAN_ORDERS: bool = False

    # Client sessions (cart + sign-in state live per session)
    SESSION_COOKIE_NAME: str = "cafe_session"
    SESSION_IDLE_TIMEOUT_SECONDS: float = 4 * 3600
    SESSION_MAX_COUNT: int = 10_000

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
