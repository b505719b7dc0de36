# artmarket/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string; SQLite works for local runs)
      - AUTH_JWT_SECRET (signing secret of the identity provider)
      - SUPABASE_URL (project URL for Storage)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (needed for image uploads)
      - AUTH_JWT_AUDIENCE (audience is verified only when set)
    """

    PROJECT_NAME: str = "Art Market API"
    API_V1_STR: str = "/api"

    DATABASE_URL: str

    # Bearer token verification
    AUTH_JWT_SECRET: str
    AUTH_JWT_ALG: str = "HS256"
    AUTH_JWT_AUDIENCE: str | None = None

    # Media storage
    SUPABASE_URL: str
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "assets"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
