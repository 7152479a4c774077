# bitacora/app/core/config.py
"""
Application configuration using pydantic-settings.

Everything is read once at process start from environment variables
(or a local .env file). There is no hot reload.

Security considerations:
- SECRET_KEY must be set via env outside development
- CORS_ORIGINS parsed from comma-separated env var, never defaults to "*"
- Database URLs normalized for async drivers automatically
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Strictly typed application settings.

    Priority for loading:
    1. Environment variables (highest priority)
    2. .env file (via pydantic-settings)
    3. Default values (lowest priority, dev-safe only)
    """

    # ─────────────────────────────────────────────────────────────
    # Application metadata
    # ─────────────────────────────────────────────────────────────
    PROJECT_NAME: str = "Bitacora"
    PROJECT_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    # ─────────────────────────────────────────────────────────────
    # Environment mode
    # "development" exposes internal error messages in 500 responses
    # ─────────────────────────────────────────────────────────────
    ENVIRONMENT: str = "development"
    PORT: int = 3001

    # ─────────────────────────────────────────────────────────────
    # Security: JWT Configuration
    # Tokens live for 7 days unless overridden
    # ─────────────────────────────────────────────────────────────
    SECRET_KEY: str = "INSECURE_DEV_KEY_CHANGE_IN_PRODUCTION"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ─────────────────────────────────────────────────────────────
    # Database Configuration
    # Priority: DATABASE_URL env var → SQLite fallback for local dev
    # ─────────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./bitacora.db"
    DATABASE_ECHO: bool = False

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def normalize_database_url(cls, v: Optional[str]) -> str:
        """
        Normalize database URLs for async SQLAlchemy compatibility.

        Conversions:
        - postgres://     → postgresql+asyncpg://
        - postgresql://   → postgresql+asyncpg://
        - sqlite:///      → sqlite+aiosqlite:///
        """
        if v is None:
            return "sqlite+aiosqlite:///./bitacora.db"

        url = v.strip()

        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+asyncpg://", 1)

        if url.startswith("postgresql://") and "+asyncpg" not in url:
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)

        if url.startswith("sqlite:///") and "+aiosqlite" not in url:
            return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

        return url

    # ─────────────────────────────────────────────────────────────
    # CORS Configuration
    # FRONTEND_URL is always allowed in addition to CORS_ORIGINS
    # ─────────────────────────────────────────────────────────────
    CORS_ORIGINS: str = "http://localhost:5173,https://localhost:5173"
    FRONTEND_URL: Optional[str] = None

    @property
    def BACKEND_CORS_ORIGINS(self) -> List[str]:
        """
        Parse CORS_ORIGINS into a list of allowed origins.

        Empty entries are dropped and an empty string yields an empty
        list, NOT a wildcard.
        """
        origins = [
            origin.strip()
            for origin in (self.CORS_ORIGINS or "").split(",")
            if origin.strip()
        ]
        if self.FRONTEND_URL and self.FRONTEND_URL.strip() not in origins:
            origins.append(self.FRONTEND_URL.strip())
        return origins

    # ─────────────────────────────────────────────────────────────
    # Upload limits (bytes)
    # ─────────────────────────────────────────────────────────────
    MAX_IMAGE_SIZE: int = 5 * 1024 * 1024
    MAX_DOCUMENT_SIZE: int = 10 * 1024 * 1024

    # ─────────────────────────────────────────────────────────────
    # Rate limiting (slowapi / limits syntax), per client IP on every route
    # ─────────────────────────────────────────────────────────────
    RATE_LIMIT: str = "100/15minutes"
    RATE_LIMIT_ENABLED: bool = True

    # ─────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_sqlite(self) -> bool:
        return "sqlite" in self.DATABASE_URL.lower()


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings instance.

    Using lru_cache ensures settings are only loaded once per process.
    """
    return Settings()
