"""Configuration settings for the gigboard backend."""

from functools import lru_cache

from pydantic_settings import BaseSettings

from gigboard.config import GigboardConfig


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Supabase
    supabase_url: str
    supabase_secret_key: str | None = None  # Backend/admin access
    supabase_publishable_key: str | None = None  # Client/public access

    # JWT issued by Supabase Auth
    supabase_jwt_secret: str  # Required - no default for security
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # App
    debug: bool = False
    log_level: str = "INFO"
    # CORS: Allowed origins for cross-origin requests
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars not in model


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_gigboard_config() -> GigboardConfig:
    """Service-layer tunables from ``GIGBOARD_*`` variables."""
    return GigboardConfig.from_env()
