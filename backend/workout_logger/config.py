"""Application configuration."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Workout Logger"
    debug: bool = False
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = ["*"]

    # Database (SQLite for local dev, hosted Postgres for production)
    database_url: str = "sqlite+aiosqlite:///./workouts.db"
    database_url_sync: str = "sqlite:///./workouts.db"

    # Hand the caller's identity to the store's row-level policies (Postgres only)
    apply_rls_claims: bool = False
    rls_role: str = "authenticated"

    # Identity provider: "supabase" (remote check) or "jwt" (local verification)
    identity_provider: str = "supabase"
    identity_timeout_seconds: float = 10.0
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # JWT verification
    jwt_secret: str = "your-jwt-secret-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    # Terminal client
    api_url: str = "http://localhost:5000"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
