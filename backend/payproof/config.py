"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache), single instance per process

Design Decisions:
    - Defaults select the embedded variant (SQLite + local uploads directory),
      so the service starts without any external infrastructure
    - Backend selection is plain config (record_store_backend, object_store_backend);
      wiring.build_services() maps it to implementations
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///./payproof.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 10
    database_max_overflow: int = 5
    db_connect_max_attempts: int = 5
    db_connect_retry_delay_seconds: float = 5.0

    # Backends
    record_store_backend: Literal["sql", "memory"] = "sql"
    object_store_backend: Literal["s3", "local"] = "local"

    # S3-compatible object storage
    s3_bucket: str = ""
    s3_region: str = ""
    s3_endpoint: str = ""
    s3_key_id: str = ""
    s3_key_secret: str = ""
    s3_public_base_url: str = ""

    # Local object storage (served at /uploads)
    local_upload_dir: str = "./uploads"
    local_public_base_url: str = "http://localhost:3000/uploads"

    # Intake
    max_upload_bytes: int = 5 * 1024 * 1024
    allowed_content_types: list[str] = [
        "image/jpeg", "image/png", "image/gif", "image/webp",
    ]

    # Notification (Resend)
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    notify_from: str = "Khairi Payment <onboarding@resend.dev>"
    admin_email: str = ""
    notify_locale: Literal["id", "en"] = "id"
    notify_timezone: str = "Asia/Jakarta"
    notify_timeout_seconds: float = 10.0

    # API
    cors_origins: list[str] = [
        "https://khairi-payment-v2.vercel.app",
        "http://localhost:4321",
        "http://localhost:3000",
    ]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
