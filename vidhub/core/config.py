"""
VidHub Core Settings.

Every value can be overridden from the environment (``VIDHUB_`` prefix) or a
local ``.env`` file.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8",
        env_prefix="VIDHUB_", case_sensitive=False,
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_name: str = "VidHub"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api/v1"
    cors_origins: List[str] = ["*"]

    # ── PostgreSQL ───────────────────────────────────────────────────────
    db_host: str = "postgres"
    db_port: int = 5432
    db_user: str = "vidhub"
    db_password: str = "vidhub_secret"
    db_name: str = "vidhub"
    db_url: Optional[str] = None  # full URL override, e.g. sqlite+aiosqlite:///...
    db_echo: bool = False

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # ── Auth collaborator ────────────────────────────────────────────────
    actor_header: str = "X-User-Id"

    # ── Pagination / toggles ─────────────────────────────────────────────
    default_page_size: int = 10
    max_page_size: int = 100
    toggle_max_attempts: int = 3

    # ── MinIO / S3 ───────────────────────────────────────────────────────
    minio_endpoint: str = "minio:9000"
    minio_access_key: str = "vidhub_minio"
    minio_secret_key: str = "vidhub_minio_secret"
    minio_bucket: str = "vidhub-media"
    minio_secure: bool = False
    media_public_base_url: Optional[str] = None

    # ── Redis / Celery ───────────────────────────────────────────────────
    celery_broker_url: str = "redis://redis:6379/1"
    celery_result_backend: str = "redis://redis:6379/2"
    relation_sweep_interval_seconds: int = 3600

    # ── Paths ────────────────────────────────────────────────────────────
    temp_dir: str = "/tmp/vidhub"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
