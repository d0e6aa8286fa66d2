"""
Configuration and settings for the content backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Which content store backs the API: "memory", "object" or "sql".
    storage_backend: Literal["memory", "object", "sql"] = Field(default="memory")
    seed_demo_data: bool = Field(default=False)

    # Relational backend (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(default=None)

    # S3-compatible object storage (Tencent COS)
    cos_endpoint: Optional[str] = Field(default=None)
    cos_region: Optional[str] = Field(default=None)
    cos_bucket: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)
    object_store_prefix: str = Field(default="")

    # Uploaded media
    uploads_dir: str = Field(default="public/uploads")
    uploads_url_path: str = Field(default="/uploads")
    max_upload_files: int = Field(default=5, ge=1)

    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
