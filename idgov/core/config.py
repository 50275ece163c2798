"""Configuration management for the requirement gathering platform."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_MIME_TYPES = [
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "image/png",
    "image/jpeg",
]


class Settings(BaseSettings):
    app_name: str = Field(default="IdGov Requirements")
    version: str = Field(default="0.1.0")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str = Field(default="/openapi.json")

    database_url: str = Field(default="postgresql+psycopg://idgov:idgov@db:5432/idgovernance")

    enable_metrics: bool = Field(default=True)
    enable_tracing: bool = Field(default=False)
    otel_exporter_endpoint: str | None = Field(default=None)

    jwt_secret_key: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60)

    file_storage_backend: str = Field(default="local")
    upload_dir: str = Field(default="uploads")
    aws_region: str = Field(default="us-east-1")
    s3_endpoint_url: str | None = Field(default=None)
    upload_bucket: str = Field(default="idgov-attachments")
    upload_prefix: str = Field(default="attachments")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024)
    allowed_mime_types: list[str] = Field(default_factory=lambda: list(_DEFAULT_MIME_TYPES))

    notification_backend: str = Field(default="log")
    mailgun_base_url: str = Field(default="https://api.mailgun.net/v3")
    mailgun_domain: str | None = Field(default=None)
    mailgun_api_key: str | None = Field(default=None)
    mailgun_timeout_seconds: float = Field(default=5.0)
    mail_sender: str = Field(default="IdGov Platform <no-reply@idgov.local>")
    app_base_url: str = Field(default="http://localhost:5000")

    recent_activity_limit: int = Field(default=5)

    default_admin_username: str = Field(default="admin")
    default_admin_email: str = Field(default="admin@example.com")
    default_admin_password: str = Field(default="admin123")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
