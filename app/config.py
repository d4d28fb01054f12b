"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Reelhouse", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    database_url: str | None = Field(
        default="sqlite+aiosqlite:///./reelhouse.db", alias="DATABASE_URL"
    )
    local_cache_path: str = Field(
        default="./.reelhouse-cache.json", alias="LOCAL_CACHE_PATH"
    )

    media_root: str = Field(default="./media", alias="MEDIA_ROOT")
    media_base_url: str = Field(default="/media", alias="MEDIA_BASE_URL")

    admin_password: str = Field(default="admin123", alias="ADMIN_PASSWORD")

    openrouter_api_key: str | None = Field(
        default=None, alias="OPENROUTER_API_KEY"
    )
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash", alias="OPENROUTER_MODEL"
    )
    openrouter_api_url: HttpUrl = Field(
        default="https://openrouter.ai/api/v1", alias="OPENROUTER_API_URL"
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("database_url", "openrouter_api_key", mode="before")
    @classmethod
    def _strip_blank(cls, value: object) -> object:
        """Treat blank values as unset so the related service is disabled."""

        if value is None:
            return None
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value

    @field_validator("media_base_url", mode="before")
    @classmethod
    def _normalise_media_base_url(cls, value: object) -> object:
        if not isinstance(value, str):
            return value
        cleaned = value.strip().rstrip("/")
        return cleaned or "/media"

    @property
    def document_store_enabled(self) -> bool:
        return bool(self.database_url)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
