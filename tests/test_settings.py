"""Configuration settings behaviour tests."""

from __future__ import annotations

from app.config import Settings


def test_defaults() -> None:
    """Settings fall back to the local sqlite store and default password."""

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite+aiosqlite:///./reelhouse.db"
    assert settings.document_store_enabled is True
    assert settings.admin_password == "admin123"
    assert settings.media_base_url == "/media"


def test_blank_database_url_disables_document_store() -> None:
    """An empty DATABASE_URL means local-cache-only persistence."""

    settings = Settings(_env_file=None, DATABASE_URL="   ")

    assert settings.database_url is None
    assert settings.document_store_enabled is False


def test_blank_openrouter_key_is_unset() -> None:
    settings = Settings(_env_file=None, OPENROUTER_API_KEY="")

    assert settings.openrouter_api_key is None


def test_media_base_url_trailing_slash_is_trimmed() -> None:
    settings = Settings(_env_file=None, MEDIA_BASE_URL="https://cdn.example.com/assets/")

    assert settings.media_base_url == "https://cdn.example.com/assets"
