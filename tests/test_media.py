from __future__ import annotations

import asyncio

import pytest

from app.database import Database
from app.services.media import (
    MediaError,
    MediaGateway,
    MediaNotFoundError,
    MediaStoreError,
    gallery_reference,
)


def _gateway(tmp_path) -> tuple[Database, MediaGateway]:
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'media.db'}")
    gateway = MediaGateway(tmp_path / "media", "/media/", database.session_factory)
    return database, gateway


def test_upload_list_and_delete(tmp_path) -> None:
    database, gateway = _gateway(tmp_path)

    async def _run():
        await database.create_all()
        image_url = await gateway.upload("my still.PNG", b"png-bytes", "images", content_type="image/png")
        clip_url = await gateway.upload("teaser.mp4", b"mp4-bytes", "images", content_type="video/mp4")
        listed = await gateway.list_files("images")
        await gateway.delete(listed[0].full_path)
        remaining = await gateway.list_files("images")
        await database.dispose()
        return image_url, clip_url, listed, remaining

    image_url, clip_url, listed, remaining = asyncio.run(_run())

    assert image_url.startswith("/media/images/")
    assert image_url.endswith("_my_still.PNG")
    assert {stored.url for stored in listed} == {image_url, clip_url}
    assert {stored.kind for stored in listed} == {"image", "video"}
    assert {stored.uploaded_by for stored in listed} == {"Admin"}
    assert len(remaining) == 1
    assert remaining[0].full_path != listed[0].full_path

    remaining_file = tmp_path / "media" / remaining[0].full_path
    assert remaining_file.exists()
    assert not (tmp_path / "media" / listed[0].full_path).exists()


def test_uploads_with_same_name_do_not_collide(tmp_path) -> None:
    database, gateway = _gateway(tmp_path)

    async def _run():
        await database.create_all()
        first = await gateway.upload("clip.mov", b"1", "videos")
        second = await gateway.upload("clip.mov", b"2", "videos")
        await database.dispose()
        return first, second

    first, second = asyncio.run(_run())

    assert first != second


def test_unknown_folder_lists_nothing(tmp_path) -> None:
    database, gateway = _gateway(tmp_path)

    async def _run():
        await database.create_all()
        files = await gateway.list_files("secrets")
        await database.dispose()
        return files

    assert asyncio.run(_run()) == []


def test_upload_to_unknown_folder_is_rejected(tmp_path) -> None:
    database, gateway = _gateway(tmp_path)

    async def _run():
        await database.create_all()
        try:
            await gateway.upload("x.png", b"x", "secrets")
        finally:
            await database.dispose()

    with pytest.raises(MediaError):
        asyncio.run(_run())


def test_delete_missing_file_raises(tmp_path) -> None:
    database, gateway = _gateway(tmp_path)

    async def _run():
        await database.create_all()
        try:
            await gateway.delete("images/nothing.png")
        finally:
            await database.dispose()

    with pytest.raises(MediaNotFoundError):
        asyncio.run(_run())


@pytest.mark.parametrize(
    ("content_type", "kind"),
    [("video/mp4", "video"), ("image/jpeg", "image"), (None, "image"), ("application/pdf", "image")],
)
def test_gallery_reference_kind(content_type, kind) -> None:
    assert gallery_reference("/media/gallery/a", content_type).kind == kind


def test_failed_upload_record_removes_written_file(tmp_path) -> None:
    # No create_all: the blobs table is missing, so the metadata insert fails.
    database, gateway = _gateway(tmp_path)

    async def _run():
        try:
            await gateway.upload("a.png", b"png-bytes", "images", content_type="image/png")
        finally:
            await database.dispose()

    with pytest.raises(MediaStoreError):
        asyncio.run(_run())

    images = tmp_path / "media" / "images"
    assert not images.exists() or list(images.iterdir()) == []


def test_listing_degrades_to_empty_when_store_fails(tmp_path) -> None:
    database, gateway = _gateway(tmp_path)

    async def _run():
        try:
            return await gateway.list_files("images")
        finally:
            await database.dispose()

    assert asyncio.run(_run()) == []


def test_delete_reports_store_failure(tmp_path) -> None:
    database, gateway = _gateway(tmp_path)
    stored = tmp_path / "media" / "images" / "1_a.png"
    stored.parent.mkdir(parents=True)
    stored.write_bytes(b"png-bytes")

    async def _run():
        try:
            await gateway.delete("images/1_a.png")
        finally:
            await database.dispose()

    with pytest.raises(MediaStoreError):
        asyncio.run(_run())

    assert stored.exists()
