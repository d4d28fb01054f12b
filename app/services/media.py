"""Media gateway storing uploaded assets on disk with metadata rows."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path, PurePosixPath

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db_models import BlobRecord
from ..models import MediaReference, StoredFile
from ..utils import generate_id, infer_media_kind, sanitize_filename

logger = logging.getLogger(__name__)

MEDIA_FOLDERS: tuple[str, ...] = ("images", "videos", "gallery", "uploads")
DEFAULT_UPLOADER = "Admin"


class MediaError(RuntimeError):
    """Raised when a media operation cannot be completed."""


class MediaNotFoundError(MediaError, LookupError):
    """Raised when no stored file exists at the requested path."""


class MediaStoreError(MediaError):
    """Raised when the disk or the metadata store rejects an operation."""


def gallery_reference(url: str, content_type: str | None) -> MediaReference:
    """Build the gallery entry for an uploaded file from its declared type."""

    kind = "video" if (content_type or "").startswith("video") else "image"
    return MediaReference(url=url, kind=kind)


class MediaGateway:
    """Uploads, lists and deletes binary assets in a flat folder namespace."""

    def __init__(
        self,
        root: str | Path,
        base_url: str,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self._root = Path(root)
        self._base_url = base_url.rstrip("/")
        self._session_factory = session_factory

    def url_for(self, full_path: str) -> str:
        return f"{self._base_url}/{full_path}"

    async def upload(
        self,
        filename: str,
        content: bytes,
        folder: str = "uploads",
        *,
        content_type: str | None = None,
        uploaded_by: str = DEFAULT_UPLOADER,
    ) -> str:
        """Store ``content`` under ``folder`` and return its retrievable URL."""

        self._check_folder(folder)
        stored_name = f"{generate_id()}_{sanitize_filename(filename)}"
        full_path = f"{folder}/{stored_name}"
        target = self._root / folder / stored_name
        try:
            await asyncio.to_thread(self._write_file, target, content)
        except OSError as exc:
            logger.error("Error uploading file %s: %s", filename, exc)
            raise MediaStoreError(f"Upload failed: {exc}") from exc

        try:
            async with self._session_factory() as session:
                session.add(
                    BlobRecord(
                        full_path=full_path,
                        folder=folder,
                        name=stored_name,
                        uploaded_by=uploaded_by,
                        content_type=content_type,
                        size=len(content),
                        time_created=datetime.utcnow(),
                    )
                )
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("Error recording upload %s: %s", full_path, exc)
            await asyncio.to_thread(target.unlink, True)
            raise MediaStoreError(f"Upload failed: {exc}") from exc
        logger.info("Uploaded %s (%d bytes)", full_path, len(content))
        return self.url_for(full_path)

    async def list_files(self, folder: str) -> list[StoredFile]:
        """Return the files held in ``folder``, newest first.

        An unknown folder or an unreachable store both read as empty.
        """

        if folder not in MEDIA_FOLDERS:
            logger.warning("Folder %s empty or not found", folder)
            return []
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(BlobRecord)
                    .where(BlobRecord.folder == folder)
                    .order_by(BlobRecord.time_created.desc())
                )
                result = await session.execute(stmt)
                records = list(result.scalars().all())
        except SQLAlchemyError as exc:
            logger.error("Error listing files in %s: %s", folder, exc)
            return []

        return [
            StoredFile(
                name=record.name,
                url=self.url_for(record.full_path),
                full_path=record.full_path,
                kind=infer_media_kind(record.name),
                uploaded_by=record.uploaded_by or "Unknown",
                time_created=record.time_created,
            )
            for record in records
        ]

    async def delete(self, full_path: str) -> None:
        """Delete a stored file by its full path."""

        target = self._resolve(full_path)
        try:
            async with self._session_factory() as session:
                record = await session.get(BlobRecord, full_path)
                if record is None:
                    raise MediaNotFoundError(f"No stored file at {full_path}")
                await session.delete(record)
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("Error deleting record %s: %s", full_path, exc)
            raise MediaStoreError(f"Delete failed: {exc}") from exc

        try:
            await asyncio.to_thread(target.unlink, True)
        except OSError as exc:
            logger.error("Error deleting file %s: %s", full_path, exc)
            raise MediaStoreError(f"Delete failed: {exc}") from exc
        logger.info("Deleted %s", full_path)

    def _resolve(self, full_path: str) -> Path:
        parts = PurePosixPath(full_path).parts
        if len(parts) != 2 or parts[0] not in MEDIA_FOLDERS or ".." in parts:
            raise MediaError(f"Invalid media path {full_path}")
        return self._root.joinpath(*parts)

    @staticmethod
    def _check_folder(folder: str) -> None:
        if folder not in MEDIA_FOLDERS:
            raise MediaError(f"Unknown media folder {folder}")

    @staticmethod
    def _write_file(target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
