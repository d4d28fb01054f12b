"""Remote document store holding whole JSON documents."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db_models import DocumentRecord

logger = logging.getLogger(__name__)


class DocumentStore:
    """Reads and writes JSON documents keyed by ``(collection, doc_id)``.

    Every write replaces the stored document wholesale. There is no merge and
    no concurrency token, so the last writer wins.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return the stored document, or ``None`` when it does not exist."""

        async with self._session_factory() as session:
            record = await self._load(session, collection, doc_id)
            if record is None:
                return None
            return dict(record.payload)

    async def set(self, collection: str, doc_id: str, payload: dict[str, Any]) -> None:
        """Create or overwrite a document."""

        now = datetime.utcnow()
        async with self._session_factory() as session:
            record = await self._load(session, collection, doc_id)
            if record is None:
                session.add(
                    DocumentRecord(
                        collection=collection,
                        doc_id=doc_id,
                        payload=payload,
                        created_at=now,
                        updated_at=now,
                    )
                )
            else:
                record.payload = payload
                record.updated_at = now
            await session.commit()
        logger.debug("Stored document %s/%s", collection, doc_id)

    @staticmethod
    async def _load(
        session: AsyncSession, collection: str, doc_id: str
    ) -> DocumentRecord | None:
        stmt = select(DocumentRecord).where(
            DocumentRecord.collection == collection,
            DocumentRecord.doc_id == doc_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
