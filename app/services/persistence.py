"""Persistence gateway for the catalog and marquee documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ..models import Catalog, MarqueeItem
from .document_store import DocumentStore
from .local_cache import LocalCache

logger = logging.getLogger(__name__)

COLLECTION_NAME = "app_data"
CATALOG_DOC_ID = "catalog"
MARQUEE_DOC_ID = "marquee"

CATALOG_CACHE_KEY = "reelhouse_catalog"
MARQUEE_CACHE_KEY = "reelhouse_marquee"

CLOUD_SAVE_FAILED = "Error saving to cloud database. Saved locally only."

GATEWAY_ERRORS = (SQLAlchemyError, OSError)


@dataclass(frozen=True)
class SaveOutcome:
    """Result of a save: the local copy is always written, the remote one may not be."""

    remote: bool
    error: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {"remote": self.remote, "error": self.error}


class PersistenceGateway:
    """Loads and saves whole documents, falling back to the local cache."""

    def __init__(self, store: DocumentStore | None, cache: LocalCache):
        self._store = store
        self._cache = cache

    async def load_catalog(self) -> dict[str, Any] | None:
        """Return the raw persisted catalog document, if any."""

        if self._store is None:
            return self._cached_document(CATALOG_CACHE_KEY)
        try:
            document = await self._store.get(COLLECTION_NAME, CATALOG_DOC_ID)
        except GATEWAY_ERRORS as exc:
            logger.error("Error getting catalog from document store: %s", exc)
            return self._cached_document(CATALOG_CACHE_KEY)
        if document is None:
            logger.info("No catalog document in the document store")
        return document

    async def save_catalog(self, catalog: Catalog) -> SaveOutcome:
        document = catalog.to_document()
        self._cache.set(CATALOG_CACHE_KEY, json.dumps(document))
        if self._store is None:
            return SaveOutcome(remote=False)
        try:
            await self._store.set(COLLECTION_NAME, CATALOG_DOC_ID, document)
        except GATEWAY_ERRORS as exc:
            logger.error("Error saving catalog to document store: %s", exc)
            return SaveOutcome(remote=False, error=CLOUD_SAVE_FAILED)
        logger.info("Catalog saved to document store")
        return SaveOutcome(remote=True)

    async def load_marquee(self) -> list[MarqueeItem] | None:
        """Return the remote marquee, else the cached one, else ``None``."""

        if self._store is not None:
            try:
                document = await self._store.get(COLLECTION_NAME, MARQUEE_DOC_ID)
            except GATEWAY_ERRORS as exc:
                logger.warning("Error getting marquee from document store: %s", exc)
                document = None
            if document is not None:
                items = self._parse_marquee(document.get("items"))
                if items is not None:
                    return items
        cached = self._cache.get(MARQUEE_CACHE_KEY)
        if cached is None:
            return None
        try:
            return self._parse_marquee(json.loads(cached))
        except ValueError:
            return None

    async def save_marquee(self, items: Sequence[MarqueeItem]) -> SaveOutcome:
        payload = [item.model_dump(mode="json") for item in items]
        self._cache.set(MARQUEE_CACHE_KEY, json.dumps(payload))
        if self._store is None:
            return SaveOutcome(remote=False)
        try:
            await self._store.set(COLLECTION_NAME, MARQUEE_DOC_ID, {"items": payload})
        except GATEWAY_ERRORS as exc:
            logger.error("Error saving marquee to document store: %s", exc)
            return SaveOutcome(remote=False, error=CLOUD_SAVE_FAILED)
        return SaveOutcome(remote=True)

    def _cached_document(self, key: str) -> dict[str, Any] | None:
        raw = self._cache.get(key)
        if raw is None:
            return None
        try:
            document = json.loads(raw)
        except ValueError:
            logger.warning("Discarding malformed cached document %s", key)
            return None
        return document if isinstance(document, dict) else None

    @staticmethod
    def _parse_marquee(raw: object) -> list[MarqueeItem] | None:
        if not isinstance(raw, list):
            return None
        try:
            return [MarqueeItem.model_validate(entry) for entry in raw]
        except ValidationError:
            return None
