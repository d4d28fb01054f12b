from __future__ import annotations

import asyncio
import json

from sqlalchemy.exc import OperationalError

from app.database import Database
from app.defaults import starter_catalog
from app.models import MarqueeItem
from app.services.document_store import DocumentStore
from app.services.local_cache import LocalCache
from app.services.persistence import (
    CATALOG_CACHE_KEY,
    CLOUD_SAVE_FAILED,
    MARQUEE_CACHE_KEY,
    PersistenceGateway,
)


class _FailingStore:
    async def get(self, collection, doc_id):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    async def set(self, collection, doc_id, payload):
        raise OperationalError("UPDATE", {}, Exception("database is locked"))


def test_local_cache_persists_to_disk(tmp_path) -> None:
    path = tmp_path / "cache.json"
    cache = LocalCache(path)
    cache.set("key", "value")

    assert LocalCache(path).get("key") == "value"

    cache.remove("key")
    assert LocalCache(path).get("key") is None


def test_local_cache_ignores_corrupt_file(tmp_path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")

    cache = LocalCache(path)

    assert cache.get("anything") is None


def test_cache_only_gateway_round_trips_catalog() -> None:
    cache = LocalCache()
    gateway = PersistenceGateway(None, cache)

    async def _run():
        assert await gateway.load_catalog() is None
        outcome = await gateway.save_catalog(starter_catalog())
        return outcome, await gateway.load_catalog()

    outcome, document = asyncio.run(_run())

    assert outcome.remote is False
    assert outcome.error is None
    assert document["highlight"]["title"] == "CHRONO NEXUS"
    assert json.loads(cache.get(CATALOG_CACHE_KEY)) == document


def test_document_store_round_trip(tmp_path) -> None:
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    cache = LocalCache()

    async def _run():
        await database.create_all()
        gateway = PersistenceGateway(DocumentStore(database.session_factory), cache)
        first = await gateway.save_catalog(starter_catalog())
        catalog = starter_catalog().model_copy(update={"theme_color": "#123456"})
        second = await gateway.save_catalog(catalog)
        document = await gateway.load_catalog()
        await database.dispose()
        return first, second, document

    first, second, document = asyncio.run(_run())

    assert first.remote and second.remote
    assert document["themeColor"] == "#123456"
    assert cache.get(CATALOG_CACHE_KEY) is not None


def test_remote_failure_keeps_local_copy() -> None:
    cache = LocalCache()
    gateway = PersistenceGateway(_FailingStore(), cache)

    outcome = asyncio.run(gateway.save_catalog(starter_catalog()))

    assert outcome.remote is False
    assert outcome.error == CLOUD_SAVE_FAILED
    assert json.loads(cache.get(CATALOG_CACHE_KEY))["highlight"]["id"] == "h1"


def test_remote_read_failure_falls_back_to_cache() -> None:
    cache = LocalCache()
    cache.set(CATALOG_CACHE_KEY, json.dumps({"highlight": {"id": "cached"}}))
    gateway = PersistenceGateway(_FailingStore(), cache)

    document = asyncio.run(gateway.load_catalog())

    assert document == {"highlight": {"id": "cached"}}


def test_marquee_falls_back_to_cache() -> None:
    cache = LocalCache()
    gateway = PersistenceGateway(_FailingStore(), cache)
    items = [MarqueeItem(id="1", text="HELLO", link="https://example.com")]

    async def _run():
        assert await gateway.load_marquee() is None
        outcome = await gateway.save_marquee(items)
        return outcome, await gateway.load_marquee()

    outcome, loaded = asyncio.run(_run())

    assert outcome.error == CLOUD_SAVE_FAILED
    assert loaded == items
    assert json.loads(cache.get(MARQUEE_CACHE_KEY))[0]["text"] == "HELLO"


def test_malformed_cached_marquee_is_ignored() -> None:
    cache = LocalCache()
    cache.set(MARQUEE_CACHE_KEY, "[{\"text\": 1}]")
    gateway = PersistenceGateway(None, cache)

    assert asyncio.run(gateway.load_marquee()) is None
