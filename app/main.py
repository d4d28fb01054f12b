"""Entry point for the FastAPI-powered portfolio service."""

from __future__ import annotations

import json
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import TypeAdapter, ValidationError

from .config import settings
from .database import Database
from .services.document_store import DocumentStore
from .services.generator import CatalogGenerator
from .services.local_cache import LocalCache
from .services.media import (
    MediaError,
    MediaGateway,
    MediaNotFoundError,
    MediaStoreError,
    gallery_reference,
)
from .services.mutator import CatalogCommand, MarqueeCommand
from .services.openrouter import OpenRouterClient
from .services.persistence import PersistenceGateway
from .services.portfolio import (
    AdminAccessDenied,
    AdminGate,
    CatalogNotLoadedError,
    PasswordValidationError,
    PortfolioService,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ADMIN_TOKEN_HEADER = "x-admin-token"

catalog_command_adapter: TypeAdapter[Any] = TypeAdapter(CatalogCommand)
marquee_command_adapter: TypeAdapter[Any] = TypeAdapter(MarqueeCommand)

app: FastAPI


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    exit_stack = AsyncExitStack()
    openrouter_http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            base_url=str(settings.openrouter_api_url),
            timeout=httpx.Timeout(60.0, connect=10.0),
        )
    )

    database: Database | None = None
    store: DocumentStore | None = None
    media: MediaGateway | None = None
    if settings.document_store_enabled:
        database = Database(settings.database_url)
        await database.create_all()
        store = DocumentStore(database.session_factory)
        media = MediaGateway(
            settings.media_root, settings.media_base_url, database.session_factory
        )
    else:
        logger.info("No document store configured. Using the local cache only.")

    cache = LocalCache(settings.local_cache_path)
    portfolio = PortfolioService(
        PersistenceGateway(store, cache),
        CatalogGenerator(OpenRouterClient(settings, openrouter_http_client)),
        AdminGate(cache, settings.admin_password),
    )

    fastapi_app.state.portfolio = portfolio
    fastapi_app.state.media = media
    await portfolio.start()

    try:
        yield
    finally:  # pragma: no cover - teardown path exercised at runtime
        if database is not None:
            await database.dispose()
        await exit_stack.aclose()


def create_app() -> FastAPI:
    fastapi_app = FastAPI(
        title=settings.app_name,
        description="Portfolio catalog and admin console API for a film director",
        version="1.0.0",
        lifespan=lifespan,
    )

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_routes(fastapi_app)
    fastapi_app.mount(
        "/media",
        StaticFiles(directory=settings.media_root, check_dir=False),
        name="media",
    )
    return fastapi_app


def get_portfolio(app: FastAPI) -> PortfolioService:
    service = getattr(app.state, "portfolio", None)
    if not isinstance(service, PortfolioService):
        raise RuntimeError("Portfolio service not initialised")
    return service


def register_routes(fastapi_app: FastAPI) -> None:
    def _require_admin(request: Request) -> PortfolioService:
        service = get_portfolio(fastapi_app)
        try:
            service.gate.require(request.headers.get(ADMIN_TOKEN_HEADER))
        except AdminAccessDenied as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        return service

    def _require_media() -> MediaGateway:
        media = getattr(fastapi_app.state, "media", None)
        if not isinstance(media, MediaGateway):
            raise HTTPException(status_code=503, detail="Media storage is not configured")
        return media

    async def _json_body(request: Request) -> dict[str, Any]:
        try:
            payload = await request.json()
        except json.JSONDecodeError:
            payload = None
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Invalid payload")
        return payload

    @fastapi_app.exception_handler(CatalogNotLoadedError)
    async def _catalog_not_loaded(_: Request, exc: CatalogNotLoadedError) -> JSONResponse:
        return JSONResponse({"detail": str(exc)}, status_code=503)

    @fastapi_app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @fastapi_app.get("/api/catalog")
    async def catalog() -> JSONResponse:
        service = get_portfolio(fastapi_app)
        return JSONResponse(service.catalog.to_document())

    @fastapi_app.get("/api/search")
    async def search(q: str = "") -> dict[str, Any]:
        service = get_portfolio(fastapi_app)
        results = service.search(q)
        return {"query": q, "results": [project.to_document() for project in results]}

    @fastapi_app.get("/api/marquee")
    async def marquee() -> dict[str, Any]:
        service = get_portfolio(fastapi_app)
        return {"items": [item.model_dump(mode="json") for item in service.marquee]}

    @fastapi_app.post("/api/admin/login")
    async def admin_login(request: Request) -> dict[str, str]:
        service = get_portfolio(fastapi_app)
        payload = await _json_body(request)
        try:
            token = service.gate.login(str(payload.get("password") or ""))
        except AdminAccessDenied as exc:
            raise HTTPException(status_code=401, detail=str(exc)) from exc
        return {"token": token}

    @fastapi_app.post("/api/admin/logout")
    async def admin_logout(request: Request) -> dict[str, str]:
        service = _require_admin(request)
        service.gate.logout(request.headers.get(ADMIN_TOKEN_HEADER) or "")
        return {"status": "ok"}

    @fastapi_app.post("/api/admin/password")
    async def admin_password(request: Request) -> dict[str, str]:
        service = _require_admin(request)
        payload = await _json_body(request)
        try:
            service.gate.change_password(
                str(payload.get("password") or ""),
                str(payload.get("confirm") or ""),
            )
        except PasswordValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"status": "CREDENTIALS UPDATED SUCCESSFULLY."}

    @fastapi_app.post("/api/admin/commands")
    async def admin_command(request: Request) -> JSONResponse:
        service = _require_admin(request)
        payload = await _json_body(request)
        try:
            command = catalog_command_adapter.validate_python(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail=exc.errors(include_url=False)
            ) from exc
        try:
            updated, outcome = await service.dispatch(command)
        except LookupError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return JSONResponse({"catalog": updated.to_document(), "saved": outcome.to_payload()})

    @fastapi_app.post("/api/admin/marquee")
    async def admin_marquee(request: Request) -> dict[str, Any]:
        service = _require_admin(request)
        payload = await _json_body(request)
        try:
            command = marquee_command_adapter.validate_python(payload)
        except ValidationError as exc:
            raise HTTPException(
                status_code=400, detail=exc.errors(include_url=False)
            ) from exc
        items, outcome = await service.dispatch_marquee(command)
        return {
            "items": [item.model_dump(mode="json") for item in items],
            "saved": outcome.to_payload(),
        }

    @fastapi_app.get("/api/admin/projects")
    async def admin_projects(request: Request, q: str = "") -> dict[str, Any]:
        service = _require_admin(request)
        projects = service.filter_projects(q)
        return {"projects": [project.to_document() for project in projects]}

    @fastapi_app.get("/api/admin/media")
    async def admin_media_list(request: Request, folder: str = "uploads") -> dict[str, Any]:
        _require_admin(request)
        media = getattr(fastapi_app.state, "media", None)
        if not isinstance(media, MediaGateway):
            return {"files": []}
        files = await media.list_files(folder)
        return {"files": [stored.to_payload() for stored in files]}

    @fastapi_app.post("/api/admin/media")
    async def admin_media_upload(
        request: Request, filename: str, folder: str = "uploads"
    ) -> dict[str, Any]:
        _require_admin(request)
        media = _require_media()
        content = await request.body()
        content_type = request.headers.get("content-type")
        try:
            url = await media.upload(filename, content, folder, content_type=content_type)
        except MediaStoreError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except MediaError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        reference = gallery_reference(url, content_type)
        return {"url": url, "galleryItem": reference.model_dump(by_alias=True)}

    @fastapi_app.delete("/api/admin/media/{full_path:path}")
    async def admin_media_delete(request: Request, full_path: str) -> dict[str, str]:
        _require_admin(request)
        media = _require_media()
        try:
            await media.delete(full_path)
        except MediaNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except MediaStoreError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except MediaError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"status": "deleted"}


app = create_app()


if __name__ == "__main__":  # pragma: no cover - manual execution
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
