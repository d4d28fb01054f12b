"""Run the portfolio API with ``python -m reelhouse`` or the ``reelhouse`` script."""

from __future__ import annotations

import logging

import uvicorn

from app.config import get_settings

logger = logging.getLogger("reelhouse")


def main() -> None:
    settings = get_settings()
    logger.info(
        "Starting %s on %s:%s (%s)",
        settings.app_name,
        settings.server_host,
        settings.server_port,
        "document store" if settings.document_store_enabled else "local cache only",
    )
    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
