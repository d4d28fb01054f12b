"""Starter catalog generation for installs with nothing persisted."""

from __future__ import annotations

import logging
import random
from typing import Any, Mapping

import httpx

from ..defaults import PAGE_DEFAULTS, starter_catalog
from ..models import Catalog
from ..utils import generate_id
from .normalizer import CatalogDecodeError, normalize
from .openrouter import OpenRouterClient

logger = logging.getLogger(__name__)

DEFAULT_YEAR = 2024
GALLERY_SIZE = 8
UNKNOWN_CREW = "Director: Unknown | DOP: Unknown"


def _seed_year(movie: Mapping[str, Any]) -> int:
    try:
        return int(movie.get("year") or DEFAULT_YEAR)
    except (TypeError, ValueError):
        return DEFAULT_YEAR


def placeholder_image(movie: Mapping[str, Any], index: int, *, landscape: bool = False) -> str:
    """Return a deterministic picsum URL for a generated movie."""

    seed = len(str(movie.get("title") or "")) + index + _seed_year(movie)
    width, height = (1920, 1080) if landscape else (600, 900)
    return f"https://picsum.photos/seed/{seed}/{width}/{height}"


def placeholder_gallery(movie: Mapping[str, Any]) -> list[dict[str, str]]:
    seed_base = len(str(movie.get("title") or "")) + _seed_year(movie)
    return [
        {"url": f"https://picsum.photos/seed/{seed_base + i + 100}/1920/1080", "type": "image"}
        for i in range(GALLERY_SIZE)
    ]


class CatalogGenerator:
    """Builds a complete starter catalog, preferring a model-drafted one."""

    def __init__(self, client: OpenRouterClient | None, rng: random.Random | None = None):
        self._client = client
        self._rng = rng or random.Random()

    async def generate(self) -> Catalog:
        if self._client is None or not self._client.configured:
            logger.warning("No OpenRouter API key configured. Using the starter catalog.")
            return starter_catalog()
        try:
            raw = await self._client.generate_catalog_document()
            return self.build_catalog(raw)
        except (httpx.HTTPError, RuntimeError, ValueError) as exc:
            logger.warning("Catalog generation failed, using the starter catalog: %s", exc)
            return starter_catalog()

    def build_catalog(self, raw: Mapping[str, Any]) -> Catalog:
        """Enrich a model draft and derive its library."""

        highlight_raw = raw.get("highlight")
        if not isinstance(highlight_raw, Mapping):
            raise CatalogDecodeError("Generated catalog has no highlight")
        highlight = self.enrich(
            {
                **highlight_raw,
                "imageUrl": placeholder_image(highlight_raw, 0, landscape=True),
                "backdropUrl": placeholder_image(highlight_raw, 99, landscape=True),
            }
        )
        top10 = [
            self.enrich({**movie, "imageUrl": placeholder_image(movie, index, landscape=True)})
            for index, movie in enumerate(raw.get("top10") or [])
            if isinstance(movie, Mapping)
        ]
        categories = []
        for category_index, category in enumerate(raw.get("categories") or []):
            if not isinstance(category, Mapping):
                continue
            movies = [
                self.enrich(
                    {
                        **movie,
                        "imageUrl": placeholder_image(
                            movie, movie_index + category_index * 10, landscape=True
                        ),
                    }
                )
                for movie_index, movie in enumerate(category.get("movies") or [])
                if isinstance(movie, Mapping)
            ]
            categories.append({**category, "movies": movies})

        document = {
            "highlight": highlight,
            "top10": top10,
            "categories": categories,
            **PAGE_DEFAULTS,
        }
        return normalize(document)

    def enrich(self, movie: Mapping[str, Any]) -> dict[str, Any]:
        """Fill presentation defaults the model does not provide."""

        return {
            **movie,
            "id": str(movie.get("id") or generate_id("g")),
            "quality": movie.get("quality") or "4K",
            "matchPercentage": movie.get("matchPercentage") or self._rng.randrange(80, 99),
            "crew": movie.get("crew") or UNKNOWN_CREW,
            "imageUrl": movie.get("imageUrl") or "",
            "backdropUrl": movie.get("backdropUrl") or "",
            "videoUrl": movie.get("videoUrl") or "",
            "heroUrl": movie.get("heroUrl") or "",
            "vimeoUrl": movie.get("vimeoUrl") or "",
            "downloadUrl": movie.get("downloadUrl") or "",
            "gallery": movie.get("gallery") or placeholder_gallery(movie),
            "tags": movie.get("tags") or [],
        }
