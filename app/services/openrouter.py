"""Integration helpers for the OpenRouter API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..utils import extract_json_object

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are Reelhouse, an assistant that drafts fictional film catalogs for a "
    "director's portfolio site. You always respond with a single JSON object that "
    "matches the documented schema and never include commentary outside JSON."
)

CATALOG_REQUEST_TEMPLATE = """
Generate a fictional streaming service catalog.

Rules:
1. Include exactly 1 "highlight" movie (a blockbuster).
2. Include a "top10" list of {top10_count} trending movies.
3. Include {category_count} "categories" (e.g. Sci-Fi, Drama, Action) with 5-6 movies each.
4. Make the titles creative and the descriptions punchy.
5. Every movie needs a unique string "id", a "title", a "description", a "genre",
   a numeric "rating" between 0 and 10 and an integer "year".

Respond strictly with JSON following this structure:
{{
  "highlight": {{"id": "", "title": "", "description": "", "genre": "", "rating": 9.1, "year": 2024}},
  "top10": [{{"id": "", "title": "", "description": "", "genre": "", "rating": 8.4, "year": 2023}}],
  "categories": [{{"id": "", "title": "", "movies": []}}]
}}
"""


class OpenRouterClient:
    """Client responsible for talking to OpenRouter."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def configured(self) -> bool:
        return bool(self._settings.openrouter_api_key)

    async def generate_catalog_document(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        top10_count: int = 10,
        category_count: int = 3,
    ) -> dict[str, Any]:
        """Ask the model for a raw starter catalog document."""

        resolved_key = api_key or self._settings.openrouter_api_key
        resolved_model = model or self._settings.openrouter_model
        if not resolved_key:
            raise RuntimeError("OpenRouter API key is required to generate catalogs")

        payload = {
            "model": resolved_model,
            "temperature": 0.9,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": CATALOG_REQUEST_TEMPLATE.format(
                        top10_count=top10_count, category_count=category_count
                    ),
                },
            ],
        }
        headers = {
            "Authorization": f"Bearer {resolved_key}",
            "Content-Type": "application/json",
            "X-Title": self._settings.app_name,
        }

        response = await self._client.post("/chat/completions", json=payload, headers=headers)
        if response.status_code >= 400:
            raise RuntimeError(response.text)

        data = response.json()
        choices = data.get("choices", [])
        if not choices:
            raise RuntimeError("Model returned no choices")
        message = choices[0].get("message", {})
        content = message.get("content")
        if not isinstance(content, str):
            raise RuntimeError("Model response missing content")

        logger.info("Received catalog draft from %s", resolved_model)
        return extract_json_object(content)
