"""Utility helpers for the Reelhouse service."""

from __future__ import annotations

import json
import re
import threading
import time
from typing import Any


JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
BARE_JSON_RE = re.compile(r"\{.*\}", re.DOTALL)
UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9.]")

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp", "svg")
VIDEO_EXTENSIONS = ("mp4", "mov", "webm", "avi")

_id_lock = threading.Lock()
_last_token = 0


def epoch_millis() -> int:
    return int(time.time() * 1000)


def generate_id(prefix: str = "") -> str:
    """Return ``prefix`` followed by a time-based token unique to this process."""

    global _last_token
    with _id_lock:
        token = max(epoch_millis(), _last_token + 1)
        _last_token = token
    return f"{prefix}{token}"


def sanitize_filename(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9.]`` with an underscore."""

    return UNSAFE_FILENAME_RE.sub("_", name)


def infer_media_kind(filename: str) -> str:
    """Classify a stored file as image, video or unknown from its extension."""

    lowered = filename.lower()
    _, dot, extension = lowered.rpartition(".")
    if not dot:
        return "unknown"
    if extension in VIDEO_EXTENSIONS:
        return "video"
    if extension in IMAGE_EXTENSIONS:
        return "image"
    return "unknown"


def extract_json_object(content: str) -> dict[str, Any]:
    """Extract and parse the first JSON object from the model response."""

    match = JSON_BLOCK_RE.search(content)
    if match:
        payload = match.group(1)
    else:
        match = BARE_JSON_RE.search(content)
        if not match:
            raise ValueError("No JSON object found in response")
        payload = match.group(0)

    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:  # pragma: no cover - defensive branch
        raise ValueError("Invalid JSON payload produced by the model") from exc
