"""Decode persisted catalog documents, upgrading older shapes on the way."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Iterator, Mapping

from pydantic import ValidationError

from ..models import Catalog

logger = logging.getLogger(__name__)

Document = dict[str, Any]
UpgradeStep = Callable[[Document], Document]


class CatalogDecodeError(ValueError):
    """Raised when a persisted document cannot be turned into a catalog."""


def iter_section_projects(document: Mapping[str, Any]) -> Iterator[Any]:
    """Yield raw projects in highlight -> top10 -> categories order."""

    highlight = document.get("highlight")
    if highlight is not None:
        yield highlight
    for project in document.get("top10") or []:
        yield project
    for category in document.get("categories") or []:
        if isinstance(category, Mapping):
            yield from category.get("movies") or []


def fill_missing_sections(document: Document) -> Document:
    """Give absent list sections an empty value."""

    upgraded = copy.deepcopy(document)
    if upgraded.get("top10") is None:
        upgraded["top10"] = []
    if upgraded.get("categories") is None:
        upgraded["categories"] = []
    for category in upgraded["categories"]:
        if isinstance(category, dict) and category.get("movies") is None:
            category["movies"] = []
    if upgraded.get("highlight") is None:
        upgraded.pop("highlight", None)
    return upgraded


def upgrade_gallery(document: Document) -> Document:
    """Turn legacy string galleries into typed image references.

    Shared project objects stay shared through the copy and are converted
    once, however many sections reference them.
    """

    upgraded = copy.deepcopy(document)
    seen: set[int] = set()
    projects = list(iter_section_projects(upgraded))
    projects.extend(upgraded.get("library") or [])
    for project in projects:
        if not isinstance(project, dict) or id(project) in seen:
            continue
        seen.add(id(project))
        gallery = project.get("gallery")
        if isinstance(gallery, list) and gallery and isinstance(gallery[0], str):
            project["gallery"] = [{"url": url, "type": "image"} for url in gallery]
    return upgraded


def derive_library(document: Document) -> Document:
    """Rebuild the library from the curated sections when it is missing.

    When an id recurs, the later occurrence supplies the field values.
    """

    if document.get("library") is not None:
        return document
    logger.info("Migrating catalog structure (library rebuild)")
    upgraded = copy.deepcopy(document)
    by_id: dict[Any, Any] = {}
    for project in iter_section_projects(upgraded):
        if isinstance(project, Mapping):
            by_id[project.get("id")] = project
    upgraded["library"] = [copy.deepcopy(project) for project in by_id.values()]
    return upgraded


UPGRADE_STEPS: tuple[UpgradeStep, ...] = (
    fill_missing_sections,
    upgrade_gallery,
    derive_library,
)


def normalize(raw: object) -> Catalog:
    """Return a current-schema catalog for any previously persisted shape."""

    if not isinstance(raw, Mapping):
        raise CatalogDecodeError("Catalog document must be a JSON object")
    document: Document = dict(raw)

    if document.get("library") is not None:
        try:
            return Catalog.model_validate(document)
        except ValidationError:
            logger.info("Catalog document needs upgrading")

    for step in UPGRADE_STEPS:
        document = step(document)

    try:
        return Catalog.model_validate(document)
    except ValidationError as exc:
        raise CatalogDecodeError(f"Catalog document is malformed: {exc}") from exc
