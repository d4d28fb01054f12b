"""Decoding of persisted catalog documents from every earlier shape."""

from __future__ import annotations

import pytest

from app.services.normalizer import (
    CatalogDecodeError,
    derive_library,
    fill_missing_sections,
    normalize,
    upgrade_gallery,
)


def _movie(movie_id: str, title: str, **extra: object) -> dict[str, object]:
    return {"id": movie_id, "title": title, "genre": "Drama", "rating": 7, "year": 2024, **extra}


def test_current_document_decodes_without_upgrades() -> None:
    raw = {
        "library": [_movie("a", "Alpha")],
        "highlight": _movie("a", "Alpha"),
        "top10": [],
        "categories": [],
        "themeColor": "#CCFF00",
    }

    catalog = normalize(raw)

    assert [p.id for p in catalog.library] == ["a"]
    assert catalog.theme_color == "#CCFF00"


def test_missing_library_is_rebuilt_with_last_occurrence_winning() -> None:
    raw = {
        "highlight": _movie("a", "Alpha v1"),
        "top10": [_movie("b", "Beta"), _movie("a", "Alpha v2")],
        "categories": [
            {"id": "c1", "title": "Drama", "movies": [_movie("c", "Gamma"), _movie("a", "Alpha v3")]},
        ],
    }

    catalog = normalize(raw)

    assert sorted(p.id for p in catalog.library) == ["a", "b", "c"]
    by_id = {p.id: p for p in catalog.library}
    assert by_id["a"].title == "Alpha v3"
    assert by_id["b"].title == "Beta"


def test_rebuilt_library_keeps_first_insertion_order() -> None:
    raw = {
        "highlight": _movie("a", "Alpha"),
        "top10": [_movie("b", "Beta"), _movie("a", "Alpha again")],
        "categories": [],
    }

    catalog = normalize(raw)

    assert [p.id for p in catalog.library] == ["a", "b"]


def test_string_gallery_is_upgraded_to_image_references() -> None:
    urls = ["https://example.com/1.jpg", "https://example.com/2.jpg"]
    raw = {
        "library": [_movie("a", "Alpha", gallery=list(urls))],
        "highlight": _movie("a", "Alpha", gallery=list(urls)),
        "top10": [],
        "categories": [],
    }

    catalog = normalize(raw)

    for project in (catalog.highlight, catalog.library[0]):
        assert [item.url for item in project.gallery] == urls
        assert {item.kind for item in project.gallery} == {"image"}


def test_shared_project_object_is_upgraded_once() -> None:
    shared = _movie("a", "Alpha", gallery=["https://example.com/1.jpg"])
    raw = {"highlight": shared, "top10": [shared], "categories": [{"id": "c", "title": "C", "movies": [shared]}]}

    upgraded = upgrade_gallery(raw)

    assert upgraded["highlight"] is upgraded["top10"][0]
    assert upgraded["highlight"]["gallery"] == [{"url": "https://example.com/1.jpg", "type": "image"}]
    # The input document is left untouched.
    assert shared["gallery"] == ["https://example.com/1.jpg"]

    catalog = normalize(raw)
    assert len(catalog.top10[0].gallery) == 1
    assert catalog.categories[0].movies[0].gallery[0].url == "https://example.com/1.jpg"


def test_typed_gallery_is_left_alone() -> None:
    gallery = [{"url": "https://example.com/clip.mp4", "type": "video"}]
    raw = {"highlight": _movie("a", "Alpha", gallery=gallery)}

    upgraded = upgrade_gallery(raw)

    assert upgraded["highlight"]["gallery"] == gallery


def test_present_library_is_not_rebuilt() -> None:
    raw = {
        "library": [],
        "highlight": _movie("a", "Alpha"),
    }

    assert derive_library(raw) is raw
    assert normalize(raw).library == []


def test_missing_sections_default_to_empty() -> None:
    filled = fill_missing_sections({"categories": [{"id": "c", "title": "C", "movies": None}]})

    assert filled["top10"] == []
    assert filled["categories"][0]["movies"] == []
    catalog = normalize({})
    assert catalog.highlight.id == "empty"
    assert catalog.library == []


@pytest.mark.parametrize("raw", [None, [], "catalog", 42])
def test_non_object_documents_are_rejected(raw: object) -> None:
    with pytest.raises(CatalogDecodeError):
        normalize(raw)


def test_malformed_projects_are_rejected() -> None:
    with pytest.raises(CatalogDecodeError):
        normalize({"highlight": {"title": "no id"}, "top10": "oops"})
