"""Weighted keyword search over the project library."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..models import Project

TITLE_WEIGHT = 10
GENRE_WEIGHT = 5
TAG_WEIGHT = 5
INDUSTRY_WEIGHT = 5
MOOD_WEIGHT = 8
KEYWORD_WEIGHT = 4
VISUAL_WEIGHT = 4
SYNOPSIS_WEIGHT = 2


def _any_contains(values: Iterable[str], needle: str) -> bool:
    return any(needle in value.lower() for value in values)


def score(project: Project, needle: str) -> int:
    """Return the relevance score of ``project`` for an already lowered needle.

    Each field contributes its weight at most once.
    """

    total = 0
    if needle in project.title.lower():
        total += TITLE_WEIGHT
    if needle in project.genre.lower():
        total += GENRE_WEIGHT
    if _any_contains(project.tags, needle):
        total += TAG_WEIGHT

    analysis = project.ai_analysis
    if analysis is not None:
        if needle in analysis.industry.lower():
            total += INDUSTRY_WEIGHT
        if _any_contains(analysis.mood_vibe, needle):
            total += MOOD_WEIGHT
        if _any_contains(analysis.keywords, needle):
            total += KEYWORD_WEIGHT
        if _any_contains(analysis.visual_elements, needle):
            total += VISUAL_WEIGHT
        if needle in analysis.synopsis_pitch.lower():
            total += SYNOPSIS_WEIGHT
    return total


def rank(library: Sequence[Project], query: str) -> list[Project]:
    """Return matching projects, best first; equal scores keep library order."""

    if not query:
        return []
    needle = query.lower()
    scored = [(score(project, needle), project) for project in library]
    matches = [entry for entry in scored if entry[0] > 0]
    matches.sort(key=lambda entry: entry[0], reverse=True)
    return [project for _, project in matches]


def filter_projects(library: Sequence[Project], text: str) -> list[Project]:
    """Admin picker filter: title or tag substring, case-insensitive."""

    needle = text.lower()
    return [
        project
        for project in library
        if needle in project.title.lower() or _any_contains(project.tags, needle)
    ]
