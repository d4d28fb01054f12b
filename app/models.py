"""Pydantic models describing the portfolio catalog documents."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

MediaKind = Literal["image", "video"]
StoredFileKind = Literal["image", "video", "unknown"]
Quality = Literal["HD", "4K", "8K"]

HIGHLIGHT_SECTION = "highlight"
TOP10_SECTION = "top10"
EMPTY_HIGHLIGHT_ID = "empty"
EMPTY_HIGHLIGHT_TITLE = "No Projects"


class MediaReference(BaseModel):
    """A typed pointer to an image or video asset."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str
    kind: MediaKind = Field(default="image", alias="type")


class AnalysisTags(BaseModel):
    """Annotations attached by the content-generation collaborator."""

    industry: str = ""
    mood_vibe: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    synopsis_pitch: str = ""
    visual_elements: list[str] = Field(default_factory=list)
    color_dominance: str = ""


class Project(BaseModel):
    """One portfolio work item (a film)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    description: str = ""
    genre: str = ""
    rating: int | float = 0
    year: int | None = None

    quality: Quality | None = None
    match_percentage: int | float | None = Field(default=None, alias="matchPercentage")
    crew: str | None = None

    image_url: str | None = Field(default=None, alias="imageUrl")
    backdrop_url: str | None = Field(default=None, alias="backdropUrl")
    hero_url: str | None = Field(default=None, alias="heroUrl")
    video_url: str | None = Field(default=None, alias="videoUrl")
    vimeo_url: str | None = Field(default=None, alias="vimeoUrl")
    download_url: str | None = Field(default=None, alias="downloadUrl")
    gallery: list[MediaReference] = Field(default_factory=list)

    tags: list[str] = Field(default_factory=list)
    ai_analysis: AnalysisTags | None = Field(default=None, alias="aiAnalysis")

    @classmethod
    def placeholder(cls, base: "Project | None" = None) -> "Project":
        """Return the stand-in highlight used when the library is empty."""

        if base is None:
            return cls(id=EMPTY_HIGHLIGHT_ID, title=EMPTY_HIGHLIGHT_TITLE)
        return base.model_copy(
            update={"id": EMPTY_HIGHLIGHT_ID, "title": EMPTY_HIGHLIGHT_TITLE},
            deep=True,
        )

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Category(BaseModel):
    """A curated, ordered row of projects."""

    id: str
    title: str = ""
    movies: list[Project] = Field(default_factory=list)


class Catalog(BaseModel):
    """The full persisted content document for the site."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    library: list[Project] = Field(default_factory=list)
    highlight: Project = Field(default_factory=lambda: Project.placeholder())
    top10: list[Project] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)

    highlight_title: str | None = Field(default=None, alias="highlightTitle")
    top10_title: str | None = Field(default=None, alias="top10Title")
    hero_badge_text: str | None = Field(default=None, alias="heroBadgeText")
    hero_badge_color: str | None = Field(default=None, alias="heroBadgeColor")
    marquee_color: str | None = Field(default=None, alias="marqueeColor")
    marquee_text_color: str | None = Field(default=None, alias="marqueeTextColor")
    theme_color: str | None = Field(default=None, alias="themeColor")

    about_text: str | None = Field(default=None, alias="aboutText")
    about_image: str | None = Field(default=None, alias="aboutImage")
    contact_text: str | None = Field(default=None, alias="contactText")
    email_personal: str | None = Field(default=None, alias="emailPersonal")
    email_agent: str | None = Field(default=None, alias="emailAgent")

    def find_project(self, project_id: str) -> Project | None:
        """Return the library entry for ``project_id`` if present."""

        for project in self.library:
            if project.id == project_id:
                return project
        return None

    def category(self, category_id: str) -> Category | None:
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def section_projects(self, section: str) -> list[Project] | None:
        """Return the projects shown by a section key, or ``None`` if unknown."""

        if section == HIGHLIGHT_SECTION:
            return [self.highlight]
        if section == TOP10_SECTION:
            return list(self.top10)
        category = self.category(section)
        if category is None:
            return None
        return list(category.movies)

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready document written to the stores."""

        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class MarqueeItem(BaseModel):
    """One entry of the scrolling banner."""

    id: str
    text: str
    link: str = ""


class StoredFile(BaseModel):
    """Listing entry returned by the media gateway."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    url: str
    full_path: str = Field(alias="fullPath")
    kind: StoredFileKind = Field(default="unknown", alias="type")
    uploaded_by: str = Field(default="Unknown", alias="uploadedBy")
    time_created: datetime = Field(alias="timeCreated")

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
