"""Fixed seed content used when nothing has been persisted yet."""

from __future__ import annotations

from dataclasses import dataclass

from .models import Catalog, MarqueeItem, Project


@dataclass(frozen=True)
class MarqueeSeed:
    """Describes one of the banner entries shipped with a fresh install."""

    id: str
    text: str
    link: str = ""

    def to_item(self) -> MarqueeItem:
        return MarqueeItem(id=self.id, text=self.text, link=self.link)


DEFAULT_MARQUEE_SEEDS: tuple[MarqueeSeed, ...] = (
    MarqueeSeed(id="1", text="CURATED PIECES"),
    MarqueeSeed(id="2", text="WATCH MY REELS", link="https://instagram.com"),
    MarqueeSeed(id="3", text="YO! REACH OUT", link="mailto:contact@jamesfcoton.com"),
    MarqueeSeed(id="4", text="NEW COLLECTION 2025"),
    MarqueeSeed(id="5", text="STREAMING NOW"),
)

NEW_PROJECT_TITLE = "NEW PROJECT"
NEW_PROJECT_IMAGE = "https://picsum.photos/seed/new/1920/1080"

PAGE_DEFAULTS: dict[str, str] = {
    "highlightTitle": "Hero Highlight",
    "top10Title": "Top 10 / Trending",
    "heroBadgeText": "NEW ARRIVAL",
    "heroBadgeColor": "",
    "marqueeColor": "",
    "marqueeTextColor": "#000000",
    "themeColor": "#CCFF00",
    "aboutText": (
        "James F. Coton is a visionary director known for his brutalist aesthetic "
        "and high-octane visual storytelling. With a background in graphic design "
        "and automotive photography, he brings a unique, textured style to every frame."
    ),
    "aboutImage": "https://picsum.photos/seed/james/800/800",
    "contactText": (
        "For commercial inquiries, music videos, and creative collaborations, "
        "please reach out directly or contact my representation."
    ),
    "emailPersonal": "contact@jamesfcoton.com",
    "emailAgent": "agent@hollywood.com",
}


def default_marquee() -> list[MarqueeItem]:
    """Return a fresh copy of the seeded banner entries."""

    return [seed.to_item() for seed in DEFAULT_MARQUEE_SEEDS]


def new_project(project_id: str) -> Project:
    """Return the fully defaulted draft inserted by the admin console."""

    return Project(
        id=project_id,
        title=NEW_PROJECT_TITLE,
        description="",
        genre="General",
        rating=0,
        year=2025,
        quality="HD",
        match_percentage=0,
        crew="",
        image_url=NEW_PROJECT_IMAGE,
        backdrop_url=NEW_PROJECT_IMAGE,
        gallery=[],
        tags=[],
    )


def starter_catalog() -> Catalog:
    """Return the offline starter catalog used when generation is unavailable."""

    highlight = Project(
        id="h1",
        title="CHRONO NEXUS",
        description="In a fragmented timeline...",
        genre="Sci-Fi / Thriller",
        rating=9.8,
        year=2025,
        image_url="https://picsum.photos/seed/chrono/1920/1080",
        quality="4K",
        match_percentage=99,
        crew="Director: James F. Coton | DOP: L. Jenkins",
        video_url="https://commondatastorage.googleapis.com/gtv-videos-bucket/sample/TearsOfSteel.mp4",
        hero_url="https://picsum.photos/seed/chrono/3840/2160",
        vimeo_url="https://vimeo.com/76979871",
        download_url="https://dropbox.com",
        gallery=[],
        tags=["Time Travel", "Dystopian", "Sci-Fi", "Action"],
    )
    return Catalog.model_validate(
        {
            "library": [highlight.to_document()],
            "highlight": highlight.to_document(),
            "top10": [],
            "categories": [],
            **PAGE_DEFAULTS,
        }
    )
