"""Admin edits expressed as commands over immutable catalog snapshots.

Every operation copies the catalog it receives and returns the edited copy,
so callers never observe a half-applied change and snapshots never alias.
The library is the source of truth for project fields: any edit to a project
is written to the library and to every section that references its id.
"""

from __future__ import annotations

import re
from typing import Annotated, Callable, Literal, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from ..defaults import new_project
from ..models import (
    HIGHLIGHT_SECTION,
    TOP10_SECTION,
    Catalog,
    Category,
    MarqueeItem,
    MediaReference,
    Project,
)
from ..utils import generate_id

TAG_SPLIT_RE = re.compile(r"[\s,]+")


class CommandError(ValueError):
    """Raised when an admin edit cannot be applied."""


class UnknownProjectError(CommandError, LookupError):
    """Raised when a command names a project missing from the library."""


class UnknownSectionError(CommandError, LookupError):
    """Raised when a command names a section that does not exist."""


# --- project operations ---------------------------------------------------


def create_project(catalog: Catalog, project_id: str | None = None) -> Catalog:
    """Insert a defaulted draft at the front of the library, in no section."""

    updated = catalog.model_copy(deep=True)
    draft = new_project(project_id or generate_id("p"))
    if updated.find_project(draft.id) is not None:
        raise CommandError(f"Project {draft.id} already exists")
    updated.library.insert(0, draft)
    return updated


def save_project(catalog: Catalog, edited: Project) -> Catalog:
    """Replace a project everywhere its id appears."""

    if catalog.find_project(edited.id) is None:
        raise UnknownProjectError(f"Project {edited.id} is not in the library")

    def _replace(project: Project) -> Project:
        if project.id == edited.id:
            return edited.model_copy(deep=True)
        return project

    updated = catalog.model_copy(deep=True)
    updated.library = [_replace(project) for project in updated.library]
    updated.highlight = _replace(updated.highlight)
    updated.top10 = [_replace(project) for project in updated.top10]
    for category in updated.categories:
        category.movies = [_replace(project) for project in category.movies]
    return updated


def delete_project(catalog: Catalog, project_id: str) -> Catalog:
    """Remove a project from the library and every section."""

    deleted = catalog.find_project(project_id)
    if deleted is None and catalog.highlight.id != project_id:
        raise UnknownProjectError(f"Project {project_id} is not in the library")

    updated = catalog.model_copy(deep=True)
    updated.library = [p for p in updated.library if p.id != project_id]
    updated.top10 = [p for p in updated.top10 if p.id != project_id]
    for category in updated.categories:
        category.movies = [p for p in category.movies if p.id != project_id]

    if updated.highlight.id == project_id:
        if updated.library:
            updated.highlight = updated.library[0].model_copy(deep=True)
        else:
            updated.highlight = Project.placeholder(deleted or catalog.highlight)
    return updated


# --- section operations ---------------------------------------------------


def _category_or_raise(catalog: Catalog, section: str) -> Category:
    category = catalog.category(section)
    if category is None:
        raise UnknownSectionError(f"Unknown section {section}")
    return category


def add_to_section(catalog: Catalog, section: str, project: Project) -> Catalog:
    """Add a project to a section; list sections ignore ids already present."""

    updated = catalog.model_copy(deep=True)
    entry = project.model_copy(deep=True)
    if section == HIGHLIGHT_SECTION:
        updated.highlight = entry
    elif section == TOP10_SECTION:
        if all(p.id != project.id for p in updated.top10):
            updated.top10.append(entry)
    else:
        category = _category_or_raise(updated, section)
        if all(p.id != project.id for p in category.movies):
            category.movies.append(entry)
    return updated


def remove_from_section(catalog: Catalog, section: str, project_id: str) -> Catalog:
    """Drop a project from a list section. The highlight cannot be emptied."""

    updated = catalog.model_copy(deep=True)
    if section == HIGHLIGHT_SECTION:
        return updated
    if section == TOP10_SECTION:
        updated.top10 = [p for p in updated.top10 if p.id != project_id]
    else:
        category = _category_or_raise(updated, section)
        category.movies = [p for p in category.movies if p.id != project_id]
    return updated


def move_item(items: list, from_index: int, to_index: int) -> list:
    """Return a copy of ``items`` with one element moved to ``to_index``."""

    moved = list(items)
    size = len(moved)
    if from_index == to_index:
        return moved
    if not (0 <= from_index < size and 0 <= to_index < size):
        return moved
    item = moved.pop(from_index)
    moved.insert(to_index, item)
    return moved


def reorder(catalog: Catalog, section: str, from_index: int, to_index: int) -> Catalog:
    updated = catalog.model_copy(deep=True)
    if section == HIGHLIGHT_SECTION:
        return updated
    if section == TOP10_SECTION:
        updated.top10 = move_item(updated.top10, from_index, to_index)
    else:
        category = _category_or_raise(updated, section)
        category.movies = move_item(category.movies, from_index, to_index)
    return updated


def rename_section(catalog: Catalog, section: str, title: str) -> Catalog:
    updated = catalog.model_copy(deep=True)
    if section == HIGHLIGHT_SECTION:
        updated.highlight_title = title
    elif section == TOP10_SECTION:
        updated.top10_title = title
    else:
        _category_or_raise(updated, section).title = title
    return updated


def create_category(
    catalog: Catalog, title: str, category_id: str | None = None
) -> Catalog:
    if not title or not title.strip():
        raise CommandError("Category title is required")
    new_id = category_id or generate_id("c")
    if new_id in (HIGHLIGHT_SECTION, TOP10_SECTION) or catalog.category(new_id):
        raise CommandError(f"Section {new_id} already exists")
    updated = catalog.model_copy(deep=True)
    updated.categories.append(Category(id=new_id, title=title, movies=[]))
    return updated


def delete_category(catalog: Catalog, category_id: str) -> Catalog:
    """Remove a category; its projects stay in the library."""

    _category_or_raise(catalog, category_id)
    updated = catalog.model_copy(deep=True)
    updated.categories = [c for c in updated.categories if c.id != category_id]
    return updated


def reorder_categories(catalog: Catalog, from_index: int, to_index: int) -> Catalog:
    updated = catalog.model_copy(deep=True)
    updated.categories = move_item(updated.categories, from_index, to_index)
    return updated


# --- page content ---------------------------------------------------------


def _set_fields(catalog: Catalog, values: dict[str, str | None]) -> Catalog:
    changes = {key: value for key, value in values.items() if value is not None}
    return catalog.model_copy(update=changes, deep=True)


# --- project field helpers ------------------------------------------------


def merge_tags(existing: Sequence[str], raw: str) -> list[str]:
    """Split ``raw`` on whitespace/commas and add unseen tags, casing intact."""

    merged = list(dict.fromkeys(existing))
    for word in TAG_SPLIT_RE.split(raw):
        if word.strip() and word not in merged:
            merged.append(word)
    return merged


def remove_tag(tags: Sequence[str], tag: str) -> list[str]:
    return [existing for existing in tags if existing != tag]


def append_gallery(project: Project, items: Sequence[MediaReference]) -> Project:
    return project.model_copy(update={"gallery": [*project.gallery, *items]}, deep=True)


def remove_gallery_item(project: Project, index: int) -> Project:
    gallery = [item for position, item in enumerate(project.gallery) if position != index]
    return project.model_copy(update={"gallery": gallery}, deep=True)


# --- commands -------------------------------------------------------------


class Command(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CreateProject(Command):
    type: Literal["create_project"] = "create_project"
    project_id: str | None = None


class SaveProject(Command):
    type: Literal["save_project"] = "save_project"
    project: Project


class DeleteProject(Command):
    type: Literal["delete_project"] = "delete_project"
    project_id: str


class AddToSection(Command):
    type: Literal["add_to_section"] = "add_to_section"
    section: str
    project_id: str


class RemoveFromSection(Command):
    type: Literal["remove_from_section"] = "remove_from_section"
    section: str
    project_id: str


class ReorderSection(Command):
    type: Literal["reorder_section"] = "reorder_section"
    section: str
    from_index: int
    to_index: int


class RenameSection(Command):
    type: Literal["rename_section"] = "rename_section"
    section: str
    title: str


class CreateCategory(Command):
    type: Literal["create_category"] = "create_category"
    title: str
    category_id: str | None = None


class DeleteCategory(Command):
    type: Literal["delete_category"] = "delete_category"
    category_id: str


class ReorderCategories(Command):
    type: Literal["reorder_categories"] = "reorder_categories"
    from_index: int
    to_index: int


class UpdateAppearance(Command):
    type: Literal["update_appearance"] = "update_appearance"
    hero_badge_text: str | None = None
    hero_badge_color: str | None = None
    theme_color: str | None = None
    marquee_color: str | None = None
    marquee_text_color: str | None = None


class UpdatePages(Command):
    type: Literal["update_pages"] = "update_pages"
    about_text: str | None = None
    about_image: str | None = None
    contact_text: str | None = None
    email_personal: str | None = None
    email_agent: str | None = None


class AddTags(Command):
    type: Literal["add_tags"] = "add_tags"
    project_id: str
    raw: str


class RemoveTag(Command):
    type: Literal["remove_tag"] = "remove_tag"
    project_id: str
    tag: str


class AddGalleryItems(Command):
    type: Literal["add_gallery_items"] = "add_gallery_items"
    project_id: str
    items: list[MediaReference]


class RemoveGalleryItem(Command):
    type: Literal["remove_gallery_item"] = "remove_gallery_item"
    project_id: str
    index: int


CatalogCommand = Annotated[
    Union[
        CreateProject,
        SaveProject,
        DeleteProject,
        AddToSection,
        RemoveFromSection,
        ReorderSection,
        RenameSection,
        CreateCategory,
        DeleteCategory,
        ReorderCategories,
        UpdateAppearance,
        UpdatePages,
        AddTags,
        RemoveTag,
        AddGalleryItems,
        RemoveGalleryItem,
    ],
    Field(discriminator="type"),
]


def _add_from_library(catalog: Catalog, command: AddToSection) -> Catalog:
    project = catalog.find_project(command.project_id)
    if project is None:
        raise UnknownProjectError(f"Project {command.project_id} is not in the library")
    return add_to_section(catalog, command.section, project)


def _edit_project(
    catalog: Catalog, project_id: str, edit: Callable[[Project], Project]
) -> Catalog:
    """Apply a field edit to a library project and save it everywhere."""

    project = catalog.find_project(project_id)
    if project is None:
        raise UnknownProjectError(f"Project {project_id} is not in the library")
    return save_project(catalog, edit(project))


_HANDLERS: dict[type[Command], Callable[[Catalog, Command], Catalog]] = {
    CreateProject: lambda c, cmd: create_project(c, cmd.project_id),
    SaveProject: lambda c, cmd: save_project(c, cmd.project),
    DeleteProject: lambda c, cmd: delete_project(c, cmd.project_id),
    AddToSection: _add_from_library,
    RemoveFromSection: lambda c, cmd: remove_from_section(c, cmd.section, cmd.project_id),
    ReorderSection: lambda c, cmd: reorder(c, cmd.section, cmd.from_index, cmd.to_index),
    RenameSection: lambda c, cmd: rename_section(c, cmd.section, cmd.title),
    CreateCategory: lambda c, cmd: create_category(c, cmd.title, cmd.category_id),
    DeleteCategory: lambda c, cmd: delete_category(c, cmd.category_id),
    ReorderCategories: lambda c, cmd: reorder_categories(c, cmd.from_index, cmd.to_index),
    UpdateAppearance: lambda c, cmd: _set_fields(c, cmd.model_dump(exclude={"type"})),
    UpdatePages: lambda c, cmd: _set_fields(c, cmd.model_dump(exclude={"type"})),
    AddTags: lambda c, cmd: _edit_project(
        c, cmd.project_id, lambda p: p.model_copy(update={"tags": merge_tags(p.tags, cmd.raw)})
    ),
    RemoveTag: lambda c, cmd: _edit_project(
        c, cmd.project_id, lambda p: p.model_copy(update={"tags": remove_tag(p.tags, cmd.tag)})
    ),
    AddGalleryItems: lambda c, cmd: _edit_project(
        c, cmd.project_id, lambda p: append_gallery(p, cmd.items)
    ),
    RemoveGalleryItem: lambda c, cmd: _edit_project(
        c, cmd.project_id, lambda p: remove_gallery_item(p, cmd.index)
    ),
}


def apply(catalog: Catalog, command: Command) -> Catalog:
    """Route a command to its transform and return the new catalog."""

    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise CommandError(f"Unsupported command {type(command).__name__}")
    return handler(catalog, command)


# --- marquee --------------------------------------------------------------


class AddMarqueeItem(Command):
    type: Literal["add_marquee_item"] = "add_marquee_item"
    text: str
    link: str = ""


class RemoveMarqueeItem(Command):
    type: Literal["remove_marquee_item"] = "remove_marquee_item"
    item_id: str


MarqueeCommand = Annotated[
    Union[AddMarqueeItem, RemoveMarqueeItem],
    Field(discriminator="type"),
]


def add_marquee_item(
    items: Sequence[MarqueeItem], text: str, link: str = ""
) -> list[MarqueeItem]:
    if not text.strip():
        return list(items)
    return [*items, MarqueeItem(id=generate_id(), text=text, link=link)]


def remove_marquee_item(items: Sequence[MarqueeItem], item_id: str) -> list[MarqueeItem]:
    return [item for item in items if item.id != item_id]


def apply_marquee(items: Sequence[MarqueeItem], command: Command) -> list[MarqueeItem]:
    if isinstance(command, AddMarqueeItem):
        return add_marquee_item(items, command.text, command.link)
    if isinstance(command, RemoveMarqueeItem):
        return remove_marquee_item(items, command.item_id)
    raise CommandError(f"Unsupported command {type(command).__name__}")
