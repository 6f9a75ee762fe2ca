"""
In-memory catalog snapshot kept in step with a CatalogStore.

CatalogSync is what the admin UI and the public pages read from. It loads
every collection once, seeds an empty catalog, and afterwards patches its
snapshot from the store's responses: the snapshot only changes after the
store call succeeded, so a failed call leaves the last known good state in
place. Reordering is the exception: the local order changes first and the two
store writes that follow are best-effort.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Sequence

from sitecatalog.errors import CatalogError
from sitecatalog.ordering import Direction, plan_swap, sort_projects
from sitecatalog.seed import SeedResult, seed_if_empty
from sitecatalog.site_settings import (
    default_site_settings,
    load_site_settings,
    resolve_site_settings,
)
from sitecatalog.store import CatalogStore
from sitecatalog.types import (
    ContactMessage,
    GalleryItem,
    GalleryItemDraft,
    MessageDraft,
    Project,
    ProjectDraft,
    UnitDraft,
)

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load data from server"
COLLECTIONS = ("projects", "gallery", "messages", "settings")


class LoadState(StrEnum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class CatalogSnapshot:
    projects: tuple[Project, ...] = ()
    gallery: tuple[GalleryItem, ...] = ()
    messages: tuple[ContactMessage, ...] = ()
    settings: dict = field(default_factory=default_site_settings)


class CatalogSync:
    """
    Owns the current catalog snapshot and every mutation of it.

    Args:
        store: Backend the snapshot is synchronized with.
        auto_seed: Insert the sample projects/gallery when those collections
            are empty at load time.
    """

    def __init__(self, store: CatalogStore, *, auto_seed: bool = True):
        self.store = store
        self.auto_seed = auto_seed
        self.error: Optional[str] = None
        self.states: dict[str, LoadState] = {
            name: LoadState.UNINITIALIZED for name in COLLECTIONS
        }
        self._projects: list[Project] = []
        self._gallery: list[GalleryItem] = []
        self._messages: list[ContactMessage] = []
        self._settings: dict = default_site_settings()

    @property
    def state(self) -> LoadState:
        """Common state of all collections (they always move together)."""
        return self.states["projects"]

    @property
    def loading(self) -> bool:
        return self.state is LoadState.LOADING

    @property
    def projects(self) -> tuple[Project, ...]:
        return tuple(self._projects)

    @property
    def gallery(self) -> tuple[GalleryItem, ...]:
        return tuple(self._gallery)

    @property
    def messages(self) -> tuple[ContactMessage, ...]:
        return tuple(self._messages)

    @property
    def settings(self) -> dict:
        return resolve_site_settings(self._settings)

    def snapshot(self) -> CatalogSnapshot:
        return CatalogSnapshot(
            projects=self.projects,
            gallery=self.gallery,
            messages=self.messages,
            settings=self.settings,
        )

    def get_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self._projects if p.id == project_id), None)

    def _set_state(self, state: LoadState) -> None:
        for name in COLLECTIONS:
            self.states[name] = state

    def load(self) -> LoadState:
        """
        Fetch every collection, seed if needed and resolve settings.

        Failures are logged and recorded in `error`; the previous snapshot is
        kept so settings are never left undefined.
        """
        self._set_state(LoadState.LOADING)
        self.error = None
        try:
            with ThreadPoolExecutor(max_workers=len(COLLECTIONS)) as pool:
                projects_f = pool.submit(self.store.list_projects)
                gallery_f = pool.submit(self.store.list_gallery)
                messages_f = pool.submit(self.store.list_messages)
                settings_f = pool.submit(self.store.get_settings)
                projects = projects_f.result()
                gallery = gallery_f.result()
                messages = messages_f.result()
                persisted_settings = settings_f.result()

            if self.auto_seed:
                seeded = seed_if_empty(self.store, projects, gallery)
                projects, gallery = seeded.projects, seeded.gallery

            settings = load_site_settings(self.store, persisted_settings)
        except CatalogError:
            logger.exception("Error fetching catalog data")
            self.error = LOAD_ERROR_MESSAGE
            self._set_state(LoadState.ERROR)
            return self.state

        self._projects = sort_projects(projects)
        self._gallery = list(gallery)
        self._messages = list(messages)
        self._settings = settings
        self._set_state(LoadState.READY)
        logger.info(
            "Catalog loaded: %d projects, %d gallery items, %d messages",
            len(self._projects),
            len(self._gallery),
            len(self._messages),
        )
        return self.state

    def seed_database(self) -> SeedResult:
        """Insert sample data into whichever collections are currently empty."""
        result = seed_if_empty(self.store, self._projects, self._gallery)
        self._projects = sort_projects(result.projects)
        self._gallery = list(result.gallery)
        return result

    def add_project(
        self, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        draft.validate()
        for unit in units:
            unit.validate()
        created = self.store.create_project(draft, list(units))
        self._projects = sort_projects([*self._projects, created])
        return created

    def update_project(
        self, project_id: str, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        draft.validate()
        for unit in units:
            unit.validate()
        updated = self.store.update_project(project_id, draft, list(units))
        others = [p for p in self._projects if p.id != project_id]
        self._projects = sort_projects([*others, updated])
        return updated

    def delete_project(self, project_id: str) -> None:
        self.store.delete_project(project_id)
        self._projects = [p for p in self._projects if p.id != project_id]

    def reorder_project(self, project_id: str, direction: Direction | str) -> bool:
        """
        Move a project one step up or down.

        Returns:
            False when the project is already first (up) or last (down).
        """
        swap = plan_swap(self._projects, project_id, direction)
        if swap is None:
            return False

        swapped = {project.id: project for project in swap}
        self._projects = sort_projects(swapped.get(p.id, p) for p in self._projects)

        for project in swap:
            try:
                self.store.set_project_order(project.id, project.order)
            except CatalogError:
                logger.exception(
                    "Failed to persist order %d for project %s", project.order, project.id
                )
        return True

    def add_gallery_item(self, draft: GalleryItemDraft) -> GalleryItem:
        draft.validate()
        item = self.store.add_gallery_item(draft)
        self._gallery = [item, *self._gallery]
        return item

    def remove_gallery_item(self, item_id: str) -> None:
        self.store.remove_gallery_item(item_id)
        self._gallery = [item for item in self._gallery if item.id != item_id]

    def add_message(self, draft: MessageDraft) -> ContactMessage:
        message = self.store.add_message(draft)
        self._messages = [message, *self._messages]
        return message

    def delete_message(self, message_id: str) -> None:
        self.store.delete_message(message_id)
        self._messages = [m for m in self._messages if m.id != message_id]

    def update_settings(self, settings: dict) -> dict:
        stored = self.store.put_settings(settings)
        self._settings = resolve_site_settings(stored)
        return self.settings
