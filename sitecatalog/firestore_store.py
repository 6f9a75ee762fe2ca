"""
Firestore-backed catalog store.

Documents are stored with camelCase field names. Units live in their own
`project_units` collection and point at their project through `projectId`,
mirroring the relational layout so both backends answer the same queries.
"""

from __future__ import annotations

import copy
import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import asdict, replace
from typing import Any, Callable, Iterator, Sequence

from dacite import DaciteError
from google.api_core import exceptions
from google.cloud.firestore_v1 import Query
from google.cloud.firestore_v1.base_query import FieldFilter

from sitecatalog.errors import NotFoundError, TransportError
from sitecatalog.json_utils import convert_keys
from sitecatalog.ordering import next_order
from sitecatalog.site_settings import SETTINGS_DOCUMENT_ID
from sitecatalog.types import (
    ContactMessage,
    GalleryItem,
    GalleryItemDraft,
    MessageDraft,
    Project,
    ProjectDraft,
    ProjectStatus,
    Unit,
    UnitDraft,
    from_json,
)

PROJECTS_COLLECTION = "projects"
UNITS_COLLECTION = "project_units"
GALLERY_COLLECTION = "gallery"
MESSAGES_COLLECTION = "messages"
SETTINGS_COLLECTION = "settings"


def _project_fields(draft: ProjectDraft) -> dict:
    fields = convert_keys(asdict(draft), "snake_to_camel")
    fields["status"] = ProjectStatus(draft.status).value
    return fields


class FirestoreCatalogStore:
    """
    Catalog store over a Firestore client.

    The client is anything exposing the `google.cloud.firestore.Client`
    collection/document API; production code passes
    `firebase_admin.firestore.client()`.
    """

    seeds_default_settings = True

    def __init__(self, client: Any, clock: Callable[[], float] = time.time):
        self.client = client
        self.clock = clock

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except exceptions.GoogleAPIError as exc:
            raise TransportError(operation, exc) from exc
        except (DaciteError, ValueError) as exc:
            # A stored document we cannot read, e.g. an unknown status.
            raise TransportError(operation, exc) from exc

    def _collection(self, name: str):
        return self.client.collection(name)

    def _units_query(self, project_id: str):
        return self._collection(UNITS_COLLECTION).where(
            filter=FieldFilter("projectId", "==", project_id)
        )

    @staticmethod
    def _to_unit(snapshot) -> Unit:
        data = snapshot.to_dict()
        data.pop("position", None)
        return from_json(Unit, {**data, "id": snapshot.id})

    @staticmethod
    def _to_project(doc_id: str, data: dict, units: Sequence[Unit]) -> Project:
        project = from_json(Project, {**data, "id": doc_id, "units": []})
        return replace(project, units=list(units))

    def _sorted_units(self, snapshots) -> list[Unit]:
        ordered = sorted(snapshots, key=lambda snap: snap.to_dict().get("position", 0))
        return [self._to_unit(snap) for snap in ordered]

    def _insert_units(self, project_id: str, units: Sequence[UnitDraft]) -> list[Unit]:
        created = []
        for position, draft in enumerate(units):
            data = convert_keys(asdict(draft), "snake_to_camel")
            data["projectId"] = project_id
            data["position"] = position
            _, ref = self._collection(UNITS_COLLECTION).add(data)
            created.append(Unit(id=ref.id, project_id=project_id, **asdict(draft)))
        return created

    def _delete_units(self, project_id: str) -> None:
        for snapshot in self._units_query(project_id).stream():
            snapshot.reference.delete()

    def _require(self, operation: str, collection: str, entity: str, doc_id: str):
        ref = self._collection(collection).document(doc_id)
        snapshot = ref.get()
        if not snapshot.exists:
            raise NotFoundError(operation, entity, doc_id)
        return ref, snapshot

    def list_projects(self) -> list[Project]:
        with self._translate_errors("list_projects"):
            snapshots = list(
                self._collection(PROJECTS_COLLECTION)
                .order_by("order", direction=Query.ASCENDING)
                .stream()
            )
            units_by_project = defaultdict(list)
            for unit in self._collection(UNITS_COLLECTION).stream():
                units_by_project[unit.to_dict().get("projectId")].append(unit)
            return [
                self._to_project(
                    snap.id,
                    snap.to_dict(),
                    self._sorted_units(units_by_project[snap.id]),
                )
                for snap in snapshots
            ]

    def list_units(self, project_id: str) -> list[Unit]:
        with self._translate_errors("list_units"):
            return self._sorted_units(self._units_query(project_id).stream())

    def create_project(
        self, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        now = self.clock()
        with self._translate_errors("create_project"):
            last = (
                self._collection(PROJECTS_COLLECTION)
                .order_by("order", direction=Query.DESCENDING)
                .limit(1)
                .stream()
            )
            data = _project_fields(draft)
            data["order"] = next_order(snap.to_dict().get("order") for snap in last)
            data["createdAt"] = now
            data["updatedAt"] = now
            _, ref = self._collection(PROJECTS_COLLECTION).add(data)
            created_units = self._insert_units(ref.id, units)
            return self._to_project(ref.id, data, created_units)

    def update_project(
        self, project_id: str, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        with self._translate_errors("update_project"):
            ref, snapshot = self._require(
                "update_project", PROJECTS_COLLECTION, "project", project_id
            )
            fields = _project_fields(draft)
            fields["updatedAt"] = self.clock()
            ref.update(fields)
            self._delete_units(project_id)
            created_units = self._insert_units(project_id, units)
            return self._to_project(
                project_id, {**snapshot.to_dict(), **fields}, created_units
            )

    def set_project_order(self, project_id: str, order: int) -> None:
        with self._translate_errors("set_project_order"):
            ref, _ = self._require(
                "set_project_order", PROJECTS_COLLECTION, "project", project_id
            )
            ref.update({"order": order})

    def delete_project(self, project_id: str) -> None:
        with self._translate_errors("delete_project"):
            ref, _ = self._require(
                "delete_project", PROJECTS_COLLECTION, "project", project_id
            )
            self._delete_units(project_id)
            ref.delete()

    def list_gallery(self) -> list[GalleryItem]:
        with self._translate_errors("list_gallery"):
            snapshots = (
                self._collection(GALLERY_COLLECTION)
                .order_by("createdAt", direction=Query.DESCENDING)
                .stream()
            )
            return [
                from_json(GalleryItem, {**snap.to_dict(), "id": snap.id})
                for snap in snapshots
            ]

    def add_gallery_item(self, draft: GalleryItemDraft) -> GalleryItem:
        data = convert_keys(asdict(draft), "snake_to_camel")
        data["createdAt"] = self.clock()
        with self._translate_errors("add_gallery_item"):
            _, ref = self._collection(GALLERY_COLLECTION).add(data)
        return from_json(GalleryItem, {**data, "id": ref.id})

    def remove_gallery_item(self, item_id: str) -> None:
        with self._translate_errors("remove_gallery_item"):
            ref, _ = self._require(
                "remove_gallery_item", GALLERY_COLLECTION, "gallery item", item_id
            )
            ref.delete()

    def list_messages(self) -> list[ContactMessage]:
        with self._translate_errors("list_messages"):
            snapshots = (
                self._collection(MESSAGES_COLLECTION)
                .order_by("date", direction=Query.DESCENDING)
                .stream()
            )
            return [
                from_json(ContactMessage, {**snap.to_dict(), "id": snap.id})
                for snap in snapshots
            ]

    def add_message(self, draft: MessageDraft) -> ContactMessage:
        data = convert_keys(asdict(draft), "snake_to_camel")
        data["date"] = self.clock()
        data["read"] = False
        with self._translate_errors("add_message"):
            _, ref = self._collection(MESSAGES_COLLECTION).add(data)
        return from_json(ContactMessage, {**data, "id": ref.id})

    def delete_message(self, message_id: str) -> None:
        with self._translate_errors("delete_message"):
            ref, _ = self._require(
                "delete_message", MESSAGES_COLLECTION, "message", message_id
            )
            ref.delete()

    def _settings_ref(self):
        return self._collection(SETTINGS_COLLECTION).document(SETTINGS_DOCUMENT_ID)

    def get_settings(self) -> dict:
        with self._translate_errors("get_settings"):
            snapshot = self._settings_ref().get()
        if not snapshot.exists:
            return {}
        return copy.deepcopy((snapshot.to_dict() or {}).get("settings") or {})

    def put_settings(self, value: dict) -> dict:
        with self._translate_errors("put_settings"):
            self._settings_ref().set(
                {"settings": copy.deepcopy(value), "updatedAt": self.clock()}
            )
        return copy.deepcopy(value)
