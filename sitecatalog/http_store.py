"""
Catalog store that talks to a remote catalog API over HTTP.

This is the store a sync client uses when it runs away from the database,
e.g. an admin tool pointed at the deployed API.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Callable, Optional, Sequence

import requests
from dacite import DaciteError

from sitecatalog.errors import NotFoundError, TransportError, ValidationError
from sitecatalog.types import (
    ContactMessage,
    GalleryItem,
    GalleryItemDraft,
    MessageDraft,
    Project,
    ProjectDraft,
    Unit,
    UnitDraft,
    from_json,
    to_json,
)


def _project_payload(draft: ProjectDraft, units: Sequence[UnitDraft]) -> dict:
    payload = to_json(draft)
    payload["units"] = [to_json(unit) for unit in units]
    return payload


def _record(data_class):
    return lambda data: from_json(data_class, data)


def _records(data_class):
    return lambda data: [from_json(data_class, item) for item in data]


def _validation_detail(response) -> tuple[str, str]:
    try:
        detail = response.json().get("detail")
    except ValueError:
        return "request", response.text
    if isinstance(detail, list) and detail:
        first = detail[0]
        location = [str(part) for part in first.get("loc", []) if part != "body"]
        return ".".join(location) or "request", first.get("msg", "invalid value")
    return "request", str(detail)


class HttpCatalogStore:
    """
    JSON-over-HTTP client for the catalog API routes.

    Default settings are never written back from here: the server's
    `GET /settings` route does that for stores that need it.
    """

    seeds_default_settings = False

    def __init__(
        self,
        base_url: str,
        *,
        timeout: Optional[float] = None,
        session: Optional[Any] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        json: Any = None,
        entity: Optional[str] = None,
        entity_id: Optional[str] = None,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        try:
            response = self.session.request(
                method, f"{self.base_url}{path}", json=json, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise TransportError(operation, exc) from exc

        if response.status_code == 404 and entity:
            raise NotFoundError(operation, entity, entity_id or "")
        if response.status_code == 422:
            raise ValidationError(*_validation_detail(response))
        if response.status_code >= 400:
            raise TransportError(
                operation, f"HTTP {response.status_code}: {response.text}"
            )
        try:
            data = response.json()
            return parse(data) if parse is not None else data
        except (ValueError, TypeError, DaciteError) as exc:
            # Non-JSON bodies (e.g. a gateway error page) or records we cannot read.
            raise TransportError(operation, exc) from exc

    def list_projects(self) -> list[Project]:
        return self._request(
            "list_projects", "GET", "/projects", parse=_records(Project)
        )

    def list_units(self, project_id: str) -> list[Unit]:
        return self._request(
            "list_units", "GET", f"/projects/{project_id}/units", parse=_records(Unit)
        )

    def create_project(
        self, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        return self._request(
            "create_project",
            "POST",
            "/projects",
            json=_project_payload(draft, units),
            parse=_record(Project),
        )

    def update_project(
        self, project_id: str, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        return self._request(
            "update_project",
            "PUT",
            f"/projects/{project_id}",
            json=_project_payload(draft, units),
            entity="project",
            entity_id=project_id,
            parse=_record(Project),
        )

    def set_project_order(self, project_id: str, order: int) -> None:
        self._request(
            "set_project_order",
            "PUT",
            f"/projects/{project_id}/order",
            json={"order": order},
            entity="project",
            entity_id=project_id,
        )

    def delete_project(self, project_id: str) -> None:
        self._request(
            "delete_project",
            "DELETE",
            f"/projects/{project_id}",
            entity="project",
            entity_id=project_id,
        )

    def list_gallery(self) -> list[GalleryItem]:
        return self._request(
            "list_gallery", "GET", "/gallery", parse=_records(GalleryItem)
        )

    def add_gallery_item(self, draft: GalleryItemDraft) -> GalleryItem:
        return self._request(
            "add_gallery_item",
            "POST",
            "/gallery",
            json=to_json(draft),
            parse=_record(GalleryItem),
        )

    def remove_gallery_item(self, item_id: str) -> None:
        self._request(
            "remove_gallery_item",
            "DELETE",
            f"/gallery/{item_id}",
            entity="gallery item",
            entity_id=item_id,
        )

    def list_messages(self) -> list[ContactMessage]:
        return self._request(
            "list_messages", "GET", "/messages", parse=_records(ContactMessage)
        )

    def add_message(self, draft: MessageDraft) -> ContactMessage:
        return self._request(
            "add_message",
            "POST",
            "/messages",
            json=asdict(draft),
            parse=_record(ContactMessage),
        )

    def delete_message(self, message_id: str) -> None:
        self._request(
            "delete_message",
            "DELETE",
            f"/messages/{message_id}",
            entity="message",
            entity_id=message_id,
        )

    def get_settings(self) -> dict:
        return self._request("get_settings", "GET", "/settings") or {}

    def put_settings(self, value: dict) -> dict:
        return self._request("put_settings", "POST", "/settings", json=value)
