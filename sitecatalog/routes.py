"""
HTTP routes for the catalog API.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends, HTTPException

from sitecatalog.config import get_settings
from sitecatalog.dependencies import get_catalog_store
from sitecatalog.errors import NotFoundError
from sitecatalog.schemas import (
    GalleryItemPayload,
    GalleryItemResponse,
    HealthResponse,
    MessagePayload,
    MessageResponse,
    OrderPayload,
    PingResponse,
    ProjectPayload,
    ProjectResponse,
    SuccessResponse,
    UnitResponse,
)
from sitecatalog.site_settings import load_site_settings
from sitecatalog.store import CatalogStore
from sitecatalog.types import to_json

logger = logging.getLogger(__name__)

router = APIRouter()


def _not_found(exc: NotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{exc.entity.capitalize()} not found")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/ping", response_model=PingResponse)
def ping():
    settings = get_settings()
    return PingResponse(
        status="ok",
        message="API is reachable",
        timestamp=_now_iso(),
        env={
            "hasDbUrl": bool(settings.database_url),
            "usesFirestore": settings.use_firestore,
        },
    )


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", timestamp=_now_iso())


@router.get("/projects", response_model=list[ProjectResponse])
def list_projects(store: CatalogStore = Depends(get_catalog_store)):
    return [to_json(project) for project in store.list_projects()]


@router.post("/projects", response_model=ProjectResponse)
def create_project(
    payload: ProjectPayload, store: CatalogStore = Depends(get_catalog_store)
):
    project = store.create_project(payload.to_draft(), payload.unit_drafts())
    logger.info("Created project %s at order %d", project.id, project.order)
    return to_json(project)


@router.put("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    payload: ProjectPayload,
    store: CatalogStore = Depends(get_catalog_store),
):
    try:
        project = store.update_project(
            project_id, payload.to_draft(), payload.unit_drafts()
        )
    except NotFoundError as exc:
        raise _not_found(exc)
    return to_json(project)


@router.put("/projects/{project_id}/order", response_model=SuccessResponse)
def set_project_order(
    project_id: str,
    payload: OrderPayload,
    store: CatalogStore = Depends(get_catalog_store),
):
    try:
        store.set_project_order(project_id, payload.order)
    except NotFoundError as exc:
        raise _not_found(exc)
    return SuccessResponse()


@router.delete("/projects/{project_id}", response_model=SuccessResponse)
def delete_project(project_id: str, store: CatalogStore = Depends(get_catalog_store)):
    try:
        store.delete_project(project_id)
    except NotFoundError as exc:
        raise _not_found(exc)
    return SuccessResponse()


@router.get("/projects/{project_id}/units", response_model=list[UnitResponse])
def list_units(project_id: str, store: CatalogStore = Depends(get_catalog_store)):
    return [to_json(unit) for unit in store.list_units(project_id)]


@router.get("/gallery", response_model=list[GalleryItemResponse])
def list_gallery(store: CatalogStore = Depends(get_catalog_store)):
    return [to_json(item) for item in store.list_gallery()]


@router.post("/gallery", response_model=GalleryItemResponse)
def add_gallery_item(
    payload: GalleryItemPayload, store: CatalogStore = Depends(get_catalog_store)
):
    return to_json(store.add_gallery_item(payload.to_draft()))


@router.delete("/gallery/{item_id}", response_model=SuccessResponse)
def remove_gallery_item(item_id: str, store: CatalogStore = Depends(get_catalog_store)):
    try:
        store.remove_gallery_item(item_id)
    except NotFoundError as exc:
        raise _not_found(exc)
    return SuccessResponse()


@router.get("/messages", response_model=list[MessageResponse])
def list_messages(store: CatalogStore = Depends(get_catalog_store)):
    return [to_json(message) for message in store.list_messages()]


@router.post("/messages", response_model=MessageResponse)
def add_message(
    payload: MessagePayload, store: CatalogStore = Depends(get_catalog_store)
):
    return to_json(store.add_message(payload.to_draft()))


@router.delete("/messages/{message_id}", response_model=SuccessResponse)
def delete_message(message_id: str, store: CatalogStore = Depends(get_catalog_store)):
    try:
        store.delete_message(message_id)
    except NotFoundError as exc:
        raise _not_found(exc)
    return SuccessResponse()


@router.get("/settings", response_model=dict)
def get_site_settings(store: CatalogStore = Depends(get_catalog_store)):
    """
    Return the raw stored settings; clients resolve them against defaults.

    Stores that keep a settings record get the defaults written on the first
    read, so remote clients see the same record local ones would.
    """
    persisted = store.get_settings()
    if not persisted and store.seeds_default_settings:
        persisted = load_site_settings(store, persisted)
    return persisted


@router.post("/settings", response_model=dict)
def put_site_settings(
    payload: dict = Body(...), store: CatalogStore = Depends(get_catalog_store)
):
    return store.put_settings(payload)
