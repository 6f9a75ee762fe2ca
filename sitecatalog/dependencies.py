"""
Dependency wiring for the FastAPI app and for sync clients.
"""

from __future__ import annotations

from typing import Optional

import firebase_admin
from firebase_admin import firestore

from sitecatalog.config import Settings, get_settings
from sitecatalog.firestore_store import FirestoreCatalogStore
from sitecatalog.http_store import HttpCatalogStore
from sitecatalog.store import CatalogStore, InMemoryCatalogStore, SqlCatalogStore
from sitecatalog.sync import CatalogSync

_catalog_store: CatalogStore | None = None


def _firestore_client():
    try:
        firebase_admin.get_app()
    except ValueError:
        firebase_admin.initialize_app()
    return firestore.client()


def create_catalog_store(settings: Settings) -> CatalogStore:
    """Build the backend selected by `settings`."""
    if settings.use_in_memory_backends:
        return InMemoryCatalogStore()
    if settings.use_firestore:
        return FirestoreCatalogStore(_firestore_client())
    if settings.database_url:
        return SqlCatalogStore(settings.database_url)
    # Nothing configured: serve a throwaway catalog for local development.
    return InMemoryCatalogStore()


def get_catalog_store() -> CatalogStore:
    """
    Return a singleton catalog store so the API serves one shared catalog.
    """
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = create_catalog_store(get_settings())
    return _catalog_store


def reset_catalog_store() -> None:
    global _catalog_store
    _catalog_store = None


def build_catalog_sync(settings: Optional[Settings] = None) -> CatalogSync:
    """
    Build a sync client for the configured catalog.

    A configured CATALOG_API_URL takes precedence, so admin tools can sync
    against a remote deployment instead of opening the database directly.
    Without explicit `settings` the process-wide store is shared.
    """
    explicit = settings is not None
    settings = settings or get_settings()
    if settings.catalog_api_url:
        store: CatalogStore = HttpCatalogStore(
            settings.catalog_api_url, timeout=settings.catalog_api_timeout
        )
    elif explicit:
        store = create_catalog_store(settings)
    else:
        store = get_catalog_store()
    return CatalogSync(store, auto_seed=settings.auto_seed)
