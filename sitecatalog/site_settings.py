"""
Default site settings and the resolver that fills gaps in persisted settings.

Persisted settings are merged over the defaults one group at a time: a group
present in the persisted document (e.g. `contact`) replaces the default group
whole, even when it only sets some of the group's fields.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Key of the single settings record in every backend.
SETTINGS_RECORD_ID = 1
SETTINGS_DOCUMENT_ID = "site"

DEFAULT_SITE_SETTINGS: dict[str, Any] = {
    "contact": {"phone": "", "whatsapp": "", "email": "", "address": ""},
    "social": {"facebook": "", "twitter": "", "instagram": "", "linkedin": ""},
    "content": {
        "aboutUsShort": "",
        "aboutUsFull": "",
        "privacyPolicy": "",
        "termsOfService": "",
    },
    "homePage": {
        "heroTitle": "",
        "heroSubtitle": "",
        "heroImage": "",
        "showWhyChooseUs": True,
    },
    "analytics": {"googleSearchConsole": "", "facebookPixel": ""},
    "seo": {"siteTitle": "", "metaDescription": "", "favicon": ""},
}


def default_site_settings() -> dict[str, Any]:
    return copy.deepcopy(DEFAULT_SITE_SETTINGS)


def resolve_site_settings(persisted: Optional[dict[str, Any]]) -> dict[str, Any]:
    """
    Return a fully populated settings document.

    Args:
        persisted: The raw stored settings, `{}` or None when nothing is stored.

    Returns:
        The defaults when nothing is stored; otherwise the defaults with every
        non-null top-level key of `persisted` laid over them.
    """
    resolved = default_site_settings()
    if not persisted:
        return resolved
    for key, value in persisted.items():
        if value is not None:
            resolved[key] = copy.deepcopy(value)
    return resolved


def load_site_settings(store, persisted: Optional[dict[str, Any]] = None) -> dict:
    """
    Fetch (unless `persisted` is given) and resolve the stored settings.

    Stores flagged with `seeds_default_settings` get the defaults written back
    when nothing is stored yet, so later reads find a record.
    """
    if persisted is None:
        persisted = store.get_settings()
    resolved = resolve_site_settings(persisted)
    if not persisted and getattr(store, "seeds_default_settings", False):
        logger.info("No site settings stored; writing defaults")
        store.put_settings(resolved)
    return resolved
