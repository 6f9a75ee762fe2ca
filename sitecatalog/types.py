"""
Catalog entities and the drafts used to create or update them.

Entities are what the stores hand back (they carry store-assigned ids and
timestamps). Drafts are what callers hand in; they only hold editable fields.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any, List, Optional, Type, TypeVar

from dacite import Config, from_dict

from sitecatalog.errors import ValidationError
from sitecatalog.json_utils import convert_keys

T = TypeVar("T")


class ProjectStatus(StrEnum):
    UPCOMING = "Upcoming"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"


_DACITE_CONFIG = Config(cast=[ProjectStatus], check_types=False)


def to_json(record: Any) -> dict:
    """Serialize a dataclass to its camelCase wire representation."""
    return convert_keys(asdict(record), "snake_to_camel")


def from_json(data_class: Type[T], data: dict) -> T:
    """Build a dataclass from its camelCase wire representation."""
    return from_dict(
        data_class=data_class,
        data=convert_keys(data, "camel_to_snake"),
        config=_DACITE_CONFIG,
    )


@dataclass(frozen=True)
class UnitDraft:
    """An apartment configuration as entered by the admin."""

    name: str
    size: str = ""
    bedrooms: int = 0
    bathrooms: int = 0
    balconies: int = 0
    features: List[str] = field(default_factory=list)
    floor_plan_image: Optional[str] = None

    def validate(self) -> None:
        for name in ("bedrooms", "bathrooms", "balconies"):
            if getattr(self, name) < 0:
                raise ValidationError(name, "must be a non-negative integer")


@dataclass(frozen=True)
class Unit:
    id: str
    project_id: str
    name: str
    size: str = ""
    bedrooms: int = 0
    bathrooms: int = 0
    balconies: int = 0
    features: List[str] = field(default_factory=list)
    floor_plan_image: Optional[str] = None


@dataclass(frozen=True)
class ProjectDraft:
    """Editable project fields. id, order and timestamps belong to the store."""

    title: str
    image_url: str
    location: str = ""
    price: str = ""
    description: str = ""
    status: ProjectStatus = ProjectStatus.UPCOMING
    logo_url: Optional[str] = None
    building_amenities: List[str] = field(default_factory=list)

    def validate(self) -> None:
        if not self.title:
            raise ValidationError("title", "a project needs a title")
        if not self.image_url:
            raise ValidationError("imageUrl", "a project needs an image")


@dataclass(frozen=True)
class Project:
    id: str
    title: str
    image_url: str
    order: int
    location: str = ""
    price: str = ""
    description: str = ""
    status: ProjectStatus = ProjectStatus.UPCOMING
    logo_url: Optional[str] = None
    building_amenities: List[str] = field(default_factory=list)
    units: List[Unit] = field(default_factory=list)
    created_at: Optional[float] = None
    updated_at: Optional[float] = None


@dataclass(frozen=True)
class GalleryItemDraft:
    url: str
    caption: Optional[str] = None
    category: Optional[str] = None

    def validate(self) -> None:
        if not self.url:
            raise ValidationError("url", "a gallery item needs an image url")


@dataclass(frozen=True)
class GalleryItem:
    id: str
    url: str
    caption: Optional[str] = None
    category: Optional[str] = None
    created_at: Optional[float] = None


@dataclass(frozen=True)
class MessageDraft:
    """A contact form submission."""

    name: str
    email: str
    phone: str
    message: str


@dataclass(frozen=True)
class ContactMessage:
    id: str
    name: str
    email: str
    phone: str
    message: str
    date: Optional[float] = None
    read: bool = False
