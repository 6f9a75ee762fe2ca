"""
Pydantic schemas for the catalog API.

Field names follow the camelCase wire format the site's frontend uses.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from sitecatalog.types import (
    GalleryItemDraft,
    MessageDraft,
    ProjectDraft,
    ProjectStatus,
    UnitDraft,
)


class UnitPayload(BaseModel):
    name: str
    size: str = ""
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    balconies: int = Field(default=0, ge=0)
    features: list[str] = Field(default_factory=list)
    floorPlanImage: Optional[str] = None

    def to_draft(self) -> UnitDraft:
        return UnitDraft(
            name=self.name,
            size=self.size,
            bedrooms=self.bedrooms,
            bathrooms=self.bathrooms,
            balconies=self.balconies,
            features=list(self.features),
            floor_plan_image=self.floorPlanImage or None,
        )


class ProjectPayload(BaseModel):
    """Editable project fields; id, order and timestamps sent by clients are ignored."""

    title: str = Field(..., min_length=1)
    imageUrl: str = Field(..., min_length=1)
    location: str = ""
    price: str = ""
    description: str = ""
    status: ProjectStatus = ProjectStatus.UPCOMING
    logoUrl: Optional[str] = None
    buildingAmenities: list[str] = Field(default_factory=list)
    units: list[UnitPayload] = Field(default_factory=list)

    def to_draft(self) -> ProjectDraft:
        return ProjectDraft(
            title=self.title,
            image_url=self.imageUrl,
            location=self.location,
            price=self.price,
            description=self.description,
            status=self.status,
            logo_url=self.logoUrl or None,
            building_amenities=list(self.buildingAmenities),
        )

    def unit_drafts(self) -> list[UnitDraft]:
        return [unit.to_draft() for unit in self.units]


class UnitResponse(BaseModel):
    id: str
    projectId: str
    name: str
    size: str
    bedrooms: int
    bathrooms: int
    balconies: int
    features: list[str]
    floorPlanImage: Optional[str] = None


class ProjectResponse(BaseModel):
    id: str
    title: str
    imageUrl: str
    order: int
    location: str
    price: str
    description: str
    status: ProjectStatus
    logoUrl: Optional[str] = None
    buildingAmenities: list[str]
    units: list[UnitResponse]
    createdAt: Optional[float] = None
    updatedAt: Optional[float] = None


class OrderPayload(BaseModel):
    order: int = Field(..., ge=0)


class GalleryItemPayload(BaseModel):
    url: str = Field(..., min_length=1)
    caption: Optional[str] = None
    category: Optional[str] = None

    def to_draft(self) -> GalleryItemDraft:
        return GalleryItemDraft(url=self.url, caption=self.caption, category=self.category)


class GalleryItemResponse(BaseModel):
    id: str
    url: str
    caption: Optional[str] = None
    category: Optional[str] = None
    createdAt: Optional[float] = None


class MessagePayload(BaseModel):
    name: str = Field(..., max_length=256)
    email: str = Field(..., max_length=256)
    phone: str = Field(..., max_length=64)
    message: str = Field(..., max_length=5000)

    def to_draft(self) -> MessageDraft:
        return MessageDraft(
            name=self.name, email=self.email, phone=self.phone, message=self.message
        )


class MessageResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    message: str
    date: Optional[float] = None
    read: bool = False


class SuccessResponse(BaseModel):
    success: Literal[True] = True


class HealthResponse(BaseModel):
    status: Literal["ok"]
    timestamp: str


class PingResponse(HealthResponse):
    message: str
    env: dict[str, bool]
