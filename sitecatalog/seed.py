"""
Sample catalog data and the seed-if-empty bootstrap.

Seeding is a check-then-insert with no server-side guard: two clients that
both load an empty catalog at the same time will both insert the samples.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from sitecatalog.types import (
    GalleryItem,
    GalleryItemDraft,
    Project,
    ProjectDraft,
    ProjectStatus,
    UnitDraft,
)

logger = logging.getLogger(__name__)

SAMPLE_PROJECTS: tuple[tuple[ProjectDraft, tuple[UnitDraft, ...]], ...] = (
    (
        ProjectDraft(
            title="Uhud Green Valley",
            location="Bashundhara R/A, Dhaka",
            price="Starting from 1.2 Crore BDT",
            description=(
                "A garden-facing residential tower with generous balconies, "
                "a rooftop terrace and covered parking for every apartment."
            ),
            status=ProjectStatus.ONGOING,
            image_url="/images/projects/green-valley.jpg",
            building_amenities=[
                "Rooftop garden",
                "Generator backup",
                "Two passenger lifts",
                "CCTV surveillance",
            ],
        ),
        (
            UnitDraft(
                name="Type A",
                size="1450 sqft",
                bedrooms=3,
                bathrooms=3,
                balconies=2,
                features=["South facing", "Servant room"],
            ),
            UnitDraft(
                name="Type B",
                size="1250 sqft",
                bedrooms=3,
                bathrooms=2,
                balconies=2,
                features=["Corner unit"],
            ),
        ),
    ),
    (
        ProjectDraft(
            title="Uhud Skyline Residence",
            location="Gulshan 2, Dhaka",
            price="Starting from 3.5 Crore BDT",
            description=(
                "Premium lake-view apartments with a double-height lobby, "
                "gymnasium and community hall."
            ),
            status=ProjectStatus.UPCOMING,
            image_url="/images/projects/skyline-residence.jpg",
            building_amenities=["Gymnasium", "Community hall", "Swimming pool"],
        ),
        (
            UnitDraft(
                name="Lake View Suite",
                size="2600 sqft",
                bedrooms=4,
                bathrooms=4,
                balconies=3,
                features=["Lake view", "Family lounge", "Maid's room"],
            ),
        ),
    ),
    (
        ProjectDraft(
            title="Uhud Heritage Tower",
            location="Dhanmondi, Dhaka",
            price="Sold out",
            description="A completed 12-storey residence handed over in 2022.",
            status=ProjectStatus.COMPLETED,
            image_url="/images/projects/heritage-tower.jpg",
            building_amenities=["Prayer room", "Children's play area"],
        ),
        (
            UnitDraft(
                name="Standard",
                size="1650 sqft",
                bedrooms=3,
                bathrooms=3,
                balconies=3,
            ),
        ),
    ),
    (
        ProjectDraft(
            title="Uhud Riverside Homes",
            location="Uttara Sector 15, Dhaka",
            price="Starting from 85 Lakh BDT",
            description="Compact family apartments close to the metro line.",
            status=ProjectStatus.UPCOMING,
            image_url="/images/projects/riverside-homes.jpg",
            building_amenities=["Lift", "Security booth"],
        ),
        (),
    ),
)

SAMPLE_GALLERY: tuple[GalleryItemDraft, ...] = (
    GalleryItemDraft(
        url="/images/gallery/green-valley-facade.jpg",
        caption="Uhud Green Valley facade",
        category="Exterior",
    ),
    GalleryItemDraft(
        url="/images/gallery/skyline-lobby.jpg",
        caption="Skyline Residence lobby render",
        category="Interior",
    ),
    GalleryItemDraft(
        url="/images/gallery/heritage-handover.jpg",
        caption="Heritage Tower handover ceremony",
        category="Events",
    ),
    GalleryItemDraft(
        url="/images/gallery/site-progress.jpg",
        caption="Construction progress at Green Valley",
        category="Construction",
    ),
)


@dataclass
class SeedResult:
    projects: list[Project] = field(default_factory=list)
    gallery: list[GalleryItem] = field(default_factory=list)
    seeded_projects: bool = False
    seeded_gallery: bool = False


def seed_if_empty(
    store, projects: Sequence[Project], gallery: Sequence[GalleryItem]
) -> SeedResult:
    """
    Insert the sample data into whichever of the two collections is empty.

    Args:
        store: The CatalogStore to write to.
        projects: The projects the caller just loaded.
        gallery: The gallery items the caller just loaded.

    Returns:
        A SeedResult holding the store's listing of each collection after
        seeding (or the caller's own listing when nothing was inserted).
    """
    result = SeedResult(projects=list(projects), gallery=list(gallery))

    if not projects:
        logger.info("Project catalog is empty; inserting %d samples", len(SAMPLE_PROJECTS))
        for draft, units in SAMPLE_PROJECTS:
            store.create_project(draft, units)
        result.projects = store.list_projects()
        result.seeded_projects = True

    if not gallery:
        logger.info("Gallery is empty; inserting %d samples", len(SAMPLE_GALLERY))
        for item in SAMPLE_GALLERY:
            store.add_gallery_item(item)
        result.gallery = store.list_gallery()
        result.seeded_gallery = True

    return result
