"""
Catalog store contract with an in-memory and a SQLAlchemy implementation.

Every store, including the Firestore and HTTP ones in sibling modules, must
behave the same way: projects are listed by ascending `order`, a project's
units are replaced as a group, gallery items and messages are listed newest
first, and a missing target id raises NotFoundError.
"""

from __future__ import annotations

import copy
import time
import uuid
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import asdict, replace
from typing import Callable, Dict, Iterator, Optional, Protocol, Sequence

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    ForeignKey,
    Integer,
    String,
    create_engine,
    delete,
    func,
    select,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from sitecatalog.errors import NotFoundError, TransportError
from sitecatalog.ordering import next_order, sort_projects
from sitecatalog.site_settings import SETTINGS_RECORD_ID
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
)

Clock = Callable[[], float]


class CatalogStore(Protocol):
    """Interface every catalog backend implements."""

    # True when the backend should get default settings written back on
    # first read.
    seeds_default_settings: bool

    def list_projects(self) -> list[Project]:
        ...

    def list_units(self, project_id: str) -> list[Unit]:
        ...

    def create_project(
        self, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        ...

    def update_project(
        self, project_id: str, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        ...

    def set_project_order(self, project_id: str, order: int) -> None:
        ...

    def delete_project(self, project_id: str) -> None:
        ...

    def list_gallery(self) -> list[GalleryItem]:
        ...

    def add_gallery_item(self, draft: GalleryItemDraft) -> GalleryItem:
        ...

    def remove_gallery_item(self, item_id: str) -> None:
        ...

    def list_messages(self) -> list[ContactMessage]:
        ...

    def add_message(self, draft: MessageDraft) -> ContactMessage:
        ...

    def delete_message(self, message_id: str) -> None:
        ...

    def get_settings(self) -> dict:
        ...

    def put_settings(self, value: dict) -> dict:
        ...


def _newest_first(records, key):
    # Reversing first keeps later inserts ahead of earlier ones on equal keys.
    return sorted(reversed(list(records)), key=key, reverse=True)


class InMemoryCatalogStore:
    """Simple in-memory catalog for development and tests."""

    seeds_default_settings = False

    def __init__(self, clock: Clock = time.time):
        self.clock = clock
        self.projects: Dict[str, Project] = {}
        self.units: Dict[str, Unit] = {}
        self.gallery: Dict[str, GalleryItem] = {}
        self.messages: Dict[str, ContactMessage] = {}
        self.site_settings: dict = {}
        self.settings_updated_at: Optional[float] = None

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.projects.clear()
        self.units.clear()
        self.gallery.clear()
        self.messages.clear()
        self.site_settings = {}
        self.settings_updated_at = None

    def _with_units(self, project: Project) -> Project:
        return replace(project, units=self.list_units(project.id))

    def _insert_units(self, project_id: str, units: Sequence[UnitDraft]) -> None:
        for draft in units:
            unit = Unit(id=uuid.uuid4().hex, project_id=project_id, **asdict(draft))
            self.units[unit.id] = unit

    def _require_project(self, operation: str, project_id: str) -> Project:
        project = self.projects.get(project_id)
        if project is None:
            raise NotFoundError(operation, "project", project_id)
        return project

    def list_projects(self) -> list[Project]:
        return [self._with_units(p) for p in sort_projects(self.projects.values())]

    def list_units(self, project_id: str) -> list[Unit]:
        return [unit for unit in self.units.values() if unit.project_id == project_id]

    def create_project(
        self, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        now = self.clock()
        project = Project(
            id=uuid.uuid4().hex,
            order=next_order(p.order for p in self.projects.values()),
            created_at=now,
            updated_at=now,
            **asdict(draft),
        )
        self.projects[project.id] = project
        self._insert_units(project.id, units)
        return self._with_units(project)

    def update_project(
        self, project_id: str, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        project = self._require_project("update_project", project_id)
        project = replace(project, updated_at=self.clock(), **asdict(draft))
        self.projects[project_id] = project
        for unit in self.list_units(project_id):
            del self.units[unit.id]
        self._insert_units(project_id, units)
        return self._with_units(project)

    def set_project_order(self, project_id: str, order: int) -> None:
        project = self._require_project("set_project_order", project_id)
        self.projects[project_id] = replace(project, order=order)

    def delete_project(self, project_id: str) -> None:
        self._require_project("delete_project", project_id)
        for unit in self.list_units(project_id):
            del self.units[unit.id]
        del self.projects[project_id]

    def list_gallery(self) -> list[GalleryItem]:
        return _newest_first(self.gallery.values(), key=lambda i: i.created_at or 0)

    def add_gallery_item(self, draft: GalleryItemDraft) -> GalleryItem:
        item = GalleryItem(id=uuid.uuid4().hex, created_at=self.clock(), **asdict(draft))
        self.gallery[item.id] = item
        return item

    def remove_gallery_item(self, item_id: str) -> None:
        if self.gallery.pop(item_id, None) is None:
            raise NotFoundError("remove_gallery_item", "gallery item", item_id)

    def list_messages(self) -> list[ContactMessage]:
        return _newest_first(self.messages.values(), key=lambda m: m.date or 0)

    def add_message(self, draft: MessageDraft) -> ContactMessage:
        message = ContactMessage(id=uuid.uuid4().hex, date=self.clock(), **asdict(draft))
        self.messages[message.id] = message
        return message

    def delete_message(self, message_id: str) -> None:
        if self.messages.pop(message_id, None) is None:
            raise NotFoundError("delete_message", "message", message_id)

    def get_settings(self) -> dict:
        return copy.deepcopy(self.site_settings)

    def put_settings(self, value: dict) -> dict:
        self.site_settings = copy.deepcopy(value)
        self.settings_updated_at = self.clock()
        return copy.deepcopy(self.site_settings)


class SqlCatalogStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).

    Units live in their own `project_units` table keyed by `projectId`. A
    project write and the unit writes that follow it are committed
    separately, so a failure between them leaves the project persisted.
    """

    seeds_default_settings = False

    def __init__(self, database_url: str, clock: Clock = time.time):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlCatalogStore")
        self.clock = clock
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            raise TransportError(operation, exc) from exc
        except ValueError as exc:
            # A stored row we cannot read, e.g. an unknown status.
            raise TransportError(operation, exc) from exc

    def _to_unit(self, row: "UnitRow") -> Unit:
        return Unit(
            id=row.id,
            project_id=row.project_id,
            name=row.name,
            size=row.size,
            bedrooms=row.bedrooms,
            bathrooms=row.bathrooms,
            balconies=row.balconies,
            features=list(row.features or []),
            floor_plan_image=row.floor_plan_image,
        )

    def _to_project(self, row: "ProjectRow", unit_rows: Sequence["UnitRow"]) -> Project:
        return Project(
            id=row.id,
            title=row.title,
            image_url=row.image_url,
            order=row.order,
            location=row.location,
            price=row.price or "",
            description=row.description,
            status=ProjectStatus(row.status),
            logo_url=row.logo_url,
            building_amenities=list(row.building_amenities or []),
            units=[self._to_unit(unit) for unit in unit_rows],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _project_columns(draft: ProjectDraft) -> dict:
        return {
            "title": draft.title,
            "image_url": draft.image_url,
            "location": draft.location,
            "price": draft.price,
            "description": draft.description,
            "status": ProjectStatus(draft.status).value,
            "logo_url": draft.logo_url,
            "building_amenities": list(draft.building_amenities),
        }

    @staticmethod
    def _unit_rows(project_id: str, units: Sequence[UnitDraft]) -> list["UnitRow"]:
        return [
            UnitRow(
                id=uuid.uuid4().hex,
                project_id=project_id,
                position=position,
                name=unit.name,
                size=unit.size,
                bedrooms=unit.bedrooms,
                bathrooms=unit.bathrooms,
                balconies=unit.balconies,
                features=list(unit.features),
                floor_plan_image=unit.floor_plan_image,
            )
            for position, unit in enumerate(units)
        ]

    def _select_units(self, session: Session, project_id: str) -> list["UnitRow"]:
        stmt = (
            select(UnitRow)
            .where(UnitRow.project_id == project_id)
            .order_by(UnitRow.position.asc())
        )
        return list(session.execute(stmt).scalars())

    def list_projects(self) -> list[Project]:
        with self._translate_errors("list_projects"), self.Session() as session:
            rows = session.execute(
                select(ProjectRow).order_by(ProjectRow.order.asc())
            ).scalars().all()
            units_by_project = defaultdict(list)
            for unit in session.execute(
                select(UnitRow).order_by(UnitRow.position.asc())
            ).scalars():
                units_by_project[unit.project_id].append(unit)
            return [self._to_project(row, units_by_project[row.id]) for row in rows]

    def list_units(self, project_id: str) -> list[Unit]:
        with self._translate_errors("list_units"), self.Session() as session:
            return [self._to_unit(row) for row in self._select_units(session, project_id)]

    def create_project(
        self, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        now = self.clock()
        with self._translate_errors("create_project"), self.Session() as session:
            current_max = session.execute(select(func.max(ProjectRow.order))).scalar()
            row = ProjectRow(
                id=uuid.uuid4().hex,
                order=next_order([current_max]),
                created_at=now,
                updated_at=now,
                **self._project_columns(draft),
            )
            session.add(row)
            session.commit()

            unit_rows = self._unit_rows(row.id, units)
            session.add_all(unit_rows)
            session.commit()
            return self._to_project(row, unit_rows)

    def update_project(
        self, project_id: str, draft: ProjectDraft, units: Sequence[UnitDraft] = ()
    ) -> Project:
        with self._translate_errors("update_project"), self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                raise NotFoundError("update_project", "project", project_id)
            for key, value in self._project_columns(draft).items():
                setattr(row, key, value)
            row.updated_at = self.clock()
            session.commit()

            session.execute(delete(UnitRow).where(UnitRow.project_id == project_id))
            unit_rows = self._unit_rows(project_id, units)
            session.add_all(unit_rows)
            session.commit()
            return self._to_project(row, unit_rows)

    def set_project_order(self, project_id: str, order: int) -> None:
        with self._translate_errors("set_project_order"), self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                raise NotFoundError("set_project_order", "project", project_id)
            row.order = order
            session.commit()

    def delete_project(self, project_id: str) -> None:
        with self._translate_errors("delete_project"), self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                raise NotFoundError("delete_project", "project", project_id)
            session.execute(delete(UnitRow).where(UnitRow.project_id == project_id))
            session.delete(row)
            session.commit()

    def list_gallery(self) -> list[GalleryItem]:
        with self._translate_errors("list_gallery"), self.Session() as session:
            rows = session.execute(
                select(GalleryItemRow).order_by(GalleryItemRow.created_at.desc())
            ).scalars()
            return [
                GalleryItem(
                    id=row.id,
                    url=row.url,
                    caption=row.caption,
                    category=row.category,
                    created_at=row.created_at,
                )
                for row in rows
            ]

    def add_gallery_item(self, draft: GalleryItemDraft) -> GalleryItem:
        item = GalleryItem(id=uuid.uuid4().hex, created_at=self.clock(), **asdict(draft))
        with self._translate_errors("add_gallery_item"), self.Session() as session:
            session.add(GalleryItemRow(**asdict(item)))
            session.commit()
        return item

    def remove_gallery_item(self, item_id: str) -> None:
        with self._translate_errors("remove_gallery_item"), self.Session() as session:
            row = session.get(GalleryItemRow, item_id)
            if not row:
                raise NotFoundError("remove_gallery_item", "gallery item", item_id)
            session.delete(row)
            session.commit()

    def list_messages(self) -> list[ContactMessage]:
        with self._translate_errors("list_messages"), self.Session() as session:
            rows = session.execute(
                select(MessageRow).order_by(MessageRow.date.desc())
            ).scalars()
            return [
                ContactMessage(
                    id=row.id,
                    name=row.name,
                    email=row.email,
                    phone=row.phone,
                    message=row.message,
                    date=row.date,
                    read=bool(row.read),
                )
                for row in rows
            ]

    def add_message(self, draft: MessageDraft) -> ContactMessage:
        message = ContactMessage(id=uuid.uuid4().hex, date=self.clock(), **asdict(draft))
        with self._translate_errors("add_message"), self.Session() as session:
            session.add(MessageRow(**asdict(message)))
            session.commit()
        return message

    def delete_message(self, message_id: str) -> None:
        with self._translate_errors("delete_message"), self.Session() as session:
            row = session.get(MessageRow, message_id)
            if not row:
                raise NotFoundError("delete_message", "message", message_id)
            session.delete(row)
            session.commit()

    def get_settings(self) -> dict:
        with self._translate_errors("get_settings"), self.Session() as session:
            row = session.get(SiteSettingsRow, SETTINGS_RECORD_ID)
            return copy.deepcopy(row.settings) if row else {}

    def put_settings(self, value: dict) -> dict:
        with self._translate_errors("put_settings"), self.Session() as session:
            row = session.get(SiteSettingsRow, SETTINGS_RECORD_ID)
            if row:
                row.settings = copy.deepcopy(value)
                row.updated_at = self.clock()
            else:
                row = SiteSettingsRow(
                    id=SETTINGS_RECORD_ID,
                    settings=copy.deepcopy(value),
                    updated_at=self.clock(),
                )
                session.add(row)
            session.commit()
            return copy.deepcopy(row.settings)


Base = declarative_base()


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    location = Column(String, nullable=False, default="")
    price = Column(String, nullable=True)
    description = Column(String, nullable=False, default="")
    status = Column(String, nullable=False)
    image_url = Column("imageUrl", String, nullable=False)
    logo_url = Column("logoUrl", String, nullable=True)
    building_amenities = Column("buildingAmenities", JSON, nullable=False, default=list)
    order = Column("order", Integer, nullable=False, default=0, index=True)
    created_at = Column("createdAt", Float, nullable=False)
    updated_at = Column("updatedAt", Float, nullable=False)


class UnitRow(Base):
    __tablename__ = "project_units"

    id = Column(String, primary_key=True)
    project_id = Column(
        "projectId",
        String,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    size = Column(String, nullable=False, default="")
    bedrooms = Column(Integer, nullable=False, default=0)
    bathrooms = Column(Integer, nullable=False, default=0)
    balconies = Column(Integer, nullable=False, default=0)
    features = Column(JSON, nullable=False, default=list)
    floor_plan_image = Column("floorPlanImage", String, nullable=True)


class GalleryItemRow(Base):
    __tablename__ = "gallery_items"

    id = Column(String, primary_key=True)
    url = Column(String, nullable=False)
    caption = Column(String, nullable=True)
    category = Column(String, nullable=True)
    created_at = Column("createdAt", Float, nullable=False, index=True)


class MessageRow(Base):
    __tablename__ = "messages"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    message = Column(String, nullable=False)
    date = Column(Float, nullable=False, index=True)
    read = Column(Boolean, nullable=False, default=False)


class SiteSettingsRow(Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True)
    settings = Column(JSON, nullable=False)
    updated_at = Column("updatedAt", Float, nullable=False)
