"""
Behaviour every CatalogStore must share, run against each backend.
"""

from __future__ import annotations

import itertools

from sitecatalog.errors import NotFoundError
from sitecatalog.types import (
    GalleryItemDraft,
    MessageDraft,
    ProjectDraft,
    ProjectStatus,
    UnitDraft,
)


def counter_clock():
    """A clock that ticks by one on every read."""
    return itertools.count(1).__next__


def project_draft(title: str, **overrides) -> ProjectDraft:
    fields = {"title": title, "image_url": f"/images/{title.lower()}.jpg"}
    fields.update(overrides)
    return ProjectDraft(**fields)


class CatalogStoreContract:
    """Mixed into a unittest.TestCase that defines `make_store()`."""

    def make_store(self):
        raise NotImplementedError

    def setUp(self):
        super().setUp()
        self.store = self.make_store()

    def test_new_projects_are_appended_in_order(self):
        for title in ("Alpha", "Beta", "Gamma"):
            self.store.create_project(project_draft(title))

        projects = self.store.list_projects()
        self.assertEqual([p.title for p in projects], ["Alpha", "Beta", "Gamma"])
        self.assertEqual([p.order for p in projects], [1, 2, 3])

    def test_new_project_goes_after_highest_order(self):
        first = self.store.create_project(project_draft("Alpha"))
        self.store.set_project_order(first.id, 10)

        second = self.store.create_project(project_draft("Beta"))
        self.assertEqual(second.order, 11)

    def test_create_returns_stored_project(self):
        created = self.store.create_project(
            project_draft(
                "Alpha",
                status=ProjectStatus.ONGOING,
                building_amenities=["Lift", "Gym"],
                logo_url="/logo.png",
            )
        )
        self.assertTrue(created.id)
        self.assertIs(created.status, ProjectStatus.ONGOING)
        self.assertIsNotNone(created.created_at)
        self.assertEqual(self.store.list_projects(), [created])

    def test_units_are_stored_with_their_project(self):
        created = self.store.create_project(
            project_draft("Alpha"),
            [
                UnitDraft(name="Type A", size="1200 sqft", bedrooms=3, features=["Corner"]),
                UnitDraft(name="Type B", bathrooms=2, floor_plan_image="/plan-b.png"),
            ],
        )
        self.assertEqual([u.name for u in created.units], ["Type A", "Type B"])
        self.assertTrue(all(u.project_id == created.id for u in created.units))

        listed = self.store.list_projects()[0]
        self.assertEqual(listed.units, created.units)
        self.assertEqual(self.store.list_units(created.id), created.units)
        self.assertEqual(listed.units[0].features, ["Corner"])
        self.assertEqual(listed.units[1].floor_plan_image, "/plan-b.png")

    def test_list_units_of_unknown_project_is_empty(self):
        self.assertEqual(self.store.list_units("missing"), [])

    def test_update_replaces_fields_and_units(self):
        created = self.store.create_project(
            project_draft("Alpha"), [UnitDraft(name="Old"), UnitDraft(name="Older")]
        )
        updated = self.store.update_project(
            created.id,
            project_draft("Alpha Prime", status=ProjectStatus.COMPLETED),
            [UnitDraft(name="New", bedrooms=4)],
        )

        self.assertEqual(updated.title, "Alpha Prime")
        self.assertIs(updated.status, ProjectStatus.COMPLETED)
        self.assertEqual(updated.order, created.order)
        self.assertEqual(updated.created_at, created.created_at)
        self.assertGreater(updated.updated_at, created.updated_at)
        self.assertEqual([u.name for u in updated.units], ["New"])
        self.assertEqual(self.store.list_projects(), [updated])

    def test_update_with_no_units_clears_them(self):
        created = self.store.create_project(project_draft("Alpha"), [UnitDraft(name="A")])
        self.store.update_project(created.id, project_draft("Alpha"))
        self.assertEqual(self.store.list_units(created.id), [])

    def test_update_missing_project_raises(self):
        with self.assertRaises(NotFoundError):
            self.store.update_project("missing", project_draft("Ghost"))
        self.assertEqual(self.store.list_projects(), [])

    def test_set_project_order_changes_listing(self):
        alpha = self.store.create_project(project_draft("Alpha"))
        beta = self.store.create_project(project_draft("Beta"))

        self.store.set_project_order(alpha.id, beta.order)
        self.store.set_project_order(beta.id, alpha.order)

        self.assertEqual([p.title for p in self.store.list_projects()], ["Beta", "Alpha"])

    def test_set_order_of_missing_project_raises(self):
        with self.assertRaises(NotFoundError):
            self.store.set_project_order("missing", 3)

    def test_delete_project_removes_its_units(self):
        alpha = self.store.create_project(project_draft("Alpha"), [UnitDraft(name="A")])
        beta = self.store.create_project(project_draft("Beta"), [UnitDraft(name="B")])

        self.store.delete_project(alpha.id)

        self.assertEqual([p.id for p in self.store.list_projects()], [beta.id])
        self.assertEqual(self.store.list_units(alpha.id), [])
        self.assertEqual([u.name for u in self.store.list_units(beta.id)], ["B"])

    def test_delete_missing_project_raises(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.store.delete_project("missing")
        self.assertEqual(ctx.exception.entity, "project")

    def test_gallery_is_listed_newest_first(self):
        first = self.store.add_gallery_item(
            GalleryItemDraft(url="/a.jpg", caption="A", category="Exterior")
        )
        second = self.store.add_gallery_item(GalleryItemDraft(url="/b.jpg"))

        self.assertEqual(self.store.list_gallery(), [second, first])
        self.assertEqual(first.caption, "A")
        self.assertIsNone(second.category)

    def test_remove_gallery_item(self):
        item = self.store.add_gallery_item(GalleryItemDraft(url="/a.jpg"))
        self.store.remove_gallery_item(item.id)
        self.assertEqual(self.store.list_gallery(), [])

        with self.assertRaises(NotFoundError):
            self.store.remove_gallery_item(item.id)

    def test_messages_are_listed_newest_first_and_unread(self):
        first = self.store.add_message(
            MessageDraft(name="Rahim", email="r@example.com", phone="017", message="Hi")
        )
        second = self.store.add_message(
            MessageDraft(name="Karim", email="k@example.com", phone="018", message="Hello")
        )

        self.assertFalse(first.read)
        self.assertIsNotNone(first.date)
        self.assertEqual(self.store.list_messages(), [second, first])

    def test_delete_message(self):
        message = self.store.add_message(
            MessageDraft(name="Rahim", email="r@example.com", phone="017", message="Hi")
        )
        self.store.delete_message(message.id)
        self.assertEqual(self.store.list_messages(), [])

        with self.assertRaises(NotFoundError):
            self.store.delete_message(message.id)

    def test_settings_start_empty_and_round_trip(self):
        self.assertEqual(self.store.get_settings(), {})

        value = {"contact": {"phone": "+880 1700"}, "seo": {"siteTitle": "Uhud"}}
        self.assertEqual(self.store.put_settings(value), value)
        self.assertEqual(self.store.get_settings(), value)

        self.store.put_settings({"contact": {"phone": "+880 1800"}})
        self.assertEqual(self.store.get_settings(), {"contact": {"phone": "+880 1800"}})
