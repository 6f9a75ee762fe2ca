import unittest
from unittest import mock

from fastapi.testclient import TestClient

from sitecatalog.app import create_app
from sitecatalog.dependencies import get_catalog_store
from sitecatalog.errors import TransportError
from sitecatalog.firestore_store import FirestoreCatalogStore
from sitecatalog.site_settings import DEFAULT_SITE_SETTINGS, SETTINGS_DOCUMENT_ID
from sitecatalog.store import InMemoryCatalogStore
from sitecatalog.tests.fake_firestore import FakeFirestoreClient
from sitecatalog.tests.store_contract import counter_clock

PROJECT = {
    "title": "Tower A",
    "imageUrl": "/a.png",
    "location": "Gulshan, Dhaka",
    "status": "Ongoing",
    "buildingAmenities": ["Lift"],
    "units": [{"name": "Type A", "bedrooms": 3, "features": ["Corner"]}],
}


class CatalogApiTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryCatalogStore(clock=counter_clock())
        app = create_app()
        app.dependency_overrides[get_catalog_store] = lambda: self.store
        self.client = TestClient(app)

    def test_ping_and_health(self):
        ping = self.client.get("/api/ping")
        self.assertEqual(ping.status_code, 200)
        self.assertEqual(ping.json()["status"], "ok")
        self.assertEqual(set(ping.json()["env"]), {"hasDbUrl", "usesFirestore"})

        health = self.client.get("/api/health")
        self.assertEqual(health.status_code, 200)
        self.assertIn("timestamp", health.json())

    def test_create_and_list_projects(self):
        created = self.client.post("/api/projects", json=PROJECT)
        self.assertEqual(created.status_code, 200)
        payload = created.json()
        self.assertEqual(payload["order"], 1)
        self.assertEqual(payload["status"], "Ongoing")
        self.assertEqual(payload["units"][0]["projectId"], payload["id"])
        self.assertEqual(payload["units"][0]["features"], ["Corner"])

        listed = self.client.get("/api/projects").json()
        self.assertEqual(listed, [payload])

        units = self.client.get(f"/api/projects/{payload['id']}/units").json()
        self.assertEqual(units, payload["units"])

    def test_client_supplied_order_is_ignored(self):
        self.client.post("/api/projects", json=PROJECT)
        second = self.client.post("/api/projects", json={**PROJECT, "order": 1}).json()
        self.assertEqual(second["order"], 2)

    def test_project_needs_title_and_image(self):
        response = self.client.post("/api/projects", json={**PROJECT, "title": ""})
        self.assertEqual(response.status_code, 422)
        response = self.client.post("/api/projects", json={"title": "No image"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(self.store.list_projects(), [])

    def test_negative_unit_counts_are_rejected(self):
        body = {**PROJECT, "units": [{"name": "Bad", "bathrooms": -1}]}
        response = self.client.post("/api/projects", json=body)
        self.assertEqual(response.status_code, 422)

    def test_update_project(self):
        project_id = self.client.post("/api/projects", json=PROJECT).json()["id"]

        response = self.client.put(
            f"/api/projects/{project_id}",
            json={**PROJECT, "title": "Tower A2", "units": []},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["title"], "Tower A2")
        self.assertEqual(response.json()["units"], [])
        self.assertEqual(self.store.list_units(project_id), [])

    def test_set_project_order(self):
        project_id = self.client.post("/api/projects", json=PROJECT).json()["id"]

        response = self.client.put(f"/api/projects/{project_id}/order", json={"order": 7})

        self.assertEqual(response.json(), {"success": True})
        self.assertEqual(self.store.list_projects()[0].order, 7)

    def test_missing_project_is_404(self):
        update = self.client.put("/api/projects/missing", json=PROJECT)
        self.assertEqual(update.status_code, 404)
        self.assertEqual(update.json()["detail"], "Project not found")

        order = self.client.put("/api/projects/missing/order", json={"order": 1})
        self.assertEqual(order.status_code, 404)

        delete = self.client.delete("/api/projects/missing")
        self.assertEqual(delete.status_code, 404)

    def test_delete_project(self):
        project_id = self.client.post("/api/projects", json=PROJECT).json()["id"]

        response = self.client.delete(f"/api/projects/{project_id}")

        self.assertEqual(response.json(), {"success": True})
        self.assertEqual(self.client.get("/api/projects").json(), [])

    def test_gallery_routes(self):
        first = self.client.post("/api/gallery", json={"url": "/a.jpg"}).json()
        second = self.client.post(
            "/api/gallery", json={"url": "/b.jpg", "caption": "B", "category": "Interior"}
        ).json()

        listed = self.client.get("/api/gallery").json()
        self.assertEqual([item["id"] for item in listed], [second["id"], first["id"]])

        self.assertEqual(self.client.delete(f"/api/gallery/{first['id']}").status_code, 200)
        missing = self.client.delete(f"/api/gallery/{first['id']}")
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()["detail"], "Gallery item not found")

        self.assertEqual(self.client.post("/api/gallery", json={"url": ""}).status_code, 422)

    def test_message_routes(self):
        body = {"name": "Rahim", "email": "r@example.com", "phone": "017", "message": "Hi"}
        created = self.client.post("/api/messages", json=body).json()
        self.assertFalse(created["read"])
        self.assertIsNotNone(created["date"])

        self.assertEqual(self.client.get("/api/messages").json(), [created])
        self.assertEqual(self.client.delete(f"/api/messages/{created['id']}").status_code, 200)
        self.assertEqual(
            self.client.delete(f"/api/messages/{created['id']}").status_code, 404
        )

    def test_settings_routes(self):
        self.assertEqual(self.client.get("/api/settings").json(), {})

        saved = self.client.post("/api/settings", json={"contact": {"phone": "X"}})

        self.assertEqual(saved.json(), {"contact": {"phone": "X"}})
        self.assertEqual(self.client.get("/api/settings").json(), {"contact": {"phone": "X"}})

    def test_settings_read_writes_defaults_for_document_store(self):
        client = FakeFirestoreClient()
        app = create_app()
        app.dependency_overrides[get_catalog_store] = lambda: FirestoreCatalogStore(
            client, clock=counter_clock()
        )

        response = TestClient(app).get("/api/settings")

        self.assertEqual(response.json(), DEFAULT_SITE_SETTINGS)
        doc = client.collection("settings").docs[SETTINGS_DOCUMENT_ID]
        self.assertEqual(doc["settings"], DEFAULT_SITE_SETTINGS)

    def test_store_failures_are_500(self):
        failure = TransportError("list_gallery", "database unavailable")
        with mock.patch.object(self.store, "list_gallery", side_effect=failure):
            with self.assertLogs("sitecatalog.app", level="ERROR"):
                response = self.client.get("/api/gallery")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["error"], "Internal server error")
        self.assertIn("database unavailable", response.json()["message"])


if __name__ == "__main__":
    unittest.main()
