import inspect
import sqlite3

import pytest
from fastapi.testclient import TestClient

from airac_sync.ingest import FileIngestor
from airac_sync.models import NavAidType
from airac_sync.sync import AiracImporter
from airac_sync.web.api import airac
from airac_sync.web.app import create_app

VOR_FILE = "ABC,39.0000,-9.0000,112.300\nXYZ,bad,data\n"
BOUNDARY_FILE = """LPPC_CTR;#125.550;GND;FL245
N039.00.00.000;W009.00.00.000
N040.00.00.000;W009.00.00.000
N040.00.00.000;W008.00.00.000
"""


@pytest.fixture
def client(importer):
    return TestClient(create_app(importer))


@pytest.fixture
def seeded(seed_navaids, make_vor):
    seed_navaids(make_vor('OLD'), make_vor('ABC', frequency='112.100'))


class TestAiracApi:
    """HTTP surface of the import endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_preview(self, client, seeded):
        response = client.post("/api/airac/vors", json={"content": VOR_FILE, "firId": "LPPC"})

        assert response.status_code == 200
        assert response.json() == {
            "preview": {
                "toAdd": [],
                "toDelete": ["OLD"],
                "skipped": 1,
                "warnings": ["1 line could not be parsed and was omitted"],
            }
        }

    def test_confirm(self, client, seeded, storage):
        response = client.post("/api/airac/vors", json={
            "content": VOR_FILE, "firId": "LPPC", "confirm": True,
            "selectedAdd": [], "selectedDelete": ["OLD"],
        })

        assert response.status_code == 200
        assert response.json() == {"applied": True, "added": 0, "updated": 0, "deleted": 1}
        assert [v.ident for v in storage.get_navaids(NavAidType.VOR, 'LPPC')] == ['ABC']

    def test_confirm_without_delete_list_accepts_all_deletions(self, client, seeded, storage):
        response = client.post("/api/airac/vors", json={
            "content": VOR_FILE, "firId": "LPPC", "confirm": True, "selectedAdd": [],
        })
        assert response.json()["deleted"] == 1

    def test_confirm_requires_selected_add(self, client, seeded, storage):
        response = client.post("/api/airac/vors", json={"content": VOR_FILE, "firId": "LPPC", "confirm": True})

        assert response.status_code == 422
        assert response.json()["detail"] == "selectedAdd is required when confirm is true"
        assert storage.count_navaids() == 2

    def test_airport_confirm_requires_selected_update(self, client):
        response = client.post("/api/airac/airports", json={
            "content": "LPPT;374;LIS;N038.46.53.000;W009.08.09.000;Lisboa",
            "confirm": True, "selectedAdd": ["LPPT"],
        })
        assert response.status_code == 422

    def test_airport_preview(self, client):
        response = client.post("/api/airac/airports", json={
            "content": "LPPT;374;LIS;N038.46.53.000;W009.08.09.000;Lisboa",
        })

        preview = response.json()["preview"]
        assert preview["toAdd"] == ["LPPT"]
        assert preview["toUpdate"] == []
        assert "toDelete" not in preview

    def test_unknown_fir(self, client):
        response = client.post("/api/airac/fixes", json={"content": "ABLAN;39;-9", "firId": "XXXX"})
        assert response.status_code == 404
        assert response.json()["detail"] == "FIR not found: XXXX"

    def test_file_without_entries(self, client):
        response = client.post("/api/airac/ndbs", json={"content": "# header only\n"})
        assert response.status_code == 400
        assert response.json()["detail"] == "No entries parsed from file"

    def test_rolled_back_apply(self, client, storage, monkeypatch):
        def failing_insert(conn, boundary_id, point):
            raise sqlite3.IntegrityError("simulated point failure")

        monkeypatch.setattr(storage, 'insert_boundary_point', failing_insert)
        response = client.post("/api/airac/boundaries", json={
            "content": BOUNDARY_FILE, "firId": "LPPC", "confirm": True, "selectedAdd": ["LPPC_CTR/125.550"],
        })

        assert response.status_code == 409
        assert storage.count_boundary_rows() == (0, 0)

    def test_oversized_body_rejected(self, storage):
        client = TestClient(create_app(AiracImporter(storage, FileIngestor(max_bytes=50))))
        response = client.post("/api/airac/vors", json={"content": VOR_FILE * 100, "firId": "LPPC"})

        assert response.status_code == 400
        assert "too large" in response.json()["detail"]

    def test_endpoints_run_in_threadpool(self):
        # SQLite calls block
        for endpoint in (airac.import_fixes, airac.import_vors, airac.import_ndbs,
                         airac.import_boundaries, airac.import_airports):
            assert not inspect.iscoroutinefunction(endpoint)
