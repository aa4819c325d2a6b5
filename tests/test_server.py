import pytest
from fastapi.testclient import TestClient

from pigcheck import messages
from pigcheck.models import CheckId
from pigcheck.server import app
from pigcheck.settings import settings


@pytest.fixture
def client():
    return TestClient(app)


def test_list_checks(client):
    resp = client.get("/api/checks")
    assert resp.status_code == 200
    assert resp.json() == [c.value for c in CheckId]


def test_validate_valid_package(client, catalogue):
    resp = client.post("/api/validate", json={"package": catalogue})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "status": 0, "statusText": "ok"}


def test_validate_selected_checks(client, range_scenario):
    resp = client.post(
        "/api/validate",
        json={"package": range_scenario(150), "checkConstraints": ["valueRanges"]},
    )
    body = resp.json()
    assert body["ok"] is False
    assert body["status"] == 679
    assert "exceeds maxInclusive" in body["statusText"]


def test_validate_in_another_language(client, catalogue):
    catalogue["graph"].append({"id": "o:Title", "itemType": "pig:Property"})
    resp = client.post("/api/validate", json={"package": catalogue, "lang": "de"})
    assert resp.json()["statusText"].startswith("Paket-Validierung fehlgeschlagen")
    assert messages.get_language() == "en"


def test_malformed_package_is_reported_not_raised(client):
    doc = {"id": "pkg:x", "graph": [{"id": "o:X", "itemType": "pig:Nonsense"}]}
    resp = client.post("/api/validate", json={"package": doc})
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is False
    assert body["status"] == messages.IMPORT_INVALID_PACKAGE


def test_unknown_check_id_is_rejected(client, catalogue):
    resp = client.post("/api/validate", json={"package": catalogue, "checkConstraints": ["noSuchCheck"]})
    assert resp.status_code == 422


def test_package_graph(client, catalogue):
    resp = client.post("/api/graph", json={"package": catalogue})
    assert resp.status_code == 200
    body = resp.json()
    assert body["packageId"] == "pkg:catalogue"
    assert len(body["nodes"]) == len(catalogue["graph"])
    bike = next(n for n in body["nodes"] if n["id"] == "o:bike1")
    assert bike["itemType"] == "pig:anEntity"
    assert {"fromId": "o:Bike", "toId": "o:Product", "type": "specializes"} in body["edges"]
    assert body["cycles"] == []


def test_package_graph_of_malformed_package(client):
    resp = client.post("/api/graph", json={"package": {"id": "pkg:x"}})
    assert resp.status_code == 422
    assert resp.json()["detail"]["status"] == messages.IMPORT_INVALID_PACKAGE


def test_request_over_the_size_limit(client, catalogue, monkeypatch):
    monkeypatch.setattr(settings, "max_document_bytes", 100)
    resp = client.post("/api/validate", json={"package": catalogue})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == messages.IMPORT_TOO_LARGE
    assert "the limit is 100" in body["statusText"]

    resp = client.post("/api/graph", json={"package": catalogue})
    assert resp.status_code == 422
    assert resp.json()["detail"]["status"] == messages.IMPORT_TOO_LARGE
