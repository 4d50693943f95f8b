import pytest
from fastapi.testclient import TestClient

from intellisource.api.main import create_app
from intellisource.data_access.database import Database, StoreUnavailableError
from intellisource.domain.query import MAX_PAGE
from intellisource.services.ai_service import FALLBACK_REPLY
from intellisource.services.report_service import ReportService


def _create_energy_report(client: TestClient) -> None:
    assert client.post("/api/categories", json={"name": "Energy"}).status_code == 201
    response = client.post(
        "/api/reports",
        json={"title": "Global Energy Outlook", "category": "energy", "price": 100},
    )
    assert response.status_code == 201


def test_read_main(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the IntelliSource Catalog API"}


def test_health_and_db_status(client: TestClient) -> None:
    assert client.get("/health").json() == {"success": True, "message": "ok", "data": {"ok": True}}

    body = client.get("/db-status").json()
    assert body["success"] is True
    assert body["data"] == {"state": "connected", "ping": "ok"}


def test_catalog_scenario(client: TestClient) -> None:
    """Category and report lifecycle as the storefront admin would drive it."""
    created = client.post("/api/categories", json={"name": "Energy"})
    assert created.status_code == 201
    assert created.json()["data"]["slug"] == "energy"

    report = client.post(
        "/api/reports",
        json={"title": "Global Energy Outlook", "category": "energy", "price": 100},
    )
    assert report.status_code == 201
    data = report.json()["data"]
    assert data["slug"] == "global-energy-outlook"
    assert data["category"]["slug"] == "energy"
    assert data["keyHighlights"] == []
    assert data["meta"] == {"keywords": [], "seoDescription": None}

    duplicate = client.post("/api/categories", json={"name": "Energy"})
    assert duplicate.status_code == 409
    assert duplicate.json() == {"success": False, "message": "Category 'Energy' already exists."}

    updated = client.put("/api/reports/global-energy-outlook", json={"description": "revised"})
    assert updated.status_code == 200
    assert updated.json()["data"]["title"] == "Global Energy Outlook"
    assert updated.json()["data"]["slug"] == "global-energy-outlook"
    assert updated.json()["data"]["description"] == "revised"

    # Categories still referenced by reports cannot be deleted
    blocked = client.delete("/api/categories/energy")
    assert blocked.status_code == 409
    assert blocked.json()["success"] is False

    fetched = client.get("/api/reports/global-energy-outlook")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["category"]["name"] == "Energy"

    deleted = client.delete("/api/reports/global-energy-outlook")
    assert deleted.json()["data"]["slug"] == "global-energy-outlook"
    assert client.delete("/api/categories/energy").status_code == 200
    assert client.get("/api/reports/global-energy-outlook").status_code == 404


def test_category_crud_envelopes(client: TestClient) -> None:
    client.post("/api/categories", json={"name": "Energy", "thumbnailUrl": "https://img/energy.png"})
    listed = client.get("/api/categories").json()
    assert listed["success"] is True
    assert listed["data"][0]["thumbnailUrl"] == "https://img/energy.png"

    renamed = client.put("/api/categories/energy", json={"name": "Clean Energy"})
    assert renamed.json()["data"]["slug"] == "clean-energy"
    assert client.get("/api/categories/energy").status_code == 404

    missing = client.get("/api/categories/nope")
    assert missing.status_code == 404
    assert missing.json() == {"success": False, "message": "Category 'nope' not found."}


def test_updates_onto_taken_names_are_409(client: TestClient) -> None:
    _create_energy_report(client)
    client.post("/api/categories", json={"name": "Finance"})
    client.post("/api/reports", json={"title": "Fintech Disruption", "category": "finance"})

    renamed = client.put("/api/categories/finance", json={"name": "Energy"})
    assert renamed.status_code == 409
    assert renamed.json() == {"success": False, "message": "Category 'Energy' already exists."}

    retitled = client.put("/api/reports/fintech-disruption", json={"title": "Global Energy Outlook"})
    assert retitled.status_code == 409
    assert retitled.json()["success"] is False
    assert client.get("/api/reports/fintech-disruption").status_code == 200


def test_validation_failures_are_400(client: TestClient) -> None:
    response = client.post("/api/categories", json={"name": " x "})
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert "data" not in body
    assert body["message"].startswith("name:")

    response = client.post("/api/reports", json={"title": "Outlook", "category": "energy", "price": -5})
    assert response.status_code == 400
    assert "price" in response.json()["message"]


def test_report_listing_pagination(client: TestClient) -> None:
    client.post("/api/categories", json={"name": "Energy"})
    for i in range(5):
        client.post("/api/reports", json={"title": f"Energy Report {i}", "category": "energy"})

    body = client.get("/api/reports", params={"page": 2, "limit": 2}).json()
    assert body["success"] is True
    assert body["pagination"] == {"page": 2, "limit": 2, "totalPages": 3, "totalItems": 5}
    assert [r["slug"] for r in body["data"]] == ["energy-report-2", "energy-report-1"]

    clamped = client.get("/api/reports", params={"limit": 1000}).json()
    assert clamped["pagination"]["limit"] == 100
    assert len(clamped["data"]) == 5


def test_report_listing_huge_page_is_empty(client: TestClient) -> None:
    _create_energy_report(client)
    response = client.get("/api/reports", params={"page": 10**19})
    assert response.status_code == 200
    body = response.json()
    assert body["data"] == []
    assert body["pagination"]["page"] == MAX_PAGE
    assert body["pagination"]["totalItems"] == 1

    assert client.get("/api/contacts", params={"page": 10**19}).status_code == 200


def test_report_listing_filters(client: TestClient) -> None:
    _create_energy_report(client)

    unknown = client.get("/api/reports", params={"category": "nope"})
    assert unknown.status_code == 404
    assert unknown.json()["success"] is False

    empty = client.get("/api/reports", params={"search": "blockchain"})
    assert empty.status_code == 200
    assert empty.json()["data"] == []
    assert empty.json()["pagination"]["totalItems"] == 0

    found = client.get("/api/reports", params={"category": "energy", "search": "OUTLOOK"}).json()
    assert [r["slug"] for r in found["data"]] == ["global-energy-outlook"]


def test_report_with_unknown_category_is_404(client: TestClient) -> None:
    response = client.post("/api/reports", json={"title": "Global Energy Outlook", "category": "nope"})
    assert response.status_code == 404
    assert response.json()["message"] == "Category 'nope' not found."


def test_contact_submission(client: TestClient) -> None:
    payload = {
        "name": "Eleanor White",
        "email": "Eleanor.White@USPackResearch.com",
        "subject": "United States Packaging Insights",
        "message": "Please provide purchase information for the outlook report.",
    }
    bad_email = client.post("/api/contacts", json={**payload, "email": "not-an-email"})
    assert bad_email.status_code == 400
    assert "email" in bad_email.json()["message"]

    empty_message = client.post("/api/contacts", json={**payload, "message": ""})
    assert empty_message.status_code == 400

    created = client.post("/api/contacts", json=payload)
    assert created.status_code == 201
    stored = created.json()["data"]
    assert stored["email"] == "eleanor.white@uspackresearch.com"
    assert "createdAt" in stored

    listed = client.get("/api/contacts").json()
    assert listed["pagination"]["totalItems"] == 1
    assert listed["data"][0]["id"] == stored["id"]


def test_assistant_falls_back_without_model(client: TestClient) -> None:
    _create_energy_report(client)
    response = client.post(
        "/api/assistant/chat",
        json={"message": "Any energy reports?", "history": [{"sender": "ai", "text": "Hello!"}]},
    )
    assert response.status_code == 200
    assert response.json()["data"] == {"reply": FALLBACK_REPLY}

    assert client.post("/api/assistant/chat", json={"message": "   "}).status_code == 400


def test_unexpected_errors_become_generic_500(monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(self: ReportService, ref: str) -> None:
        raise RuntimeError("connection string postgres://secret")

    monkeypatch.setattr(ReportService, "get_report", explode)
    app = create_app(Database("sqlite://"))
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/reports/anything")
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}


def test_startup_fails_when_store_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    database = Database("sqlite://")

    def refuse(max_retries: int = 5, base_delay: float = 0.5) -> None:
        raise StoreUnavailableError("Store unreachable after 5 attempts")

    monkeypatch.setattr(database, "connect", refuse)
    with pytest.raises(StoreUnavailableError):
        with TestClient(create_app(database)):
            pass
