"""
API endpoint tests
"""

import pytest
import pytest_asyncio
from datetime import datetime, timedelta
from httpx import ASGITransport, AsyncClient
from unittest.mock import patch
from api.main import app
from api.dependencies import get_db
from core.config import settings
from core.exceptions import StoreTimeoutError, StoreWriteError


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database override"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def open_api(monkeypatch):
    """Run without an API key unless a test sets one"""
    monkeypatch.setattr(settings, "API_KEY", None)


# ============================================================================
# Health
# ============================================================================

@pytest.mark.asyncio
async def test_health_endpoint_database_connected(client, qa_template):
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database_connected"] is True
    assert data["record_counts"]["checklists"] == 1
    assert data["record_counts"]["companies"] == 0
    assert "X-Request-ID" in response.headers
    assert "X-API-Latency-ms" in response.headers


# ============================================================================
# Checklists
# ============================================================================

@pytest.mark.asyncio
async def test_clone_endpoint(client, qa_template):
    response = await client.post(f"/checklists/{qa_template.id}/clone")

    assert response.status_code == 201
    clone = response.json()
    assert clone["name"] == "QA Template (Copy)"
    assert clone["id"] != qa_template.id

    detail = (await client.get(f"/checklists/{clone['id']}")).json()
    assert [c["name"] for c in detail["categories"]] == ["Intro"]
    assert [(i["name"], i["is_active"]) for i in detail["categories"][0]["items"]] == [
        ("Greeting", True),
        ("Hold time", False),
    ]


@pytest.mark.asyncio
async def test_clone_unknown_checklist(client):
    response = await client.post("/checklists/missing/clone")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "NotFoundError"
    assert body["context"]["record_id"] == "missing"


@pytest.mark.asyncio
async def test_clone_failure_reports_bad_gateway(client, store, qa_template):
    """A store write failure surfaces as one aggregated error and leaves no copy"""
    with patch(
        "store.sqlalchemy_store.SQLAlchemyRecordStore.insert_many",
        side_effect=StoreWriteError("Simulated network error")
    ):
        response = await client.post(f"/checklists/{qa_template.id}/clone")

    assert response.status_code == 502
    assert response.json()["error"] == "CloneFailedError"
    assert await store.count("checklists") == 1


@pytest.mark.asyncio
async def test_store_timeout_maps_to_504(client):
    with patch(
        "store.sqlalchemy_store.SQLAlchemyRecordStore.find",
        side_effect=StoreTimeoutError("Store find on checklists timed out")
    ):
        response = await client.get("/checklists")

    assert response.status_code == 504
    assert response.json()["error"] == "StoreTimeoutError"


@pytest.mark.asyncio
async def test_checklist_editing_flow(client):
    created = await client.post("/checklists", json={"name": "  Support QA ", "description": "v1"})
    assert created.status_code == 201
    checklist_id = created.json()["id"]
    assert created.json()["name"] == "Support QA"

    category = await client.post(f"/checklists/{checklist_id}/categories", json={"name": "Intro"})
    assert category.status_code == 201
    category_id = category.json()["id"]

    first = await client.post(f"/categories/{category_id}/items", json={"name": "Greeting"})
    second = await client.post(f"/categories/{category_id}/items", json={"name": "Verifies identity"})
    assert (first.json()["position"], second.json()["position"]) == (0, 1)

    toggled = await client.post(f"/items/{first.json()['id']}/toggle")
    assert toggled.json()["is_active"] is False

    assert (await client.delete(f"/items/{second.json()['id']}")).status_code == 204
    detail = (await client.get(f"/checklists/{checklist_id}")).json()
    assert [i["name"] for i in detail["categories"][0]["items"]] == ["Greeting"]

    renamed = await client.patch(f"/checklists/{checklist_id}", json={"name": "Support QA v2"})
    assert renamed.json()["description"] == "v1"


@pytest.mark.asyncio
async def test_blank_checklist_name_rejected(client):
    response = await client.post("/checklists", json={"name": "   "})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_null_checklist_name_rejected(client, qa_template):
    response = await client.patch(f"/checklists/{qa_template.id}", json={"name": None})

    assert response.status_code == 422
    detail = (await client.get(f"/checklists/{qa_template.id}")).json()
    assert detail["name"] == "QA Template"


@pytest.mark.asyncio
async def test_clone_long_checklist_name(client):
    created = await client.post("/checklists", json={"name": "Q" * 255})
    assert created.status_code == 201

    response = await client.post(f"/checklists/{created.json()['id']}/clone")

    assert response.status_code == 201
    assert response.json()["name"] == "Q" * 255 + " (Copy)"


# ============================================================================
# Organization
# ============================================================================

@pytest.mark.asyncio
async def test_companies_list_joins_names_and_counts(client, qa_template):
    company = (await client.post("/companies", json={
        "name": "Acme", "active_checklist_id": qa_template.id
    })).json()
    await client.post("/companies", json={"name": "Globex", "active_checklist_id": ""})
    await client.post("/users", json={
        "full_name": "Ann Lee", "email": "ann@acme.test", "company_id": company["id"]
    })

    rows = {row["name"]: row for row in (await client.get("/companies")).json()}

    assert rows["Acme"]["checklist_name"] == "QA Template"
    assert rows["Acme"]["users_count"] == 1
    assert rows["Globex"]["checklist_name"] == ""
    assert rows["Globex"]["active_checklist_id"] is None


@pytest.mark.asyncio
async def test_company_toggle_status(client):
    company = (await client.post("/companies", json={"name": "Acme"})).json()

    response = await client.post(f"/companies/{company['id']}/toggle-status")

    assert response.json()["status"] == "inactive"


@pytest.mark.asyncio
async def test_teams_filtered_by_company(client):
    acme = (await client.post("/companies", json={"name": "Acme"})).json()
    globex = (await client.post("/companies", json={"name": "Globex"})).json()
    await client.post("/teams", json={"company_id": acme["id"], "name": "Support"})
    await client.post("/teams", json={"company_id": globex["id"], "name": "Ops"})

    rows = (await client.get("/teams", params={"company_id": acme["id"]})).json()

    assert [(r["name"], r["company_name"], r["users_count"]) for r in rows] == [("Support", "Acme", 0)]


@pytest.mark.asyncio
async def test_user_with_foreign_team_rejected(client):
    acme = (await client.post("/companies", json={"name": "Acme"})).json()
    globex = (await client.post("/companies", json={"name": "Globex"})).json()
    ops = (await client.post("/teams", json={"company_id": globex["id"], "name": "Ops"})).json()

    response = await client.post("/users", json={
        "full_name": "Ann Lee",
        "email": "ann@acme.test",
        "company_id": acme["id"],
        "team_id": ops["id"],
    })

    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_users_list_hides_password_hash(client):
    acme = (await client.post("/companies", json={"name": "Acme"})).json()
    support = (await client.post("/teams", json={"company_id": acme["id"], "name": "Support"})).json()
    created = await client.post("/users", json={
        "full_name": "Ann Lee",
        "email": "ann@acme.test",
        "role": "lead",
        "company_id": acme["id"],
        "team_id": support["id"],
    })
    assert created.status_code == 201

    rows = (await client.get("/users")).json()

    assert rows[0]["company_name"] == "Acme"
    assert rows[0]["team_name"] == "Support"
    assert "password_hash" not in rows[0]

    blocked = await client.post(f"/users/{created.json()['id']}/toggle-status")
    assert blocked.json()["status"] == "blocked"


@pytest.mark.asyncio
async def test_company_unknown_checklist_rejected(client):
    response = await client.post("/companies", json={"name": "Acme", "active_checklist_id": "nope"})

    assert response.status_code == 422
    assert response.json()["error"] == "ValidationError"
    assert (await client.get("/companies")).json() == []


@pytest.mark.asyncio
async def test_null_required_company_fields_rejected(client):
    company = (await client.post("/companies", json={"name": "Acme"})).json()

    for field in ("name", "status"):
        response = await client.patch(f"/companies/{company['id']}", json={field: None})
        assert response.status_code == 422

    # Nullable columns can still be cleared
    cleared = await client.patch(f"/companies/{company['id']}", json={"description": None})
    assert cleared.status_code == 200


# ============================================================================
# Pipeline
# ============================================================================

@pytest.mark.asyncio
async def test_integrations_not_configured(client):
    response = await client.get("/integrations")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_integrations_are_masked(client):
    response = await client.patch("/integrations", json={
        "assemblyai_api_key": "aai-secret-9876",
        "llm_default_model": "gpt-4o-mini",
    })
    assert response.status_code == 200

    data = (await client.get("/integrations")).json()
    assert data["assemblyai_api_key"] == "********9876"
    assert data["llm_provider"] == "openai"
    assert data["llm_default_model"] == "gpt-4o-mini"
    assert data["llm_api_key"] is None


@pytest.mark.asyncio
async def test_prompts_roundtrip(client):
    created = await client.post("/prompts", json={
        "type": "checklist",
        "name": "Checklist scorer",
        "model": "gpt-4o",
        "prompt_text": "Score the call against each criterion",
    })
    assert created.status_code == 201

    updated = await client.patch(f"/prompts/{created.json()['id']}", json={"is_active": False})
    assert updated.json()["is_active"] is False

    prompts = (await client.get("/prompts")).json()
    assert [p["name"] for p in prompts] == ["Checklist scorer"]

    nulled = await client.patch(f"/prompts/{created.json()['id']}", json={"model": None})
    assert nulled.status_code == 422


@pytest.mark.asyncio
async def test_logs_filtered_with_company_names(client, store):
    acme = (await client.post("/companies", json={"name": "Acme"})).json()
    base = datetime(2024, 1, 15, 10, 0)
    await store.insert_many("processing_logs", [
        {"call_id": "call-1", "company_id": acme["id"], "stage": "audio_received", "status": "ok",
         "created_at": base},
        {"call_id": "call-1", "company_id": acme["id"], "stage": "error", "status": "error",
         "message": "AssemblyAI returned 500", "created_at": base + timedelta(minutes=1)},
        {"call_id": "call-2", "stage": "audio_received", "status": "ok",
         "created_at": base + timedelta(minutes=2)},
    ])

    rows = (await client.get("/logs", params={"status": "error"})).json()
    assert [(r["stage"], r["company_name"]) for r in rows] == [("error", "Acme")]

    rows = (await client.get("/logs", params={"limit": 2})).json()
    assert [r["call_id"] for r in rows] == ["call-2", "call-1"]
    assert rows[0]["company_name"] == ""

    assert (await client.get("/logs", params={"limit": 501})).status_code == 422


@pytest.mark.asyncio
async def test_log_stages(client):
    response = await client.get("/logs/stages")

    assert response.json()[0] == "audio_received"
    assert "error" in response.json()


# ============================================================================
# API key
# ============================================================================

@pytest.mark.asyncio
async def test_api_key_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "API_KEY", "test-key")

    assert (await client.get("/checklists")).status_code == 401
    assert (await client.get("/checklists", headers={"X-API-Key": "wrong"})).status_code == 401
    assert (await client.get("/checklists", headers={"X-API-Key": "test-key"})).status_code == 200
    # Probes stay open
    assert (await client.get("/health")).status_code == 200
    assert (await client.get("/")).status_code == 200


@pytest.mark.asyncio
async def test_incoming_request_id_is_echoed(client):
    response = await client.get("/", headers={"X-Request-ID": "trace-123"})

    assert response.headers["X-Request-ID"] == "trace-123"
