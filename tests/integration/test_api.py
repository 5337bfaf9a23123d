"""Integration tests for the API endpoints, driven through the ASGI app."""

import io
from types import SimpleNamespace

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from PIL import Image

from repairflow.agents import llm_provider
from repairflow.agents.assistant import graph as assistant_graph
from repairflow.agents.image_analysis import graph as image_graph
from repairflow.agents.predictive import graph as predictive_graph
from repairflow.agents.llm_provider import LLMProvider, LLMResult
from repairflow.config import Settings
from repairflow.db.engine import get_db
from repairflow.main import app
from repairflow.services import photo_store
from repairflow.services.auth import create_session


class CannedLLM(LLMProvider):
    async def complete(self, system, prompt, temperature, max_tokens):
        return LLMResult("Torque the end bell bolts to 45 Nm in a star pattern.", "stop")

    async def analyze_image_url(self, system, prompt, image_url, temperature, max_tokens):
        return LLMResult("Minor fretting on the shaft.", "stop")


class BrokenLLM(LLMProvider):
    async def complete(self, system, prompt, temperature, max_tokens):
        raise RuntimeError("upstream 429: quota exceeded for key sk-live-123")

    async def analyze_image_url(self, system, prompt, image_url, temperature, max_tokens):
        raise RuntimeError("upstream 429: quota exceeded for key sk-live-123")


@pytest_asyncio.fixture
async def api(session_factory, db, shop):
    """One client per role, each carrying its own session cookie."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    clients = {}
    for name in ("admin", "manager", "tech", "other_tech"):
        token = await create_session(getattr(shop, name), db)
        clients[name] = AsyncClient(
            transport=transport, base_url="http://test", cookies={"session_token": token},
        )
    clients["anon"] = AsyncClient(transport=transport, base_url="http://test")

    yield SimpleNamespace(**clients)

    for client in clients.values():
        await client.aclose()
    app.dependency_overrides.clear()


async def _create_work_order(api, shop) -> dict:
    r = await api.manager.post("/api/work-orders", json={
        "equipment_unit_id": shop.unit.id,
        "priority": "high",
        "reported_issue": "Motor trips on overload",
    })
    assert r.status_code == 201
    return r.json()


async def _run_phase(client, wo_id: str, assignment_id: str, phase: str, results=("pass", "pass", "pass")) -> dict:
    r = await client.post("/api/work-sessions", json={
        "work_order_id": wo_id, "assignment_id": assignment_id, "phase": phase,
    })
    assert r.status_code == 201, r.text
    session_id = r.json()["id"]

    r = await client.get(f"/api/work-sessions/{session_id}")
    steps = r.json()["procedure"]["steps"]
    for step, result in zip(steps, results):
        r = await client.post(f"/api/work-sessions/{session_id}/steps", json={
            "step_id": step["id"], "result": result, "measurements": {"IR": 550},
        })
        assert r.status_code == 201, r.text

    r = await client.post(f"/api/work-sessions/{session_id}/report", json={})
    assert r.status_code == 201, r.text
    return {"session_id": session_id, "report": r.json()}


async def _to_repair_scope(api, shop) -> dict:
    wo = await _create_work_order(api, shop)
    r = await api.manager.post(f"/api/work-orders/{wo['id']}/assign", json={"technician_id": shop.tech.id})
    assignment = r.json()

    for phase in ("initial_testing", "teardown"):
        await _run_phase(api.tech, wo["id"], assignment["id"], phase)
        r = await api.tech.post(f"/api/work-orders/{wo['id']}/complete-phase", json={"phase": phase})
        assert r.status_code == 200, r.text
        r = await api.tech.post(f"/api/work-orders/{wo['id']}/claim")
        assert r.status_code == 201, r.text
        assignment = r.json()

    await _run_phase(api.tech, wo["id"], assignment["id"], "repair_scope")
    return wo


# ── Health / auth ────────────────────────────────────────────────────

async def test_health(api):
    r = await api.anon.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


async def test_login_and_me(api):
    r = await api.anon.post("/api/auth/login", json={"email": "tech@shop.test", "password": "password123"})
    assert r.status_code == 200
    assert r.json()["role"] == "technician"
    assert "session_token" in r.cookies

    r = await api.tech.get("/api/auth/me")
    assert r.json()["email"] == "tech@shop.test"


async def test_login_bad_password(api):
    r = await api.anon.post("/api/auth/login", json={"email": "tech@shop.test", "password": "wrong-password"})
    assert r.status_code == 401


async def test_requires_auth(api):
    r = await api.anon.get("/api/work-orders")
    assert r.status_code == 401


async def test_user_management_is_admin_only(api):
    body = {"email": "new@shop.test", "password": "password123", "role": "technician"}
    r = await api.manager.post("/api/users", json=body)
    assert r.status_code == 403

    r = await api.admin.post("/api/users", json=body)
    assert r.status_code == 201
    r = await api.admin.post("/api/users", json=body)
    assert r.status_code == 409


# ── Work orders ──────────────────────────────────────────────────────

async def test_create_work_order_defaults_customer(api, shop):
    wo = await _create_work_order(api, shop)
    assert wo["current_phase"] == "pending_assignment"
    assert wo["phase_label"] == "Pending Assignment"
    assert wo["customer_id"] == shop.customer.id
    assert wo["work_order_number"].startswith("WO-")


async def test_technician_cannot_create_work_order(api, shop):
    r = await api.tech.post("/api/work-orders", json={"equipment_unit_id": shop.unit.id})
    assert r.status_code == 403


async def test_status_patch_cannot_cancel(api, shop):
    wo = await _create_work_order(api, shop)
    r = await api.manager.patch(f"/api/work-orders/{wo['id']}", json={"status": "cancelled"})
    assert r.status_code == 400

    r = await api.manager.post(f"/api/work-orders/{wo['id']}/cancel", json={"reason": "Duplicate"})
    assert r.status_code == 200
    assert r.json()["current_phase"] == "cancelled"


async def test_unknown_work_order(api):
    r = await api.manager.get("/api/work-orders/01J000000000000000000000XX")
    assert r.status_code == 404


# ── Full workflow ────────────────────────────────────────────────────

async def test_workflow_through_approval(api, shop):
    wo = await _to_repair_scope(api, shop)

    r = await api.tech.post(f"/api/work-orders/{wo['id']}/complete-phase", json={"phase": "repair_scope"})
    assert r.status_code == 400

    r = await api.tech.post("/api/approvals", json={
        "work_order_id": wo["id"],
        "phase_completed": "repair_scope",
        "next_phase": "rebuild",
        "findings_summary": "DE bearing spalled",
        "required_parts": [{"part_number": "6309-2Z", "quantity": 2, "estimated_cost": 42.5}],
    })
    assert r.status_code == 201, r.text
    approval = r.json()
    assert approval["status"] == "pending"
    assert approval["estimated_cost"] == 85.0

    r = await api.tech.post(f"/api/approvals/{approval['id']}/decision", json={"decision": "approved"})
    assert r.status_code == 403

    r = await api.manager.post(f"/api/approvals/{approval['id']}/decision", json={
        "decision": "approved", "notes": "Proceed",
    })
    assert r.status_code == 200
    assert r.json()["status"] == "approved"

    r = await api.manager.get(f"/api/work-orders/{wo['id']}")
    detail = r.json()
    assert detail["current_phase"] == "rebuild"
    assert [rep["phase"] for rep in detail["reports"]] == ["initial_testing", "teardown", "repair_scope"]
    assert detail["equipment_unit"]["serial_number"] == "SN-1001"

    r = await api.manager.post(f"/api/approvals/{approval['id']}/decision", json={
        "decision": "rejected", "reason": "changed my mind",
    })
    assert r.status_code == 409


async def test_rejection_keeps_phase(api, shop):
    wo = await _to_repair_scope(api, shop)
    r = await api.tech.post("/api/approvals", json={
        "work_order_id": wo["id"], "phase_completed": "repair_scope", "next_phase": "rebuild",
    })
    approval_id = r.json()["id"]

    r = await api.manager.post(f"/api/approvals/{approval_id}/decision", json={"decision": "rejected"})
    assert r.status_code == 400

    r = await api.manager.post(f"/api/approvals/{approval_id}/decision", json={
        "decision": "rejected", "reason": "insufficient findings",
    })
    assert r.status_code == 200
    assert r.json()["rejection_reason"] == "insufficient findings"

    r = await api.manager.get(f"/api/work-orders/{wo['id']}")
    assert r.json()["current_phase"] == "repair_scope"
    assert r.json()["status"] == "on_hold"


async def test_steps_and_reports(api, shop):
    wo = await _create_work_order(api, shop)
    r = await api.manager.post(f"/api/work-orders/{wo['id']}/assign", json={"technician_id": shop.tech.id})
    assignment = r.json()
    assert assignment["phase"] == "initial_testing"

    r = await api.tech.post("/api/work-sessions", json={
        "work_order_id": wo["id"], "assignment_id": assignment["id"], "phase": "initial_testing",
    })
    session = r.json()
    steps = (await api.tech.get(f"/api/work-sessions/{session['id']}")).json()["procedure"]["steps"]

    r = await api.tech.post(f"/api/work-sessions/{session['id']}/steps", json={"step_id": steps[1]["id"], "result": "pass"})
    assert r.status_code == 409

    r = await api.tech.post(f"/api/work-sessions/{session['id']}/steps", json={"step_id": steps[0]["id"], "result": "na"})
    progress = r.json()
    assert progress["progress_percentage"] == 33
    assert progress["completion"]["observations"] == "Not Applicable"

    r = await api.other_tech.post(f"/api/work-sessions/{session['id']}/steps", json={"step_id": steps[1]["id"], "result": "pass"})
    assert r.status_code == 403

    r = await api.tech.post(f"/api/work-sessions/{session['id']}/report", json={})
    assert r.status_code == 400

    for step in steps[1:]:
        await api.tech.post(f"/api/work-sessions/{session['id']}/steps", json={"step_id": step["id"], "result": "fail"})

    r = await api.tech.post(f"/api/work-sessions/{session['id']}/report", json={"technician_notes": "Rotor rub"})
    assert r.status_code == 201
    report = r.json()
    assert report["failed_steps"] == 2
    assert report["status"] == "submitted"

    r = await api.tech.post(f"/api/work-sessions/{session['id']}/report", json={})
    assert r.status_code == 409

    r = await api.manager.post(f"/api/phase-reports/{report['id']}/approve")
    assert r.json()["status"] == "approved"


async def test_complete_phase_needs_assignment(api, shop):
    wo = await _create_work_order(api, shop)
    r = await api.manager.post(f"/api/work-orders/{wo['id']}/assign", json={"technician_id": shop.tech.id})
    await _run_phase(api.tech, wo["id"], r.json()["id"], "initial_testing")

    r = await api.other_tech.post(f"/api/work-orders/{wo['id']}/complete-phase", json={"phase": "initial_testing"})
    assert r.status_code == 403

    r = await api.other_tech.post(f"/api/work-orders/{wo['id']}/claim")
    assert r.status_code == 403


async def test_photo_upload(api, shop, tmp_path, monkeypatch):
    monkeypatch.setattr(photo_store._settings.photo_store, "base_dir", str(tmp_path))
    wo = await _create_work_order(api, shop)
    r = await api.manager.post(f"/api/work-orders/{wo['id']}/assign", json={"technician_id": shop.tech.id})
    r = await api.tech.post("/api/work-sessions", json={
        "work_order_id": wo["id"], "assignment_id": r.json()["id"], "phase": "initial_testing",
    })
    session_id = r.json()["id"]

    buf = io.BytesIO()
    Image.new("RGB", (640, 480), color=(90, 90, 90)).save(buf, "JPEG")
    r = await api.tech.post(
        f"/api/work-sessions/{session_id}/photos",
        files={"file": ("nameplate.jpg", buf.getvalue(), "image/jpeg")},
        data={"photo_type": "before", "caption": "Nameplate"},
    )
    assert r.status_code == 201, r.text
    photo = r.json()
    assert photo["photo_type"] == "before"

    r = await api.tech.get(f"/api/work-sessions/{session_id}/photos/{photo['id']}/file?thumbnail=true")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/jpeg"

    r = await api.tech.post(
        f"/api/work-sessions/{session_id}/photos",
        files={"file": ("notes.jpg", b"not an image", "image/jpeg")},
    )
    assert r.status_code == 400


async def test_photo_upload_size_limit(api, shop, tmp_path, monkeypatch):
    monkeypatch.setattr(photo_store._settings.photo_store, "base_dir", str(tmp_path))
    monkeypatch.setattr(photo_store._settings.photo_store, "max_upload_bytes", 256)
    wo = await _create_work_order(api, shop)
    r = await api.manager.post(f"/api/work-orders/{wo['id']}/assign", json={"technician_id": shop.tech.id})
    r = await api.tech.post("/api/work-sessions", json={
        "work_order_id": wo["id"], "assignment_id": r.json()["id"], "phase": "initial_testing",
    })
    session_id = r.json()["id"]

    r = await api.tech.post(
        f"/api/work-sessions/{session_id}/photos",
        files={"file": ("big.jpg", b"\xff" * 1024, "image/jpeg")},
    )
    assert r.status_code == 413
    assert "256 bytes" in r.json()["detail"]

    r = await api.tech.get(f"/api/work-sessions/{session_id}/photos")
    assert r.json() == []
    assert not (tmp_path / session_id).exists()


async def test_dashboard(api, shop):
    wo = await _create_work_order(api, shop)
    await api.manager.post(f"/api/work-orders/{wo['id']}/assign", json={"technician_id": shop.tech.id})

    r = await api.manager.get("/api/dashboard/summary")
    summary = r.json()
    assert summary["total_work_orders"] == 1
    assert summary["work_orders_by_phase"] == {"initial_testing": 1}
    assert summary["pending_approvals"] == 0

    r = await api.tech.get("/api/dashboard/my-work")
    items = r.json()["assignments"]
    assert len(items) == 1
    assert items[0]["phase"] == "initial_testing"
    assert items[0]["serial_number"] == "SN-1001"


# ── Inventory / quotes / time clock ──────────────────────────────────

async def test_inventory_and_installed_parts(api, shop):
    wo = await _create_work_order(api, shop)

    r = await api.manager.post("/api/inventory/warehouses", json={"name": "Main shop"})
    assert r.status_code == 201
    warehouse = r.json()
    r = await api.tech.post("/api/inventory/items", json={"part_number": "6309-2Z", "description": "Bearing"})
    assert r.status_code == 403
    r = await api.manager.post("/api/inventory/items", json={
        "part_number": "6309-2Z", "description": "Deep groove ball bearing",
        "category": "bearings", "unit_cost": 38.75, "reorder_level": 2,
    })
    assert r.status_code == 201, r.text
    item = r.json()

    r = await api.manager.post(f"/api/inventory/items/{item['id']}/stock", json={
        "warehouse_id": warehouse["id"], "quantity": 3,
    })
    assert r.status_code == 200, r.text
    assert r.json()["quantity_available"] == 3

    r = await api.tech.post(f"/api/inventory/work-orders/{wo['id']}/parts", json={
        "inventory_item_id": item["id"], "warehouse_id": warehouse["id"], "quantity": 2,
    })
    assert r.status_code == 201, r.text
    assert r.json()["unit_cost"] == 38.75
    r = await api.tech.post(f"/api/inventory/work-orders/{wo['id']}/parts", json={
        "inventory_item_id": item["id"], "warehouse_id": warehouse["id"], "quantity": 2,
    })
    assert r.status_code == 409
    assert "1 available" in r.json()["detail"]

    r = await api.tech.get(f"/api/inventory/work-orders/{wo['id']}/parts")
    assert [p["quantity_used"] for p in r.json()] == [2]
    r = await api.tech.get("/api/inventory/items", params={"low_stock": True})
    assert [i["part_number"] for i in r.json()] == ["6309-2Z"]
    r = await api.manager.get("/api/dashboard/summary")
    assert r.json()["low_stock_items"] == 1


async def test_quote_from_approval(api, shop):
    wo = await _to_repair_scope(api, shop)
    r = await api.tech.post("/api/approvals", json={
        "work_order_id": wo["id"],
        "phase_completed": "repair_scope",
        "next_phase": "rebuild",
        "required_parts": [{"part_number": "6309-2Z", "quantity": 2, "estimated_cost": 42.5}],
        "estimated_hours": 3,
    })
    approval = r.json()

    r = await api.tech.post("/api/quotes", json={"approval_id": approval["id"]})
    assert r.status_code == 403
    r = await api.manager.post("/api/quotes", json={"approval_id": approval["id"]})
    assert r.status_code == 201, r.text
    quote = r.json()
    assert quote["status"] == "draft"
    assert quote["subtotal"] == 370.0
    assert quote["tax_amount"] == 29.6
    assert quote["total_amount"] == 399.6
    assert [li["item_type"] for li in quote["line_items"]] == ["part", "labor"]

    r = await api.manager.post(f"/api/quotes/{quote['id']}/status", json={"status": "accepted"})
    assert r.status_code == 409
    r = await api.manager.post(f"/api/quotes/{quote['id']}/status", json={"status": "sent"})
    assert r.status_code == 200
    r = await api.manager.post(f"/api/quotes/{quote['id']}/status", json={"status": "accepted"})
    assert r.json()["status"] == "accepted"

    r = await api.tech.get("/api/quotes", params={"work_order_id": wo["id"]})
    assert [q["quote_number"] for q in r.json()] == [quote["quote_number"]]


async def test_time_clock(api, shop):
    wo = await _create_work_order(api, shop)

    r = await api.tech.post("/api/time-entries/clock-in", json={"work_order_id": wo["id"]})
    assert r.status_code == 201, r.text
    entry = r.json()
    r = await api.tech.post("/api/time-entries/clock-in", json={"work_order_id": wo["id"]})
    assert r.status_code == 409

    r = await api.tech.get("/api/time-entries/summary")
    assert r.json()["active_entry_id"] == entry["id"]
    r = await api.manager.get("/api/dashboard/summary")
    assert r.json()["clocked_in"] == 1

    r = await api.other_tech.post(f"/api/time-entries/{entry['id']}/clock-out", json={})
    assert r.status_code == 403
    r = await api.tech.post(f"/api/time-entries/{entry['id']}/clock-out", json={"break_minutes": 0})
    assert r.status_code == 200
    assert r.json()["status"] == "completed"

    r = await api.tech.get("/api/time-entries", params={"user_id": shop.other_tech.id})
    assert r.status_code == 403
    r = await api.tech.get("/api/time-entries")
    assert [e["id"] for e in r.json()] == [entry["id"]]

    r = await api.tech.post(f"/api/time-entries/{entry['id']}/approve")
    assert r.status_code == 403
    r = await api.manager.post(f"/api/time-entries/{entry['id']}/approve")
    assert r.json()["status"] == "approved"


# ── AI endpoints ─────────────────────────────────────────────────────

async def test_assistant_requires_query(api):
    r = await api.tech.post("/api/ai-assistant", json={"query": "   "})
    assert r.status_code == 400
    assert r.json() == {"error": "Query is required"}


async def test_image_analysis_requires_url(api):
    r = await api.tech.post("/api/ai-image-analysis", json={"analysisType": "damage"})
    assert r.status_code == 400
    assert r.json()["error"] == "Image URL is required"


async def test_image_analysis_without_key(api, monkeypatch):
    monkeypatch.setattr(
        llm_provider, "get_settings", lambda: Settings(openai_api_key="", anthropic_api_key=""),
    )
    r = await api.tech.post("/api/ai-image-analysis", json={"imageUrl": "https://x.test/a.jpg"})
    assert r.status_code == 503
    body = r.json()
    assert body["error"] == "AI service not configured"
    assert "API key" in body["message"]


async def test_assistant_records_interaction(api, shop, monkeypatch):
    monkeypatch.setattr(assistant_graph, "get_llm_provider", lambda model=None: CannedLLM())
    wo = await _create_work_order(api, shop)
    r = await api.manager.post(f"/api/work-orders/{wo['id']}/assign", json={"technician_id": shop.tech.id})
    r = await api.tech.post("/api/work-sessions", json={
        "work_order_id": wo["id"], "assignment_id": r.json()["id"], "phase": "initial_testing",
    })
    session_id = r.json()["id"]

    r = await api.tech.post("/api/ai-assistant", json={
        "query": "End bell bolt torque?",
        "context": {"workOrderNumber": wo["work_order_number"]},
        "workSessionId": session_id,
    })
    assert r.status_code == 200
    answer = r.json()
    assert answer["response"].startswith("Torque the end bell bolts")
    interaction_id = answer["interactionId"]

    r = await api.other_tech.patch(f"/api/ai-interactions/{interaction_id}", json={"helpful": False})
    assert r.status_code == 403

    r = await api.tech.patch(f"/api/ai-interactions/{interaction_id}", json={"helpful": True, "feedback": "Correct"})
    assert r.json() == {"id": interaction_id, "helpful": True, "feedback": "Correct"}


async def test_predictive_validation(api):
    r = await api.manager.post("/api/ai-predictive-analysis", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "Equipment unit or model ID is required"

    r = await api.manager.post("/api/ai-predictive-analysis", json={"equipmentUnitId": "missing"})
    assert r.status_code == 404


async def test_upstream_failures_are_generic(api, shop, monkeypatch):
    for graph in (assistant_graph, image_graph, predictive_graph):
        monkeypatch.setattr(graph, "get_llm_provider", lambda model=None: BrokenLLM())

    calls = [
        ("/api/ai-assistant", {"query": "Why does the motor trip?"}),
        ("/api/ai-image-analysis", {"imageUrl": "https://x.test/a.jpg", "analysisType": "wear"}),
        ("/api/ai-predictive-analysis", {"equipmentUnitId": shop.unit.id}),
    ]
    for path, body in calls:
        r = await api.tech.post(path, json=body)
        assert r.status_code == 500, path
        assert r.json() == {
            "error": "AI service error",
            "message": "The AI service could not complete the request. Try again later.",
        }
        assert "sk-live-123" not in r.text
        assert "quota" not in r.text
