import pytest

from repairflow.db import crud
from repairflow.services.errors import (
    ConflictError, NotFoundError, PermissionDeniedError, ValidationError,
)
from repairflow.services.work_orders import (
    assign_work_order,
    cancel_work_order,
    claim_current_phase,
    complete_phase,
)
from repairflow.services.phase_reports import submit_phase_report
from repairflow.services.work_sessions import (
    complete_step, ensure_work_order_open, set_paused, start_session,
)


async def test_first_assignment_starts_initial_testing(db, shop, work_order):
    assignment = await assign_work_order(db, work_order, shop.tech.id, shop.manager.id)

    wo = await crud.get_work_order(db, work_order.id)
    assert assignment.phase == "initial_testing"
    assert assignment.status == "assigned"
    assert wo.current_phase == "initial_testing"
    assert wo.status == "in_progress"
    assert wo.assigned_to == shop.tech.id


async def test_assignment_must_match_current_phase(db, shop, work_order):
    with pytest.raises(ConflictError):
        await assign_work_order(db, work_order, shop.tech.id, shop.manager.id, phase="rebuild")

    wo = await crud.get_work_order(db, work_order.id)
    assert wo.current_phase == "pending_assignment"


async def test_assign_unknown_technician(db, shop, work_order):
    with pytest.raises(NotFoundError):
        await assign_work_order(db, work_order, "01J00000000000000000000000", shop.manager.id)


async def test_complete_phase_requires_report(db, shop, work_order):
    await assign_work_order(db, work_order, shop.tech.id, shop.manager.id)
    wo = await crud.get_work_order(db, work_order.id)

    with pytest.raises(ValidationError, match="phase report"):
        await complete_phase(db, wo, "initial_testing")


async def test_complete_phase_advances_and_closes_assignment(db, shop, work_order, run_phase):
    await run_phase(work_order.id)
    wo = await crud.get_work_order(db, work_order.id)

    target = await complete_phase(db, wo, "initial_testing")

    wo = await crud.get_work_order(db, work_order.id)
    assert target.value == "teardown"
    assert wo.current_phase == "teardown"
    assert [a.status for a in wo.assignments] == ["completed"]


async def test_complete_phase_wrong_phase(db, shop, work_order, run_phase):
    await run_phase(work_order.id)
    wo = await crud.get_work_order(db, work_order.id)

    with pytest.raises(ConflictError):
        await complete_phase(db, wo, "teardown")


async def test_gated_phase_cannot_be_completed_directly(db, shop, work_order, run_phase):
    for phase in ("initial_testing", "teardown"):
        await run_phase(work_order.id)
        await complete_phase(db, await crud.get_work_order(db, work_order.id), phase)
    await run_phase(work_order.id)

    wo = await crud.get_work_order(db, work_order.id)
    assert wo.current_phase == "repair_scope"
    with pytest.raises(ValidationError, match="requires approval"):
        await complete_phase(db, wo, "repair_scope")


async def test_claim_by_previous_phase_technician(db, shop, work_order, run_phase):
    await run_phase(work_order.id)
    await complete_phase(db, await crud.get_work_order(db, work_order.id), "initial_testing")

    wo = await crud.get_work_order(db, work_order.id)
    assignment = await claim_current_phase(db, wo, shop.tech.id)
    assert assignment.phase == "teardown"
    assert assignment.assigned_to == shop.tech.id

    # claiming again returns the open assignment
    again = await claim_current_phase(db, await crud.get_work_order(db, work_order.id), shop.tech.id)
    assert again.id == assignment.id


async def test_claim_refused_for_other_technician(db, shop, work_order, run_phase):
    await run_phase(work_order.id)
    await complete_phase(db, await crud.get_work_order(db, work_order.id), "initial_testing")

    wo = await crud.get_work_order(db, work_order.id)
    with pytest.raises(PermissionDeniedError):
        await claim_current_phase(db, wo, shop.other_tech.id)


async def test_cancel_closes_open_work(db, shop, work_order):
    await assign_work_order(db, work_order, shop.tech.id, shop.manager.id)
    wo = await crud.get_work_order(db, work_order.id)

    wo = await cancel_work_order(db, wo, reason="Customer scrapped the unit")

    assert wo.current_phase == "cancelled"
    assert wo.status == "cancelled"
    assert wo.assignments[0].status == "cancelled"
    assert wo.assignments[0].notes == "Customer scrapped the unit"

    with pytest.raises(ConflictError):
        await cancel_work_order(db, wo)


async def test_cancel_stops_session_writes(db, shop, work_order):
    assignment = await assign_work_order(db, work_order, shop.tech.id, shop.manager.id)
    ws = await start_session(db, work_order.id, assignment.id, "initial_testing", shop.tech.id)
    steps = list(ws.template.steps)
    await complete_step(db, ws.id, steps[0].id, "pass", shop.tech.id)

    wo = await cancel_work_order(db, await crud.get_work_order(db, work_order.id))

    ws = await crud.get_work_session(db, ws.id)
    assert ws.status == "cancelled"
    assert ws.completed_at is not None
    with pytest.raises(ConflictError):
        await complete_step(db, ws.id, steps[1].id, "pass", shop.tech.id)
    with pytest.raises(ConflictError):
        await set_paused(db, ws, False)
    with pytest.raises(ConflictError):
        await submit_phase_report(db, ws.id, shop.tech.id)
    with pytest.raises(ConflictError, match="cancelled"):
        await ensure_work_order_open(db, wo.id)

    assert await crud.list_phase_reports(db, work_order_id=wo.id) == []
    ws = await crud.get_work_session(db, ws.id)
    assert len(ws.completions) == 1


async def test_session_writes_refused_after_work_order_closes(db, shop, work_order):
    assignment = await assign_work_order(db, work_order, shop.tech.id, shop.manager.id)
    ws = await start_session(db, work_order.id, assignment.id, "initial_testing", shop.tech.id)
    steps = list(ws.template.steps)

    # a session left open on a work order that was closed some other way
    wo = await crud.get_work_order(db, work_order.id)
    await crud.update_work_order(db, wo, current_phase="completed", status="completed")

    with pytest.raises(ConflictError, match="completed"):
        await complete_step(db, ws.id, steps[0].id, "pass", shop.tech.id)
    ws = await crud.get_work_session(db, ws.id)
    assert ws.completions == []
