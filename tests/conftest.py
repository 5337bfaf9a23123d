"""Shared fixtures: an in-memory database and a small seeded repair shop."""

from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from repairflow.db import crud
from repairflow.models import Base
from repairflow.services.auth import hash_password
from repairflow.services.phase_reports import submit_phase_report
from repairflow.services.work_orders import assign_work_order
from repairflow.services.work_sessions import complete_step, start_session

STEPS = [
    {"title": "Record nameplate data", "step_type": "inspection"},
    {"title": "Measure insulation resistance", "step_type": "measurement",
     "measurements_required": [{"name": "IR", "unit": "MOhm", "min": 100}]},
    {"title": "Photograph as-received condition", "step_type": "action", "photo_required": True},
]

WORKING_PHASES = ("initial_testing", "teardown", "repair_scope", "rebuild", "final_testing")


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def shop(db):
    """Users, one customer-owned motor and a three-step procedure per working phase."""
    pw = hash_password("password123")
    admin = await crud.create_user(db, "admin@shop.test", pw, "Ada Admin", "admin")
    manager = await crud.create_user(db, "manager@shop.test", pw, "Mo Manager", "manager")
    tech = await crud.create_user(db, "tech@shop.test", pw, "Tess Tech", "technician")
    other_tech = await crud.create_user(db, "other@shop.test", pw, "Otto Other", "technician")

    customer = await crud.create_customer(
        db, "Acme Water Works", contact_person="Pat Plant", email="ops@acme.test",
    )
    manufacturer = await crud.create_manufacturer(db, "Baldor")
    motor_type = await crud.create_equipment_type(db, "AC Induction Motor", "motor")
    model = await crud.create_equipment_model(
        db, manufacturer.id, motor_type.id, "EM3770T",
        specifications={"horsepower": 10, "voltage": "230/460", "rpm": 1770},
    )
    unit = await crud.create_equipment_unit(
        db, model.id, "SN-1001", customer_id=customer.id, location="Pump house 2",
    )

    templates = {}
    for phase in WORKING_PHASES:
        templates[phase] = await crud.create_procedure_template(
            db, f"{phase.replace('_', ' ').title()} Procedure", "test", phase, STEPS,
            created_by=manager.id,
        )

    return SimpleNamespace(
        admin=admin, manager=manager, tech=tech, other_tech=other_tech,
        customer=customer, manufacturer=manufacturer, motor_type=motor_type,
        model=model, unit=unit, templates=templates,
    )


@pytest_asyncio.fixture
async def work_order(db, shop):
    return await crud.create_work_order(
        db, shop.unit.id, created_by=shop.manager.id, customer_id=shop.customer.id,
        reported_issue="Motor trips on overload after 10 minutes",
    )


@pytest.fixture
def run_phase(db, shop):
    """Assign, run every step and submit the report for the work order's current phase."""
    async def _run(wo_id: str, technician=None, results: dict | None = None):
        tech = technician or shop.tech
        wo = await crud.get_work_order(db, wo_id)
        assignment = await assign_work_order(db, wo, tech.id, shop.manager.id)
        wo = await crud.get_work_order(db, wo_id)
        ws = await start_session(db, wo.id, assignment.id, wo.current_phase, tech.id)
        for i, step in enumerate(ws.template.steps):
            await complete_step(db, ws.id, step.id, (results or {}).get(i, "pass"), tech.id)
        report = await submit_phase_report(db, ws.id, tech.id)
        return ws, report
    return _run


@pytest_asyncio.fixture
async def stock(db, shop):
    """One warehouse holding ten bearings and a gasket kept at its reorder level."""
    from repairflow.services.inventory import adjust_stock

    warehouse = await crud.create_warehouse(db, "Main shop")
    bearing = await crud.create_inventory_item(
        db, "6309-2Z", "Deep groove ball bearing", category="bearings", unit_cost=38.75, reorder_level=4,
    )
    gasket = await crud.create_inventory_item(
        db, "GSK-256", "End bell gasket", category="gaskets", unit_cost=12.0, reorder_level=2,
    )
    await adjust_stock(db, bearing.id, warehouse.id, 10, "purchase", performed_by=shop.manager.id)
    await adjust_stock(db, gasket.id, warehouse.id, 2, "purchase", performed_by=shop.manager.id)
    return SimpleNamespace(warehouse=warehouse, bearing=bearing, gasket=gasket)
