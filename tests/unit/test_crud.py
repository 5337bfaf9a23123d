import re

from repairflow.db import crud
from repairflow.services.auth import hash_password, verify_password


async def test_create_and_get_user(db):
    user = await crud.create_user(db, " Tech@Shop.Test ", hash_password("secret123"), "Tess", "technician")
    assert user.id is not None
    assert len(user.id) == 26  # ULID
    assert user.email == "tech@shop.test"
    assert user.is_active is True

    fetched = await crud.get_user_by_email(db, "TECH@shop.test")
    assert fetched.id == user.id
    assert verify_password("secret123", fetched.password_hash)


async def test_list_users_by_role(db, shop):
    techs = await crud.list_users(db, role="technician")
    assert {u.email for u in techs} == {"tech@shop.test", "other@shop.test"}
    assert len(await crud.list_users(db)) == 4


async def test_customers_list_active_only(db, shop):
    inactive = await crud.create_customer(db, "Closed Mill")
    await crud.update_customer(db, inactive, is_active=False)

    active = await crud.list_customers(db)
    assert [c.company_name for c in active] == ["Acme Water Works"]
    assert len(await crud.list_customers(db, active_only=False)) == 2


async def test_units_filtered_by_customer_and_model(db, shop):
    await crud.create_equipment_unit(db, shop.model.id, "SN-2002")

    owned = await crud.list_equipment_units(db, customer_id=shop.customer.id)
    assert [u.serial_number for u in owned] == ["SN-1001"]
    by_model = await crud.list_equipment_units(db, equipment_model_id=shop.model.id)
    assert len(by_model) == 2

    assert (await crud.get_equipment_unit_by_serial(db, "SN-2002")) is not None
    assert (await crud.get_equipment_unit_by_serial(db, "SN-9999")) is None


async def test_procedure_steps_numbered_in_order(db, shop):
    template = await crud.get_procedure_template(db, shop.templates["teardown"].id)
    assert [s.step_number for s in template.steps] == [1, 2, 3]
    assert template.steps[1].measurements_required[0]["name"] == "IR"
    assert template.steps[2].photo_required is True


async def test_list_procedure_templates_active_only(db, shop):
    template = shop.templates["rebuild"]
    await crud.update_procedure_template(db, template, is_active=False)

    assert await crud.list_procedure_templates(db, phase="rebuild", active_only=True) == []
    assert len(await crud.list_procedure_templates(db, phase="rebuild")) == 1


async def test_work_order_numbers_are_sequential_per_day(db, shop):
    first = await crud.create_work_order(db, shop.unit.id, created_by=shop.manager.id)
    second = await crud.create_work_order(db, shop.unit.id, created_by=shop.manager.id)

    assert re.fullmatch(r"WO-\d{8}-0001", first.work_order_number)
    assert second.work_order_number.endswith("-0002")
    assert first.work_order_number[:11] == second.work_order_number[:11]


async def test_new_work_order_defaults(work_order):
    assert work_order.current_phase == "pending_assignment"
    assert work_order.status == "pending"
    assert work_order.priority == "medium"
    assert work_order.work_type == "repair"
    assert work_order.assignments == []


async def test_list_work_orders_filters(db, shop, work_order):
    await crud.create_work_order(db, shop.unit.id, priority="emergency")
    assert len(await crud.list_work_orders(db)) == 2
    assert len(await crud.list_work_orders(db, phase="pending_assignment")) == 2
    assert await crud.list_work_orders(db, status="completed") == []
    assert await crud.list_work_orders(db, assigned_to=shop.tech.id) == []


async def test_open_work_orders_by_priority(db, shop, work_order):
    await crud.create_work_order(db, shop.unit.id, priority="emergency")
    counts = await crud.count_open_work_orders_by_priority(db)
    assert counts == {"medium": 1, "emergency": 1}


async def test_rate_ai_interaction_only_writes_rating(db, shop):
    interaction = await crud.create_ai_interaction(
        db, shop.tech.id, "Torque for M12 bolts?", "Around 80 Nm for grade 8.8.",
        context={"currentStep": "Reassemble end bells"},
    )
    rated = await crud.rate_ai_interaction(db, interaction, helpful=True, feedback="Spot on")
    assert rated.helpful is True
    assert rated.feedback == "Spot on"
    assert rated.query == "Torque for M12 bolts?"
    assert rated.response == "Around 80 Nm for grade 8.8."
