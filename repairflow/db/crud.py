"""CRUD operations for RepairFlow models.

Single-row helpers commit on their own. Multi-row workflow transitions live in
``repairflow.services`` so they can commit once.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.config import get_settings
from repairflow.models import (
    User, Customer, Manufacturer, EquipmentType, EquipmentModel, EquipmentUnit,
    ProcedureTemplate, ProcedureStep, WorkOrder, WorkOrderAssignment, WorkOrderApproval,
    WorkSession, StepCompletion, Photo, InspectionFinding, PartsUsed, AIInteraction,
    PhaseReport, Warehouse, InventoryItem, WarehouseStock, StockTransaction, WorkOrderPart,
    Quote, TimeEntry,
)


async def _update(db: AsyncSession, obj, **kwargs):
    for k, v in kwargs.items():
        if v is not None:
            setattr(obj, k, v)
    await db.commit()
    await db.refresh(obj)
    return obj


# ── User ──────────────────────────────────────────────────

async def create_user(
    db: AsyncSession, email: str, password_hash: str,
    full_name: str = "", role: str = "technician", phone: str = "",
) -> User:
    user = User(
        email=email.lower().strip(), password_hash=password_hash,
        full_name=full_name, role=role, phone=phone,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_user(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower().strip()))
    return result.scalars().first()


async def list_users(db: AsyncSession, role: str | None = None) -> list[User]:
    q = select(User).order_by(User.full_name)
    if role:
        q = q.where(User.role == role)
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_user(db: AsyncSession, user: User, **kwargs) -> User:
    return await _update(db, user, **kwargs)


# ── Customer ──────────────────────────────────────────────

async def create_customer(
    db: AsyncSession, company_name: str, contact_person: str = "",
    email: str = "", phone: str = "", address: dict | None = None,
) -> Customer:
    customer = Customer(
        company_name=company_name, contact_person=contact_person,
        email=email, phone=phone, address=address or {},
    )
    db.add(customer)
    await db.commit()
    await db.refresh(customer)
    return customer


async def get_customer(db: AsyncSession, customer_id: str) -> Customer | None:
    return await db.get(Customer, customer_id)


async def list_customers(db: AsyncSession, active_only: bool = True) -> list[Customer]:
    q = select(Customer).order_by(Customer.company_name)
    if active_only:
        q = q.where(Customer.is_active.is_(True))
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_customer(db: AsyncSession, customer: Customer, **kwargs) -> Customer:
    return await _update(db, customer, **kwargs)


# ── Equipment ─────────────────────────────────────────────

async def create_manufacturer(
    db: AsyncSession, name: str, contact_info: dict | None = None, support_url: str = "",
) -> Manufacturer:
    m = Manufacturer(name=name, contact_info=contact_info or {}, support_url=support_url)
    db.add(m)
    await db.commit()
    await db.refresh(m)
    return m


async def get_manufacturer(db: AsyncSession, manufacturer_id: str) -> Manufacturer | None:
    return await db.get(Manufacturer, manufacturer_id)


async def list_manufacturers(db: AsyncSession) -> list[Manufacturer]:
    result = await db.execute(select(Manufacturer).order_by(Manufacturer.name))
    return list(result.scalars().all())


async def create_equipment_type(
    db: AsyncSession, name: str, category: str = "other", description: str = "",
) -> EquipmentType:
    et = EquipmentType(name=name, category=category, description=description)
    db.add(et)
    await db.commit()
    await db.refresh(et)
    return et


async def get_equipment_type(db: AsyncSession, type_id: str) -> EquipmentType | None:
    return await db.get(EquipmentType, type_id)


async def list_equipment_types(db: AsyncSession) -> list[EquipmentType]:
    result = await db.execute(select(EquipmentType).order_by(EquipmentType.name))
    return list(result.scalars().all())


async def create_equipment_model(
    db: AsyncSession, manufacturer_id: str, equipment_type_id: str, model_number: str,
    **fields,
) -> EquipmentModel:
    em = EquipmentModel(
        manufacturer_id=manufacturer_id, equipment_type_id=equipment_type_id,
        model_number=model_number, **fields,
    )
    db.add(em)
    await db.commit()
    await db.refresh(em)
    return em


async def get_equipment_model(db: AsyncSession, model_id: str) -> EquipmentModel | None:
    return await db.get(EquipmentModel, model_id)


async def list_equipment_models(db: AsyncSession, equipment_type_id: str | None = None) -> list[EquipmentModel]:
    q = select(EquipmentModel).order_by(EquipmentModel.model_number)
    if equipment_type_id:
        q = q.where(EquipmentModel.equipment_type_id == equipment_type_id)
    result = await db.execute(q)
    return list(result.scalars().all())


async def create_equipment_unit(
    db: AsyncSession, equipment_model_id: str, serial_number: str, **fields,
) -> EquipmentUnit:
    unit = EquipmentUnit(equipment_model_id=equipment_model_id, serial_number=serial_number, **fields)
    db.add(unit)
    await db.commit()
    await db.refresh(unit)
    return unit


async def get_equipment_unit(db: AsyncSession, unit_id: str) -> EquipmentUnit | None:
    return await db.get(EquipmentUnit, unit_id)


async def get_equipment_unit_by_serial(db: AsyncSession, serial_number: str) -> EquipmentUnit | None:
    result = await db.execute(select(EquipmentUnit).where(EquipmentUnit.serial_number == serial_number))
    return result.scalars().first()


async def list_equipment_units(
    db: AsyncSession, customer_id: str | None = None, equipment_model_id: str | None = None,
) -> list[EquipmentUnit]:
    q = select(EquipmentUnit).order_by(EquipmentUnit.serial_number)
    if customer_id:
        q = q.where(EquipmentUnit.customer_id == customer_id)
    if equipment_model_id:
        q = q.where(EquipmentUnit.equipment_model_id == equipment_model_id)
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_equipment_unit(db: AsyncSession, unit: EquipmentUnit, **kwargs) -> EquipmentUnit:
    return await _update(db, unit, **kwargs)


# ── Procedure templates ───────────────────────────────────

async def create_procedure_template(
    db: AsyncSession, name: str, procedure_type: str, phase: str,
    steps: list[dict], created_by: str | None = None, **fields,
) -> ProcedureTemplate:
    """Create a template with its steps. Step numbers default to list order (1-based)."""
    template = ProcedureTemplate(
        name=name, procedure_type=procedure_type, phase=phase,
        created_by=created_by, **fields,
    )
    for i, step in enumerate(steps, start=1):
        data = dict(step)
        data.setdefault("step_number", i)
        template.steps.append(ProcedureStep(**data))
    db.add(template)
    await db.commit()
    return await get_procedure_template(db, template.id)


async def get_procedure_template(db: AsyncSession, template_id: str) -> ProcedureTemplate | None:
    result = await db.execute(
        select(ProcedureTemplate)
        .where(ProcedureTemplate.id == template_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def list_procedure_templates(
    db: AsyncSession, phase: str | None = None, active_only: bool = False,
) -> list[ProcedureTemplate]:
    q = select(ProcedureTemplate).order_by(ProcedureTemplate.phase, ProcedureTemplate.name)
    if phase:
        q = q.where(ProcedureTemplate.phase == phase)
    if active_only:
        q = q.where(ProcedureTemplate.is_active.is_(True))
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_procedure_template(db: AsyncSession, template: ProcedureTemplate, **kwargs) -> ProcedureTemplate:
    return await _update(db, template, **kwargs)


async def get_procedure_step(db: AsyncSession, step_id: str) -> ProcedureStep | None:
    return await db.get(ProcedureStep, step_id)


# ── Work orders ───────────────────────────────────────────

async def next_work_order_number(db: AsyncSession) -> str:
    """WO-YYYYMMDD-NNNN, numbered per day."""
    prefix = get_settings().workflow.work_order_number_prefix
    day = datetime.now(timezone.utc).strftime("%Y%m%d")
    stem = f"{prefix}-{day}-"
    result = await db.execute(
        select(func.count()).select_from(WorkOrder).where(WorkOrder.work_order_number.like(f"{stem}%"))
    )
    return f"{stem}{result.scalar_one() + 1:04d}"


async def create_work_order(
    db: AsyncSession, equipment_unit_id: str, created_by: str | None = None, **fields,
) -> WorkOrder:
    wo = WorkOrder(
        work_order_number=await next_work_order_number(db),
        equipment_unit_id=equipment_unit_id,
        created_by=created_by,
        **fields,
    )
    db.add(wo)
    await db.commit()
    return await get_work_order(db, wo.id)


async def get_work_order(db: AsyncSession, wo_id: str) -> WorkOrder | None:
    result = await db.execute(
        select(WorkOrder)
        .where(WorkOrder.id == wo_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def list_work_orders(
    db: AsyncSession, status: str | None = None, phase: str | None = None,
    assigned_to: str | None = None, equipment_unit_id: str | None = None,
) -> list[WorkOrder]:
    q = select(WorkOrder).order_by(WorkOrder.created_at.desc())
    if status:
        q = q.where(WorkOrder.status == status)
    if phase:
        q = q.where(WorkOrder.current_phase == phase)
    if assigned_to:
        q = q.where(WorkOrder.assigned_to == assigned_to)
    if equipment_unit_id:
        q = q.where(WorkOrder.equipment_unit_id == equipment_unit_id)
    result = await db.execute(q)
    return list(result.scalars().all())


async def list_work_orders_for_units(
    db: AsyncSession, unit_ids: list[str], limit: int | None = None,
) -> list[WorkOrder]:
    """Most recently completed first; open work orders sort last."""
    if not unit_ids:
        return []
    q = (
        select(WorkOrder)
        .where(WorkOrder.equipment_unit_id.in_(unit_ids))
        .order_by(WorkOrder.completed_at.desc().nulls_last(), WorkOrder.created_at.desc())
    )
    if limit:
        q = q.limit(limit)
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_work_order(db: AsyncSession, wo: WorkOrder, **kwargs) -> WorkOrder:
    await _update(db, wo, **kwargs)
    return await get_work_order(db, wo.id)


# ── Assignments ───────────────────────────────────────────

async def get_assignment(db: AsyncSession, assignment_id: str) -> WorkOrderAssignment | None:
    return await db.get(WorkOrderAssignment, assignment_id)


async def list_open_assignments_for_user(db: AsyncSession, user_id: str) -> list[WorkOrderAssignment]:
    result = await db.execute(
        select(WorkOrderAssignment)
        .where(
            WorkOrderAssignment.assigned_to == user_id,
            WorkOrderAssignment.status.in_(("assigned", "in_progress")),
        )
        .order_by(WorkOrderAssignment.assigned_at)
    )
    return list(result.scalars().all())


async def list_open_assignments_for_phase(
    db: AsyncSession, work_order_id: str, phase: str,
) -> list[WorkOrderAssignment]:
    result = await db.execute(
        select(WorkOrderAssignment).where(
            WorkOrderAssignment.work_order_id == work_order_id,
            WorkOrderAssignment.phase == phase,
            WorkOrderAssignment.status.in_(("assigned", "in_progress")),
        )
    )
    return list(result.scalars().all())


# ── Work sessions ─────────────────────────────────────────

async def get_work_session(db: AsyncSession, session_id: str) -> WorkSession | None:
    result = await db.execute(
        select(WorkSession)
        .where(WorkSession.id == session_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def list_sessions_for_work_order(db: AsyncSession, work_order_id: str) -> list[WorkSession]:
    result = await db.execute(
        select(WorkSession)
        .where(WorkSession.work_order_id == work_order_id)
        .order_by(WorkSession.started_at)
    )
    return list(result.scalars().all())


async def count_sessions_by_status(db: AsyncSession, status: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(WorkSession).where(WorkSession.status == status)
    )
    return result.scalar_one()


async def update_work_session(db: AsyncSession, ws: WorkSession, **kwargs) -> WorkSession:
    await _update(db, ws, **kwargs)
    return await get_work_session(db, ws.id)


async def get_step_completion(db: AsyncSession, completion_id: str) -> StepCompletion | None:
    return await db.get(StepCompletion, completion_id)


async def find_step_completion(db: AsyncSession, session_id: str, step_id: str) -> StepCompletion | None:
    result = await db.execute(
        select(StepCompletion).where(
            StepCompletion.work_session_id == session_id,
            StepCompletion.step_id == step_id,
        )
    )
    return result.scalars().first()


# ── Session records ───────────────────────────────────────

async def create_photo(
    db: AsyncSession, work_session_id: str, storage_path: str, taken_by: str,
    thumbnail_path: str = "", photo_type: str = "during", caption: str = "",
    step_completion_id: str | None = None, extra: dict | None = None,
) -> Photo:
    photo = Photo(
        work_session_id=work_session_id, storage_path=storage_path,
        thumbnail_path=thumbnail_path, photo_type=photo_type, caption=caption,
        step_completion_id=step_completion_id, taken_by=taken_by, extra=extra or {},
    )
    db.add(photo)
    await db.commit()
    await db.refresh(photo)
    return photo


async def get_photo(db: AsyncSession, photo_id: str) -> Photo | None:
    return await db.get(Photo, photo_id)


async def list_photos_for_session(db: AsyncSession, session_id: str) -> list[Photo]:
    result = await db.execute(
        select(Photo).where(Photo.work_session_id == session_id).order_by(Photo.taken_at)
    )
    return list(result.scalars().all())


async def create_finding(db: AsyncSession, work_session_id: str, created_by: str, **fields) -> InspectionFinding:
    finding = InspectionFinding(work_session_id=work_session_id, created_by=created_by, **fields)
    db.add(finding)
    await db.commit()
    await db.refresh(finding)
    return finding


async def list_findings_for_session(db: AsyncSession, session_id: str) -> list[InspectionFinding]:
    result = await db.execute(
        select(InspectionFinding)
        .where(InspectionFinding.work_session_id == session_id)
        .order_by(InspectionFinding.created_at)
    )
    return list(result.scalars().all())


async def create_parts_used(db: AsyncSession, work_session_id: str, installed_by: str, **fields) -> PartsUsed:
    part = PartsUsed(work_session_id=work_session_id, installed_by=installed_by, **fields)
    db.add(part)
    await db.commit()
    await db.refresh(part)
    return part


async def list_parts_for_session(db: AsyncSession, session_id: str) -> list[PartsUsed]:
    result = await db.execute(
        select(PartsUsed)
        .where(PartsUsed.work_session_id == session_id)
        .order_by(PartsUsed.installed_at)
    )
    return list(result.scalars().all())


async def create_ai_interaction(
    db: AsyncSession, user_id: str, query: str, response: str,
    context: dict | None = None, work_session_id: str | None = None,
) -> AIInteraction:
    interaction = AIInteraction(
        user_id=user_id, query=query, response=response,
        context=context or {}, work_session_id=work_session_id,
    )
    db.add(interaction)
    await db.commit()
    await db.refresh(interaction)
    return interaction


async def get_ai_interaction(db: AsyncSession, interaction_id: str) -> AIInteraction | None:
    return await db.get(AIInteraction, interaction_id)


async def rate_ai_interaction(
    db: AsyncSession, interaction: AIInteraction, helpful: bool | None, feedback: str | None,
) -> AIInteraction:
    """Only the rating fields of an interaction are ever written after creation."""
    return await _update(db, interaction, helpful=helpful, feedback=feedback)


# ── Phase reports ─────────────────────────────────────────

async def get_phase_report(db: AsyncSession, report_id: str) -> PhaseReport | None:
    return await db.get(PhaseReport, report_id)


async def get_report_for_session(db: AsyncSession, session_id: str) -> PhaseReport | None:
    result = await db.execute(select(PhaseReport).where(PhaseReport.work_session_id == session_id))
    return result.scalars().first()


async def list_phase_reports(
    db: AsyncSession, work_order_id: str | None = None, status: str | None = None,
) -> list[PhaseReport]:
    q = select(PhaseReport).order_by(PhaseReport.created_at)
    if work_order_id:
        q = q.where(PhaseReport.work_order_id == work_order_id)
    if status:
        q = q.where(PhaseReport.status == status)
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_phase_report(db: AsyncSession, report: PhaseReport, **kwargs) -> PhaseReport:
    return await _update(db, report, **kwargs)


# ── Approvals ─────────────────────────────────────────────

async def get_approval(db: AsyncSession, approval_id: str) -> WorkOrderApproval | None:
    result = await db.execute(
        select(WorkOrderApproval)
        .where(WorkOrderApproval.id == approval_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_pending_approval(db: AsyncSession, work_order_id: str) -> WorkOrderApproval | None:
    result = await db.execute(
        select(WorkOrderApproval).where(
            WorkOrderApproval.work_order_id == work_order_id,
            WorkOrderApproval.status == "pending",
        )
    )
    return result.scalars().first()


async def list_approvals(
    db: AsyncSession, status: str | None = None, work_order_id: str | None = None,
) -> list[WorkOrderApproval]:
    q = select(WorkOrderApproval).order_by(WorkOrderApproval.requested_at.desc())
    if status:
        q = q.where(WorkOrderApproval.status == status)
    if work_order_id:
        q = q.where(WorkOrderApproval.work_order_id == work_order_id)
    result = await db.execute(q)
    return list(result.scalars().all())


# ── Inventory ─────────────────────────────────────────────

async def create_warehouse(db: AsyncSession, name: str, address: dict | None = None) -> Warehouse:
    wh = Warehouse(name=name, address=address or {})
    db.add(wh)
    await db.commit()
    await db.refresh(wh)
    return wh


async def get_warehouse(db: AsyncSession, warehouse_id: str) -> Warehouse | None:
    return await db.get(Warehouse, warehouse_id)


async def list_warehouses(db: AsyncSession) -> list[Warehouse]:
    result = await db.execute(select(Warehouse).where(Warehouse.is_active.is_(True)).order_by(Warehouse.name))
    return list(result.scalars().all())


async def create_inventory_item(db: AsyncSession, part_number: str, description: str, **fields) -> InventoryItem:
    item = InventoryItem(part_number=part_number.strip(), description=description, **fields)
    db.add(item)
    await db.commit()
    return await get_inventory_item(db, item.id)


async def get_inventory_item(db: AsyncSession, item_id: str) -> InventoryItem | None:
    result = await db.execute(
        select(InventoryItem)
        .where(InventoryItem.id == item_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_inventory_item_by_part_number(db: AsyncSession, part_number: str) -> InventoryItem | None:
    result = await db.execute(select(InventoryItem).where(InventoryItem.part_number == part_number.strip()))
    return result.scalars().first()


async def list_inventory_items(db: AsyncSession, category: str | None = None) -> list[InventoryItem]:
    q = (
        select(InventoryItem)
        .where(InventoryItem.is_active.is_(True))
        .order_by(InventoryItem.part_number)
        .execution_options(populate_existing=True)
    )
    if category:
        q = q.where(InventoryItem.category == category)
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_inventory_item(db: AsyncSession, item: InventoryItem, **kwargs) -> InventoryItem:
    await _update(db, item, **kwargs)
    return await get_inventory_item(db, item.id)


async def get_stock(db: AsyncSession, item_id: str, warehouse_id: str) -> WarehouseStock | None:
    result = await db.execute(
        select(WarehouseStock)
        .where(WarehouseStock.inventory_item_id == item_id, WarehouseStock.warehouse_id == warehouse_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def list_stock_transactions(db: AsyncSession, item_id: str) -> list[StockTransaction]:
    result = await db.execute(
        select(StockTransaction)
        .where(StockTransaction.inventory_item_id == item_id)
        .order_by(StockTransaction.created_at)
    )
    return list(result.scalars().all())


async def list_parts_for_work_order(db: AsyncSession, work_order_id: str) -> list[WorkOrderPart]:
    result = await db.execute(
        select(WorkOrderPart)
        .where(WorkOrderPart.work_order_id == work_order_id)
        .order_by(WorkOrderPart.installed_at)
    )
    return list(result.scalars().all())


async def count_low_stock_items(db: AsyncSession) -> int:
    """Active items whose on-hand total across warehouses is at or below the reorder level."""
    on_hand = (
        select(func.coalesce(func.sum(WarehouseStock.quantity_on_hand), 0))
        .where(WarehouseStock.inventory_item_id == InventoryItem.id)
        .scalar_subquery()
    )
    result = await db.execute(
        select(func.count())
        .select_from(InventoryItem)
        .where(InventoryItem.is_active.is_(True), InventoryItem.reorder_level > 0, on_hand <= InventoryItem.reorder_level)
    )
    return result.scalar_one()


# ── Quotes ────────────────────────────────────────────────

async def next_quote_number(db: AsyncSession) -> str:
    """Q-YYYYMMDD-NNNN, numbered per day."""
    prefix = get_settings().workflow.quote_number_prefix
    day = datetime.now(timezone.utc).strftime("%Y%m%d")
    stem = f"{prefix}-{day}-"
    result = await db.execute(
        select(func.count()).select_from(Quote).where(Quote.quote_number.like(f"{stem}%"))
    )
    return f"{stem}{result.scalar_one() + 1:04d}"


async def get_quote(db: AsyncSession, quote_id: str) -> Quote | None:
    result = await db.execute(
        select(Quote)
        .where(Quote.id == quote_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def list_quotes(
    db: AsyncSession, work_order_id: str | None = None, status: str | None = None,
) -> list[Quote]:
    q = select(Quote).order_by(Quote.created_at.desc())
    if work_order_id:
        q = q.where(Quote.work_order_id == work_order_id)
    if status:
        q = q.where(Quote.status == status)
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_quote(db: AsyncSession, quote: Quote, **kwargs) -> Quote:
    await _update(db, quote, **kwargs)
    return await get_quote(db, quote.id)


# ── Time entries ──────────────────────────────────────────

async def get_time_entry(db: AsyncSession, entry_id: str) -> TimeEntry | None:
    result = await db.execute(
        select(TimeEntry)
        .where(TimeEntry.id == entry_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_active_time_entry(db: AsyncSession, user_id: str) -> TimeEntry | None:
    result = await db.execute(
        select(TimeEntry).where(TimeEntry.user_id == user_id, TimeEntry.status == "active")
    )
    return result.scalars().first()


async def list_time_entries(
    db: AsyncSession, work_order_id: str | None = None, user_id: str | None = None,
    status: str | None = None, since: datetime | None = None,
) -> list[TimeEntry]:
    q = select(TimeEntry).order_by(TimeEntry.clock_in_time)
    if work_order_id:
        q = q.where(TimeEntry.work_order_id == work_order_id)
    if user_id:
        q = q.where(TimeEntry.user_id == user_id)
    if status:
        q = q.where(TimeEntry.status == status)
    if since:
        q = q.where(TimeEntry.clock_in_time >= since)
    result = await db.execute(q)
    return list(result.scalars().all())


async def list_active_entries_for_session(db: AsyncSession, session_id: str) -> list[TimeEntry]:
    result = await db.execute(
        select(TimeEntry).where(TimeEntry.work_session_id == session_id, TimeEntry.status == "active")
    )
    return list(result.scalars().all())


async def list_active_entries_for_work_order(db: AsyncSession, work_order_id: str) -> list[TimeEntry]:
    result = await db.execute(
        select(TimeEntry).where(TimeEntry.work_order_id == work_order_id, TimeEntry.status == "active")
    )
    return list(result.scalars().all())


# ── Dashboard aggregates ──────────────────────────────────

async def count_work_orders_by(db: AsyncSession, column) -> dict[str, int]:
    result = await db.execute(select(column, func.count()).group_by(column))
    return {key: count for key, count in result.all()}


async def count_open_work_orders_by_priority(db: AsyncSession) -> dict[str, int]:
    result = await db.execute(
        select(WorkOrder.priority, func.count())
        .where(WorkOrder.status.not_in(("completed", "cancelled", "invoiced")))
        .group_by(WorkOrder.priority)
    )
    return {key: count for key, count in result.all()}


async def count_pending_approvals(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(WorkOrderApproval).where(WorkOrderApproval.status == "pending")
    )
    return result.scalar_one()


async def count_active_time_entries(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(TimeEntry).where(TimeEntry.status == "active")
    )
    return result.scalar_one()
