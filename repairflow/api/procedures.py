"""Procedure template API: browse, author and retire step-by-step procedures."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_supervisor
from repairflow.services.auth import AuthContext
from repairflow.services.phases import parse_phase
from repairflow.schemas import ProcedureTemplateCreate, ProcedureTemplateUpdate, ProcedureTemplateRead

router = APIRouter(prefix="/api/procedures", tags=["procedures"])


@router.get("", response_model=list[ProcedureTemplateRead])
async def list_procedures(
    phase: str | None = None,
    active_only: bool = True,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    if phase:
        try:
            phase = parse_phase(phase).value
        except ValueError as e:
            raise HTTPException(400, str(e))
    return await crud.list_procedure_templates(db, phase=phase, active_only=active_only)


@router.get("/{template_id}", response_model=ProcedureTemplateRead)
async def get_procedure(
    template_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    template = await crud.get_procedure_template(db, template_id)
    if not template:
        raise HTTPException(404, "Procedure template not found")
    return template


@router.post("", response_model=ProcedureTemplateRead, status_code=201)
async def create_procedure(
    body: ProcedureTemplateCreate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    if body.equipment_type_id and not await crud.get_equipment_type(db, body.equipment_type_id):
        raise HTTPException(404, "Equipment type not found")

    steps = [s.model_dump(exclude_none=True) for s in body.steps]
    fields = body.model_dump(exclude={"name", "procedure_type", "phase", "steps"})
    return await crud.create_procedure_template(
        db, body.name, body.procedure_type, body.phase.value, steps,
        created_by=auth.user_id, **fields,
    )


@router.patch("/{template_id}", response_model=ProcedureTemplateRead)
async def update_procedure(
    template_id: str,
    body: ProcedureTemplateUpdate,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    template = await crud.get_procedure_template(db, template_id)
    if not template:
        raise HTTPException(404, "Procedure template not found")
    await crud.update_procedure_template(db, template, **body.model_dump(exclude_none=True))
    return await crud.get_procedure_template(db, template_id)


@router.post("/{template_id}/deactivate", response_model=ProcedureTemplateRead)
async def deactivate_procedure(
    template_id: str,
    auth: AuthContext = Depends(require_supervisor),
    db: AsyncSession = Depends(get_db),
):
    """Retire a template. Sessions already running on it keep their steps."""
    template = await crud.get_procedure_template(db, template_id)
    if not template:
        raise HTTPException(404, "Procedure template not found")
    await crud.update_procedure_template(db, template, is_active=False)
    return await crud.get_procedure_template(db, template_id)
