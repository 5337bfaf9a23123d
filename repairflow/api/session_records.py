"""Photos, inspection findings and installed parts recorded during a work session.

All three are append-only: there are create and read endpoints, nothing else.
"""

from __future__ import annotations

from typing import get_args

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.api.work_sessions import load_session
from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth
from repairflow.services.auth import AuthContext
from repairflow.services.photo_store import (
    InvalidImageError, content_type_for, max_upload_bytes, read_photo, save_photo,
)
from repairflow.schemas import (
    PhotoRead, FindingCreate, FindingRead, PartsUsedCreate, PartsUsedRead,
)
from repairflow.schemas.session_records import PhotoType

router = APIRouter(prefix="/api/work-sessions/{session_id}", tags=["session_records"])

PHOTO_TYPES = get_args(PhotoType)


async def _check_completion(db: AsyncSession, session_id: str, completion_id: str | None) -> None:
    if not completion_id:
        return
    completion = await crud.get_step_completion(db, completion_id)
    if not completion or completion.work_session_id != session_id:
        raise HTTPException(404, "Step completion not found in this session")


# ── Photos ────────────────────────────────────────────────

@router.post("/photos", response_model=PhotoRead, status_code=201)
async def upload_photo(
    session_id: str,
    file: UploadFile = File(...),
    photo_type: str = Form("during"),
    caption: str = Form(""),
    step_completion_id: str = Form(""),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await load_session(db, session_id, auth)
    if photo_type not in PHOTO_TYPES:
        raise HTTPException(400, f"photo_type must be one of {', '.join(PHOTO_TYPES)}")
    await _check_completion(db, session_id, step_completion_id or None)

    limit = max_upload_bytes()
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(413, f"Photo exceeds the upload limit of {limit} bytes")
    ext = ".jpg"
    if file.filename and "." in file.filename:
        ext = "." + file.filename.rsplit(".", 1)[1].lower()

    try:
        storage_path, thumbnail_path = await save_photo(data, session_id, ext)
    except InvalidImageError as e:
        raise HTTPException(400, str(e))

    return await crud.create_photo(
        db, session_id, storage_path, auth.user_id,
        thumbnail_path=thumbnail_path,
        photo_type=photo_type,
        caption=caption,
        step_completion_id=step_completion_id or None,
        extra={"original_filename": file.filename or "", "size": len(data)},
    )


@router.get("/photos", response_model=list[PhotoRead])
async def list_photos(
    session_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_photos_for_session(db, session_id)


@router.get("/photos/{photo_id}/file")
async def get_photo_file(
    session_id: str,
    photo_id: str,
    thumbnail: bool = False,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    photo = await crud.get_photo(db, photo_id)
    if not photo or photo.work_session_id != session_id:
        raise HTTPException(404, "Photo not found")
    path = photo.thumbnail_path if thumbnail and photo.thumbnail_path else photo.storage_path
    try:
        data = await read_photo(path)
    except FileNotFoundError:
        raise HTTPException(404, "Photo file missing")
    return Response(content=data, media_type=content_type_for(path))


# ── Findings ──────────────────────────────────────────────

@router.post("/findings", response_model=FindingRead, status_code=201)
async def create_finding(
    session_id: str,
    body: FindingCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await load_session(db, session_id, auth)
    await _check_completion(db, session_id, body.step_completion_id)
    return await crud.create_finding(db, session_id, auth.user_id, **body.model_dump())


@router.get("/findings", response_model=list[FindingRead])
async def list_findings(
    session_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_findings_for_session(db, session_id)


# ── Parts ─────────────────────────────────────────────────

@router.post("/parts", response_model=PartsUsedRead, status_code=201)
async def record_part(
    session_id: str,
    body: PartsUsedCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await load_session(db, session_id, auth)
    return await crud.create_parts_used(db, session_id, auth.user_id, **body.model_dump())


@router.get("/parts", response_model=list[PartsUsedRead])
async def list_parts(
    session_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_parts_for_session(db, session_id)
