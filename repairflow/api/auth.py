"""Auth API: login, logout, current user, user management."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from repairflow.db import crud
from repairflow.db.engine import get_db
from repairflow.dependencies import require_auth, require_admin
from repairflow.schemas import LoginRequest, UserCreate, UserUpdate, UserRead
from repairflow.services.auth import (
    AuthContext, SESSION_COOKIE_NAME, SESSION_MAX_AGE_DAYS,
    authenticate, create_session, hash_password, remove_session,
)

router = APIRouter(tags=["auth"])


# ── Login / Logout ────────────────────────────────────────

@router.post("/api/auth/login")
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    user = await authenticate(db, body.email, body.password)
    if not user:
        return JSONResponse(status_code=401, content={"detail": "Invalid credentials"})

    ip = request.client.host if request.client else ""
    token = await create_session(user, db, ip_address=ip)

    response = JSONResponse(content={"ok": True, "user_id": user.id, "role": user.role})
    response.set_cookie(
        SESSION_COOKIE_NAME, token,
        httponly=True, samesite="lax",
        max_age=86400 * SESSION_MAX_AGE_DAYS,
    )
    return response


@router.post("/api/auth/logout")
async def logout(
    request: Request,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        await remove_session(token, db)
    response = JSONResponse(content={"ok": True})
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/api/auth/me")
async def get_me(auth: AuthContext = Depends(require_auth)):
    return {
        "user_id": auth.user_id,
        "email": auth.email,
        "full_name": auth.full_name,
        "role": auth.role,
    }


# ── Users ─────────────────────────────────────────────────

@router.get("/api/users", response_model=list[UserRead])
async def list_users(
    role: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Technicians use this to look up colleagues; only admins manage users."""
    return await crud.list_users(db, role=role)


@router.post("/api/users", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if await crud.get_user_by_email(db, body.email):
        raise HTTPException(409, "A user with this email already exists")
    return await crud.create_user(
        db, body.email, hash_password(body.password),
        full_name=body.full_name, role=body.role, phone=body.phone,
    )


@router.patch("/api/users/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    body: UserUpdate,
    auth: AuthContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await crud.get_user(db, user_id)
    if not user:
        raise HTTPException(404, "User not found")
    if user.id == auth.user_id and body.is_active is False:
        raise HTTPException(400, "You cannot deactivate your own account")
    return await crud.update_user(db, user, **body.model_dump(exclude_none=True))
