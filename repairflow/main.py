"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from repairflow.config import get_settings
from repairflow.db.engine import engine, init_db
from repairflow.api.router import api_router
from repairflow.services.errors import WorkflowError

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("RepairFlow started (database %s)", engine.url.render_as_string(hide_password=True))
    yield
    await engine.dispose()


app = FastAPI(
    title="RepairFlow",
    description="Phase-driven repair workflow for rotating equipment: procedures, step records, phase reports, approvals and AI assistance.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# API routes
app.include_router(api_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
