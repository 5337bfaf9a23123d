"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from repairflow.api.auth import router as auth_router
from repairflow.api.customers import router as customers_router
from repairflow.api.equipment import router as equipment_router
from repairflow.api.procedures import router as procedures_router
from repairflow.api.work_orders import router as work_orders_router
from repairflow.api.work_sessions import router as work_sessions_router
from repairflow.api.session_records import router as session_records_router
from repairflow.api.phase_reports import router as phase_reports_router
from repairflow.api.approvals import router as approvals_router
from repairflow.api.inventory import router as inventory_router
from repairflow.api.quotes import router as quotes_router
from repairflow.api.time_entries import router as time_entries_router
from repairflow.api.ai import router as ai_router
from repairflow.api.dashboard import router as dashboard_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(customers_router)
api_router.include_router(equipment_router)
api_router.include_router(procedures_router)
api_router.include_router(work_orders_router)
api_router.include_router(work_sessions_router)
api_router.include_router(session_records_router)
api_router.include_router(phase_reports_router)
api_router.include_router(approvals_router)
api_router.include_router(inventory_router)
api_router.include_router(quotes_router)
api_router.include_router(time_entries_router)
api_router.include_router(ai_router)
api_router.include_router(dashboard_router)
