"""Pydantic request/response schemas."""

from repairflow.schemas.user import LoginRequest, UserCreate, UserUpdate, UserRead
from repairflow.schemas.customer import CustomerCreate, CustomerUpdate, CustomerRead
from repairflow.schemas.equipment import (
    ManufacturerCreate, ManufacturerRead,
    EquipmentTypeCreate, EquipmentTypeRead,
    EquipmentModelCreate, EquipmentModelRead,
    EquipmentUnitCreate, EquipmentUnitUpdate, EquipmentUnitRead,
)
from repairflow.schemas.procedure import (
    ProcedureStepCreate, ProcedureStepRead,
    ProcedureTemplateCreate, ProcedureTemplateUpdate, ProcedureTemplateRead,
)
from repairflow.schemas.work_order import (
    WorkOrderCreate, WorkOrderUpdate, WorkOrderRead,
    AssignmentRead, AssignRequest, PhaseCompleteRequest, CancelRequest,
)
from repairflow.schemas.work_session import (
    SessionStart, WorkSessionRead, StepCompleteRequest, StepCompletionRead,
    StepProgress, EquipmentDetailsUpdate,
)
from repairflow.schemas.session_records import (
    PhotoRead, FindingCreate, FindingRead, PartsUsedCreate, PartsUsedRead, AIInteractionRate,
)
from repairflow.schemas.phase_report import PhaseReportSubmit, PhaseReportSend, PhaseReportRead
from repairflow.schemas.approval import RequiredPart, ApprovalRequest, ApprovalDecision, ApprovalRead
from repairflow.schemas.inventory import (
    WarehouseCreate, WarehouseRead, InventoryItemCreate, InventoryItemUpdate, InventoryItemRead,
    StockRead, StockAdjustment, StockTransactionRead, WorkOrderPartCreate, WorkOrderPartRead,
)
from repairflow.schemas.quote import QuoteGenerate, QuoteStatusUpdate, QuoteLineItemRead, QuoteRead
from repairflow.schemas.time_entry import ClockIn, ClockOut, TimeEntryRead, HoursSummary

__all__ = [
    "LoginRequest", "UserCreate", "UserUpdate", "UserRead",
    "CustomerCreate", "CustomerUpdate", "CustomerRead",
    "ManufacturerCreate", "ManufacturerRead",
    "EquipmentTypeCreate", "EquipmentTypeRead",
    "EquipmentModelCreate", "EquipmentModelRead",
    "EquipmentUnitCreate", "EquipmentUnitUpdate", "EquipmentUnitRead",
    "ProcedureStepCreate", "ProcedureStepRead",
    "ProcedureTemplateCreate", "ProcedureTemplateUpdate", "ProcedureTemplateRead",
    "WorkOrderCreate", "WorkOrderUpdate", "WorkOrderRead",
    "AssignmentRead", "AssignRequest", "PhaseCompleteRequest", "CancelRequest",
    "SessionStart", "WorkSessionRead", "StepCompleteRequest", "StepCompletionRead",
    "StepProgress", "EquipmentDetailsUpdate",
    "PhotoRead", "FindingCreate", "FindingRead", "PartsUsedCreate", "PartsUsedRead",
    "AIInteractionRate",
    "PhaseReportSubmit", "PhaseReportSend", "PhaseReportRead",
    "RequiredPart", "ApprovalRequest", "ApprovalDecision", "ApprovalRead",
    "WarehouseCreate", "WarehouseRead", "InventoryItemCreate", "InventoryItemUpdate", "InventoryItemRead",
    "StockRead", "StockAdjustment", "StockTransactionRead", "WorkOrderPartCreate", "WorkOrderPartRead",
    "QuoteGenerate", "QuoteStatusUpdate", "QuoteLineItemRead", "QuoteRead",
    "ClockIn", "ClockOut", "TimeEntryRead", "HoursSummary",
]
