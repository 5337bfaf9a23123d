"""SQLAlchemy ORM models."""

from repairflow.models.base import Base
from repairflow.models.user import User, UserSession
from repairflow.models.customer import Customer
from repairflow.models.equipment import Manufacturer, EquipmentType, EquipmentModel, EquipmentUnit
from repairflow.models.procedure import ProcedureTemplate, ProcedureStep
from repairflow.models.work_order import WorkOrder, WorkOrderAssignment, WorkOrderApproval
from repairflow.models.work_session import WorkSession, StepCompletion
from repairflow.models.session_records import Photo, InspectionFinding, PartsUsed, AIInteraction
from repairflow.models.phase_report import PhaseReport
from repairflow.models.inventory import Warehouse, InventoryItem, WarehouseStock, StockTransaction, WorkOrderPart
from repairflow.models.quote import Quote, QuoteLineItem
from repairflow.models.time_entry import TimeEntry

__all__ = [
    "Base", "User", "UserSession", "Customer",
    "Manufacturer", "EquipmentType", "EquipmentModel", "EquipmentUnit",
    "ProcedureTemplate", "ProcedureStep",
    "WorkOrder", "WorkOrderAssignment", "WorkOrderApproval",
    "WorkSession", "StepCompletion",
    "Photo", "InspectionFinding", "PartsUsed", "AIInteraction",
    "PhaseReport",
    "Warehouse", "InventoryItem", "WarehouseStock", "StockTransaction", "WorkOrderPart",
    "Quote", "QuoteLineItem", "TimeEntry",
]
