"""
Maintenance Module (``inventory_modules.maintenance``).

Maintenance requests for individual units.  No ledger writes.
"""

from inventory_modules.maintenance.models import Maintenance, MaintenanceStatus
from inventory_modules.maintenance.schemas import (
    MaintenanceCancelRequest,
    MaintenanceCompleteRequest,
    MaintenanceCreateRequest,
    MaintenanceRescheduleRequest,
    MaintenanceScheduleRequest,
)
from inventory_modules.maintenance.service import MaintenanceService
from inventory_modules.maintenance.workflows import MAINTENANCE_WORKFLOW

__all__ = [
    "MAINTENANCE_WORKFLOW",
    "Maintenance",
    "MaintenanceCancelRequest",
    "MaintenanceCompleteRequest",
    "MaintenanceCreateRequest",
    "MaintenanceRescheduleRequest",
    "MaintenanceScheduleRequest",
    "MaintenanceService",
    "MaintenanceStatus",
]
