"""
Waste Module (``inventory_modules.waste``).

Waste materials reports for units already marked for disposal.
"""

from inventory_modules.waste.models import DisposalType, Waste, WasteItem, WasteStatus
from inventory_modules.waste.schemas import (
    WasteCompleteRequest,
    WasteCreateRequest,
    WasteItemRequest,
)
from inventory_modules.waste.service import WasteService
from inventory_modules.waste.workflows import WASTE_WORKFLOW

__all__ = [
    "WASTE_WORKFLOW",
    "DisposalType",
    "Waste",
    "WasteCompleteRequest",
    "WasteCreateRequest",
    "WasteItem",
    "WasteItemRequest",
    "WasteService",
    "WasteStatus",
]
