"""
Transfer Module (``inventory_modules.transfer``).

Inventory (SEP) and property (PPE) transfer reports.  Completion writes the
``transferred`` entries with a caller-computed balance per asset.
"""

from inventory_modules.transfer.models import (
    Transfer,
    TransferItem,
    TransferReportType,
    TransferStatus,
    TransferType,
)
from inventory_modules.transfer.schemas import (
    TransferApproveRequest,
    TransferCompleteRequest,
    TransferCreateRequest,
    TransferItemRequest,
)
from inventory_modules.transfer.service import TransferService
from inventory_modules.transfer.workflows import TRANSFER_WORKFLOW

__all__ = [
    "TRANSFER_WORKFLOW",
    "Transfer",
    "TransferApproveRequest",
    "TransferCompleteRequest",
    "TransferCreateRequest",
    "TransferItem",
    "TransferItemRequest",
    "TransferReportType",
    "TransferService",
    "TransferStatus",
    "TransferType",
]
