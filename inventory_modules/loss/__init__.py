"""
Loss Module (``inventory_modules.loss``).

Reports of lost, stolen, damaged or destroyed SEP/PPE units (RLSDDSP and
RLSDDP).  The named supervisor approves; completion records the final
condition of each unit in the ledger without touching asset quantities.
"""

from inventory_modules.loss.models import (
    Loss,
    LossItem,
    LossReportStatus,
    LossStatus,
    LossType,
)
from inventory_modules.loss.schemas import (
    LossApproveRequest,
    LossCompleteRequest,
    LossCreateRequest,
    LossItemRequest,
)
from inventory_modules.loss.service import LossService
from inventory_modules.loss.workflows import LOSS_WORKFLOW

__all__ = [
    "LOSS_WORKFLOW",
    "Loss",
    "LossApproveRequest",
    "LossCompleteRequest",
    "LossCreateRequest",
    "LossItem",
    "LossItemRequest",
    "LossReportStatus",
    "LossService",
    "LossStatus",
    "LossType",
]
