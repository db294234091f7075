"""
Returns Module (``inventory_modules.returns``).

Issued SEP/PPE units handed back by an office, either for reissue or for
disposal.  Completion is the only transition that touches the ledger.
"""

from inventory_modules.returns.models import (
    Return,
    ReturnItem,
    ReturnStatus,
    StockRemarks,
)
from inventory_modules.returns.schemas import (
    ReturnApproveRequest,
    ReturnCompleteRequest,
    ReturnCreateRequest,
    ReturnItemRequest,
)
from inventory_modules.returns.service import ReturnService
from inventory_modules.returns.workflows import RETURN_WORKFLOW

__all__ = [
    "RETURN_WORKFLOW",
    "Return",
    "ReturnApproveRequest",
    "ReturnCompleteRequest",
    "ReturnCreateRequest",
    "ReturnItem",
    "ReturnItemRequest",
    "ReturnService",
    "ReturnStatus",
    "StockRemarks",
]
