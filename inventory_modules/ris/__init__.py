"""
RIS Module (``inventory_modules.ris``).

Requisition and Issue Slips for consumables.  Issuing is the only
transition that touches the ledger.
"""

from inventory_modules.ris.models import Ris, RisItem, RisSerialNo, RisStatus
from inventory_modules.ris.schemas import (
    RisApproveRequest,
    RisCancelRequest,
    RisCreateRequest,
    RisIssueRequest,
    RisItemRequest,
    RisItemUpdate,
    RisReviewRequest,
    RisUpdateRequest,
)
from inventory_modules.ris.service import RisService
from inventory_modules.ris.workflows import RIS_WORKFLOW

__all__ = [
    "RIS_WORKFLOW",
    "Ris",
    "RisApproveRequest",
    "RisCancelRequest",
    "RisCreateRequest",
    "RisIssueRequest",
    "RisItem",
    "RisItemRequest",
    "RisItemUpdate",
    "RisReviewRequest",
    "RisSerialNo",
    "RisService",
    "RisStatus",
    "RisUpdateRequest",
]
