"""
Issue Slip Module (``inventory_modules.issue_slip``).

Responsibility
--------------
ICS and PAR issue slips: a slip names one SEP/PPE asset, a quantity and
the person receiving it.  Issuing the slip numbers the units and records
them as ``reissued`` to that person's office.

Failure Modes
-------------
- Issuance beyond available stock or beyond the initial allotment raises a
  BadRequest kind and leaves the ledger untouched.
"""

from inventory_modules.issue_slip.models import (
    IssueSlip,
    IssueSlipStatus,
    IssueSlipType,
    SlipClass,
    classify_slip,
)
from inventory_modules.issue_slip.schemas import (
    IssueSlipCreateRequest,
    IssueSlipIssueRequest,
    IssueSlipUpdateRequest,
)
from inventory_modules.issue_slip.service import IssueSlipService
from inventory_modules.issue_slip.workflows import ISSUE_SLIP_WORKFLOW

__all__ = [
    "ISSUE_SLIP_WORKFLOW",
    "IssueSlip",
    "IssueSlipCreateRequest",
    "IssueSlipIssueRequest",
    "IssueSlipService",
    "IssueSlipStatus",
    "IssueSlipType",
    "IssueSlipUpdateRequest",
    "SlipClass",
    "classify_slip",
]
