"""
Inventory Modules.

Lifecycle documents built on the inventory kernel.  Each module contains:
- Domain models (status enums and frozen DTOs)
- Request schemas (validated at the boundary)
- ORM persistence models
- Workflows (status transition tables)
- A service that composes ledger writes, counter allocation and status
  changes inside one unit of work

Modules:
- issue_slip: ICS/PAR issuance of SEP/PPE units to a person
- returns: units handed back for reissue or disposal
- loss: lost, stolen, damaged or destroyed property reports
- waste: disposal of units already marked for disposal
- maintenance: repair requests against a unit (no stock movement)
- ris: requisition and issue of consumables
- transfer: units moved to another office or entity
"""

from inventory_modules import (
    issue_slip,
    loss,
    maintenance,
    returns,
    ris,
    transfer,
    waste,
)

__all__ = [
    "issue_slip",
    "loss",
    "maintenance",
    "returns",
    "ris",
    "transfer",
    "waste",
]
