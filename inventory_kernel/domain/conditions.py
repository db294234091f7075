"""
Stock conditions and asset types (``inventory_kernel.domain.conditions``).

Responsibility
--------------
Closed vocabularies for what an asset is and what state a physical unit is
in, plus the table of condition changes a unit may go through.  Nothing in
the kernel compares condition strings directly; everything goes through
``StockCondition`` and ``CONDITION_TRANSITIONS``.

Architecture position
---------------------
**Kernel domain layer** -- pure.  ZERO I/O.

Unit lifecycle::

    good-condition --> reissued --> returned --> reissued ...
          |               |            |
          |               +--> lost | stolen | damaged | destroyed
          |               +--> for-disposal
          +--> transferred <--+
"""

from __future__ import annotations

from enum import Enum, unique

from inventory_kernel.exceptions import InvalidConditionTransitionError


@unique
class AssetType(str, Enum):
    """Kind of catalog item."""

    CONSUMABLE = "consumable"
    SEP = "SEP"  # semi-expendable property
    PPE = "PPE"  # property, plant and equipment

    @property
    def is_unit_tracked(self) -> bool:
        """SEP and PPE units carry an itemNo; consumables do not."""
        return self is not AssetType.CONSUMABLE


@unique
class AssetStatus(str, Enum):
    """Administrative status of an asset record."""

    ACTIVE = "active"
    DELETED = "deleted"


@unique
class ModeOfAcquisition(str, Enum):
    PROCUREMENT = "procurement"
    DONATION = "donation"
    TRANSFER = "transfer"


@unique
class ProcurementType(str, Enum):
    PS_DBM = "ps-dbm"
    BIDDING = "bidding"
    QUOTATION = "quotation"

    @property
    def keeps_supplier(self) -> bool:
        """Only competitively procured items record their supplier."""
        return self is not ProcurementType.PS_DBM


@unique
class StockCondition(str, Enum):
    """Disposition label carried by every stock ledger entry."""

    GOOD_CONDITION = "good-condition"
    REISSUED = "reissued"
    RETURNED = "returned"
    TRANSFERRED = "transferred"
    FOR_DISPOSAL = "for-disposal"
    LOST = "lost"
    STOLEN = "stolen"
    DAMAGED = "damaged"
    DESTROYED = "destroyed"


# Conditions that put units back into the on-hand pool.
INBOUND_CONDITIONS: frozenset[StockCondition] = frozenset({
    StockCondition.GOOD_CONDITION,
    StockCondition.RETURNED,
})

# Conditions that record a unit leaving the pool without changing quantity
# (the preceding reissued entry already took it out).
NEUTRAL_CONDITIONS: frozenset[StockCondition] = frozenset({
    StockCondition.FOR_DISPOSAL,
    StockCondition.LOST,
    StockCondition.STOLEN,
    StockCondition.DAMAGED,
    StockCondition.DESTROYED,
})

LOSS_CONDITIONS: frozenset[StockCondition] = frozenset({
    StockCondition.LOST,
    StockCondition.STOLEN,
    StockCondition.DAMAGED,
    StockCondition.DESTROYED,
})

# Conditions in which a unit is out with an office.
ISSUED_CONDITIONS: frozenset[StockCondition] = frozenset({
    StockCondition.REISSUED,
    StockCondition.TRANSFERRED,
})


_AFTER_ISSUE: frozenset[StockCondition] = frozenset({
    StockCondition.RETURNED,
    StockCondition.TRANSFERRED,
    StockCondition.FOR_DISPOSAL,
    *LOSS_CONDITIONS,
})

# Allowed condition changes for one unit (from -> set of valid next).
CONDITION_TRANSITIONS: dict[StockCondition, frozenset[StockCondition]] = {
    StockCondition.GOOD_CONDITION: frozenset({
        StockCondition.REISSUED,
        StockCondition.TRANSFERRED,
    }),
    StockCondition.REISSUED: _AFTER_ISSUE,
    StockCondition.TRANSFERRED: _AFTER_ISSUE,
    StockCondition.RETURNED: frozenset({
        StockCondition.REISSUED,
        StockCondition.TRANSFERRED,
        StockCondition.FOR_DISPOSAL,
    }),
    StockCondition.FOR_DISPOSAL: frozenset(),  # Terminal
    StockCondition.LOST: frozenset(),  # Terminal
    StockCondition.STOLEN: frozenset(),  # Terminal
    StockCondition.DAMAGED: frozenset(),  # Terminal
    StockCondition.DESTROYED: frozenset(),  # Terminal
}


def can_transition(current: StockCondition, target: StockCondition) -> bool:
    """Check if a unit in ``current`` may be recorded as ``target``."""
    return target in CONDITION_TRANSITIONS.get(current, frozenset())


def validate_condition_transition(
    current: StockCondition | None,
    target: StockCondition,
) -> None:
    """
    Raise ``InvalidConditionTransitionError`` for a disallowed change.

    ``current=None`` means the movement is not tied to an existing unit
    (receipts, consumable issuance) and is always allowed.
    """
    if current is None:
        return
    if not can_transition(current, target):
        raise InvalidConditionTransitionError(current.value, target.value)
