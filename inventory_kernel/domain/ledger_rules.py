"""
Ledger balance rules (``inventory_kernel.domain.ledger_rules``).

Responsibility
--------------
The condition-keyed arithmetic that moves an asset's cached quantity, and
the replay of a whole ledger through the same arithmetic.  The write path
and the verifier share these functions so they can never disagree.

Architecture position
---------------------
**Kernel domain layer** -- pure.  ZERO I/O.

Rules
-----
* good-condition, returned:  quantity + ins
* reissued:                  quantity - outs  (never below zero)
* transferred:               the caller-supplied balance, recorded as is
* anything else:             quantity unchanged
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from inventory_kernel.domain.conditions import (
    INBOUND_CONDITIONS,
    StockCondition,
)
from inventory_kernel.exceptions import (
    InsufficientStockError,
    InvalidMovementError,
)


class LedgerLine(Protocol):
    """Anything replayable: ORM entries and DTOs both qualify."""

    condition: str
    ins: int
    outs: int
    balance: int


@dataclass(frozen=True)
class Movement:
    """A single validated quantity change, before it is persisted."""

    condition: StockCondition
    ins: int = 0
    outs: int = 0
    balance: int | None = None
    initial_condition: StockCondition | None = None


def validate_movement(movement: Movement) -> None:
    """
    Check the ins/outs/balance shape against the condition.

    Raises:
        InvalidMovementError: negative counts, both sides set outside a
            transfer, a transfer without a balance, or a balance supplied
            where the engine computes it.
    """
    condition = movement.condition
    if movement.ins < 0 or movement.outs < 0:
        raise InvalidMovementError(condition.value, "ins and outs must be non-negative")

    if condition is StockCondition.TRANSFERRED:
        if movement.balance is None:
            raise InvalidMovementError(condition.value, "a transfer must supply its balance")
        if movement.balance < 0:
            raise InvalidMovementError(condition.value, "balance must be non-negative")
        return

    if movement.balance is not None:
        raise InvalidMovementError(
            condition.value, "balance is computed by the ledger for this condition"
        )
    if movement.ins and movement.outs:
        raise InvalidMovementError(condition.value, "ins and outs cannot both be non-zero")
    if condition in INBOUND_CONDITIONS and movement.outs:
        raise InvalidMovementError(condition.value, "inbound movements cannot carry outs")
    if condition not in INBOUND_CONDITIONS and movement.ins:
        raise InvalidMovementError(condition.value, "only inbound movements carry ins")


def next_quantity(
    quantity: int,
    movement: Movement,
    *,
    asset_id: str = "",
    asset_name: str = "",
) -> int:
    """
    Apply one movement to the cached quantity and return the new value.

    Raises:
        InsufficientStockError: a reissue would drive the quantity below
            zero, or a transfer of an on-hand unit finds nothing on hand.
        InvalidMovementError: a transfer without a balance.
    """
    condition = movement.condition

    if condition in INBOUND_CONDITIONS:
        return quantity + movement.ins

    if condition is StockCondition.REISSUED:
        if quantity - movement.outs < 0:
            raise InsufficientStockError(asset_id, asset_name, quantity, movement.outs)
        return quantity - movement.outs

    if condition is StockCondition.TRANSFERRED:
        if movement.initial_condition in INBOUND_CONDITIONS and quantity < movement.outs:
            raise InsufficientStockError(asset_id, asset_name, quantity, movement.outs)
        if movement.balance is None:
            raise InvalidMovementError(condition.value, "a transfer must supply its balance")
        return movement.balance

    return quantity


def replay_quantity(entries: Iterable[LedgerLine]) -> int:
    """
    Recompute an asset's quantity from its ledger, oldest entry first.

    Transferred entries reset the running value to their recorded balance,
    exactly as the write path did when they were inserted.
    """
    quantity = 0
    for entry in entries:
        condition = StockCondition(entry.condition)
        if condition in INBOUND_CONDITIONS:
            quantity += entry.ins
        elif condition is StockCondition.REISSUED:
            quantity -= entry.outs
        elif condition is StockCondition.TRANSFERRED:
            quantity = entry.balance
    return quantity
