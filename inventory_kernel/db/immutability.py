"""
ORM-Level Append-Only Enforcement.

===============================================================================
WHAT IS PROTECTED
===============================================================================

Entity            | Rule                                   | Hook
------------------|----------------------------------------|-------------------
StockEntryModel   | Never updated, never deleted           | before_update,
                  |                                        | before_delete
AssetModel        | ``quantity`` only changes in a flush   | Session
                  | that also inserts a ledger entry for   | before_flush
                  | the same asset                         |

The stock ledger is the audit trail of every movement; corrections are new
entries.  The asset ``quantity`` column is a cache of that ledger, so a
standalone write to it would silently break the cache invariant.

===============================================================================
HOW IT WORKS
===============================================================================

    session.flush()
         |
         v
    [before_flush]  --> _check_quantity_has_ledger_entry() --+
         |                                                   |
    [before_update] --> _check_stock_entry_immutability() ---+--> ImmutabilityViolationError
         |                                                   |
    [before_delete] --> _check_stock_entry_delete() ---------+
         |
         v
    SQL sent to database (only if checks pass)

===============================================================================
USAGE
===============================================================================

    from inventory_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()  # once at startup

Tests that need to corrupt the ledger on purpose (to exercise the
verifier) call ``unregister_immutability_listeners()`` and re-register
afterwards.
"""

from sqlalchemy import event
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import get_history

from inventory_kernel.exceptions import ImmutabilityViolationError
from inventory_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _check_stock_entry_immutability(mapper, connection, target):
    """Prevent any update to a stock ledger entry."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "StockEntry",
            "entity_id": str(target.id),
            "operation": "UPDATE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="StockEntry",
        entity_id=str(target.id),
        reason="Stock ledger entries are append-only and cannot be modified",
    )


def _check_stock_entry_delete(mapper, connection, target):
    """Prevent deletion of a stock ledger entry."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "StockEntry",
            "entity_id": str(target.id),
            "operation": "DELETE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="StockEntry",
        entity_id=str(target.id),
        reason="Stock ledger entries are append-only and cannot be deleted",
    )


def _check_quantity_has_ledger_entry(session, flush_context, instances):
    """
    Reject a flush that moves an asset's quantity without a ledger entry.

    Runs in SessionEvents.before_flush so the whole flush plan is visible:
    the write path adds the entry and updates the asset in one flush.
    """
    from inventory_kernel.models.asset import AssetModel
    from inventory_kernel.models.stock import StockEntryModel

    new_entry_assets = {
        obj.asset_id for obj in session.new if isinstance(obj, StockEntryModel)
    }

    for obj in list(session.dirty):
        if not isinstance(obj, AssetModel):
            continue
        history = get_history(obj, "quantity")
        if not history.has_changes():
            continue
        if obj.id in new_entry_assets:
            continue

        logger.error(
            "immutability_violation_blocked",
            extra={
                "entity_type": "Asset",
                "entity_id": str(obj.id),
                "operation": "UPDATE",
                "reason": "quantity_without_ledger_entry",
            },
        )
        raise ImmutabilityViolationError(
            entity_type="Asset",
            entity_id=str(obj.id),
            reason="quantity can only change together with a stock ledger entry",
        )


def register_immutability_listeners():
    """
    Register all append-only enforcement listeners.

    Call once after models are imported and before any database writes.
    Idempotent.
    """
    from inventory_kernel.models.stock import StockEntryModel

    if not event.contains(Session, "before_flush", _check_quantity_has_ledger_entry):
        event.listen(Session, "before_flush", _check_quantity_has_ledger_entry)
    if not event.contains(StockEntryModel, "before_update", _check_stock_entry_immutability):
        event.listen(StockEntryModel, "before_update", _check_stock_entry_immutability)
    if not event.contains(StockEntryModel, "before_delete", _check_stock_entry_delete):
        event.listen(StockEntryModel, "before_delete", _check_stock_entry_delete)

    logger.info("immutability_listeners_registered")


def _safe_remove_listener(target, event_name, listener_fn):
    """Remove an event listener, ignoring it if not registered."""
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove append-only enforcement listeners.

    WARNING: tests only.
    """
    from inventory_kernel.models.stock import StockEntryModel

    _safe_remove_listener(Session, "before_flush", _check_quantity_has_ledger_entry)
    _safe_remove_listener(StockEntryModel, "before_update", _check_stock_entry_immutability)
    _safe_remove_listener(StockEntryModel, "before_delete", _check_stock_entry_delete)

    logger.info("immutability_listeners_unregistered")
