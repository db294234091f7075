"""
Document and stock numbers (``inventory_kernel.domain.numbering``).

Pure formatting of human-readable numbers from a counter value and a date.
Counter values come from ``SequenceService`` inside the same unit of work
as the record they number.
"""

from datetime import datetime

from inventory_kernel.exceptions import ExceedsInitialQuantityError


def dated_number(now: datetime, count: int, prefix: str | None = None) -> str:
    """``{prefix-}{yyyy}-{mm}-{dd}-{count:02}``"""
    body = f"{now:%Y}-{now:%m}-{now:%d}-{count:02d}"
    return f"{prefix}-{body}" if prefix else body


def monthly_number(now: datetime, count: int, prefix: str) -> str:
    """``{prefix}-{yyyy}-{mm}-{count:02}``"""
    return f"{prefix}-{now:%Y}-{now:%m}-{count:02d}"


def property_stock_number(
    year: str,
    property_code: str,
    serial_number: str,
    quantity: str,
    location: str,
    counter: str,
) -> str:
    """``{year}-{propertyCode}-{serialNumber}-{quantity}-{location}-{counter}``"""
    return f"{year}-{property_code}-{serial_number}-{quantity}-{location}-{counter}"


def item_number_range(start: int, end: int) -> str:
    """``"n"`` for a single unit, ``"start-end"`` otherwise."""
    if start == end:
        return str(start)
    return f"{start}-{end}"


def issue_item_numbers(
    initial_qty: int,
    quantity: int,
    requested: int,
    asset_id: str = "",
) -> range:
    """
    Unit numbers for issuing ``requested`` units of a SEP/PPE asset.

    ``totalAlreadyIssued = initial_qty - quantity`` is derived, never
    stored; the batch gets ``totalAlreadyIssued + 1 .. totalAlreadyIssued +
    requested``.  The last number may equal ``initial_qty`` but never
    exceed it.

    Raises:
        ExceedsInitialQuantityError: the batch would number past
            ``initial_qty``.
    """
    total_issued = max(0, initial_qty - quantity)
    if total_issued + requested > initial_qty:
        raise ExceedsInitialQuantityError(asset_id, initial_qty, total_issued, requested)
    return range(total_issued + 1, total_issued + requested + 1)
