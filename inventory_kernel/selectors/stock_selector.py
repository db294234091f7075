"""
Module: inventory_kernel.selectors.stock_selector
Responsibility: Read-only queries over the stock ledger: single entries,
    an asset's history, the latest entry per physical unit, and the units
    currently out with offices.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - "Latest" means the newest entry per ``(asset_id, item_no)`` ordered by
      ``created_at`` then ``seq`` (both descending).  ``seq`` breaks ties
      between entries written within the same clock instant.
    - Lifecycle documents may only act on a unit through its latest entry;
      ``require_latest`` enforces that for unit-tracked entries.

Failure modes:
    - StockNotFoundError for unknown entry ids.
    - StaleStockReferenceError when an entry has been superseded.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from inventory_kernel.domain.conditions import ISSUED_CONDITIONS, StockCondition
from inventory_kernel.domain.dtos import StockEntryRecord
from inventory_kernel.exceptions import StaleStockReferenceError, StockNotFoundError
from inventory_kernel.models.stock import StockEntryModel
from inventory_kernel.selectors.base import BaseSelector


def _latest_per_unit():
    """Subquery ranking entries per unit, newest first (``rn == 1`` is latest)."""
    return select(
        StockEntryModel.id.label("id"),
        func.row_number()
        .over(
            partition_by=(StockEntryModel.asset_id, StockEntryModel.item_no),
            order_by=(StockEntryModel.created_at.desc(), StockEntryModel.seq.desc()),
        )
        .label("rn"),
    ).subquery()


class StockSelector(BaseSelector[StockEntryModel]):
    """Read-side access to stock ledger entries."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get_entry(self, stock_id: UUID) -> StockEntryModel:
        """ORM entry by id, for services that need to read it in a unit of work."""
        entry = self.session.get(StockEntryModel, stock_id)
        if entry is None:
            raise StockNotFoundError(str(stock_id))
        return entry

    def get_stock_by_id(self, stock_id: UUID) -> StockEntryRecord:
        """
        Raises:
            StockNotFoundError: no entry with this id.
        """
        return StockEntryRecord.from_model(self.get_entry(stock_id))

    def get_stocks_by_asset_id(self, asset_id: UUID) -> list[StockEntryRecord]:
        """All entries for an asset in insertion order."""
        rows = self.session.execute(
            select(StockEntryModel)
            .where(StockEntryModel.asset_id == asset_id)
            .order_by(StockEntryModel.seq)
        ).scalars().all()
        return [StockEntryRecord.from_model(row) for row in rows]

    def get_stocks_by_reference(self, reference: str) -> list[StockEntryRecord]:
        """Entries written for one lifecycle document, in insertion order."""
        rows = self.session.execute(
            select(StockEntryModel)
            .where(StockEntryModel.reference == reference)
            .order_by(StockEntryModel.seq)
        ).scalars().all()
        return [StockEntryRecord.from_model(row) for row in rows]

    def get_latest_stock(self, asset_id: UUID, item_no: str) -> StockEntryRecord | None:
        """Latest entry for one unit, or None if the unit has no entries."""
        row = self.session.execute(
            select(StockEntryModel)
            .where(
                StockEntryModel.asset_id == asset_id,
                StockEntryModel.item_no == item_no,
            )
            .order_by(StockEntryModel.created_at.desc(), StockEntryModel.seq.desc())
            .limit(1)
        ).scalar_one_or_none()
        return StockEntryRecord.from_model(row) if row is not None else None

    def require_latest(self, stock_id: UUID) -> StockEntryRecord:
        """
        Return the entry, insisting it is still the latest for its unit.

        Consumable entries (blank ``item_no``) do not identify a unit and
        are returned as is.

        Raises:
            StockNotFoundError: unknown id.
            StaleStockReferenceError: a newer entry exists for the unit.
        """
        entry = self.get_stock_by_id(stock_id)
        if not entry.item_no:
            return entry
        latest = self.get_latest_stock(entry.asset_id, entry.item_no)
        if latest is not None and latest.id != entry.id:
            raise StaleStockReferenceError(str(entry.id), str(latest.id))
        return entry

    def get_latest_stocks(
        self,
        conditions: Iterable[StockCondition] | None = None,
        office_id: UUID | None = None,
        asset_id: UUID | None = None,
    ) -> list[StockEntryRecord]:
        """
        Latest entry of every unit-tracked unit, optionally filtered.

        Consumable entries (blank ``item_no``) are never included.
        """
        ranked = _latest_per_unit()
        stmt = (
            select(StockEntryModel)
            .join(ranked, ranked.c.id == StockEntryModel.id)
            .where(ranked.c.rn == 1, StockEntryModel.item_no != "")
        )
        if conditions is not None:
            stmt = stmt.where(StockEntryModel.condition.in_([c.value for c in conditions]))
        if office_id is not None:
            stmt = stmt.where(StockEntryModel.office_id == office_id)
        if asset_id is not None:
            stmt = stmt.where(StockEntryModel.asset_id == asset_id)
        rows = self.session.execute(stmt.order_by(StockEntryModel.seq)).scalars().all()
        return [StockEntryRecord.from_model(row) for row in rows]

    def get_reissued_stocks(
        self,
        office_id: UUID | None = None,
        exclude_stock_ids: Iterable[UUID] = (),
    ) -> list[StockEntryRecord]:
        """
        Units currently out with an office (latest entry reissued or transferred).

        ``exclude_stock_ids`` removes entries already claimed by an open
        document, such as a pending loss report.
        """
        excluded = set(exclude_stock_ids)
        return [
            entry
            for entry in self.get_latest_stocks(ISSUED_CONDITIONS, office_id=office_id)
            if entry.id not in excluded
        ]
