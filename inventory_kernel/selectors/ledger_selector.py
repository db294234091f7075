"""
Module: inventory_kernel.selectors.ledger_selector
Responsibility: Balance recomputation.  Replays an asset's stock ledger
    through the same rules the write path uses and compares the result
    with the asset's cached ``quantity``.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - For every asset, the cached ``quantity`` equals the replay of its
      ledger in ``seq`` order.  ``verify_asset_quantity`` reports whether
      that holds; it never repairs anything.

Failure modes:
    - AssetNotFoundError when verifying an unknown asset.
"""

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory_kernel.domain.ledger_rules import replay_quantity
from inventory_kernel.exceptions import AssetNotFoundError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.asset import AssetModel
from inventory_kernel.models.stock import StockEntryModel
from inventory_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.ledger")


@dataclass(frozen=True)
class QuantityCheck:
    """Cached quantity of one asset next to its ledger replay."""

    asset_id: UUID
    asset_name: str
    cached_quantity: int
    ledger_quantity: int
    entry_count: int

    @property
    def is_consistent(self) -> bool:
        return self.cached_quantity == self.ledger_quantity

    @property
    def drift(self) -> int:
        """Cached minus replayed; zero when consistent."""
        return self.cached_quantity - self.ledger_quantity


class LedgerSelector(BaseSelector[StockEntryModel]):
    """Replay and verification of asset quantities."""

    def __init__(self, session: Session):
        super().__init__(session)

    def _entries(self, asset_id: UUID) -> list[StockEntryModel]:
        return list(
            self.session.execute(
                select(StockEntryModel)
                .where(StockEntryModel.asset_id == asset_id)
                .order_by(StockEntryModel.seq)
            ).scalars().all()
        )

    def recompute_quantity(self, asset_id: UUID) -> int:
        """Quantity implied by the asset's ledger alone."""
        return replay_quantity(self._entries(asset_id))

    def verify_asset_quantity(self, asset_id: UUID) -> QuantityCheck:
        """
        Compare the cached quantity with the ledger replay.

        Raises:
            AssetNotFoundError: no asset with this id.
        """
        asset = self.session.get(AssetModel, asset_id)
        if asset is None:
            raise AssetNotFoundError(str(asset_id))

        entries = self._entries(asset_id)
        check = QuantityCheck(
            asset_id=asset.id,
            asset_name=asset.name,
            cached_quantity=asset.quantity,
            ledger_quantity=replay_quantity(entries),
            entry_count=len(entries),
        )
        if not check.is_consistent:
            logger.error(
                "asset_quantity_drift",
                extra={
                    "asset_id": str(asset.id),
                    "cached_quantity": check.cached_quantity,
                    "ledger_quantity": check.ledger_quantity,
                },
            )
        return check

    def verify_all(self) -> list[QuantityCheck]:
        """Check every asset, soft-deleted ones included."""
        asset_ids = self.session.execute(
            select(AssetModel.id).order_by(AssetModel.created_at, AssetModel.id)
        ).scalars().all()
        checks = [self.verify_asset_quantity(asset_id) for asset_id in asset_ids]
        logger.info(
            "ledger_verified",
            extra={
                "asset_count": len(checks),
                "inconsistent_count": sum(1 for c in checks if not c.is_consistent),
            },
        )
        return checks
