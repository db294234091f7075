"""
AssetService -- the Asset Registry.

Responsibility:
    Owns each asset's identity and static attributes, and the accessors
    for its cached ``quantity``.  Creation of consumables and of SEP/PPE
    property (with the initial receipt entry) lives here too.

Architecture position:
    Kernel > Services -- imperative shell.  The stock ledger write path
    calls ``lock_asset`` and ``update_asset_qty_by_id`` while it appends an
    entry; nothing else moves ``quantity``.

Invariants enforced:
    - ``quantity`` changes only together with a ledger entry in the same
      flush (see ``inventory_kernel.db.immutability``).  A property asset
      is therefore created with ``quantity=0`` and its receipt entry brings
      it to ``initial_qty`` in the same unit of work.
    - (type, name) is unique among live assets.
    - SEP/PPE assets cannot be deleted once any unit has left the pool
      (``initial_qty != quantity``).

Failure modes:
    - AssetNotFoundError, DuplicateKeyError, AssetHasStockError,
      OfficeNotFoundError, ConfigurationError.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventory_kernel.db.unit_of_work import UnitOfWork, unit_of_work
from inventory_kernel.domain.clock import Clock
from inventory_kernel.domain.conditions import AssetStatus, AssetType, StockCondition
from inventory_kernel.domain.dtos import (
    AssetUpdateRequest,
    ConsumableCreateRequest,
    PropertyCreateRequest,
    PropertyUpdateRequest,
    StockMovementRequest,
)
from inventory_kernel.domain.numbering import (
    dated_number,
    item_number_range,
    property_stock_number,
)
from inventory_kernel.domain.settings import (
    ConfigName,
    ConfigurationStore,
    fund_cluster_for,
)
from inventory_kernel.exceptions import (
    AssetHasStockError,
    AssetNotFoundError,
    ConfigurationError,
    DuplicateKeyError,
)
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.asset import AssetModel
from inventory_kernel.services.base import BaseService
from inventory_kernel.services.directory import (
    DirectoryService,
    SqlDirectoryService,
    resolve_office,
)
from inventory_kernel.services.sequence_service import CounterType, SequenceService

logger = get_logger("services.asset")

_PROPERTY_COUNTERS: dict[AssetType, CounterType] = {
    AssetType.SEP: CounterType.SEMI_EXPENDABLE_PROPERTY,
    AssetType.PPE: CounterType.PROPERTY_PLANT_EQUIPMENT,
}


@dataclass(frozen=True)
class AssetInfo:
    """Immutable view of an asset."""

    id: UUID
    type: AssetType
    name: str
    description: str
    unit_of_measurement: str
    article: str
    cost: Decimal | None
    stock_number: str
    entity_name: str
    fund_cluster: str
    reorder_point: str
    initial_qty: int
    quantity: int
    condition: str
    status: AssetStatus
    mode_of_acquisition: str
    procurement_type: str
    supplier: str
    created_at: datetime
    deleted_at: datetime | None

    @property
    def total_issued(self) -> int:
        """Units numbered out of the initial allotment so far."""
        return max(0, self.initial_qty - self.quantity)

    @property
    def is_unit_tracked(self) -> bool:
        return self.type.is_unit_tracked


class AssetService(BaseService[AssetModel]):
    """
    Asset Registry service.

    ``config`` is only needed by the creation flows, which stamp the
    entity name and fund cluster onto the new asset.
    """

    def __init__(
        self,
        session: Session,
        config: ConfigurationStore | None = None,
        directory: DirectoryService | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, clock)
        self.config = config
        self.directory = directory or SqlDirectoryService(session)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _to_dto(self, asset: AssetModel) -> AssetInfo:
        return AssetInfo(
            id=asset.id,
            type=AssetType(asset.type),
            name=asset.name,
            description=asset.description,
            unit_of_measurement=asset.unit_of_measurement,
            article=asset.article,
            cost=asset.cost,
            stock_number=asset.stock_number,
            entity_name=asset.entity_name,
            fund_cluster=asset.fund_cluster,
            reorder_point=asset.reorder_point,
            initial_qty=asset.initial_qty,
            quantity=asset.quantity,
            condition=asset.condition,
            status=AssetStatus(asset.status),
            mode_of_acquisition=asset.mode_of_acquisition,
            procurement_type=asset.procurement_type,
            supplier=asset.supplier,
            created_at=asset.created_at,
            deleted_at=asset.deleted_at,
        )

    def _config_value(self, name: ConfigName) -> str:
        if self.config is None:
            raise ConfigurationError(name.value)
        return self.config.get_config_by_name(name)

    def _get_live(self, asset_id: UUID) -> AssetModel:
        asset = self.session.get(AssetModel, asset_id)
        if asset is None or asset.is_deleted:
            raise AssetNotFoundError(str(asset_id))
        return asset

    def _ensure_unique_name(
        self,
        asset_type: str,
        name: str,
        exclude_id: UUID | None = None,
    ) -> None:
        stmt = select(AssetModel.id).where(
            AssetModel.type == asset_type,
            AssetModel.name == name,
            AssetModel.deleted_at.is_(None),
        )
        if exclude_id is not None:
            stmt = stmt.where(AssetModel.id != exclude_id)
        if self.session.execute(stmt.limit(1)).first() is not None:
            raise DuplicateKeyError("Asset", f"{asset_type}:{name}")

    # ------------------------------------------------------------------
    # Cached quantity
    # ------------------------------------------------------------------

    def get_asset_by_id(self, asset_id: UUID) -> AssetInfo:
        """
        Raises:
            AssetNotFoundError: missing or soft-deleted.
        """
        return self._to_dto(self._get_live(asset_id))

    def lock_asset(self, uow: UnitOfWork, asset_id: UUID) -> AssetModel:
        """
        Load a live asset with a row lock held until ``uow`` ends.

        ``populate_existing`` refreshes an instance already in the identity
        map, so the quantity read is the committed one.
        """
        uow.require_active("lock_asset")
        asset = self.session.execute(
            select(AssetModel)
            .where(AssetModel.id == asset_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if asset is None or asset.is_deleted:
            raise AssetNotFoundError(str(asset_id))
        return asset

    def update_asset_qty_by_id(self, uow: UnitOfWork, asset_id: UUID, qty: int) -> None:
        """
        Set the cached quantity.  Does not flush.

        Only the ledger write path calls this, right after adding the entry
        that justifies the new value; flushing a quantity change without
        such an entry raises ``ImmutabilityViolationError``.
        """
        uow.require_active("update_asset_qty_by_id")
        asset = self._get_live(asset_id)
        asset.quantity = qty
        asset.updated_at = self.clock.now()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_consumable(
        self,
        request: ConsumableCreateRequest,
        actor_id: UUID | None = None,
    ) -> AssetInfo:
        """Create a consumable with a dated stock number and zero quantity."""
        entity_name = self._config_value(ConfigName.ENTITY_NAME)
        fund_cluster = self._config_value(fund_cluster_for(AssetType.CONSUMABLE))

        with unit_of_work(self.session, "create_consumable") as uow:
            self._ensure_unique_name(AssetType.CONSUMABLE.value, request.name)
            count = SequenceService(self.session).increment_counter_by_type(
                uow, CounterType.CONSUMABLE,
            )
            now = self.clock.now()
            asset = AssetModel(
                type=AssetType.CONSUMABLE.value,
                entity_name=entity_name,
                fund_cluster=fund_cluster,
                stock_number=dated_number(now, count),
                reorder_point=request.reorder_point,
                name=request.name,
                description=request.description,
                unit_of_measurement=request.unit_of_measurement,
                article=request.article,
                cost=request.cost,
                initial_qty=0,
                quantity=0,
                status=AssetStatus.ACTIVE.value,
                created_at=now,
                created_by_id=actor_id,
            )
            self.session.add(asset)
            self.session.flush()
            info = self._to_dto(asset)

        logger.info(
            "consumable_created",
            extra={"asset_id": str(info.id), "stock_number": info.stock_number},
        )
        return info

    def create_property(
        self,
        request: PropertyCreateRequest,
        actor_id: UUID | None = None,
    ) -> AssetInfo:
        """
        Create a SEP/PPE asset and receive its initial units.

        The receipt entry is ``good-condition`` with ``ins=quantity`` and
        ``item_no`` ``"1"`` or ``"1-{quantity}"``; asset and entry commit
        together.
        """
        from inventory_kernel.services.stock_ledger import StockLedgerService

        asset_type = request.type
        entity_name = self._config_value(ConfigName.ENTITY_NAME)
        fund_cluster = self._config_value(fund_cluster_for(asset_type))

        with unit_of_work(self.session, "create_property") as uow:
            if request.office_id is not None:
                resolve_office(self.directory, request.office_id)
            self._ensure_unique_name(asset_type.value, request.name)

            count = SequenceService(self.session).increment_counter_by_type(
                uow, _PROPERTY_COUNTERS[asset_type],
            )
            quantity = str(request.quantity)
            procurement_type = request.procurement_type
            supplier = (
                request.supplier
                if procurement_type is not None and procurement_type.keeps_supplier
                else ""
            )

            asset = AssetModel(
                type=asset_type.value,
                entity_name=entity_name,
                fund_cluster=fund_cluster,
                stock_number=property_stock_number(
                    request.year,
                    request.property_code,
                    request.serial_code,
                    quantity,
                    request.location_code,
                    str(count),
                ),
                name=request.name,
                description=request.description,
                unit_of_measurement=request.unit_of_measurement,
                article=request.article,
                cost=request.cost,
                initial_qty=request.quantity,
                quantity=0,
                prop_year=request.year,
                prop_property_code=request.property_code,
                prop_serial_number=request.serial_code,
                prop_quantity=quantity,
                prop_location=request.location_code,
                prop_counter=str(count),
                mode_of_acquisition=request.mode_of_acquisition.value,
                procurement_type=procurement_type.value if procurement_type else "",
                supplier=supplier,
                condition=StockCondition.GOOD_CONDITION.value,
                status=AssetStatus.ACTIVE.value,
                created_at=self.clock.now(),
                created_by_id=actor_id,
            )
            self.session.add(asset)
            self.session.flush()

            StockLedgerService(
                self.session, directory=self.directory, clock=self.clock,
            ).write_movement(
                uow,
                StockMovementRequest(
                    asset_id=asset.id,
                    item_no=item_number_range(1, request.quantity),
                    ins=request.quantity,
                    condition=StockCondition.GOOD_CONDITION,
                    office_id=request.office_id,
                    reference=request.reference,
                    attachment=request.attachment,
                ),
            )
            info = self._to_dto(asset)

        logger.info(
            "property_created",
            extra={
                "asset_id": str(info.id),
                "type": info.type.value,
                "stock_number": info.stock_number,
                "initial_qty": info.initial_qty,
            },
        )
        return info

    # ------------------------------------------------------------------
    # Administrative edits
    # ------------------------------------------------------------------

    def update_asset_by_id(
        self,
        asset_id: UUID,
        request: AssetUpdateRequest,
        actor_id: UUID | None = None,
    ) -> AssetInfo:
        """Update static attributes; a rename must keep (type, name) unique."""
        with unit_of_work(self.session, "update_asset_by_id"):
            asset = self._get_live(asset_id)
            if request.name is not None:
                self._ensure_unique_name(asset.type, request.name, exclude_id=asset.id)
                asset.name = request.name
            for field_name in ("description", "unit_of_measurement", "article", "reorder_point"):
                value = getattr(request, field_name)
                if value is not None:
                    setattr(asset, field_name, value)
            if request.cost is not None:
                asset.cost = request.cost
            asset.updated_at = self.clock.now()
            asset.updated_by_id = actor_id
            self.session.flush()
            info = self._to_dto(asset)

        logger.info("asset_updated", extra={"asset_id": str(asset_id)})
        return info

    def update_property_by_id(
        self,
        asset_id: UUID,
        request: PropertyUpdateRequest,
        actor_id: UUID | None = None,
    ) -> AssetInfo:
        """
        Update a SEP/PPE asset.

        When any property-number part changes, the stock number is derived
        again from the merged parts; quantity and counter parts never change.
        """
        with unit_of_work(self.session, "update_property_by_id"):
            asset = self._get_live(asset_id)
            if request.name is not None:
                self._ensure_unique_name(asset.type, request.name, exclude_id=asset.id)
                asset.name = request.name
            if request.description is not None:
                asset.description = request.description
            if request.unit_of_measurement is not None:
                asset.unit_of_measurement = request.unit_of_measurement
            if request.condition is not None:
                asset.condition = request.condition.value

            if request.changes_stock_number:
                asset.prop_year = request.year or asset.prop_year or "NA"
                asset.prop_property_code = request.property_code or asset.prop_property_code or "NA"
                asset.prop_serial_number = request.serial_code or asset.prop_serial_number or "NA"
                asset.prop_location = request.location_code or asset.prop_location or "NA"
                asset.stock_number = property_stock_number(
                    asset.prop_year,
                    asset.prop_property_code,
                    asset.prop_serial_number,
                    asset.prop_quantity,
                    asset.prop_location,
                    asset.prop_counter,
                )
            asset.updated_at = self.clock.now()
            asset.updated_by_id = actor_id
            self.session.flush()
            info = self._to_dto(asset)

        logger.info(
            "property_updated",
            extra={"asset_id": str(asset_id), "stock_number": info.stock_number},
        )
        return info

    def update_property_condition_by_id(
        self,
        asset_id: UUID,
        condition: StockCondition,
    ) -> AssetInfo:
        """Set the asset-level condition label (not a ledger movement)."""
        with unit_of_work(self.session, "update_property_condition_by_id"):
            asset = self._get_live(asset_id)
            asset.condition = condition.value
            asset.updated_at = self.clock.now()
            self.session.flush()
            info = self._to_dto(asset)

        logger.info(
            "property_condition_updated",
            extra={"asset_id": str(asset_id), "condition": condition.value},
        )
        return info

    def delete_asset_by_id(self, asset_id: UUID, actor_id: UUID | None = None) -> None:
        """
        Soft-delete an asset.  Ledger entries are kept as the audit trail.

        Raises:
            AssetHasStockError: SEP/PPE asset with units out of the pool.
        """
        with unit_of_work(self.session, "delete_asset_by_id"):
            asset = self._get_live(asset_id)
            if AssetType(asset.type).is_unit_tracked and asset.initial_qty != asset.quantity:
                raise AssetHasStockError(str(asset.id), asset.initial_qty, asset.quantity)
            now = self.clock.now()
            asset.deleted_at = now
            asset.status = AssetStatus.DELETED.value
            asset.updated_at = now
            asset.updated_by_id = actor_id
            self.session.flush()

        logger.info("asset_deleted", extra={"asset_id": str(asset_id)})
