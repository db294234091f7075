"""
Pure domain layer.

Value objects, vocabularies and rules with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O

Time comes in through ``Clock``; everything else is deterministic.
"""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from inventory_kernel.domain.conditions import (
    CONDITION_TRANSITIONS,
    INBOUND_CONDITIONS,
    ISSUED_CONDITIONS,
    LOSS_CONDITIONS,
    NEUTRAL_CONDITIONS,
    AssetStatus,
    AssetType,
    ModeOfAcquisition,
    ProcurementType,
    StockCondition,
    can_transition,
    validate_condition_transition,
)
from inventory_kernel.domain.ledger_rules import (
    Movement,
    next_quantity,
    replay_quantity,
    validate_movement,
)
from inventory_kernel.domain.settings import ConfigName, ConfigurationStore
from inventory_kernel.domain.workflow import Guard, Transition, Workflow, state_name

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "CONDITION_TRANSITIONS",
    "INBOUND_CONDITIONS",
    "ISSUED_CONDITIONS",
    "LOSS_CONDITIONS",
    "NEUTRAL_CONDITIONS",
    "AssetStatus",
    "AssetType",
    "ModeOfAcquisition",
    "ProcurementType",
    "StockCondition",
    "can_transition",
    "validate_condition_transition",
    "Movement",
    "next_quantity",
    "replay_quantity",
    "validate_movement",
    "ConfigName",
    "ConfigurationStore",
    "Guard",
    "Transition",
    "Workflow",
    "state_name",
]
