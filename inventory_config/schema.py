"""
InventoryConfiguration schema.

The runtime configuration object handed to services.  YAML files are
parsed into this frozen dataclass by ``inventory_config.loader``; services
never read files, environment variables or module-level globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from inventory_kernel.domain.settings import ConfigName
from inventory_kernel.exceptions import ConfigurationError

# ---------------------------------------------------------------------------
# Slip classification ceilings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SlipCeilings:
    """
    Unit-cost bands that decide which issue slip a property item gets.

    SEP up to ``sep_low_value`` is low-value (SPLV), up to ``sep_high_value``
    high-value (SPHV); PPE is anything above ``sep_high_value`` (PAR).
    """

    sep_low_value: Decimal = Decimal("5000")
    sep_high_value: Decimal = Decimal("50000")

    def __post_init__(self) -> None:
        if self.sep_low_value <= 0 or self.sep_high_value <= self.sep_low_value:
            raise ValueError(
                "slip ceilings must satisfy 0 < sep_low_value < sep_high_value"
            )


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InventoryConfiguration:
    """Labels stamped onto assets and documents, plus slip ceilings."""

    config_id: str
    version: int
    entity_name: str = ""
    fund_cluster_consumable: str = ""
    fund_cluster_sep: str = ""
    fund_cluster_ppe: str = ""
    responsibility_center_code: str = ""
    slip_ceilings: SlipCeilings = SlipCeilings()
    checksum: str = ""

    def _values(self) -> dict[str, str]:
        return {
            ConfigName.ENTITY_NAME.value: self.entity_name,
            ConfigName.FUND_CLUSTER_CONSUMABLE.value: self.fund_cluster_consumable,
            ConfigName.FUND_CLUSTER_SEP.value: self.fund_cluster_sep,
            ConfigName.FUND_CLUSTER_PPE.value: self.fund_cluster_ppe,
            ConfigName.RESPONSIBILITY_CENTER_CODE.value: self.responsibility_center_code,
        }

    def get_config_by_name(self, name: str | ConfigName) -> str:
        """
        Value of a named configuration entry.

        Raises:
            ConfigurationError: unknown name, or a blank value.
        """
        key = name.value if isinstance(name, ConfigName) else name
        value = self._values().get(key, "")
        if not value:
            raise ConfigurationError(key)
        return value

    def missing_names(self) -> tuple[str, ...]:
        """Names whose value is blank, in declaration order."""
        return tuple(name for name, value in self._values().items() if not value)
