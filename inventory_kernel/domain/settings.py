"""
Configuration names the kernel reads (``inventory_kernel.domain.settings``).

The kernel never loads configuration itself.  Services receive an object
satisfying ``ConfigurationStore`` at construction; ``inventory_config``
provides the runtime implementation.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Protocol

from inventory_kernel.domain.conditions import AssetType


@unique
class ConfigName(str, Enum):
    """Display names of the configuration values stamped onto records."""

    ENTITY_NAME = "Entity Name"
    FUND_CLUSTER_CONSUMABLE = "Fund Cluster - Consumable"
    FUND_CLUSTER_SEP = "Fund Cluster - SEP"
    FUND_CLUSTER_PPE = "Fund Cluster - PPE"
    RESPONSIBILITY_CENTER_CODE = "Responsibility Center Code"


_FUND_CLUSTERS: dict[AssetType, ConfigName] = {
    AssetType.CONSUMABLE: ConfigName.FUND_CLUSTER_CONSUMABLE,
    AssetType.SEP: ConfigName.FUND_CLUSTER_SEP,
    AssetType.PPE: ConfigName.FUND_CLUSTER_PPE,
}


def fund_cluster_for(asset_type: AssetType) -> ConfigName:
    return _FUND_CLUSTERS[asset_type]


class ConfigurationStore(Protocol):
    """
    Source of configuration values.

    ``get_config_by_name`` raises ``ConfigurationError`` when the value is
    missing or blank; it never returns an empty string.
    """

    def get_config_by_name(self, name: str | ConfigName) -> str: ...
