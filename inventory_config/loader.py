"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into an
``InventoryConfiguration``.  Callers go through
``inventory_config.get_active_config()`` or a ``ConfigurationCache``;
nothing else reads configuration files.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``config_id`` / ``version``  -> ``KeyError`` propagates.
* Bad ceiling values  -> ``ValueError`` from ``SlipCeilings``.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import InventoryConfiguration, SlipCeilings


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Postconditions:
        - Returns a ``dict`` (empty if the YAML document is empty).
    """
    with open(path) as f:
        data = yaml.safe_load(f)
    return data or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 of the parsed document."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def parse_slip_ceilings(data: dict[str, Any] | None) -> SlipCeilings:
    if not data:
        return SlipCeilings()
    return SlipCeilings(
        sep_low_value=Decimal(str(data.get("sep_low_value", "5000"))),
        sep_high_value=Decimal(str(data.get("sep_high_value", "50000"))),
    )


def parse_configuration(data: dict[str, Any]) -> InventoryConfiguration:
    """Build the configuration object from a parsed YAML document."""
    labels = data.get("labels", {}) or {}
    fund_clusters = labels.get("fund_cluster", {}) or {}
    return InventoryConfiguration(
        config_id=data["config_id"],
        version=int(data["version"]),
        entity_name=str(labels.get("entity_name", "")),
        fund_cluster_consumable=str(fund_clusters.get("consumable", "")),
        fund_cluster_sep=str(fund_clusters.get("sep", "")),
        fund_cluster_ppe=str(fund_clusters.get("ppe", "")),
        responsibility_center_code=str(labels.get("responsibility_center_code", "")),
        slip_ceilings=parse_slip_ceilings(data.get("slip_ceilings")),
        checksum=compute_checksum(data),
    )


def load_configuration(path: Path) -> InventoryConfiguration:
    return parse_configuration(load_yaml_file(path))
