"""
inventory_config -- the configuration store.

Responsibility:
    Provides the runtime configuration object through
    ``get_active_config()`` and an explicit, invalidatable
    ``ConfigurationCache``.  There is no module-level "current config":
    callers hold the object (or the cache) and pass it to services.

Architecture position:
    Configuration -- sits above ``inventory_kernel`` and below
    ``inventory_modules``.  The kernel never imports from this package;
    it only sees the ``ConfigurationStore`` protocol.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the given name.
    - ``ConfigurationError`` -- ``require_complete=True`` and a required
      label is blank.
"""

from __future__ import annotations

import threading
from pathlib import Path

from inventory_config.loader import load_configuration
from inventory_config.schema import InventoryConfiguration, SlipCeilings
from inventory_kernel.exceptions import ConfigurationError
from inventory_kernel.logging_config import get_logger

logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_config(
    name: str = "default",
    config_dir: Path | None = None,
    require_complete: bool = False,
) -> InventoryConfiguration:
    """
    Load configuration set ``name`` from ``config_dir``.

    Guarantees:
        - An ``inventory_config_loaded`` log entry with config_id, version
          and checksum on every successful call.
    """
    path = (config_dir or _DEFAULT_CONFIG_DIR) / f"{name}.yaml"
    config = load_configuration(path)

    missing = config.missing_names()
    if missing and require_complete:
        raise ConfigurationError(missing[0])

    logger.info(
        "inventory_config_loaded",
        extra={
            "config_id": config.config_id,
            "version": config.version,
            "checksum": config.checksum,
            "missing": list(missing),
        },
    )
    return config


class ConfigurationCache:
    """
    Loads a configuration set once and keeps it until ``invalidate()``.

    Usage:
        cache = ConfigurationCache()
        service = AssetService(session, config=cache.get())
        ...
        cache.invalidate()  # after the configuration changes
    """

    def __init__(self, name: str = "default", config_dir: Path | None = None):
        self._name = name
        self._config_dir = config_dir
        self._config: InventoryConfiguration | None = None
        self._lock = threading.Lock()

    def get(self) -> InventoryConfiguration:
        with self._lock:
            if self._config is None:
                self._config = get_active_config(self._name, self._config_dir)
            return self._config

    def invalidate(self) -> None:
        with self._lock:
            self._config = None
        logger.info("inventory_config_invalidated", extra={"config_name": self._name})

    @property
    def is_loaded(self) -> bool:
        return self._config is not None


__all__ = [
    "ConfigurationCache",
    "InventoryConfiguration",
    "SlipCeilings",
    "get_active_config",
]
