"""
Configuration persistence for the signage core.

Loads the stored configuration with migration and corruption recovery, and
saves it back as one blob. Neither operation raises: a corrupt blob boots the
factory defaults in safe mode, and a failed save is logged.
"""

import json
from typing import Optional

from src.common.logger import setup_logger
from .defaults import default_configuration
from .event_log import SystemLog
from .exceptions import CorruptedConfigurationError
from .migrations import parse_configuration
from .models import AppConfiguration
from .notifications import ChangeNotifier, Signal
from .safe_storage import SafeStorage

logger = setup_logger(__name__)

CONFIG_KEY = "HARDY_SIGNAGE_DATA"


class ConfigStore:
    """
    Owns the canonical AppConfiguration.

    Usage:
        store = ConfigStore(storage, notifier, system_log)
        config = store.load()
        if config.is_safe_mode:
            # show the safe-mode banner
        store.save(config)
    """

    def __init__(
        self,
        storage: SafeStorage,
        notifier: ChangeNotifier,
        system_log: SystemLog,
        key: str = CONFIG_KEY,
    ):
        """
        Args:
            storage: Durable key-value store
            notifier: Bus receiving CONFIG_CHANGED after each save
            system_log: Log receiving corruption reports
            key: Storage key of the configuration blob
        """
        self._storage = storage
        self._notifier = notifier
        self._system_log = system_log
        self.key = key
        self.current: Optional[AppConfiguration] = None

    def load(self) -> AppConfiguration:
        """
        Load the stored configuration.

        Returns:
            The migrated configuration, the defaults if nothing is stored,
            or the defaults flagged with is_safe_mode if the blob is corrupt
        """
        stored = self._storage.get(self.key)
        if not stored:
            logger.info("No stored configuration, using factory defaults")
            self.current = default_configuration()
            return self.current

        result = parse_configuration(stored)
        if result.ok:
            self.current = result.value
            return self.current

        self._report_corruption(CorruptedConfigurationError(result.error))
        self.current = default_configuration(safe_mode=True)
        return self.current

    def _report_corruption(self, error: CorruptedConfigurationError) -> None:
        logger.error("Critical storage failure, booting in safe mode: %s", error.reason)
        self._system_log.append(
            level="error",
            source="ConfigStore",
            message=f"Failed to load data: {error.reason}. System recovered with defaults.",
        )

    def save(self, config: AppConfiguration) -> bool:
        """
        Persist the whole configuration and broadcast CONFIG_CHANGED.

        Args:
            config: Configuration to store; its is_safe_mode flag is cleared

        Returns:
            True if the blob was serialized and handed to storage
        """
        try:
            blob = json.dumps(config.to_dict())
        except (AttributeError, TypeError, ValueError) as e:
            logger.error("Failed to save configuration: %s", e)
            return False

        self._storage.set(self.key, blob)
        config.is_safe_mode = False
        self.current = config
        logger.info("Configuration saved (%d pages)", len(config.pages))

        self._notifier.publish(Signal.CONFIG_CHANGED, config)
        return True

    def reset_to_defaults(self) -> AppConfiguration:
        """Overwrite the stored configuration with factory defaults."""
        config = default_configuration()
        self.save(config)
        return config

    def __repr__(self) -> str:
        return f"ConfigStore(key={self.key!r})"
