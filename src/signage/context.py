"""
Signage context: the one owned handle to storage, configuration, cache, logs
and the change bus. Surfaces receive it instead of reaching for globals.
"""

from typing import Any, Callable, List, Optional

from src.common.config import Config, get_config
from src.common.logger import setup_logger
from .config_store import ConfigStore
from .event_log import LoginLog, SystemLog
from .models import AppConfiguration, LogEntry
from .notifications import ChangeNotifier, Signal, Subscriber
from .remote_cache import RemoteDataCache
from .safe_storage import FileStorageBackend, SafeStorage

logger = setup_logger(__name__)


class SignageContext:
    """Wires the signage core components around a single SafeStorage."""

    def __init__(
        self,
        storage: SafeStorage,
        config: Optional[Config] = None,
        notifier: Optional[ChangeNotifier] = None,
        cache: Optional[RemoteDataCache] = None,
    ):
        """
        Args:
            storage: Durable key-value store shared by every component
            config: Settings (global config if None)
            notifier: Change bus (a new one if None)
            cache: Remote data cache (built from config if None)
        """
        self.settings = config or get_config()
        self.storage = storage
        self.notifier = notifier or ChangeNotifier()

        self.system_log = SystemLog(
            storage,
            self.notifier,
            key=self.settings.system_log_key,
            max_entries=self.settings.system_log_max,
        )
        self.login_log = LoginLog(
            storage,
            key=self.settings.login_log_key,
            max_entries=self.settings.login_log_max,
        )
        self.config_store = ConfigStore(
            storage,
            self.notifier,
            self.system_log,
            key=self.settings.config_key,
        )
        self.cache = cache or RemoteDataCache(
            storage,
            prefix=self.settings.cache_prefix,
            timeout=self.settings.fetch_timeout,
        )

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "SignageContext":
        """Build a context backed by files under config.data_dir."""
        config = config or get_config()
        storage = SafeStorage(FileStorageBackend(config.data_dir))
        logger.info("Signage context using data dir %s", config.data_dir)
        return cls(storage, config=config)

    # Configuration

    def load_configuration(self) -> AppConfiguration:
        return self.config_store.load()

    def save_configuration(self, configuration: AppConfiguration) -> bool:
        return self.config_store.save(configuration)

    @property
    def configuration(self) -> AppConfiguration:
        """Current configuration, loading it on first access."""
        if self.config_store.current is None:
            return self.config_store.load()
        return self.config_store.current

    # Remote data

    def fetch_cached(
        self,
        key: str,
        url: str,
        ttl_seconds: Optional[float] = None,
        fallback: Any = None,
    ) -> Any:
        if ttl_seconds is None:
            ttl_seconds = self.settings.default_ttl
        return self.cache.fetch(key, url, ttl_seconds, fallback)

    # System log

    def append_log(
        self,
        level: str,
        source: str,
        message: str,
        stack: Optional[str] = None,
    ) -> Optional[LogEntry]:
        return self.system_log.append(level, source, message, stack)

    def list_logs(self) -> List[LogEntry]:
        return self.system_log.list()

    def clear_logs(self) -> None:
        self.system_log.clear()

    # Notifications

    def subscribe(self, signal: Signal, callback: Subscriber) -> Callable[[], None]:
        return self.notifier.subscribe(signal, callback)

    def unsubscribe(self, signal: Signal, callback: Subscriber) -> bool:
        return self.notifier.unsubscribe(signal, callback)

    def __repr__(self) -> str:
        return f"SignageContext(storage={self.storage!r})"
