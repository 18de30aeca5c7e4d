"""
Bounded event logs persisted through SafeStorage.

Each buffer is one JSON array under one key, newest entry first. The whole
array is rebuilt from storage on every read and rewritten on every append.
"""

import json
import time
from typing import Any, Callable, Dict, List, Optional

from src.common.logger import setup_logger
from .models import LOG_LEVELS, LOGIN_REASONS, LogEntry, LoginLogEntry, generate_id
from .notifications import ChangeNotifier, Signal
from .safe_storage import SafeStorage

logger = setup_logger(__name__)

SYSTEM_LOG_KEY = "HARDY_SYSTEM_LOGS"
SYSTEM_LOG_MAX = 50
LOGIN_LOG_KEY = "admin_login_log"
LOGIN_LOG_MAX = 200


def _now_ms() -> int:
    return int(time.time() * 1000)


def _decode(records: List[Dict[str, Any]], factory: Callable[[Dict[str, Any]], Any]) -> List[Any]:
    """Build entries from raw records, skipping ones that do not fit the entry type."""
    entries = []
    for record in records:
        try:
            entries.append(factory(record))
        except (TypeError, ValueError, OverflowError) as e:
            logger.warning("Skipping malformed log record: %s", e)
    return entries


class LogBuffer:
    """Newest-first ring buffer of JSON records stored under a single key."""

    def __init__(
        self,
        storage: SafeStorage,
        key: str,
        max_entries: int,
        notifier: Optional[ChangeNotifier] = None,
        signal: Optional[Signal] = None,
    ):
        """
        Args:
            storage: Durable key-value store
            key: Storage key for the buffer
            max_entries: Maximum number of records kept
            notifier: Bus used to announce changes (optional)
            signal: Signal published on append and clear
        """
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._storage = storage
        self.key = key
        self.max_entries = max_entries
        self._notifier = notifier
        self._signal = signal

    def read(self) -> List[Dict[str, Any]]:
        """Read raw records, newest first. A corrupt blob reads as empty."""
        stored = self._storage.get(self.key)
        if not stored:
            return []
        try:
            records = json.loads(stored)
        except (ValueError, RecursionError):
            logger.warning("Discarding unreadable log buffer %r", self.key)
            return []
        if not isinstance(records, list):
            return []
        return [r for r in records if isinstance(r, dict)]

    def append(self, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Prepend a record, stamping it with a fresh id and timestamp.

        Returns:
            The stored record, or None if it could not be written
        """
        try:
            with self._storage.lock_for(self.key):
                stamped = dict(record, id=generate_id(), timestamp=_now_ms())
                records = [stamped] + self.read()
                self._storage.set(self.key, json.dumps(records[:self.max_entries]))
        except (TypeError, ValueError) as e:
            logger.error("Failed to write to log buffer %r: %s", self.key, e)
            return None

        self._notify(stamped)
        return stamped

    def clear(self) -> None:
        with self._storage.lock_for(self.key):
            self._storage.remove(self.key)
        self._notify(None)

    def _notify(self, payload: Optional[Dict[str, Any]]) -> None:
        if self._notifier is not None and self._signal is not None:
            self._notifier.publish(self._signal, payload)

    def __len__(self) -> int:
        return len(self.read())


class SystemLog:
    """System error log shown to operators. Publishes LOG_CHANGED."""

    def __init__(
        self,
        storage: SafeStorage,
        notifier: Optional[ChangeNotifier] = None,
        key: str = SYSTEM_LOG_KEY,
        max_entries: int = SYSTEM_LOG_MAX,
    ):
        self._buffer = LogBuffer(storage, key, max_entries, notifier, Signal.LOG_CHANGED)

    @property
    def max_entries(self) -> int:
        return self._buffer.max_entries

    def append(
        self,
        level: str,
        source: str,
        message: str,
        stack: Optional[str] = None,
    ) -> Optional[LogEntry]:
        """
        Record a system event.

        Args:
            level: "info", "warn" or "error"
            source: Component that produced the entry
            message: Human-readable description
            stack: Optional traceback text

        Returns:
            The stored LogEntry, or None if it could not be written
        """
        if level not in LOG_LEVELS:
            level = "info"
        record = {"level": level, "source": source, "message": message}
        if stack is not None:
            record["stack"] = stack
        stored = self._buffer.append(record)
        return LogEntry.from_dict(stored) if stored is not None else None

    def list(self) -> List[LogEntry]:
        return _decode(self._buffer.read(), LogEntry.from_dict)

    def clear(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)


class LoginLog:
    """Admin login attempt log. Not broadcast; the admin UI polls it."""

    def __init__(
        self,
        storage: SafeStorage,
        key: str = LOGIN_LOG_KEY,
        max_entries: int = LOGIN_LOG_MAX,
    ):
        self._buffer = LogBuffer(storage, key, max_entries)

    @property
    def max_entries(self) -> int:
        return self._buffer.max_entries

    def record_attempt(
        self,
        email: str,
        success: bool,
        reason: str,
        user_agent: str = "",
        screen: Optional[Dict[str, int]] = None,
    ) -> Optional[LoginLogEntry]:
        """Record one login attempt. Unknown reasons are stored as "unknown"."""
        if reason not in LOGIN_REASONS:
            reason = "unknown"
        record = {
            "email": email,
            "success": bool(success),
            "reason": reason,
            "userAgent": user_agent,
            "screen": dict(screen) if screen else {"width": 0, "height": 0},
        }
        stored = self._buffer.append(record)
        return LoginLogEntry.from_dict(stored) if stored is not None else None

    def list(self) -> List[LoginLogEntry]:
        return _decode(self._buffer.read(), LoginLogEntry.from_dict)

    def clear(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)
