"""
In-process change notification bus.

Surfaces subscribe to named signals instead of polling storage. Delivery is
synchronous and in subscription order within a signal.
"""

import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from src.common.logger import setup_logger

logger = setup_logger(__name__)

Subscriber = Callable[['Signal', Any], None]


class Signal(Enum):
    """Named signals emitted by the signage core."""
    CONFIG_CHANGED = "hardy-storage-update"   # Configuration saved
    LOG_CHANGED = "hardy-log-update"          # System log appended or cleared


class ChangeNotifier:
    """
    Observer list per signal.

    Usage:
        notifier = ChangeNotifier()
        unsubscribe = notifier.subscribe(Signal.CONFIG_CHANGED, on_change)
        notifier.publish(Signal.CONFIG_CHANGED)
        unsubscribe()
    """

    def __init__(self):
        self._subscribers: Dict[Signal, List[Subscriber]] = {signal: [] for signal in Signal}
        self._lock = threading.Lock()

    def subscribe(self, signal: Signal, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for a signal.

        Args:
            signal: Signal to listen for
            callback: Called as callback(signal, payload)

        Returns:
            Callable that removes this subscription
        """
        with self._lock:
            self._subscribers[signal].append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(signal, callback)

        return unsubscribe

    def unsubscribe(self, signal: Signal, callback: Subscriber) -> bool:
        """
        Remove a callback from a signal.

        Returns:
            True if the callback was registered, False otherwise
        """
        with self._lock:
            try:
                self._subscribers[signal].remove(callback)
            except ValueError:
                return False
        return True

    def publish(self, signal: Signal, payload: Optional[Any] = None) -> int:
        """
        Deliver a signal to every current subscriber.

        Args:
            signal: Signal to emit
            payload: Optional detail passed to subscribers

        Returns:
            Number of subscribers notified
        """
        with self._lock:
            subscribers = list(self._subscribers[signal])

        # Call subscribers outside lock so they may (un)subscribe
        for callback in subscribers:
            try:
                callback(signal, payload)
            except Exception as e:
                logger.error("Error in %s subscriber: %s", signal.name, e)

        return len(subscribers)

    def subscriber_count(self, signal: Signal) -> int:
        with self._lock:
            return len(self._subscribers[signal])

    def __repr__(self) -> str:
        counts = ", ".join(f"{s.name}={self.subscriber_count(s)}" for s in Signal)
        return f"ChangeNotifier({counts})"
