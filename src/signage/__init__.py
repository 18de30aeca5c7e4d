"""
Signage core package.
Durable storage with memory fallback, configuration persistence with
migration and safe mode, cached remote data, event logs and the change bus.
"""

from .context import SignageContext
from .notifications import ChangeNotifier, Signal

__all__ = ["SignageContext", "ChangeNotifier", "Signal"]
