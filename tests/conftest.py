"""
Pytest fixtures for the signage core tests.

Provides storage backends (healthy and failing), the change bus, logs and a
fully wired SignageContext on a temporary data directory.
"""

import pytest

from src.common.config import Config
from src.signage.context import SignageContext
from src.signage.event_log import LoginLog, SystemLog
from src.signage.exceptions import StorageUnavailableError
from src.signage.notifications import ChangeNotifier
from src.signage.safe_storage import (
    FileStorageBackend,
    MemoryStorageBackend,
    SafeStorage,
    StorageBackend,
)


class BrokenBackend(StorageBackend):
    """Backend that rejects every operation, like a blocked browser store."""

    def __init__(self):
        self.calls = []

    def _fail(self, op, *args):
        self.calls.append((op,) + args)
        raise StorageUnavailableError(f"{op} denied")

    def get(self, key):
        self._fail("get", key)

    def set(self, key, value):
        self._fail("set", key)

    def remove(self, key):
        self._fail("remove", key)

    def clear(self):
        self._fail("clear")

    def keys(self):
        self._fail("keys")


@pytest.fixture
def memory_backend():
    return MemoryStorageBackend()


@pytest.fixture
def storage(memory_backend):
    """SafeStorage over a healthy in-memory backend."""
    return SafeStorage(memory_backend)


@pytest.fixture
def broken_backend():
    return BrokenBackend()


@pytest.fixture
def broken_storage(broken_backend):
    """SafeStorage whose backend rejects every read and write."""
    return SafeStorage(broken_backend)


@pytest.fixture
def file_storage(tmp_path):
    return SafeStorage(FileStorageBackend(str(tmp_path / "store")))


@pytest.fixture
def notifier():
    return ChangeNotifier()


@pytest.fixture
def system_log(storage, notifier):
    return SystemLog(storage, notifier)


@pytest.fixture
def login_log(storage):
    return LoginLog(storage)


@pytest.fixture
def settings(tmp_path):
    """Config written to a temp YAML file with a temp data dir."""
    config_path = tmp_path / "settings.yaml"
    config_path.write_text(f"storage:\n  data_dir: {tmp_path / 'data'}\n")
    return Config(str(config_path))


@pytest.fixture
def context(settings):
    return SignageContext.from_config(settings)
