"""
Durable key-value storage for the signage core.

SafeStorage wraps a persistent backend and never raises: when the backend
fails, values go to an in-memory mapping that lives as long as the process.
"""

import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

from src.common.logger import setup_logger
from .exceptions import StorageUnavailableError

logger = setup_logger(__name__)

BLOB_SUFFIX = ".blob"


class StorageBackend:
    """Interface for a persistent string store. Implementations raise StorageUnavailableError."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def keys(self) -> List[str]:
        raise NotImplementedError


class FileStorageBackend(StorageBackend):
    """Stores each key as one file inside a directory."""

    def __init__(self, directory: str):
        """
        Args:
            directory: Directory holding the blob files (created on first write)
        """
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        return self.directory / (quote(key, safe="-_.") + BLOB_SUFFIX)

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailableError(f"Cannot read {key!r}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write to a temp file and swap it in so readers never see half a blob
            fd, tmp_path = tempfile.mkstemp(dir=str(self.directory), suffix=".tmp")
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(value)
                os.replace(tmp_path, self._path_for(key))
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageUnavailableError(f"Cannot write {key!r}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageUnavailableError(f"Cannot remove {key!r}: {e}") from e

    def clear(self) -> None:
        if not self.directory.exists():
            return
        try:
            for path in self.directory.glob("*" + BLOB_SUFFIX):
                path.unlink()
        except OSError as e:
            raise StorageUnavailableError(f"Cannot clear {self.directory}: {e}") from e

    def keys(self) -> List[str]:
        if not self.directory.exists():
            return []
        try:
            return sorted(
                unquote(path.name[:-len(BLOB_SUFFIX)])
                for path in self.directory.glob("*" + BLOB_SUFFIX)
            )
        except OSError as e:
            raise StorageUnavailableError(f"Cannot list {self.directory}: {e}") from e

    def __repr__(self) -> str:
        return f"FileStorageBackend(directory={self.directory})"


class SafeStorage:
    """
    Key-value store that treats persistence as always available.

    Backend failures (disk full, permission denied, read-only media) are
    logged and redirected to an in-memory mapping. Memory-held values do not
    survive a restart.
    """

    def __init__(self, backend: StorageBackend):
        self._backend = backend
        self._memory: Dict[str, str] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def get(self, key: str) -> Optional[str]:
        try:
            return self._backend.get(key)
        except StorageUnavailableError as e:
            logger.warning("Storage read blocked, falling back to memory for %r: %s", key, e)
            return self._memory.get(key)

    def set(self, key: str, value: str) -> None:
        try:
            self._backend.set(key, value)
        except StorageUnavailableError as e:
            logger.warning("Storage write blocked, falling back to memory for %r: %s", key, e)
            self._memory[key] = value

    def remove(self, key: str) -> None:
        self._memory.pop(key, None)
        try:
            self._backend.remove(key)
        except StorageUnavailableError as e:
            logger.warning("Storage remove blocked for %r: %s", key, e)

    def clear(self) -> None:
        self._memory.clear()
        try:
            self._backend.clear()
        except StorageUnavailableError as e:
            logger.warning("Storage clear blocked: %s", e)

    def keys(self) -> List[str]:
        """List keys known to the backend and the memory fallback."""
        try:
            backend_keys = self._backend.keys()
        except StorageUnavailableError as e:
            logger.warning("Storage listing blocked: %s", e)
            backend_keys = []
        return sorted(set(backend_keys) | set(self._memory))

    def lock_for(self, key: str) -> threading.RLock:
        """
        Get the lock guarding read-modify-write cycles on a key.

        Args:
            key: Storage key

        Returns:
            A re-entrant lock unique to the key
        """
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def __repr__(self) -> str:
        return f"SafeStorage(backend={self._backend!r}, memory_keys={len(self._memory)})"


class MemoryStorageBackend(StorageBackend):
    """Dict-backed backend for tests and ephemeral kiosks."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> List[str]:
        return sorted(self._data)
