"""
Record store implementation.

Provides both in-memory (for testing) and JSON-file-backed (for the CLI)
implementations of whole-collection key-value persistence. Values are kept
as serialized JSON text in both, so unreadable data and quota limits behave
the same way regardless of backend.
"""

import json
import logging
import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from shared.config import get_settings

from .exceptions import StorageFailureError, StorageQuotaExceededError
from .models import default_for

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


class BaseRecordStore(ABC):
    """
    Shared load/save/transaction logic.

    Subclasses provide raw text access through _read_raw, _write_raw and
    _raw_sizes. A change of None in _write_raw means "delete the key".
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        self._quota_bytes = quota_bytes
        self._lock = threading.RLock()
        self._staged: Optional[dict[str, Optional[str]]] = None
        self._depth = 0

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def load(self, key: str) -> Any:
        """Load a value, falling back to the key's default."""
        with self._lock:
            if self._staged is not None and key in self._staged:
                raw = self._staged[key]
            else:
                raw = self._read_raw(key)

        if raw is None:
            return default_for(key)

        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable value stored under %r", key)
            return default_for(key)

    def save(self, key: str, value: Any) -> None:
        """Serialize and write a value, or stage it inside a transaction."""
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageFailureError(key, f"Value for {key} is not serializable: {e}")
        self._apply({key: raw})

    def delete(self, key: str) -> None:
        """Delete a key, or stage the deletion inside a transaction."""
        self._apply({key: None})

    @contextmanager
    def transaction(self) -> Iterator["BaseRecordStore"]:
        """
        Run a block as one critical section with all-or-nothing writes.

        Nested transactions join the outermost one.
        """
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._staged = {}
            self._depth += 1
            try:
                yield self
            except BaseException:
                if outermost:
                    self._staged = None
                raise
            else:
                if outermost:
                    changes, self._staged = self._staged or {}, None
                    if changes:
                        self._commit(changes)
            finally:
                self._depth -= 1
                if outermost:
                    self._staged = None

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _apply(self, changes: dict[str, Optional[str]]) -> None:
        with self._lock:
            if self._staged is not None:
                self._staged.update(changes)
            else:
                self._commit(changes)

    def _commit(self, changes: dict[str, Optional[str]]) -> None:
        for key in changes:
            self._validate_key(key)

        if self._quota_bytes is not None:
            sizes = self._raw_sizes()
            for key, raw in changes.items():
                if raw is None:
                    sizes.pop(key, None)
                else:
                    sizes[key] = len(key) + len(raw.encode("utf-8"))
            required = sum(sizes.values())
            if required > self._quota_bytes:
                key = next(iter(changes))
                logger.error("Record store quota exceeded writing %s", ", ".join(changes))
                raise StorageQuotaExceededError(key, required, self._quota_bytes)

        self._write_raw(changes)
        logger.debug("Committed record store keys: %s", ", ".join(changes))

    def _validate_key(self, key: str) -> None:
        if not key or not _KEY_PATTERN.match(key):
            raise StorageFailureError(key, f"Invalid record store key: {key!r}")

    @abstractmethod
    def _read_raw(self, key: str) -> Optional[str]:
        """Raw stored text for a key, or None if absent."""
        pass

    @abstractmethod
    def _write_raw(self, changes: dict[str, Optional[str]]) -> None:
        """Apply a batch of raw writes and deletions together."""
        pass

    @abstractmethod
    def _raw_sizes(self) -> dict[str, int]:
        """Stored size in bytes per key, counted the same way as _commit."""
        pass


class InMemoryRecordStore(BaseRecordStore):
    """
    Record store held in process memory.

    For testing and development. Use JsonFileRecordStore for data that
    must survive a restart.
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        super().__init__(quota_bytes)
        self._data: dict[str, str] = {}

    def _read_raw(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _write_raw(self, changes: dict[str, Optional[str]]) -> None:
        for key, raw in changes.items():
            if raw is None:
                self._data.pop(key, None)
            else:
                self._data[key] = raw

    def _raw_sizes(self) -> dict[str, int]:
        return {k: len(k) + len(v.encode("utf-8")) for k, v in self._data.items()}


class JsonFileRecordStore(BaseRecordStore):
    """
    Record store keeping one JSON file per key in a data directory.

    Every file is written to a temporary sibling first and moved into
    place only after all files of a commit were written successfully.
    """

    def __init__(self, data_dir: Path, quota_bytes: Optional[int] = None):
        super().__init__(quota_bytes)
        self._dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._dir

    def _path_for(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def _read_raw(self, key: str) -> Optional[str]:
        if not _KEY_PATTERN.match(key or ""):
            return None
        try:
            return self._path_for(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read record store file for %r", key)
            return None

    def _write_raw(self, changes: dict[str, Optional[str]]) -> None:
        temp_files: list[tuple[str, Path]] = []
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            for key, raw in changes.items():
                if raw is None:
                    continue
                fd, temp_name = tempfile.mkstemp(
                    dir=self._dir, prefix=f".{key}.", suffix=".tmp"
                )
                temp_files.append((key, Path(temp_name)))
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(raw)

            for key, temp_path in temp_files:
                os.replace(temp_path, self._path_for(key))
            temp_files = []

            for key, raw in changes.items():
                if raw is None:
                    self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            key = next(iter(changes))
            logger.error("Failed to write record store files: %s", e)
            raise StorageFailureError(key, f"Failed to write {key}: {e}") from e
        finally:
            for _, temp_path in temp_files:
                temp_path.unlink(missing_ok=True)

    def _raw_sizes(self) -> dict[str, int]:
        sizes: dict[str, int] = {}
        if not self._dir.is_dir():
            return sizes
        for path in self._dir.glob("*.json"):
            try:
                sizes[path.stem] = len(path.stem) + path.stat().st_size
            except OSError:
                continue
        return sizes


# Module-level instance getter
_store_instance: Optional[BaseRecordStore] = None


def create_record_store() -> BaseRecordStore:
    """Create a record store for the configured backend."""
    settings = get_settings()
    if settings.store_backend == "memory":
        return InMemoryRecordStore(quota_bytes=settings.store_quota_bytes)
    return JsonFileRecordStore(settings.data_dir, quota_bytes=settings.store_quota_bytes)


def get_record_store() -> BaseRecordStore:
    """Get the record store singleton."""
    global _store_instance
    if _store_instance is None:
        _store_instance = create_record_store()
    return _store_instance


def reset_record_store() -> None:
    """Reset the record store singleton (for testing)."""
    global _store_instance
    _store_instance = None
