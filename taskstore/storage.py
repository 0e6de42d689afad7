"""Storage layer for taskstore.

This module provides an abstract ordered key-value interface and concrete
implementations for persisting record payloads. Payloads are plain
JSON-compatible dicts; the stores convert them to and from record objects.

Every backend bounds the size of a slot: keys up to MAX_KEY_SIZE bytes and
payloads up to MAX_VALUE_SIZE bytes of compact JSON. The JsonStorage
implementation uses file-based JSON storage with fcntl-based file locking.
"""

import fcntl
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

MAX_KEY_SIZE = 44
MAX_VALUE_SIZE = 1024

Payload = Dict[str, Any]


def key_size(key: str) -> int:
    return len(key.encode("utf-8"))


def payload_size(payload: Payload) -> int:
    """Size in bytes of the compact JSON encoding of payload."""
    return len(json.dumps(payload, separators=(",", ":")).encode("utf-8"))


def check_bounds(key: str, payload: Payload) -> None:
    """Raise ValueError if key or payload does not fit in a storage slot."""
    if key_size(key) > MAX_KEY_SIZE:
        raise ValueError(f"Key exceeds {MAX_KEY_SIZE} bytes: {key!r}")
    size = payload_size(payload)
    if size > MAX_VALUE_SIZE:
        raise ValueError(f"Payload for {key!r} is {size} bytes, limit is {MAX_VALUE_SIZE}")


class Storage(ABC):
    """Abstract base class for ordered key-value storage implementations."""

    @abstractmethod
    def get(self, key: str) -> Optional[Payload]:
        """Return a copy of the payload stored under key, or None."""

    @abstractmethod
    def insert(self, key: str, payload: Payload) -> None:
        """Store payload under key, replacing any previous entry.

        Raises:
            ValueError: If key or payload exceeds the slot bounds
        """

    @abstractmethod
    def remove(self, key: str) -> Optional[Payload]:
        """Remove the entry under key and return its payload, or None."""

    @abstractmethod
    def items(self) -> List[Tuple[str, Payload]]:
        """Return all entries as (key, payload) pairs in ascending key order."""

    @abstractmethod
    def __len__(self) -> int:
        pass

    @abstractmethod
    def delete(self) -> None:
        """Delete all data from storage."""


class MemoryStorage(Storage):
    """Dictionary-backed storage, kept for the lifetime of the object."""

    def __init__(self) -> None:
        self._entries: Dict[str, Payload] = {}

    def get(self, key: str) -> Optional[Payload]:
        payload = self._entries.get(key)
        return dict(payload) if payload is not None else None

    def insert(self, key: str, payload: Payload) -> None:
        check_bounds(key, payload)
        self._entries[key] = dict(payload)

    def remove(self, key: str) -> Optional[Payload]:
        return self._entries.pop(key, None)

    def items(self) -> List[Tuple[str, Payload]]:
        return [(key, dict(self._entries[key])) for key in sorted(self._entries)]

    def __len__(self) -> int:
        return len(self._entries)

    def delete(self) -> None:
        self._entries.clear()


class JsonStorage(Storage):
    """JSON file-based storage implementation with file locking.

    The whole map is read for every operation and rewritten for every
    mutation. fcntl locks keep a reader from seeing a half-written file
    when several processes share the same path.

    Attributes:
        file_path: Path to the JSON storage file
    """

    def __init__(
        self,
        file_path: Optional[str] = None,
        env_var: str = "TASK_DB_PATH",
        default_path: str = "tasks.json",
    ):
        """Initialize JsonStorage with a file path.

        Args:
            file_path: Path to the JSON file for storage. If None, uses the
                      env_var environment variable or falls back to default_path
            env_var: Environment variable consulted when file_path is None
            default_path: Path used when neither is set
        """
        if file_path is None:
            file_path = os.environ.get(env_var, default_path)
        self.file_path = Path(file_path)

    def _save(self, entries: Dict[str, Payload]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

        # truncate only once the exclusive lock is held
        with open(self.file_path, "a+") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.seek(0)
                f.truncate()
                json.dump(entries, f, indent=2)
                f.flush()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        logger.debug("Saved %d records to %s", len(entries), self.file_path)

    def _load(self) -> Dict[str, Payload]:
        if not self.file_path.exists():
            return {}

        with open(self.file_path, "r") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                content = f.read().strip()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        if not content:
            return {}
        return json.loads(content)

    def get(self, key: str) -> Optional[Payload]:
        return self._load().get(key)

    def insert(self, key: str, payload: Payload) -> None:
        check_bounds(key, payload)
        entries = self._load()
        entries[key] = dict(payload)
        self._save(entries)

    def remove(self, key: str) -> Optional[Payload]:
        entries = self._load()
        payload = entries.pop(key, None)
        if payload is not None:
            self._save(entries)
        return payload

    def items(self) -> List[Tuple[str, Payload]]:
        entries = self._load()
        return [(key, entries[key]) for key in sorted(entries)]

    def __len__(self) -> int:
        return len(self._load())

    def delete(self) -> None:
        """Delete the JSON storage file.

        If the file doesn't exist, this method does nothing.
        """
        if self.file_path.exists():
            self.file_path.unlink()
