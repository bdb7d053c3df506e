"""Replicated key/value status document of a Wattpilot."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from .exceptions import NotReadyError, PropertyNotFoundError

_LOGGER = logging.getLogger(__name__)


class StatusDocument:
    """Thread-safe mirror of the charger status.

    The receive loop merges full and delta updates while the caller reads and
    writes single keys, so every access goes through one lock.
    """

    def __init__(self) -> None:
        """Initialize an empty, not yet synchronized document."""
        self._lock = threading.Lock()
        self._data: dict[str, Any] = {}
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Return True once the first complete full status was merged."""
        with self._lock:
            return self._initialized

    def merge(self, update: Mapping[str, Any]) -> None:
        """Shallow merge an update: present keys overwrite, absent keys stay."""
        with self._lock:
            self._data.update(update)

    def mark_initialized(self) -> None:
        """Record that the first complete full status has been merged."""
        with self._lock:
            self._initialized = True

    def contains(self, key: str) -> bool:
        """Return True if the key is known, regardless of sync state."""
        with self._lock:
            return key in self._data

    def get(self, key: str) -> Any:
        """Return the current value of a property.

        Raises:
            NotReadyError: The first full sync has not completed.
            PropertyNotFoundError: The key is unknown.
        """
        with self._lock:
            self._check(key)
            return self._data[key]

    def set(self, key: str, value: Any) -> None:
        """Commit a value for an existing property.

        Unknown keys are rejected, never inserted.
        """
        with self._lock:
            self._check(key)
            self._data[key] = value

    def snapshot(self) -> dict[str, Any]:
        """Return a shallow copy of the whole document."""
        with self._lock:
            if not self._initialized:
                raise NotReadyError("Connection is not initialized")
            return dict(self._data)

    def _check(self, key: str) -> None:
        # caller holds the lock
        if not self._initialized:
            raise NotReadyError("Connection is not valid")
        if key not in self._data:
            raise PropertyNotFoundError(key)
