"""Module for in memory state."""

import logging
import threading

from managed_certs.manifest import ResourceKey

from .state import State

_LOGGER = logging.getLogger(__name__)


class InMemoryState(State):
    """In-memory implementation of the State interface."""

    def __init__(self, entries: dict[ResourceKey, str] | None = None) -> None:
        """Initialize the InMemoryState."""
        self._entries: dict[ResourceKey, str] = dict(entries or {})
        self._lock = threading.Lock()

    def get(self, key: ResourceKey) -> str | None:
        """Return the SslCertificate name for a resource, or None if absent."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: ResourceKey, name: str) -> None:
        """Record the SslCertificate name for a resource."""
        _LOGGER.debug("Setting state for %s to %r", key, name)
        with self._lock:
            self._entries[key] = name

    def items(self) -> dict[ResourceKey, str]:
        """Return a snapshot of all entries."""
        with self._lock:
            return dict(self._entries)
