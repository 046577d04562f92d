"""Module for in memory ManagedCertificate resources."""

import copy
import logging
import threading

from managed_certs.exceptions import ResourceNotFoundError
from managed_certs.manifest import ManagedCertificate, ResourceKey

from .client import ResourceReader, ResourceWriter

_LOGGER = logging.getLogger(__name__)


class InMemoryResources(ResourceReader, ResourceWriter):
    """In-memory implementation of the ResourceReader and ResourceWriter interfaces.

    Objects are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self) -> None:
        """Initialize the InMemoryResources."""
        self._resources: dict[ResourceKey, ManagedCertificate] = {}
        self._lock = threading.Lock()

    def add(self, resource: ManagedCertificate) -> None:
        """Add or replace a resource."""
        with self._lock:
            self._resources[resource.key] = copy.deepcopy(resource)

    def delete(self, key: ResourceKey) -> None:
        """Remove a resource."""
        with self._lock:
            if self._resources.pop(key, None) is None:
                raise ResourceNotFoundError(f"ManagedCertificate {key} not found")

    def get(self, key: ResourceKey) -> ManagedCertificate:
        """Retrieve a resource by identity."""
        with self._lock:
            if (resource := self._resources.get(key)) is None:
                raise ResourceNotFoundError(f"ManagedCertificate {key} not found")
            return copy.deepcopy(resource)

    def list(self, namespace: str | None = None) -> list[ManagedCertificate]:
        """List all resources, optionally restricted to a namespace."""
        with self._lock:
            return [
                copy.deepcopy(resource)
                for key, resource in sorted(self._resources.items())
                if namespace is None or key.namespace == namespace
            ]

    def update(self, resource: ManagedCertificate) -> ManagedCertificate:
        """Persist the full resource including its status."""
        with self._lock:
            if resource.key not in self._resources:
                raise ResourceNotFoundError(
                    f"ManagedCertificate {resource.key} not found"
                )
            _LOGGER.debug("Updating ManagedCertificate %s", resource.key)
            self._resources[resource.key] = copy.deepcopy(resource)
            return copy.deepcopy(resource)
