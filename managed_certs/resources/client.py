"""Interfaces for reading and writing ManagedCertificate resources."""

from abc import ABC, abstractmethod

from managed_certs.manifest import ManagedCertificate, ResourceKey


class ResourceReader(ABC):
    """Abstract reader of ManagedCertificate resources."""

    @abstractmethod
    def get(self, key: ResourceKey) -> ManagedCertificate:
        """Retrieve a resource by identity.

        The returned object is owned by the caller and may be out of date.

        Raises:
            ResourceNotFoundError: If the resource does not exist.
        """

    @abstractmethod
    def list(self, namespace: str | None = None) -> list[ManagedCertificate]:
        """List all resources, optionally restricted to a namespace."""


class ResourceWriter(ABC):
    """Abstract writer of ManagedCertificate resources."""

    @abstractmethod
    def update(self, resource: ManagedCertificate) -> ManagedCertificate:
        """Persist the full resource including its status.

        Returns the resource as stored.
        """
