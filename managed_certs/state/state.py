"""State module for holding SslCertificate names between reconciles."""

from abc import ABC, abstractmethod

from managed_certs.manifest import ResourceKey


class State(ABC):
    """Abstract base class for the mapping of resources to SslCertificate names.

    Implementations must be safe to call from multiple worker threads at once.
    """

    @abstractmethod
    def get(self, key: ResourceKey) -> str | None:
        """Return the SslCertificate name for a resource, or None if absent."""

    @abstractmethod
    def put(self, key: ResourceKey, name: str) -> None:
        """Record the SslCertificate name for a resource."""

    @abstractmethod
    def items(self) -> dict[ResourceKey, str]:
        """Return a snapshot of all entries."""
