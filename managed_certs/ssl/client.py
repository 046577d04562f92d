"""Interface for the SslCertificate backend."""

from abc import ABC, abstractmethod

from managed_certs.manifest import SslCertificate


class SslCertificateClient(ABC):
    """Abstract client for reading and creating SslCertificate objects."""

    @abstractmethod
    def get(self, name: str) -> SslCertificate:
        """Retrieve an SslCertificate by name.

        Raises:
            SslCertificateNotFoundError: If no object exists with that name.
            SslClientException: If the backend could not be queried.
        """

    @abstractmethod
    def insert(self, name: str, domains: list[str]) -> None:
        """Create a managed SslCertificate covering the specified domains.

        Raises:
            SslClientException: If the object could not be created.
        """
