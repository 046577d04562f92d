"""Module for an in memory SslCertificate backend."""

import copy
import logging
import threading

from managed_certs.exceptions import SslCertificateNotFoundError, SslClientException
from managed_certs.manifest import SslCertificate
from managed_certs.status import SslCertificateStatus, SslDomainStatus

from .client import SslCertificateClient

_LOGGER = logging.getLogger(__name__)


class InMemorySslCertificateClient(SslCertificateClient):
    """In-memory implementation of the SslCertificateClient interface.

    New certificates start out provisioning for every domain. Progress is
    simulated by calling `set_status`.
    """

    def __init__(self) -> None:
        """Initialize the InMemorySslCertificateClient."""
        self._certificates: dict[str, SslCertificate] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> SslCertificate:
        """Retrieve an SslCertificate by name."""
        with self._lock:
            if (cert := self._certificates.get(name)) is None:
                raise SslCertificateNotFoundError(f"SslCertificate {name} not found")
            return copy.deepcopy(cert)

    def insert(self, name: str, domains: list[str]) -> None:
        """Create a managed SslCertificate covering the specified domains."""
        with self._lock:
            if name in self._certificates:
                raise SslClientException(f"SslCertificate {name} already exists")
            _LOGGER.debug("Creating SslCertificate %s for %s", name, domains)
            self._certificates[name] = SslCertificate(
                name=name,
                domains=list(domains),
                status=SslCertificateStatus.PROVISIONING,
                domain_status={
                    domain: SslDomainStatus.PROVISIONING for domain in domains
                },
            )

    def set_status(
        self,
        name: str,
        status: str,
        domain_status: dict[str, str] | None = None,
    ) -> None:
        """Update the raw status reported for an existing SslCertificate."""
        with self._lock:
            if (cert := self._certificates.get(name)) is None:
                raise SslCertificateNotFoundError(f"SslCertificate {name} not found")
            cert.status = status
            if domain_status is not None:
                cert.domain_status = dict(domain_status)

    def list_names(self) -> list[str]:
        """Return the names of all SslCertificates."""
        with self._lock:
            return sorted(self._certificates)
