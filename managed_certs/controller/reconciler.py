"""Reconciliation of a single ManagedCertificate.

One pass over a resource runs these steps in order, stopping at the first
failure:

1. Read the ManagedCertificate.
2. Reserve a name for its SslCertificate in the state, if there is none yet.
   The name is recorded before the SslCertificate is created so a failure
   in between never leaves behind an object nobody knows the name of.
3. Create the SslCertificate under the reserved name, unless it exists.
4. Translate the status of the SslCertificate and publish it on the
   ManagedCertificate.
"""

import dataclasses
import logging

from managed_certs.context import trace_context
from managed_certs.exceptions import (
    SslCertificateNotFoundError,
    StateEntryMissingError,
)
from managed_certs.manifest import (
    DomainStatus,
    ManagedCertificate,
    ManagedCertificateStatus,
    ResourceKey,
)
from managed_certs.naming import NameAllocator
from managed_certs.resources import ResourceReader, ResourceWriter
from managed_certs.ssl import SslCertificateClient
from managed_certs.state import State
from managed_certs.status import translate_certificate_status, translate_domain_status

_LOGGER = logging.getLogger(__name__)


class Reconciler:
    """Keeps a ManagedCertificate in sync with its SslCertificate."""

    def __init__(
        self,
        reader: ResourceReader,
        writer: ResourceWriter,
        ssl_client: SslCertificateClient,
        state: State,
        allocator: NameAllocator | None = None,
    ) -> None:
        """Initialize the Reconciler.

        Args:
            reader: Source of ManagedCertificate resources.
            writer: Destination for ManagedCertificate status updates.
            ssl_client: Client for the SslCertificate backend.
            state: Mapping of resources to SslCertificate names.
            allocator: Chooses names for new SslCertificates.
        """
        self._reader = reader
        self._writer = writer
        self._ssl_client = ssl_client
        self._state = state
        self._allocator = allocator or NameAllocator(ssl_client)

    def reconcile(self, key: ResourceKey) -> None:
        """Run a full reconcile pass for the resource.

        Raises:
            ResourceNotFoundError: If the resource does not exist.
            UnknownStatusError: If the backend reports an unknown status.
            ManagedCertsException: If any collaborator fails.
        """
        with trace_context(f"Reconcile {key}"):
            _LOGGER.info("Handling ManagedCertificate %s", key)
            mcert = self._reader.get(key)
            with trace_context("Reserve name"):
                self.ensure_certificate_name(mcert)
            with trace_context("Create SslCertificate"):
                self.ensure_ssl_certificate(mcert)
            with trace_context("Publish status"):
                self.update_status(mcert)

    def ensure_certificate_name(self, mcert: ManagedCertificate) -> str:
        """Reserve an SslCertificate name for the resource if it has none.

        A name already published in the status of the resource is adopted, so
        the resource keeps its certificate when the state has been lost.
        """
        key = mcert.key
        if name := self._state.get(key):
            return name
        if name := mcert.status.certificate_name:
            _LOGGER.info(
                "Adopting SslCertificate name %s from status of ManagedCertificate %s",
                name,
                key,
            )
            self._state.put(key, name)
            return name
        name = self._allocator.allocate()
        _LOGGER.info(
            "Adding to state SslCertificate name %s for ManagedCertificate %s",
            name,
            key,
        )
        self._state.put(key, name)
        return name

    def ensure_ssl_certificate(self, mcert: ManagedCertificate) -> None:
        """Create the SslCertificate under the reserved name if it does not exist."""
        if (name := self._state.get(mcert.key)) is None:
            raise StateEntryMissingError(str(mcert.key))
        if not name:
            return
        try:
            self._ssl_client.get(name)
        except SslCertificateNotFoundError:
            _LOGGER.info(
                "Creating SslCertificate %s for ManagedCertificate %s",
                name,
                mcert.key,
            )
            self._ssl_client.insert(name, mcert.domains)

    def update_status(self, mcert: ManagedCertificate) -> None:
        """Publish the status of the SslCertificate on the resource.

        Nothing is written unless every status value can be translated.
        """
        if (name := self._state.get(mcert.key)) is None:
            raise StateEntryMissingError(str(mcert.key))
        if not name:
            return

        ssl_cert = self._ssl_client.get(name)
        status = ManagedCertificateStatus(
            certificate_status=str(translate_certificate_status(ssl_cert.status)),
            certificate_name=ssl_cert.name,
            domain_status=[
                DomainStatus(
                    domain=domain, status=str(translate_domain_status(value))
                )
                for domain, value in sorted(ssl_cert.domain_status.items())
            ],
        )
        if status == mcert.status:
            _LOGGER.debug("Status of %s is up to date", mcert.key)
            return

        self._writer.update(dataclasses.replace(mcert, status=status))
