"""Representation of the objects reconciled by the controller.

A ManagedCertificate is the cluster resource a user creates to declare the
domains they want a certificate for. An SslCertificate is the object in the
provisioning backend that tracks issuance of that certificate.
"""

from dataclasses import dataclass, field
import logging
from typing import Any

from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig

from .exceptions import InputException

__all__ = [
    "ResourceKey",
    "DomainStatus",
    "ManagedCertificateStatus",
    "ManagedCertificate",
    "SslCertificate",
]

_LOGGER = logging.getLogger(__name__)


MANAGED_CERTIFICATE_GROUP = "networking.gke.io"
MANAGED_CERTIFICATE_VERSION = "v1beta1"
MANAGED_CERTIFICATE_KIND = "ManagedCertificate"
MANAGED_CERTIFICATE_PLURAL = "managedcertificates"
SSL_CERTIFICATE_TYPE = "MANAGED"


@dataclass(frozen=True, order=True)
class ResourceKey:
    """Identifier for a ManagedCertificate resource."""

    namespace: str
    name: str

    @classmethod
    def parse(cls, key: str) -> "ResourceKey":
        """Split a `namespace/name` key into its parts."""
        parts = key.split("/")
        if len(parts) == 1:
            return cls("", parts[0])
        if len(parts) == 2:
            return cls(parts[0], parts[1])
        raise InputException(f"Unexpected key format: {key!r}")

    def __str__(self) -> str:
        """Return the namespaced name."""
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name


@dataclass
class DomainStatus(DataClassDictMixin):
    """Provisioning status of a single domain of a certificate."""

    domain: str
    """The domain name."""

    status: str
    """The public status of the domain."""


@dataclass
class ManagedCertificateStatus(DataClassDictMixin):
    """Status block of a ManagedCertificate."""

    certificate_status: str = ""
    """The public status of the certificate as a whole."""

    certificate_name: str = ""
    """The name of the SslCertificate backing this resource."""

    domain_status: list[DomainStatus] = field(default_factory=list)
    """The per-domain provisioning status."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ManagedCertificateStatus":
        """Parse the status block of a ManagedCertificate object."""
        return cls(
            certificate_status=doc.get("certificateStatus", ""),
            certificate_name=doc.get("certificateName", ""),
            domain_status=[
                DomainStatus(domain=item["domain"], status=item["status"])
                for item in doc.get("domainStatus") or ()
            ],
        )

    def to_doc(self) -> dict[str, Any]:
        """Return the kubernetes representation of the status."""
        return {
            "certificateStatus": self.certificate_status,
            "certificateName": self.certificate_name,
            "domainStatus": [
                {"domain": item.domain, "status": item.status}
                for item in self.domain_status
            ],
        }


@dataclass
class ManagedCertificate(DataClassDictMixin):
    """A user declared request for a certificate covering a set of domains."""

    name: str
    """The name of the resource."""

    namespace: str
    """The namespace of the resource."""

    domains: list[str] = field(default_factory=list)
    """The domains the certificate should be issued for."""

    status: ManagedCertificateStatus = field(default_factory=ManagedCertificateStatus)
    """The status published by the controller."""

    resource_version: str | None = None
    """Opaque version of the object as last read from the cluster."""

    @property
    def key(self) -> ResourceKey:
        """Return the identity of this resource."""
        return ResourceKey(self.namespace, self.name)

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ManagedCertificate":
        """Parse a ManagedCertificate from a kubernetes object."""
        if doc.get("kind") != MANAGED_CERTIFICATE_KIND:
            raise InputException(f"Invalid {cls.__name__} unexpected kind: {doc}")
        if not (metadata := doc.get("metadata")):
            raise InputException(f"Invalid {cls.__name__} missing metadata: {doc}")
        if not (name := metadata.get("name")):
            raise InputException(
                f"Invalid {cls.__name__} missing metadata.name: {doc}"
            )
        if not (spec := doc.get("spec")):
            raise InputException(f"Invalid {cls.__name__} missing spec: {doc}")
        if (domains := spec.get("domains")) is None:
            raise InputException(f"Invalid {cls.__name__} missing spec.domains: {doc}")
        return cls(
            name=name,
            namespace=metadata.get("namespace", ""),
            domains=list(domains),
            status=ManagedCertificateStatus.parse_doc(doc.get("status") or {}),
            resource_version=metadata.get("resourceVersion"),
        )

    def to_doc(self) -> dict[str, Any]:
        """Return the kubernetes representation of the resource."""
        metadata: dict[str, Any] = {"name": self.name, "namespace": self.namespace}
        if self.resource_version:
            metadata["resourceVersion"] = self.resource_version
        return {
            "apiVersion": f"{MANAGED_CERTIFICATE_GROUP}/{MANAGED_CERTIFICATE_VERSION}",
            "kind": MANAGED_CERTIFICATE_KIND,
            "metadata": metadata,
            "spec": {"domains": list(self.domains)},
            "status": self.status.to_doc(),
        }

    class Config(BaseConfig):
        omit_none = True


@dataclass
class SslCertificate(DataClassDictMixin):
    """A managed certificate object in the provisioning backend."""

    name: str
    """The generated name of the certificate."""

    domains: list[str] = field(default_factory=list)
    """The domains covered by the certificate."""

    status: str = ""
    """The raw overall provisioning status reported by the backend."""

    domain_status: dict[str, str] = field(default_factory=dict)
    """The raw per-domain provisioning status reported by the backend."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "SslCertificate":
        """Parse an SslCertificate from the backend API representation."""
        if not (name := doc.get("name")):
            raise InputException(f"Invalid {cls.__name__} missing name: {doc}")
        managed = doc.get("managed") or {}
        return cls(
            name=name,
            domains=list(managed.get("domains") or ()),
            status=managed.get("status", ""),
            domain_status=dict(managed.get("domainStatus") or {}),
        )
