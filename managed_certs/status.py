"""Translation of backend provisioning status into the public vocabulary.

The backend reports the certificate as a whole and each of its domains using
two separate enumerations. Each has its own translation table, and any value
outside of a table is rejected rather than published.
"""

from enum import StrEnum

from .exceptions import UnknownStatusError

__all__ = [
    "SslCertificateStatus",
    "SslDomainStatus",
    "CertificateStatus",
    "DomainStatusValue",
    "translate_certificate_status",
    "translate_domain_status",
]


class SslCertificateStatus(StrEnum):
    """Overall status of an SslCertificate as reported by the backend."""

    UNSPECIFIED = "MANAGED_CERTIFICATE_STATUS_UNSPECIFIED"
    ACTIVE = "ACTIVE"
    PROVISIONING = "PROVISIONING"
    PROVISIONING_FAILED = "PROVISIONING_FAILED"
    PROVISIONING_FAILED_PERMANENTLY = "PROVISIONING_FAILED_PERMANENTLY"
    RENEWAL_FAILED = "RENEWAL_FAILED"


class SslDomainStatus(StrEnum):
    """Status of a single domain of an SslCertificate as reported by the backend."""

    PROVISIONING = "PROVISIONING"
    FAILED_NOT_VISIBLE = "FAILED_NOT_VISIBLE"
    FAILED_CAA_CHECKING = "FAILED_CAA_CHECKING"
    FAILED_CAA_FORBIDDEN = "FAILED_CAA_FORBIDDEN"
    FAILED_RATE_LIMITED = "FAILED_RATE_LIMITED"
    ACTIVE = "ACTIVE"


class CertificateStatus(StrEnum):
    """Public status of a ManagedCertificate."""

    UNSPECIFIED = ""
    ACTIVE = "Active"
    PROVISIONING = "Provisioning"
    PROVISIONING_FAILED = "ProvisioningFailed"
    PROVISIONING_FAILED_PERMANENTLY = "ProvisioningFailedPermanently"
    RENEWAL_FAILED = "RenewalFailed"


class DomainStatusValue(StrEnum):
    """Public status of a single domain of a ManagedCertificate."""

    PROVISIONING = "Provisioning"
    FAILED_NOT_VISIBLE = "FailedNotVisible"
    FAILED_CAA_CHECKING = "FailedCaaChecking"
    FAILED_CAA_FORBIDDEN = "FailedCaaForbidden"
    FAILED_RATE_LIMITED = "FailedRateLimited"
    ACTIVE = "Active"


_CERTIFICATE_STATUS: dict[SslCertificateStatus, CertificateStatus] = {
    SslCertificateStatus.UNSPECIFIED: CertificateStatus.UNSPECIFIED,
    SslCertificateStatus.ACTIVE: CertificateStatus.ACTIVE,
    SslCertificateStatus.PROVISIONING: CertificateStatus.PROVISIONING,
    SslCertificateStatus.PROVISIONING_FAILED: CertificateStatus.PROVISIONING_FAILED,
    SslCertificateStatus.PROVISIONING_FAILED_PERMANENTLY: (
        CertificateStatus.PROVISIONING_FAILED_PERMANENTLY
    ),
    SslCertificateStatus.RENEWAL_FAILED: CertificateStatus.RENEWAL_FAILED,
}

_DOMAIN_STATUS: dict[SslDomainStatus, DomainStatusValue] = {
    SslDomainStatus.PROVISIONING: DomainStatusValue.PROVISIONING,
    SslDomainStatus.FAILED_NOT_VISIBLE: DomainStatusValue.FAILED_NOT_VISIBLE,
    SslDomainStatus.FAILED_CAA_CHECKING: DomainStatusValue.FAILED_CAA_CHECKING,
    SslDomainStatus.FAILED_CAA_FORBIDDEN: DomainStatusValue.FAILED_CAA_FORBIDDEN,
    SslDomainStatus.FAILED_RATE_LIMITED: DomainStatusValue.FAILED_RATE_LIMITED,
    SslDomainStatus.ACTIVE: DomainStatusValue.ACTIVE,
}

def translate_certificate_status(status: str) -> CertificateStatus:
    """Translate the overall status of an SslCertificate.

    An empty status is treated the same as an unspecified one.

    Raises:
        UnknownStatusError: If the status is not a known backend value.
    """
    if not status:
        status = SslCertificateStatus.UNSPECIFIED
    try:
        value = SslCertificateStatus(status)
    except ValueError as err:
        raise UnknownStatusError("certificate", status) from err
    return _CERTIFICATE_STATUS[value]


def translate_domain_status(status: str) -> DomainStatusValue:
    """Translate the status of a single domain of an SslCertificate.

    Raises:
        UnknownStatusError: If the status is not a known backend value.
    """
    try:
        value = SslDomainStatus(status)
    except ValueError as err:
        raise UnknownStatusError("domain", status) from err
    return _DOMAIN_STATUS[value]
