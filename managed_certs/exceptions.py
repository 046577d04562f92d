"""Exceptions related to managed-certs."""

__all__ = [
    "ManagedCertsException",
    "InputException",
    "ResourceNotFoundError",
    "UnknownStatusError",
    "StateEntryMissingError",
    "SslClientException",
    "SslCertificateNotFoundError",
    "RetriesExhaustedError",
]


class ManagedCertsException(Exception):
    """Generic base exception used for this library."""


class InputException(ManagedCertsException):
    """Raised when input objects or configuration are not formatted as expected."""


class ResourceNotFoundError(ManagedCertsException):
    """Raised when a ManagedCertificate resource does not exist."""


class UnknownStatusError(ManagedCertsException):
    """Raised when the backend reports a status outside the known vocabulary."""

    def __init__(self, kind: str, status: str) -> None:
        super().__init__(f"Unexpected {kind} status {status!r}")
        self.kind = kind
        self.status = status


class StateEntryMissingError(ManagedCertsException):
    """Raised when no SslCertificate name is recorded for a resource."""

    def __init__(self, resource_name: str) -> None:
        super().__init__(
            f"Failed to find in state a name for SslCertificate associated with "
            f"ManagedCertificate {resource_name}"
        )
        self.resource_name = resource_name


class SslClientException(ManagedCertsException):
    """Raised when a call to the SslCertificate backend fails."""


class SslCertificateNotFoundError(SslClientException):
    """Raised when an SslCertificate does not exist in the backend."""


class RetriesExhaustedError(ManagedCertsException):
    """Raised when an item is dropped after too many failed reconciles."""

    def __init__(self, item: object, retries: int, error: Exception) -> None:
        super().__init__(
            f"Dropping {item} out of the queue after {retries} retries: {error}"
        )
        self.item = item
        self.retries = retries
        self.error = error
