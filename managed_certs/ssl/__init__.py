"""Clients for the SslCertificate provisioning backend.

- Uses the generated certificate name as the only identity of an object.
- Distinguishes a missing object (SslCertificateNotFoundError) from other
  failures talking to the backend (SslClientException).

The abstract interface allows for various implementations (in-memory, Compute
Engine REST API, etc.).
"""

from .client import SslCertificateClient
from .in_memory import InMemorySslCertificateClient
from .compute import ComputeSslCertificateClient

__all__ = [
    "SslCertificateClient",
    "InMemorySslCertificateClient",
    "ComputeSslCertificateClient",
]
