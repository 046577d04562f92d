"""Generation of names for new SslCertificate objects."""

from collections.abc import Callable
import logging
import uuid

from .exceptions import SslCertificateNotFoundError
from .ssl import SslCertificateClient

__all__ = [
    "random_name",
    "NameAllocator",
]

_LOGGER = logging.getLogger(__name__)

NAME_PREFIX = "mcert"
MAX_NAME_LENGTH = 63


def random_name() -> str:
    """Return a random name that is a valid backend resource name."""
    return f"{NAME_PREFIX}{uuid.uuid4()}"[:MAX_NAME_LENGTH]


class NameAllocator:
    """Chooses names for new SslCertificate objects.

    A generated name is checked against the backend once. If it is already
    taken a second name is generated and used without checking it again.
    """

    def __init__(
        self,
        client: SslCertificateClient,
        generator: Callable[[], str] = random_name,
    ) -> None:
        """Initialize the NameAllocator."""
        self._client = client
        self._generator = generator

    def allocate(self) -> str:
        """Return a name for a new SslCertificate."""
        name = self._generator()
        try:
            self._client.get(name)
        except SslCertificateNotFoundError:
            return name
        _LOGGER.info("SslCertificate name %s is taken, choosing a new one", name)
        return self._generator()
