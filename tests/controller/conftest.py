"""Test fixtures for the controller."""

from collections.abc import Generator

import pytest

from managed_certs.controller import Reconciler
from managed_certs.manifest import ManagedCertificate
from managed_certs.naming import NameAllocator
from managed_certs.resources import InMemoryResources
from managed_certs.runtime import add_error_handler
from managed_certs.ssl import InMemorySslCertificateClient
from managed_certs.state import InMemoryState
from managed_certs.workqueue import ExponentialFailureRateLimiter, RateLimitingQueue

CERTIFICATE_NAME = "cert-xyz"


@pytest.fixture(name="resources")
def resources_fixture() -> InMemoryResources:
    """Create in memory resources holding a single ManagedCertificate."""
    resources = InMemoryResources()
    resources.add(
        ManagedCertificate(name="example", namespace="ns", domains=["a.com", "b.com"])
    )
    return resources


@pytest.fixture(name="ssl_client")
def ssl_client_fixture() -> InMemorySslCertificateClient:
    return InMemorySslCertificateClient()


@pytest.fixture(name="state")
def state_fixture() -> InMemoryState:
    return InMemoryState()


@pytest.fixture(name="reconciler")
def reconciler_fixture(
    resources: InMemoryResources,
    ssl_client: InMemorySslCertificateClient,
    state: InMemoryState,
) -> Reconciler:
    """Create a Reconciler that always picks the same certificate name."""
    return Reconciler(
        resources,
        resources,
        ssl_client,
        state,
        NameAllocator(ssl_client, generator=lambda: CERTIFICATE_NAME),
    )


@pytest.fixture(name="queue")
def queue_fixture() -> Generator[RateLimitingQueue, None, None]:
    """Create a queue that retries almost immediately."""
    queue = RateLimitingQueue(
        ExponentialFailureRateLimiter(base_delay=0.001, max_delay=0.01), name="test"
    )
    yield queue
    queue.shut_down()


@pytest.fixture(name="errors")
def errors_fixture() -> Generator[list[Exception], None, None]:
    """Collect errors reported by the workers."""
    errors: list[Exception] = []
    remove = add_error_handler(errors.append)
    yield errors
    remove()
