"""Tests for choosing names of SslCertificates."""

import re
from unittest.mock import Mock

import pytest

from managed_certs.exceptions import SslClientException
from managed_certs.manifest import SslCertificate
from managed_certs.naming import NameAllocator, random_name
from managed_certs.ssl import InMemorySslCertificateClient, SslCertificateClient

NAME_RE = re.compile(r"^[a-z]([-a-z0-9]*[a-z0-9])?$")


def test_random_name() -> None:
    """Test generated names are valid and differ."""
    name = random_name()
    assert name.startswith("mcert")
    assert len(name) <= 63
    assert NAME_RE.match(name)
    assert random_name() != name


def test_allocate_unused_name() -> None:
    """Test a name not known to the backend is returned."""
    client = InMemorySslCertificateClient()
    generator = Mock(side_effect=["mcert-a", "mcert-b"])
    allocator = NameAllocator(client, generator)
    assert allocator.allocate() == "mcert-a"
    assert generator.call_count == 1


def test_allocate_collision() -> None:
    """Test a taken name is replaced by a second one."""
    client = InMemorySslCertificateClient()
    client.insert("mcert-a", ["a.com"])
    generator = Mock(side_effect=["mcert-a", "mcert-b"])
    allocator = NameAllocator(client, generator)
    assert allocator.allocate() == "mcert-b"


def test_allocate_at_most_two_attempts() -> None:
    """Test the second name is used without checking it when every name is taken."""
    client = Mock(spec=SslCertificateClient)
    client.get.side_effect = lambda name: SslCertificate(name=name)
    generator = Mock(side_effect=["mcert-a", "mcert-b", "mcert-c"])
    allocator = NameAllocator(client, generator)

    assert allocator.allocate() == "mcert-b"
    assert generator.call_count == 2
    client.get.assert_called_once_with("mcert-a")


def test_allocate_backend_failure() -> None:
    """Test backend errors other than not found are propagated."""
    client = Mock(spec=SslCertificateClient)
    client.get.side_effect = SslClientException("backend unavailable")
    allocator = NameAllocator(client, Mock(return_value="mcert-a"))
    with pytest.raises(SslClientException, match="backend unavailable"):
        allocator.allocate()


def test_allocate_generator_failure() -> None:
    """Test name generation errors are propagated."""
    client = InMemorySslCertificateClient()
    allocator = NameAllocator(client, Mock(side_effect=OSError("no entropy")))
    with pytest.raises(OSError, match="no entropy"):
        allocator.allocate()
