"""Tests for ManagedCertificate resources in a kubernetes cluster."""

from typing import Any
from unittest.mock import Mock

import pytest
from kubernetes.client import ApiException, CustomObjectsApi
from urllib3.exceptions import MaxRetryError

from managed_certs.exceptions import (
    InputException,
    ManagedCertsException,
    ResourceNotFoundError,
)
from managed_certs.manifest import ManagedCertificate, ResourceKey
from managed_certs.resources import KubernetesResources
from managed_certs.runtime import add_error_handler

GROUP = "networking.gke.io"
VERSION = "v1beta1"
PLURAL = "managedcertificates"


def make_doc(name: str, namespace: str = "ns") -> dict[str, Any]:
    return {
        "apiVersion": f"{GROUP}/{VERSION}",
        "kind": "ManagedCertificate",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": "7"},
        "spec": {"domains": ["a.com"]},
    }


@pytest.fixture(name="api")
def api_fixture() -> Mock:
    """Fixture for a fake kubernetes API."""
    return Mock(spec=CustomObjectsApi)


@pytest.fixture(name="resources")
def resources_fixture(api: Mock) -> KubernetesResources:
    return KubernetesResources(api)


def test_get(api: Mock, resources: KubernetesResources) -> None:
    """Test reading a resource."""
    api.get_namespaced_custom_object.return_value = make_doc("example")
    mcert = resources.get(ResourceKey("ns", "example"))
    assert mcert.key == ResourceKey("ns", "example")
    assert mcert.domains == ["a.com"]
    api.get_namespaced_custom_object.assert_called_once_with(
        GROUP, VERSION, "ns", PLURAL, "example"
    )


def test_get_not_found(api: Mock, resources: KubernetesResources) -> None:
    """Test a 404 is reported as a missing resource."""
    api.get_namespaced_custom_object.side_effect = ApiException(
        status=404, reason="Not Found"
    )
    with pytest.raises(ResourceNotFoundError):
        resources.get(ResourceKey("ns", "example"))


def test_get_failure(api: Mock, resources: KubernetesResources) -> None:
    """Test other API errors are not mistaken for a missing resource."""
    api.get_namespaced_custom_object.side_effect = ApiException(
        status=500, reason="Internal Server Error"
    )
    with pytest.raises(ManagedCertsException, match="Internal Server Error") as exc:
        resources.get(ResourceKey("ns", "example"))
    assert not isinstance(exc.value, ResourceNotFoundError)


def test_list(api: Mock, resources: KubernetesResources) -> None:
    """Test listing resources in all namespaces or in one."""
    api.list_cluster_custom_object.return_value = {
        "items": [make_doc("a", "ns1"), make_doc("b", "ns2")]
    }
    api.list_namespaced_custom_object.return_value = {"items": [make_doc("a", "ns1")]}

    assert [str(mcert.key) for mcert in resources.list()] == ["ns1/a", "ns2/b"]
    api.list_cluster_custom_object.assert_called_once_with(GROUP, VERSION, PLURAL)

    assert [str(mcert.key) for mcert in resources.list("ns1")] == ["ns1/a"]
    api.list_namespaced_custom_object.assert_called_once_with(
        GROUP, VERSION, "ns1", PLURAL
    )


def test_update(api: Mock, resources: KubernetesResources) -> None:
    """Test the full resource is replaced."""
    mcert = ManagedCertificate.parse_doc(make_doc("example"))
    mcert.status.certificate_name = "mcert-xyz"
    api.replace_namespaced_custom_object.side_effect = (
        lambda group, version, namespace, plural, name, body: body
    )

    result = resources.update(mcert)
    assert result.status.certificate_name == "mcert-xyz"
    args = api.replace_namespaced_custom_object.call_args.args
    assert args[:5] == (GROUP, VERSION, "ns", PLURAL, "example")
    assert args[5]["metadata"]["resourceVersion"] == "7"
    assert args[5]["status"]["certificateName"] == "mcert-xyz"
    api.replace_namespaced_custom_object_status.assert_not_called()


def test_update_status_subresource(api: Mock) -> None:
    """Test updates go through the status subresource when configured."""
    resources = KubernetesResources(api, status_subresource=True)
    mcert = ManagedCertificate.parse_doc(make_doc("example"))
    api.replace_namespaced_custom_object_status.return_value = make_doc("example")

    resources.update(mcert)
    api.replace_namespaced_custom_object_status.assert_called_once()
    api.replace_namespaced_custom_object.assert_not_called()


def test_update_conflict(api: Mock, resources: KubernetesResources) -> None:
    """Test a conflicting write is reported."""
    api.replace_namespaced_custom_object.side_effect = ApiException(
        status=409, reason="Conflict"
    )
    with pytest.raises(ManagedCertsException, match="Conflict"):
        resources.update(ManagedCertificate.parse_doc(make_doc("example")))


def test_transport_failure(api: Mock, resources: KubernetesResources) -> None:
    """Test connection errors from the client are reported as failures."""
    error = MaxRetryError(None, "/apis", reason=ConnectionRefusedError("refused"))
    api.get_namespaced_custom_object.side_effect = error
    api.list_cluster_custom_object.side_effect = error
    api.replace_namespaced_custom_object.side_effect = error

    with pytest.raises(ManagedCertsException, match="Max retries exceeded"):
        resources.get(ResourceKey("ns", "example"))
    with pytest.raises(ManagedCertsException, match="list ManagedCertificates"):
        resources.list()
    with pytest.raises(ManagedCertsException, match="update ManagedCertificate"):
        resources.update(ManagedCertificate.parse_doc(make_doc("example")))


def test_list_skips_invalid(api: Mock, resources: KubernetesResources) -> None:
    """Test a malformed object does not hide the other resources."""
    invalid = make_doc("broken")
    del invalid["spec"]
    api.list_cluster_custom_object.return_value = {
        "items": [make_doc("a"), invalid, make_doc("b")]
    }
    errors: list[Exception] = []
    remove = add_error_handler(errors.append)
    try:
        result = resources.list()
    finally:
        remove()

    assert [mcert.name for mcert in result] == ["a", "b"]
    assert len(errors) == 1
    assert isinstance(errors[0], InputException)
    assert "ns/broken" in str(errors[0])
