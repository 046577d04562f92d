"""ManagedCertificate resources stored in a kubernetes cluster.

Resources are accessed through the kubernetes `CustomObjectsApi`.
"""

from collections.abc import Callable
import logging
from typing import Any

from kubernetes.client import ApiException, CustomObjectsApi
import urllib3

from managed_certs.exceptions import (
    InputException,
    ManagedCertsException,
    ResourceNotFoundError,
)
from managed_certs.manifest import (
    MANAGED_CERTIFICATE_GROUP,
    MANAGED_CERTIFICATE_PLURAL,
    MANAGED_CERTIFICATE_VERSION,
    ManagedCertificate,
    ResourceKey,
)
from managed_certs.runtime import handle_error

from .client import ResourceReader, ResourceWriter

_LOGGER = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404


class KubernetesResources(ResourceReader, ResourceWriter):
    """ResourceReader and ResourceWriter backed by the kubernetes API."""

    def __init__(
        self,
        api: CustomObjectsApi,
        group: str = MANAGED_CERTIFICATE_GROUP,
        version: str = MANAGED_CERTIFICATE_VERSION,
        plural: str = MANAGED_CERTIFICATE_PLURAL,
        status_subresource: bool = False,
    ) -> None:
        """Initialize KubernetesResources.

        Args:
            api: The kubernetes custom objects API client.
            group: API group of the ManagedCertificate custom resource.
            version: API version of the ManagedCertificate custom resource.
            plural: Plural resource name of the custom resource.
            status_subresource: Write updates through the status subresource.
        """
        self._api = api
        self._group = group
        self._version = version
        self._plural = plural
        self._status_subresource = status_subresource

    def get(self, key: ResourceKey) -> ManagedCertificate:
        """Retrieve a resource by identity."""
        doc = self._call(
            f"get ManagedCertificate {key}",
            self._api.get_namespaced_custom_object,
            self._group,
            self._version,
            key.namespace,
            self._plural,
            key.name,
        )
        return ManagedCertificate.parse_doc(doc)

    def update(self, resource: ManagedCertificate) -> ManagedCertificate:
        """Persist the full resource including its status."""
        if self._status_subresource:
            replace = self._api.replace_namespaced_custom_object_status
        else:
            replace = self._api.replace_namespaced_custom_object
        doc = self._call(
            f"update ManagedCertificate {resource.key}",
            replace,
            self._group,
            self._version,
            resource.namespace,
            self._plural,
            resource.name,
            resource.to_doc(),
        )
        return ManagedCertificate.parse_doc(doc)

    def _call(self, action: str, method: Callable[..., Any], *args: Any) -> Any:
        """Invoke the API, translating client errors into ManagedCertsException."""
        try:
            return method(*args)
        except ApiException as err:
            if err.status == HTTP_NOT_FOUND:
                raise ResourceNotFoundError(f"Failed to {action}: not found") from err
            raise ManagedCertsException(f"Failed to {action}: {err.reason}") from err
        except urllib3.exceptions.HTTPError as err:
            raise ManagedCertsException(f"Failed to {action}: {err}") from err

    def list(self, namespace: str | None = None) -> list[ManagedCertificate]:
        """List all resources, optionally restricted to a namespace.

        Malformed objects are reported and skipped so the rest can still be
        reconciled.
        """
        if namespace:
            result: dict[str, Any] = self._call(
                "list ManagedCertificates",
                self._api.list_namespaced_custom_object,
                self._group,
                self._version,
                namespace,
                self._plural,
            )
        else:
            result = self._call(
                "list ManagedCertificates",
                self._api.list_cluster_custom_object,
                self._group,
                self._version,
                self._plural,
            )
        items = result.get("items") or []
        _LOGGER.debug("Listed %d ManagedCertificates", len(items))
        resources: list[ManagedCertificate] = []
        for item in items:
            try:
                resources.append(ManagedCertificate.parse_doc(item))
            except InputException as err:
                metadata = item.get("metadata") or {}
                handle_error(
                    InputException(
                        "Skipping invalid ManagedCertificate "
                        f"{metadata.get('namespace')}/{metadata.get('name')}: {err}"
                    )
                )
        return resources
