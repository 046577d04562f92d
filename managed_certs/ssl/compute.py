"""SslCertificate client for the Compute Engine REST API.

Certificates are global resources of a project:
    {endpoint}/projects/{project}/global/sslCertificates/{name}

Authentication is handled outside of this module: the caller supplies an
OAuth access token, or a pre-configured `httpx.Client`.
"""

import logging
from typing import Any

import httpx

from managed_certs.exceptions import SslCertificateNotFoundError, SslClientException
from managed_certs.manifest import SSL_CERTIFICATE_TYPE, SslCertificate

from .client import SslCertificateClient

_LOGGER = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://compute.googleapis.com/compute/v1"
DEFAULT_TIMEOUT = 30.0


class ComputeSslCertificateClient(SslCertificateClient):
    """SslCertificateClient backed by the Compute Engine API."""

    def __init__(
        self,
        project: str,
        access_token: str | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the ComputeSslCertificateClient.

        Args:
            project: The project owning the certificates.
            access_token: OAuth bearer token sent with each request.
            endpoint: Base URL of the Compute Engine API.
            timeout: Request timeout in seconds.
            client: Optional client to use instead of building one.
        """
        self._base_path = f"/projects/{project}/global/sslCertificates"
        if client is None:
            headers = {}
            if access_token:
                headers["Authorization"] = f"Bearer {access_token}"
            client = httpx.Client(
                base_url=endpoint.rstrip("/"),
                timeout=httpx.Timeout(timeout),
                headers=headers,
            )
        self._client = client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def get(self, name: str) -> SslCertificate:
        """Retrieve an SslCertificate by name."""
        response = self._request("GET", f"{self._base_path}/{name}")
        if response.status_code == httpx.codes.NOT_FOUND:
            raise SslCertificateNotFoundError(f"SslCertificate {name} not found")
        return SslCertificate.parse_doc(self._json(response, f"get {name}"))

    def insert(self, name: str, domains: list[str]) -> None:
        """Create a managed SslCertificate covering the specified domains.

        The returned operation is not waited on; provisioning progress is
        observed through the status of the certificate.
        """
        body = {
            "name": name,
            "type": SSL_CERTIFICATE_TYPE,
            "managed": {"domains": list(domains)},
        }
        response = self._request("POST", self._base_path, json=body)
        operation = self._json(response, f"insert {name}")
        _LOGGER.debug(
            "Insert of SslCertificate %s started operation %s",
            name,
            operation.get("name"),
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.HTTPError as err:
            raise SslClientException(f"{method} {path} failed: {err}") from err

    def _json(self, response: httpx.Response, action: str) -> dict[str, Any]:
        if response.is_error:
            raise SslClientException(
                f"Failed to {action}: HTTP {response.status_code}: {response.text}"
            )
        try:
            return response.json()  # type: ignore[no-any-return]
        except ValueError as err:
            raise SslClientException(f"Failed to {action}: invalid response") from err
