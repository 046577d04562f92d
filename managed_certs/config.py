"""Configuration objects for managed-certs.

Configuration may be loaded from a yaml file, for example:

    controller:
      workers: 4
      resync_interval: 30
      retry:
        max_retries: 10
    compute:
      project: my-project
    state_file: /var/lib/managed-certs/state.yaml
"""

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path

import yaml
from mashumaro import DataClassDictMixin
from mashumaro.codecs.yaml import yaml_decode
from mashumaro.exceptions import MissingField, InvalidFieldValue

from .exceptions import InputException
from .manifest import (
    MANAGED_CERTIFICATE_GROUP,
    MANAGED_CERTIFICATE_PLURAL,
    MANAGED_CERTIFICATE_VERSION,
)
from .ssl.compute import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT
from .workqueue import DEFAULT_BASE_DELAY, DEFAULT_MAX_DELAY

__all__ = [
    "RetryPolicy",
    "ControllerConfig",
    "KubernetesConfig",
    "ComputeConfig",
    "Config",
    "load_config",
]

_LOGGER = logging.getLogger(__name__)

ACCESS_TOKEN_ENV = "GOOGLE_OAUTH_ACCESS_TOKEN"
BACKEND_COMPUTE = "compute"
BACKEND_MEMORY = "memory"
BACKENDS = (BACKEND_COMPUTE, BACKEND_MEMORY)


@dataclass
class RetryPolicy(DataClassDictMixin):
    """Backoff and retry ceiling for failed reconciles."""

    base_delay: float = DEFAULT_BASE_DELAY
    """Delay in seconds before the first retry, doubled on each failure."""

    max_delay: float = DEFAULT_MAX_DELAY
    """Upper bound in seconds on the delay between retries."""

    max_retries: int | None = 15
    """Failures tolerated before an item is dropped, or None to retry forever."""


@dataclass
class ControllerConfig(DataClassDictMixin):
    """Configuration for the Controller."""

    workers: int = 2
    """Number of worker threads reconciling in parallel."""

    resync_interval: float = 60.0
    """Seconds between enqueueing every resource for reconciliation."""

    retry: RetryPolicy = field(default_factory=RetryPolicy)


@dataclass
class KubernetesConfig(DataClassDictMixin):
    """Location of ManagedCertificate resources."""

    group: str = MANAGED_CERTIFICATE_GROUP
    version: str = MANAGED_CERTIFICATE_VERSION
    plural: str = MANAGED_CERTIFICATE_PLURAL

    kubeconfig: str | None = None
    """Path to a kubeconfig file, or None to use the in-cluster config."""

    status_subresource: bool = False
    """Write status through the status subresource."""


@dataclass
class ComputeConfig(DataClassDictMixin):
    """Configuration for the Compute Engine SslCertificate client."""

    project: str | None = None
    endpoint: str = DEFAULT_ENDPOINT
    access_token: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    def resolve_access_token(self) -> str | None:
        """Return the configured token, falling back to the environment."""
        return self.access_token or os.environ.get(ACCESS_TOKEN_ENV)


@dataclass
class Config(DataClassDictMixin):
    """Top level configuration for managed-certs."""

    controller: ControllerConfig = field(default_factory=ControllerConfig)
    kubernetes: KubernetesConfig = field(default_factory=KubernetesConfig)
    compute: ComputeConfig = field(default_factory=ComputeConfig)

    backend: str = BACKEND_COMPUTE
    """The SslCertificate backend, one of `compute` or `memory`."""

    state_file: str | None = None
    """Path of the file persisting state, or None to keep it in memory."""

    def validate(self) -> None:
        """Check the configuration is usable.

        Raises:
            InputException: If a value is invalid.
        """
        if self.controller.workers < 1:
            raise InputException(
                f"Number of workers must be positive, got {self.controller.workers}"
            )
        if self.controller.resync_interval <= 0:
            raise InputException(
                f"Resync interval must be positive, got {self.controller.resync_interval}"
            )
        max_retries = self.controller.retry.max_retries
        if max_retries is not None and max_retries < 0:
            raise InputException(
                f"Max retries must not be negative, got {max_retries}"
            )
        if self.backend not in BACKENDS:
            raise InputException(
                f"Unknown backend {self.backend!r}, expected one of {BACKENDS}"
            )
        if self.backend == BACKEND_COMPUTE and not self.compute.project:
            raise InputException("The compute backend requires a project")


def load_config(path: Path) -> Config:
    """Load the configuration from a yaml file."""
    try:
        content = path.read_text()
    except OSError as err:
        raise InputException(f"Unable to read config file {path}: {err}") from err
    if not content.strip():
        return Config()
    try:
        config = yaml_decode(content, Config)
    except (
        MissingField,
        InvalidFieldValue,
        yaml.YAMLError,
        TypeError,
        ValueError,
    ) as err:
        raise InputException(f"Invalid config file {path}: {err}") from err
    _LOGGER.debug("Loaded config from %s", path)
    return config
