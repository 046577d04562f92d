"""Shared flags and wiring for the managed-certs commands."""

from argparse import ArgumentParser
import logging
from pathlib import Path
from typing import Any

from kubernetes import client as k8s_client, config as k8s_config

from managed_certs.config import BACKEND_MEMORY, BACKENDS, Config, load_config
from managed_certs.exceptions import InputException
from managed_certs.resources import KubernetesResources
from managed_certs.ssl import (
    ComputeSslCertificateClient,
    InMemorySslCertificateClient,
    SslCertificateClient,
)
from managed_certs.state import FileState, InMemoryState, State

_LOGGER = logging.getLogger(__name__)


def add_config_flags(args: ArgumentParser) -> None:
    """Add flags for locating the configuration."""
    args.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a yaml configuration file",
    )
    args.add_argument(
        "--kubeconfig",
        type=str,
        default=None,
        help="Path to a kubeconfig file, otherwise the in-cluster config is used",
    )


def add_controller_flags(args: ArgumentParser) -> None:
    """Add flags that override the controller configuration."""
    args.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of ManagedCertificates reconciled in parallel",
    )
    args.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Failed reconciles of a resource before it is dropped until the next resync",
    )
    args.add_argument(
        "--resync-interval",
        type=float,
        default=None,
        help="Seconds between reconciling every ManagedCertificate",
    )
    args.add_argument(
        "--state-file",
        type=str,
        default=None,
        help="File persisting the names of created SslCertificates",
    )
    args.add_argument(
        "--backend",
        choices=BACKENDS,
        default=None,
        help="Backend holding SslCertificates",
    )
    args.add_argument(
        "--project",
        type=str,
        default=None,
        help="Project owning the SslCertificates for the compute backend",
    )


def build_config(
    config: Path | None = None,
    kubeconfig: str | None = None,
    workers: int | None = None,
    max_retries: int | None = None,
    resync_interval: float | None = None,
    state_file: str | None = None,
    backend: str | None = None,
    project: str | None = None,
    **kwargs: Any,  # pylint: disable=unused-argument
) -> Config:
    """Load the configuration file and apply command line overrides."""
    result = load_config(config) if config else Config()
    if kubeconfig is not None:
        result.kubernetes.kubeconfig = kubeconfig
    if workers is not None:
        result.controller.workers = workers
    if max_retries is not None:
        result.controller.retry.max_retries = max_retries
    if resync_interval is not None:
        result.controller.resync_interval = resync_interval
    if state_file is not None:
        result.state_file = state_file
    if backend is not None:
        result.backend = backend
    if project is not None:
        result.compute.project = project
    return result


def build_resources(config: Config) -> KubernetesResources:
    """Create the kubernetes client for ManagedCertificate resources."""
    if config.kubernetes.kubeconfig:
        k8s_config.load_kube_config(config_file=config.kubernetes.kubeconfig)
    else:
        try:
            k8s_config.load_incluster_config()
        except k8s_config.ConfigException:
            _LOGGER.debug("Not running in a cluster, using the default kubeconfig")
            k8s_config.load_kube_config()
    return KubernetesResources(
        k8s_client.CustomObjectsApi(),
        group=config.kubernetes.group,
        version=config.kubernetes.version,
        plural=config.kubernetes.plural,
        status_subresource=config.kubernetes.status_subresource,
    )


def build_ssl_client(config: Config) -> SslCertificateClient:
    """Create the client for the configured SslCertificate backend."""
    if config.backend == BACKEND_MEMORY:
        _LOGGER.warning("Using the in-memory backend, no certificates will be issued")
        return InMemorySslCertificateClient()
    if not config.compute.project:
        raise InputException("The compute backend requires a project")
    return ComputeSslCertificateClient(
        config.compute.project,
        access_token=config.compute.resolve_access_token(),
        endpoint=config.compute.endpoint,
        timeout=config.compute.timeout,
    )


def build_state(config: Config) -> State:
    """Create the state holding SslCertificate names."""
    if config.state_file:
        return FileState(Path(config.state_file))
    _LOGGER.warning("No state file configured, state is lost on restart")
    return InMemoryState()
