"""Access to ManagedCertificate resources in the cluster.

The reconciler reads resources through a ResourceReader, which may serve a
stale snapshot, and publishes status through a ResourceWriter.
"""

from .client import ResourceReader, ResourceWriter
from .in_memory import InMemoryResources
from .kubernetes import KubernetesResources

__all__ = [
    "ResourceReader",
    "ResourceWriter",
    "InMemoryResources",
    "KubernetesResources",
]
