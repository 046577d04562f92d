"""Controller for ManagedCertificate resources.

The Controller runs the worker threads that pull resource identities from the
queue. The Reconciler performs one pass over a single resource: reserving a
name for its SslCertificate, creating the SslCertificate, and publishing its
status.
"""

from .controller import Controller
from .reconciler import Reconciler

__all__ = [
    "Controller",
    "Reconciler",
]
