"""
The state module records which SslCertificate belongs to which ManagedCertificate.

- Uses ResourceKey as the key for all entries.
- An empty name marks a resource whose certificate has not been named yet.
- The mapping is the only link between the two objects; the SslCertificate
  itself carries no reference back to the resource.

This abstract interface allows for various implementations (in-memory, file, etc.).
"""

from .state import State
from .in_memory import InMemoryState
from .file import FileState

__all__ = [
    "State",
    "InMemoryState",
    "FileState",
]
