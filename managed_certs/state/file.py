"""Module for state persisted to a yaml file.

The file contains a single mapping of `namespace/name` to SslCertificate name:

    default/example: mcert6b5d9c3e-0c1a-4b7e-9a57-0f3c2a1d8e44
    default/pending: ""
"""

import logging
import os
from pathlib import Path
import tempfile
import threading

import yaml

from managed_certs.exceptions import InputException, ManagedCertsException
from managed_certs.manifest import ResourceKey

from .state import State

_LOGGER = logging.getLogger(__name__)


class FileState(State):
    """State persisted to a yaml file, rewritten on every update."""

    def __init__(self, path: Path) -> None:
        """Initialize the FileState, loading any existing entries."""
        self._path = path
        self._lock = threading.Lock()
        self._entries = self._load()

    def _load(self) -> dict[ResourceKey, str]:
        if not self._path.exists():
            _LOGGER.debug("State file %s does not exist, starting empty", self._path)
            return {}
        try:
            doc = yaml.safe_load(self._path.read_text())
        except yaml.YAMLError as err:
            raise InputException(
                f"Unable to parse state file {self._path}: {err}"
            ) from err
        if doc is None:
            return {}
        if not isinstance(doc, dict):
            raise InputException(
                f"State file {self._path} must contain a mapping, got {type(doc).__name__}"
            )
        entries: dict[ResourceKey, str] = {}
        for key, name in doc.items():
            if not isinstance(key, str) or not isinstance(name, str):
                raise InputException(
                    f"State file {self._path} has invalid entry {key!r}: {name!r}"
                )
            entries[ResourceKey.parse(key)] = name
        _LOGGER.info("Loaded %d entries from %s", len(entries), self._path)
        return entries

    def _write(self, entries: dict[ResourceKey, str]) -> None:
        content = yaml.safe_dump(
            {str(key): name for key, name in sorted(entries.items())},
            sort_keys=False,
        )
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}."
            )
        except OSError as err:
            raise ManagedCertsException(
                f"Unable to write state file {self._path}: {err}"
            ) from err
        try:
            with os.fdopen(fd, "w") as tmp_file:
                tmp_file.write(content)
            os.replace(tmp_path, self._path)
        except OSError as err:
            os.unlink(tmp_path)
            raise ManagedCertsException(
                f"Unable to write state file {self._path}: {err}"
            ) from err
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get(self, key: ResourceKey) -> str | None:
        """Return the SslCertificate name for a resource, or None if absent."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: ResourceKey, name: str) -> None:
        """Record the SslCertificate name for a resource and persist it.

        The entry is only visible once the file has been written.
        """
        with self._lock:
            entries = {**self._entries, key: name}
            self._write(entries)
            self._entries = entries

    def items(self) -> dict[ResourceKey, str]:
        """Return a snapshot of all entries."""
        with self._lock:
            return dict(self._entries)
