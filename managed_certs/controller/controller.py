"""Controller dispatching ManagedCertificates to the Reconciler.

Worker threads take resource identities from a shared RateLimitingQueue and
reconcile them one at a time. The queue never hands the same identity to two
workers at once, so passes over one resource are serialized while different
resources are reconciled in parallel.

A failed pass is retried with the backoff of the queue, until the retry
policy gives up on the item. A later resync or event enqueues it again.
"""

from collections.abc import Hashable
import logging
import threading

from managed_certs.config import ControllerConfig
from managed_certs.exceptions import RetriesExhaustedError
from managed_certs.manifest import ResourceKey
from managed_certs.resources import ResourceReader
from managed_certs.runtime import handle_error
from managed_certs.workqueue import RateLimitingQueue

from .reconciler import Reconciler

_LOGGER = logging.getLogger(__name__)


class Controller:
    """Runs worker threads that reconcile queued ManagedCertificates."""

    def __init__(
        self,
        queue: RateLimitingQueue,
        reconciler: Reconciler,
        config: ControllerConfig,
    ) -> None:
        """Initialize the controller.

        Args:
            queue: The queue of resource identities to reconcile.
            reconciler: Reconciles a single resource.
            config: The configuration for the controller.
        """
        self._queue = queue
        self._reconciler = reconciler
        self._config = config
        self._workers: list[threading.Thread] = []

    def enqueue(self, key: ResourceKey) -> None:
        """Schedule a resource for reconciliation."""
        self._queue.add(key)

    def resync(self, reader: ResourceReader) -> int:
        """Schedule every resource known to the reader for reconciliation.

        Returns the number of resources enqueued.
        """
        resources = reader.list()
        for mcert in resources:
            self.enqueue(mcert.key)
        _LOGGER.debug("Resync enqueued %d ManagedCertificates", len(resources))
        return len(resources)

    def process_next_item(self) -> bool:
        """Reconcile the next item from the queue.

        Returns False once the queue has been shut down.
        """
        item, shutdown = self._queue.get()
        if shutdown:
            return False
        try:
            self._handle(item)
        finally:
            self._queue.done(item)
        return True

    def _handle(self, item: Hashable | None) -> None:
        if not isinstance(item, ResourceKey):
            self._queue.forget(item)
            handle_error(
                TypeError(f"Expected ResourceKey in queue but got {item!r}")
            )
            return

        try:
            self._reconciler.reconcile(item)
        except Exception as err:
            max_retries = self._config.retry.max_retries
            retries = self._queue.num_requeues(item)
            if max_retries is not None and retries >= max_retries:
                self._queue.forget(item)
                handle_error(RetriesExhaustedError(item, retries, err))
                return
            self._queue.add_rate_limited(item)
            handle_error(err)
            return

        self._queue.forget(item)

    def run_worker(self) -> None:
        """Process items until the queue is shut down."""
        while self.process_next_item():
            pass

    def start(self, workers: int | None = None) -> None:
        """Start the worker threads."""
        if self._workers:
            return
        count = workers or self._config.workers
        _LOGGER.info("Starting controller with %d workers", count)
        for i in range(count):
            thread = threading.Thread(
                target=self.run_worker, name=f"managed-certs-worker-{i}", daemon=True
            )
            thread.start()
            self._workers.append(thread)

    def shutdown(self, timeout: float | None = None) -> None:
        """Stop accepting work and wait for the workers to finish.

        Reconciles already in progress run to completion.
        """
        _LOGGER.info("Stopping controller")
        self._queue.shut_down()
        for thread in self._workers:
            thread.join(timeout)
        self._workers.clear()
        _LOGGER.info("Controller stopped")
