"""A concurrent work queue with deduplication and rate limited retries.

The queue follows the semantics of the kubernetes client work queue:

- An item added several times before it is processed is delivered once.
- An item is never handed to two workers at once. If it is added again while
  being processed, it is delivered again only after `done` is called.
- `add_rate_limited` re-adds an item after a per-item exponential backoff,
  which `forget` resets.
- `shut_down` refuses new items. Workers drain what is queued and then
  receive a shutdown signal from `get`.
"""

from collections import deque
from collections.abc import Hashable
import logging
import threading

__all__ = [
    "ExponentialFailureRateLimiter",
    "RateLimitingQueue",
]

_LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_DELAY = 0.005
DEFAULT_MAX_DELAY = 1000.0

# Keeps the backoff computation within float range.
_MAX_EXPONENT = 64


class ExponentialFailureRateLimiter:
    """Per-item exponential backoff: base_delay * 2^failures, capped at max_delay."""

    def __init__(
        self,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
    ) -> None:
        """Initialize the ExponentialFailureRateLimiter."""
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._failures: dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def when(self, item: Hashable) -> float:
        """Record a failure for the item and return how long to wait."""
        with self._lock:
            exp = self._failures.get(item, 0)
            self._failures[item] = exp + 1
        delay = self._base_delay * 2 ** min(exp, _MAX_EXPONENT)
        return min(delay, self._max_delay)

    def forget(self, item: Hashable) -> None:
        """Stop tracking failures for the item."""
        with self._lock:
            self._failures.pop(item, None)

    def num_requeues(self, item: Hashable) -> int:
        """Return the number of failures recorded for the item."""
        with self._lock:
            return self._failures.get(item, 0)


class RateLimitingQueue:
    """Thread safe deduplicating queue with delayed and rate limited adds."""

    def __init__(
        self,
        rate_limiter: ExponentialFailureRateLimiter | None = None,
        name: str = "",
    ) -> None:
        """Initialize the RateLimitingQueue."""
        self._rate_limiter = rate_limiter or ExponentialFailureRateLimiter()
        self._name = name
        self._cond = threading.Condition()
        self._queue: deque[Hashable] = deque()
        self._dirty: set[Hashable] = set()
        self._processing: set[Hashable] = set()
        self._timers: set[threading.Timer] = set()
        self._shutting_down = False

    def add(self, item: Hashable) -> None:
        """Mark an item as needing processing."""
        with self._cond:
            if self._shutting_down:
                return
            if item in self._dirty:
                return
            self._dirty.add(item)
            if item in self._processing:
                return
            self._queue.append(item)
            self._cond.notify()

    def __len__(self) -> int:
        """Return the number of items waiting to be processed."""
        with self._cond:
            return len(self._queue)

    def get(self) -> tuple[Hashable | None, bool]:
        """Block until an item is available.

        Returns the item and False, or None and True once the queue has been
        shut down and drained. The caller must call `done` with the item.
        """
        with self._cond:
            while not self._queue and not self._shutting_down:
                self._cond.wait()
            if not self._queue:
                return None, True
            item = self._queue.popleft()
            self._processing.add(item)
            self._dirty.discard(item)
            return item, False

    def done(self, item: Hashable) -> None:
        """Mark an item as done processing.

        If the item was added again while it was being processed, it is queued
        for delivery now.
        """
        with self._cond:
            self._processing.discard(item)
            if item in self._dirty:
                self._queue.append(item)
                self._cond.notify()

    def add_after(self, item: Hashable, delay: float) -> None:
        """Add an item once the delay in seconds has passed."""
        if delay <= 0:
            self.add(item)
            return

        def fire() -> None:
            with self._cond:
                self._timers.discard(timer)
            self.add(item)

        timer = threading.Timer(delay, fire)
        timer.daemon = True
        with self._cond:
            if self._shutting_down:
                return
            self._timers.add(timer)
        timer.start()

    def add_rate_limited(self, item: Hashable) -> None:
        """Add an item after the backoff the rate limiter says is due."""
        delay = self._rate_limiter.when(item)
        _LOGGER.debug("Requeueing %s in %0.3fs", item, delay)
        self.add_after(item, delay)

    def forget(self, item: Hashable) -> None:
        """Indicate the item is finished with retrying, resetting its backoff."""
        self._rate_limiter.forget(item)

    def num_requeues(self, item: Hashable) -> int:
        """Return how many times the item has been rate limited."""
        return self._rate_limiter.num_requeues(item)

    def shut_down(self) -> None:
        """Refuse new items and wake all workers waiting on `get`."""
        with self._cond:
            if self._shutting_down:
                return
            _LOGGER.debug("Shutting down queue %s", self._name)
            self._shutting_down = True
            timers = list(self._timers)
            self._timers.clear()
            self._cond.notify_all()
        for timer in timers:
            timer.cancel()

    @property
    def shutting_down(self) -> bool:
        """Return True once the queue has been shut down."""
        with self._cond:
            return self._shutting_down
