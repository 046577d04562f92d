"""Tests for the rate limiting work queue."""

import threading
import time

import pytest

from managed_certs.workqueue import ExponentialFailureRateLimiter, RateLimitingQueue


@pytest.fixture
def queue() -> RateLimitingQueue:
    """Fixture for a queue with short backoff."""
    return RateLimitingQueue(ExponentialFailureRateLimiter(0.01, 0.1), name="test")


def test_rate_limiter_backoff() -> None:
    """Test the backoff doubles per failure up to the maximum."""
    limiter = ExponentialFailureRateLimiter(base_delay=1.0, max_delay=5.0)
    assert [limiter.when("a") for _ in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]
    assert limiter.num_requeues("a") == 5
    assert limiter.when("b") == 1.0

    limiter.forget("a")
    assert limiter.num_requeues("a") == 0
    assert limiter.when("a") == 1.0


def test_rate_limiter_large_failure_count() -> None:
    """Test the backoff stays capped after many failures."""
    limiter = ExponentialFailureRateLimiter(base_delay=0.005, max_delay=1000.0)
    for _ in range(2000):
        delay = limiter.when("a")
    assert delay == 1000.0


def test_get_in_order(queue: RateLimitingQueue) -> None:
    """Test items are delivered in the order added."""
    queue.add("a")
    queue.add("b")
    assert len(queue) == 2
    assert queue.get() == ("a", False)
    assert queue.get() == ("b", False)
    assert len(queue) == 0


def test_add_deduplicates(queue: RateLimitingQueue) -> None:
    """Test an item added several times is delivered once."""
    queue.add("a")
    queue.add("a")
    queue.add("b")
    queue.add("a")
    assert len(queue) == 2


def test_add_while_processing(queue: RateLimitingQueue) -> None:
    """Test an item re-added while processing is redelivered only after done."""
    queue.add("a")
    item, _ = queue.get()
    assert item == "a"

    queue.add("a")
    assert len(queue) == 0

    queue.done("a")
    assert len(queue) == 1
    assert queue.get() == ("a", False)
    queue.done("a")
    assert len(queue) == 0


def test_add_after(queue: RateLimitingQueue) -> None:
    """Test delayed items are added once the delay passes."""
    queue.add_after("a", 0.05)
    assert len(queue) == 0
    assert queue.get() == ("a", False)


def test_add_after_no_delay(queue: RateLimitingQueue) -> None:
    """Test items without a delay are added immediately."""
    queue.add_after("a", 0)
    assert len(queue) == 1


def test_add_rate_limited(queue: RateLimitingQueue) -> None:
    """Test rate limited adds are counted and eventually delivered."""
    queue.add_rate_limited("a")
    assert queue.num_requeues("a") == 1
    assert queue.get() == ("a", False)
    queue.done("a")

    queue.add_rate_limited("a")
    assert queue.num_requeues("a") == 2
    queue.forget("a")
    assert queue.num_requeues("a") == 0


def test_shut_down_wakes_workers(queue: RateLimitingQueue) -> None:
    """Test a worker blocked on get is released by shut down."""
    results: list[tuple[object, bool]] = []

    def worker() -> None:
        results.append(queue.get())

    thread = threading.Thread(target=worker)
    thread.start()
    time.sleep(0.05)
    queue.shut_down()
    thread.join(timeout=5)

    assert not thread.is_alive()
    assert results == [(None, True)]
    assert queue.shutting_down


def test_shut_down_drains_queue(queue: RateLimitingQueue) -> None:
    """Test queued items are delivered after shut down and new ones are refused."""
    queue.add("a")
    queue.shut_down()
    queue.add("b")
    queue.add_after("c", 0.01)
    assert queue.get() == ("a", False)
    queue.done("a")
    assert queue.get() == (None, True)


def test_shut_down_cancels_delayed_adds(queue: RateLimitingQueue) -> None:
    """Test pending delayed items are dropped on shut down."""
    queue.add_after("a", 0.05)
    queue.shut_down()
    time.sleep(0.1)
    assert len(queue) == 0


def test_concurrent_workers_never_share_item() -> None:
    """Test an item is only ever processed by one worker at a time."""
    queue = RateLimitingQueue()
    in_flight: set[str] = set()
    overlaps: list[str] = []
    processed: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        while True:
            item, shutdown = queue.get()
            if shutdown:
                return
            with lock:
                if item in in_flight:
                    overlaps.append(item)
                in_flight.add(item)
            time.sleep(0.001)
            with lock:
                in_flight.discard(item)
                processed.append(item)
            queue.done(item)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for i in range(200):
        queue.add(f"item-{i % 5}")
        if i % 20 == 0:
            time.sleep(0.002)

    deadline = time.monotonic() + 5
    while len(queue) and time.monotonic() < deadline:
        time.sleep(0.01)
    time.sleep(0.05)
    queue.shut_down()
    for thread in threads:
        thread.join(timeout=5)

    assert not overlaps
    assert set(processed) == {f"item-{i}" for i in range(5)}
