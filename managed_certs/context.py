"""Utilities for tracing the steps of a reconcile.

Steps nest, so a log line names the full path of the step, for example
`Reconcile ns/example > Create SslCertificate`.
"""

import contextvars
from contextlib import contextmanager
import logging
from time import perf_counter
from typing import Generator


_LOGGER = logging.getLogger(__name__)

# No public API
__all__: list[str] = []


trace: contextvars.ContextVar[tuple[str, ...]] = contextvars.ContextVar(
    "trace", default=()
)


def current_trace() -> str:
    """Return the path of the step being traced, or an empty string."""
    return " > ".join(trace.get())


@contextmanager
def trace_context(name: str) -> Generator[None, None, None]:
    """Log entry and exit of a named step, nested under any enclosing steps.

    Each worker thread starts with an empty trace.
    """
    token = trace.set(trace.get() + (name,))
    label = current_trace()
    t1 = perf_counter()
    _LOGGER.debug("[Trace] > %s", label)
    try:
        yield
    except Exception as err:
        _LOGGER.debug(
            "[Trace] < %s failed (%0.3fs): %s", label, perf_counter() - t1, err
        )
        raise
    else:
        _LOGGER.debug("[Trace] < %s (%0.3fs)", label, perf_counter() - t1)
    finally:
        trace.reset(token)
