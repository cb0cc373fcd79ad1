# backend/currency_archive/utils/context.py
"""
Request context management.

Holds the correlation ID of the current request in a ContextVar so every
log record can carry it. Threads of the shared analytics pool start with
an empty context; ``submit_with_context`` runs a task inside a copy of the
caller's context so worker logs stay attributable to the request.

Usage:
    from currency_archive.utils.context import get_correlation_id, set_correlation_id

    # In middleware
    set_correlation_id("abc-123")

    # In any service/handler
    correlation_id = get_correlation_id()  # Returns "abc-123"
"""

import contextvars
from concurrent.futures import Executor, Future
from contextvars import ContextVar
from typing import Any, Callable, TypeVar

T = TypeVar("T")

# =============================================================================
# CONTEXT VARIABLES
# =============================================================================

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """Return the current request's correlation ID, or None if not set."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current request.

    This should be called by middleware at the start of each request.
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID at the end of a request."""
    _correlation_id_var.set(None)


# =============================================================================
# EXECUTOR HELPERS
# =============================================================================

def submit_with_context(
        executor: Executor,
        fn: Callable[..., T],
        *args: Any,
) -> Future:
    """
    Submit ``fn(*args)`` to ``executor`` inside a copy of the current context.

    Each submission gets its own copy, since a Context cannot be entered
    by two threads at once.
    """
    ctx = contextvars.copy_context()
    return executor.submit(ctx.run, fn, *args)
