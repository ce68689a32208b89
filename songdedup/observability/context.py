"""Correlation ID context for tracing one scan through its log lines.

The ID lives in a ContextVar, so it follows the scan into worker threads
started with asyncio.to_thread and never leaks between concurrent scans.

Usage:
    from songdedup.observability.context import correlation_id_context

    with correlation_id_context() as scan_id:
        report = service.build_report(records, options)
        # every log entry inside carries correlation_id=scan_id
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

_correlation_id_var: ContextVar[Optional[str]] = ContextVar(
    "correlation_id", default=None
)


def set_correlation_id(corr_id: Optional[str] = None) -> str:
    """Set the correlation ID for the current context.

    Args:
        corr_id: Explicit ID. A UUID4 is generated when omitted.

    Returns:
        The ID that was set.
    """
    if corr_id is None:
        corr_id = str(uuid.uuid4())

    _correlation_id_var.set(corr_id)
    return corr_id


def get_correlation_id() -> Optional[str]:
    """Current correlation ID, or None outside any scan context."""
    return _correlation_id_var.get()


def clear_correlation_id() -> None:
    _correlation_id_var.set(None)


@contextmanager
def correlation_id_context(
    corr_id: Optional[str] = None,
) -> Generator[str, None, None]:
    """Scope a correlation ID to a block and restore the previous one after.

    Args:
        corr_id: Explicit ID. A UUID4 is generated when omitted.

    Yields:
        The correlation ID in effect inside the block.
    """
    if corr_id is None:
        corr_id = str(uuid.uuid4())

    token = _correlation_id_var.set(corr_id)
    try:
        yield corr_id
    finally:
        _correlation_id_var.reset(token)
