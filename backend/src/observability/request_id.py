"""Correlation ids for log lines.

HTTP requests get their id from the X-Request-ID header (or a fresh one);
background matching runs open their own scope per task.
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a new UUID v4 correlation id."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Current correlation id, or "no-request-id" outside any scope."""
    return request_id_var.get() or "no-request-id"


@contextmanager
def correlation_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for the duration of a block.

    Usage:
        with correlation_scope(task_id):
            orchestrator.run_matching(buy_request_id)
    """
    token = request_id_var.set(request_id or generate_request_id())
    try:
        yield request_id_var.get()
    finally:
        request_id_var.reset(token)
