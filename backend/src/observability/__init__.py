"""Logging, correlation ids, Prometheus metrics and health probes."""

from .logging_config import configure_logging, get_logger
from .request_id import correlation_scope, get_request_id
from .middleware import RequestIDMiddleware

__all__ = [
    "configure_logging",
    "get_logger",
    "correlation_scope",
    "get_request_id",
    "RequestIDMiddleware",
]
