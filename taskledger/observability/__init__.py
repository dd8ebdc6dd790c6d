"""
Observability for TaskLedger: structured logging and request correlation.
"""

from .context import (
    RequestContext,
    accept_request_id,
    generate_request_id,
    get_request_id,
    set_request_id,
)
from .logging import HumanFormatter, JSONFormatter, configure_logging
from .middleware import CorrelationIdMiddleware, RequestTimingMiddleware

__all__ = [
    "CorrelationIdMiddleware",
    "HumanFormatter",
    "JSONFormatter",
    "RequestContext",
    "RequestTimingMiddleware",
    "accept_request_id",
    "configure_logging",
    "generate_request_id",
    "get_request_id",
    "set_request_id",
]
