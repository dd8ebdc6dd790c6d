"""
Correlation IDs for TaskLedger.

Every HTTP request and every CLI command runs under one ID, held in a
context variable so log records written anywhere below can pick it up:

    req-3f2a9c0d1b7e4a55   HTTP request (or the caller's X-Request-ID)
    cli-9b0e6f12a4c3d877   one `taskledger ...` invocation
"""

import contextvars
import re
import uuid

# Caller-supplied IDs end up in log lines and response headers
_ACCEPTED_ID = re.compile(r"[A-Za-z0-9._:-]{1,64}")

_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)


def get_request_id() -> str | None:
    return _request_id_var.get()


def set_request_id(request_id: str) -> contextvars.Token:
    """Set the request ID in context. Returns token for reset."""
    return _request_id_var.set(request_id)


def generate_request_id(prefix: str = "req") -> str:
    """New ID such as "req-3f2a9c0d1b7e4a55"; `prefix` names the entry point."""
    return f"{prefix}-{uuid.uuid4().hex[:16]}"


def accept_request_id(value: str | None) -> str | None:
    """
    Return a caller-supplied ID when it is safe to log and echo.

    Anything longer than 64 characters or containing characters outside
    letters, digits and ``._:-`` is refused, and the caller gets a generated
    ID instead.
    """
    if value and _ACCEPTED_ID.fullmatch(value):
        return value
    return None


class RequestContext:
    """
    Binds a correlation ID for the duration of a block.

    Usage:
        with RequestContext(request_id=generate_request_id("cli")):
            service.log_time("tsk_a", caller, hours=1)
            # "User usr_u1 logged 1h00m on task tsk_a" carries the cli-... ID
    """

    def __init__(self, request_id: str | None = None):
        self.request_id = request_id or generate_request_id()
        self._token: contextvars.Token | None = None

    def __enter__(self) -> "RequestContext":
        self._token = set_request_id(self.request_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _request_id_var.reset(self._token)
            self._token = None
