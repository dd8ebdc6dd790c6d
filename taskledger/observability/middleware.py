"""
ASGI middleware for correlation IDs and request timing.
"""

import logging
import time

from .context import RequestContext, accept_request_id, generate_request_id

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware:
    """
    Binds an X-Request-ID to every HTTP request.

    Usage in server.py:
        app.add_middleware(CorrelationIdMiddleware)

    The incoming header is reused when it is a short token of safe
    characters, otherwise one is generated.
    It is echoed on the response and carried by every log line written while
    the request is handled.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = None
        for key, value in scope.get("headers", []):
            if key.lower() == b"x-request-id":
                request_id = accept_request_id(value.decode("latin-1"))
                if request_id is None:
                    logger.warning("Ignoring malformed X-Request-ID header")
                break

        if not request_id:
            request_id = generate_request_id()

        async def send_with_request_id(message):
            if message["type"] == "http.response.start":
                headers_list = list(message.get("headers", []))
                headers_list.append((b"x-request-id", request_id.encode("utf-8")))
                message["headers"] = headers_list
            await send(message)

        with RequestContext(request_id=request_id):
            await self.app(scope, receive, send_with_request_id)


class RequestTimingMiddleware:
    """Logs method, path, status and duration of each HTTP request at DEBUG."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        status = 500

        async def send_with_status(message):
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_with_status)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(f"{scope['method']} {scope['path']} -> {status} ({duration_ms:.1f}ms)")
