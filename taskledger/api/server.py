"""
TaskLedger API Server - REST API for timesheets, time reports and time logging.
"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..database import Database, get_db, set_db
from ..errors import TaskLedgerError
from ..observability import CorrelationIdMiddleware, RequestTimingMiddleware, configure_logging
from ..schema import ensure_schema
from .routes import dashboard_router, health_router, tasks_router, timesheet_router

logger = logging.getLogger(__name__)

# RequestValidationError types that mean "number out of bounds"
_RANGE_ERROR_TYPES = {"greater_than_equal", "less_than_equal", "greater_than", "less_than"}


def _field_name(loc: tuple) -> str | None:
    """Drop the location prefix ("body", "query", ...) from a pydantic error loc."""
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or None


def _validation_code(error: dict) -> str:
    field = _field_name(tuple(error.get("loc", ())))
    if field == "minutes" and error.get("type") in _RANGE_ERROR_TYPES:
        return "MinutesOutOfRange"
    if error.get("type") == "enum":
        return "InvalidOption"
    return "ValidationFailed"


# =============================================================================
# Exception handlers
# =============================================================================


async def taskledger_error_handler(request: Request, exc: TaskLedgerError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "errors": [exc.to_error_item()]},
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": _field_name(tuple(error.get("loc", ()))),
            "reason": error.get("msg", "Invalid value"),
            "code": _validation_code(error),
        }
        for error in exc.errors()
    ]
    logger.debug(f"Validation failed on {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Server error"})


# =============================================================================
# App factory
# =============================================================================


def create_app(db: Database | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        db: Database to serve; defaults to the configured one. The schema is
            created if missing.
        settings: Settings; defaults to get_settings()
    """
    settings = settings or get_settings()
    if db is not None:
        set_db(db)
    ensure_schema(get_db())

    app = FastAPI(
        title="TaskLedger API",
        description="Timesheets, time reports and time logging for tasks",
        version=__version__,
    )

    # CORS - configurable via CORS_ORIGINS (comma-separated; "*" allows all)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=settings.cors_origin_list != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(TaskLedgerError, taskledger_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health_router, prefix="/api")
    app.include_router(dashboard_router, prefix="/api")
    app.include_router(timesheet_router, prefix="/api")
    app.include_router(tasks_router, prefix="/api")

    return app


def run(host: str = "127.0.0.1", port: int = 8420, reload: bool = False) -> None:
    """Serve the API with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    if reload:
        uvicorn.run("taskledger.api.server:create_app", factory=True, host=host, port=port, reload=True)
    else:
        uvicorn.run(create_app(), host=host, port=port)
