"""
Global Exception Handler.

Catches any exception an endpoint lets escape, logs it with the request
context under a short error id and answers 500 with that id, so a user
report can be matched to the log line.
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from placemaker_ai.core.logging_config import get_logger

logger = get_logger(__name__)


def _error_id() -> str:
    return uuid.uuid4().hex[:12]


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Report a uniqueness or foreign key violation as a 409 conflict."""
    error_id = _error_id()
    logger.warning(
        f"Integrity error [{error_id}] in {request.method} {request.url.path}: {exc.orig}",
        extra={"error_id": error_id, "method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=409,
        content={"detail": "Conflicts with existing data", "error_id": error_id, "error_type": "IntegrityError"},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception and return a 500 response carrying its error id.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with ``detail``, ``error_id`` and ``error_type``
    """
    error_id = _error_id()
    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
