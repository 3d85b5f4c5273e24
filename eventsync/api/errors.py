"""Exception handlers mapping service errors to HTTP responses."""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from eventsync.core.exceptions import (
    ConflictError,
    LimitExceededError,
    NotFoundError,
    RemoteError,
)
from eventsync.core.logging_config import get_logger

logger = get_logger(__name__)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def limit_exceeded_handler(request: Request, exc: LimitExceededError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "attendance_update_count": exc.attendance_update_count},
    )


async def remote_error_handler(request: Request, exc: RemoteError) -> JSONResponse:
    logger.warning("gateway_error_returned", action=exc.action, error=str(exc))
    return JSONResponse(status_code=502, content={"detail": str(exc)})


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(LimitExceededError, limit_exceeded_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(RemoteError, remote_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
