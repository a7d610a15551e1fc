"""FastAPI handlers that render the service error taxonomy."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from models.errors import NoData, ServiceError, ValidationError

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if isinstance(exc, NoData):
        logger.debug("No data: %s", exc.message, extra={"path": request.url.path})
    elif isinstance(exc, ValidationError):
        logger.info(
            "Rejected request",
            extra={"path": request.url.path, "reason": exc.message, "error_kind": exc.error},
        )
    else:
        logger.error("Service failure: %s", exc.message, extra={"path": request.url.path})
    return error_response(exc.status_code, exc.error, exc.message)


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info(
        "Malformed request",
        extra={"path": request.url.path, "reason": str(exc.errors()), "error_kind": "ValidationError"},
    )
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        ValidationError.error,
        "Request body must be a JSON object.",
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error while serving request",
        extra={"path": request.url.path, "error_kind": type(exc).__name__},
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ServiceError.error,
        "Internal server error",
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
