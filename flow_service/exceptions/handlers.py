"""
FastAPI exception handlers.

All error responses share one envelope:
``{"status": "error", "error": {...}, "meta": {...}}``.
"""

import traceback
import uuid
from datetime import datetime, UTC
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from flow_service.config.constants import ErrorCategory
from flow_service.exceptions.base_exceptions import FlowServiceException
from flow_service.repositories.exceptions import (
    EntityNotFoundError,
    InvalidIdentifierError,
    RepositoryError,
)
from flow_service.utils.logger import get_logger

logger = get_logger(__name__)

HTTP_CATEGORIES = {
    400: ErrorCategory.VALIDATION,
    404: ErrorCategory.NOT_FOUND,
    502: ErrorCategory.EXTERNAL,
    503: ErrorCategory.NETWORK,
    504: ErrorCategory.TIMEOUT,
}


def _request_meta(request: Request) -> Dict[str, Any]:
    meta = {
        "timestamp": datetime.now(UTC).isoformat(),
        "path": str(request.url.path),
        "method": request.method,
    }
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        meta["request_id"] = request_id
    return meta


def _error_response(request: Request, status_code: int, error: Dict[str, Any]) -> JSONResponse:
    content = {"status": "error", "error": error, "meta": _request_meta(request)}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


async def flow_service_exception_handler(request: Request, exc: FlowServiceException) -> JSONResponse:
    exc.log_error(logger)
    return _error_response(request, exc.status_code, exc.to_dict()["error"])


async def repository_exception_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """Not found -> 404, malformed id -> 400, any other store failure -> 500"""
    if isinstance(exc, EntityNotFoundError):
        status_code, category = 404, ErrorCategory.NOT_FOUND
    elif isinstance(exc, InvalidIdentifierError):
        status_code, category = 400, ErrorCategory.VALIDATION
    else:
        status_code, category = 500, ErrorCategory.INTERNAL

    error = {
        "code": exc.error_code,
        "message": exc.message if status_code < 500 else "Document store operation failed",
        "category": category.value,
        "timestamp": exc.timestamp.isoformat(),
    }
    if exc.context and status_code < 500:
        error["details"] = exc.context

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Repository error",
        error_code=exc.error_code,
        error_message=exc.message,
        original_error=str(exc.original_error) if exc.original_error else None,
        path=str(request.url.path),
    )

    return _error_response(request, status_code, error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=str(request.url.path),
        method=request.method,
    )
    return _error_response(request, exc.status_code, {
        "code": f"HTTP_{exc.status_code}",
        "message": exc.detail,
        "category": HTTP_CATEGORIES.get(exc.status_code, ErrorCategory.INTERNAL).value,
        "timestamp": datetime.now(UTC).isoformat(),
    })


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and parameters are client errors (400)"""
    validation_errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    logger.warning(
        "Request validation failed",
        validation_errors=validation_errors,
        path=str(request.url.path),
        method=request.method,
    )

    return _error_response(request, 400, {
        "code": "VALIDATION_ERROR",
        "message": "Request validation failed",
        "category": ErrorCategory.VALIDATION.value,
        "timestamp": datetime.now(UTC).isoformat(),
        "details": {"validation_errors": validation_errors},
    })


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Unexpected failures: generic message to the caller, full trace in the log"""
    error_id = str(uuid.uuid4())

    logger.error(
        "Unexpected exception occurred",
        error_id=error_id,
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=str(request.url.path),
        method=request.method,
        traceback="".join(traceback.format_exception(exc)),
    )

    return _error_response(request, 500, {
        "code": "INTERNAL_SERVER_ERROR",
        "message": "An unexpected error occurred",
        "category": ErrorCategory.INTERNAL.value,
        "timestamp": datetime.now(UTC).isoformat(),
        "error_id": error_id,
    })


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers on the application"""
    app.add_exception_handler(FlowServiceException, flow_service_exception_handler)
    app.add_exception_handler(RepositoryError, repository_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
