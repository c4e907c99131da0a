"""Global exception handlers that map data source exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from odata_memds.errors import (
    INTERNAL_ERROR,
    NOT_FOUND,
    NOT_IMPLEMENTED,
    VALIDATION_ERROR,
    EntityValidationError,
    NotFoundError,
    ODataNotImplementedError,
    ODataRuntimeError,
)
from odata_memds.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def entity_validation_error_handler(
    _request: Request, exc: EntityValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        VALIDATION_ERROR,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def not_implemented_error_handler(
    _request: Request, exc: ODataNotImplementedError
) -> JSONResponse:
    return _error_response(
        status.HTTP_501_NOT_IMPLEMENTED,
        str(exc),
        NOT_IMPLEMENTED,
    )


def runtime_error_handler(request: Request, exc: ODataRuntimeError) -> JSONResponse:
    logger.error("Data source fault on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc),
        INTERNAL_ERROR,
    )


def register_exception_handlers(app):
    """Register data source exception handlers on the FastAPI app."""
    app.add_exception_handler(EntityValidationError, entity_validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(ODataNotImplementedError, not_implemented_error_handler)
    app.add_exception_handler(ODataRuntimeError, runtime_error_handler)
