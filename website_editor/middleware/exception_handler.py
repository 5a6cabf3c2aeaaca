"""Exception handlers turning errors into ``{"error", "message", "details"}`` bodies."""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..exceptions import EditorException, ErrorCode

logger = logging.getLogger(__name__)


async def editor_exception_handler(request: Request, exc: EditorException) -> JSONResponse:
    """Log a domain exception and return its JSON form with its status code."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"EditorException: {exc.error_code.value}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
            "details": exc.details,
            "status_code": exc.status_code,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and query parameters: 422 VALIDATION_ERROR."""
    errors = jsonable_encoder(exc.errors())
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "method": request.method, "errors": errors},
    )
    return JSONResponse(
        status_code=422,
        content={
            "error": ErrorCode.VALIDATION_ERROR.value,
            "message": "Request validation failed",
            "details": {"errors": errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected: log the traceback, return a generic 500."""
    logger.error(
        "Unhandled exception",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": ErrorCode.INTERNAL_ERROR.value,
            "message": "Internal server error",
            "details": {},
        },
    )
