"""Exception handlers — map recoverable validation errors to JSON responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from jsonvalidator.errors import DecodeError, MalformedJsonError, ValidationFailedError

logger = structlog.get_logger()


async def validation_failed_handler(request: Request, exc: ValidationFailedError):
    """Rule failures, reported per JSON path."""
    logger.info(
        "request_validation_failed",
        path=request.url.path,
        method=request.method,
        total_errors=exc.errors.count_errors(),
    )
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "errors": exc.errors.errors},
    )


async def decode_error_handler(request: Request, exc: DecodeError):
    """Rules passed but the body does not fit the target model."""
    logger.warning(
        "request_decode_failed",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    details = exc.cause.errors(include_url=False, include_context=False) if exc.cause else []
    return JSONResponse(
        status_code=422,
        content={"error": "decode_error", "message": str(exc), "details": details},
    )


async def malformed_json_handler(request: Request, exc: MalformedJsonError):
    logger.info(
        "request_malformed_json",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return JSONResponse(
        status_code=400,
        content={"error": "malformed_json", "message": str(exc)},
    )


def install_exception_handlers(app: FastAPI) -> FastAPI:
    """Register the handlers on `app` and return it."""
    app.add_exception_handler(ValidationFailedError, validation_failed_handler)
    app.add_exception_handler(DecodeError, decode_error_handler)
    app.add_exception_handler(MalformedJsonError, malformed_json_handler)
    return app
