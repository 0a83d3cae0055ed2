"""Error Handlers: global exception handlers for the PayProof API.

Invariants:
    - PayProofError -> {success: false, error: <kind>, detail, ...} with the error's http_status
    - RequestValidationError -> 400 ValidationError with field-level details
    - Exception (catch-all) -> 500 InternalError, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from payproof.core.errors import ErrorCategory, ErrorSeverity, PayProofError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_payproof_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_payproof_error_handler(app: FastAPI) -> None:

    @app.exception_handler(PayProofError)
    async def payproof_error_handler(request: Request, exc: PayProofError):
        """Handle all PayProof domain/infrastructure errors."""
        log = logger.warning if exc.category == ErrorCategory.VALIDATION else logger.error
        log(
            f"PayProofError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "object_key": exc.context.object_key,
                "payment_id": exc.context.payment_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "InternalError",
                "detail": "Server error",
                "category": ErrorCategory.INTERNAL.value,
                "severity": ErrorSeverity.CRITICAL.value,
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "success": False,
        "error": "ValidationError",
        "detail": "Invalid request data",
        "category": ErrorCategory.VALIDATION.value,
        "severity": ErrorSeverity.ERROR.value,
        "fields": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }
