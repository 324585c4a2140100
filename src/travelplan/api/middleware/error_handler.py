"""Global error handling.

Every failure is rendered as the same JSON body:

    {"error": ..., "details": ..., "error_code": ..., "suggestion": ..., "retry_allowed": ...}

``error`` is the catalog message and ``details`` explains this occurrence.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from travelplan.config import settings
from travelplan.core.errors import get_error, get_user_message
from travelplan.core.exceptions import BatchUpdateError, LoadError, ReconciliationError

logger = logging.getLogger(__name__)


def error_content(error_code: str, details: str | None = None) -> dict:
    """Build the error body for a catalog code."""
    error_info = get_error(error_code)
    return {
        "error": error_info["message"],
        "details": details or get_user_message(error_code),
        "error_code": error_code,
        "suggestion": error_info["suggestion"],
        "retry_allowed": error_info["retry_allowed"],
    }


def _describe(exc: ReconciliationError) -> str | None:
    if isinstance(exc, LoadError):
        # The underlying store error is passed through unchanged.
        return f"{exc.source}: {exc.reason}"
    if isinstance(exc, BatchUpdateError):
        errors = "; ".join(f["error"] for f in exc.failures[:3])
        return f"All {exc.attempted} updates failed: {errors}"
    return None


async def handle_reconciliation_error(
    request: Request, exc: ReconciliationError
) -> JSONResponse:
    """Handle backfill exceptions.

    Args:
        request: The incoming request
        exc: The backfill exception

    Returns:
        JSONResponse with error details from catalog
    """
    extra = {"error_code": exc.error_code, "path": request.url.path, "method": request.method}
    if settings.debug:
        extra["details"] = exc.details

    if exc.http_status >= 500:
        logger.error(f"Expense category backfill failed: {exc.error_code}", extra=extra)
    else:
        logger.warning(f"Expense category backfill rejected: {exc.error_code}", extra=extra)

    return JSONResponse(
        status_code=exc.http_status,
        content=error_content(exc.error_code, _describe(exc)),
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse with field-level messages in ``details``
    """
    errors = exc.errors()
    error_messages = []
    for error in errors:
        field = ".".join(str(x) for x in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        error_messages.append(f"{field}: {msg}")

    extra = {"path": request.url.path, "method": request.method}
    if settings.debug:
        extra["errors"] = errors
    logger.warning(f"Validation error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_content("VAL_001", " | ".join(error_messages)),
    )


async def handle_integrity_error(
    request: Request, exc: IntegrityError
) -> JSONResponse:
    """Handle database integrity errors."""
    # Do not log str(exc): it can include SQL + bound parameters.
    log = logger.exception if settings.debug else logger.error
    log(
        f"Database integrity error on {request.url.path}",
        extra={"path": request.url.path, "method": request.method},
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_content("DB_001"),
    )


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Details are only exposed in debug mode.
    """
    extra = {
        "error_type": type(exc).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    if settings.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_content("SYS_001", str(exc) if settings.debug else None),
    )
