"""Exception handlers for the marketplace API.

Every failure leaves the API as the same JSON envelope:
``{"error": {"message": ..., "status_code": ..., "details": {...}}}``.
When the client sent an ``X-Request-Id`` header it is echoed in the
envelope and on the response so support can match logs to reports.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from core.exceptions import AppException
from core.logger import get_logger

logger = get_logger("core.error_handlers")

REQUEST_ID_HEADER = "X-Request-Id"


def error_response(request: Request, message: str, status_code: int, details: dict = None) -> JSONResponse:
    """Render the error envelope for `request`."""
    request_id = request.headers.get(REQUEST_ID_HEADER)
    error = {"message": message, "status_code": status_code}
    if details:
        error["details"] = details
    headers = None
    if request_id:
        error["request_id"] = request_id
        headers = {REQUEST_ID_HEADER: request_id}
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


def _where(request: Request) -> str:
    return f"{request.method} {request.url.path}"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render domain exceptions.

    Client mistakes (bad quantities, wrong role, lost claim races) are
    logged as warnings; server-side failures such as a missing mapping API
    key are logged as errors.
    """
    if exc.status_code >= 500:
        logger.error("%s failed: %s", _where(request), exc.message)
    else:
        logger.warning("%s rejected (%s): %s", _where(request), exc.status_code, exc.message)
    return error_response(request, exc.message, exc.status_code, exc.details)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors field by field, e.g. ``body.quantity``."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("%s invalid request: %s", _where(request), [e["field"] for e in errors])
    return error_response(
        request,
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        {"validation_errors": errors},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("%s database error: %s", _where(request), exc, exc_info=True)
    return error_response(
        request,
        "A database error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"type": "database_error"},
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("%s unhandled %s: %s", _where(request), type(exc).__name__, exc, exc_info=True)
    return error_response(
        request,
        "An internal server error occurred",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        {"type": "internal_error"},
    )


def register_exception_handlers(app):
    """Attach the marketplace exception handlers to `app`."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
