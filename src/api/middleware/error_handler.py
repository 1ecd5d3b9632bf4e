"""Global exception handlers for the FastAPI application.

Every failure leaves the API in one of the two error shapes defined in
``src.api.schemas.errors``. Client errors are logged at warning level;
anything unexpected is logged with its traceback and sanitized context and
answered with an opaque 500 so internal detail never reaches the client.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from src.api.schemas.errors import ErrorListResponse, ErrorResponse
from src.api.utils.decoding import render_param
from src.api.utils.responses import ORJSONResponse
from src.core.error_context import sanitize_error_context
from src.core.exceptions import (
    API_ERROR_MESSAGE,
    Error,
    ErrorCode,
    ErrorType,
    InventoryError,
    ValidationError,
    method_not_allowed_message,
    route_unknown_message,
)


def error_response(error: Error, status_code: int) -> Response:
    """Render a single error."""
    return ORJSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error).to_wire(),
    )


async def inventory_error_handler(request: Request, exc: Exception) -> Response:
    """Handle InventoryError exceptions.

    Validation errors carry every violation and are rendered as an error
    list; every other InventoryError is rendered as a single error.

    Args:
        request: The request that caused the exception
        exc: The InventoryError exception to handle

    Returns:
        Response: ORJSONResponse with the error body

    Raises:
        TypeError: If exc is not an InventoryError instance
    """
    if not isinstance(exc, InventoryError):
        raise TypeError(f"Expected InventoryError, got {type(exc).__name__}")

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": request.url.path,
            "status_code": exc.status_code,
            "fingerprint": exc.fingerprint,
            **exc.context,
        },
    )

    if exc.is_expected:
        logger.warning("Request rejected: {}", exc, **error_context)
    else:
        logger.opt(exception=exc.cause or exc).error(
            "Handling {}: {}", type(exc).__name__, exc, **error_context
        )

    if isinstance(exc, ValidationError):
        return ORJSONResponse(
            status_code=exc.status_code,
            content=ErrorListResponse.from_errors(exc.errors).to_wire(),
        )
    return error_response(exc.to_error(), exc.status_code)


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions.

    Resource routes decode their own bodies, so this only fires for
    framework-level parameters; the first failure is reported.

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    errors = exc.errors()
    loc = tuple(errors[0].get("loc", ()))[1:] if errors else ()
    param = render_param(loc) or None

    logger.warning(
        "Request validation failed",
        method=request.method,
        path=request.url.path,
        validation_param=param,
    )
    error = Error(
        code=ErrorCode.PARAMETER_INVALID,
        message=f"Parameter invalid: '{param}'." if param else "Parameter invalid.",
        param=param,
    )
    return error_response(error, status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException, notably unknown routes and methods.

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    method, path = request.method, request.url.path
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error = Error(
            code=ErrorCode.ROUTE_UNKNOWN, message=route_unknown_message(method, path)
        )
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        error = Error(
            code=ErrorCode.METHOD_NOT_ALLOWED,
            message=method_not_allowed_message(method, path),
        )
    elif exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        error = Error(message=str(exc.detail))
    else:
        error = Error(message=API_ERROR_MESSAGE, type=ErrorType.API_ERROR)

    logger.warning(
        "HTTP exception {}",
        exc.status_code,
        method=method,
        path=path,
        detail=exc.detail,
    )
    return error_response(error, exc.status_code)


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any other exception with an opaque 500.

    Args:
        request: The request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: ORJSONResponse with the generic error message
    """
    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": request.url.path,
        },
    )
    logger.opt(exception=exc).error(
        "Unhandled exception: {}", type(exc).__name__, **error_context
    )

    error = Error(message=API_ERROR_MESSAGE, type=ErrorType.API_ERROR)
    return error_response(error, status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(InventoryError, inventory_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
