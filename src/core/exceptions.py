"""Structured exception hierarchy and wire-level error vocabulary.

This module defines the complete error system for the Inventory API. Every
failure a client can observe is expressed through a small, stable
vocabulary: an error type, an optional machine-readable code, a message and
the offending parameter.

Key components:
- **ErrorType / ErrorCode enums**: The stable wire vocabulary
- **Error / ErrorList**: Immutable per-request error values
- **Severity enum**: Error classification for logging and alerting
- **InventoryError**: Base exception with rich context and fingerprinting
- **Specialized exceptions**: Validation, not found, unauthorized, etc.

The exception hierarchy enables both specific error handling where needed
and generic handling at API boundaries for consistent client responses.
"""

import hashlib
import traceback
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ErrorType(Enum):
    """Broad class of an error as reported to clients."""

    API_ERROR = "api_error"
    """The server failed; the request itself may have been fine."""

    INVALID_REQUEST_ERROR = "invalid_request_error"
    """The request was rejected because of something the client sent."""


class ErrorCode(Enum):
    """Standardized error codes for programmatic handling by clients."""

    # Parameter errors
    PARAMETER_MISSING = "parameter_missing"
    PARAMETER_INVALID = "parameter_invalid"
    STRING_LENGTH_EXCEEDED = "string_length_exceeded"
    STRING_LENGTH_NOT_MET = "string_length_not_met"

    # Resource errors
    RESOURCE_MISSING = "resource_missing"

    # Authentication errors
    API_KEY_INVALID = "api_key_invalid"
    API_KEY_EXPIRED = "api_key_expired"

    # Transport errors
    ROUTE_UNKNOWN = "route_unknown"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    REQUEST_TOO_LARGE = "request_too_large"


class Severity(Enum):
    """Severity levels used to pick log levels and alerting."""

    LOW = "LOW"
    """Expected errors caused by client input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single request but not the service."""

    HIGH = "HIGH"
    """Errors touching security or data integrity."""

    CRITICAL = "CRITICAL"
    """Unexpected failures requiring immediate attention."""


class Error(BaseModel):
    """A single client-facing error.

    Created per request, never persisted, immutable after construction.
    """

    model_config = ConfigDict(frozen=True)

    code: ErrorCode | None = None
    message: str
    type: ErrorType = ErrorType.INVALID_REQUEST_ERROR
    param: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON representation, omitting absent fields."""
        return self.model_dump(mode="json", exclude_none=True)


class ErrorList(BaseModel):
    """Every violation found while validating one request."""

    model_config = ConfigDict(frozen=True)

    errors: tuple[Error, ...]

    def __len__(self) -> int:
        return len(self.errors)

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON representation of the whole list."""
        return {"errors": [error.to_wire() for error in self.errors]}


API_ERROR_MESSAGE = "Something went wrong."
INVALID_REQUEST_BODY_MESSAGE = (
    "Invalid request body. Make sure that the body is in format application/json."
)
INVALID_API_KEY_MESSAGE = "Invalid api key."
REQUEST_TOO_LARGE_MESSAGE = "Request body too large."


def not_found_message(resource: str, resource_id: UUID | str) -> str:
    """Build the message used when an id does not resolve for a tenant."""
    return f"No such {resource}: '{resource_id}'."


def invalid_id_message(resource: str, value: str) -> str:
    """Build the message used when a path id is not a valid UUID."""
    return f"Invalid {resource} id: '{value}'."


def type_mismatch_message(value: str, param: str) -> str:
    """Build the message used when a decoded value has the wrong type."""
    return f"Type '{value}' is not assignable to '{param}' parameter."


def route_unknown_message(method: str, path: str) -> str:
    """Build the message used for requests to unknown routes."""
    return f"Request to unknown route ({method}: {path})."


def method_not_allowed_message(method: str, path: str) -> str:
    """Build the message used when a route exists but not for the method."""
    return f"Method '{method}' not allowed on {path}."


class InventoryError(Exception):
    """Base exception class for all Inventory API exceptions.

    All custom exceptions in the application inherit from this class so the
    API boundary can turn them into a consistent error body.

    Args:
        message: Human-readable error message, safe to show to clients
        error_type: Broad class of the error
        code: Optional machine-readable error code
        param: Snake-cased name of the offending parameter, if any
        status_code: HTTP status code the error maps to
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information for logs
        cause: The original exception that caused this error
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.API_ERROR,
        code: ErrorCode | None = None,
        param: str | None = None,
        status_code: int | None = None,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.code = code
        self.param = param
        if status_code is not None:
            self.status_code = status_code
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]
        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for grouping similar errors in logs.

        Returns:
            str: A hash of the error class, code and raising location.
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        code = self.code.value if self.code else ""
        fingerprint_data = f"{self.__class__.__name__}:{code}"
        for frame in relevant_frames:
            if "site-packages" not in frame and "src/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error occurs during normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def to_error(self) -> Error:
        """Convert the exception into its client-facing error value."""
        return Error(
            code=self.code,
            message=self.message,
            type=self.error_type,
            param=self.param,
        )

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code.value}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        code = self.code.value if self.code else None
        return (
            f"{class_name}(code={code!r}, message={self.message!r}, "
            f"severity={self.severity.value})"
        )


class InvalidRequestError(InventoryError):
    """Exception raised when a request cannot be decoded or is malformed.

    Used for single errors detected before declarative validation runs, such
    as unparsable JSON, a value of the wrong type, or a malformed path id.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        param: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorType.INVALID_REQUEST_ERROR,
            code,
            param,
            400,
            Severity.LOW,
            context,
            cause,
        )


class ValidationError(InventoryError):
    """Exception raised when request parameters violate declared constraints.

    Carries the complete list of violations for the request.

    Args:
        errors: Every violation found for the request
    """

    def __init__(self, errors: ErrorList) -> None:
        self.errors = errors
        first = errors.errors[0] if errors.errors else None
        super().__init__(
            first.message if first else "Request validation failed.",
            ErrorType.INVALID_REQUEST_ERROR,
            first.code if first else None,
            first.param if first else None,
            400,
            Severity.LOW,
            {"error_count": len(errors)},
        )


class NotFoundError(InventoryError):
    """Exception raised when an id does not resolve for the caller's tenant.

    Cross-tenant access raises this same error so existence never leaks.

    Args:
        resource: Resource type name, e.g. ``"group"``
        resource_id: The id that failed to resolve
    """

    def __init__(
        self,
        resource: str,
        resource_id: UUID | str,
        cause: Exception | None = None,
    ) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            not_found_message(resource, resource_id),
            ErrorType.INVALID_REQUEST_ERROR,
            ErrorCode.RESOURCE_MISSING,
            None,
            404,
            Severity.LOW,
            {"resource": resource, "resource_id": str(resource_id)},
            cause,
        )


class UnauthorizedError(InventoryError):
    """Exception raised when the API key is missing, unknown or expired."""

    def __init__(
        self,
        message: str = INVALID_API_KEY_MESSAGE,
        code: ErrorCode | None = ErrorCode.API_KEY_INVALID,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorType.INVALID_REQUEST_ERROR,
            code,
            None,
            401,
            Severity.HIGH,
            context,
        )


class RequestTooLargeError(InventoryError):
    """Exception raised when a request body exceeds the configured size."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            REQUEST_TOO_LARGE_MESSAGE,
            ErrorType.INVALID_REQUEST_ERROR,
            ErrorCode.REQUEST_TOO_LARGE,
            None,
            413,
            Severity.LOW,
            {"limit_bytes": limit},
        )


class ApplicationError(InventoryError):
    """Exception raised for unexpected server-side failures.

    The client only ever sees the generic message; the cause and context are
    for logs.
    """

    def __init__(
        self,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            API_ERROR_MESSAGE,
            ErrorType.API_ERROR,
            None,
            None,
            500,
            Severity.CRITICAL,
            context,
            cause,
        )
