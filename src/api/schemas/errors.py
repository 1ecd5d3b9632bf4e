"""Error response schemas.

Every failure is rendered in one of two shapes:

- a single error: ``{"error": {"code", "message", "type", "param"}}``
- every validation violation of a request: ``{"errors": [...]}``

Absent ``code`` and ``param`` are omitted from the body.
"""

from typing import Any

from pydantic import BaseModel, Field

from src.core.exceptions import Error, ErrorList


class ErrorResponse(BaseModel):
    """Body of a response carrying one error."""

    error: Error = Field(
        ...,
        description="The error",
        examples=[
            {
                "code": "resource_missing",
                "message": "No such group: '4c3f0e4c-6f57-4a4e-9a57-7f7fbf3b1f1e'.",
                "type": "invalid_request_error",
            }
        ],
    )

    def to_wire(self) -> dict[str, Any]:
        return {"error": self.error.to_wire()}


class ErrorListResponse(BaseModel):
    """Body of a response carrying every validation violation."""

    errors: list[Error] = Field(
        ...,
        description="Every violation found in the request",
        examples=[
            [
                {
                    "code": "parameter_missing",
                    "message": "Missing required param: 'name'.",
                    "param": "name",
                    "type": "invalid_request_error",
                }
            ]
        ],
    )

    @classmethod
    def from_errors(cls, errors: ErrorList) -> "ErrorListResponse":
        return cls(errors=list(errors.errors))

    def to_wire(self) -> dict[str, Any]:
        return {"errors": [error.to_wire() for error in self.errors]}
