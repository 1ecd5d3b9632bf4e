"""Decoding of request bodies and path ids into typed parameters.

Decoding only checks types. Presence and range rules are declared on the
parameter models and evaluated afterwards by the services, which collect
every violation at once. A decoding failure, by contrast, is reported as a
single error:

- a body that is not a JSON object: the invalid-body error
- a value of the wrong type: ``parameter_invalid`` naming the parameter
"""

from typing import Any
from uuid import UUID

import orjson
from fastapi import Request
from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.core.config import get_settings
from src.core.exceptions import (
    INVALID_REQUEST_BODY_MESSAGE,
    ErrorCode,
    InvalidRequestError,
    RequestTooLargeError,
    invalid_id_message,
    type_mismatch_message,
)
from src.core.validation import to_snake_case

_JSON_TYPE_NAMES: dict[type, str] = {
    bool: "bool",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
    dict: "object",
    type(None): "null",
}


def json_type_name(value: Any) -> str:
    """Name the JSON type of a decoded value, e.g. ``"string"``."""
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def render_param(loc: tuple[int | str, ...]) -> str:
    """Render an error location as a parameter name.

    Nested fields are joined with dots and list elements are indexed, so
    ``("created_at", "gt")`` becomes ``created_at.gt`` and ``("expand", 1)``
    becomes ``expand[1]``.
    """
    param = ""
    for part in loc:
        if isinstance(part, int):
            param += f"[{part}]"
        else:
            param += f".{to_snake_case(part)}" if param else to_snake_case(part)
    return param


async def read_body(request: Request) -> bytes:
    """Read the request body, refusing bodies over the configured size.

    Raises:
        RequestTooLargeError: If the body exceeds ``max_request_body_bytes``.
    """
    limit = get_settings().max_request_body_bytes
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        raise RequestTooLargeError(limit)

    body = await request.body()
    if len(body) > limit:
        raise RequestTooLargeError(limit)
    return body


def decode_body[ParamsT: BaseModel](body: bytes, model: type[ParamsT]) -> ParamsT:
    """Decode a JSON body into a parameter model.

    An empty body decodes as ``{}``.

    Args:
        body: Raw request body.
        model: Parameter model to decode into.

    Returns:
        ParamsT: The decoded parameters; constraints are not yet evaluated.

    Raises:
        InvalidRequestError: If the body is not a JSON object or a value has
            the wrong type.
    """
    if not body.strip():
        return model()

    try:
        data = orjson.loads(body)
    except orjson.JSONDecodeError as e:
        raise InvalidRequestError(INVALID_REQUEST_BODY_MESSAGE, cause=e) from e
    if not isinstance(data, dict):
        raise InvalidRequestError(INVALID_REQUEST_BODY_MESSAGE)

    try:
        return model.model_validate_json(body, strict=True)
    except PydanticValidationError as e:
        first = e.errors()[0]
        param = render_param(first["loc"])
        logger.debug(
            "Decoding {} failed at {}: {}", model.__name__, param, first["type"]
        )
        raise InvalidRequestError(
            type_mismatch_message(json_type_name(first["input"]), param),
            code=ErrorCode.PARAMETER_INVALID,
            param=param,
            cause=e,
        ) from e


async def decode_params[ParamsT: BaseModel](
    request: Request, model: type[ParamsT]
) -> ParamsT:
    """Read and decode the request body into a parameter model."""
    return decode_body(await read_body(request), model)


def parse_resource_id(value: str, resource: str) -> UUID:
    """Parse a path id.

    Args:
        value: The raw path segment.
        resource: Resource type name used in the error message.

    Returns:
        UUID: The parsed id.

    Raises:
        InvalidRequestError: If the value is not a UUID.
    """
    try:
        return UUID(value)
    except ValueError as e:
        raise InvalidRequestError(
            invalid_id_message(resource, value),
            code=ErrorCode.PARAMETER_INVALID,
            cause=e,
        ) from e
