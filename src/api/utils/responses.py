"""JSON responses rendered with orjson.

orjson natively serializes the datetime, UUID and Enum values that resource
models contain, and is faster than the standard json module. ORJSONResponse
is the default response class of the application.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ORJSONResponse(JSONResponse):
    """FastAPI Response class using orjson for JSON serialization."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        """Render the content as JSON using orjson.

        Pydantic models are dumped in JSON mode first so their custom
        serializers (collapsed references, omitted base fields) apply.

        Args:
            content: The content to serialize to JSON.

        Returns:
            bytes: The JSON-encoded bytes.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")
        return orjson.dumps(content)
