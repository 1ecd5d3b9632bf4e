"""Utilities used across the API layer.

- **responses**: JSON responses rendered with orjson
- **decoding**: Request bodies and path ids to typed parameters
"""
