"""HTTP API layer built on FastAPI.

Key components:
- **main**: Application factory and lifecycle management
- **routes**: One router per resource, all under the API prefix
- **dependencies**: API key authentication and resource services
- **middleware**: Correlation ids, request logging and exception handlers
- **schemas**: Error bodies and list envelopes
- **utils**: orjson responses and request decoding

The API layer translates between HTTP and the domain services; tenant ids
are resolved here and passed explicitly to every service call.
"""
