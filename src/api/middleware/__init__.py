"""Middleware and exception handlers shared by every endpoint.

- **RequestContextMiddleware**: Correlation ids and request context
- **RequestLoggingMiddleware**: Structured logging with timing
- **error_handler**: Maps exceptions to the error response bodies

Middleware run in reverse order of registration: the request context is
set up before the request is logged.
"""
