"""Core package for functionality shared by every layer of the Inventory API.

- **config**: Settings loaded from the environment
- **context**: Correlation and tenant ids of the current request
- **exceptions**: Error vocabulary and exception hierarchy
- **error_context**: Redaction of sensitive data before logging
- **logging**: Loguru setup with console and JSON formatters
- **validation**: Declarative parameter constraints
"""
