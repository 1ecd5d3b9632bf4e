"""API-related constants."""

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "

# Request handling
MAX_USER_AGENT_LENGTH = 200
