"""
Application-level constants for hardcoded protocol behavior.

These values are part of the wire protocol or of internal safety limits and
are not meant to be overridden through the environment. For configurable
values (listen address, send timeout, logging), see bruteforce_hub/settings.py.
"""

# ============================================================================
# WebSocket Protocol Constants
# ============================================================================

# Normal closure (RFC 6455)
WS_NORMAL_CLOSURE_CODE = 1000

# Internal error closure (RFC 6455), reported when the receive loop fails
WS_INTERNAL_ERROR_CODE = 1011

# Encoding used for binary frames carrying JSON messages
WS_BINARY_ENCODING = "utf-8"

# Largest counter value accepted on the wire (unsigned 64-bit)
WS_MAX_NUMBER = 2**64 - 1


# ============================================================================
# Logging
# ============================================================================

# Upper bound (bytes) for a single structured log line shipped to Loki
LOKI_MAX_LOG_SIZE_BYTES = 256 * 1024

# Placeholder shown by the console formatter outside a connection context
LOG_NO_CONNECTION_ID = "-"
