"""WebSocket message formats."""

from bruteforce_hub.api.ws.formats.json import JSONMessageFormat

message_format = JSONMessageFormat()

__all__ = [
    "JSONMessageFormat",
    "message_format",
]
