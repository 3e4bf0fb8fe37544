"""
Custom exception classes for the application.

Protocol errors raised while decoding client messages are recovered by the
coordinator and never reach the client or other connections.
"""


class AppException(Exception):
    """
    Base class for application errors.

    Attributes:
        message: Human readable description of the error.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ProtocolError(AppException):
    """
    Incoming WebSocket message could not be used.

    Base class for every decoding problem. Handlers drop the offending
    message and keep the connection open.
    """

    pass


class MessageDecodeError(ProtocolError):
    """
    Incoming message is malformed.

    Raised for invalid UTF-8, invalid JSON, a non-object payload or a
    payload that fails schema validation for its message type.
    """

    pass


class UnknownMessageTypeError(ProtocolError):
    """
    Incoming message carries a ``msg_type`` the server does not know.

    Unknown kinds are ignored instead of being counted as malformed.
    """

    def __init__(self, msg_type: object) -> None:
        super().__init__(f"Unknown message type: {msg_type!r}")
        self.msg_type = msg_type
