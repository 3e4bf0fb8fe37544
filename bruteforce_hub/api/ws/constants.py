from enum import StrEnum


class WsMessageType(StrEnum):
    """
    Message kinds of the WebSocket wire protocol.

    The value is what travels in the ``msg_type`` field of every message.

    Attributes:
        USERS_BRUTEFORCING: Server -> client, number of bruteforcing users
        USERS_WATCHING: Server -> client, number of connected users
        START: Client -> server, sender started bruteforcing
        STOP: Client -> server, sender stopped bruteforcing
        NEW: Both directions, discovery payload relayed to everyone

    Example:
        >>> str(WsMessageType.START)
        'WsMessageType.START<Start>'
    """

    USERS_BRUTEFORCING = "UsersBruteforcing"
    USERS_WATCHING = "UsersWatching"
    START = "Start"
    STOP = "Stop"
    NEW = "New"

    def __str__(self):
        """
        Returns a string representation of the enum member in the format example "WsMessageType.START<Start>".
        """
        return f"{__class__.__name__}.{self.name}<{self.value}>"
