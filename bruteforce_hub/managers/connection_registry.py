import threading
from dataclasses import dataclass
from typing import NamedTuple

from fastapi import WebSocket

from bruteforce_hub.logging import logger


@dataclass
class Connection:
    """
    State kept for one open WebSocket connection.

    Attributes:
        id: Identifier assigned by the transport when the socket was accepted.
        websocket: Send handle used for broadcasts.
        is_bruteforcing: Whether the client reported that it is bruteforcing.
    """

    id: str
    websocket: WebSocket
    is_bruteforcing: bool = False


class RegistryCounts(NamedTuple):
    """Aggregate counters read in a single critical section."""

    watching: int
    bruteforcing: int


class ConnectionRegistry:
    """
    Process-wide table of open connections.

    Every read and write goes through one lock, so counts returned by a
    mutating call describe exactly the state right after that mutation.
    The lock is only held for dict operations and never across an await.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: dict[str, Connection] = {}

    def insert(self, connection_id: str, websocket: WebSocket) -> RegistryCounts:
        """
        Add a connection with the bruteforcing flag cleared.

        An existing entry with the same id is overwritten.

        Args:
            connection_id: Unique id of the open connection.
            websocket: The connection's send handle.

        Returns:
            Counts after the insert.
        """
        with self._lock:
            self._connections[connection_id] = Connection(
                id=connection_id, websocket=websocket
            )
            counts = self._counts()

        logger.debug(
            f"websocket object ({id(websocket)}) added to registry "
            f"with id {connection_id}"
        )
        return counts

    def remove(self, connection_id: str) -> RegistryCounts:
        """
        Remove a connection if present.

        Idempotent: a close following an error for the same connection
        leaves the registry untouched.

        Args:
            connection_id: Id of the connection to remove.

        Returns:
            Counts after the removal.
        """
        _, counts = self.pop(connection_id)
        return counts

    def pop(
        self, connection_id: str
    ) -> tuple[Connection | None, RegistryCounts]:
        """
        Remove a connection if present and return its entry.

        Returns:
            The removed entry (None if it was absent) and the counts after
            the removal.
        """
        with self._lock:
            connection = self._connections.pop(connection_id, None)
            counts = self._counts()

        if connection is not None:
            logger.debug(
                f"websocket object ({id(connection.websocket)}) removed from "
                f"registry for id {connection_id}"
            )
        return connection, counts

    def set_bruteforcing(
        self, connection_id: str, value: bool
    ) -> RegistryCounts | None:
        """
        Set the bruteforcing flag of a connection.

        Args:
            connection_id: Id of the connection sending Start/Stop.
            value: New flag value.

        Returns:
            Counts after the mutation, or None if the connection is not
            registered (e.g. the message raced with its disconnect).
        """
        with self._lock:
            connection = self._connections.get(connection_id)
            if connection is None:
                return None
            connection.is_bruteforcing = value
            return self._counts()

    def watching_count(self) -> int:
        with self._lock:
            return len(self._connections)

    def bruteforcing_count(self) -> int:
        with self._lock:
            return self._bruteforcing_count()

    def counts(self) -> RegistryCounts:
        """Both counters from one consistent snapshot."""
        with self._lock:
            return self._counts()

    def is_bruteforcing(self, connection_id: str) -> bool | None:
        """Flag of a connection, or None if it is not registered."""
        with self._lock:
            connection = self._connections.get(connection_id)
            return None if connection is None else connection.is_bruteforcing

    def send_handles(self) -> list[tuple[str, WebSocket]]:
        """
        Snapshot of the send handles of every registered connection.

        Returns:
            List of ``(connection_id, websocket)`` pairs.
        """
        with self._lock:
            return [
                (connection.id, connection.websocket)
                for connection in self._connections.values()
            ]

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._connections

    def __len__(self) -> int:
        return self.watching_count()

    # Callers must hold self._lock

    def _bruteforcing_count(self) -> int:
        return sum(
            1
            for connection in self._connections.values()
            if connection.is_bruteforcing
        )

    def _counts(self) -> RegistryCounts:
        return RegistryCounts(
            watching=len(self._connections),
            bruteforcing=self._bruteforcing_count(),
        )


connection_registry = ConnectionRegistry()
