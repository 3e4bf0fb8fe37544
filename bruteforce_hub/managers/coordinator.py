import asyncio
import time

from fastapi import WebSocket

from bruteforce_hub.api.ws.formats import JSONMessageFormat, message_format
from bruteforce_hub.exceptions import (
    MessageDecodeError,
    UnknownMessageTypeError,
)
from bruteforce_hub.logging import logger
from bruteforce_hub.managers.connection_registry import (
    ConnectionRegistry,
    RegistryCounts,
    connection_registry,
)
from bruteforce_hub.managers.outbox import ConnectionOutbox
from bruteforce_hub.schemas.messages import (
    NewMessage,
    StartMessage,
    StopMessage,
    UsersBruteforcingMessage,
    UsersWatchingMessage,
    WsMessage,
)
from bruteforce_hub.settings import app_settings
from bruteforce_hub.utils.metrics import MetricsCollector


class Coordinator:
    """
    Protocol handler shared by every WebSocket connection.

    Each lifecycle hook mutates the registry and queues the resulting
    broadcasts on every recipient's outbox without awaiting in between.
    All hooks run on one event loop, so every client receives counter
    updates in the order the registry mutations happened and the last
    counters it holds always match the registry. The coordinator is the
    only writer of registry state.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        send_timeout: float | None = None,
        codec: JSONMessageFormat | None = None,
    ) -> None:
        """
        Args:
            registry: Registry shared by all connections.
            send_timeout: Upper bound in seconds for one send to one
                recipient. Defaults to WS_SEND_TIMEOUT_SECONDS.
            codec: Wire format used to encode broadcasts and decode
                incoming frames.
        """
        self.registry = registry
        self.send_timeout = (
            send_timeout
            if send_timeout is not None
            else app_settings.WS_SEND_TIMEOUT_SECONDS
        )
        self.codec = codec or message_format
        self._outboxes: dict[str, ConnectionOutbox] = {}

    async def on_connect(self, connection_id: str, websocket: WebSocket) -> None:
        """
        Register a new connection and announce the updated counters.

        Args:
            connection_id: Unique id assigned by the transport.
            websocket: The accepted connection.
        """
        counts = self.registry.insert(connection_id, websocket)
        self.broadcast_counts(counts)
        MetricsCollector.record_ws_connection_accepted()
        logger.info(
            f"Client connected, watching={counts.watching} "
            f"bruteforcing={counts.bruteforcing}"
        )

    async def on_disconnect(self, connection_id: str) -> None:
        """
        Drop a closed connection and announce the updated counters.

        Args:
            connection_id: Id of the connection that closed.
        """
        self._drop(connection_id, errored=False)

    async def on_transport_error(
        self, connection_id: str, exc: BaseException | None = None
    ) -> None:
        """
        Handle a failed connection exactly like a graceful close.

        Args:
            connection_id: Id of the connection whose channel failed.
            exc: The transport error, used for logging only.
        """
        if exc is not None:
            logger.warning(f"Transport error on connection: {exc!r}")
        self._drop(connection_id, errored=True)

    async def on_message(self, connection_id: str, raw_data: str | bytes) -> None:
        """
        Decode one incoming frame and act on it.

        Malformed frames and unknown message kinds are dropped without any
        broadcast. Messages that only make sense server -> client are
        ignored.

        Args:
            connection_id: Id of the sending connection.
            raw_data: Frame payload, text or binary.
        """
        try:
            message = self.codec.decode(raw_data)
        except UnknownMessageTypeError as ex:
            MetricsCollector.record_ws_message_received("unknown")
            logger.debug(f"Ignoring message: {ex.message}")
            return
        except MessageDecodeError as ex:
            MetricsCollector.record_ws_message_received("malformed")
            logger.debug(f"Dropping malformed message: {ex.message}")
            return

        msg_type = message.msg_type.value
        MetricsCollector.record_ws_message_received(msg_type)
        start_time = time.perf_counter()

        if isinstance(message, NewMessage):
            self._relay_discovery(message)
        elif isinstance(message, StartMessage):
            self._set_bruteforcing(connection_id, True)
        elif isinstance(message, StopMessage):
            self._set_bruteforcing(connection_id, False)
        else:
            logger.debug(f"Ignoring client message of type {msg_type}")

        MetricsCollector.record_ws_message_processing(
            msg_type, time.perf_counter() - start_time
        )

    def broadcast_counts(self, counts: RegistryCounts) -> None:
        """Queue UsersWatching then UsersBruteforcing for every connection."""
        MetricsCollector.record_registry_counts(
            watching=counts.watching, bruteforcing=counts.bruteforcing
        )
        self.broadcast(UsersWatchingMessage(number=counts.watching))
        self.broadcast(UsersBruteforcingMessage(number=counts.bruteforcing))

    def broadcast(self, message: WsMessage) -> int:
        """
        Queue a message for every connection currently in the registry.

        The message is encoded once and put on the outbox of each
        connection in a snapshot of the registry. Sending happens in the
        outboxes' writer tasks, so a failing or slow recipient never delays
        or aborts delivery to the others and nothing is raised here.

        Args:
            message: Message to broadcast.

        Returns:
            Number of recipients the message was queued for.
        """
        recipients = self.registry.send_handles()
        if not recipients:
            return 0

        text = self.codec.encode(message)
        msg_type = message.msg_type.value

        return sum(
            1
            for connection_id, websocket in recipients
            if self._outbox(connection_id, websocket).put(msg_type, text)
        )

    async def drain(self) -> None:
        """Wait until every queued frame was sent, failed or discarded."""
        await asyncio.gather(
            *[outbox.join() for outbox in list(self._outboxes.values())]
        )

    def close(self) -> None:
        """Stop every writer task and discard frames not yet sent."""
        for outbox in self._outboxes.values():
            outbox.close()
        self._outboxes.clear()

    def _outbox(self, connection_id: str, websocket: WebSocket) -> ConnectionOutbox:
        outbox = self._outboxes.get(connection_id)
        if outbox is None or outbox.websocket is not websocket:
            if outbox is not None:
                outbox.close()
            outbox = ConnectionOutbox(connection_id, websocket, self.send_timeout)
            self._outboxes[connection_id] = outbox
        return outbox

    def _drop(self, connection_id: str, errored: bool) -> None:
        connection, counts = self.registry.pop(connection_id)
        outbox = self._outboxes.pop(connection_id, None)
        if outbox is not None:
            outbox.close()
        self.broadcast_counts(counts)

        if connection is not None:
            MetricsCollector.record_ws_disconnection(errored=errored)
        logger.info(
            f"Client {'errored' if errored else 'disconnected'}, "
            f"watching={counts.watching} bruteforcing={counts.bruteforcing}"
        )

    def _relay_discovery(self, message: NewMessage) -> None:
        if message.text is None:
            logger.debug("Ignoring New message without text")
            return
        logger.info(f"Relaying discovery {message.text!r}")
        self.broadcast(NewMessage(text=message.text))

    def _set_bruteforcing(self, connection_id: str, value: bool) -> None:
        counts = self.registry.set_bruteforcing(connection_id, value)
        if counts is None:
            logger.debug(
                f"Ignoring {'Start' if value else 'Stop'} from unregistered "
                f"connection {connection_id}"
            )
            return
        self.broadcast(UsersBruteforcingMessage(number=counts.bruteforcing))
        MetricsCollector.record_registry_counts(bruteforcing=counts.bruteforcing)


coordinator = Coordinator(connection_registry)
