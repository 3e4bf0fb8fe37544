import asyncio

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from bruteforce_hub.logging import logger
from bruteforce_hub.utils.metrics import MetricsCollector


class ConnectionOutbox:
    """
    Outbound frame queue of one connection, drained by its own writer task.

    `put` never awaits, so frames queued by successive registry mutations
    reach the client in the order the mutations happened, whatever the
    speed of other recipients.

    Each send is bounded by `send_timeout`. After the first failed or
    timed-out send the outbox is marked broken and discards everything
    still queued or put later; removing the connection is left to its own
    close or error event.
    """

    def __init__(
        self, connection_id: str, websocket: WebSocket, send_timeout: float
    ) -> None:
        self.connection_id = connection_id
        self.websocket = websocket
        self.send_timeout = send_timeout
        self.broken = False
        self.closed = False
        self._queue: asyncio.Queue[tuple[str, str]] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None

    def put(self, msg_type: str, text: str) -> bool:
        """
        Queue an encoded frame for sending.

        Must be called from the event loop; the writer task is started on
        the first frame.

        Returns:
            False if the frame was discarded because the outbox is closed
            or broken.
        """
        if self.closed or self.broken:
            return False

        self._queue.put_nowait((msg_type, text))
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._writer())
        return True

    async def join(self) -> None:
        """Wait until every queued frame was sent, failed or discarded."""
        await self._queue.join()

    def close(self) -> None:
        """Discard queued frames and stop the writer task."""
        self.closed = True
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
        if self._task is not None:
            self._task.cancel()

    async def _writer(self) -> None:
        while True:
            msg_type, text = await self._queue.get()
            try:
                if not self.broken:
                    await self._send(msg_type, text)
            finally:
                self._queue.task_done()

    async def _send(self, msg_type: str, text: str) -> None:
        try:
            await asyncio.wait_for(
                self.websocket.send_text(text), timeout=self.send_timeout
            )
        except asyncio.TimeoutError:
            self.broken = True
            MetricsCollector.record_ws_broadcast_failure("timeout")
            logger.warning(
                f"Timed out sending {msg_type} to connection "
                f"{self.connection_id} after {self.send_timeout}s, "
                f"discarding its queued frames"
            )
        except (WebSocketDisconnect, ConnectionError, RuntimeError) as e:
            # WebSocketDisconnect: Client disconnected
            # ConnectionError: Network errors
            # RuntimeError: WebSocket already closed
            self.broken = True
            MetricsCollector.record_ws_broadcast_failure("error")
            logger.warning(
                f"Failed to send to connection {id(self.websocket)} "
                f"(id: {self.connection_id}): {e}"
            )
        except Exception as e:
            self.broken = True
            MetricsCollector.record_ws_broadcast_failure("error")
            logger.warning(
                f"Unexpected error sending to connection {id(self.websocket)} "
                f"(id: {self.connection_id}): {e}"
            )
        else:
            MetricsCollector.record_ws_messages_sent()
