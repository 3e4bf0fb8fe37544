import uuid
from typing import Any

from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket

from bruteforce_hub.constants import (
    WS_INTERNAL_ERROR_CODE,
    WS_NORMAL_CLOSURE_CODE,
)
from bruteforce_hub.logging import clear_log_context, logger, set_log_context
from bruteforce_hub.managers.coordinator import Coordinator, coordinator


class CoordinatorWebSocketEndpoint(WebSocketEndpoint):  # type: ignore[misc]
    """
    WebSocket endpoint that feeds connection lifecycle events to the
    shared Coordinator.

    Every accepted socket gets a fresh connection id. Frames are handed to
    the coordinator raw (text or bytes) in arrival order, one at a time, so
    a single connection's events are never reordered.
    """

    encoding = None  # Frames are decoded by the coordinator's codec
    coordinator: Coordinator = coordinator

    async def dispatch(self) -> None:
        """
        Run the connection lifecycle.

        1. Accepts and registers the socket via on_connect.
        2. Forwards every "websocket.receive" frame to on_receive.
        3. Stops on "websocket.disconnect" and calls on_disconnect.
        4. Any exception raised while receiving or processing is treated
           as a transport error, including one raised while registering:
           the connection is dropped from the registry exactly like a close
           and the error is not re-raised.
        """
        websocket = WebSocket(self.scope, receive=self.receive, send=self.send)
        close_code = WS_NORMAL_CLOSURE_CODE
        error: Exception | None = None

        try:
            await self.on_connect(websocket)
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.receive":
                    await self.on_receive(websocket, self.frame_payload(message))
                elif message["type"] == "websocket.disconnect":
                    close_code = int(message.get("code") or WS_NORMAL_CLOSURE_CODE)
                    break
        except Exception as exc:
            error = exc
        finally:
            if error is not None:
                await self.on_transport_error(websocket, error)
            else:
                await self.on_disconnect(websocket, close_code)

    @staticmethod
    def frame_payload(message: dict[str, Any]) -> str | bytes:
        """
        Extract the payload of a "websocket.receive" message.

        Returns:
            The text of a text frame, or the bytes of a binary frame.
        """
        if message.get("text") is not None:
            return message["text"]
        return message.get("bytes") or b""

    async def on_connect(self, websocket: WebSocket) -> None:
        """
        Accepts the connection, assigns its id and registers it.

        There is no authentication; every client that reaches the route is
        accepted.
        """
        self.connection_id = str(uuid.uuid4())
        set_log_context(connection_id=self.connection_id)

        await websocket.accept()

        await self.coordinator.on_connect(self.connection_id, websocket)
        logger.debug(f"Client connected to websocket {websocket.url.path}")

    async def on_receive(self, websocket: WebSocket, data: str | bytes) -> None:
        await self.coordinator.on_message(self.connection_id, data)

    async def on_disconnect(self, websocket: WebSocket, close_code: int) -> None:
        """
        Removes the connection from the registry after a close.
        """
        await self.coordinator.on_disconnect(self.connection_id)
        logger.debug(f"Client disconnected with code {close_code}")
        clear_log_context()

    async def on_transport_error(
        self, websocket: WebSocket, exc: Exception
    ) -> None:
        """
        Removes the connection from the registry after a failure.
        """
        await self.coordinator.on_transport_error(self.connection_id, exc)
        logger.debug(
            f"Client dropped with code {WS_INTERNAL_ERROR_CODE} after {type(exc).__name__}"
        )
        clear_log_context()
