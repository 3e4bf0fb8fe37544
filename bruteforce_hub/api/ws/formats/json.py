"""JSON message format for WebSocket communication."""

import json
from typing import Any

from pydantic import ValidationError

from bruteforce_hub.api.ws.constants import WsMessageType
from bruteforce_hub.constants import WS_BINARY_ENCODING
from bruteforce_hub.exceptions import (
    MessageDecodeError,
    UnknownMessageTypeError,
)
from bruteforce_hub.schemas.messages import (
    MESSAGE_MODELS,
    WsEnvelope,
    WsMessage,
)


class JSONMessageFormat:
    """
    JSON wire format.

    Every message is one JSON object with the keys ``msg_type``, ``text``
    and ``number``. Text frames are used for sending; binary frames holding
    UTF-8 JSON are accepted on receive.
    """

    @property
    def format_name(self) -> str:
        """Format identifier for logging."""
        return "json"

    def decode(self, raw_data: str | bytes) -> WsMessage:
        """
        Parse a raw frame into a message variant.

        Args:
            raw_data: Text frame, or binary frame carrying UTF-8 JSON.

        Returns:
            The validated message variant for the frame's ``msg_type``.

        Raises:
            MessageDecodeError: If the frame is not valid UTF-8, not a JSON
                object, has a ``text`` or ``number`` of the wrong type, or
                fails validation for its message type.
            UnknownMessageTypeError: If ``msg_type`` is not a known kind.
        """
        if isinstance(raw_data, (bytes, bytearray)):
            try:
                raw_data = raw_data.decode(WS_BINARY_ENCODING)
            except UnicodeDecodeError as ex:
                raise MessageDecodeError(f"Invalid UTF-8 frame: {ex}") from ex

        try:
            data = json.loads(raw_data)
        except json.JSONDecodeError as ex:
            raise MessageDecodeError(f"Invalid JSON: {ex}") from ex

        if not isinstance(data, dict):
            raise MessageDecodeError(
                f"Expected JSON object, got {type(data).__name__}"
            )

        if "msg_type" not in data:
            raise MessageDecodeError("Missing msg_type")

        try:
            msg_type = WsMessageType(data["msg_type"])
        except (ValueError, TypeError) as ex:
            raise UnknownMessageTypeError(data["msg_type"]) from ex

        try:
            WsEnvelope.model_validate(data)
            return MESSAGE_MODELS[msg_type].model_validate(data)
        except ValidationError as ex:
            raise MessageDecodeError(
                f"Invalid {msg_type.value} message: {ex.error_count()} error(s)"
            ) from ex

    def to_dict(self, message: WsMessage) -> dict[str, Any]:
        """
        Full wire record for a message variant.

        Fields the variant does not carry are emitted as ``null``.
        """
        return {
            "msg_type": message.msg_type.value,
            "text": None,
            "number": None,
            **message.model_dump(mode="json"),
        }

    def encode(self, message: WsMessage) -> str:
        """
        Serialize a message variant to a JSON text frame.

        Args:
            message: Message to serialize.

        Returns:
            JSON string ready for websocket.send_text().
        """
        return json.dumps(self.to_dict(message))
