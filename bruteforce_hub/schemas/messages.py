from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated

from bruteforce_hub.api.ws.constants import WsMessageType
from bruteforce_hub.constants import WS_MAX_NUMBER

# Wire field types: no coercion, so "3" or 3.0 is not a number and 5 is
# not a text
WireText = Annotated[str, Field(strict=True)]
WireNumber = Annotated[int, Field(strict=True, ge=0, le=WS_MAX_NUMBER)]


class WsEnvelope(BaseModel):
    """
    Shared shape of every wire message.

    Checked for every kind before the kind's own model, so a field of the
    wrong type is rejected even when that kind does not use it.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    msg_type: str
    text: WireText | None = None
    number: WireNumber | None = None


class BaseWsMessage(BaseModel):
    """
    Common base for every wire message variant.

    Each subclass fixes its kind in ``msg_type`` and declares only the
    fields meaningful for that kind. Variants are immutable and ignore
    fields they do not carry, since clients always send the full record.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    msg_type: ClassVar[WsMessageType]


class UsersWatchingMessage(BaseWsMessage):
    """Number of currently connected users."""

    msg_type: ClassVar[WsMessageType] = WsMessageType.USERS_WATCHING

    number: WireNumber


class UsersBruteforcingMessage(BaseWsMessage):
    """Number of connected users that are currently bruteforcing."""

    msg_type: ClassVar[WsMessageType] = WsMessageType.USERS_BRUTEFORCING

    number: WireNumber


class StartMessage(BaseWsMessage):
    msg_type: ClassVar[WsMessageType] = WsMessageType.START


class StopMessage(BaseWsMessage):
    msg_type: ClassVar[WsMessageType] = WsMessageType.STOP


class NewMessage(BaseWsMessage):
    """
    Discovery report relayed verbatim to every connection.

    ``text`` is optional on the wire; a New message without text is
    accepted but not relayed.
    """

    msg_type: ClassVar[WsMessageType] = WsMessageType.NEW

    text: WireText | None = None


WsMessage = (
    UsersWatchingMessage
    | UsersBruteforcingMessage
    | StartMessage
    | StopMessage
    | NewMessage
)

MESSAGE_MODELS: dict[WsMessageType, type[BaseWsMessage]] = {
    model.msg_type: model
    for model in (
        UsersWatchingMessage,
        UsersBruteforcingMessage,
        StartMessage,
        StopMessage,
        NewMessage,
    )
}
