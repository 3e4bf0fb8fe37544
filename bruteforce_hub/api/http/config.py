"""Client configuration endpoint."""

from fastapi import APIRouter, Request
from pydantic import BaseModel

from bruteforce_hub.settings import app_settings

router = APIRouter()


class ClientConfigResponse(BaseModel):
    """Configuration fetched by the browser client before connecting."""

    ws_url: str


@router.get(
    "/config.json",
    response_model=ClientConfigResponse,
    summary="Client configuration",
    tags=["config"],
)
async def client_config(request: Request) -> ClientConfigResponse:
    """
    Tell the browser client where the WebSocket lives.

    Uses WS_PUBLIC_URL when configured. Otherwise the URL is derived from
    the request, so a client served over https gets a wss:// URL.
    """
    if app_settings.WS_PUBLIC_URL:
        return ClientConfigResponse(ws_url=app_settings.WS_PUBLIC_URL)

    scheme = "wss" if request.url.scheme == "https" else "ws"
    return ClientConfigResponse(
        ws_url=f"{scheme}://{request.url.netloc}{app_settings.WS_PATH}"
    )
