from fastapi import APIRouter

from bruteforce_hub.api.ws.websocket import CoordinatorWebSocketEndpoint
from bruteforce_hub.settings import app_settings

router = APIRouter()


@router.websocket_route(app_settings.WS_PATH)
class Web(CoordinatorWebSocketEndpoint):
    """
    Public WebSocket endpoint used by the browser clients.

    Clients receive UsersWatching / UsersBruteforcing counters and relayed
    New discoveries, and send Start, Stop and New.
    """
