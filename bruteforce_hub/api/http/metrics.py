"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from bruteforce_hub.managers.connection_registry import connection_registry
from bruteforce_hub.utils.metrics import MetricsCollector

router = APIRouter()


@router.get(
    "/metrics",
    response_class=Response,
    summary="Prometheus metrics endpoint",
    tags=["metrics"],
)
async def metrics() -> Response:
    """
    Render every registered metric in the Prometheus text format.

    The ws_users_watching and ws_users_bruteforcing gauges are refreshed
    from the registry first, so a scrape between two broadcasts still sees
    the live counters.
    """
    counts = connection_registry.counts()
    MetricsCollector.record_registry_counts(
        watching=counts.watching, bruteforcing=counts.bruteforcing
    )
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
