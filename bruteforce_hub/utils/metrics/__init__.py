"""
Prometheus metrics definitions and utilities.

Metrics are re-exported here so callers can import them from one place:

    from bruteforce_hub.utils.metrics import ws_connections_active

New code should prefer the MetricsCollector facade:

    from bruteforce_hub.utils.metrics import MetricsCollector
    MetricsCollector.record_ws_message_received("Start")
"""

from prometheus_client import Gauge

from bruteforce_hub.utils.metrics._helpers import _get_or_create
from bruteforce_hub.utils.metrics.collector import MetricsCollector
from bruteforce_hub.utils.metrics.websocket import (
    ws_broadcast_failures_total,
    ws_connections_active,
    ws_connections_total,
    ws_message_processing_duration_seconds,
    ws_messages_received_total,
    ws_messages_sent_total,
    ws_users_bruteforcing,
    ws_users_watching,
)

app_info = _get_or_create(
    Gauge,
    "app_info",
    "Application information",
    ("version", "python_version", "environment"),
)

__all__ = [
    "MetricsCollector",
    "app_info",
    "ws_connections_active",
    "ws_connections_total",
    "ws_messages_received_total",
    "ws_messages_sent_total",
    "ws_broadcast_failures_total",
    "ws_message_processing_duration_seconds",
    "ws_users_watching",
    "ws_users_bruteforcing",
]
