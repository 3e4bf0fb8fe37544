"""
Prometheus metrics for WebSocket connection monitoring.

This module defines metrics for tracking WebSocket connections, message
rates, broadcast failures and the registry counters pushed to clients.
"""

from prometheus_client import Counter, Gauge, Histogram

from bruteforce_hub.utils.metrics._helpers import _get_or_create

# WebSocket Connection Metrics
ws_connections_active = _get_or_create(
    Gauge,
    "ws_connections_active",
    "Number of active WebSocket connections",
)

ws_connections_total = _get_or_create(
    Counter,
    "ws_connections_total",
    "Total WebSocket connection lifecycle events",
    ("status",),  # accepted, closed, errored
)

ws_messages_received_total = _get_or_create(
    Counter,
    "ws_messages_received_total",
    "Total WebSocket messages received",
    ("msg_type",),  # Start, Stop, New, ..., malformed, unknown
)

ws_messages_sent_total = _get_or_create(
    Counter,
    "ws_messages_sent_total",
    "Total WebSocket messages sent",
)

ws_broadcast_failures_total = _get_or_create(
    Counter,
    "ws_broadcast_failures_total",
    "Total per-recipient broadcast send failures",
    ("reason",),  # timeout, error
)

ws_message_processing_duration_seconds = _get_or_create(
    Histogram,
    "ws_message_processing_duration_seconds",
    "WebSocket message processing duration in seconds",
    ("msg_type",),
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

# Registry Metrics
ws_users_watching = _get_or_create(
    Gauge,
    "ws_users_watching",
    "Users watching, refreshed on broadcast and scrape",
)

ws_users_bruteforcing = _get_or_create(
    Gauge,
    "ws_users_bruteforcing",
    "Users bruteforcing, refreshed on broadcast and scrape",
)


__all__ = [
    "ws_connections_active",
    "ws_connections_total",
    "ws_messages_received_total",
    "ws_messages_sent_total",
    "ws_broadcast_failures_total",
    "ws_message_processing_duration_seconds",
    "ws_users_watching",
    "ws_users_bruteforcing",
]
