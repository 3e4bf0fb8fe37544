"""
Facade for centralized metrics emission.

Provides high-level methods for recording metrics without exposing
Prometheus implementation details to the rest of the codebase.
"""

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


class MetricsCollector:
    """
    Centralized facade for the WebSocket and registry metrics.

    All methods are static for easy use without instantiation.
    """

    # ========== Connection Metrics ==========

    @staticmethod
    def record_ws_connection_accepted() -> None:
        """Record accepted WebSocket connection."""
        ws_connections_total.labels(status="accepted").inc()
        ws_connections_active.inc()

    @staticmethod
    def record_ws_disconnection(errored: bool = False) -> None:
        """
        Record WebSocket disconnection.

        Args:
            errored: True when the connection ended with a transport error.
        """
        ws_connections_total.labels(
            status="errored" if errored else "closed"
        ).inc()
        ws_connections_active.dec()

    # ========== Message Metrics ==========

    @staticmethod
    def record_ws_message_received(msg_type: str) -> None:
        """
        Record WebSocket message received.

        Args:
            msg_type: Message kind, or 'malformed' / 'unknown'.
        """
        ws_messages_received_total.labels(msg_type=msg_type).inc()

    @staticmethod
    def record_ws_messages_sent(count: int = 1) -> None:
        """Record delivered WebSocket messages."""
        ws_messages_sent_total.inc(count)

    @staticmethod
    def record_ws_broadcast_failure(reason: str) -> None:
        """
        Record a failed send to one broadcast recipient.

        Args:
            reason: 'timeout' or 'error'.
        """
        ws_broadcast_failures_total.labels(reason=reason).inc()

    @staticmethod
    def record_ws_message_processing(msg_type: str, duration: float) -> None:
        """
        Record WebSocket message processing duration.

        Args:
            msg_type: Message kind that was processed.
            duration: Processing duration in seconds.
        """
        ws_message_processing_duration_seconds.labels(
            msg_type=msg_type
        ).observe(duration)

    # ========== Registry Metrics ==========

    @staticmethod
    def record_registry_counts(
        watching: int | None = None, bruteforcing: int | None = None
    ) -> None:
        """Update the registry gauges from a counts snapshot."""
        if watching is not None:
            ws_users_watching.set(watching)
        if bruteforcing is not None:
            ws_users_bruteforcing.set(bruteforcing)
