"""
Pytest configuration and fixtures for testing.

This module provides shared fixtures for the connection registry, the
coordinator and the ASGI application.
"""

import os

import pytest

# Set required environment variables for testing before importing app modules
os.environ.setdefault("WS_LISTEN_ADDR", "127.0.0.1:8000")
os.environ.setdefault("LOG_FILE_PATH", os.devnull)


@pytest.fixture
def registry():
    """
    Provides an empty ConnectionRegistry.

    Returns:
        ConnectionRegistry: Fresh registry, not shared with the app.
    """
    from bruteforce_hub.managers.connection_registry import ConnectionRegistry

    return ConnectionRegistry()


@pytest.fixture
def coordinator(registry):
    """
    Provides a Coordinator bound to the `registry` fixture.

    Args:
        registry: Fixture providing the registry

    Returns:
        Coordinator: Coordinator with a short send timeout.
    """
    from bruteforce_hub.managers.coordinator import Coordinator

    return Coordinator(registry, send_timeout=0.2)


@pytest.fixture
def app_coordinator(monkeypatch, registry, coordinator):
    """
    Routes the WebSocket endpoint, /health and /metrics through fresh state.

    The application normally uses the process-wide registry and
    coordinator; tests swap them so scenarios do not leak into each other.

    Yields:
        Coordinator: The coordinator used by the endpoint.
    """
    from bruteforce_hub.api.ws.websocket import CoordinatorWebSocketEndpoint

    monkeypatch.setattr(CoordinatorWebSocketEndpoint, "coordinator", coordinator)
    monkeypatch.setattr(
        "bruteforce_hub.api.http.health.connection_registry", registry
    )
    monkeypatch.setattr(
        "bruteforce_hub.api.http.metrics.connection_registry", registry
    )
    yield coordinator


@pytest.fixture
def client(app_coordinator):
    """
    Provides a TestClient running the full application.

    The client is entered as a context manager so every WebSocket session
    shares one event loop, like connections on a real server.

    Yields:
        TestClient: Started test client.
    """
    from fastapi.testclient import TestClient

    from bruteforce_hub import application

    with TestClient(application()) as test_client:
        yield test_client
