"""Tests for the HTTP endpoints: health, metrics and client config."""

import pytest

from bruteforce_hub.settings import app_settings


class TestHealth:
    """Tests for GET /health."""

    def test_health_no_connections(self, client):
        """
        Test health reports healthy with empty counters.

        Args:
            client: FastAPI test client fixture.
        """
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "users_watching": 0,
            "users_bruteforcing": 0,
        }

    def test_health_reads_registry(self, client, registry):
        """Test health counters come from the registry."""
        registry.insert("c1", object())
        registry.insert("c2", object())
        registry.set_bruteforcing("c2", True)

        data = client.get("/health").json()

        assert data["users_watching"] == 2
        assert data["users_bruteforcing"] == 1


class TestMetrics:
    """Tests for GET /metrics."""

    def test_metrics_exposition(self, client):
        """Test metrics are served in Prometheus text format."""
        with client.websocket_connect("/ws") as ws:
            ws.receive_json(), ws.receive_json()

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "ws_connections_total" in response.text
        assert "ws_users_watching" in response.text
        assert "app_info" in response.text

    def test_metrics_report_live_registry_counts(self, client, registry):
        """Test the counter gauges reflect the registry at scrape time."""
        registry.insert("c1", object())
        registry.insert("c2", object())
        registry.set_bruteforcing("c1", True)

        text = client.get("/metrics").text

        assert "ws_users_watching 2.0" in text
        assert "ws_users_bruteforcing 1.0" in text


class TestClientConfig:
    """Tests for GET /config.json."""

    def test_config_derived_from_request(self, client):
        """Test the WebSocket URL follows the request host."""
        response = client.get("/config.json")

        assert response.status_code == 200
        assert response.json() == {
            "ws_url": f"ws://testserver{app_settings.WS_PATH}"
        }

    def test_config_https_uses_wss(self, client):
        """Test clients served over https get a wss:// URL."""
        response = client.get("https://hub.example.org/config.json")

        assert response.json() == {"ws_url": "wss://hub.example.org/ws"}

    def test_config_public_url_override(self, client, monkeypatch):
        """Test WS_PUBLIC_URL wins over the derived URL."""
        monkeypatch.setattr(
            app_settings, "WS_PUBLIC_URL", "wss://public.example.org/hub"
        )

        response = client.get("/config.json")

        assert response.json() == {"ws_url": "wss://public.example.org/hub"}


@pytest.mark.parametrize("path", ["/", "/missing"])
def test_unknown_http_path(client, path):
    """Test paths without a route answer 404."""
    assert client.get(path).status_code == 404
