"""Tests for the metrics HTTP endpoint."""

from fastapi import Depends
from fastapi.testclient import TestClient
from sticktable_exporter.api.deps import get_app_settings, get_render_config, get_scraper
from sticktable_exporter.api.main import create_app
from sticktable_exporter.clients import ControlSocketClient
from sticktable_exporter.config import Settings
from sticktable_exporter.core.errors import ControlSocketConnectionError
from sticktable_exporter.haproxy import TableScraper
from sticktable_exporter.metrics import RenderConfig


class FakeControlSocket:
    def __init__(self, responses: dict[str, str]) -> None:
        self.responses = responses

    async def execute(self, command: str) -> str:
        if command not in self.responses:
            raise ControlSocketConnectionError("could not connect to control socket")
        return self.responses[command]


RESPONSES = {
    "show table": "# table: tbl1, type: ip, size:100, used:2\n",
    "show table tbl1": (
        "# table: tbl1, type: ip, size:100, used:2\n"
        "0xAB: key=10.0.0.1 gpc0=3\n"
        "0xCD: key=10.0.0.2 gpc0=0\n"
    ),
}


def make_client(responses, **settings_overrides) -> TestClient:
    app = create_app(Settings(**settings_overrides))
    app.dependency_overrides[get_scraper] = lambda: TableScraper(FakeControlSocket(responses))
    return TestClient(app)


class TestMetricsEndpoint:
    def test_success(self):
        client = make_client(RESPONSES)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "connected_ips 2\n" in response.text
        assert "blocked_ips 1\n" in response.text
        assert 'blocked_ip{frontend="tbl1",ip="10.0.0.1"} 3\n' in response.text

    def test_custom_endpoint_path(self):
        client = make_client(RESPONSES, endpoint="/haproxy/metrics")

        assert client.get("/haproxy/metrics").status_code == 200
        assert client.get("/metrics").status_code == 404

    def test_instance_label_from_settings(self):
        client = make_client(RESPONSES, instance="lb1")

        response = client.get("/metrics")

        assert 'connected_ips{instance="lb1"} 2\n' in response.text

    def test_enumeration_failure_returns_500(self):
        client = make_client({})

        response = client.get("/metrics")

        assert response.status_code == 500
        assert response.text == "Internal Server Error\n"
        assert "connected_ips" not in response.text

    def test_table_failure_returns_500(self):
        client = make_client({"show table": RESPONSES["show table"]})

        response = client.get("/metrics")

        assert response.status_code == 500

    def test_unreachable_socket_returns_500(self, tmp_path):
        app = create_app(Settings(socket_path=str(tmp_path / "missing.sock")))

        response = TestClient(app).get("/metrics")

        assert response.status_code == 500


class TestDependencies:
    def test_create_app_keeps_settings_on_state(self):
        settings = Settings(socket_path="/tmp/haproxy.sock", instance="lb1")

        app = create_app(settings)

        assert app.state.settings is settings
        assert app.dependency_overrides == {}

    def test_route_scraper_built_from_app_settings(self, tmp_path):
        sock = tmp_path / "missing.sock"
        app = create_app(Settings(socket_path=str(sock)))
        seen = []

        def capture_scraper(settings: Settings = Depends(get_app_settings)) -> TableScraper:
            seen.append(settings.socket_path)
            return get_scraper(settings)

        app.dependency_overrides[get_scraper] = capture_scraper

        assert TestClient(app).get("/metrics").status_code == 500
        assert seen == [str(sock)]

    def test_get_scraper_uses_socket_settings(self):
        settings = Settings(socket_path="/tmp/haproxy.sock", socket_timeout=2.5)

        scraper = get_scraper(settings)

        assert isinstance(scraper, TableScraper)
        assert isinstance(scraper._client, ControlSocketClient)
        assert scraper._client.socket_path == "/tmp/haproxy.sock"

    def test_get_render_config(self):
        settings = Settings(gpc="gpc1", req_rate="conn_rate(3000)", instance="lb1")

        assert get_render_config(settings) == RenderConfig(
            blocking_field="gpc1",
            request_rate_field="conn_rate(3000)",
            instance="lb1",
        )


def test_health():
    client = make_client({})

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
