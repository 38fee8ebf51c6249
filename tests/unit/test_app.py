"""Unit tests for ASGI application wiring."""

from __future__ import annotations

import orjson
import pytest
from starlette.testclient import TestClient

from content_discovery import app as app_module
from content_discovery.adapters import (
    AbstractRepositoryClient,
    RepositoryNode,
    SlingRepositoryClient,
    SnapshotRepositoryClient,
)
from content_discovery.config import Settings
from content_discovery.domain.errors import RepositoryError, RepositoryErrorKind


class UnreachableClient(AbstractRepositoryClient):
    async def exists(self, path: str, include_inactive: bool = True) -> bool:
        raise RepositoryError(RepositoryErrorKind.TIMEOUT, path, "HEAD /.json timed out")

    async def list_children(self, path: str, depth: int, include_inactive: bool) -> list[RepositoryNode]:
        raise RepositoryError(RepositoryErrorKind.TIMEOUT, path)


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "nodes.json"
    path.write_bytes(orjson.dumps([{"path": "/content/mysite/homepage", "title": "Homepage"}]))
    return path


@pytest.mark.unit
def test_build_repository_client_offline(snapshot_file):
    settings = Settings(operation_mode="offline", snapshot_path=str(snapshot_file))

    client = app_module.build_repository_client(settings)

    assert isinstance(client, SnapshotRepositoryClient)
    assert len(client) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_build_repository_client_online():
    settings = Settings(repository_url="http://repository.test:4502/", http_timeout=3)

    client = app_module.build_repository_client(settings)

    assert isinstance(client, SlingRepositoryClient)
    assert client.base_url == "http://repository.test:4502"
    await client.aclose()


@pytest.mark.unit
def test_health_and_metrics_routes(snapshot_file):
    settings = Settings(operation_mode="offline", snapshot_path=str(snapshot_file))
    app = app_module.create_app(settings)

    with TestClient(app) as client:
        health = client.get("/health")
        metrics = client.get("/metrics")

    assert health.status_code == 200
    assert health.json() == {"status": "healthy", "mode": "offline"}
    assert metrics.status_code == 200
    assert metrics.headers["content-type"].startswith("text/plain")
    assert "content_discovery_requests_total" in metrics.text


@pytest.mark.unit
def test_health_reports_unreachable_repository():
    app = app_module.create_app(Settings(), client=UnreachableClient())

    with TestClient(app) as client:
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
    assert response.json()["error"]["kind"] == "timeout"


@pytest.mark.unit
def test_mcp_mounted_and_service_attached(site_client):
    app = app_module.create_app(Settings(), client=site_client)

    assert any(getattr(route, "path", None) == "/mcp" for route in app.routes)
    with TestClient(app) as client:
        assert client.app.state.search_service.client is site_client


@pytest.mark.unit
def test_main_runs_uvicorn(monkeypatch, snapshot_file):
    monkeypatch.setenv("OPERATION_MODE", "offline")
    monkeypatch.setenv("SNAPSHOT_PATH", str(snapshot_file))
    monkeypatch.setenv("MCP_PORT", "15099")
    calls: dict = {}

    def fake_run(app, **kwargs):
        calls["app"] = app
        calls.update(kwargs)

    monkeypatch.setattr("uvicorn.run", fake_run)
    monkeypatch.setattr(app_module, "configure_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(app_module, "init_tracing", lambda **kwargs: None)

    app_module.main()

    assert calls["host"] == "127.0.0.1"
    assert calls["port"] == 15099
    assert calls["log_config"] is None


@pytest.mark.unit
def test_main_stops_on_invalid_settings(monkeypatch):
    monkeypatch.setenv("REPOSITORY_URL", "")
    called = []
    monkeypatch.setattr("uvicorn.run", lambda *args, **kwargs: called.append(True))

    app_module.main()

    assert called == []
