"""Unit tests for the content discovery MCP tools."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastmcp import FastMCP
import pytest

from content_discovery.adapters import AbstractRepositoryClient, RepositoryNode
from content_discovery.domain.errors import RepositoryError, RepositoryErrorKind
from content_discovery.server import create_mcp_server, register_tools
from content_discovery.service_layer.search_service import ContentSearchService


class ToolCaptureMCP:
    """Minimal FastMCP stub that records registered tools."""

    def __init__(self) -> None:
        self.tools: dict[str, dict[str, Any]] = {}

    def tool(
        self, name: str, annotations: dict[str, Any] | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.tools[name] = {"func": func, "annotations": annotations or {}}
            return func

        return decorator


class RecordingContext:
    """Simple ctx.info recorder used by FastMCP tools."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    async def info(self, message: str) -> None:
        self.messages.append(message)


class DeniedClient(AbstractRepositoryClient):
    """Every listing is forbidden; only the base path itself is searched."""

    async def exists(self, path: str, include_inactive: bool = True) -> bool:
        return False

    async def list_children(self, path: str, depth: int, include_inactive: bool) -> list[RepositoryNode]:
        raise RepositoryError(RepositoryErrorKind.ACCESS_DENIED, path, "HTTP 403")


def capture_tools(service: ContentSearchService, **kwargs) -> dict[str, dict[str, Any]]:
    mcp = ToolCaptureMCP()
    register_tools(mcp, service, **kwargs)
    return mcp.tools


@pytest.mark.unit
def test_tools_registered_read_only(site_client):
    tools = capture_tools(ContentSearchService(site_client))

    assert set(tools) == {"search_content", "list_locale_paths"}
    for tool in tools.values():
        assert tool["annotations"]["readOnlyHint"] is True


@pytest.mark.unit
def test_create_mcp_server_returns_fastmcp(site_client):
    assert isinstance(create_mcp_server(ContentSearchService(site_client)), FastMCP)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_content_returns_results_and_report(site_client):
    tools = capture_tools(ContentSearchService(site_client))
    ctx = RecordingContext()

    payload = await tools["search_content"]["func"](
        term="homepage", base_path="/content/mysite", limit=1, ctx=ctx
    )

    assert payload["results"][0]["node_path"] == "/content/mysite/homepage"
    assert payload["results"][0]["matched_variant"] == {"text": "homepage", "kind": "original"}
    assert payload["report"]["strategies_used"] == ["exact"]
    assert payload["report"]["coverage"] == "minimal"
    assert ctx.messages == ["Found 1 matches (coverage: minimal)"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_content_uses_configured_defaults(site_client):
    tools = capture_tools(ContentSearchService(site_client), defaults={"limit": 1})

    payload = await tools["search_content"]["func"](term="customer service faq", base_path="/content/support")

    assert [r["node_path"] for r in payload["results"]] == ["/content/support/customer-service-fax"]
    assert payload["report"]["strategies_used"] == ["exact", "enhanced"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_content_reports_exhausted_validation(site_client):
    tools = capture_tools(ContentSearchService(site_client))

    payload = await tools["search_content"]["func"](term="about us", base_path="/content/mysite")

    assert payload["results"] == []
    assert payload["report"]["validation_exhausted"] is True
    assert payload["report"]["retried"] is True
    assert payload["report"]["confidence"] == 0.0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_content_invalid_query(site_client):
    tools = capture_tools(ContentSearchService(site_client))

    payload = await tools["search_content"]["func"](term="  ", base_path="/content/mysite")

    assert "Invalid search query" in payload["error"]
    assert payload["details"][0]["field"] == "term"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_content_all_listings_failed():
    tools = capture_tools(ContentSearchService(DeniedClient()))

    payload = await tools["search_content"]["func"](term="homepage", base_path="/content/mysite")

    assert payload["error"] == "All 3 repository listing attempts failed"
    assert {f["kind"] for f in payload["failures"]} == {"access_denied"}
    assert [f["strategy"] for f in payload["failures"]] == ["exact", "enhanced", "fuzzy"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_locale_paths(site_client):
    tools = capture_tools(ContentSearchService(site_client))

    payload = await tools["list_locale_paths"]["func"](base_path="/content/mysite")

    assert payload == {
        "base_path": "/content/mysite",
        "count": 3,
        "candidates": [
            {"path": "/content/mysite", "source": "as_given"},
            {"path": "/content/mysite/gb/en", "source": "country_locale"},
            {"path": "/content/mysite/de", "source": "direct_locale"},
        ],
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_locale_paths_rejects_relative_path(site_client):
    tools = capture_tools(ContentSearchService(site_client))

    payload = await tools["list_locale_paths"]["func"](base_path="content/mysite")

    assert "absolute" in payload["error"]
