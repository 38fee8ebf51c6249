"""MCP surface for content discovery.

Exposes the search engine as FastMCP tools. Tools return plain dicts so
agents see the full search report, including on zero results.
"""

import logging
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from opentelemetry.trace import SpanKind

from content_discovery.domain.errors import InvalidQueryError, SearchExhaustedError
from content_discovery.observability import REQUEST_COUNT, REQUEST_LATENCY, create_span, track_latency
from content_discovery.service_layer.search_service import ContentSearchService


logger = logging.getLogger(__name__)


def create_mcp_server(service: ContentSearchService, *, defaults: dict[str, Any] | None = None) -> FastMCP:
    """Create the MCP server exposing search and path-resolution tools."""

    mcp = FastMCP(
        name="Content Discovery",
        instructions=(
            "Find content nodes in a multi-locale content repository. "
            "Call search_content with a loose term and a base path such as /content/mysite; "
            "use list_locale_paths to see which locale subtrees exist beneath a path."
        ),
        mask_error_details=True,
    )
    register_tools(mcp, service, defaults=defaults)
    return mcp


def register_tools(mcp: FastMCP, service: ContentSearchService, *, defaults: dict[str, Any] | None = None) -> None:
    query_defaults = {"limit": 5, "fuzzy_threshold": 0.75, "search_depth": 2, **(defaults or {})}

    @mcp.tool(name="search_content", annotations={"title": "Search Content", "readOnlyHint": True})
    async def search_content(
        term: Annotated[str, "Loose search term, e.g. 'homepage', 'product-page', 'about us'"],
        base_path: Annotated[str, "Repository path to search beneath, e.g. '/content/mysite'"] = "/content",
        limit: Annotated[int | None, "Maximum number of results (default: 5)"] = None,
        fuzzy_threshold: Annotated[float | None, "Acceptance threshold in [0, 1] (default: 0.75)"] = None,
        search_depth: Annotated[int | None, "Listing depth below each searched path (default: 2)"] = None,
        include_inactive: Annotated[bool, "Include deactivated/unpublished nodes"] = False,
        ctx: Context | None = None,
    ) -> dict[str, Any]:
        """Find the content nodes most likely meant by a loosely specified term.

        Searches the base path first, then language-master, country/language
        and direct-locale subtrees, trying exact, variant (camelCase,
        kebab-case, snake_case, stemmed) and fuzzy matching in turn.

        Returns:
            {
                "results": [
                    {"node_path": "/content/mysite/en/homepage", "title": "Homepage", "score": 1.0, ...}
                ],
                "report": {
                    "strategies_used": ["exact"],
                    "paths_explored": ["/content/mysite"],
                    "total_attempts": 1,
                    "confidence": 1.0,
                    "coverage": "minimal",
                    ...
                }
            }
        """
        tool_name = "search_content"
        options = {
            "limit": limit if limit is not None else query_defaults["limit"],
            "fuzzy_threshold": fuzzy_threshold if fuzzy_threshold is not None else query_defaults["fuzzy_threshold"],
            "search_depth": search_depth if search_depth is not None else query_defaults["search_depth"],
            "include_inactive": include_inactive,
        }
        with (
            track_latency(REQUEST_LATENCY, tool=tool_name),
            create_span(
                "mcp.tool.search_content",
                kind=SpanKind.INTERNAL,
                attributes={"search.term": term[:100], "search.base_path": base_path, "mcp.tool.name": tool_name},
            ) as span,
        ):
            try:
                outcome = await service.search_term(term, base_path, **options)
            except InvalidQueryError as exc:
                span.set_attribute("error", True)
                REQUEST_COUNT.labels(tool=tool_name, status="invalid").inc()
                return {"error": str(exc), "details": exc.details}
            except SearchExhaustedError as exc:
                span.set_attribute("error", True)
                logger.warning("search_content exhausted for %s: %s", base_path, exc)
                REQUEST_COUNT.labels(tool=tool_name, status="exhausted").inc()
                return {
                    "error": str(exc),
                    "failures": [error.model_dump(mode="json") for error in exc.errors],
                }

            span.set_attribute("search.result_count", len(outcome.results))
            if ctx is not None:
                await ctx.info(f"Found {len(outcome.results)} matches (coverage: {outcome.report.coverage.value})")
            REQUEST_COUNT.labels(tool=tool_name, status="ok").inc()
            return outcome.model_dump(mode="json")

    @mcp.tool(name="list_locale_paths", annotations={"title": "List Locale Paths", "readOnlyHint": True})
    async def list_locale_paths(
        base_path: Annotated[str, "Repository path, e.g. '/content/mysite'"],
        include_inactive: Annotated[bool, "Probe deactivated/unpublished subtrees too"] = False,
        ctx: Context | None = None,
    ) -> dict[str, Any]:
        """List the locale subtrees that exist beneath a base path, in search order.

        Returns:
            {
                "base_path": "/content/mysite",
                "count": 3,
                "candidates": [
                    {"path": "/content/mysite", "source": "as_given"},
                    {"path": "/content/mysite/us/en", "source": "country_locale"},
                    {"path": "/content/mysite/en", "source": "direct_locale"}
                ]
            }
        """
        tool_name = "list_locale_paths"
        with track_latency(REQUEST_LATENCY, tool=tool_name):
            if not base_path.startswith("/"):
                REQUEST_COUNT.labels(tool=tool_name, status="invalid").inc()
                return {"error": "base_path must be absolute (start with '/')"}
            candidates = await service.path_candidates(base_path, include_inactive=include_inactive)
            REQUEST_COUNT.labels(tool=tool_name, status="ok").inc()
            return {
                "base_path": base_path,
                "count": len(candidates),
                "candidates": [candidate.model_dump(mode="json") for candidate in candidates],
            }
