"""Main ASGI application entry point.

Architecture:
    Starlette App
      ├── /health  → repository reachability
      ├── /metrics → Prometheus exposition
      └── /mcp     → Content Discovery MCP (search_content, list_locale_paths)

Usage:
    OPERATION_MODE=online REPOSITORY_URL=http://localhost:4502 python -m content_discovery.app

    # Or serve a JSON snapshot without a live repository
    OPERATION_MODE=offline SNAPSHOT_PATH=nodes.json python -m content_discovery.app
"""

from contextlib import asynccontextmanager
import logging

from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from content_discovery.adapters import AbstractRepositoryClient, SlingRepositoryClient, SnapshotRepositoryClient
from content_discovery.config import Settings
from content_discovery.domain.errors import RepositoryError
from content_discovery.observability import configure_logging, get_metrics, get_metrics_content_type, init_tracing
from content_discovery.server import create_mcp_server
from content_discovery.service_layer.search_service import ContentSearchService


logger = logging.getLogger(__name__)


def build_repository_client(settings: Settings) -> AbstractRepositoryClient:
    """Create the repository client for the configured operation mode."""
    if settings.is_offline_mode():
        return SnapshotRepositoryClient.from_json_file(settings.snapshot_path)
    logger.info("Using repository at %s", settings.repository_url)
    return SlingRepositoryClient(settings.repository_url, timeout=settings.http_timeout)


def create_app(settings: Settings | None = None, client: AbstractRepositoryClient | None = None) -> Starlette:
    """Create the ASGI application.

    Args:
        settings: Loaded settings (read from the environment when omitted)
        client: Repository client override, mainly for tests

    Returns:
        Starlette application with the MCP server mounted at ``/mcp``
    """
    settings = settings or Settings()
    client = client or build_repository_client(settings)
    service = ContentSearchService.from_settings(client, settings)
    mcp = create_mcp_server(
        service,
        defaults={
            "limit": settings.default_limit,
            "fuzzy_threshold": settings.default_fuzzy_threshold,
            "search_depth": settings.default_search_depth,
        },
    )
    mcp_http_app = mcp.http_app(path="/")

    @asynccontextmanager
    async def lifespan(app: Starlette):
        """Run the FastMCP session manager and close the repository client on exit."""
        app.state.search_service = service
        async with mcp_http_app.lifespan(app):
            try:
                yield
            finally:
                try:
                    await service.aclose()
                except Exception as e:
                    logger.error("Error closing repository client: %s", e, exc_info=True)

    async def health_check(request: Request) -> JSONResponse:
        """Report whether the repository root is reachable."""
        try:
            reachable = await client.exists("/")
        except RepositoryError as exc:
            return JSONResponse(
                {"status": "unhealthy", "mode": settings.operation_mode, "error": exc.to_dict()},
                status_code=503,
            )
        status = "healthy" if reachable else "degraded"
        return JSONResponse({"status": status, "mode": settings.operation_mode}, status_code=200 if reachable else 503)

    async def metrics_endpoint(_: Request) -> Response:
        return Response(content=get_metrics(), media_type=get_metrics_content_type())

    routes: list[Route | Mount] = [
        Route("/health", endpoint=health_check, methods=["GET"]),
        Route("/metrics", endpoint=metrics_endpoint, methods=["GET"]),
        Mount("/mcp", app=mcp_http_app),
    ]
    logger.info("Mounted Content Discovery MCP at /mcp")
    return Starlette(routes=routes, lifespan=lifespan)


def main() -> None:
    """Main entry point for the content discovery server."""
    import uvicorn

    try:
        settings = Settings()
    except ValidationError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Configuration is invalid: %s", exc)
        return

    configure_logging(settings.log_level, settings.log_json)
    init_tracing(resource_attributes={"content.mode": settings.operation_mode})

    app = create_app(settings)
    logger.info("Starting content discovery server on %s:%d", settings.mcp_host, settings.mcp_port)
    logger.info("MCP endpoint: http://%s:%d/mcp", settings.mcp_host, settings.mcp_port)
    uvicorn.run(
        app,
        host=settings.mcp_host,
        port=settings.mcp_port,
        log_level=settings.log_level.lower(),
        log_config=None,  # Keep our logging config
    )


if __name__ == "__main__":
    main()
