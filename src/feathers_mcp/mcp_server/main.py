"""
HTTP transport: FastAPI app with health, metrics and MCP REST endpoints.
"""

from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from starlette.responses import Response

from feathers_mcp.routing.dispatcher import Dispatcher
from feathers_mcp.shared.config import get_config, get_settings
from feathers_mcp.shared.observability import (
    get_correlation_id,
    get_logger,
    get_metrics,
    init_tracing,
    set_correlation_id,
    setup_logging,
    setup_metrics,
)
from feathers_mcp.tools import build_default_catalog

from .catalog import ToolCatalog
from .handlers import call_tool_handler, list_tools_handler
from .models import (
    HealthResponse,
    MCPInitializeRequest,
    MCPInitializeResponse,
    MCPToolCallRequest,
    MCPToolCallResponse,
    MCPToolsListResponse,
    ServerInfo,
)

logger = get_logger(__name__)


def create_app(
    catalog: Optional[ToolCatalog] = None,
    dispatcher: Optional[Dispatcher] = None,
) -> FastAPI:
    config = get_config()
    if catalog is None:
        catalog = build_default_catalog()
    if dispatcher is None:
        dispatcher = Dispatcher(catalog.registry)

    app = FastAPI(
        title=config.app.name,
        version=config.app.version,
        description="FeathersJS documentation MCP server",
    )
    app.state.catalog = catalog
    app.state.dispatcher = dispatcher

    list_tools = list_tools_handler(catalog)
    call_tool = call_tool_handler(dispatcher)

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        """Add correlation ID to request context"""
        corr_id = request.headers.get("X-Correlation-ID")
        if not corr_id:
            corr_id = get_correlation_id()
        else:
            set_correlation_id(corr_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = corr_id
        return response

    @app.get("/health", response_model=HealthResponse)
    async def health():
        """Health check endpoint"""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=config.app.version,
            tools=len(catalog),
            timeout_ms=dispatcher.timeout_ms,
        )

    if config.telemetry.metrics_enabled:

        @app.get("/metrics")
        async def metrics():
            """Prometheus metrics endpoint"""
            return Response(
                content=get_metrics(), media_type="text/plain; version=0.0.4"
            )

    @app.post("/mcp/initialize", response_model=MCPInitializeResponse)
    async def mcp_initialize(request: MCPInitializeRequest):
        """Initialize MCP connection"""
        logger.info("MCP initialize request", client_info=request.client_info)
        return MCPInitializeResponse(
            protocol_version="1.0",
            server_info=ServerInfo(name=config.app.name, version=config.app.version),
            capabilities={"tools": True, "prompts": False, "resources": False},
        )

    @app.get("/mcp/tools/list", response_model=MCPToolsListResponse)
    async def mcp_tools_list():
        """List available MCP tools"""
        listing = await list_tools()
        logger.info("MCP tools list request", tool_count=len(listing.tools))
        return listing

    @app.post("/mcp/tools/call", response_model=MCPToolCallResponse)
    async def mcp_tools_call(request: MCPToolCallRequest):
        """Execute an MCP tool"""
        logger.info("MCP tool call request", tool=request.name)
        return await call_tool(request.name, request.arguments)

    return app


def serve() -> None:
    """Console entry point for the HTTP transport."""
    config, settings = get_config(), get_settings()
    setup_logging(config.app.log_level, log_format=config.app.log_format)
    if config.telemetry.metrics_enabled:
        setup_metrics(settings, config.app.version)
    if config.telemetry.tracing_enabled:
        init_tracing(
            settings.otel_service_name,
            config.app.version,
            settings.otel_exporter_otlp_endpoint,
        )
    uvicorn.run(create_app(), host=settings.http_host, port=settings.http_port)


if __name__ == "__main__":
    serve()
