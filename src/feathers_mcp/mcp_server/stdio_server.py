"""
STDIO MCP server.

stdout carries JSON-RPC frames only; every log line goes to stderr.
"""

from __future__ import annotations

import builtins
import os
import signal
import sys

import anyio
from mcp.server.lowlevel.server import NotificationOptions
from mcp.server.stdio import stdio_server

from feathers_mcp.routing.dispatcher import Dispatcher
from feathers_mcp.shared.config import init_config
from feathers_mcp.shared.observability import get_logger, init_tracing, setup_logging
from feathers_mcp.shared.observability.logging import STDIO_MODE_ENV
from feathers_mcp.tools import build_default_catalog

from .catalog import ToolCatalog
from .mcp_app import build_mcp_server

logger = get_logger(__name__)

_builtin_print = builtins.print


def _stderr_print(*args, **kwargs):
    kwargs.setdefault("file", sys.stderr)
    return _builtin_print(*args, **kwargs)


def _bootstrap_stdio(log_level: str, log_format: str) -> None:
    os.environ.setdefault("PYTHONUNBUFFERED", "1")
    os.environ[STDIO_MODE_ENV] = "1"
    setup_logging(log_level, stream=sys.stderr, log_format=log_format)
    # Stray print() calls must not corrupt the JSON-RPC stream
    builtins.print = _stderr_print


async def _watch_signals(scope: anyio.CancelScope) -> None:
    with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
        async for signum in signals:
            logger.info("Received signal, shutting down", signal=signum)
            scope.cancel()
            return


async def run_stdio_server(dispatcher: Dispatcher, catalog: ToolCatalog) -> None:
    server = build_mcp_server(catalog, dispatcher)
    init_options = server.create_initialization_options(
        notification_options=NotificationOptions()
    )
    async with anyio.create_task_group() as tg:
        tg.start_soon(_watch_signals, tg.cancel_scope)
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, init_options)
        tg.cancel_scope.cancel()


def main() -> None:
    config, settings = init_config()
    _bootstrap_stdio(config.app.log_level, config.app.log_format)
    if config.telemetry.tracing_enabled:
        init_tracing(
            settings.otel_service_name,
            config.app.version,
            settings.otel_exporter_otlp_endpoint,
        )

    catalog = build_default_catalog()
    dispatcher = Dispatcher(
        catalog.registry, timeout_ms=config.routing.default_timeout_ms
    )

    logger.info(
        "Starting feathers MCP server with STDIO transport",
        tools=catalog.registry.names(),
        timeout_ms=dispatcher.timeout_ms,
    )
    try:
        anyio.run(run_stdio_server, dispatcher, catalog)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
