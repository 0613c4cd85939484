import pytest
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from prometheus_client import REGISTRY

from feathers_mcp.routing import Dispatcher, HandlerRegistry, ToolRequest
from feathers_mcp.shared.config import get_settings
from feathers_mcp.shared.observability import get_metrics, init_tracing, setup_metrics


async def ping(params):
    return {"content": "pong"}


def _sample(name, labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.asyncio
async def test_route_records_call_and_error_metrics():
    registry = HandlerRegistry()
    registry.register("ping", ping, {"type": "object"})
    dispatcher = Dispatcher(registry, timeout_ms=1000)

    ok_before = _sample("tool_calls_total", {"tool_name": "ping", "status": "success"})
    unknown_before = _sample(
        "tool_calls_total", {"tool_name": "<unknown>", "status": "INTERNAL_ERROR"}
    )
    errors_before = _sample("tool_errors_total", {"code": "INVALID_PARAMS"})

    await dispatcher.route(ToolRequest(tool_name="ping", params={}))
    await dispatcher.route(ToolRequest(tool_name="ghost", params={}))
    await dispatcher.route(ToolRequest(tool_name="ping", params=[]))

    assert (
        _sample("tool_calls_total", {"tool_name": "ping", "status": "success"})
        == ok_before + 1
    )
    assert (
        _sample(
            "tool_calls_total", {"tool_name": "<unknown>", "status": "INTERNAL_ERROR"}
        )
        == unknown_before + 1
    )
    assert _sample("tool_errors_total", {"code": "INVALID_PARAMS"}) == errors_before + 1


def test_metrics_exposition_includes_service_info():
    setup_metrics(get_settings(), "9.9.9")

    body = get_metrics().decode("utf-8")

    assert "feathers_mcp_service_info" in body
    assert 'version="9.9.9"' in body
    assert 'environment="test"' in body


@pytest.mark.asyncio
async def test_route_opens_span_with_outcome():
    exporter = InMemorySpanExporter()
    provider = init_tracing("feathers-mcp-test", "0.0.1")
    provider.add_span_processor(SimpleSpanProcessor(exporter))

    registry = HandlerRegistry()
    registry.register("ping", ping, {"type": "object", "required": ["q"]})
    dispatcher = Dispatcher(registry, timeout_ms=1000)

    await dispatcher.route(ToolRequest(tool_name="ping", params={}))

    spans = [s for s in exporter.get_finished_spans() if s.name == "tool.route.ping"]
    assert len(spans) == 1
    assert spans[0].attributes["tool.name"] == "ping"
    assert spans[0].attributes["tool.status"] == "error"
    assert spans[0].attributes["tool.error_code"] == "INVALID_PARAMS"
