"""
Dispatcher: validates, executes and formats tool calls.

Per request: lookup -> validate -> execute under deadline -> respond. Every
failure on the way is raised, caught once at the ``route`` boundary and handed
to the ``ErrorClassifier``; the dispatcher never builds a ``ToolError``
itself.
"""

import time
from typing import Optional

from feathers_mcp.shared.config import get_config
from feathers_mcp.shared.observability import get_correlation_id, get_logger
from feathers_mcp.shared.observability.metrics import (
    tool_calls_total,
    tool_duration_seconds,
)
from feathers_mcp.shared.observability.tracing import trace_tool_call

from .deadline import with_deadline
from .errors import ErrorClassifier, UnknownToolError, ValidationFailure
from .registry import HandlerRegistry
from .types import ToolRequest, ToolResponse
from .validator import ParameterValidator

logger = get_logger(__name__)

# Metric label for names that are not registered, to keep label cardinality bounded
UNKNOWN_TOOL_LABEL = "<unknown>"


class Dispatcher:
    def __init__(
        self,
        registry: HandlerRegistry,
        validator: Optional[ParameterValidator] = None,
        classifier: Optional[ErrorClassifier] = None,
        timeout_ms: Optional[int] = None,
    ):
        if timeout_ms is None:
            timeout_ms = get_config().routing.default_timeout_ms
        if timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")
        self.registry = registry
        self.validator = validator or ParameterValidator()
        self.classifier = classifier or ErrorClassifier()
        self.timeout_ms = timeout_ms

    async def route(self, request: ToolRequest) -> ToolResponse:
        """Run one tool call. Never raises; failures are carried in the response."""
        tool_name = request.tool_name
        label = tool_name if self.registry.has(tool_name) else UNKNOWN_TOOL_LABEL
        log = logger.bind(tool=tool_name, correlation_id=get_correlation_id())
        start = time.perf_counter()

        with trace_tool_call(label) as span:
            try:
                response = await self._dispatch(request)
            except Exception as err:
                response = ToolResponse.fail(self.classifier.classify(err))

            duration = time.perf_counter() - start
            if response.success:
                status = "success"
                span.set_attribute("tool.status", "success")
            else:
                status = response.error.code.value
                span.set_attribute("tool.status", "error")
                span.set_attribute("tool.error_code", status)

        tool_calls_total.labels(tool_name=label, status=status).inc()
        tool_duration_seconds.labels(tool_name=label).observe(duration)
        log.info(
            "tool_call_completed",
            status=status,
            duration_ms=round(duration * 1000, 2),
        )
        return response

    async def _dispatch(self, request: ToolRequest) -> ToolResponse:
        entry = self.registry.lookup(request.tool_name)
        if entry is None:
            raise UnknownToolError(request.tool_name)

        validation = self.validator.validate(request.params, entry.schema)
        if not validation.valid:
            raise ValidationFailure(validation.errors)

        params = request.params
        result = await with_deadline(lambda: entry.handler(params), self.timeout_ms)
        return ToolResponse.ok(result)
