# Observability package
from .logging import (
    get_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)
from .metrics import get_metrics, setup_metrics
from .tracing import get_tracer, init_tracing, trace_tool_call

__all__ = [
    "get_logger",
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "init_tracing",
    "get_tracer",
    "trace_tool_call",
    "setup_metrics",
    "get_metrics",
]
