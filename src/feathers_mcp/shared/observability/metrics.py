# Prometheus metrics for the tool dispatch layer

from prometheus_client import Counter, Histogram, Info, generate_latest

from ..config import Settings
from .logging import get_logger

logger = get_logger(__name__)

# ===== Tool call metrics =====
tool_calls_total = Counter(
    "tool_calls_total",
    "Total routed tool calls",
    ["tool_name", "status"],
)

tool_duration_seconds = Histogram(
    "tool_duration_seconds",
    "Tool call duration in seconds, including validation",
    ["tool_name"],
    buckets=(0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

tool_errors_total = Counter(
    "tool_errors_total",
    "Classified tool errors",
    ["code"],
)

# ===== Validator metrics =====
validator_cache_total = Counter(
    "validator_cache_total",
    "Compiled schema validator cache lookups",
    ["result"],  # hit, miss
)

# ===== Deadline metrics =====
abandoned_handlers_total = Counter(
    "abandoned_handlers_total",
    "Handlers that finished after their deadline had already fired",
    ["outcome"],  # completed, failed
)

service_info = Info("feathers_mcp_service", "Service information")


def setup_metrics(settings: Settings, version: str = "0.1.0") -> None:
    """
    Setup Prometheus metrics collection.

    Args:
        settings: Application settings
        version: Service version reported in the info metric
    """
    logger.info("Setting up Prometheus metrics")

    service_info.info(
        {
            "version": version,
            "environment": settings.env,
            "service_name": settings.otel_service_name,
        }
    )


def get_metrics() -> bytes:
    """
    Get current metrics in Prometheus exposition format.

    Returns:
        Metrics as bytes
    """
    return generate_latest()
