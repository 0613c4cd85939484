# Shared fixtures for the routing, protocol and tool tests

import os
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

os.environ["ENV"] = "test"

from feathers_mcp.routing import (  # noqa: E402
    Dispatcher,
    ErrorClassifier,
    HandlerRegistry,
    ParameterValidator,
)
from feathers_mcp.shared.config import reload_config  # noqa: E402


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Every test starts from config/test.yaml without env overrides."""

    def reset():
        monkeypatch.setenv("ENV", "test")
        for name in ("CONFIG_PATH", "TOOL_TIMEOUT_MS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        reload_config()

    reset()
    yield
    reset()


@pytest.fixture
def registry():
    return HandlerRegistry()


@pytest.fixture
def validator():
    return ParameterValidator()


@pytest.fixture
def classifier():
    return ErrorClassifier()


@pytest.fixture
def dispatcher(registry, validator, classifier):
    return Dispatcher(registry, validator, classifier, timeout_ms=1000)


@pytest.fixture
def double_schema():
    return {
        "type": "object",
        "properties": {"x": {"type": "number"}},
        "required": ["x"],
    }
