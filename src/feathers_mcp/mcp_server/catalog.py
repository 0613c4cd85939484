"""
Protocol-level tool catalog.

The catalog owns what clients see in ``tools/list`` (name, description, input
schema) and feeds each tool's handler and schema into the routing
``HandlerRegistry`` so that ``tools/call`` goes through the dispatcher.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from feathers_mcp.routing.errors import DuplicateRegistrationError
from feathers_mcp.routing.registry import HandlerRegistry, ToolHandler
from feathers_mcp.shared.observability import get_logger

from .models import MCPTool

logger = get_logger(__name__)

TOOL_CATEGORIES = ("search", "generate", "validate", "support", "advanced")


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: Dict[str, Any]
    handler: ToolHandler
    category: str = "support"
    example: str = ""

    def metadata(self) -> MCPTool:
        return MCPTool(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
            category=self.category,
        )


class ToolCatalog:
    def __init__(self, registry: Optional[HandlerRegistry] = None):
        self.registry = registry if registry is not None else HandlerRegistry()
        self._specs: Dict[str, ToolSpec] = {}

    def add(self, spec: ToolSpec) -> None:
        if spec.name in self._specs:
            raise DuplicateRegistrationError(spec.name)
        if spec.category not in TOOL_CATEGORIES:
            raise ValueError(
                f"Unknown category '{spec.category}' for tool '{spec.name}'"
            )
        self.registry.register(spec.name, spec.handler, spec.input_schema)
        self._specs[spec.name] = spec
        logger.info("tool_registered", tool=spec.name, category=spec.category)

    def get(self, name: str) -> Optional[ToolSpec]:
        return self._specs.get(name)

    def has(self, name: str) -> bool:
        return name in self._specs

    def specs(self) -> List[ToolSpec]:
        return list(self._specs.values())

    def list_tools(self) -> List[MCPTool]:
        return [spec.metadata() for spec in self._specs.values()]

    def __len__(self) -> int:
        return len(self._specs)
