from abc import ABC, abstractmethod
from typing import Any, Dict

from feathers_mcp.mcp_server.catalog import ToolSpec


class BaseTool(ABC):
    """
    Base class for MCP tools.

    Subclasses provide a name, description, JSON Schema for the input and an
    ``execute`` coroutine. ``spec()`` turns the tool into a ``ToolSpec`` that
    can be handed to a ``ToolCatalog``; its handler delegates to ``execute``.
    """

    name: str
    description: str
    input_schema: Dict[str, Any]
    category: str = "support"
    example: str = ""

    @abstractmethod
    async def execute(self, params: Any) -> Dict[str, Any]:
        """Run the tool with parameters already validated against ``input_schema``."""

    def spec(self) -> ToolSpec:
        return ToolSpec(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
            handler=self.execute,
            category=self.category,
            example=self.example,
        )
