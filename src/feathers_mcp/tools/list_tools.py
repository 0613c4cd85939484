"""``list_available_tools``: describes the tools registered in a catalog."""

import json
from typing import Any, Dict, List, Optional

from feathers_mcp.mcp_server.catalog import TOOL_CATEGORIES, ToolCatalog, ToolSpec

from .base import BaseTool


class ListToolsTool(BaseTool):
    name = "list_available_tools"
    description = (
        "List all available MCP tools by category with descriptions, "
        "input schemas, and usage examples."
    )
    category = "support"
    example = '{"name":"list_available_tools","arguments":{"category":"search"}}'
    input_schema = {
        "type": "object",
        "properties": {
            "category": {"type": "string", "enum": list(TOOL_CATEGORIES)},
        },
        "required": [],
        "additionalProperties": False,
    }

    def __init__(self, catalog: ToolCatalog):
        self.catalog = catalog

    async def execute(self, params: Any) -> Dict[str, Any]:
        category = self._normalize_category(params)
        entries = [
            spec
            for spec in self.catalog.specs()
            if category is None or spec.category == category
        ]

        if category:
            header = f'Available tools in category "{category}" ({len(entries)}):'
        else:
            header = f"Available tools ({len(entries)}):"

        return {
            "content": "\n\n".join([header] + [self._describe(e) for e in entries]),
            "metadata": {
                "tool": self.name,
                "count": len(entries),
                "category": category or "all",
                "tools": [e.name for e in entries],
            },
        }

    @staticmethod
    def _describe(spec: ToolSpec) -> str:
        lines = [
            f"Tool: {spec.name}",
            f"Category: {spec.category}",
            f"Description: {spec.description}",
            f"Input Schema: {json.dumps(spec.input_schema, sort_keys=True)}",
        ]
        if spec.example:
            lines.append(f"Example: {spec.example}")
        return "\n".join(lines)

    @staticmethod
    def _normalize_category(params: Any) -> Optional[str]:
        category = (params or {}).get("category")
        if category is not None and category not in TOOL_CATEGORIES:
            raise ValueError(f"Invalid category: {category}")
        return category


def builtin_tools(catalog: ToolCatalog) -> List[BaseTool]:
    return [ListToolsTool(catalog)]
