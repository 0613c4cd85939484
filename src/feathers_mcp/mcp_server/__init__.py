# MCP protocol layer: tool catalog, transport-neutral handlers and wire models
from .catalog import TOOL_CATEGORIES, ToolCatalog, ToolSpec
from .handlers import call_tool_handler, format_response, list_tools_handler
from .models import MCPTool, MCPToolCallResponse, MCPToolsListResponse, TextBlock

__all__ = [
    "TOOL_CATEGORIES",
    "ToolCatalog",
    "ToolSpec",
    "call_tool_handler",
    "list_tools_handler",
    "format_response",
    "MCPTool",
    "MCPToolCallResponse",
    "MCPToolsListResponse",
    "TextBlock",
]
