"""
Transport-neutral handlers for MCP ``tools/list`` and ``tools/call``.

Both the STDIO server and the HTTP app wrap these, so the two transports
return the same payloads.
"""

import json
from typing import Any, Awaitable, Callable, Dict, List, Optional

from feathers_mcp.routing.dispatcher import Dispatcher
from feathers_mcp.routing.types import ToolRequest, ToolResponse

from .catalog import ToolCatalog
from .models import MCPToolCallResponse, MCPToolsListResponse, TextBlock

ListToolsFn = Callable[[], Awaitable[MCPToolsListResponse]]
CallToolFn = Callable[[str, Optional[Dict[str, Any]]], Awaitable[MCPToolCallResponse]]


def _text_block(text: str) -> TextBlock:
    return TextBlock(text=text)


def _content_blocks(data: Any) -> List[TextBlock]:
    if isinstance(data, dict) and isinstance(data.get("content"), str):
        return [_text_block(data["content"])]
    if isinstance(data, str):
        return [_text_block(data)]
    return [_text_block(json.dumps(data, sort_keys=True, default=str))]


def format_response(response: ToolResponse) -> MCPToolCallResponse:
    if response.success:
        data = response.data
        metadata = data.get("metadata") if isinstance(data, dict) else None
        return MCPToolCallResponse(
            content=_content_blocks(data),
            metadata=metadata if isinstance(metadata, dict) else None,
        )
    return MCPToolCallResponse(
        content=[_text_block(response.error.message)],
        is_error=True,
        error=response.error,
    )


def list_tools_handler(catalog: ToolCatalog) -> ListToolsFn:
    async def list_tools() -> MCPToolsListResponse:
        return MCPToolsListResponse(tools=catalog.list_tools())

    return list_tools


def call_tool_handler(dispatcher: Dispatcher) -> CallToolFn:
    async def call_tool(
        name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> MCPToolCallResponse:
        if not name:
            raise ValueError("Missing tool name")
        response = await dispatcher.route(
            ToolRequest(tool_name=name, params=arguments if arguments is not None else {})
        )
        return format_response(response)

    return call_tool
