# Wire models shared by the HTTP and STDIO transports

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from feathers_mcp.routing.types import ToolError


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class MCPInitializeRequest(BaseModel):
    protocol_version: str = "1.0"
    client_info: Dict[str, Any] = Field(default_factory=dict)


class ServerInfo(BaseModel):
    name: str
    version: str


class MCPInitializeResponse(BaseModel):
    protocol_version: str = "1.0"
    server_info: ServerInfo
    capabilities: Dict[str, bool]


class MCPTool(BaseModel):
    """Tool metadata as advertised by ``tools/list``."""

    name: str
    description: str
    input_schema: Dict[str, Any]
    category: str = "support"


class MCPToolsListResponse(BaseModel):
    tools: List[MCPTool]


class MCPToolCallRequest(BaseModel):
    name: str
    arguments: Optional[Dict[str, Any]] = None


class MCPToolCallResponse(BaseModel):
    """
    Result of ``tools/call``.

    ``is_error`` mirrors the MCP result flag; ``error`` carries the classified
    code, message and details so HTTP clients do not have to parse text.
    """

    content: List[TextBlock]
    is_error: bool = False
    metadata: Optional[Dict[str, Any]] = None
    error: Optional[ToolError] = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    tools: int
    timeout_ms: int
