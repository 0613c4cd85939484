"""Tool-call dispatch and validation backend for the FeathersJS documentation MCP server."""

__version__ = "0.1.0"
