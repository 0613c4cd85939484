# Built-in tools
from typing import Iterable, Optional

from feathers_mcp.mcp_server.catalog import ToolCatalog, ToolSpec
from feathers_mcp.routing.registry import HandlerRegistry

from .base import BaseTool
from .list_tools import ListToolsTool, builtin_tools


def build_default_catalog(
    registry: Optional[HandlerRegistry] = None,
    extra_specs: Iterable[ToolSpec] = (),
) -> ToolCatalog:
    """
    Build the catalog served at startup.

    ``extra_specs`` is where externally provided tools (docs search, code
    validation, scaffolding) are plugged in; the built-in tools are always
    registered first.
    """
    catalog = ToolCatalog(registry)
    for tool in builtin_tools(catalog):
        catalog.add(tool.spec())
    for spec in extra_specs:
        catalog.add(spec)
    return catalog


__all__ = ["BaseTool", "ListToolsTool", "build_default_catalog", "builtin_tools"]
