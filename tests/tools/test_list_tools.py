import pytest

from feathers_mcp.mcp_server.catalog import ToolSpec
from feathers_mcp.routing import ErrorKind, ToolRequest
from feathers_mcp.routing.dispatcher import Dispatcher
from feathers_mcp.tools import BaseTool, ListToolsTool, build_default_catalog


async def noop(params):
    return {"content": ""}


def _spec(name, category, example=""):
    return ToolSpec(
        name=name,
        description=f"{name} description",
        input_schema={"type": "object"},
        handler=noop,
        category=category,
        example=example,
    )


@pytest.fixture
def catalog():
    return build_default_catalog(
        extra_specs=[
            _spec("search_docs", "search", example='{"query":"hooks"}'),
            _spec("generate_service", "generate"),
        ]
    )


class TestListToolsTool:
    @pytest.mark.asyncio
    async def test_lists_all_tools(self, catalog):
        result = await ListToolsTool(catalog).execute({})

        assert result["content"].startswith("Available tools (3):")
        assert result["metadata"] == {
            "tool": "list_available_tools",
            "count": 3,
            "category": "all",
            "tools": ["list_available_tools", "search_docs", "generate_service"],
        }
        assert "Example: {\"query\":\"hooks\"}" in result["content"]

    @pytest.mark.asyncio
    async def test_filters_by_category(self, catalog):
        result = await ListToolsTool(catalog).execute({"category": "search"})

        assert result["content"].startswith(
            'Available tools in category "search" (1):'
        )
        assert result["metadata"]["tools"] == ["search_docs"]
        assert result["metadata"]["category"] == "search"

    @pytest.mark.asyncio
    async def test_empty_category(self, catalog):
        result = await ListToolsTool(catalog).execute({"category": "validate"})

        assert result["metadata"]["count"] == 0

    @pytest.mark.asyncio
    async def test_none_params(self, catalog):
        result = await ListToolsTool(catalog).execute(None)

        assert result["metadata"]["count"] == 3

    @pytest.mark.asyncio
    async def test_invalid_category_raises(self, catalog):
        with pytest.raises(ValueError, match="Invalid category: nope"):
            await ListToolsTool(catalog).execute({"category": "nope"})


class TestListToolsThroughDispatcher:
    @pytest.mark.asyncio
    async def test_routed_call(self, catalog):
        dispatcher = Dispatcher(catalog.registry, timeout_ms=1000)

        response = await dispatcher.route(
            ToolRequest(tool_name="list_available_tools", params={"category": "generate"})
        )

        assert response.success
        assert response.data["metadata"]["tools"] == ["generate_service"]

    @pytest.mark.asyncio
    async def test_schema_rejects_unknown_category(self, catalog):
        dispatcher = Dispatcher(catalog.registry, timeout_ms=1000)

        response = await dispatcher.route(
            ToolRequest(tool_name="list_available_tools", params={"category": "nope"})
        )

        assert response.error.code == ErrorKind.INVALID_PARAMS
        assert response.error.details["errors"][0]["path"] == "/category"

    @pytest.mark.asyncio
    async def test_schema_rejects_extra_properties(self, catalog):
        dispatcher = Dispatcher(catalog.registry, timeout_ms=1000)

        response = await dispatcher.route(
            ToolRequest(tool_name="list_available_tools", params={"verbose": True})
        )

        assert response.error.code == ErrorKind.INVALID_PARAMS


class TestBaseTool:
    def test_spec_delegates_to_execute(self):
        class Greeter(BaseTool):
            name = "greet"
            description = "Say hello"
            input_schema = {"type": "object"}
            category = "advanced"

            async def execute(self, params):
                return {"content": "hello"}

        tool = Greeter()
        spec = tool.spec()

        assert spec.name == "greet"
        assert spec.category == "advanced"
        assert spec.handler == tool.execute

    def test_abstract_execute(self):
        with pytest.raises(TypeError):
            BaseTool()


def test_default_catalog_contains_builtins():
    catalog = build_default_catalog()

    assert [s.name for s in catalog.specs()] == ["list_available_tools"]
