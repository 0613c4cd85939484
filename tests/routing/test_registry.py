import pytest

from feathers_mcp.routing import DuplicateRegistrationError, ToolRequest


async def first_handler(params):
    return "first"


async def second_handler(params):
    return "second"


class TestHandlerRegistry:
    def test_register_and_lookup(self, registry, double_schema):
        registry.register("double", first_handler, double_schema)

        entry = registry.lookup("double")
        assert entry is not None
        assert entry.handler is first_handler
        assert entry.schema == double_schema
        assert registry.has("double")
        assert registry.names() == ["double"]
        assert len(registry) == 1

    def test_lookup_unknown_returns_none(self, registry):
        assert registry.lookup("nope") is None
        assert not registry.has("nope")

    def test_duplicate_registration_rejected(self, registry):
        registry.register("echo", first_handler, {"type": "object"})

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            registry.register("echo", second_handler, {"type": "object"})

        assert str(exc_info.value) == 'Handler for "echo" is already registered'
        assert registry.lookup("echo").handler is first_handler
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_first_registration_still_routes_after_duplicate(
        self, registry, dispatcher
    ):
        registry.register("echo", first_handler, {"type": "object"})
        with pytest.raises(DuplicateRegistrationError):
            registry.register("echo", second_handler, {"type": "object"})

        response = await dispatcher.route(ToolRequest(tool_name="echo", params={}))
        assert response.success
        assert response.data == "first"

    def test_non_callable_handler_rejected(self, registry):
        with pytest.raises(TypeError):
            registry.register("broken", "not a function", {"type": "object"})
        assert not registry.has("broken")

    def test_schema_is_copied_on_register(self, registry, double_schema):
        registry.register("double", first_handler, double_schema)

        double_schema["required"].append("y")
        double_schema["properties"]["y"] = {"type": "string"}

        stored = registry.lookup("double").schema
        assert stored["required"] == ["x"]
        assert "y" not in stored["properties"]
