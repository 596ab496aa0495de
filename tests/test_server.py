"""Tests for the stdio JSON-RPC server."""
import asyncio
import io
import json

import pytest

from instagram_mcp.server import METHOD_ALIASES


def request(method, params=None, _id=1):
    msg = {"jsonrpc": "2.0", "id": _id, "method": method}
    if params is not None:
        msg["params"] = params
    return json.dumps(msg)


class TestHandleLine:
    @pytest.mark.asyncio
    async def test_initialize(self, server):
        response = await server.handle_line(request("initialize"))
        assert response["result"]["name"] == "instagram-mcp"
        assert set(response["result"]["capabilities"]) == {"tools", "prompts", "resources"}

    @pytest.mark.asyncio
    async def test_blank_line_is_ignored(self, server):
        assert await server.handle_line("   \n") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("line", ["{not json", "[1, 2]"])
    async def test_parse_error(self, server, line):
        response = await server.handle_line(line)
        assert response == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}

    @pytest.mark.asyncio
    async def test_unknown_method(self, server):
        response = await server.handle_line(request("tools.destroy", _id=9))
        assert response["id"] == 9
        assert response["error"] == {"code": -32601, "message": "Method not found: tools.destroy"}

    @pytest.mark.asyncio
    async def test_tools_list_has_both_schema_spellings(self, server):
        tools = (await server.handle_line(request("tools/list")))["result"]
        calculate = next(tool for tool in tools if tool["name"] == "calculate")
        assert calculate["inputSchema"] == calculate["input_schema"]
        assert set(calculate["inputSchema"]["required"]) == {"operation", "a", "b"}
        assert len(tools) == 11

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["tools.call", "tools/call", "tools.invoke", "tools.execute"])
    async def test_tools_call_aliases(self, server, method):
        params = {"name": "calculate", "arguments": {"operation": "add", "a": 15, "b": 25}}
        response = await server.handle_line(request(method, params))
        assert response["result"]["content"] == [{"type": "text", "text": "15 add 25 = 40"}]
        assert response["result"]["payload"] == "15 add 25 = 40"

    @pytest.mark.asyncio
    async def test_structured_payload_is_json_text(self, server):
        params = {"name": "json_utility", "arguments": {"operation": "extract_keys", "json": '{"a": {"b": 1}}'}}
        response = await server.handle_line(request("tools.call", params))
        assert json.loads(response["result"]["content"][0]["text"]) == ["a", "a.b"]
        assert response["result"]["payload"] == ["a", "a.b"]

    @pytest.mark.asyncio
    async def test_failed_call_is_an_error_with_envelope(self, server):
        params = {"name": "calculate", "arguments": {"operation": "divide", "a": 1, "b": 0}}
        response = await server.handle_line(request("tools.call", params, _id=4))
        assert response["id"] == 4
        assert response["error"]["code"] == -32000
        assert response["error"]["message"] == "Division by zero is not allowed"
        assert response["error"]["data"] == {"success": False, "errorMessage": "Division by zero is not allowed"}

    @pytest.mark.asyncio
    async def test_unknown_tool(self, server):
        response = await server.handle_line(request("tools.call", {"name": "nope"}))
        assert response["error"]["message"] == "unknown tool 'nope'"

    @pytest.mark.asyncio
    async def test_prompts(self, server):
        listed = (await server.handle_line(request("prompts.list")))["result"]
        got = await server.handle_line(request("prompts/get", {"name": "greeting", "arguments": {"name": "Bob"}}))
        greeting = next(p for p in listed if p["name"] == "greeting")
        assert greeting["arguments"] == [{"name": "name", "description": "Name to greet", "required": True}]
        message = got["result"]["messages"][0]
        assert message["role"] == "user"
        assert message["content"]["text"] == "Hello, Bob! How can I help you today?"

    @pytest.mark.asyncio
    async def test_resources(self, server):
        listed = (await server.handle_line(request("resources.templates.list")))["result"]
        read = await server.handle_line(request("resources/read", {"uri": "config://dev/api-service"}))
        config = next(r for r in listed if r["uriTemplate"] == "config://{environment}/{service}")
        assert config["mimeType"] == "application/json"
        content = read["result"]["contents"][0]
        assert content["uri"] == "config://dev/api-service"
        assert content["mimeType"] == "application/json"
        assert json.loads(content["text"])["environment"] == "dev"

    @pytest.mark.asyncio
    async def test_non_string_name_and_uri_are_unknown(self, server):
        by_name = await server.handle_line(request("tools.call", {"name": ["x"]}))
        by_uri = await server.handle_line(request("resources.read", {"uri": 42}))
        assert by_name["error"]["message"] == "unknown tool '['x']'"
        assert by_name["error"]["data"]["success"] is False
        assert by_uri["error"]["message"] == "unknown resource '42'"

    @pytest.mark.asyncio
    async def test_unknown_resource(self, server):
        response = await server.handle_line(request("resources.read", {"uri": "ftp://nowhere"}))
        assert response["error"]["message"] == "unknown resource 'ftp://nowhere'"

    @pytest.mark.asyncio
    async def test_debug_lines(self, server):
        out = io.StringIO()
        server._out = out
        server.settings.debug = True
        await server.handle_line(request("capability.list"))
        assert json.loads(out.getvalue()) == {"debug": {"received": "capability.list", "normalized": "capabilities.list"}}

    def test_aliases_point_at_known_methods(self):
        known = {
            "capabilities.list", "tools.list", "tools.call", "prompts.list", "prompts.get",
            "resources.list", "resources.templates.list", "resources.read",
        }
        assert set(METHOD_ALIASES.values()) <= known


@pytest.mark.asyncio
async def test_serve_answers_every_request(server):
    lines = [
        request("initialize", _id=1),
        "",
        request("tools.call", {"name": "hello_world", "arguments": {"name": "Ada"}}, _id=2),
        request("tools.call", {"name": "instagram_get_timeline", "arguments": {"limit": 2}}, _id=3),
        request("shutdown", _id=4),
    ]
    stdin = io.StringIO("\n".join(lines) + "\n")
    stdout = io.StringIO()
    await asyncio.wait_for(server.serve(stdin, stdout), timeout=10)
    responses = {r["id"]: r for r in map(json.loads, stdout.getvalue().splitlines())}
    assert set(responses) == {1, 2, 3, 4}
    assert responses[2]["result"]["payload"] == "Hello, Ada! Welcome to the MCP server."
    assert responses[3]["result"]["payload"] == [{"id": "0"}, {"id": "1"}]
    assert responses[4]["result"] == {"ok": True}
