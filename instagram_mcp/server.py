#!/usr/bin/env python3
"""MCP-like server over stdio (one JSON-RPC message per line).

Implements methods:
  - initialize / shutdown
  - capabilities.list
  - tools.list / tools.call
  - prompts.list / prompts.get
  - resources.list / resources.templates.list / resources.read

Each request runs as its own asyncio task, so a slow upload does not hold up
other calls. Responses carry the request id and may arrive out of order.
"""
from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

from . import __version__
from .config import Settings, load_settings
from .dispatcher import Dispatcher
from .envelope import ResultEnvelope
from .instagram import InstagrapiPlatform, SocialPlatform
from .instagram_tools import InstagramTools, register_instagram_tools
from .logging_setup import configure_logging
from .prompts import register_prompts
from .registry import CallKind, HandlerRegistry
from .resources import register_resources
from .staging import TransferPipeline
from .tools import register_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "instagram-mcp"
PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
CALL_FAILED = -32000

# Canonical method names are dotted; slash style and alternate verbs map onto them.
METHOD_ALIASES = {
    "capability.list": "capabilities.list",
    "capabilities/list": "capabilities.list",
    "tools/list": "tools.list",
    "tools/call": "tools.call",
    "tools.invoke": "tools.call",
    "tools.execute": "tools.call",
    "prompts/list": "prompts.list",
    "prompts/get": "prompts.get",
    "resources/list": "resources.list",
    "resources/templates/list": "resources.templates.list",
    "resources/read": "resources.read",
}


def build_registry(
    settings: Settings,
    platform: Optional[SocialPlatform] = None,
    pipeline: Optional[TransferPipeline] = None,
) -> HandlerRegistry:
    """Register every tool, prompt and resource, then freeze the registry."""
    if platform is None:
        platform = InstagrapiPlatform()
    if pipeline is None:
        pipeline = TransferPipeline(settings.staging_dir, settings.download_timeout)
    registry = HandlerRegistry()
    register_tools(registry)
    register_instagram_tools(registry, InstagramTools(platform, pipeline, settings))
    register_prompts(registry)
    register_resources(registry)
    registry.freeze()
    return registry


class McpServer:
    def __init__(self, dispatcher: Dispatcher, settings: Settings):
        self.dispatcher = dispatcher
        self.settings = settings
        self._out: Optional[TextIO] = None

    @property
    def registry(self) -> HandlerRegistry:
        return self.dispatcher.registry

    # ---------------------------------------------------------------- metadata

    def list_capabilities(self) -> Dict[str, Any]:
        return {
            "tools": {
                "list": {"description": "List available tools"},
                "call": {"description": "Invoke a tool by name"},
            },
            "prompts": {
                "list": {"description": "List available prompt templates"},
                "get": {"description": "Render a prompt by name"},
            },
            "resources": {
                "list": {"description": "List resource URI templates"},
                "read": {"description": "Read a resource by URI"},
            },
        }

    def initialize(self, _params) -> Dict[str, Any]:
        return {
            "name": SERVER_NAME,
            "version": __version__,
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": self.list_capabilities(),
        }

    def shutdown(self, _params) -> Dict[str, Any]:
        return {"ok": True}

    def tools_list(self) -> List[Dict[str, Any]]:
        tools = []
        for entry in self.registry.entries(CallKind.TOOL):
            schema = entry.schema.json_schema()
            # Both spellings until clients settle on one.
            tools.append({
                "name": entry.name,
                "description": entry.description,
                "input_schema": schema,
                "inputSchema": schema,
            })
        return tools

    def prompts_list(self) -> List[Dict[str, Any]]:
        return [
            {"name": entry.name, "description": entry.description, "arguments": entry.schema.describe_arguments()}
            for entry in self.registry.entries(CallKind.PROMPT)
        ]

    def resources_list(self) -> List[Dict[str, Any]]:
        return [
            {
                "uriTemplate": entry.name,
                "name": entry.description,
                "mimeType": entry.mime_type,
                "arguments": entry.schema.describe_arguments(),
            }
            for entry in self.registry.entries(CallKind.RESOURCE)
        ]

    # ---------------------------------------------------------------- calls

    async def tools_call(self, params) -> ResultEnvelope:
        params = params or {}
        return await self.dispatcher.dispatch(CallKind.TOOL, params.get("name"), params.get("arguments"))

    async def prompts_get(self, params) -> ResultEnvelope:
        params = params or {}
        return await self.dispatcher.dispatch(CallKind.PROMPT, params.get("name"), params.get("arguments"))

    async def resources_read(self, params) -> ResultEnvelope:
        return await self.dispatcher.read_resource((params or {}).get("uri"))

    def _tool_result(self, envelope: ResultEnvelope, params) -> Dict[str, Any]:
        return {"content": envelope.to_content(), "payload": envelope.to_wire()["payload"], "isError": False}

    def _prompt_result(self, envelope: ResultEnvelope, params) -> Dict[str, Any]:
        entry = self.registry.resolve(CallKind.PROMPT, params["name"])
        return {
            "description": entry.description,
            "messages": [{"role": "user", "content": {"type": "text", "text": envelope.payload_text()}}],
        }

    def _resource_result(self, envelope: ResultEnvelope, params) -> Dict[str, Any]:
        uri = params["uri"]
        entry, _ = self.dispatcher.match_resource(uri)
        return {"contents": [{"uri": uri, "mimeType": entry.mime_type, "text": envelope.payload_text()}]}

    # ---------------------------------------------------------------- protocol

    async def handle(self, msg: Dict[str, Any]) -> Dict[str, Any]:
        """Build the JSON-RPC response for one decoded request."""
        _id = msg.get("id")
        original_method = msg.get("method")
        method = METHOD_ALIASES.get(original_method, original_method)
        params = msg.get("params")
        if self.settings.debug:
            self.send({"debug": {"received": original_method, "normalized": method}})

        simple = {
            "initialize": lambda: self.initialize(params),
            "shutdown": lambda: self.shutdown(params),
            "capabilities.list": self.list_capabilities,
            "tools.list": self.tools_list,
            "prompts.list": self.prompts_list,
            "resources.list": self.resources_list,
            "resources.templates.list": self.resources_list,
        }
        calls = {
            "tools.call": (self.tools_call, self._tool_result),
            "prompts.get": (self.prompts_get, self._prompt_result),
            "resources.read": (self.resources_read, self._resource_result),
        }
        if method in simple:
            return {"jsonrpc": "2.0", "id": _id, "result": simple[method]()}
        if method not in calls:
            return _error(_id, METHOD_NOT_FOUND, f"Method not found: {original_method}")

        call, shape = calls[method]
        envelope = await call(params)
        if not envelope.success:
            return _error(_id, CALL_FAILED, envelope.error_message, envelope.to_wire())
        return {"jsonrpc": "2.0", "id": _id, "result": shape(envelope, params)}

    async def handle_line(self, line: str) -> Optional[Dict[str, Any]]:
        line = line.strip()
        if not line:
            return None
        try:
            msg = json.loads(line)
        except json.JSONDecodeError:
            return _error(None, PARSE_ERROR, "Parse error")
        if not isinstance(msg, dict):
            return _error(None, PARSE_ERROR, "Parse error")
        try:
            return await self.handle(msg)
        except Exception as exc:
            logger.exception("Request failed: %s", msg.get("method"))
            return _error(msg.get("id"), CALL_FAILED, str(exc))

    def send(self, obj: Dict[str, Any]) -> None:
        out = self._out or sys.stdout
        out.write(json.dumps(obj, default=str) + "\n")
        out.flush()

    async def _respond(self, line: str) -> None:
        response = await self.handle_line(line)
        if response is not None:
            self.send(response)

    async def serve(self, stdin: TextIO, stdout: TextIO) -> None:
        self._out = stdout
        loop = asyncio.get_running_loop()
        pending = set()
        while True:
            line = await loop.run_in_executor(None, stdin.readline)
            if not line:
                break
            task = asyncio.create_task(self._respond(line))
            pending.add(task)
            task.add_done_callback(pending.discard)
        if pending:
            await asyncio.gather(*pending)


def _error(_id, code: int, message: Optional[str], data: Any = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": _id, "error": error}


def create_server(
    settings: Optional[Settings] = None,
    platform: Optional[SocialPlatform] = None,
    pipeline: Optional[TransferPipeline] = None,
) -> McpServer:
    settings = settings or load_settings()
    return McpServer(Dispatcher(build_registry(settings, platform, pipeline)), settings)


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    server = create_server(settings)
    # Banner goes to stderr so stdout stays pure protocol. MCP_SERVER_QUIET turns it off.
    if not settings.quiet:
        print(
            f"[{SERVER_NAME}] ready (methods: initialize, tools.list, tools.call, "
            "prompts.list, prompts.get, resources.list, resources.read)",
            file=sys.stderr,
        )
        sys.stderr.flush()
    asyncio.run(server.serve(sys.stdin, sys.stdout))


if __name__ == "__main__":
    main()
