"""HTTP wrapper for the MCP server.

Exposes the same registry and dispatcher as the stdio server via a simple REST
API using FastAPI.

Endpoints:
  GET /health            -> {"status": "ok"}
  GET /capabilities      -> same structure as initialize()["capabilities"]
  GET /tools             -> list available tools
  GET /prompts           -> list available prompts
  GET /resources         -> list resource URI templates
  POST /tools/call       -> body: {"name": "calculate", "arguments": {"operation": "add", "a": 1, "b": 2}}
  POST /invoke           -> alias of /tools/call
  POST /tools/{name}     -> body: {"arguments": {...}}
  POST /prompts/get      -> body: {"name": "greeting", "arguments": {"name": "Bob"}}
  POST /resources/read   -> body: {"uri": "config://dev/api-service"}

Responses are the plain result envelope ({"success": ..., "payload"/"errorMessage": ...}),
not JSON-RPC.

Run:
  instagram-mcp-http  (uses uvicorn programmatically) OR
  uvicorn instagram_mcp.web_server_wrapper:create_app --factory --reload
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .config import load_settings
from .envelope import ResultEnvelope
from .logging_setup import configure_logging
from .registry import CallKind
from .server import SERVER_NAME, McpServer, create_server

STATUS_BY_ERROR = {
    "NotFoundError": 404,
    "ValidationError": 422,
    "AuthError": 502,
    "CredentialsMissingError": 502,
    "DownloadError": 502,
}


class InvokeRequest(BaseModel):
    name: str = Field(..., description="Tool or prompt name")
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Arguments matching the input schema")


class ToolInvokeRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ReadRequest(BaseModel):
    uri: str = Field(..., description="Resource URI, e.g. config://dev/api-service")


def envelope_response(envelope: ResultEnvelope) -> JSONResponse:
    status = 200 if envelope.success else STATUS_BY_ERROR.get(envelope.error_type, 400)
    return JSONResponse(status_code=status, content=envelope.to_wire())


def create_app(server: Optional[McpServer] = None) -> FastAPI:
    core = server or create_server()
    dispatcher = core.dispatcher
    app = FastAPI(title="MCP Server Wrapper", version=__version__)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/capabilities")
    def get_capabilities():
        return core.list_capabilities()

    @app.get("/tools")
    def list_tools():
        return core.tools_list()

    @app.get("/prompts")
    def list_prompts():
        return core.prompts_list()

    @app.get("/resources")
    def list_resources():
        return core.resources_list()

    @app.post("/tools/call")
    async def call_tool(req: InvokeRequest):
        return envelope_response(await dispatcher.dispatch(CallKind.TOOL, req.name, req.arguments))

    @app.post("/invoke")
    async def invoke(req: InvokeRequest):
        return envelope_response(await dispatcher.dispatch(CallKind.TOOL, req.name, req.arguments))

    @app.post("/tools/{name}")
    async def invoke_tool(name: str, req: ToolInvokeRequest):
        return envelope_response(await dispatcher.dispatch(CallKind.TOOL, name, req.arguments))

    @app.post("/prompts/get")
    async def get_prompt(req: InvokeRequest):
        return envelope_response(await dispatcher.dispatch(CallKind.PROMPT, req.name, req.arguments))

    @app.post("/resources/read")
    async def read_resource(req: ReadRequest):
        return envelope_response(await dispatcher.read_resource(req.uri))

    @app.get("/")
    def root():
        return {
            "name": SERVER_NAME,
            "version": __version__,
            "endpoints": [
                "/", "/health", "/capabilities", "/tools", "/prompts", "/resources",
                "POST /tools/call", "POST /invoke", "POST /tools/{name}",
                "POST /prompts/get", "POST /resources/read",
            ],
        }

    return app


def run():
    """Programmatic entrypoint for the ``instagram-mcp-http`` script."""
    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "instagram_mcp.web_server_wrapper:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":  # pragma: no cover
    run()
