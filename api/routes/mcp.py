"""MCP (Model Context Protocol) HTTP transport endpoint.

Implements Streamable HTTP transport for network-accessible MCP server.
Spec: https://modelcontextprotocol.io/specification/2025-03-26/basic/transports

Features:
- JSON-RPC 2.0 protocol over HTTP
- SSE (Server-Sent Events) for streaming tool call responses
- No authentication (local network only)
- Tools: standards_list_index, standards_get, standards_search,
  standards_get_metadata, standards_create, standards_update

Usage:
- POST /mcp - Send JSON-RPC requests (returns JSON or SSE stream)
- Clients must include Accept header with application/json and text/event-stream
"""

import asyncio
import json
import logging
from typing import Any, AsyncGenerator, Dict, List, Optional, Type

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field
from pydantic import ValidationError as RequestValidationError

from config import SERVER_NAME, SERVER_VERSION
from models import (
    CreateStandardRequest,
    GetMetadataRequest,
    GetStandardRequest,
    ListIndexRequest,
    SearchRequest,
    UpdateStandardRequest,
)
from routes.deps import get_app_state

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603
PARSE_ERROR = -32700


# JSON-RPC 2.0 Models
class JsonRpcRequest(BaseModel):
    jsonrpc: str = Field(default="2.0", pattern="^2\\.0$")
    id: Optional[int | str] = None
    method: str
    params: Optional[Dict[str, Any]] = None


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class JsonRpcResponse(BaseModel):
    jsonrpc: str = "2.0"
    id: Optional[int | str] = None
    result: Optional[Any] = None
    error: Optional[JsonRpcError] = None


# MCP Protocol Types
class Tool(BaseModel):
    name: str
    title: str
    description: str
    inputSchema: Dict[str, Any]
    annotations: Dict[str, bool]


class ToolListResult(BaseModel):
    tools: List[Tool]


class ToolCallResult(BaseModel):
    content: List[Dict[str, str]]
    structuredContent: Optional[Any] = None
    isError: bool = False


class ToolSpec:
    """Binds a tool name to its request model and handler method"""

    def __init__(self, name: str, title: str, description: str,
                 request_model: Type[BaseModel], handler: str, read_only: bool):
        self.name = name
        self.title = title
        self.description = description
        self.request_model = request_model
        self.handler = handler
        self.read_only = read_only

    def describe(self) -> Tool:
        return Tool(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.request_model.model_json_schema(),
            annotations={
                "readOnlyHint": self.read_only,
                "destructiveHint": not self.read_only,
                "idempotentHint": self.read_only,
                "openWorldHint": False,
            },
        )


# MCP Tools Registry
TOOL_SPECS = [
    ToolSpec(
        name="standards_list_index",
        title="List Standards Index",
        description=(
            "Returns a hierarchical index of all engineering standards, organized by type, tier, "
            "and process. Optional filters: filter_type, filter_tier, filter_process, filter_status."
        ),
        request_model=ListIndexRequest,
        handler="list_index",
        read_only=True,
    ),
    ToolSpec(
        name="standards_get",
        title="Get Standard",
        description=(
            "Retrieves a specific standard by exact path, or every standard matching a type, tier "
            "and process combination (optionally requiring all listed tags)."
        ),
        request_model=GetStandardRequest,
        handler="get",
        read_only=True,
    ),
    ToolSpec(
        name="standards_search",
        title="Search Standards",
        description=(
            "Full-text search across the content and metadata of all standards. Results are ranked "
            "by relevance score and include context snippets around each match."
        ),
        request_model=SearchRequest,
        handler="search",
        read_only=True,
    ),
    ToolSpec(
        name="standards_get_metadata",
        title="Get Standards Metadata",
        description=(
            "Retrieves metadata for standards without loading full content. "
            "Useful for browsing and discovery."
        ),
        request_model=GetMetadataRequest,
        handler="get_metadata",
        read_only=True,
    ),
    ToolSpec(
        name="standards_create",
        title="Create Standard",
        description=(
            "Creates a new standard. Version 1.0.0, created/updated dates and the file path are "
            "generated from the metadata. Fails if a standard already exists at that path."
        ),
        request_model=CreateStandardRequest,
        handler="create",
        read_only=False,
    ),
    ToolSpec(
        name="standards_update",
        title="Update Standard",
        description=(
            "Updates content and/or metadata of an existing standard, bumping its version "
            "(major/minor/patch, default patch). Changing type, tier, process or status renames "
            "the file to its new canonical path. The created date cannot be modified."
        ),
        request_model=UpdateStandardRequest,
        handler="update",
        read_only=False,
    ),
]

TOOLS_BY_NAME = {spec.name: spec for spec in TOOL_SPECS}


async def handle_list_tools() -> ToolListResult:
    """Handle tools/list JSON-RPC method."""
    return ToolListResult(tools=[spec.describe() for spec in TOOL_SPECS])


def _error_result(text: str) -> ToolCallResult:
    return ToolCallResult(content=[{"type": "text", "text": text}], isError=True)


async def handle_call_tool(name: str, arguments: Dict[str, Any], request: Request) -> ToolCallResult:
    """Handle tools/call JSON-RPC method."""
    spec = TOOLS_BY_NAME.get(name)
    if spec is None:
        return _error_result(f"Error: Unknown tool: {name}")

    try:
        tool_request = spec.request_model.model_validate(arguments or {})
    except RequestValidationError as e:
        return _error_result(f"Error: Invalid arguments for {name}: {e}")

    tools = get_app_state(request).get_tools()
    handler = getattr(tools, spec.handler)
    response = await asyncio.to_thread(handler, tool_request)
    return ToolCallResult(
        content=response.content,
        structuredContent=response.structured_content,
        isError=response.is_error,
    )


async def handle_initialize(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Handle initialize JSON-RPC method."""
    return {
        "protocolVersion": "2024-11-05",
        "capabilities": {
            "tools": {},
        },
        "serverInfo": {
            "name": SERVER_NAME,
            "version": SERVER_VERSION,
        },
    }


async def handle_jsonrpc_request(rpc_request: JsonRpcRequest, request: Request) -> JsonRpcResponse:
    """Handle a single JSON-RPC request."""
    method = rpc_request.method
    params = rpc_request.params or {}

    try:
        if method == "initialize":
            result = await handle_initialize(params)
        elif method == "tools/list":
            result = (await handle_list_tools()).model_dump()
        elif method == "tools/call":
            name = params.get("name")
            if not isinstance(name, str) or not name:
                return JsonRpcResponse(
                    id=rpc_request.id,
                    error=JsonRpcError(code=INVALID_PARAMS, message="Invalid params: tool name is required"),
                )
            tool_result = await handle_call_tool(name, params.get("arguments", {}), request)
            result = tool_result.model_dump()
        else:
            return JsonRpcResponse(
                id=rpc_request.id,
                error=JsonRpcError(
                    code=METHOD_NOT_FOUND,
                    message=f"Method not found: {method}",
                ),
            )

        return JsonRpcResponse(id=rpc_request.id, result=result)

    except Exception as e:
        logger.exception("Error handling MCP request %s", method)
        return JsonRpcResponse(
            id=rpc_request.id,
            error=JsonRpcError(
                code=INTERNAL_ERROR,
                message=f"Internal error: {str(e)}",
            ),
        )


def _response_payload(rpc_response: JsonRpcResponse) -> dict:
    """Per JSON-RPC 2.0 spec: success responses must NOT include error field"""
    response_dict = rpc_response.model_dump(exclude_none=True)
    if "result" in response_dict and "error" in response_dict:
        del response_dict["error"]
    return response_dict


async def sse_generator(rpc_response: JsonRpcResponse) -> AsyncGenerator[str, None]:
    """Generate SSE events for streaming response."""
    yield f"data: {json.dumps(_response_payload(rpc_response))}\n\n"


@router.post("/mcp")
async def mcp_endpoint(request: Request):
    """
    MCP Streamable HTTP endpoint.

    Accepts JSON-RPC 2.0 requests and returns either:
    - application/json for single responses
    - text/event-stream for SSE streaming

    Supported methods:
    - initialize: Initialize MCP session
    - tools/list: List available tools
    - tools/call: Call a tool
    """
    accept_header = request.headers.get("accept", "application/json")
    supports_sse = "text/event-stream" in accept_header

    try:
        body = await request.json()
        rpc_request = JsonRpcRequest(**body)
    except Exception as e:
        return JSONResponse(
            status_code=400,
            content={
                "jsonrpc": "2.0",
                "id": None,
                "error": {
                    "code": PARSE_ERROR,
                    "message": f"Parse error: {str(e)}",
                },
            },
        )

    rpc_response = await handle_jsonrpc_request(rpc_request, request)

    if supports_sse and rpc_request.method == "tools/call":
        return StreamingResponse(
            sse_generator(rpc_response),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
            },
        )
    return JSONResponse(content=_response_payload(rpc_response))


@router.get("/mcp")
async def mcp_info():
    """
    Info endpoint for MCP HTTP server.

    Returns server capabilities and connection instructions.
    """
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "protocol": "MCP Streamable HTTP",
        "transport": "HTTP + SSE",
        "authentication": "none (local network only)",
        "tools": [spec.name for spec in TOOL_SPECS],
        "endpoint": "/mcp",
        "usage": {
            "POST": "Send JSON-RPC 2.0 requests",
            "Accept": "application/json, text/event-stream",
        },
    }
