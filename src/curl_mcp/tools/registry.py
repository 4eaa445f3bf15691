"""MCP tool registration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import mcp.types as types

from curl_mcp.tools.handlers import execute_tool
from curl_mcp.tools.schemas import CURL_COMMAND_EXAMPLE
from curl_mcp.tools.types import DEFAULT_TIMEOUT_MS

if TYPE_CHECKING:
    from mcp.server import Server

    from curl_mcp.tools.curl import HttpClient

logger = logging.getLogger(__name__)


# Tool descriptions
EXECUTE_CURL_DESCRIPTION: str = (
    "Parse and execute a curl command string. Supports common curl options "
    "including -X (method), -H (headers), -d/--data (body), -u/--user "
    "(basic auth). Returns the full HTTP response including status, headers, "
    "and body."
)

HTTP_REQUEST_DESCRIPTION: str = (
    "Make a structured HTTP request with explicit parameters. Supports all "
    "common HTTP methods, custom headers, request body, and authentication "
    "(Basic Auth and Bearer tokens). Returns the full HTTP response including "
    "status, headers, and body."
)

HTTP_METHOD_ENUM: list[str] = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def tool_definitions() -> list[types.Tool]:
    """Return the tools exposed by the server."""
    return [
        types.Tool(
            name="execute_curl",
            description=EXECUTE_CURL_DESCRIPTION,
            inputSchema={
                "type": "object",
                "properties": {
                    "curlCommand": {
                        "type": "string",
                        "description": (
                            f"The curl command to execute (e.g., {CURL_COMMAND_EXAMPLE})"
                        ),
                    },
                },
                "required": ["curlCommand"],
            },
        ),
        types.Tool(
            name="http_request",
            description=HTTP_REQUEST_DESCRIPTION,
            inputSchema={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "The URL to send the request to",
                    },
                    "method": {
                        "type": "string",
                        "enum": HTTP_METHOD_ENUM,
                        "description": "HTTP method to use",
                        "default": "GET",
                    },
                    "headers": {
                        "type": "object",
                        "description": "Custom headers to include in the request",
                        "additionalProperties": {"type": "string"},
                    },
                    "body": {
                        "type": "string",
                        "description": "Request body (for POST, PUT, PATCH methods)",
                    },
                    "auth": {
                        "type": "object",
                        "description": "Authentication configuration",
                        "properties": {
                            "type": {
                                "type": "string",
                                "enum": ["basic", "bearer", "none"],
                                "description": "Authentication type",
                            },
                            "username": {
                                "type": "string",
                                "description": "Username for basic auth",
                            },
                            "password": {
                                "type": "string",
                                "description": "Password for basic auth",
                            },
                            "token": {
                                "type": "string",
                                "description": "Token for bearer auth",
                            },
                        },
                    },
                    "timeout": {
                        "type": "integer",
                        "description": "Request timeout in milliseconds",
                        "default": DEFAULT_TIMEOUT_MS,
                    },
                    "followRedirects": {
                        "type": "boolean",
                        "description": "Whether to follow HTTP redirects",
                        "default": True,
                    },
                },
                "required": ["url"],
            },
        ),
    ]


def register_tools(server: Server, client: HttpClient) -> None:
    """Register all MCP tools with the server.

    Args:
        server: The MCP server instance.
        client: Shared HTTP client used by every tool call.
    """

    @server.list_tools()  # type: ignore[misc]
    async def list_tools() -> list[types.Tool]:
        """Return the list of available tools."""
        return tool_definitions()

    # Arguments are validated by the pydantic schemas so that failures come
    # back in the {success, error, details} shape.
    @server.call_tool(validate_input=False)  # type: ignore[misc]
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        """Handle tool execution.

        Args:
            name: The tool name.
            arguments: The tool arguments.

        Returns:
            Tool result, flagged as an error when the call failed.
        """
        logger.info(f"[TOOL] Executing {name}...")
        result = await execute_tool(name, arguments, client)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=result.output)],
            isError=result.is_error,
        )
