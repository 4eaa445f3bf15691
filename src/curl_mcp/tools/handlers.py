"""Tool handlers for execute_curl and http_request."""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from curl_mcp.errors import CurlParseError
from curl_mcp.tools.curl import HttpClient
from curl_mcp.tools.parser import parse_curl_command
from curl_mcp.tools.schemas import (
    ExecuteCurlInput,
    HttpRequestInput,
    validation_details,
)
from curl_mcp.tools.types import ResponseDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Result of a tool call.

    Attributes:
        output: JSON text returned to the caller.
        is_error: Whether the call failed before a request was executed.
    """

    output: str
    is_error: bool = False


ToolHandler = Callable[[dict[str, Any], HttpClient], Awaitable[ToolResult]]


def to_json(payload: dict[str, Any]) -> str:
    """Format a payload the way tool results are returned."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


def response_result(response: ResponseDescriptor) -> ToolResult:
    """Wrap an executed response; remote failures are not tool errors."""
    return ToolResult(output=to_json(response.to_dict()))


def error_result(error: str, **extra: Any) -> ToolResult:
    """Build an error-flagged result with ``success: false``."""
    return ToolResult(
        output=to_json({"success": False, "error": error, **extra}),
        is_error=True,
    )


async def handle_execute_curl(
    arguments: dict[str, Any], client: HttpClient
) -> ToolResult:
    """Parse a curl command and execute it."""
    tool_input = ExecuteCurlInput.model_validate(arguments)
    descriptor = parse_curl_command(tool_input.curl_command)
    response = await client.execute(descriptor)
    return response_result(response)


async def handle_http_request(
    arguments: dict[str, Any], client: HttpClient
) -> ToolResult:
    """Execute a structured HTTP request."""
    tool_input = HttpRequestInput.model_validate(arguments)
    response = await client.execute(tool_input.to_descriptor())
    return response_result(response)


TOOL_HANDLERS: dict[str, ToolHandler] = {
    "execute_curl": handle_execute_curl,
    "http_request": handle_http_request,
}


async def execute_tool(
    name: str, arguments: dict[str, Any] | None, client: HttpClient
) -> ToolResult:
    """Run a tool by name, turning every failure into an error result.

    Args:
        name: The tool name.
        arguments: The tool arguments.
        client: Shared HTTP client.

    Returns:
        The tool result.
    """
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return error_result(f"Unknown tool: {name}")

    try:
        return await handler(arguments or {}, client)
    except ValidationError as e:
        return error_result("Invalid input", details=validation_details(e))
    except CurlParseError as e:
        return error_result(str(e))
    except Exception as e:
        logger.exception(f"Tool {name} failed")
        return error_result(str(e) or "Unknown error")
