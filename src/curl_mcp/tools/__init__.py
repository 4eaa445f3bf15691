"""Tools module for curl parsing, request execution and MCP tool definitions."""

from curl_mcp.tools.curl import HttpClient
from curl_mcp.tools.handlers import execute_tool
from curl_mcp.tools.parser import parse_curl_command
from curl_mcp.tools.registry import register_tools

__all__ = [
    "HttpClient",
    "execute_tool",
    "parse_curl_command",
    "register_tools",
]
