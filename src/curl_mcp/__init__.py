"""curl-mcp: run curl commands and structured HTTP requests for MCP agents."""

__version__ = "1.0.0"
