"""MCP Server implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import uvicorn
from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server

from curl_mcp.config import Settings, get_settings, setup_logging
from curl_mcp.tools import HttpClient, register_tools

logger = logging.getLogger(__name__)

# Type aliases for ASGI
Scope = dict[str, Any]
Receive = Any
Send = Any


def create_server(client: HttpClient) -> Server:
    """Create and configure the MCP server.

    Args:
        client: Shared HTTP client used by the tools.

    Returns:
        Configured MCP server instance.
    """
    server = Server("curl-mcp-server")
    register_tools(server, client)
    return server


def create_app(server: Server, sse: SseServerTransport, client: HttpClient) -> Any:
    """Create the ASGI application for the SSE transport.

    Args:
        server: The MCP server instance.
        sse: The SSE transport.
        client: Shared HTTP client, closed on lifespan shutdown.

    Returns:
        ASGI application callable.
    """

    async def lifespan(receive: Receive, send: Send) -> None:
        """Handle ASGI lifespan events."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await client.aclose()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        """Handle ASGI requests."""
        if scope["type"] == "lifespan":
            await lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        path: str = scope["path"]
        method: str = scope["method"]

        # GET /sse - SSE Handshake
        if path == "/sse" and method == "GET":
            logger.info(f"[NET] New Connection from {scope.get('client')}")
            try:
                async with sse.connect_sse(scope, receive, send) as streams:
                    await server.run(
                        streams[0],
                        streams[1],
                        server.create_initialization_options(),
                    )
                logger.info("[NET] Connection closed")
            except Exception:
                logger.exception("[NET] SSE connection failed")
            return

        # POST /messages - Message handling
        if path == "/messages" and method == "POST":
            await sse.handle_post_message(scope, receive, send)
            return

        # POST /sse - client probe
        if path == "/sse" and method == "POST":
            await send(
                {
                    "type": "http.response.start",
                    "status": 200,
                    "headers": [],
                }
            )
            await send({"type": "http.response.body", "body": b"OK"})
            return

        # 404 Not Found
        await send(
            {
                "type": "http.response.start",
                "status": 404,
                "headers": [],
            }
        )
        await send({"type": "http.response.body", "body": b"Not Found"})

    return app


async def run_stdio(server: Server, client: HttpClient) -> None:
    """Serve MCP over stdin/stdout until the peer disconnects."""
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await client.aclose()


def run_sse(server: Server, client: HttpClient, settings: Settings) -> None:
    """Serve MCP over SSE with uvicorn."""
    sse = SseServerTransport("/messages")
    app = create_app(server, sse, client)

    logger.info("=" * 60)
    logger.info("CURL MCP SERVER (SSE)")
    logger.info(f"Listening on {settings.server_host}:{settings.server_port}")
    logger.info("=" * 60)

    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
    )


def run_server(settings: Settings | None = None) -> None:
    """Run the MCP server on the configured transport.

    Args:
        settings: Optional settings override.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    client = HttpClient(max_redirects=settings.max_redirects)
    server = create_server(client)

    if settings.transport == "sse":
        run_sse(server, client, settings)
        return

    logger.info("Curl MCP Server running on stdio")
    asyncio.run(run_stdio(server, client))


def main() -> None:
    """Console entry point."""
    try:
        run_server()
    except KeyboardInterrupt:
        logger.info("Received interrupt, shutting down")


if __name__ == "__main__":
    main()
