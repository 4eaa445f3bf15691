"""Plain HTTP facade for systems that do not speak MCP.

Endpoints:
    GET  /health              - Health check
    POST /api/execute_curl    - Execute curl command, body {"curlCommand": "..."}
    POST /api/http_request    - Execute HTTP request, body shaped like the http_request tool

Usage:
    curl-mcp-http
    curl -X POST http://localhost:3000/api/execute_curl \\
        -H "Content-Type: application/json" \\
        -d '{"curlCommand": "curl https://httpbin.org/get"}'
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from curl_mcp import __version__
from curl_mcp.config import Settings, get_settings, setup_logging
from curl_mcp.errors import CurlParseError
from curl_mcp.tools.curl import HttpClient, failure_response
from curl_mcp.tools.parser import parse_curl_command
from curl_mcp.tools.schemas import (
    ExecuteCurlInput,
    HttpRequestInput,
    validation_details,
)
from curl_mcp.tools.types import RequestDescriptor

logger = logging.getLogger(__name__)

SERVICE_NAME: str = "curl-mcp-http-wrapper"


def _bad_request(error: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": error, **extra},
    )


def _internal_error(error: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=failure_response("Error", error, 0).to_dict(),
    )


async def _read_payload(request: Request) -> dict[str, Any] | None:
    """Return the JSON object body, or None if the body is not one."""
    try:
        payload = await request.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def create_api(client: HttpClient | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        client: Shared HTTP client. Created from settings when omitted.

    Returns:
        FastAPI app; the client is closed on application shutdown.
    """
    if client is None:
        client = HttpClient(max_redirects=get_settings().max_redirects)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await client.aclose()

    app = FastAPI(title="Curl MCP HTTP Wrapper", version=__version__, lifespan=lifespan)

    async def run(descriptor: RequestDescriptor) -> JSONResponse:
        response = await client.execute(descriptor)
        return JSONResponse(content=response.to_dict())

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": SERVICE_NAME, "version": __version__}

    @app.post("/api/execute_curl")
    async def execute_curl(request: Request) -> JSONResponse:
        """Parse and execute a curl command."""
        payload = await _read_payload(request)
        if payload is None:
            return _bad_request("Request body must be a JSON object")

        try:
            tool_input = ExecuteCurlInput.model_validate(payload)
            descriptor = parse_curl_command(tool_input.curl_command)
            return await run(descriptor)
        except ValidationError as e:
            return _bad_request("Invalid input", details=validation_details(e))
        except CurlParseError as e:
            return _bad_request(str(e))
        except Exception as e:
            logger.exception("execute_curl failed")
            return _internal_error(str(e) or "Unknown error")

    @app.post("/api/http_request")
    async def http_request(request: Request) -> JSONResponse:
        """Execute a structured HTTP request."""
        payload = await _read_payload(request)
        if payload is None:
            return _bad_request("Request body must be a JSON object")

        try:
            tool_input = HttpRequestInput.model_validate(payload)
            return await run(tool_input.to_descriptor())
        except ValidationError as e:
            return _bad_request("Invalid input", details=validation_details(e))
        except Exception as e:
            logger.exception("http_request failed")
            return _internal_error(str(e) or "Unknown error")

    return app


def run_api(settings: Settings | None = None) -> None:
    """Serve the HTTP facade with uvicorn.

    Args:
        settings: Optional settings override.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    app = create_api(HttpClient(max_redirects=settings.max_redirects))

    logger.info(f"Curl MCP HTTP Wrapper running on http://{settings.api_host}:{settings.api_port}")
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


def main() -> None:
    """Console entry point."""
    run_api()


if __name__ == "__main__":
    main()
