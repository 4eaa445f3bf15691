"""Input schemas for the MCP tools and the HTTP facade."""

from __future__ import annotations

from typing import Annotated, Any, Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from curl_mcp.tools.types import (
    DEFAULT_TIMEOUT_MS,
    AuthSpec,
    BasicAuth,
    BearerAuth,
    HttpMethod,
    RequestDescriptor,
)

CURL_COMMAND_EXAMPLE: str = (
    "curl -X POST https://api.example.com/data "
    "-H \"Content-Type: application/json\" -d '{\"key\":\"value\"}'"
)


class ExecuteCurlInput(BaseModel):
    """Arguments of the execute_curl tool."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    curl_command: Annotated[
        str,
        Field(
            alias="curlCommand",
            description=f"The curl command to execute (e.g., {CURL_COMMAND_EXAMPLE})",
        ),
    ]


class AuthInput(BaseModel):
    """Authentication block of the http_request tool."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["basic", "bearer", "none"]
    username: str | None = None
    password: str | None = None
    token: str | None = None

    def to_auth_spec(self) -> AuthSpec:
        """Convert to the descriptor's auth variant."""
        if self.type == "basic":
            return BasicAuth(username=self.username or "", password=self.password or "")
        if self.type == "bearer":
            return BearerAuth(token=self.token or "")
        return None


class HttpRequestInput(BaseModel):
    """Arguments of the http_request tool."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: Annotated[str, Field(description="The URL to send the request to")]
    method: Annotated[HttpMethod, Field(description="HTTP method to use")] = "GET"
    headers: Annotated[
        dict[str, str] | None,
        Field(description="Custom headers to include in the request"),
    ] = None
    body: Annotated[
        str | None, Field(description="Request body (for POST, PUT, PATCH methods)")
    ] = None
    auth: Annotated[
        AuthInput | None, Field(description="Authentication configuration")
    ] = None
    timeout: Annotated[
        int, Field(ge=0, description="Request timeout in milliseconds")
    ] = DEFAULT_TIMEOUT_MS
    follow_redirects: Annotated[
        bool,
        Field(alias="followRedirects", description="Whether to follow HTTP redirects"),
    ] = True

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
            raise ValueError("Must be an absolute http or https URL")
        return value

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_descriptor(self) -> RequestDescriptor:
        """Build the request descriptor, with defaults already applied."""
        return RequestDescriptor(
            url=self.url,
            method=self.method,
            headers=dict(self.headers or {}),
            body=self.body,
            auth=self.auth.to_auth_spec() if self.auth else None,
            timeout_ms=self.timeout,
            follow_redirects=self.follow_redirects,
        )


def validation_details(error: ValidationError) -> list[dict[str, str]]:
    """Flatten a pydantic ValidationError into ``{path, message}`` entries."""
    return [
        {
            "path": ".".join(str(part) for part in item["loc"]),
            "message": item["msg"],
        }
        for item in error.errors()
    ]
