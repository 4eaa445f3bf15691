"""Request and response descriptors shared by the parser and the executor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

HTTP_METHODS: frozenset[str] = frozenset(
    {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"}
)

# Methods that carry a request body
BODY_METHODS: frozenset[str] = frozenset({"POST", "PUT", "PATCH"})

DEFAULT_TIMEOUT_MS: int = 30000


@dataclass(frozen=True, slots=True)
class BasicAuth:
    """Username/password credentials sent as HTTP Basic auth.

    Only applied when both username and password are non-empty.
    """

    username: str
    password: str = ""

    @property
    def type(self) -> str:
        return "basic"

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type,
            "username": self.username,
            "password": self.password,
        }


@dataclass(frozen=True, slots=True)
class BearerAuth:
    """Bearer token sent in the Authorization header."""

    token: str

    @property
    def type(self) -> str:
        return "bearer"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "token": self.token}


AuthSpec = BasicAuth | BearerAuth | None


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """What to request.

    Attributes:
        url: Absolute http/https URL.
        method: HTTP method.
        headers: Request headers, keys as supplied.
        body: Optional request body. Only attached for POST, PUT and PATCH.
        auth: Optional credentials.
        timeout_ms: Request timeout in milliseconds.
        follow_redirects: Whether redirects are followed.
    """

    url: str
    method: HttpMethod = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    auth: AuthSpec = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    follow_redirects: bool = True


@dataclass(frozen=True, slots=True)
class ResponseDescriptor:
    """What was received, or how the request failed.

    ``success`` is true exactly when a 2xx status was reached. ``status`` is 0
    when no response arrived. ``error`` is set whenever ``success`` is false.
    """

    success: bool
    status: int
    status_text: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""
    body_size: int = 0
    duration_ms: int = 0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the wire keys used by tool and HTTP callers."""
        data: dict[str, Any] = {
            "success": self.success,
            "status": self.status,
            "statusText": self.status_text,
            "headers": dict(self.headers),
            "body": self.body,
            "bodySize": self.body_size,
            "durationMs": self.duration_ms,
        }
        if self.error is not None:
            data["error"] = self.error
        return data
