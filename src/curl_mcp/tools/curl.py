"""HTTP request execution with normalized responses."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field, replace
from types import TracebackType
from typing import Any

import httpx

from curl_mcp.tools.types import (
    BODY_METHODS,
    AuthSpec,
    BasicAuth,
    BearerAuth,
    RequestDescriptor,
    ResponseDescriptor,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_REDIRECTS: int = 5

DEFAULT_CONTENT_TYPE: str = "application/json"

# Raised before anything reached the network
DISPATCH_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.UnsupportedProtocol,
    httpx.LocalProtocolError,
    httpx.InvalidURL,
)

# The request went out but no response came back
NO_RESPONSE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    httpx.TooManyRedirects,
)


@dataclass(frozen=True, slots=True)
class OutgoingRequest:
    """The request as it will be handed to the transport.

    Attributes:
        method: HTTP method.
        url: Target URL.
        headers: Headers to send.
        content: Body to send, or None.
        basic_auth: (username, password) for transport-level Basic auth.
        timeout: Timeout in seconds, or None for no timeout.
        follow_redirects: Whether redirects are followed.
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: str | None = None
    basic_auth: tuple[str, str] | None = None
    timeout: float | None = None
    follow_redirects: bool = True


def build_outgoing_request(descriptor: RequestDescriptor) -> OutgoingRequest:
    """Copy a descriptor into an outgoing request.

    The body is only attached for POST, PUT and PATCH. A timeout of 0 ms
    disables the timeout.
    """
    content = None
    if descriptor.body and descriptor.method in BODY_METHODS:
        content = descriptor.body

    timeout = descriptor.timeout_ms / 1000 if descriptor.timeout_ms > 0 else None

    return OutgoingRequest(
        method=descriptor.method,
        url=descriptor.url,
        headers=dict(descriptor.headers),
        content=content,
        timeout=timeout,
        follow_redirects=descriptor.follow_redirects,
    )


def with_default_content_type(request: OutgoingRequest) -> OutgoingRequest:
    """Default Content-Type to application/json when a body is attached.

    The lookup is on the literal "Content-Type" key.
    """
    if request.content is None or "Content-Type" in request.headers:
        return request
    return replace(
        request, headers={**request.headers, "Content-Type": DEFAULT_CONTENT_TYPE}
    )


def with_auth(request: OutgoingRequest, auth: AuthSpec) -> OutgoingRequest:
    """Apply credentials to an outgoing request.

    Basic auth becomes transport credentials and needs both username and
    password. Bearer auth sets (or overwrites) the Authorization header.
    """
    if isinstance(auth, BasicAuth):
        if auth.username and auth.password:
            return replace(request, basic_auth=(auth.username, auth.password))
        return request

    if isinstance(auth, BearerAuth) and auth.token:
        return replace(
            request,
            headers={**request.headers, "Authorization": f"Bearer {auth.token}"},
        )

    return request


def prepare_request(descriptor: RequestDescriptor) -> OutgoingRequest:
    """Build the outgoing request for a descriptor."""
    request = build_outgoing_request(descriptor)
    request = with_default_content_type(request)
    return with_auth(request, descriptor.auth)


def format_payload(payload: Any) -> str:
    """Render a decoded payload as text.

    Strings pass through, objects and arrays are pretty-printed JSON, other
    values are rendered as JSON text.
    """
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, (dict, list)):
        return json.dumps(payload, indent=2, ensure_ascii=False)
    return json.dumps(payload)


def render_body(response: httpx.Response) -> str:
    """Render a response body as text, pretty-printing JSON payloads."""
    if not response.content:
        return ""

    content_type = response.headers.get("content-type", "")
    if "json" in content_type.lower():
        try:
            return format_payload(response.json())
        except (ValueError, RecursionError):
            logger.debug("Response declared JSON but could not be rendered as JSON")

    return response.text


def normalize_response(response: httpx.Response, duration_ms: int) -> ResponseDescriptor:
    """Turn a received response into a descriptor, whatever its status."""
    status = response.status_code
    status_text = response.reason_phrase or httpx.codes.get_reason_phrase(status)
    body = render_body(response)
    success = 200 <= status < 300

    return ResponseDescriptor(
        success=success,
        status=status,
        status_text=status_text,
        headers=dict(response.headers),
        body=body,
        body_size=len(body.encode("utf-8")),
        duration_ms=duration_ms,
        error=None if success else f"HTTP {status}: {status_text}",
    )


def failure_response(status_text: str, error: str, duration_ms: int) -> ResponseDescriptor:
    """Build the descriptor for a request that produced no response."""
    return ResponseDescriptor(
        success=False,
        status=0,
        status_text=status_text,
        headers={},
        body="",
        body_size=0,
        duration_ms=duration_ms,
        error=error,
    )


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.perf_counter() - start) * 1000))


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class HttpClient:
    """
    Executes request descriptors and normalizes the outcome.

    One instance is shared by all callers; it holds an httpx client for
    connection reuse and no per-call state. ``execute`` never raises: status
    codes of every kind and transport failures alike come back as a
    ResponseDescriptor.

    Example:
        async with HttpClient() as client:
            response = await client.execute(RequestDescriptor(url="https://example.com"))
            print(response.status, response.body_size)
    """

    def __init__(
        self,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            max_redirects: Redirect hops followed when a request follows redirects
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self._max_redirects = max_redirects
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HttpClient:
        self._get_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the underlying httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                max_redirects=self._max_redirects,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(self, descriptor: RequestDescriptor) -> ResponseDescriptor:
        """
        Perform one HTTP request.

        Args:
            descriptor: What to request

        Returns:
            ResponseDescriptor; ``success`` is true only for 2xx statuses
        """
        start = time.perf_counter()

        try:
            outgoing = prepare_request(descriptor)
            request = self._get_client().build_request(
                outgoing.method,
                outgoing.url,
                headers=outgoing.headers,
                content=outgoing.content,
                timeout=outgoing.timeout,
            )
        except Exception as e:
            logger.warning(f"Could not build request for {descriptor.url}: {e}")
            return failure_response("Request Error", _describe(e), _elapsed_ms(start))

        logger.debug(f"Dispatching {outgoing.method} {outgoing.url}")

        try:
            response = await self._get_client().send(
                request,
                auth=outgoing.basic_auth,
                follow_redirects=outgoing.follow_redirects,
            )
        except DISPATCH_EXCEPTIONS as e:
            logger.warning(f"Request to {outgoing.url} not sent: {e}")
            return failure_response("Request Error", _describe(e), _elapsed_ms(start))
        except httpx.TimeoutException:
            logger.warning(f"Request to {outgoing.url} timed out")
            return failure_response(
                "No Response",
                f"Request timed out after {descriptor.timeout_ms}ms",
                _elapsed_ms(start),
            )
        except httpx.TooManyRedirects:
            logger.warning(f"Request to {outgoing.url} exceeded redirect limit")
            return failure_response(
                "No Response",
                f"Exceeded maximum of {self._max_redirects} redirects",
                _elapsed_ms(start),
            )
        except NO_RESPONSE_EXCEPTIONS as e:
            logger.warning(f"No response from {outgoing.url}: {e}")
            return failure_response(
                "No Response",
                f"No response received from server: {_describe(e)}",
                _elapsed_ms(start),
            )
        except Exception as e:
            logger.warning(f"Request to {outgoing.url} failed: {e}")
            return failure_response("Unknown Error", _describe(e), _elapsed_ms(start))

        try:
            result = normalize_response(response, _elapsed_ms(start))
        except Exception as e:
            logger.warning(f"Could not read response from {outgoing.url}: {e}")
            return failure_response("Unknown Error", _describe(e), _elapsed_ms(start))

        logger.debug(
            f"{outgoing.method} {outgoing.url} -> {result.status} "
            f"({result.body_size} bytes, {result.duration_ms}ms)"
        )
        return result
