"""Curl command parsing.

The parser is best-effort: it pattern-matches a small subset of curl flags
instead of implementing shell grammar. Supported flags:

    -X, --request                 HTTP method
    -H, --header                  header (quoted "Name: Value")
    -d, --data, --data-ascii,
    --data-binary, --data-urlencode  request body (first occurrence only)
    -u, --user                    basic auth credentials
    -k, --insecure                recognized, no effect

Everything else is ignored. Quoted arguments must not contain their own
quote character; variable expansion and pipelines are not understood.
"""

from __future__ import annotations

import logging
import re

from curl_mcp.errors import InvalidCommandError, MissingUrlError
from curl_mcp.tools.types import (
    DEFAULT_TIMEOUT_MS,
    HTTP_METHODS,
    AuthSpec,
    BasicAuth,
    BearerAuth,
    RequestDescriptor,
)

logger = logging.getLogger(__name__)

# Flags must start a shell word so that "-d" inside a URL or value is skipped
_FLAG_START = r"(?<!\S)"

URL_PATTERN: re.Pattern[str] = re.compile(r"https?://[^\s\"'$]+", re.IGNORECASE)

METHOD_PATTERN: re.Pattern[str] = re.compile(
    _FLAG_START + r"(?:-X|--request)\s+(['\"]?)([A-Za-z]+)\1"
)

HEADER_PATTERN: re.Pattern[str] = re.compile(
    _FLAG_START + r"(?:-H|--header)\s+(?:'([^']*)'|\"([^\"]*)\")"
)

DATA_PATTERN: re.Pattern[str] = re.compile(
    _FLAG_START
    + r"(?:--data(?:-ascii|-binary|-urlencode)?|-d)\s+"
    + r"(?:'([^']+)'|\"([^\"]+)\"|([^\s'\"]+))"
)

USER_PATTERN: re.Pattern[str] = re.compile(
    _FLAG_START + r"(?:-u|--user)\s+(['\"]?)([^\s'\"]+)\1"
)

INSECURE_PATTERN: re.Pattern[str] = re.compile(
    _FLAG_START + r"(?:-k|--insecure)(?!\S)"
)

_ESCAPES: dict[str, str] = {"\\n": "\n", "\\t": "\t", "\\r": "\r"}
_ESCAPE_PATTERN: re.Pattern[str] = re.compile(r"\\[ntr]")


def _unescape(value: str) -> str:
    """Turn literal \\n, \\t and \\r sequences into control characters."""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], value)


def _mask_headers(command: str) -> str:
    """Blank out header arguments so flags inside header values are not seen."""
    return HEADER_PATTERN.sub(lambda m: " " * len(m.group(0)), command)


def _extract_url(command: str) -> str:
    match = URL_PATTERN.search(command)
    if match is None:
        raise MissingUrlError("Could not find URL in curl command")
    return match.group(0)


def _extract_method(command: str) -> str | None:
    match = METHOD_PATTERN.search(command)
    if match is None:
        return None

    method = match.group(2).upper()
    if method not in HTTP_METHODS:
        raise InvalidCommandError(f"Unsupported HTTP method: {method}")
    return method


def _extract_headers(command: str) -> tuple[dict[str, str], AuthSpec]:
    """Collect headers, deriving bearer auth from an Authorization header."""
    headers: dict[str, str] = {}
    auth: AuthSpec = None

    for match in HEADER_PATTERN.finditer(command):
        line = match.group(1) if match.group(1) is not None else match.group(2)
        name, sep, value = line.partition(":")
        name = name.strip()
        if not sep or not name:
            continue

        value = value.strip()
        headers[name] = value

        if name.lower() == "authorization" and value.lower().startswith("bearer "):
            auth = BearerAuth(token=value[len("bearer ") :])

    return headers, auth


def _extract_body(command: str) -> str | None:
    match = DATA_PATTERN.search(command)
    if match is None:
        return None

    raw = next(group for group in match.groups() if group is not None)
    return _unescape(raw)


def _extract_basic_auth(command: str) -> BasicAuth | None:
    match = USER_PATTERN.search(command)
    if match is None:
        return None

    username, sep, password = match.group(2).partition(":")
    if not sep or not username:
        return BasicAuth(username=match.group(2), password="")
    return BasicAuth(username=username, password=password)


def parse_curl_command(command: str) -> RequestDescriptor:
    """Parse a curl command string into a request descriptor.

    Args:
        command: The raw command (e.g., "curl -X POST https://api.example.com -d 'x=1'")

    Returns:
        RequestDescriptor with a 30s timeout and redirects followed.

    Raises:
        InvalidCommandError: If the command does not start with "curl" or names
            an unsupported method.
        MissingUrlError: If no http(s) URL is present.

    Examples:
        >>> parse_curl_command("curl https://example.com/x").method
        'GET'
        >>> parse_curl_command("curl -d 'x=1' https://example.com").method
        'POST'
    """
    trimmed = command.strip()
    if not trimmed.lower().startswith("curl"):
        raise InvalidCommandError('Invalid curl command: Must start with "curl"')

    # Pass order matters: basic auth from -u overwrites bearer auth derived
    # from an Authorization header.
    url = _extract_url(trimmed)
    flags = _mask_headers(trimmed)
    method = _extract_method(flags)
    headers, auth = _extract_headers(trimmed)

    body = _extract_body(flags)
    if body is not None and method is None:
        method = "POST"

    basic_auth = _extract_basic_auth(flags)
    if basic_auth is not None:
        auth = basic_auth

    # NOTE: -k/--insecure is not wired to certificate verification.
    if INSECURE_PATTERN.search(flags):
        logger.debug("Ignoring --insecure flag in curl command")

    return RequestDescriptor(
        url=url,
        method=method or "GET",  # type: ignore[arg-type]
        headers=headers,
        body=body,
        auth=auth,
        timeout_ms=DEFAULT_TIMEOUT_MS,
        follow_redirects=True,
    )


def extract_url_from_curl(command: str) -> str:
    """Return the URL of a curl command, or an empty string if it does not parse."""
    try:
        return parse_curl_command(command).url
    except (InvalidCommandError, MissingUrlError):
        return ""


def is_valid_curl_command(command: str) -> bool:
    """Check whether a curl command string can be parsed."""
    try:
        parse_curl_command(command)
    except (InvalidCommandError, MissingUrlError):
        return False
    return True
