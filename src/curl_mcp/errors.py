"""Exceptions raised while turning caller input into a request."""

from __future__ import annotations


class CurlMcpError(Exception):
    """Base class for curl-mcp errors."""


class CurlParseError(CurlMcpError):
    """A curl command string could not be turned into a request."""


class InvalidCommandError(CurlParseError):
    """The command does not start with ``curl`` or carries an unusable value."""


class MissingUrlError(CurlParseError):
    """No http(s) URL was found in the command."""
