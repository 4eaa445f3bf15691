"""Tests for curl command parsing."""

from __future__ import annotations

import dataclasses

import pytest

from curl_mcp.errors import InvalidCommandError, MissingUrlError
from curl_mcp.tools.parser import (
    extract_url_from_curl,
    is_valid_curl_command,
    parse_curl_command,
)
from curl_mcp.tools.types import BasicAuth, BearerAuth, RequestDescriptor


class TestParseCurlCommand:
    """Tests for parse_curl_command function."""

    def test_simple_get(self) -> None:
        """A bare URL becomes a GET with no headers or body."""
        result = parse_curl_command("curl https://example.com/x")
        assert result == RequestDescriptor(url="https://example.com/x")
        assert result.method == "GET"
        assert result.headers == {}
        assert result.body is None
        assert result.auth is None

    def test_post_with_header_and_body(self) -> None:
        """Method, header and body are all extracted."""
        result = parse_curl_command(
            "curl -X POST https://example.com "
            "-H \"Content-Type: application/json\" -d '{\"a\":1}'"
        )
        assert result.method == "POST"
        assert result.url == "https://example.com"
        assert result.headers == {"Content-Type": "application/json"}
        assert result.body == '{"a":1}'

    def test_body_forces_post(self) -> None:
        """A body without -X defaults the method to POST."""
        result = parse_curl_command("curl -d 'x=1' https://example.com")
        assert result.method == "POST"
        assert result.body == "x=1"

    def test_explicit_method_kept_with_body(self) -> None:
        """An explicit method is not replaced by the body default."""
        result = parse_curl_command("curl -X PUT https://example.com -d 'x=1'")
        assert result.method == "PUT"

    def test_long_request_flag_quoted_lowercase(self) -> None:
        """--request accepts a quoted, lowercase method."""
        result = parse_curl_command("curl --request 'delete' https://example.com/1")
        assert result.method == "DELETE"

    def test_unsupported_method(self) -> None:
        """Methods outside the supported set are rejected."""
        with pytest.raises(InvalidCommandError):
            parse_curl_command("curl -X FETCH https://example.com")

    def test_basic_auth(self) -> None:
        """-u user:pass produces basic auth."""
        result = parse_curl_command("curl -u alice:secret https://example.com")
        assert result.auth == BasicAuth(username="alice", password="secret")
        assert result.auth.to_dict() == {
            "type": "basic",
            "username": "alice",
            "password": "secret",
        }

    def test_basic_auth_without_password(self) -> None:
        """A bare user gets an empty password."""
        result = parse_curl_command('curl --user "bob" https://example.com')
        assert result.auth == BasicAuth(username="bob", password="")

    def test_password_may_contain_colon(self) -> None:
        """Credentials are split on the first colon only."""
        result = parse_curl_command("curl -u alice:se:cret https://example.com")
        assert result.auth == BasicAuth(username="alice", password="se:cret")

    def test_empty_username_keeps_whole_credential(self) -> None:
        """Without a username before the colon the credential is the username."""
        result = parse_curl_command("curl -u :secret https://example.com")
        assert result.auth == BasicAuth(username=":secret", password="")

    def test_flags_inside_header_value_ignored(self) -> None:
        """-d, -X and -u inside a quoted header value are part of the value."""
        result = parse_curl_command(
            'curl https://example.com -H "X-Note: use -d here -X PUT -u a:b"'
        )
        assert result.method == "GET"
        assert result.body is None
        assert result.auth is None
        assert result.headers == {"X-Note": "use -d here -X PUT -u a:b"}

    def test_body_after_header_with_flag_text(self) -> None:
        """A real -d after such a header is still the body."""
        result = parse_curl_command(
            "curl https://example.com -H 'X-Note: try -d x' -d 'real=1'"
        )
        assert result.method == "POST"
        assert result.body == "real=1"

    def test_bearer_from_authorization_header(self) -> None:
        """An Authorization: Bearer header implies bearer auth."""
        result = parse_curl_command(
            'curl -H "Authorization: Bearer abc123" https://example.com'
        )
        assert result.auth == BearerAuth(token="abc123")
        assert result.auth.to_dict() == {"type": "bearer", "token": "abc123"}
        assert result.headers == {"Authorization": "Bearer abc123"}

    def test_bearer_match_is_case_insensitive(self) -> None:
        """Header name and scheme are matched case-insensitively."""
        result = parse_curl_command(
            "curl -H 'authorization: bearer xyz' https://example.com"
        )
        assert result.auth == BearerAuth(token="xyz")

    def test_non_bearer_authorization_header(self) -> None:
        """Other Authorization schemes do not set auth."""
        result = parse_curl_command(
            'curl -H "Authorization: Token abc" https://example.com'
        )
        assert result.auth is None
        assert result.headers["Authorization"] == "Token abc"

    def test_basic_auth_overwrites_bearer(self) -> None:
        """-u wins over bearer auth derived from a header."""
        result = parse_curl_command(
            'curl -H "Authorization: Bearer abc" -u alice:secret https://example.com'
        )
        assert result.auth == BasicAuth(username="alice", password="secret")
        assert result.headers["Authorization"] == "Bearer abc"

    def test_multiple_headers(self) -> None:
        """All headers are collected, single or double quoted."""
        result = parse_curl_command(
            "curl https://example.com -H 'Accept: text/plain' "
            '--header "X-Request-Id:  42 "'
        )
        assert result.headers == {"Accept": "text/plain", "X-Request-Id": "42"}

    def test_duplicate_header_last_wins(self) -> None:
        """Later duplicate header names overwrite earlier ones."""
        result = parse_curl_command(
            "curl -H 'X-A: 1' -H 'X-A: 2' https://example.com"
        )
        assert result.headers == {"X-A": "2"}

    def test_header_value_split_on_first_colon(self) -> None:
        """Header values may contain colons."""
        result = parse_curl_command(
            "curl -H 'X-Time: 12:30:00' https://example.com"
        )
        assert result.headers == {"X-Time": "12:30:00"}

    def test_header_without_colon_ignored(self) -> None:
        """Header arguments without a name/value split are skipped."""
        result = parse_curl_command("curl -H 'garbage' https://example.com")
        assert result.headers == {}

    def test_data_binary_double_quoted(self) -> None:
        """--data-binary accepts a double-quoted argument."""
        result = parse_curl_command(
            'curl --data-binary "hello world" https://example.com'
        )
        assert result.body == "hello world"
        assert result.method == "POST"

    def test_data_urlencode_bare(self) -> None:
        """A bare data argument runs until whitespace."""
        result = parse_curl_command("curl --data-urlencode q=test https://example.com")
        assert result.body == "q=test"

    def test_only_first_body_used(self) -> None:
        """Only the first data flag is used."""
        result = parse_curl_command("curl -d 'a=1' -d 'b=2' https://example.com")
        assert result.body == "a=1"

    def test_body_escape_sequences(self) -> None:
        """Literal \\n, \\t and \\r are unescaped."""
        result = parse_curl_command("curl -d 'a\\nb\\tc\\rd' https://example.com")
        assert result.body == "a\nb\tc\rd"

    def test_insecure_flag_has_no_effect(self) -> None:
        """-k is accepted and changes nothing."""
        plain = parse_curl_command("curl https://example.com")
        assert parse_curl_command("curl -k https://example.com") == plain
        assert parse_curl_command("curl --insecure https://example.com") == plain

    def test_unknown_flags_ignored(self) -> None:
        """Unsupported flags do not cause failures."""
        result = parse_curl_command(
            "curl -s -L --compressed -o out.json https://example.com/data"
        )
        assert result == RequestDescriptor(url="https://example.com/data")

    def test_timeout_and_redirects_fixed(self) -> None:
        """Parsed commands always use the default timeout and follow redirects."""
        result = parse_curl_command("curl --max-time 5 https://example.com")
        assert result.timeout_ms == 30000
        assert result.follow_redirects is True

    def test_quoted_url(self) -> None:
        """Quotes around the URL are not part of it."""
        result = parse_curl_command("curl 'https://example.com/a?b=1&c=2'")
        assert result.url == "https://example.com/a?b=1&c=2"

    def test_url_stops_at_dollar(self) -> None:
        """Shell variables end the URL."""
        result = parse_curl_command("curl https://example.com/items/$ID")
        assert result.url == "https://example.com/items/"

    def test_first_url_wins(self) -> None:
        """With several URLs the first one is used."""
        result = parse_curl_command("curl http://first.test/a https://second.test/b")
        assert result.url == "http://first.test/a"

    def test_uppercase_curl_and_whitespace(self) -> None:
        """The curl prefix is case-insensitive and surrounding space is trimmed."""
        result = parse_curl_command("   CURL https://example.com  ")
        assert result.url == "https://example.com"

    def test_not_curl(self) -> None:
        """Commands not starting with curl are rejected."""
        with pytest.raises(InvalidCommandError, match="curl"):
            parse_curl_command("wget https://example.com")

    def test_missing_url(self) -> None:
        """Commands without an http(s) URL are rejected."""
        with pytest.raises(MissingUrlError):
            parse_curl_command("curl -X GET example.com")

    def test_descriptor_frozen(self) -> None:
        """Parsed descriptors are immutable."""
        result = parse_curl_command("curl https://example.com")
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.method = "POST"  # type: ignore[misc]


class TestExtractUrlFromCurl:
    """Tests for extract_url_from_curl function."""

    def test_returns_url(self) -> None:
        assert extract_url_from_curl("curl -s https://example.com/a") == "https://example.com/a"

    def test_returns_empty_on_failure(self) -> None:
        assert extract_url_from_curl("curl -s") == ""
        assert extract_url_from_curl("http https://example.com") == ""


class TestIsValidCurlCommand:
    """Tests for is_valid_curl_command function."""

    def test_valid(self) -> None:
        assert is_valid_curl_command("curl https://example.com")

    def test_invalid(self) -> None:
        assert not is_valid_curl_command("ls -la")
        assert not is_valid_curl_command("curl nothing-here")
