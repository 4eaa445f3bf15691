"""Tests for tool input schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from curl_mcp.tools.schemas import (
    ExecuteCurlInput,
    HttpRequestInput,
    validation_details,
)
from curl_mcp.tools.types import BasicAuth, BearerAuth, RequestDescriptor


class TestExecuteCurlInput:
    """Tests for ExecuteCurlInput."""

    def test_reads_camel_case_field(self) -> None:
        result = ExecuteCurlInput.model_validate({"curlCommand": "curl https://a.test"})
        assert result.curl_command == "curl https://a.test"

    def test_missing_command(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ExecuteCurlInput.model_validate({})
        assert validation_details(exc_info.value) == [
            {"path": "curlCommand", "message": "Field required"}
        ]

    def test_command_must_be_string(self) -> None:
        with pytest.raises(ValidationError):
            ExecuteCurlInput.model_validate({"curlCommand": 42})


class TestHttpRequestInput:
    """Tests for HttpRequestInput."""

    def test_defaults_applied(self) -> None:
        """Only url is required; the rest takes defaults."""
        descriptor = HttpRequestInput.model_validate({"url": "https://a.test/x"}).to_descriptor()
        assert descriptor == RequestDescriptor(url="https://a.test/x")
        assert descriptor.method == "GET"
        assert descriptor.timeout_ms == 30000
        assert descriptor.follow_redirects is True
        assert descriptor.headers == {}

    def test_all_fields(self) -> None:
        descriptor = HttpRequestInput.model_validate(
            {
                "url": "http://a.test",
                "method": "patch",
                "headers": {"X-A": "1"},
                "body": "{}",
                "auth": {"type": "bearer", "token": "t"},
                "timeout": 500,
                "followRedirects": False,
            }
        ).to_descriptor()
        assert descriptor.method == "PATCH"
        assert descriptor.headers == {"X-A": "1"}
        assert descriptor.body == "{}"
        assert descriptor.auth == BearerAuth(token="t")
        assert descriptor.timeout_ms == 500
        assert descriptor.follow_redirects is False

    def test_basic_auth(self) -> None:
        descriptor = HttpRequestInput.model_validate(
            {"url": "http://a.test", "auth": {"type": "basic", "username": "u", "password": "p"}}
        ).to_descriptor()
        assert descriptor.auth == BasicAuth(username="u", password="p")

    def test_none_auth(self) -> None:
        descriptor = HttpRequestInput.model_validate(
            {"url": "http://a.test", "auth": {"type": "none", "token": "ignored"}}
        ).to_descriptor()
        assert descriptor.auth is None

    @pytest.mark.parametrize(  # type: ignore[misc]
        "url", ["/relative/path", "example.com", "ftp://example.com/file", "https://"]
    )
    def test_rejects_non_absolute_urls(self, url: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            HttpRequestInput.model_validate({"url": url})
        assert validation_details(exc_info.value)[0]["path"] == "url"

    def test_rejects_unknown_method(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            HttpRequestInput.model_validate({"url": "https://a.test", "method": "FETCH"})
        assert validation_details(exc_info.value)[0]["path"] == "method"

    def test_rejects_negative_timeout(self) -> None:
        with pytest.raises(ValidationError):
            HttpRequestInput.model_validate({"url": "https://a.test", "timeout": -1})

    def test_rejects_non_string_header_values(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            HttpRequestInput.model_validate({"url": "https://a.test", "headers": {"X": 1}})
        assert validation_details(exc_info.value)[0]["path"] == "headers.X"

    def test_rejects_unknown_auth_type(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            HttpRequestInput.model_validate(
                {"url": "https://a.test", "auth": {"type": "digest"}}
            )
        assert validation_details(exc_info.value)[0]["path"] == "auth.type"
