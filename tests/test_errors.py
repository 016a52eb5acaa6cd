import json

import httpx
import pytest

from ris_search.core.errors import (
    DocumentUrlNotAllowedError,
    ErrorKind,
    RISAPIError,
    RISParsingError,
    RISTimeoutError,
    classify_transport_error,
)


class TestTaxonomy:
    def test_api_error_stores_message_and_status(self):
        error = RISAPIError("HTTP error 404", 404)
        assert str(error) == "HTTP error 404"
        assert error.message == "HTTP error 404"
        assert error.status_code == 404
        assert error.kind is ErrorKind.api

    def test_api_error_status_is_optional(self):
        assert RISAPIError("boom").status_code is None

    def test_timeout_error_is_api_error(self):
        error = RISTimeoutError()
        assert isinstance(error, RISAPIError)
        assert error.kind is ErrorKind.timeout
        assert error.message == "Request to RIS API timed out"
        assert error.status_code is None

    def test_parsing_error_carries_cause(self):
        cause = ValueError("bad json")
        error = RISParsingError("Failed to parse", cause)
        assert isinstance(error, RISAPIError)
        assert error.kind is ErrorKind.parsing
        assert error.original_error is cause

    def test_url_not_allowed_is_value_error(self):
        error = DocumentUrlNotAllowedError("http://localhost/")
        assert isinstance(error, ValueError)
        assert not isinstance(error, RISAPIError)
        assert error.url == "http://localhost/"


class TestClassifyTransportError:
    @pytest.mark.parametrize(
        "error",
        [RISAPIError("x", 500), RISTimeoutError("t"), RISParsingError("p", None)],
    )
    def test_classified_errors_pass_through_unchanged(self, error):
        assert classify_transport_error(error, "Bundesrecht", 1000) is error

    def test_deadline_expiry_becomes_timeout(self):
        error = classify_transport_error(TimeoutError(), "Bundesrecht", 250)
        assert type(error) is RISTimeoutError
        assert "250ms" in error.message
        assert "Bundesrecht" in error.message

    def test_httpx_timeout_becomes_timeout(self):
        request = httpx.Request("GET", "https://data.bka.gv.at/")
        error = classify_transport_error(httpx.ReadTimeout("slow", request=request), "Judikatur", 100)
        assert type(error) is RISTimeoutError

    def test_connection_failure_becomes_api_error_without_status(self):
        request = httpx.Request("GET", "https://data.bka.gv.at/")
        error = classify_transport_error(
            httpx.ConnectError("Name or service not known", request=request),
            "Landesrecht",
            1000,
        )
        assert type(error) is RISAPIError
        assert error.status_code is None
        assert "Name or service not known" in error.message

    def test_exception_without_message_uses_class_name(self):
        error = classify_transport_error(ConnectionResetError(), "History", 1000)
        assert type(error) is RISAPIError
        assert "ConnectionResetError" in error.message

    def test_json_error_is_not_reclassified_as_parsing(self):
        # Parsing errors are classified by the normalizer, not by the transport
        error = classify_transport_error(json.JSONDecodeError("x", "", 0), "Sonstige", 1000)
        assert type(error) is RISAPIError
