"""Tests for the directory HTTP client."""

import logging

import httpx
import pytest

from peppol_lookup.core.directory_client import DirectoryClient
from peppol_lookup.core.errors import RateLimitedError
from peppol_lookup.data.schemas import Config

BASE_URL = "https://directory.test/search/1.0/json"


@pytest.fixture
def seen():
    return []


def _client(handler, **config_kwargs) -> DirectoryClient:
    config = Config(base_url=BASE_URL, **config_kwargs)
    return DirectoryClient(config, transport=httpx.MockTransport(handler))


class TestSearch:
    """Tests for DirectoryClient.search."""

    def test_sends_query_parameter(self, seen):
        """Test that the identifier is sent as the q parameter with the configured timeout."""

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"matches": []})

        with _client(handler) as client:
            response = client.search("0769377373")

        assert response.matches == []
        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "directory.test"
        assert request.url.path == "/search/1.0/json"
        assert request.url.params["q"] == "0769377373"
        assert request.extensions["timeout"]["read"] == 10.0

    def test_parses_matches(self):
        """Test that matches are parsed into models."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "version": "1.0",
                "total-result-count": 1,
                "matches": [{
                    "participantID": {"scheme": "iso6523-actorid-upis", "value": "0208:0769377373"},
                    "docTypes": [{"scheme": "busdox-docid-qns", "value": "doc"}],
                    "entities": [{"name": [{"name": "Acme BV", "language": "nl"}], "countryCode": "BE"}],
                }],
            })

        with _client(handler) as client:
            response = client.search("0769377373")

        assert response.total_result_count == 1
        match = response.matches[0]
        assert match.participant_id.value == "0208:0769377373"
        assert [d.value for d in match.doc_types] == ["doc"]
        assert match.display_name == "Acme BV"
        assert match.entities[0].country_code == "BE"

    def test_rate_limit_raises_with_header(self):
        """Test that HTTP 429 raises RateLimitedError carrying Retry-After."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"Retry-After": "3"})

        with _client(handler) as client:
            with pytest.raises(RateLimitedError) as exc_info:
                client.search("1")

        assert exc_info.value.retry_after == "3"
        assert exc_info.value.identifier == "1"

    def test_not_found_raises_status_error(self):
        """Test that HTTP 404 surfaces as httpx.HTTPStatusError."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        with _client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                client.search("1")
        assert exc_info.value.response.status_code == 404

    def test_follows_redirects(self, seen):
        """Test that a redirected search is parsed from the final response."""

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            if request.url.path == "/moved":
                return httpx.Response(200, json={"matches": []})
            return httpx.Response(301, headers={"Location": "https://directory.test/moved?q=1"})

        with _client(handler) as client:
            response = client.search("1")

        assert response.matches == []
        assert seen == ["/search/1.0/json", "/moved"]


class TestParticipantDetails:
    """Tests for DirectoryClient.get_participant_details."""

    def test_returns_raw_body(self, seen):
        """Test that the detail document is returned as decoded JSON."""
        body = {"participantID": "0208-0769377373", "docTypes": [], "anything": {"nested": [1, 2]}}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=body)

        with _client(handler) as client:
            assert client.get_participant_details("0208-0769377373") == body

        assert seen[0].url.path == "/search/1.0/json/participants/0208-0769377373"

    def test_error_is_logged_and_reraised(self, caplog):
        """Test that detail errors are logged and re-raised unwrapped."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="server error")

        with caplog.at_level(logging.ERROR):
            with _client(handler) as client:
                with pytest.raises(httpx.HTTPStatusError):
                    client.get_participant_details("missing")

        assert "Error fetching participant details" in caplog.text

    def test_transport_error_is_reraised(self):
        """Test that network errors propagate to the caller."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        with _client(handler) as client:
            with pytest.raises(httpx.ConnectError):
                client.get_participant_details("x")

    def test_rate_limit_is_not_retried(self):
        """Test that detail lookups report 429 as an error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429)

        with _client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                client.get_participant_details("x")


class TestClientLifecycle:
    """Tests for client ownership."""

    def test_shared_http_client_is_not_closed(self):
        """Test that an injected httpx client is left open."""
        http_client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
        with DirectoryClient(Config(), http_client=http_client):
            pass
        assert not http_client.is_closed
        http_client.close()

    def test_trailing_slash_is_stripped(self):
        """Test that the configured base URL is normalised."""
        client = DirectoryClient(Config(base_url=BASE_URL + "/"))
        assert client.base_url == BASE_URL
        client.close()
