"""Unit tests for the submission client."""

import json

import httpx
import pytest

from jobready.client import DEFAULT_ENDPOINT, SubmissionClient

PAYLOAD = {"name": "Jane Citizen", "email": "jane@example.com", "acceptTerms": True}


def make_client(handler):
    """SubmissionClient backed by an in-memory transport; records each request."""
    requests = []

    def record(request):
        requests.append(request)
        return handler(request)

    http_client = httpx.Client(base_url="http://testserver", transport=httpx.MockTransport(record))
    return SubmissionClient(http_client=http_client), requests


class TestSuccess:
    """Test 2xx responses."""

    def test_success_response(self):
        client, requests = make_client(lambda r: httpx.Response(200, json={"success": True}))

        result = client.submit_application(PAYLOAD)

        assert result.ok is True
        assert result.error is None
        assert result.status_code == 200
        assert len(requests) == 1

    def test_request_shape(self):
        client, requests = make_client(lambda r: httpx.Response(200, json={"success": True}))

        client.submit_application(PAYLOAD)

        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == DEFAULT_ENDPOINT
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == PAYLOAD

    def test_non_json_success_is_still_success(self):
        client, _ = make_client(lambda r: httpx.Response(200, text="OK"))
        assert client.submit_application(PAYLOAD).ok is True

    def test_created_counts_as_success(self):
        client, _ = make_client(lambda r: httpx.Response(201))
        assert client.submit_application(PAYLOAD).ok is True

    def test_client_is_callable_as_submitter(self):
        client, requests = make_client(lambda r: httpx.Response(200, json={"success": True}))
        assert client(PAYLOAD).ok is True
        assert len(requests) == 1


class TestFailure:
    """Test error responses and transport failures."""

    def test_server_error_message_is_used(self):
        client, _ = make_client(
            lambda r: httpx.Response(500, json={"error": "Failed to connect to email server"})
        )

        result = client.submit_application(PAYLOAD)

        assert result.ok is False
        assert result.error == "Failed to connect to email server"
        assert result.status_code == 500

    def test_non_json_error_falls_back_to_status(self):
        client, _ = make_client(lambda r: httpx.Response(500, text="<html>Internal Server Error</html>"))

        result = client.submit_application(PAYLOAD)

        assert result.ok is False
        assert result.error == "Server returned 500"

    @pytest.mark.parametrize("body", [{}, {"error": ""}, {"error": None}, {"error": 42}, ["error"]])
    def test_unusable_error_field_falls_back_to_status(self, body):
        client, _ = make_client(lambda r: httpx.Response(502, json=body))
        assert client.submit_application(PAYLOAD).error == "Server returned 502"

    def test_connection_error(self):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client, requests = make_client(refuse)

        result = client.submit_application(PAYLOAD)

        assert result.ok is False
        assert result.status_code is None
        assert "Could not reach the server" in result.error
        assert len(requests) == 1

    def test_timeout(self):
        def slow(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = make_client(slow)

        result = client.submit_application(PAYLOAD)

        assert result.ok is False
        assert "took too long" in result.error

    def test_other_transport_error(self):
        def broken(request):
            raise httpx.RemoteProtocolError("peer closed connection", request=request)

        client, _ = make_client(broken)

        assert client.submit_application(PAYLOAD).error == "Network error: peer closed connection"

    def test_no_retry_on_failure(self):
        client, requests = make_client(lambda r: httpx.Response(503))
        client.submit_application(PAYLOAD)
        assert len(requests) == 1


class TestLifecycle:
    """Test client ownership."""

    def test_injected_client_is_not_closed(self):
        http_client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        with SubmissionClient("http://testserver/submit", http_client=http_client):
            pass
        assert http_client.is_closed is False

    def test_owned_client_is_closed(self):
        client = SubmissionClient(base_url="http://testserver")
        client.close()
        assert client._client.is_closed is True
