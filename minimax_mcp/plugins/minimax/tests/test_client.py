"""Tests for the MiniMax HTTP client."""

import threading
import time
from unittest.mock import MagicMock, patch

import httpx
import pytest

from minimax_mcp.conftest import CLIENT_PATCH, TEST_API_HOST, TEST_API_KEY
from minimax_mcp.plugins.minimax.client import (
    PING_PATH,
    WEB_SEARCH_PATH,
    MiniMaxClient,
    _create_http_client,
)
from minimax_mcp.plugins.minimax.config import MiniMaxConfig
from minimax_mcp.plugins.types import CancelledException, CancelToken


class TestRequest:

    def test_post_sends_bearer_and_json(self, mock_api, session_config):
        mock_api.respond(200, {"ok": True})
        client = MiniMaxClient(session_config)

        response = client.post(WEB_SEARCH_PATH, {"query": "python"})

        assert response.status_code == 200
        request = mock_api.requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{TEST_API_HOST}/mcp/web_search"
        assert request.headers["Authorization"] == f"Bearer {TEST_API_KEY}"
        assert request.headers["Content-Type"] == "application/json"
        assert mock_api.last_json == {"query": "python"}

    def test_reads_key_at_call_time(self, mock_api, session_config):
        client = MiniMaxClient(session_config)
        session_config.set_key("sk-rotated-key-999")

        client.post(WEB_SEARCH_PATH, {"query": "x"})

        assert mock_api.requests[0].headers["Authorization"] == "Bearer sk-rotated-key-999"

    def test_host_trailing_slash(self, mock_api):
        config = MiniMaxConfig(api_key="k" * 20, api_host="https://api.example.com/", configured=True)
        MiniMaxClient(config).post(WEB_SEARCH_PATH, {})
        assert str(mock_api.requests[0].url) == "https://api.example.com/mcp/web_search"

    def test_non_success_status_is_returned(self, mock_api, session_config):
        mock_api.respond(500, text="server broke")
        response = MiniMaxClient(session_config).post(WEB_SEARCH_PATH, {})
        assert response.status_code == 500
        assert response.text == "server broke"

    def test_transport_error_propagates(self, mock_api, session_config):
        def fail(request):
            raise httpx.ConnectError("connection refused")
        mock_api.handler = fail

        with pytest.raises(httpx.ConnectError):
            MiniMaxClient(session_config).post(WEB_SEARCH_PATH, {})

    def test_timeout_passed_to_factory(self, session_config):
        with patch(CLIENT_PATCH) as mock_create:
            mock_create.return_value.request.return_value = httpx.Response(200, json={})
            MiniMaxClient(session_config, timeout=12.5).post(WEB_SEARCH_PATH, {})
        assert mock_create.call_args[0][1] == 12.5


class TestCancellation:

    def test_pre_cancelled_token_sends_nothing(self, mock_api, session_config):
        token = CancelToken()
        token.cancel()

        with pytest.raises(CancelledException):
            MiniMaxClient(session_config).post(WEB_SEARCH_PATH, {}, cancel_token=token)
        assert mock_api.requests == []

    def test_cancel_aborts_blocked_request(self, mock_api, session_config):
        token = CancelToken()
        released = threading.Event()

        def hang(request):
            released.wait(10)
            return httpx.Response(200, json={})
        mock_api.handler = hang

        timer = threading.Timer(0.1, token.cancel)
        timer.start()
        start = time.monotonic()
        try:
            with pytest.raises(CancelledException):
                MiniMaxClient(session_config).post(WEB_SEARCH_PATH, {}, cancel_token=token)
            assert time.monotonic() - start < 2.0
        finally:
            timer.cancel()
            released.set()

    def test_cancel_aborts_slow_server(self, slow_api, slow_api_config):
        token = CancelToken()
        timer = threading.Timer(0.3, token.cancel)
        timer.start()
        start = time.monotonic()
        try:
            with pytest.raises(CancelledException):
                MiniMaxClient(slow_api_config).post(WEB_SEARCH_PATH, {"query": "x"}, cancel_token=token)
            assert time.monotonic() - start < 2.0
            assert slow_api.received.is_set()
        finally:
            timer.cancel()

    def test_slow_server_answer_without_cancel(self, slow_api, slow_api_config):
        token = CancelToken()
        threading.Timer(0.2, slow_api.release).start()

        response = MiniMaxClient(slow_api_config).post(WEB_SEARCH_PATH, {}, cancel_token=token)

        assert response.status_code == 200
        assert response.json() == {"results": []}

    def test_cancel_after_response_still_cancels(self, mock_api, session_config):
        token = CancelToken()

        def cancel_then_answer(request):
            token.cancel()
            return httpx.Response(200, json={})
        mock_api.handler = cancel_then_answer

        with pytest.raises(CancelledException):
            MiniMaxClient(session_config).post(WEB_SEARCH_PATH, {}, cancel_token=token)

    def test_cancel_closes_http_client(self, session_config):
        token = CancelToken()
        released = threading.Event()
        mock_client = MagicMock()

        def hang(*args, **kwargs):
            released.wait(10)
            return httpx.Response(200, json={})
        mock_client.request.side_effect = hang

        timer = threading.Timer(0.1, token.cancel)
        timer.start()
        try:
            with patch(CLIENT_PATCH, return_value=mock_client):
                with pytest.raises(CancelledException):
                    MiniMaxClient(session_config).post(WEB_SEARCH_PATH, {}, cancel_token=token)
            mock_client.close.assert_called()
        finally:
            timer.cancel()
            released.set()


class TestPing:

    def test_no_key(self, mock_api):
        assert MiniMaxClient(MiniMaxConfig()).ping() is False
        assert mock_api.requests == []

    @pytest.mark.parametrize("status", [401, 403])
    def test_rejected_key(self, mock_api, session_config, status):
        mock_api.respond(status, text="nope")
        assert MiniMaxClient(session_config).ping() is False

    @pytest.mark.parametrize("status", [200, 404, 500])
    def test_other_statuses_count_as_valid(self, mock_api, session_config, status):
        mock_api.respond(status, {})
        assert MiniMaxClient(session_config).ping() is True

    def test_uses_get_on_ping_path(self, mock_api, session_config):
        MiniMaxClient(session_config).ping()
        request = mock_api.requests[0]
        assert request.method == "GET"
        assert request.url.path == PING_PATH

    def test_network_failure_counts_as_valid(self, mock_api, session_config):
        def fail(request):
            raise httpx.ConnectError("unreachable")
        mock_api.handler = fail
        assert MiniMaxClient(session_config).ping() is True


class TestCreateHttpClient:

    def test_returns_httpx_client(self):
        with patch.dict('os.environ', {}, clear=True):
            client = _create_http_client("https://api.minimax.io/mcp/ping", 5.0)
        try:
            assert isinstance(client, httpx.Client)
            assert client.timeout.read == 5.0
            assert client.follow_redirects is True
        finally:
            client.close()
