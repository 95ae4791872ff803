"""Pytest fixtures shared by the minimax_mcp tests."""

import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, List, Optional
from unittest.mock import patch

import httpx
import pytest

from minimax_mcp.plugins.minimax.config import MiniMaxConfig


# All HTTP goes through this factory; patching it keeps tests off the network.
CLIENT_PATCH = "minimax_mcp.plugins.minimax.client._create_http_client"

TEST_API_KEY = "sk-test-abcdefgh12345678wxyz"
TEST_API_HOST = "https://api.minimax.test"


class MockApi:
    """In-memory stand-in for the MiniMax API.

    Set ``handler`` or call ``respond()`` to choose the answer; every request
    that reaches the transport is recorded in ``requests``.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={})
        )

    def respond(self, status_code: int = 200, json_body: Any = None, text: Optional[str] = None) -> None:
        if text is not None:
            self.handler = lambda request: httpx.Response(status_code, text=text)
        else:
            self.handler = lambda request: httpx.Response(status_code, json=json_body)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def create_client(self, url: str, timeout: Optional[float]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self._handle), timeout=timeout)

    @property
    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


class FakeUI:
    """UserInterface that answers from canned values and records calls."""

    def __init__(self, confirm_answer: bool = True, input_value: Optional[str] = None):
        self.confirm_answer = confirm_answer
        self.input_value = input_value
        self.confirmations: List[tuple] = []
        self.inputs: List[tuple] = []
        self.notifications: List[tuple] = []

    def confirm(self, title: str, message: str) -> bool:
        self.confirmations.append((title, message))
        return self.confirm_answer

    def input(self, title: str, message: str) -> Optional[str]:
        self.inputs.append((title, message))
        return self.input_value

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((message, level))

    @property
    def last_message(self) -> str:
        return self.notifications[-1][0] if self.notifications else ""


@pytest.fixture
def mock_api():
    """Route every MiniMax request to a MockApi."""
    api = MockApi()
    with patch(CLIENT_PATCH, side_effect=api.create_client):
        yield api


@pytest.fixture
def session_config():
    """A configured session."""
    return MiniMaxConfig(api_key=TEST_API_KEY, api_host=TEST_API_HOST, configured=True)


@pytest.fixture
def unconfigured_config():
    return MiniMaxConfig(api_key="", api_host=TEST_API_HOST, configured=False)


@pytest.fixture
def fake_ui():
    return FakeUI()


class SlowApiServer:
    """Local HTTP server whose replies are held back until ``release()``.

    Requests block in the server thread, so a client reading the response is
    genuinely waiting on its socket.
    """

    def __init__(self, hold_seconds: float = 10.0):
        self._released = threading.Event()
        self.received = threading.Event()
        released = self._released
        received = self.received

        class Handler(BaseHTTPRequestHandler):
            def _reply(self):
                length = int(self.headers.get("Content-Length") or 0)
                self.rfile.read(length)
                received.set()
                released.wait(hold_seconds)
                body = json.dumps({"results": []}).encode("utf-8")
                self.send_response(200)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            do_GET = _reply
            do_POST = _reply

            def log_message(self, format, *args):
                pass

        self._server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self._server.daemon_threads = True
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def start(self) -> None:
        self._thread.start()

    def release(self) -> None:
        self._released.set()

    def stop(self) -> None:
        self.release()
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture
def slow_api():
    """A real local API that does not answer until the test ends."""
    server = SlowApiServer()
    server.start()
    with patch.dict('os.environ', {'MINIMAX_TRACE_LOG': ''}, clear=True):
        yield server
    server.stop()


@pytest.fixture
def slow_api_config(slow_api):
    return MiniMaxConfig(api_key=TEST_API_KEY, api_host=slow_api.url, configured=True)
