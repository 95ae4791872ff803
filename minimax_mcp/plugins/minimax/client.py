"""HTTP client for the MiniMax Coding Plan MCP endpoints.

Every call opens a short-lived proxy-aware httpx client, sends one request
with bearer authentication and closes the client again. When a CancelToken
is supplied, the request runs on a worker thread while the calling thread
watches the token; a cancel closes the client and raises CancelledException
right away, without waiting for the server to answer.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

import httpx

from ...http import get_httpx_client, get_httpx_kwargs
from ..types import CancelToken, CancelledException
from .config import MiniMaxConfig

logger = logging.getLogger(__name__)


WEB_SEARCH_PATH = "/mcp/web_search"
UNDERSTAND_IMAGE_PATH = "/mcp/understand_image"
PING_PATH = "/mcp/ping"

DEFAULT_TIMEOUT = 60.0  # seconds

# How often a waiting caller checks its cancel token
CANCEL_POLL_INTERVAL = 0.05  # seconds

REQUEST_POOL_SIZE = 8

# Statuses that mean the key was rejected
AUTH_FAILURE_STATUSES = (401, 403)

_request_pool: Optional[ThreadPoolExecutor] = None
_request_pool_lock = threading.Lock()


def _get_request_pool() -> ThreadPoolExecutor:
    """Get or create the thread pool that runs cancellable requests."""
    global _request_pool
    with _request_pool_lock:
        if _request_pool is None:
            _request_pool = ThreadPoolExecutor(
                max_workers=REQUEST_POOL_SIZE,
                thread_name_prefix="minimax-request",
            )
        return _request_pool


def _create_http_client(url: str, timeout: Optional[float]) -> httpx.Client:
    """Create the httpx client used for a single request."""
    return get_httpx_client(
        timeout=timeout,
        follow_redirects=True,
        **get_httpx_kwargs(url),
    )


class MiniMaxClient:
    """Issues requests against the configured MiniMax API host.

    The client reads the session configuration on every call, so key changes
    made by the configure command apply to the next request.
    """

    def __init__(self, config: MiniMaxConfig, timeout: Optional[float] = DEFAULT_TIMEOUT):
        self._config = config
        self._timeout = timeout

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    def url(self, path: str) -> str:
        return f"{self._config.api_host.rstrip('/')}{path}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
        }

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> httpx.Response:
        """Send one request and return the fully read response.

        Args:
            method: HTTP method ("GET" or "POST").
            path: Endpoint path below the API host, e.g. "/mcp/web_search".
            payload: JSON body, if any.
            cancel_token: Token that aborts the request when cancelled.

        Returns:
            The response, whatever its status code.

        Raises:
            CancelledException: If the token was cancelled before or during
                the request.
            httpx.HTTPError: On transport failures.
        """
        url = self.url(path)
        headers = self._headers()

        if cancel_token is None:
            client = _create_http_client(url, self._timeout)
            try:
                return client.request(method, url, headers=headers, json=payload)
            finally:
                client.close()

        cancel_token.raise_if_cancelled()
        client = _create_http_client(url, self._timeout)
        future = _get_request_pool().submit(
            client.request, method, url, headers=headers, json=payload
        )

        while not future.done():
            if cancel_token.wait(CANCEL_POLL_INTERVAL):
                break

        if cancel_token.is_cancelled:
            # The worker may still be blocked on the socket; its outcome is discarded
            client.close()
            raise CancelledException("Request was cancelled")

        try:
            return future.result()
        finally:
            client.close()

    def post(
        self,
        path: str,
        payload: Dict[str, Any],
        cancel_token: Optional[CancelToken] = None,
    ) -> httpx.Response:
        return self.request("POST", path, payload, cancel_token)

    def ping(self) -> bool:
        """Check the key against the liveness endpoint.

        Only a 401/403 answer counts as a bad key. Any other status (some
        deployments answer 404) or a network failure leaves the key
        considered usable, since an unreachable host is not a
        misconfiguration.

        Returns:
            False if there is no key or the API rejected it, True otherwise.
        """
        if not self._config.api_key:
            return False
        try:
            response = self.request("GET", PING_PATH)
        except httpx.HTTPError as exc:
            logger.debug("MiniMax ping failed, assuming key is usable: %s", exc)
            return True
        return response.status_code not in AUTH_FAILURE_STATUSES
