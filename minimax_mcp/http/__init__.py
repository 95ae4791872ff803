"""Shared HTTP utilities with proxy support.

Usage:
    from minimax_mcp.http import get_httpx_client, get_httpx_kwargs

    client = get_httpx_client(**get_httpx_kwargs(url))
    response = client.post(url, json=payload)

Environment Variables:
    HTTPS_PROXY / HTTP_PROXY: Standard proxy URL
    NO_PROXY: Standard no-proxy hosts (suffix matching)
    MINIMAX_NO_PROXY: Exact host matching for no-proxy
    REQUESTS_CA_BUNDLE / SSL_CERT_FILE: Custom CA bundle
"""

from .proxy import (
    active_cert_bundle,
    get_httpx_client,
    get_httpx_kwargs,
    get_proxy_url,
    should_bypass_proxy,
)

__all__ = [
    "active_cert_bundle",
    "get_httpx_client",
    "get_httpx_kwargs",
    "get_proxy_url",
    "should_bypass_proxy",
]
