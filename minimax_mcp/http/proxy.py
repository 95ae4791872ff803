"""Proxy and CA bundle settings for the MiniMax HTTP clients.

Every request to the MiniMax API goes through a client built here, so
corporate networks only need the usual environment variables:

    HTTPS_PROXY / HTTP_PROXY        proxy URL (upper or lower case)
    NO_PROXY                        hosts that bypass the proxy (suffix rules)
    MINIMAX_NO_PROXY                hosts that bypass the proxy (exact match)
    REQUESTS_CA_BUNDLE / SSL_CERT_FILE   extra CA certificates
"""

import logging
import os
import urllib.parse
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

PROXY_VARS = ("HTTPS_PROXY", "https_proxy", "HTTP_PROXY", "http_proxy")
NO_PROXY_VARS = ("NO_PROXY", "no_proxy")
ENV_MINIMAX_NO_PROXY = "MINIMAX_NO_PROXY"
CA_BUNDLE_VARS = ("REQUESTS_CA_BUNDLE", "SSL_CERT_FILE")


def _first_env(names: Iterable[str]) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def _split_hosts(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip().lower() for part in value.split(",") if part.strip()]


def get_proxy_url() -> Optional[str]:
    """Return the proxy URL, HTTPS_PROXY taking precedence over HTTP_PROXY."""
    return _first_env(PROXY_VARS)


def active_cert_bundle(prefer_order: Optional[Iterable[str]] = None) -> Optional[str]:
    """Return the configured CA bundle path, if any."""
    return _first_env(prefer_order or CA_BUNDLE_VARS)


def _matches_no_proxy(host: str, port: Optional[int], no_proxy_entry: str) -> bool:
    """Apply one NO_PROXY entry to ``host``/``port``.

    ``*`` matches any host. ``example.com`` and ``.example.com`` both match
    the domain itself and its subdomains. ``host:port`` additionally
    requires the port to match.
    """
    if not no_proxy_entry:
        return False
    if no_proxy_entry == "*":
        return True

    entry_host = no_proxy_entry
    name, sep, port_text = no_proxy_entry.rpartition(":")
    if sep and port_text.isdigit():
        if int(port_text) != port:
            return False
        entry_host = name

    entry_host = entry_host.lstrip(".")
    return host == entry_host or host.endswith("." + entry_host)


def should_bypass_proxy(url: str) -> bool:
    """True when ``url``'s host is excluded by MINIMAX_NO_PROXY or NO_PROXY."""
    parsed = urllib.parse.urlparse(url)
    if not parsed.hostname:
        return False
    host = parsed.hostname.lower()

    if host in _split_hosts(os.environ.get(ENV_MINIMAX_NO_PROXY)):
        return True
    return any(
        _matches_no_proxy(host, parsed.port, entry)
        for entry in _split_hosts(_first_env(NO_PROXY_VARS))
    )


def get_httpx_client(**client_kwargs) -> "httpx.Client":
    """Build an ``httpx.Client`` with the environment's proxy and CA bundle.

    Explicit ``verify`` or ``proxy`` arguments win over the environment, so
    ``get_httpx_client(**get_httpx_kwargs(url))`` disables the proxy for
    excluded hosts.
    """
    import httpx

    ca_bundle = active_cert_bundle()
    if ca_bundle and os.path.isfile(ca_bundle):
        client_kwargs.setdefault("verify", ca_bundle)
    elif ca_bundle:
        logger.warning(
            "CA bundle %s does not exist; using the default certificate store",
            ca_bundle,
        )

    proxy_url = get_proxy_url()
    if proxy_url:
        client_kwargs.setdefault("proxy", proxy_url)

    return httpx.Client(**client_kwargs)


def get_httpx_kwargs(url: str) -> Dict[str, Any]:
    """Client arguments for requests to ``url``: ``{"proxy": None}`` for
    hosts that bypass the proxy, otherwise nothing."""
    if should_bypass_proxy(url):
        return {"proxy": None}
    return {}
