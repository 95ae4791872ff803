"""Shared MiniMax core used by the tool and auth plugins.

Holds credential resolution, the session configuration object, the HTTP
client for the MCP endpoints, result formatting and the tool lifecycle base
class.
"""

from .config import MiniMaxConfig, mask_key
from .env import DEFAULT_MINIMAX_API_HOST, resolve, resolve_key_source
from .formatting import create_error_result, format_search_results

__all__ = [
    "DEFAULT_MINIMAX_API_HOST",
    "MiniMaxConfig",
    "create_error_result",
    "format_search_results",
    "mask_key",
    "resolve",
    "resolve_key_source",
]
