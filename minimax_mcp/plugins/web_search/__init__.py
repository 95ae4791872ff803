"""Web search plugin.

Provides the `web_search` tool, answered by the MiniMax Coding Plan
`/mcp/web_search` endpoint.
"""

from .plugin import WebSearchPlugin, create_plugin

__all__ = [
    'WebSearchPlugin',
    'create_plugin',
]
