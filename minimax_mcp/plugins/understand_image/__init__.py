"""Image understanding plugin.

Provides the `understand_image` tool, answered by the MiniMax Coding Plan
`/mcp/understand_image` endpoint.
"""

from .plugin import UnderstandImagePlugin, create_plugin

__all__ = [
    'UnderstandImagePlugin',
    'create_plugin',
]
