"""Plugin system for the MiniMax tools and commands.

Usage:
    from minimax_mcp.plugins import PluginRegistry
    from minimax_mcp.plugins.minimax import resolve

    registry = PluginRegistry(resolve())
    registry.discover()
    registry.enable_all()

    schemas = registry.get_enabled_tool_schemas()
    executors = registry.get_enabled_executors()

    registry.disable_all()
"""

from .base import ToolPlugin
from .registry import PluginRegistry

__all__ = ['ToolPlugin', 'PluginRegistry']
