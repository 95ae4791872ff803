"""MiniMax authentication plugin.

Provides user commands for configuring the MiniMax API key of the session.
"""

from .plugin import MiniMaxAuthPlugin, create_plugin

__all__ = ["MiniMaxAuthPlugin", "create_plugin"]
