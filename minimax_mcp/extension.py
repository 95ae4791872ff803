"""Top-level lifecycle of the MiniMax tools inside a host agent.

The extension resolves credentials once, owns the resulting session
configuration, and hands it to every plugin through the registry. The host
then uses the registry (or the helpers here) to list tools, run tool
executors and dispatch user commands.

Example:
    extension = MiniMaxExtension(ui=ConsoleUI(), env_file=".env")
    extension.on_session_start()

    result = extension.execute_tool("web_search", {"query": "httpx timeouts"})
    extension.run_command("minimax-configure", "--show")
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .plugins.base import CommandCompletion, parse_command_args
from .plugins.minimax.config import MiniMaxConfig
from .plugins.minimax.env import resolve
from .plugins.registry import PluginRegistry
from .plugins.types import CancelToken, ToolResult, ToolSchema, UpdateCallback
from .trace import trace as _trace_write
from .ui import LEVEL_INFO, LEVEL_WARNING, UserInterface


class MiniMaxExtension:
    """Owns the session configuration and the MiniMax plugins.

    Args:
        ui: Interface for confirmations, prompts and notifications.
        env_file: Optional .env file loaded before credentials are resolved.
            Values already present in the environment are kept.
        workspace: Project directory for the project settings file.
        home: Home directory for the user settings file.
        plugin_configs: Per-plugin initialize() configs, keyed by plugin name.
    """

    def __init__(
        self,
        ui: Optional[UserInterface] = None,
        env_file: Optional[str] = None,
        workspace: Optional[Path] = None,
        home: Optional[Path] = None,
        plugin_configs: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        if env_file and os.path.isfile(env_file):
            load_dotenv(env_file)

        self._ui = ui
        self._config = resolve(workspace=workspace, home=home)
        self._registry = PluginRegistry(self._config, ui=ui)
        self._registry.discover()
        self._registry.enable_all(plugin_configs)
        _trace_write(
            "EXTENSION",
            f"loaded plugins={self._registry.list_enabled()} configured={self._config.configured}",
        )

    @property
    def config(self) -> MiniMaxConfig:
        return self._config

    @property
    def registry(self) -> PluginRegistry:
        return self._registry

    def set_ui(self, ui: Optional[UserInterface]) -> None:
        self._ui = ui
        self._registry.set_ui(ui)

    def on_session_start(self) -> None:
        """Tell the user whether the tools are usable in this session."""
        if self._ui is None:
            return
        if self._config.configured:
            self._ui.notify(
                "MiniMax MCP tools available (web_search, understand_image)", LEVEL_INFO
            )
        else:
            self._ui.notify(
                "MiniMax API key not configured. Use /minimax-configure", LEVEL_WARNING
            )

    def shutdown(self) -> None:
        self._registry.disable_all()

    def get_tool_schemas(self) -> List[ToolSchema]:
        return self._registry.get_enabled_tool_schemas()

    def execute_tool(
        self,
        tool_name: str,
        args: Dict[str, Any],
        on_update: Optional[UpdateCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> ToolResult:
        """Run a MiniMax tool with progress and cancellation support.

        Raises:
            ValueError: If no enabled plugin provides ``tool_name``.
        """
        tool_names = {schema.name for schema in self.get_tool_schemas()}
        if tool_name not in tool_names:
            raise ValueError(f"Unknown tool: {tool_name}")
        plugin = self._registry.get_plugin(tool_name)
        return plugin.execute(args, on_update=on_update, cancel_token=cancel_token)

    def run_command(self, command_name: str, raw_args: str = "") -> str:
        """Dispatch a user command with its raw argument string.

        Raises:
            ValueError: If no enabled plugin declares ``command_name``.
        """
        commands = self._registry.get_enabled_user_commands()
        if command_name not in commands:
            raise ValueError(f"Unknown command: {command_name}")
        plugin = self._registry.get_command_plugin(command_name)
        args = parse_command_args(commands[command_name], raw_args)
        return plugin.execute_user_command(command_name, args)

    def get_command_completions(self, command_name: str, prefix: str) -> List[CommandCompletion]:
        plugin = self._registry.get_command_plugin(command_name)
        if plugin is None or not hasattr(plugin, 'get_command_completions'):
            return []
        return plugin.get_command_completions(command_name, [prefix] if prefix else [])
