"""Plugin registry for discovering, loading, and managing the MiniMax plugins."""

import importlib
import logging
import pkgutil
from pathlib import Path
from typing import Dict, List, Set, Callable, Any, Optional

from .base import ToolPlugin, UserCommand
from .minimax.config import MiniMaxConfig
from .types import ToolSchema

logger = logging.getLogger(__name__)

# Modules in this package that are not plugins
_NON_PLUGIN_MODULES = ('base', 'registry', 'types', 'minimax', 'tests')


class PluginRegistry:
    """Manages plugin discovery, lifecycle, and enable/disable state.

    Every discovered plugin receives the same session configuration and UI,
    so a key set through the configure command is seen by both tools.

    Usage:
        registry = PluginRegistry(session_config, ui=ConsoleUI())
        registry.discover()

        print(registry.list_available())  # ['minimax_auth', 'understand_image', 'web_search']

        registry.enable_all()
        schemas = registry.get_enabled_tool_schemas()
        executors = registry.get_enabled_executors()

        registry.disable_all()
    """

    def __init__(self, session_config: MiniMaxConfig, ui: Optional[Any] = None):
        self._session_config = session_config
        self._ui = ui
        self._plugins: Dict[str, ToolPlugin] = {}
        self._enabled: Set[str] = set()
        self._configs: Dict[str, Dict[str, Any]] = {}

    @property
    def session_config(self) -> MiniMaxConfig:
        return self._session_config

    def discover(self, plugin_dir: Optional[Path] = None) -> List[str]:
        """Discover all plugins from the plugins directory.

        Scans the plugin directory for modules that export a
        `create_plugin()` factory function, and instantiates each plugin.

        Args:
            plugin_dir: Directory to scan. Defaults to this package's directory.

        Returns:
            List of discovered plugin names.
        """
        if plugin_dir is None:
            plugin_dir = Path(__file__).parent

        discovered = []

        for finder, name, ispkg in pkgutil.iter_modules([str(plugin_dir)]):
            if name.startswith('_') or name in _NON_PLUGIN_MODULES:
                continue

            try:
                module = importlib.import_module(f".{name}", package=__package__)
                if not hasattr(module, 'create_plugin'):
                    logger.debug("%s: no create_plugin() function found", name)
                    continue
                plugin = module.create_plugin()
            except Exception as exc:
                logger.warning("Error loading plugin '%s': %s", name, exc)
                continue

            if not isinstance(plugin, ToolPlugin):
                logger.warning("%s: plugin does not implement ToolPlugin protocol", name)
                continue

            self.register(plugin)
            discovered.append(plugin.name)

        return sorted(discovered)

    def register(self, plugin: ToolPlugin) -> None:
        """Add a plugin instance, wiring in the shared config and UI."""
        if hasattr(plugin, 'set_config'):
            plugin.set_config(self._session_config)
        if hasattr(plugin, 'set_ui'):
            plugin.set_ui(self._ui)
        self._plugins[plugin.name] = plugin

    def set_ui(self, ui: Optional[Any]) -> None:
        """Replace the UI on every registered plugin."""
        self._ui = ui
        for plugin in self._plugins.values():
            if hasattr(plugin, 'set_ui'):
                plugin.set_ui(ui)

    def list_available(self) -> List[str]:
        """List all discovered plugin names."""
        return sorted(self._plugins.keys())

    def list_enabled(self) -> List[str]:
        """List currently enabled plugin names."""
        return sorted(self._enabled)

    def is_enabled(self, name: str) -> bool:
        return name in self._enabled

    def get_plugin(self, name: str) -> Optional[ToolPlugin]:
        """Get a plugin by name, or None if not found."""
        return self._plugins.get(name)

    def enable(self, name: str, config: Optional[Dict[str, Any]] = None) -> None:
        """Enable a plugin.

        Calls the plugin's initialize() method if this is the first time
        enabling it, or if a new config is provided.

        Raises:
            ValueError: If the plugin is not found.
        """
        if name not in self._plugins:
            raise ValueError(f"Plugin '{name}' not found. Available: {self.list_available()}")

        plugin = self._plugins[name]

        if name not in self._enabled:
            plugin.initialize(config)
            if config:
                self._configs[name] = config
            self._enabled.add(name)
        elif config and config != self._configs.get(name):
            # Re-initialize with new config
            plugin.shutdown()
            plugin.initialize(config)
            self._configs[name] = config

    def disable(self, name: str) -> None:
        """Disable a plugin, calling its shutdown() method."""
        if name in self._enabled:
            self._plugins[name].shutdown()
            self._enabled.discard(name)
            self._configs.pop(name, None)

    def enable_all(self, config: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        """Enable all discovered plugins.

        Args:
            config: Optional dict mapping plugin names to their configs.
        """
        config = config or {}
        for name in self._plugins:
            self.enable(name, config.get(name))

    def disable_all(self) -> None:
        """Disable all enabled plugins."""
        for name in list(self._enabled):
            self.disable(name)

    def get_enabled_tool_schemas(self) -> List[ToolSchema]:
        """Get ToolSchemas from all enabled plugins."""
        schemas = []
        for name in sorted(self._enabled):
            schemas.extend(self._plugins[name].get_tool_schemas())
        return schemas

    def get_enabled_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Get executor callables from all enabled plugins."""
        executors = {}
        for name in sorted(self._enabled):
            executors.update(self._plugins[name].get_executors())
        return executors

    def get_enabled_user_commands(self) -> Dict[str, UserCommand]:
        """Map command name to declaration for all enabled plugins."""
        commands = {}
        for name in sorted(self._enabled):
            for command in self._plugins[name].get_user_commands():
                commands[command.name] = command
        return commands

    def get_command_plugin(self, command_name: str) -> Optional[ToolPlugin]:
        """Return the enabled plugin that declares ``command_name``."""
        for name in sorted(self._enabled):
            plugin = self._plugins[name]
            if any(cmd.name == command_name for cmd in plugin.get_user_commands()):
                return plugin
        return None
