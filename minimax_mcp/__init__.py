# MiniMax MCP tools package
#
# Exposes MiniMax web search and image understanding as tool plugins, plus
# the commands that manage the session API key:
#
#   from minimax_mcp import MiniMaxExtension, ConsoleUI
#
#   extension = MiniMaxExtension(ui=ConsoleUI())
#   executors = extension.registry.get_enabled_executors()
#
# Lazy loading: imports are deferred via __getattr__ so that importing the
# package does not pull in httpx or rich until they are needed.

# Mapping from public name -> (module_path, attribute_name)
_LAZY_IMPORTS = {
    # Extension lifecycle
    "MiniMaxExtension": (".extension", "MiniMaxExtension"),
    # Plugin system
    "PluginRegistry": (".plugins.registry", "PluginRegistry"),
    # Session configuration
    "MiniMaxConfig": (".plugins.minimax.config", "MiniMaxConfig"),
    "resolve": (".plugins.minimax.env", "resolve"),
    # Result types
    "ToolResult": (".plugins.types", "ToolResult"),
    "ToolSchema": (".plugins.types", "ToolSchema"),
    "CancelToken": (".plugins.types", "CancelToken"),
    # User interaction
    "UserInterface": (".ui", "UserInterface"),
    "ConsoleUI": (".ui", "ConsoleUI"),
}


def __getattr__(name):
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        import importlib
        module = importlib.import_module(module_path, __name__)
        value = getattr(module, attr_name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "MiniMaxExtension",
    "PluginRegistry",
    "MiniMaxConfig",
    "resolve",
    "ToolResult",
    "ToolSchema",
    "CancelToken",
    "UserInterface",
    "ConsoleUI",
]
