"""MiniMax authentication plugin.

Provides user commands for managing the MiniMax Coding Plan API key of the
current session. Keys set here live in memory only.

Commands:
    minimax-configure               - Prompt for an API key
    minimax-configure --key=<key>   - Set the API key directly
    minimax-configure --clear       - Forget the API key
    minimax-configure --show        - Show the current configuration
    minimax-configure --help        - Show help
    minimax-status                  - Show configuration and available tools
"""

import re
from typing import Any, Callable, Dict, List, Optional

from ...trace import trace as _trace_write
from ...ui import LEVEL_INFO, LEVEL_WARNING, UserInterface
from ..base import (
    CommandCompletion,
    CommandParameter,
    HelpLines,
    UserCommand,
)
from ..minimax.client import MiniMaxClient
from ..minimax.config import MiniMaxConfig, mask_key
from ..minimax.env import ENV_API_HOST, ENV_API_KEY, resolve_key_source
from ..types import ToolSchema


CONFIGURE_COMMAND = "minimax-configure"
STATUS_COMMAND = "minimax-status"

SUBSCRIBE_URL = "https://platform.minimax.io/subscribe/coding-plan"

# Flags offered by argument completion, in display order
CONFIGURE_FLAGS = ["--help", "--show", "--clear", "--key"]

# "--key=abc", "--key:abc" or "--key abc"
KEY_ARGUMENT_PATTERN = re.compile(r"--key(?:[=:\s]+(\S+))?", re.IGNORECASE)

KEY_PROMPT_MESSAGE = f"""Enter your MiniMax Coding Plan API key.

To get an API key:
1. Visit {SUBSCRIBE_URL}
2. Subscribe to a plan
3. Copy your API key from the dashboard

Your API key will only be stored in memory during this session."""


class MiniMaxAuthPlugin:
    """Plugin for MiniMax API key configuration commands."""

    def __init__(
        self,
        config: Optional[MiniMaxConfig] = None,
        ui: Optional[UserInterface] = None,
    ):
        if config is None:
            from ..minimax.env import resolve
            config = resolve()
        self._config = config
        self._ui = ui
        self._agent_name: Optional[str] = None

    @property
    def name(self) -> str:
        """Return the plugin name."""
        return "minimax_auth"

    @property
    def config(self) -> MiniMaxConfig:
        return self._config

    def _trace(self, msg: str) -> None:
        prefix = f"MINIMAX_AUTH@{self._agent_name}" if self._agent_name else "MINIMAX_AUTH"
        _trace_write(prefix, msg)

    def set_config(self, config: MiniMaxConfig) -> None:
        """Share the session configuration owned by the extension."""
        self._config = config

    def set_ui(self, ui: Optional[UserInterface]) -> None:
        """Set the interface used for prompts and notifications."""
        self._ui = ui

    def verify_credentials(self) -> bool:
        """Probe the API with the current key.

        Returns:
            False when no key is set or the API rejects it, True otherwise
            (including when the API cannot be reached).
        """
        return MiniMaxClient(self._config).ping()

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        if config:
            self._agent_name = config.get("agent_name")

    def shutdown(self) -> None:
        """Clean up resources."""
        pass

    def get_tool_schemas(self) -> List[ToolSchema]:
        """Return empty list - this plugin only provides user commands."""
        return []

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Return executors for the user commands."""
        return {
            CONFIGURE_COMMAND: lambda args: self.execute_user_command(CONFIGURE_COMMAND, args),
            STATUS_COMMAND: lambda args: self.execute_user_command(STATUS_COMMAND, args),
        }

    def get_system_instructions(self) -> Optional[str]:
        """No system instructions for this plugin."""
        return None

    def get_auto_approved_tools(self) -> List[str]:
        """User commands don't need permission approval."""
        return [CONFIGURE_COMMAND, STATUS_COMMAND]

    def get_user_commands(self) -> List[UserCommand]:
        """Return user-facing commands for key management."""
        return [
            UserCommand(
                name=CONFIGURE_COMMAND,
                description="Configure MiniMax API key for MCP tools",
                share_with_model=False,
                parameters=[
                    CommandParameter(
                        name="options",
                        description="--help, --show, --clear or --key=<api_key>",
                        required=False,
                        capture_rest=True,
                    ),
                ],
            ),
            UserCommand(
                name=STATUS_COMMAND,
                description="Show MiniMax MCP configuration status",
                share_with_model=False,
            ),
        ]

    def get_command_completions(
        self, command: str, args: List[str]
    ) -> List[CommandCompletion]:
        """Provide autocompletion for command arguments."""
        if command != CONFIGURE_COMMAND:
            return []
        partial = args[-1] if args else ""
        return self.complete_configure_argument(partial)

    def complete_configure_argument(self, prefix: str) -> List[CommandCompletion]:
        """Return the configure flags starting with ``prefix``."""
        return [
            CommandCompletion(flag, flag)
            for flag in CONFIGURE_FLAGS
            if flag.startswith(prefix)
        ]

    def execute_user_command(self, command: str, args: Dict[str, Any]) -> str:
        """Execute a user command.

        Args:
            command: Command name.
            args: Parsed arguments; ``options`` holds the raw flag string for
                minimax-configure.

        Returns:
            Empty string; all output goes through UI notifications.
        """
        if command == CONFIGURE_COMMAND:
            self.handle_configure(args.get("options", "") if args else "")
            return ""
        if command == STATUS_COMMAND:
            self._cmd_status()
            return ""
        return f"Unknown command: {command}"

    # ==================== minimax-configure ====================

    def handle_configure(self, raw_args: Optional[str]) -> None:
        """Handle ``minimax-configure``; the first recognized flag wins."""
        raw_args = (raw_args or "").strip()
        tokens = raw_args.split()

        if "--help" in tokens or "-h" in tokens:
            self._cmd_help()
            return

        if "--show" in tokens:
            self._cmd_show()
            return

        if "--clear" in tokens:
            self._cmd_clear()
            return

        key_match = KEY_ARGUMENT_PATTERN.search(raw_args)
        if key_match:
            self._cmd_key(key_match.group(1))
            return

        self._cmd_prompt()

    def _notify(self, message: str, level: str = LEVEL_INFO) -> None:
        if self._ui is not None:
            self._ui.notify(message, level)

    def _confirm(self, title: str, message: str) -> bool:
        if self._ui is None:
            return False
        return self._ui.confirm(title, message)

    def get_help(self) -> HelpLines:
        """Return help text for the configure command."""
        return HelpLines(lines=[
            (f"/{CONFIGURE_COMMAND} [options]", "bold"),
            ("", ""),
            ("Options:", "bold"),
            ("  --key <api_key>    Set API key directly", "dim"),
            ("  --clear            Clear configured API key", "dim"),
            ("  --show             Show current configuration status", "dim"),
            ("  --help, -h         Show this help message", "dim"),
            ("", ""),
            ("Environment variables:", "bold"),
            (f"  {ENV_API_KEY}    Your MiniMax Coding Plan API key", "dim"),
            (f"  {ENV_API_HOST}   API endpoint (default: https://api.minimax.io)", "dim"),
            ("", ""),
            ("Get your API key:", "bold"),
            (f"  {SUBSCRIBE_URL}", "dim"),
        ])

    def _cmd_help(self) -> None:
        self._notify(self.get_help().to_text(), LEVEL_INFO)

    def _cmd_show(self) -> None:
        if self._config.configured:
            status = (
                "Configured\n"
                f"API Host: {self._config.api_host}\n"
                f"Key: {mask_key(self._config.api_key)}"
            )
        else:
            status = "Not configured"
        self._notify(status, LEVEL_INFO)

    def _cmd_clear(self) -> None:
        confirmed = self._confirm(
            "Clear MiniMax Configuration",
            "This will remove your API key from the current session.",
        )
        if confirmed:
            self._config.clear()
            self._trace("configure: key cleared")
            self._notify("Configuration cleared", LEVEL_INFO)

    def _cmd_key(self, api_key: Optional[str]) -> None:
        if not api_key:
            self._notify(
                f"Usage: /{CONFIGURE_COMMAND} --key=<your_api_key>",
                LEVEL_WARNING,
            )
            return

        confirmed = self._confirm("Save MiniMax API Key?", f"Key: {mask_key(api_key)}")
        if confirmed:
            self._config.set_key(api_key)
            self._trace("configure: key set from arguments")
            self._notify("MiniMax API key saved", LEVEL_INFO)

    def _cmd_prompt(self) -> None:
        api_key = self._ui.input("MiniMax API Key:", KEY_PROMPT_MESSAGE) if self._ui else None

        if not api_key or not api_key.strip():
            self._notify("Configuration cancelled", LEVEL_WARNING)
            return

        confirmed = self._confirm(
            "Save MiniMax API Key?",
            "Save this API key for the current session?",
        )
        if confirmed:
            self._config.set_key(api_key.strip())
            self._trace("configure: key set from prompt")
            self._notify("MiniMax API key configured", LEVEL_INFO)

    # ==================== minimax-status ====================

    def _cmd_status(self) -> None:
        if not self._config.configured:
            self._notify(
                "MiniMax MCP not configured\n\n"
                f"Use /{CONFIGURE_COMMAND} to set up your API key",
                LEVEL_WARNING,
            )
            return

        lines = [
            "MiniMax MCP Configured",
            "",
            f"API Host: {self._config.api_host}",
            f"API Key: {mask_key(self._config.api_key)}",
        ]
        resolved_key, source = resolve_key_source()
        if source and resolved_key == self._config.api_key:
            lines.append(f"  Source: {source}")
        else:
            lines.append("  Source: session")
        lines.extend([
            "",
            "Available tools:",
            "  - web_search - Search the web",
            "  - understand_image - Analyze images",
        ])
        self._notify("\n".join(lines), LEVEL_INFO)


def create_plugin() -> MiniMaxAuthPlugin:
    """Factory function to create the MiniMax auth plugin instance."""
    return MiniMaxAuthPlugin()
