"""Plugin protocol and the command declarations shared by the MiniMax plugins."""

from dataclasses import dataclass
from typing import Protocol, List, Dict, Any, Callable, Optional, NamedTuple, runtime_checkable

from .types import ToolSchema


@dataclass
class PermissionDisplayInfo:
    """How a pending tool call is shown when the host asks for approval.

    Attributes:
        summary: One line, e.g. 'Search the web: "httpx retries"'.
        details: Full arguments as shown to the user.
        format_hint: "text" or "json".
    """
    summary: str
    details: str
    format_hint: str = "text"


@dataclass
class HelpLines:
    """Help text as (text, style) pairs; style is "bold", "dim" or ""."""
    lines: List[tuple]

    def to_text(self) -> str:
        """Drop the styles and join the lines."""
        return "\n".join(text for text, _style in self.lines)


class CommandCompletion(NamedTuple):
    """One suggestion offered while the user types command arguments."""
    value: str
    description: str = ""


class CommandParameter(NamedTuple):
    """A named positional argument of a user command.

    With ``capture_rest`` set, the parameter receives every remaining token
    joined by single spaces; it must then be the last parameter.
    """
    name: str
    description: str = ""
    required: bool = False
    capture_rest: bool = False


class UserCommand(NamedTuple):
    """A command typed by the user (e.g. ``/minimax-configure``).

    User commands bypass the model. ``share_with_model`` controls whether the
    command's output is added to the conversation.
    """
    name: str
    description: str
    share_with_model: bool = False
    parameters: Optional[List[CommandParameter]] = None


def parse_command_args(command: UserCommand, raw_args: str) -> Dict[str, Any]:
    """Split ``raw_args`` into the named parameters of ``command``.

    Tokens are assigned to parameters in order. Missing trailing parameters
    are simply absent from the result.

    Returns:
        Parameter name to value. A command without declared parameters gets
        ``{"args": [tokens]}``.
    """
    tokens = (raw_args or "").split()

    if not command.parameters:
        return {"args": tokens}

    parsed: Dict[str, Any] = {}
    for position, param in enumerate(command.parameters):
        if position >= len(tokens):
            break
        if param.capture_rest:
            parsed[param.name] = ' '.join(tokens[position:])
            break
        parsed[param.name] = tokens[position]

    return parsed


@runtime_checkable
class ToolPlugin(Protocol):
    """Interface implemented by every plugin the registry discovers.

    A plugin contributes model tools (``get_tool_schemas`` plus
    ``get_executors``), user commands (``get_user_commands``), or both.
    """

    @property
    def name(self) -> str:
        ...

    def get_tool_schemas(self) -> List[ToolSchema]:
        ...

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Map tool name to a callable taking the argument dict and
        returning a JSON-serializable result."""
        ...

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Called when the plugin is enabled, and again on reconfiguration."""
        ...

    def shutdown(self) -> None:
        ...

    def get_system_instructions(self) -> Optional[str]:
        ...

    def get_auto_approved_tools(self) -> List[str]:
        """Tools that may run without asking the user first."""
        ...

    def get_user_commands(self) -> List[UserCommand]:
        ...
