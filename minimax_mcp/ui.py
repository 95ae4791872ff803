"""User interaction seam between the plugins and the host.

Plugins never talk to the terminal directly. They receive an object that
implements ``UserInterface`` and use it to ask for confirmation, read a value,
or show a notification. Every call blocks until the user answers.

``ConsoleUI`` is the terminal implementation used when the plugins run
outside a host that supplies its own UI.
"""

from typing import Optional, Protocol, runtime_checkable

from rich.console import Console
from rich.prompt import Confirm, Prompt


# Notification levels understood by notify()
LEVEL_INFO = "info"
LEVEL_WARNING = "warning"
LEVEL_ERROR = "error"

_LEVEL_STYLES = {
    LEVEL_INFO: "",
    LEVEL_WARNING: "yellow",
    LEVEL_ERROR: "bold red",
}


@runtime_checkable
class UserInterface(Protocol):
    """Confirmation, input and notification capability supplied by the host."""

    def confirm(self, title: str, message: str) -> bool:
        """Ask a yes/no question. Returns True only on an affirmative answer."""
        ...

    def input(self, title: str, message: str) -> Optional[str]:
        """Ask for a text value. Returns None when the prompt is cancelled."""
        ...

    def notify(self, message: str, level: str = LEVEL_INFO) -> None:
        """Show a message to the user."""
        ...


class ConsoleUI:
    """UserInterface backed by a rich Console."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    def confirm(self, title: str, message: str) -> bool:
        self._console.print(f"[bold]{title}[/bold]")
        if message:
            self._console.print(message, markup=False)
        try:
            return Confirm.ask("Continue?", console=self._console, default=False)
        except (EOFError, KeyboardInterrupt):
            return False

    def input(self, title: str, message: str) -> Optional[str]:
        if message:
            self._console.print(message, markup=False)
        try:
            return Prompt.ask(title, console=self._console, password=True, default="")
        except (EOFError, KeyboardInterrupt):
            return None

    def notify(self, message: str, level: str = LEVEL_INFO) -> None:
        style = _LEVEL_STYLES.get(level, "")
        self._console.print(message, style=style or None, markup=False)
