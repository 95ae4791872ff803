"""Shared request/response lifecycle of the MiniMax tool plugins.

``MiniMaxToolPlugin`` implements the whole tool call: configuration check,
argument validation, optional confirmation, one progress update, the HTTP
request and the mapping of every outcome to a ToolResult. Subclasses only
describe their tool: schema, validation, payload and success rendering.

Outcome mapping:

    not configured / invalid args   -> error, no request sent
    declined confirmation           -> cancelled, no request sent
    401 / 403                       -> error, session marked unconfigured
    other non-2xx                   -> error with status code and body
    2xx                             -> subclass result
    cancel token fired              -> cancelled (not an error)
    transport or JSON failure       -> error with the exception message
"""

from typing import Any, Callable, Dict, List, Optional

import httpx

from ...trace import trace as _trace_write
from ...ui import UserInterface
from ..base import PermissionDisplayInfo, UserCommand
from ..types import (
    CancelledDetails,
    CancelledException,
    CancelToken,
    ProgressDetails,
    ToolResult,
    ToolSchema,
    ToolStatus,
    UpdateCallback,
    text_result,
)
from .client import AUTH_FAILURE_STATUSES, DEFAULT_TIMEOUT, MiniMaxClient
from .config import MiniMaxConfig
from .formatting import create_error_result


NOT_CONFIGURED_TITLE = "MiniMax API key not configured"
NOT_CONFIGURED_MESSAGE = (
    "Use /minimax-configure to set your API key, "
    "or set MINIMAX_API_KEY environment variable"
)
AUTH_FAILED_TITLE = "Authentication failed"
AUTH_FAILED_MESSAGE = "Invalid API key. Use /minimax-configure to update your credentials."
UNKNOWN_API_ERROR = "Unknown error occurred"


class MiniMaxToolPlugin:
    """Base class for a plugin exposing one MiniMax endpoint as a tool.

    Subclasses set the class attributes below and implement
    ``get_tool_schemas``, ``_validate``, ``_build_payload``,
    ``_progress_details`` and ``_build_result``.
    """

    tool_name: str = ""
    endpoint: str = ""
    progress_status: ToolStatus = ToolStatus.SEARCHING
    cancelled_text: str = "Cancelled"
    failure_title: str = "Request failed"
    trace_component: str = "MINIMAX"

    def __init__(
        self,
        config: Optional[MiniMaxConfig] = None,
        ui: Optional[UserInterface] = None,
    ):
        if config is None:
            from .env import resolve
            config = resolve()
        self._config = config
        self._ui = ui
        self._timeout: Optional[float] = DEFAULT_TIMEOUT
        self._client = MiniMaxClient(self._config, self._timeout)
        self._initialized = False
        # Agent context for trace logging
        self._agent_name: Optional[str] = None

    @property
    def name(self) -> str:
        return self.tool_name

    @property
    def config(self) -> MiniMaxConfig:
        return self._config

    def _trace(self, msg: str) -> None:
        """Write trace message to log file for debugging."""
        prefix = f"{self.trace_component}@{self._agent_name}" if self._agent_name else self.trace_component
        _trace_write(prefix, msg)

    def set_config(self, config: MiniMaxConfig) -> None:
        """Share the session configuration owned by the extension."""
        self._config = config
        self._client = MiniMaxClient(config, self._timeout)

    def set_ui(self, ui: Optional[UserInterface]) -> None:
        """Set the interface used for confirmation prompts."""
        self._ui = ui

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional dict with:
                - timeout: Request timeout in seconds (default: 60)
                - agent_name: Name used to tag trace lines
        """
        if config:
            self._agent_name = config.get("agent_name")
            if 'timeout' in config:
                self._timeout = config['timeout']
                self._client = MiniMaxClient(self._config, self._timeout)
        self._initialized = True
        self._trace(f"initialize: timeout={self._timeout}, configured={self._config.configured}")

    def shutdown(self) -> None:
        self._trace("shutdown")
        self._initialized = False

    def get_tool_schemas(self) -> List[ToolSchema]:
        raise NotImplementedError

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Return the executor mapping."""
        return {self.tool_name: self._execute}

    def get_user_commands(self) -> List[UserCommand]:
        """Tool plugins provide model tools only, no user commands."""
        return []

    def format_permission_request(
        self,
        tool_name: str,
        arguments: Dict[str, Any],
        actor_type: str,
    ) -> Optional[PermissionDisplayInfo]:
        return None

    def _execute(self, args: Dict[str, Any]) -> Dict[str, Any]:
        """Executor entry point: run the tool and return a JSON-serializable dict."""
        return self.execute(args).to_dict()

    # --- subclass hooks ---

    def _validate(self, args: Dict[str, Any]) -> Optional[ToolResult]:
        """Return an error result for invalid arguments, None when valid."""
        return None

    def _build_payload(self, args: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def _progress_details(self, args: Dict[str, Any]) -> ProgressDetails:
        return ProgressDetails(status=self.progress_status)

    def _progress_text(self, args: Dict[str, Any]) -> str:
        raise NotImplementedError

    def _needs_confirmation(self, args: Dict[str, Any]) -> bool:
        return False

    def _confirm(self, args: Dict[str, Any]) -> bool:
        return True

    def _build_result(self, args: Dict[str, Any], payload: Any) -> ToolResult:
        raise NotImplementedError

    # --- lifecycle ---

    def _cancelled_result(self) -> ToolResult:
        return text_result(self.cancelled_text, CancelledDetails())

    def execute(
        self,
        args: Dict[str, Any],
        on_update: Optional[UpdateCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ) -> ToolResult:
        """Run one tool call.

        Args:
            args: Tool arguments as sent by the model.
            on_update: Receives one progress result before the request.
            cancel_token: Aborts the request when cancelled.

        Returns:
            The terminal ToolResult. Never raises.
        """
        if not self._config.configured:
            self._trace("execute: refused, not configured")
            return create_error_result(NOT_CONFIGURED_TITLE, NOT_CONFIGURED_MESSAGE)

        invalid = self._validate(args)
        if invalid is not None:
            self._trace(f"execute: invalid arguments: {invalid.details.error}")
            return invalid

        try:
            if self._needs_confirmation(args) and not self._confirm(args):
                self._trace("execute: declined by user")
                return self._cancelled_result()

            if on_update is not None:
                on_update(text_result(self._progress_text(args), self._progress_details(args)))

            response = self._client.post(
                self.endpoint, self._build_payload(args), cancel_token=cancel_token
            )
            if not response.is_success:
                return self._error_for_status(response)

            payload = response.json()
            result = self._build_result(args, payload)
            self._trace(f"execute: complete, status={response.status_code}")
            return result
        except CancelledException:
            self._trace("execute: cancelled")
            return self._cancelled_result()
        except Exception as exc:
            self._trace(f"execute: failed: {exc}")
            return create_error_result(self.failure_title, str(exc) or type(exc).__name__)

    def _error_for_status(self, response: httpx.Response) -> ToolResult:
        error_text = response.text
        status = response.status_code
        self._trace(f"execute: API returned {status}")

        if status in AUTH_FAILURE_STATUSES:
            self._config.mark_unauthorized()
            return create_error_result(AUTH_FAILED_TITLE, AUTH_FAILED_MESSAGE, status_code=status)

        return create_error_result(
            f"API error ({status})",
            error_text or UNKNOWN_API_ERROR,
            status_code=status,
        )
