"""Tool-facing types shared by the MiniMax plugins.

Contains the tool schema declaration, the cancellation primitives threaded
through every tool call, and the result shape every executor produces.

Tool results carry a ``details`` value that is one variant of a tagged
union keyed on ``ToolStatus``:

    ProgressDetails   searching / analyzing (progress updates only)
    SearchDetails     complete, for web_search
    ImageDetails      complete, for understand_image
    CancelledDetails  cancelled
    ErrorDetails      error
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union


class ToolStatus(str, Enum):
    """Lifecycle status reported in a tool result's details."""
    SEARCHING = "searching"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass
class ToolSchema:
    """Provider-agnostic tool/function declaration.

    Attributes:
        name: Unique tool name (e.g., 'web_search').
        description: Human-readable description of what the tool does.
        parameters: JSON Schema object describing the tool's parameters.
        category: Optional category for tool organization and filtering.
    """
    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    category: Optional[str] = None


@dataclass
class ContentBlock:
    """A block of display content returned by a tool."""
    text: str
    type: str = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass
class ProgressDetails:
    status: ToolStatus
    query: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value}
        if self.query is not None:
            data["query"] = self.query
        return data


@dataclass
class SearchDetails:
    query: str
    result_count: int
    raw: Any = None
    status: ToolStatus = ToolStatus.COMPLETE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "query": self.query,
            "resultCount": self.result_count,
            "raw": self.raw,
        }


@dataclass
class ImageDetails:
    prompt: str
    image_url: str
    raw: Any = None
    status: ToolStatus = ToolStatus.COMPLETE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "prompt": self.prompt,
            "imageUrl": self.image_url,
            "raw": self.raw,
        }


@dataclass
class CancelledDetails:
    status: ToolStatus = ToolStatus.CANCELLED

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value}


@dataclass
class ErrorDetails:
    error: str
    status_code: Optional[int] = None
    status: ToolStatus = ToolStatus.ERROR

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value, "error": self.error}
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        return data


ToolDetails = Union[
    ProgressDetails, SearchDetails, ImageDetails, CancelledDetails, ErrorDetails
]


@dataclass
class ToolResult:
    """Result of one tool invocation (or one progress update).

    Attributes:
        content: Display blocks shown to the model/user.
        details: Status-tagged structured details.
        is_error: True only for failures; cancellation is not an error.
    """
    content: List[ContentBlock]
    details: ToolDetails
    is_error: bool = False

    @property
    def status(self) -> ToolStatus:
        return self.details.status

    @property
    def text(self) -> str:
        """Concatenated text of all content blocks."""
        return "\n".join(block.text for block in self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-serializable executor payload."""
        data: Dict[str, Any] = {
            "content": [block.to_dict() for block in self.content],
            "details": self.details.to_dict(),
        }
        if self.is_error:
            data["isError"] = True
        return data


def text_result(text: str, details: ToolDetails, is_error: bool = False) -> ToolResult:
    """Build a ToolResult holding a single text block."""
    return ToolResult(content=[ContentBlock(text=text)], details=details, is_error=is_error)


# Progress sink: receives zero or more updates before the terminal result.
UpdateCallback = Callable[[ToolResult], None]


class CancelledException(Exception):
    """Raised when an operation is cancelled via CancelToken."""

    def __init__(self, message: str = "Operation was cancelled"):
        self.message = message
        super().__init__(self.message)


class CancelToken:
    """Thread-safe cancellation token for stopping operations.

    Used to signal cancellation requests across threads. Supports:
    - Simple cancellation via cancel()
    - Polling via is_cancelled property
    - Blocking wait via wait()
    - Callback registration for cancellation notifications

    Example:
        token = CancelToken()

        # In the tool thread
        result = plugin.execute(args, cancel_token=token)

        # In the UI thread
        token.cancel()  # Aborts the in-flight HTTP request
    """

    def __init__(self):
        self._cancelled = False
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    def cancel(self) -> None:
        """Request cancellation.

        Idempotent. All registered callbacks are invoked once.
        """
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks = list(self._callbacks)

        self._event.set()

        # Invoke callbacks outside lock to avoid deadlock
        for callback in callbacks:
            try:
                callback()
            except Exception:
                pass  # Swallow callback errors

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancel() is called or timeout expires.

        Returns:
            True if cancelled, False if timeout expired.
        """
        return self._event.wait(timeout=timeout)

    def raise_if_cancelled(self) -> None:
        """Raise CancelledException if cancelled."""
        if self._cancelled:
            raise CancelledException()

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register a callback to be invoked when cancelled.

        If already cancelled, callback is invoked immediately.
        """
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return
        try:
            callback()
        except Exception:
            pass
