"""Trace logging for the MiniMax plugins.

Plugins write short diagnostic lines to a trace file instead of stdout so
that the host's terminal stays clean. The path comes from MINIMAX_TRACE_LOG;
an empty value disables tracing, and when the variable is unset the trace
goes to a file in the system temp directory.

Usage:
    from minimax_mcp.trace import trace

    trace("WEB_SEARCH", "execute: query='python asyncio'")
    trace("WEB_SEARCH", "request failed", include_traceback=True)
"""

import os
import tempfile
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional, Set


TRACE_ENV_VAR = "MINIMAX_TRACE_LOG"
DEFAULT_TRACE_FILENAME = "minimax_mcp_trace.log"

# Log directories known to exist
_created_dirs: Set[Path] = set()


def resolve_trace_path(
    *env_vars: str,
    default_filename: str = DEFAULT_TRACE_FILENAME,
) -> Optional[str]:
    """Pick the trace file from the first of ``env_vars`` that is set.

    A variable set to the empty string turns tracing off. With none of them
    set, ``default_filename`` in the temp directory is used.

    Returns:
        The trace file path, or None when tracing is off.
    """
    for name in env_vars:
        if name not in os.environ:
            continue
        return os.environ[name] or None
    return os.path.join(tempfile.gettempdir(), default_filename)


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S.%f")[:-3]


def trace_write(
    component: str,
    msg: str,
    trace_path: Optional[str],
    *,
    include_traceback: bool = False,
) -> None:
    """Append one ``[time] [component] msg`` line to ``trace_path``.

    Does nothing when ``trace_path`` is None. I/O errors are ignored so a
    broken trace file never affects a tool call.
    """
    if not trace_path:
        return

    prefix = f"[{_timestamp()}] [{component}]"
    lines = [f"{prefix} {msg}\n"]
    if include_traceback:
        tb = traceback.format_exc()
        if tb.strip() != "NoneType: None":
            lines.append(f"{prefix} Traceback:\n{tb}\n")

    path = Path(trace_path)
    try:
        parent = path.resolve().parent
        if parent not in _created_dirs:
            parent.mkdir(parents=True, exist_ok=True)
            _created_dirs.add(parent)
        with path.open("a", encoding="utf-8") as f:
            f.writelines(lines)
    except OSError:
        pass


def trace(
    component: str,
    msg: str,
    *,
    include_traceback: bool = False,
) -> None:
    """Write a trace line to the MINIMAX_TRACE_LOG file."""
    trace_write(
        component,
        msg,
        resolve_trace_path(TRACE_ENV_VAR),
        include_traceback=include_traceback,
    )
