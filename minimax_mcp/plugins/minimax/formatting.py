"""Text rendering for MiniMax tool results."""

import json
from typing import Any, Optional

from ..types import ErrorDetails, ToolResult, text_result


NO_RESULTS_TEXT = "No results found"
SNIPPET_MAX_LENGTH = 200


def _truncate(text: str, limit: int = SNIPPET_MAX_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def format_search_results(raw: Any) -> str:
    """Format a web_search payload into readable text.

    Renders the ``results`` list as numbered entries (title, URL, snippet)
    and a trailing block for a non-empty ``suggestions`` list. When the
    payload has neither, the payload itself is pretty-printed.

    Args:
        raw: Decoded JSON payload from the search endpoint.

    Returns:
        Human-readable text.
    """
    if raw is None:
        return NO_RESULTS_TEXT

    output = ""
    payload = raw if isinstance(raw, dict) else {}

    results = payload.get("results")
    if isinstance(results, list):
        output = "Search Results\n\n"
        for index, item in enumerate(results, start=1):
            item = item if isinstance(item, dict) else {}
            title = item.get("title")
            if title is None:
                title = "No title"
            url = item.get("url")
            if url is None:
                url = "N/A"
            snippet = item.get("snippet") or ""

            output += f"{index}. {title}\n"
            output += f"   URL: {url}\n"
            if snippet:
                output += f"   {_truncate(str(snippet))}\n"
            output += "\n"

    suggestions = payload.get("suggestions")
    if isinstance(suggestions, list) and suggestions:
        output += "Suggestions:\n"
        for index, suggestion in enumerate(suggestions, start=1):
            output += f"  {index}. {suggestion}\n"
        output += "\n"

    if not output:
        output = json.dumps(raw, indent=2)

    return output


def create_error_result(title: str, message: str, status_code: Optional[int] = None) -> ToolResult:
    """Build the error result used by every failure path of the tools.

    Args:
        title: Short description, e.g. "Authentication failed".
        message: Longer explanation shown under the title.
        status_code: HTTP status when the failure came from the API.

    Returns:
        ToolResult with ``is_error`` set and ErrorDetails.
    """
    return text_result(
        f"Error: {title}\n{message}",
        ErrorDetails(error=f"{title}: {message}", status_code=status_code),
        is_error=True,
    )
