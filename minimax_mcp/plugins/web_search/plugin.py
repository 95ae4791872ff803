"""Web search plugin backed by the MiniMax Coding Plan search endpoint."""

from typing import Any, Dict, List, Optional

from ..base import PermissionDisplayInfo
from ..minimax.adapter import MiniMaxToolPlugin
from ..minimax.client import WEB_SEARCH_PATH
from ..minimax.formatting import create_error_result, format_search_results
from ..types import ProgressDetails, SearchDetails, ToolResult, ToolSchema, ToolStatus, text_result


MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 500


class WebSearchPlugin(MiniMaxToolPlugin):
    """Plugin that provides web search through the MiniMax API.

    Configuration:
        timeout: Request timeout in seconds (default: 60).
    """

    tool_name = "web_search"
    endpoint = WEB_SEARCH_PATH
    progress_status = ToolStatus.SEARCHING
    cancelled_text = "Search cancelled"
    failure_title = "Search failed"
    trace_component = "WEB_SEARCH"

    def get_tool_schemas(self) -> List[ToolSchema]:
        """Return the ToolSchema for the web search tool."""
        return [ToolSchema(
            name='web_search',
            description=(
                'Search the web for information based on a query. '
                'Returns search results and related suggestions.'
            ),
            parameters={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Search query",
                        "minLength": MIN_QUERY_LENGTH,
                        "maxLength": MAX_QUERY_LENGTH,
                    }
                },
                "required": ["query"]
            },
            category="web",
        )]

    def get_system_instructions(self) -> Optional[str]:
        """Return system instructions for the web search tool."""
        return """You have access to `web_search` which searches the web through MiniMax.

Use it to find up-to-date information such as documentation, release notes,
tutorials and current events.

Example usage:
- web_search(query="TypeScript best practices 2024")
- web_search(query="React server components tutorial")

The tool returns a numbered list of pages with titles, URLs and snippets,
followed by related query suggestions when the API provides them."""

    def get_auto_approved_tools(self) -> List[str]:
        """Web search is read-only - auto-approve it."""
        return ['web_search']

    def format_permission_request(
        self,
        tool_name: str,
        arguments: Dict[str, Any],
        actor_type: str,
    ) -> Optional[PermissionDisplayInfo]:
        if tool_name != 'web_search':
            return None
        query = arguments.get('query', '')
        return PermissionDisplayInfo(
            summary=f'Search the web: "{query}"',
            details=str(query),
        )

    def _validate(self, args: Dict[str, Any]) -> Optional[ToolResult]:
        query = args.get('query')
        if not isinstance(query, str) or len(query.strip()) < MIN_QUERY_LENGTH:
            return create_error_result(
                "Invalid query",
                f"Query must be at least {MIN_QUERY_LENGTH} characters long",
            )
        if len(query) > MAX_QUERY_LENGTH:
            return create_error_result(
                "Invalid query",
                f"Query must be at most {MAX_QUERY_LENGTH} characters long",
            )
        return None

    def _build_payload(self, args: Dict[str, Any]) -> Dict[str, Any]:
        return {"query": args['query'].strip()}

    def _progress_text(self, args: Dict[str, Any]) -> str:
        return f'Searching: "{args["query"]}"'

    def _progress_details(self, args: Dict[str, Any]) -> ProgressDetails:
        return ProgressDetails(status=ToolStatus.SEARCHING, query=args['query'])

    def _build_result(self, args: Dict[str, Any], payload: Any) -> ToolResult:
        results = payload.get('results') if isinstance(payload, dict) else None
        result_count = len(results) if isinstance(results, list) else 0
        self._trace(f"execute: {result_count} results")
        return text_result(
            format_search_results(payload),
            SearchDetails(query=args['query'], result_count=result_count, raw=payload),
        )


def create_plugin() -> WebSearchPlugin:
    """Factory function to create the web search plugin instance."""
    return WebSearchPlugin()
