"""Image understanding plugin backed by the MiniMax Coding Plan vision endpoint."""

import json
import re
from typing import Any, Dict, List, Optional

from ..base import PermissionDisplayInfo
from ..minimax.adapter import MiniMaxToolPlugin
from ..minimax.client import UNDERSTAND_IMAGE_PATH
from ..minimax.formatting import create_error_result
from ..types import ImageDetails, ProgressDetails, ToolResult, ToolSchema, ToolStatus, text_result


MAX_PROMPT_LENGTH = 1000
MAX_IMAGE_URL_LENGTH = 2000

# http(s) URL, or a local path starting with /, ./ or ../
IMAGE_URL_PATTERN = re.compile(r"^(https?://.+|\.{0,2}/.+)$", re.DOTALL)

# Prompts asking for this kind of work get a confirmation first
EXPENSIVE_PROMPT_PATTERN = re.compile(r"describe|analy[sz]e|extract|recognize", re.IGNORECASE)
LONG_PROMPT_LENGTH = 200


def is_valid_image_url(image_url: str) -> bool:
    return bool(IMAGE_URL_PATTERN.match(image_url))


def is_expensive_prompt(prompt: str) -> bool:
    return len(prompt) > LONG_PROMPT_LENGTH or bool(EXPENSIVE_PROMPT_PATTERN.search(prompt))


class UnderstandImagePlugin(MiniMaxToolPlugin):
    """Plugin that analyzes images through the MiniMax API.

    Prompts that look expensive (describe/analyze/extract/recognize, or
    longer than 200 characters) are confirmed with the user before the
    request is sent, when a UI is attached.

    Configuration:
        timeout: Request timeout in seconds (default: 60).
    """

    tool_name = "understand_image"
    endpoint = UNDERSTAND_IMAGE_PATH
    progress_status = ToolStatus.ANALYZING
    cancelled_text = "Analysis cancelled"
    failure_title = "Analysis failed"
    trace_component = "UNDERSTAND_IMAGE"

    def get_tool_schemas(self) -> List[ToolSchema]:
        """Return the ToolSchema for the image understanding tool."""
        return [ToolSchema(
            name='understand_image',
            description=(
                'Analyze and understand image content using AI. Accepts an '
                'HTTP/HTTPS URL or a local file path. Supported formats: '
                'JPEG, PNG, GIF, WebP (max 20MB).'
            ),
            parameters={
                "type": "object",
                "properties": {
                    "prompt": {
                        "type": "string",
                        "description": "Question or analysis request for the image",
                        "minLength": 1,
                        "maxLength": MAX_PROMPT_LENGTH,
                    },
                    "image_url": {
                        "type": "string",
                        "description": "Image source - HTTP/HTTPS URL or local file path",
                        "minLength": 1,
                        "maxLength": MAX_IMAGE_URL_LENGTH,
                    }
                },
                "required": ["prompt", "image_url"]
            },
            category="web",
        )]

    def get_system_instructions(self) -> Optional[str]:
        """Return system instructions for the image understanding tool."""
        return """You have access to `understand_image` which analyzes images through MiniMax.

Use it to:
- Analyze screenshots, diagrams, or photos
- Extract text from images (OCR)
- Identify UI components or code in screenshots

Example usage:
- understand_image(prompt="What is in this image?", image_url="https://example.com/screenshot.png")
- understand_image(prompt="Extract the text", image_url="./docs/diagram.png")

`image_url` must be an http(s) URL or a local path starting with / or ./"""

    def get_auto_approved_tools(self) -> List[str]:
        """Image analysis can upload local files - require permission."""
        return []

    def format_permission_request(
        self,
        tool_name: str,
        arguments: Dict[str, Any],
        actor_type: str,
    ) -> Optional[PermissionDisplayInfo]:
        if tool_name != 'understand_image':
            return None
        prompt = str(arguments.get('prompt', ''))
        image_url = str(arguments.get('image_url', ''))
        return PermissionDisplayInfo(
            summary=f"Analyze image: {image_url[:50]}",
            details=json.dumps({"prompt": prompt, "image_url": image_url}, indent=2),
            format_hint="json",
        )

    def _validate(self, args: Dict[str, Any]) -> Optional[ToolResult]:
        prompt = args.get('prompt')
        image_url = args.get('image_url')
        if not prompt or not image_url or not isinstance(prompt, str) or not isinstance(image_url, str):
            return create_error_result(
                "Missing parameters",
                "Both 'prompt' and 'image_url' are required",
            )
        if len(prompt) > MAX_PROMPT_LENGTH:
            return create_error_result(
                "Invalid prompt",
                f"Prompt must be at most {MAX_PROMPT_LENGTH} characters long",
            )
        if len(image_url) > MAX_IMAGE_URL_LENGTH or not is_valid_image_url(image_url):
            return create_error_result(
                "Invalid image URL",
                "Image URL must be an HTTP/HTTPS URL or a local file path starting with / or ./",
            )
        return None

    def _needs_confirmation(self, args: Dict[str, Any]) -> bool:
        return self._ui is not None and is_expensive_prompt(args['prompt'])

    def _confirm(self, args: Dict[str, Any]) -> bool:
        prompt = args['prompt']
        preview = prompt[:50] + ("..." if len(prompt) > 50 else "")
        return self._ui.confirm(
            "Analyze Image?",
            f'This analysis may take time. Continue with: "{preview}"?',
        )

    def _build_payload(self, args: Dict[str, Any]) -> Dict[str, Any]:
        return {"prompt": args['prompt'], "image_url": args['image_url']}

    def _progress_text(self, args: Dict[str, Any]) -> str:
        return "Analyzing image..."

    def _progress_details(self, args: Dict[str, Any]) -> ProgressDetails:
        return ProgressDetails(status=ToolStatus.ANALYZING)

    def _build_result(self, args: Dict[str, Any], payload: Any) -> ToolResult:
        analysis = payload.get('analysis') if isinstance(payload, dict) else None
        if not isinstance(analysis, str):
            analysis = json.dumps(payload)
        return text_result(
            analysis,
            ImageDetails(prompt=args['prompt'], image_url=args['image_url'], raw=payload),
        )


def create_plugin() -> UnderstandImagePlugin:
    """Factory function to create the image understanding plugin instance."""
    return UnderstandImagePlugin()
