"""Markdown renderer implementation for Goose session transcripts."""

import logging
from typing import Any, Callable, Optional, Sequence

from ..models import (
    BlobResourceContents,
    ImageContent,
    Message,
    MessageContent,
    RedactedThinkingContent,
    ResultContent,
    ResultImageContent,
    ResultResourceContent,
    ResultTextContent,
    Role,
    TextContent,
    TextResourceContents,
    ThinkingContent,
    ToolRequestContent,
    ToolResponseContent,
)
from ..renderer import Renderer
from .values import render_value

logger = logging.getLogger(__name__)

RULE = "\n\n---\n\n"
IMAGE_DATA_PREVIEW_LENGTH = 30

ROLE_HEADINGS = {
    Role.USER: "### User:\n",
    Role.ASSISTANT: "### Assistant:\n",
}

# Fence language for text resources, keyed by URI extension
RESOURCE_LANGUAGES = {
    "rs": "rust",
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "md": "markdown",
    "html": "html",
    "css": "css",
    "sh": "bash",
}


def split_tool_name(name: str) -> tuple[str, str]:
    """Split a tool name into (namespace, short name) on the last ``__``."""
    namespace, sep, short_name = name.rpartition("__")
    if not sep:
        return "Tool", name
    return namespace, short_name


def resource_language(uri: str, mime_type: Optional[str]) -> str:
    """Pick a fence language for a text resource from its URI extension."""
    extension = uri.split(".")[-1]
    if language := RESOURCE_LANGUAGES.get(extension):
        return language
    if mime_type is None or mime_type == "text":
        return ""
    return mime_type


def _other_arguments(arguments: Any, *consumed: str) -> dict[str, Any]:
    if not isinstance(arguments, dict):
        return {}
    return {k: v for k, v in arguments.items() if k not in consumed}


# -----------------------------------------------------------------------------
# Tool Argument Layouts
# -----------------------------------------------------------------------------
# Each layout renders a tool call's arguments; names without an entry in
# TOOL_LAYOUTS use the generic structured value rendering.

ToolLayout = Callable[[Any, bool], str]


def format_generic_arguments(arguments: Any, full_content: bool) -> str:
    return render_value(arguments, 0, full_content)


def format_shell_arguments(arguments: Any, full_content: bool) -> str:
    """Show the shell command as a sh block, then any other arguments."""
    parts: list[str] = []
    command = arguments.get("command") if isinstance(arguments, dict) else None
    if isinstance(command, str):
        parts.append(f"*   **command**:\n    ```sh\n    {command.strip()}\n    ```\n")
    if other := _other_arguments(arguments, "command"):
        parts.append(render_value(other, 0, full_content))
    return "".join(parts)


def format_text_editor_arguments(arguments: Any, full_content: bool) -> str:
    """Show the edited path inline and the edit itself as a fenced block."""
    parts: list[str] = []
    if isinstance(arguments, dict):
        path = arguments.get("path")
        if isinstance(path, str):
            parts.append(f"*   **path**: `{path}`\n")
        code_edit = arguments.get("code_edit")
        if isinstance(code_edit, str):
            parts.append(f"*   **code_edit**:\n    ```\n{code_edit}\n    ```\n")
    if other := _other_arguments(arguments, "path", "code_edit"):
        parts.append(render_value(other, 0, full_content))
    return "".join(parts)


TOOL_LAYOUTS: dict[str, ToolLayout] = {
    "developer__shell": format_shell_arguments,
    "mcp__developer__shell": format_shell_arguments,
    "developer__text_editor": format_text_editor_arguments,
    "mcp__developer__text_editor": format_text_editor_arguments,
}


class MarkdownRenderer(Renderer):
    """Markdown renderer for Goose session transcripts.

    Rendering is a pure function of the messages and ``full_content``:
    messages are never mutated and the only state is the tool pairing flag,
    which lives for a single generate() call.
    """

    # -------------------------------------------------------------------------
    # Private Utility Methods
    # -------------------------------------------------------------------------

    def _quote(self, text: str) -> str:
        """Prefix each line with '> ' to create a blockquote."""
        return "> " + text.replace("\n", "\n> ")

    def _code_fence(self, text: str, lang: str = "") -> str:
        return f"```{lang}\n{text}\n```\n"

    def _is_visible(self, item: ResultContent) -> bool:
        """Apply the audience filter unless full content is requested."""
        if self.full_content:
            return True
        audience = item.audience()
        return audience is None or Role.ASSISTANT in audience

    # -------------------------------------------------------------------------
    # Message Content Formatters
    # -------------------------------------------------------------------------

    def format_TextContent(self, content: TextContent) -> str:
        return f"{content.text}\n\n"

    def format_ThinkingContent(self, content: ThinkingContent) -> str:
        return f"**Thinking:**\n{self._quote(content.thinking)}\n\n"

    def format_RedactedThinkingContent(
        self,
        content: RedactedThinkingContent,  # noqa: ARG002
    ) -> str:
        # The redacted payload is never shown, even with full content
        return "**Thinking:**\n> *Thinking was redacted*\n\n"

    def format_ImageContent(self, content: ImageContent) -> str:
        preview = content.data[:IMAGE_DATA_PREVIEW_LENGTH]
        return (
            f"**Image:** `(type: {content.mime_type}, "
            f"data placeholder: {preview}...)`\n\n"
        )

    def format_ToolRequestContent(self, content: ToolRequestContent) -> str:
        return self.format_tool_request(content) + "\n"

    def format_ToolResponseContent(self, content: ToolResponseContent) -> str:
        return self.format_tool_response(content) + "\n"

    def format_fallback(self, obj: Any) -> str:
        logger.debug("No Markdown formatter for %s", type(obj).__name__)
        return "`WARNING: Message content type could not be rendered to Markdown`\n\n"

    # -------------------------------------------------------------------------
    # Tool Requests
    # -------------------------------------------------------------------------

    def format_tool_request(self, content: ToolRequestContent) -> str:
        """Render a tool call heading and its arguments, or the call error."""
        call = content.tool_call.value
        if content.tool_call.is_error or call is None:
            error = content.tool_call.error or "Unknown error"
            return f"**Error in Tool Call:**\n{self._code_fence(error)}"

        namespace, short_name = split_tool_name(call.name)
        layout = TOOL_LAYOUTS.get(call.name, format_generic_arguments)
        return (
            f"#### Tool Call: `{short_name}` (namespace: `{namespace}`)\n"
            "**Arguments:**\n"
            f"{layout(call.arguments, self.full_content)}"
        )

    # -------------------------------------------------------------------------
    # Tool Responses
    # -------------------------------------------------------------------------

    def format_tool_response(self, content: ToolResponseContent) -> str:
        """Render each visible result item of a tool response, or its error."""
        parts = ["#### Tool Response:\n"]
        result = content.tool_result
        if result.is_error:
            error = result.error or "Unknown error"
            parts.append(f"**Error in Tool Response:**\n{self._code_fence(error)}")
            return "".join(parts)

        if not result.value:
            parts.append("*No textual output from tool.*\n")
        for item in result.value:
            if self._is_visible(item):
                parts.append(self._dispatch_format(item))
        return "".join(parts)

    def format_ResultTextContent(self, content: ResultTextContent) -> str:
        trimmed = content.text.strip()
        if (trimmed.startswith("{") and trimmed.endswith("}")) or (
            trimmed.startswith("[") and trimmed.endswith("]")
        ):
            return self._code_fence(trimmed, "json")
        if trimmed.startswith("<") and trimmed.endswith(">") and "</" in trimmed:
            return self._code_fence(trimmed, "xml")
        return f"{content.text}\n\n"

    def format_ResultImageContent(self, content: ResultImageContent) -> str:
        if content.mime_type.startswith("image/"):
            return (
                f"**Image:** `(type: {content.mime_type}, "
                "data: first 30 chars of base64...)`\n\n"
            )
        return (
            f"**Binary Content:** `(type: {content.mime_type}, "
            f"length: {len(content.data)} bytes)`\n\n"
        )

    def format_ResultResourceContent(self, content: ResultResourceContent) -> str:
        return self._dispatch_format(content.resource)

    def format_TextResourceContents(self, resource: TextResourceContents) -> str:
        language = resource_language(resource.uri, resource.mime_type)
        return (
            f"**File:** `{resource.uri}`\n"
            f"{self._code_fence(resource.text.strip(), language)}\n"
        )

    def format_BlobResourceContents(self, resource: BlobResourceContents) -> str:
        return (
            f"**Binary File:** `{resource.uri}` "
            f"(type: {resource.mime_type or 'unknown'}, {len(resource.blob)} bytes)\n\n"
        )

    # -------------------------------------------------------------------------
    # Core Generate Methods
    # -------------------------------------------------------------------------

    def render_content(self, item: MessageContent) -> str:
        """Render one content item; unknown kinds yield a warning placeholder."""
        return self._dispatch_format(item)

    def render_message(self, message: Message) -> str:
        """Render every content item of a message, trimming trailing newlines."""
        return "".join(self.render_content(item) for item in message.content).rstrip(
            "\n"
        )

    def _render_entry(
        self, message: Message, pending_tool_pairing: bool
    ) -> tuple[str, bool]:
        """Render one message section.

        Returns the fragment and the pairing flag for the next message. A
        user message made only of tool responses that directly follows a tool
        request is rendered without its own role heading.
        """
        is_only_tool_response = message.is_only_tool_response()
        if pending_tool_pairing and is_only_tool_response:
            return self.render_message(message) + RULE, False

        heading = "" if is_only_tool_response else ROLE_HEADINGS[message.role]
        fragment = heading + self.render_message(message) + RULE
        return fragment, message.has_tool_request()

    def generate(self, messages: Sequence[Message], title: str) -> str:
        """Generate a Markdown document from session messages."""
        parts = [f"# Session Export: {title}\n\n"]
        if not messages:
            parts.append("*(This session has no messages)*\n")
            return "".join(parts)

        parts.append(f"*Total messages: {len(messages)}*{RULE}")
        pending_tool_pairing = False
        for message in messages:
            fragment, pending_tool_pairing = self._render_entry(
                message, pending_tool_pairing
            )
            parts.append(fragment)
        return "".join(parts)


def render_session(
    messages: Sequence[Message], title: str, full_content: bool = False
) -> str:
    """Render a whole session transcript to Markdown."""
    return MarkdownRenderer(full_content).generate(messages, title)
