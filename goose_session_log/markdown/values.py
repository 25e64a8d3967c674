"""Markdown rendering of JSON-like tool arguments.

Objects and arrays become nested bullet lists, indented two spaces per
depth level. Strings that are long or multi-line become fenced blocks;
everything else is rendered inline.
"""

from typing import Any

# Inline strings longer than this are redacted unless full content is requested
MAX_INLINE_STRING_LENGTH = 4096
# Strings longer than this (or containing a newline) render as a fenced block
BLOCK_STRING_LENGTH = 80


def _is_block_string(text: str) -> bool:
    return "\n" in text or len(text) > BLOCK_STRING_LENGTH


def _is_redacted(text: str, full_content: bool) -> bool:
    return not full_content and len(text) > MAX_INLINE_STRING_LENGTH


def render_scalar(value: Any, full_content: bool = False) -> str:
    """Render a non-compound value inline.

    Strings become inline code with backticks escaped and newlines replaced
    by a literal ``\\n`` so the code span cannot break. Oversized strings are
    replaced by a ``[REDACTED: N chars]`` marker unless ``full_content``.
    """
    if isinstance(value, str):
        if _is_redacted(value, full_content):
            return f"`[REDACTED: {len(value)} chars]`"
        escaped = value.replace("`", "\\`").replace("\n", "\\n")
        return f"`{escaped}`"
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return f"*{'true' if value else 'false'}*"
    if isinstance(value, (int, float)):
        return str(value)
    if value is None:
        return "_null_"
    return "`[Complex Value]`"


def _render_entry_value(
    value: Any, indent: str, fence_indent: str, depth: int, full_content: bool
) -> str:
    """Render the value part of an object key line or array bullet."""
    if isinstance(value, str):
        if _is_redacted(value, full_content):
            return f"{render_scalar(value, full_content)}\n"
        if _is_block_string(value):
            return (
                f"\n{indent}{fence_indent}```\n"
                f"{indent}{value.strip()}\n"
                f"{indent}{fence_indent}```\n"
            )
        escaped = value.replace("`", "\\`")
        return f"`{escaped}`\n"
    if isinstance(value, (dict, list, tuple)):
        return "\n" + render_value(value, depth + 2, full_content)
    return f"{render_scalar(value, full_content)}\n"


def render_value(value: Any, depth: int = 0, full_content: bool = False) -> str:
    """Render a structured value as Markdown, indented by ``depth``.

    Never raises: unexpected shapes fall back to a ``[Complex Value]`` marker.
    """
    indent = "  " * depth

    if isinstance(value, dict):
        if not value:
            return f"{indent}*empty object*\n"
        parts: list[str] = []
        for key, val in value.items():
            parts.append(f"{indent}*   **{key}**: ")
            parts.append(_render_entry_value(val, indent, "    ", depth, full_content))
        return "".join(parts)

    if isinstance(value, (list, tuple)):
        if not value:
            return f"{indent}*   *empty list*\n"
        parts = []
        for item in value:
            parts.append(f"{indent}*   - ")
            parts.append(_render_entry_value(item, indent, "      ", depth, full_content))
        return "".join(parts)

    return f"{indent}{render_scalar(value, full_content)}\n"
