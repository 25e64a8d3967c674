#!/usr/bin/env python3
"""Format-neutral renderer base for Goose session transcripts."""

from typing import Any


class Renderer:
    """Base class for transcript renderers.

    Subclasses implement format-specific rendering (Markdown, etc.).

    The method-based dispatcher pattern:
    - Subclasses define format_{ClassName}() methods for each content type
    - _dispatch_format() walks the MRO to find the most specific method
    - format_fallback() handles anything without a dedicated method, so
      rendering never fails on unrecognised content
    """

    def __init__(self, full_content: bool = False):
        """Initialize the renderer.

        Args:
            full_content: Bypass audience filtering and string redaction.
        """
        self.full_content = full_content

    def _dispatch_format(self, obj: Any) -> str:
        """Dispatch to format_{ClassName} method based on object type."""
        for cls in type(obj).__mro__:
            if cls is object:
                break
            if method := getattr(self, f"format_{cls.__name__}", None):
                return method(obj)
        return self.format_fallback(obj)

    def format_fallback(self, obj: Any) -> str:  # noqa: ARG002
        return ""
