#!/usr/bin/env python3
"""Load Goose session JSONL files and convert them to Markdown."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from .factories import create_message, create_session_metadata, is_message_data
from .markdown.renderer import render_session
from .models import Message, SessionMetadata

logger = logging.getLogger(__name__)


def _describe_validation_error(error: ValidationError) -> str:
    """Strip pydantic's help URLs from a validation error message."""
    return re.sub(
        r"    For further information visit https://errors.pydantic(.*)\n?",
        "",
        str(error),
    ).strip()


# =============================================================================
# Session Loading Functions
# =============================================================================


def load_session(session_path: Path) -> tuple[SessionMetadata, list[Message]]:
    """Load and parse a session JSONL file.

    The first non-blank line holds the session metadata; every later line is one
    message. Lines that cannot be decoded or validated are logged and
    skipped.

    Raises:
        FileNotFoundError: if the session file does not exist.
    """
    if not session_path.is_file():
        raise FileNotFoundError(f"Session file not found: {session_path}")

    metadata = SessionMetadata()
    messages: list[Message] = []
    first_entry = True

    with open(session_path, "r", encoding="utf-8-sig", errors="replace") as f:
        for line_no, line in enumerate(f, 1):  # Start counting from 1
            line = line.strip()
            if not line:
                continue
            is_first_entry = first_entry
            first_entry = False
            try:
                entry: Any = json.loads(line)
                if not isinstance(entry, dict):
                    logger.warning(
                        "Line %d of %s is not a JSON object", line_no, session_path
                    )
                    continue

                if is_first_entry and not is_message_data(entry):
                    metadata = create_session_metadata(entry)
                else:
                    messages.append(create_message(entry))
            except json.JSONDecodeError as e:
                logger.warning(
                    "Line %d of %s | JSON decode error: %s", line_no, session_path, e
                )
            except ValidationError as e:
                logger.warning(
                    "Line %d of %s | %s",
                    line_no,
                    session_path,
                    _describe_validation_error(e),
                )

    logger.debug("Loaded %d messages from %s", len(messages), session_path)
    return metadata, messages


def read_session_metadata(session_path: Path) -> SessionMetadata:
    """Read only the metadata line of a session file.

    Returns default metadata when the first non-blank line is missing or
    invalid.
    """
    first_line = ""
    with open(session_path, "r", encoding="utf-8-sig", errors="replace") as f:
        for line in f:
            first_line = line.strip()
            if first_line:
                break
    if not first_line:
        return SessionMetadata()
    try:
        entry: Any = json.loads(first_line)
        if isinstance(entry, dict) and not is_message_data(entry):
            return create_session_metadata(entry)
    except json.JSONDecodeError as e:
        logger.warning("Invalid metadata line in %s: %s", session_path, e)
    except ValidationError as e:
        logger.warning(
            "Invalid metadata in %s: %s",
            session_path,
            _describe_validation_error(e),
        )
    return SessionMetadata()


# =============================================================================
# Conversion
# =============================================================================


def convert_session_to_markdown(
    session_path: Path,
    output_path: Optional[Path] = None,
    full_content: bool = False,
) -> str:
    """Render a session file to Markdown, writing it out when a path is given.

    The session file's stem is used as the document title.
    """
    _, messages = load_session(session_path)
    markdown = render_session(messages, session_path.stem, full_content)

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(markdown, encoding="utf-8")
        logger.info("Wrote %s", output_path)
    return markdown
