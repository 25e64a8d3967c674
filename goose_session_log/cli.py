#!/usr/bin/env python3
"""CLI interface for goose-session-log."""

import json
import logging
import sys
import traceback
from pathlib import Path
from typing import NoReturn, Optional

import click

from .converter import convert_session_to_markdown
from .session import (
    SortOrder,
    filter_sessions_by_project,
    get_default_sessions_dir,
    get_session_info,
    resolve_session_path,
)


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _report_error(message: str, debug: bool) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    if debug:
        traceback.print_exc()
    sys.exit(1)


sessions_dir_option = click.option(
    "--sessions-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Custom sessions directory (default: $GOOSE_SESSION_LOG_SESSIONS_DIR or ~/.local/share/goose/sessions).",
)
debug_option = click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Show debug logging and full traceback on errors.",
)


@click.group()
def main() -> None:
    """Export and list Goose sessions."""


@main.command()
@click.argument("session")
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Write the Markdown to this file instead of stdout.",
)
@click.option(
    "--full-content",
    "--export-all-content",
    "full_content",
    is_flag=True,
    default=False,
    help="Include oversized strings and tool output not meant for the assistant.",
)
@sessions_dir_option
@debug_option
def export(
    session: str,
    output: Optional[Path],
    full_content: bool,
    sessions_dir: Optional[Path],
    debug: bool,
) -> None:
    """Export a session to Markdown.

    SESSION: Path to a session JSONL file, or a session id in the sessions directory.
    """
    _configure_logging(debug)

    try:
        session_path = resolve_session_path(session, sessions_dir)
        markdown = convert_session_to_markdown(session_path, output, full_content)
    except FileNotFoundError as e:
        _report_error(str(e), debug)
    except OSError as e:
        _report_error(f"Failed to export session: {e}", debug)

    if output is None:
        click.echo(markdown)
    else:
        click.echo(f"Session exported to {output}", err=True)


@main.command(name="list")
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option(
    "--ascending",
    is_flag=True,
    help="List oldest sessions first (default: newest first).",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Also show the path of each session file.",
)
@click.option(
    "--from-date",
    type=str,
    help='Only sessions modified since this date/time (e.g., "2 hours ago", "yesterday", "2025-06-08")',
)
@click.option(
    "--to-date",
    type=str,
    help='Only sessions modified up to this date/time (e.g., "1 hour ago", "today")',
)
@click.option(
    "--current-project",
    is_flag=True,
    help="Only sessions started in the current git project.",
)
@sessions_dir_option
@debug_option
def list_sessions(
    output_format: str,
    ascending: bool,
    verbose: bool,
    from_date: Optional[str],
    to_date: Optional[str],
    current_project: bool,
    sessions_dir: Optional[Path],
    debug: bool,
) -> None:
    """List saved sessions."""
    _configure_logging(debug)

    sort_order = SortOrder.ASCENDING if ascending else SortOrder.DESCENDING
    try:
        sessions = get_session_info(
            sessions_dir or get_default_sessions_dir(), sort_order, from_date, to_date
        )
    except (FileNotFoundError, ValueError) as e:
        _report_error(str(e), debug)
    except OSError as e:
        _report_error(f"Failed to list sessions: {e}", debug)

    if current_project:
        sessions = filter_sessions_by_project(sessions)

    if output_format == "json":
        click.echo(json.dumps([s.model_dump() for s in sessions]))
        return

    if not sessions:
        click.echo("No sessions found")
        return

    click.echo("Available sessions:")
    for info in sessions:
        description = info.metadata.description or "(none)"
        line = f"{info.id} - {description} - {info.modified}"
        if verbose:
            click.echo(f"  {line}")
            click.echo(f"    Path: {info.path}")
        else:
            click.echo(line)


if __name__ == "__main__":
    main()
