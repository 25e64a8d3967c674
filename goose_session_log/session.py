#!/usr/bin/env python3
"""Discover and list Goose session files."""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import dateparser
from git import InvalidGitRepositoryError, NoSuchPathError, Repo

from .converter import read_session_metadata
from .models import SessionInfo

logger = logging.getLogger(__name__)

SESSIONS_DIR_ENV_VAR = "GOOSE_SESSION_LOG_SESSIONS_DIR"


class SortOrder(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


def get_default_sessions_dir() -> Path:
    """Get the sessions directory, respecting GOOSE_SESSION_LOG_SESSIONS_DIR.

    Priority: GOOSE_SESSION_LOG_SESSIONS_DIR env var > ~/.local/share/goose/sessions
    """
    env_path = os.getenv(SESSIONS_DIR_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.home() / ".local" / "share" / "goose" / "sessions"


def _modified_utc(path: Path) -> datetime:
    """File modification time as a naive UTC datetime."""
    return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc).replace(
        tzinfo=None
    )


def _parse_date_bounds(
    from_date: Optional[str], to_date: Optional[str]
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Parse natural language date bounds in UTC.

    Raises:
        ValueError: if a bound cannot be parsed.
    """
    dateparser_settings: Any = {"TIMEZONE": "UTC", "RETURN_AS_TIMEZONE_AWARE": False}
    from_dt = None
    to_dt = None

    if from_date:
        from_dt = dateparser.parse(from_date, settings=dateparser_settings)
        if not from_dt:
            raise ValueError(f"Could not parse from-date: {from_date}")
        # Relative days start at the beginning of the day
        if from_date in ["today", "yesterday"] or "days ago" in from_date:
            from_dt = from_dt.replace(hour=0, minute=0, second=0, microsecond=0)

    if to_date:
        to_dt = dateparser.parse(to_date, settings=dateparser_settings)
        if not to_dt:
            raise ValueError(f"Could not parse to-date: {to_date}")
        # Relative days end at the end of the day
        if to_date in ["today", "yesterday"] or "days ago" in to_date:
            to_dt = to_dt.replace(hour=23, minute=59, second=59, microsecond=999999)

    return from_dt, to_dt


def get_session_info(
    sessions_dir: Path,
    sort_order: SortOrder = SortOrder.DESCENDING,
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
) -> list[SessionInfo]:
    """List the sessions in a directory, sorted by modification time.

    Args:
        sessions_dir: Directory holding ``*.jsonl`` session files
        sort_order: Oldest first (ascending) or newest first (descending)
        from_date: Only sessions modified at or after this date
        to_date: Only sessions modified at or before this date

    Raises:
        FileNotFoundError: if the sessions directory does not exist.
        ValueError: if a date bound cannot be parsed.
    """
    if not sessions_dir.is_dir():
        raise FileNotFoundError(f"Sessions directory not found: {sessions_dir}")

    from_dt, to_dt = _parse_date_bounds(from_date, to_date)

    found: list[tuple[datetime, SessionInfo]] = []
    for session_file in sessions_dir.glob("*.jsonl"):
        if not session_file.is_file():
            continue
        modified = _modified_utc(session_file)
        if from_dt and modified < from_dt:
            continue
        if to_dt and modified > to_dt:
            continue
        try:
            metadata = read_session_metadata(session_file)
        except OSError as e:
            logger.warning("Skipping unreadable session %s: %s", session_file, e)
            continue
        info = SessionInfo(
            id=session_file.stem,
            path=str(session_file),
            modified=modified.strftime("%Y-%m-%d %H:%M:%S UTC"),
            metadata=metadata,
        )
        found.append((modified, info))

    # Sort on (mtime, id) so sessions with equal mtimes keep a stable order
    found.sort(
        key=lambda pair: (pair[0], pair[1].id),
        reverse=sort_order == SortOrder.DESCENDING,
    )
    return [info for _, info in found]


def get_project_root(cwd: Path) -> Path:
    """Git repository root containing ``cwd``, or ``cwd`` itself outside a repo."""
    try:
        repo = Repo(cwd, search_parent_directories=True)
        return Path(repo.git_dir).parent.resolve()
    except (InvalidGitRepositoryError, NoSuchPathError):
        return cwd.resolve()


def filter_sessions_by_project(
    sessions: list[SessionInfo], cwd: Optional[Path] = None
) -> list[SessionInfo]:
    """Keep sessions whose working directory is the current project root."""
    project_root = get_project_root(cwd or Path.cwd())
    matching: list[SessionInfo] = []
    for session in sessions:
        working_dir = session.metadata.working_dir
        if working_dir and Path(working_dir).resolve() == project_root:
            matching.append(session)
    return matching


def resolve_session_path(identifier: str, sessions_dir: Optional[Path] = None) -> Path:
    """Resolve a session file path or a session id to a session file.

    Raises:
        FileNotFoundError: if neither the path nor the id exists.
    """
    candidate = Path(identifier)
    if candidate.is_file():
        return candidate

    sessions_dir = sessions_dir or get_default_sessions_dir()
    by_id = sessions_dir / f"{identifier}.jsonl"
    if by_id.is_file():
        logger.debug("Resolved session %s to %s", identifier, by_id)
        return by_id
    raise FileNotFoundError(f"Neither {candidate} nor {by_id} exists")
