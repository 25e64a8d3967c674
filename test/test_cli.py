#!/usr/bin/env python3
"""Tests for CLI functionality."""

import json
import os
import shutil
import time
from pathlib import Path

import pytest
from click.testing import CliRunner

from goose_session_log.cli import main
from goose_session_log.session import SESSIONS_DIR_ENV_VAR


@pytest.fixture
def sessions_dir(
    tmp_path: Path, test_data_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Isolated sessions directory holding the sample session and an older one."""
    directory = tmp_path / "sessions"
    directory.mkdir()
    monkeypatch.setenv(SESSIONS_DIR_ENV_VAR, str(directory))

    shutil.copy(test_data_dir / "sample_session.jsonl", directory / "sample.jsonl")
    older = directory / "older.jsonl"
    older.write_text(
        json.dumps({"working_dir": "/tmp", "description": ""}) + "\n", encoding="utf-8"
    )
    an_hour_ago = time.time() - 3600
    os.utime(older, (an_hour_ago, an_hour_ago))
    return directory


class TestExportCommand:
    def test_export_to_stdout(self, sessions_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["export", "sample"])

        assert result.exit_code == 0, result.output
        assert "# Session Export: sample" in result.output
        assert "*Total messages: 4*" in result.output

    def test_export_by_path(self, test_data_dir: Path):
        runner = CliRunner()
        result = runner.invoke(
            main, ["export", str(test_data_dir / "sample_session.jsonl")]
        )

        assert result.exit_code == 0, result.output
        assert "# Session Export: sample_session" in result.output

    def test_export_to_file(self, sessions_dir: Path, tmp_path: Path):
        output = tmp_path / "out" / "sample.md"
        runner = CliRunner()
        result = runner.invoke(main, ["export", "sample", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.exists()
        assert "### User:" in output.read_text(encoding="utf-8")

    @pytest.mark.parametrize("flag", ["--full-content", "--export-all-content"])
    def test_full_content_flag(self, sessions_dir: Path, flag: str):
        runner = CliRunner()
        filtered = runner.invoke(main, ["export", "sample"])
        full = runner.invoke(main, ["export", "sample", flag])

        assert "(for display)" not in filtered.output
        assert "(for display)" in full.output

    def test_missing_session(self, sessions_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["export", "does-not-exist"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "does-not-exist" in result.output


class TestListCommand:
    def test_text_listing(self, sessions_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["list"])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "Available sessions:"
        assert lines[1].startswith("sample - List the project files - ")
        assert lines[2].startswith("older - (none) - ")

    def test_ascending(self, sessions_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["list", "--ascending"])

        lines = result.output.splitlines()
        assert lines[1].startswith("older - ")
        assert lines[2].startswith("sample - ")

    def test_verbose(self, sessions_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["list", "--verbose"])

        assert f"    Path: {sessions_dir / 'sample.jsonl'}" in result.output
        assert "  sample - List the project files - " in result.output

    def test_json(self, sessions_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["list", "--format", "json"])

        assert result.exit_code == 0, result.output
        sessions = json.loads(result.output)
        assert [s["id"] for s in sessions] == ["sample", "older"]
        assert sessions[0]["metadata"]["working_dir"] == "/home/user/project"

    def test_no_sessions(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["list", "--sessions-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert result.output.strip() == "No sessions found"

    def test_from_date(self, sessions_dir: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["list", "--from-date", "30 minutes ago"])

        assert "sample - " in result.output
        assert "older - " not in result.output

    def test_missing_directory(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(main, ["list", "--sessions-dir", str(tmp_path / "nope")])

        assert result.exit_code == 1
        assert "Error: Sessions directory not found" in result.output

    def test_directory_named_like_session(self, sessions_dir: Path):
        (sessions_dir / "broken.jsonl").mkdir()
        runner = CliRunner()
        result = runner.invoke(main, ["list"])

        assert result.exit_code == 0, result.output
        assert "broken - " not in result.output
        assert "sample - " in result.output

    def test_os_error_reported(
        self, sessions_dir: Path, monkeypatch: pytest.MonkeyPatch
    ):
        def fail(*args: object, **kwargs: object) -> None:
            raise PermissionError(13, "Permission denied", str(sessions_dir))

        monkeypatch.setattr("goose_session_log.cli.get_session_info", fail)
        runner = CliRunner()
        result = runner.invoke(main, ["list"])

        assert result.exit_code == 1
        assert "Error: Failed to list sessions:" in result.output
