"""Tests for loading session files and converting them to Markdown."""

import json
import logging
from pathlib import Path

import pytest

from goose_session_log.converter import (
    convert_session_to_markdown,
    load_session,
    read_session_metadata,
)
from goose_session_log.models import (
    Role,
    ThinkingContent,
    ToolRequestContent,
    ToolResponseContent,
    UnknownContent,
)


class TestLoadSession:
    """Tests for load_session()."""

    def test_sample_session(self, test_data_dir: Path):
        metadata, messages = load_session(test_data_dir / "sample_session.jsonl")

        assert metadata.working_dir == "/home/user/project"
        assert metadata.description == "List the project files"
        assert metadata.message_count == 4

        assert [m.id for m in messages] == ["msg-1", "msg-2", "msg-3", "msg-4"]
        assert messages[0].role == Role.USER
        assert isinstance(messages[1].content[0], ThinkingContent)
        assert isinstance(messages[1].content[1], ToolRequestContent)
        assert isinstance(messages[2].content[0], ToolResponseContent)
        assert isinstance(messages[3].content[1], UnknownContent)

    def test_bad_lines_logged_and_skipped(
        self, test_data_dir: Path, caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level(logging.WARNING):
            _, messages = load_session(test_data_dir / "sample_session.jsonl")

        assert len(messages) == 4
        assert "Line 5" in caplog.text
        assert "JSON decode error" in caplog.text
        assert "Line 7" in caplog.text
        assert "https://errors.pydantic" not in caplog.text

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_session(tmp_path / "missing.jsonl")

    def test_session_without_metadata_line(self, tmp_path: Path):
        session_file = tmp_path / "bare.jsonl"
        session_file.write_text(
            json.dumps({"role": "user", "created": 1, "content": [{"type": "text", "text": "hi"}]})
            + "\n",
            encoding="utf-8",
        )
        metadata, messages = load_session(session_file)
        assert metadata.description == ""
        assert len(messages) == 1

    def test_empty_file(self, tmp_path: Path):
        session_file = tmp_path / "empty.jsonl"
        session_file.write_text("", encoding="utf-8")
        metadata, messages = load_session(session_file)
        assert messages == []
        assert metadata.working_dir == ""

    def test_non_object_line(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        session_file = tmp_path / "list.jsonl"
        session_file.write_text('{"description": "x"}\n[1, 2]\n', encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            _, messages = load_session(session_file)
        assert messages == []
        assert "not a JSON object" in caplog.text

    def test_metadata_after_leading_blank_lines(self, tmp_path: Path):
        session_file = tmp_path / "blank.jsonl"
        message = {"role": "user", "created": 0, "content": []}
        lines = ["", "", json.dumps({"description": "x"}), json.dumps(message)]
        session_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
        metadata, messages = load_session(session_file)
        assert metadata.description == "x"
        assert len(messages) == 1

    def test_metadata_with_byte_order_mark(self, tmp_path: Path):
        session_file = tmp_path / "bom.jsonl"
        session_file.write_text(
            json.dumps({"description": "x"}) + "\n", encoding="utf-8-sig"
        )
        metadata, messages = load_session(session_file)
        assert metadata.description == "x"
        assert messages == []


class TestReadSessionMetadata:
    """Tests for read_session_metadata()."""

    def test_reads_first_line(self, test_data_dir: Path):
        metadata = read_session_metadata(test_data_dir / "sample_session.jsonl")
        assert metadata.description == "List the project files"

    def test_invalid_first_line(self, tmp_path: Path):
        session_file = tmp_path / "broken.jsonl"
        session_file.write_text("{broken\n", encoding="utf-8")
        assert read_session_metadata(session_file).description == ""

    def test_skips_leading_blank_lines(self, tmp_path: Path):
        session_file = tmp_path / "blank.jsonl"
        session_file.write_text(
            "\n  \n" + json.dumps({"description": "x"}) + "\n", encoding="utf-8"
        )
        assert read_session_metadata(session_file).description == "x"

    def test_byte_order_mark(self, tmp_path: Path):
        session_file = tmp_path / "bom.jsonl"
        session_file.write_text(
            json.dumps({"description": "x"}) + "\n", encoding="utf-8-sig"
        )
        assert read_session_metadata(session_file).description == "x"


class TestConvertSessionToMarkdown:
    """Tests for convert_session_to_markdown()."""

    def test_sample_session_markdown(self, test_data_dir: Path):
        markdown = convert_session_to_markdown(test_data_dir / "sample_session.jsonl")

        assert markdown.startswith("# Session Export: sample_session\n\n")
        assert "*Total messages: 4*" in markdown
        assert "### User:\nWhat files are in this project?" in markdown
        assert "**Thinking:**\n> I should list the directory.\n> Then summarise it." in markdown
        assert "    ```sh\n    ls -la\n    ```" in markdown
        # Tool output is attached to the call, without its own user heading
        assert markdown.count("### User:") == 1
        assert "README.md\nsrc\n" in markdown
        assert "(for display)" not in markdown
        assert "`WARNING: Message content type could not be rendered to Markdown`" in markdown

    def test_full_content_includes_user_audience(self, test_data_dir: Path):
        markdown = convert_session_to_markdown(
            test_data_dir / "sample_session.jsonl", full_content=True
        )
        assert "README.md\nsrc (for display)" in markdown

    def test_writes_output_file(self, test_data_dir: Path, tmp_path: Path):
        output = tmp_path / "nested" / "export.md"
        markdown = convert_session_to_markdown(
            test_data_dir / "sample_session.jsonl", output
        )
        assert output.read_text(encoding="utf-8") == markdown
