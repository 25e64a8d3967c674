"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from goose_session_log.markdown.renderer import MarkdownRenderer


@pytest.fixture
def test_data_dir() -> Path:
    """Return path to test data directory."""
    return Path(__file__).parent / "test_data"


@pytest.fixture
def renderer() -> MarkdownRenderer:
    """Create a MarkdownRenderer with redaction and audience filtering on."""
    return MarkdownRenderer()


@pytest.fixture
def full_renderer() -> MarkdownRenderer:
    """Create a MarkdownRenderer that exports all content."""
    return MarkdownRenderer(full_content=True)
