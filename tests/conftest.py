"""
Pytest configuration and shared fixtures for dumbo-config tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from dumbo_config.logging import SilentLogger, set_global_logger


class RecordingLogger:
    """Logger that keeps every message for later assertions."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, str]] = []

    def info(self, prefix: str, message: str) -> None:
        self.records.append(("info", prefix, message))

    def warning(self, prefix: str, message: str) -> None:
        self.records.append(("warning", prefix, message))

    def verbose(self, prefix: str, message: str) -> None:
        self.records.append(("verbose", prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.records.append(("debug", prefix, message))

    def messages(self, level: str) -> list[str]:
        return [message for lvl, _, message in self.records if lvl == level]


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Restore the silent global logger after each test (the CLI replaces it)."""
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that records messages instead of printing them."""
    return RecordingLogger()


@pytest.fixture
def create_config_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary config files from raw text.

    Usage:
        path = create_config_file("settings.toml", 'name = "test"\\n')
    """

    def _create(filename: str, content: str) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _create


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("test.yaml", {"key": "value"})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create
