"""
Tests for loguru setup.

Focus on the component name reaching every sink.
"""

import sys
from pathlib import Path

import pytest
from loguru import logger

from card_sort.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_default_sink(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # The file sinks are created in the working directory
    monkeypatch.chdir(tmp_path)
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestLoggingConfig:
    """Test setup_logging and get_logger."""

    def test_component_name_is_printed(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        # Arrange
        setup_logging(level="INFO")

        # Act
        get_logger("sort_session").info("session started")
        logger.remove()

        # Assert
        err = capsys.readouterr().err
        assert "sort_session" in err and "session started" in err
        log_text = (tmp_path / "card_sort.log").read_text(encoding="utf-8")
        assert "| sort_session |" in log_text, "File sink should carry the component"

    def test_unbound_logger_uses_package_name(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")

        get_logger().warning("plain message")

        err = capsys.readouterr().err
        assert "card_sort" in err and "plain message" in err

    def test_debug_adds_debug_file(self, tmp_path: Path) -> None:
        setup_logging(debug=True)

        get_logger("snapshot").debug("restored")
        logger.remove()

        assert "restored" in (tmp_path / "card_sort_debug.log").read_text(encoding="utf-8")
        assert "restored" not in (tmp_path / "card_sort.log").read_text(encoding="utf-8")
