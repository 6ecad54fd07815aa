"""
Tests for the command line entry point.
"""

import sys
from pathlib import Path

import pytest
from loguru import logger

from card_sort.__main__ import main


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # Log files are written to the working directory
    monkeypatch.chdir(tmp_path)
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestCLI:
    """Test main() end to end."""

    def test_generated_cards_session(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        # Arrange
        output_dir = tmp_path / "out"

        # Act
        main(["--num-cards", "5", "--output-dir", str(output_dir), "--log-level", "WARNING"])

        # Assert
        out = capsys.readouterr().out
        assert "Final Ranking" in out
        for i in range(1, 6):
            assert f"card_{i:02d}" in out
        assert (output_dir / "comparisons.jsonl").exists()
        assert not (output_dir / "latest_snapshot.json").exists(), "Snapshot removed after finalize"

    def test_cards_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        cards_file = tmp_path / "cards.txt"
        cards_file.write_text("apple\n\nbanana\ncherry\n", encoding="utf-8")

        main(["--cards-file", str(cards_file), "--judge-type", "dummy", "--log-level", "ERROR"])

        out = capsys.readouterr().out
        assert "Cards: 3" in out
        assert "apple" in out and "cherry" in out

    def test_missing_cards_file_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--cards-file", str(tmp_path / "missing.txt"), "--log-level", "CRITICAL"])

        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().out

    def test_single_card_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--num-cards", "1", "--log-level", "CRITICAL"])

        assert exc_info.value.code == 1
