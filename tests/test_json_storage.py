"""
Tests for JSONStorage implementation.

Focus on persistence and tolerance of corrupt files.
"""

import json
import tempfile
from pathlib import Path

from card_sort.models import ComparisonRecord
from card_sort.rankers.bradley_terry_ranker import initialize, record_comparison
from card_sort.snapshot import snapshot_state
from card_sort.storage.json_storage import JSONStorage


class TestJSONStorage:
    """Test JSONStorage behavior through public interface."""

    def test_snapshot_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            storage = JSONStorage(Path(temp_dir) / "latest_snapshot.json")
            state = record_comparison(initialize(["a", "b", "c"]), "a", "b")
            snapshot = snapshot_state(state)

            # Act
            storage.save_snapshot(snapshot)
            loaded = storage.load_snapshot()

            # Assert
            assert loaded is not None
            assert loaded == json.loads(json.dumps(snapshot))

    def test_snapshot_overwritten_on_save(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JSONStorage(Path(temp_dir) / "latest_snapshot.json")
            state = initialize(["a", "b"])
            storage.save_snapshot(snapshot_state(state))

            state = record_comparison(state, "b", "a")
            storage.save_snapshot(snapshot_state(state))

            loaded = storage.load_snapshot()
            assert loaded is not None
            assert loaded["used"] == 1

    def test_missing_snapshot_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JSONStorage(Path(temp_dir) / "latest_snapshot.json")

            assert storage.load_snapshot() is None

    def test_corrupt_snapshot_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            snapshot_path = Path(temp_dir) / "latest_snapshot.json"
            snapshot_path.write_text("{not json", encoding="utf-8")
            storage = JSONStorage(snapshot_path)

            assert storage.load_snapshot() is None

    def test_clear_snapshot(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JSONStorage(Path(temp_dir) / "latest_snapshot.json")
            storage.save_snapshot(snapshot_state(initialize(["a", "b"])))

            storage.clear_snapshot()

            assert storage.load_snapshot() is None
            storage.clear_snapshot()  # second clear is a no-op

    def test_comparisons_appended_in_order(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            # Arrange
            storage = JSONStorage(Path(temp_dir) / "latest_snapshot.json")
            records = [
                ComparisonRecord("a", "b", -0.6),
                ComparisonRecord("c", "a", -1.4),
            ]

            # Act
            for record in records:
                storage.persist_comparison(record)
            loaded = list(storage.load_comparisons())

            # Assert
            assert loaded == records
            assert storage.get_comparison_count() == 2
            assert storage.comparisons_path == Path(temp_dir) / "comparisons.jsonl"

    def test_corrupt_comparison_lines_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            comparisons_path = Path(temp_dir) / "log.jsonl"
            comparisons_path.write_text(
                '{"winner": "a", "loser": "b", "log_likelihood": -0.5}\n'
                "garbage\n"
                '{"winner": "a", "loser": "a", "log_likelihood": -0.5}\n'
                '{"winner": "b"}\n'
                "\n"
                '{"winner": "c", "loser": "b", "log_likelihood": -1}\n',
                encoding="utf-8",
            )
            storage = JSONStorage(Path(temp_dir) / "latest_snapshot.json", comparisons_path)

            loaded = list(storage.load_comparisons())

            assert [(r.winner, r.loser) for r in loaded] == [("a", "b"), ("c", "b")]

    def test_clear_comparisons(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JSONStorage(Path(temp_dir) / "latest_snapshot.json")
            storage.persist_comparison(ComparisonRecord("a", "b", -0.7))

            storage.clear_comparisons()

            assert list(storage.load_comparisons()) == []
            assert storage.get_comparison_count() == 0
