"""
JSON storage implementation.

Keeps the latest engine snapshot in a JSON file and appends every comparison
to a JSONL log.
"""

import json
import typing
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from typing_extensions import override

from ..exceptions import ValidationError
from ..interfaces import EngineSnapshot, Storage
from ..logging_config import get_logger
from ..models import ComparisonRecord

# Module-level logger
logger = get_logger("json_storage")


class JSONStorage(Storage):
    """
    File-based storage for sort sessions.

    The snapshot file is overwritten on every save; the comparisons file is
    append-only.
    """

    snapshot_path: Path
    comparisons_path: Path

    def __init__(self, snapshot_path: Path, comparisons_path: Path | None = None):
        """
        Initialize JSON storage.

        Args:
            snapshot_path: Path to JSON file for the latest snapshot
            comparisons_path: Path to JSONL comparison log (default: comparisons.jsonl next to the snapshot)
        """
        self.snapshot_path = Path(snapshot_path)
        if comparisons_path is None:
            self.comparisons_path = self.snapshot_path.parent / "comparisons.jsonl"
        else:
            self.comparisons_path = Path(comparisons_path)

        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        self.comparisons_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(
            f"JSON storage initialized: snapshot={self.snapshot_path}, comparisons={self.comparisons_path}"
        )

    @override
    def persist_comparison(self, record: ComparisonRecord) -> None:
        """Append a comparison to the JSONL log."""
        data = {
            "winner": record.winner,
            "loser": record.loser,
            "log_likelihood": record.log_likelihood,
        }
        with open(self.comparisons_path, "a", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
            f.write("\n")
        logger.debug(f"Persisted comparison {record.winner} > {record.loser}")

    @override
    def load_comparisons(self) -> Iterable[ComparisonRecord]:
        """Load logged comparisons, skipping corrupt lines."""
        if not self.comparisons_path.exists():
            return

        with open(self.comparisons_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue

                try:
                    data = typing.cast(dict[str, Any], json.loads(line))

                    assert isinstance(data, dict), "comparison must be an object"
                    assert isinstance(data.get("winner"), str), "winner must be a string"
                    assert isinstance(data.get("loser"), str), "loser must be a string"
                    assert isinstance(data.get("log_likelihood"), (int, float)), (
                        "log_likelihood must be a number"
                    )

                    yield ComparisonRecord(
                        winner=data["winner"],
                        loser=data["loser"],
                        log_likelihood=float(data["log_likelihood"]),
                    )
                except (json.JSONDecodeError, AssertionError, ValidationError) as e:
                    logger.warning(f"Skipping invalid line in {self.comparisons_path}: {e}")
                    continue

    @override
    def save_snapshot(self, snapshot: EngineSnapshot) -> None:
        """Overwrite the latest snapshot."""
        with open(self.snapshot_path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved snapshot at {snapshot['used']} comparisons to {self.snapshot_path}")

    @override
    def load_snapshot(self) -> EngineSnapshot | None:
        """
        Load the latest snapshot as raw JSON data.

        Structural validation happens on restore; this only guarantees a JSON object.
        """
        if not self.snapshot_path.exists():
            logger.debug("No snapshot file exists")
            return None

        logger.info(f"Loading snapshot from {self.snapshot_path}")
        try:
            with open(self.snapshot_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            assert isinstance(data, dict), "snapshot must be a JSON object"
            return typing.cast(EngineSnapshot, data)
        except (json.JSONDecodeError, AssertionError, UnicodeDecodeError) as e:
            logger.error(f"Failed to load snapshot from {self.snapshot_path}: {e}")
            return None

    @override
    def clear_snapshot(self) -> None:
        if self.snapshot_path.exists():
            self.snapshot_path.unlink()
            logger.debug(f"Cleared snapshot {self.snapshot_path}")

    @override
    def clear_comparisons(self) -> None:
        """Clear the comparison log."""
        if self.comparisons_path.exists():
            self.comparisons_path.unlink()

    def get_comparison_count(self) -> int:
        """Number of logged comparisons."""
        if not self.comparisons_path.exists():
            return 0

        count = 0
        with open(self.comparisons_path, "r", encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    count += 1
        return count
