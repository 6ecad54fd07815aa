"""
Abstract base classes and snapshot types for the card sort system.

All interfaces are synchronous; the engine itself performs no I/O.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from typing_extensions import TypedDict

from .models import ComparisonRecord


class ComparisonRecordDict(TypedDict):
    """Serialized ComparisonRecord."""
    winner: str
    loser: str
    log_likelihood: float


class EngineSnapshot(TypedDict):
    """Plain-data export of an EngineState."""
    strength: dict[str, float]
    information: dict[str, float]
    uncertainty: dict[str, float]
    appearances: dict[str, int]
    preference_graph: list[tuple[str, list[str]]]  # [winner, [losers...]]
    comparison_history: list[ComparisonRecordDict]
    likelihood_history: list[float]
    rank_history: list[list[str]]
    cycle_count: int
    used: int
    min_comparisons: int
    max_comparisons: int
    all_card_ids: list[str]


class Judge(ABC):
    """Interface for deciding a single comparison."""

    @abstractmethod
    def choose(self, card_a: str, card_b: str) -> str:
        """
        Decide which of two cards wins.

        May block (e.g. waiting for a human).

        Returns:
            The winning card id, either card_a or card_b
        """
        pass


class Storage(ABC):
    """Interface for persisting snapshots and the comparison log."""

    @abstractmethod
    def persist_comparison(self, record: ComparisonRecord) -> None:
        """Append a comparison to the log."""
        pass

    @abstractmethod
    def load_comparisons(self) -> Iterable[ComparisonRecord]:
        """Load all logged comparisons."""
        pass

    @abstractmethod
    def save_snapshot(self, snapshot: EngineSnapshot) -> None:
        """Save the latest engine snapshot."""
        pass

    @abstractmethod
    def load_snapshot(self) -> EngineSnapshot | None:
        """Load the latest engine snapshot, or None if there is none."""
        pass

    @abstractmethod
    def clear_snapshot(self) -> None:
        """Forget the saved snapshot."""
        pass

    @abstractmethod
    def clear_comparisons(self) -> None:
        """Forget the comparison log."""
        pass
