"""
Core dataclasses for the card sort system.

Defines the engine state, comparison records and reporting value types.
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import numpy.typing as npt

from .exceptions import UnknownCardError, ValidationError
from .preference_graph import PreferenceGraph


@dataclass(frozen=True)
class ComparisonRecord:
    """One recorded judgement plus the history log-likelihood after it."""

    winner: str
    loser: str
    log_likelihood: float

    def __post_init__(self) -> None:
        """Validate comparison data."""
        if not self.winner or not self.loser:
            raise ValidationError("winner and loser cannot be empty")
        if self.winner == self.loser:
            raise ValidationError(f"card {self.winner!r} cannot be compared with itself")


@dataclass(frozen=True)
class ConfidenceInfo:
    """Progress indicators for display."""

    top5_confidence: float
    top11_confidence: float
    overall_progress: float


class InconsistencyLevel(Enum):
    """How often the judge's choices close preference cycles."""

    CONSISTENT = "consistent"
    SOME_INCONSISTENCY = "some_inconsistency"
    INCONSISTENT = "inconsistent"

    @property
    def label(self) -> str:
        match self:
            case InconsistencyLevel.CONSISTENT:
                return "Choices are consistent"
            case InconsistencyLevel.SOME_INCONSISTENCY:
                return "Some choices contradict each other"
            case InconsistencyLevel.INCONSISTENT:
                return "Choices are highly inconsistent"


class SessionPhase(Enum):
    """Lifecycle of a sort session."""

    UNINITIALIZED = "uninitialized"
    COLLECTING = "collecting"
    CONVERGED = "converged"
    FINALIZED = "finalized"


@dataclass(frozen=True, eq=False)
class EngineState:
    """
    Statistical state of one ranking session.

    Per-card statistics live in dense arrays indexed by the card's position in
    card_ids. Instances are never mutated after construction; the ranker
    builds a new state for every comparison.
    """

    card_ids: tuple[str, ...]
    strength: npt.NDArray[np.float64]
    information: npt.NDArray[np.float64]
    uncertainty: npt.NDArray[np.float64]
    appearances: npt.NDArray[np.int64]
    preference_graph: PreferenceGraph
    comparison_history: tuple[ComparisonRecord, ...]
    likelihood_history: tuple[float, ...]
    rank_history: tuple[tuple[str, ...], ...]
    cycle_count: int
    used: int
    min_comparisons: int
    max_comparisons: int
    index_of: dict[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "index_of", {card_id: i for i, card_id in enumerate(self.card_ids)})
        for name in ("strength", "information", "uncertainty", "appearances"):
            array = np.array(getattr(self, name), copy=True)
            array.flags.writeable = False
            object.__setattr__(self, name, array)

    @property
    def size(self) -> int:
        return len(self.card_ids)

    def index(self, card_id: str) -> int:
        """Arena index of a card; raises UnknownCardError for foreign ids."""
        try:
            return self.index_of[card_id]
        except KeyError:
            raise UnknownCardError(card_id) from None

    def strength_of(self, card_id: str) -> float:
        return float(self.strength[self.index(card_id)])

    def information_of(self, card_id: str) -> float:
        return float(self.information[self.index(card_id)])

    def uncertainty_of(self, card_id: str) -> float:
        return float(self.uncertainty[self.index(card_id)])

    def appearances_of(self, card_id: str) -> int:
        return int(self.appearances[self.index(card_id)])
