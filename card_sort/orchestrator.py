"""
Sort session orchestrator.

Drives one ranking session: restore or initialize the engine, then loop
select -> judge -> record -> save until the stopping rule fires.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loguru import Logger

from .exceptions import ConfigurationError, RestoreMismatchError, SessionError
from .group_selectors.uncertainty_selector import select_next_pair
from .interfaces import Judge, Storage
from .logging_config import get_logger
from .models import ComparisonRecord, EngineState, SessionPhase
from .rankers.bradley_terry_ranker import (
    get_confidence_info,
    get_final_ranking,
    get_inconsistency_level,
    initialize,
    record_comparison,
    top_k,
)
from .snapshot import restore_state, snapshot_state
from .stopping import get_effective_max_comparisons, should_stop


@dataclass
class SessionConfig:
    """Configuration for a sort session."""

    min_comparisons: int | None = None  # default ceil(0.8 * N)
    max_comparisons: int | None = None  # default ceil(2.0 * N)
    hard_limit: int | None = None  # absolute cap on step() calls per run()
    progress_every: int = 10  # log progress every N comparisons

    def __post_init__(self):
        """Validate configuration."""
        if self.min_comparisons is not None and self.min_comparisons <= 0:
            raise ConfigurationError(f"min_comparisons must be positive, got {self.min_comparisons}")
        if self.max_comparisons is not None and self.max_comparisons <= 0:
            raise ConfigurationError(f"max_comparisons must be positive, got {self.max_comparisons}")
        if self.hard_limit is not None and self.hard_limit <= 0:
            raise ConfigurationError(f"hard_limit must be positive, got {self.hard_limit}")
        if self.progress_every <= 0:
            raise ConfigurationError(f"progress_every must be positive, got {self.progress_every}")


class SortSession:
    """Owns the engine state of one ranking session."""

    def __init__(
        self,
        card_ids: Sequence[str],
        judge: Judge,
        storage: Storage | None = None,
        config: SessionConfig | None = None,
    ):
        """Initialize the session; no state exists until start()."""
        self.card_ids: list[str] = list(card_ids)
        self.judge: Judge = judge
        self.storage: Storage | None = storage
        self.config: SessionConfig = config or SessionConfig()

        self._state: EngineState | None = None
        self.phase: SessionPhase = SessionPhase.UNINITIALIZED
        self.final_ranking: list[str] | None = None
        self.resumed: bool = False

        self.logger: Logger = get_logger("sort_session")

    @property
    def state(self) -> EngineState:
        if self._state is None:
            raise SessionError("session has not been started")
        return self._state

    def start(self) -> EngineState:
        """
        Resume from storage when possible, otherwise initialize fresh.

        A snapshot taken for a different card set is discarded.
        """
        self.resumed = False
        saved = self.storage.load_snapshot() if self.storage else None
        if saved is not None:
            try:
                self._state = restore_state(saved, self.card_ids)
                self.resumed = True
                self.logger.info(f"Resumed session from snapshot: {self._state.used} comparisons recorded")
            except RestoreMismatchError as e:
                self.logger.warning(f"Discarding snapshot: {e}")
                assert self.storage is not None
                self.storage.clear_snapshot()
                self.storage.clear_comparisons()

        if not self.resumed:
            self._state = self._fresh_state()
            self.logger.info(f"Started new session with {len(self.card_ids)} cards")

        self.phase = SessionPhase.CONVERGED if should_stop(self.state) else SessionPhase.COLLECTING
        self.final_ranking = None
        return self.state

    def reset(self) -> EngineState:
        """Throw away all comparisons and start over."""
        if self.storage:
            self.storage.clear_snapshot()
            self.storage.clear_comparisons()
        self._state = self._fresh_state()
        self.phase = SessionPhase.COLLECTING
        self.final_ranking = None
        self.resumed = False
        self.logger.info("Session reset")
        return self._state

    def _fresh_state(self) -> EngineState:
        return initialize(
            self.card_ids,
            min_comparisons=self.config.min_comparisons,
            max_comparisons=self.config.max_comparisons,
        )

    def step(self) -> ComparisonRecord | None:
        """
        Ask the judge about the next pair and record the answer.

        Returns:
            The new comparison record, or None when there is nothing to ask
        """
        if self.phase is SessionPhase.UNINITIALIZED:
            self.start()
        if self.phase is SessionPhase.FINALIZED:
            raise SessionError("session is finalized; reset() or start a new session")

        state = self.state
        pair = select_next_pair(state)
        if pair is None:
            return None

        card_a, card_b = pair
        winner = self.judge.choose(card_a, card_b)
        if winner not in pair:
            raise SessionError(f"judge returned {winner!r}, not one of {pair}")
        loser = card_b if winner == card_a else card_a

        self._state = record_comparison(state, winner, loser)
        record = self._state.comparison_history[-1]

        if self.storage:
            self.storage.persist_comparison(record)
            self.storage.save_snapshot(snapshot_state(self._state))

        if self._state.used % self.config.progress_every == 0:
            self._log_progress()

        self.phase = SessionPhase.CONVERGED if should_stop(self._state) else SessionPhase.COLLECTING
        return record

    def run(self) -> list[str]:
        """Collect comparisons until the ranking converges, then finalize."""
        if self.phase is SessionPhase.UNINITIALIZED:
            self.start()

        steps = 0
        while self.phase is SessionPhase.COLLECTING:
            if self.config.hard_limit is not None and steps >= self.config.hard_limit:
                self.logger.warning(f"Hard limit of {self.config.hard_limit} comparisons reached")
                break
            if self.step() is None:
                break
            steps += 1

        return self.finalize()

    def finalize(self) -> list[str]:
        """Extract the final ranking and drop the saved snapshot."""
        if self.phase is SessionPhase.FINALIZED:
            assert self.final_ranking is not None
            return self.final_ranking

        self.final_ranking = get_final_ranking(self.state)
        if self.storage:
            self.storage.clear_snapshot()
        self.phase = SessionPhase.FINALIZED
        self.logger.info(
            f"Session finalized after {self.state.used} comparisons "
            f"({self.state.cycle_count} cycles): top={self.final_ranking[:5]}"
        )
        return self.final_ranking

    def _log_progress(self) -> None:
        state = self.state
        info = get_confidence_info(state)
        level = get_inconsistency_level(state)
        self.logger.info(
            f"Progress: {state.used}/{get_effective_max_comparisons(state)} comparisons, "
            f"top5 confidence {info.top5_confidence:.2f}, top11 confidence {info.top11_confidence:.2f}, "
            f"overall {info.overall_progress:.0%}, {level.value}"
        )
        self.logger.debug(f"Current top 5: {top_k(state, 5)}")
