"""
Snapshot export and restore.

Converts an EngineState to JSON-compatible plain data and back. Restoring
validates the raw data with pydantic and only accepts a snapshot taken for
exactly the same set of cards.
"""

from collections.abc import Sequence
from typing import Any

import numpy as np
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from .exceptions import RestoreMismatchError, ValidationError
from .interfaces import EngineSnapshot
from .logging_config import get_logger
from .models import ComparisonRecord, EngineState
from .preference_graph import PreferenceGraph
from .rankers.bradley_terry_ranker import EPSILON

# Module-level logger
logger = get_logger("snapshot")

_snapshot_adapter = TypeAdapter(EngineSnapshot)


def snapshot_state(state: EngineState) -> EngineSnapshot:
    """Export an engine state as plain data (no live references)."""
    ids = state.card_ids
    return {
        "strength": {card_id: float(state.strength[i]) for i, card_id in enumerate(ids)},
        "information": {card_id: float(state.information[i]) for i, card_id in enumerate(ids)},
        "uncertainty": {card_id: float(state.uncertainty[i]) for i, card_id in enumerate(ids)},
        "appearances": {card_id: int(state.appearances[i]) for i, card_id in enumerate(ids)},
        "preference_graph": [
            (ids[winner], sorted(ids[loser] for loser in losers))
            for winner, losers in sorted(state.preference_graph.items())
            if losers
        ],
        "comparison_history": [
            {"winner": c.winner, "loser": c.loser, "log_likelihood": c.log_likelihood}
            for c in state.comparison_history
        ],
        "likelihood_history": list(state.likelihood_history),
        "rank_history": [list(ranking) for ranking in state.rank_history],
        "cycle_count": state.cycle_count,
        "used": state.used,
        "min_comparisons": state.min_comparisons,
        "max_comparisons": state.max_comparisons,
        "all_card_ids": list(ids),
    }


def restore_state(raw: Any, card_ids: Sequence[str]) -> EngineState:
    """
    Rebuild an engine state from a snapshot for the current session.

    Args:
        raw: Snapshot data as loaded from JSON
        card_ids: Cards of the current session

    Returns:
        EngineState indexed in the snapshot's card order

    Raises:
        RestoreMismatchError: malformed snapshot, or one taken for other cards
    """
    try:
        snapshot = _snapshot_adapter.validate_python(raw)
    except PydanticValidationError as e:
        raise RestoreMismatchError(f"snapshot is malformed: {e.error_count()} validation errors") from e

    saved_ids = snapshot["all_card_ids"]
    if len(saved_ids) != len(card_ids):
        raise RestoreMismatchError(
            f"snapshot has {len(saved_ids)} cards, session has {len(card_ids)}"
        )
    if len(set(saved_ids)) != len(saved_ids) or set(saved_ids) != set(card_ids):
        raise RestoreMismatchError("snapshot card ids do not match the session's cards")

    expected = set(saved_ids)
    for field_name in ("strength", "information", "uncertainty", "appearances"):
        if set(snapshot[field_name]) != expected:
            raise RestoreMismatchError(f"snapshot field {field_name!r} does not cover the session's cards")

    used = snapshot["used"]
    if not (used == len(snapshot["comparison_history"]) == len(snapshot["likelihood_history"])):
        raise RestoreMismatchError(
            f"snapshot used={used} disagrees with its history lengths "
            f"({len(snapshot['comparison_history'])}, {len(snapshot['likelihood_history'])})"
        )

    if not 0 <= snapshot["cycle_count"] <= used:
        raise RestoreMismatchError(f"snapshot cycle_count={snapshot['cycle_count']} is outside 0..{used}")
    min_comparisons, max_comparisons = snapshot["min_comparisons"], snapshot["max_comparisons"]
    if min_comparisons <= 0 or max_comparisons <= 0 or min_comparisons > max_comparisons:
        raise RestoreMismatchError(
            f"snapshot comparison bounds are invalid: min={min_comparisons}, max={max_comparisons}"
        )

    strength = np.array([snapshot["strength"][c] for c in saved_ids], dtype=np.float64)
    information = np.array([snapshot["information"][c] for c in saved_ids], dtype=np.float64)
    uncertainty = np.array([snapshot["uncertainty"][c] for c in saved_ids], dtype=np.float64)
    appearances = np.array([snapshot["appearances"][c] for c in saved_ids], dtype=np.int64)
    if not all(np.all(np.isfinite(values)) for values in (strength, information, uncertainty)):
        raise RestoreMismatchError("snapshot statistics contain non-finite values")
    if np.any(information < EPSILON):
        raise RestoreMismatchError(f"snapshot information must be at least {EPSILON}")
    if np.any(uncertainty <= 0):
        raise RestoreMismatchError("snapshot uncertainty must be positive")
    if np.any(appearances < 0):
        raise RestoreMismatchError("snapshot appearances cannot be negative")

    index_of = {card_id: i for i, card_id in enumerate(saved_ids)}
    if any(card_id not in index_of for ranking in snapshot["rank_history"] for card_id in ranking):
        raise RestoreMismatchError("snapshot rank history references unknown cards")

    edges: dict[int, frozenset[int]] = {}
    for winner, losers in snapshot["preference_graph"]:
        if winner not in index_of or any(loser not in index_of for loser in losers):
            raise RestoreMismatchError(f"snapshot graph references unknown cards near {winner!r}")
        edges[index_of[winner]] = edges.get(index_of[winner], frozenset()) | {index_of[loser] for loser in losers}

    try:
        history = tuple(
            ComparisonRecord(c["winner"], c["loser"], c["log_likelihood"])
            for c in snapshot["comparison_history"]
        )
    except ValidationError as e:
        raise RestoreMismatchError(f"snapshot history is invalid: {e}") from e
    if any(c.winner not in index_of or c.loser not in index_of for c in history):
        raise RestoreMismatchError("snapshot history references unknown cards")

    state = EngineState(
        card_ids=tuple(saved_ids),
        strength=strength,
        information=information,
        uncertainty=uncertainty,
        appearances=appearances,
        preference_graph=PreferenceGraph(edges),
        comparison_history=history,
        likelihood_history=tuple(snapshot["likelihood_history"]),
        rank_history=tuple(tuple(ranking) for ranking in snapshot["rank_history"]),
        cycle_count=snapshot["cycle_count"],
        used=used,
        min_comparisons=min_comparisons,
        max_comparisons=max_comparisons,
    )
    logger.debug(f"Restored snapshot with {state.used} comparisons for {state.size} cards")
    return state
