"""
Online Bradley-Terry ranker.

Each comparison takes one stochastic gradient step on the logistic
likelihood, accumulates Fisher information for both cards and damps the
step size when the judge keeps contradicting themselves.
"""

import math
from collections.abc import Sequence

import numpy as np

from ..bradley_terry import log_likelihood, probability, top_k_indices
from ..exceptions import ConfigurationError, ValidationError
from ..logging_config import get_logger
from ..models import ComparisonRecord, ConfidenceInfo, EngineState, InconsistencyLevel
from ..preference_graph import PreferenceGraph

# Module-level logger
logger = get_logger("bradley_terry_ranker")

EPSILON = 0.01
BASE_LEARNING_RATE = 0.15
TOP_K_CRITICAL = 5
TOP_K_IMPORTANT = 11
MIN_COMPARISONS_FACTOR = 0.8
MAX_COMPARISONS_FACTOR = 2.0

# Cycle ratio cut-offs for InconsistencyLevel
CONSISTENT_BELOW = 0.05
SOME_INCONSISTENCY_BELOW = 0.15


def initialize(
    card_ids: Sequence[str],
    min_comparisons: int | None = None,
    max_comparisons: int | None = None,
) -> EngineState:
    """
    Create a fresh engine state for a set of cards.

    Args:
        card_ids: Unique card ids; their order fixes the arena indices
        min_comparisons: Hard floor before stopping (default ceil(0.8 * N))
        max_comparisons: Comparison ceiling (default ceil(2.0 * N))

    Returns:
        EngineState with every card at its prior

    Raises:
        ConfigurationError: fewer than 2 cards, duplicate or empty ids, or bad bounds
    """
    ids = tuple(card_ids)
    if len(ids) < 2:
        raise ConfigurationError(f"need at least 2 cards, got {len(ids)}")
    if any(not card_id for card_id in ids):
        raise ConfigurationError("card ids cannot be empty")
    if len(set(ids)) != len(ids):
        duplicates = sorted({card_id for card_id in ids if ids.count(card_id) > 1})
        raise ConfigurationError(f"card ids must be unique, duplicates: {duplicates}")

    n = len(ids)
    if min_comparisons is None:
        min_comparisons = math.ceil(n * MIN_COMPARISONS_FACTOR)
    if max_comparisons is None:
        max_comparisons = math.ceil(n * MAX_COMPARISONS_FACTOR)
    if min_comparisons <= 0 or max_comparisons <= 0:
        raise ConfigurationError(
            f"comparison bounds must be positive, got min={min_comparisons}, max={max_comparisons}"
        )
    if min_comparisons > max_comparisons:
        raise ConfigurationError(
            f"min_comparisons ({min_comparisons}) exceeds max_comparisons ({max_comparisons})"
        )

    logger.debug(f"Initialized ranker for {n} cards: min={min_comparisons}, max={max_comparisons}")
    return EngineState(
        card_ids=ids,
        strength=np.zeros(n, dtype=np.float64),
        information=np.full(n, EPSILON, dtype=np.float64),
        uncertainty=np.full(n, 1.0 / math.sqrt(EPSILON), dtype=np.float64),
        appearances=np.zeros(n, dtype=np.int64),
        preference_graph=PreferenceGraph(),
        comparison_history=(),
        likelihood_history=(),
        rank_history=(),
        cycle_count=0,
        used=0,
        min_comparisons=min_comparisons,
        max_comparisons=max_comparisons,
    )


def cycle_ratio(state: EngineState) -> float:
    """Fraction of comparisons that closed a preference cycle."""
    if state.used == 0:
        return 0.0
    return state.cycle_count / state.used


def top_k(state: EngineState, k: int) -> list[str]:
    """Ids of the k strongest cards, ties in card order."""
    return [state.card_ids[i] for i in top_k_indices(state.strength, k)]


def record_comparison(state: EngineState, winner: str, loser: str) -> EngineState:
    """
    Apply one judgement and return the updated state.

    The input state is left untouched; arrays are copied and the preference
    graph shares its unchanged adjacency sets.

    Raises:
        UnknownCardError: winner or loser is not part of the session
        ValidationError: winner and loser are the same card
    """
    wi = state.index(winner)
    li = state.index(loser)
    if wi == li:
        raise ValidationError(f"card {winner!r} cannot be compared with itself")

    appearances = state.appearances.copy()
    appearances[wi] += 1
    appearances[li] += 1

    cycle_count = state.cycle_count
    if state.preference_graph.would_create_cycle(wi, li):
        cycle_count += 1
        logger.debug(f"Cycle detected: {loser} already reaches {winner} (cycles={cycle_count})")
    graph = state.preference_graph.with_edge(wi, li)

    p = probability(float(state.strength[wi]), float(state.strength[li]))
    rate = BASE_LEARNING_RATE / (1.0 + 2.0 * cycle_ratio(state))
    step = rate * (1.0 - p)

    strength = state.strength.copy()
    strength[wi] += step
    strength[li] -= step

    curvature = p * (1.0 - p)
    information = state.information.copy()
    information[wi] += curvature
    information[li] += curvature

    uncertainty = state.uncertainty.copy()
    uncertainty[wi] = 1.0 / math.sqrt(information[wi] + EPSILON)
    uncertainty[li] = 1.0 / math.sqrt(information[li] + EPSILON)

    winners = [state.index_of[c.winner] for c in state.comparison_history] + [wi]
    losers = [state.index_of[c.loser] for c in state.comparison_history] + [li]
    ll = log_likelihood(strength, winners, losers)

    top = tuple(state.card_ids[i] for i in top_k_indices(strength, TOP_K_IMPORTANT))

    logger.debug(
        f"Comparison {state.used + 1}: {winner} > {loser} (p={p:.3f}, rate={rate:.3f}, ll={ll:.4f})"
    )
    logger.debug(
        f"  {winner}: {state.strength[wi]:.3f}->{strength[wi]:.3f} (σ: {state.uncertainty[wi]:.3f}->{uncertainty[wi]:.3f})"
    )
    logger.debug(
        f"  {loser}: {state.strength[li]:.3f}->{strength[li]:.3f} (σ: {state.uncertainty[li]:.3f}->{uncertainty[li]:.3f})"
    )

    return EngineState(
        card_ids=state.card_ids,
        strength=strength,
        information=information,
        uncertainty=uncertainty,
        appearances=appearances,
        preference_graph=graph,
        comparison_history=state.comparison_history + (ComparisonRecord(winner, loser, ll),),
        likelihood_history=state.likelihood_history + (ll,),
        rank_history=state.rank_history + (top,),
        cycle_count=cycle_count,
        used=state.used + 1,
        min_comparisons=state.min_comparisons,
        max_comparisons=state.max_comparisons,
    )


def get_final_ranking(state: EngineState) -> list[str]:
    """All card ids by descending strength, ties in original card order."""
    return top_k(state, state.size)


def get_confidence_info(state: EngineState) -> ConfidenceInfo:
    """Confidence in the top positions and overall progress, each in [0, 1]."""
    if state.used == 0:
        return ConfidenceInfo(top5_confidence=0.0, top11_confidence=0.0, overall_progress=0.0)

    top5 = top_k_indices(state.strength, TOP_K_CRITICAL)
    top11 = top_k_indices(state.strength, TOP_K_IMPORTANT)
    top5_confidence = _clamp(1.0 - float(np.mean(state.uncertainty[top5])) / 2.0)
    top11_confidence = _clamp(1.0 - float(np.mean(state.uncertainty[top11])) / 2.0)

    coverage_ratio = int(np.count_nonzero(state.appearances)) / state.size
    min_progress_ratio = state.used / state.min_comparisons
    overall_progress = _clamp((coverage_ratio + min_progress_ratio + top11_confidence) / 3.0)

    return ConfidenceInfo(
        top5_confidence=top5_confidence,
        top11_confidence=top11_confidence,
        overall_progress=overall_progress,
    )


def get_inconsistency_level(state: EngineState) -> InconsistencyLevel:
    ratio = cycle_ratio(state)
    if ratio < CONSISTENT_BELOW:
        return InconsistencyLevel.CONSISTENT
    if ratio < SOME_INCONSISTENCY_BELOW:
        return InconsistencyLevel.SOME_INCONSISTENCY
    return InconsistencyLevel.INCONSISTENT


def get_inconsistency_score(state: EngineState) -> float:
    """Cycle ratio scaled by 10, roughly 0-2 in practice."""
    return cycle_ratio(state) * 10.0


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))
