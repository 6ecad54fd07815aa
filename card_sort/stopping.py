"""Adaptive stopping rule for the Bradley-Terry ranker."""

import math
from collections.abc import Sequence

import numpy as np

from .bradley_terry import top_k_indices
from .logging_config import get_logger
from .models import EngineState
from .rankers.bradley_terry_ranker import TOP_K_CRITICAL, TOP_K_IMPORTANT, cycle_ratio

# Module-level logger
logger = get_logger("stopping")

WINDOW_SIZE = 5
LIKELIHOOD_EPSILON = 0.02
SIGMA_TOP5 = 0.35
SIGMA_TOP11 = 0.5
TOP_STABLE = 3
TAU_CONSISTENT = 0.9
TAU_INCONSISTENT = 0.8
TAU_SUSTAINED = 0.85

INCONSISTENCY_THRESHOLD = 0.1
MAX_COMPARISONS_EXTENSION = 1.5


def kendall_tau(ranking_a: Sequence[str], ranking_b: Sequence[str]) -> float:
    """
    Kendall rank correlation between two equal-length id lists.

    Pairs whose ids are not both present in ranking_b are skipped, but the
    denominator stays n(n-1)/2. Returns 0.0 for lists of different length
    or shorter than 2.
    """
    n = len(ranking_a)
    if n != len(ranking_b) or n < 2:
        return 0.0

    position_b = {card_id: idx for idx, card_id in enumerate(ranking_b)}
    concordant = 0
    discordant = 0
    for i in range(n):
        pos_i = position_b.get(ranking_a[i])
        if pos_i is None:
            continue
        for j in range(i + 1, n):
            pos_j = position_b.get(ranking_a[j])
            if pos_j is None:
                continue
            if pos_i < pos_j:
                concordant += 1
            else:
                discordant += 1

    return (concordant - discordant) / (n * (n - 1) / 2)


def window_variance(values: Sequence[float], window: int = WINDOW_SIZE) -> float:
    """Population variance of the last `window` values; inf when too short."""
    if len(values) < window:
        return math.inf
    return float(np.var(np.asarray(values[-window:], dtype=np.float64)))


def is_inconsistent(state: EngineState) -> bool:
    return cycle_ratio(state) > INCONSISTENCY_THRESHOLD


def get_effective_max_comparisons(state: EngineState) -> int:
    """Comparison ceiling, extended by half for an inconsistent judge."""
    if is_inconsistent(state):
        return math.floor(state.max_comparisons * MAX_COMPARISONS_EXTENSION)
    return state.max_comparisons


def has_extended_comparisons(state: EngineState) -> bool:
    return is_inconsistent(state)


def should_stop(state: EngineState) -> bool:
    """
    Decide whether enough comparisons have been collected.

    Criteria are checked in order; the first one that fails keeps the
    session collecting:

    1. Hard floor of min_comparisons.
    2. Effective ceiling reached: stop.
    3. At least WINDOW_SIZE + 1 likelihood and rank snapshots.
    4. Log-likelihood variance over the last window below LIKELIHOOD_EPSILON².
    5. Top-5 uncertainty below SIGMA_TOP5.
    6. Top-11 uncertainty below SIGMA_TOP11.
    7. Top-3 identical to the snapshot WINDOW_SIZE comparisons ago.
    8. Top-11 Kendall tau against that snapshot above the threshold.
    9. Inconsistent judge: the last three snapshots agree pairwise.
    """
    if state.used < state.min_comparisons:
        return False

    effective_max = get_effective_max_comparisons(state)
    if state.used >= effective_max:
        logger.info(f"Stopping at comparison ceiling: {state.used}/{effective_max}")
        return True

    if len(state.likelihood_history) < WINDOW_SIZE + 1 or len(state.rank_history) < WINDOW_SIZE + 1:
        return False

    inconsistent = is_inconsistent(state)

    variance = window_variance(state.likelihood_history)
    if variance >= LIKELIHOOD_EPSILON ** 2:
        logger.debug(f"Likelihood not converged: variance={variance:.6f}")
        return False

    top5 = top_k_indices(state.strength, TOP_K_CRITICAL)
    max_sigma_top5 = float(np.max(state.uncertainty[top5]))
    if max_sigma_top5 >= SIGMA_TOP5:
        logger.debug(f"Top-5 too uncertain: max σ={max_sigma_top5:.3f}")
        return False

    top11 = top_k_indices(state.strength, TOP_K_IMPORTANT)
    max_sigma_top11 = float(np.max(state.uncertainty[top11]))
    if max_sigma_top11 >= SIGMA_TOP11:
        logger.debug(f"Top-11 too uncertain: max σ={max_sigma_top11:.3f}")
        return False

    current = state.rank_history[-1]
    past = state.rank_history[-WINDOW_SIZE - 1]
    if tuple(current[:TOP_STABLE]) != tuple(past[:TOP_STABLE]):
        logger.debug(f"Top-{TOP_STABLE} moved: {past[:TOP_STABLE]} -> {current[:TOP_STABLE]}")
        return False

    tau = kendall_tau(current[:TOP_K_IMPORTANT], past[:TOP_K_IMPORTANT])
    threshold = TAU_INCONSISTENT if inconsistent else TAU_CONSISTENT
    if tau < threshold:
        logger.debug(f"Top-{TOP_K_IMPORTANT} unstable: tau={tau:.3f} < {threshold}")
        return False

    if inconsistent:
        recent = [ranking[:TOP_K_IMPORTANT] for ranking in state.rank_history[-3:]]
        tau_first = kendall_tau(recent[0], recent[1])
        tau_second = kendall_tau(recent[1], recent[2])
        if tau_first < TAU_SUSTAINED or tau_second < TAU_SUSTAINED:
            logger.debug(f"Inconsistent judge without sustained stability: {tau_first:.3f}, {tau_second:.3f}")
            return False

    logger.info(f"Ranking converged after {state.used} comparisons (tau={tau:.3f})")
    return True
