"""
Bradley-Terry probability and likelihood math.

P(i beats j) is the logistic function of the strength difference. Both the
scalar and the vectorized forms go through tanh, which stays finite for any
strength difference and gives exactly 0.5 for equal strengths.
"""

import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

# Probabilities are floored here before taking a logarithm
PROBABILITY_FLOOR = 1e-4


def probability(strength_a: float, strength_b: float) -> float:
    """Probability that a card of strength_a beats a card of strength_b."""
    return 0.5 * (1.0 + math.tanh(0.5 * (strength_a - strength_b)))


def probability_matrix(strength: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Pairwise win probabilities; entry [i, j] is P(i beats j)."""
    diff = strength[:, np.newaxis] - strength[np.newaxis, :]
    return 0.5 * (1.0 + np.tanh(0.5 * diff))


def log_likelihood(
    strength: npt.NDArray[np.float64],
    winners: Sequence[int],
    losers: Sequence[int],
) -> float:
    """
    Total log-likelihood of a comparison history.

    Args:
        strength: Strength per card index
        winners: Winner index of each comparison
        losers: Loser index of each comparison (same length as winners)

    Returns:
        Sum of log(max(p, PROBABILITY_FLOOR)) over all comparisons
    """
    if not winners:
        return 0.0
    diff = strength[np.asarray(winners)] - strength[np.asarray(losers)]
    p = 0.5 * (1.0 + np.tanh(0.5 * diff))
    return float(np.sum(np.log(np.maximum(p, PROBABILITY_FLOOR))))


def top_k_indices(strength: npt.NDArray[np.float64], k: int) -> list[int]:
    """Indices of the k strongest cards, ties kept in card order."""
    order = np.argsort(-strength, kind="stable")
    return [int(i) for i in order[:k]]
