"""
Uncertainty selector implementation.

Implements the active-learning acquisition function that picks the next pair
of cards to show the judge.
"""

import numpy as np
import numpy.typing as npt

from ..bradley_terry import probability_matrix, top_k_indices
from ..logging_config import get_logger
from ..models import EngineState
from ..rankers.bradley_terry_ranker import TOP_K_IMPORTANT

# Module-level logger
logger = get_logger("uncertainty_selector")

TOP_BONUS = 1.5
COVERAGE_DECAY = 0.1


def selection_scores(state: EngineState) -> npt.NDArray[np.float64]:
    """
    Acquisition score for every ordered pair of cards.

    score[i, j] = (1 - 2|p_ij - 0.5|) * (σ_i + σ_j) * topBonus * coverageBonus

    The matrix is symmetric; the diagonal is meaningless and left as computed.
    """
    p = probability_matrix(state.strength)
    closeness = 1.0 - 2.0 * np.abs(p - 0.5)
    combined_sigma = state.uncertainty[:, np.newaxis] + state.uncertainty[np.newaxis, :]

    in_top = np.zeros(state.size, dtype=bool)
    in_top[top_k_indices(state.strength, TOP_K_IMPORTANT)] = True
    bonus = np.where(in_top, TOP_BONUS, 1.0)
    top_bonus = bonus[:, np.newaxis] * bonus[np.newaxis, :]

    fewest = np.minimum(state.appearances[:, np.newaxis], state.appearances[np.newaxis, :])
    coverage_bonus = 1.0 / (1.0 + fewest * COVERAGE_DECAY)

    return closeness * combined_sigma * top_bonus * coverage_bonus


def selection_score(state: EngineState, card_a: str, card_b: str) -> float:
    """Acquisition score of a single pair."""
    i = state.index(card_a)
    j = state.index(card_b)
    return float(selection_scores(state)[i, j])


def select_next_pair(state: EngineState) -> tuple[str, str] | None:
    """
    Choose the next comparison.

    1. Two or more cards never shown: the first two of them in card order.
    2. Exactly one: pair it with the shown card of largest uncertainty.
    3. Otherwise the pair (i < j) with the highest selection score; ties go
       to the first pair in card order.

    Returns:
        (card_a, card_b), or None with fewer than 2 cards
    """
    if state.size < 2:
        logger.warning("Insufficient cards for a comparison")
        return None

    uncovered = np.flatnonzero(state.appearances == 0)
    if len(uncovered) >= 2:
        pair = (state.card_ids[uncovered[0]], state.card_ids[uncovered[1]])
        logger.debug(f"Coverage pair: {pair}")
        return pair

    if len(uncovered) == 1:
        target = int(uncovered[0])
        sigma = np.where(state.appearances > 0, state.uncertainty, -np.inf)
        partner = int(np.argmax(sigma))
        pair = (state.card_ids[target], state.card_ids[partner])
        logger.debug(f"Last uncovered card paired with most uncertain: {pair} (σ={sigma[partner]:.3f})")
        return pair

    scores = selection_scores(state)
    upper = np.triu(np.ones_like(scores, dtype=bool), k=1)
    masked = np.where(upper, scores, -np.inf)
    i, j = np.unravel_index(int(np.argmax(masked)), masked.shape)
    pair = (state.card_ids[i], state.card_ids[j])
    logger.debug(f"Selected pair {pair} with score {masked[i, j]:.4f}")
    return pair
