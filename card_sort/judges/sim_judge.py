"""
Simulated judge implementation.

Answers comparisons from latent ground-truth scores, optionally with
Bradley-Terry noise and random lapses, for testing and demos.
"""

import random

from typing_extensions import override

from ..bradley_terry import probability
from ..exceptions import JudgeError
from ..interfaces import Judge


class SimulatedJudge(Judge):
    """
    Simulated judge for testing purposes.

    With noise=0 the card with the higher ground-truth score always wins.
    With noise>0 the winner is sampled with P(a wins) = σ((s_a - s_b) / noise).
    With probability lapse_rate the judge then reports the opposite choice,
    which produces preference cycles like an inattentive human.
    """

    def __init__(
        self,
        ground_truth: dict[str, float],
        noise: float = 0.0,
        lapse_rate: float = 0.0,
        seed: int | None = None,
    ):
        """
        Initialize simulated judge.

        Args:
            ground_truth: Dict mapping card_id to its true score
            noise: Temperature of the choice model (0 = deterministic)
            lapse_rate: Probability of flipping the answer (0-1)
            seed: Random seed for reproducible sessions
        """
        self.ground_truth = dict(ground_truth)
        self.noise = max(0.0, noise)
        self.lapse_rate = max(0.0, min(1.0, lapse_rate))
        self.judge_id = "simulated"
        self._rng = random.Random(seed)

    def _true_score(self, card_id: str) -> float:
        try:
            return self.ground_truth[card_id]
        except KeyError:
            raise JudgeError(f"No ground truth for card {card_id!r}") from None

    @override
    def choose(self, card_a: str, card_b: str) -> str:
        score_a = self._true_score(card_a)
        score_b = self._true_score(card_b)

        if self.noise == 0:
            a_wins = score_a >= score_b
        else:
            a_wins = self._rng.random() < probability(score_a / self.noise, score_b / self.noise)

        if self.lapse_rate and self._rng.random() < self.lapse_rate:
            a_wins = not a_wins

        return card_a if a_wins else card_b

    def get_ground_truth(self) -> dict[str, float]:
        """Get ground truth scores for debugging."""
        return self.ground_truth.copy()

    def true_ranking(self) -> list[str]:
        """Card ids by descending ground truth."""
        return sorted(self.ground_truth, key=lambda card_id: self.ground_truth[card_id], reverse=True)
