"""
Dummy judge implementation for testing.

Provides deterministic and random choices.
"""

import random

from typing_extensions import override

from ..exceptions import JudgeError, ValidationError
from ..interfaces import Judge


class DummyJudge(Judge):
    """
    Dummy judge for testing purposes.

    In deterministic mode the lexicographically smaller id wins; in random
    mode a seeded coin decides.
    """

    def __init__(self, mode: str = "deterministic", seed: int = 42):
        """
        Initialize dummy judge.

        Args:
            mode: "deterministic" or "random"
            seed: Random seed for reproducible results
        """
        if mode not in ("deterministic", "random"):
            raise ValidationError(f"Unknown mode: {mode}")
        self.mode = mode
        self.seed = seed
        self.judge_id = f"dummy_{mode}"
        self._rng = random.Random(seed)

    @override
    def choose(self, card_a: str, card_b: str) -> str:
        if not card_a or not card_b:
            raise JudgeError("Cannot judge an empty card id")

        if self.mode == "deterministic":
            return min(card_a, card_b)
        return card_a if self._rng.random() < 0.5 else card_b
