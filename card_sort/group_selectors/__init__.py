"""
Selector implementations.

Provides the acquisition function that chooses which pair of cards to
compare next.
"""

from .uncertainty_selector import select_next_pair, selection_score

__all__ = ["select_next_pair", "selection_score"]
