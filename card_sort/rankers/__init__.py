"""
Ranker implementations.

Available implementations:
- bradley_terry_ranker: online Bradley-Terry model with Fisher-information
  uncertainty and preference-cycle damping
"""

from .bradley_terry_ranker import (
    cycle_ratio,
    get_confidence_info,
    get_final_ranking,
    get_inconsistency_level,
    get_inconsistency_score,
    initialize,
    record_comparison,
    top_k,
)

__all__ = [
    "cycle_ratio",
    "get_confidence_info",
    "get_final_ranking",
    "get_inconsistency_level",
    "get_inconsistency_score",
    "initialize",
    "record_comparison",
    "top_k",
]
