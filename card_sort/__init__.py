"""
Card Sort - Adaptive Bradley-Terry pairwise ranking

Ranks a fixed set of cards from a judge's pairwise choices: picks the most
informative next pair, updates strength and uncertainty estimates online,
tracks preference cycles and decides when the top of the ranking is settled.
"""

from .bradley_terry import probability
from .exceptions import (
    CardSortError,
    ConfigurationError,
    JudgeError,
    RestoreMismatchError,
    SessionError,
    UnknownCardError,
    ValidationError,
)
from .group_selectors.uncertainty_selector import select_next_pair
from .interfaces import EngineSnapshot, Judge, Storage
from .models import ComparisonRecord, ConfidenceInfo, EngineState, InconsistencyLevel, SessionPhase
from .orchestrator import SessionConfig, SortSession
from .rankers.bradley_terry_ranker import (
    get_confidence_info,
    get_final_ranking,
    get_inconsistency_level,
    initialize,
    record_comparison,
)
from .snapshot import restore_state, snapshot_state
from .stopping import kendall_tau, should_stop

__version__ = "0.1.0"
__all__ = [
    "CardSortError",
    "ComparisonRecord",
    "ConfidenceInfo",
    "ConfigurationError",
    "EngineSnapshot",
    "EngineState",
    "InconsistencyLevel",
    "Judge",
    "JudgeError",
    "RestoreMismatchError",
    "SessionConfig",
    "SessionError",
    "SessionPhase",
    "SortSession",
    "Storage",
    "UnknownCardError",
    "ValidationError",
    "get_confidence_info",
    "get_final_ranking",
    "get_inconsistency_level",
    "initialize",
    "kendall_tau",
    "probability",
    "record_comparison",
    "restore_state",
    "select_next_pair",
    "should_stop",
    "snapshot_state",
]
