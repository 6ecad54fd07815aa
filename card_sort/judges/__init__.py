"""
Judge implementations.
"""

from .dummy_judge import DummyJudge
from .sim_judge import SimulatedJudge

__all__ = [
    "DummyJudge",
    "SimulatedJudge",
]
