"""
Game module - score keeping.
"""
from .scoring_state import ScoringState

__all__ = [
    "ScoringState",
]
