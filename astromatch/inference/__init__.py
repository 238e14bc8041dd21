"""
Inference module for compatibility scoring.

This module provides the scoring engine and deck ranking used by the
card rendering layer.
"""

from .predict import (
    CompatibilityEngine,
    EngineConfig,
    calculate_compatibility,
    get_default_engine,
)
from .deck import rank_candidates, top_candidate

__all__ = [
    "CompatibilityEngine",
    "EngineConfig",
    "calculate_compatibility",
    "get_default_engine",
    "rank_candidates",
    "top_candidate",
]
