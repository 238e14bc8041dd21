"""
Astrological Compatibility Scoring

This package scores how well two dating profiles match, for display on
swipe cards, from their sun signs, shared interests, ages and distance.

Key Design Decisions:
- Scoring is a pure, symmetric function of the two profiles
- Sun-sign affinity comes from a total 12x12 element/modality table
- Factors are fused with fixed, configurable weights and clamped to [0, 100]
- Tier labels and color bands live in the presentation layer, not the engine
"""

from .profiles import Profile, CompatibilityResult, ZodiacSign, InvalidProfileData, OutOfRangeResult
from .inference import CompatibilityEngine, EngineConfig, calculate_compatibility

__version__ = "1.0.0"

__all__ = [
    "Profile",
    "CompatibilityResult",
    "ZodiacSign",
    "InvalidProfileData",
    "OutOfRangeResult",
    "CompatibilityEngine",
    "EngineConfig",
    "calculate_compatibility",
]
