"""Score fusion module for combining factor sub-scores."""

from .late_fusion import WeightedFusion, FusionConfig

__all__ = ["WeightedFusion", "FusionConfig"]
