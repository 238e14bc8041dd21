"""
Score-level fusion of factor sub-scores.

Combines the sign, interests, age and distance sub-scores into the
single overall compatibility score shown on a card.

Fusion Formula:
    raw = sum(weight_f * score_f for f in factors)
    overall = clip(round_half_up(raw), 0, 100)

Weights are non-negative and sum to 1, so raw stays in [0, 100] whenever
every sub-score does. A raw value outside that range is an engine bug:
strict mode raises OutOfRangeResult, otherwise the value is clamped.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Tuple

import numpy as np

from ..factors.pairwise_factors import FACTOR_NAMES
from ..profiles.schema import OutOfRangeResult

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: Dict[str, float] = {
    "sign": 0.60,
    "interests": 0.20,
    "age": 0.10,
    "distance": 0.10,
}

# Slack for floating-point error when checking the raw score range
RANGE_TOLERANCE = 1e-9


@dataclass
class FusionConfig:
    """
    Configuration for score fusion.

    Attributes:
        weights: Factor name to weight; non-negative, summing to 1
        strict: Raise OutOfRangeResult instead of clamping
    """
    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    strict: bool = False

    def validate(self) -> None:
        """Validate configuration values."""
        unknown = set(self.weights) - set(FACTOR_NAMES)
        if unknown:
            raise ValueError(f"Unknown factor weights: {sorted(unknown)}")
        missing = set(FACTOR_NAMES) - set(self.weights)
        if missing:
            raise ValueError(f"Missing factor weights: {sorted(missing)}")

        for name, weight in self.weights.items():
            if weight < 0:
                raise ValueError(f"Weight for {name} must be non-negative, got {weight}")

        total = sum(self.weights.values())
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Factor weights must sum to 1, got {total}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"weights": dict(self.weights), "strict": self.strict}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FusionConfig":
        """Create from dictionary."""
        return cls(
            weights=dict(d.get("weights", DEFAULT_WEIGHTS)),
            strict=bool(d.get("strict", False))
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "FusionConfig":
        """Create from main config dictionary."""
        scoring_config = config.get("scoring") or {}

        return cls(
            weights=dict(scoring_config.get("weights") or DEFAULT_WEIGHTS),
            strict=bool(scoring_config.get("strict", False))
        )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(np.floor(value + 0.5))


class WeightedFusion:
    """
    Fixed-weight combiner for factor sub-scores.

    Attributes:
        config: FusionConfig with weights and strictness
    """

    def __init__(self, config: FusionConfig):
        """
        Initialize the combiner.

        Args:
            config: FusionConfig instance
        """
        self.config = config
        self.config.validate()
        logger.info(f"Initialized WeightedFusion with weights={config.weights}, strict={config.strict}")

    def fuse(self, scores: Dict[str, float]) -> Tuple[int, float]:
        """
        Combine factor sub-scores.

        Args:
            scores: Factor name to sub-score in [0, 100]

        Returns:
            Tuple of (overall integer score in [0, 100], raw weighted sum)

        Raises:
            KeyError: If a weighted factor has no score
            OutOfRangeResult: If strict and the raw sum leaves [0, 100]
        """
        raw = sum(weight * scores[name] for name, weight in self.config.weights.items())
        return self.finalize(raw), raw

    def finalize(self, raw: float) -> int:
        """
        Turn a raw weighted sum into the bounded integer score.

        Args:
            raw: Weighted sum of sub-scores

        Returns:
            Integer in [0, 100]
        """
        if not -RANGE_TOLERANCE <= raw <= 100.0 + RANGE_TOLERANCE:
            if self.config.strict:
                raise OutOfRangeResult(f"Combined score {raw} is outside [0, 100]")
            logger.warning(f"Combined score {raw} is outside [0, 100]; clamping")
            if np.isnan(raw):
                raw = 0.0

        return int(np.clip(round_half_up(raw), 0, 100))

    def get_effective_weights(self) -> Dict[str, float]:
        """Return a copy of the weights in use."""
        return dict(self.config.weights)

