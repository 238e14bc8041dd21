"""
Pairwise factor scores for compatibility scoring.

Each factor maps a pair of profiles to a sub-score in [0, 100] that
depends only on the two profiles, never on argument order.

Factor Formulas:
    interests = 100 * |A & B| / |A | B|                  (Jaccard index)
    age       = 100 * (1 - |age_A - age_B| / max_age_gap)
    distance  = 100 * (1 - mean(known distances) / max_distance_km)

Missing input (no interests on either side, unknown age, no known
distance) yields the factor's neutral value instead of zero.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Any, Tuple

import numpy as np

from ..profiles.schema import Profile

logger = logging.getLogger(__name__)

FACTOR_NAMES = ("sign", "interests", "age", "distance")


@dataclass
class FactorConfig:
    """
    Configuration for the non-sign factors.

    Attributes:
        interests_neutral: Interest score when either side lists no interests
        age_neutral: Age score when either age is unknown
        max_age_gap: Age gap (years) at which the age score reaches 0
        distance_neutral: Distance score when no distance is known
        max_distance_km: Distance at which the distance score reaches 0
    """
    interests_neutral: float = 50.0
    age_neutral: float = 50.0
    max_age_gap: float = 20.0
    distance_neutral: float = 50.0
    max_distance_km: float = 100.0

    def validate(self) -> None:
        """Validate configuration values."""
        for name in ("interests_neutral", "age_neutral", "distance_neutral"):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must be in [0, 100], got {value}")
        if self.max_age_gap <= 0:
            raise ValueError(f"max_age_gap must be positive, got {self.max_age_gap}")
        if self.max_distance_km <= 0:
            raise ValueError(f"max_distance_km must be positive, got {self.max_distance_km}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FactorConfig":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "FactorConfig":
        """Create from main config dictionary."""
        scoring = config.get("scoring") or {}
        interests = scoring.get("interests") or {}
        age = scoring.get("age") or {}
        distance = scoring.get("distance") or {}

        return cls(
            interests_neutral=interests.get("neutral", 50.0),
            age_neutral=age.get("neutral", 50.0),
            max_age_gap=age.get("max_gap", 20.0),
            distance_neutral=distance.get("neutral", 50.0),
            max_distance_km=distance.get("max_km", 100.0)
        )


def shared_interests(profile_a: Profile, profile_b: Profile) -> Tuple[str, ...]:
    """Normalized interest tags listed by both profiles, sorted."""
    return tuple(sorted(profile_a.interest_set & profile_b.interest_set))


def interest_affinity(
    profile_a: Profile,
    profile_b: Profile,
    config: FactorConfig
) -> float:
    """
    Compute shared-interest score as a Jaccard index.

    Args:
        profile_a: First profile
        profile_b: Second profile
        config: Factor configuration

    Returns:
        Score in [0, 100]; config.interests_neutral if either set is empty
    """
    set_a = profile_a.interest_set
    set_b = profile_b.interest_set

    if not set_a or not set_b:
        return float(config.interests_neutral)

    intersection = len(set_a & set_b)
    union = len(set_a | set_b)
    return 100.0 * intersection / union


def age_affinity(
    profile_a: Profile,
    profile_b: Profile,
    config: FactorConfig
) -> float:
    """
    Compute age-proximity score.

    Linear decay from 100 (same age) to 0 at config.max_age_gap years.

    Args:
        profile_a: First profile
        profile_b: Second profile
        config: Factor configuration

    Returns:
        Score in [0, 100]; config.age_neutral if either age is unknown
    """
    if profile_a.age is None or profile_b.age is None:
        return float(config.age_neutral)

    gap = abs(profile_a.age - profile_b.age)
    score = 100.0 * (1.0 - gap / config.max_age_gap)
    return float(np.clip(score, 0.0, 100.0))


def distance_affinity(
    profile_a: Profile,
    profile_b: Profile,
    config: FactorConfig
) -> float:
    """
    Compute proximity score from the profiles' distance fields.

    The mean of the known distances is used so the score does not depend
    on which profile is the viewer.

    Args:
        profile_a: First profile
        profile_b: Second profile
        config: Factor configuration

    Returns:
        Score in [0, 100]; config.distance_neutral if no distance is known
    """
    known = [p.distance for p in (profile_a, profile_b) if p.distance is not None]
    if not known:
        return float(config.distance_neutral)

    distance_km = float(np.mean(known))
    score = 100.0 * (1.0 - distance_km / config.max_distance_km)
    return float(np.clip(score, 0.0, 100.0))


def compute_factor_scores(
    profile_a: Profile,
    profile_b: Profile,
    sign_score: float,
    config: FactorConfig
) -> Dict[str, float]:
    """
    Assemble all factor sub-scores for a profile pair.

    Args:
        profile_a: First profile
        profile_b: Second profile
        sign_score: Precomputed sign-affinity score
        config: Factor configuration

    Returns:
        Dictionary keyed by FACTOR_NAMES
    """
    scores = {
        "sign": float(sign_score),
        "interests": interest_affinity(profile_a, profile_b, config),
        "age": age_affinity(profile_a, profile_b, config),
        "distance": distance_affinity(profile_a, profile_b, config)
    }
    logger.debug(f"Factor scores for ({profile_a.id}, {profile_b.id}): {scores}")
    return scores
