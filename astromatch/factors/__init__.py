"""Pairwise factor scoring module."""

from .pairwise_factors import (
    FactorConfig,
    FACTOR_NAMES,
    interest_affinity,
    age_affinity,
    distance_affinity,
    shared_interests,
    compute_factor_scores
)

__all__ = [
    "FactorConfig",
    "FACTOR_NAMES",
    "interest_affinity",
    "age_affinity",
    "distance_affinity",
    "shared_interests",
    "compute_factor_scores"
]
