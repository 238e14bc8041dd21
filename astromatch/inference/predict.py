"""
Compatibility scoring between two profiles.

This module provides the engine that:
1. Validates both profiles (sun sign and the fields the factors read)
2. Looks up the sun-sign affinity from the prebuilt table
3. Computes the interests, age and distance factors
4. Fuses all factors into the bounded overall score

The engine holds only read-only configuration and the affinity table,
so one instance can serve any number of concurrent callers.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

from ..affinity.sign_affinity import SignAffinityConfig, build_affinity_table, sign_affinity
from ..factors.pairwise_factors import FactorConfig, compute_factor_scores, shared_interests
from ..fusion.late_fusion import FusionConfig, WeightedFusion
from ..profiles.schema import (
    Profile,
    CompatibilityResult,
    ZodiacSign,
    InvalidProfileData,
)

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """
    Complete scoring configuration.

    Attributes:
        sign_affinity: Constants for the sign-affinity table
        factors: Ranges and neutral values for the other factors
        fusion: Factor weights and strictness
    """
    sign_affinity: SignAffinityConfig = field(default_factory=SignAffinityConfig)
    factors: FactorConfig = field(default_factory=FactorConfig)
    fusion: FusionConfig = field(default_factory=FusionConfig)

    def validate(self) -> None:
        """Validate every section."""
        self.sign_affinity.validate()
        self.factors.validate()
        self.fusion.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "sign_affinity": self.sign_affinity.to_dict(),
            "factors": self.factors.to_dict(),
            "fusion": self.fusion.to_dict()
        }

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "EngineConfig":
        """Create from main config dictionary."""
        return cls(
            sign_affinity=SignAffinityConfig.from_config(config),
            factors=FactorConfig.from_config(config),
            fusion=FusionConfig.from_config(config)
        )


class CompatibilityEngine:
    """
    Deterministic compatibility scorer for profile pairs.

    Scores are symmetric: calculate_compatibility(a, b) and
    calculate_compatibility(b, a) return equal results.

    Attributes:
        config: EngineConfig in use
        affinity_table: Read-only 12x12 sign-affinity table
        fusion: WeightedFusion combiner
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the engine.

        Args:
            config: EngineConfig instance (defaults apply when omitted)

        Raises:
            ValueError: If the configuration is invalid
        """
        self.config = config or EngineConfig()
        self.config.validate()
        self.affinity_table = build_affinity_table(self.config.sign_affinity)
        self.fusion = WeightedFusion(self.config.fusion)
        logger.info("Initialized CompatibilityEngine")

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CompatibilityEngine":
        """Create an engine from the main config dictionary."""
        return cls(EngineConfig.from_config(config))

    def calculate_compatibility(
        self,
        viewer: Profile,
        candidate: Profile
    ) -> CompatibilityResult:
        """
        Compute compatibility between a viewer and a candidate.

        Args:
            viewer: Profile of the person looking at the card
            candidate: Profile shown on the card

        Returns:
            CompatibilityResult with overall score and breakdown

        Raises:
            InvalidProfileData: If either profile is absent or has a
                missing or invalid field
            OutOfRangeResult: If the engine runs in strict mode and the
                combined score leaves [0, 100]
        """
        sign_a = self._validate_profile(viewer, "viewer")
        sign_b = self._validate_profile(candidate, "candidate")

        sign_score = sign_affinity(self.affinity_table, sign_a, sign_b)
        breakdown = compute_factor_scores(viewer, candidate, sign_score, self.config.factors)
        overall, raw = self.fusion.fuse(breakdown)

        logger.debug(f"Compatibility {viewer.id} x {candidate.id}: raw={raw:.4f}, overall={overall}")

        return CompatibilityResult(
            overall=overall,
            breakdown=breakdown,
            weights=self.fusion.get_effective_weights(),
            shared_interests=shared_interests(viewer, candidate)
        )

    def _validate_profile(self, profile: Optional[Profile], role: str) -> ZodiacSign:
        """
        Check a profile right before scoring.

        Profiles are mutable, so every field the factors read is checked
        again here even though construction already validated it.

        Args:
            profile: Profile to check
            role: "viewer" or "candidate", used as the field prefix in errors

        Returns:
            The profile's sun sign

        Raises:
            InvalidProfileData: If the profile is absent or a field is invalid
        """
        if profile is None:
            raise InvalidProfileData(role, "profile is required")
        profile.validate(field_prefix=f"{role}.")
        return profile.sun_sign


_default_engine: Optional[CompatibilityEngine] = None


def get_default_engine() -> CompatibilityEngine:
    """Return the shared engine built from default configuration."""
    global _default_engine
    if _default_engine is None:
        _default_engine = CompatibilityEngine()
    return _default_engine


def calculate_compatibility(viewer: Profile, candidate: Profile) -> CompatibilityResult:
    """
    Score two profiles with the default engine.

    Args:
        viewer: Profile of the person looking at the card
        candidate: Profile shown on the card

    Returns:
        CompatibilityResult with overall score in [0, 100]
    """
    return get_default_engine().calculate_compatibility(viewer, candidate)
