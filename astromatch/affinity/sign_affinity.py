"""
Sun-sign affinity table.

Builds a total 12x12 lookup of base compatibility between two sun signs
from their element and modality.

Table Formula:
    affinity(s, s) = same_sign
    affinity(a, b) = clip(element_score[rel(a, b)] + modality_adjustment[a, b], 0, 100)

Element relations:
- same: both signs share an element
- complementary: Fire-Air, Earth-Water
- neutral: Fire-Earth, Air-Water
- clashing: Fire-Water, Earth-Air

The table is symmetric and the diagonal is its strict maximum.
"""

import logging
from dataclasses import dataclass, asdict, field
from typing import Dict, Any, FrozenSet

import numpy as np
import pandas as pd

from ..profiles.schema import ZodiacSign, Element, Modality

logger = logging.getLogger(__name__)

N_SIGNS = len(ZodiacSign)

COMPLEMENTARY_ELEMENTS: FrozenSet[FrozenSet[Element]] = frozenset({
    frozenset({Element.FIRE, Element.AIR}),
    frozenset({Element.EARTH, Element.WATER}),
})

CLASHING_ELEMENTS: FrozenSet[FrozenSet[Element]] = frozenset({
    frozenset({Element.FIRE, Element.WATER}),
    frozenset({Element.EARTH, Element.AIR}),
})

ELEMENT_RELATIONS = ("same", "complementary", "neutral", "clashing")

# Keys are "<Modality>-<Modality>" with the two names sorted
DEFAULT_MODALITY_ADJUSTMENTS: Dict[str, float] = {
    "Cardinal-Cardinal": 0.0,
    "Cardinal-Fixed": 0.0,
    "Cardinal-Mutable": 8.0,
    "Fixed-Fixed": -8.0,
    "Fixed-Mutable": 8.0,
    "Mutable-Mutable": 0.0,
}


def element_relation(a: Element, b: Element) -> str:
    """Classify an element pair as same, complementary, neutral or clashing."""
    if a == b:
        return "same"
    pair = frozenset({a, b})
    if pair in COMPLEMENTARY_ELEMENTS:
        return "complementary"
    if pair in CLASHING_ELEMENTS:
        return "clashing"
    return "neutral"


def modality_key(a: Modality, b: Modality) -> str:
    """Order-independent key for a modality pair."""
    return "-".join(sorted([a.value, b.value]))


@dataclass
class SignAffinityConfig:
    """
    Constants for building the sign-affinity table.

    Attributes:
        same_sign: Score for two profiles sharing a sun sign
        element_scores: Base score per element relation
        modality_adjustments: Additive adjustment per modality pair
    """
    same_sign: float = 100.0
    element_scores: Dict[str, float] = field(default_factory=lambda: {
        "same": 90.0,
        "complementary": 80.0,
        "neutral": 55.0,
        "clashing": 24.0,
    })
    modality_adjustments: Dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_MODALITY_ADJUSTMENTS)
    )

    def validate(self) -> None:
        """Validate configuration values."""
        if not 0 <= self.same_sign <= 100:
            raise ValueError(f"same_sign must be in [0, 100], got {self.same_sign}")

        missing = set(ELEMENT_RELATIONS) - set(self.element_scores)
        if missing:
            raise ValueError(f"element_scores missing relations: {sorted(missing)}")

        missing = set(DEFAULT_MODALITY_ADJUSTMENTS) - set(self.modality_adjustments)
        if missing:
            raise ValueError(f"modality_adjustments missing pairs: {sorted(missing)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SignAffinityConfig":
        """Create from dictionary, keeping defaults for omitted entries."""
        defaults = cls()
        element_scores = dict(defaults.element_scores)
        element_scores.update(d.get("element_scores") or {})
        modality_adjustments = dict(defaults.modality_adjustments)
        modality_adjustments.update(d.get("modality_adjustments") or {})
        return cls(
            same_sign=d.get("same_sign", defaults.same_sign),
            element_scores=element_scores,
            modality_adjustments=modality_adjustments
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SignAffinityConfig":
        """Create from main config dictionary."""
        return cls.from_dict((config.get("scoring") or {}).get("sign_affinity") or {})


def build_affinity_table(config: SignAffinityConfig) -> np.ndarray:
    """
    Build the 12x12 sign-affinity table.

    Rows and columns follow ZodiacSign.index order.

    Args:
        config: SignAffinityConfig with element and modality constants

    Returns:
        Read-only float array of shape (12, 12) with values in [0, 100]

    Raises:
        ValueError: If the resulting table is not total, symmetric, or
            has an off-diagonal entry reaching the same-sign score
    """
    config.validate()
    signs = list(ZodiacSign)
    table = np.empty((N_SIGNS, N_SIGNS), dtype=float)

    for a in signs:
        for b in signs:
            if a == b:
                value = config.same_sign
            else:
                relation = element_relation(a.element, b.element)
                value = (
                    config.element_scores[relation] +
                    config.modality_adjustments[modality_key(a.modality, b.modality)]
                )
            table[a.index, b.index] = value

    table = np.clip(table, 0.0, 100.0)
    _check_table(table)
    table.setflags(write=False)

    logger.info(f"Built sign-affinity table: min={table.min():.1f}, max={table.max():.1f}")
    return table


def _check_table(table: np.ndarray) -> None:
    """Reject tables that break totality, symmetry or diagonal dominance."""
    if table.shape != (N_SIGNS, N_SIGNS):
        raise ValueError(f"Affinity table must be {N_SIGNS}x{N_SIGNS}, got {table.shape}")
    if not np.all(np.isfinite(table)):
        raise ValueError("Affinity table has undefined entries")
    if not np.allclose(table, table.T):
        raise ValueError("Affinity table must be symmetric")

    diagonal = np.diag(table)
    off_diagonal = table[~np.eye(N_SIGNS, dtype=bool)]
    if off_diagonal.max() >= diagonal.min():
        raise ValueError(
            f"Same-sign affinity ({diagonal.min():.1f}) must exceed every other pair "
            f"(max {off_diagonal.max():.1f})"
        )


def sign_affinity(table: np.ndarray, a: ZodiacSign, b: ZodiacSign) -> float:
    """Look up the affinity of two sun signs."""
    return float(table[a.index, b.index])


def affinity_frame(table: np.ndarray) -> pd.DataFrame:
    """Return the table as a DataFrame labelled by sign name."""
    names = [sign.value for sign in ZodiacSign]
    return pd.DataFrame(table, index=names, columns=names)
