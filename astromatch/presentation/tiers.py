"""
Presentation tiers for compatibility scores.

Maps an overall score to the color band and tier label shown on a card.
The table is owned by the rendering layer; the engine never reads it.

Default table (lower bound -> band, label):
    90 -> yellow, Cosmic Soulmates
    80 -> yellow, Stellar Match
    70 -> cyan,   Strong Connection
    60 -> cyan,   Good Harmony
    50 -> purple, Potential Match
    40 -> purple, Different Paths
     0 -> white,  Different Paths
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Dict, Any, List, Optional, Sequence

logger = logging.getLogger(__name__)

# Radius of the progress ring drawn around the score badge
RING_RADIUS = 20.0


@dataclass(frozen=True)
class Tier:
    """
    One row of the tier table.

    Attributes:
        lower_bound: Smallest overall score in this tier
        band: Color band name
        label: Text shown under the card title
    """
    lower_bound: int
    band: str
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_TIERS: List[Tier] = [
    Tier(90, "yellow", "Cosmic Soulmates"),
    Tier(80, "yellow", "Stellar Match"),
    Tier(70, "cyan", "Strong Connection"),
    Tier(60, "cyan", "Good Harmony"),
    Tier(50, "purple", "Potential Match"),
    Tier(40, "purple", "Different Paths"),
    Tier(0, "white", "Different Paths"),
]


class TierTable:
    """
    Ordered (lower bound, band, label) table.

    Attributes:
        tiers: Tiers sorted by descending lower bound
    """

    def __init__(self, tiers: Optional[Sequence[Tier]] = None):
        """
        Initialize the table.

        Args:
            tiers: Tier rows in any order (defaults to DEFAULT_TIERS)

        Raises:
            ValueError: If bounds repeat, leave [0, 100], or no tier starts at 0
        """
        tiers = list(DEFAULT_TIERS if tiers is None else tiers)
        self.tiers = sorted(tiers, key=lambda t: t.lower_bound, reverse=True)
        self._validate()

    def _validate(self) -> None:
        if not self.tiers:
            raise ValueError("Tier table is empty")

        bounds = [t.lower_bound for t in self.tiers]
        if len(set(bounds)) != len(bounds):
            raise ValueError(f"Tier lower bounds must be unique, got {bounds}")
        for bound in bounds:
            if not 0 <= bound <= 100:
                raise ValueError(f"Tier lower bound must be in [0, 100], got {bound}")
        if bounds[-1] != 0:
            raise ValueError("Tier table must contain a tier with lower bound 0")

    def classify(self, overall: int) -> Tier:
        """
        Find the tier for an overall score.

        Args:
            overall: Score in [0, 100]

        Returns:
            The highest tier whose lower bound is <= overall

        Raises:
            ValueError: If overall is outside [0, 100]
        """
        if not 0 <= overall <= 100:
            raise ValueError(f"Overall score must be in [0, 100], got {overall}")

        for tier in self.tiers:
            if overall >= tier.lower_bound:
                return tier
        # Unreachable: _validate guarantees a tier at 0
        raise ValueError(f"No tier for score {overall}")

    def band(self, overall: int) -> str:
        return self.classify(overall).band

    def label(self, overall: int) -> str:
        return self.classify(overall).label

    def to_list(self) -> List[Dict[str, Any]]:
        """Convert to list of dictionaries, highest tier first."""
        return [t.to_dict() for t in self.tiers]

    @classmethod
    def from_list(cls, rows: Sequence[Dict[str, Any]]) -> "TierTable":
        """Create from a list of {lower_bound, band, label} dictionaries."""
        return cls([
            Tier(int(row["lower_bound"]), str(row["band"]), str(row["label"]))
            for row in rows
        ])

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TierTable":
        """Create from main config dictionary, falling back to DEFAULT_TIERS."""
        rows = (config.get("presentation") or {}).get("tiers")
        if not rows:
            return cls()
        logger.info(f"Loaded {len(rows)} presentation tiers from config")
        return cls.from_list(rows)


def ring_dash_offset(overall: int, radius: float = RING_RADIUS) -> float:
    """
    Stroke dash offset of the progress ring around the score badge.

    A full circle of circumference 2*pi*r is drawn; the offset hides the
    part above the score, so 100 gives 0 and 0 gives the full circumference.
    """
    if not 0 <= overall <= 100:
        raise ValueError(f"Overall score must be in [0, 100], got {overall}")
    circumference = 2 * math.pi * radius
    return circumference * (1 - overall / 100)
