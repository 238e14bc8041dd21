"""Presentation tier table consumed by the card rendering layer."""

from .tiers import Tier, TierTable, DEFAULT_TIERS, ring_dash_offset

__all__ = ["Tier", "TierTable", "DEFAULT_TIERS", "ring_dash_offset"]
