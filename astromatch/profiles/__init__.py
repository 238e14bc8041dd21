"""Profile schema, zodiac enumeration and scoring errors."""

from .schema import (
    Profile,
    CompatibilityResult,
    ZodiacSign,
    Element,
    Modality,
    InvalidProfileData,
    OutOfRangeResult
)

__all__ = [
    "Profile",
    "CompatibilityResult",
    "ZodiacSign",
    "Element",
    "Modality",
    "InvalidProfileData",
    "OutOfRangeResult"
]
