"""
Profile and result schema for compatibility scoring.

Defines the closed zodiac enumeration, the profile record handed to the
engine by the data layer, and the result the engine returns.

Profile fields:
- id, name, age
- photos (at least one), bio
- sun_sign: one of the twelve ZodiacSign members
- interests: free-form tags, compared case-insensitively
- distance (km from the viewer), is_online: optional
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple
from enum import Enum


class InvalidProfileData(ValueError):
    """
    A required profile field is missing or holds an unrecognized value.

    Attributes:
        field: Name of the offending profile field
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field


class OutOfRangeResult(ArithmeticError):
    """The combined score left [0, 100]. Indicates an engine bug."""


class Element(Enum):
    """Classical elements."""
    FIRE = "Fire"
    EARTH = "Earth"
    AIR = "Air"
    WATER = "Water"


class Modality(Enum):
    """Sign modalities (qualities)."""
    CARDINAL = "Cardinal"
    FIXED = "Fixed"
    MUTABLE = "Mutable"


class ZodiacSign(Enum):
    """The twelve sun signs, in zodiac order."""
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"

    @property
    def index(self) -> int:
        """Position in the zodiac (Aries = 0)."""
        return _SIGN_ORDER.index(self)

    @property
    def element(self) -> Element:
        return SIGN_DATA[self]["element"]

    @property
    def modality(self) -> Modality:
        return SIGN_DATA[self]["modality"]

    @property
    def symbol(self) -> str:
        """Badge glyph shown next to the sign name."""
        return SIGN_DATA[self]["symbol"]

    @classmethod
    def parse(cls, value: Any, field_name: str = "sun_sign") -> "ZodiacSign":
        """
        Resolve a member or a sign name (case-insensitive).

        Args:
            value: ZodiacSign member or sign name
            field_name: Field name reported on failure

        Returns:
            ZodiacSign member

        Raises:
            InvalidProfileData: If value is missing or not a recognized sign
        """
        if isinstance(value, cls):
            return value
        if value is None:
            raise InvalidProfileData(field_name, "sun sign is required")
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
        raise InvalidProfileData(field_name, f"unrecognized sun sign {value!r}")


_SIGN_ORDER: List[ZodiacSign] = list(ZodiacSign)

SIGN_DATA: Dict[ZodiacSign, Dict[str, Any]] = {
    ZodiacSign.ARIES: {"element": Element.FIRE, "modality": Modality.CARDINAL, "symbol": "♈"},
    ZodiacSign.TAURUS: {"element": Element.EARTH, "modality": Modality.FIXED, "symbol": "♉"},
    ZodiacSign.GEMINI: {"element": Element.AIR, "modality": Modality.MUTABLE, "symbol": "♊"},
    ZodiacSign.CANCER: {"element": Element.WATER, "modality": Modality.CARDINAL, "symbol": "♋"},
    ZodiacSign.LEO: {"element": Element.FIRE, "modality": Modality.FIXED, "symbol": "♌"},
    ZodiacSign.VIRGO: {"element": Element.EARTH, "modality": Modality.MUTABLE, "symbol": "♍"},
    ZodiacSign.LIBRA: {"element": Element.AIR, "modality": Modality.CARDINAL, "symbol": "♎"},
    ZodiacSign.SCORPIO: {"element": Element.WATER, "modality": Modality.FIXED, "symbol": "♏"},
    ZodiacSign.SAGITTARIUS: {"element": Element.FIRE, "modality": Modality.MUTABLE, "symbol": "♐"},
    ZodiacSign.CAPRICORN: {"element": Element.EARTH, "modality": Modality.CARDINAL, "symbol": "♑"},
    ZodiacSign.AQUARIUS: {"element": Element.AIR, "modality": Modality.FIXED, "symbol": "♒"},
    ZodiacSign.PISCES: {"element": Element.WATER, "modality": Modality.MUTABLE, "symbol": "♓"},
}

MIN_AGE = 18
MAX_AGE = 120


@dataclass
class Profile:
    """
    A dating profile as supplied by the data layer.

    Attributes:
        id: Unique profile identifier
        name: Display name
        age: Age in years, None if unknown
        photos: Ordered photo references, at least one
        bio: Biography text
        sun_sign: Sun sign (names are parsed into ZodiacSign)
        interests: Interest tags
        distance: Distance from the viewer in km, None if unknown
        is_online: Online status, None if unknown
    """
    id: str
    name: str
    age: Optional[int]
    photos: List[str]
    sun_sign: ZodiacSign
    bio: str = ""
    interests: List[str] = field(default_factory=list)
    distance: Optional[float] = None
    is_online: Optional[bool] = None

    def __post_init__(self):
        """Validate fields and coerce the sun sign."""
        self.validate()

    def validate(self, field_prefix: str = "") -> None:
        """
        Check every field and normalize the sun sign and list fields.

        Profiles are mutable, so the engine calls this again before scoring.

        Args:
            field_prefix: Prefix for the field name reported on failure
                (e.g. "candidate.")

        Raises:
            InvalidProfileData: If a field is missing or has a bad value
        """
        if not isinstance(self.id, str) or not self.id.strip():
            raise InvalidProfileData(f"{field_prefix}id", "profile id must be a non-empty string")

        self.sun_sign = ZodiacSign.parse(self.sun_sign, field_name=f"{field_prefix}sun_sign")

        if self.age is not None:
            if isinstance(self.age, bool) or not isinstance(self.age, int):
                raise InvalidProfileData(f"{field_prefix}age", f"age must be an integer, got {self.age!r}")
            if not MIN_AGE <= self.age <= MAX_AGE:
                raise InvalidProfileData(
                    f"{field_prefix}age", f"age must be between {MIN_AGE} and {MAX_AGE}, got {self.age}"
                )

        if isinstance(self.photos, str):
            raise InvalidProfileData(f"{field_prefix}photos", "photos must be a sequence of references")
        self.photos = list(self.photos or [])
        if not self.photos:
            raise InvalidProfileData(f"{field_prefix}photos", "at least one photo is required")

        if self.bio is None:
            self.bio = ""

        if isinstance(self.interests, str):
            raise InvalidProfileData(f"{field_prefix}interests", "interests must be a sequence of tags")
        self.interests = list(self.interests or [])
        for tag in self.interests:
            if not isinstance(tag, str):
                raise InvalidProfileData(f"{field_prefix}interests", f"interest tags must be strings, got {tag!r}")

        if self.distance is not None:
            if isinstance(self.distance, bool) or not isinstance(self.distance, (int, float)):
                raise InvalidProfileData(
                    f"{field_prefix}distance", f"distance must be numeric, got {self.distance!r}"
                )
            if not math.isfinite(self.distance) or self.distance < 0:
                raise InvalidProfileData(
                    f"{field_prefix}distance", f"distance must be finite and non-negative, got {self.distance}"
                )

        if self.is_online is not None and not isinstance(self.is_online, bool):
            raise InvalidProfileData(f"{field_prefix}is_online", f"is_online must be a boolean, got {self.is_online!r}")

    @property
    def interest_set(self) -> frozenset:
        """Interest tags trimmed and case-folded, blanks dropped."""
        return frozenset(
            tag.strip().casefold() for tag in self.interests
            if tag.strip()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with string sign."""
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "photos": list(self.photos),
            "bio": self.bio,
            "sun_sign": self.sun_sign.value,
            "interests": list(self.interests),
            "distance": self.distance,
            "is_online": self.is_online
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        """Create from dictionary, reporting missing required keys."""
        for key in ("id", "name", "photos", "sun_sign"):
            if key not in data:
                raise InvalidProfileData(key, "field is required")
        return cls(
            id=data["id"],
            name=data["name"],
            age=data.get("age"),
            photos=data["photos"],
            sun_sign=data["sun_sign"],
            bio=data.get("bio", ""),
            interests=data.get("interests", []),
            distance=data.get("distance"),
            is_online=data.get("is_online")
        )


@dataclass
class CompatibilityResult:
    """
    Result of compatibility scoring.

    Attributes:
        overall: Final compatibility score, integer in [0, 100]
        breakdown: Factor name to sub-score in [0, 100]
        weights: Factor name to the weight used in the combination
        shared_interests: Normalized tags both profiles list
    """
    overall: int
    breakdown: Dict[str, float] = field(default_factory=dict)
    weights: Dict[str, float] = field(default_factory=dict)
    shared_interests: Tuple[str, ...] = ()

    def contribution(self, factor: str) -> float:
        """Weighted points a factor added to the overall score."""
        return self.weights.get(factor, 0.0) * self.breakdown.get(factor, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "overall": self.overall,
            "breakdown": dict(self.breakdown),
            "weights": dict(self.weights),
            "shared_interests": list(self.shared_interests)
        }
