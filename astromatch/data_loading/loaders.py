"""
Profile loading functions.

This module turns CSV and JSON exports from the profile data source into
validated Profile objects. No scoring is done here.

CSV layout:
- one row per profile
- required columns: id, name, photos, sun_sign
- optional columns: age, bio, interests, distance, is_online
- list columns (photos, interests) use ";" as separator
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional

import numpy as np
import pandas as pd

from ..profiles.schema import Profile, InvalidProfileData

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["id", "name", "photos", "sun_sign"]
OPTIONAL_COLUMNS = ["age", "bio", "interests", "distance", "is_online"]
LIST_SEPARATOR = ";"


def load_profile_table(filepath: str, delimiter: str = ",") -> pd.DataFrame:
    """
    Load raw profile rows from CSV.

    Args:
        filepath: Path to the CSV file
        delimiter: Field delimiter (default: comma)

    Returns:
        DataFrame with one row per profile

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Profile file not found: {filepath}")

    logger.info(f"Loading profiles from {filepath} (delimiter: {repr(delimiter)})")
    try:
        df = pd.read_csv(filepath, sep=delimiter, dtype={"id": str})
    except pd.errors.EmptyDataError:
        raise ValueError(f"Profile file is empty: {filepath}")

    if df.empty:
        raise ValueError(f"Profile file is empty: {filepath}")

    logger.info(f"Loaded {len(df)} rows with {len(df.columns)} columns")
    return df


def validate_profile_columns(df: pd.DataFrame) -> List[str]:
    """
    Validate that all required profile columns exist in the DataFrame.

    Args:
        df: Profile DataFrame

    Returns:
        List of missing column names (empty if all present)
    """
    return [c for c in REQUIRED_COLUMNS if c not in df.columns]


def profiles_from_frame(df: pd.DataFrame) -> List[Profile]:
    """
    Convert profile rows into Profile objects.

    Args:
        df: DataFrame as returned by load_profile_table

    Returns:
        Profiles in row order

    Raises:
        ValueError: If required columns are missing or ids repeat
        InvalidProfileData: If a row fails profile validation
    """
    missing = validate_profile_columns(df)
    if missing:
        raise ValueError(f"Profile data missing required columns: {missing}")

    profiles = []
    for row_number, record in enumerate(df.to_dict(orient="records"), start=1):
        data = {
            "id": _clean_scalar(record.get("id")),
            "name": _clean_scalar(record.get("name")) or "",
            "age": _parse_age(record.get("age")),
            "photos": _split_list(record.get("photos")),
            "bio": _clean_scalar(record.get("bio")) or "",
            "sun_sign": _clean_scalar(record.get("sun_sign")),
            "interests": _split_list(record.get("interests")),
            "distance": _parse_float(record.get("distance")),
            "is_online": _parse_bool(record.get("is_online")),
        }
        try:
            profiles.append(Profile.from_dict(data))
        except InvalidProfileData as e:
            logger.error(f"Invalid profile on row {row_number}: {e}")
            raise

    _check_unique_ids(profiles)
    return profiles


def load_profiles(filepath: str) -> List[Profile]:
    """
    Load profiles from a CSV or JSON file.

    JSON files hold a list of profile objects with list-valued
    photos and interests.

    Args:
        filepath: Path to a .csv or .json file

    Returns:
        List of validated profiles

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty, malformed, or of unsupported type
        InvalidProfileData: If a record fails profile validation
    """
    path = Path(filepath)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        profiles = profiles_from_frame(load_profile_table(filepath))
    elif suffix == ".json":
        profiles = _load_json_profiles(path)
    else:
        raise ValueError(f"Unsupported profile file type: {suffix or filepath}")

    logger.info(f"Loaded {len(profiles)} profiles from {filepath}")
    return profiles


def _load_json_profiles(path: Path) -> List[Profile]:
    if not path.exists():
        raise FileNotFoundError(f"Profile file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        records = json.load(f)

    if not isinstance(records, list):
        raise ValueError(f"Profile JSON must hold a list of objects: {path}")
    if not records:
        raise ValueError(f"Profile file is empty: {path}")

    profiles = [Profile.from_dict(record) for record in records]
    _check_unique_ids(profiles)
    return profiles


def _check_unique_ids(profiles: List[Profile]) -> None:
    seen = set()
    for profile in profiles:
        if profile.id in seen:
            raise ValueError(f"Duplicate profile id: {profile.id}")
        seen.add(profile.id)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and np.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _clean_scalar(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    return str(value).strip()


def _split_list(value: Any) -> List[str]:
    if _is_missing(value):
        return []
    return [item.strip() for item in str(value).split(LIST_SEPARATOR) if item.strip()]


def _parse_age(value: Any) -> Optional[int]:
    if _is_missing(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidProfileData("age", f"age must be an integer, got {value!r}")
    if not number.is_integer():
        raise InvalidProfileData("age", f"age must be an integer, got {value!r}")
    return int(number)


def _parse_float(value: Any) -> Optional[float]:
    if _is_missing(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidProfileData("distance", f"distance must be numeric, got {value!r}")


def _parse_bool(value: Any) -> Optional[bool]:
    if _is_missing(value):
        return None
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    text = str(value).strip().lower()
    if text in ("true", "yes", "1"):
        return True
    if text in ("false", "no", "0"):
        return False
    raise InvalidProfileData("is_online", f"is_online must be a boolean, got {value!r}")


def profiles_to_frame(profiles: List[Profile]) -> pd.DataFrame:
    """Flatten profiles into the CSV column layout."""
    rows: List[Dict[str, Any]] = []
    for p in profiles:
        rows.append({
            "id": p.id,
            "name": p.name,
            "age": p.age,
            "photos": LIST_SEPARATOR.join(p.photos),
            "bio": p.bio,
            "sun_sign": p.sun_sign.value,
            "interests": LIST_SEPARATOR.join(p.interests),
            "distance": p.distance,
            "is_online": p.is_online,
        })
    return pd.DataFrame(rows, columns=REQUIRED_COLUMNS + OPTIONAL_COLUMNS)
