"""Data loading module for profile records."""

from .loaders import (
    load_profiles,
    load_profile_table,
    profiles_from_frame,
    profiles_to_frame,
    validate_profile_columns
)

__all__ = [
    "load_profiles",
    "load_profile_table",
    "profiles_from_frame",
    "profiles_to_frame",
    "validate_profile_columns"
]
