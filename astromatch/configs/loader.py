"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates the scoring and presentation sections.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

KNOWN_SECTIONS = ["global", "scoring", "presentation"]


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")
    if not isinstance(config, dict):
        raise ValueError(f"Configuration root must be a mapping: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in config:
        if section not in KNOWN_SECTIONS:
            issues.append(f"Unknown section: {section}")

    scoring = config.get("scoring", {}) or {}

    # Check factor weights sum to 1
    weights = scoring.get("weights")
    if weights is not None:
        if any(w < 0 for w in weights.values()):
            issues.append(f"Factor weights must be non-negative: {weights}")
        total = sum(weights.values())
        if abs(total - 1.0) > 0.01:
            issues.append(f"Factor weights don't sum to 1: {total}")

    # Check neutral values stay in score range
    for factor in ("interests", "age", "distance"):
        neutral = (scoring.get(factor) or {}).get("neutral")
        if neutral is not None and not 0 <= neutral <= 100:
            issues.append(f"scoring.{factor}.neutral must be in [0, 100], got {neutral}")

    max_gap = (scoring.get("age") or {}).get("max_gap")
    if max_gap is not None and max_gap <= 0:
        issues.append(f"scoring.age.max_gap must be positive, got {max_gap}")

    max_km = (scoring.get("distance") or {}).get("max_km")
    if max_km is not None and max_km <= 0:
        issues.append(f"scoring.distance.max_km must be positive, got {max_km}")

    # Check tier table has a floor tier
    tiers = (config.get("presentation", {}) or {}).get("tiers")
    if tiers is not None:
        bounds = [t.get("lower_bound") for t in tiers]
        if 0 not in bounds:
            issues.append("presentation.tiers needs a tier with lower_bound 0")
        if len(set(bounds)) != len(bounds):
            issues.append(f"presentation.tiers has duplicate lower bounds: {bounds}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "scoring.age.max_gap")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
