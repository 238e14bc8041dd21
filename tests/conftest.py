from pathlib import Path

import pytest

from astromatch import CompatibilityEngine, Profile

ROOT = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT / "configs" / "config.yaml"
SAMPLE_PROFILES = ROOT / "data" / "sample_profiles.csv"


def make_profile(profile_id="p1", sun_sign="Aries", **overrides):
    data = {
        "id": profile_id,
        "name": profile_id.upper(),
        "age": 30,
        "photos": [f"photos/{profile_id}.jpg"],
        "sun_sign": sun_sign,
        "interests": [],
    }
    data.update(overrides)
    return Profile(**data)


@pytest.fixture(scope="session")
def engine():
    return CompatibilityEngine()


@pytest.fixture
def aries():
    return make_profile("aries", "Aries", age=28, interests=["hiking", "music", "art"])


@pytest.fixture
def leo():
    return make_profile("leo", "Leo", age=30, interests=["music", "travel"])
