import itertools

import pytest

from astromatch import (
    CompatibilityEngine,
    EngineConfig,
    InvalidProfileData,
    OutOfRangeResult,
    ZodiacSign,
    calculate_compatibility,
)
from astromatch.configs import load_config
from astromatch.fusion import FusionConfig
from astromatch.presentation import TierTable

from conftest import CONFIG_PATH, make_profile

TIERS = TierTable()


def test_fire_pair_with_one_shared_interest(engine, aries, leo):
    result = engine.calculate_compatibility(aries, leo)

    assert result.breakdown["sign"] == 90
    assert result.breakdown["interests"] == pytest.approx(25.0)
    assert result.breakdown["age"] == pytest.approx(90.0)
    assert result.breakdown["distance"] == 50.0
    assert result.overall == 73
    assert TIERS.label(result.overall) == "Strong Connection"
    assert result.shared_interests == ("music",)


def test_fire_water_pair_without_shared_interests(engine):
    sagittarius = make_profile("sag", "Sagittarius", age=31, interests=["travel", "photography"])
    cancer = make_profile("cancer", "Cancer", age=27, interests=["cooking", "reading"], distance=8.0)

    result = engine.calculate_compatibility(sagittarius, cancer)

    assert result.breakdown["sign"] == 32
    assert result.breakdown["interests"] == 0.0
    assert result.overall < 50
    assert TIERS.label(result.overall) == "Different Paths"


def test_clashing_pairs_stay_below_potential_match_at_best_case(engine):
    for sign_a, sign_b in itertools.product(ZodiacSign, repeat=2):
        if {sign_a.element.value, sign_b.element.value} not in ({"Fire", "Water"}, {"Earth", "Air"}):
            continue
        a = make_profile("a", sign_a, age=30, interests=[], distance=0.0)
        b = make_profile("b", sign_b, age=30, interests=[], distance=0.0)

        result = engine.calculate_compatibility(a, b)

        assert result.breakdown["interests"] == 50.0
        assert result.overall < 50, (sign_a, sign_b, result.breakdown)
        assert TIERS.label(result.overall) == "Different Paths"


def test_score_is_bounded_for_every_sign_pair(engine):
    extremes = [
        dict(age=18, interests=["a"], distance=0.0),
        dict(age=120, interests=["b"], distance=10000.0),
        dict(age=None, interests=[], distance=None),
    ]
    for sign_a, sign_b in itertools.product(ZodiacSign, repeat=2):
        for extra_a, extra_b in itertools.product(extremes, repeat=2):
            a = make_profile("a", sign_a, **extra_a)
            b = make_profile("b", sign_b, **extra_b)
            overall = engine.calculate_compatibility(a, b).overall
            assert isinstance(overall, int)
            assert 0 <= overall <= 100


def test_scoring_is_deterministic(engine, aries, leo):
    first = engine.calculate_compatibility(aries, leo)
    second = engine.calculate_compatibility(aries, leo)
    assert first == second


def test_separate_engines_agree(aries, leo):
    assert (CompatibilityEngine().calculate_compatibility(aries, leo)
            == CompatibilityEngine().calculate_compatibility(aries, leo))


def test_scoring_is_symmetric(engine):
    profiles = [
        make_profile("a", "Aries", age=25, interests=["art", "music"], distance=3.0),
        make_profile("b", "Virgo", age=41, interests=["music"], distance=None),
        make_profile("c", "Pisces", age=None, interests=[], distance=70.0),
    ]
    for a, b in itertools.permutations(profiles, 2):
        assert engine.calculate_compatibility(a, b) == engine.calculate_compatibility(b, a)


def test_self_comparison_is_maximal(engine, aries):
    result = engine.calculate_compatibility(aries, aries)

    assert result.breakdown["sign"] == 100
    assert result.breakdown["interests"] == 100
    assert result.breakdown["age"] == 100
    assert result.overall == 95
    assert TIERS.label(result.overall) == "Cosmic Soulmates"


def test_self_comparison_beats_any_other_sign(engine):
    for sign in ZodiacSign:
        me = make_profile("me", sign, interests=["art"])
        own = engine.calculate_compatibility(me, me).overall
        for other in ZodiacSign:
            if other != sign:
                them = make_profile("them", other, interests=["art"])
                assert engine.calculate_compatibility(me, them).overall < own


def test_empty_interests_use_neutral_value(engine):
    a = make_profile("a", "Taurus", age=30)
    b = make_profile("b", "Virgo", age=30)

    result = engine.calculate_compatibility(a, b)

    assert result.breakdown["interests"] == 50.0
    assert result.shared_interests == ()
    assert 0 <= result.overall <= 100


def test_unknown_sign_after_mutation_is_rejected(engine, aries, leo):
    leo.sun_sign = "Serpentarius"
    with pytest.raises(InvalidProfileData) as exc:
        engine.calculate_compatibility(aries, leo)
    assert exc.value.field == "candidate.sun_sign"


@pytest.mark.parametrize("attribute, value, field", [
    ("age", "30", "candidate.age"),
    ("age", 12, "candidate.age"),
    ("distance", "near", "candidate.distance"),
    ("distance", float("inf"), "candidate.distance"),
    ("interests", "music", "candidate.interests"),
    ("interests", ["music", None], "candidate.interests"),
])
def test_bad_field_after_mutation_is_rejected(engine, aries, leo, attribute, value, field):
    setattr(leo, attribute, value)
    with pytest.raises(InvalidProfileData) as exc:
        engine.calculate_compatibility(aries, leo)
    assert exc.value.field == field


def test_viewer_field_error_names_viewer(engine, aries, leo):
    aries.age = 7.5
    with pytest.raises(InvalidProfileData) as exc:
        engine.calculate_compatibility(aries, leo)
    assert exc.value.field == "viewer.age"


def test_missing_sign_is_rejected(engine, aries, leo):
    aries.sun_sign = None
    with pytest.raises(InvalidProfileData) as exc:
        engine.calculate_compatibility(aries, leo)
    assert exc.value.field == "viewer.sun_sign"


def test_absent_profile_is_rejected(engine, aries):
    with pytest.raises(InvalidProfileData):
        engine.calculate_compatibility(None, aries)
    with pytest.raises(InvalidProfileData):
        engine.calculate_compatibility(aries, None)


def test_result_reports_weights(engine, aries, leo):
    result = engine.calculate_compatibility(aries, leo)
    assert result.weights == {"sign": 0.6, "interests": 0.2, "age": 0.1, "distance": 0.1}
    assert sum(result.contribution(f) for f in result.breakdown) == pytest.approx(73.0)


def test_default_engine_function(aries, leo):
    assert calculate_compatibility(aries, leo).overall == 73


def test_strict_mode_raises_on_out_of_range():
    engine = CompatibilityEngine(EngineConfig(fusion=FusionConfig(strict=True)))
    with pytest.raises(OutOfRangeResult):
        engine.fusion.finalize(130.0)
    with pytest.raises(OutOfRangeResult):
        engine.fusion.finalize(-0.5)


def test_lenient_mode_clamps_out_of_range(engine):
    assert engine.fusion.finalize(130.0) == 100
    assert engine.fusion.finalize(-12.0) == 0
    assert engine.fusion.finalize(float("nan")) == 0


def test_rounding_is_half_up(engine):
    assert engine.fusion.finalize(72.5) == 73
    assert engine.fusion.finalize(72.49) == 72


@pytest.mark.parametrize("weights", [
    {"sign": 0.5, "interests": 0.2, "age": 0.1, "distance": 0.1},
    {"sign": 1.2, "interests": -0.2, "age": 0.0, "distance": 0.0},
    {"sign": 0.6, "interests": 0.4},
    {"sign": 0.6, "interests": 0.2, "age": 0.1, "distance": 0.05, "bio": 0.05},
])
def test_invalid_weights_are_rejected(weights):
    with pytest.raises(ValueError):
        CompatibilityEngine(EngineConfig(fusion=FusionConfig(weights=weights)))


def test_engine_from_config_file_matches_defaults(aries, leo):
    config = load_config(str(CONFIG_PATH))
    engine = CompatibilityEngine.from_config(config)
    assert engine.calculate_compatibility(aries, leo).overall == 73
    assert engine.config.to_dict() == EngineConfig().to_dict()


def test_weights_from_config_change_the_score(aries, leo):
    config = {"scoring": {"weights": {"sign": 1.0, "interests": 0.0, "age": 0.0, "distance": 0.0}}}
    engine = CompatibilityEngine.from_config(config)
    assert engine.calculate_compatibility(aries, leo).overall == 90
