import itertools

import numpy as np
import pytest

from astromatch.affinity import (
    SignAffinityConfig,
    affinity_frame,
    build_affinity_table,
    element_relation,
    sign_affinity,
)
from astromatch.profiles import Element, ZodiacSign


@pytest.fixture(scope="module")
def table():
    return build_affinity_table(SignAffinityConfig())


def test_table_is_total_and_in_range(table):
    assert table.shape == (12, 12)
    for a, b in itertools.product(ZodiacSign, repeat=2):
        value = sign_affinity(table, a, b)
        assert np.isfinite(value)
        assert 0 <= value <= 100


def test_table_is_symmetric(table):
    assert np.array_equal(table, table.T)


def test_same_sign_is_the_maximum(table):
    for sign in ZodiacSign:
        row = [sign_affinity(table, sign, other) for other in ZodiacSign if other != sign]
        assert sign_affinity(table, sign, sign) == 100
        assert max(row) < 100


def test_table_is_read_only(table):
    with pytest.raises(ValueError):
        table[0, 0] = 0


@pytest.mark.parametrize("a, b, expected", [
    (ZodiacSign.ARIES, ZodiacSign.LEO, 90),          # fire-fire, cardinal-fixed
    (ZodiacSign.ARIES, ZodiacSign.SAGITTARIUS, 98),  # fire-fire, cardinal-mutable
    (ZodiacSign.ARIES, ZodiacSign.LIBRA, 80),        # fire-air, cardinal-cardinal
    (ZodiacSign.LEO, ZodiacSign.AQUARIUS, 72),       # fire-air, fixed-fixed
    (ZodiacSign.TAURUS, ZodiacSign.LEO, 47),         # earth-fire, fixed-fixed
    (ZodiacSign.GEMINI, ZodiacSign.PISCES, 55),      # air-water, mutable-mutable
    (ZodiacSign.SAGITTARIUS, ZodiacSign.CANCER, 32), # fire-water, mutable-cardinal
    (ZodiacSign.LEO, ZodiacSign.SCORPIO, 16),        # fire-water, fixed-fixed
])
def test_known_pairs(table, a, b, expected):
    assert sign_affinity(table, a, b) == expected
    assert sign_affinity(table, b, a) == expected


def test_complementary_and_same_element_beat_clashing(table):
    for a, b in itertools.product(ZodiacSign, repeat=2):
        if a == b:
            continue
        relation = element_relation(a.element, b.element)
        if relation in ("same", "complementary"):
            for c, d in itertools.product(ZodiacSign, repeat=2):
                if element_relation(c.element, d.element) == "clashing":
                    assert sign_affinity(table, a, b) > sign_affinity(table, c, d)


@pytest.mark.parametrize("a, b, relation", [
    (Element.FIRE, Element.FIRE, "same"),
    (Element.FIRE, Element.AIR, "complementary"),
    (Element.WATER, Element.EARTH, "complementary"),
    (Element.FIRE, Element.EARTH, "neutral"),
    (Element.AIR, Element.WATER, "neutral"),
    (Element.WATER, Element.FIRE, "clashing"),
    (Element.EARTH, Element.AIR, "clashing"),
])
def test_element_relation(a, b, relation):
    assert element_relation(a, b) == relation


def test_partial_config_keeps_defaults():
    config = SignAffinityConfig.from_dict({"element_scores": {"clashing": 10}})
    table = build_affinity_table(config)
    assert sign_affinity(table, ZodiacSign.ARIES, ZodiacSign.CANCER) == 10
    assert sign_affinity(table, ZodiacSign.ARIES, ZodiacSign.LEO) == 90


def test_from_config_reads_scoring_section():
    config = SignAffinityConfig.from_config({"scoring": {"sign_affinity": {"same_sign": 99}}})
    assert config.same_sign == 99


def test_missing_relation_is_rejected():
    config = SignAffinityConfig(element_scores={"same": 90, "complementary": 80, "neutral": 55})
    with pytest.raises(ValueError, match="clashing"):
        build_affinity_table(config)


def test_off_diagonal_reaching_same_sign_is_rejected():
    config = SignAffinityConfig.from_dict({"same_sign": 95})
    with pytest.raises(ValueError, match="Same-sign"):
        build_affinity_table(config)


def test_affinity_frame_labels(table):
    frame = affinity_frame(table)
    assert list(frame.index)[0] == "Aries"
    assert frame.loc["Leo", "Aries"] == 90
