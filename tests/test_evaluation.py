import json

import numpy as np
import pandas as pd
import pytest

from astromatch.data_loading import load_profiles
from astromatch.evaluation import (
    check_symmetry,
    compute_score_distribution_stats,
    compute_score_matrix,
    create_evaluation_report,
    sanity_check_monotonicity,
)
from astromatch.presentation import TierTable

from conftest import SAMPLE_PROFILES, make_profile


@pytest.fixture(scope="module")
def profiles():
    return load_profiles(str(SAMPLE_PROFILES))


def test_score_matrix_is_square_and_symmetric(engine, profiles):
    matrix = compute_score_matrix(engine, profiles)
    ids = [p.id for p in profiles]
    assert list(matrix.index) == ids
    assert list(matrix.columns) == ids
    assert np.array_equal(matrix.to_numpy(), matrix.to_numpy().T)
    assert check_symmetry(matrix).is_symmetric


def test_symmetry_check_flags_differences():
    matrix = pd.DataFrame([[100, 40], [45, 100]], index=["a", "b"], columns=["a", "b"])
    check = check_symmetry(matrix)
    assert not check.is_symmetric
    assert check.violations == [("a", "b")]
    assert check.max_asymmetry == 5


def test_distribution_stats():
    stats = compute_score_distribution_stats(np.array([10, 20, 30, 40, 50]))
    assert stats.mean == 30
    assert stats.min == 10
    assert stats.max == 50
    assert stats.quantiles["p50"] == 30


def test_distribution_stats_need_scores():
    with pytest.raises(ValueError):
        compute_score_distribution_stats(np.array([]))


def test_monotonicity_on_increasing_scores():
    check = sanity_check_monotonicity(np.array([10, 20, 30]), np.array([0.1, 0.2, 0.3]))
    assert check.correlation_with_similarity == pytest.approx(1.0)
    assert check.is_monotonic
    assert check.n_violations == 0


def test_monotonicity_on_constant_input():
    check = sanity_check_monotonicity(np.array([50, 50, 50]), np.array([0.1, 0.2, 0.3]))
    assert check.correlation_with_similarity == 0.0
    assert check.violation_rate == 0


def test_report_over_sample_profiles(engine, profiles, tmp_path):
    report = create_evaluation_report(engine, profiles, tiers=TierTable())

    assert report.n_profiles == 8
    assert report.symmetry_check.n_pairs == 28
    assert report.symmetry_check.is_symmetric
    assert 0 <= report.distribution_stats.min <= report.distribution_stats.max <= 100
    assert sum(report.tier_counts.values()) == 28
    assert "Symmetry Check" in report.summary()

    path = tmp_path / "report.json"
    report.save(str(path))
    saved = json.loads(path.read_text())
    assert saved["symmetry_check"]["is_symmetric"] is True
    assert saved["n_profiles"] == 8


def test_report_needs_two_profiles(engine):
    with pytest.raises(ValueError):
        create_evaluation_report(engine, [make_profile("solo")])
