"""
Evaluation metrics for the compatibility engine.

There are no ground-truth compatibility labels, so evaluation audits the
engine's behaviour over a set of profiles:
1. Score distribution analysis
2. Symmetry: score(A, B) must equal score(B, A)
3. Sanity check (monotonicity: more shared interests should not lower scores)

This module DOES NOT claim real-world predictive accuracy.
"""

import logging
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, List, Any, Optional, Sequence, Tuple
import json

import numpy as np
import pandas as pd
from scipy.stats import spearmanr

from ..profiles.schema import Profile

logger = logging.getLogger(__name__)


@dataclass
class ScoreDistributionStats:
    """Statistics about score distribution."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 20.0, "p50": 50.0, "p90": 80.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class SymmetryCheck:
    """Results of the symmetry audit."""
    n_pairs: int
    max_asymmetry: float
    violations: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def is_symmetric(self) -> bool:
        return not self.violations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_pairs": int(self.n_pairs),
            "max_asymmetry": float(self.max_asymmetry),
            "is_symmetric": self.is_symmetric,
            "violations": [list(v) for v in self.violations]
        }


@dataclass
class MonotonicityCheck:
    """Results of monotonicity sanity check."""
    correlation_with_similarity: float
    is_monotonic: bool
    n_violations: int
    violation_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correlation_with_similarity": float(self.correlation_with_similarity),
            "is_monotonic": bool(self.is_monotonic),
            "n_violations": int(self.n_violations),
            "violation_rate": float(self.violation_rate)
        }


@dataclass
class EvaluationReport:
    """
    Complete evaluation report for the engine.

    Contains distribution statistics, the symmetry audit and sanity checks.
    This report documents engine behavior WITHOUT claiming predictive validity.
    """
    model_name: str
    n_profiles: int
    distribution_stats: ScoreDistributionStats
    symmetry_check: Optional[SymmetryCheck] = None
    monotonicity_check: Optional[MonotonicityCheck] = None
    tier_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "model_name": self.model_name,
            "n_profiles": self.n_profiles,
            "distribution_stats": self.distribution_stats.to_dict(),
            "tier_counts": dict(self.tier_counts)
        }
        if self.symmetry_check:
            result["symmetry_check"] = self.symmetry_check.to_dict()
        if self.monotonicity_check:
            result["monotonicity_check"] = self.monotonicity_check.to_dict()
        return result

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved evaluation report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        lines = [
            f"Evaluation Report: {self.model_name}",
            "=" * 50,
            f"Profiles: {self.n_profiles}",
            "",
            "Score Distribution:",
            f"  Mean: {self.distribution_stats.mean:.2f}",
            f"  Std:  {self.distribution_stats.std:.2f}",
            f"  Min:  {self.distribution_stats.min:.0f}",
            f"  Max:  {self.distribution_stats.max:.0f}",
        ]

        for q_name, q_value in self.distribution_stats.quantiles.items():
            lines.append(f"  {q_name}: {q_value:.2f}")

        if self.tier_counts:
            lines.extend(["", "Tiers:"])
            for label, count in self.tier_counts.items():
                lines.append(f"  {label}: {count}")

        if self.symmetry_check:
            lines.extend([
                "",
                f"Symmetry Check ({self.symmetry_check.n_pairs} pairs):",
                f"  Is symmetric: {self.symmetry_check.is_symmetric}",
                f"  Max asymmetry: {self.symmetry_check.max_asymmetry:.0f}",
            ])

        if self.monotonicity_check:
            lines.extend([
                "",
                "Monotonicity Check:",
                f"  Correlation with similarity: {self.monotonicity_check.correlation_with_similarity:.4f}",
                f"  Is monotonic: {self.monotonicity_check.is_monotonic}",
                f"  Violation rate: {self.monotonicity_check.violation_rate:.2%}",
            ])

        return "\n".join(lines)


def compute_score_matrix(engine, profiles: Sequence[Profile]) -> pd.DataFrame:
    """
    Score every ordered pair of profiles.

    Args:
        engine: CompatibilityEngine used for scoring
        profiles: Profiles to compare

    Returns:
        Square DataFrame of overall scores, rows = viewer id, columns = candidate id
    """
    ids = [p.id for p in profiles]
    matrix = np.zeros((len(profiles), len(profiles)), dtype=int)
    for i, viewer in enumerate(profiles):
        for j, candidate in enumerate(profiles):
            matrix[i, j] = engine.calculate_compatibility(viewer, candidate).overall
    return pd.DataFrame(matrix, index=ids, columns=ids)


def compute_score_distribution_stats(
    scores: np.ndarray,
    quantiles: List[float] = [0.1, 0.25, 0.5, 0.75, 0.9]
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for scores.

    Args:
        scores: Array of compatibility scores
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance

    Raises:
        ValueError: If scores is empty
    """
    scores = np.asarray(scores, dtype=float)
    if scores.size == 0:
        raise ValueError("Cannot compute distribution statistics of no scores")

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def check_symmetry(matrix: pd.DataFrame) -> SymmetryCheck:
    """
    Compare each score with its transposed counterpart.

    Args:
        matrix: Square score matrix from compute_score_matrix

    Returns:
        SymmetryCheck listing (viewer, candidate) pairs whose scores differ
    """
    values = matrix.to_numpy()
    ids = list(matrix.index)
    diff = np.abs(values - values.T)

    violations = []
    for i, j in combinations(range(len(ids)), 2):
        if diff[i, j] != 0:
            violations.append((ids[i], ids[j]))

    n_pairs = len(ids) * (len(ids) - 1) // 2
    max_asymmetry = float(diff.max()) if diff.size else 0.0

    if violations:
        logger.warning(f"Symmetry violated for {len(violations)} of {n_pairs} pairs")

    return SymmetryCheck(n_pairs=n_pairs, max_asymmetry=max_asymmetry, violations=violations)


def sanity_check_monotonicity(
    predicted_scores: np.ndarray,
    similarity_scores: np.ndarray,
    threshold: float = 0.0
) -> MonotonicityCheck:
    """
    Check if scores are monotonic with input similarity.

    Higher similarity should generally lead to higher compatibility scores.
    Other factors also move the score, so violations are expected; the
    check only flags a negative overall trend.

    Args:
        predicted_scores: Engine scores
        similarity_scores: Input similarity measures
        threshold: Correlation threshold for "is_monotonic" flag

    Returns:
        MonotonicityCheck instance
    """
    predicted_scores = np.asarray(predicted_scores, dtype=float)
    similarity_scores = np.asarray(similarity_scores, dtype=float)

    # Spearman is undefined on constant input
    if (len(predicted_scores) < 2 or np.ptp(predicted_scores) == 0
            or np.ptp(similarity_scores) == 0):
        correlation = 0.0
    else:
        correlation, _ = spearmanr(similarity_scores, predicted_scores)
        correlation = float(correlation)

    n_samples = len(predicted_scores)
    n_comparisons = 0
    n_violations = 0

    for i in range(min(n_samples, 1000)):  # Limit comparisons
        for j in range(i + 1, min(n_samples, 1000)):
            n_comparisons += 1
            sim_diff = similarity_scores[j] - similarity_scores[i]
            pred_diff = predicted_scores[j] - predicted_scores[i]
            # Violation: similarity increases but score decreases (or vice versa)
            if sim_diff * pred_diff < 0:
                n_violations += 1

    violation_rate = n_violations / n_comparisons if n_comparisons > 0 else 0

    return MonotonicityCheck(
        correlation_with_similarity=correlation,
        is_monotonic=correlation >= threshold,
        n_violations=n_violations,
        violation_rate=violation_rate
    )


def create_evaluation_report(
    engine,
    profiles: Sequence[Profile],
    tiers=None,
    model_name: str = "compatibility_engine",
    quantiles: List[float] = [0.1, 0.25, 0.5, 0.75, 0.9]
) -> EvaluationReport:
    """
    Create a complete evaluation report over all pairs of distinct profiles.

    Args:
        engine: CompatibilityEngine to audit
        profiles: Profiles to compare (at least two)
        tiers: Optional TierTable for per-label counts
        model_name: Name recorded in the report
        quantiles: Quantiles to compute

    Returns:
        EvaluationReport instance

    Raises:
        ValueError: If fewer than two profiles are given
    """
    if len(profiles) < 2:
        raise ValueError(f"Need at least 2 profiles for evaluation, got {len(profiles)}")

    matrix = compute_score_matrix(engine, profiles)
    symmetry = check_symmetry(matrix)

    scores = []
    similarity = []
    for i, j in combinations(range(len(profiles)), 2):
        scores.append(matrix.iat[i, j])
        set_a = profiles[i].interest_set
        set_b = profiles[j].interest_set
        union = set_a | set_b
        similarity.append(len(set_a & set_b) / len(union) if union else 0.0)

    scores = np.array(scores, dtype=float)
    dist_stats = compute_score_distribution_stats(scores, quantiles)
    monotonicity = sanity_check_monotonicity(scores, np.array(similarity))

    tier_counts: Dict[str, int] = {}
    if tiers is not None:
        for score in scores:
            label = tiers.label(int(score))
            tier_counts[label] = tier_counts.get(label, 0) + 1

    logger.info(f"Evaluated {len(scores)} pairs across {len(profiles)} profiles")

    return EvaluationReport(
        model_name=model_name,
        n_profiles=len(profiles),
        distribution_stats=dist_stats,
        symmetry_check=symmetry,
        monotonicity_check=monotonicity,
        tier_counts=tier_counts
    )
