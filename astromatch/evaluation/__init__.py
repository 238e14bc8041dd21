"""Evaluation module for compatibility engine analysis."""

from .metrics import (
    compute_score_matrix,
    compute_score_distribution_stats,
    check_symmetry,
    sanity_check_monotonicity,
    EvaluationReport,
    create_evaluation_report
)

__all__ = [
    "compute_score_matrix",
    "compute_score_distribution_stats",
    "check_symmetry",
    "sanity_check_monotonicity",
    "EvaluationReport",
    "create_evaluation_report"
]
