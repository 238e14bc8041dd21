"""
Deck ranking: score one viewer against a stack of candidate cards.
"""

import logging
from typing import List, Optional, Sequence

import pandas as pd

from ..factors.pairwise_factors import FACTOR_NAMES
from ..profiles.schema import Profile
from .predict import CompatibilityEngine

logger = logging.getLogger(__name__)


def rank_candidates(
    engine: CompatibilityEngine,
    viewer: Profile,
    candidates: Sequence[Profile],
    tiers=None
) -> pd.DataFrame:
    """
    Rank candidates by compatibility with the viewer.

    The viewer's own profile is skipped if it appears among the candidates.
    Any invalid candidate fails the whole call.

    Args:
        engine: CompatibilityEngine used for scoring
        viewer: Profile of the person swiping
        candidates: Candidate profiles in deck order
        tiers: Optional TierTable; adds "band" and "label" columns

    Returns:
        DataFrame sorted by overall (descending), then candidate_id
    """
    rows: List[dict] = []
    for candidate in candidates:
        if candidate.id == viewer.id:
            continue
        result = engine.calculate_compatibility(viewer, candidate)
        row = {
            "candidate_id": candidate.id,
            "name": candidate.name,
            "sun_sign": candidate.sun_sign.value,
            "overall": result.overall,
        }
        for factor in FACTOR_NAMES:
            row[factor] = result.breakdown[factor]
        row["shared_interests"] = ", ".join(result.shared_interests)
        if tiers is not None:
            tier = tiers.classify(result.overall)
            row["band"] = tier.band
            row["label"] = tier.label
        rows.append(row)

    columns = ["candidate_id", "name", "sun_sign", "overall", *FACTOR_NAMES, "shared_interests"]
    if tiers is not None:
        columns += ["band", "label"]

    df = pd.DataFrame(rows, columns=columns)
    df = df.sort_values(["overall", "candidate_id"], ascending=[False, True]).reset_index(drop=True)

    logger.info(f"Ranked {len(df)} candidates for viewer {viewer.id}")
    return df


def top_candidate(
    engine: CompatibilityEngine,
    viewer: Profile,
    candidates: Sequence[Profile]
) -> Optional[str]:
    """Id of the best-scoring candidate, None for an empty deck."""
    ranked = rank_candidates(engine, viewer, candidates)
    if ranked.empty:
        return None
    return str(ranked.iloc[0]["candidate_id"])
