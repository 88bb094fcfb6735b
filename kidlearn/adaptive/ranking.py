"""
Ranking adapter: order catalog activities by the latest recommendation.
"""
from __future__ import annotations

from collections.abc import Sequence

from kidlearn.adaptive.models import (
    Activity,
    ActivityCategory,
    ActivityRecommendation,
    AdaptiveRecommendation,
    DifficultyLevel,
    RankedActivity,
)


def apply_recommendation(
    activities: Sequence[Activity],
    recommendation: AdaptiveRecommendation | None,
) -> list[Activity]:
    """
    Attach a suggested difficulty and weight to each activity, highest weight first.

    Lookup order per activity: its own (category, difficulty), then
    (category, next_difficulty). Unmatched activities get weight 0 and keep
    their own difficulty. The sort is stable, so equal weights keep catalog
    order. Source activities are never mutated.

    Args:
        activities: Catalog entries to rank
        recommendation: Latest recommendation (None means nothing to apply)

    Returns:
        New list of RankedActivity, or a plain copy of ``activities`` when
        there is no recommendation
    """
    if recommendation is None:
        return list(activities)

    by_key: dict[tuple[ActivityCategory, DifficultyLevel], ActivityRecommendation] = {}
    for rec in recommendation.recommendations:
        by_key[(rec.category, rec.difficulty)] = rec

    ranked: list[RankedActivity] = []
    for activity in activities:
        rec = by_key.get((activity.category, activity.difficulty))
        if rec is None:
            rec = by_key.get((activity.category, recommendation.next_difficulty))

        ranked.append(
            RankedActivity.model_validate(
                {
                    **activity.model_dump(),
                    "suggested_difficulty": rec.difficulty if rec else activity.difficulty,
                    "adaptive_weight": rec.weight if rec else 0.0,
                }
            )
        )

    return sorted(ranked, key=lambda item: item.adaptive_weight, reverse=True)
