"""
Recommendation payload builder.

Turns an AdaptiveContext into a complete AdaptiveRecommendation using the
local difficulty rule. Used as the fallback when the remote recommendation
service is unavailable, and as the server-side heuristic.
"""
from __future__ import annotations

from kidlearn.adaptive.difficulty import adjust_difficulty, describe_difficulty_change
from kidlearn.adaptive.models import (
    ActivityCategory,
    ActivityRecommendation,
    AdaptiveContext,
    AdaptiveRecommendation,
    DifficultyLevel,
    Personalization,
)

PRIMARY_WEIGHT = 0.6
STABILITY_WEIGHT = 0.2
SAFETY_NET_WEIGHT = 0.2

# Server-side personalization
REGULATION_BREAK_WEIGHT = 0.2
SHORT_SESSION_FACTOR = 0.9

FRUSTRATION_WARNING = "Frustration signals detected: plan a short sensory break."


def _format_rate(success_rate: float | None) -> str:
    return "N/A" if success_rate is None else f"{success_rate:g}"


def build_recommendation_payload(context: AdaptiveContext) -> AdaptiveRecommendation:
    """
    Build the heuristic recommendation for a context.

    The three entries keep a fixed order: the computed trajectory, the
    pre-adjustment level as a stability option, and BEGINNER as a
    cognitive-load safety net. They are not re-sorted here.
    """
    latest = context.latest
    success_rate = latest.success_rate if latest else None
    attempts_count = latest.attempts_count if latest else None

    next_difficulty = adjust_difficulty(
        context.current_difficulty,
        success_rate,
        attempts_count,
        latest.emotional_state if latest else None,
        context.sensory_preferences,
    )

    recommendations = (
        ActivityRecommendation(
            category=context.target_category,
            difficulty=next_difficulty,
            weight=PRIMARY_WEIGHT,
            reason="Aligned with the active skill",
            suggested_activity_id=context.current_activity_id,
        ),
        ActivityRecommendation(
            category=context.target_category,
            difficulty=context.current_difficulty,
            weight=STABILITY_WEIGHT,
            reason="Keep the current level to consolidate progress",
        ),
        ActivityRecommendation(
            category=context.target_category,
            difficulty=DifficultyLevel.BEGINNER,
            weight=SAFETY_NET_WEIGHT,
            reason="Back to fundamentals to reduce cognitive load",
        ),
    )

    rationale = (
        f"success={_format_rate(success_rate)} with {attempts_count or 0} attempts",
        f"next level: {next_difficulty.value}",
        describe_difficulty_change(context.current_difficulty, next_difficulty),
    )

    escalation_warnings = (FRUSTRATION_WARNING,) if latest and latest.is_frustrated else None

    return AdaptiveRecommendation(
        child_id=context.child_id,
        next_difficulty=next_difficulty,
        recommendations=recommendations,
        rationale=rationale,
        escalation_warnings=escalation_warnings,
    )


def personalize_recommendation(
    recommendation: AdaptiveRecommendation,
    personalization: Personalization | None,
) -> AdaptiveRecommendation:
    """
    Apply a child's personalization flags to a heuristic recommendation.

    ``regulation_needed`` appends a BEGINNER emotional-regulation break.
    ``short_sessions_preferred`` scales every weight by 0.9. Entry order is
    kept; without flags the recommendation is returned unchanged.
    """
    if personalization is None:
        return recommendation

    recommendations = list(recommendation.recommendations)
    if personalization.regulation_needed:
        recommendations.append(
            ActivityRecommendation(
                category=ActivityCategory.EMOTIONAL_REGULATION,
                difficulty=DifficultyLevel.BEGINNER,
                weight=REGULATION_BREAK_WEIGHT,
                reason="Co-regulation micro-break to limit overload",
            )
        )
    if personalization.short_sessions_preferred:
        recommendations = [
            r.model_copy(update={"weight": round(r.weight * SHORT_SESSION_FACTOR, 4)})
            for r in recommendations
        ]

    return recommendation.model_copy(update={"recommendations": tuple(recommendations)})
