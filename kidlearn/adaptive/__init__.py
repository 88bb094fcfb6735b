"""
Adaptive Difficulty Engine.

Rule-based recommender that proposes the next difficulty level and a ranked
list of weighted activities from the most recent performance signal.

Components:
- adjust_difficulty: One-step difficulty rule (fast mastery up, struggle or frustration down)
- build_recommendation_payload: Local heuristic recommendation for a context
- personalize_recommendation: Server-side personalization of a heuristic result
- apply_recommendation: Re-rank catalog activities by recommendation weight
- RecommendationProvider (provider.py): Remote call with local fallback and state
- AdaptiveService (service.py): Server-side engine with optional ML connector

The provider and service talk to the network and are imported from their
modules directly.
"""
from kidlearn.adaptive.models import (
    Activity,
    ActivityCategory,
    ActivityRecommendation,
    AdaptiveContext,
    AdaptiveRecommendation,
    DifficultyLevel,
    PerformanceSignal,
    Personalization,
    RankedActivity,
    RecommendationSource,
    SensoryPreference,
)
from kidlearn.adaptive.difficulty import (
    adjust_difficulty,
    describe_difficulty_change,
    step_down,
    step_up,
)
from kidlearn.adaptive.payload import build_recommendation_payload, personalize_recommendation
from kidlearn.adaptive.ranking import apply_recommendation
from kidlearn.adaptive.outcome import Err, Fallback, Ok, RecommendationOutcome

__all__ = [
    # Rule, builder, ranking
    "adjust_difficulty",
    "describe_difficulty_change",
    "step_up",
    "step_down",
    "build_recommendation_payload",
    "personalize_recommendation",
    "apply_recommendation",
    # Outcomes
    "Ok",
    "Fallback",
    "Err",
    "RecommendationOutcome",
    # Data models
    "Activity",
    "ActivityRecommendation",
    "AdaptiveContext",
    "AdaptiveRecommendation",
    "PerformanceSignal",
    "Personalization",
    "RankedActivity",
    # Enums
    "ActivityCategory",
    "DifficultyLevel",
    "RecommendationSource",
    "SensoryPreference",
]
