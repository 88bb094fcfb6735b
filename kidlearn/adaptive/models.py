"""
Data models for the adaptive difficulty engine.

All models are immutable and travel as camelCase JSON (``successRate``,
``nextDifficulty``, ...). Either camelCase or snake_case is accepted on input.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FRUSTRATED = "frustrated"

SupportLevel = Literal["none", "minimal", "moderate", "full"]


class DifficultyLevel(str, Enum):
    """Ordinal difficulty levels, lowest first."""

    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


DIFFICULTY_ORDER: tuple[DifficultyLevel, ...] = (
    DifficultyLevel.BEGINNER,
    DifficultyLevel.INTERMEDIATE,
    DifficultyLevel.ADVANCED,
)


class ActivityCategory(str, Enum):
    SOCIAL_SKILLS = "SOCIAL_SKILLS"
    COMMUNICATION = "COMMUNICATION"
    ACADEMIC = "ACADEMIC"
    AUTONOMY = "AUTONOMY"
    EMOTIONAL_REGULATION = "EMOTIONAL_REGULATION"


class SensoryPreference(str, Enum):
    LOW_STIMULATION = "LOW_STIMULATION"
    MEDIUM_STIMULATION = "MEDIUM_STIMULATION"
    HIGH_CONTRAST = "HIGH_CONTRAST"
    MONOCHROME = "MONOCHROME"


class RecommendationSource(str, Enum):
    """Where a recommendation came from."""

    ML = "ml"  # External ML connector
    HEURISTIC = "heuristic"  # Server-side rule engine
    FALLBACK = "fallback"  # Local heuristic after a remote failure
    NONE = "none"  # Nothing produced yet


class WireModel(BaseModel):
    """Base for immutable models serialized as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Convert to the JSON payload format (camelCase, no null fields)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PerformanceSignal(WireModel):
    """One observed attempt window for an activity."""

    success_rate: float | None = Field(default=None, ge=0, le=1)
    attempts_count: int | None = Field(default=None, ge=0)
    average_time_per_question: float | None = Field(default=None, gt=0)
    emotional_state: str | None = None
    support_level: SupportLevel | None = None

    @property
    def is_frustrated(self) -> bool:
        return self.emotional_state == FRUSTRATED


class Personalization(WireModel):
    prefers_low_stimuli: bool | None = None
    short_sessions_preferred: bool | None = None
    regulation_needed: bool | None = None


class AdaptiveContext(WireModel):
    """A recommendation request for one child and one activity category."""

    child_id: str
    target_category: ActivityCategory
    current_difficulty: DifficultyLevel
    # Most recent first
    recent_performance: tuple[PerformanceSignal, ...] = ()
    current_activity_id: str | None = None
    personalization: Personalization | None = None
    sensory_preferences: tuple[SensoryPreference, ...] | None = None

    @property
    def latest(self) -> PerformanceSignal | None:
        """The most recent performance signal, if any."""
        return self.recent_performance[0] if self.recent_performance else None

    def cache_key(self) -> str:
        """
        Stable key over the fields the heuristic actually reads.

        Only the head of ``recent_performance`` participates, so appending
        older history does not invalidate a cached recommendation.
        """
        latest = self.latest
        return json.dumps(
            {
                "childId": self.child_id,
                "targetCategory": self.target_category.value,
                "currentDifficulty": self.current_difficulty.value,
                "currentActivityId": self.current_activity_id,
                "performance": latest.to_payload() if latest else None,
                "sensoryPreferences": [p.value for p in self.sensory_preferences or ()],
            },
            sort_keys=True,
        )


class ActivityRecommendation(WireModel):
    """One scored suggestion. Weights are relative scores, not probabilities."""

    category: ActivityCategory
    difficulty: DifficultyLevel
    weight: float = Field(ge=0, le=1)
    reason: str = ""
    suggested_activity_id: str | None = None


class AdaptiveRecommendation(WireModel):
    """Output of the engine for one context."""

    child_id: str
    next_difficulty: DifficultyLevel
    recommendations: tuple[ActivityRecommendation, ...]
    rationale: tuple[str, ...] = ()
    # None (absent) unless a risk signal was detected
    escalation_warnings: tuple[str, ...] | None = None


class Activity(WireModel):
    """Catalog entry. Read-only to the engine."""

    id: str
    category: ActivityCategory
    difficulty: DifficultyLevel
    title: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class RankedActivity(Activity):
    """Catalog entry augmented by the ranking adapter."""

    suggested_difficulty: DifficultyLevel
    adaptive_weight: float = 0.0

    @property
    def is_adjusted(self) -> bool:
        """True when the suggestion differs from the catalog difficulty."""
        return self.suggested_difficulty != self.difficulty
