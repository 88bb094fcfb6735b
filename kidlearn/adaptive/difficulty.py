"""
Difficulty adjustment rule.

Explainable heuristic that moves a child at most one level per call, based
only on the most recent performance signal:

- fast mastery (high success in few attempts, not frustrated) -> one level up
- struggle (low success) or frustration -> one level down
- anything else -> hold

Frustration always wins over a high score. A LOW_STIMULATION sensory
preference blocks escalation and keeps the child off ADVANCED.
"""
from __future__ import annotations

from collections.abc import Iterable

from kidlearn.adaptive.models import (
    DIFFICULTY_ORDER,
    FRUSTRATED,
    DifficultyLevel,
    SensoryPreference,
)

MASTERY_SUCCESS_THRESHOLD = 0.85
MASTERY_MAX_ATTEMPTS = 2
STRUGGLE_SUCCESS_THRESHOLD = 0.55


def step_up(level: DifficultyLevel) -> DifficultyLevel:
    """One level harder, saturating at ADVANCED."""
    index = DIFFICULTY_ORDER.index(level)
    return DIFFICULTY_ORDER[min(index + 1, len(DIFFICULTY_ORDER) - 1)]


def step_down(level: DifficultyLevel) -> DifficultyLevel:
    """One level easier, saturating at BEGINNER."""
    index = DIFFICULTY_ORDER.index(level)
    return DIFFICULTY_ORDER[max(index - 1, 0)]


def adjust_difficulty(
    current: DifficultyLevel,
    success_rate: float | None = None,
    attempts_count: int | None = None,
    emotional_state: str | None = None,
    sensory_preferences: Iterable[SensoryPreference] | None = None,
) -> DifficultyLevel:
    """
    Propose the next difficulty level.

    Args:
        current: Current difficulty level
        success_rate: Success rate of the latest attempt window (0-1)
        attempts_count: Attempts in the latest window
        emotional_state: Emotional state tag of the latest window
        sensory_preferences: Child's sensory preferences

    Returns:
        Next difficulty level (``current`` when data is insufficient)
    """
    if success_rate is None or attempts_count is None:
        return current

    frustrated = emotional_state == FRUSTRATED
    prefers_low_stimuli = SensoryPreference.LOW_STIMULATION in set(sensory_preferences or ())

    if (
        success_rate > MASTERY_SUCCESS_THRESHOLD
        and attempts_count <= MASTERY_MAX_ATTEMPTS
        and not frustrated
        and not prefers_low_stimuli
    ):
        return step_up(current)

    if success_rate < STRUGGLE_SUCCESS_THRESHOLD or frustrated:
        return step_down(current)

    if prefers_low_stimuli and current is DifficultyLevel.ADVANCED:
        return DifficultyLevel.INTERMEDIATE

    return current


def describe_difficulty_change(current: DifficultyLevel, next_level: DifficultyLevel) -> str:
    """Human-readable summary of a difficulty transition."""
    if current is next_level:
        return "Difficulty held steady"
    if next_level is DifficultyLevel.ADVANCED:
        return "Moving up to ADVANCED after high success"
    if next_level is DifficultyLevel.INTERMEDIATE and current is DifficultyLevel.BEGINNER:
        return "Gradual increase to keep the child engaged"
    return "Temporary decrease to reduce cognitive load"
