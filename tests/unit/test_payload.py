"""
Unit tests for the recommendation payload builder.
"""

import pytest

from kidlearn.adaptive.models import ActivityCategory, DifficultyLevel, Personalization
from kidlearn.adaptive.payload import (
    FRUSTRATION_WARNING,
    build_recommendation_payload,
    personalize_recommendation,
)


class TestScenarios:
    def test_beginner_fast_mastery(self, make_context):
        context = make_context(
            current=DifficultyLevel.BEGINNER,
            signal={"success_rate": 0.9, "attempts_count": 1, "emotional_state": "happy"},
        )
        result = build_recommendation_payload(context)

        assert result.next_difficulty is DifficultyLevel.INTERMEDIATE
        assert result.escalation_warnings is None

    def test_frustrated_advanced_child(self, make_context):
        context = make_context(
            current=DifficultyLevel.ADVANCED,
            signal={"success_rate": 0.95, "attempts_count": 1, "emotional_state": "frustrated"},
        )
        result = build_recommendation_payload(context)

        assert result.next_difficulty is DifficultyLevel.INTERMEDIATE
        assert result.escalation_warnings == (FRUSTRATION_WARNING,)

    def test_struggling_intermediate_child(self, make_context):
        context = make_context(
            current=DifficultyLevel.INTERMEDIATE,
            signal={"success_rate": 0.4, "attempts_count": 4},
        )
        result = build_recommendation_payload(context)

        assert result.next_difficulty is DifficultyLevel.BEGINNER


class TestRecommendationEntries:
    def test_three_entries_in_fixed_order(self, make_context):
        context = make_context(
            current=DifficultyLevel.BEGINNER,
            signal={"success_rate": 0.9, "attempts_count": 1},
            category=ActivityCategory.ACADEMIC,
            current_activity_id="counting",
        )
        recs = build_recommendation_payload(context).recommendations

        assert [r.weight for r in recs] == [0.6, 0.2, 0.2]
        assert [r.difficulty for r in recs] == [
            DifficultyLevel.INTERMEDIATE,  # computed trajectory
            DifficultyLevel.BEGINNER,  # pre-adjustment level
            DifficultyLevel.BEGINNER,  # safety net
        ]
        assert all(r.category is ActivityCategory.ACADEMIC for r in recs)
        assert recs[0].suggested_activity_id == "counting"
        assert recs[1].suggested_activity_id is None
        assert all(r.reason for r in recs)

    def test_stability_entry_uses_current_level(self, make_context):
        context = make_context(
            current=DifficultyLevel.ADVANCED,
            signal={"success_rate": 0.2, "attempts_count": 5},
        )
        recs = build_recommendation_payload(context).recommendations

        assert recs[0].difficulty is DifficultyLevel.INTERMEDIATE
        assert recs[1].difficulty is DifficultyLevel.ADVANCED
        assert recs[2].difficulty is DifficultyLevel.BEGINNER


class TestRationale:
    def test_signal_summary_and_next_level(self, make_context):
        context = make_context(
            current=DifficultyLevel.INTERMEDIATE,
            signal={"success_rate": 0.72, "attempts_count": 3},
        )
        rationale = build_recommendation_payload(context).rationale

        assert rationale[0] == "success=0.72 with 3 attempts"
        assert rationale[1] == "next level: INTERMEDIATE"
        assert len(rationale) >= 2

    def test_empty_performance(self, make_context):
        for current in DifficultyLevel:
            context = make_context(current=current, recent_performance=[])
            result = build_recommendation_payload(context)

            assert result.next_difficulty is current
            assert result.rationale[0] == "success=N/A with 0 attempts"
            assert result.escalation_warnings is None
            assert len(result.recommendations) == 3

    def test_partial_signal_is_insufficient_data(self, make_context):
        context = make_context(
            current=DifficultyLevel.ADVANCED,
            signal={"attempts_count": 2, "emotional_state": "calm"},
        )
        result = build_recommendation_payload(context)

        assert result.next_difficulty is DifficultyLevel.ADVANCED
        assert result.rationale[0] == "success=N/A with 2 attempts"


class TestPurity:
    def test_idempotent(self, sample_context):
        first = build_recommendation_payload(sample_context)
        second = build_recommendation_payload(sample_context)

        assert first == second
        assert first.to_payload() == second.to_payload()

    def test_only_head_signal_is_consulted(self, make_context):
        context = make_context(
            current=DifficultyLevel.INTERMEDIATE,
            recent_performance=[
                {"success_rate": 0.7, "attempts_count": 3},
                {"success_rate": 0.1, "attempts_count": 9, "emotional_state": "frustrated"},
            ],
        )
        result = build_recommendation_payload(context)

        assert result.next_difficulty is DifficultyLevel.INTERMEDIATE
        assert result.escalation_warnings is None

    def test_warnings_absent_from_payload(self, sample_context):
        payload = build_recommendation_payload(sample_context).to_payload()

        assert "escalationWarnings" not in payload
        assert payload["nextDifficulty"] == "INTERMEDIATE"
        assert payload["childId"] == "child-001"


class TestPersonalization:
    def test_no_flags_unchanged(self, sample_context):
        base = build_recommendation_payload(sample_context)

        assert personalize_recommendation(base, None) == base
        assert personalize_recommendation(base, Personalization()) == base
        assert personalize_recommendation(base, Personalization(prefers_low_stimuli=True)) == base

    def test_regulation_needed_adds_break(self, sample_context):
        base = build_recommendation_payload(sample_context)
        result = personalize_recommendation(base, Personalization(regulation_needed=True))

        assert len(result.recommendations) == 4
        assert result.recommendations[:3] == base.recommendations
        brk = result.recommendations[3]
        assert brk.category is ActivityCategory.EMOTIONAL_REGULATION
        assert brk.difficulty is DifficultyLevel.BEGINNER
        assert brk.weight == pytest.approx(0.2)

    def test_short_sessions_scale_weights(self, sample_context):
        base = build_recommendation_payload(sample_context)
        result = personalize_recommendation(base, Personalization(short_sessions_preferred=True))

        assert [r.weight for r in result.recommendations] == pytest.approx([0.54, 0.18, 0.18])
        assert result.next_difficulty == base.next_difficulty
        assert result.rationale == base.rationale

    def test_both_flags(self, sample_context):
        base = build_recommendation_payload(sample_context)
        result = personalize_recommendation(
            base, Personalization(regulation_needed=True, short_sessions_preferred=True)
        )

        assert [r.weight for r in result.recommendations] == pytest.approx([0.54, 0.18, 0.18, 0.18])
