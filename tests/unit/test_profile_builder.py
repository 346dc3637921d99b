"""
Unit tests for LearnerProfileBuilder.

Covers the mastery composite, preferred difficulty thresholds, sample-size
confidence, streaks and learning path labels.
"""

import random

import pytest

from conftest import make_history, make_record
from src.adaptive.models import (
    ADVANCED_PATH,
    BEGINNER_PATH,
    INTERMEDIATE_PATH,
    DifficultyTier,
)
from src.adaptive.profile_builder import LearnerProfileBuilder, learning_path_for


@pytest.fixture
def builder():
    return LearnerProfileBuilder()


class TestBuild:
    def test_empty_history_rejected(self, builder):
        with pytest.raises(ValueError):
            builder.build("learner-1", [])

    def test_aggregates(self, builder):
        records = make_history([80, 60, 100], time_spent_seconds=120)
        profile = builder.build("learner-1", records)

        assert profile.total_attempts == 3
        assert profile.average_score == pytest.approx(80.0)
        assert profile.success_rate == pytest.approx(2 / 3)
        assert profile.average_response_time_seconds == pytest.approx(120.0)
        assert profile.total_study_time_seconds == 360

    def test_completed_content_ids_from_modules(self, builder):
        records = [
            make_record(80, module_id="m-1"),
            make_record(90, module_id="m-2", minutes_ago=1),
            make_record(70, module_id=None, quiz_id="q-9", minutes_ago=2),
        ]
        profile = builder.build("learner-1", records)
        assert profile.completed_content_ids == frozenset({"m-1", "m-2"})

    def test_learning_style_placeholder(self, builder):
        profile = builder.build("learner-1", make_history([80]))
        assert profile.learning_style == "visual"


class TestMasteryLevel:
    def test_weighted_composite(self, builder):
        # 0.5 * 0.8 + 0.3 * 1.0 + 0.2 * (1 - 150/300)
        assert builder.compute_mastery_level(80, 1.0, 150) == pytest.approx(0.8)

    def test_slow_responses_floor_speed_term(self, builder):
        assert builder.compute_mastery_level(80, 1.0, 600) == pytest.approx(0.7)

    def test_configurable_time_ceiling(self):
        builder = LearnerProfileBuilder(response_time_ceiling_seconds=600)
        assert builder.compute_mastery_level(80, 1.0, 300) == pytest.approx(0.8)


class TestPreferredDifficulty:
    @pytest.mark.parametrize(
        "average,success,expected",
        [
            (85, 0.8, DifficultyTier.HARD),
            (84.9, 0.8, DifficultyTier.MEDIUM),
            (85, 0.79, DifficultyTier.MEDIUM),
            (70, 0.6, DifficultyTier.MEDIUM),
            (69.9, 0.6, DifficultyTier.EASY),
            (90, 0.5, DifficultyTier.EASY),
        ],
    )
    def test_thresholds_are_inclusive(self, builder, average, success, expected):
        assert builder.determine_preferred_difficulty(average, success) is expected


class TestConfidence:
    def test_single_perfect_attempt_is_suppressed(self, builder):
        profile = builder.build("learner-1", make_history([100]))
        assert profile.confidence_score == pytest.approx(0.1)

    def test_ten_perfect_attempts_reach_full_confidence(self, builder):
        profile = builder.build("learner-1", make_history([100] * 10))
        assert profile.confidence_score == pytest.approx(1.0)

    def test_never_exceeds_one(self, builder):
        assert builder.compute_confidence_score(100, 1.0, 50) == pytest.approx(1.0)


class TestStreak:
    def test_counts_leading_passes_newest_first(self, builder):
        records = make_history([80, 75, 60, 90])
        assert builder.compute_current_streak(records) == 2

    def test_input_order_does_not_matter(self, builder):
        records = make_history([80, 75, 60, 90])
        shuffled = records[:]
        random.Random(7).shuffle(shuffled)
        assert builder.compute_current_streak(shuffled) == 2

    def test_failed_latest_attempt_resets(self, builder):
        assert builder.compute_current_streak(make_history([50, 90, 90])) == 0

    def test_custom_passing_percentage(self):
        builder = LearnerProfileBuilder(passing_percentage=80)
        assert builder.compute_current_streak(make_history([80, 75, 90])) == 1


class TestLearningPath:
    @pytest.mark.parametrize(
        "mastery,path",
        [
            (0.0, BEGINNER_PATH),
            (0.29, BEGINNER_PATH),
            (0.3, INTERMEDIATE_PATH),
            (0.59, INTERMEDIATE_PATH),
            (0.6, ADVANCED_PATH),
            (1.0, ADVANCED_PATH),
        ],
    )
    def test_bands(self, mastery, path):
        assert learning_path_for(mastery) == path

    def test_returns_a_copy(self):
        learning_path_for(0.1).append("extra")
        assert learning_path_for(0.1) == BEGINNER_PATH
