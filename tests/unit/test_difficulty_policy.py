"""
Unit tests for DifficultyPolicy tier transitions.
"""

import pytest

from conftest import make_history, make_profile
from src.adaptive.difficulty_policy import DifficultyPolicy, recent_average
from src.adaptive.models import DifficultyTier
from src.adaptive.profile_builder import LearnerProfileBuilder


@pytest.fixture
def policy():
    return DifficultyPolicy()


class TestRecentAverage:
    def test_uses_only_most_recent_window(self):
        records = make_history([90, 90, 90, 90, 90, 10, 10, 10])
        assert recent_average(records) == pytest.approx(90.0)

    def test_empty_history(self):
        assert recent_average([]) == 0.0

    def test_shorter_history_than_window(self):
        assert recent_average(make_history([80, 60])) == pytest.approx(70.0)


class TestTransitions:
    def test_strong_recent_performance_moves_up(self, policy):
        # Overall average 83.5 keeps the preferred tier at medium
        records = make_history([95] * 5 + [72] * 5)
        profile = LearnerProfileBuilder().build("learner-1", records)

        assert profile.preferred_difficulty is DifficultyTier.MEDIUM
        assert policy.next_difficulty(profile, records) is DifficultyTier.HARD

    def test_weak_recent_performance_moves_down(self, policy):
        profile = make_profile("hard", success_rate=0.4)
        records = make_history([50] * 5)
        assert policy.next_difficulty(profile, records) is DifficultyTier.MEDIUM

    def test_otherwise_keeps_preferred(self, policy):
        profile = make_profile("medium", success_rate=0.7)
        records = make_history([75] * 5)
        assert policy.next_difficulty(profile, records) is DifficultyTier.MEDIUM

    def test_increase_boundaries_inclusive(self, policy):
        profile = make_profile("easy", success_rate=0.9)
        assert policy.next_difficulty(profile, make_history([90] * 5)) is DifficultyTier.MEDIUM

    def test_decrease_boundaries_inclusive(self, policy):
        profile = make_profile("medium", success_rate=0.5)
        assert policy.next_difficulty(profile, make_history([60] * 5)) is DifficultyTier.EASY

    def test_high_scores_with_low_success_rate_stay(self, policy):
        profile = make_profile("medium", success_rate=0.89)
        assert policy.next_difficulty(profile, make_history([95] * 5)) is DifficultyTier.MEDIUM


class TestSaturation:
    def test_hard_stays_hard(self, policy):
        records = make_history([95] * 10)
        profile = LearnerProfileBuilder().build("learner-1", records)

        assert profile.preferred_difficulty is DifficultyTier.HARD
        assert policy.next_difficulty(profile, records) is DifficultyTier.HARD

    def test_easy_stays_easy(self, policy):
        records = make_history([30] * 10)
        profile = LearnerProfileBuilder().build("learner-1", records)

        assert profile.preferred_difficulty is DifficultyTier.EASY
        assert policy.next_difficulty(profile, records) is DifficultyTier.EASY


def test_custom_recent_window():
    policy = DifficultyPolicy(recent_window=2)
    profile = make_profile("easy", success_rate=0.9)
    records = make_history([95, 95, 10, 10, 10])
    assert policy.next_difficulty(profile, records) is DifficultyTier.MEDIUM
