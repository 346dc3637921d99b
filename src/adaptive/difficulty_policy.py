"""
Difficulty Policy.

Maps a learner profile and the most recent scores to the next difficulty
tier. Moves at most one step per call and saturates at both ends of the
easy < medium < hard scale.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.adaptive.models import ActivityRecord, DifficultyTier, LearnerProfile
from src.adaptive.profile_builder import newest_first


def recent_average(records: Sequence[ActivityRecord], window: int = 5) -> float:
    """Mean percentage over the ``window`` most recent records (0.0 when empty)."""
    recent = newest_first(records)[:window]
    if not recent:
        return 0.0
    return sum(r.percentage for r in recent) / len(recent)


class DifficultyPolicy:
    """
    Pure tier transition function.

    Identical inputs always produce the identical tier; the policy holds
    no state beyond its thresholds.
    """

    INCREASE_MIN_RECENT_AVERAGE = 90
    INCREASE_MIN_SUCCESS_RATE = 0.9
    DECREASE_MAX_RECENT_AVERAGE = 60
    DECREASE_MAX_SUCCESS_RATE = 0.5

    def __init__(self, recent_window: int = 5):
        self.recent_window = recent_window

    def next_difficulty(
        self,
        profile: LearnerProfile,
        records: Sequence[ActivityRecord],
    ) -> DifficultyTier:
        """
        Decide the next tier.

        - recent average >= 90 and success rate >= 0.9: one tier up
        - recent average <= 60 and success rate <= 0.5: one tier down
        - otherwise: the profile's preferred tier
        """
        average = recent_average(records, self.recent_window)
        current = profile.preferred_difficulty

        if (
            average >= self.INCREASE_MIN_RECENT_AVERAGE
            and profile.success_rate >= self.INCREASE_MIN_SUCCESS_RATE
        ):
            return current.increase()
        elif (
            average <= self.DECREASE_MAX_RECENT_AVERAGE
            and profile.success_rate <= self.DECREASE_MAX_SUCCESS_RATE
        ):
            return current.decrease()
        return current
