"""
Learner Profile Builder.

Aggregates a bounded window of recent activity records into a LearnerProfile:
- Average score, response time and success rate
- Mastery level: 50% score + 30% success rate + 20% response speed
- Preferred difficulty from score/success thresholds
- Confidence, suppressed for small sample sizes
- Current passing streak
- Descriptive learning path labels
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from src.adaptive.models import (
    ADVANCED_PATH,
    BEGINNER_PATH,
    INTERMEDIATE_PATH,
    PASSING_PERCENTAGE,
    ActivityRecord,
    DifficultyTier,
    LearnerProfile,
)


def newest_first(records: Sequence[ActivityRecord]) -> list[ActivityRecord]:
    """Copy of the records ordered by completion time, newest first."""
    return sorted(records, key=lambda r: r.completed_at, reverse=True)


def learning_path_for(mastery_level: float) -> list[str]:
    """Stage labels shown to the learner for a mastery level."""
    if mastery_level < 0.3:
        return list(BEGINNER_PATH)
    elif mastery_level < 0.6:
        return list(INTERMEDIATE_PATH)
    return list(ADVANCED_PATH)


class LearnerProfileBuilder:
    """
    Builds a LearnerProfile from recent activity.

    Thresholds are exact and inclusive: an average of exactly 85 with a
    success rate of exactly 0.8 qualifies for the hard tier.
    """

    # Mastery weights (sum to 1.0)
    WEIGHT_SCORE = 0.5
    WEIGHT_SUCCESS = 0.3
    WEIGHT_SPEED = 0.2

    # Preferred difficulty thresholds
    HARD_MIN_AVERAGE = 85
    HARD_MIN_SUCCESS = 0.8
    MEDIUM_MIN_AVERAGE = 70
    MEDIUM_MIN_SUCCESS = 0.6

    def __init__(
        self,
        passing_percentage: int = PASSING_PERCENTAGE,
        confidence_sample_size: int = 10,
        response_time_ceiling_seconds: float = 300.0,
    ):
        """
        Args:
            passing_percentage: Minimum percentage counted as a success (default 70)
            confidence_sample_size: Attempts needed for full confidence weight (default 10)
            response_time_ceiling_seconds: Average time at which the speed term hits 0 (default 300)
        """
        self.passing_percentage = passing_percentage
        self.confidence_sample_size = confidence_sample_size
        self.response_time_ceiling_seconds = response_time_ceiling_seconds

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> LearnerProfileBuilder:
        """Build from ``Settings.get_adaptive_config()``."""
        return cls(
            passing_percentage=config["passing_percentage"],
            confidence_sample_size=config["confidence_sample_size"],
            response_time_ceiling_seconds=config["response_time_ceiling_seconds"],
        )

    def build(self, learner_id: str, records: Sequence[ActivityRecord]) -> LearnerProfile:
        """
        Build a profile from a non-empty window of records.

        Raises:
            ValueError: If records is empty (new learners take the entry-level path)
        """
        if not records:
            raise ValueError("Cannot build a learner profile from an empty history")

        total_attempts = len(records)
        percentages = [r.percentage for r in records]
        total_time = sum(r.time_spent_seconds or 0 for r in records)

        average_score = sum(percentages) / total_attempts
        average_response_time = total_time / total_attempts
        successes = sum(1 for pct in percentages if pct >= self.passing_percentage)
        success_rate = successes / total_attempts

        mastery_level = self.compute_mastery_level(
            average_score, success_rate, average_response_time
        )

        return LearnerProfile(
            learner_id=learner_id,
            preferred_difficulty=self.determine_preferred_difficulty(average_score, success_rate),
            average_score=average_score,
            average_response_time_seconds=average_response_time,
            success_rate=success_rate,
            mastery_level=mastery_level,
            confidence_score=self.compute_confidence_score(
                average_score, success_rate, total_attempts
            ),
            current_streak=self.compute_current_streak(records),
            total_attempts=total_attempts,
            total_study_time_seconds=total_time,
            completed_content_ids=frozenset(r.module_id for r in records if r.module_id),
            learning_path=learning_path_for(mastery_level),
        )

    def compute_mastery_level(
        self,
        average_score: float,
        success_rate: float,
        average_response_time: float,
    ) -> float:
        """
        Weighted mastery composite in [0, 1].

        Formula:
            50% × average_score/100 +
            30% × success_rate +
            20% × max(0, 1 - average_response_time/300)
        """
        speed = max(0.0, 1 - average_response_time / self.response_time_ceiling_seconds)
        return (
            (average_score / 100) * self.WEIGHT_SCORE
            + success_rate * self.WEIGHT_SUCCESS
            + speed * self.WEIGHT_SPEED
        )

    def determine_preferred_difficulty(
        self, average_score: float, success_rate: float
    ) -> DifficultyTier:
        if average_score >= self.HARD_MIN_AVERAGE and success_rate >= self.HARD_MIN_SUCCESS:
            return DifficultyTier.HARD
        elif average_score >= self.MEDIUM_MIN_AVERAGE and success_rate >= self.MEDIUM_MIN_SUCCESS:
            return DifficultyTier.MEDIUM
        return DifficultyTier.EASY

    def compute_confidence_score(
        self,
        average_score: float,
        success_rate: float,
        total_attempts: int,
    ) -> float:
        """
        Confidence in the profile, penalized for small samples.

        One attempt carries a tenth of the weight of ten attempts.
        """
        performance = (average_score / 100 + success_rate) / 2
        sample_size_factor = min(total_attempts / self.confidence_sample_size, 1)
        return min(performance * sample_size_factor, 1.0)

    def compute_current_streak(self, records: Sequence[ActivityRecord]) -> int:
        """Count leading passing records, newest first, stopping at the first failure."""
        streak = 0
        for record in newest_first(records):
            if record.percentage < self.passing_percentage:
                break
            streak += 1
        return streak
