"""
Progress statistics for the learner dashboard.

Summarizes a learner's full activity history: attempts, scores, time spent,
quiz/module completion counts, the current passing streak and the most
recent activity.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from src.adaptive.models import PASSING_PERCENTAGE, ActivityRecord, half_up
from src.adaptive.profile_builder import LearnerProfileBuilder, newest_first


@dataclass
class ProgressStats:
    """Aggregate statistics over a learner's activity."""

    total_attempts: int = 0
    average_score: float = 0.0
    passed_attempts: int = 0
    total_time_spent_seconds: float = 0
    quizzes_completed: int = 0
    modules_completed: int = 0
    quiz_average_score: int = 0
    current_streak: int = 0
    recent_activity: list[ActivityRecord] = field(default_factory=list)

    @property
    def pass_rate(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.passed_attempts / self.total_attempts

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAttempts": self.total_attempts,
            "averageScore": self.average_score,
            "passedAttempts": self.passed_attempts,
            "passRate": self.pass_rate,
            "totalTimeSpent": self.total_time_spent_seconds,
            "quizzesCompleted": self.quizzes_completed,
            "modulesCompleted": self.modules_completed,
            "quizAverageScore": self.quiz_average_score,
            "currentStreak": self.current_streak,
            "recentActivity": [r.to_dict() for r in self.recent_activity],
        }


def summarize_progress(
    records: Sequence[ActivityRecord],
    recent_limit: int = 5,
    passing_percentage: int = PASSING_PERCENTAGE,
) -> ProgressStats:
    """
    Build dashboard statistics from a learner's records.

    A record with a quiz counts as a completed quiz; a record with only a
    module counts as a completed module. The quiz average is rounded to a
    whole percentage.
    """
    if not records:
        return ProgressStats()

    ordered = newest_first(records)
    percentages = [r.percentage for r in ordered]
    quiz_records = [r for r in ordered if r.quiz_id]

    quiz_average = 0
    if quiz_records:
        quiz_average = half_up(sum(r.percentage for r in quiz_records) / len(quiz_records))

    return ProgressStats(
        total_attempts=len(ordered),
        average_score=sum(percentages) / len(ordered),
        passed_attempts=sum(1 for pct in percentages if pct >= passing_percentage),
        total_time_spent_seconds=sum(r.time_spent_seconds or 0 for r in ordered),
        quizzes_completed=len(quiz_records),
        modules_completed=sum(1 for r in ordered if r.module_id and not r.quiz_id),
        quiz_average_score=quiz_average,
        current_streak=LearnerProfileBuilder(passing_percentage).compute_current_streak(ordered),
        recent_activity=ordered[:recent_limit],
    )
