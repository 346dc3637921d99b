"""
Adaptive Engine Models.

Plain data structures exchanged between the recommendation engine and its
collaborators:
- DifficultyTier: the three ordered difficulty levels
- ActivityRecord: one completed quiz attempt or module completion
- QuestionResponse: per-question detail of a quiz attempt
- LearnerProfile: statistics derived from a window of activity
- Recommendation: the engine's output contract
- AdaptiveAnnotation: snapshot stored back on an activity record
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


PASSING_PERCENTAGE = 70

BEGINNER_PATH = ["Beginner modules", "Basic concepts", "Foundation building"]
INTERMEDIATE_PATH = ["Intermediate modules", "Application exercises", "Skill development"]
ADVANCED_PATH = ["Advanced modules", "Complex problems", "Mastery application"]


class DifficultyTier(str, Enum):
    """
    Ordered difficulty scale: easy < medium < hard.

    Transitions move one step at a time and saturate at both ends.
    """

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: str | DifficultyTier) -> DifficultyTier:
        """
        Parse a tier label, accepting the legacy catalog vocabulary.

        Raises:
            ValueError: If the label is not a known tier
        """
        if isinstance(value, DifficultyTier):
            return value
        label = str(value).strip().lower()
        label = _LEGACY_LABELS.get(label, label)
        try:
            return cls(label)
        except ValueError:
            raise ValueError(f"Unknown difficulty tier: {value!r}") from None

    @property
    def labels(self) -> list[str]:
        """Stored labels that mean this tier, canonical first."""
        return [self.value] + [old for old, new in _LEGACY_LABELS.items() if new == self.value]

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    def increase(self) -> DifficultyTier:
        """One tier up; hard stays hard."""
        return _ORDER[min(self.rank + 1, len(_ORDER) - 1)]

    def decrease(self) -> DifficultyTier:
        """One tier down; easy stays easy."""
        return _ORDER[max(self.rank - 1, 0)]


_ORDER = [DifficultyTier.EASY, DifficultyTier.MEDIUM, DifficultyTier.HARD]

_LEGACY_LABELS = {
    "beginner": "easy",
    "intermediate": "medium",
    "advanced": "hard",
}


def half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def compute_percentage(score: float, max_score: float) -> int:
    """
    Percentage of max score, rounded half-up.

    A non-positive max score yields 0 instead of raising.
    """
    if max_score is None or max_score <= 0:
        return 0
    return half_up((score or 0) / max_score * 100)


@dataclass(frozen=True)
class QuestionResponse:
    """Learner's answer to one question within a quiz attempt."""

    question_id: str
    user_answer: str | list[str]
    is_correct: bool
    time_spent_seconds: int = 0
    points: float = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuestionResponse:
        return cls(
            question_id=data["questionId"],
            user_answer=data["userAnswer"],
            is_correct=data["isCorrect"],
            time_spent_seconds=data.get("timeSpent", 0),
            points=data.get("points", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "userAnswer": self.user_answer,
            "isCorrect": self.is_correct,
            "timeSpent": self.time_spent_seconds,
            "points": self.points,
        }


@dataclass(frozen=True)
class ActivityRecord:
    """
    One completed learning event.

    Created once when a learner finishes a quiz or marks a module
    complete, and never mutated afterwards.
    """

    learner_id: str
    score: float
    max_score: float
    time_spent_seconds: int
    completed_at: datetime
    module_id: str | None = None
    quiz_id: str | None = None
    id: str | None = None
    responses: tuple[QuestionResponse, ...] = ()

    def __post_init__(self) -> None:
        if self.module_id is None and self.quiz_id is None:
            raise ValueError("ActivityRecord needs a module_id or a quiz_id")

    @property
    def percentage(self) -> int:
        return compute_percentage(self.score, self.max_score)

    @property
    def is_passed(self) -> bool:
        return self.percentage >= PASSING_PERCENTAGE

    @property
    def performance_level(self) -> str:
        """Display band for a single attempt."""
        pct = self.percentage
        if pct >= 90:
            return "excellent"
        elif pct >= 80:
            return "good"
        elif pct >= PASSING_PERCENTAGE:
            return "satisfactory"
        return "needs-improvement"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "learnerId": self.learner_id,
            "moduleId": self.module_id,
            "quizId": self.quiz_id,
            "score": self.score,
            "maxScore": self.max_score,
            "percentage": self.percentage,
            "timeSpent": self.time_spent_seconds,
            "completedAt": self.completed_at.isoformat(),
            "isPassed": self.is_passed,
            "performanceLevel": self.performance_level,
            "responses": [r.to_dict() for r in self.responses],
        }


@dataclass(frozen=True)
class CatalogModule:
    """Catalog entry for a learning module."""

    id: str
    title: str
    difficulty: DifficultyTier
    subject: str = ""
    description: str = ""
    estimated_duration_minutes: int | None = None
    prerequisite_ids: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "module",
            "title": self.title,
            "description": self.description,
            "subject": self.subject,
            "difficulty": self.difficulty.value,
            "estimatedDuration": self.estimated_duration_minutes,
            "prerequisites": list(self.prerequisite_ids),
        }


@dataclass(frozen=True)
class CatalogQuiz:
    """Catalog entry for a quiz attached to a module."""

    id: str
    module_id: str
    title: str
    difficulty: DifficultyTier
    description: str = ""
    passing_score: int = PASSING_PERCENTAGE
    time_limit_minutes: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": "quiz",
            "moduleId": self.module_id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "passingScore": self.passing_score,
            "timeLimit": self.time_limit_minutes,
        }


@dataclass
class LearnerProfile:
    """
    Statistical profile derived from a window of activity records.

    Recomputed for every recommendation; callers may cache a snapshot
    but it is never the source of truth.
    """

    learner_id: str
    preferred_difficulty: DifficultyTier
    average_score: float
    average_response_time_seconds: float
    success_rate: float
    mastery_level: float
    confidence_score: float
    current_streak: int
    total_attempts: int
    total_study_time_seconds: float
    completed_content_ids: frozenset[str] = frozenset()
    learning_path: list[str] = field(default_factory=list)
    learning_style: str = "visual"  # placeholder, not used for selection yet

    def to_dict(self) -> dict[str, Any]:
        return {
            "learnerId": self.learner_id,
            "learningStyle": self.learning_style,
            "preferredDifficulty": self.preferred_difficulty.value,
            "averageScore": self.average_score,
            "averageResponseTime": self.average_response_time_seconds,
            "successRate": self.success_rate,
            "masteryLevel": self.mastery_level,
            "confidenceScore": self.confidence_score,
            "currentStreak": self.current_streak,
            "totalAttempts": self.total_attempts,
            "totalStudyTime": self.total_study_time_seconds,
            "completedModules": sorted(self.completed_content_ids),
            "learningPath": list(self.learning_path),
        }


@dataclass(frozen=True)
class ContentChoice:
    """Content Selector output before it is composed into a Recommendation."""

    difficulty_level: DifficultyTier
    next_module_id: str | None = None
    next_quiz_id: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.next_module_id is None and self.next_quiz_id is None


@dataclass
class Recommendation:
    """
    The engine's output.

    Both content ids may be absent, meaning no recommendation is
    available; that is a valid answer, not an error.
    """

    difficulty_level: DifficultyTier
    confidence: float
    reasoning: str
    learning_path: list[str] = field(default_factory=list)
    next_module_id: str | None = None
    next_quiz_id: str | None = None

    @property
    def has_content(self) -> bool:
        return self.next_module_id is not None or self.next_quiz_id is not None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the field names callers depend on."""
        return {
            "nextModuleId": self.next_module_id,
            "nextQuizId": self.next_quiz_id,
            "difficultyLevel": self.difficulty_level.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "learningPath": list(self.learning_path),
        }


@dataclass(frozen=True)
class AdaptiveAnnotation:
    """Adaptive snapshot written back onto a stored activity record."""

    difficulty_level: DifficultyTier
    mastery_level: float
    confidence_score: float
    learning_path: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "difficultyLevel": self.difficulty_level.value,
            "masteryLevel": self.mastery_level,
            "confidenceScore": self.confidence_score,
            "learningPath": list(self.learning_path),
            "recommendations": list(self.recommendations),
        }
