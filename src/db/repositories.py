"""
SQL implementations of the engine's collaborator contracts.

- SqlHistoryRepository: HistoryProvider over activity_records
- SqlCatalogRepository: CatalogProvider over learning_modules / quizzes
- SqlAnnotationStore: AnnotationStore writing the annotation columns

Repositories work on a caller-supplied Session and never commit, except
SqlAnnotationStore which opens its own transaction per update because it
runs on the background refresh pool.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.adaptive.models import (
    ActivityRecord,
    AdaptiveAnnotation,
    CatalogModule,
    CatalogQuiz,
    DifficultyTier,
    QuestionResponse,
    compute_percentage,
)
from src.db.models import ActivityRecordRow, LearningModule, Quiz


def row_to_record(row: ActivityRecordRow) -> ActivityRecord:
    return ActivityRecord(
        id=row.id,
        learner_id=row.learner_id,
        module_id=row.module_id,
        quiz_id=row.quiz_id,
        score=row.score,
        max_score=row.max_score,
        time_spent_seconds=row.time_spent_seconds or 0,
        completed_at=row.completed_at,
        responses=tuple(QuestionResponse.from_dict(r) for r in row.responses or ()),
    )


def module_to_catalog(module: LearningModule) -> CatalogModule:
    return CatalogModule(
        id=module.id,
        title=module.title,
        difficulty=DifficultyTier.parse(module.difficulty),
        subject=module.subject or "",
        description=module.description or "",
        estimated_duration_minutes=module.estimated_duration_minutes,
        prerequisite_ids=tuple(p.id for p in module.prerequisites),
    )


def quiz_to_catalog(quiz: Quiz) -> CatalogQuiz:
    return CatalogQuiz(
        id=quiz.id,
        module_id=quiz.module_id,
        title=quiz.title,
        difficulty=DifficultyTier.parse(quiz.difficulty),
        description=quiz.description or "",
        passing_score=quiz.passing_score,
        time_limit_minutes=quiz.time_limit_minutes,
    )


class SqlHistoryRepository:
    """Activity history backed by the activity_records table."""

    def __init__(self, session: Session):
        self._session = session

    def find_recent(self, learner_id: str, limit: int = 20) -> list[ActivityRecord]:
        stmt = (
            select(ActivityRecordRow)
            .where(ActivityRecordRow.learner_id == learner_id)
            .order_by(ActivityRecordRow.completed_at.desc())
            .limit(limit)
        )
        return [row_to_record(row) for row in self._session.scalars(stmt)]

    def find_by_learner(self, learner_id: str) -> list[ActivityRecord]:
        """All records for a learner, newest first."""
        stmt = (
            select(ActivityRecordRow)
            .where(ActivityRecordRow.learner_id == learner_id)
            .order_by(ActivityRecordRow.completed_at.desc())
        )
        return [row_to_record(row) for row in self._session.scalars(stmt)]

    def record_activity(
        self,
        learner_id: str,
        score: float,
        max_score: float,
        time_spent_seconds: int,
        module_id: str | None = None,
        quiz_id: str | None = None,
        completed_at: datetime | None = None,
        responses: Sequence[QuestionResponse] = (),
    ) -> ActivityRecord:
        """
        Store a completed activity and return it with its id assigned.

        A quiz attempt without an explicit module is linked to the quiz's module.
        """
        if module_id is None and quiz_id is not None:
            quiz = self._session.get(Quiz, quiz_id)
            module_id = quiz.module_id if quiz else None

        row = ActivityRecordRow(
            learner_id=learner_id,
            module_id=module_id,
            quiz_id=quiz_id,
            score=score,
            max_score=max_score,
            percentage=compute_percentage(score, max_score),
            time_spent_seconds=time_spent_seconds,
            completed_at=completed_at or datetime.now(UTC),
            responses=[r.to_dict() for r in responses] or None,
        )
        self._session.add(row)
        self._session.flush()
        return row_to_record(row)


class SqlCatalogRepository:
    """Content catalog backed by learning_modules and quizzes."""

    def __init__(self, session: Session):
        self._session = session

    def _active_modules(self):
        return (
            select(LearningModule)
            .where(LearningModule.is_active.is_(True))
            .order_by(LearningModule.sort_order, LearningModule.created_at, LearningModule.id)
        )

    def find_modules_by_difficulty(self, tier: DifficultyTier) -> list[CatalogModule]:
        stmt = self._active_modules().where(LearningModule.difficulty.in_(tier.labels))
        return [module_to_catalog(m) for m in self._session.scalars(stmt)]

    def find_quizzes_by_module(self, module_id: str) -> list[CatalogQuiz]:
        stmt = (
            select(Quiz)
            .where(Quiz.module_id == module_id, Quiz.is_active.is_(True))
            .order_by(Quiz.created_at, Quiz.id)
        )
        return [quiz_to_catalog(q) for q in self._session.scalars(stmt)]

    def find_entry_level_modules(self) -> list[CatalogModule]:
        stmt = self._active_modules().where(~LearningModule.prerequisites.any())
        return [module_to_catalog(m) for m in self._session.scalars(stmt)]

    def get_module(self, module_id: str) -> CatalogModule | None:
        """Active module by id (None if unknown or retired)."""
        module = self._session.get(LearningModule, module_id)
        if module is None or not module.is_active:
            return None
        return module_to_catalog(module)

    def get_quiz(self, quiz_id: str) -> CatalogQuiz | None:
        """Active quiz by id (None if unknown or retired)."""
        quiz = self._session.get(Quiz, quiz_id)
        if quiz is None or not quiz.is_active:
            return None
        return quiz_to_catalog(quiz)


class SqlAnnotationStore:
    """
    Writes adaptive annotations onto activity records.

    Takes a session-scope factory (normally ``session_scope``) so each
    update commits in its own transaction on the calling thread.
    """

    def __init__(self, scope_factory: Callable[[], AbstractContextManager[Session]]):
        self._scope_factory = scope_factory

    def update_annotation(self, record_id: str, annotation: AdaptiveAnnotation) -> None:
        with self._scope_factory() as session:
            row = session.get(ActivityRecordRow, record_id)
            if row is None:
                raise LookupError(f"Activity record {record_id} not found")
            row.adaptive_difficulty = annotation.difficulty_level.value
            row.adaptive_mastery_level = annotation.mastery_level
            row.adaptive_confidence_score = annotation.confidence_score
            row.adaptive_learning_path = list(annotation.learning_path)
            row.adaptive_recommendations = list(annotation.recommendations)
            row.annotated_at = datetime.now(UTC)
