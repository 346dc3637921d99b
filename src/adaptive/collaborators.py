"""
Collaborator contracts for the recommendation engine.

The engine never talks to storage directly. It reads activity history and
the content catalog, and writes annotations, through these protocols. SQL
implementations live in src.db.repositories; tests use in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol

from src.adaptive.models import (
    ActivityRecord,
    AdaptiveAnnotation,
    CatalogModule,
    CatalogQuiz,
    DifficultyTier,
)


class HistoryProvider(Protocol):
    """Read access to a learner's completed activities."""

    def find_recent(self, learner_id: str, limit: int = 20) -> list[ActivityRecord]:
        """Most recent records for the learner, newest first."""
        ...


class CatalogProvider(Protocol):
    """Read access to active modules and quizzes."""

    def find_modules_by_difficulty(self, tier: DifficultyTier) -> list[CatalogModule]:
        ...

    def find_quizzes_by_module(self, module_id: str) -> list[CatalogQuiz]:
        ...

    def find_entry_level_modules(self) -> list[CatalogModule]:
        """Active modules without prerequisites."""
        ...


class AnnotationStore(Protocol):
    """Write access for the post-completion annotation refresh."""

    def update_annotation(self, record_id: str, annotation: AdaptiveAnnotation) -> None:
        ...
