"""
Content Selector.

Picks the next module (and its quiz) for a target difficulty tier:
1. Fetch active modules at the tier from the catalog
2. Drop modules the learner already completed
3. If none remain, escalate one tier and take what is found there
4. Otherwise let the ranking strategy choose
5. Attach the module's first quiz, if any
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from loguru import logger

from src.adaptive.collaborators import CatalogProvider
from src.adaptive.models import (
    CatalogModule,
    CatalogQuiz,
    ContentChoice,
    DifficultyTier,
    LearnerProfile,
)


class RankingStrategy(Protocol):
    """Chooses one module out of a non-empty candidate list."""

    name: str

    def select(
        self, candidates: Sequence[CatalogModule], profile: LearnerProfile | None
    ) -> CatalogModule:
        ...


class FirstInCatalogOrder:
    """
    Take the first candidate in catalog return order.

    Deterministic given identical catalog state.
    """

    name = "first_in_catalog_order"

    def select(
        self, candidates: Sequence[CatalogModule], profile: LearnerProfile | None
    ) -> CatalogModule:
        return candidates[0]


class ContentSelector:
    """Selects uncompleted content from the catalog for a difficulty tier."""

    def __init__(
        self,
        catalog: CatalogProvider,
        ranking: RankingStrategy | None = None,
    ):
        self._catalog = catalog
        self.ranking = ranking or FirstInCatalogOrder()

    def select(
        self,
        learner_id: str,
        difficulty: DifficultyTier,
        profile: LearnerProfile,
    ) -> ContentChoice:
        """
        Choose the next module/quiz pair.

        Returns a ContentChoice whose ids are both None when the catalog
        has nothing at the target tier or the escalated tier.
        """
        modules = self._catalog.find_modules_by_difficulty(difficulty)
        completed = profile.completed_content_ids
        uncompleted = [m for m in modules if m.id not in completed]

        if not uncompleted:
            return self._escalate(learner_id, difficulty, profile)

        module = self.ranking.select(uncompleted, profile)
        quiz = self.first_quiz(module.id)

        logger.debug(
            "Selected module {} ({}) for learner {} via {}",
            module.id,
            difficulty.value,
            learner_id,
            self.ranking.name,
        )
        return ContentChoice(
            difficulty_level=difficulty,
            next_module_id=module.id,
            next_quiz_id=quiz.id if quiz else None,
        )

    def select_entry_level(self) -> CatalogModule | None:
        """First entry-level module for a learner with no history."""
        modules = self._catalog.find_entry_level_modules()
        if not modules:
            return None
        return self.ranking.select(modules, None)

    def first_quiz(self, module_id: str) -> CatalogQuiz | None:
        quizzes = self._catalog.find_quizzes_by_module(module_id)
        return quizzes[0] if quizzes else None

    def _escalate(
        self,
        learner_id: str,
        difficulty: DifficultyTier,
        profile: LearnerProfile,
    ) -> ContentChoice:
        # Single step only; modules at the escalated tier are not filtered.
        next_tier = difficulty.increase()
        modules = self._catalog.find_modules_by_difficulty(next_tier)

        logger.debug(
            "All {} modules completed by learner {}, escalating to {} ({} candidates)",
            difficulty.value,
            learner_id,
            next_tier.value,
            len(modules),
        )
        if not modules:
            return ContentChoice(difficulty_level=next_tier)

        module = self.ranking.select(modules, profile)
        return ContentChoice(difficulty_level=next_tier, next_module_id=module.id)
