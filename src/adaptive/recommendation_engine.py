"""
Adaptive Recommendation Engine.

Main orchestration layer. Turns a learner's recent activity into a
Recommendation:

    History -> LearnerProfileBuilder -> DifficultyPolicy -> ContentSelector
            -> reasoning + learning path -> Recommendation

The engine is stateless: collaborators are injected at construction and
every call re-reads history and catalog. Learners without history take the
entry-level path, which never builds a profile.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any

from loguru import logger

from src.adaptive.collaborators import CatalogProvider, HistoryProvider
from src.adaptive.content_selector import ContentSelector, RankingStrategy
from src.adaptive.difficulty_policy import DifficultyPolicy, recent_average
from src.adaptive.errors import RecommendationError
from src.adaptive.models import (
    BEGINNER_PATH,
    ActivityRecord,
    DifficultyTier,
    LearnerProfile,
    Recommendation,
)
from src.adaptive.profile_builder import LearnerProfileBuilder

if TYPE_CHECKING:
    from src.adaptive.annotation_refresher import AnnotationRefresher


NEW_LEARNER_CONFIDENCE = 0.5
NEW_LEARNER_REASONING = (
    "Welcome! Starting with entry-level content to assess your current knowledge."
)

# Reasoning bands on the recent average (inclusive lower bounds)
EXCELLENT_BAND = 90
GOOD_BAND = 70


def generate_reasoning(average: float) -> str:
    """Explain a recommendation from the learner's recent average score."""
    if average >= EXCELLENT_BAND:
        return (
            f"Excellent performance! Your recent average score of {average:.1f}% "
            "indicates you're ready for more challenging content."
        )
    elif average >= GOOD_BAND:
        return (
            f"Good progress! Your recent average score of {average:.1f}% "
            "shows consistent learning."
        )
    return (
        "Let's focus on building a stronger foundation. "
        f"Your recent average score of {average:.1f}% suggests we should review some concepts."
    )


class RecommendationEngine:
    """
    Computes the next content recommendation for a learner.

    Usage:
        engine = RecommendationEngine(history, catalog)
        rec = engine.recommend("learner-1")
        rec.to_dict()  # {"nextModuleId": ..., "difficultyLevel": ..., ...}
    """

    def __init__(
        self,
        history: HistoryProvider,
        catalog: CatalogProvider,
        *,
        profile_builder: LearnerProfileBuilder | None = None,
        policy: DifficultyPolicy | None = None,
        selector: ContentSelector | None = None,
        ranking: RankingStrategy | None = None,
        refresher: AnnotationRefresher | None = None,
        history_window: int = 20,
    ):
        self._history = history
        self._catalog = catalog
        self.profile_builder = profile_builder or LearnerProfileBuilder()
        self.policy = policy or DifficultyPolicy()
        self.selector = selector or ContentSelector(catalog, ranking=ranking)
        self.refresher = refresher
        self.history_window = history_window

    @classmethod
    def from_config(
        cls,
        history: HistoryProvider,
        catalog: CatalogProvider,
        config: dict[str, Any],
        refresher: AnnotationRefresher | None = None,
    ) -> RecommendationEngine:
        """Build an engine from ``Settings.get_adaptive_config()``."""
        return cls(
            history,
            catalog,
            profile_builder=LearnerProfileBuilder.from_config(config),
            policy=DifficultyPolicy(recent_window=config["recent_window_size"]),
            refresher=refresher,
            history_window=config["history_window_size"],
        )

    # ========================================
    # Public API
    # ========================================

    def recommend(self, learner_id: str) -> Recommendation:
        """
        Generate the next recommendation for a learner.

        Raises:
            RecommendationError: If a history or catalog lookup fails
        """
        try:
            records = self._history.find_recent(learner_id, self.history_window)

            if not records:
                logger.debug("No history for learner {}, using entry-level path", learner_id)
                return self.entry_level_recommendation()

            profile = self.profile_builder.build(learner_id, records)
            difficulty = self.policy.next_difficulty(profile, records)
            choice = self.selector.select(learner_id, difficulty, profile)

            recommendation = Recommendation(
                next_module_id=choice.next_module_id,
                next_quiz_id=choice.next_quiz_id,
                difficulty_level=choice.difficulty_level,
                confidence=profile.confidence_score,
                reasoning=self.explain(records),
                learning_path=list(profile.learning_path),
            )
        except Exception as exc:
            logger.exception(f"Failed to generate recommendation for learner {learner_id}")
            raise RecommendationError() from exc

        logger.debug(
            "Recommendation for {}: module={} quiz={} difficulty={} confidence={:.2f}",
            learner_id,
            recommendation.next_module_id,
            recommendation.next_quiz_id,
            recommendation.difficulty_level.value,
            recommendation.confidence,
        )
        return recommendation

    def get_profile(self, learner_id: str) -> LearnerProfile | None:
        """
        Current profile for a learner, or None for a learner without history.

        Raises:
            RecommendationError: If the history lookup fails
        """
        try:
            records = self._history.find_recent(learner_id, self.history_window)
        except Exception as exc:
            logger.exception(f"Failed to load history for learner {learner_id}")
            raise RecommendationError("Failed to build learner profile") from exc

        if not records:
            return None
        return self.profile_builder.build(learner_id, records)

    def get_learning_path(self, learner_id: str) -> list[str]:
        """Learning path labels; learners without history get the beginner path."""
        profile = self.get_profile(learner_id)
        if profile is None:
            return list(BEGINNER_PATH)
        return list(profile.learning_path)

    def entry_level_recommendation(self) -> Recommendation:
        """Recommendation for a learner with no activity history."""
        module = self.selector.select_entry_level()
        return Recommendation(
            next_module_id=module.id if module else None,
            difficulty_level=DifficultyTier.EASY,
            confidence=NEW_LEARNER_CONFIDENCE,
            reasoning=NEW_LEARNER_REASONING,
            learning_path=list(BEGINNER_PATH),
        )

    def explain(self, records: Sequence[ActivityRecord]) -> str:
        return generate_reasoning(recent_average(records, self.policy.recent_window))

    def on_activity_recorded(self, record: ActivityRecord) -> Future | None:
        """
        Post-completion hook.

        Schedules a background refresh of the record's adaptive annotation
        and returns immediately. Never raises.
        """
        if self.refresher is None:
            logger.debug("No annotation refresher configured, skipping record {}", record.id)
            return None
        return self.refresher.on_activity_recorded(record)
