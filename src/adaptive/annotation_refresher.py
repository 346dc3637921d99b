"""
Background annotation refresh for newly recorded activity.

After an activity record is stored, its embedded adaptive annotation
(difficulty tag, mastery/confidence snapshot, learning path) is recomputed
from a window holding just that record and written back.

This bookkeeping is best-effort: it runs on a worker pool, failures are
logged with a traceback and never reach the request that reported the
completion.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from loguru import logger

from src.adaptive.collaborators import AnnotationStore
from src.adaptive.models import ActivityRecord, AdaptiveAnnotation
from src.adaptive.profile_builder import LearnerProfileBuilder

DEFAULT_ADVICE = ["Continue with similar difficulty", "Practice more exercises"]


class AnnotationRefresher:
    """
    Fire-and-forget annotation refresh.

    Usage:
        refresher = AnnotationRefresher(store, max_workers=2)
        future = refresher.on_activity_recorded(record)
        # ... later, on shutdown ...
        refresher.shutdown()
    """

    def __init__(
        self,
        store: AnnotationStore,
        profile_builder: LearnerProfileBuilder | None = None,
        executor: ThreadPoolExecutor | None = None,
        max_workers: int = 2,
    ):
        self._store = store
        self._profile_builder = profile_builder or LearnerProfileBuilder()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="annotation-refresh"
        )

    def build_annotation(self, record: ActivityRecord) -> AdaptiveAnnotation:
        """Annotation computed from a singleton window containing the record."""
        profile = self._profile_builder.build(record.learner_id, [record])
        return AdaptiveAnnotation(
            difficulty_level=profile.preferred_difficulty,
            mastery_level=profile.mastery_level,
            confidence_score=profile.confidence_score,
            learning_path=list(profile.learning_path),
            recommendations=list(DEFAULT_ADVICE),
        )

    def refresh(self, record: ActivityRecord) -> AdaptiveAnnotation:
        """
        Recompute and store the annotation synchronously.

        Raises:
            ValueError: If the record has no id
        """
        if record.id is None:
            raise ValueError("Cannot annotate an activity record without an id")
        annotation = self.build_annotation(record)
        self._store.update_annotation(record.id, annotation)
        logger.debug(
            "Annotated record {}: difficulty={} mastery={:.2f}",
            record.id,
            annotation.difficulty_level.value,
            annotation.mastery_level,
        )
        return annotation

    def on_activity_recorded(self, record: ActivityRecord) -> Future | None:
        """
        Schedule a refresh and return without waiting for it.

        Returns None when the refresh could not be scheduled (e.g. after
        shutdown); the failure is logged, never raised.
        """
        try:
            return self._executor.submit(self._refresh_logged, record)
        except Exception:  # Best-effort: completion flow must not see refresh failures
            logger.exception(f"Failed to schedule annotation refresh for record {record.id}")
            return None

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def _refresh_logged(self, record: ActivityRecord) -> bool:
        try:
            self.refresh(record)
            return True
        except Exception:  # Best-effort: completion flow must not see refresh failures
            logger.exception(f"Failed to refresh adaptive annotation for record {record.id}")
            return False
