"""
Activity record model.

One row per completed quiz attempt or module completion. Rows are written
once; only the embedded adaptive annotation columns are updated afterwards,
by the post-completion refresh.

Catalog rows referenced by activity cannot be deleted (RESTRICT); retire
them by clearing is_active instead.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ActivityRecordRow(Base):
    """Persisted activity record with its adaptive annotation."""

    __tablename__ = "activity_records"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=lambda: str(uuid4()))
    learner_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    module_id: Mapped[str | None] = mapped_column(
        ForeignKey("learning_modules.id", ondelete="RESTRICT")
    )
    quiz_id: Mapped[str | None] = mapped_column(ForeignKey("quizzes.id", ondelete="RESTRICT"))

    score: Mapped[float] = mapped_column(Float, nullable=False)
    max_score: Mapped[float] = mapped_column(Float, nullable=False)
    percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    time_spent_seconds: Mapped[int] = mapped_column(Integer, default=0)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    responses: Mapped[list | None] = mapped_column(JSON)  # per-question detail of quiz attempts

    # Adaptive annotation (filled in by the refresh hook)
    adaptive_difficulty: Mapped[str | None] = mapped_column(Text)
    adaptive_mastery_level: Mapped[float | None] = mapped_column(Float)
    adaptive_confidence_score: Mapped[float | None] = mapped_column(Float)
    adaptive_learning_path: Mapped[list | None] = mapped_column(JSON)
    adaptive_recommendations: Mapped[list | None] = mapped_column(JSON)
    annotated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(default=func.now())

    __table_args__ = (Index("idx_activity_learner_completed", "learner_id", "completed_at"),)

    def __repr__(self) -> str:
        return f"<ActivityRecordRow {self.id} learner={self.learner_id} pct={self.percentage}>"
