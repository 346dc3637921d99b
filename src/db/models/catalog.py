"""
Content catalog models.

- LearningModule: a unit of learning content at one difficulty tier
- Quiz: an assessment attached to a module
- module_prerequisites: module -> prerequisite module links

A module without prerequisites is entry-level.
"""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Table, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def _new_id() -> str:
    return str(uuid4())


module_prerequisites = Table(
    "module_prerequisites",
    Base.metadata,
    Column("module_id", ForeignKey("learning_modules.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "prerequisite_id", ForeignKey("learning_modules.id", ondelete="CASCADE"), primary_key=True
    ),
)


class LearningModule(Base):
    """Learning module in the catalog."""

    __tablename__ = "learning_modules"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    subject: Mapped[str] = mapped_column(Text, default="")
    difficulty: Mapped[str] = mapped_column(Text, nullable=False)  # easy, medium, hard
    estimated_duration_minutes: Mapped[int | None] = mapped_column(Integer)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)  # catalog return order
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(default=func.now())

    # Relationships
    prerequisites: Mapped[list[LearningModule]] = relationship(
        secondary=module_prerequisites,
        primaryjoin=lambda: LearningModule.id == module_prerequisites.c.module_id,
        secondaryjoin=lambda: LearningModule.id == module_prerequisites.c.prerequisite_id,
    )
    quizzes: Mapped[list[Quiz]] = relationship(
        back_populates="module", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("idx_modules_difficulty_active", "difficulty", "is_active"),)

    def __repr__(self) -> str:
        return f"<LearningModule {self.id} {self.title!r} ({self.difficulty})>"


class Quiz(Base):
    """Quiz attached to a learning module."""

    __tablename__ = "quizzes"

    id: Mapped[str] = mapped_column(Text, primary_key=True, default=_new_id)
    module_id: Mapped[str] = mapped_column(
        ForeignKey("learning_modules.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    difficulty: Mapped[str] = mapped_column(Text, nullable=False)
    passing_score: Mapped[int] = mapped_column(Integer, default=70)
    time_limit_minutes: Mapped[int | None] = mapped_column(Integer)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(default=func.now())

    # Relationships
    module: Mapped[LearningModule] = relationship(back_populates="quizzes")

    def __repr__(self) -> str:
        return f"<Quiz {self.id} {self.title!r} module={self.module_id}>"
