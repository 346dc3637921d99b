"""
Progress API Router.

Endpoints for learner activity:
- List a learner's activity records
- Record a completed quiz attempt or module (triggers annotation refresh)
- Dashboard statistics
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from config import get_settings
from src.adaptive import QuestionResponse, RecommendationEngine, summarize_progress
from src.api.dependencies import (
    envelope,
    get_catalog,
    get_history,
    get_recommendation_engine,
)
from src.db.database import get_session
from src.db.repositories import SqlCatalogRepository, SqlHistoryRepository

router = APIRouter()


# ========================================
# Request Models
# ========================================


class QuestionResponseRequest(BaseModel):
    """Answer to one question of a quiz attempt."""

    question_id: str = Field(..., min_length=1, description="Question identifier")
    user_answer: str | list[str] = Field(..., description="Answer text or selected options")
    is_correct: bool = Field(..., description="Whether the answer was correct")
    time_spent_seconds: int = Field(0, ge=0, description="Time spent on the question")
    points: float = Field(0, ge=0, description="Points awarded")

    def to_response(self) -> QuestionResponse:
        return QuestionResponse(
            question_id=self.question_id,
            user_answer=self.user_answer,
            is_correct=self.is_correct,
            time_spent_seconds=self.time_spent_seconds,
            points=self.points,
        )


class ActivityCreateRequest(BaseModel):
    """Request model for recording a completed activity."""

    learner_id: str = Field(..., min_length=1, description="Learner identifier")
    module_id: str | None = Field(None, description="Completed module id")
    quiz_id: str | None = Field(None, description="Attempted quiz id")
    score: float = Field(..., ge=0, description="Points scored")
    max_score: float = Field(..., gt=0, description="Maximum possible points")
    time_spent_seconds: int = Field(0, ge=0, description="Time spent on the activity")
    completed_at: datetime | None = Field(None, description="Completion time (default: now)")
    responses: list[QuestionResponseRequest] = Field(
        default_factory=list, description="Per-question detail of a quiz attempt"
    )

    @model_validator(mode="after")
    def _require_content(self) -> ActivityCreateRequest:
        if not self.module_id and not self.quiz_id:
            raise ValueError("module_id or quiz_id is required")
        return self


# ========================================
# Endpoints
# ========================================


@router.get("", summary="List learner activity")
def list_progress(
    learner_id: str = Query(..., min_length=1, description="Learner identifier"),
    history: SqlHistoryRepository = Depends(get_history),
) -> dict[str, Any]:
    records = history.find_by_learner(learner_id)
    return envelope([r.to_dict() for r in records], "Progress retrieved successfully")


@router.post("", status_code=201, summary="Record completed activity")
def record_progress(
    request: ActivityCreateRequest,
    session: Session = Depends(get_session),
    history: SqlHistoryRepository = Depends(get_history),
    catalog: SqlCatalogRepository = Depends(get_catalog),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> dict[str, Any]:
    """
    Store a completed activity.

    The record's adaptive annotation is refreshed in the background after
    the response is prepared; refresh failures are logged only.
    """
    if request.module_id and catalog.get_module(request.module_id) is None:
        raise HTTPException(status_code=404, detail=f"Module {request.module_id} not found")
    quiz = catalog.get_quiz(request.quiz_id) if request.quiz_id else None
    if request.quiz_id and quiz is None:
        raise HTTPException(status_code=404, detail=f"Quiz {request.quiz_id} not found")
    if quiz and request.module_id and quiz.module_id != request.module_id:
        raise HTTPException(
            status_code=422,
            detail=f"Quiz {quiz.id} does not belong to module {request.module_id}",
        )

    record = history.record_activity(
        learner_id=request.learner_id,
        module_id=request.module_id,
        quiz_id=request.quiz_id,
        score=request.score,
        max_score=request.max_score,
        time_spent_seconds=request.time_spent_seconds,
        completed_at=request.completed_at,
        responses=[r.to_response() for r in request.responses],
    )
    session.commit()
    logger.info(
        f"Recorded activity {record.id} for learner {record.learner_id} ({record.percentage}%)"
    )

    engine.on_activity_recorded(record)
    return envelope(record.to_dict(), "Progress recorded successfully")


@router.get("/stats", summary="Dashboard statistics")
@router.get("/analytics", summary="Dashboard statistics (alias)")
def get_progress_stats(
    learner_id: str = Query(..., min_length=1, description="Learner identifier"),
    history: SqlHistoryRepository = Depends(get_history),
) -> dict[str, Any]:
    stats = summarize_progress(
        history.find_by_learner(learner_id),
        passing_percentage=get_settings().passing_percentage,
    )
    return envelope(stats.to_dict(), "Dashboard stats retrieved successfully")
