"""
Adaptive Learning API Router.

Endpoints for the adaptive recommendation engine:
- Next-content recommendation (ids, or enriched content payloads)
- Learner profile
- Learning path labels
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query
from loguru import logger

from src.adaptive import RecommendationEngine
from src.api.dependencies import envelope, get_catalog, get_recommendation_engine
from src.db.repositories import SqlCatalogRepository

router = APIRouter()


@router.get("/recommendation", summary="Get next recommendation")
def get_recommendation(
    learner_id: str = Query(..., min_length=1, description="Learner identifier"),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> dict[str, Any]:
    """
    Compute the next module/quiz recommendation for a learner.

    Learners without history get an entry-level module at easy difficulty.
    Absent ids mean the catalog has nothing to recommend.
    """
    recommendation = engine.recommend(learner_id)
    return envelope(recommendation.to_dict(), "Recommendation generated successfully")


@router.get("/recommendations", summary="Get recommended content")
def get_recommended_content(
    learner_id: str = Query(..., min_length=1, description="Learner identifier"),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
    catalog: SqlCatalogRepository = Depends(get_catalog),
) -> dict[str, Any]:
    """Recommendation resolved into full module and quiz payloads."""
    recommendation = engine.recommend(learner_id)

    items: list[dict[str, Any]] = []
    if recommendation.next_module_id:
        module = catalog.get_module(recommendation.next_module_id)
        if module:
            items.append(module.to_dict())
    if recommendation.next_quiz_id:
        quiz = catalog.get_quiz(recommendation.next_quiz_id)
        if quiz:
            items.append(quiz.to_dict())

    if recommendation.has_content and not items:
        logger.warning(f"Recommended content for {learner_id} no longer exists in the catalog")

    return envelope(items, "Recommendations retrieved successfully")


@router.get("/profile", summary="Get learner profile")
def get_profile(
    learner_id: str = Query(..., min_length=1, description="Learner identifier"),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> dict[str, Any]:
    """Learner profile from recent activity; null data for new learners."""
    profile = engine.get_profile(learner_id)
    return envelope(
        profile.to_dict() if profile else None,
        "Learning profile retrieved successfully",
    )


@router.get("/learning-path", summary="Get learning path")
def get_learning_path(
    learner_id: str = Query(..., min_length=1, description="Learner identifier"),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
) -> dict[str, Any]:
    return envelope(engine.get_learning_path(learner_id), "Learning path retrieved successfully")
