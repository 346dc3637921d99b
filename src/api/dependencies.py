"""
FastAPI dependencies wiring the recommendation engine to the database.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from config import get_settings
from src.adaptive import AnnotationRefresher, RecommendationEngine
from src.db.database import get_session
from src.db.repositories import SqlCatalogRepository, SqlHistoryRepository


def envelope(data: Any, message: str) -> dict[str, Any]:
    """Standard success response body."""
    return {
        "success": True,
        "data": data,
        "message": message,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def get_history(session: Session = Depends(get_session)) -> SqlHistoryRepository:
    return SqlHistoryRepository(session)


def get_catalog(session: Session = Depends(get_session)) -> SqlCatalogRepository:
    return SqlCatalogRepository(session)


def get_refresher(request: Request) -> AnnotationRefresher | None:
    """Refresher created in the application lifespan (None outside it)."""
    return getattr(request.app.state, "refresher", None)


def get_recommendation_engine(
    history: SqlHistoryRepository = Depends(get_history),
    catalog: SqlCatalogRepository = Depends(get_catalog),
    refresher: AnnotationRefresher | None = Depends(get_refresher),
) -> RecommendationEngine:
    return RecommendationEngine.from_config(
        history,
        catalog,
        get_settings().get_adaptive_config(),
        refresher=refresher,
    )
