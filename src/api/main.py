"""
FastAPI application for the adaptive learning service.

Provides REST API for:
- Adaptive next-content recommendations
- Learner profiles and learning paths
- Activity recording and dashboard statistics
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from config import get_settings
from src.adaptive import AnnotationRefresher, LearnerProfileBuilder, RecommendationError
from src.core.logging_setup import configure_logging
from src.db.database import check_connection, init_db, session_scope
from src.db.repositories import SqlAnnotationStore

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    configure_logging(settings)
    logger.info("Starting adaptive learning service...")
    init_db()

    config = settings.get_adaptive_config()
    app.state.refresher = AnnotationRefresher(
        SqlAnnotationStore(session_scope),
        profile_builder=LearnerProfileBuilder.from_config(config),
        max_workers=config["refresh_workers"],
    )
    logger.info(f"Service started on {settings.api_host}:{settings.api_port}")

    yield

    # Shutdown
    logger.info("Shutting down adaptive learning service...")
    app.state.refresher.shutdown(wait=True)


app = FastAPI(
    title="Adaptive Learning Service",
    description="""
    Personalized next-content recommendations for learners.

    ## Data Flow

    ```
    Activity records
        ↓ profile builder
    Learner profile
        ↓ difficulty policy
    Target tier
        ↓ content selector
    Recommendation
    ```
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RecommendationError)
async def recommendation_error_handler(request: Request, exc: RecommendationError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": str(exc),
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


# ========================================
# Health & Status Endpoints
# ========================================


@app.get("/", tags=["Health"])
def root() -> dict[str, str]:
    """Root endpoint returning service info."""
    return {
        "service": "adaptive-learning-service",
        "version": "0.1.0",
        "status": "ok",
    }


@app.get("/health", tags=["Health"])
def health_check() -> dict[str, Any]:
    """Health check with an actual database round-trip."""
    db_status, db_error = check_connection()

    result = {
        "status": "healthy" if db_status == "ok" else "unhealthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "components": {"database": db_status},
        "config": settings.get_adaptive_config(),
    }
    if db_error:
        result["errors"] = {"database": db_error}
    return result


# ========================================
# Import and mount routers
# ========================================

from src.api.routers import adaptive_router, progress_router

app.include_router(adaptive_router.router, prefix="/api/adaptive", tags=["Adaptive Learning"])
app.include_router(progress_router.router, prefix="/api/progress", tags=["Progress"])
