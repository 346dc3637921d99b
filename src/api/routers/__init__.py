"""API routers for the adaptive learning service."""

from src.api.routers import (
    adaptive_router,
    progress_router,
)

__all__ = [
    "adaptive_router",
    "progress_router",
]
