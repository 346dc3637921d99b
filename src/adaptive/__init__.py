"""
Adaptive Recommendation Engine.

Turns a learner's recent activity into a personalized next-content
recommendation.

Components:
- LearnerProfileBuilder: Aggregates recent activity into a LearnerProfile
- DifficultyPolicy: Moves the difficulty tier up/down one step
- ContentSelector: Picks uncompleted catalog content via a RankingStrategy
- RecommendationEngine: Main orchestration layer
- AnnotationRefresher: Best-effort post-completion annotation refresh
"""
from src.adaptive.models import (
    ActivityRecord,
    AdaptiveAnnotation,
    CatalogModule,
    CatalogQuiz,
    ContentChoice,
    DifficultyTier,
    LearnerProfile,
    QuestionResponse,
    Recommendation,
    BEGINNER_PATH,
    INTERMEDIATE_PATH,
    ADVANCED_PATH,
    PASSING_PERCENTAGE,
    compute_percentage,
)
from src.adaptive.collaborators import AnnotationStore, CatalogProvider, HistoryProvider
from src.adaptive.errors import RecommendationError
from src.adaptive.profile_builder import LearnerProfileBuilder, learning_path_for
from src.adaptive.difficulty_policy import DifficultyPolicy, recent_average
from src.adaptive.content_selector import ContentSelector, FirstInCatalogOrder, RankingStrategy
from src.adaptive.recommendation_engine import RecommendationEngine, generate_reasoning
from src.adaptive.annotation_refresher import AnnotationRefresher
from src.adaptive.progress_stats import ProgressStats, summarize_progress

__all__ = [
    # Main engine
    "RecommendationEngine",
    "AnnotationRefresher",
    # Component classes
    "LearnerProfileBuilder",
    "DifficultyPolicy",
    "ContentSelector",
    "FirstInCatalogOrder",
    "RankingStrategy",
    # Collaborator contracts
    "HistoryProvider",
    "CatalogProvider",
    "AnnotationStore",
    # Data models
    "ActivityRecord",
    "AdaptiveAnnotation",
    "CatalogModule",
    "CatalogQuiz",
    "ContentChoice",
    "LearnerProfile",
    "QuestionResponse",
    "Recommendation",
    "ProgressStats",
    # Enums and constants
    "DifficultyTier",
    "BEGINNER_PATH",
    "INTERMEDIATE_PATH",
    "ADVANCED_PATH",
    "PASSING_PERCENTAGE",
    # Helpers
    "compute_percentage",
    "generate_reasoning",
    "learning_path_for",
    "recent_average",
    "summarize_progress",
    # Errors
    "RecommendationError",
]
