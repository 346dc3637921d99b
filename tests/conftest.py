"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests:
in-memory history/catalog fakes, an activity record factory and an
in-memory SQLite database.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.adaptive.models import (  # noqa: E402
    ActivityRecord,
    AdaptiveAnnotation,
    CatalogModule,
    CatalogQuiz,
    DifficultyTier,
    LearnerProfile,
)

BASE_TIME = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (in-memory database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# ========================================
# In-memory collaborators
# ========================================


class FakeHistory:
    """HistoryProvider over a plain list."""

    def __init__(self, records=None):
        self.records = list(records or [])
        self.calls = []

    def find_recent(self, learner_id, limit=20):
        self.calls.append((learner_id, limit))
        mine = [r for r in self.records if r.learner_id == learner_id]
        mine.sort(key=lambda r: r.completed_at, reverse=True)
        return mine[:limit]


class FailingHistory:
    """HistoryProvider whose store is unreachable."""

    def find_recent(self, learner_id, limit=20):
        raise ConnectionError("history store unavailable")


class FakeCatalog:
    """CatalogProvider over module/quiz lists kept in catalog order."""

    def __init__(self, modules=None, quizzes=None):
        self.modules = list(modules or [])
        self.quizzes = list(quizzes or [])

    def find_modules_by_difficulty(self, tier):
        return [m for m in self.modules if m.difficulty == tier]

    def find_quizzes_by_module(self, module_id):
        return [q for q in self.quizzes if q.module_id == module_id]

    def find_entry_level_modules(self):
        return [m for m in self.modules if not m.prerequisite_ids]


class FakeAnnotationStore:
    """AnnotationStore collecting writes in a dict."""

    def __init__(self, fail_with=None):
        self.annotations: dict[str, AdaptiveAnnotation] = {}
        self.fail_with = fail_with

    def update_annotation(self, record_id, annotation):
        if self.fail_with is not None:
            raise self.fail_with
        self.annotations[record_id] = annotation


# ========================================
# Factories
# ========================================


def make_record(
    score,
    *,
    learner_id="learner-1",
    max_score=100,
    time_spent_seconds=60,
    minutes_ago=0,
    module_id="m-easy-1",
    quiz_id=None,
    record_id=None,
):
    """Build an ActivityRecord completed ``minutes_ago`` before BASE_TIME."""
    return ActivityRecord(
        id=record_id,
        learner_id=learner_id,
        module_id=module_id,
        quiz_id=quiz_id,
        score=score,
        max_score=max_score,
        time_spent_seconds=time_spent_seconds,
        completed_at=BASE_TIME - timedelta(minutes=minutes_ago),
    )


def make_history(scores, **kwargs):
    """Records for ``scores`` listed newest first."""
    return [make_record(score, minutes_ago=i, **kwargs) for i, score in enumerate(scores)]


def make_profile(preferred, success_rate, completed=(), average_score=75.0):
    """Hand-built profile for exercising the policy and selector in isolation."""
    return LearnerProfile(
        learner_id="learner-1",
        preferred_difficulty=DifficultyTier.parse(preferred),
        average_score=average_score,
        average_response_time_seconds=60.0,
        success_rate=success_rate,
        mastery_level=0.5,
        confidence_score=0.5,
        current_streak=0,
        total_attempts=10,
        total_study_time_seconds=600,
        completed_content_ids=frozenset(completed),
    )


def make_module(module_id, difficulty, prerequisites=()):
    return CatalogModule(
        id=module_id,
        title=module_id.replace("-", " ").title(),
        difficulty=DifficultyTier.parse(difficulty),
        prerequisite_ids=tuple(prerequisites),
    )


def make_quiz(quiz_id, module_id, difficulty="easy"):
    return CatalogQuiz(
        id=quiz_id,
        module_id=module_id,
        title=f"Quiz {quiz_id}",
        difficulty=DifficultyTier.parse(difficulty),
    )


# ========================================
# Fixtures
# ========================================


@pytest.fixture
def sample_catalog():
    """Two modules per tier, each with one quiz; m-easy-1 is the only entry module."""
    modules = [
        make_module("m-easy-1", "easy"),
        make_module("m-easy-2", "easy", ["m-easy-1"]),
        make_module("m-medium-1", "medium", ["m-easy-2"]),
        make_module("m-medium-2", "medium", ["m-medium-1"]),
        make_module("m-hard-1", "hard", ["m-medium-2"]),
        make_module("m-hard-2", "hard", ["m-hard-1"]),
    ]
    quizzes = [make_quiz(f"q-{m.id[2:]}", m.id, m.difficulty.value) for m in modules]
    return FakeCatalog(modules, quizzes)


@pytest.fixture
def empty_catalog():
    return FakeCatalog()


@pytest.fixture
def annotation_store():
    return FakeAnnotationStore()


@pytest.fixture
def sqlite_engine():
    """Fresh in-memory SQLite database bound as the application engine."""
    from src.db.database import build_engine, set_engine
    from src.db.models import Base

    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    set_engine(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(sqlite_engine):
    from src.db.database import SessionLocal

    session = SessionLocal()
    yield session
    session.close()
