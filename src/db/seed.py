"""
Sample catalog for local development.

Seeds a small Web Development track: three modules per difficulty tier,
each with a checkpoint quiz. Every non-entry module requires the previous
module in the track.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from src.db.models import LearningModule, Quiz

SUBJECT = "Web Development"

SAMPLE_MODULES: list[tuple[str, str, str]] = [
    ("easy", "HTML Fundamentals", "Document structure, semantic elements and forms."),
    ("easy", "CSS Basics", "Selectors, the box model and typography."),
    ("easy", "JavaScript Essentials", "Variables, functions and control flow."),
    ("medium", "Responsive Layouts", "Flexbox, grid and media queries."),
    ("medium", "DOM Manipulation", "Querying, events and dynamic content."),
    ("medium", "Working with APIs", "Fetching JSON and handling errors."),
    ("hard", "Asynchronous Patterns", "Promises, async/await and concurrency."),
    ("hard", "Web Performance", "Critical rendering path and caching."),
    ("hard", "Accessibility in Depth", "ARIA, focus management and audits."),
]


def seed_catalog(session: Session, replace: bool = False) -> int:
    """
    Insert the sample catalog.

    Args:
        session: Open session (caller commits)
        replace: Retire the active modules of the sample subject first. Retired
            modules and quizzes are deactivated, not deleted, so activity
            history that references them stays loadable.

    Returns:
        Number of modules created (0 if the subject is already seeded)
    """
    existing = session.scalars(
        select(LearningModule).where(
            LearningModule.subject == SUBJECT, LearningModule.is_active.is_(True)
        )
    ).all()
    if existing and not replace:
        logger.info(f"Catalog already contains {len(existing)} {SUBJECT} modules, skipping")
        return 0
    for module in existing:
        module.is_active = False
        for quiz in module.quizzes:
            quiz.is_active = False
    if existing:
        logger.info(f"Retired {len(existing)} {SUBJECT} modules")

    previous: LearningModule | None = None
    for order, (difficulty, title, description) in enumerate(SAMPLE_MODULES, start=1):
        module = LearningModule(
            title=title,
            description=description,
            subject=SUBJECT,
            difficulty=difficulty,
            estimated_duration_minutes=30 + 15 * order,
            sort_order=order,
        )
        if previous is not None:
            module.prerequisites.append(previous)
        module.quizzes.append(
            Quiz(
                title=f"{title} – Checkpoint",
                description=f"Knowledge check for {title}.",
                difficulty=difficulty,
                passing_score=70,
                time_limit_minutes=15,
            )
        )
        session.add(module)
        previous = module

    session.flush()
    logger.info(f"Seeded {len(SAMPLE_MODULES)} {SUBJECT} modules")
    return len(SAMPLE_MODULES)
