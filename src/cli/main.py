"""
Typer CLI for the adaptive learning service.

Commands:
    adaptive db init              - Initialize database tables
    adaptive db seed              - Load the sample module/quiz catalog
    adaptive recommend LEARNER    - Show the next recommendation
    adaptive profile LEARNER      - Show the learner profile
    adaptive stats LEARNER        - Show dashboard statistics
    adaptive serve                - Run the REST API with uvicorn

Usage:
    adaptive --help
    adaptive db seed --replace
    adaptive recommend learner-1 --json
"""

from __future__ import annotations

import json

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from src.core.logging_setup import configure_logging

app = typer.Typer(
    help="adaptive: personalized next-content recommendations for learners",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(level="DEBUG" if verbose else None)


def _engine_for(session):
    from src.adaptive import RecommendationEngine
    from src.db.repositories import SqlCatalogRepository, SqlHistoryRepository

    return RecommendationEngine.from_config(
        SqlHistoryRepository(session),
        SqlCatalogRepository(session),
        get_settings().get_adaptive_config(),
    )


# ========================================
# DATABASE COMMANDS
# ========================================

db_app = typer.Typer(help="Database management (init, seed)")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """
    Initialize database tables from SQLAlchemy models.

    Safe to run multiple times (idempotent).
    """
    from sqlalchemy.exc import SQLAlchemyError

    from src.db.database import init_db

    logger.info("Initializing database tables...")
    try:
        init_db()
    except SQLAlchemyError as exc:
        logger.error(f"Database initialization failed: {exc}")
        raise typer.Exit(code=1)
    rprint("[green]✓[/green] Database initialized!")


@db_app.command("seed")
def db_seed(
    replace: bool = typer.Option(
        False, "--replace", help="Retire (deactivate) the existing catalog first"
    ),
) -> None:
    """Load the sample Web Development catalog (three modules per tier)."""
    from src.db.database import init_db, session_scope
    from src.db.seed import seed_catalog

    init_db()
    with session_scope() as session:
        created = seed_catalog(session, replace=replace)

    if created:
        rprint(f"[green]✓[/green] Seeded {created} modules")
    else:
        rprint("[yellow]⚠[/yellow] Catalog already populated (use --replace to reseed)")


# ========================================
# ADAPTIVE COMMANDS
# ========================================


@app.command("recommend")
def recommend(
    learner_id: str = typer.Argument(..., help="Learner identifier"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw recommendation payload"),
) -> None:
    """Show the next recommended module and quiz for a learner."""
    from src.adaptive import RecommendationError
    from src.db.database import session_scope

    with session_scope() as session:
        try:
            recommendation = _engine_for(session).recommend(learner_id)
        except RecommendationError as exc:
            rprint(f"[red]✗[/red] {exc}")
            raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(recommendation.to_dict()))
        return

    table = Table(title=f"Recommendation for {learner_id}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Difficulty", recommendation.difficulty_level.value)
    table.add_row("Module", recommendation.next_module_id or "[dim]none[/dim]")
    table.add_row("Quiz", recommendation.next_quiz_id or "[dim]none[/dim]")
    table.add_row("Confidence", f"{recommendation.confidence:.0%}")
    table.add_row("Learning path", " → ".join(recommendation.learning_path))
    console.print(table)
    rprint(f"\n{recommendation.reasoning}")


@app.command("profile")
def profile(
    learner_id: str = typer.Argument(..., help="Learner identifier"),
) -> None:
    """Show the learner profile built from recent activity."""
    from src.db.database import session_scope

    with session_scope() as session:
        learner = _engine_for(session).get_profile(learner_id)

    if learner is None:
        rprint(f"[yellow]⚠[/yellow] No activity recorded for {learner_id}")
        return

    table = Table(title=f"Profile: {learner_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Preferred difficulty", learner.preferred_difficulty.value)
    table.add_row("Average score", f"{learner.average_score:.1f}%")
    table.add_row("Success rate", f"{learner.success_rate:.0%}")
    table.add_row("Mastery level", f"{learner.mastery_level:.2f}")
    table.add_row("Confidence", f"{learner.confidence_score:.2f}")
    table.add_row("Current streak", str(learner.current_streak))
    table.add_row("Attempts", str(learner.total_attempts))
    table.add_row("Study time", f"{learner.total_study_time_seconds // 60} min")
    console.print(table)


@app.command("stats")
def stats(
    learner_id: str = typer.Argument(..., help="Learner identifier"),
) -> None:
    """Show dashboard statistics over a learner's full history."""
    from src.adaptive import summarize_progress
    from src.db.database import session_scope
    from src.db.repositories import SqlHistoryRepository

    with session_scope() as session:
        records = SqlHistoryRepository(session).find_by_learner(learner_id)

    summary = summarize_progress(records, passing_percentage=get_settings().passing_percentage)

    table = Table(title=f"Progress: {learner_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Attempts", str(summary.total_attempts))
    table.add_row("Passed", f"{summary.passed_attempts} ({summary.pass_rate:.0%})")
    table.add_row("Average score", f"{summary.average_score:.1f}%")
    table.add_row("Modules completed", str(summary.modules_completed))
    table.add_row("Quizzes completed", str(summary.quizzes_completed))
    table.add_row("Quiz average", f"{summary.quiz_average_score}%")
    table.add_row("Current streak", str(summary.current_streak))
    console.print(table)

    if summary.recent_activity:
        recent = Table(title="Recent activity")
        recent.add_column("Completed", style="dim")
        recent.add_column("Content")
        recent.add_column("Score", justify="right")
        for record in summary.recent_activity:
            recent.add_row(
                record.completed_at.strftime("%Y-%m-%d %H:%M"),
                record.quiz_id or record.module_id or "",
                f"{record.percentage}%",
            )
        console.print(recent)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind host (default: from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: from config)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the REST API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
