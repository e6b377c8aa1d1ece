"""
Typer CLI for the SkillRoute review engine.

Commands:
    skillroute init-db                               - Create database tables
    skillroute enroll USER ROADMAP TOPIC QUESTION    - Enrol a question for review
    skillroute answer ITEM_ID --correct -t 4000      - Record an answer
    skillroute due USER                              - Show the review queue
    skillroute stats USER                            - Show review statistics
    skillroute skills USER                           - Show per-topic mastery
    skillroute diagnostic BANK_JSON ROADMAP          - Pick a diagnostic quiz
"""

from __future__ import annotations

import random
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from skillroute.config import get_settings
from skillroute.core.errors import InvalidReviewItemError, ReviewItemNotFoundError, StaleReviewItemError
from skillroute.core.models import AnswerEvent
from skillroute.db.database import get_engine, init_db, make_session_factory
from skillroute.db.repository import ReviewItemRepository
from skillroute.learning.review_service import ReviewService
from skillroute.quiz.question_bank import QuestionBank

app = typer.Typer(
    name="skillroute",
    help="SkillRoute: spaced repetition and skill tracking for learning roadmaps",
    no_args_is_help=True,
)
console = Console()


def _service() -> ReviewService:
    repository = ReviewItemRepository(make_session_factory(get_engine()))
    return ReviewService(repository, settings=get_settings())


def _when(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


# =============================================================================
# Commands
# =============================================================================


@app.command("init-db")
def init_db_command() -> None:
    """Create the review item tables."""
    init_db(get_engine())
    console.print("[green]Database initialized[/green]")


@app.command()
def enroll(
    user: str = typer.Argument(..., help="Learner id"),
    roadmap: str = typer.Argument(..., help="Roadmap id"),
    topic: str = typer.Argument(..., help="Roadmap topic (node) id"),
    question: str = typer.Argument(..., help="Question id"),
) -> None:
    """Enrol a question for spaced review."""
    service = _service()
    item = service.store.enroll(
        user, roadmap, topic, question, initial_easiness=service.settings.sm2_initial_easiness
    )
    console.print(f"[green]Enrolled[/green] {item.id} (next review {_when(item.next_review_at)})")


@app.command()
def answer(
    item_id: str = typer.Argument(..., help="Review item id"),
    correct: bool = typer.Option(..., "--correct/--incorrect", help="Whether the answer was right"),
    time_ms: float = typer.Option(0.0, "--time-ms", "-t", help="Response time in milliseconds"),
) -> None:
    """Record an answer and reschedule the item."""
    service = _service()
    try:
        outcome = service.process_answer(
            AnswerEvent(item_id=item_id, correct=correct, response_time_ms=time_ms)
        )
    except ReviewItemNotFoundError:
        console.print(f"[bold red]Review item not found: {item_id}[/bold red]")
        raise typer.Exit(1)
    except StaleReviewItemError:
        console.print(f"[bold yellow]Item {item_id} was updated concurrently, try again[/bold yellow]")
        raise typer.Exit(1)
    except InvalidReviewItemError as e:
        console.print(f"[bold red]Stored review item is malformed: {e}[/bold red]")
        raise typer.Exit(1)

    style = "green" if outcome.quality >= 3 else "red"
    console.print(
        Panel(
            f"Quality: [{style}]{outcome.quality}[/{style}]\n"
            f"Easiness: {outcome.result.easiness_factor:.2f}\n"
            f"Interval: {outcome.result.interval} day(s)\n"
            f"Repetitions: {outcome.result.repetitions}\n"
            f"Next review: {_when(outcome.result.next_review_at)}",
            title=f"[bold]{item_id}[/bold]",
            border_style=style,
        )
    )


@app.command()
def due(
    user: str = typer.Argument(..., help="Learner id"),
    roadmap: Optional[str] = typer.Option(None, "--roadmap", "-r", help="Restrict to one roadmap"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum items to show"),
) -> None:
    """Show items due for review, most overdue first."""
    items = _service().due_queue(user, roadmap, max_items=limit)
    if not items:
        console.print("[green]Nothing due. Come back later.[/green]")
        return

    table = Table(title=f"Due reviews for {user}")
    table.add_column("ID", style="dim")
    table.add_column("Topic")
    table.add_column("Question")
    table.add_column("Due since")
    table.add_column("EF", justify="right")
    table.add_column("Reps", justify="right")

    for item in items:
        table.add_row(
            item.id,
            item.node_id,
            item.question_id or "-",
            _when(item.next_review_at),
            f"{item.easiness_factor:.2f}",
            str(item.repetitions),
        )
    console.print(table)


@app.command()
def stats(
    user: str = typer.Argument(..., help="Learner id"),
    roadmap: Optional[str] = typer.Option(None, "--roadmap", "-r", help="Restrict to one roadmap"),
) -> None:
    """Show review statistics."""
    result = _service().review_stats(user, roadmap)

    table = Table(title=f"Review stats for {user}", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total", str(result.total))
    table.add_row("Due now", f"[yellow]{result.due}[/yellow]")
    table.add_row("Upcoming", str(result.upcoming))
    table.add_row("Mastered", f"[green]{result.mastered}[/green]")
    table.add_row("Learning", str(result.learning))
    table.add_row("Struggling", f"[red]{result.struggling}[/red]")
    table.add_row("Avg difficulty", f"{result.avg_difficulty}%")
    table.add_row("Retention", f"{result.retention}%")
    console.print(table)


@app.command()
def skills(
    user: str = typer.Argument(..., help="Learner id"),
    roadmap: Optional[str] = typer.Option(None, "--roadmap", "-r", help="Restrict to one roadmap"),
) -> None:
    """Show per-topic proficiency and status."""
    summaries = _service().skill_summaries(user, roadmap)
    if not summaries:
        console.print("[dim]No review items yet.[/dim]")
        return

    table = Table(title=f"Skills for {user}")
    table.add_column("Topic")
    table.add_column("Proficiency", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Status")
    table.add_column("Due", justify="right")

    for summary in summaries:
        status = summary.status
        table.add_row(
            summary.node_label,
            f"{summary.proficiency:.0%}",
            f"{summary.confidence:.0%}",
            f"{status.emoji} [{status.color}]{status.display_name}[/{status.color}]",
            str(summary.reviews_due),
        )
    console.print(table)


@app.command()
def diagnostic(
    bank_json: Path = typer.Argument(..., exists=True, dir_okay=False, help="Question bank JSON file"),
    roadmap: str = typer.Argument(..., help="Roadmap id"),
    count: Optional[int] = typer.Option(None, "--count", "-n", help="Number of questions"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for a repeatable selection"),
) -> None:
    """Pick a topic-balanced diagnostic quiz from a question bank."""
    settings = get_settings()
    bank = QuestionBank.from_json(bank_json)
    rng = random.Random(seed) if seed is not None else None

    selected = bank.diagnostic(
        roadmap,
        count=settings.diagnostic_default_count if count is None else count,
        rng=rng,
        iteration_factor=settings.diagnostic_iteration_factor,
    )
    if not selected:
        console.print(f"[yellow]No questions for roadmap {roadmap}[/yellow]")
        return

    table = Table(title=f"Diagnostic: {roadmap} ({len(selected)} questions)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID")
    table.add_column("Topic")
    table.add_column("Difficulty")
    table.add_column("Question")

    for n, question in enumerate(selected, 1):
        table.add_row(str(n), question.id, question.topic_id, question.difficulty, question.question)
    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    settings = get_settings()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="10 MB", retention=5)

    app()


if __name__ == "__main__":
    main()
