"""cardwise CLI — scheduling and study-analytics commands."""

import asyncio
import json
import logging
import sys
from collections.abc import Coroutine
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer

from cardwise.application.config import resolve_config
from cardwise.consts import LOG_FORMAT
from cardwise.domain.exceptions import StudyDataError, UnknownCardError
from cardwise.interface._common import _build_service, _path_str, _resolve_with_overrides

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cardwise: spaced-repetition scheduling and study statistics for flashcards.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage cardwise configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

DataFileOption = Annotated[
    Path | None,
    typer.Option(
        "--data-file",
        "-d",
        help="YAML or JSON study data file. Defaults to 'data_file' in config, or ./study.yaml.",
    ),
]


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. -v enables debug logging."
        ),
    ] = 0,
):
    """Global settings for cardwise."""
    ctx.ensure_object(dict)
    ctx.obj["verbose_bonus"] = verbose


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a service call, turning data errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except StudyDataError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e


def _config(ctx: typer.Context, data_file: Path | None):
    return _resolve_with_overrides(
        data_file=data_file,
        verbose_bonus=(ctx.obj or {}).get("verbose_bonus", 0),
    )


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


@app.command()
def due(ctx: typer.Context, data_file: DataFileOption = None):
    """Count the cards that are due for review now."""
    service = _build_service(_config(ctx, data_file))
    count = _run(service.get_due_count())
    typer.echo(f"Due cards: {count}")


@app.command()
def review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="ID of the card that was answered.")],
    performance: Annotated[
        float,
        typer.Option(
            "--performance",
            "-p",
            min=0,
            max=5,
            help="Recall quality from 0 (blackout) to 5 (perfect).",
        ),
    ],
    data_file: DataFileOption = None,
):
    """[bold green]Review[/bold green] a card and schedule its next review."""
    service = _build_service(_config(ctx, data_file))
    try:
        result = _run(service.review(card_id, performance))
    except UnknownCardError as e:
        typer.secho(f"Unknown card: {card_id}", fg="red", err=True)
        raise typer.Exit(1) from e

    verdict = "correct" if result.correct else "incorrect"
    color = "green" if result.correct else "yellow"
    typer.secho(f"{card_id}: {verdict}", fg=color)
    typer.echo(f"Next review in {result.interval_days} day(s)")
    if result.card.next_review is not None:
        typer.echo(f"Due: {result.card.next_review.isoformat()}")
    typer.echo(f"Difficulty: {result.card.difficulty_level:.2f}")


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


@app.command()
def stats(
    ctx: typer.Context,
    data_file: DataFileOption = None,
    best_streak: Annotated[
        int, typer.Option(help="Best streak recorded so far, carried into the summary.")
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show the overall study summary."""
    service = _build_service(_config(ctx, data_file))
    summary = _run(service.get_summary(best_streak=best_streak))

    if json_output:
        typer.echo(json.dumps(asdict(summary), indent=2))
        return

    typer.echo(f"Cards: {summary.total_cards}  Due: {summary.due_cards}")
    typer.echo(f"Sessions: {summary.total_sessions}  Cards studied: {summary.cards_studied}")
    typer.echo(f"Accuracy: {summary.accuracy}%")
    typer.echo(f"Streak: {summary.streak} day(s)  Best: {summary.best_streak}")
    typer.echo(f"Study time: {summary.total_study_minutes:.1f} min")
    for mode, count in sorted(summary.study_modes.items()):
        typer.echo(f"  {mode}: {count}")


@app.command()
def streak(ctx: typer.Context, data_file: DataFileOption = None):
    """Show the current daily study streak."""
    service = _build_service(_config(ctx, data_file))
    days = _run(service.get_streak())
    if days == 0:
        typer.secho("Streak: 0 (no session today)", fg="yellow")
    else:
        typer.secho(f"Streak: {days} day(s)", fg="green")


@app.command()
def daily(
    ctx: typer.Context,
    data_file: DataFileOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show reviews and correct answers per day."""
    service = _build_service(_config(ctx, data_file))
    rows = _run(service.get_daily_stats())

    if json_output:
        typer.echo(json.dumps([asdict(r) for r in rows], indent=2))
        return

    if not rows:
        typer.secho("No study sessions recorded.", fg="yellow")
        return
    for row in rows:
        typer.echo(f"{row.date}  reviews={row.reviews}  correct={row.correct}")


@app.command()
def weekly(
    ctx: typer.Context,
    data_file: DataFileOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show activity for the recent window (7 days by default)."""
    service = _build_service(_config(ctx, data_file))
    rows = _run(service.get_weekly_activity())

    if json_output:
        typer.echo(json.dumps([asdict(r) for r in rows], indent=2))
        return

    for row in rows:
        typer.echo(
            f"{row.date}  cards={row.cards_studied}  "
            f"accuracy={row.accuracy:.1f}%  time={row.study_seconds / 60:.1f}min"
        )


@app.command()
def categories(
    ctx: typer.Context,
    data_file: DataFileOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show progress per category, from each category's latest session."""
    service = _build_service(_config(ctx, data_file))
    progress = _run(service.get_category_progress())

    if json_output:
        rows = {
            category_id: {
                **asdict(item),
                "last_studied": item.last_studied.isoformat() if item.last_studied else None,
            }
            for category_id, item in progress.items()
        }
        typer.echo(json.dumps(rows, indent=2))
        return

    if not progress:
        typer.secho("No categorized sessions recorded.", fg="yellow")
        return
    for category_id, item in progress.items():
        last = item.last_studied.isoformat() if item.last_studied else "never finished"
        typer.echo(
            f"{category_id}  sessions={item.sessions}  cards={item.cards_studied}  "
            f"accuracy={item.accuracy:.1f}%  last={last}"
        )


@app.command()
def achievements(
    ctx: typer.Context,
    data_file: DataFileOption = None,
    completed: Annotated[
        list[str] | None,
        typer.Option("--completed", "-c", help="IDs of achievements already awarded."),
    ] = None,
):
    """Show progress towards each achievement."""
    service = _build_service(_config(ctx, data_file))
    progress = _run(service.get_achievements(completed or []))

    for item in progress:
        a = item.achievement
        mark = "x" if item.completed else " "
        line = f"[{mark}] {a.title} ({a.tier}): {item.progress:g}/{a.goal}"
        if item.newly_completed:
            typer.secho(f"{line}  NEW", fg="green")
        else:
            typer.echo(line)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    port: Annotated[int, typer.Option(help="Port to bind the server to.")] = 8777,
    host: Annotated[str, typer.Option(help="Host to bind the server to.")] = "127.0.0.1",
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    logger.info(f"Starting cardwise server on {host}:{port}")
    uvicorn.run("cardwise.server:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = resolve_config()
    d = {k: _path_str(v) for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
