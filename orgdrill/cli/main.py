"""
Typer CLI for orgdrill.

Commands:
    orgdrill review [ROOT]     - Review every due exercise and definition
    orgdrill due [ROOT]        - List due items without starting a session
    orgdrill check [ROOT]      - Validate outline files (exit 1 on malformed items)
    orgdrill history ITEM_ID   - Show the rating log of one item

Usage:
    orgdrill --help
    orgdrill review ~/notes
    orgdrill review --continue-on-malformed
    ORGDRILL_DATABASE_URL=sqlite:///ratings.db orgdrill due
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from orgdrill import __version__
from orgdrill.config import Settings, get_settings
from orgdrill.core.errors import LocatorUnavailable, OrgDrillError, RunAborted
from orgdrill.db.rating_store import RatingStore
from orgdrill.delivery.terminal import TerminalDisplay
from orgdrill.study.study_service import StudyService

app = typer.Typer(
    name="orgdrill",
    help="Spaced-repetition review of exercises and definitions kept in org outlines",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

# Exit code for a missing precondition (search tool, store)
EXIT_PRECONDITION = 2


def configure_logging(settings: Settings) -> None:
    """Send loguru output to stderr, and to a rotating file when configured."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level="DEBUG",
            rotation="1 MB",
            retention=5,
            encoding="utf-8",
        )


def _settings(
    db: str | None = None,
    continue_on_malformed: bool | None = None,
    exercise_type: str | None = None,
    definition_type: str | None = None,
) -> Settings:
    """Settings from the environment with command-line overrides applied."""
    overrides = {
        "database_url": db,
        "continue_on_malformed": continue_on_malformed,
        "exercise_type_id": exercise_type,
        "definition_type_id": definition_type,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    try:
        settings = get_settings()
        if overrides:
            settings = Settings.model_validate({**settings.model_dump(), **overrides})
    except ValidationError as e:
        err_console.print(f"[red]Invalid configuration:[/] {escape(str(e))}")
        raise typer.Exit(EXIT_PRECONDITION) from e
    return settings


def _build_service(settings: Settings, store: RatingStore, interactive: bool = False) -> StudyService:
    display = TerminalDisplay(console, settings.key_bindings()) if interactive else None
    return StudyService(settings, store, display=display)


def _open_store(settings: Settings) -> RatingStore:
    try:
        return RatingStore(settings.database_url)
    except OrgDrillError as e:
        err_console.print(f"[red]Rating store unavailable:[/] {e}")
        raise typer.Exit(EXIT_PRECONDITION) from e


def _precondition_failed(e: LocatorUnavailable) -> typer.Exit:
    err_console.print(f"[red]Cannot search for outline files:[/] {e}")
    return typer.Exit(EXIT_PRECONDITION)


# Shared options
RootArg = Annotated[
    Path | None, typer.Argument(help="Directory to search (default: ORGDRILL_ROOT_DIR)", show_default=False)
]
DbOption = Annotated[str | None, typer.Option("--db", help="SQLAlchemy URL of the rating store")]
ExerciseOption = Annotated[str | None, typer.Option("--exercise-type", help="TYPE value marking exercises")]
DefinitionOption = Annotated[str | None, typer.Option("--definition-type", help="TYPE value marking definitions")]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"orgdrill {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool, typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version and exit")
    ] = False,
) -> None:
    """Review exercises and definitions at doubling intervals."""
    configure_logging(_settings())


# =============================================================================
# Commands
# =============================================================================


@app.command()
def review(
    root: RootArg = None,
    db: DbOption = None,
    continue_on_malformed: Annotated[
        bool,
        typer.Option("--continue-on-malformed", help="Skip files with malformed items instead of stopping"),
    ] = False,
    exercise_type: ExerciseOption = None,
    definition_type: DefinitionOption = None,
) -> None:
    """
    Start a review session over every due item.

    Examples:
        orgdrill review                      # Use ORGDRILL_ROOT_DIR
        orgdrill review ~/notes/networking   # Review one tree
    """
    settings = _settings(db, continue_on_malformed or None, exercise_type, definition_type)

    with _open_store(settings) as store:
        service = _build_service(settings, store, interactive=True)
        try:
            report = service.run(root)
        except LocatorUnavailable as e:
            raise _precondition_failed(e) from e
        except RunAborted as e:
            console.print(Panel(e.report.render(), title="Partial report", border_style="red"))
            err_console.print(f"[red]✗ {e.report.status}[/]")
            raise typer.Exit(1) from e

    console.print(Panel(report.render(), title="Report", border_style="cyan"))
    if report.items_presented == 0:
        console.print(f"[yellow]{report.status}[/]")
        time.sleep(settings.empty_delay_seconds)
    else:
        console.print(f"[green]✓ {report.status}[/]")


@app.command()
def due(
    root: RootArg = None,
    db: DbOption = None,
    exercise_type: ExerciseOption = None,
    definition_type: DefinitionOption = None,
) -> None:
    """List items due for review now."""
    settings = _settings(db, None, exercise_type, definition_type)

    with _open_store(settings) as store:
        service = _build_service(settings, store)
        try:
            items = service.due_items(root)
        except LocatorUnavailable as e:
            raise _precondition_failed(e) from e
        except OrgDrillError as e:
            err_console.print(f"[red]✗ {e}[/]")
            raise typer.Exit(1) from e

    if not items:
        console.print("[yellow]No items due for review.[/]")
        return

    table = Table(title=f"Due items ({len(items)})")
    table.add_column("Subject", style="cyan")
    table.add_column("Kind")
    table.add_column("ID", style="dim")
    table.add_column("Due since", style="green")
    for entry in items:
        table.add_row(
            entry.item.subject,
            entry.item.kind,
            entry.item.id,
            entry.next_review.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def check(
    root: RootArg = None,
    exercise_type: ExerciseOption = None,
    definition_type: DefinitionOption = None,
) -> None:
    """Validate every candidate outline file and report malformed items."""
    settings = _settings(None, None, exercise_type, definition_type)
    service = StudyService(settings)
    try:
        result = service.check(root)
    except LocatorUnavailable as e:
        raise _precondition_failed(e) from e

    for problem in result.problems:
        console.print(f"[red]✗[/] {problem}")
    summary = f"{result.files} files, {result.items} items, {len(result.problems)} problems"
    if not result.ok:
        console.print(f"[red]{summary}[/]")
        raise typer.Exit(1)
    console.print(f"[green]✓ {summary}[/]")


@app.command()
def history(
    item_id: Annotated[str, typer.Argument(help="Item ID (UUID)")],
    db: DbOption = None,
) -> None:
    """Show every rating recorded for an item."""
    settings = _settings(db)

    with _open_store(settings) as store:
        service = _build_service(settings, store)
        try:
            ratings = service.history(item_id)
        except OrgDrillError as e:
            err_console.print(f"[red]✗ {e}[/]")
            raise typer.Exit(1) from e
        next_review = service.scheduler.next_review(item_id) if ratings else None

    if not ratings:
        console.print(f"[yellow]No ratings for {item_id}.[/]")
        return

    table = Table(title=f"Ratings for {item_id}")
    table.add_column("Date (UTC)", style="cyan")
    table.add_column("Outcome")
    colors = {"success": "green", "failure": "red", "skip": "yellow"}
    for rating in ratings:
        outcome = rating.outcome.value
        table.add_row(rating.date.strftime("%Y-%m-%d %H:%M:%S"), f"[{colors[outcome]}]{outcome}[/]")
    console.print(table)
    if next_review is not None:
        console.print(f"Next review: [bold]{next_review.strftime('%Y-%m-%d %H:%M')}[/] UTC")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
