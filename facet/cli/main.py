"""
Typer CLI for the facet mastery engine.

Commands:
    facet analyze PROFILE.json      - Mastery table, weaknesses and suggestion
    facet schedule RATING...        - SM-2 progression for a fresh concept
    facet select DECK.json          - Variant weights and the selected variant
    facet dimensions                - The six dimensions and what they test

Usage:
    facet --help
    facet analyze profile.json
    facet schedule good good again easy
    facet select deck.json --seed 7 --failures 1
"""

import random
import sys
from datetime import UTC, datetime
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings
from facet.cli.loaders import load_deck, load_profile
from facet.core.dimensions import (
    ALL_DIMENSIONS,
    DIFFICULTY_LABELS,
    DIMENSION_ACTION_VERBS,
    DIMENSION_DESCRIPTIONS,
    DIMENSION_DISPLAY_NAMES,
)
from facet.core.models import InvalidRatingError, Rating
from facet.delivery.scheduler import SM2Config, SM2Scheduler
from facet.delivery.variant_selector import SelectionConfig, VariantSelector
from facet.learning.weakness_analyzer import WeaknessAnalyzer, WeaknessConfig

app = typer.Typer(
    help="facet: adaptive mastery engine for multi-dimensional spaced repetition",
    no_args_is_help=True,
)

console = Console()


def _status_for(weak: set, fragile: set, dimension) -> str:
    if dimension in weak:
        return "[red]weak[/red]"
    if dimension in fragile:
        return "[yellow]fragile[/yellow]"
    return "[green]ok[/green]"


@app.command("analyze")
def analyze(
    profile_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Mastery profile JSON"),
):
    """
    Analyze a mastery profile.

    Shows accuracy, speed and combined mastery per dimension, then the
    overall health and a single focus suggestion.
    """
    try:
        profile = load_profile(profile_path)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid profile:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    analyzer = WeaknessAnalyzer(WeaknessConfig.from_settings(get_settings()))
    analysis = analyzer.analyze(profile)
    weak = {w.dimension for w in analysis.weaknesses}
    fragile = set(analysis.fragile_dimensions)

    table = Table(title="Mastery Profile")
    table.add_column("Dimension")
    table.add_column("Accuracy", justify="right")
    table.add_column("Speed", justify="right")
    table.add_column("Combined", justify="right")
    table.add_column("Reviews", justify="right")
    table.add_column("Status")

    for dimension in ALL_DIMENSIONS:
        mastery = profile[dimension]
        table.add_row(
            DIMENSION_DISPLAY_NAMES[dimension],
            f"{mastery.accuracy_ewma:.0%}",
            f"{mastery.speed_ewma:.0%}",
            f"{analyzer.combined(mastery):.0%}",
            str(mastery.recent_count),
            _status_for(weak, fragile, dimension),
        )

    console.print(table)

    health = analysis.overall_health
    console.print(f"Overall health: [{health.color}]{health.value}[/{health.color}]")
    for weakness in analysis.weaknesses:
        console.print(f"  [dim]{weakness.severity.value}:[/dim] {weakness.reason}")
    if analysis.is_dodging_pattern:
        console.print("[yellow]Dodging pattern detected[/yellow]")
    console.print(f"\n[bold]Suggestion:[/bold] {analyzer.suggestion(analysis)}")


@app.command("schedule")
def schedule(
    ratings: list[str] = typer.Argument(..., help="Ratings in order: again, hard, good, easy"),
):
    """
    Show how SM-2 schedules a new concept through a sequence of ratings.

    Examples:
        facet schedule good good again easy
    """
    try:
        parsed = [Rating.from_string(r) for r in ratings]
    except InvalidRatingError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    scheduler = SM2Scheduler(SM2Config.from_settings(get_settings()))
    now = datetime.now(UTC)
    entry = scheduler.create_initial_schedule("concept", now)

    table = Table(title="SM-2 Progression")
    table.add_column("#", justify="right")
    table.add_column("Rating")
    table.add_column("Interval (days)", justify="right")
    table.add_column("Ease", justify="right")
    table.add_row("0", "[dim]new[/dim]", f"{entry.interval_days:.2f}", f"{entry.ease_factor:.2f}")

    for i, rating in enumerate(parsed, start=1):
        entry = scheduler.schedule_next_review(entry, rating, now)
        table.add_row(str(i), rating.value, f"{entry.interval_days:.2f}", f"{entry.ease_factor:.2f}")

    console.print(table)


@app.command("select")
def select(
    deck_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Deck JSON"),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Seed for a reproducible draw"),
    failures: int | None = typer.Option(
        None, "--failures", "-f", min=0, help="Consecutive failures (overrides the deck)"
    ),
):
    """
    Weigh a concept's variants and draw the next one.

    Applies the maintenance-rep and confidence-card rails using the
    deck's session history.
    """
    try:
        deck = load_deck(deck_path)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid deck:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    variants = deck.domain_variants()
    profile = deck.domain_profile()
    session_dimensions = deck.domain_session_dimensions()
    consecutive_failures = deck.consecutive_failures if failures is None else failures

    rng = random.Random(seed).random if seed is not None else None
    selector = VariantSelector(SelectionConfig.from_settings(get_settings()), rng)
    weights = selector.weights(variants, profile, consecutive_failures)

    table = Table(title=f"Variants for {escape(deck.concept.name)}")
    table.add_column("Variant")
    table.add_column("Dimension")
    table.add_column("Difficulty")
    table.add_column("Weight", justify="right")
    for variant, weight in zip(variants, weights):
        table.add_row(
            escape(variant.id),
            DIMENSION_DISPLAY_NAMES[variant.dimension],
            DIFFICULTY_LABELS[variant.difficulty],
            f"{weight:.3f}",
        )
    console.print(table)

    if not selector.enforce_session_dimension_cap(session_dimensions):
        capped = ", ".join(sorted(d.value for d in selector.capped_dimensions(session_dimensions)))
        console.print(f"[yellow]Session cap exceeded:[/yellow] {capped}")

    selected = None
    if selector.should_insert_confidence_card(consecutive_failures):
        selected = selector.select_confidence_card(variants, profile)
        if selected:
            console.print("[cyan]Confidence card inserted[/cyan]")
    if selected is None:
        selected = selector.select_variant_with_maintenance(
            variants, profile, consecutive_failures, session_dimensions
        )

    if selected is None:
        console.print("[dim]No variant available[/dim]")
        raise typer.Exit(0)

    console.print(f"\n[bold]Selected:[/bold] {escape(selected.id)} ({DIMENSION_DISPLAY_NAMES[selected.dimension]})")
    if selected.front:
        console.print(f"[dim]{escape(selected.front)}[/dim]")


@app.command("dimensions")
def dimensions():
    """List the six dimensions with their aliases and what each one tests."""
    table = Table(title="Dimensions")
    table.add_column("Dimension")
    table.add_column("Alias")
    table.add_column("Action")
    table.add_column("Tests", overflow="fold")

    for dimension in ALL_DIMENSIONS:
        table.add_row(
            DIMENSION_DISPLAY_NAMES[dimension],
            dimension.short_name,
            DIMENSION_ACTION_VERBS[dimension],
            DIMENSION_DESCRIPTIONS[dimension],
        )

    console.print(table)


def configure_logging() -> None:
    """Route loguru output per settings."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=5)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
