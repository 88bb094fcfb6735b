"""
Typer CLI for the kidlearn adaptive engine.

Commands:
    kidlearn recommend CONTEXT.json             - Next difficulty + weighted activities
    kidlearn recommend CONTEXT.json --offline   - Same, local heuristic only
    kidlearn rank ACTIVITIES.json CONTEXT.json  - Rank a catalog for a context
    kidlearn adjust --current BEGINNER --success 0.9 --attempts 1
                                                - Evaluate the difficulty rule directly
    kidlearn info                               - Show active configuration

Usage:
    kidlearn --help
    kidlearn recommend examples/context.json
    kidlearn rank catalog.json context.json --offline
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from kidlearn.adaptive.difficulty import adjust_difficulty, describe_difficulty_change
from kidlearn.adaptive.models import (
    Activity,
    AdaptiveContext,
    DifficultyLevel,
    RankedActivity,
    RecommendationSource,
    SensoryPreference,
)
from kidlearn.adaptive.payload import build_recommendation_payload
from kidlearn.adaptive.provider import AdaptiveState, RecommendationProvider
from kidlearn.adaptive.ranking import apply_recommendation
from kidlearn.core.logging_config import configure_logging

app = typer.Typer(
    help="kidlearn CLI: adaptive difficulty recommendations",
    no_args_is_help=True,
)

console = Console()


# ========================================
# Helpers
# ========================================


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        rprint(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(1)


def _load_context(path: Path) -> AdaptiveContext:
    try:
        return AdaptiveContext.model_validate(_load_json(path))
    except ValueError as e:
        rprint(f"[red]Invalid adaptive context in {path}:[/red]\n{e}")
        raise typer.Exit(1)


def _load_activities(path: Path) -> list[Activity]:
    data = _load_json(path)
    if not isinstance(data, list):
        rprint(f"[red]{path} must contain a JSON list of activities[/red]")
        raise typer.Exit(1)
    try:
        return [Activity.model_validate(item) for item in data]
    except ValueError as e:
        rprint(f"[red]Invalid activity in {path}:[/red]\n{e}")
        raise typer.Exit(1)


async def _fetch_state(context: AdaptiveContext) -> AdaptiveState:
    async with RecommendationProvider.from_settings(get_settings()) as provider:
        return await provider.set_context(context)


def _resolve_state(context: AdaptiveContext, offline: bool) -> AdaptiveState:
    if offline:
        return AdaptiveState(
            recommendation=build_recommendation_payload(context),
            source=RecommendationSource.HEURISTIC,
        )
    return asyncio.run(_fetch_state(context))


def _print_state(state: AdaptiveState) -> None:
    recommendation = state.recommendation
    if recommendation is None:
        rprint(f"[red]{state.error or 'No recommendation available'}[/red]")
        return

    rprint(
        f"\n[bold]Next difficulty:[/bold] [cyan]{recommendation.next_difficulty.value}[/cyan]"
        f"  [dim](source: {state.source.value})[/dim]"
    )

    table = Table(title=f"Recommendations for {recommendation.child_id}")
    table.add_column("Category", style="cyan")
    table.add_column("Difficulty")
    table.add_column("Weight", justify="right", style="green")
    table.add_column("Reason")
    table.add_column("Activity", style="dim")

    for rec in recommendation.recommendations:
        table.add_row(
            rec.category.value,
            rec.difficulty.value,
            f"{rec.weight:.2f}",
            rec.reason,
            rec.suggested_activity_id or "",
        )

    console.print(table)

    for line in recommendation.rationale:
        rprint(f"  [dim]- {line}[/dim]")

    for warning in recommendation.escalation_warnings or ():
        rprint(f"[bold yellow]! {warning}[/bold yellow]")

    if state.error:
        rprint(f"[yellow]{state.error}[/yellow]")


# ========================================
# Commands
# ========================================


@app.command("recommend")
def recommend(
    context_file: Path = typer.Argument(..., help="JSON file with an adaptive context"),
    offline: bool = typer.Option(False, "--offline", help="Use the local heuristic only"),
) -> None:
    """Recommend the next difficulty and weighted activities for a context."""
    context = _load_context(context_file)
    state = _resolve_state(context, offline)
    _print_state(state)

    if state.recommendation is None:
        raise typer.Exit(1)


@app.command("rank")
def rank(
    activities_file: Path = typer.Argument(..., help="JSON list of catalog activities"),
    context_file: Path = typer.Argument(..., help="JSON file with an adaptive context"),
    offline: bool = typer.Option(False, "--offline", help="Use the local heuristic only"),
) -> None:
    """Rank catalog activities with the recommendation for a context."""
    activities = _load_activities(activities_file)
    context = _load_context(context_file)
    state = _resolve_state(context, offline)

    if state.error:
        rprint(f"[yellow]{state.error}[/yellow]")

    ranked = apply_recommendation(activities, state.recommendation)

    table = Table(title=f"Ranked activities ({len(ranked)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Activity", style="cyan")
    table.add_column("Category")
    table.add_column("Difficulty")
    table.add_column("Suggested")
    table.add_column("Weight", justify="right", style="green")

    for position, activity in enumerate(ranked, start=1):
        if isinstance(activity, RankedActivity):
            suggested = activity.suggested_difficulty.value
            if activity.is_adjusted:
                suggested = f"[bold magenta]{suggested}[/bold magenta]"
            weight = f"{activity.adaptive_weight:.2f}"
        else:
            suggested, weight = "", ""

        table.add_row(
            str(position),
            activity.title or activity.id,
            activity.category.value,
            activity.difficulty.value,
            suggested,
            weight,
        )

    console.print(table)


@app.command("adjust")
def adjust(
    current: DifficultyLevel = typer.Option(..., "--current", case_sensitive=False, help="Current difficulty"),
    success: Optional[float] = typer.Option(None, "--success", min=0.0, max=1.0, help="Latest success rate"),
    attempts: Optional[int] = typer.Option(None, "--attempts", min=0, help="Latest attempts count"),
    emotion: Optional[str] = typer.Option(None, "--emotion", help="Latest emotional state tag"),
    low_stimulation: bool = typer.Option(False, "--low-stimulation", help="Child prefers low stimulation"),
) -> None:
    """Evaluate the difficulty adjustment rule for one signal."""
    preferences = [SensoryPreference.LOW_STIMULATION] if low_stimulation else None
    next_level = adjust_difficulty(current, success, attempts, emotion, preferences)

    rprint(f"{current.value} -> [bold cyan]{next_level.value}[/bold cyan]")
    rprint(f"[dim]{describe_difficulty_change(current, next_level)}[/dim]")


@app.command("info")
def show_info() -> None:
    """Show configuration."""
    settings = get_settings()
    config = settings.get_adaptive_config()

    table = Table(title="kidlearn Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for section, values in config.items():
        for name, value in values.items():
            table.add_row(f"{section}.{name}", "Not set" if value is None else str(value))

    table.add_row("Log Level", settings.log_level)
    table.add_row("API", f"{settings.api_host}:{settings.api_port}")

    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings(), level="WARNING", fmt="<level>{message}</level>")

    app()


if __name__ == "__main__":
    main()
