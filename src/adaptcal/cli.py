"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from adaptcal.config.settings import Settings, default_config_path
from adaptcal.data.loader import HistoryLoader
from adaptcal.profiles.body_calc import plan_daily_calorie_goal
from adaptcal.tracking.diagnostics import build_metrics, metrics_to_dict, prepare_inputs
from adaptcal.tracking.maintenance import calibrate, formula_estimate, resolve_active_maintenance
from adaptcal.tracking.models import (
    EnergyLogSample,
    EngineConfig,
    EstimationMethod,
    Metrics,
    WeightSample,
)

app = typer.Typer(
    help="Adaptive maintenance calories and weight projections",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show or create the settings file")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict) -> None:
    """Output JSON response to stdout."""
    print(json.dumps(response, indent=2, default=str))


def setup_logging(verbose: bool) -> None:
    """Route engine debug logging through Rich when --verbose is set."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def parse_as_of(as_of: Optional[str]) -> date:
    if as_of is None:
        return date.today()
    try:
        return date.fromisoformat(as_of)
    except ValueError:
        console.print(f"[red]Invalid date '{as_of}', expected YYYY-MM-DD[/red]")
        raise typer.Exit(1)


def load_inputs(
    weights_csv: Path,
    logs_csv: Optional[Path],
    config_path: Optional[Path],
    today: date,
    warn: bool = True,
) -> tuple[list[WeightSample], list[EnergyLogSample], EngineConfig]:
    """Load histories as known on ``today`` and the engine config.

    Exits with code 1 on unreadable files or invalid settings.
    """
    loader = HistoryLoader()
    try:
        weights = loader.load_weights(weights_csv)
        logs = loader.load_logs(logs_csv) if logs_csv else []
        config = Settings.load(config_path).to_engine_config()
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    raw_count = len(weights)
    weights, logs = prepare_inputs(weights, logs, config, today)
    skipped = raw_count - len(weights)
    if skipped and warn:
        console.print(
            f"[yellow]Skipped {skipped} invalid or future weigh-in(s)[/yellow]"
        )
    return weights, logs, config


def render_metrics(metrics: Metrics) -> None:
    """Print a Metrics snapshot with Rich."""
    if metrics.current_weight_kg is None:
        console.print("[yellow]No weigh-ins logged yet.[/yellow]")
    else:
        console.print(f"Current weight: [bold]{metrics.current_weight_kg:.1f} kg[/bold]")

    if metrics.estimated_maintenance_kcal is not None:
        console.print(
            f"Estimated maintenance: [cyan]{metrics.estimated_maintenance_kcal}[/cyan] kcal/day"
        )
    if metrics.active_maintenance_kcal is not None and metrics.maintenance_source:
        console.print(
            f"Active maintenance: [cyan]{metrics.active_maintenance_kcal}[/cyan] kcal/day "
            f"[dim]({metrics.maintenance_source.value})[/dim]"
        )

    change_table = Table(title="Weight Change")
    change_table.add_column("Window")
    change_table.add_column("Change (kg)", justify="right")
    for label, change in metrics.weight_change_by_window.items():
        change_table.add_row(label, "--" if change is None else f"{change:+.1f}")
    console.print(change_table)

    projection_table = Table(title="Projections (next 60 days)")
    projection_table.add_column("Method")
    projection_table.add_column("kg/week", justify="right")
    projection_table.add_column("Day 30", justify="right")
    projection_table.add_column("Day 60", justify="right")
    for method in EstimationMethod:
        series = metrics.series(method)
        if not series:
            continue
        rate = metrics.daily_rates.get(method)
        projection_table.add_row(
            method.display_name,
            "no data" if rate is None else f"{rate * 7:+.2f}",
            f"{series[30].weight_kg:.1f}",
            f"{series[-1].weight_kg:.1f}",
        )
    console.print(projection_table)

    if metrics.goal_reached:
        body = "[green]Target reached[/green]"
    elif metrics.days_remaining is not None:
        body = f"[bold]{metrics.days_remaining}[/bold] days to goal"
    else:
        body = "[yellow]No estimate[/yellow]"
    body += f"\n[dim]{metrics.logic_description}[/dim]"
    if metrics.progress_warning_message:
        body += f"\n{metrics.progress_warning_message}"
    console.print(Panel(body, title="Goal Progress"))


# ============================================================================
# Commands
# ============================================================================


@app.command()
def metrics(
    weights_csv: Path = typer.Option(..., "--weights", "-w", help="Weight CSV (date,weight_kg)"),
    logs_csv: Optional[Path] = typer.Option(
        None, "--logs", "-l", help="Calorie log CSV (date,calories_consumed,calories_burned)"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML"),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Evaluation date (YYYY-MM-DD)"),
    as_json: bool = typer.Option(False, "--json", help="Output JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Compute maintenance, weight changes, projections and time to goal."""
    setup_logging(verbose)
    today = parse_as_of(as_of)
    weights, logs, config = load_inputs(
        weights_csv, logs_csv, config_path, today, warn=not as_json
    )

    snapshot = build_metrics(weights, logs, config, today)

    if as_json:
        output_json(metrics_to_dict(snapshot))
    else:
        render_metrics(snapshot)


@app.command()
def maintenance(
    weights_csv: Path = typer.Option(..., "--weights", "-w", help="Weight CSV (date,weight_kg)"),
    logs_csv: Optional[Path] = typer.Option(None, "--logs", "-l", help="Calorie log CSV"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML"),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Evaluation date (YYYY-MM-DD)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Show formula, calibrated and active maintenance calories."""
    setup_logging(verbose)
    today = parse_as_of(as_of)
    weights, logs, config = load_inputs(weights_csv, logs_csv, config_path, today)

    table = Table(title="Maintenance Calories")
    table.add_column("Source")
    table.add_column("kcal/day", justify="right")
    table.add_column("Detail")

    formula = formula_estimate(weights, config)
    table.add_row("Formula", "--" if formula is None else str(formula), "")

    calibration = calibrate(weights, logs, today, config.min_baseline_days)
    if not config.calorie_counting_enabled:
        table.add_row("App estimate", "--", "calorie counting disabled")
    elif calibration is None:
        table.add_row("App estimate", "--", "needs 2+ weigh-ins and logged intake (30 days)")
    else:
        table.add_row(
            "App estimate",
            str(calibration.maintenance_kcal),
            f"{calibration.valid_days} logged days, avg intake "
            f"{calibration.avg_daily_intake_kcal:.0f}, implied "
            f"{calibration.implied_daily_delta_kcal:+.0f} kcal/day",
        )

    active = resolve_active_maintenance(weights, logs, config, today)
    table.add_row("Active", str(active.kcal), active.source.value)
    console.print(table)


@app.command()
def plan(
    target_date: str = typer.Option(..., "--target-date", help="Goal date (YYYY-MM-DD)"),
    weights_csv: Path = typer.Option(..., "--weights", "-w", help="Weight CSV (date,weight_kg)"),
    logs_csv: Optional[Path] = typer.Option(None, "--logs", "-l", help="Calorie log CSV"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML"),
    as_of: Optional[str] = typer.Option(None, "--as-of", help="Planning date (YYYY-MM-DD)"),
) -> None:
    """Suggest a daily calorie goal that reaches the target weight by a date."""
    today = parse_as_of(as_of)
    goal_day = parse_as_of(target_date)
    weights, logs, config = load_inputs(weights_csv, logs_csv, config_path, today)
    if not weights:
        console.print("[red]Log at least one weigh-in first.[/red]")
        raise typer.Exit(1)

    active = resolve_active_maintenance(weights, logs, config, today)
    result = plan_daily_calorie_goal(
        maintenance_kcal=active.kcal,
        current_weight_kg=weights[-1].weight_kg,
        target_weight_kg=config.target_weight_kg,
        target_date=goal_day,
        today=today,
        goal_type=config.goal_type,
        gender=config.gender,
    )

    console.print(f"Maintenance: {active.kcal} kcal/day ({active.source.value})")
    console.print(
        f"Daily goal: [bold]{result.daily_calorie_goal}[/bold] kcal "
        f"({result.daily_adjustment:+d} kcal/day)"
    )
    if result.floored:
        console.print(
            "[yellow]Raised to the safe minimum; the target date will be missed.[/yellow]"
        )


@config_app.command("show")
def config_show(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML"),
) -> None:
    """Print the effective settings."""
    try:
        settings = Settings.load(config_path)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    output_json(settings.to_dict())


@config_app.command("init")
def config_init(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a settings file with default values."""
    target = config_path or default_config_path()
    if target.exists() and not force:
        console.print(f"[yellow]{target} already exists (use --force to overwrite)[/yellow]")
        raise typer.Exit(1)
    Settings().save(target)
    console.print(f"[green]Wrote {target}[/green]")


if __name__ == "__main__":
    app()
