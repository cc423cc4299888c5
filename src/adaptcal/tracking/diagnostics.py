"""Metrics snapshot assembly and text output.

``build_metrics`` is the single recompute entry point: a pure function of
the weight history, the calorie log history and the configuration. Callers
rebuild the whole snapshot whenever any of those change.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from types import MappingProxyType
from typing import Any, Optional

from adaptcal.data.quality import sanitize_inputs
from adaptcal.tracking.goals import evaluate_goal_progress
from adaptcal.tracking.maintenance import calibrated_maintenance, resolve_active_maintenance
from adaptcal.tracking.models import (
    EnergyLogSample,
    EngineConfig,
    EstimationMethod,
    Metrics,
    WeightSample,
)
from adaptcal.tracking.projection import project_all
from adaptcal.tracking.windows import weight_changes_by_window

logger = logging.getLogger(__name__)


def prepare_inputs(
    weights: Iterable[WeightSample],
    logs: Iterable[EnergyLogSample],
    config: EngineConfig,
    today: date,
) -> tuple[list[WeightSample], list[EnergyLogSample]]:
    """Sanitize histories and clip them to what is known on ``today``.

    Samples dated after ``today`` are dropped. Logs are dropped entirely when
    calorie counting is disabled, so no estimate is drawn from them.

    Returns:
        (weights, logs) as new lists sorted ascending by date
    """
    clean_weights, clean_logs, _ = sanitize_inputs(weights, logs)
    clean_weights = [w for w in clean_weights if w.date <= today]
    if config.calorie_counting_enabled:
        clean_logs = [log for log in clean_logs if log.date <= today]
    else:
        clean_logs = []
    return clean_weights, clean_logs


def build_metrics(
    weights: Iterable[WeightSample],
    logs: Iterable[EnergyLogSample],
    config: EngineConfig,
    today: Optional[date] = None,
) -> Metrics:
    """Compute a complete Metrics snapshot.

    Samples dated after ``today`` are ignored. Inputs are never mutated.

    Args:
        weights: Weight history, any order
        logs: Daily calorie logs, any order
        config: Engine configuration
        today: Evaluation date (default: date.today())

    Returns:
        New immutable Metrics
    """
    if today is None:
        today = date.today()

    clean_weights, clean_logs = prepare_inputs(weights, logs, config, today)

    current = clean_weights[-1].weight_kg if clean_weights else None

    calibrated = None
    if config.calorie_counting_enabled:
        calibrated = calibrated_maintenance(
            clean_weights, clean_logs, today, config.min_baseline_days
        )

    active = resolve_active_maintenance(
        clean_weights, clean_logs, config, today, calibrated=calibrated
    )
    projections = project_all(clean_weights, clean_logs, config, today, active.kcal)
    progress = evaluate_goal_progress(current, config, projections, active.kcal)

    logger.debug(
        "Metrics at %s: maintenance=%d (%s), days_remaining=%s",
        today,
        active.kcal,
        active.source.value,
        progress.days_remaining,
    )

    points = tuple(p for projection in projections.values() for p in projection.points)

    return Metrics(
        estimated_maintenance_kcal=calibrated,
        weight_change_by_window=MappingProxyType(
            weight_changes_by_window(clean_weights, today)
        ),
        projections=points,
        days_remaining=progress.days_remaining,
        logic_description=progress.logic_description,
        progress_warning_message=progress.progress_warning_message,
        goal_reached=progress.goal_reached,
        current_weight_kg=current,
        active_maintenance_kcal=None if active.is_policy_default else active.kcal,
        maintenance_source=active.source,
        daily_rates=MappingProxyType(
            {m: p.rate_kg_per_day for m, p in projections.items()}
        ),
        progress_issue=progress.issue,
    )


def metrics_to_dict(metrics: Metrics) -> dict[str, Any]:
    """Convert Metrics to a JSON-serializable dict."""
    projections: dict[str, list[dict[str, Any]]] = {}
    for method in EstimationMethod:
        projections[method.value] = [
            {"day": p.day, "date": p.date.isoformat(), "weight_kg": p.weight_kg}
            for p in metrics.series(method)
        ]

    return {
        "current_weight_kg": metrics.current_weight_kg,
        "goal_reached": metrics.goal_reached,
        "days_remaining": metrics.days_remaining,
        "logic_description": metrics.logic_description,
        "progress_warning_message": metrics.progress_warning_message,
        "progress_issue": metrics.progress_issue.value if metrics.progress_issue else None,
        "maintenance": {
            "estimated_kcal": metrics.estimated_maintenance_kcal,
            "active_kcal": metrics.active_maintenance_kcal,
            "source": metrics.maintenance_source.value if metrics.maintenance_source else None,
        },
        "weight_change_by_window": dict(metrics.weight_change_by_window),
        "daily_rates_kg": {m.value: r for m, r in metrics.daily_rates.items()},
        "projections": projections,
    }


def format_metrics(metrics: Metrics) -> str:
    """Format a Metrics snapshot as plain text."""
    lines = ["Weight & Maintenance Report", "=" * 45]

    if metrics.current_weight_kg is None:
        lines.append("Current weight: (no weigh-ins)")
    else:
        lines.append(f"Current weight: {metrics.current_weight_kg:.1f} kg")

    if metrics.estimated_maintenance_kcal is not None:
        lines.append(f"Estimated maintenance: {metrics.estimated_maintenance_kcal} kcal/day")
    else:
        lines.append("Estimated maintenance: not enough data")
    if metrics.active_maintenance_kcal is not None and metrics.maintenance_source:
        lines.append(
            f"Active maintenance:    {metrics.active_maintenance_kcal} kcal/day "
            f"({metrics.maintenance_source.value})"
        )

    lines.append("")
    lines.append("Weight change")
    lines.append("-" * 45)
    for label, change in metrics.weight_change_by_window.items():
        value = "--" if change is None else f"{change:+.1f} kg"
        lines.append(f"  {label:<10} {value}")

    lines.append("")
    lines.append("Projections (60 days)")
    lines.append("-" * 45)
    for method in EstimationMethod:
        series = metrics.series(method)
        if not series:
            continue
        rate = metrics.daily_rates.get(method)
        rate_text = "no data" if rate is None else f"{rate * 7:+.2f} kg/week"
        lines.append(
            f"  {method.display_name}: {series[-1].weight_kg:.1f} kg on "
            f"{series[-1].date.isoformat()} ({rate_text})"
        )

    lines.append("")
    if metrics.goal_reached:
        lines.append("Target reached")
    elif metrics.days_remaining is not None:
        lines.append(f"Estimated time to goal: {metrics.days_remaining} days")
    lines.append(metrics.logic_description)
    if metrics.progress_warning_message:
        lines.append(f"Note: {metrics.progress_warning_message}")

    return "\n".join(lines)
