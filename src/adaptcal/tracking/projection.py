"""Forward weight projections under independent behavioural hypotheses.

Each EstimationMethod maps to a rate function returning kg/day, or None
when the data it needs is missing. Projections are pure linear
extrapolations from the latest weight over days 0..60 with no smoothing and
no clamping at the target; a method without data projects flat.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

import numpy as np

from adaptcal.tracking.maintenance import valid_intake_logs
from adaptcal.tracking.models import (
    CALIBRATION_WINDOW_DAYS,
    KCAL_PER_KG,
    PROJECTION_DAYS,
    EnergyLogSample,
    EngineConfig,
    EstimationMethod,
    ProjectionPoint,
    WeightSample,
)
from adaptcal.tracking.windows import weight_change_over


@dataclass(frozen=True)
class ProjectionInputs:
    """Everything a rate function may read."""

    weights: Sequence[WeightSample]
    logs: Sequence[EnergyLogSample]
    config: EngineConfig
    today: date
    maintenance_kcal: int
    trend_change_kg: Optional[float] = None

    @property
    def current_weight_kg(self) -> Optional[float]:
        return self.weights[-1].weight_kg if self.weights else None


@dataclass(frozen=True)
class Projection:
    """One method's series and the rate that produced it."""

    method: EstimationMethod
    rate_kg_per_day: Optional[float]
    points: list[ProjectionPoint] = field(default_factory=list)


def weight_trend_rate(inputs: ProjectionInputs) -> Optional[float]:
    """30-day window change spread over 30 days."""
    if inputs.trend_change_kg is None:
        return None
    return inputs.trend_change_kg / CALIBRATION_WINDOW_DAYS


def eating_habits_rate(inputs: ProjectionInputs) -> Optional[float]:
    """Average recent intake (net of burned, if enabled) against maintenance."""
    start = inputs.today - timedelta(days=CALIBRATION_WINDOW_DAYS)
    valid = valid_intake_logs(inputs.logs, start, inputs.today, inputs.today)
    if not valid:
        return None

    avg_consumed = sum(log.calories_consumed for log in valid) / len(valid)
    avg_burned = 0.0
    if inputs.config.count_calories_burned:
        avg_burned = sum(log.calories_burned for log in valid) / len(valid)

    return (avg_consumed - avg_burned - inputs.maintenance_kcal) / KCAL_PER_KG


def goal_adherence_rate(inputs: ProjectionInputs) -> Optional[float]:
    """Configured daily goal against maintenance, regardless of behaviour."""
    return (inputs.config.daily_calorie_goal - inputs.maintenance_kcal) / KCAL_PER_KG


RATE_FUNCTIONS: dict[EstimationMethod, Callable[[ProjectionInputs], Optional[float]]] = {
    EstimationMethod.WEIGHT_TREND_30_DAY: weight_trend_rate,
    EstimationMethod.CURRENT_EATING_HABITS: eating_habits_rate,
    EstimationMethod.PERFECT_GOAL_ADHERENCE: goal_adherence_rate,
}


def linear_series(
    start_weight: float,
    rate: float,
    days: int = PROJECTION_DAYS,
) -> list[float]:
    """Weights for day 0..days inclusive; day 0 is start_weight exactly."""
    offsets = np.arange(days + 1, dtype=float)
    series = start_weight + rate * offsets
    values = [float(v) for v in series]
    values[0] = start_weight
    return values


def project_method(
    method: EstimationMethod,
    inputs: ProjectionInputs,
    days: int = PROJECTION_DAYS,
) -> Projection:
    """Build one method's projection (empty without a current weight)."""
    current = inputs.current_weight_kg
    if current is None:
        return Projection(method, None)

    rate = RATE_FUNCTIONS[method](inputs)
    effective = rate if rate is not None else 0.0
    points = [
        ProjectionPoint(
            method=method,
            day=day,
            date=inputs.today + timedelta(days=day),
            weight_kg=weight,
        )
        for day, weight in enumerate(linear_series(current, effective, days))
    ]
    return Projection(method, rate, points)


def project_all(
    weights: Sequence[WeightSample],
    logs: Sequence[EnergyLogSample],
    config: EngineConfig,
    today: date,
    maintenance_kcal: int,
    days: int = PROJECTION_DAYS,
) -> dict[EstimationMethod, Projection]:
    """Project every method.

    Without calorie counting only the weight trend is projected; the other
    methods come back with no rate and no points.

    Args:
        weights: Samples sorted ascending by date
        logs: Daily logs sorted ascending by date
        config: Engine configuration
        today: Day 0 of every series
        maintenance_kcal: Active maintenance figure
        days: Horizon in days

    Returns:
        Method -> Projection, in EstimationMethod order
    """
    inputs = ProjectionInputs(
        weights=weights,
        logs=logs,
        config=config,
        today=today,
        maintenance_kcal=maintenance_kcal,
        trend_change_kg=weight_change_over(weights, CALIBRATION_WINDOW_DAYS, today),
    )

    projections = {}
    for method in EstimationMethod:
        if (
            not config.calorie_counting_enabled
            and method is not EstimationMethod.WEIGHT_TREND_30_DAY
        ):
            projections[method] = Projection(method, None)
        else:
            projections[method] = project_method(method, inputs, days)
    return projections
