"""Maintenance calorie estimation.

The calibrated ("app estimate") figure is learned from the last 30 days of
paired weight and intake data instead of a static formula:

    observed_daily_delta_kg = (last_weight - first_weight) / elapsed_days
    implied_daily_delta_kcal = observed_daily_delta_kg x 7700
    maintenance = round(avg_daily_intake - implied_daily_delta_kcal)

Losing weight makes the implied delta negative, which places maintenance
above average intake; gaining places it below. Maintenance is the intake
that would have produced zero weight change.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from adaptcal.profiles.body_calc import formula_maintenance
from adaptcal.tracking.models import (
    CALIBRATION_WINDOW_DAYS,
    KCAL_PER_KG,
    EnergyLogSample,
    EngineConfig,
    MaintenanceEstimate,
    MaintenanceSource,
    WeightSample,
)

logger = logging.getLogger(__name__)

# Policy default, not a derived value. Only reached when no current weight
# exists, so no projection is ever drawn from it.
POLICY_DEFAULT_MAINTENANCE_KCAL = 2500


@dataclass(frozen=True)
class Calibration:
    """Inputs and result of one calibration over the look-back window."""

    start: WeightSample
    end: WeightSample
    valid_days: int
    avg_daily_intake_kcal: float

    @property
    def elapsed_days(self) -> int:
        return (self.end.date - self.start.date).days

    @property
    def observed_daily_weight_delta_kg(self) -> float:
        return (self.end.weight_kg - self.start.weight_kg) / self.elapsed_days

    @property
    def implied_daily_delta_kcal(self) -> float:
        return self.observed_daily_weight_delta_kg * KCAL_PER_KG

    @property
    def maintenance_kcal(self) -> int:
        return round(self.avg_daily_intake_kcal - self.implied_daily_delta_kcal)


def recent_weights(
    weights: Sequence[WeightSample],
    today: date,
    days: int = CALIBRATION_WINDOW_DAYS,
) -> list[WeightSample]:
    """Samples dated within [today - days, today], ascending."""
    start = today - timedelta(days=days)
    return [w for w in weights if start <= w.date <= today]


def valid_intake_logs(
    logs: Sequence[EnergyLogSample],
    start: date,
    end: date,
    today: date,
) -> list[EnergyLogSample]:
    """Logs with non-zero intake dated within [start, end], excluding today.

    Today is still being logged, so its partial total is never used.
    """
    return [
        log
        for log in logs
        if start <= log.date <= end and log.date < today and log.is_valid_intake
    ]


def calibrate(
    weights: Sequence[WeightSample],
    logs: Sequence[EnergyLogSample],
    today: date,
    min_baseline_days: int = 1,
) -> Optional[Calibration]:
    """Pair the last 30 days of weights and intake.

    Args:
        weights: Samples sorted ascending by date
        logs: Daily logs sorted ascending by date
        today: Evaluation date
        min_baseline_days: Minimum days between first and last weigh-in

    Returns:
        Calibration, or None when there are fewer than two weigh-ins spanning
        the baseline or no valid intake day between them
    """
    window = recent_weights(weights, today)
    if len(window) < 2:
        return None

    first, last = window[0], window[-1]
    if (last.date - first.date).days < min_baseline_days:
        return None

    valid = valid_intake_logs(logs, first.date, last.date, today)
    if not valid:
        return None

    avg_intake = sum(log.calories_consumed for log in valid) / len(valid)
    return Calibration(
        start=first,
        end=last,
        valid_days=len(valid),
        avg_daily_intake_kcal=avg_intake,
    )


def calibrated_maintenance(
    weights: Sequence[WeightSample],
    logs: Sequence[EnergyLogSample],
    today: date,
    min_baseline_days: int = 1,
) -> Optional[int]:
    """Calibrated maintenance in kcal/day, or None if data is insufficient."""
    calibration = calibrate(weights, logs, today, min_baseline_days)
    if calibration is None:
        return None
    return calibration.maintenance_kcal


def formula_estimate(
    weights: Sequence[WeightSample],
    config: EngineConfig,
) -> Optional[int]:
    """Formula maintenance at the latest weight, or None without weights."""
    if not weights:
        return None
    return formula_maintenance(
        weights[-1].weight_kg,
        config.gender,
        height_cm=config.height_cm,
        age_years=config.age_years,
        activity_multiplier=config.activity_multiplier,
    )


def estimate_for_source(
    source: MaintenanceSource,
    weights: Sequence[WeightSample],
    logs: Sequence[EnergyLogSample],
    config: EngineConfig,
    today: date,
) -> Optional[int]:
    """Maintenance from exactly one source, without fallback."""
    if source is MaintenanceSource.FORMULA:
        return formula_estimate(weights, config)
    if source is MaintenanceSource.APP_ESTIMATE:
        return calibrated_maintenance(weights, logs, today, config.min_baseline_days)
    if source is MaintenanceSource.MANUAL:
        return config.maintenance_calories_manual
    raise ValueError(f"Unknown maintenance source: {source}")


def resolve_active_maintenance(
    weights: Sequence[WeightSample],
    logs: Sequence[EnergyLogSample],
    config: EngineConfig,
    today: date,
    calibrated: Optional[int] = None,
) -> MaintenanceEstimate:
    """Active maintenance figure used by the projections.

    The selected source is tried first. An unavailable calibration or a
    non-positive manual value falls back to the formula; with no weight at
    all the policy default is returned and flagged as such.

    Args:
        calibrated: Precomputed calibrated value, to avoid recalibrating
    """
    source = config.maintenance_source

    if source is MaintenanceSource.APP_ESTIMATE:
        if calibrated is None:
            calibrated = calibrated_maintenance(
                weights, logs, today, config.min_baseline_days
            )
        if calibrated is not None:
            return MaintenanceEstimate(calibrated, source)
        logger.debug("Calibration unavailable; falling back to formula")
    elif source is MaintenanceSource.MANUAL:
        if config.maintenance_calories_manual > 0:
            return MaintenanceEstimate(config.maintenance_calories_manual, source)
        logger.debug("Manual maintenance not set; falling back to formula")

    formula = formula_estimate(weights, config)
    if formula is not None:
        return MaintenanceEstimate(formula, MaintenanceSource.FORMULA)

    logger.debug(
        "No weight available; using policy default of %d kcal",
        POLICY_DEFAULT_MAINTENANCE_KCAL,
    )
    return MaintenanceEstimate(
        POLICY_DEFAULT_MAINTENANCE_KCAL, MaintenanceSource.POLICY_DEFAULT
    )
