"""Pytest fixtures for adaptcal tests."""

from __future__ import annotations

from datetime import date

import pytest

from adaptcal.tracking.models import (
    EnergyLogSample,
    EngineConfig,
    GoalType,
    MaintenanceSource,
    WeightSample,
)

from helpers import TODAY, intake_logs, weigh_ins


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def cutting_config() -> EngineConfig:
    """Cutting from mid-70s to 70 kg on 1800 kcal/day."""
    return EngineConfig(
        daily_calorie_goal=1800,
        target_weight_kg=70.0,
        goal_type=GoalType.CUTTING,
        maintenance_source=MaintenanceSource.APP_ESTIMATE,
    )


@pytest.fixture
def calibration_history() -> tuple[list[WeightSample], list[EnergyLogSample]]:
    """81 kg -> 80 kg over exactly 30 days, 2200 kcal logged on each prior day."""
    weights = weigh_ins((30, 81.0), (15, 80.6), (0, 80.0))
    logs = intake_logs(range(1, 31), 2200)
    return weights, logs
