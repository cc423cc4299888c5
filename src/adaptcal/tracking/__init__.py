"""Adaptive maintenance and weight projection engine.

Calibrates maintenance calories from observed weight change against logged
intake, projects body weight 60 days forward under three independent
hypotheses, and estimates time to goal.

Key components:
- Windowed weight change (7/30/90 days, all-time)
- Maintenance estimation (formula, calibrated, manual)
- Linear projections per estimation method
- Goal attainment and days-remaining evaluation
"""

from __future__ import annotations

from adaptcal.tracking.models import (
    EnergyLogSample,
    EngineConfig,
    EstimationMethod,
    Gender,
    GoalType,
    MaintenanceSource,
    Metrics,
    ProgressIssue,
    WeightSample,
)

__all__ = [
    "EnergyLogSample",
    "EngineConfig",
    "EstimationMethod",
    "Gender",
    "GoalType",
    "MaintenanceSource",
    "Metrics",
    "ProgressIssue",
    "WeightSample",
]
