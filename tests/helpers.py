"""Sample builders shared by the test modules."""

from __future__ import annotations

from datetime import date, timedelta

from adaptcal.tracking.models import EnergyLogSample, WeightSample

TODAY = date(2025, 3, 31)


def days_ago(n: int) -> date:
    """Date n days before the fixed test date."""
    return TODAY - timedelta(days=n)


def weigh_ins(*pairs: tuple[int, float]) -> list[WeightSample]:
    """Build weight samples from (days_ago, kg) pairs."""
    return [WeightSample(days_ago(n), kg) for n, kg in pairs]


def intake_logs(days: range, consumed: int, burned: int = 0) -> list[EnergyLogSample]:
    """Build one log per days-ago value with the same calories."""
    return [EnergyLogSample(days_ago(n), consumed, burned) for n in days]
