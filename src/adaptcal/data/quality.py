"""Input sanitation for weight and calorie histories.

Malformed values are treated as absent rather than propagated:

- Weight samples with NaN, infinite or non-positive weights are dropped.
- Consumed calories that are NaN or negative become 0 ("not logged").
- Burned calories that are NaN or negative become 0.

Callers' sequences are never mutated; new sorted lists are returned.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from adaptcal.tracking.models import EnergyLogSample, WeightSample

logger = logging.getLogger(__name__)


@dataclass
class SanitationReport:
    """Counts of values discarded or clamped during sanitation."""

    dropped_weights: int = 0
    clamped_consumed: int = 0
    clamped_burned: int = 0

    @property
    def is_clean(self) -> bool:
        return not (self.dropped_weights or self.clamped_consumed or self.clamped_burned)


def _usable_number(value: object) -> bool:
    if value is None or isinstance(value, bool):
        return False
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return False
    return math.isfinite(number)


def _clean_calories(value: object) -> int:
    """Return value as a non-negative int, or 0 when unusable."""
    if not _usable_number(value):
        return 0
    number = float(value)  # type: ignore[arg-type]
    if number < 0:
        return 0
    return int(round(number))


def clean_weights(
    weights: Iterable[WeightSample],
    report: SanitationReport | None = None,
) -> list[WeightSample]:
    """Drop unusable weight samples and sort ascending by date."""
    cleaned = []
    for sample in weights:
        if _usable_number(sample.weight_kg) and float(sample.weight_kg) > 0:
            cleaned.append(sample)
        elif report is not None:
            report.dropped_weights += 1
    cleaned.sort(key=lambda s: s.date)
    return cleaned


def clean_logs(
    logs: Iterable[EnergyLogSample],
    report: SanitationReport | None = None,
) -> list[EnergyLogSample]:
    """Clamp unusable calorie values to 0 and sort ascending by date."""
    cleaned = []
    for log in logs:
        consumed = _clean_calories(log.calories_consumed)
        burned = _clean_calories(log.calories_burned)

        if report is not None:
            if consumed != log.calories_consumed:
                report.clamped_consumed += 1
            if burned != log.calories_burned:
                report.clamped_burned += 1

        if consumed == log.calories_consumed and burned == log.calories_burned:
            cleaned.append(log)
        else:
            cleaned.append(EnergyLogSample(log.date, consumed, burned))
    cleaned.sort(key=lambda s: s.date)
    return cleaned


def sanitize_inputs(
    weights: Iterable[WeightSample],
    logs: Iterable[EnergyLogSample],
) -> tuple[list[WeightSample], list[EnergyLogSample], SanitationReport]:
    """Sanitize both histories and return them with a report."""
    report = SanitationReport()
    clean_w = clean_weights(weights, report)
    clean_l = clean_logs(logs, report)
    if not report.is_clean:
        logger.debug(
            "Sanitized inputs: dropped %d weights, clamped %d consumed, %d burned",
            report.dropped_weights,
            report.clamped_consumed,
            report.clamped_burned,
        )
    return clean_w, clean_l, report
