"""Historical weight change over fixed look-back windows.

For a window of N days evaluated on ``today``, the anchor is the latest
sample dated on or before ``today - N``. The window's change is the most
recent weight minus the anchor weight, in kg (negative = losing).

A window without an anchor is None, never zero and never extrapolated.
The anchor must also be older than the most recent sample: a window whose
anchor *is* the latest weigh-in has observed no change and is None.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from typing import Optional

from adaptcal.tracking.models import WeightSample

ALL_TIME = "All Time"

# Label -> look-back in days (None = all-time)
DEFAULT_WINDOWS: dict[str, Optional[int]] = {
    "7 Days": 7,
    "30 Days": 30,
    "90 Days": 90,
    ALL_TIME: None,
}


def window_label(days: int) -> str:
    """Return the display label for an N-day window."""
    return f"{days} Days"


def find_anchor(
    weights: Sequence[WeightSample],
    cutoff: date,
) -> Optional[WeightSample]:
    """Latest sample dated on or before cutoff.

    Args:
        weights: Samples sorted ascending by date

    Returns:
        The anchor sample, or None if every sample is after the cutoff
    """
    anchor = None
    for sample in weights:
        if sample.date > cutoff:
            break
        anchor = sample
    return anchor


def weight_change_over(
    weights: Sequence[WeightSample],
    days: Optional[int],
    today: date,
) -> Optional[float]:
    """Signed change in kg across one window.

    Args:
        weights: Samples sorted ascending by date
        days: Window length in days, or None for all-time
        today: Evaluation date

    Returns:
        latest - anchor in kg, or None when the window has no anchor
    """
    if not weights:
        return None

    latest = weights[-1]
    if days is None:
        anchor: Optional[WeightSample] = weights[0]
    else:
        anchor = find_anchor(weights, today - timedelta(days=days))

    if anchor is None or anchor.date >= latest.date:
        return None
    return latest.weight_kg - anchor.weight_kg


def weight_changes_by_window(
    weights: Sequence[WeightSample],
    today: date,
    windows: Optional[dict[str, Optional[int]]] = None,
) -> dict[str, Optional[float]]:
    """Compute the change for every window.

    Args:
        weights: Samples sorted ascending by date
        today: Evaluation date
        windows: Label -> days mapping (default 7/30/90/all-time)

    Returns:
        Label -> change in kg (None where history is insufficient)
    """
    if windows is None:
        windows = DEFAULT_WINDOWS
    return {
        label: weight_change_over(weights, days, today)
        for label, days in windows.items()
    }
