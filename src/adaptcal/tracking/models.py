"""Data models for weight tracking, maintenance estimation and projections."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Optional


# 1 kg of body mass change ~ 7700 kcal of cumulative energy imbalance
KCAL_PER_KG = 7700.0

# Days projected forward (series covers day 0..PROJECTION_DAYS inclusive)
PROJECTION_DAYS = 60

# Look-back used by calibration and the trend/eating-habit projections
CALIBRATION_WINDOW_DAYS = 30


class GoalType(Enum):
    """Direction of the current goal."""
    CUTTING = "cutting"
    BULKING = "bulking"
    MAINTENANCE = "maintenance"


class Gender(Enum):
    """Biological sex for BMR calculation."""
    MALE = "male"
    FEMALE = "female"


class MaintenanceSource(Enum):
    """Where the active maintenance figure comes from."""
    FORMULA = "formula"
    APP_ESTIMATE = "app_estimate"
    MANUAL = "manual"
    POLICY_DEFAULT = "policy_default"  # never user-selectable


class EstimationMethod(Enum):
    """Independent projection hypotheses. Never blended."""
    WEIGHT_TREND_30_DAY = "weight_trend_30_day"
    CURRENT_EATING_HABITS = "current_eating_habits"
    PERFECT_GOAL_ADHERENCE = "perfect_goal_adherence"

    @property
    def display_name(self) -> str:
        return _METHOD_NAMES[self]


_METHOD_NAMES = {
    EstimationMethod.WEIGHT_TREND_30_DAY: "30-Day Weight Trend",
    EstimationMethod.CURRENT_EATING_HABITS: "Current Average Calorie Consumption",
    EstimationMethod.PERFECT_GOAL_ADHERENCE: "Perfect Calorie Target Adherence",
}


class ProgressIssue(Enum):
    """Why days-remaining could not be resolved."""
    INSUFFICIENT_WEIGHT_HISTORY = "insufficient_weight_history"
    INSUFFICIENT_CALORIE_HISTORY = "insufficient_calorie_history"
    FLAT_TREND = "flat_trend"
    ADVERSE_TREND = "adverse_trend"
    MISCONFIGURED_GOAL = "misconfigured_goal"
    BEYOND_HORIZON = "beyond_horizon"


@dataclass(frozen=True)
class WeightSample:
    """One weigh-in per calendar day, in kilograms."""

    date: date
    weight_kg: float


@dataclass(frozen=True)
class EnergyLogSample:
    """A daily calorie log. calories_consumed == 0 means "not logged"."""

    date: date
    calories_consumed: int
    calories_burned: int = 0

    @property
    def is_valid_intake(self) -> bool:
        return self.calories_consumed > 0

    @property
    def net_calories(self) -> int:
        return self.calories_consumed - self.calories_burned


@dataclass(frozen=True)
class EngineConfig:
    """Read-only engine configuration, normally built from Settings."""

    daily_calorie_goal: int
    target_weight_kg: float
    goal_type: GoalType = GoalType.MAINTENANCE
    maintenance_tolerance_kg: float = 2.0
    maintenance_calories_manual: int = 0
    maintenance_source: MaintenanceSource = MaintenanceSource.APP_ESTIMATE
    count_calories_burned: bool = False
    gender: Gender = Gender.MALE
    height_cm: Optional[float] = None
    age_years: Optional[int] = None
    activity_multiplier: Optional[float] = None
    calorie_counting_enabled: bool = True
    projection_method: EstimationMethod = EstimationMethod.WEIGHT_TREND_30_DAY
    min_baseline_days: int = 1

    def __post_init__(self) -> None:
        if self.maintenance_source is MaintenanceSource.POLICY_DEFAULT:
            raise ValueError("maintenance_source cannot be 'policy_default'")
        if self.min_baseline_days < 1:
            raise ValueError(
                f"min_baseline_days must be at least 1, got {self.min_baseline_days}"
            )

    @property
    def primary_method(self) -> EstimationMethod:
        """Method used for days-remaining; trend only without calorie counting."""
        if not self.calorie_counting_enabled:
            return EstimationMethod.WEIGHT_TREND_30_DAY
        return self.projection_method


@dataclass(frozen=True)
class MaintenanceEstimate:
    """Active maintenance figure and how it was obtained."""

    kcal: int
    source: MaintenanceSource

    @property
    def is_policy_default(self) -> bool:
        return self.source is MaintenanceSource.POLICY_DEFAULT


@dataclass(frozen=True)
class ProjectionPoint:
    """A single projected weight for one method on one day."""

    method: EstimationMethod
    day: int
    date: date
    weight_kg: float


@dataclass(frozen=True)
class GoalProgress:
    """Output of goal evaluation."""

    goal_reached: bool
    days_remaining: Optional[int]
    logic_description: str
    progress_warning_message: str
    issue: Optional[ProgressIssue] = None


@dataclass(frozen=True)
class Metrics:
    """Immutable snapshot recomputed wholesale on every data change.

    Optional fields mean "cannot be determined from current data". The
    mapping fields are read-only views.
    """

    estimated_maintenance_kcal: Optional[int]
    weight_change_by_window: Mapping[str, Optional[float]]
    projections: tuple[ProjectionPoint, ...]
    days_remaining: Optional[int]
    logic_description: str
    progress_warning_message: str
    goal_reached: bool = False
    current_weight_kg: Optional[float] = None
    active_maintenance_kcal: Optional[int] = None
    maintenance_source: Optional[MaintenanceSource] = None
    daily_rates: Mapping[EstimationMethod, Optional[float]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    progress_issue: Optional[ProgressIssue] = None

    def series(self, method: EstimationMethod) -> list[ProjectionPoint]:
        """Return the day-ascending series for one method."""
        return [p for p in self.projections if p.method is method]
