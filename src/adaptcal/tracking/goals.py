"""Goal attainment and time-to-goal from the primary projection."""

from __future__ import annotations

import math
from typing import Optional

from adaptcal.tracking.models import (
    PROJECTION_DAYS,
    EngineConfig,
    EstimationMethod,
    GoalProgress,
    GoalType,
    ProgressIssue,
)
from adaptcal.tracking.projection import Projection


def is_goal_reached(
    weight_kg: float,
    target_weight_kg: float,
    goal_type: GoalType,
    tolerance_kg: float = 0.0,
) -> bool:
    """Whether a weight satisfies the goal.

    Cutting is reached at or below target, bulking at or above, maintenance
    within +/- tolerance of target (inclusive).
    """
    if goal_type is GoalType.CUTTING:
        return weight_kg <= target_weight_kg
    if goal_type is GoalType.BULKING:
        return weight_kg >= target_weight_kg
    return abs(weight_kg - target_weight_kg) <= tolerance_kg


def required_direction(
    current_weight_kg: float,
    target_weight_kg: float,
    goal_type: GoalType,
    tolerance_kg: float = 0.0,
) -> int:
    """-1 if weight must fall to reach the goal, +1 if it must rise, 0 if reached."""
    if is_goal_reached(current_weight_kg, target_weight_kg, goal_type, tolerance_kg):
        return 0
    return -1 if current_weight_kg > target_weight_kg else 1


def first_crossing_day(
    projection: Projection,
    target_weight_kg: float,
    goal_type: GoalType,
    tolerance_kg: float = 0.0,
) -> Optional[int]:
    """First projected day whose weight satisfies the goal, or None."""
    for point in projection.points:
        if is_goal_reached(point.weight_kg, target_weight_kg, goal_type, tolerance_kg):
            return point.day
    return None


def describe_logic(
    method: EstimationMethod,
    rate_kg_per_day: Optional[float],
    config: EngineConfig,
) -> str:
    """Short description of which method and rate drive the estimate."""
    if rate_kg_per_day is None:
        return f"Based on {method.display_name}"

    weekly = f"{rate_kg_per_day * 7:+.2f} kg/week"
    if method is EstimationMethod.WEIGHT_TREND_30_DAY:
        return f"Based on your 30-day weight trend of {weekly}"
    if method is EstimationMethod.CURRENT_EATING_HABITS:
        return f"Based on your 30-day average calorie intake ({weekly})"
    return (
        f"Based on your daily calorie goal of {config.daily_calorie_goal} kcal "
        f"({weekly})"
    )


def _insufficient_message(method: EstimationMethod) -> tuple[ProgressIssue, str]:
    if method is EstimationMethod.CURRENT_EATING_HABITS:
        return (
            ProgressIssue.INSUFFICIENT_CALORIE_HISTORY,
            "Log your calorie intake on at least one of the last 30 days "
            "to see an estimate.",
        )
    return (
        ProgressIssue.INSUFFICIENT_WEIGHT_HISTORY,
        "Need weigh-ins at least 30 days apart to compute a weight trend.",
    )


def _flat_message(method: EstimationMethod, maintenance_kcal: Optional[int]) -> str:
    if method is EstimationMethod.WEIGHT_TREND_30_DAY:
        return "Your 30-day weight trend is flat, so the goal is not getting closer."
    if method is EstimationMethod.CURRENT_EATING_HABITS:
        return f"Your average intake matches your maintenance ({maintenance_kcal} kcal)."
    return f"Your daily goal equals your maintenance ({maintenance_kcal} kcal)."


def _adverse_message(
    method: EstimationMethod,
    direction: int,
    goal_type: GoalType,
    maintenance_kcal: Optional[int],
) -> str:
    if method is EstimationMethod.WEIGHT_TREND_30_DAY:
        if goal_type is GoalType.MAINTENANCE:
            return "Your weight trend is moving away from your maintenance range."
        return "Your weight trend is moving away from your goal."

    verb = "less" if direction < 0 else "more"
    if method is EstimationMethod.CURRENT_EATING_HABITS:
        return f"Eat {verb} than maintenance on average to see estimate."
    comparison = "lower" if direction < 0 else "higher"
    return (
        f"Your daily goal must be {comparison} than your maintenance "
        f"({maintenance_kcal} kcal)."
    )


def _misconfigured(config: EngineConfig) -> Optional[str]:
    target = config.target_weight_kg
    if not math.isfinite(target) or target <= 0:
        return "Set a target weight to see an estimate."
    if config.goal_type is GoalType.MAINTENANCE and not (
        config.maintenance_tolerance_kg >= 0
    ):
        return "Maintenance tolerance must not be negative."
    return None


def evaluate_goal_progress(
    current_weight_kg: Optional[float],
    config: EngineConfig,
    projections: dict[EstimationMethod, Projection],
    maintenance_kcal: Optional[int] = None,
) -> GoalProgress:
    """Goal-reached test plus days-remaining on the primary projection.

    Args:
        current_weight_kg: Latest weight, or None without any weigh-in
        config: Engine configuration (goal, target, tolerance, primary method)
        projections: Method -> Projection from the projection engine
        maintenance_kcal: Active maintenance, quoted in warnings

    Returns:
        GoalProgress; days_remaining is None with a reason when the goal is
        not crossed within the projection horizon
    """
    method = config.primary_method
    projection = projections.get(method, Projection(method, None))
    logic = describe_logic(method, projection.rate_kg_per_day, config)

    if current_weight_kg is None:
        return GoalProgress(
            goal_reached=False,
            days_remaining=None,
            logic_description=logic,
            progress_warning_message="Log your weight to see an estimate.",
            issue=ProgressIssue.INSUFFICIENT_WEIGHT_HISTORY,
        )

    problem = _misconfigured(config)
    if problem is not None:
        return GoalProgress(False, None, logic, problem, ProgressIssue.MISCONFIGURED_GOAL)

    target = config.target_weight_kg
    tolerance = config.maintenance_tolerance_kg

    if is_goal_reached(current_weight_kg, target, config.goal_type, tolerance):
        return GoalProgress(True, 0, logic, "")

    day = first_crossing_day(projection, target, config.goal_type, tolerance)
    if day is not None:
        return GoalProgress(False, day, logic, "")

    rate = projection.rate_kg_per_day
    if rate is None:
        issue, message = _insufficient_message(method)
        return GoalProgress(False, None, logic, message, issue)

    if rate == 0:
        return GoalProgress(
            False,
            None,
            logic,
            _flat_message(method, maintenance_kcal),
            ProgressIssue.FLAT_TREND,
        )

    direction = required_direction(current_weight_kg, target, config.goal_type, tolerance)
    if rate * direction < 0:
        return GoalProgress(
            False,
            None,
            logic,
            _adverse_message(method, direction, config.goal_type, maintenance_kcal),
            ProgressIssue.ADVERSE_TREND,
        )

    return GoalProgress(
        False,
        None,
        logic,
        f"At this rate your goal is more than {PROJECTION_DAYS} days away.",
        ProgressIssue.BEYOND_HORIZON,
    )
