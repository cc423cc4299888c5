"""Body metrics calculator for formula-based maintenance and goal planning.

Uses the Mifflin-St Jeor equation for BMR, scaled by a Harris-Benedict
activity factor. When height, age or activity are unknown a coarse
bodyweight heuristic is used instead (32 kcal/kg men, 29 kcal/kg women).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from adaptcal.tracking.models import KCAL_PER_KG, Gender, GoalType

logger = logging.getLogger(__name__)


class ActivityLevel(Enum):
    """Activity level multipliers for TDEE calculation."""
    SEDENTARY = "sedentary"          # Little or no exercise
    LIGHT = "light"                  # Light exercise 1-3 days/week
    MODERATE = "moderate"            # Moderate exercise 3-5 days/week
    ACTIVE = "active"                # Hard exercise 6-7 days/week
    VERY_ACTIVE = "very_active"      # Very hard exercise, physical job


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

# kcal per kg of bodyweight when the formula inputs are incomplete
HEURISTIC_KCAL_PER_KG = {
    Gender.MALE: 32.0,
    Gender.FEMALE: 29.0,
}

GENDER_OFFSETS = {
    Gender.MALE: 5.0,
    Gender.FEMALE: -161.0,
}

# Planned goals never go below these (kcal/day)
MIN_SAFE_CALORIES = {
    Gender.MALE: 1500,
    Gender.FEMALE: 1200,
}


@dataclass(frozen=True)
class CaloriePlan:
    """Daily calorie goal derived from a target weight and date."""

    daily_calorie_goal: int
    daily_adjustment: int  # kcal/day relative to maintenance
    days_to_target: Optional[int]
    floored: bool = False  # raised to the safe minimum


def activity_multiplier_for(level: str) -> float:
    """Look up the multiplier for a named activity level.

    Raises:
        ValueError: If the level name is unknown
    """
    return ACTIVITY_MULTIPLIERS[ActivityLevel(level.lower())]


def calculate_bmr(
    weight_kg: float,
    height_cm: float,
    age_years: int,
    gender: Gender,
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimetres
        age_years: Age in years
        gender: Biological sex

    Returns:
        BMR in calories per day
    """
    base = (10 * weight_kg) + (6.25 * height_cm) - (5 * age_years)
    return base + GENDER_OFFSETS[gender]


def formula_maintenance(
    weight_kg: float,
    gender: Gender,
    height_cm: Optional[float] = None,
    age_years: Optional[int] = None,
    activity_multiplier: Optional[float] = None,
) -> int:
    """Maintenance calories from body metrics.

    Mifflin-St Jeor x activity multiplier when height, age and activity are
    all known, otherwise the bodyweight heuristic.
    """
    if height_cm is None or age_years is None or activity_multiplier is None:
        logger.debug(
            "Formula inputs incomplete; using %s kcal/kg heuristic",
            HEURISTIC_KCAL_PER_KG[gender],
        )
        return round(weight_kg * HEURISTIC_KCAL_PER_KG[gender])

    bmr = calculate_bmr(weight_kg, height_cm, age_years, gender)
    return round(bmr * activity_multiplier)


def plan_daily_calorie_goal(
    maintenance_kcal: int,
    current_weight_kg: float,
    target_weight_kg: float,
    target_date: date,
    today: date,
    goal_type: GoalType,
    gender: Gender = Gender.MALE,
) -> CaloriePlan:
    """Daily calorie goal that reaches the target weight by the target date.

    Spreads the total energy needed, (target - current) x 7700 kcal, evenly
    over the remaining days. Maintenance goals, and target dates that are not
    in the future, keep the goal at maintenance. A goal below the safe
    minimum for the gender is raised to it and flagged as floored, so the
    target date will then be missed.

    Args:
        maintenance_kcal: Active maintenance calories
        current_weight_kg: Latest weight
        target_weight_kg: Goal weight
        target_date: Date the goal weight should be reached
        today: Planning date
        goal_type: Goal direction
        gender: Selects the safe minimum

    Returns:
        CaloriePlan with goal and daily adjustment
    """
    if goal_type is GoalType.MAINTENANCE:
        return CaloriePlan(maintenance_kcal, 0, None)

    days = (target_date - today).days
    if days <= 0:
        return CaloriePlan(maintenance_kcal, 0, None)

    total_kcal = (target_weight_kg - current_weight_kg) * KCAL_PER_KG
    adjustment = int(total_kcal / days)

    min_safe = MIN_SAFE_CALORIES[gender]
    if maintenance_kcal + adjustment < min_safe:
        return CaloriePlan(min_safe, min_safe - maintenance_kcal, days, floored=True)
    return CaloriePlan(maintenance_kcal + adjustment, adjustment, days)
