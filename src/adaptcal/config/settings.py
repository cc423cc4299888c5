"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from adaptcal.profiles.body_calc import activity_multiplier_for
from adaptcal.tracking.models import (
    EngineConfig,
    EstimationMethod,
    Gender,
    GoalType,
    MaintenanceSource,
)


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".adaptcal"


def default_config_path() -> Path:
    """Return the default settings file path."""
    return _default_config_dir() / "config.yaml"


def _parse_enum(enum_cls, value, section: str, key: str):
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        valid = [member.value for member in enum_cls]
        raise ValueError(f"{section}.{key} must be one of {valid}, got '{value}'")


@dataclass
class ProfileConfig:
    """Body metrics used by the formula estimate."""

    gender: Gender = Gender.MALE
    height_cm: Optional[float] = None
    age_years: Optional[int] = None
    activity_level: Optional[str] = None  # 'sedentary', 'light', 'moderate', ...
    activity_multiplier: Optional[float] = None  # overrides activity_level

    def resolved_activity_multiplier(self) -> Optional[float]:
        if self.activity_multiplier is not None:
            return self.activity_multiplier
        if self.activity_level is not None:
            return activity_multiplier_for(self.activity_level)
        return None


@dataclass
class GoalConfig:
    """Current goal and maintenance source."""

    goal_type: GoalType = GoalType.MAINTENANCE
    target_weight_kg: float = 0.0
    daily_calorie_goal: int = 2000
    maintenance_tolerance_kg: float = 2.0
    maintenance_source: MaintenanceSource = MaintenanceSource.APP_ESTIMATE
    maintenance_calories_manual: int = 0
    projection_method: EstimationMethod = EstimationMethod.WEIGHT_TREND_30_DAY


@dataclass
class TrackingConfig:
    """Logging behaviour and calibration tunables."""

    calorie_counting_enabled: bool = True
    count_calories_burned: bool = False
    min_baseline_days: int = 1


@dataclass
class Settings:
    """Main application settings."""

    profile: ProfileConfig = field(default_factory=ProfileConfig)
    goal: GoalConfig = field(default_factory=GoalConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.adaptcal/config.yaml

        Returns:
            Settings instance

        Raises:
            ValueError: If a value cannot be parsed
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Build settings from a parsed YAML mapping."""
        settings = cls()

        # Parse profile
        if "profile" in data:
            prof = data["profile"] or {}
            if "gender" in prof:
                settings.profile.gender = _parse_enum(Gender, prof["gender"], "profile", "gender")
            if prof.get("height_cm") is not None:
                settings.profile.height_cm = float(prof["height_cm"])
            if prof.get("age_years") is not None:
                settings.profile.age_years = int(prof["age_years"])
            if prof.get("activity_level") is not None:
                level = str(prof["activity_level"])
                try:
                    activity_multiplier_for(level)
                except ValueError:
                    raise ValueError(f"profile.activity_level is unknown: '{level}'")
                settings.profile.activity_level = level
            if prof.get("activity_multiplier") is not None:
                settings.profile.activity_multiplier = float(prof["activity_multiplier"])

        # Parse goal
        if "goal" in data:
            goal = data["goal"] or {}
            if "goal_type" in goal:
                settings.goal.goal_type = _parse_enum(
                    GoalType, goal["goal_type"], "goal", "goal_type"
                )
            if "target_weight_kg" in goal:
                settings.goal.target_weight_kg = float(goal["target_weight_kg"])
            if "daily_calorie_goal" in goal:
                settings.goal.daily_calorie_goal = int(goal["daily_calorie_goal"])
            if "maintenance_tolerance_kg" in goal:
                settings.goal.maintenance_tolerance_kg = float(
                    goal["maintenance_tolerance_kg"]
                )
            if "maintenance_source" in goal:
                source = _parse_enum(
                    MaintenanceSource, goal["maintenance_source"], "goal", "maintenance_source"
                )
                if source is MaintenanceSource.POLICY_DEFAULT:
                    raise ValueError("goal.maintenance_source cannot be 'policy_default'")
                settings.goal.maintenance_source = source
            if "maintenance_calories_manual" in goal:
                settings.goal.maintenance_calories_manual = int(
                    goal["maintenance_calories_manual"]
                )
            if "projection_method" in goal:
                settings.goal.projection_method = _parse_enum(
                    EstimationMethod, goal["projection_method"], "goal", "projection_method"
                )

        # Parse tracking
        if "tracking" in data:
            track = data["tracking"] or {}
            if "calorie_counting_enabled" in track:
                settings.tracking.calorie_counting_enabled = bool(
                    track["calorie_counting_enabled"]
                )
            if "count_calories_burned" in track:
                settings.tracking.count_calories_burned = bool(
                    track["count_calories_burned"]
                )
            if "min_baseline_days" in track:
                settings.tracking.min_baseline_days = int(track["min_baseline_days"])

        return settings

    def to_dict(self) -> dict:
        """Serialize to a YAML-friendly mapping."""
        return {
            "profile": {
                "gender": self.profile.gender.value,
                "height_cm": self.profile.height_cm,
                "age_years": self.profile.age_years,
                "activity_level": self.profile.activity_level,
                "activity_multiplier": self.profile.activity_multiplier,
            },
            "goal": {
                "goal_type": self.goal.goal_type.value,
                "target_weight_kg": self.goal.target_weight_kg,
                "daily_calorie_goal": self.goal.daily_calorie_goal,
                "maintenance_tolerance_kg": self.goal.maintenance_tolerance_kg,
                "maintenance_source": self.goal.maintenance_source.value,
                "maintenance_calories_manual": self.goal.maintenance_calories_manual,
                "projection_method": self.goal.projection_method.value,
            },
            "tracking": {
                "calorie_counting_enabled": self.tracking.calorie_counting_enabled,
                "count_calories_burned": self.tracking.count_calories_burned,
                "min_baseline_days": self.tracking.min_baseline_days,
            },
        }

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.adaptcal/config.yaml
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_engine_config(self) -> EngineConfig:
        """Build the immutable engine configuration."""
        return EngineConfig(
            daily_calorie_goal=self.goal.daily_calorie_goal,
            target_weight_kg=self.goal.target_weight_kg,
            goal_type=self.goal.goal_type,
            maintenance_tolerance_kg=self.goal.maintenance_tolerance_kg,
            maintenance_calories_manual=self.goal.maintenance_calories_manual,
            maintenance_source=self.goal.maintenance_source,
            count_calories_burned=self.tracking.count_calories_burned,
            gender=self.profile.gender,
            height_cm=self.profile.height_cm,
            age_years=self.profile.age_years,
            activity_multiplier=self.profile.resolved_activity_multiplier(),
            calorie_counting_enabled=self.tracking.calorie_counting_enabled,
            projection_method=self.goal.projection_method,
            min_baseline_days=self.tracking.min_baseline_days,
        )


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
