"""Tests for settings loading and conversion."""

from __future__ import annotations

import pytest
import yaml

from adaptcal.config import settings as settings_module
from adaptcal.config.settings import Settings
from adaptcal.tracking.models import (
    EstimationMethod,
    Gender,
    GoalType,
    MaintenanceSource,
)


class TestSettingsLoad:
    """Tests for Settings.load and save."""

    def test_missing_file_returns_defaults(self, tmp_path):
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings == Settings()

    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        settings = Settings()
        settings.goal.goal_type = GoalType.CUTTING
        settings.goal.target_weight_kg = 72.5
        settings.profile.activity_level = "light"
        settings.tracking.count_calories_burned = True
        settings.save(path)

        assert path.exists()
        assert Settings.load(path) == settings

    def test_partial_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"goal": {"goal_type": "Bulking", "target_weight_kg": 85}}))

        settings = Settings.load(path)
        assert settings.goal.goal_type is GoalType.BULKING
        assert settings.goal.target_weight_kg == 85.0
        assert settings.goal.daily_calorie_goal == 2000

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert Settings.load(path) == Settings()


class TestSettingsValidation:
    """Tests for invalid values."""

    def test_unknown_goal_type(self):
        with pytest.raises(ValueError, match="goal.goal_type"):
            Settings.from_dict({"goal": {"goal_type": "shredding"}})

    def test_policy_default_not_selectable(self):
        with pytest.raises(ValueError, match="policy_default"):
            Settings.from_dict({"goal": {"maintenance_source": "policy_default"}})

    def test_unknown_activity_level(self):
        with pytest.raises(ValueError, match="activity_level"):
            Settings.from_dict({"profile": {"activity_level": "couch"}})


class TestToEngineConfig:
    """Tests for Settings.to_engine_config."""

    def test_conversion(self):
        settings = Settings.from_dict(
            {
                "profile": {"gender": "female", "height_cm": 165, "age_years": 34,
                            "activity_level": "moderate"},
                "goal": {
                    "goal_type": "cutting",
                    "target_weight_kg": 60,
                    "daily_calorie_goal": 1700,
                    "maintenance_source": "manual",
                    "maintenance_calories_manual": 2100,
                    "projection_method": "perfect_goal_adherence",
                },
                "tracking": {"min_baseline_days": 7},
            }
        )
        config = settings.to_engine_config()

        assert config.gender is Gender.FEMALE
        assert config.activity_multiplier == 1.55
        assert config.maintenance_source is MaintenanceSource.MANUAL
        assert config.maintenance_calories_manual == 2100
        assert config.daily_calorie_goal == 1700
        assert config.min_baseline_days == 7
        assert config.primary_method is EstimationMethod.PERFECT_GOAL_ADHERENCE

    def test_explicit_multiplier_wins(self):
        settings = Settings.from_dict(
            {"profile": {"activity_level": "sedentary", "activity_multiplier": 1.45}}
        )
        assert settings.to_engine_config().activity_multiplier == 1.45

    def test_counting_disabled_forces_trend(self):
        settings = Settings.from_dict(
            {
                "goal": {"projection_method": "current_eating_habits"},
                "tracking": {"calorie_counting_enabled": False},
            }
        )
        config = settings.to_engine_config()
        assert config.primary_method is EstimationMethod.WEIGHT_TREND_30_DAY

    def test_invalid_baseline_rejected(self):
        settings = Settings.from_dict({"tracking": {"min_baseline_days": 0}})
        with pytest.raises(ValueError):
            settings.to_engine_config()


class TestGlobalSettings:
    """Tests for the lazily loaded global instance."""

    def test_reload_reads_default_path(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        monkeypatch.setattr(settings_module, "default_config_path", lambda: path)

        assert settings_module.reload_settings() == Settings()

        path.write_text("goal:\n  daily_calorie_goal: 1650\n")
        assert settings_module.get_settings().goal.daily_calorie_goal == 2000
        assert settings_module.reload_settings().goal.daily_calorie_goal == 1650
        assert settings_module.get_settings().goal.daily_calorie_goal == 1650
