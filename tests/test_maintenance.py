"""Tests for maintenance calorie estimation."""

from __future__ import annotations

from dataclasses import replace

import pytest

from adaptcal.tracking.maintenance import (
    POLICY_DEFAULT_MAINTENANCE_KCAL,
    calibrate,
    calibrated_maintenance,
    estimate_for_source,
    formula_estimate,
    resolve_active_maintenance,
)
from adaptcal.tracking.models import (
    EnergyLogSample,
    EngineConfig,
    Gender,
    MaintenanceSource,
)

from helpers import TODAY, intake_logs, weigh_ins


class TestCalibration:
    """Tests for the calibrated (app) estimate."""

    def test_worked_example(self, calibration_history) -> None:
        """-1 kg over 30 days on 2200 kcal implies maintenance of 2457."""
        weights, logs = calibration_history
        calibration = calibrate(weights, logs, TODAY)

        assert calibration is not None
        assert calibration.elapsed_days == 30
        assert calibration.observed_daily_weight_delta_kg == pytest.approx(-1.0 / 30)
        assert calibration.implied_daily_delta_kcal == pytest.approx(-256.6667, abs=1e-3)
        assert calibration.avg_daily_intake_kcal == pytest.approx(2200.0)
        assert calibration.maintenance_kcal == 2457

    def test_weight_loss_raises_maintenance_above_intake(self, calibration_history) -> None:
        weights, logs = calibration_history
        assert calibrated_maintenance(weights, logs, TODAY) > 2200

    def test_weight_gain_lowers_maintenance_below_intake(self) -> None:
        weights = weigh_ins((28, 70.0), (0, 71.0))
        logs = intake_logs(range(1, 29), 3000)

        # +1 kg / 28 days = +275 kcal/day surplus
        assert calibrated_maintenance(weights, logs, TODAY) == 2725

    def test_zero_intake_days_are_not_averaged(self) -> None:
        """Days with caloriesConsumed == 0 count as not logged."""
        weights = weigh_ins((30, 80.0), (0, 80.0))
        logs = intake_logs(range(1, 11), 2400) + intake_logs(range(11, 31), 0)

        calibration = calibrate(weights, logs, TODAY)
        assert calibration is not None
        assert calibration.valid_days == 10
        assert calibration.maintenance_kcal == 2400

    def test_todays_partial_log_excluded(self) -> None:
        weights = weigh_ins((10, 80.0), (0, 80.0))
        logs = intake_logs(range(1, 11), 2000) + [EnergyLogSample(TODAY, 400)]

        assert calibrated_maintenance(weights, logs, TODAY) == 2000

    def test_logs_outside_weight_span_ignored(self) -> None:
        weights = weigh_ins((20, 80.0), (10, 80.0))
        logs = intake_logs(range(10, 21), 2100) + intake_logs(range(1, 10), 5000)

        assert calibrated_maintenance(weights, logs, TODAY) == 2100

    def test_single_weigh_in(self) -> None:
        weights = weigh_ins((0, 80.0))
        logs = intake_logs(range(1, 31), 2200)
        assert calibrate(weights, logs, TODAY) is None

    def test_weigh_ins_older_than_window(self) -> None:
        """Samples before today - 30 are not used."""
        weights = weigh_ins((60, 82.0), (31, 81.0), (0, 80.0))
        logs = intake_logs(range(1, 31), 2200)
        assert calibrate(weights, logs, TODAY) is None

    def test_no_valid_intake(self) -> None:
        weights = weigh_ins((30, 81.0), (0, 80.0))
        logs = intake_logs(range(1, 31), 0)
        assert calibrate(weights, logs, TODAY) is None

    def test_min_baseline_days(self) -> None:
        weights = weigh_ins((5, 81.0), (0, 80.0))
        logs = intake_logs(range(1, 6), 2200)

        assert calibrate(weights, logs, TODAY, min_baseline_days=1) is not None
        assert calibrate(weights, logs, TODAY, min_baseline_days=7) is None

    def test_empty(self) -> None:
        assert calibrated_maintenance([], [], TODAY) is None


class TestFormulaEstimate:
    """Tests for formula-based maintenance."""

    def test_mifflin_st_jeor_male(self) -> None:
        config = EngineConfig(
            daily_calorie_goal=2000,
            target_weight_kg=75.0,
            gender=Gender.MALE,
            height_cm=180.0,
            age_years=30,
            activity_multiplier=1.55,
        )
        # BMR = 800 + 1125 - 150 + 5 = 1780; x 1.55 = 2759
        assert formula_estimate(weigh_ins((0, 80.0)), config) == 2759

    def test_mifflin_st_jeor_female(self) -> None:
        config = EngineConfig(
            daily_calorie_goal=2000,
            target_weight_kg=75.0,
            gender=Gender.FEMALE,
            height_cm=180.0,
            age_years=30,
            activity_multiplier=1.55,
        )
        # BMR = 800 + 1125 - 150 - 161 = 1614; x 1.55 = 2501.7
        assert formula_estimate(weigh_ins((0, 80.0)), config) == 2502

    def test_heuristic_when_incomplete(self) -> None:
        male = EngineConfig(daily_calorie_goal=2000, target_weight_kg=75.0, height_cm=180.0)
        female = replace(male, gender=Gender.FEMALE)

        assert formula_estimate(weigh_ins((0, 80.0)), male) == 2560
        assert formula_estimate(weigh_ins((0, 80.0)), female) == 2320

    def test_uses_latest_weight(self) -> None:
        config = EngineConfig(daily_calorie_goal=2000, target_weight_kg=75.0)
        assert formula_estimate(weigh_ins((10, 90.0), (0, 80.0)), config) == 2560

    def test_no_weight(self) -> None:
        config = EngineConfig(daily_calorie_goal=2000, target_weight_kg=75.0)
        assert formula_estimate([], config) is None


class TestResolveActiveMaintenance:
    """Tests for source selection and fallback."""

    def test_app_estimate_used_when_available(self, calibration_history, cutting_config) -> None:
        weights, logs = calibration_history
        active = resolve_active_maintenance(weights, logs, cutting_config, TODAY)

        assert active.kcal == 2457
        assert active.source is MaintenanceSource.APP_ESTIMATE

    def test_app_estimate_falls_back_to_formula(self, cutting_config) -> None:
        weights = weigh_ins((0, 80.0))
        active = resolve_active_maintenance(weights, [], cutting_config, TODAY)

        assert active.kcal == 2560
        assert active.source is MaintenanceSource.FORMULA

    def test_manual_passthrough(self, calibration_history, cutting_config) -> None:
        weights, logs = calibration_history
        config = replace(
            cutting_config,
            maintenance_source=MaintenanceSource.MANUAL,
            maintenance_calories_manual=2345,
        )
        active = resolve_active_maintenance(weights, logs, config, TODAY)

        assert active.kcal == 2345
        assert active.source is MaintenanceSource.MANUAL

    def test_manual_unset_falls_back_to_formula(self, cutting_config) -> None:
        config = replace(cutting_config, maintenance_source=MaintenanceSource.MANUAL)
        active = resolve_active_maintenance(weigh_ins((0, 80.0)), [], config, TODAY)
        assert active.source is MaintenanceSource.FORMULA

    def test_formula_source_ignores_calibration(self, calibration_history, cutting_config) -> None:
        weights, logs = calibration_history
        config = replace(cutting_config, maintenance_source=MaintenanceSource.FORMULA)
        active = resolve_active_maintenance(weights, logs, config, TODAY)

        assert active.kcal == 2560
        assert active.source is MaintenanceSource.FORMULA

    def test_policy_default_without_weights(self, cutting_config) -> None:
        active = resolve_active_maintenance([], [], cutting_config, TODAY)

        assert active.kcal == POLICY_DEFAULT_MAINTENANCE_KCAL
        assert active.is_policy_default

    def test_precomputed_calibration_reused(self, cutting_config) -> None:
        active = resolve_active_maintenance(
            weigh_ins((0, 80.0)), [], cutting_config, TODAY, calibrated=2111
        )
        assert active.kcal == 2111


class TestEstimateForSource:
    """Tests for single-source estimates."""

    def test_each_source(self, calibration_history, cutting_config) -> None:
        weights, logs = calibration_history
        config = replace(cutting_config, maintenance_calories_manual=1999)

        assert estimate_for_source(MaintenanceSource.FORMULA, weights, logs, config, TODAY) == 2560
        assert estimate_for_source(MaintenanceSource.APP_ESTIMATE, weights, logs, config, TODAY) == 2457
        assert estimate_for_source(MaintenanceSource.MANUAL, weights, logs, config, TODAY) == 1999

    def test_app_estimate_has_no_fallback(self, cutting_config) -> None:
        result = estimate_for_source(
            MaintenanceSource.APP_ESTIMATE, weigh_ins((0, 80.0)), [], cutting_config, TODAY
        )
        assert result is None
