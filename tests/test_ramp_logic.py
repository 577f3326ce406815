"""Tests for onboarding ramp evaluation."""
import logging
from datetime import date

import pytest

from compensation.exceptions import RampConfigurationError
from compensation.services.ramp_logic import (
    NO_RAMP, DrawType, RampStepConfig, calculate_ramp_override, tenure_month, validate_ramp_steps,
)


class TestTenureMonth:
    def test_mid_month_start_counts_as_first_month(self):
        assert tenure_month(date(2024, 1, 15), date(2024, 1, 1)) == 1

    def test_next_month(self):
        assert tenure_month(date(2024, 1, 31), date(2024, 2, 1)) == 2

    def test_across_year_boundary(self):
        assert tenure_month(date(2023, 11, 20), date(2024, 2, 1)) == 4

    def test_period_before_start(self):
        assert tenure_month(date(2024, 3, 1), date(2024, 1, 1)) == -1


class TestCalculateRampOverride:
    def test_no_steps_is_neutral(self):
        assert calculate_ramp_override(date(2024, 1, 1), date(2024, 1, 1), []) == NO_RAMP

    def test_period_before_assignment_is_neutral(self):
        steps = [RampStepConfig(month_index=1, quota_percentage=0.5)]
        override = calculate_ramp_override(date(2024, 3, 1), date(2024, 1, 1), steps)
        assert override.is_active is False
        assert override.effective_quota_multiplier == 1.0

    def test_no_matching_month_is_neutral(self):
        steps = [RampStepConfig(month_index=1, quota_percentage=0.5)]
        override = calculate_ramp_override(date(2024, 1, 1), date(2024, 4, 1), steps)
        assert override == NO_RAMP
        assert override.disable_accelerators is False
        assert override.disable_kickers is False

    def test_matching_step_defaults_to_suppression(self):
        steps = [
            RampStepConfig(month_index=1, quota_percentage=0.5, guaranteed_draw_percent=80),
            RampStepConfig(month_index=2, quota_percentage=0.75, guaranteed_draw_percent=50),
        ]
        override = calculate_ramp_override(date(2024, 1, 15), date(2024, 2, 1), steps)
        assert override.is_active is True
        assert override.month_index == 2
        assert override.effective_quota_multiplier == 0.75
        assert override.guaranteed_draw_percent == 50.0
        assert override.draw_type == DrawType.NON_RECOVERABLE
        assert override.disable_accelerators is True
        assert override.disable_kickers is True

    def test_explicit_flags_are_respected(self):
        steps = [RampStepConfig(month_index=1, quota_percentage=0.5,
                                disable_accelerators=False, disable_kickers=False)]
        override = calculate_ramp_override(date(2024, 1, 1), date(2024, 1, 1), steps)
        assert override.disable_accelerators is False
        assert override.disable_kickers is False

    def test_missing_draw_is_zero(self):
        steps = [RampStepConfig(month_index=1, quota_percentage=0.5)]
        override = calculate_ramp_override(date(2024, 1, 1), date(2024, 1, 1), steps)
        assert override.guaranteed_draw_percent == 0.0

    def test_recoverable_draw_type_is_carried(self):
        steps = [RampStepConfig(month_index=1, quota_percentage=0.5, draw_type=DrawType.RECOVERABLE)]
        override = calculate_ramp_override(date(2024, 1, 1), date(2024, 1, 1), steps)
        assert override.draw_type == DrawType.RECOVERABLE

    def test_duplicate_month_keeps_first_and_warns(self, caplog):
        steps = [
            RampStepConfig(month_index=1, quota_percentage=0.25),
            RampStepConfig(month_index=1, quota_percentage=0.9),
        ]
        with caplog.at_level(logging.WARNING):
            override = calculate_ramp_override(date(2024, 1, 1), date(2024, 1, 1), steps)
        assert override.effective_quota_multiplier == 0.25
        assert "Duplicate ramp step for month 1" in caplog.text


class TestValidateRampSteps:
    def test_valid_schedule(self):
        validate_ramp_steps([
            RampStepConfig(month_index=1, quota_percentage=0.25, guaranteed_draw_percent=100),
            RampStepConfig(month_index=2, quota_percentage=0.5, guaranteed_draw_percent=50),
            RampStepConfig(month_index=3, quota_percentage=1.0),
        ])

    @pytest.mark.parametrize("steps, message", [
        ([RampStepConfig(month_index=0, quota_percentage=0.5)], "1 or greater"),
        ([RampStepConfig(month_index=1, quota_percentage=0.5),
          RampStepConfig(month_index=1, quota_percentage=0.6)], "Duplicate"),
        ([RampStepConfig(month_index=1, quota_percentage=1.5)], "quota percentage"),
        ([RampStepConfig(month_index=1, quota_percentage=0.0, guaranteed_draw_percent=100)], "quota percentage"),
        ([RampStepConfig(month_index=1, quota_percentage=0.5, guaranteed_draw_percent=120)], "draw percent"),
        ([RampStepConfig(month_index=1, quota_percentage=0.5, draw_type='CLAWBACK')], "unknown draw type"),
    ])
    def test_invalid_schedules(self, steps, message):
        with pytest.raises(RampConfigurationError, match=message):
            validate_ramp_steps(steps)
