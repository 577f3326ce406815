"""Tests for accelerator and kicker rules."""
import pytest

from compensation.exceptions import InvalidQuotaError
from compensation.schemas import AcceleratorTier, parse_accelerator_config, parse_kicker_config
from compensation.services.commission_rules import (
    NO_ACCELERATOR_LABEL,
    calculate_commission_with_accelerators,
    calculate_kickers,
    find_applicable_tier,
)

STANDARD_TIERS = parse_accelerator_config({'tiers': [
    {'minAttainment': 0, 'maxAttainment': 100, 'multiplier': 1.0},
    {'minAttainment': 100, 'maxAttainment': 125, 'multiplier': 1.5},
    {'minAttainment': 125, 'maxAttainment': 150, 'multiplier': 2.0},
    {'minAttainment': 150, 'maxAttainment': None, 'multiplier': 2.5},
]})


class TestFindApplicableTier:
    def test_min_inclusive_max_exclusive(self):
        assert find_applicable_tier(125, STANDARD_TIERS.tiers).multiplier == 2.0
        assert find_applicable_tier(124.99, STANDARD_TIERS.tiers).multiplier == 1.5

    def test_open_ended_tier(self):
        assert find_applicable_tier(400, STANDARD_TIERS.tiers).multiplier == 2.5

    def test_gap_in_tiers_matches_nothing(self):
        tiers = [
            AcceleratorTier(min_attainment=100, max_attainment=120, multiplier=1.5),
            AcceleratorTier(min_attainment=150, multiplier=2.5),
        ]
        assert find_applicable_tier(130, tiers) is None

    def test_open_ended_tier_below_a_finite_tier(self):
        tiers = [
            AcceleratorTier(min_attainment=100, multiplier=1.5),
            AcceleratorTier(min_attainment=120, max_attainment=130, multiplier=2.0),
        ]
        assert find_applicable_tier(125, tiers).multiplier == 2.0
        assert find_applicable_tier(140, tiers).multiplier == 1.5
        assert find_applicable_tier(100, tiers).multiplier == 1.5
        assert find_applicable_tier(99.9, tiers) is None

    def test_unsorted_input(self):
        tiers = list(reversed(STANDARD_TIERS.tiers))
        assert find_applicable_tier(110, tiers).multiplier == 1.5


class TestCommissionWithAccelerators:
    def test_below_quota(self):
        earned, breakdown = calculate_commission_with_accelerators(80000, 100000, 0.6, STANDARD_TIERS)
        assert breakdown.base_commission == pytest.approx(48000)
        assert breakdown.overage_commission == 0
        assert earned == pytest.approx(48000)
        assert breakdown.tier_applied == NO_ACCELERATOR_LABEL

    def test_first_accelerated_tier(self):
        earned, breakdown = calculate_commission_with_accelerators(110000, 100000, 0.6, STANDARD_TIERS)
        assert breakdown.base_commission == pytest.approx(60000)
        assert breakdown.overage_revenue == pytest.approx(10000)
        assert breakdown.overage_commission == pytest.approx(9000)
        assert breakdown.accelerator_multiplier == 1.5
        assert breakdown.tier_applied == "100-125% tier (1.5x)"
        assert earned == pytest.approx(69000)

    def test_highest_tier(self):
        earned, breakdown = calculate_commission_with_accelerators(250000, 100000, 0.5, STANDARD_TIERS)
        assert breakdown.accelerator_multiplier == 2.5
        assert breakdown.tier_applied == "150%+ tier (2.5x)"
        assert breakdown.overage_revenue == pytest.approx(150000)
        assert breakdown.overage_commission == pytest.approx(187500)
        assert earned == pytest.approx(50000 + 187500)

    def test_exactly_at_quota_has_no_accelerator(self):
        earned, breakdown = calculate_commission_with_accelerators(100000, 100000, 0.6, STANDARD_TIERS)
        assert breakdown.accelerator_multiplier == 1.0
        assert breakdown.overage_revenue == 0
        assert earned == pytest.approx(60000)

    def test_just_above_quota_uses_first_tier(self):
        _, breakdown = calculate_commission_with_accelerators(100010, 100000, 0.6, STANDARD_TIERS)
        assert breakdown.accelerator_multiplier == 1.5

    def test_without_config_overage_is_paid_at_base_rate(self):
        earned, breakdown = calculate_commission_with_accelerators(110000, 100000, 0.6, None)
        assert breakdown.accelerator_multiplier == 1.0
        assert earned == pytest.approx(66000)

    def test_base_rate_multiplier_scales_everything(self):
        earned, breakdown = calculate_commission_with_accelerators(
            110000, 100000, 0.6, STANDARD_TIERS, base_rate_multiplier=2.0
        )
        assert breakdown.base_commission == pytest.approx(120000)
        assert breakdown.overage_commission == pytest.approx(18000)
        assert breakdown.base_rate_multiplier == 2.0
        assert earned == pytest.approx(138000)

    @pytest.mark.parametrize("quota", [0, -100])
    def test_non_positive_quota_is_rejected(self, quota):
        with pytest.raises(InvalidQuotaError):
            calculate_commission_with_accelerators(1000, quota, 0.6, STANDARD_TIERS)

    def test_breakdown_to_dict(self):
        _, breakdown = calculate_commission_with_accelerators(110000, 100000, 0.6, STANDARD_TIERS)
        data = breakdown.to_dict()
        assert data['acceleratorMultiplier'] == 1.5
        assert data['tierApplied'] == "100-125% tier (1.5x)"
        assert data['kickerAmount'] == 0.0
        assert data['kickersApplied'] == []


class TestKickers:
    KICKERS = parse_kicker_config({'tiers': [
        {'attainmentThreshold': 100, 'kickerPercent': 5},
        {'attainmentThreshold': 125, 'kickerPercent': 5},
    ]})

    def test_milestones_stack(self):
        amount, applied = calculate_kickers(130, 160000, self.KICKERS, kickers_enabled=True)
        assert amount == pytest.approx(16000)
        assert applied == ("100% milestone (+5% OTE)", "125% milestone (+5% OTE)")

    def test_only_reached_milestones_pay(self):
        amount, applied = calculate_kickers(110, 160000, self.KICKERS, kickers_enabled=True)
        assert amount == pytest.approx(8000)
        assert applied == ("100% milestone (+5% OTE)",)

    def test_disabled(self):
        assert calculate_kickers(200, 160000, self.KICKERS, kickers_enabled=False) == (0.0, ())

    def test_no_config(self):
        assert calculate_kickers(200, 160000, None, kickers_enabled=True) == (0.0, ())

    def test_below_every_threshold(self):
        assert calculate_kickers(90, 160000, self.KICKERS, kickers_enabled=True) == (0.0, ())
