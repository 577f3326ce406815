# compensation/services/commission_rules.py
# (This file contains the tier lookup and bonus rules. No database access.)

from dataclasses import dataclass, field
from typing import Tuple

from compensation.exceptions import InvalidQuotaError

NO_ACCELERATOR_LABEL = "No accelerator (1x)"


@dataclass(frozen=True)
class CommissionBreakdown:
    base_revenue: float
    base_commission: float
    overage_revenue: float
    overage_commission: float
    accelerator_multiplier: float = 1.0
    tier_applied: str = NO_ACCELERATOR_LABEL
    base_rate_multiplier: float = 1.0
    kicker_amount: float = 0.0
    kickers_applied: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self):
        return {
            'baseRevenue': self.base_revenue,
            'baseCommission': self.base_commission,
            'overageRevenue': self.overage_revenue,
            'overageCommission': self.overage_commission,
            'acceleratorMultiplier': self.accelerator_multiplier,
            'tierApplied': self.tier_applied,
            'baseRateMultiplier': self.base_rate_multiplier,
            'kickerAmount': self.kicker_amount,
            'kickersApplied': list(self.kickers_applied),
        }


def _fmt(value):
    """Formats 100.0 as '100' and 1.5 as '1.5' for tier labels."""
    return f"{value:g}"


def format_tier_description(tier):
    if tier.max_attainment is None:
        return f"{_fmt(tier.min_attainment)}%+ tier ({_fmt(tier.multiplier)}x)"
    return f"{_fmt(tier.min_attainment)}-{_fmt(tier.max_attainment)}% tier ({_fmt(tier.multiplier)}x)"


def format_kicker_description(tier):
    return f"{_fmt(tier.attainment_threshold)}% milestone (+{_fmt(tier.kicker_percent)}% OTE)"


def calculate_attainment(total_revenue, quota):
    """
    Revenue as a percentage of quota.

    Raises:
        InvalidQuotaError: If quota is zero or negative.
    """
    if quota is None or quota <= 0:
        raise InvalidQuotaError(f"Quota must be greater than zero to compute attainment (got {quota}).")
    return total_revenue / quota * 100


# --- 1. ACCELERATOR TIER LOOKUP ---

def find_applicable_tier(attainment_percent, tiers):
    """
    Finds the accelerator tier for an attainment percentage.

    Tiers are checked from the highest minAttainment down; a tier matches when
    min <= attainment < max (max None means open-ended). A second pass over the
    open-ended tiers is kept as a fallback; the range pass already matches every
    open-ended tier whose minimum has been reached, so it never changes the result.

    Returns:
        The matching AcceleratorTier, or None.
    """
    sorted_tiers = sorted(tiers, key=lambda t: t.min_attainment, reverse=True)

    for tier in sorted_tiers:
        meets_min = attainment_percent >= tier.min_attainment
        meets_max = tier.max_attainment is None or attainment_percent < tier.max_attainment
        if meets_min and meets_max:
            return tier

    # Fallback only: unreachable after the range pass above
    for tier in tiers:
        if tier.max_attainment is None and attainment_percent >= tier.min_attainment:
            return tier

    return None


# --- 2. BASE + ACCELERATOR COMMISSION ---

def calculate_commission_with_accelerators(total_revenue, quota, effective_rate,
                                           accelerator_config=None, base_rate_multiplier=1.0):
    """
    Splits revenue at quota and pays the overage at the accelerator multiplier.

    Accelerators are only consulted when attainment is strictly above 100%;
    at exactly 100% the overage is zero and the multiplier stays 1.0.

    Args:
        total_revenue (float): Revenue for the period, adjustments included.
        quota (float): Quota already ramped and prorated.
        effective_rate (float): (OTE - base salary) / quota.
        accelerator_config (AcceleratorConfig | None): None disables accelerators.
        base_rate_multiplier (float): Plan version multiplier on the whole rate.

    Returns:
        (commission_earned, CommissionBreakdown)

    Raises:
        InvalidQuotaError: If quota is zero or negative.
    """
    attainment_percent = calculate_attainment(total_revenue, quota)

    base_revenue = min(total_revenue, quota)
    base_commission = base_revenue * effective_rate * base_rate_multiplier

    overage_revenue = max(0.0, total_revenue - quota)

    accelerator_multiplier = 1.0
    tier_applied = NO_ACCELERATOR_LABEL

    if attainment_percent > 100 and accelerator_config is not None and accelerator_config.tiers:
        tier = find_applicable_tier(attainment_percent, accelerator_config.tiers)
        if tier is not None:
            accelerator_multiplier = tier.multiplier
            tier_applied = format_tier_description(tier)

    overage_commission = overage_revenue * effective_rate * accelerator_multiplier * base_rate_multiplier

    breakdown = CommissionBreakdown(
        base_revenue=base_revenue,
        base_commission=base_commission,
        overage_revenue=overage_revenue,
        overage_commission=overage_commission,
        accelerator_multiplier=accelerator_multiplier,
        tier_applied=tier_applied,
        base_rate_multiplier=base_rate_multiplier,
    )
    return base_commission + overage_commission, breakdown


# --- 3. KICKERS ---

def calculate_kickers(attainment_percent, ote, kicker_config=None, kickers_enabled=False):
    """
    Accrues milestone bonuses. Every threshold reached pays, so milestones stack.

    Args:
        attainment_percent (float): Attainment against the effective quota.
        ote (float): On-target earnings already ramped and prorated.
        kicker_config (KickerConfig | None): Milestone tiers.
        kickers_enabled (bool): Effective flag after ramp suppression.

    Returns:
        (kicker_amount, kickers_applied) where kickers_applied follows config order.
    """
    if not kickers_enabled or kicker_config is None or not kicker_config.tiers:
        return 0.0, ()

    kicker_amount = 0.0
    kickers_applied = []
    for tier in kicker_config.tiers:
        if attainment_percent >= tier.attainment_threshold:
            kicker_amount += tier.kicker_percent / 100 * ote
            kickers_applied.append(format_kicker_description(tier))

    return kicker_amount, tuple(kickers_applied)
