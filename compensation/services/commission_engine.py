# compensation/services/commission_engine.py
# (This file sequences proration, ramp, accelerators, kickers and the draw floor.)

import logging
from dataclasses import dataclass, replace
from typing import Optional, Protocol, Sequence

from flask import current_app, has_app_context

from compensation.exceptions import NoPeriodDataError
from compensation.utils.dates import month_label, month_start, next_month_start
from .commission_rules import (
    CommissionBreakdown, calculate_attainment, calculate_commission_with_accelerators, calculate_kickers,
)
from .proration import ProrationResult, calculate_proration
from .ramp_logic import NO_RAMP, RampOverride, RampStepConfig, calculate_ramp_override
from .read_models import Assignment, OrderRecord, PeriodData, PlanVersion

_module_logger = logging.getLogger(__name__)


def _logger():
    return current_app.logger if has_app_context() else _module_logger


class CommissionRepository(Protocol):
    """Data access the engine needs. Results must already be organisation-scoped."""

    def get_period_data(self, user_id, month) -> Optional[PeriodData]:
        ...

    def get_active_assignment(self, user_id, period_start, period_end) -> Optional[Assignment]:
        ...

    def get_plan_version(self, plan_version_id) -> Optional[PlanVersion]:
        ...

    def get_ramp_steps(self, plan_version_id) -> Sequence[RampStepConfig]:
        ...

    def get_approved_orders(self, user_id, start_date, end_date) -> Sequence[OrderRecord]:
        ...

    def update_period_data_plan_version(self, period_data_id, plan_version_id) -> None:
        ...


# --- 1. RESULT TYPES ---

@dataclass(frozen=True)
class PeriodSummary:
    quota: float
    effective_rate: float
    plan_name: Optional[str]
    ote: float
    base_salary: float

    def to_dict(self):
        return {
            'quota': self.quota,
            'effectiveRate': self.effective_rate,
            'planName': self.plan_name,
            'ote': self.ote,
            'baseSalary': self.base_salary,
        }


@dataclass(frozen=True)
class RampSummary:
    month_index: int
    original_quota: float
    ramped_quota_pre_proration: float
    guaranteed_draw_percent: float
    guaranteed_draw_amount: float
    draw_top_up: float
    draw_type: Optional[str] = None
    is_active: bool = True

    def to_dict(self):
        return {
            'isActive': self.is_active,
            'monthIndex': self.month_index,
            'originalQuota': self.original_quota,
            'rampedQuotaPreProration': self.ramped_quota_pre_proration,
            'guaranteedDrawPercent': self.guaranteed_draw_percent,
            'guaranteedDrawAmount': self.guaranteed_draw_amount,
            'drawTopUp': self.draw_top_up,
            'drawType': self.draw_type,
        }


@dataclass(frozen=True)
class CommissionResult:
    total_revenue: float
    attainment_percent: float
    commission_earned: float
    breakdown: CommissionBreakdown
    period_data: PeriodSummary
    proration: Optional[ProrationResult] = None
    ramp: Optional[RampSummary] = None
    plan_version_id: Optional[str] = None

    def to_dict(self):
        data = {
            'totalRevenue': self.total_revenue,
            'attainmentPercent': self.attainment_percent,
            'commissionEarned': self.commission_earned,
            'breakdown': self.breakdown.to_dict(),
            'periodData': self.period_data.to_dict(),
            'planVersionId': self.plan_version_id,
        }
        if self.proration is not None:
            data['proration'] = self.proration.to_dict()
        if self.ramp is not None:
            data['ramp'] = self.ramp.to_dict()
        return data


# --- 2. PLAN VERSION RESOLUTION ---

def resolve_plan_version(versions, period_start) -> Optional[PlanVersion]:
    """
    Returns the version with the latest effective_from on or before period_start,
    or None when every version starts after the period.
    """
    eligible = [v for v in versions if v.effective_from <= period_start]
    if not eligible:
        return None
    return max(eligible, key=lambda v: v.effective_from)


def sync_cached_plan_version(repository, period_data, plan_version):
    """
    Points the period's cached plan-version link at the resolved version.

    Best-effort: the link is only a cache, so a failed write is logged and the
    calculation continues with the in-memory version.

    Returns:
        True if the link was written, False if nothing changed or the write failed.
    """
    if plan_version is None or period_data.plan_version_id == plan_version.id:
        return False
    try:
        repository.update_period_data_plan_version(period_data.id, plan_version.id)
    except Exception as e:
        _logger().warning(
            f"Could not update cached plan version for period data {period_data.id}: {e}"
        )
        return False
    return True


# --- 3. MAIN ENTRY POINT ---

def calculate_commissions(user_id, start_date, end_date, revenue_adjustment=0.0, repository=None):
    """
    Calculates a user's commission for the month containing start_date.

    Orders are counted when APPROVED and booked within [start_date, end_date]
    inclusive; quota, OTE and draw come from the period data for that month,
    reduced by the onboarding ramp and prorated by the active assignment window.

    Args:
        user_id (str): User to calculate for.
        start_date (date | datetime): Start of the order window; also picks the month.
        end_date (date | datetime): Inclusive end of the order window.
        revenue_adjustment (float): Extra revenue added to the order total.
        repository (CommissionRepository): Data source. Defaults to the SQLAlchemy repository.

    Returns:
        CommissionResult

    Raises:
        NoPeriodDataError: If the user has no period data for the month.
        InvalidQuotaError: If the effective quota is zero or negative.
        PlanConfigurationError: If the governing plan version has malformed tiers.
    """
    if repository is None:
        from .repository import SqlAlchemyCommissionRepository
        repository = SqlAlchemyCommissionRepository()

    period_start = month_start(start_date)
    period_end = next_month_start(start_date)

    # --- 1. Period data (fatal if missing) ---
    period_data = repository.get_period_data(user_id, period_start)
    if period_data is None:
        raise NoPeriodDataError(user_id, month_label(period_start))

    # --- 2. Assignment and plan version ---
    assignment = repository.get_active_assignment(user_id, period_start, period_end)

    plan_version = None
    if assignment is not None:
        plan_version = resolve_plan_version(assignment.plan.versions, period_start)
        sync_cached_plan_version(repository, period_data, plan_version)
    if plan_version is None and period_data.plan_version_id is not None:
        # Cached link is only loaded when no assignment resolves a version
        plan_version = repository.get_plan_version(period_data.plan_version_id)

    # --- 3. Proration ---
    if assignment is not None:
        proration = calculate_proration(period_start, period_end, assignment.start_date, assignment.end_date)
    else:
        proration = calculate_proration(period_start, period_end)

    # --- 4. Ramp ---
    ramp_override: RampOverride = NO_RAMP
    if assignment is not None and plan_version is not None:
        ramp_steps = repository.get_ramp_steps(plan_version.id)
        ramp_override = calculate_ramp_override(assignment.start_date, period_start, ramp_steps)

    if plan_version is not None:
        base_rate_multiplier = plan_version.base_rate_multiplier
        accelerators_enabled = plan_version.accelerators_enabled
        kickers_enabled = plan_version.kickers_enabled
    else:
        base_rate_multiplier = 1.0
        accelerators_enabled = False
        kickers_enabled = False

    effective_quota = period_data.quota
    effective_ote = period_data.ote
    draw_before_proration = 0.0
    if ramp_override.is_active:
        effective_quota = period_data.quota * ramp_override.effective_quota_multiplier
        effective_ote = period_data.ote * ramp_override.effective_quota_multiplier
        # Ramp suppression wins over the plan version's own flags
        if ramp_override.disable_accelerators:
            accelerators_enabled = False
        if ramp_override.disable_kickers:
            kickers_enabled = False
        # Draw is a share of the full variable bonus, not the ramped one
        variable_bonus = period_data.ote - period_data.base_salary
        draw_before_proration = ramp_override.guaranteed_draw_percent / 100 * variable_bonus

    # --- 5. Proration applied uniformly ---
    prorated_quota = effective_quota * proration.factor
    prorated_ote = effective_ote * proration.factor
    prorated_draw = draw_before_proration * proration.factor

    # --- 6. Revenue ---
    orders = repository.get_approved_orders(user_id, start_date, end_date)
    order_revenue = sum(order.converted_usd for order in orders)
    total_revenue = order_revenue + revenue_adjustment

    # --- 7. Commission + kickers ---
    attainment_percent = calculate_attainment(total_revenue, prorated_quota)
    accelerator_config = plan_version.accelerators if (plan_version is not None and accelerators_enabled) else None
    commission_earned, breakdown = calculate_commission_with_accelerators(
        total_revenue,
        prorated_quota,
        period_data.effective_rate,
        accelerator_config,
        base_rate_multiplier,
    )

    kicker_config = plan_version.kickers if plan_version is not None else None
    kicker_amount, kickers_applied = calculate_kickers(
        attainment_percent, prorated_ote, kicker_config, kickers_enabled
    )
    breakdown = replace(breakdown, kicker_amount=kicker_amount, kickers_applied=kickers_applied)

    total_commission = commission_earned + kicker_amount

    # --- 8. Draw floor ---
    draw_top_up = 0.0
    if prorated_draw > 0 and prorated_draw > total_commission:
        draw_top_up = prorated_draw - total_commission
        total_commission = prorated_draw

    ramp_summary = None
    if ramp_override.is_active:
        ramp_summary = RampSummary(
            month_index=ramp_override.month_index,
            original_quota=period_data.quota,
            ramped_quota_pre_proration=effective_quota,
            guaranteed_draw_percent=ramp_override.guaranteed_draw_percent,
            guaranteed_draw_amount=prorated_draw,
            draw_top_up=draw_top_up,
            draw_type=ramp_override.draw_type.value if ramp_override.draw_type else None,
        )

    _logger().debug(
        f"Commission for {user_id} {month_label(period_start)}: revenue={total_revenue:.2f} "
        f"attainment={attainment_percent:.2f}% earned={total_commission:.2f}"
    )

    return CommissionResult(
        total_revenue=total_revenue,
        attainment_percent=attainment_percent,
        commission_earned=total_commission,
        breakdown=breakdown,
        period_data=PeriodSummary(
            quota=prorated_quota,
            effective_rate=period_data.effective_rate,
            plan_name=plan_version.plan_name if plan_version is not None else None,
            ote=prorated_ote,
            base_salary=period_data.base_salary,
        ),
        proration=proration,
        ramp=ramp_summary,
        plan_version_id=plan_version.id if plan_version is not None else None,
    )
