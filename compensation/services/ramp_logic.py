# compensation/services/ramp_logic.py
# Onboarding ramp schedule logic. No database access.

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from compensation.exceptions import RampConfigurationError
from compensation.utils.dates import as_utc_date

logger = logging.getLogger(__name__)


class DrawType(str, enum.Enum):
    NON_RECOVERABLE = "NON_RECOVERABLE"
    # Carried as data only: top-ups are not recovered from later periods.
    RECOVERABLE = "RECOVERABLE"


@dataclass(frozen=True)
class RampStepConfig:
    month_index: int
    quota_percentage: float
    guaranteed_draw_percent: Optional[float] = None   # % of variable bonus (ote - base salary)
    draw_type: DrawType = DrawType.NON_RECOVERABLE
    disable_accelerators: Optional[bool] = None       # None means "default": suppressed
    disable_kickers: Optional[bool] = None


@dataclass(frozen=True)
class RampOverride:
    is_active: bool = False
    effective_quota_multiplier: float = 1.0
    guaranteed_draw_percent: float = 0.0
    draw_type: Optional[DrawType] = None
    month_index: Optional[int] = None
    disable_accelerators: bool = False
    disable_kickers: bool = False


NO_RAMP = RampOverride()


def tenure_month(assignment_start, period_month):
    """
    Calendar-month distance between the assignment start and the period, 1-based.

    Only the UTC year and month are used: an assignment starting Jan 15 is in
    month 1 for January and month 2 for February.
    """
    start = as_utc_date(assignment_start)
    period = as_utc_date(period_month)
    return (period.year - start.year) * 12 + (period.month - start.month) + 1


def index_ramp_steps(ramp_steps):
    """
    Maps month_index -> step. When a month appears more than once the first
    step in the given order is kept.
    """
    steps_by_month = {}
    for step in ramp_steps or []:
        if step.month_index in steps_by_month:
            logger.warning(
                "Duplicate ramp step for month %s; keeping the first one", step.month_index
            )
            continue
        steps_by_month[step.month_index] = step
    return steps_by_month


def calculate_ramp_override(assignment_start, period_month, ramp_steps):
    """
    Resolves the ramp override for one period.

    Args:
        assignment_start: Start date of the user's plan assignment (tenure anchor).
        period_month: Any date in the month being calculated, usually the 1st.
        ramp_steps: Iterable of RampStepConfig for the governing plan version.

    Returns:
        RampOverride. Neutral (inactive) when there are no steps, the period
        precedes the assignment, or no step matches the tenure month.
    """
    steps_by_month = index_ramp_steps(ramp_steps)
    if not steps_by_month:
        return NO_RAMP

    month = tenure_month(assignment_start, period_month)
    if month < 1:
        return NO_RAMP

    step = steps_by_month.get(month)
    if step is None:
        return NO_RAMP

    return RampOverride(
        is_active=True,
        effective_quota_multiplier=step.quota_percentage,
        guaranteed_draw_percent=float(step.guaranteed_draw_percent or 0.0),
        draw_type=DrawType(step.draw_type) if step.draw_type else DrawType.NON_RECOVERABLE,
        month_index=month,
        disable_accelerators=True if step.disable_accelerators is None else step.disable_accelerators,
        disable_kickers=True if step.disable_kickers is None else step.disable_kickers,
    )


def validate_ramp_steps(ramp_steps):
    """
    Checks a ramp schedule before it is saved.

    Raises:
        RampConfigurationError: On a non-positive or duplicate month index,
            a quota percentage outside (0, 1] or a draw percent outside [0, 100].
    """
    seen = set()
    for step in ramp_steps:
        if step.month_index < 1:
            raise RampConfigurationError(f"Ramp month index must be 1 or greater (got {step.month_index}).")
        if step.month_index in seen:
            raise RampConfigurationError(f"Duplicate ramp step for month {step.month_index}.")
        seen.add(step.month_index)

        if not 0 < step.quota_percentage <= 1:
            raise RampConfigurationError(
                f"Month {step.month_index}: quota percentage must be greater than 0 and at most 1 (got {step.quota_percentage})."
            )
        draw = step.guaranteed_draw_percent
        if draw is not None and not 0 <= draw <= 100:
            raise RampConfigurationError(
                f"Month {step.month_index}: guaranteed draw percent must be between 0 and 100 (got {draw})."
            )
        try:
            DrawType(step.draw_type)
        except ValueError:
            raise RampConfigurationError(f"Month {step.month_index}: unknown draw type '{step.draw_type}'.")
