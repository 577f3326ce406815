# compensation/services/proration.py
# Pure day-counting logic. No database access.

from dataclasses import dataclass

from compensation.utils.dates import as_utc_date, month_start, next_month_start


@dataclass(frozen=True)
class ProrationResult:
    active_days: int
    total_days: int
    factor: float

    def to_dict(self):
        return {
            'activeDays': self.active_days,
            'totalDays': self.total_days,
            'factor': self.factor,
        }


def month_bounds(value):
    """
    Returns the half-open UTC day range [first of month, first of next month)
    for the month containing value.
    """
    return month_start(value), next_month_start(value)


def calculate_proration(period_start, period_end, assignment_start=None, assignment_end=None):
    """
    Intersects an assignment window with a calculation period.

    Both ranges are half-open: [period_start, period_end) and
    [assignment_start, assignment_end or open). All values are reduced to
    UTC calendar days before counting.

    Args:
        period_start: First day of the period.
        period_end: Exclusive end of the period.
        assignment_start: Assignment start, or None when there is no assignment.
        assignment_end: Assignment end, or None when open-ended.

    Returns:
        ProrationResult with factor = active_days / total_days (0.0 for an empty period).
    """
    period_start = as_utc_date(period_start)
    period_end = as_utc_date(period_end)
    total_days = max(0, (period_end - period_start).days)

    if assignment_start is None:
        return ProrationResult(active_days=total_days, total_days=total_days,
                               factor=1.0 if total_days else 0.0)

    window_start = max(as_utc_date(assignment_start), period_start)
    window_end = period_end
    if assignment_end is not None:
        window_end = min(as_utc_date(assignment_end), period_end)

    active_days = (window_end - window_start).days
    active_days = max(0, min(active_days, total_days))

    factor = active_days / total_days if total_days else 0.0
    return ProrationResult(active_days=active_days, total_days=total_days, factor=factor)
