# compensation/services/earnings.py
# (Monthly earnings summary across all reps: the read side of the payouts screen.)

from datetime import timedelta

from flask import current_app

from compensation.exceptions import CommissionError
from compensation.utils.dates import month_label, month_start, next_month_start
from .commission_engine import calculate_commissions


def get_all_user_earnings(month, repository=None, rep_role=None):
    """
    Calculates every rep's commission for a month, including adjustments.

    REVENUE adjustments are fed into the calculation; FIXED_BONUS adjustments
    are reported alongside and added to totalEarnings. When a user has a
    non-zero revenue adjustment the month is calculated a second time without
    it, so revenueAdjustmentImpact shows what the adjustment changed.

    A failure for one user is reported in that user's 'error' field and the
    loop continues with the next user.

    Args:
        month (date): Any day of the month to summarise.
        repository: Commission repository; defaults to the SQLAlchemy one.
        rep_role (str): Role to include; defaults to app.config['REP_ROLE'].

    Returns:
        list[dict]: One entry per user, ordered by name.
    """
    if repository is None:
        from .repository import SqlAlchemyCommissionRepository
        repository = SqlAlchemyCommissionRepository()
    if rep_role is None:
        rep_role = current_app.config.get('REP_ROLE', 'REP')

    start_date = month_start(month)
    # Inclusive calendar-day window over the whole month
    end_date = next_month_start(month) - timedelta(days=1)

    results = []
    for user in repository.get_users_by_role(rep_role):
        totals = repository.get_adjustment_totals(user['id'], start_date)
        revenue_adjustment_total = totals.get('REVENUE', 0.0)
        fixed_bonus_total = totals.get('FIXED_BONUS', 0.0)

        commission = None
        revenue_adjustment_impact = 0.0
        error = None
        try:
            result = calculate_commissions(
                user['id'], start_date, end_date,
                revenue_adjustment=revenue_adjustment_total,
                repository=repository,
            )
            commission = result.to_dict()

            if revenue_adjustment_total != 0:
                without_adjustment = calculate_commissions(
                    user['id'], start_date, end_date,
                    revenue_adjustment=0.0,
                    repository=repository,
                )
                revenue_adjustment_impact = result.commission_earned - without_adjustment.commission_earned
        except CommissionError as e:
            error = e.message
            current_app.logger.warning(f"Earnings for {user['id']} in {month_label(start_date)} skipped: {error}")
        except Exception as e:
            error = "Failed to calculate commission"
            current_app.logger.error(
                f"Unexpected error calculating earnings for {user['id']} in {month_label(start_date)}: {e}",
                exc_info=True,
            )

        total_earnings = None
        if commission is not None:
            total_earnings = commission['commissionEarned'] + fixed_bonus_total

        results.append({
            'user': user,
            'month': month_label(start_date),
            'commission': commission,
            'revenueAdjustmentTotal': revenue_adjustment_total,
            'fixedBonusTotal': fixed_bonus_total,
            'revenueAdjustmentImpact': revenue_adjustment_impact,
            'totalEarnings': total_earnings,
            'error': error,
        })

    return results
