# compensation/services/commissions.py
# (Service functions behind the commission routes. They return the
#  {"success": ...} dicts / (dict, status) tuples the routes expect.)

from datetime import timedelta

from flask import current_app

from compensation.exceptions import (
    InvalidQuotaError, NoPeriodDataError, PlanConfigurationError, RampConfigurationError,
)
from compensation.utils import convert_to_json_safe, month_label, next_month_start
from .commission_engine import calculate_commissions
from .earnings import get_all_user_earnings


def get_user_commission(user_id, month, revenue_adjustment=0.0, repository=None):
    """
    Calculates one user's commission for a month.

    Args:
        user_id (str): User to calculate for.
        month (date): First day of the month.
        revenue_adjustment (float): Extra revenue to include.

    Returns:
        dict | tuple: {"success": True, "data": {...}} or ({"success": False, "error": ...}, status)
    """
    end_date = next_month_start(month) - timedelta(days=1)
    try:
        result = calculate_commissions(
            user_id, month, end_date,
            revenue_adjustment=revenue_adjustment,
            repository=repository,
        )
        return {"success": True, "data": convert_to_json_safe(result.to_dict())}

    except NoPeriodDataError as e:
        current_app.logger.info(f"Commission requested without period data: {e.message}")
        return {"success": False, "error": f"No compensation data for {month_label(month)}."}, 404

    except (InvalidQuotaError, PlanConfigurationError, RampConfigurationError) as e:
        current_app.logger.warning(f"Invalid compensation setup for {user_id} in {month_label(month)}: {e.message}")
        return {"success": False, "error": e.message}, 422

    except Exception as e:
        current_app.logger.error(
            f"Error calculating commission for {user_id} in {month_label(month)}: {str(e)}", exc_info=True
        )
        return {"success": False, "error": "Failed to calculate commission."}, 500


def get_earnings_summary(month, repository=None):
    """
    Monthly earnings for every rep.

    Returns:
        dict | tuple: {"success": True, "data": {"month": ..., "users": [...]}} or error tuple.
    """
    try:
        users = get_all_user_earnings(month, repository=repository)
    except Exception as e:
        current_app.logger.error(f"Error building earnings summary for {month_label(month)}: {str(e)}", exc_info=True)
        return {"success": False, "error": "Failed to build earnings summary."}, 500

    return {
        "success": True,
        "data": convert_to_json_safe({"month": month_label(month), "users": users}),
    }
