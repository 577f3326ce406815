# compensation/api/commissions.py
# (This file is for all commission related routes.)

from flask import Blueprint, request, jsonify, g

from compensation.jwt_auth import require_jwt, finance_admin_required
from compensation.utils import _handle_service_result, parse_month
from compensation.services.commissions import get_user_commission, get_earnings_summary

bp = Blueprint('commissions', __name__)


def _month_from_args():
    """Returns (month, None) or (None, error_response)."""
    try:
        return parse_month(request.args.get('month')), None
    except ValueError as e:
        return None, (jsonify({"success": False, "error": str(e)}), 400)


@bp.route('/commissions/earnings', methods=['GET'])
@require_jwt
@finance_admin_required
def earnings_route():
    month, error = _month_from_args()
    if error:
        return error
    return _handle_service_result(get_earnings_summary(month))


@bp.route('/commissions/<user_id>', methods=['GET'])
@require_jwt
def user_commission_route(user_id):
    if not g.current_user.can_read_commissions_of(user_id):
        return jsonify({"success": False, "error": "Permission denied: you can only view your own commissions."}), 403

    month, error = _month_from_args()
    if error:
        return error

    try:
        revenue_adjustment = float(request.args.get('revenue_adjustment', 0) or 0)
    except ValueError:
        return jsonify({"success": False, "error": "revenue_adjustment must be a number."}), 400

    return _handle_service_result(get_user_commission(user_id, month, revenue_adjustment))
