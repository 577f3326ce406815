# compensation/services/repository.py
# (Flask-SQLAlchemy implementation of the data access the commission engine needs.)

from flask import current_app
from sqlalchemy import or_

from compensation import db
from compensation.models import (
    Adjustment, CompPlanVersion, Order, PlanAssignment, RampStep, User, UserPeriodData,
)
from compensation.schemas import parse_accelerator_config, parse_kicker_config
from compensation.utils.dates import as_utc_datetime, inclusive_upper_bound, month_start
from .commission_engine import resolve_plan_version
from .ramp_logic import DrawType, RampStepConfig, validate_ramp_steps
from .read_models import Assignment, OrderRecord, PeriodData, Plan, PlanVersion

APPROVED = 'APPROVED'


# --- 1. ROW -> READ MODEL CONVERSION ---

def to_plan_version(row, plan_name=None):
    """
    Converts a CompPlanVersion row, validating its tier JSON.

    Raises:
        PlanConfigurationError: If accelerators or kickers are malformed.
    """
    if row is None:
        return None
    if plan_name is None and row.plan is not None:
        plan_name = row.plan.name
    return PlanVersion(
        id=row.id,
        plan_id=row.plan_id,
        effective_from=row.effective_from,
        plan_name=plan_name,
        version_number=row.version_number,
        base_rate_multiplier=row.base_rate_multiplier if row.base_rate_multiplier is not None else 1.0,
        accelerators_enabled=bool(row.accelerators_enabled),
        kickers_enabled=bool(row.kickers_enabled),
        accelerators=parse_accelerator_config(row.accelerators),
        kickers=parse_kicker_config(row.kickers),
    )


def to_ramp_step_config(row):
    return RampStepConfig(
        month_index=row.month_index,
        quota_percentage=row.quota_percentage,
        guaranteed_draw_percent=row.guaranteed_draw_percent,
        draw_type=DrawType(row.draw_type or DrawType.NON_RECOVERABLE.value),
        disable_accelerators=row.disable_accelerators,
        disable_kickers=row.disable_kickers,
    )


class SqlAlchemyCommissionRepository:
    """
    Reads commission inputs through the Flask-SQLAlchemy session.

    Queries are not filtered by organisation; callers scope the data they expose.
    """

    # --- 2. READS ---

    def get_period_data(self, user_id, month):
        row = UserPeriodData.query.filter_by(user_id=user_id, month=month_start(month)).first()
        if row is None:
            return None
        return PeriodData(
            id=row.id,
            user_id=row.user_id,
            month=row.month,
            quota=row.quota,
            base_salary=row.base_salary or 0.0,
            ote=row.ote,
            effective_rate=row.effective_rate,
            plan_version_id=row.plan_version_id,
        )

    def get_active_assignment(self, user_id, period_start, period_end):
        """
        Latest-starting assignment whose [start_date, end_date) overlaps
        [period_start, period_end).

        The plan carries only the version in force at period_start. Superseded
        and future versions are never converted, so their tier JSON is not validated.
        """
        row = PlanAssignment.query.filter(
            PlanAssignment.user_id == user_id,
            PlanAssignment.start_date < period_end,
            or_(PlanAssignment.end_date.is_(None), PlanAssignment.end_date > period_start),
        ).order_by(PlanAssignment.start_date.desc()).first()

        if row is None:
            return None

        plan_row = row.plan
        governing = resolve_plan_version(plan_row.versions, period_start)
        plan = Plan(
            id=plan_row.id,
            name=plan_row.name,
            versions=(to_plan_version(governing, plan_name=plan_row.name),) if governing is not None else (),
        )
        return Assignment(
            id=row.id,
            user_id=row.user_id,
            start_date=row.start_date,
            end_date=row.end_date,
            plan=plan,
        )

    def get_plan_version(self, plan_version_id):
        """
        Loads one plan version with its plan name, or None if it does not exist.

        Raises:
            PlanConfigurationError: If its accelerators or kickers are malformed.
        """
        return to_plan_version(db.session.get(CompPlanVersion, plan_version_id))

    def get_ramp_steps(self, plan_version_id):
        rows = RampStep.query.filter_by(plan_version_id=plan_version_id) \
            .order_by(RampStep.month_index, RampStep.id).all()
        return [to_ramp_step_config(r) for r in rows]

    def get_approved_orders(self, user_id, start_date, end_date):
        """APPROVED orders booked in [start_date, end_date]; a plain end date covers its whole day."""
        rows = Order.query.filter(
            Order.user_id == user_id,
            Order.status == APPROVED,
            Order.booking_date >= as_utc_datetime(start_date),
            Order.booking_date < inclusive_upper_bound(end_date),
        ).order_by(Order.booking_date).all()
        return [
            OrderRecord(id=r.id, converted_usd=r.converted_usd or 0.0, booking_date=r.booking_date, status=r.status)
            for r in rows
        ]

    # --- 3. WRITES ---

    def update_period_data_plan_version(self, period_data_id, plan_version_id):
        """Rewrites the cached plan-version link. Rolls back and re-raises on failure."""
        try:
            row = db.session.get(UserPeriodData, period_data_id)
            if row is None:
                raise LookupError(f"UserPeriodData {period_data_id} not found")
            row.plan_version_id = plan_version_id
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def replace_ramp_steps(self, plan_version_id, steps):
        """
        Validates a ramp schedule and replaces the version's steps in one transaction.

        Args:
            plan_version_id (str): Target plan version.
            steps (list[RampStepConfig]): New schedule.

        Raises:
            RampConfigurationError: If the schedule is invalid (nothing is written).
            LookupError: If the plan version does not exist.
        """
        validate_ramp_steps(steps)

        version = db.session.get(CompPlanVersion, plan_version_id)
        if version is None:
            raise LookupError(f"Plan version {plan_version_id} not found")

        try:
            RampStep.query.filter_by(plan_version_id=plan_version_id).delete()
            for step in steps:
                db.session.add(RampStep(
                    plan_version_id=plan_version_id,
                    month_index=step.month_index,
                    quota_percentage=step.quota_percentage,
                    guaranteed_draw_percent=step.guaranteed_draw_percent,
                    draw_type=DrawType(step.draw_type).value,
                    disable_accelerators=step.disable_accelerators,
                    disable_kickers=step.disable_kickers,
                ))
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error saving ramp steps for plan version {plan_version_id}: {e}")
            raise

        current_app.logger.info(f"Saved {len(steps)} ramp step(s) for plan version {plan_version_id}")
        return self.get_ramp_steps(plan_version_id)

    # --- 4. EARNINGS SUPPORT ---

    def get_users_by_role(self, role):
        """Returns users with the given role as dicts, ordered by name."""
        return [u.to_dict() for u in User.query.filter_by(role=role).order_by(User.name).all()]

    def get_adjustment_totals(self, user_id, month):
        """
        Sums the month's adjustments by type.

        Returns:
            dict: {'REVENUE': float, 'FIXED_BONUS': float}
        """
        totals = {'REVENUE': 0.0, 'FIXED_BONUS': 0.0}
        rows = Adjustment.query.filter_by(user_id=user_id, month=month_start(month)).all()
        for row in rows:
            totals[row.adjustment_type] = totals.get(row.adjustment_type, 0.0) + (row.amount or 0.0)
        return totals
