# models.py

import uuid
from datetime import datetime
from . import db

# This file defines the tables the commission engine reads from.
# The engine never owns their lifecycle: it only reads them through
# services/repository.py and updates one cached pointer on UserPeriodData.


def _new_id():
    return str(uuid.uuid4())


# --- 1. USER MODEL ---

class User(db.Model):
    """
    Sales rep or back-office user. Only users with the REP role receive commissions.
    """
    __tablename__ = 'user'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(120), index=True, unique=True, nullable=False)
    # Role determines data visibility: 'REP', 'FINANCE', 'ADMIN'
    role = db.Column(db.String(10), nullable=False, default='REP')

    def __repr__(self):
        return f'<User {self.name} ({self.role})>'

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
        }


# --- 2. COMPENSATION PLAN MODELS ---

class CompPlan(db.Model):
    __tablename__ = 'comp_plan'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    frequency = db.Column(db.String(16), nullable=False, default='MONTHLY')

    versions = db.relationship(
        'CompPlanVersion', backref='plan', lazy=True,
        cascade="all, delete-orphan", order_by='CompPlanVersion.effective_from'
    )

    def __repr__(self):
        return f'<CompPlan {self.name}>'


class CompPlanVersion(db.Model):
    """
    A dated revision of a plan's rules. The version with the latest
    effective_from on or before the period start governs that period.

    accelerators / kickers hold the raw JSON tier blobs edited in the admin UI;
    they are validated by compensation.schemas before the engine sees them.
    """
    __tablename__ = 'comp_plan_version'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    plan_id = db.Column(db.String(36), db.ForeignKey('comp_plan.id'), nullable=False, index=True)
    version_number = db.Column(db.Integer, nullable=False, default=1)
    effective_from = db.Column(db.Date, nullable=False)

    base_rate_multiplier = db.Column(db.Float, nullable=False, default=1.0)
    accelerators_enabled = db.Column(db.Boolean, nullable=False, default=True)
    kickers_enabled = db.Column(db.Boolean, nullable=False, default=False)
    accelerators = db.Column(db.JSON, nullable=True)
    kickers = db.Column(db.JSON, nullable=True)

    ramp_steps = db.relationship(
        'RampStep', backref='plan_version', lazy=True,
        cascade="all, delete-orphan", order_by='RampStep.month_index'
    )

    def to_dict(self):
        return {
            'id': self.id,
            'plan_id': self.plan_id,
            'version_number': self.version_number,
            'effective_from': self.effective_from.isoformat() if self.effective_from else None,
            'base_rate_multiplier': self.base_rate_multiplier,
            'accelerators_enabled': self.accelerators_enabled,
            'kickers_enabled': self.kickers_enabled,
            'accelerators': self.accelerators,
            'kickers': self.kickers,
        }


class RampStep(db.Model):
    """
    Onboarding override for one tenure month of a plan version.
    """
    __tablename__ = 'ramp_step'
    __table_args__ = (
        db.UniqueConstraint('plan_version_id', 'month_index', name='uq_ramp_step_version_month'),
    )

    id = db.Column(db.Integer, primary_key=True)
    plan_version_id = db.Column(db.String(36), db.ForeignKey('comp_plan_version.id'), nullable=False, index=True)
    month_index = db.Column(db.Integer, nullable=False)
    quota_percentage = db.Column(db.Float, nullable=False)               # 0-1 of full quota/OTE
    guaranteed_draw_percent = db.Column(db.Float, nullable=True)         # 0-100 of variable bonus
    draw_type = db.Column(db.String(16), nullable=False, default='NON_RECOVERABLE')
    disable_accelerators = db.Column(db.Boolean, nullable=True, default=True)
    disable_kickers = db.Column(db.Boolean, nullable=True, default=True)

    def to_dict(self):
        return {
            'id': self.id,
            'plan_version_id': self.plan_version_id,
            'month_index': self.month_index,
            'quota_percentage': self.quota_percentage,
            'guaranteed_draw_percent': self.guaranteed_draw_percent,
            'draw_type': self.draw_type,
            'disable_accelerators': self.disable_accelerators,
            'disable_kickers': self.disable_kickers,
        }


# --- 3. ASSIGNMENT & PERIOD DATA ---

class PlanAssignment(db.Model):
    """
    Binds a user to a plan over [start_date, end_date). end_date NULL means open-ended.
    """
    __tablename__ = 'plan_assignment'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    plan_id = db.Column(db.String(36), db.ForeignKey('comp_plan.id'), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=True)

    plan = db.relationship('CompPlan', lazy=True)
    user = db.relationship('User', backref='assignments', lazy=True)


class UserPeriodData(db.Model):
    """
    Per-user, per-month compensation targets. `month` is always the first day of the month.
    """
    __tablename__ = 'user_period_data'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'month', name='uq_user_period_data_user_month'),
    )

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    month = db.Column(db.Date, nullable=False, index=True)
    quota = db.Column(db.Float, nullable=False)
    base_salary = db.Column(db.Float, nullable=False, default=0.0)
    ote = db.Column(db.Float, nullable=False)
    # Derived upstream as (ote - base_salary) / quota
    effective_rate = db.Column(db.Float, nullable=False)
    # Cached link to the plan version last resolved for this period
    plan_version_id = db.Column(db.String(36), db.ForeignKey('comp_plan_version.id'), nullable=True)

    plan_version = db.relationship('CompPlanVersion', lazy=True)
    user = db.relationship('User', backref='period_data', lazy=True)


# --- 4. ORDERS & ADJUSTMENTS ---

class Order(db.Model):
    __tablename__ = 'order'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    order_number = db.Column(db.String(64), nullable=False)
    booking_date = db.Column(db.DateTime, nullable=False, index=True)
    # DRAFT / PENDING / APPROVED / REJECTED; only APPROVED counts toward revenue
    status = db.Column(db.String(16), nullable=False, default='PENDING')
    converted_usd = db.Column(db.Float, nullable=False, default=0.0)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'order_number': self.order_number,
            'booking_date': self.booking_date.isoformat() if self.booking_date else None,
            'status': self.status,
            'converted_usd': self.converted_usd,
        }


class Adjustment(db.Model):
    """
    Manual correction recorded against a user's month.
    REVENUE adjustments feed the commission calculation; FIXED_BONUS ones are paid on top.
    """
    __tablename__ = 'adjustment'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    month = db.Column(db.Date, nullable=False, index=True)
    amount = db.Column(db.Float, nullable=False)
    reason = db.Column(db.String(255), nullable=True)
    adjustment_type = db.Column(db.String(16), nullable=False, default='FIXED_BONUS')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'month': self.month.isoformat(),
            'amount': self.amount,
            'reason': self.reason,
            'adjustment_type': self.adjustment_type,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
