"""Shared fixtures: Flask app on in-memory SQLite, bearer tokens, seed helpers and a fake repository."""
import time
from dataclasses import replace

import jwt
import pytest

from compensation import create_app, db
from compensation.config import TestConfig
from compensation.models import (
    Adjustment, CompPlan, CompPlanVersion, Order, PlanAssignment, RampStep, User, UserPeriodData,
)
from compensation.utils.dates import as_utc_date, month_start


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_token(app):
    def _make(user_id, role='REP', email=None, expires_in=3600):
        payload = {
            'sub': user_id,
            'email': email or f'{user_id}@example.com',
            'aud': 'authenticated',
            'exp': int(time.time()) + expires_in,
            'user_metadata': {'role': role},
        }
        return jwt.encode(payload, app.config['SUPABASE_JWT_SECRET'], algorithm='HS256')
    return _make


@pytest.fixture
def auth_header(make_token):
    def _header(user_id, role='REP'):
        return {'Authorization': f'Bearer {make_token(user_id, role)}'}
    return _header


class Seeder:
    """Creates and commits ORM rows with sensible defaults."""

    def user(self, name='Alice Rep', role='REP', email=None):
        user = User(name=name, role=role, email=email or f"{name.lower().replace(' ', '.')}@example.com")
        return self._save(user)

    def plan(self, name='Enterprise AE'):
        return self._save(CompPlan(name=name))

    def version(self, plan, effective_from, version_number=1, **kwargs):
        return self._save(CompPlanVersion(
            plan_id=plan.id, effective_from=effective_from, version_number=version_number, **kwargs
        ))

    def ramp_step(self, version, month_index, quota_percentage, **kwargs):
        return self._save(RampStep(
            plan_version_id=version.id, month_index=month_index, quota_percentage=quota_percentage, **kwargs
        ))

    def assignment(self, user, plan, start_date, end_date=None):
        return self._save(PlanAssignment(
            user_id=user.id, plan_id=plan.id, start_date=start_date, end_date=end_date
        ))

    def period(self, user, month, quota=100000.0, ote=100000.0, base_salary=40000.0,
               effective_rate=0.6, plan_version=None):
        return self._save(UserPeriodData(
            user_id=user.id, month=month, quota=quota, ote=ote, base_salary=base_salary,
            effective_rate=effective_rate, plan_version_id=plan_version.id if plan_version else None,
        ))

    def order(self, user, converted_usd, booking_date, status='APPROVED', order_number=None):
        return self._save(Order(
            user_id=user.id, converted_usd=converted_usd, booking_date=booking_date, status=status,
            order_number=order_number or f'SO-{booking_date:%Y%m%d%H%M}-{int(converted_usd)}',
        ))

    def adjustment(self, user, month, amount, adjustment_type='FIXED_BONUS', reason=None):
        return self._save(Adjustment(
            user_id=user.id, month=month, amount=amount, adjustment_type=adjustment_type, reason=reason
        ))

    @staticmethod
    def _save(row):
        db.session.add(row)
        db.session.commit()
        return row


@pytest.fixture
def seed(app):
    return Seeder()


class FakeCommissionRepository:
    """In-memory stand-in for SqlAlchemyCommissionRepository."""

    def __init__(self):
        self.period_data = {}       # (user_id, first of month) -> PeriodData
        self.plan_versions = {}     # plan_version_id -> PlanVersion
        self.version_loads = []
        self.assignments = {}       # user_id -> Assignment
        self.ramp_steps = {}        # plan_version_id -> [RampStepConfig]
        self.orders = {}            # user_id -> [OrderRecord]
        self.users = []
        self.adjustments = {}       # (user_id, first of month) -> {'REVENUE': x, 'FIXED_BONUS': y}
        self.updates = []
        self.fail_on_update = False

    def add_period(self, period, plan_version=None):
        """Stores period data, optionally caching a plan version on it."""
        if plan_version is not None:
            self.plan_versions[plan_version.id] = plan_version
            period = replace(period, plan_version_id=plan_version.id)
        self.period_data[(period.user_id, month_start(period.month))] = period

    def get_period_data(self, user_id, month):
        return self.period_data.get((user_id, month_start(month)))

    def get_active_assignment(self, user_id, period_start, period_end):
        assignment = self.assignments.get(user_id)
        if assignment is None:
            return None
        if assignment.start_date >= period_end:
            return None
        if assignment.end_date is not None and assignment.end_date <= period_start:
            return None
        return assignment

    def get_plan_version(self, plan_version_id):
        self.version_loads.append(plan_version_id)
        return self.plan_versions.get(plan_version_id)

    def get_ramp_steps(self, plan_version_id):
        return list(self.ramp_steps.get(plan_version_id, []))

    def get_approved_orders(self, user_id, start_date, end_date):
        start, end = as_utc_date(start_date), as_utc_date(end_date)
        return [
            o for o in self.orders.get(user_id, [])
            if o.status == 'APPROVED' and start <= as_utc_date(o.booking_date) <= end
        ]

    def update_period_data_plan_version(self, period_data_id, plan_version_id):
        if self.fail_on_update:
            raise RuntimeError('database is read-only')
        self.updates.append((period_data_id, plan_version_id))

    def get_users_by_role(self, role):
        return [u for u in self.users if u['role'] == role]

    def get_adjustment_totals(self, user_id, month):
        totals = {'REVENUE': 0.0, 'FIXED_BONUS': 0.0}
        totals.update(self.adjustments.get((user_id, month_start(month)), {}))
        return totals


@pytest.fixture
def fake_repository():
    return FakeCommissionRepository()

