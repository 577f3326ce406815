# compensation/services/__init__.py
"""
Commission services.

Pure evaluators (no database access):
- proration.py: active-day factor of an assignment within a period.
- ramp_logic.py: tenure-month onboarding overrides.
- commission_rules.py: base/accelerator commission and kicker bonuses.

Coordinators:
- commission_engine.py: calculate_commissions, the single entry point.
- repository.py: Flask-SQLAlchemy implementation of the data the engine reads.
- earnings.py: month-wide earnings summary for every rep.
- commissions.py: route-facing wrappers returning {"success": ...} results.
- read_models.py: frozen dataclasses the repository hands to the engine.
"""
