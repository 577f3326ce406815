# compensation/services/read_models.py
"""
Plain read models handed to the commission engine by a repository.

The engine never touches ORM rows directly: the SQLAlchemy repository (or a
test double) converts rows into these frozen dataclasses, with the tier JSON
already validated into AcceleratorConfig / KickerConfig.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from compensation.schemas import AcceleratorConfig, KickerConfig


@dataclass(frozen=True)
class PlanVersion:
    id: str
    plan_id: str
    effective_from: date
    plan_name: Optional[str] = None
    version_number: int = 1
    base_rate_multiplier: float = 1.0
    accelerators_enabled: bool = True
    kickers_enabled: bool = False
    accelerators: Optional[AcceleratorConfig] = None
    kickers: Optional[KickerConfig] = None


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    versions: Tuple[PlanVersion, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Assignment:
    id: str
    user_id: str
    start_date: date
    plan: Plan
    end_date: Optional[date] = None


@dataclass(frozen=True)
class PeriodData:
    id: str
    user_id: str
    month: date
    quota: float
    base_salary: float
    ote: float
    effective_rate: float
    # Cached link, read only when no assignment resolves a version
    plan_version_id: Optional[str] = None


@dataclass(frozen=True)
class OrderRecord:
    id: str
    converted_usd: float
    booking_date: datetime
    status: str = 'APPROVED'
