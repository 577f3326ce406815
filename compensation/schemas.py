# compensation/schemas.py
"""
Typed tier configurations for plan versions.

CompPlanVersion stores accelerators and kickers as loosely-typed JSON blobs.
They are validated here, at the data-access boundary, so the evaluators in
services/commission_rules.py can rely on well-formed tiers.
"""
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import PlanConfigurationError


class AcceleratorTier(BaseModel):
    """Multiplier applied to overage revenue while attainment is in [min, max)."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    min_attainment: float = Field(alias='minAttainment', ge=0)
    max_attainment: Optional[float] = Field(default=None, alias='maxAttainment')
    multiplier: float = Field(ge=0)

    @model_validator(mode='after')
    def check_bounds(self):
        if self.max_attainment is not None and self.max_attainment <= self.min_attainment:
            raise ValueError(
                f"maxAttainment ({self.max_attainment}) must be greater than minAttainment ({self.min_attainment})"
            )
        return self


class AcceleratorConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tiers: List[AcceleratorTier] = Field(default_factory=list)
    description: Optional[str] = None


class KickerTier(BaseModel):
    """Fixed bonus of kicker_percent % of OTE once attainment reaches the threshold."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    attainment_threshold: float = Field(alias='attainmentThreshold', ge=0)
    # The admin UI historically saved this field as 'bonusPercent'
    kicker_percent: float = Field(
        validation_alias=AliasChoices('kickerPercent', 'bonusPercent', 'kicker_percent'),
        serialization_alias='kickerPercent',
        ge=0,
    )


class KickerConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tiers: List[KickerTier] = Field(default_factory=list)
    description: Optional[str] = None


def _parse_config(model, raw, label):
    if not raw:
        return None
    # A bare list of tiers is accepted as shorthand for {"tiers": [...]}
    if isinstance(raw, list):
        raw = {'tiers': raw}
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise PlanConfigurationError(f"Invalid {label} configuration: {e}") from e


def parse_accelerator_config(raw):
    """
    Validates a raw accelerator JSON blob.

    Returns:
        AcceleratorConfig or None when nothing is configured.

    Raises:
        PlanConfigurationError: If any tier is malformed.
    """
    return _parse_config(AcceleratorConfig, raw, 'accelerator')


def parse_kicker_config(raw):
    """
    Validates a raw kicker JSON blob.

    Returns:
        KickerConfig or None when nothing is configured.

    Raises:
        PlanConfigurationError: If any tier is malformed.
    """
    return _parse_config(KickerConfig, raw, 'kicker')
