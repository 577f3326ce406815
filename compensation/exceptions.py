# compensation/exceptions.py
"""
Exceptions raised by the commission engine.

Only NoPeriodDataError is expected in normal operation; the configuration
errors signal bad plan data that must be fixed by an administrator.
"""


class CommissionError(Exception):
    """Base class for commission engine errors."""
    def __init__(self, message):
        self.message = message
        super().__init__(self.message)


class NoPeriodDataError(CommissionError, LookupError):
    """Raised when a user has no UserPeriodData row for the requested month."""
    def __init__(self, user_id, month_label):
        self.user_id = user_id
        self.month_label = month_label
        super().__init__(f"no period data for {user_id}/{month_label}")


class InvalidQuotaError(CommissionError, ValueError):
    """Raised when attainment would be computed against a zero or negative quota."""


class PlanConfigurationError(CommissionError, ValueError):
    """Raised when a plan version's accelerator or kicker JSON fails validation."""


class RampConfigurationError(CommissionError, ValueError):
    """Raised when a set of ramp steps cannot be saved as a valid schedule."""
