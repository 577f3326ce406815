# compensation/utils/__init__.py
"""
Utility functions package.

- general.py: service result handling and JSON helpers.
- dates.py: UTC calendar-day and month-boundary helpers.
"""

from .general import _handle_service_result, convert_to_json_safe
from .dates import as_utc_date, month_start, next_month_start, month_label, parse_month

__all__ = [
    '_handle_service_result',
    'convert_to_json_safe',
    'as_utc_date',
    'month_start',
    'next_month_start',
    'month_label',
    'parse_month',
]
