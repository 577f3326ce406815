# compensation/utils/dates.py
"""
UTC calendar helpers.

The engine works in whole UTC days. Aware datetimes are converted to UTC
before their date is taken; naive datetimes are assumed to already be UTC.
"""
from datetime import date, datetime, time, timedelta, timezone


def as_utc_datetime(value):
    """Returns a naive UTC datetime for a date or datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


def as_utc_date(value):
    """Returns the UTC calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return as_utc_datetime(value).date()
    return value


def month_start(value):
    """First day of the UTC month containing value."""
    day = as_utc_date(value)
    return date(day.year, day.month, 1)


def next_month_start(value):
    """First day of the UTC month after the one containing value."""
    first = month_start(value)
    if first.month == 12:
        return date(first.year + 1, 1, 1)
    return date(first.year, first.month + 1, 1)


def month_label(value):
    """'YYYY-MM' label used in messages and API payloads."""
    first = month_start(value)
    return f"{first.year:04d}-{first.month:02d}"


def parse_month(raw):
    """
    Parses a 'YYYY-MM' (or full ISO date) string into the first day of that month.

    Raises:
        ValueError: If the string is not a recognisable month.
    """
    if not raw:
        raise ValueError("Month is required in 'YYYY-MM' format.")
    raw = raw.strip()
    try:
        if len(raw) == 7:
            return datetime.strptime(raw, '%Y-%m').date()
        return month_start(date.fromisoformat(raw[:10]))
    except ValueError:
        raise ValueError(f"Invalid month '{raw}'. Expected 'YYYY-MM'.")


def inclusive_upper_bound(end):
    """
    Exclusive upper bound for a query that must include `end`.

    A plain date covers its whole day; a datetime is taken as an exact instant.
    """
    if isinstance(end, datetime):
        return as_utc_datetime(end) + timedelta(microseconds=1)
    return as_utc_datetime(end) + timedelta(days=1)
