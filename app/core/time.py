"""Time helpers shared by models and services.

Timestamps are stored in naive ``DateTime`` columns holding UTC values, so
``utc_now`` strips the tzinfo after reading an aware clock.
"""
from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today_utc() -> date:
    """Return the current UTC calendar date."""
    return utc_now().date()
