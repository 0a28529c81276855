"""Date manipulation utilities"""

import calendar
from datetime import date
from dateutil.relativedelta import relativedelta


def days_between(start: date, end: date) -> int:
    """Signed whole days from start to end (positive when end is later)"""
    return (end - start).days


def add_months(from_date: date, months: int) -> date:
    """Shift by calendar months, clamping the day to the target month's last day"""
    return from_date + relativedelta(months=months)


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamped_date(year: int, month: int, day: int) -> date:
    """Build a date, pulling day 29-31 back to the month's last valid day"""
    return date(year, month, min(day, last_day_of_month(year, month)))


def to_iso(value: date) -> str:
    return value.isoformat()
