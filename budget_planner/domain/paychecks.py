"""Paycheck calendar generation from income source frequency rules"""

import math
from datetime import date, timedelta
from typing import List

from budget_planner.domain.models import IncomeSource, PaycheckSlot
from budget_planner.utils.date_utils import add_months, clamped_date, days_between

WEEKS_PER_MONTH = 4.345
DEFAULT_PAY_PERIOD_DAYS = 14
TRAILING_BUFFER_PERIODS = 2

DEFAULT_FIRST_PAY_DAY = 1
DEFAULT_SECOND_PAY_DAY = 15


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def generate_pay_dates(source: IncomeSource, months_to_show: int) -> List[PaycheckSlot]:
    """
    Expand one income source into its paycheck slots for the horizon.

    Rules by frequency:
    - weekly:       round(4.345 * months) slots, 7 days apart
    - biweekly:     2 * months slots, 14 days apart
    - twicemonthly: two configured days per month, clamped to month end;
                    first-month dates before the anchor are skipped
    - monthly:      one slot per month on the anchor's day (clamped)

    Sources without an anchor date produce no slots. They are being
    filled in by the user and are not an error.
    """
    start = source.last_pay_date
    if start is None or months_to_show <= 0:
        return []

    def slot(pay_date) -> PaycheckSlot:
        return PaycheckSlot(
            pay_date=pay_date,
            source_id=source.id,
            source_name=source.name,
            amount=source.amount,
        )

    if source.frequency == "weekly":
        count = _round_half_up(WEEKS_PER_MONTH * months_to_show)
        return [slot(start + timedelta(days=i * 7)) for i in range(count)]

    if source.frequency == "biweekly":
        return [slot(start + timedelta(days=i * 14)) for i in range(2 * months_to_show)]

    if source.frequency == "twicemonthly":
        first_day = source.first_pay_day or DEFAULT_FIRST_PAY_DAY
        second_day = source.second_pay_day or DEFAULT_SECOND_PAY_DAY
        days = sorted((first_day, second_day))

        slots = []
        for i in range(months_to_show):
            month_start = add_months(start.replace(day=1), i)
            for day in days:
                pay_date = clamped_date(month_start.year, month_start.month, day)
                if pay_date >= start or i > 0:
                    slots.append(slot(pay_date))
        return sorted(slots, key=lambda s: s.pay_date)

    # monthly
    return [slot(add_months(start, i)) for i in range(months_to_show)]


def build_timeline(sources: List[IncomeSource], months_to_show: int) -> List[PaycheckSlot]:
    """Merge every source's paychecks into one chronological timeline"""
    slots: List[PaycheckSlot] = []
    for source in sources:
        slots.extend(generate_pay_dates(source, months_to_show))
    return sorted(slots, key=lambda s: s.pay_date)


def pay_period_length(pay_dates: List[date]) -> int:
    """Days between the first two pay dates; 14 when there are fewer than two"""
    if len(pay_dates) < 2:
        return DEFAULT_PAY_PERIOD_DAYS
    return days_between(pay_dates[0], pay_dates[1])


def extend_timeline(slots: List[PaycheckSlot], periods: int = TRAILING_BUFFER_PERIODS) -> List[PaycheckSlot]:
    """
    Append synthetic paychecks after the horizon.

    Bills due near the end of the horizon need somewhere to land. The extra
    slots repeat the last paycheck's source and amount, spaced by the pay
    period. Timelines with fewer than two paychecks have no cadence and are
    returned unchanged.
    """
    extended = list(slots)
    if len(slots) < 2:
        return extended

    period = pay_period_length([s.pay_date for s in slots])
    if period <= 0:
        # Two sources paying on the same first day; fall back to the default cadence
        period = DEFAULT_PAY_PERIOD_DAYS

    last = slots[-1]
    for i in range(1, periods + 1):
        extended.append(
            PaycheckSlot(
                pay_date=last.pay_date + timedelta(days=i * period),
                source_id=last.source_id,
                source_name=last.source_name,
                amount=last.amount,
            )
        )
    return extended
