"""Expansion of bill definitions into dated instances"""

from datetime import date
from typing import List

from budget_planner.domain.models import Bill, BillInstance
from budget_planner.utils.date_utils import add_months, to_iso


def _instance(bill: Bill, instance_id: str, due_date: date) -> BillInstance:
    return BillInstance(
        instance_id=instance_id,
        base_id=f"{bill.name}-{to_iso(bill.due_date)}",
        name=bill.name,
        payment_amount=bill.payment_amount,
        due_date=due_date,
        bill_type=bill.bill_type,
        apr=bill.apr,
        remaining_balance=bill.remaining_balance,
        allowable_late_days=bill.allowable_late_days,
        bill_id=bill.id,
    )


def expand_bill(bill: Bill, horizon_end: date) -> List[BillInstance]:
    """
    Expand a bill into the instances due on or before horizon_end.

    Recurring bills repeat monthly from their original due date. Each step
    is taken from the original date so a 31st keeps returning to the 31st
    (clamped in shorter months) instead of drifting. One-time and other
    bills produce a single instance regardless of the horizon.
    """
    if bill.bill_type != "recurring":
        return [_instance(bill, f"{bill.name}-single-{to_iso(bill.due_date)}", bill.due_date)]

    instances = []
    index = 0
    due_date = bill.due_date
    while due_date <= horizon_end:
        instances.append(_instance(bill, f"{bill.name}-{index}-{to_iso(due_date)}", due_date))
        index += 1
        due_date = add_months(bill.due_date, index)
    return instances


def expand_bills(bills: List[Bill], horizon_end: date) -> List[BillInstance]:
    """Expand every bill, keeping input order"""
    instances: List[BillInstance] = []
    for bill in bills:
        instances.extend(expand_bill(bill, horizon_end))
    return instances
