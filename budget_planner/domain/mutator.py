"""Interactive schedule edits - moving bills between adjacent paychecks"""

from datetime import date
from typing import List, Optional

from budget_planner.domain.exceptions import AllocationNotFoundError, BillNotFoundError
from budget_planner.domain.models import Allocation, MoveResult, Overrides
from budget_planner.utils.date_utils import days_between

DIRECTIONS = {"up": -1, "down": 1}


def refresh_underfunded(allocation: Allocation) -> None:
    """
    Re-flag underfunded bills with largest-first priority.

    Bills are visited by payment amount, largest first. A bill is funded
    while the running total including it stays within the paycheck.
    """
    running_total = 0.0
    for bill in sorted(allocation.bills, key=lambda b: b.payment_amount, reverse=True):
        if running_total + bill.payment_amount > allocation.paycheck_amount:
            bill.is_underfunded = True
        else:
            bill.is_underfunded = False
            running_total += bill.payment_amount


def move_bill(
    allocations: List[Allocation],
    bill_name: str,
    from_pay_date: date,
    direction: str,
    overrides: Optional[Overrides] = None,
) -> Optional[MoveResult]:
    """
    Move a bill to the previous ("up") or next ("down") paycheck.

    Both paychecks get their underfunded flags recomputed. The payment
    amount leaves the source total only if the bill was funded there, and
    joins the target total only if it is funded there after the move, so
    used_funds never counts an underfunded bill. The moved bill's lateness
    is re-evaluated against its new pay date.
    When an override map is passed, the move is recorded in it so the next
    recomputation keeps the bill where the user put it.

    Returns None when there is no adjacent paycheck in that direction.

    Raises:
        ValueError: direction is not "up" or "down"
        AllocationNotFoundError: no paycheck on from_pay_date
        BillNotFoundError: the paycheck has no bill with that name
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Direction must be 'up' or 'down', got {direction!r}")

    current_index = next(
        (i for i, alloc in enumerate(allocations) if alloc.pay_date == from_pay_date),
        None,
    )
    if current_index is None:
        raise AllocationNotFoundError(f"No paycheck on {from_pay_date.isoformat()}")

    source = allocations[current_index]
    bill_index = next((i for i, b in enumerate(source.bills) if b.name == bill_name), None)
    if bill_index is None:
        raise BillNotFoundError(f"{bill_name!r} is not assigned to paycheck {from_pay_date.isoformat()}")

    target_index = current_index + DIRECTIONS[direction]
    if target_index < 0 or target_index >= len(allocations):
        return None

    target = allocations[target_index]
    moved = source.bills.pop(bill_index)
    was_funded = not moved.is_underfunded
    moved.placement = "manual"
    days_diff = days_between(moved.due_date, target.pay_date)
    moved.is_late = days_diff > 0
    moved.days_late = days_diff if moved.is_late else 0
    moved.is_critically_late = days_diff > moved.instance.allowable_late_days
    target.bills.append(moved)

    refresh_underfunded(source)
    refresh_underfunded(target)

    if was_funded:
        source.used_funds -= moved.payment_amount
    if not moved.is_underfunded:
        target.used_funds += moved.payment_amount

    if overrides is not None:
        overrides[moved.instance_id] = target.pay_date

    return MoveResult(
        instance_id=moved.instance_id,
        from_pay_date=source.pay_date,
        to_pay_date=target.pay_date,
    )
