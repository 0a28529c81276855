"""Paycheck allocation engine - assigns every bill instance to a paycheck"""

from typing import List, Optional, Tuple

from budget_planner.domain.bills import expand_bills
from budget_planner.domain.models import (
    Allocation,
    AllocatedBill,
    BillInstance,
    Overrides,
    PaycheckSlot,
    Schedule,
    ScheduleInputs,
)
from budget_planner.domain.paychecks import (
    build_timeline,
    extend_timeline,
    pay_period_length,
)
from budget_planner.utils.date_utils import days_between

# Extra days past allowable_late_days a bill may still be scheduled by scoring
GRACE_PERIOD = 5

UNFUNDED_CUSHION = -1000
GRACE_PENALTY = -500
BEFORE_DUE_BONUS = 50
TIME_SCORE_WEIGHT = 50


def build_allocations(slots: List[PaycheckSlot], savings_percent: float) -> List[Allocation]:
    """Create one empty allocation per paycheck, net of the savings percent"""
    reserve_factor = savings_percent / 100
    return [
        Allocation(
            pay_date=slot.pay_date,
            paycheck_amount=slot.amount * (1 - reserve_factor),
            gross_amount=slot.amount,
            source_id=slot.source_id,
            source_name=slot.source_name,
        )
        for slot in slots
    ]


def score_slot(instance: BillInstance, allocation: Allocation, has_funds: bool) -> float:
    """
    Score a candidate paycheck for a bill; higher is better.

    Components:
    - funds cushion: money left after paying (fixed -1000 when unfunded)
    - time score x50: distance from the edge of the allowed lateness window
    - +50 when paid on or before the due date
    - proximity: 100 minus days from the due date
    - -500 when the slot only fits thanks to the grace period
    """
    allowable = instance.allowable_late_days
    max_late_days = allowable + GRACE_PERIOD
    days_diff = days_between(instance.due_date, allocation.pay_date)

    funds_cushion = allocation.remaining_funds - instance.payment_amount if has_funds else UNFUNDED_CUSHION
    time_score = max_late_days - abs(days_diff)
    before_due = BEFORE_DUE_BONUS if allocation.pay_date <= instance.due_date else 0
    proximity = 100 - abs(days_diff)
    lateness_penalty = GRACE_PENALTY if allowable < days_diff <= max_late_days else 0

    return funds_cushion + time_score * TIME_SCORE_WEIGHT + before_due + proximity + lateness_penalty


def find_best_slot(
    instance: BillInstance,
    allocations: List[Allocation],
    pay_period: int,
    require_funds: bool = True,
) -> Optional[Tuple[int, float]]:
    """
    Find the best-scoring paycheck inside the bill's timing window.

    A paycheck qualifies when it is at most one pay period before the due
    date, no later than allowable_late_days + GRACE_PERIOD after it, and
    (when require_funds) still has room for the payment.

    Returns (index, score) or None. Ties keep the earliest paycheck.
    """
    max_late_days = instance.allowable_late_days + GRACE_PERIOD
    best: Optional[Tuple[int, float]] = None

    for index, allocation in enumerate(allocations):
        days_diff = days_between(instance.due_date, allocation.pay_date)
        if days_diff < -pay_period or days_diff > max_late_days:
            continue

        has_funds = instance.payment_amount <= allocation.remaining_funds
        if require_funds and not has_funds:
            continue

        score = score_slot(instance, allocation, has_funds)
        if best is None or score > best[1]:
            best = (index, score)

    return best


def find_nearest_slot(instance: BillInstance, allocations: List[Allocation], pay_period: int) -> int:
    """
    Last-resort placement: the paycheck closest to the due date.

    Only paychecks no more than one pay period early are considered. When
    every paycheck is earlier than that, the final paycheck is used so the
    bill still appears in the schedule.
    """
    nearest_index = -1
    nearest_diff = None

    for index, allocation in enumerate(allocations):
        days_diff = days_between(instance.due_date, allocation.pay_date)
        if days_diff < -pay_period:
            continue
        if nearest_diff is None or abs(days_diff) < nearest_diff:
            nearest_diff = abs(days_diff)
            nearest_index = index

    return nearest_index if nearest_index >= 0 else len(allocations) - 1


def _override_index(instance: BillInstance, allocations: List[Allocation], overrides: Overrides) -> Optional[int]:
    pinned_date = overrides.get(instance.instance_id)
    if pinned_date is None:
        return None
    for index, allocation in enumerate(allocations):
        if allocation.pay_date == pinned_date:
            return index
    return None


def place_bill(allocation: Allocation, instance: BillInstance, placement: str) -> AllocatedBill:
    """
    Append a bill to a paycheck and update its running total.

    Underfunded bills are listed but do not count against used_funds, so
    one oversized bill does not flag every later bill as underfunded too.
    """
    days_diff = days_between(instance.due_date, allocation.pay_date)
    is_late = days_diff > 0

    if placement == "fallback":
        is_underfunded = True
    else:
        is_underfunded = instance.payment_amount > allocation.remaining_funds

    allocated = AllocatedBill(
        instance=instance,
        is_late=is_late,
        is_critically_late=days_diff > instance.allowable_late_days,
        is_underfunded=is_underfunded,
        days_late=days_diff if is_late else 0,
        placement=placement,
    )
    allocation.bills.append(allocated)

    if not is_underfunded:
        allocation.used_funds += instance.payment_amount

    return allocated


def allocate(
    instances: List[BillInstance],
    allocations: List[Allocation],
    overrides: Optional[Overrides] = None,
) -> None:
    """
    Assign every bill instance to exactly one paycheck (mutates allocations).

    Bills are processed by due date (stable). For each, the first tier
    that yields a paycheck wins:
    1. override  - the user pinned this instance to a paycheck date
    2. funded    - best-scoring paycheck with enough money left
    3. unfunded  - best-scoring paycheck ignoring funds (flagged underfunded)
    4. fallback  - nearest paycheck regardless of lateness (flagged underfunded)
    """
    if not allocations:
        return

    overrides = overrides or {}
    pay_period = pay_period_length([a.pay_date for a in allocations])

    for instance in sorted(instances, key=lambda i: i.due_date):
        index = _override_index(instance, allocations, overrides)
        if index is not None:
            place_bill(allocations[index], instance, "override")
            continue

        best = find_best_slot(instance, allocations, pay_period, require_funds=True)
        if best is not None:
            place_bill(allocations[best[0]], instance, "funded")
            continue

        best = find_best_slot(instance, allocations, pay_period, require_funds=False)
        if best is not None:
            place_bill(allocations[best[0]], instance, "unfunded")
            continue

        index = find_nearest_slot(instance, allocations, pay_period)
        place_bill(allocations[index], instance, "fallback")


def compute_schedule(inputs: ScheduleInputs) -> Schedule:
    """
    Main entry point: build the paycheck timeline and allocate all bills.

    The returned schedule includes the trailing buffer paychecks; callers
    display schedule.visible, which covers the requested horizon only.
    """
    slots = build_timeline(inputs.income_sources, inputs.months_to_show)
    if not slots or not inputs.bills:
        return Schedule(allocations=[], visible_count=0)

    extended = extend_timeline(slots)
    allocations = build_allocations(extended, inputs.savings_percent)

    horizon_end = extended[-1].pay_date
    instances = expand_bills(inputs.bills, horizon_end)
    allocate(instances, allocations, inputs.overrides)

    return Schedule(allocations=allocations, visible_count=len(slots))
