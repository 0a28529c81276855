"""Savings projections and schedule summary statistics for reporting"""

from typing import Dict, List, Optional

from budget_planner.domain.models import (
    Allocation,
    Bill,
    IncomeSource,
    SavingsProjection,
    ScheduleSummary,
)

# Average paychecks per month for each frequency (52/12, 26/12, 24/12, 12/12)
PAYCHECKS_PER_MONTH: Dict[str, float] = {
    "weekly": 4.345,
    "biweekly": 2.1725,
    "twicemonthly": 2.0,
    "monthly": 1.0,
}


def monthly_income(source: IncomeSource) -> float:
    return source.amount * PAYCHECKS_PER_MONTH.get(source.frequency, 1.0)


def total_monthly_income(sources: List[IncomeSource]) -> float:
    return sum(monthly_income(source) for source in sources)


def project_savings(sources: List[IncomeSource], savings_percent: float, months_to_show: int) -> SavingsProjection:
    """Monthly savings at the given rate and the total over the horizon"""
    monthly = total_monthly_income(sources) * (savings_percent / 100)
    return SavingsProjection(
        monthly=monthly,
        total=monthly * months_to_show,
        percent=savings_percent,
    )


def default_paycheck_savings(gross_amount: float, savings_percent: float) -> float:
    return gross_amount * (savings_percent / 100)


def paycheck_savings_amount(
    allocation: Allocation,
    savings_percent: float,
    custom_amount: Optional[float] = None,
) -> float:
    """Savings deposit for a paycheck: the user's custom amount if recorded"""
    if custom_amount is not None:
        return custom_amount
    return default_paycheck_savings(allocation.gross_amount, savings_percent)


def usage_percent(allocation: Allocation) -> float:
    """Share of the net paycheck spoken for by funded bills"""
    if allocation.paycheck_amount <= 0:
        return 0.0
    return allocation.used_funds / allocation.paycheck_amount * 100


def summarize_schedule(
    allocations: List[Allocation],
    bills: List[Bill],
    sources: List[IncomeSource],
    savings_percent: float,
    deposited_savings: float = 0.0,
) -> ScheduleSummary:
    """
    Aggregate the visible schedule into report statistics.

    Savings target is the default savings of every paycheck in the
    schedule; progress compares deposits the user has recorded against it.
    Averages are per paycheck and zero for an empty schedule.
    """
    monthly = total_monthly_income(sources)
    count = len(allocations)

    savings_target = sum(default_paycheck_savings(a.gross_amount, savings_percent) for a in allocations)
    progress = deposited_savings / savings_target * 100 if savings_target > 0 else 0.0

    average_paycheck = sum(a.paycheck_amount for a in allocations) / count if count else 0.0
    average_bills = sum(a.used_funds for a in allocations) / count if count else 0.0
    average_usage = sum(usage_percent(a) for a in allocations) / count if count else 0.0

    placed = [bill for a in allocations for bill in a.bills]
    late_names: List[str] = []
    for bill in placed:
        if bill.is_late and bill.name not in late_names:
            late_names.append(bill.name)

    return ScheduleSummary(
        monthly_income=monthly,
        yearly_income=monthly * 12,
        total_bills_amount=sum(b.payment_amount for b in bills),
        bill_count=len(bills),
        savings_target=savings_target,
        deposited_savings=deposited_savings,
        savings_progress_percent=progress,
        average_usage_percent=average_usage,
        average_paycheck=average_paycheck,
        average_bills_per_paycheck=average_bills,
        average_remaining=average_paycheck - average_bills,
        late_count=sum(1 for b in placed if b.is_late),
        critically_late_count=sum(1 for b in placed if b.is_critically_late),
        underfunded_count=sum(1 for b in placed if b.is_underfunded),
        late_bill_names=late_names,
    )
