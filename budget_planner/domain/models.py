"""Domain models - pure Python dataclasses representing budgeting entities"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from budget_planner.domain.exceptions import InvalidBillError, InvalidIncomeSourceError

FREQUENCIES = ("weekly", "biweekly", "twicemonthly", "monthly")
BILL_TYPES = ("recurring", "one-time", "other")

# Resolution tier that placed a bill; "manual" marks a bill moved by the user
PLACEMENTS = ("override", "funded", "unfunded", "fallback", "manual")

# instance_id -> pay date the user pinned it to
Overrides = Dict[str, date]


@dataclass
class IncomeSource:
    """Recurring income stream with its own pay calendar"""

    id: str
    name: str
    amount: float  # gross per pay event
    frequency: str  # one of FREQUENCIES
    last_pay_date: Optional[date] = None
    first_pay_day: Optional[int] = None  # twicemonthly only
    second_pay_day: Optional[int] = None  # twicemonthly only

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise InvalidIncomeSourceError(f"Income amount must be >= 0, got {self.amount}")
        if self.frequency not in FREQUENCIES:
            raise InvalidIncomeSourceError(f"Unknown pay frequency: {self.frequency!r}")
        for day in (self.first_pay_day, self.second_pay_day):
            if day is not None and not 1 <= day <= 31:
                raise InvalidIncomeSourceError(f"Pay day must be within 1-31, got {day}")


@dataclass
class PaycheckSlot:
    """Concrete pay event on the merged timeline"""

    pay_date: date
    source_id: str
    source_name: str
    amount: float  # gross


@dataclass
class Bill:
    """Bill definition as entered by the user"""

    name: str
    payment_amount: float
    due_date: date
    bill_type: str = "recurring"  # one of BILL_TYPES
    apr: float = 0.0
    remaining_balance: float = 0.0
    allowable_late_days: int = 0
    id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidBillError("Bill name is required")
        if self.payment_amount < 0:
            raise InvalidBillError(f"Payment amount must be >= 0, got {self.payment_amount}")
        if self.bill_type not in BILL_TYPES:
            raise InvalidBillError(f"Unknown bill type: {self.bill_type!r}")
        if self.allowable_late_days < 0:
            raise InvalidBillError(f"Allowable late days must be >= 0, got {self.allowable_late_days}")


@dataclass
class BillInstance:
    """Single occurrence of a bill; a by-value snapshot of its definition"""

    instance_id: str
    base_id: str
    name: str
    payment_amount: float
    due_date: date
    bill_type: str
    apr: float
    remaining_balance: float
    allowable_late_days: int
    bill_id: Optional[str] = None


@dataclass
class AllocatedBill:
    """Bill instance placed on a paycheck, with its status flags"""

    instance: BillInstance
    is_late: bool
    is_critically_late: bool
    is_underfunded: bool
    days_late: int
    placement: str  # one of PLACEMENTS

    @property
    def name(self) -> str:
        return self.instance.name

    @property
    def instance_id(self) -> str:
        return self.instance.instance_id

    @property
    def payment_amount(self) -> float:
        return self.instance.payment_amount

    @property
    def due_date(self) -> date:
        return self.instance.due_date


@dataclass
class Allocation:
    """Bills assigned to one paycheck"""

    pay_date: date
    paycheck_amount: float  # net of savings
    gross_amount: float
    source_id: str
    source_name: str
    used_funds: float = 0.0
    bills: List[AllocatedBill] = field(default_factory=list)

    @property
    def remaining_funds(self) -> float:
        return self.paycheck_amount - self.used_funds


@dataclass
class ScheduleInputs:
    """Everything the allocation pipeline depends on"""

    income_sources: List[IncomeSource]
    bills: List[Bill]
    savings_percent: float
    months_to_show: int
    overrides: Overrides = field(default_factory=dict)


@dataclass
class Schedule:
    """Allocation result; trailing buffer paychecks follow the visible horizon"""

    allocations: List[Allocation]
    visible_count: int

    @property
    def visible(self) -> List[Allocation]:
        return self.allocations[: self.visible_count]

    @property
    def buffer(self) -> List[Allocation]:
        return self.allocations[self.visible_count :]


@dataclass
class MoveResult:
    """Outcome of moving a bill to an adjacent paycheck"""

    instance_id: str
    from_pay_date: date
    to_pay_date: date


@dataclass
class SavingsProjection:
    """Projected savings for the configured horizon"""

    monthly: float
    total: float
    percent: float


@dataclass
class ScheduleSummary:
    """Aggregate statistics consumed by reports"""

    monthly_income: float
    yearly_income: float
    total_bills_amount: float
    bill_count: int
    savings_target: float
    deposited_savings: float
    savings_progress_percent: float
    average_usage_percent: float
    average_paycheck: float
    average_bills_per_paycheck: float
    average_remaining: float
    late_count: int
    critically_late_count: int
    underfunded_count: int
    late_bill_names: List[str]
