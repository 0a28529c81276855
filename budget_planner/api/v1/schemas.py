"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import List, Literal, Optional

from budget_planner.config import settings

Frequency = Literal["weekly", "biweekly", "twicemonthly", "monthly"]
BillType = Literal["recurring", "one-time", "other"]


class IncomeSourceSchema(BaseModel):
    """Single income source"""

    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0, description="Gross amount per paycheck")
    frequency: Frequency
    last_pay_date: Optional[date] = Field(None, description="Most recent pay date, anchors the calendar")
    first_pay_day: Optional[int] = Field(None, ge=1, le=31, description="twicemonthly: first day of month")
    second_pay_day: Optional[int] = Field(None, ge=1, le=31, description="twicemonthly: second day of month")


class IncomeRequest(BaseModel):
    """Request body for PUT /v1/income"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    sources: List[IncomeSourceSchema]
    savings_percent: float = Field(settings.default_savings_percent, ge=0, le=100)
    months_to_show: int = Field(settings.default_months_to_show, ge=1, le=settings.max_months_to_show)


class IncomeResponse(BaseModel):
    """Response for GET/PUT /v1/income"""

    user_id: str
    sources: List[IncomeSourceSchema]
    savings_percent: float
    months_to_show: int


class BillCreateRequest(BaseModel):
    """Request body for POST /v1/bills"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    name: str = Field(..., min_length=1)
    payment_amount: float = Field(..., gt=0)
    apr: float = Field(0.0, ge=0, description="Informational")
    remaining_balance: float = Field(0.0, ge=0, description="Informational")
    due_date: date
    bill_type: BillType = "recurring"
    allowable_late_days: int = Field(0, ge=0, description="Days late before a bill counts as critically late")


class BillSchema(BaseModel):
    """Stored bill definition"""

    id: str
    name: str
    payment_amount: float
    apr: float
    remaining_balance: float
    due_date: date
    bill_type: str
    allowable_late_days: int


class AllocatedBillSchema(BaseModel):
    """Bill instance placed on a paycheck"""

    instance_id: str
    base_id: str
    name: str
    payment_amount: float
    apr: float
    due_date: date
    bill_type: str
    allowable_late_days: int
    is_late: bool
    is_critically_late: bool
    is_underfunded: bool
    days_late: int
    placement: str
    is_paid: bool = False


class AllocationSchema(BaseModel):
    """Bills assigned to a single paycheck"""

    pay_date: date
    source_id: str
    source_name: str
    gross_amount: float
    paycheck_amount: float
    used_funds: float
    remaining_funds: float
    savings_amount: float
    savings_deposited: bool = False
    bills: List[AllocatedBillSchema]


class ScheduleResponse(BaseModel):
    """Response for GET /v1/schedule"""

    user_id: str
    savings_percent: float
    months_to_show: int
    allocations: List[AllocationSchema]
    buffer: List[AllocationSchema] = Field(default_factory=list, description="Paychecks past the horizon")


class MoveRequest(BaseModel):
    """Request body for POST /v1/schedule/move"""

    user_id: str = Field(..., min_length=1)
    bill_name: str = Field(..., min_length=1)
    from_pay_date: date
    direction: Literal["up", "down"]


class MoveResponse(BaseModel):
    """Response for POST /v1/schedule/move"""

    moved: bool
    instance_id: Optional[str] = None
    to_pay_date: Optional[date] = None
    schedule: ScheduleResponse


class AssignmentRequest(BaseModel):
    """Request body for PUT /v1/schedule/assignments"""

    user_id: str = Field(..., min_length=1)
    instance_id: str = Field(..., min_length=1)
    paycheck_date: date


class AssignmentResponse(BaseModel):
    """Stored bill-to-paycheck override"""

    instance_id: str
    paycheck_date: date


class SavingsProjectionResponse(BaseModel):
    """Response for GET /v1/savings/projection"""

    user_id: str
    monthly: float
    total: float
    percent: float


class SummaryResponse(BaseModel):
    """Response for GET /v1/summary"""

    user_id: str
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


class PaycheckSavingsRequest(BaseModel):
    """Request body for POST /v1/paycheck-savings"""

    user_id: str = Field(..., min_length=1)
    paycheck_date: date
    amount: float = Field(..., ge=0)
    is_deposited: bool = False


class DepositedRequest(BaseModel):
    """Request body for PATCH /v1/paycheck-savings/{savings_id}"""

    user_id: str = Field(..., min_length=1)
    is_deposited: bool


class PaycheckSavingsSchema(BaseModel):
    """Custom savings deposit for a paycheck"""

    id: str
    paycheck_date: date
    amount: float
    is_deposited: bool


class BillPaymentRequest(BaseModel):
    """Request body for POST /v1/bill-payments"""

    user_id: str = Field(..., min_length=1)
    paycheck_date: date
    bill_name: str = Field(..., min_length=1)
    bill_due_date: date
    is_paid: bool


class BillPaymentSchema(BaseModel):
    """Bill marked as paid"""

    id: str
    paycheck_date: date
    bill_name: str
    bill_due_date: date
    paid_at: str


class BillPaymentResponse(BaseModel):
    """Response for POST /v1/bill-payments"""

    is_paid: bool
    payment: Optional[BillPaymentSchema] = None


class ReportRequest(BaseModel):
    """Request body for POST /v1/report"""

    user_id: str = Field(..., min_length=1)


class ReportResponse(BaseModel):
    """Response for POST /v1/report"""

    queued: bool
    paycheck_count: int
