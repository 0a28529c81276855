"""GET /v1/schedule and manual schedule edits (moves and pinned assignments)"""

import time
import logging
from typing import Dict, List, Set, Tuple
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_planner.api.v1.schemas import (
    AllocatedBillSchema,
    AllocationSchema,
    AssignmentRequest,
    AssignmentResponse,
    MoveRequest,
    MoveResponse,
    ScheduleResponse,
)
from budget_planner.api.dependencies import get_request_id, load_schedule_inputs
from budget_planner.infrastructure.database.session import get_db
from budget_planner.infrastructure.database.models import PaycheckSavings
from budget_planner.infrastructure.database.repositories import (
    AssignmentRepository,
    PaymentRepository,
    SavingsRepository,
)
from budget_planner.domain.allocation import compute_schedule
from budget_planner.domain.models import Allocation, Schedule, ScheduleInputs
from budget_planner.domain.mutator import move_bill
from budget_planner.domain.projections import paycheck_savings_amount
from budget_planner.domain.exceptions import AllocationNotFoundError, BillNotFoundError
from budget_planner.infrastructure.observability.metrics import record_move, record_schedule
from budget_planner.infrastructure.observability.logging import log_bill_moved, log_schedule_computed

router = APIRouter()

PaidKeys = Set[Tuple[date, str, date]]


def serialize_allocation(
    allocation: Allocation,
    savings_percent: float,
    savings_by_date: Dict[date, PaycheckSavings],
    paid_keys: PaidKeys,
) -> AllocationSchema:
    custom = savings_by_date.get(allocation.pay_date)
    return AllocationSchema(
        pay_date=allocation.pay_date,
        source_id=allocation.source_id,
        source_name=allocation.source_name,
        gross_amount=allocation.gross_amount,
        paycheck_amount=allocation.paycheck_amount,
        used_funds=allocation.used_funds,
        remaining_funds=allocation.remaining_funds,
        savings_amount=paycheck_savings_amount(allocation, savings_percent, custom.amount if custom else None),
        savings_deposited=custom.is_deposited if custom else False,
        bills=[
            AllocatedBillSchema(
                instance_id=bill.instance_id,
                base_id=bill.instance.base_id,
                name=bill.name,
                payment_amount=bill.payment_amount,
                apr=bill.instance.apr,
                due_date=bill.due_date,
                bill_type=bill.instance.bill_type,
                allowable_late_days=bill.instance.allowable_late_days,
                is_late=bill.is_late,
                is_critically_late=bill.is_critically_late,
                is_underfunded=bill.is_underfunded,
                days_late=bill.days_late,
                placement=bill.placement,
                is_paid=(allocation.pay_date, bill.name, bill.due_date) in paid_keys,
            )
            for bill in allocation.bills
        ],
    )


def build_schedule_response(
    db: Session,
    user_id: str,
    inputs: ScheduleInputs,
    visible: List[Allocation],
    buffer: List[Allocation],
) -> ScheduleResponse:
    """Serialize allocations together with stored savings and payment status"""
    savings_by_date = {s.paycheck_date: s for s in SavingsRepository(db).list_savings(user_id)}
    paid_keys = PaymentRepository(db).paid_keys(user_id)

    return ScheduleResponse(
        user_id=user_id,
        savings_percent=inputs.savings_percent,
        months_to_show=inputs.months_to_show,
        allocations=[serialize_allocation(a, inputs.savings_percent, savings_by_date, paid_keys) for a in visible],
        buffer=[serialize_allocation(a, inputs.savings_percent, savings_by_date, paid_keys) for a in buffer],
    )


def compute_user_schedule(db: Session, user_id: str, request_id: str) -> Tuple[ScheduleInputs, Schedule]:
    """Load a user's inputs, allocate, and record metrics and logs"""
    start_time = time.time()

    inputs = load_schedule_inputs(db, user_id)
    schedule = compute_schedule(inputs)

    duration_ms = (time.time() - start_time) * 1000
    record_schedule(schedule)
    log_schedule_computed(
        request_id,
        user_id,
        paycheck_count=len(schedule.visible),
        bill_count=sum(len(a.bills) for a in schedule.allocations),
        underfunded_count=sum(1 for a in schedule.allocations for b in a.bills if b.is_underfunded),
        duration_ms=duration_ms,
    )
    return inputs, schedule


@router.get("/schedule", response_model=ScheduleResponse)
def get_schedule(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """
    Compute the user's payment schedule.

    Returns:
        Paychecks in the requested horizon with their allocated bills, plus
        the trailing buffer paychecks that catch bills due past the horizon
    """
    inputs, schedule = compute_user_schedule(db, user_id, get_request_id(request))
    return build_schedule_response(db, user_id, inputs, schedule.visible, schedule.buffer)


@router.post("/schedule/move", response_model=MoveResponse)
def move_scheduled_bill(
    request_body: MoveRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Move a bill to the previous or next paycheck.

    Flow:
    1. Recompute the schedule from stored inputs
    2. Apply the move to the visible paychecks
    3. Persist the move as a manual assignment so recomputation keeps it
    4. Return the edited schedule
    """
    request_id = get_request_id(request)
    user_id = request_body.user_id

    try:
        inputs, schedule = compute_user_schedule(db, user_id, request_id)
        visible = schedule.visible
        result = move_bill(
            visible,
            request_body.bill_name,
            request_body.from_pay_date,
            request_body.direction,
            overrides=inputs.overrides,
        )

        if result is not None:
            AssignmentRepository(db).save_assignment(user_id, result.instance_id, result.to_pay_date)
            db.commit()
            log_bill_moved(
                request_id,
                user_id,
                result.instance_id,
                result.from_pay_date.isoformat(),
                result.to_pay_date.isoformat(),
            )
        record_move(result is not None)

        return MoveResponse(
            moved=result is not None,
            instance_id=result.instance_id if result else None,
            to_pay_date=result.to_pay_date if result else None,
            schedule=build_schedule_response(db, user_id, inputs, visible, schedule.buffer),
        )

    except (AllocationNotFoundError, BillNotFoundError) as e:
        db.rollback()
        logging.warning(f"Move rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.put("/schedule/assignments", response_model=AssignmentResponse)
def pin_bill(request_body: AssignmentRequest, db: Session = Depends(get_db)):
    """Pin a bill instance to a paycheck date, overriding automatic placement"""
    assignment = AssignmentRepository(db).save_assignment(
        request_body.user_id,
        request_body.instance_id,
        request_body.paycheck_date,
    )
    db.commit()
    return AssignmentResponse(instance_id=assignment.instance_id, paycheck_date=assignment.paycheck_date)


@router.delete("/schedule/assignments/{instance_id:path}", status_code=204)
def unpin_bill(
    instance_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Remove a manual assignment; the instance returns to automatic placement"""
    if not AssignmentRepository(db).delete_assignment(user_id, instance_id):
        raise HTTPException(status_code=404, detail="Assignment not found")
    db.commit()
