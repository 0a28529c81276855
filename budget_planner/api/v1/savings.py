"""Savings projection, schedule summary, savings deposits and bill payment tracking"""

import uuid
from dataclasses import asdict
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from budget_planner.api.v1.schemas import (
    BillPaymentRequest,
    BillPaymentResponse,
    BillPaymentSchema,
    DepositedRequest,
    PaycheckSavingsRequest,
    PaycheckSavingsSchema,
    SavingsProjectionResponse,
    SummaryResponse,
)
from budget_planner.api.dependencies import get_request_id, load_schedule_inputs
from budget_planner.api.v1.schedule import compute_user_schedule
from budget_planner.domain.projections import project_savings, summarize_schedule
from budget_planner.infrastructure.database.models import BillPayment, PaycheckSavings
from budget_planner.infrastructure.database.session import get_db
from budget_planner.infrastructure.database.repositories import PaymentRepository, SavingsRepository

router = APIRouter()


def _savings_schema(savings: PaycheckSavings) -> PaycheckSavingsSchema:
    return PaycheckSavingsSchema(
        id=str(savings.id),
        paycheck_date=savings.paycheck_date,
        amount=savings.amount,
        is_deposited=savings.is_deposited,
    )


def _payment_schema(payment: BillPayment) -> BillPaymentSchema:
    return BillPaymentSchema(
        id=str(payment.id),
        paycheck_date=payment.paycheck_date,
        bill_name=payment.bill_name,
        bill_due_date=payment.bill_due_date,
        paid_at=payment.paid_at.isoformat(),
    )


@router.get("/savings/projection", response_model=SavingsProjectionResponse)
def get_savings_projection(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Monthly and horizon savings at the user's savings percent"""
    inputs = load_schedule_inputs(db, user_id)
    projection = project_savings(inputs.income_sources, inputs.savings_percent, inputs.months_to_show)
    return SavingsProjectionResponse(user_id=user_id, **asdict(projection))


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Report statistics over the visible schedule"""
    inputs, schedule = compute_user_schedule(db, user_id, get_request_id(request))
    summary = summarize_schedule(
        schedule.visible,
        inputs.bills,
        inputs.income_sources,
        inputs.savings_percent,
        deposited_savings=SavingsRepository(db).deposited_total(user_id),
    )
    return SummaryResponse(user_id=user_id, **asdict(summary))


@router.get("/paycheck-savings", response_model=List[PaycheckSavingsSchema])
def list_paycheck_savings(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    return [_savings_schema(s) for s in SavingsRepository(db).list_savings(user_id)]


@router.post("/paycheck-savings", response_model=PaycheckSavingsSchema)
def upsert_paycheck_savings(request_body: PaycheckSavingsRequest, db: Session = Depends(get_db)):
    """Set a custom savings amount for one paycheck (replaces the percent-based default)"""
    savings = SavingsRepository(db).upsert_savings(
        request_body.user_id,
        request_body.paycheck_date,
        request_body.amount,
        request_body.is_deposited,
    )
    db.commit()
    return _savings_schema(savings)


@router.patch("/paycheck-savings/{savings_id}", response_model=PaycheckSavingsSchema)
def set_savings_deposited(
    savings_id: str,
    request_body: DepositedRequest,
    db: Session = Depends(get_db),
):
    """Mark a paycheck's savings as deposited or pending"""
    try:
        savings_uuid = uuid.UUID(savings_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid savings ID format")

    savings = SavingsRepository(db).set_deposited(request_body.user_id, savings_uuid, request_body.is_deposited)
    if savings is None:
        raise HTTPException(status_code=404, detail="Savings not found")
    db.commit()
    return _savings_schema(savings)


@router.get("/bill-payments", response_model=List[BillPaymentSchema])
def list_bill_payments(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Bills marked as paid, most recent first"""
    return [_payment_schema(p) for p in PaymentRepository(db).list_payments(user_id)]


@router.post("/bill-payments", response_model=BillPaymentResponse)
def toggle_bill_payment(request_body: BillPaymentRequest, db: Session = Depends(get_db)):
    """Mark a bill on a paycheck as paid, or clear the mark"""
    payment = PaymentRepository(db).set_paid(
        request_body.user_id,
        request_body.paycheck_date,
        request_body.bill_name,
        request_body.bill_due_date,
        request_body.is_paid,
    )
    db.commit()
    return BillPaymentResponse(
        is_paid=payment is not None,
        payment=_payment_schema(payment) if payment else None,
    )
