"""/v1/bills - bill definitions"""

import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from budget_planner.api.v1.schemas import BillCreateRequest, BillSchema
from budget_planner.domain.exceptions import DuplicateBillError, InvalidBillError
from budget_planner.domain.models import Bill
from budget_planner.infrastructure.database.models import BillRecord
from budget_planner.infrastructure.database.session import get_db
from budget_planner.infrastructure.database.repositories import BillRepository

router = APIRouter()


def _bill_schema(record: BillRecord) -> BillSchema:
    return BillSchema(
        id=str(record.id),
        name=record.name,
        payment_amount=record.payment_amount,
        apr=record.apr,
        remaining_balance=record.remaining_balance,
        due_date=record.due_date,
        bill_type=record.bill_type,
        allowable_late_days=record.allowable_late_days,
    )


@router.get("/bills", response_model=List[BillSchema])
def list_bills(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """All bill definitions for a user, earliest due date first"""
    return [_bill_schema(r) for r in BillRepository(db).list_bills(user_id)]


@router.post("/bills", response_model=BillSchema, status_code=201)
def create_bill(request_body: BillCreateRequest, db: Session = Depends(get_db)):
    """
    Add a bill definition.

    Returns:
        The stored bill; 409 when the user already has a bill with the
        same name and due date
    """
    try:
        bill = Bill(
            name=request_body.name,
            payment_amount=request_body.payment_amount,
            apr=request_body.apr,
            remaining_balance=request_body.remaining_balance,
            due_date=request_body.due_date,
            bill_type=request_body.bill_type,
            allowable_late_days=request_body.allowable_late_days,
        )
        record = BillRepository(db).create_bill(request_body.user_id, bill)
        db.commit()
        return _bill_schema(record)

    except InvalidBillError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    except DuplicateBillError as e:
        db.rollback()
        logging.warning(f"Duplicate bill: {e}", extra={"user_id": request_body.user_id})
        raise HTTPException(status_code=409, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"user_id": request_body.user_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/bills/{bill_id}", status_code=204)
def delete_bill(
    bill_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Remove a bill definition and every instance it produced"""
    try:
        bill_uuid = uuid.UUID(bill_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid bill ID format")

    if not BillRepository(db).delete_bill(user_id, bill_uuid):
        raise HTTPException(status_code=404, detail="Bill not found")
    db.commit()
