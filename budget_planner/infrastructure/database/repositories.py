"""Data access layer for budget planner entities"""

import uuid
from datetime import date, datetime, timezone
from typing import List, Optional, Set, Tuple
from sqlalchemy.orm import Session
from budget_planner.infrastructure.database.models import (
    BillAssignment,
    BillPayment,
    BillRecord,
    IncomeSettings,
    IncomeSourceRecord,
    PaycheckSavings,
)
from budget_planner.domain.exceptions import DuplicateBillError
from budget_planner.domain.models import Bill, IncomeSource, Overrides


def to_income_source(record: IncomeSourceRecord) -> IncomeSource:
    return IncomeSource(
        id=str(record.id),
        name=record.name,
        amount=record.amount,
        frequency=record.frequency,
        last_pay_date=record.last_pay_date,
        first_pay_day=record.first_pay_day,
        second_pay_day=record.second_pay_day,
    )


def to_bill(record: BillRecord) -> Bill:
    return Bill(
        id=str(record.id),
        name=record.name,
        payment_amount=record.payment_amount,
        apr=record.apr,
        remaining_balance=record.remaining_balance,
        due_date=record.due_date,
        bill_type=record.bill_type,
        allowable_late_days=record.allowable_late_days,
    )


class IncomeRepository:
    """Repository for income sources and planner settings"""

    def __init__(self, db: Session):
        self.db = db

    def get_sources(self, user_id: str) -> List[IncomeSourceRecord]:
        return (
            self.db.query(IncomeSourceRecord)
            .filter(IncomeSourceRecord.user_id == user_id)
            .order_by(IncomeSourceRecord.created_at.asc())
            .all()
        )

    def get_settings(self, user_id: str) -> Optional[IncomeSettings]:
        return self.db.query(IncomeSettings).filter(IncomeSettings.user_id == user_id).first()

    def replace_income(
        self,
        user_id: str,
        sources: List[IncomeSource],
        savings_percent: float,
        months_to_show: int,
    ) -> List[IncomeSourceRecord]:
        """Replace every income source and upsert settings for a user"""
        self.db.query(IncomeSourceRecord).filter(IncomeSourceRecord.user_id == user_id).delete()

        records = []
        for source in sources:
            record = IncomeSourceRecord(
                user_id=user_id,
                name=source.name,
                amount=source.amount,
                frequency=source.frequency,
                last_pay_date=source.last_pay_date,
                first_pay_day=source.first_pay_day,
                second_pay_day=source.second_pay_day,
            )
            self.db.add(record)
            records.append(record)

        income_settings = self.get_settings(user_id)
        if income_settings is None:
            income_settings = IncomeSettings(user_id=user_id)
            self.db.add(income_settings)
        income_settings.savings_percent = savings_percent
        income_settings.months_to_show = months_to_show

        self.db.flush()
        return records


class BillRepository:
    """Repository for bill definitions"""

    def __init__(self, db: Session):
        self.db = db

    def list_bills(self, user_id: str) -> List[BillRecord]:
        return (
            self.db.query(BillRecord)
            .filter(BillRecord.user_id == user_id)
            .order_by(BillRecord.due_date.asc(), BillRecord.created_at.asc())
            .all()
        )

    def create_bill(self, user_id: str, bill: Bill) -> BillRecord:
        """
        Persist a bill definition.

        Raises:
            DuplicateBillError: user already has a bill with this name and due date
        """
        existing = (
            self.db.query(BillRecord)
            .filter(
                BillRecord.user_id == user_id,
                BillRecord.name == bill.name,
                BillRecord.due_date == bill.due_date,
            )
            .first()
        )
        if existing:
            raise DuplicateBillError(f"A bill named {bill.name!r} due {bill.due_date.isoformat()} already exists")

        record = BillRecord(
            user_id=user_id,
            name=bill.name,
            payment_amount=bill.payment_amount,
            apr=bill.apr,
            remaining_balance=bill.remaining_balance,
            due_date=bill.due_date,
            bill_type=bill.bill_type,
            allowable_late_days=bill.allowable_late_days,
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def delete_bill(self, user_id: str, bill_id: uuid.UUID) -> bool:
        deleted = (
            self.db.query(BillRecord)
            .filter(BillRecord.user_id == user_id, BillRecord.id == bill_id)
            .delete()
        )
        return deleted > 0


class AssignmentRepository:
    """Persistent store of manual bill-to-paycheck overrides"""

    def __init__(self, db: Session):
        self.db = db

    def get_overrides(self, user_id: str) -> Overrides:
        assignments = self.db.query(BillAssignment).filter(BillAssignment.user_id == user_id).all()
        return {a.instance_id: a.paycheck_date for a in assignments}

    def save_assignment(self, user_id: str, instance_id: str, paycheck_date: date) -> BillAssignment:
        assignment = (
            self.db.query(BillAssignment)
            .filter(BillAssignment.user_id == user_id, BillAssignment.instance_id == instance_id)
            .first()
        )
        if assignment is None:
            assignment = BillAssignment(user_id=user_id, instance_id=instance_id)
            self.db.add(assignment)
        assignment.paycheck_date = paycheck_date
        self.db.flush()
        return assignment

    def delete_assignment(self, user_id: str, instance_id: str) -> bool:
        deleted = (
            self.db.query(BillAssignment)
            .filter(BillAssignment.user_id == user_id, BillAssignment.instance_id == instance_id)
            .delete()
        )
        return deleted > 0


class SavingsRepository:
    """Repository for per-paycheck savings deposits"""

    def __init__(self, db: Session):
        self.db = db

    def list_savings(self, user_id: str) -> List[PaycheckSavings]:
        return (
            self.db.query(PaycheckSavings)
            .filter(PaycheckSavings.user_id == user_id)
            .order_by(PaycheckSavings.paycheck_date.asc())
            .all()
        )

    def upsert_savings(
        self,
        user_id: str,
        paycheck_date: date,
        amount: float,
        is_deposited: bool = False,
    ) -> PaycheckSavings:
        savings = (
            self.db.query(PaycheckSavings)
            .filter(PaycheckSavings.user_id == user_id, PaycheckSavings.paycheck_date == paycheck_date)
            .first()
        )
        if savings is None:
            savings = PaycheckSavings(user_id=user_id, paycheck_date=paycheck_date)
            self.db.add(savings)
        savings.amount = amount
        savings.is_deposited = is_deposited
        self.db.flush()
        return savings

    def set_deposited(self, user_id: str, savings_id: uuid.UUID, is_deposited: bool) -> Optional[PaycheckSavings]:
        savings = (
            self.db.query(PaycheckSavings)
            .filter(PaycheckSavings.user_id == user_id, PaycheckSavings.id == savings_id)
            .first()
        )
        if savings is None:
            return None
        savings.is_deposited = is_deposited
        self.db.flush()
        return savings

    def deposited_total(self, user_id: str) -> float:
        return sum(s.amount for s in self.list_savings(user_id) if s.is_deposited)


class PaymentRepository:
    """Repository for bills marked as paid"""

    def __init__(self, db: Session):
        self.db = db

    def list_payments(self, user_id: str) -> List[BillPayment]:
        return (
            self.db.query(BillPayment)
            .filter(BillPayment.user_id == user_id)
            .order_by(BillPayment.paid_at.desc())
            .all()
        )

    def set_paid(
        self,
        user_id: str,
        paycheck_date: date,
        bill_name: str,
        bill_due_date: date,
        is_paid: bool,
    ) -> Optional[BillPayment]:
        """Create the payment record when paid, delete it when unpaid"""
        query = self.db.query(BillPayment).filter(
            BillPayment.user_id == user_id,
            BillPayment.paycheck_date == paycheck_date,
            BillPayment.bill_name == bill_name,
            BillPayment.bill_due_date == bill_due_date,
        )
        if not is_paid:
            query.delete()
            return None

        payment = query.first()
        if payment is None:
            payment = BillPayment(
                user_id=user_id,
                paycheck_date=paycheck_date,
                bill_name=bill_name,
                bill_due_date=bill_due_date,
            )
            self.db.add(payment)
        payment.is_paid = True
        payment.paid_at = datetime.now(timezone.utc)
        self.db.flush()
        return payment

    def paid_keys(self, user_id: str) -> Set[Tuple[date, str, date]]:
        """(paycheck_date, bill_name, bill_due_date) of every paid bill"""
        return {(p.paycheck_date, p.bill_name, p.bill_due_date) for p in self.list_payments(user_id)}
