"""SQLAlchemy ORM models for budget planner persistence"""

import uuid
from sqlalchemy import Column, Boolean, Float, DateTime, Date, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class IncomeSourceRecord(Base):
    """Income stream with its pay calendar anchor"""

    __tablename__ = "income_source"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    frequency = Column(Text, nullable=False)
    last_pay_date = Column(Date, nullable=True)
    first_pay_day = Column(Integer, nullable=True)
    second_pay_day = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class IncomeSettings(Base):
    """Per-user savings rate and projection horizon"""

    __tablename__ = "income_settings"

    user_id = Column(Text, primary_key=True)
    savings_percent = Column(Float, nullable=False)
    months_to_show = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class BillRecord(Base):
    """Bill definition; recurring bills expand monthly from due_date"""

    __tablename__ = "bill"
    __table_args__ = (UniqueConstraint("user_id", "name", "due_date", name="uq_bill_user_name_due"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    payment_amount = Column(Float, nullable=False)
    apr = Column(Float, nullable=False, default=0.0)
    remaining_balance = Column(Float, nullable=False, default=0.0)
    due_date = Column(Date, nullable=False)
    bill_type = Column(Text, nullable=False, default="recurring")
    allowable_late_days = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BillAssignment(Base):
    """Manual pin of a bill instance to a paycheck date"""

    __tablename__ = "bill_assignment"
    __table_args__ = (UniqueConstraint("user_id", "instance_id", name="uq_assignment_user_instance"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    instance_id = Column(Text, nullable=False)
    paycheck_date = Column(Date, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class PaycheckSavings(Base):
    """Custom savings deposit for one paycheck"""

    __tablename__ = "paycheck_savings"
    __table_args__ = (UniqueConstraint("user_id", "paycheck_date", name="uq_savings_user_paycheck"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    paycheck_date = Column(Date, nullable=False)
    amount = Column(Float, nullable=False)
    is_deposited = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class BillPayment(Base):
    """Bill instance marked as paid from a specific paycheck"""

    __tablename__ = "bill_payment"
    __table_args__ = (
        UniqueConstraint("user_id", "paycheck_date", "bill_name", "bill_due_date", name="uq_payment_user_bill"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    paycheck_date = Column(Date, nullable=False)
    bill_name = Column(Text, nullable=False)
    bill_due_date = Column(Date, nullable=False)
    is_paid = Column(Boolean, nullable=False, default=True)
    paid_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
