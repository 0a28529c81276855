"""Pytest fixtures for testing"""

import os

# Settings are read at import time; point the app at SQLite before it loads
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_planner.api.main import create_app
from budget_planner.infrastructure.database.models import Base
from budget_planner.infrastructure.database.session import get_db
from budget_planner.domain.models import Allocation, Bill, IncomeSource


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def biweekly_source() -> IncomeSource:
    """$2000 every other Friday starting 2024-01-05"""
    return IncomeSource(
        id="job",
        name="Day Job",
        amount=2000.0,
        frequency="biweekly",
        last_pay_date=date(2024, 1, 5),
    )


@pytest.fixture
def household_bills() -> List[Bill]:
    """Typical monthly bills plus one one-time expense"""
    return [
        Bill(name="Rent", payment_amount=1200.0, due_date=date(2024, 1, 1), allowable_late_days=3),
        Bill(name="Electric", payment_amount=90.0, due_date=date(2024, 1, 15), allowable_late_days=5),
        Bill(name="Phone", payment_amount=60.0, due_date=date(2024, 1, 20)),
        Bill(name="Car Repair", payment_amount=400.0, due_date=date(2024, 1, 25), bill_type="one-time"),
    ]


def make_allocation(pay_date: date, paycheck_amount: float, used_funds: float = 0.0) -> Allocation:
    """Empty paycheck with the given net amount"""
    return Allocation(
        pay_date=pay_date,
        paycheck_amount=paycheck_amount,
        gross_amount=paycheck_amount,
        source_id="job",
        source_name="Day Job",
        used_funds=used_funds,
    )


@pytest.fixture
def allocation_factory():
    return make_allocation
