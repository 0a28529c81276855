"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from sqlalchemy.orm import Session

from budget_planner.config import settings
from budget_planner.domain.models import ScheduleInputs
from budget_planner.infrastructure.clients.report import ReportClient
from budget_planner.infrastructure.database.repositories import (
    AssignmentRepository,
    BillRepository,
    IncomeRepository,
    to_bill,
    to_income_source,
)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_report_client() -> ReportClient:
    """Provide report renderer client instance"""
    return ReportClient()


def load_schedule_inputs(db: Session, user_id: str) -> ScheduleInputs:
    """Assemble allocation inputs from the user's stored income, bills and overrides"""
    income_repo = IncomeRepository(db)
    income_settings = income_repo.get_settings(user_id)

    return ScheduleInputs(
        income_sources=[to_income_source(r) for r in income_repo.get_sources(user_id)],
        bills=[to_bill(r) for r in BillRepository(db).list_bills(user_id)],
        savings_percent=(
            income_settings.savings_percent if income_settings else settings.default_savings_percent
        ),
        months_to_show=(
            income_settings.months_to_show if income_settings else settings.default_months_to_show
        ),
        overrides=AssignmentRepository(db).get_overrides(user_id),
    )
