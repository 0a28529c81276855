"""GET/PUT /v1/income - income sources and planner settings"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from budget_planner.api.v1.schemas import IncomeRequest, IncomeResponse, IncomeSourceSchema
from budget_planner.config import settings
from budget_planner.domain.exceptions import InvalidIncomeSourceError
from budget_planner.domain.models import IncomeSource
from budget_planner.infrastructure.database.models import IncomeSourceRecord
from budget_planner.infrastructure.database.session import get_db
from budget_planner.infrastructure.database.repositories import IncomeRepository

router = APIRouter()


def _source_schemas(records: List[IncomeSourceRecord]) -> List[IncomeSourceSchema]:
    return [
        IncomeSourceSchema(
            id=str(r.id),
            name=r.name,
            amount=r.amount,
            frequency=r.frequency,
            last_pay_date=r.last_pay_date,
            first_pay_day=r.first_pay_day,
            second_pay_day=r.second_pay_day,
        )
        for r in records
    ]


@router.get("/income", response_model=IncomeResponse)
def get_income(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Income sources with the user's savings percent and horizon (defaults when unset)"""
    income_repo = IncomeRepository(db)
    income_settings = income_repo.get_settings(user_id)

    return IncomeResponse(
        user_id=user_id,
        sources=_source_schemas(income_repo.get_sources(user_id)),
        savings_percent=income_settings.savings_percent if income_settings else settings.default_savings_percent,
        months_to_show=income_settings.months_to_show if income_settings else settings.default_months_to_show,
    )


@router.put("/income", response_model=IncomeResponse)
def replace_income(request_body: IncomeRequest, db: Session = Depends(get_db)):
    """Replace all income sources and settings for a user"""
    try:
        sources = [
            IncomeSource(
                id=s.id or "",
                name=s.name,
                amount=s.amount,
                frequency=s.frequency,
                last_pay_date=s.last_pay_date,
                first_pay_day=s.first_pay_day,
                second_pay_day=s.second_pay_day,
            )
            for s in request_body.sources
        ]
    except InvalidIncomeSourceError as e:
        raise HTTPException(status_code=422, detail=str(e))

    records = IncomeRepository(db).replace_income(
        request_body.user_id,
        sources,
        request_body.savings_percent,
        request_body.months_to_show,
    )
    db.commit()

    return IncomeResponse(
        user_id=request_body.user_id,
        sources=_source_schemas(records),
        savings_percent=request_body.savings_percent,
        months_to_show=request_body.months_to_show,
    )
