"""POST /v1/report - queue a schedule report for the external PDF renderer"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from budget_planner.api.v1.schemas import ReportRequest, ReportResponse
from budget_planner.api.dependencies import get_report_client, get_request_id
from budget_planner.api.v1.schedule import build_schedule_response, compute_user_schedule
from budget_planner.domain.projections import summarize_schedule
from budget_planner.infrastructure.clients.report import ReportClient, deliver_report
from budget_planner.infrastructure.database.session import get_db
from budget_planner.infrastructure.database.repositories import SavingsRepository

router = APIRouter()


@router.post("/report", response_model=ReportResponse, status_code=202)
def queue_report(
    request_body: ReportRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    report_client: ReportClient = Depends(get_report_client),
):
    """
    Build the report payload and hand it to the renderer.

    Flow:
    1. Compute the schedule and its summary statistics
    2. Serialize both, with per-paycheck savings and payment status
    3. Post to the renderer in the background (retried, failures logged)
    """
    request_id = get_request_id(request)
    user_id = request_body.user_id

    inputs, schedule = compute_user_schedule(db, user_id, request_id)
    if not schedule.visible:
        raise HTTPException(status_code=422, detail="Nothing to report: add income and bills first")

    summary = summarize_schedule(
        schedule.visible,
        inputs.bills,
        inputs.income_sources,
        inputs.savings_percent,
        deposited_savings=SavingsRepository(db).deposited_total(user_id),
    )
    schedule_response = build_schedule_response(db, user_id, inputs, schedule.visible, [])

    payload = {
        "event": "BUDGET_REPORT_REQUESTED",
        "request_id": request_id,
        "user_id": user_id,
        "summary": asdict(summary),
        "schedule": schedule_response.model_dump(mode="json", exclude={"buffer"}),
    }
    background_tasks.add_task(deliver_report, report_client, payload)

    logging.info(
        "Report queued",
        extra={"request_id": request_id, "user_id": user_id, "paycheck_count": len(schedule.visible)},
    )
    return ReportResponse(queued=True, paycheck_count=len(schedule.visible))
