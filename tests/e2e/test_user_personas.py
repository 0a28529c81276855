"""
E2E tests for household personas driving the full API flow.

User personas:
- user_steady: one biweekly salary, bills comfortably covered
- user_stretched: bills exceed a single paycheck, underfunded flags expected
- user_gig: weekly plus monthly income, bill moved by hand
"""

import pytest
from fastapi.testclient import TestClient


def _setup(client: TestClient, user_id: str, sources: list, bills: list, savings_percent: float = 20, months: int = 1):
    response = client.put(
        "/v1/income",
        json={"user_id": user_id, "sources": sources, "savings_percent": savings_percent, "months_to_show": months},
    )
    assert response.status_code == 200
    for bill in bills:
        response = client.post("/v1/bills", json={"user_id": user_id, **bill})
        assert response.status_code == 201


def _placed(schedule: dict) -> list:
    return [bill for a in schedule["allocations"] + schedule["buffer"] for bill in a["bills"]]


@pytest.mark.integration
def test_user_steady_everything_funded(client: TestClient):
    """
    user_steady: $2500 biweekly, three modest bills
    Expected: every bill funded, none critically late
    """
    _setup(
        client,
        "user_steady",
        sources=[{"name": "Salary", "amount": 2500, "frequency": "biweekly", "last_pay_date": "2024-03-01"}],
        bills=[
            {"name": "Rent", "payment_amount": 1100, "due_date": "2024-03-01"},
            {"name": "Internet", "payment_amount": 70, "due_date": "2024-03-12", "allowable_late_days": 5},
            {"name": "Insurance", "payment_amount": 150, "due_date": "2024-03-20", "allowable_late_days": 10},
        ],
    )

    schedule = client.get("/v1/schedule", params={"user_id": "user_steady"}).json()

    placed = _placed(schedule)
    assert not any(b["is_underfunded"] for b in placed), "Income covers every bill"
    assert not any(b["is_critically_late"] for b in placed)
    assert all(a["remaining_funds"] >= 0 for a in schedule["allocations"])


@pytest.mark.integration
def test_user_stretched_flags_underfunded(client: TestClient):
    """
    user_stretched: $1200 monthly paycheck against $1500 of bills
    Expected: at least one bill underfunded, funded total stays within the paycheck
    """
    _setup(
        client,
        "user_stretched",
        sources=[{"name": "Part-time", "amount": 1200, "frequency": "monthly", "last_pay_date": "2024-03-01"}],
        bills=[
            {"name": "Rent", "payment_amount": 900, "due_date": "2024-03-01"},
            {"name": "Car Loan", "payment_amount": 600, "due_date": "2024-03-01"},
        ],
        savings_percent=0,
    )

    schedule = client.get("/v1/schedule", params={"user_id": "user_stretched"}).json()

    first = schedule["allocations"][0]
    assert first["used_funds"] <= first["paycheck_amount"]
    assert any(b["is_underfunded"] for b in first["bills"])

    summary = client.get("/v1/summary", params={"user_id": "user_stretched"}).json()
    assert summary["underfunded_count"] >= 1


@pytest.mark.integration
def test_user_gig_moves_bill_and_keeps_it(client: TestClient):
    """
    user_gig: weekly gig pay plus a monthly stipend
    Expected: a moved bill stays on its new paycheck across recomputations
    """
    _setup(
        client,
        "user_gig",
        sources=[
            {"name": "Deliveries", "amount": 400, "frequency": "weekly", "last_pay_date": "2024-03-04"},
            {"name": "Stipend", "amount": 1000, "frequency": "monthly", "last_pay_date": "2024-03-15"},
        ],
        bills=[{"name": "Phone", "payment_amount": 80, "due_date": "2024-03-11", "allowable_late_days": 7}],
    )

    schedule = client.get("/v1/schedule", params={"user_id": "user_gig"}).json()
    source = next(a for a in schedule["allocations"] if a["bills"])

    response = client.post(
        "/v1/schedule/move",
        json={"user_id": "user_gig", "bill_name": "Phone", "from_pay_date": source["pay_date"], "direction": "down"},
    )
    assert response.status_code == 200
    moved_to = response.json()["to_pay_date"]

    schedule = client.get("/v1/schedule", params={"user_id": "user_gig"}).json()
    holder = next(a for a in schedule["allocations"] if a["bills"])
    assert holder["pay_date"] == moved_to
    assert holder["bills"][0]["placement"] == "override"
