"""Unit tests for bill expansion"""

import pytest
from datetime import date
from budget_planner.domain.bills import expand_bill, expand_bills
from budget_planner.domain.exceptions import InvalidBillError
from budget_planner.domain.models import Bill


def test_one_time_bill_expands_once():
    bill = Bill(name="Car Repair", payment_amount=400.0, due_date=date(2024, 1, 25), bill_type="one-time")
    instances = expand_bill(bill, horizon_end=date(2024, 6, 1))

    assert len(instances) == 1
    assert instances[0].instance_id == "Car Repair-single-2024-01-25"
    assert instances[0].due_date == date(2024, 1, 25)


def test_other_bill_ignores_horizon():
    bill = Bill(name="Gift", payment_amount=50.0, due_date=date(2024, 12, 20), bill_type="other")

    assert len(expand_bill(bill, horizon_end=date(2024, 2, 1))) == 1


def test_recurring_bill_keeps_day_of_month():
    """A bill due on the 31st clamps to Feb 29 and returns to the 31st in March"""
    bill = Bill(name="Rent", payment_amount=1200.0, due_date=date(2024, 1, 31))
    instances = expand_bill(bill, horizon_end=date(2024, 4, 15))

    assert [i.due_date for i in instances] == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]
    assert [i.instance_id for i in instances] == [
        "Rent-0-2024-01-31",
        "Rent-1-2024-02-29",
        "Rent-2-2024-03-31",
    ]
    assert {i.base_id for i in instances} == {"Rent-2024-01-31"}


def test_recurring_bill_includes_horizon_end():
    bill = Bill(name="Phone", payment_amount=60.0, due_date=date(2024, 1, 20))

    instances = expand_bill(bill, horizon_end=date(2024, 2, 20))

    assert [i.due_date for i in instances] == [date(2024, 1, 20), date(2024, 2, 20)]


def test_recurring_bill_past_horizon_produces_nothing():
    bill = Bill(name="Insurance", payment_amount=300.0, due_date=date(2024, 5, 1))

    assert expand_bill(bill, horizon_end=date(2024, 3, 1)) == []


def test_instances_snapshot_bill_fields():
    bill = Bill(
        id="b1",
        name="Card",
        payment_amount=75.0,
        apr=24.99,
        remaining_balance=1500.0,
        due_date=date(2024, 1, 10),
        allowable_late_days=4,
    )
    instance = expand_bill(bill, horizon_end=date(2024, 1, 31))[0]

    assert instance.bill_id == "b1"
    assert instance.apr == 24.99
    assert instance.remaining_balance == 1500.0
    assert instance.allowable_late_days == 4


def test_expand_bills_keeps_input_order(household_bills):
    instances = expand_bills(household_bills, horizon_end=date(2024, 1, 31))

    assert [i.name for i in instances] == ["Rent", "Electric", "Phone", "Car Repair"]


def test_invalid_bill_rejected():
    with pytest.raises(InvalidBillError):
        Bill(name="Rent", payment_amount=-1.0, due_date=date(2024, 1, 1))
    with pytest.raises(InvalidBillError):
        Bill(name="Rent", payment_amount=100.0, due_date=date(2024, 1, 1), bill_type="weekly")
    with pytest.raises(InvalidBillError):
        Bill(name="", payment_amount=100.0, due_date=date(2024, 1, 1))
