"""Unit tests for moving bills between paychecks"""

import pytest
from datetime import date
from budget_planner.domain.allocation import allocate, place_bill
from budget_planner.domain.bills import expand_bills
from budget_planner.domain.exceptions import AllocationNotFoundError, BillNotFoundError
from budget_planner.domain.models import Bill
from budget_planner.domain.mutator import move_bill, refresh_underfunded


@pytest.fixture
def allocations(allocation_factory):
    """Rent lands on Jan 5 and Phone on Jan 19; Feb 2 is empty"""
    allocations = [
        allocation_factory(date(2024, 1, 5), 1000.0),
        allocation_factory(date(2024, 1, 19), 1000.0),
        allocation_factory(date(2024, 2, 2), 1000.0),
    ]
    bills = [
        Bill(name="Rent", payment_amount=600.0, due_date=date(2024, 1, 5), bill_type="one-time"),
        Bill(name="Phone", payment_amount=100.0, due_date=date(2024, 1, 19), bill_type="one-time"),
    ]
    allocate(expand_bills(bills, horizon_end=date(2024, 2, 2)), allocations)
    return allocations


def test_initial_placement(allocations):
    assert [b.name for b in allocations[0].bills] == ["Rent"]
    assert [b.name for b in allocations[1].bills] == ["Phone"]


def test_move_down_transfers_funds_and_marks_late(allocations):
    overrides = {}

    result = move_bill(allocations, "Rent", date(2024, 1, 5), "down", overrides)

    assert result is not None
    assert result.to_pay_date == date(2024, 1, 19)
    assert allocations[0].bills == []
    assert allocations[0].used_funds == 0.0
    assert allocations[1].used_funds == 700.0

    moved = next(b for b in allocations[1].bills if b.name == "Rent")
    assert moved.placement == "manual"
    assert moved.is_late is True
    assert moved.days_late == 14
    assert moved.is_critically_late is True
    assert overrides == {result.instance_id: date(2024, 1, 19)}


def test_move_up_then_down_restores_funds(allocations):
    move_bill(allocations, "Phone", date(2024, 1, 19), "up")
    assert allocations[0].used_funds == 700.0
    assert allocations[1].used_funds == 0.0

    move_bill(allocations, "Phone", date(2024, 1, 5), "down")

    assert allocations[0].used_funds == 600.0
    assert allocations[1].used_funds == 100.0
    assert allocations[1].bills[0].is_late is False


def test_move_past_either_end_is_noop(allocations):
    assert move_bill(allocations, "Rent", date(2024, 1, 5), "up") is None
    assert [b.name for b in allocations[0].bills] == ["Rent"]
    assert allocations[0].used_funds == 600.0


def test_move_errors(allocations):
    with pytest.raises(AllocationNotFoundError):
        move_bill(allocations, "Rent", date(2024, 3, 1), "down")
    with pytest.raises(BillNotFoundError):
        move_bill(allocations, "Water", date(2024, 1, 5), "down")
    with pytest.raises(ValueError):
        move_bill(allocations, "Rent", date(2024, 1, 5), "sideways")


def test_move_reflags_largest_bill_first(allocation_factory):
    """Moving a $60 bill onto a $150 paycheck holding $100 leaves the smaller one underfunded"""
    allocations = [allocation_factory(date(2024, 1, 5), 150.0), allocation_factory(date(2024, 1, 19), 150.0)]
    car, gym = expand_bills(
        [
            Bill(name="Car", payment_amount=100.0, due_date=date(2024, 1, 5), bill_type="one-time"),
            Bill(name="Gym", payment_amount=60.0, due_date=date(2024, 1, 19), bill_type="one-time"),
        ],
        horizon_end=date(2024, 1, 31),
    )
    place_bill(allocations[0], car, "funded")
    place_bill(allocations[1], gym, "funded")

    move_bill(allocations, "Gym", date(2024, 1, 19), "up")

    car_bill, gym_bill = allocations[0].bills
    assert car_bill.is_underfunded is False
    assert gym_bill.is_underfunded is True
    assert allocations[0].used_funds == 100.0
    assert allocations[1].used_funds == 0.0


def test_moving_underfunded_bills_keeps_used_funds_in_range(allocation_factory):
    """Two $100 bills on a $150 paycheck; moving both away never drives a total below zero or past the paycheck"""
    allocations = [allocation_factory(date(2024, 1, 5), 150.0), allocation_factory(date(2024, 1, 19), 150.0)]
    bills = [
        Bill(name="Gym", payment_amount=100.0, due_date=date(2024, 1, 5), bill_type="one-time"),
        Bill(name="Internet", payment_amount=100.0, due_date=date(2024, 1, 6), bill_type="one-time"),
    ]
    allocate(expand_bills(bills, horizon_end=date(2024, 1, 31)), allocations[:1])
    assert [b.is_underfunded for b in allocations[0].bills] == [False, True]

    move_bill(allocations, "Internet", date(2024, 1, 5), "down")

    assert allocations[0].used_funds == 100.0
    assert allocations[1].used_funds == 100.0
    assert allocations[1].bills[0].is_underfunded is False

    move_bill(allocations, "Gym", date(2024, 1, 5), "down")

    assert allocations[0].used_funds == 0.0
    assert allocations[0].remaining_funds == 150.0
    assert allocations[1].used_funds == 100.0
    assert [b.is_underfunded for b in allocations[1].bills] == [False, True]
    for allocation in allocations:
        funded = sum(b.payment_amount for b in allocation.bills if not b.is_underfunded)
        assert allocation.used_funds == funded
        assert 0 <= allocation.used_funds <= allocation.paycheck_amount


def test_refresh_underfunded_clears_flags_when_room(allocation_factory):
    allocation = allocation_factory(date(2024, 1, 5), 500.0)
    rent = expand_bills(
        [Bill(name="Rent", payment_amount=400.0, due_date=date(2024, 1, 5), bill_type="one-time")],
        horizon_end=date(2024, 1, 31),
    )[0]
    place_bill(allocation, rent, "fallback")
    assert allocation.bills[0].is_underfunded is True

    refresh_underfunded(allocation)

    assert allocation.bills[0].is_underfunded is False
