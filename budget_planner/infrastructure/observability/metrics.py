"""Prometheus metrics for schedule health, bill moves and report exports"""

from prometheus_client import Counter, Histogram

from budget_planner.domain.models import Schedule

# Schedule metrics
schedule_counter = Counter(
    "budget_schedule_computations_total",
    "Total payment schedules computed",
)

bill_placement_counter = Counter(
    "budget_bill_placements_total",
    "Bill instances placed by resolution tier",
    ["tier"],  # override | funded | unfunded | fallback
)

underfunded_counter = Counter(
    "budget_underfunded_bills_total",
    "Bill instances placed on a paycheck without enough funds",
)

critically_late_counter = Counter(
    "budget_critically_late_bills_total",
    "Bill instances scheduled past their allowable late days",
)

bill_move_counter = Counter(
    "budget_bill_moves_total",
    "Manual bill moves between paychecks",
    ["outcome"],  # moved | noop
)

# Report export metrics
report_latency_histogram = Histogram(
    "report_export_latency_seconds",
    "Report renderer response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

report_failure_counter = Counter(
    "report_export_failures_total",
    "Failed report deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_schedule(schedule: Schedule) -> None:
    """Record placement tiers and warning flags for every bill in the schedule"""
    schedule_counter.inc()

    for allocation in schedule.allocations:
        for bill in allocation.bills:
            bill_placement_counter.labels(tier=bill.placement).inc()
            if bill.is_underfunded:
                underfunded_counter.inc()
            if bill.is_critically_late:
                critically_late_counter.inc()


def record_move(moved: bool) -> None:
    bill_move_counter.labels(outcome="moved" if moved else "noop").inc()
