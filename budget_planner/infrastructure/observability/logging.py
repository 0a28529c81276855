"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from budget_planner.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_schedule_computed(
    request_id: str,
    user_id: str,
    paycheck_count: int,
    bill_count: int,
    underfunded_count: int,
    duration_ms: float,
) -> None:
    """Log structured schedule computation outcome"""
    logging.info(
        "Schedule computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "schedule_computed",
            "paycheck_count": paycheck_count,
            "bill_count": bill_count,
            "underfunded_count": underfunded_count,
            "duration_ms": duration_ms,
        },
    )


def log_bill_moved(
    request_id: str,
    user_id: str,
    instance_id: str,
    from_pay_date: str,
    to_pay_date: str,
) -> None:
    """Log a manual move so overrides can be traced back to user actions"""
    logging.info(
        "Bill moved",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "bill_moved",
            "instance_id": instance_id,
            "from_pay_date": from_pay_date,
            "to_pay_date": to_pay_date,
        },
    )
