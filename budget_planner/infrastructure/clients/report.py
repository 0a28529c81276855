"""Report renderer client - ships schedule reports to the external PDF service"""

import httpx
import asyncio
import logging
from typing import Dict, Any
from budget_planner.config import settings
from budget_planner.domain.exceptions import ReportExportError
from budget_planner.infrastructure.observability.metrics import report_latency_histogram, report_failure_counter


class ReportClient:
    """Client for posting JSON report payloads to the PDF renderer"""

    def __init__(self, renderer_url: str | None = None, timeout: float | None = None):
        self.renderer_url = renderer_url or settings.report_renderer_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.report_max_retries
        self.backoff_base = settings.report_backoff_base

    async def send_report(self, payload: Dict[str, Any]) -> None:
        """
        Deliver a report payload with retry logic.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1), i.e. 1s, 2s, 4s, 8s
        - Retries on 5xx errors and network failures
        - 4xx responses mean the payload was rejected and are not retried

        Raises:
            ReportExportError: payload rejected or all attempts failed
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with report_latency_histogram.time():
                        response = await client.post(self.renderer_url, json=payload)
                        response.raise_for_status()
                        return

                except httpx.HTTPStatusError as e:
                    attempt += 1
                    report_failure_counter.inc()
                    if e.response.status_code < 500:
                        raise ReportExportError(f"Report rejected: {e.response.status_code}") from e
                    if attempt >= self.max_retries:
                        raise ReportExportError(f"Report renderer error: {e.response.status_code}") from e

                except httpx.RequestError as e:
                    attempt += 1
                    report_failure_counter.inc()
                    if attempt >= self.max_retries:
                        raise ReportExportError(f"Report renderer unreachable: {e}") from e

                backoff = self.backoff_base * (2 ** (attempt - 1))
                logging.warning(
                    "Report delivery failed, retrying",
                    extra={"attempt": attempt, "backoff_seconds": backoff},
                )
                await asyncio.sleep(backoff)


async def deliver_report(client: "ReportClient", payload: Dict[str, Any]) -> None:
    """Background task wrapper: failures are logged, the request already returned"""
    try:
        await client.send_report(payload)
    except ReportExportError as e:
        logging.error(f"Report export failed: {e}", extra={"user_id": payload.get("user_id")})
