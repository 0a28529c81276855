"""Unit tests for the report renderer client"""

import asyncio
import logging
import httpx
import pytest
from unittest.mock import AsyncMock, patch
from budget_planner.domain.exceptions import ReportExportError
from budget_planner.infrastructure.clients.report import ReportClient, deliver_report

RENDERER_URL = "http://renderer.test/render"
PAYLOAD = {"event": "BUDGET_REPORT_REQUESTED", "user_id": "user_jane"}


def _response(status_code: int) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", RENDERER_URL))


@pytest.fixture
def report_client() -> ReportClient:
    client = ReportClient(renderer_url=RENDERER_URL, timeout=1.0)
    client.max_retries = 3
    client.backoff_base = 1.0
    return client


@patch("budget_planner.infrastructure.clients.report.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_send_report_success(mock_post: AsyncMock, mock_sleep: AsyncMock, report_client: ReportClient):
    mock_post.return_value = _response(202)

    asyncio.run(report_client.send_report(PAYLOAD))

    mock_post.assert_awaited_once_with(RENDERER_URL, json=PAYLOAD)
    mock_sleep.assert_not_awaited()


@patch("budget_planner.infrastructure.clients.report.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_client_error_is_not_retried(mock_post: AsyncMock, mock_sleep: AsyncMock, report_client: ReportClient):
    mock_post.return_value = _response(400)

    with pytest.raises(ReportExportError, match="rejected: 400"):
        asyncio.run(report_client.send_report(PAYLOAD))

    assert mock_post.await_count == 1
    mock_sleep.assert_not_awaited()


@patch("budget_planner.infrastructure.clients.report.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_server_error_retries_with_backoff(mock_post: AsyncMock, mock_sleep: AsyncMock, report_client: ReportClient):
    mock_post.return_value = _response(503)

    with pytest.raises(ReportExportError, match="renderer error: 503"):
        asyncio.run(report_client.send_report(PAYLOAD))

    assert mock_post.await_count == 3
    assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0]


@patch("budget_planner.infrastructure.clients.report.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_recovers_after_transient_failures(mock_post: AsyncMock, mock_sleep: AsyncMock, report_client: ReportClient):
    mock_post.side_effect = [httpx.ConnectError("connection refused"), _response(502), _response(200)]

    asyncio.run(report_client.send_report(PAYLOAD))

    assert mock_post.await_count == 3
    assert mock_sleep.await_count == 2


@patch("budget_planner.infrastructure.clients.report.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_unreachable_renderer_raises(mock_post: AsyncMock, mock_sleep: AsyncMock, report_client: ReportClient):
    mock_post.side_effect = httpx.ConnectError("connection refused")

    with pytest.raises(ReportExportError, match="unreachable"):
        asyncio.run(report_client.send_report(PAYLOAD))

    assert mock_post.await_count == 3


@patch("budget_planner.infrastructure.clients.report.asyncio.sleep", new_callable=AsyncMock)
@patch("httpx.AsyncClient.post", new_callable=AsyncMock)
def test_deliver_report_logs_instead_of_raising(
    mock_post: AsyncMock,
    mock_sleep: AsyncMock,
    report_client: ReportClient,
    caplog: pytest.LogCaptureFixture,
):
    mock_post.return_value = _response(422)

    with caplog.at_level(logging.ERROR):
        asyncio.run(deliver_report(report_client, PAYLOAD))

    assert any("Report export failed" in r.getMessage() for r in caplog.records)
    assert mock_post.await_count == 1
