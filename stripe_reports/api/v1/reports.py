"""GET /v1/reports/* - Multi-account summary and detail reports"""

import time
import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from stripe_reports.api.dependencies import get_request_id, get_stripe_client
from stripe_reports.api.v1.schemas import (
    AccountSchema,
    DailyBucketSchema,
    DateRangeSchema,
    DetailReportResponse,
    PaginationSchema,
    SummaryReportResponse,
    TransactionRowSchema,
    WarningSchema,
)
from stripe_reports.config import settings
from stripe_reports.domain.exceptions import InvalidReportRequestError
from stripe_reports.domain.models import MultiAccountResult, ReportView, ReportWindow
from stripe_reports.domain.pagination import paginate
from stripe_reports.domain.periods import parse_account_ids, resolve_report_window
from stripe_reports.infrastructure.clients.stripe import StripeClient
from stripe_reports.infrastructure.observability.logging import log_report
from stripe_reports.infrastructure.observability.metrics import record_report
from stripe_reports.services.orchestrator import fetch_multi_account

logger = logging.getLogger(__name__)
router = APIRouter()


async def _run_report(
    request: Request,
    client: StripeClient,
    view: ReportView,
    account_ids_raw: str,
    period: str,
    start_date: Optional[str],
    end_date: Optional[str],
    timezone: str,
) -> tuple[list[str], ReportWindow, MultiAccountResult]:
    """Validate inputs, then fetch. Invalid input never reaches the upstream API."""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        account_ids = parse_account_ids(account_ids_raw)
        window = resolve_report_window(period, start_date, end_date, timezone)
    except InvalidReportRequestError as e:
        logger.warning(f"Rejected report request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = await fetch_multi_account(
            client, account_ids, window.start_date, window.end_date, window.timezone, view
        )
    except Exception as e:
        logger.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_report(view.value, len(result.rows))
    log_report(request_id, view.value, account_ids, len(result.rows), len(result.warnings), duration_ms)
    return account_ids, window, result


@router.get("/reports/multi/{account_ids}", response_model=SummaryReportResponse)
async def get_summary_report(
    account_ids: str,
    request: Request,
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, required for custom period"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, required for custom period"),
    timezone: str = Query(settings.default_timezone, description="IANA timezone name"),
    period: str = Query("custom", description="daily | weekly | monthly | custom"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    client: StripeClient = Depends(get_stripe_client),
):
    """
    Daily summaries for comma-separated connected accounts.

    Returns one bucket per account per day, newest day first, paginated
    after the full report is built.
    """
    _, window, result = await _run_report(
        request, client, ReportView.SUMMARY, account_ids, period, start_date, end_date, timezone
    )
    page_rows, meta = paginate(result.rows, page, limit or settings.summary_default_limit)

    return SummaryReportResponse(
        data=[DailyBucketSchema(**asdict(row)) for row in page_rows],
        accounts=[AccountSchema(**asdict(account)) for account in result.accounts],
        pagination=PaginationSchema(**asdict(meta)),
        warnings=[WarningSchema(**asdict(w)) for w in result.warnings],
        dateRange=DateRangeSchema(start=window.start_date.isoformat(), end=window.end_date.isoformat()),
        timezone=window.timezone,
    )


@router.get("/reports/detailed/{account_ids}", response_model=DetailReportResponse)
async def get_detail_report(
    account_ids: str,
    request: Request,
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD, required for custom period"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, required for custom period"),
    timezone: str = Query(settings.default_timezone, description="IANA timezone name"),
    period: str = Query("custom", description="daily | weekly | monthly | custom"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=1000),
    client: StripeClient = Depends(get_stripe_client),
):
    """Normalized charges and payment intents, newest first"""
    _, window, result = await _run_report(
        request, client, ReportView.DETAIL, account_ids, period, start_date, end_date, timezone
    )
    page_rows, meta = paginate(result.rows, page, limit or settings.detail_default_limit)

    return DetailReportResponse(
        data=[TransactionRowSchema(**asdict(row)) for row in page_rows],
        pagination=PaginationSchema(**asdict(meta)),
        warnings=[WarningSchema(**asdict(w)) for w in result.warnings],
        dateRange=DateRangeSchema(start=window.start_date.isoformat(), end=window.end_date.isoformat()),
        timezone=window.timezone,
    )
