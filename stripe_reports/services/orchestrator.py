"""Best-effort report building across many connected accounts"""

import asyncio
import logging
from datetime import date
from typing import Any, List, Optional, Sequence, Tuple

from stripe_reports.config import settings
from stripe_reports.domain.aggregation import summarize_bundle
from stripe_reports.domain.models import (
    Account,
    AccountBundle,
    FetchWarning,
    MultiAccountResult,
    ReportView,
)
from stripe_reports.domain.normalization import normalize
from stripe_reports.infrastructure.clients.stripe import StripeClient
from stripe_reports.infrastructure.observability.metrics import account_fetch_failures_counter
from stripe_reports.services.fetcher import fetch_account_bundle

logger = logging.getLogger(__name__)

AccountOutcome = Tuple[Optional[Account], List[Any], List[FetchWarning]]


def build_rows(bundle: AccountBundle, view: ReportView, start_date: date, end_date: date, timezone: str) -> List[Any]:
    if view == ReportView.SUMMARY:
        return summarize_bundle(bundle, start_date, end_date, timezone)
    return normalize(bundle.charges, bundle.payment_intents, bundle.account_id, timezone)


def row_sort_key(view: ReportView):
    if view == ReportView.SUMMARY:
        return lambda row: row.date
    return lambda row: row.created_timestamp


async def _fetch_one(
    client: StripeClient,
    account_id: str,
    start_date: date,
    end_date: date,
    timezone: str,
    view: ReportView,
    semaphore: asyncio.Semaphore,
) -> AccountOutcome:
    async with semaphore:
        try:
            account = await client.retrieve_account(account_id)
            bundle = await fetch_account_bundle(client, account_id, start_date, end_date, timezone)
            rows = build_rows(bundle, view, start_date, end_date, timezone)
        except Exception as e:
            account_fetch_failures_counter.inc()
            logger.error(f"Skipping account {account_id}: {e}", extra={"account_id": account_id})
            return None, [], [FetchWarning(account_id=account_id, source="account", message=str(e))]

    return account, rows, bundle.warnings


async def fetch_multi_account(
    client: StripeClient,
    account_ids: Sequence[str],
    start_date: date,
    end_date: date,
    timezone: str,
    view: ReportView = ReportView.SUMMARY,
    *,
    concurrency: int | None = None,
) -> MultiAccountResult:
    """
    Build report rows for every account, skipping accounts that fail.

    Requirements:
    - One account raising never fails the others or the whole call
    - Every failure is logged and returned as a warning
    - All accounts failing still returns a (empty) result
    - Rows come back newest first across accounts

    Accounts run with at most `concurrency` in flight (default from settings;
    1 processes them one at a time). Account order follows account_ids.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency or settings.account_concurrency))
    outcomes = await asyncio.gather(
        *(
            _fetch_one(client, account_id, start_date, end_date, timezone, view, semaphore)
            for account_id in account_ids
        )
    )

    result = MultiAccountResult()
    for account, rows, warnings in outcomes:
        if account is not None:
            result.accounts.append(account)
            result.rows.extend(rows)
        result.warnings.extend(warnings)

    if account_ids and not result.accounts:
        logger.error(
            "Every account failed; returning an empty report",
            extra={"account_ids": list(account_ids)},
        )

    result.rows.sort(key=row_sort_key(view), reverse=True)
    return result


async def list_accessible_accounts(client: StripeClient) -> List[Account]:
    """Accounts connected to the platform key. Upstream errors propagate."""
    return await client.list_accounts()
