"""Per-account fan-out over every record kind"""

import asyncio
import logging
from datetime import date
from typing import Dict

from stripe_reports.domain.aggregation import is_decline
from stripe_reports.domain.models import AccountBundle, CollectionResult, FetchWarning, RecordKind
from stripe_reports.infrastructure.clients.stripe import StripeClient
from stripe_reports.services.collector import collect, is_payment_event
from stripe_reports.utils.date_utils import day_bounds

logger = logging.getLogger(__name__)


async def fetch_account_bundle(
    client: StripeClient,
    account_id: str,
    start_date: date,
    end_date: date,
    timezone: str,
) -> AccountBundle:
    """
    Fetch all record kinds for one account over whole local days.

    Flow:
    1. Convert the calendar range to Unix bounds once
    2. Run the collections concurrently (no ordering between kinds)
    3. Fold results into one bundle; a failed collection becomes a warning
       and leaves its list partial

    Declines come from a second charges listing that keeps failed charges only.
    """
    start_ts, end_ts = day_bounds(start_date, end_date, timezone)

    specs = (
        ("charges", RecordKind.CHARGES, None),
        ("declines", RecordKind.CHARGES, is_decline),
        ("refunds", RecordKind.REFUNDS, None),
        ("disputes", RecordKind.DISPUTES, None),
        ("payment_intents", RecordKind.PAYMENT_INTENTS, None),
        ("balance_transactions", RecordKind.BALANCE_TRANSACTIONS, None),
        ("events", RecordKind.EVENTS, is_payment_event),
    )
    outcomes = await asyncio.gather(
        *(
            collect(client, kind, account_id, start_ts, end_ts, record_filter=record_filter, label=label)
            for label, kind, record_filter in specs
        ),
        return_exceptions=True,
    )

    results: Dict[str, CollectionResult] = {}
    for (label, kind, _), outcome in zip(specs, outcomes):
        if isinstance(outcome, Exception):
            logger.error(
                f"Collecting {label} raised: {outcome}",
                extra={"account_id": account_id, "kind": kind.value},
            )
            outcome = CollectionResult(kind=kind, error=str(outcome) or type(outcome).__name__)
        results[label] = outcome

    bundle = AccountBundle(
        account_id=account_id,
        charges=results["charges"].records,
        declines=results["declines"].records,
        refunds=results["refunds"].records,
        disputes=results["disputes"].records,
        payment_intents=results["payment_intents"].records,
        balance_transactions=results["balance_transactions"].records,
        events=results["events"].records,
    )

    for label, result in results.items():
        if result.error:
            bundle.warnings.append(FetchWarning(account_id=account_id, source=label, message=result.error))

    logger.info(
        "Fetched account bundle",
        extra={
            "account_id": account_id,
            "charges": len(bundle.charges),
            "declines": len(bundle.declines),
            "refunds": len(bundle.refunds),
            "disputes": len(bundle.disputes),
            "payment_intents": len(bundle.payment_intents),
            "warnings": len(bundle.warnings),
        },
    )
    return bundle
