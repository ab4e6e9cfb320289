"""Cursor-paginated collection of one record kind for one connected account"""

import logging
from typing import Any, Callable, Dict, Optional

from stripe_reports.config import settings
from stripe_reports.domain.exceptions import UpstreamAPIError
from stripe_reports.domain.models import CollectionResult, RawRecord, RecordKind
from stripe_reports.infrastructure.clients.stripe import StripeClient
from stripe_reports.infrastructure.observability.metrics import upstream_page_failures_counter

logger = logging.getLogger(__name__)

RecordFilter = Callable[[RawRecord], bool]

PAYMENT_EVENT_PREFIXES = ("charge.", "payment_intent.", "refund.", "dispute.", "balance.")


def is_payment_event(event: RawRecord) -> bool:
    return str(event.get("type", "")).startswith(PAYMENT_EVENT_PREFIXES)


async def collect(
    client: StripeClient,
    kind: RecordKind,
    account_id: str,
    start_timestamp: int,
    end_timestamp: int,
    *,
    page_size: int | None = None,
    record_filter: Optional[RecordFilter] = None,
    label: str | None = None,
) -> CollectionResult:
    """
    Fetch every record of one kind created inside [start_timestamp, end_timestamp].

    Pagination:
    - Pages of page_size filtered by created[gte]/created[lte]
    - The last record id on each page is the starting_after cursor for the next
    - Stops on has_more=False or on an empty page

    A failed page ends collection for this kind; whatever was gathered so far
    is returned with `error` set instead of raising. record_filter drops
    records client-side without affecting the cursor.
    """
    page_size = page_size or settings.page_size
    label = label or kind.value
    result = CollectionResult(kind=kind)
    starting_after: str | None = None

    while True:
        params: Dict[str, Any] = {
            "limit": page_size,
            "created[gte]": start_timestamp,
            "created[lte]": end_timestamp,
        }
        if starting_after:
            params["starting_after"] = starting_after

        result.pages += 1
        try:
            page = await client.list_page(kind, account_id, params)
            if not page.data:
                break
            if record_filter is None:
                result.records.extend(page.data)
            else:
                result.records.extend(r for r in page.data if record_filter(r))
            if not page.has_more:
                break
            starting_after = page.data[-1]["id"]
        except (UpstreamAPIError, KeyError, TypeError, AttributeError) as e:
            upstream_page_failures_counter.labels(kind=kind.value).inc()
            logger.warning(
                f"Stopped collecting {label} after {len(result.records)} records: {e}",
                extra={"account_id": account_id, "kind": kind.value, "page": result.pages},
            )
            result.error = str(e) if isinstance(e, UpstreamAPIError) else f"Malformed {kind.value} page: {e!r}"
            return result

    logger.debug(
        f"Collected {len(result.records)} {label}",
        extra={"account_id": account_id, "kind": kind.value, "pages": result.pages},
    )
    return result
