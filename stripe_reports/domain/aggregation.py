"""Daily aggregation - buckets upstream records into calendar-day summaries"""

from datetime import date
from typing import Dict, Iterable, List

from stripe_reports.domain.models import AccountBundle, DailyBucket, RawRecord
from stripe_reports.utils.date_utils import generate_date_range, local_date_key

FAILED_STATUS = "failed"


def to_major_units(amount: int | None) -> float:
    """Convert integer minor units (cents) to major units"""
    return (amount or 0) / 100


def is_decline(charge: RawRecord) -> bool:
    return charge.get("status") == FAILED_STATUS


def approval_percentage(charges_count: int, declines_count: int) -> float:
    """
    Share of attempts that succeeded, as a percentage with 2 decimals.

    A day without attempts reports 100 so charts never see a gap or NaN.
    """
    attempts = charges_count + declines_count
    if attempts == 0:
        return 100.0
    return round(charges_count / attempts * 100, 2)


def aggregate_by_day(
    charges: Iterable[RawRecord],
    refunds: Iterable[RawRecord],
    disputes: Iterable[RawRecord],
    declines: Iterable[RawRecord],
    start_date: date,
    end_date: date,
    timezone: str,
    account_id: str,
) -> List[DailyBucket]:
    """
    Bucket records into one summary per calendar day of [start_date, end_date].

    Requirements:
    - Every date in the range gets exactly one bucket, zero-filled when empty
    - Charges add to the net total; refunds and disputes subtract from it
    - Declines are counted but carry no money
    - Records falling outside the range are dropped
    """
    buckets: Dict[str, DailyBucket] = {}
    for day in generate_date_range(start_date, end_date):
        key = day.isoformat()
        buckets[key] = DailyBucket(date=key, account_id=account_id)

    for charge in charges:
        bucket = buckets.get(local_date_key(charge["created"], timezone))
        if bucket is None:
            continue
        amount = to_major_units(charge.get("amount"))
        bucket.charges_count += 1
        bucket.charges_amount += amount
        bucket.totals_count += 1
        bucket.totals_amount += amount

    for refund in refunds:
        bucket = buckets.get(local_date_key(refund["created"], timezone))
        if bucket is None:
            continue
        amount = to_major_units(refund.get("amount"))
        bucket.refunds_count += 1
        bucket.refunds_amount += amount
        bucket.totals_count += 1
        bucket.totals_amount -= amount

    for dispute in disputes:
        bucket = buckets.get(local_date_key(dispute["created"], timezone))
        if bucket is None:
            continue
        amount = to_major_units(dispute.get("amount"))
        bucket.chargebacks_count += 1
        bucket.chargebacks_amount += amount
        bucket.totals_count += 1
        bucket.totals_amount -= amount

    for decline in declines:
        bucket = buckets.get(local_date_key(decline["created"], timezone))
        if bucket is None:
            continue
        bucket.declines_count += 1
        bucket.totals_count += 1

    # Round once at the end to shed float noise from repeated addition
    for bucket in buckets.values():
        bucket.charges_amount = round(bucket.charges_amount, 2)
        bucket.refunds_amount = round(bucket.refunds_amount, 2)
        bucket.chargebacks_amount = round(bucket.chargebacks_amount, 2)
        bucket.totals_amount = round(bucket.totals_amount, 2)
        bucket.aprvl_pct = approval_percentage(bucket.charges_count, bucket.declines_count)

    return list(buckets.values())


def summarize_bundle(bundle: AccountBundle, start_date: date, end_date: date, timezone: str) -> List[DailyBucket]:
    """Daily summary for one fetched account; failed charges count only as declines"""
    return aggregate_by_day(
        charges=[c for c in bundle.charges if not is_decline(c)],
        refunds=bundle.refunds,
        disputes=bundle.disputes,
        declines=bundle.declines,
        start_date=start_date,
        end_date=end_date,
        timezone=timezone,
        account_id=bundle.account_id,
    )
