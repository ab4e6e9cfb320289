"""Report window resolution and request validation"""

from datetime import date, datetime, timedelta
from typing import List, Optional

import pytz

from stripe_reports.domain.exceptions import InvalidReportRequestError
from stripe_reports.domain.models import ReportWindow

# Period name -> days back from today for the start of the window
PERIOD_LOOKBACK_DAYS = {
    "daily": 1,
    "weekly": 7,
    "monthly": 30,
}
CUSTOM_PERIOD = "custom"


def parse_report_date(value: str, field_name: str) -> date:
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as e:
        raise InvalidReportRequestError(f"Invalid {field_name} '{value}'. Use YYYY-MM-DD") from e
    # strptime also takes unpadded fields such as 2024-3-1
    if parsed.isoformat() != value.strip():
        raise InvalidReportRequestError(f"Invalid {field_name} '{value}'. Use YYYY-MM-DD")
    return parsed


def resolve_report_window(
    period: str,
    start_date: Optional[str],
    end_date: Optional[str],
    timezone: str,
    today: Optional[date] = None,
) -> ReportWindow:
    """
    Turn request parameters into a validated ReportWindow.

    Preset periods end today (in the report timezone) and ignore explicit
    dates; "custom" requires both dates.

    Raises:
        InvalidReportRequestError: unknown period or timezone, missing or
            malformed dates, or a start after the end
    """
    if timezone not in pytz.all_timezones_set:
        raise InvalidReportRequestError(f"Unknown timezone '{timezone}'")

    if period in PERIOD_LOOKBACK_DAYS:
        if today is None:
            today = datetime.now(pytz.timezone(timezone)).date()
        return ReportWindow(
            start_date=today - timedelta(days=PERIOD_LOOKBACK_DAYS[period]),
            end_date=today,
            timezone=timezone,
        )

    if period != CUSTOM_PERIOD:
        raise InvalidReportRequestError("Invalid period. Use: daily, weekly, monthly, or custom")

    if not start_date or not end_date:
        raise InvalidReportRequestError("start_date and end_date are required for custom period")

    start = parse_report_date(start_date, "start_date")
    end = parse_report_date(end_date, "end_date")
    if start > end:
        raise InvalidReportRequestError("start_date cannot be after end_date")

    return ReportWindow(start_date=start, end_date=end, timezone=timezone)


def parse_account_ids(raw: str) -> List[str]:
    """Split a comma-separated account list, dropping blanks"""
    account_ids = [part.strip() for part in (raw or "").split(",") if part.strip()]
    if not account_ids:
        raise InvalidReportRequestError("At least one account ID is required")
    return account_ids


def supported_timezones() -> List[str]:
    """US-focused zone list offered to report consumers"""
    return sorted(
        tz for tz in pytz.all_timezones
        if tz.startswith("America/") or tz.startswith("US/") or tz in ("UTC", "GMT")
    )
