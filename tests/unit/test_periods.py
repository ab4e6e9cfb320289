"""Unit tests for report windows, account parsing and pagination"""

import pytest
from datetime import date

from stripe_reports.domain.exceptions import InvalidReportRequestError
from stripe_reports.domain.pagination import paginate
from stripe_reports.domain.periods import (
    parse_account_ids,
    resolve_report_window,
    supported_timezones,
)


def test_custom_window():
    window = resolve_report_window("custom", "2024-03-01", "2024-03-31", "America/Chicago")

    assert window.start_date == date(2024, 3, 1)
    assert window.end_date == date(2024, 3, 31)
    assert window.timezone == "America/Chicago"


def test_preset_periods_end_today():
    today = date(2024, 3, 15)

    assert resolve_report_window("daily", None, None, "UTC", today=today).start_date == date(2024, 3, 14)
    assert resolve_report_window("weekly", None, None, "UTC", today=today).start_date == date(2024, 3, 8)
    monthly = resolve_report_window("monthly", "2020-01-01", "2020-01-02", "UTC", today=today)
    assert monthly.start_date == date(2024, 2, 14)
    assert monthly.end_date == today


@pytest.mark.parametrize(
    "period,start,end,tz,message",
    [
        ("custom", None, "2024-03-01", "UTC", "required"),
        ("custom", "2024-03-01", "", "UTC", "required"),
        ("custom", "03/01/2024", "2024-03-02", "UTC", "YYYY-MM-DD"),
        ("custom", "2024-02-30", "2024-03-02", "UTC", "YYYY-MM-DD"),
        ("custom", "20240301", "2024-03-02", "UTC", "YYYY-MM-DD"),
        ("custom", "2024-3-1", "2024-03-02", "UTC", "YYYY-MM-DD"),
        ("custom", "2024-03-01", "2024-W10-1", "UTC", "YYYY-MM-DD"),
        ("custom", "2024-03-05", "2024-03-01", "UTC", "cannot be after"),
        ("yearly", "2024-03-01", "2024-03-02", "UTC", "Invalid period"),
        ("custom", "2024-03-01", "2024-03-02", "Mars/Olympus", "Unknown timezone"),
    ],
)
def test_invalid_requests_rejected(period, start, end, tz, message):
    with pytest.raises(InvalidReportRequestError, match=message):
        resolve_report_window(period, start, end, tz)


def test_parse_account_ids():
    assert parse_account_ids("acct_1, acct_2,,acct_3 ") == ["acct_1", "acct_2", "acct_3"]

    with pytest.raises(InvalidReportRequestError):
        parse_account_ids(" , ")


def test_supported_timezones():
    zones = supported_timezones()

    assert "America/New_York" in zones
    assert "US/Pacific" in zones
    assert "UTC" in zones
    assert "Europe/London" not in zones
    assert zones == sorted(zones)


def test_paginate_middle_page():
    items, meta = paginate(list(range(25)), page=2, limit=10)

    assert items == list(range(10, 20))
    assert meta.totalItems == 25
    assert meta.totalPages == 3
    assert meta.hasPrevPage is True
    assert meta.hasNextPage is True


def test_paginate_last_and_empty():
    items, meta = paginate(list(range(25)), page=3, limit=10)
    assert items == [20, 21, 22, 23, 24]
    assert meta.hasNextPage is False

    items, meta = paginate([], page=1, limit=10)
    assert items == []
    assert meta.totalPages == 0
    assert meta.hasPrevPage is False
    assert meta.hasNextPage is False
