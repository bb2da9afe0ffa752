from datetime import date, datetime

import pandas as pd
import pytest

import biz_metrics.periods as periods
from biz_metrics.models import Expense
from biz_metrics.periods import DateRange, PeriodName, filter_by_period

NOW = date(2025, 5, 15)


def _expenses() -> list[Expense]:
    days = [
        date(2024, 5, 20),  # same month, previous year
        date(2025, 1, 1),  # Q1 boundary
        date(2025, 3, 31),  # last day of Q1
        date(2025, 4, 1),  # first day of Q2
        date(2025, 5, 1),  # first day of current month
        date(2025, 5, 31),  # last day of current month
        date(2025, 7, 1),  # Q3
        date(2025, 12, 31),  # last day of the year
    ]
    return [Expense(date=d, category="Loyer", amount=1.0) for d in days]


def _days(records) -> list[date]:
    return [r.date for r in records]


def test_filter_all_keeps_everything() -> None:
    records = _expenses()
    assert filter_by_period(records, "all", now=NOW) == records


def test_filter_month_same_month_and_year() -> None:
    """Records are kept on both inclusive month boundaries, previous years are not."""
    kept = filter_by_period(_expenses(), "month", now=NOW)
    assert _days(kept) == [date(2025, 5, 1), date(2025, 5, 31)]


def test_filter_quarter_same_quarter_and_year() -> None:
    kept = filter_by_period(_expenses(), PeriodName.QUARTER, now=NOW)
    assert _days(kept) == [date(2025, 4, 1), date(2025, 5, 1), date(2025, 5, 31)]


def test_filter_quarter_boundary_belongs_to_its_own_quarter() -> None:
    """March 31st is Q1 and April 1st is Q2."""
    kept = filter_by_period(_expenses(), "quarter", now=date(2025, 2, 10))
    assert _days(kept) == [date(2025, 1, 1), date(2025, 3, 31)]


def test_filter_year_same_calendar_year() -> None:
    kept = filter_by_period(_expenses(), "year", now=NOW)
    assert len(kept) == 7
    assert date(2024, 5, 20) not in _days(kept)


def test_filter_uses_local_calendar_date_of_datetimes() -> None:
    """Datetimes are compared on their own calendar date."""
    records = [
        {"date": datetime(2025, 5, 31, 23, 59)},
        {"date": datetime(2025, 6, 1, 0, 0)},
        {"date": "2025-05-02T10:00:00"},
        {"date": None},
    ]
    kept = filter_by_period(records, "month", now=datetime(2025, 5, 15, 8, 0))
    assert kept == [records[0], records[2]]


def test_filter_by_custom_date_field() -> None:
    records = [{"paid_on": date(2025, 5, 3)}, {"paid_on": date(2025, 6, 3)}]
    kept = filter_by_period(records, "month", "paid_on", now=NOW)
    assert kept == [records[0]]


@pytest.mark.parametrize(
    "date_range, expected",
    [
        (DateRange(), 8),
        (DateRange(start=date(2025, 4, 1)), 5),
        (DateRange(end=date(2025, 3, 31)), 3),
        (DateRange(start=date(2025, 3, 31), end=date(2025, 5, 1)), 3),
        (DateRange(datetime(2025, 5, 1, 8, 0), datetime(2025, 5, 31, 23, 59)), 2),
        (DateRange(start=datetime(2025, 12, 31, 18, 0)), 1),
    ],
)
def test_filter_by_explicit_range(date_range: DateRange, expected: int) -> None:
    """Explicit ranges are inclusive on every bound that is present."""
    assert len(filter_by_period(_expenses(), date_range, now=NOW)) == expected


def test_filter_unknown_period_raises() -> None:
    with pytest.raises(ValueError):
        filter_by_period(_expenses(), "week", now=NOW)


def test_filter_does_not_depend_on_system_clock() -> None:
    """The same inputs and reference date always select the same records."""
    first = filter_by_period(_expenses(), "quarter", now=NOW)
    second = filter_by_period(_expenses(), "quarter", now=NOW)
    assert first == second


@pytest.mark.parametrize(
    "period, expected",
    [
        ("month", DateRange(date(2025, 5, 1), date(2025, 5, 31))),
        ("quarter", DateRange(date(2025, 4, 1), date(2025, 6, 30))),
        ("year", DateRange(date(2025, 1, 1), date(2025, 12, 31))),
        ("all", DateRange()),
    ],
)
def test_period_range(period: str, expected: DateRange) -> None:
    assert periods.period_range(period, NOW) == expected


def test_period_label() -> None:
    assert periods.period_label("quarter", NOW) == "Q2 2025"
    assert periods.period_label("month", NOW) == "Month 2025-05"
    assert periods.period_label("all", NOW) == "All time"
    assert periods.period_label(DateRange(start=date(2025, 1, 1)), NOW) == (
        "Custom period (2025-01-01 → …)"
    )


def test_period_label_year_uses_reference_date() -> None:
    assert periods.period_label(PeriodName.YEAR, datetime(2024, 2, 29, 12, 0)) == (
        "Year 2024"
    )


def test_missing_timestamps_are_undated() -> None:
    """pandas NaT values count as undated records, never as comparable dates."""
    records = [{"date": pd.NaT}, {"date": pd.Timestamp("2025-05-03")}]

    assert periods.as_date(pd.NaT) is None
    assert filter_by_period(records, DateRange(date(2025, 5, 1)), now=NOW) == [
        records[1]
    ]
    assert filter_by_period(records, "month", now=NOW) == [records[1]]
    assert filter_by_period(records, "all", now=NOW) == records


def test_date_range_bounds_are_calendar_dates() -> None:
    date_range = DateRange(datetime(2025, 5, 1, 9, 30), datetime(2025, 5, 31, 23, 59))

    assert date_range == DateRange(date(2025, 5, 1), date(2025, 5, 31))
    assert date_range.contains(date(2025, 5, 31))
