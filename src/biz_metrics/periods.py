# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for BizMetrics.

This module selects the dated records (sales, expenses) that fall inside a
reporting window. Two kinds of windows are supported:

- named periods relative to a reference date ``now``:
    all, month, quarter, year
- explicit date ranges (``DateRange``) with optional bounds, used for
  report exports.

``now`` is always passed in by the caller. Nothing in this module reads the
system clock, so the same inputs always select the same records.

Records are compared on their own calendar date: a ``datetime`` is reduced
to its ``date()`` and ISO strings are parsed, without any timezone
conversion.
"""

import calendar
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, TypeVar, Union

import pandas as pd

T = TypeVar("T")


class PeriodName(str, Enum):
    """Named reporting periods, relative to a reference date."""

    ALL = "all"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


@dataclass(frozen=True)
class DateRange:
    """
    Explicit reporting range.

    Both bounds are inclusive. A missing bound leaves that side open; with
    both bounds missing the range selects everything. Bounds given as
    ``datetime`` are reduced to their calendar date.
    """

    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_date(self.start))
        object.__setattr__(self, "end", as_date(self.end))

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None


PeriodLike = Union[PeriodName, str, DateRange]


def parse_period_name(raw: Union[PeriodName, str]) -> PeriodName:
    """
    Convert a raw period name into a PeriodName.

    Raises:
        ValueError: if the name is not one of all, month, quarter, year.
    """
    if isinstance(raw, PeriodName):
        return raw
    try:
        return PeriodName(str(raw).strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unknown period: {raw!r}") from exc


def _quarter(day: date) -> int:
    """Zero-based quarter index of a date (0 for Jan-Mar, 3 for Oct-Dec)."""
    return (day.month - 1) // 3


def as_date(value: Any) -> Optional[date]:
    """
    Reduce a record date to a calendar date.

    Accepts ``date``, ``datetime`` (including pandas Timestamps) and ISO
    strings. Returns None for missing or unparseable values.
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def _reference_date(now: Union[date, datetime]) -> date:
    reference = as_date(now)
    if reference is None:
        raise ValueError(f"Invalid reference date: {now!r}")
    return reference


def _record_date(record: Any, date_field: str) -> Optional[date]:
    if isinstance(record, Mapping):
        raw = record.get(date_field)
    else:
        raw = getattr(record, date_field, None)
    return as_date(raw)


def in_period(day: date, period: PeriodName, now: date) -> bool:
    """Return True if ``day`` falls inside the named period around ``now``."""
    if period is PeriodName.ALL:
        return True
    if day.year != now.year:
        return False
    if period is PeriodName.YEAR:
        return True
    if period is PeriodName.QUARTER:
        return _quarter(day) == _quarter(now)
    return day.month == now.month


def filter_by_range(
    records: Iterable[T],
    date_range: DateRange,
    date_field: str = "date",
) -> list[T]:
    """
    Keep the records whose date lies inside ``date_range``.

    With both bounds missing, every record is kept (including undated ones).
    Otherwise, records without a usable date are dropped.
    """
    items = list(records)
    if date_range.is_open:
        return items

    kept: list[T] = []
    for record in items:
        day = _record_date(record, date_field)
        if day is not None and date_range.contains(day):
            kept.append(record)
    return kept


def filter_by_period(
    records: Iterable[T],
    period: PeriodLike,
    date_field: str = "date",
    *,
    now: Union[date, datetime],
) -> list[T]:
    """
    Select the records that fall inside a reporting period.

    Parameters
    ----------
    records:
        Dated records (dataclasses or mappings).
    period:
        A period name ("all", "month", "quarter", "year" or a PeriodName)
        or an explicit DateRange.
    date_field:
        Name of the attribute / key holding the record date.
    now:
        Reference date for named periods. Only its calendar date is used.

    Returns
    -------
    list
        The matching records, in their original order.

    Raises
    ------
    ValueError
        If ``period`` is an unknown name.
    """
    if isinstance(period, DateRange):
        return filter_by_range(records, period, date_field)

    name = parse_period_name(period)
    items = list(records)
    if name is PeriodName.ALL:
        return items

    reference = _reference_date(now)

    kept: list[T] = []
    for record in items:
        day = _record_date(record, date_field)
        if day is not None and in_period(day, name, reference):
            kept.append(record)
    return kept


def period_range(period: PeriodLike, now: Union[date, datetime]) -> DateRange:
    """
    Concrete inclusive bounds of a period.

    Named periods are resolved around ``now``; "all" gives an open range and
    a DateRange is returned unchanged.
    """
    if isinstance(period, DateRange):
        return period

    name = parse_period_name(period)
    if name is PeriodName.ALL:
        return DateRange()

    reference = _reference_date(now)

    year = reference.year
    if name is PeriodName.YEAR:
        return DateRange(date(year, 1, 1), date(year, 12, 31))

    if name is PeriodName.QUARTER:
        first_month = _quarter(reference) * 3 + 1
        last_month = first_month + 2
    else:
        first_month = last_month = reference.month

    last_day = calendar.monthrange(year, last_month)[1]
    return DateRange(date(year, first_month, 1), date(year, last_month, last_day))


def period_label(period: PeriodLike, now: Union[date, datetime]) -> str:
    """Human-readable label for a period, used in reports and CLI output."""
    if isinstance(period, DateRange):
        if period.is_open:
            return "All time"
        start = period.start.isoformat() if period.start else "…"
        end = period.end.isoformat() if period.end else "…"
        return f"Custom period ({start} → {end})"

    name = parse_period_name(period)
    if name is PeriodName.ALL:
        return "All time"

    reference = _reference_date(now)
    if name is PeriodName.YEAR:
        return f"Year {reference.year}"
    if name is PeriodName.QUARTER:
        return f"Q{_quarter(reference) + 1} {reference.year}"
    return f"Month {reference:%Y-%m}"
