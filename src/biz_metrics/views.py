# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for BizMetrics.

This module turns MetricsResult objects into pandas DataFrames ready for
console display or CSV export, and provides the money / percentage
formatters used by the reports:

- money      : "1 234,50 FCFA" (space as thousands separator, comma as
               decimal separator, currency suffix)
- percentage : "12.3%"

The computations themselves live in metrics.py and aggregation.py; this
module only reshapes and formats their output.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from .models import MetricsResult


@dataclass(frozen=True)
class MeasureMeta:
    """
    Display metadata of a MetricsResult field.

    Attributes
    ----------
    key :
        MetricsResult attribute name (e.g. 'gross_profit').
    label :
        Human-readable label.
    unit :
        'amount', 'percent' or 'count'.
    """

    key: str
    label: str
    unit: str


MEASURES: tuple[MeasureMeta, ...] = (
    MeasureMeta("total_revenue", "Revenue", "amount"),
    MeasureMeta("cogs", "Cost of goods sold", "amount"),
    MeasureMeta("gross_profit", "Gross profit", "amount"),
    MeasureMeta("operating_expenses", "Operating expenses", "amount"),
    MeasureMeta("one_time_expenses", "One-time expenses", "amount"),
    MeasureMeta("total_expenses", "Total expenses", "amount"),
    MeasureMeta("operating_profit", "Operating profit", "amount"),
    MeasureMeta("net_profit", "Net profit", "amount"),
    MeasureMeta("ebitda", "EBITDA", "amount"),
    MeasureMeta("gross_profit_margin", "Gross margin", "percent"),
    MeasureMeta("operating_profit_margin", "Operating margin", "percent"),
    MeasureMeta("net_profit_margin", "Net margin", "percent"),
    MeasureMeta("roi", "ROI", "percent"),
    MeasureMeta("inventory_value", "Inventory value", "amount"),
    MeasureMeta("sales_count", "Sales", "count"),
    MeasureMeta("product_count", "Products", "count"),
)

# Per-business table columns, in display order.
FRAME_COLUMNS: tuple[str, ...] = ("business_id", "business_name") + tuple(
    m.key for m in MEASURES
)


def format_money(
    value: Optional[float], currency: str = "FCFA", decimals: int = 2
) -> str:
    """
    Format an amount as "1 234,50 FCFA".

    Returns "N/A" for None or non-numeric values.
    """
    if value is None:
        return "N/A"
    try:
        text = f"{float(value):,.{decimals}f}"
    except (TypeError, ValueError):
        return "N/A"
    text = text.replace(",", " ").replace(".", ",")
    return f"{text} {currency}" if currency else text


def format_percentage(value: Optional[float], decimals: int = 1) -> str:
    """Format a percentage value as "12.3%"."""
    if value is None:
        return "N/A"
    try:
        return f"{float(value):.{decimals}f}%"
    except (TypeError, ValueError):
        return "N/A"


def format_measure(
    value: Optional[float],
    unit: str,
    currency: str = "FCFA",
    percent_decimals: int = 1,
) -> str:
    """Dispatch to the formatter matching a measure unit."""
    if unit == "amount":
        return format_money(value, currency)
    if unit == "percent":
        return format_percentage(value, percent_decimals)
    if value is None:
        return "N/A"
    return str(int(value)) if unit == "count" else str(value)


def metrics_to_frame(results: Iterable[MetricsResult]) -> pd.DataFrame:
    """
    Convert MetricsResult objects into a DataFrame, one row per result.

    Columns follow ``FRAME_COLUMNS``. Values are left numeric so the frame
    can be sorted or exported as-is.
    """
    rows = [{col: getattr(r, col) for col in FRAME_COLUMNS} for r in results]
    if not rows:
        return pd.DataFrame(columns=list(FRAME_COLUMNS))
    return pd.DataFrame(rows, columns=list(FRAME_COLUMNS))


def metrics_summary_frame(
    result: MetricsResult,
    currency: str = "FCFA",
    percent_decimals: int = 1,
) -> pd.DataFrame:
    """
    Long-format view of a single MetricsResult.

    The resulting DataFrame has the following columns:
        - key:       MetricsResult attribute name.
        - label:     Human-readable label.
        - value:     Raw numeric value.
        - unit:      'amount', 'percent' or 'count'.
        - formatted: Display string (money / percentage formatting).
    """
    rows: list[dict[str, object]] = []
    for meta in MEASURES:
        value = getattr(result, meta.key)
        rows.append(
            {
                "key": meta.key,
                "label": meta.label,
                "value": value,
                "unit": meta.unit,
                "formatted": format_measure(
                    value, meta.unit, currency, percent_decimals
                ),
            }
        )
    return pd.DataFrame(rows, columns=["key", "label", "value", "unit", "formatted"])


def breakdown_to_frame(breakdown: Mapping[str, float]) -> pd.DataFrame:
    """
    Expense breakdown as a DataFrame sorted by amount (descending).

    Columns: category, amount, share (percentage of the breakdown total).
    """
    if not breakdown:
        return pd.DataFrame(columns=["category", "amount", "share"])

    df = pd.DataFrame(
        {"category": list(breakdown.keys()), "amount": list(breakdown.values())}
    )
    total = float(df["amount"].sum())
    if total == 0:
        df["share"] = 0.0
    else:
        df["share"] = df["amount"] / total * 100
    df = df.sort_values("amount", ascending=False, kind="stable").reset_index(drop=True)
    return df[["category", "amount", "share"]]
