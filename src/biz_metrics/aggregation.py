# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Multi-business aggregation for BizMetrics.

``aggregate()`` is the entry point used by the admin dashboard and the
comparison views. For a list of BusinessSnapshot objects and a period it:

1. filters each business' sales and expenses to the period, using one
   single reference date ``now`` for every business;
2. computes a MetricsResult per business (``metrics.compute_metrics``);
3. builds the group total by summing the money figures of the
   per-business results and recomputing profits, margins and ROI from
   those sums (``metrics.metrics_from_totals``). Percentages are never
   averaged across businesses;
4. merges the per-business expense breakdowns category by category.

Products carry no date and are never period-filtered: inventory value and
cost basis always use the current catalog.

The result can be turned into a long-format DataFrame (one row per
business) for display or CSV export.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Union

import pandas as pd

from .expenses import DEFAULT_CLASSIFIER, ExpenseClassifier, merge_breakdowns
from .metrics import compute_metrics, metrics_from_totals
from .models import BusinessSnapshot, MetricsResult
from .periods import PeriodLike, filter_by_period, period_label
from .views import metrics_to_frame


@dataclass(frozen=True)
class AggregateResult:
    """
    Result of a multi-business aggregation.

    Attributes
    ----------
    total :
        Figures for the whole group. Margins and ROI are recomputed from the
        summed amounts.
    per_business :
        One MetricsResult per input business, in input order.
    period_label :
        Human-readable label of the period the figures cover.
    """

    total: MetricsResult
    per_business: list[MetricsResult] = field(default_factory=list)
    period_label: str = "All time"

    def to_frame(self) -> pd.DataFrame:
        """One row per business, see ``views.metrics_to_frame``."""
        return metrics_to_frame(self.per_business)


def sum_results(results: Iterable[MetricsResult]) -> MetricsResult:
    """
    Combine per-business results into one group result.

    Money amounts and counts are summed; every derived figure is recomputed
    from the sums.
    """
    results = list(results)
    return metrics_from_totals(
        total_revenue=sum((r.total_revenue for r in results), 0.0),
        cogs=sum((r.cogs for r in results), 0.0),
        operating_expenses=sum((r.operating_expenses for r in results), 0.0),
        one_time_expenses=sum((r.one_time_expenses for r in results), 0.0),
        inventory_value=sum((r.inventory_value for r in results), 0.0),
        expense_breakdown=merge_breakdowns(r.expense_breakdown for r in results),
        sales_count=sum(r.sales_count for r in results),
        product_count=sum(r.product_count for r in results),
    )


def business_metrics(
    business: BusinessSnapshot,
    period: PeriodLike,
    *,
    now: Union[date, datetime],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> MetricsResult:
    """Compute the metrics of one business over a period."""
    sales = filter_by_period(business.sales or (), period, "date", now=now)
    expenses = filter_by_period(business.expenses or (), period, "date", now=now)
    return compute_metrics(
        sales,
        expenses,
        business.products or (),
        classifier=classifier,
        business_id=business.id,
        business_name=business.name,
    )


def aggregate(
    businesses: Iterable[BusinessSnapshot],
    period: PeriodLike = "all",
    *,
    now: Union[date, datetime],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> AggregateResult:
    """
    Compute per-business and group metrics over a period.

    Parameters
    ----------
    businesses:
        Snapshots of the businesses to aggregate.
    period:
        "all", "month", "quarter", "year" (or PeriodName) or a DateRange.
    now:
        Reference date shared by every business of this call.
    classifier:
        Expense classifier applied to every business.

    Returns
    -------
    AggregateResult
        ``total`` for the group and ``per_business`` in input order. With
        no business, both are empty / all-zero.

    Raises
    ------
    ValueError
        If ``period`` is an unknown period name.
    """
    per_business = [
        business_metrics(b, period, now=now, classifier=classifier)
        for b in businesses
    ]

    return AggregateResult(
        total=sum_results(per_business),
        per_business=per_business,
        period_label=period_label(period, now),
    )
