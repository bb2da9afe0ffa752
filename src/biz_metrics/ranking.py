# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Ranking of per-business results for "top performing businesses" views.

Businesses are ordered by net profit (descending), then by total revenue
(descending). Python's sort is stable, so businesses tied on both keys
keep their input order.
"""

from collections.abc import Iterable

from .models import MetricsResult

DEFAULT_TOP_N = 5


def _sort_key(result: MetricsResult) -> tuple[float, float]:
    return (-result.net_profit, -result.total_revenue)


def rank_businesses(results: Iterable[MetricsResult]) -> list[MetricsResult]:
    """Return all results ordered from best to worst performer."""
    return sorted(results, key=_sort_key)


def top_performing(
    results: Iterable[MetricsResult], n: int = DEFAULT_TOP_N
) -> list[MetricsResult]:
    """
    Return the ``n`` best performing businesses.

    Fewer than ``n`` results are returned when fewer businesses exist; an
    empty input or a non-positive ``n`` gives an empty list.
    """
    if n <= 0:
        return []
    return rank_businesses(results)[:n]
