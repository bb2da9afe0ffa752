# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Core financial calculations for BizMetrics.

This module computes the profitability figures of one business from its
(already period-filtered) sales, expenses and products. All functions are
pure: they read their inputs, never modify them and never perform I/O.

Figures
-------
- total revenue      : sum of sale totals
- COGS               : units sold * resolved unit cost (cost_basis.py)
- gross profit       : revenue - COGS
- operating expenses : expenses classified OPERATING (expenses.py)
- one-time expenses  : expenses classified ONE_TIME
- operating profit   : gross profit - operating expenses
- net profit         : gross profit - operating - one-time expenses
- EBITDA             : equal to operating profit; the domain has no
                       interest, tax, depreciation or amortization lines
- margins            : profit / revenue * 100 (0 when revenue is 0)
- ROI                : net profit / one-time expenses * 100 (0 when there
                       is no one-time spend)
- inventory value    : stock * wholesale price

The individual functions are convenient for single figures.
``compute_metrics()`` returns every figure at once as a MetricsResult and
computes each sum only once. ``metrics_from_totals()`` derives the profit,
margin and ROI figures from already-summed money amounts; the aggregation
layer relies on it to build cross-business totals with the same formulas.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

from .cost_basis import index_products, sale_cost, sale_total
from .expenses import (
    DEFAULT_CLASSIFIER,
    ExpenseClassifier,
    expense_breakdown,
    split_expenses,
)
from .models import Expense, MetricsResult, Product, Sale


def safe_percentage(numerator: float, denominator: float) -> float:
    """Return numerator / denominator * 100, or 0.0 when denominator is 0."""
    if denominator == 0:
        return 0.0
    return numerator / denominator * 100


def _sum_amounts(expenses: Iterable[Expense]) -> float:
    return sum((float(e.amount) for e in expenses), 0.0)


def total_sales_revenue(sales: Iterable[Sale]) -> float:
    return sum((sale_total(s) for s in sales), 0.0)


def total_expenses(expenses: Iterable[Expense]) -> float:
    return _sum_amounts(expenses)


def cogs(sales: Iterable[Sale], products: Iterable[Product]) -> float:
    """Cost of goods sold over the given sales."""
    products_by_id = index_products(products)
    return sum((sale_cost(s, products_by_id) for s in sales), 0.0)


def gross_profit(sales: Sequence[Sale], products: Sequence[Product]) -> float:
    return total_sales_revenue(sales) - cogs(sales, products)


def operating_expenses(
    expenses: Iterable[Expense],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> float:
    operating, _ = split_expenses(expenses, classifier)
    return _sum_amounts(operating)


def one_time_expenses(
    expenses: Iterable[Expense],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> float:
    _, one_time = split_expenses(expenses, classifier)
    return _sum_amounts(one_time)


def operating_profit(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> float:
    return gross_profit(sales, products) - operating_expenses(expenses, classifier)


def net_profit(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> float:
    operating, one_time = split_expenses(expenses, classifier)
    return (
        gross_profit(sales, products) - _sum_amounts(operating) - _sum_amounts(one_time)
    )


def ebitda(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> float:
    """EBITDA, identical to operating profit in this domain."""
    return operating_profit(sales, expenses, products, classifier)


def gross_profit_margin(sales: Sequence[Sale], products: Sequence[Product]) -> float:
    return safe_percentage(gross_profit(sales, products), total_sales_revenue(sales))


def operating_profit_margin(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> float:
    return safe_percentage(
        operating_profit(sales, expenses, products, classifier),
        total_sales_revenue(sales),
    )


def net_profit_margin(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> float:
    return safe_percentage(
        net_profit(sales, expenses, products, classifier),
        total_sales_revenue(sales),
    )


def roi(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Sequence[Product],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> float:
    """
    Return on investment in percent.

    The investment base is the one-time (capital) spend only; recurring
    operating costs are not part of the denominator.
    """
    return safe_percentage(
        net_profit(sales, expenses, products, classifier),
        one_time_expenses(expenses, classifier),
    )


def inventory_value(products: Iterable[Product]) -> float:
    """Stock valued at wholesale price."""
    return sum(
        (float(p.stock) * float(p.wholesale_price or 0.0) for p in products), 0.0
    )


def metrics_from_totals(
    *,
    total_revenue: float,
    cogs: float,
    operating_expenses: float,
    one_time_expenses: float,
    inventory_value: float = 0.0,
    expense_breakdown: Optional[Mapping[str, float]] = None,
    sales_count: int = 0,
    product_count: int = 0,
    business_id: Optional[str] = None,
    business_name: Optional[str] = None,
) -> MetricsResult:
    """
    Build a MetricsResult from summed money figures.

    Profits, margins and ROI are derived here and nowhere else, so that a
    single business and a group of businesses follow the same arithmetic.
    """
    gross = total_revenue - cogs
    operating = gross - operating_expenses
    net = gross - operating_expenses - one_time_expenses

    return MetricsResult(
        total_revenue=total_revenue,
        cogs=cogs,
        gross_profit=gross,
        operating_expenses=operating_expenses,
        one_time_expenses=one_time_expenses,
        operating_profit=operating,
        net_profit=net,
        ebitda=operating,
        gross_profit_margin=safe_percentage(gross, total_revenue),
        operating_profit_margin=safe_percentage(operating, total_revenue),
        net_profit_margin=safe_percentage(net, total_revenue),
        roi=safe_percentage(net, one_time_expenses),
        inventory_value=inventory_value,
        expense_breakdown=dict(expense_breakdown or {}),
        total_expenses=operating_expenses + one_time_expenses,
        sales_count=sales_count,
        product_count=product_count,
        business_id=business_id,
        business_name=business_name,
    )


def compute_metrics(
    sales: Iterable[Sale],
    expenses: Iterable[Expense],
    products: Iterable[Product],
    *,
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
    business_id: Optional[str] = None,
    business_name: Optional[str] = None,
) -> MetricsResult:
    """
    Compute every figure for one business.

    Args:
        sales: Sales of the period.
        expenses: Expenses of the period.
        products: Current product catalog (used for cost basis and
            inventory valuation).
        classifier: Expense classifier to split operating / one-time spend.
        business_id: Optional identifier copied into the result.
        business_name: Optional display name copied into the result.

    Returns:
        A MetricsResult. Empty inputs give an all-zero result.
    """
    sales = list(sales)
    expenses = list(expenses)
    products = list(products)

    operating, one_time = split_expenses(expenses, classifier)

    return metrics_from_totals(
        total_revenue=total_sales_revenue(sales),
        cogs=cogs(sales, products),
        operating_expenses=_sum_amounts(operating),
        one_time_expenses=_sum_amounts(one_time),
        inventory_value=inventory_value(products),
        expense_breakdown=expense_breakdown(expenses),
        sales_count=len(sales),
        product_count=len(products),
        business_id=business_id,
        business_name=business_name,
    )
