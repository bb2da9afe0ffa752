# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Report helpers for BizMetrics.

These helpers feed the detailed report screens (product profitability,
monthly profit chart, sales channel split, restocking alerts). They reuse
the engine rules instead of repeating the arithmetic:

- unit costs come from ``cost_basis.resolve_unit_cost``,
- expense totals and splits come from ``metrics`` / ``expenses``.

Tabular outputs are pandas DataFrames so that they can be displayed or
exported directly.
"""

from collections.abc import Iterable, Sequence
from typing import Any

import pandas as pd

from .cost_basis import index_products, sale_cost, sale_total
from .expenses import DEFAULT_CLASSIFIER, ExpenseClassifier, split_expenses
from .models import Expense, Product, Sale, SaleType
from .periods import as_date

PRODUCT_PROFIT_COLUMNS = [
    "product_id",
    "name",
    "quantity",
    "revenue",
    "cost",
    "profit",
]
MONTHLY_COLUMNS = [
    "month",
    "revenue",
    "cogs",
    "operating_expenses",
    "one_time_expenses",
    "net_profit",
]


def product_profit_report(
    sales: Iterable[Sale],
    products: Iterable[Product],
    sort_by: str = "profit",
) -> pd.DataFrame:
    """
    Profit made on each product over the given sales.

    Parameters
    ----------
    sales:
        Sales of the period.
    products:
        Product catalog used for names and cost basis.
    sort_by:
        "profit" or "quantity"; rows are sorted by this column, descending.

    Returns
    -------
    pandas.DataFrame
        One row per product sold with columns:
        product_id, name, quantity, revenue, cost, profit.

    Raises
    ------
    ValueError
        If ``sort_by`` is not "profit" or "quantity".
    """
    if sort_by not in {"profit", "quantity"}:
        raise ValueError(f"Unknown sort key: {sort_by!r}")

    products_by_id = index_products(products)
    rows: list[dict[str, Any]] = []
    for sale in sales:
        product = products_by_id.get(str(sale.product_id))
        revenue = sale_total(sale)
        cost = sale_cost(sale, products_by_id)
        rows.append(
            {
                "product_id": str(sale.product_id),
                "name": product.name if product is not None else "",
                "quantity": int(sale.quantity),
                "revenue": revenue,
                "cost": cost,
                "profit": revenue - cost,
            }
        )

    if not rows:
        return pd.DataFrame(columns=PRODUCT_PROFIT_COLUMNS)

    df = pd.DataFrame(rows)
    # Group on id only: a product missing from the catalog keeps its id.
    grouped = df.groupby("product_id", sort=False).agg(
        name=("name", "first"),
        quantity=("quantity", "sum"),
        revenue=("revenue", "sum"),
        cost=("cost", "sum"),
        profit=("profit", "sum"),
    )
    grouped = grouped.reset_index()
    grouped = grouped.sort_values(sort_by, ascending=False, kind="stable")
    return grouped.reset_index(drop=True)[PRODUCT_PROFIT_COLUMNS]


def monthly_profit_series(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    products: Iterable[Product],
    classifier: ExpenseClassifier = DEFAULT_CLASSIFIER,
) -> pd.DataFrame:
    """
    Revenue, costs and net profit per calendar month.

    Months are keyed as "YYYY-MM" and returned in chronological order. Only
    months with at least one sale or expense appear. Records without a
    usable date are ignored.

    Returns
    -------
    pandas.DataFrame
        Columns: month, revenue, cogs, operating_expenses,
        one_time_expenses, net_profit.
    """
    products_by_id = index_products(products)
    operating, one_time = split_expenses(expenses, classifier)

    rows: list[dict[str, Any]] = []

    def _add(record_date: Any, **amounts: float) -> None:
        day = as_date(record_date)
        if day is None:
            return
        row = dict.fromkeys(MONTHLY_COLUMNS[1:-1], 0.0)
        row.update(amounts)
        row["month"] = f"{day:%Y-%m}"
        rows.append(row)

    for sale in sales:
        _add(
            sale.date,
            revenue=sale_total(sale),
            cogs=sale_cost(sale, products_by_id),
        )
    for expense in operating:
        _add(expense.date, operating_expenses=float(expense.amount))
    for expense in one_time:
        _add(expense.date, one_time_expenses=float(expense.amount))

    if not rows:
        return pd.DataFrame(columns=MONTHLY_COLUMNS)

    df = pd.DataFrame(rows)
    amount_columns = MONTHLY_COLUMNS[1:-1]
    monthly = df.groupby("month", sort=True)[amount_columns].sum().reset_index()
    monthly["net_profit"] = (
        monthly["revenue"]
        - monthly["cogs"]
        - monthly["operating_expenses"]
        - monthly["one_time_expenses"]
    )
    return monthly[MONTHLY_COLUMNS]


def sales_by_type(sales: Iterable[Sale]) -> dict[SaleType, float]:
    """Revenue per sale channel. Every SaleType is present, possibly at 0."""
    totals = {sale_type: 0.0 for sale_type in SaleType}
    for sale in sales:
        totals[SaleType.parse(sale.sale_type)] += sale_total(sale)
    return totals


def low_stock_products(products: Iterable[Product]) -> list[Product]:
    """Products whose stock fell strictly below their minimum stock level."""
    return [p for p in products if p.stock < p.min_stock]
