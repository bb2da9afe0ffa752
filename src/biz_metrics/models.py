# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Record types consumed and produced by the BizMetrics engine.

Input records (Sale, Expense, Product, BusinessSnapshot) are read-only
value objects supplied by the record store. The engine never mutates
them: it only derives numbers from them.

MetricsResult is the single derived structure returned by
``metrics.compute_metrics`` and ``aggregation.aggregate``. It is rebuilt
on every call and never stored.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class SaleType(str, Enum):
    """Pricing channel of a sale."""

    RETAIL = "RETAIL"
    WHOLESALE = "WHOLESALE"

    @classmethod
    def parse(cls, raw: object) -> "SaleType":
        """
        Convert a raw label into a SaleType.

        Accepts the enum values (any case) and the labels used by the
        back-office screens ("Vente en gros", "Vente au détail").
        Anything unrecognized is treated as a retail sale.
        """
        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip().casefold()
        if text in {"wholesale", "gros", "vente en gros"}:
            return cls.WHOLESALE
        return cls.RETAIL


@dataclass(frozen=True)
class Sale:
    """
    A single sale line.

    Attributes:
        date: Date of the sale (``date`` or ``datetime``).
        product_id: Identifier of the product sold.
        quantity: Number of units sold (> 0).
        unit_price: Price per unit actually charged.
        total: Line total. Producers guarantee total == quantity * unit_price;
            None means the total was not recorded and must be recomputed.
        sale_type: Retail or wholesale channel.
    """

    date: date
    product_id: str
    quantity: int
    unit_price: float
    total: Optional[float] = None
    sale_type: SaleType = SaleType.RETAIL
    id: Optional[str] = None
    client_name: str = ""


@dataclass(frozen=True)
class Expense:
    """An expense booked against a business."""

    date: date
    category: str
    amount: float
    id: Optional[str] = None
    description: str = ""


@dataclass(frozen=True)
class Product:
    """
    A product with its stock level and price points.

    ``cost_price`` is the recorded purchase cost. Legacy products may carry
    0 here, in which case the wholesale price stands in as cost basis
    (see ``cost_basis.resolve_unit_cost``).
    """

    id: str
    stock: int = 0
    min_stock: int = 0
    cost_price: float = 0.0
    wholesale_price: float = 0.0
    retail_price: float = 0.0
    name: str = ""


@dataclass(frozen=True)
class BusinessSnapshot:
    """All records of one business entity: the unit of aggregation."""

    id: str
    name: str
    sales: Sequence[Sale] = ()
    expenses: Sequence[Expense] = ()
    products: Sequence[Product] = ()


@dataclass(frozen=True)
class MetricsResult:
    """
    Financial figures derived for one business or for a group of businesses.

    Money fields are plain floats in the business currency. Margin fields
    and ``roi`` are percentages (60.0 means 60 %).

    Attributes
    ----------
    total_revenue :
        Sum of sale totals.
    cogs :
        Cost of goods sold, using the resolved unit cost of each product.
    gross_profit :
        total_revenue - cogs.
    operating_expenses :
        Expenses classified as recurring.
    one_time_expenses :
        Expenses classified as capital / investment spend.
    operating_profit :
        gross_profit - operating_expenses.
    net_profit :
        gross_profit - operating_expenses - one_time_expenses.
    ebitda :
        Same value as operating_profit (no interest, tax, depreciation or
        amortization lines exist in this domain).
    gross_profit_margin, operating_profit_margin, net_profit_margin :
        Profit / revenue * 100, or 0.0 when revenue is 0.
    roi :
        net_profit / one_time_expenses * 100, or 0.0 when there is no
        one-time spend.
    inventory_value :
        Sum of stock * wholesale_price.
    expense_breakdown :
        Amount spent per expense category.
    total_expenses :
        Sum of all expenses (operating + one-time).
    sales_count, product_count :
        Number of sale lines and products the figures were computed from.
    business_id, business_name :
        Set for per-business results, None for totals.
    """

    total_revenue: float = 0.0
    cogs: float = 0.0
    gross_profit: float = 0.0
    operating_expenses: float = 0.0
    one_time_expenses: float = 0.0
    operating_profit: float = 0.0
    net_profit: float = 0.0
    ebitda: float = 0.0
    gross_profit_margin: float = 0.0
    operating_profit_margin: float = 0.0
    net_profit_margin: float = 0.0
    roi: float = 0.0
    inventory_value: float = 0.0
    expense_breakdown: dict[str, float] = field(default_factory=dict)
    total_expenses: float = 0.0
    sales_count: int = 0
    product_count: int = 0
    business_id: Optional[str] = None
    business_name: Optional[str] = None
