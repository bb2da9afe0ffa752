# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Cost basis resolution for BizMetrics.

Every profitability figure (COGS, gross profit, per-sale profit on
receipts, product markup) needs the unit cost of a product. This module is
the only place where that cost is decided:

- the recorded purchase cost (``cost_price``) when it is positive,
- otherwise the wholesale price, used as a proxy for legacy products that
  were created without a purchase cost,
- 0 when the product cannot be found.

It also hosts the small per-sale helpers built on top of that rule.
"""

from collections.abc import Iterable, Mapping
from typing import Optional

from .models import Product, Sale


def resolve_unit_cost(product: Optional[Product]) -> float:
    """Return the unit cost to use for profitability math."""
    if product is None:
        return 0.0
    if product.cost_price > 0:
        return float(product.cost_price)
    return float(product.wholesale_price or 0.0)


def index_products(products: Iterable[Product]) -> dict[str, Product]:
    """
    Build a product lookup keyed by product id.

    When the same id appears more than once, the first product wins, which
    matches a linear search over the original list.
    """
    by_id: dict[str, Product] = {}
    for product in products:
        by_id.setdefault(str(product.id), product)
    return by_id


def sale_total(sale: Sale) -> float:
    """Return the recorded sale total, or quantity * unit_price if absent."""
    if sale.total is not None:
        return float(sale.total)
    return float(sale.quantity) * float(sale.unit_price)


def sale_unit_price(sale: Sale) -> float:
    """
    Unit price shown on a receipt.

    Falls back to total / quantity when the unit price was not recorded.
    """
    if sale.unit_price:
        return float(sale.unit_price)
    if sale.total is not None and sale.quantity > 0:
        return float(sale.total) / sale.quantity
    return 0.0


def sale_cost(sale: Sale, products_by_id: Mapping[str, Product]) -> float:
    """
    Cost of the units sold on one sale line.

    Lines with a non-positive quantity contribute no cost.
    """
    if sale.quantity <= 0:
        return 0.0
    product = products_by_id.get(str(sale.product_id))
    return resolve_unit_cost(product) * sale.quantity


def sale_profit(sale: Sale, products_by_id: Mapping[str, Product]) -> float:
    """Profit made on one sale line (receipts, per-product reports)."""
    return sale_total(sale) - sale_cost(sale, products_by_id)


def markup_percentage(cost: float, price: float) -> float:
    """
    Markup of ``price`` over ``cost`` in percent.

    Returns 0.0 when either value is not strictly positive.
    """
    if cost <= 0 or price <= 0:
        return 0.0
    return (price - cost) / cost * 100


def product_markup(product: Product, price_field: str = "retail_price") -> float:
    """
    Markup of one of the product's selling prices over its resolved cost.

    Args:
        product: Product to evaluate.
        price_field: Either "retail_price" or "wholesale_price".

    Raises:
        ValueError: if ``price_field`` is not a selling price field.
    """
    if price_field not in {"retail_price", "wholesale_price"}:
        raise ValueError(f"Unknown price field: {price_field!r}")
    price = float(getattr(product, price_field) or 0.0)
    return markup_percentage(resolve_unit_cost(product), price)
