from datetime import date

import pytest

from biz_metrics.cost_basis import (
    index_products,
    markup_percentage,
    product_markup,
    resolve_unit_cost,
    sale_cost,
    sale_profit,
    sale_total,
    sale_unit_price,
)
from biz_metrics.models import Product, Sale


def _sale(**overrides) -> Sale:
    values = {
        "date": date(2025, 3, 10),
        "product_id": "A",
        "quantity": 2,
        "unit_price": 1000.0,
        "total": 2000.0,
    }
    values.update(overrides)
    return Sale(**values)


def test_resolve_unit_cost_prefers_cost_price() -> None:
    """A positive purchase cost is used as is."""
    product = Product(id="A", cost_price=300.0, wholesale_price=400.0)
    assert resolve_unit_cost(product) == 300.0


def test_resolve_unit_cost_falls_back_to_wholesale_price() -> None:
    """Legacy products without purchase cost use the wholesale price."""
    product = Product(id="A", cost_price=0.0, wholesale_price=400.0)
    assert resolve_unit_cost(product) == 400.0


def test_resolve_unit_cost_missing_product_is_zero() -> None:
    assert resolve_unit_cost(None) == 0.0


def test_index_products_keeps_first_duplicate() -> None:
    first = Product(id="A", cost_price=1.0)
    second = Product(id="A", cost_price=2.0)
    assert index_products([first, second])["A"] is first


def test_sale_total_trusts_recorded_total() -> None:
    """The recorded total wins even if it differs from quantity * price."""
    assert sale_total(_sale(total=1900.0)) == 1900.0


def test_sale_total_recomputed_when_absent() -> None:
    assert sale_total(_sale(total=None, quantity=3, unit_price=250.0)) == 750.0


def test_sale_unit_price_falls_back_to_total() -> None:
    assert sale_unit_price(_sale(unit_price=0.0, total=900.0, quantity=3)) == 300.0
    assert sale_unit_price(_sale(unit_price=0.0, total=None)) == 0.0


def test_sale_cost_and_profit_use_resolved_cost() -> None:
    """Per-sale profit on receipts uses the same cost basis as COGS."""
    products = index_products([Product(id="A", cost_price=0.0, wholesale_price=400.0)])
    sale = _sale()

    assert sale_cost(sale, products) == 800.0
    assert sale_profit(sale, products) == 1200.0


def test_sale_cost_missing_product_or_non_positive_quantity() -> None:
    products = index_products([Product(id="A", cost_price=100.0)])

    assert sale_cost(_sale(product_id="unknown"), products) == 0.0
    assert sale_cost(_sale(quantity=0), products) == 0.0
    assert sale_profit(_sale(product_id="unknown"), products) == 2000.0


@pytest.mark.parametrize(
    "cost, price, expected",
    [
        (100.0, 150.0, 50.0),
        (200.0, 150.0, -25.0),
        (0.0, 150.0, 0.0),
        (100.0, 0.0, 0.0),
    ],
)
def test_markup_percentage(cost: float, price: float, expected: float) -> None:
    assert markup_percentage(cost, price) == pytest.approx(expected)


def test_product_markup_uses_resolved_cost() -> None:
    product = Product(id="A", cost_price=0.0, wholesale_price=400.0, retail_price=500.0)

    assert product_markup(product) == pytest.approx(25.0)
    assert product_markup(product, "wholesale_price") == pytest.approx(0.0)

    with pytest.raises(ValueError):
        product_markup(product, "cost_price")
