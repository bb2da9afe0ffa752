# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for BizMetrics.

This module reads sales, expenses and products exported by the record
store as CSV files and turns them into the record types of ``models.py``.
It is the only place where BizMetrics touches the filesystem for data;
the engine itself works on in-memory records.

Expected input formats
----------------------

Column names are case-insensitive and the camelCase names used by the
back-office export are accepted as aliases (``productId``, ``unitPrice``,
``costPrice``, ...).

sales.csv
    date, product_id, quantity, unit_price
    optional: total, sale_type, id, client_name

    An empty ``total`` means "not recorded": it will be recomputed as
    quantity * unit_price by the engine.

expenses.csv
    date, category, amount
    optional: id, description

products.csv
    id
    optional: name, stock, min_stock, cost_price, wholesale_price,
    retail_price (missing numeric values default to 0)

A business directory holds up to three files named ``sales.csv``,
``expenses.csv`` and ``products.csv``; a missing file means "no records".

If a CSV structure does not match the expected format or contains
unparseable values, a clear ValueError is raised.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from .models import BusinessSnapshot, Expense, Product, Sale, SaleType

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

_ALIASES = {
    "productid": "product_id",
    "unitprice": "unit_price",
    "saletype": "sale_type",
    "clientname": "client_name",
    "minstock": "min_stock",
    "costprice": "cost_price",
    "wholesaleprice": "wholesale_price",
    "retailprice": "retail_price",
}

SALES_FILE = "sales.csv"
EXPENSES_FILE = "expenses.csv"
PRODUCTS_FILE = "products.csv"


def _read_frame(path: PathLike, required: set[str], kind: str) -> pd.DataFrame:
    """
    Read a CSV file, normalize its column names and check required columns.

    Identifier-like columns are read as strings so that ids such as "007"
    keep their leading zeros.
    """
    df = pd.read_csv(
        path,
        dtype={"id": str, "product_id": str, "productId": str},
        keep_default_na=False,
        na_values=[""],
    )

    df.columns = [c.strip() for c in df.columns]
    df.columns = [_ALIASES.get(c.lower(), c.lower()) for c in df.columns]

    missing = required - set(df.columns)
    if missing:
        raise ValueError(
            f"Invalid {kind} structure in {path}: missing column(s) "
            f"{', '.join(sorted(missing))}."
        )

    logger.debug("Read %d %s row(s) from %s", len(df), kind, path)
    return df


def _parse_dates(df: pd.DataFrame, kind: str) -> pd.Series:
    try:
        parsed = pd.to_datetime(df["date"], errors="raise")
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Invalid values in '{kind}' date column.") from exc
    if parsed.isna().any():
        raise ValueError(f"Missing values in '{kind}' date column.")
    return parsed.dt.date


def _numeric(
    df: pd.DataFrame, column: str, kind: str, default: Optional[float] = None
) -> pd.Series:
    """
    Convert a column to numbers.

    Missing columns / cells take ``default`` when one is given; otherwise an
    empty or invalid cell raises ValueError.
    """
    if column not in df.columns:
        return pd.Series([default] * len(df), index=df.index, dtype="float64")

    values = pd.to_numeric(df[column], errors="coerce")
    invalid = values.isna() & df[column].notna()
    if invalid.any():
        raise ValueError(f"Invalid numeric values in {kind} '{column}' column.")
    if default is not None:
        values = values.fillna(default)
    elif values.isna().any():
        raise ValueError(f"Missing values in {kind} '{column}' column.")
    return values


def _text(df: pd.DataFrame, column: str) -> list[str]:
    if column not in df.columns:
        return [""] * len(df)
    return ["" if pd.isna(v) else str(v).strip() for v in df[column]]


def _optional_text(df: pd.DataFrame, column: str) -> list[Optional[str]]:
    return [v or None for v in _text(df, column)]


def read_sales(path: PathLike) -> list[Sale]:
    """
    Read sales from a CSV file.

    Raises
    ------
    ValueError
        If required columns are missing or values cannot be parsed.
    """
    df = _read_frame(path, {"date", "product_id", "quantity", "unit_price"}, "sales")
    dates = _parse_dates(df, "sales")
    quantities = _numeric(df, "quantity", "sales")
    if (quantities % 1 != 0).any():
        raise ValueError(
            "Invalid numeric values in sales 'quantity' column: "
            "expected whole numbers."
        )
    unit_prices = _numeric(df, "unit_price", "sales")

    if "total" in df.columns:
        totals = pd.to_numeric(df["total"], errors="coerce")
        if (totals.isna() & df["total"].notna()).any():
            raise ValueError("Invalid numeric values in sales 'total' column.")
    else:
        totals = pd.Series([None] * len(df), index=df.index, dtype="float64")

    sale_types = _text(df, "sale_type")
    ids = _optional_text(df, "id")
    clients = _text(df, "client_name")
    product_ids = _text(df, "product_id")

    sales: list[Sale] = []
    for i in range(len(df)):
        total = totals.iloc[i]
        sales.append(
            Sale(
                date=dates.iloc[i],
                product_id=product_ids[i],
                quantity=int(quantities.iloc[i]),
                unit_price=float(unit_prices.iloc[i]),
                total=None if pd.isna(total) else float(total),
                sale_type=SaleType.parse(sale_types[i]),
                id=ids[i],
                client_name=clients[i],
            )
        )
    return sales


def read_expenses(path: PathLike) -> list[Expense]:
    """
    Read expenses from a CSV file.

    Raises
    ------
    ValueError
        If required columns are missing or values cannot be parsed.
    """
    df = _read_frame(path, {"date", "category", "amount"}, "expenses")
    dates = _parse_dates(df, "expenses")
    amounts = _numeric(df, "amount", "expenses")
    categories = _text(df, "category")
    ids = _optional_text(df, "id")
    descriptions = _text(df, "description")

    return [
        Expense(
            date=dates.iloc[i],
            category=categories[i],
            amount=float(amounts.iloc[i]),
            id=ids[i],
            description=descriptions[i],
        )
        for i in range(len(df))
    ]


def read_products(path: PathLike) -> list[Product]:
    """
    Read the product catalog from a CSV file.

    Raises
    ------
    ValueError
        If the 'id' column is missing or numeric values cannot be parsed.
    """
    df = _read_frame(path, {"id"}, "products")
    stock = _numeric(df, "stock", "products", default=0)
    min_stock = _numeric(df, "min_stock", "products", default=0)
    cost = _numeric(df, "cost_price", "products", default=0.0)
    wholesale = _numeric(df, "wholesale_price", "products", default=0.0)
    retail = _numeric(df, "retail_price", "products", default=0.0)
    ids = _text(df, "id")
    names = _text(df, "name")

    return [
        Product(
            id=ids[i],
            stock=int(stock.iloc[i]),
            min_stock=int(min_stock.iloc[i]),
            cost_price=float(cost.iloc[i]),
            wholesale_price=float(wholesale.iloc[i]),
            retail_price=float(retail.iloc[i]),
            name=names[i],
        )
        for i in range(len(df))
    ]


def load_business(
    directory: PathLike,
    business_id: Optional[str] = None,
    name: Optional[str] = None,
) -> BusinessSnapshot:
    """
    Load the records of one business from a directory of CSV files.

    Parameters
    ----------
    directory:
        Directory containing sales.csv, expenses.csv and/or products.csv.
    business_id:
        Identifier of the business. Defaults to the directory name.
    name:
        Display name. Defaults to the identifier.

    Raises
    ------
    FileNotFoundError
        If ``directory`` does not exist.
    ValueError
        If one of the CSV files is malformed.
    """
    base = Path(directory)
    if not base.is_dir():
        raise FileNotFoundError(f"Business directory not found: {base}")

    sales_path = base / SALES_FILE
    expenses_path = base / EXPENSES_FILE
    products_path = base / PRODUCTS_FILE

    sales = read_sales(sales_path) if sales_path.is_file() else []
    expenses = read_expenses(expenses_path) if expenses_path.is_file() else []
    products = read_products(products_path) if products_path.is_file() else []

    bid = business_id or base.resolve().name
    logger.debug(
        "Loaded business %s: %d sale(s), %d expense(s), %d product(s)",
        bid,
        len(sales),
        len(expenses),
        len(products),
    )
    return BusinessSnapshot(
        id=bid,
        name=name or bid,
        sales=tuple(sales),
        expenses=tuple(expenses),
        products=tuple(products),
    )
