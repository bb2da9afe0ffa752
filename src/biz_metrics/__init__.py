# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
BizMetrics
----------

Financial metrics and aggregation engine for small-business back offices
(shops, wholesalers, service businesses). It derives revenue, cost,
margin and profitability figures from the raw records of one or several
businesses: sales, expenses and products.

Main capabilities:
- centralized cost basis (purchase cost, wholesale price fallback),
- named (month, quarter, year) and explicit reporting periods with an
  injectable reference date,
- revenue, COGS, gross / operating / net profit, EBITDA, margins, ROI and
  inventory valuation,
- operating vs one-time expense classification with a closed category set,
- multi-business aggregation with margins recomputed from summed totals,
- top performer ranking,
- report helpers (product profitability, monthly profit series, low stock),
- CSV loading, TOML configuration and a command-line report.

The engine modules (cost_basis, periods, expenses, metrics, aggregation,
ranking) are pure: they never perform I/O and never read the system clock.

Version: 0.1.0

Usage:
    python -m biz_metrics.cli --help
"""

__all__ = ["metrics", "aggregation", "ranking", "periods", "expenses", "io"]

__version__ = "0.1.0"
