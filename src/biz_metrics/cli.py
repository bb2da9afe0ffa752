# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for BizMetrics.

The CLI is intentionally thin: it does not implement any financial logic
itself. It loads business records from CSV directories, calls the engine
and renders the results.

High-level pipeline
-------------------

1) Load the TOML configuration (``biz_metrics_config.toml`` by default,
   ``--config`` to override) with ``load_app_config()``.

2) Load one BusinessSnapshot per directory given on the command line
   (``io.load_business``).

3) Resolve the reporting period:
   - ``--from-date`` / ``--to-date`` build an explicit range,
   - otherwise ``--period`` (all, month, quarter, year),
   - otherwise the configured default period.
   The reference date comes from ``--now`` or today's date, read once.

4) Aggregate all businesses (``aggregation.aggregate``) and rank them
   (``ranking.top_performing``).

5) Render four tables: group summary, per-business figures, top
   performers and expense breakdown. The display mode (config or
   ``--display-mode``) selects console tables, CSV files, or both.

Usage
-----
    python -m biz_metrics.cli data/shop-a data/shop-b --period quarter
    python -m biz_metrics.cli data/shop-a --from-date 2025-01-01 --top 3
"""

import argparse
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .aggregation import aggregate
from .config import DISPLAY_MODES, load_app_config
from .io import load_business
from .periods import DateRange, PeriodLike, PeriodName
from .ranking import top_performing
from .views import breakdown_to_frame, metrics_summary_frame, metrics_to_frame

logger = logging.getLogger(__name__)

RANKING_COLUMNS = [
    "business_id",
    "business_name",
    "net_profit",
    "total_revenue",
    "net_profit_margin",
    "roi",
]


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m biz_metrics.cli",
        description=(
            "BizMetrics - Financial metrics engine for small-business back "
            "offices. Reads sales, expenses and products of one or more "
            "businesses and renders revenue, profit, margin and ROI figures."
        ),
    )

    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of biz_metrics and exit.",
    )
    ap.add_argument(
        "businesses",
        nargs="*",
        metavar="BUSINESS_DIR",
        help=(
            "Directory holding sales.csv, expenses.csv and products.csv of one "
            "business. The directory name is used as business identifier."
        ),
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. If omitted, "
            "'biz_metrics_config.toml' in the current directory is used when "
            "present."
        ),
    )

    # Period selection
    ap.add_argument(
        "--period",
        choices=[p.value for p in PeriodName],
        help="Named reporting period. Defaults to the configured period.",
    )
    ap.add_argument(
        "--from-date",
        dest="from_date",
        help="Custom period start date (YYYY-MM-DD). Overrides --period.",
    )
    ap.add_argument(
        "--to-date",
        dest="to_date",
        help="Custom period end date (YYYY-MM-DD). Overrides --period.",
    )
    ap.add_argument(
        "--now",
        help="Reference date for named periods (YYYY-MM-DD). Defaults to today.",
    )

    # Output
    ap.add_argument(
        "--top",
        type=int,
        help="Number of top performing businesses to list.",
    )
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=list(DISPLAY_MODES),
        help="Override the configured display mode.",
    )
    ap.add_argument(
        "--output-dir",
        dest="output_dir",
        help="Directory for CSV output (default: data/output).",
    )
    ap.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD).

    Raises
    ------
    SystemExit
        If the date format is invalid.
    """
    if value is None:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"Invalid date format: {value!r}. Expected YYYY-MM-DD."
        raise SystemExit(msg) from exc


def _resolve_period(args: argparse.Namespace, default: PeriodName) -> PeriodLike:
    """
    Determine the reporting period from CLI args.

    Priority (highest to lowest):

        1. --from-date / --to-date (explicit range)
        2. --period
        3. configured default period
    """
    start = _parse_optional_date(args.from_date)
    end = _parse_optional_date(args.to_date)
    if start is not None or end is not None:
        if start is not None and end is not None and end < start:
            raise SystemExit("Custom period end date cannot be before start date.")
        return DateRange(start=start, end=end)

    if args.period:
        return PeriodName(args.period)
    return default


def _format_frame(df: pd.DataFrame, percent_decimals: int) -> pd.DataFrame:
    """Round money to 2 decimals and percentages to the configured decimals."""
    out = df.copy()
    for col in out.columns:
        if col.endswith("_margin") or col in {"roi", "share"}:
            out[col] = out[col].astype(float).round(percent_decimals)
        elif pd.api.types.is_float_dtype(out[col]):
            out[col] = out[col].round(2)
    return out


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point of the BizMetrics CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"biz_metrics {__version__}")
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.businesses:
        parser.error("at least one BUSINESS_DIR is required")

    # 1) Configuration
    try:
        config = load_app_config(args.config_path)
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(f"Configuration error: {exc}") from exc

    # 2) Records
    try:
        businesses = [load_business(path) for path in args.businesses]
    except (FileNotFoundError, ValueError) as exc:
        raise SystemExit(f"Input error: {exc}") from exc

    # 3) Period and reference date (read once for the whole run)
    period = _resolve_period(args, config.default_period)
    now = _parse_optional_date(args.now) or date.today()
    logger.debug("Reporting period %r with reference date %s", period, now)

    # 4) Engine
    result = aggregate(businesses, period, now=now, classifier=config.classifier())
    top_n = args.top if args.top is not None else config.top_n
    top = top_performing(result.per_business, top_n)

    decimals = config.display.percent_decimals
    summary_df = metrics_summary_frame(
        result.total,
        currency=config.display.currency,
        percent_decimals=decimals,
    )[["label", "formatted"]]
    per_business_df = _format_frame(result.to_frame(), decimals)
    ranking_df = _format_frame(metrics_to_frame(top)[RANKING_COLUMNS], decimals)
    breakdown_df = _format_frame(
        breakdown_to_frame(result.total.expense_breakdown), decimals
    )

    display_mode = args.display_mode or config.display.mode

    # 5) Console tables
    if display_mode in {"table", "both"}:
        print()
        print(f"=== Summary ({result.period_label}) ===")
        print(summary_df.to_string(index=False, header=False))

        print()
        print("=== Businesses ===")
        print(per_business_df.to_string(index=False))

        print()
        print(f"=== Top {top_n} performing businesses ===")
        if ranking_df.empty:
            print("No business to rank.")
        else:
            print(ranking_df.to_string(index=False))

        print()
        print("=== Expense breakdown ===")
        if breakdown_df.empty:
            print("No expenses for the selected period.")
        else:
            print(breakdown_df.to_string(index=False))

    # 6) CSV files
    if display_mode in {"csv", "both"}:
        output_dir = Path(args.output_dir) if args.output_dir else Path("data/output")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        outputs = {
            "summary": metrics_summary_frame(
                result.total,
                currency=config.display.currency,
                percent_decimals=decimals,
            ),
            "businesses": result.to_frame(),
            "top_performers": metrics_to_frame(top),
            "expense_breakdown": breakdown_to_frame(result.total.expense_breakdown),
        }
        for name, frame in outputs.items():
            path = output_dir / f"{name}_{timestamp}.csv"
            frame.to_csv(path, index=False)
            print(f"Wrote {path} ({len(frame)} rows)")


if __name__ == "__main__":
    main()
