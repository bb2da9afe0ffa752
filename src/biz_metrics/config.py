# BizMetrics - Financial metrics engine for small-business back offices
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for BizMetrics.

This module is responsible for:
- loading the application configuration from a TOML file,
- validating it,
- exposing typed dataclasses used by the CLI and report layers.

Expected sections in the TOML file (all optional)
-------------------------------------------------
[expenses]
    extra_one_time_categories : list of additional category labels to
    classify as one-time (capital) spend, on top of the built-in set.

[reports]
    default_period : "all", "month", "quarter" or "year".
    top_n          : number of businesses listed as top performers.

[display]
    mode             : "table", "csv" or "both".
    currency         : currency suffix used in money formatting.
    percent_decimals : decimals shown for percentages.
"""

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .expenses import DEFAULT_CLASSIFIER, ExpenseClassifier
from .periods import PeriodName, parse_period_name
from .ranking import DEFAULT_TOP_N

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "biz_metrics_config.toml"
DISPLAY_MODES = ("table", "csv", "both")


@dataclass(frozen=True)
class DisplayConfig:
    """Display options for tables and formatted values."""

    mode: str = "table"
    currency: str = "FCFA"
    percent_decimals: int = 1


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for BizMetrics.

    This aggregates:
    - the extra one-time expense categories,
    - the default reporting period and ranking size,
    - display options.
    """

    extra_one_time_categories: tuple[str, ...] = ()
    default_period: PeriodName = PeriodName.ALL
    top_n: int = DEFAULT_TOP_N
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def classifier(self) -> ExpenseClassifier:
        """Expense classifier including the configured extra categories."""
        return DEFAULT_CLASSIFIER.extended(*self.extra_one_time_categories)


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Config section [{name}] must be a table.")
    return value


def _parse_int(value: Any, key: str, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Invalid value for '{key}' in the configuration. Expected an integer."
        ) from exc
    if number < minimum:
        raise ValueError(f"'{key}' must be greater than or equal to {minimum}.")
    return number


def parse_app_config(raw: Mapping[str, Any]) -> AppConfig:
    """
    Build an AppConfig from parsed TOML data.

    Raises:
        ValueError: if a section or a value is invalid.
    """
    expenses_section = _section(raw, "expenses")
    reports_section = _section(raw, "reports")
    display_section = _section(raw, "display")

    # 1) Expense classification
    extra_raw = expenses_section.get("extra_one_time_categories", [])
    if isinstance(extra_raw, str) or not isinstance(extra_raw, list):
        raise ValueError(
            "'expenses.extra_one_time_categories' must be a list of strings."
        )
    extra = tuple(str(label).strip() for label in extra_raw if str(label).strip())

    # 2) Reports
    default_period = parse_period_name(reports_section.get("default_period", "all"))
    top_n = _parse_int(reports_section.get("top_n", DEFAULT_TOP_N), "reports.top_n", 1)

    # 3) Display
    mode = str(display_section.get("mode", "table"))
    if mode not in DISPLAY_MODES:
        raise ValueError(
            f"Invalid display mode {mode!r}; "
            f"expected one of {', '.join(DISPLAY_MODES)}."
        )
    display = DisplayConfig(
        mode=mode,
        currency=str(display_section.get("currency", "FCFA")),
        percent_decimals=_parse_int(
            display_section.get("percent_decimals", 1), "display.percent_decimals", 0
        ),
    )

    return AppConfig(
        extra_one_time_categories=extra,
        default_period=default_period,
        top_n=top_n,
        display=display,
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the BizMetrics configuration.

    Parameters
    ----------
    config_path:
        Path to a TOML file. When omitted, ``biz_metrics_config.toml`` in
        the current directory is used if it exists, otherwise the built-in
        defaults apply.

    Returns
    -------
    AppConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If an explicit ``config_path`` does not exist.
    ValueError
        If the file cannot be parsed or holds invalid values.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
        if not config_file.is_file():
            logger.debug("No %s found, using default configuration", config_file)
            return AppConfig()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    logger.debug("Loaded configuration from %s", config_file)
    return parse_app_config(raw)
