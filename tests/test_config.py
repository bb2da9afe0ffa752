from pathlib import Path

import pytest

from biz_metrics.config import (
    AppConfig,
    DisplayConfig,
    load_app_config,
    parse_app_config,
)
from biz_metrics.expenses import ExpenseClass
from biz_metrics.models import Expense
from biz_metrics.periods import PeriodName


def _write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "biz_metrics_config.toml"
    path.write_text(content, encoding="utf-8")
    return path


def test_full_config_is_parsed(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        """
[expenses]
extra_one_time_categories = ["Travaux", " "]

[reports]
default_period = "quarter"
top_n = 3

[display]
mode = "both"
currency = "EUR"
percent_decimals = 2
""",
    )

    config = load_app_config(str(path))

    assert config.extra_one_time_categories == ("Travaux",)
    assert config.default_period is PeriodName.QUARTER
    assert config.top_n == 3
    assert config.display == DisplayConfig(
        mode="both", currency="EUR", percent_decimals=2
    )


def test_classifier_includes_extra_categories() -> None:
    config = parse_app_config({"expenses": {"extra_one_time_categories": ["travaux"]}})
    expense = Expense(date=None, category="Travaux toiture", amount=10.0)

    assert config.classifier().classify(expense) is ExpenseClass.ONE_TIME


def test_empty_config_gives_defaults() -> None:
    assert parse_app_config({}) == AppConfig()


def test_missing_default_file_gives_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_app_config() == AppConfig()


def test_default_file_in_working_directory_is_used(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    _write_config(tmp_path, "[reports]\ntop_n = 2\n")
    monkeypatch.chdir(tmp_path)

    assert load_app_config().top_n == 2


def test_explicit_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_app_config(str(tmp_path / "missing.toml"))


def test_invalid_toml_raises_value_error(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "[reports\ntop_n = ")
    with pytest.raises(ValueError, match="Failed to parse"):
        load_app_config(str(path))


@pytest.mark.parametrize(
    "raw",
    [
        {"expenses": {"extra_one_time_categories": "travaux"}},
        {"reports": {"default_period": "week"}},
        {"reports": {"top_n": 0}},
        {"reports": {"top_n": "many"}},
        {"display": {"mode": "html"}},
        {"display": {"percent_decimals": -1}},
        {"display": "table"},
    ],
)
def test_invalid_values_raise(raw) -> None:
    with pytest.raises(ValueError):
        parse_app_config(raw)
