from pathlib import Path

import pytest

from biz_metrics import __version__
from biz_metrics.cli import main


def _make_business(root: Path, name: str, sales: str, expenses: str = "") -> Path:
    directory = root / name
    directory.mkdir()
    (directory / "sales.csv").write_text(
        "date,product_id,quantity,unit_price,total\n" + sales, encoding="utf-8"
    )
    (directory / "products.csv").write_text(
        "id,stock,cost_price,wholesale_price\nA,10,0,400\n", encoding="utf-8"
    )
    if expenses:
        (directory / "expenses.csv").write_text(
            "date,category,amount\n" + expenses, encoding="utf-8"
        )
    return directory


@pytest.fixture
def businesses(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> list[str]:
    monkeypatch.chdir(tmp_path)
    shop = _make_business(
        tmp_path,
        "shop",
        "2025-05-02,A,2,1000,2000\n2024-01-10,A,1,1000,1000\n",
        "2025-05-03,Équipement,500\n2025-05-04,Loyer,100\n",
    )
    kiosk = _make_business(tmp_path, "kiosk", "2025-05-10,A,1,900,900\n")
    return [str(shop), str(kiosk)]


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--version"])
    assert capsys.readouterr().out.strip() == f"biz_metrics {__version__}"


def test_table_output(businesses, capsys: pytest.CaptureFixture[str]) -> None:
    main(businesses + ["--period", "month", "--now", "2025-05-15"])

    out = capsys.readouterr().out
    assert "=== Summary (Month 2025-05) ===" in out
    assert "2 900,00 FCFA" in out
    assert "=== Top 5 performing businesses ===" in out
    assert "=== Expense breakdown ===" in out
    assert "Équipement" in out
    # The shop (net 600) ranks ahead of the kiosk (net 500).
    ranking = out.split("performing businesses ===")[1]
    assert ranking.index("shop") < ranking.index("kiosk")


def test_custom_range_without_expenses(
    businesses, capsys: pytest.CaptureFixture[str]
) -> None:
    main(businesses + ["--from-date", "2024-01-01", "--to-date", "2024-12-31"])

    out = capsys.readouterr().out
    assert "Custom period (2024-01-01 → 2024-12-31)" in out
    assert "No expenses for the selected period." in out


def test_csv_output(businesses, tmp_path: Path, capsys) -> None:
    out_dir = tmp_path / "out"
    main(
        businesses
        + ["--display-mode", "csv", "--output-dir", str(out_dir), "--top", "1"]
    )

    written = sorted(p.name.split("_2")[0] for p in out_dir.glob("*.csv"))
    assert written == ["businesses", "expense_breakdown", "summary", "top_performers"]
    assert "Wrote" in capsys.readouterr().out


def test_config_top_n_is_used(businesses, tmp_path: Path, capsys) -> None:
    (tmp_path / "biz_metrics_config.toml").write_text(
        "[reports]\ntop_n = 1\ndefault_period = \"year\"\n", encoding="utf-8"
    )

    main(businesses + ["--now", "2025-05-15"])

    out = capsys.readouterr().out
    assert "=== Summary (Year 2025) ===" in out
    assert "=== Top 1 performing businesses ===" in out


def test_requires_a_business() -> None:
    with pytest.raises(SystemExit):
        main([])


def test_invalid_date_exits(businesses) -> None:
    with pytest.raises(SystemExit, match="Invalid date format"):
        main(businesses + ["--from-date", "2025/01/01"])


def test_reversed_range_exits(businesses) -> None:
    with pytest.raises(SystemExit, match="cannot be before"):
        main(businesses + ["--from-date", "2025-02-01", "--to-date", "2025-01-01"])


def test_missing_business_directory_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="Input error"):
        main([str(tmp_path / "missing")])


def test_bad_config_exits(businesses, tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="Configuration error"):
        main(businesses + ["--config", str(tmp_path / "nope.toml")])
