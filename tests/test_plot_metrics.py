"""Tests for scripts/plot_metrics.py."""

import matplotlib.pyplot as plt
import pytest

from config import SimulationConfig
from scripts.plot_metrics import (
    aggregate_producer_metrics,
    detect_latest_run_id,
    extract_series,
    load_csv_rows,
    main,
    parse_args,
    plot_money,
    plot_prices,
    price_columns,
    try_float,
)
from simulation.engine import run_simulation


@pytest.fixture
def global_rows():
    return [
        {"month": 2, "average_wallet": 12.0, "food_price": 11.0, "total_money": 300.0},
        {"month": 1, "average_wallet": 10.0, "food_price": 10.0, "total_money": 300.0},
    ]


@pytest.fixture
def exported_run(tmp_path):
    config = SimulationConfig(
        max_months=4, num_people=5, seed=2, metrics_export_path=str(tmp_path / "metrics")
    )
    _, collector = run_simulation(config)
    collector.export_metrics()
    return tmp_path / "metrics"


def test_try_float() -> None:
    assert try_float("1.5") == 1.5
    assert try_float("") is None
    assert try_float(None) is None
    assert try_float("abc") is None


def test_parse_args_defaults() -> None:
    args = parse_args([])

    assert args.run_id is None
    assert args.metrics_dir.endswith("metrics")


def test_extract_series_sorts_by_month(global_rows) -> None:
    months, series = extract_series(global_rows, "food_price")

    assert months == [1, 2]
    assert series["food_price"] == [10.0, 11.0]


def test_price_columns(global_rows) -> None:
    assert price_columns(global_rows) == ["food_price"]
    assert price_columns([]) == []


def test_aggregate_producer_metrics_fills_gaps() -> None:
    rows = [
        {"month": 1, "agent_id": "food", "stock": 10.0},
        {"month": 2, "agent_id": "food", "stock": 8.0},
        {"month": 2, "agent_id": "coffee", "stock": 3.0},
    ]

    months, data = aggregate_producer_metrics(rows, "stock")

    assert months == [1, 2]
    assert data == {"coffee": [0.0, 3.0], "food": [10.0, 8.0]}


def test_plot_functions_return_named_figures(global_rows) -> None:
    for plot in (plot_prices, plot_money):
        fig, filename = plot(global_rows)
        assert filename.endswith(".png")
        assert fig.axes
        plt.close(fig)


def test_detect_latest_run_id_without_exports(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        detect_latest_run_id(tmp_path)


def test_load_csv_rows_parses_exported_tables(exported_run) -> None:
    run_id = detect_latest_run_id(exported_run)

    rows = load_csv_rows(exported_run / f"producer_metrics_{run_id}.csv", skip_fields={"agent_id"})

    assert {row["agent_id"] for row in rows} == {"food", "gasoline", "coffee"}
    assert sorted({row["month"] for row in rows}) == [1, 2, 3, 4, 5]


def test_main_renders_every_plot(exported_run, tmp_path) -> None:
    plots_dir = tmp_path / "plots"

    main(["--metrics-dir", str(exported_run), "--plots-dir", str(plots_dir)])

    run_id = detect_latest_run_id(exported_run)
    expected = {"prices.png", "money.png", "producer_balances.png", "producer_stock.png"}
    assert {p.name for p in (plots_dir / run_id).iterdir()} == expected
    assert {p.name for p in (plots_dir / "latest").iterdir()} == expected
