"""Generate Matplotlib plots for the latest simulation metrics export."""
from __future__ import annotations

import argparse
import csv
import shutil
from collections import defaultdict
from collections.abc import Callable, Iterable
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

REPO_ROOT = Path(__file__).resolve().parents[1]
METRICS_DIR = REPO_ROOT / "output" / "metrics"
PLOTS_DIR = REPO_ROOT / "output" / "plots"

PlotFunc = Callable[[list[dict[str, object]]], tuple[plt.Figure, str]]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render plots for the most recent metrics export using Matplotlib."
    )
    parser.add_argument(
        "--run-id",
        help="Timestamp suffix of the metrics files (e.g. 20250101_120000)."
        " Uses the newest export automatically when omitted.",
    )
    parser.add_argument(
        "--metrics-dir",
        default=str(METRICS_DIR),
        help="Directory containing the metrics CSV exports (default: output/metrics).",
    )
    parser.add_argument(
        "--plots-dir",
        default=str(PLOTS_DIR),
        help="Directory where rendered plots will be written (default: output/plots).",
    )
    return parser.parse_args(argv)


def detect_latest_run_id(metrics_dir: Path) -> str:
    candidates = sorted(metrics_dir.glob("global_metrics_*.csv"))
    if not candidates:
        raise FileNotFoundError(f"No global_metrics_*.csv files were found in {metrics_dir}.")
    latest = max(candidates, key=lambda path: path.stat().st_mtime)
    suffix = latest.stem.split("global_metrics_")[-1]
    if not suffix:
        raise ValueError(f"Unable to parse run identifier from file name: {latest.name}.")
    return suffix


def try_float(value: str | None) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        return None


def load_csv_rows(path: Path, skip_fields: Iterable[str] | None = None) -> list[dict[str, object]]:
    skip_fields = set(skip_fields or [])
    rows: list[dict[str, object]] = []
    with path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        for raw in reader:
            parsed: dict[str, object] = {}
            for key, value in raw.items():
                if key == "month":
                    parsed[key] = int(value)
                elif key in skip_fields:
                    parsed[key] = value
                else:
                    parsed[key] = try_float(value)
            rows.append(parsed)
    return rows


def price_columns(rows: list[dict[str, object]]) -> list[str]:
    if not rows:
        return []
    return [key for key in rows[0] if key.endswith("_price")]


def extract_series(
    rows: list[dict[str, object]], *columns: str
) -> tuple[list[int], dict[str, list[float]]]:
    ordered = sorted(rows, key=lambda row: int(row["month"]))
    months = [int(row["month"]) for row in ordered]
    series: dict[str, list[float]] = {}
    for column in columns:
        series[column] = [float(row.get(column) or 0.0) for row in ordered]
    return months, series


def aggregate_producer_metrics(
    rows: list[dict[str, object]], column: str
) -> tuple[list[int], dict[str, list[float]]]:
    """Per-producer series of one column, keyed by agent id."""
    by_agent: defaultdict[str, dict[int, float]] = defaultdict(dict)
    for row in rows:
        value = row.get(column)
        by_agent[str(row["agent_id"])][int(row["month"])] = float(value or 0.0)
    months = sorted({month for series in by_agent.values() for month in series})
    return months, {
        agent: [series.get(month, 0.0) for month in months]
        for agent, series in sorted(by_agent.items())
    }


def ensure_dirs(run_dir: Path) -> Path:
    run_dir.mkdir(parents=True, exist_ok=True)
    latest_dir = run_dir.parent / "latest"
    latest_dir.mkdir(parents=True, exist_ok=True)
    return latest_dir


def save_figure(fig: plt.Figure, filename: str, run_dir: Path, latest_dir: Path) -> None:
    target = run_dir / filename
    fig.savefig(target, dpi=150, bbox_inches="tight")
    shutil.copy2(target, latest_dir / filename)
    plt.close(fig)


def plot_prices(global_rows: list[dict[str, object]]) -> tuple[plt.Figure, str]:
    columns = price_columns(global_rows)
    months, data = extract_series(global_rows, *columns)
    fig, ax = plt.subplots(figsize=(10, 6))
    for column in columns:
        ax.plot(months, data[column], label=column.removesuffix("_price").title())
    ax.set_title("Product Prices")
    ax.set_xlabel("Month")
    ax.set_ylabel("Price")
    ax.grid(True, alpha=0.3)
    ax.legend()
    return fig, "prices.png"


def plot_money(global_rows: list[dict[str, object]]) -> tuple[plt.Figure, str]:
    months, data = extract_series(global_rows, "total_money", "average_wallet")
    fig, ax_total = plt.subplots(figsize=(10, 6))
    ax_total.plot(months, data["total_money"], label="Total Money", color="tab:blue")
    ax_total.set_xlabel("Month")
    ax_total.set_ylabel("Total Money")

    ax_wallet = ax_total.twinx()
    ax_wallet.plot(
        months, data["average_wallet"], label="Average Wallet", color="tab:orange", linestyle="--"
    )
    ax_wallet.set_ylabel("Average Wallet")

    ax_total.set_title("Money in the Economy")
    ax_total.grid(True, alpha=0.3)

    lines = ax_total.get_lines() + ax_wallet.get_lines()
    labels = [line.get_label() for line in lines]
    ax_total.legend(lines, labels, loc="upper left")
    return fig, "money.png"


def plot_producer_balances(producer_rows: list[dict[str, object]]) -> tuple[plt.Figure, str]:
    months, data = aggregate_producer_metrics(producer_rows, "bank_balance")
    fig, ax = plt.subplots(figsize=(10, 6))
    for agent, values in data.items():
        ax.plot(months, values, label=agent)
    ax.set_title("Producer Bank Balances")
    ax.set_xlabel("Month")
    ax.set_ylabel("Balance")
    ax.grid(True, alpha=0.3)
    ax.legend()
    return fig, "producer_balances.png"


def plot_producer_stock(producer_rows: list[dict[str, object]]) -> tuple[plt.Figure, str]:
    months, data = aggregate_producer_metrics(producer_rows, "stock")
    fig, ax = plt.subplots(figsize=(10, 6))
    for agent, values in data.items():
        ax.plot(months, values, label=agent)
    ax.set_title("Producer Stock")
    ax.set_xlabel("Month")
    ax.set_ylabel("Units")
    ax.grid(True, alpha=0.3)
    ax.legend()
    return fig, "producer_stock.png"


PLOT_SPECS: list[tuple[str, PlotFunc]] = [
    ("global", plot_prices),
    ("global", plot_money),
    ("producer", plot_producer_balances),
    ("producer", plot_producer_stock),
]


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    metrics_dir = Path(args.metrics_dir)
    plots_dir = Path(args.plots_dir)

    run_id = args.run_id or detect_latest_run_id(metrics_dir)

    run_dir = plots_dir / run_id
    latest_dir = ensure_dirs(run_dir)

    data_by_scope = {
        "global": load_csv_rows(metrics_dir / f"global_metrics_{run_id}.csv"),
        "producer": load_csv_rows(
            metrics_dir / f"producer_metrics_{run_id}.csv", skip_fields={"agent_id"}
        ),
    }

    for scope, plot_func in PLOT_SPECS:
        fig, filename = plot_func(data_by_scope[scope])
        save_figure(fig, filename, run_dir, latest_dir)


if __name__ == "__main__":
    main()
