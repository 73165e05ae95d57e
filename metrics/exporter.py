"""Exporter module - CSV export functionality."""

from datetime import datetime
from pathlib import Path
from typing import Protocol

import pandas as pd

from logger import log


class MetricsCollectorProtocol(Protocol):
    """Protocol for metrics collector to allow duck typing"""

    global_metrics: dict
    producer_metrics: dict
    person_metrics: dict
    export_path: Path
    global_metrics_df = None
    producer_metrics_df = None
    person_metrics_df = None


def export_metrics(collector: MetricsCollectorProtocol) -> list[Path]:
    """Export the month tables of a run to timestamped CSV files using pandas."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    collector.export_path.mkdir(parents=True, exist_ok=True)

    exports = [
        _export_global_metrics_df(collector, timestamp),
        _export_agent_metrics_df(collector, "producer_metrics", timestamp),
        _export_agent_metrics_df(collector, "person_metrics", timestamp),
    ]

    written = [path for path in exports if path is not None]
    if written:
        log(
            "MetricsCollector: Exported CSV metrics: " + ", ".join(str(p.name) for p in written),
            level="INFO",
        )
    else:
        log("MetricsCollector: No metrics available for CSV export", level="WARNING")
    return written


def _export_global_metrics_df(collector: MetricsCollectorProtocol, timestamp: str) -> Path | None:
    if not collector.global_metrics:
        return None

    rows = []
    for month, metrics in collector.global_metrics.items():
        row = {"month": int(month)}
        row.update(metrics)
        rows.append(row)

    df = pd.DataFrame.from_records(rows).sort_values("month")

    output_file = collector.export_path / f"global_metrics_{timestamp}.csv"
    df.to_csv(output_file, index=False)
    collector.global_metrics_df = df
    return output_file


def _export_agent_metrics_df(
    collector: MetricsCollectorProtocol,
    table: str,
    timestamp: str,
) -> Path | None:
    agent_metrics = getattr(collector, table)
    rows = []
    for agent_id, time_series in agent_metrics.items():
        for month, metrics in time_series.items():
            row = {"month": int(month), "agent_id": str(agent_id)}
            row.update(metrics)
            rows.append(row)

    if not rows:
        return None

    df = pd.DataFrame.from_records(rows).sort_values(["month", "agent_id"])

    output_file = collector.export_path / f"{table}_{timestamp}.csv"
    df.to_csv(output_file, index=False)
    setattr(collector, f"{table}_df", df)
    return output_file
