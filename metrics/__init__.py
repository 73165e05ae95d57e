"""Metrics package for per-month simulation reporting."""

from .base import AgentMetricsDict, MetricDict, Month, TimeSeriesDict, ValueType
from .calculator import (
    average_wallet,
    employment_metrics,
    gini_coefficient,
    price_metrics,
    total_money,
    unpaid_units_total,
    wallet_distribution,
)
from .collector import MetricsCollector
from .exporter import export_metrics

__all__ = [
    "MetricsCollector",
    "export_metrics",
    "average_wallet",
    "employment_metrics",
    "gini_coefficient",
    "price_metrics",
    "total_money",
    "unpaid_units_total",
    "wallet_distribution",
    "AgentMetricsDict",
    "MetricDict",
    "Month",
    "TimeSeriesDict",
    "ValueType",
]
