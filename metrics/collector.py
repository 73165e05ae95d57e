"""MetricsCollector - per-month snapshots of the simulation state."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from config import CONFIG_MODEL, SimulationConfig
from logger import log

from .base import AgentMetricsDict, MetricDict, Month
from .calculator import (
    average_wallet,
    employment_metrics,
    price_metrics,
    total_money,
    unpaid_units_total,
    wallet_distribution,
)

if TYPE_CHECKING:
    from simulation.engine import SimulationState


class MetricsCollector:
    """
    Records what a month looked like before it was simulated.

    The basic table holds one row per month (average wallet, prices, total
    money); the producer and person tables hold one row per agent per month.
    """

    def __init__(self, config: Optional[SimulationConfig] = None) -> None:
        self.config: SimulationConfig = config or CONFIG_MODEL
        self.export_path = Path(self.config.metrics_export_path)
        self.reset()

    def reset(self) -> None:
        self.global_metrics: dict[Month, MetricDict] = {}
        self.producer_metrics: AgentMetricsDict = {}
        self.person_metrics: AgentMetricsDict = {}
        self.global_metrics_df = None
        self.producer_metrics_df = None
        self.person_metrics_df = None

    def collect_month(self, state: SimulationState) -> MetricDict:
        """Snapshot the state under its 1-based month number and return the basic row."""
        month = state.clock.report_month
        people = list(state.people.values())
        producers = list(state.market)

        row: MetricDict = {
            "average_wallet": average_wallet(people),
            **price_metrics(producers),
            "total_money": total_money(people, producers),
            "unpaid_units_total": unpaid_units_total(producers),
            **employment_metrics(producers),
            **wallet_distribution(people),
        }
        self.global_metrics[month] = row

        for producer in producers:
            self.producer_metrics.setdefault(producer.product, {})[month] = {
                "price": producer.price,
                "stock": producer.stock,
                "monthly_production": producer.monthly_production,
                "bank_balance": producer.bank_balance,
                "unpaid_units": producer.unpaid_units,
                "month_salary": producer.month_salary,
                "employees": len(producer.employees),
                "units_sold": producer.units_sold,
            }

        for person in people:
            self.person_metrics.setdefault(person.unique_id, {})[month] = {
                "employer": producers[person.employer].product,
                "wallet_amount": person.wallet_amount,
                "salary": person.salary,
                "food_consumption": person.food_consumption,
                "gas_consumption": person.gas_consumption,
                "coffee_consumption": person.coffee_consumption,
                "monthly_gas_intake": person.monthly_gas_intake,
            }

        log(
            f"MetricsCollector: month {month} average wallet {row['average_wallet']}, "
            f"total money {row['total_money']}.",
            level="DEBUG",
        )
        return row

    def months(self) -> list[Month]:
        return sorted(self.global_metrics)

    def latest(self) -> MetricDict:
        if not self.global_metrics:
            return {}
        return self.global_metrics[max(self.global_metrics)]

    def format_month_table(self, products: Optional[list[str]] = None) -> str:
        """Render the basic table as fixed-width text, one line per month."""
        products = products if products is not None else self.config.product_names
        headers = ["Month", "Avg wallet", *(f"{p} price" for p in products), "Total money"]
        widths = [max(len(h), 8) for h in headers]
        lines = ["  ".join(h.rjust(w) for h, w in zip(headers, widths))]
        for month in self.months():
            row = self.global_metrics[month]
            values = [
                month,
                row["average_wallet"],
                *(row.get(f"{p}_price", "") for p in products),
                row["total_money"],
            ]
            lines.append("  ".join(str(v).rjust(w) for v, w in zip(values, widths)))
        return "\n".join(lines)

    def export_metrics(self) -> list[Path]:
        from .exporter import export_metrics

        return export_metrics(self)
