"""Base types and constants for the metrics package."""

from typing import Any, Dict, Protocol, Union

# Type aliases
Month = int
ValueType = Union[float, int, str, bool, None]
MetricDict = Dict[str, Any]
TimeSeriesDict = Dict[Month, MetricDict]
AgentMetricsDict = Dict[str, TimeSeriesDict]


class WalletHolder(Protocol):
    """Minimum surface a person exposes to the calculators."""

    unique_id: str
    wallet_amount: int


class BalanceHolder(Protocol):
    """Minimum surface a producer exposes to the calculators."""

    product: str
    price: int
    bank_balance: int
    unpaid_units: int
    employees: list[str]
