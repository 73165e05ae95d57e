"""Calculator module - metric calculations over one month's agents."""

from collections.abc import Iterable, Sequence

import numpy as np

from .base import BalanceHolder, MetricDict, WalletHolder


def average_wallet(people: Sequence[WalletHolder]) -> int:
    """Mean wallet, truncated to whole currency units (0 without people)."""
    if not people:
        return 0
    return sum(person.wallet_amount for person in people) // len(people)


def total_money(people: Iterable[WalletHolder], producers: Iterable[BalanceHolder]) -> int:
    return sum(p.wallet_amount for p in people) + sum(p.bank_balance for p in producers)


def unpaid_units_total(producers: Iterable[BalanceHolder]) -> int:
    return sum(producer.unpaid_units for producer in producers)


def price_metrics(producers: Iterable[BalanceHolder]) -> MetricDict:
    return {f"{producer.product}_price": producer.price for producer in producers}


def employment_metrics(producers: Iterable[BalanceHolder]) -> MetricDict:
    return {f"{producer.product}_employees": len(producer.employees) for producer in producers}


def gini_coefficient(values: Sequence[int]) -> float:
    """Gini coefficient of non-negative holdings; 0.0 for empty or all-zero input."""
    data = np.sort(np.asarray(values, dtype=float))
    if data.size == 0 or data.sum() <= 0:
        return 0.0
    n = data.size
    ranks = np.arange(1, n + 1)
    return float((2.0 * np.sum(ranks * data)) / (n * data.sum()) - (n + 1.0) / n)


def wallet_distribution(people: Sequence[WalletHolder]) -> MetricDict:
    wallets = [person.wallet_amount for person in people]
    if not wallets:
        return {"wallet_median": 0.0, "wallet_p90": 0.0, "wallet_gini": 0.0}
    data = np.asarray(wallets, dtype=float)
    return {
        "wallet_median": float(np.median(data)),
        "wallet_p90": float(np.percentile(data, 90)),
        "wallet_gini": gini_coefficient(wallets),
    }
