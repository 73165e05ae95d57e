"""Ordered, fixed-size collection of producers addressed by product name."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agents.producer_agent import Producer


class UnknownProductError(KeyError):
    """No producer in the market sells the requested product."""


class Market:
    """
    The producers of a run in their configured order.

    The order is significant: producers step in this order, and people scanning
    for jobs prefer lower indices.
    """

    def __init__(self, producers: Sequence[Producer]) -> None:
        self._producers: list[Producer] = list(producers)
        self._index: dict[str, int] = {}
        for i, producer in enumerate(self._producers):
            if producer.product in self._index:
                raise ValueError(f"Duplicate producer for product '{producer.product}'")
            self._index[producer.product] = i

    def __iter__(self) -> Iterator[Producer]:
        return iter(self._producers)

    def __len__(self) -> int:
        return len(self._producers)

    def __getitem__(self, index: int) -> Producer:
        return self._producers[index]

    def __contains__(self, product: object) -> bool:
        return product in self._index

    def index_of(self, product: str) -> int:
        try:
            return self._index[product]
        except KeyError:
            raise UnknownProductError(product) from None

    def get(self, product: str) -> Producer:
        return self._producers[self.index_of(product)]

    def prices(self) -> dict[str, int]:
        return {producer.product: producer.price for producer in self._producers}
