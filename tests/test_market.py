import pytest

from agents.market import Market, UnknownProductError
from conftest import make_producer


def test_market_keeps_configured_order(goods_market) -> None:
    assert [producer.product for producer in goods_market] == ["food", "gasoline", "coffee"]
    assert len(goods_market) == 3
    assert goods_market[1].product == "gasoline"


def test_lookup_by_product_name(goods_market) -> None:
    assert goods_market.index_of("coffee") == 2
    assert goods_market.get("gasoline") is goods_market[1]
    assert "food" in goods_market
    assert "tea" not in goods_market


def test_unknown_product_raises(goods_market) -> None:
    with pytest.raises(UnknownProductError):
        goods_market.get("tea")
    with pytest.raises(KeyError):
        goods_market.index_of("tea")


def test_duplicate_products_are_rejected() -> None:
    with pytest.raises(ValueError, match="food"):
        Market([make_producer("food"), make_producer("food")])


def test_prices_snapshot(goods_market) -> None:
    assert goods_market.prices() == {"food": 10, "gasoline": 5, "coffee": 2}
