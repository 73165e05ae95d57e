import pytest

from agents.economic_agent import InvariantViolationError
from agents.market import Market
from agents.person_agent import Person
from conftest import build_state, make_producer


def _buy(person: Person, market: Market) -> int:
    return person.buy_goods(market, food="food", gas="gasoline", coffee="coffee")


def test_buy_goods_follows_food_gas_topup_coffee_order(goods_market) -> None:
    person = Person("p0", employer=0, wallet_amount=1000, savings_ratio=0.25, monthly_food_intake=30)
    person.monthly_gas_intake = 20

    spent = _buy(person, goods_market)

    # 750 spendable: 300 food, 100 gas, 300 more food, 50 on 25 coffees
    assert person.food_consumption == 60
    assert person.gas_consumption == 20
    assert person.coffee_consumption == 25
    assert person.wallet_amount == 250
    assert spent == 750
    assert goods_market.get("food").bank_balance == 600
    assert goods_market.get("gasoline").bank_balance == 100
    assert goods_market.get("coffee").bank_balance == 50


def test_no_second_food_batch_when_wallet_equals_its_cost(goods_market) -> None:
    person = Person("p0", employer=0, wallet_amount=600, monthly_food_intake=30)

    _buy(person, goods_market)

    assert person.food_consumption == 30
    assert person.gas_consumption == 0
    assert person.coffee_consumption == 150
    assert person.wallet_amount == 0


def test_savings_are_never_spent(goods_market) -> None:
    person = Person("p0", employer=0, wallet_amount=101, savings_ratio=0.5, monthly_food_intake=30)

    _buy(person, goods_market)

    # 50 saved; the 51 left buys 5 food and the last coin cannot buy coffee (price 2)
    assert person.food_consumption == 5
    assert person.coffee_consumption == 0
    assert person.wallet_amount == 51


def test_buy_goods_is_limited_by_food_stock() -> None:
    market = Market(
        [
            make_producer("food", price=10, stock=12),
            make_producer("gasoline", price=5),
            make_producer("coffee", price=2),
        ]
    )
    person = Person("p0", employer=0, wallet_amount=1000, monthly_food_intake=30)

    _buy(person, market)

    assert person.food_consumption == 12
    assert market.get("food").stock == 0
    assert person.wallet_amount >= 0
    assert person.wallet_amount + sum(p.bank_balance for p in market) == 1000


def test_broke_person_buys_nothing(goods_market) -> None:
    person = Person("p0", employer=0, wallet_amount=0, monthly_food_intake=30)
    person.monthly_gas_intake = 10

    assert _buy(person, goods_market) == 0
    assert (person.food_consumption, person.gas_consumption, person.coffee_consumption) == (0, 0, 0)


def test_get_units_to_purchase_falls_back_to_affordable_units() -> None:
    producer = make_producer(price=10, stock=100)

    assert Person("a", 0, wallet_amount=500).get_units_to_purchase(producer, 30) == 30
    assert Person("b", 0, wallet_amount=95).get_units_to_purchase(producer, 30) == 9
    assert Person("c", 0, wallet_amount=0).get_units_to_purchase(producer, 30) == 0


def _job_market(salaries: list[int], max_hires: list[int]) -> Market:
    producers = []
    for i, (salary, hires) in enumerate(zip(salaries, max_hires)):
        producer = make_producer(f"product_{i}", max_hires=hires)
        producer.month_salary = salary
        producers.append(producer)
    return Market(producers)


def test_job_switch_prefers_lowest_index_with_capacity() -> None:
    market = _job_market([10, 20, 30], [2, 2, 2])
    person = Person("p0", employer=0)
    market[0].register_employee(person)
    person.salary = 10

    assert person.check_new_jobs(market, 1.5) is True

    # product_1 pays 2x and comes first, even though product_2 pays 3x
    assert person.employer == 1
    assert market[0].employees == []
    assert market[1].employees == ["p0"]
    assert market[1].month_hires == 1


def test_job_switch_skips_producers_without_capacity() -> None:
    market = _job_market([10, 20, 30], [2, 0, 2])
    person = Person("p0", employer=0)
    market[0].register_employee(person)
    person.salary = 10

    assert person.check_new_jobs(market, 1.5) is True

    assert person.employer == 2
    assert market[2].employees == ["p0"]


def test_no_switch_below_multiplier() -> None:
    market = _job_market([10, 14, 12], [2, 2, 2])
    person = Person("p0", employer=0)
    market[0].register_employee(person)
    person.salary = 10

    assert person.check_new_jobs(market, 1.5) is False
    assert person.employer == 0
    assert market[0].employees == ["p0"]


def test_exact_multiplier_counts_as_better() -> None:
    market = _job_market([10, 15], [2, 2])
    person = Person("p0", employer=0)
    market[0].register_employee(person)
    person.salary = 10

    assert person.check_new_jobs(market, 1.5) is True
    assert person.employer == 1


def test_zero_salary_takes_any_open_position() -> None:
    market = _job_market([0, 0, 5], [2, 2, 2])
    person = Person("p0", employer=2)
    market[2].register_employee(person)

    assert person.salary == 0
    assert person.check_new_jobs(market, 1.5) is True
    assert person.employer == 0


def test_own_employer_is_never_reconsidered() -> None:
    market = _job_market([100], [5])
    person = Person("p0", employer=0)
    market[0].register_employee(person)

    assert person.check_new_jobs(market, 1.5) is False
    assert market[0].employees == ["p0"]
    assert market[0].month_hires == 0


def test_gas_consumption_scales_with_distance() -> None:
    market = Market([make_producer("food")])
    market[0].pos_x, market[0].pos_y = 3, 4
    person = Person("p0", employer=0)

    assert person.calculate_gas_consumption(market, 2.0) == 10
    assert person.calculate_gas_consumption(market, 1.5) == 7
    assert person.monthly_gas_intake == 7


def test_payout_doubles_wallet() -> None:
    person = Person("p0", employer=0, wallet_amount=500)

    person.receive_payout()

    assert person.wallet_amount == 1000


def test_step_doubles_wallet_before_buying_on_payout_month() -> None:
    person = Person("p0", employer=0, wallet_amount=500, monthly_food_intake=0)
    state = build_state(
        [make_producer("food"), make_producer("gasoline"), make_producer("coffee", price=1000)],
        [person],
        payout_month=0,
    )

    person.step(state)

    # 1000 after the payout, exactly one coffee at 1000
    assert person.coffee_consumption == 1
    assert person.wallet_amount == 0


def test_negative_wallet_is_fatal() -> None:
    person = Person("p0", employer=0, wallet_amount=5)

    with pytest.raises(InvariantViolationError, match="p0"):
        person.wallet_amount -= 6

    assert person.wallet_amount == 5
