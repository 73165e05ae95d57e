# person_agent.py
from __future__ import annotations

from typing import TYPE_CHECKING

from logger import log
from utils import euclidean_distance

from .economic_agent import EconomicAgent
from .market import Market

if TYPE_CHECKING:
    from agents.producer_agent import Producer
    from simulation.engine import SimulationState


class Person(EconomicAgent):
    """
    A worker and consumer.

    People are paid by their employer's payroll, may move to a better paying
    producer, commute to work on gasoline, buy food, and spend what is left
    after their savings reservation on coffee.
    """

    def __init__(
        self,
        unique_id: str,
        employer: int,
        wallet_amount: int = 0,
        savings_ratio: float = 0.0,
        monthly_food_intake: int = 0,
        pos_x: int = 0,
        pos_y: int = 0,
    ) -> None:
        super().__init__(unique_id)
        self.employer: int = employer
        self._wallet_amount: int = self._checked_amount("wallet", wallet_amount)
        self.salary: int = 0
        self.savings_ratio: float = savings_ratio
        self.monthly_food_intake: int = monthly_food_intake
        self.monthly_gas_intake: int = 0
        self.pos_x: int = pos_x
        self.pos_y: int = pos_y

        # Units bought during the last month, for reporting only
        self.food_consumption: int = 0
        self.gas_consumption: int = 0
        self.coffee_consumption: int = 0

    @property
    def wallet_amount(self) -> int:
        return self._wallet_amount

    @wallet_amount.setter
    def wallet_amount(self, amount: int) -> None:
        self._wallet_amount = self._checked_amount("wallet", amount)

    def receive_payout(self) -> None:
        """Double the wallet; the money is created, not taken from anyone."""
        self.wallet_amount *= 2
        log(f"Person {self.unique_id} received payout, wallet now {self.wallet_amount}.")

    def _offer_is_better(self, offered_salary: int, multiplier: float) -> bool:
        # Without a current salary any offer counts as an improvement
        if self.salary == 0:
            return True
        return offered_salary / self.salary >= multiplier

    def check_new_jobs(self, market: Market, job_switch_multiplier: float) -> bool:
        """
        Move to the first producer whose salary beats ours by the multiplier.

        Producers are scanned in market order and the first one that still has
        hiring capacity wins, even if a later one pays more.
        """
        for i, producer in enumerate(market):
            if i == self.employer:
                continue
            if not self._offer_is_better(producer.month_salary, job_switch_multiplier):
                continue
            if producer.add_employee(self):
                market[self.employer].remove_employee(self)
                log(
                    f"Person {self.unique_id} switched from {market[self.employer].product} "
                    f"to {producer.product} for salary {producer.month_salary}.",
                )
                self.employer = i
                return True
        return False

    def calculate_gas_consumption(self, market: Market, gas_per_distance: float) -> int:
        employer = market[self.employer]
        distance = euclidean_distance(self.pos_x, self.pos_y, employer.pos_x, employer.pos_y)
        self.monthly_gas_intake = int(distance * gas_per_distance)
        return self.monthly_gas_intake

    def get_units_to_purchase(self, producer: Producer, desired_intake: int) -> int:
        """Desired units if the wallet covers them, else as many as it affords."""
        if self.wallet_amount <= 0:
            return 0
        if self.wallet_amount >= producer.price * desired_intake:
            return desired_intake
        return producer.get_max_units(self.wallet_amount)

    def _buy(self, producer: Producer, units: int) -> int:
        cost = producer.register_purchase(units)
        self.wallet_amount -= cost
        return producer.last_purchase_units

    def buy_goods(self, market: Market, food: str, gas: str, coffee: str) -> int:
        """
        Spend this month's budget and return the total spent.

        The savings share is held back for the duration of the purchases.
        Food comes first, then the commute's gasoline, then a second food
        batch if the wallet still covers one, and coffee absorbs the rest.
        """
        food_producer = market.get(food)
        gas_producer = market.get(gas)
        coffee_producer = market.get(coffee)

        wallet_before = self.wallet_amount
        savings = int(self.wallet_amount * self.savings_ratio)
        self.wallet_amount -= savings

        self.food_consumption = self._buy(
            food_producer, self.get_units_to_purchase(food_producer, self.monthly_food_intake)
        )
        self.gas_consumption = self._buy(
            gas_producer, self.get_units_to_purchase(gas_producer, self.monthly_gas_intake)
        )

        if self.wallet_amount > self.monthly_food_intake * food_producer.price:
            self.food_consumption += self._buy(food_producer, self.monthly_food_intake)

        max_coffee = coffee_producer.get_max_units(self.wallet_amount)
        self.coffee_consumption = self._buy(coffee_producer, max_coffee)

        self.wallet_amount += savings
        spent = wallet_before - self.wallet_amount

        log(
            f"Person {self.unique_id} spent {spent} (food {self.food_consumption}, "
            f"gas {self.gas_consumption}, coffee {self.coffee_consumption}). "
            f"Wallet now {self.wallet_amount}.",
        )
        return spent

    def step(self, state: SimulationState) -> None:
        config = state.config
        if state.clock.is_payout_month():
            self.receive_payout()
        self.check_new_jobs(state.market, config.job_switch_multiplier)
        self.calculate_gas_consumption(state.market, config.gas_consumption_per_distance)
        self.buy_goods(
            state.market,
            food=config.food_product,
            gas=config.gas_product,
            coffee=config.coffee_product,
        )
