# producer_agent.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from config import ProducerConfig
from logger import log

from .economic_agent import EconomicAgent
from .market import Market

if TYPE_CHECKING:
    from agents.person_agent import Person
    from simulation.engine import SimulationState


@dataclass(frozen=True)
class ProductionCost:
    """Supply edge: every `per_units` produced units consume `amount` units of `producer_name`."""

    producer_name: str
    per_units: int
    amount: int = 1


class Producer(EconomicAgent):
    """
    Manufactures one product and sells it at an integer unit price.

    Each month the producer reprices from last month's inventory, produces,
    buys the inputs its production consumed from other producers, and then
    distributes its whole balance as salaries.
    """

    def __init__(
        self,
        product: str,
        price: int,
        stock: int = 0,
        monthly_production: int = 0,
        production_limit: int | None = None,
        bank_balance: int = 0,
        month_salary: int = 0,
        max_hires: int = 0,
        production_change_amount: float = 0.0,
        price_change_amount: float = 0.0,
        production_costs: list[ProductionCost] | None = None,
        pos_x: int = 0,
        pos_y: int = 0,
    ) -> None:
        super().__init__(product)
        if price <= 0:
            raise ValueError(f"Producer {product} needs a positive price, got {price}")

        self.product: str = product
        self.price: int = price
        self.stock: int = stock
        self.monthly_production: int = monthly_production
        # Without an explicit limit the initial production is the ceiling
        self.production_limit: int = (
            monthly_production if production_limit is None else production_limit
        )
        self._bank_balance: int = self._checked_amount("bank balance", bank_balance)
        self.month_salary: int = month_salary

        # Produced units whose inputs have not been bought yet
        self.unpaid_units: int = 0

        # Employees are person ids; the person registry lives in the simulation state
        self.employees: list[str] = []
        self.max_hires: int = max_hires
        self.month_hires: int = 0

        self.production_change_amount: float = production_change_amount
        self.price_change_amount: float = price_change_amount
        self.production_costs: list[ProductionCost] = list(production_costs or [])

        self.pos_x: int = pos_x
        self.pos_y: int = pos_y

        self.units_sold: int = 0
        self.last_purchase_units: int = 0

    @classmethod
    def from_config(cls, config: ProducerConfig, pos_x: int = 0, pos_y: int = 0) -> Producer:
        return cls(
            config.product_name,
            price=config.init_price,
            stock=config.init_stock,
            monthly_production=config.init_monthly_production,
            production_limit=config.production_limit,
            bank_balance=config.init_balance,
            month_salary=config.init_salary,
            max_hires=config.max_hires,
            production_change_amount=config.production_change_amount,
            price_change_amount=config.price_change_amount,
            production_costs=[
                ProductionCost(cost.producer_name, cost.per_units, cost.amount)
                for cost in config.production_costs
            ],
            pos_x=pos_x,
            pos_y=pos_y,
        )

    @property
    def bank_balance(self) -> int:
        return self._bank_balance

    @bank_balance.setter
    def bank_balance(self, amount: int) -> None:
        self._bank_balance = self._checked_amount("bank balance", amount)

    def adjust_variables(self) -> None:
        """
        Reprice and replan production from last month's inventory.

        A sold-out producer raises price and production by its change rates,
        any leftover stock lowers both. Production is capped at the production
        limit; both values round half up.
        """
        if self.stock == 0:
            new_production = self.monthly_production * (1.0 + self.production_change_amount)
            new_price = self.price * (1.0 + self.price_change_amount)
        else:
            new_production = self.monthly_production * (1.0 - self.production_change_amount)
            new_price = self.price * (1.0 - self.price_change_amount)

        if new_production > self.production_limit:
            new_production = float(self.production_limit)

        old_price = self.price
        self.monthly_production = int(new_production + 0.5)
        self.price = max(1, int(new_price + 0.5))

        log(
            f"Producer {self.product} repriced {old_price} -> {self.price}, "
            f"monthly production now {self.monthly_production} (stock {self.stock}).",
            level="DEBUG",
        )

    def produce_products(self) -> None:
        self.stock += self.monthly_production
        self.unpaid_units += self.monthly_production

    def pay_production_cost(self, market: Market) -> int:
        """
        Buy the inputs consumed by unpaid production, as far as cash allows.

        Edges are settled in declared order and every purchase hits the
        supplier immediately. Returns the total spent.
        """
        total_spent = 0
        for cost in self.production_costs:
            supplier = market.get(cost.producer_name)
            desired_batches = self.unpaid_units // cost.per_units
            affordable_batches = supplier.get_max_units(self.bank_balance) // cost.amount
            batches = min(desired_batches, affordable_batches)
            if batches <= 0:
                continue

            purchase_cost = supplier.register_purchase(batches * cost.amount)
            self.bank_balance -= purchase_cost
            self.unpaid_units -= batches * cost.per_units
            total_spent += purchase_cost

            log(
                f"Producer {self.product} bought {batches * cost.amount} {supplier.product} "
                f"for {purchase_cost}. Unpaid units left: {self.unpaid_units}.",
                level="DEBUG",
            )
        return total_spent

    def pay_employees(self, people: Mapping[str, Person]) -> int:
        """
        Pay out the balance as equal salaries and return the total paid.

        Without employees the salary offer is the whole balance, but nothing
        leaves the producer.
        """
        if self.employees:
            self.month_salary = self.bank_balance // len(self.employees)
        else:
            self.month_salary = self.bank_balance
            return 0

        total_paid = 0
        for person_id in self.employees:
            employee = people[person_id]
            employee.wallet_amount += self.month_salary
            employee.salary = self.month_salary
            self.bank_balance -= self.month_salary
            total_paid += self.month_salary

        log(
            f"Producer {self.product} paid {len(self.employees)} employees "
            f"{self.month_salary} each. Balance left: {self.bank_balance}.",
            level="DEBUG",
        )
        return total_paid

    def register_employee(self, person: Person) -> None:
        """Attach a person to the roster without counting it as a hire."""
        if person.unique_id not in self.employees:
            self.employees.append(person.unique_id)

    def add_employee(self, person: Person) -> bool:
        """Hire the person if this month's quota allows it."""
        if self.month_hires >= self.max_hires:
            return False
        self.register_employee(person)
        self.month_hires += 1
        log(
            f"Producer {self.product} hired {person.unique_id} "
            f"({self.month_hires}/{self.max_hires} hires this month).",
            level="DEBUG",
        )
        return True

    def remove_employee(self, person: Person) -> None:
        if person.unique_id in self.employees:
            self.employees.remove(person.unique_id)

    def register_purchase(self, amount: int) -> int:
        """
        Sell up to `amount` units and return the cost charged.

        A short stock fills the order partially; `last_purchase_units` holds
        the units actually handed over.
        """
        units = max(0, min(amount, self.stock))
        cost = units * self.price
        self.stock -= units
        self.units_sold += units
        self.bank_balance += cost
        self.last_purchase_units = units
        return cost

    def get_max_units(self, money: int) -> int:
        """Units affordable with `money`, truncated and capped at the current stock."""
        if money <= 0:
            return 0
        return min(money // self.price, self.stock)

    def step(self, state: SimulationState) -> None:
        self.units_sold = 0
        self.month_hires = 0
        self.adjust_variables()
        self.produce_products()
        self.pay_production_cost(state.market)
        self.pay_employees(state.people)
