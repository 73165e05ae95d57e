from __future__ import annotations

import os
import random
import sys
import time
from dataclasses import dataclass, field

from agents.market import Market
from agents.person_agent import Person
from agents.producer_agent import Producer
from config import SimulationConfig
from logger import log
from metrics import MetricsCollector
from sim_clock import SimulationClock
from utils import rand_float_in_range, rand_int_in_range


def _format_duration(seconds: float) -> str:
    if seconds < 0 or seconds != seconds:  # NaN guard
        return "?"
    seconds_int = int(seconds)
    mins, secs = divmod(seconds_int, 60)
    hours, mins = divmod(mins, 60)
    if hours:
        return f"{hours:d}h{mins:02d}m{secs:02d}s"
    if mins:
        return f"{mins:d}m{secs:02d}s"
    return f"{secs:d}s"


def _progress_bar(done: int, total: int, width: int = 30) -> str:
    if total <= 0:
        return "[" + ("?" * width) + "]"
    ratio = max(0.0, min(1.0, done / total))
    filled = int(round(ratio * width))
    return "[" + ("#" * filled) + ("-" * (width - filled)) + "]"


@dataclass
class SimulationState:
    """Everything a month step reads or mutates.

    The state owns the producers (via the market) and the person registry;
    rosters and employer fields only hold ids and indices into them.
    """

    config: SimulationConfig
    market: Market
    people: dict[str, Person]
    clock: SimulationClock = field(init=False)

    def __post_init__(self) -> None:
        self.clock = SimulationClock(
            max_months=self.config.max_months, payout_month=self.config.payout_month
        )

    @classmethod
    def from_config(
        cls, config: SimulationConfig, rng: random.Random | None = None
    ) -> SimulationState:
        """Create producers and people; randomness is only used here."""
        if rng is None:
            rng = random.Random(config.seed)
        market = Market(create_producers(config, rng))
        people = create_people(config, market, rng)
        return cls(config=config, market=market, people={p.unique_id: p for p in people})

    def total_money(self) -> int:
        wallets = sum(person.wallet_amount for person in self.people.values())
        balances = sum(producer.bank_balance for producer in self.market)
        return wallets + balances


def create_producers(config: SimulationConfig, rng: random.Random) -> list[Producer]:
    producers: list[Producer] = []
    for producer_config in config.producers:
        producers.append(
            Producer.from_config(
                producer_config,
                pos_x=rand_int_in_range(config.position_min, config.position_max, rng),
                pos_y=rand_int_in_range(config.position_min, config.position_max, rng),
            )
        )
    return producers


def create_people(config: SimulationConfig, market: Market, rng: random.Random) -> list[Person]:
    """Create people with randomized attributes and put each on a random roster."""
    people: list[Person] = []
    for i in range(config.num_people):
        person = Person(
            f"{config.PERSON_ID_PREFIX}{i}",
            employer=rand_int_in_range(0, len(market), rng),
            wallet_amount=rand_int_in_range(
                config.starting_wallet_min, config.starting_wallet_max, rng
            ),
            savings_ratio=rand_float_in_range(
                config.savings_ratio_min, config.savings_ratio_max, rng
            ),
            monthly_food_intake=rand_int_in_range(
                config.food_intake_min, config.food_intake_max, rng
            ),
            pos_x=rand_int_in_range(config.position_min, config.position_max, rng),
            pos_y=rand_int_in_range(config.position_min, config.position_max, rng),
        )
        market[person.employer].register_employee(person)
        people.append(person)
    return people


def simulation_step(state: SimulationState) -> None:
    """Advance the whole economy by one month.

    Producers go first so that the salaries people spend this month are the
    ones just paid out. On the payout month each person doubles its wallet at
    the start of its own step, before it acts.
    """
    for producer in state.market:
        producer.step(state)

    if state.clock.is_payout_month():
        log(f"Month {state.clock.report_month}: payout month, doubling all wallets.", level="INFO")

    for person in state.people.values():
        person.step(state)

    state.clock.advance()


class SimulationEngine:
    def __init__(
        self,
        config: SimulationConfig,
        rng: random.Random | None = None,
        collector: MetricsCollector | None = None,
    ) -> None:
        self.config = config
        self._rng = rng
        self._collector = collector
        self.reset()

    def reset(self) -> None:
        """Reset the simulation to its initial state."""
        seed_val: int | None = self.config.seed
        env_seed = os.getenv("SIM_SEED")
        if env_seed is not None and env_seed != "":
            seed_val = int(env_seed)
        rng = self._rng if self._rng is not None else random.Random(seed_val)

        self.state = SimulationState.from_config(self.config, rng=rng)
        self.collector = self._collector or MetricsCollector(config=self.config)
        self.collector.reset()

        # Progress tracking state
        self.progress_enabled = os.getenv("SIM_PROGRESS", "0") not in {"0", "false", "False"}
        self.start_ts = time.time()

    @property
    def months(self) -> int:
        return int(self.config.max_months)

    def step(self) -> None:
        """Snapshot the current state, then advance one month."""
        month = self.state.clock.report_month
        self.collector.collect_month(self.state)
        log(f"---- Simulation Month {month} ----", level="INFO")
        simulation_step(self.state)

        if month % max(1, self.months // 10) == 0:
            log(f"Month {month}: total money={self.state.total_money()}", level="INFO")

        if self.progress_enabled:
            self._write_progress(month)

    def _write_progress(self, done: int) -> None:
        elapsed = time.time() - self.start_ts
        rate = done / elapsed if elapsed > 0 else 0.0
        remaining = (self.months - done) / rate if rate > 0 else float("nan")
        bar = _progress_bar(done, self.months, width=22)
        status = (
            f"{bar} month {done}/{self.months}  money {self.state.total_money():>10d}  "
            f"elapsed {_format_duration(elapsed)}  eta {_format_duration(remaining)}"
        )
        sys.stdout.write("\r" + status)
        if done == self.months:
            sys.stdout.write("\n")
        sys.stdout.flush()

    def run(self) -> SimulationState:
        """Run every configured month and take the closing snapshot.

        The collector ends up with max_months + 1 rows: one before each step
        and one for the final state.
        """
        log(
            f"Starting simulation: {self.months} months, {len(self.state.people)} people, "
            f"{len(self.state.market)} producers.",
            level="INFO",
        )
        while not self.state.clock.is_finished():
            self.step()

        self.collector.collect_month(self.state)
        log(f"Simulation finished. Total money: {self.state.total_money()}.", level="INFO")
        return self.state


def run_simulation(
    config: SimulationConfig, rng: random.Random | None = None
) -> tuple[SimulationState, MetricsCollector]:
    engine = SimulationEngine(config, rng=rng)
    state = engine.run()
    return state, engine.collector
