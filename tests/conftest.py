import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from agents.market import Market  # noqa: E402
from agents.person_agent import Person  # noqa: E402
from agents.producer_agent import Producer  # noqa: E402
from config import SimulationConfig  # noqa: E402
from simulation.engine import SimulationState  # noqa: E402


@pytest.fixture(autouse=True)
def _no_env_seed(monkeypatch):
    """Keep SIM_SEED / SIM_PROGRESS from the developer's shell out of the tests."""
    monkeypatch.delenv("SIM_SEED", raising=False)
    monkeypatch.delenv("SIM_PROGRESS", raising=False)


def make_producer(product: str = "food", **overrides) -> Producer:
    params = {
        "price": 10,
        "stock": 1000,
        "monthly_production": 100,
        "production_limit": 1000,
        "bank_balance": 0,
        "max_hires": 2,
        "production_change_amount": 0.1,
        "price_change_amount": 0.1,
    }
    params.update(overrides)
    return Producer(product, **params)


@pytest.fixture
def goods_market() -> Market:
    """Food, gasoline and coffee at distinct prices with plenty of stock."""
    return Market(
        [
            make_producer("food", price=10),
            make_producer("gasoline", price=5),
            make_producer("coffee", price=2),
        ]
    )


def build_state(producers: list[Producer], people: list[Person], **config_overrides):
    """A SimulationState around hand-made agents; people are put on their employer's roster."""
    config = SimulationConfig(num_people=0, **config_overrides)
    market = Market(producers)
    for person in people:
        market[person.employer].register_employee(person)
    return SimulationState(config=config, market=market, people={p.unique_id: p for p in people})
