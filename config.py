from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import cast

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    PositiveInt,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_pascal

output_dir = "output/"
DEFAULT_CONFIG_PATH = "config.yaml"


class ConfigurationError(RuntimeError):
    """Raised when a configuration file is missing, unreadable or invalid."""


ConfigScalar = bool | int | float | str | None
ConfigValue = ConfigScalar | list["ConfigValue"] | dict[str, "ConfigValue"]


def _coerce_value(value: object) -> ConfigValue:
    if isinstance(value, (bool, int, float, str)) or value is None:
        return value
    if isinstance(value, list):
        return [_coerce_value(item) for item in value]
    if isinstance(value, tuple):
        return [_coerce_value(item) for item in value]
    if isinstance(value, Mapping):
        coerced: dict[str, ConfigValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                msg = "CONFIG keys must be strings"
                raise TypeError(msg)
            coerced[key] = _coerce_value(item)
        return coerced
    msg = f"Unsupported CONFIG value type: {type(value)!r}"
    raise TypeError(msg)


def _coerce_config_dict(data: Mapping[str, object]) -> dict[str, ConfigValue]:
    return {key: _coerce_value(value) for key, value in data.items()}


class BaseConfigModel(BaseModel):
    # CamelCase keys (MaxMonths, ProductName, ...) are accepted next to field names.
    # Float fields reject inf and nan.
    model_config = ConfigDict(
        validate_default=True,
        frozen=False,
        alias_generator=to_pascal,
        populate_by_name=True,
        allow_inf_nan=False,
    )


class ProductionCostConfig(BaseConfigModel):
    """One supply edge: every `per_units` produced units require `amount` units of `producer_name`."""

    producer_name: str
    per_units: PositiveInt = 10
    amount: PositiveInt = 1


class ProducerConfig(BaseConfigModel):
    product_name: str
    init_salary: NonNegativeInt = 10
    max_hires: NonNegativeInt = 2
    init_balance: NonNegativeInt = 0
    init_price: PositiveInt = 10
    init_monthly_production: NonNegativeInt = 100
    init_stock: NonNegativeInt = 1000
    production_limit: NonNegativeInt = 1000

    # 0.05 means increases multiply by 1.05 and decreases by 0.95
    production_change_amount: float = Field(0.1, ge=0, lt=1)
    price_change_amount: float = Field(0.1, ge=0, lt=1)

    production_costs: list[ProductionCostConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _reject_self_supply(self) -> ProducerConfig:
        for cost in self.production_costs:
            if cost.producer_name == self.product_name:
                msg = f"Producer '{self.product_name}' cannot list itself as a production cost"
                raise ValueError(msg)
        return self


def _default_producers() -> list[ProducerConfig]:
    return [
        ProducerConfig(
            product_name="food",
            production_costs=[
                ProductionCostConfig(producer_name="gasoline"),
                ProductionCostConfig(producer_name="coffee"),
            ],
        ),
        ProducerConfig(
            product_name="gasoline",
            production_costs=[ProductionCostConfig(producer_name="coffee")],
        ),
        ProducerConfig(
            product_name="coffee",
            production_costs=[ProductionCostConfig(producer_name="gasoline")],
        ),
    ]


class SimulationConfig(BaseConfigModel):
    # Simulation basics
    max_months: PositiveInt = 100
    payout_month: int = 49
    num_people: NonNegativeInt = 20
    seed: int | None = None

    # People
    starting_wallet_min: NonNegativeInt = 0
    starting_wallet_max: NonNegativeInt = 1000
    savings_ratio_min: float = Field(0.1, ge=0, lt=1)
    savings_ratio_max: float = Field(0.3, ge=0, lt=1)
    food_intake_min: NonNegativeInt = 30
    food_intake_max: NonNegativeInt = 60
    gas_consumption_per_distance: float = Field(1.0, ge=0)
    job_switch_multiplier: float = Field(1.5, gt=0)
    position_min: int = 0
    position_max: int = 300

    # Producers
    producers: list[ProducerConfig] = Field(default_factory=_default_producers)
    food_product: str = "food"
    gas_product: str = "gasoline"
    coffee_product: str = "coffee"

    # Logging and output
    logging_level: str = "INFO"
    log_file: str = output_dir + "simulation.log"
    log_format: str = "%(asctime)s - %(levelname)s - %(message)s"
    SUMMARY_FILE: str = output_dir + "simulation_summary.json"
    JSON_INDENT: PositiveInt = 4
    metrics_export_path: str = output_dir + "metrics"
    PERSON_ID_PREFIX: str = "person_"

    @field_validator("producers")
    @classmethod
    def _validate_unique_products(cls, value: list[ProducerConfig]) -> list[ProducerConfig]:
        if not value:
            msg = "At least one producer must be configured"
            raise ValueError(msg)
        names = [producer.product_name for producer in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Duplicate producer names: {', '.join(duplicates)}"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def _validate_ranges(self) -> SimulationConfig:
        for low, high in (
            ("starting_wallet_min", "starting_wallet_max"),
            ("savings_ratio_min", "savings_ratio_max"),
            ("food_intake_min", "food_intake_max"),
            ("position_min", "position_max"),
        ):
            if getattr(self, low) > getattr(self, high):
                msg = f"{low} must not exceed {high}"
                raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def _validate_product_references(self) -> SimulationConfig:
        known = set(self.product_names)
        for producer in self.producers:
            for cost in producer.production_costs:
                if cost.producer_name not in known:
                    msg = (
                        f"Producer '{producer.product_name}' depends on unknown "
                        f"producer '{cost.producer_name}'"
                    )
                    raise ValueError(msg)
        for field_name in ("food_product", "gas_product", "coffee_product"):
            name = getattr(self, field_name)
            if name not in known:
                msg = f"{field_name} '{name}' is not a configured producer"
                raise ValueError(msg)
        return self

    @property
    def product_names(self) -> list[str]:
        return [producer.product_name for producer in self.producers]

    @property
    def summary_file(self) -> str:
        return self.SUMMARY_FILE

    @property
    def json_indent(self) -> PositiveInt:
        return self.JSON_INDENT


def default_simulation_config() -> SimulationConfig:
    return SimulationConfig()


def load_simulation_config(data: Mapping[str, ConfigValue] | None = None) -> SimulationConfig:
    if data is not None:
        coerced = _coerce_config_dict(cast(Mapping[str, object], data))
        return SimulationConfig(**coerced)
    return SimulationConfig()


def _read_mapping(path: Path) -> Mapping[str, object]:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        msg = f"Configuration root in {path} must be a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg)
    return data


def load_simulation_config_from_yaml(path: str) -> SimulationConfig:
    """Load and validate a YAML configuration file (pydantic errors propagate)."""
    data = _read_mapping(Path(path))
    return load_simulation_config(cast(Mapping[str, ConfigValue], data))


def load_simulation_config_from_json(path: str) -> SimulationConfig:
    data = _read_mapping(Path(path))
    return load_simulation_config(cast(Mapping[str, ConfigValue], data))


def write_default_config_file(path: str) -> Path:
    """Write the default configuration as YAML (or JSON for a .json suffix)."""
    target = Path(path)
    payload = default_simulation_config().model_dump(mode="json")
    target.parent.mkdir(parents=True, exist_ok=True)
    if target.suffix.lower() == ".json":
        target.write_text(json.dumps(payload, indent=4) + "\n", encoding="utf-8")
    else:
        target.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return target


def load_simulation_config_file(path: str = DEFAULT_CONFIG_PATH) -> SimulationConfig:
    """Load a configuration file, creating the default one when the default path is missing.

    Every failure (missing file, unreadable file, parse error, validation error)
    is raised as ConfigurationError so callers can stop before any agent exists.
    """
    target = Path(path)
    if not target.exists():
        if path != DEFAULT_CONFIG_PATH:
            raise ConfigurationError(f"Configuration file {path} does not exist")
        try:
            write_default_config_file(path)
        except OSError as exc:
            msg = f"Could not create default configuration {path}: {exc}"
            raise ConfigurationError(msg) from exc

    try:
        data = _read_mapping(target)
        return load_simulation_config(cast(Mapping[str, ConfigValue], data))
    except ConfigurationError:
        raise
    except (OSError, UnicodeDecodeError, yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Could not read configuration {path}: {exc}") from exc
    except (ValidationError, TypeError) as exc:
        raise ConfigurationError(f"Invalid configuration {path}: {exc}") from exc


CONFIG_MODEL: SimulationConfig = load_simulation_config()
