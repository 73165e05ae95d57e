# main.py
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

from agents.economic_agent import InvariantViolationError
from config import (
    DEFAULT_CONFIG_PATH,
    ConfigurationError,
    SimulationConfig,
    load_simulation_config_file,
)
from logger import log, setup_logger
from simulation.engine import SimulationEngine, SimulationState


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the monthly producer/person economy.")
    parser.add_argument(
        "--config",
        help="Path to a YAML or JSON configuration file (default: $SIM_CONFIG or config.yaml).",
    )
    parser.add_argument("--seed", type=int, help="Random seed for agent initialization.")
    parser.add_argument("--months", type=int, help="Override the number of simulated months.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: from configuration).",
    )
    parser.add_argument(
        "--no-export", action="store_true", help="Skip the CSV and JSON exports."
    )
    return parser.parse_args(sys.argv[1:] if argv is None else argv)


def _resolve_config_from_args_or_env(argv: list[str] | None = None) -> SimulationConfig:
    """CLI --config wins over $SIM_CONFIG, which wins over ./config.yaml."""
    return _config_from_args(parse_args(argv))


def _config_from_args(args: argparse.Namespace) -> SimulationConfig:
    path = args.config or os.getenv("SIM_CONFIG") or DEFAULT_CONFIG_PATH
    config = load_simulation_config_file(path)

    overrides: dict[str, Any] = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.months is not None:
        overrides["max_months"] = args.months
    if args.log_level is not None:
        overrides["logging_level"] = args.log_level
    if overrides:
        try:
            config = SimulationConfig.model_validate({**config.model_dump(), **overrides})
        except ValueError as exc:
            raise ConfigurationError(f"Invalid command line override: {exc}") from exc
    return config


def summarize_simulation(state: SimulationState, config: SimulationConfig) -> dict[str, Any]:
    """Generate and save simulation summary to a JSON file."""
    summary = {
        "months": config.max_months,
        "total_money": state.total_money(),
        "Producers": {
            producer.product: {
                "price": producer.price,
                "stock": producer.stock,
                "bank_balance": producer.bank_balance,
                "monthly_production": producer.monthly_production,
                "unpaid_units": producer.unpaid_units,
                "employees": len(producer.employees),
            }
            for producer in state.market
        },
        "People": {
            person.unique_id: {
                "wallet_amount": person.wallet_amount,
                "salary": person.salary,
                "employer": state.market[person.employer].product,
            }
            for person in state.people.values()
        },
    }

    summary_path = Path(config.summary_file)
    summary_path.parent.mkdir(parents=True, exist_ok=True)
    with open(summary_path, "w") as f:
        json.dump(summary, f, indent=config.json_indent)

    log(f"Simulation summary stored in {summary_path}", level="INFO")
    return summary


def main(argv: list[str] | None = None) -> int:
    """Main simulation execution function."""
    args = parse_args(argv)
    try:
        config = _config_from_args(args)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logger(config.logging_level, config.log_file, config.log_format)
    log("Starting monthly economy simulation...", level="INFO")

    engine = SimulationEngine(config)
    try:
        state = engine.run()
    except InvariantViolationError as exc:
        print(f"Simulation aborted: {exc}", file=sys.stderr)
        return 1

    print(engine.collector.format_month_table())

    if not args.no_export:
        summarize_simulation(state, config)
        engine.collector.export_metrics()

    log("Simulation exiting", level="INFO")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
