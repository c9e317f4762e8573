"""Command‑line runner for capsim."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from capsim import logging
from capsim.simulation import Simulation


def _cli(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a circular-flow simulation.")
    p.add_argument(
        "--scenario",
        default=None,
        help="Bundled scenario name or path of a scenario YAML",
    )
    p.add_argument("--config", default=None, help="Configuration YAML")
    p.add_argument("--periods", type=int, default=None, help="Simulation periods")
    p.add_argument(
        "--policy", default=None, help="Profit distribution policy (fixed_share, none)"
    )
    p.add_argument(
        "--labour-response",
        choices=("flexible", "fixed"),
        default=None,
        help="Override the scenario's labour supply response",
    )
    p.add_argument("--log-level", default="INFO", help="Log level of capsim loggers")
    return p.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = _cli(argv)
    log = logging.getLogger(__name__)

    overrides: dict[str, object] = {
        "logging": {"default_level": args.log_level.upper(), "phases": {}}
    }
    if args.periods is not None:
        overrides["n_periods"] = args.periods
    if args.policy is not None:
        overrides["distribution_policy"] = args.policy
    if args.labour_response is not None:
        overrides["labour_supply_response"] = args.labour_response

    sim = Simulation.init(config=args.config, scenario=args.scenario, **overrides)

    for _ in range(sim.config.n_periods):
        period = sim.period
        sim.run(1)
        totals = sim.totals()
        log.info(f"=== PERIOD {period} complete (version {sim.version}) ===")
        for c, name in enumerate(sim.com.name):
            log.info(
                f"  {name:<24} quantity {totals.quantity[c]:>12,.2f}  "
                f"value {totals.value[c]:>12,.2f}  price {totals.price[c]:>12,.2f}"
            )

    if sim.reporter.warnings:
        log.warning(f"{len(sim.reporter.warnings)} data warnings during the run")
    log.info("Simulation finished.")


if __name__ == "__main__":
    main()
