"""
Production phases: industries produce, prices adjust, classes reproduce.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from capsim.core.decorators import phase
from capsim.errors import UnsupportedPolicyError

if TYPE_CHECKING:
    from capsim.simulation import Simulation


@phase
class IndustriesProduce:
    """
    Use up productive stocks and add output to each sales stock.

    Labour power adds value at the MELT; every other input transfers its
    own unit value. Profit is persisted once all industries have produced.

    Rule
    ----
        u   =  Q · a
        S_p ←  S_p - u
        V   =  Σ u · MELT  (labour)  +  Σ u · v  (other inputs)
        S_s ←  S_s + Q,   value and price of S_s += V
        surplus  =  produced - used up

    Q: Output, a: Production Coefficient, v: Unit Value, S_s: Sales Stock
    """

    def execute(self, sim: Simulation) -> None:
        from capsim.phases._internal.production import industries_produce

        industries_produce(
            sim.stk, sim.com, sim.ind, sim.gl,
            reporter=sim.reporter,
            eps=sim.config.epsilon,
            precision=sim.config.rounding_precision,
        )


@phase
class Prices:
    """
    Re-derive unit values and prices of industrially produced commodities.

    Only the ``simple`` price dynamics is implemented: unit value and unit
    price become total value and total price over total quantity, after
    which every stock is re-valued.
    """

    def validate(self, sim: Simulation) -> None:
        if sim.config.price_dynamics != "simple":
            raise UnsupportedPolicyError(
                f"Price dynamics '{sim.config.price_dynamics}' is not ready yet"
            )

    def execute(self, sim: Simulation) -> None:
        from capsim.phases._internal.production import recompute_unit_values

        recompute_unit_values(
            sim.stk, sim.com,
            eps=sim.config.epsilon,
            precision=sim.config.rounding_precision,
        )


@phase
class ClassesReproduce:
    """
    Consume consumption stocks and regenerate labour power.

    Rule
    ----
        S_c ←  S_c - S_c / T
        L   ←  N · r

    T: Turnover Time, N: Population, r: Participation Ratio
    """

    def execute(self, sim: Simulation) -> None:
        from capsim.phases._internal.production import classes_reproduce

        classes_reproduce(
            sim.stk, sim.com, sim.cls, precision=sim.config.rounding_precision
        )
