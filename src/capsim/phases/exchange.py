"""
Exchange phases: demand, constrain and trade.

Together they decide what every industry and social class wants to buy,
ration scarce commodities, and settle the purchases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from capsim import logging
from capsim.core.decorators import phase

if TYPE_CHECKING:
    from capsim.simulation import Simulation


@phase
class Demand:
    """
    Register replenishment demand for productive and consumption stocks.

    Industries first size their input needs at the proposed output and
    scale output back when they cannot finance it. Labour supply then
    responds to the demand for labour power, class revenues are set, and
    classes register consumption demand out of revenue.

    Rule
    ----
        D_p  =  Q · a · T  -  S_p
        C    =  Σ max(D_p, 0) · p
        Q   ←  Q · min(1, R / C)          R = money + sales at price
        L_s ←  L_s · L_d / L_s            flexible response only
        rev ←  rev + wage
        D_c  =  rev · c

    Q: Output, a: Production Coefficient, T: Turnover Time, S_p: Productive
    Stock, p: Unit Price, R: Resources, L: Labour Power, c: Consumption
    Coefficient
    """

    def execute(self, sim: Simulation) -> None:
        from capsim.phases._internal.demand import (
            compute_productive_demand,
            compute_social_class_demand,
            register_labour_response,
        )

        eps, precision = sim.config.epsilon, sim.config.rounding_precision
        compute_productive_demand(
            sim.stk, sim.com, sim.ind,
            reporter=sim.reporter, eps=eps, precision=precision,
        )
        register_labour_response(
            sim.stk, sim.com, sim.cls, sim.gl,
            reporter=sim.reporter, eps=eps, precision=precision,
        )
        compute_social_class_demand(sim.stk, sim.cls, precision=precision)


@phase
class Constrain:
    """
    Ration commodities whose demand exceeds supply.

    Rule
    ----
        s_k  =  min(1, supply_k / demand_k)
        Q   ←  Q · min_k s_k              over inputs with positive demand
        D_c ←  D_c · s_k
    """

    def execute(self, sim: Simulation) -> None:
        from capsim.phases._internal.constrain import (
            compute_allocation_shares,
            constrain_industries,
            constrain_social_classes,
        )

        eps, precision = sim.config.epsilon, sim.config.rounding_precision
        log = self.get_logger()
        if log.isEnabledFor(logging.INFO):
            log.info("--- Constraining Demand ---")
        compute_allocation_shares(sim.stk, sim.com, eps=eps)
        constrain_industries(sim.stk, sim.com, sim.ind, eps=eps, precision=precision)
        constrain_social_classes(sim.stk, sim.com, precision=precision)


@phase
class Trade:
    """
    Settle productive purchases, then consumption purchases.

    Each purchase moves goods from the seller's sales stock to the buyer
    and ``quantity × unit price`` money the other way; a purchase that
    cannot settle is reported and skipped whole.

    Rule
    ----
        S_seller ←  S_seller - q        M_buyer  ←  M_buyer - q · p
        S_buyer  ←  S_buyer + q         M_seller ←  M_seller + q · p
        rev      ←  rev - q · p         consumption only
    """

    def execute(self, sim: Simulation) -> None:
        from capsim.phases._internal.trade import consumption_trade, productive_trade

        eps, precision = sim.config.epsilon, sim.config.rounding_precision
        productive_trade(
            sim.stk, sim.com, sim.ind, sim.cls,
            reporter=sim.reporter, eps=eps, precision=precision,
        )
        consumption_trade(
            sim.stk, sim.com, sim.ind, sim.cls,
            reporter=sim.reporter, eps=eps, precision=precision,
        )
