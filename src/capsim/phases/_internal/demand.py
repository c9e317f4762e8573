"""
System functions for the demand phase.

This module contains the internal implementation functions for the
demand phase. The phase class wraps these functions and provides the
primary documentation.

See Also
--------
capsim.phases.exchange.Demand : Phase class (primary documentation source)
"""

from __future__ import annotations

import numpy as np

from capsim import logging
from capsim.economy import Global, LabourResponse
from capsim.helpers import labour_power, stock_per_owner
from capsim.ops import modify_to, rnd, rnd_down
from capsim.reporting import Reporter
from capsim.roles import Commodity, Industry, OwnerType, SocialClass, Stock, StockType
from capsim.typing import Float1D, Idx1D

log = logging.getLogger(__name__)


def _productive(stk: Stock) -> Idx1D:
    return np.flatnonzero(
        (stk.owner_type == OwnerType.INDUSTRY) & (stk.stock_type == StockType.PRODUCTIVE)
    )


def replenishment_need(stk: Stock, com: Commodity, ind: Industry, idx: Idx1D) -> Float1D:
    """
    Demand of productive stocks ``idx`` at their owners' current output.

    required = output * coefficient * turnover time; demand = required
    minus the quantity already held (negative when overstocked).
    """
    c = stk.commodity[idx]
    output = ind.output[stk.owner[idx]]
    required = output * stk.production_coefficient[idx] * com.turnover_time[c]
    return required - stk.quantity[idx]


def replenishment_cost(
    stk: Stock, com: Commodity, ind: Industry, idx: Idx1D, demand: Float1D
) -> Float1D:
    """Price of the positive part of ``demand``, summed per industry."""
    cost = np.maximum(demand, 0.0) * com.unit_price[stk.commodity[idx]]
    return np.bincount(stk.owner[idx], weights=cost, minlength=ind.size)


def industry_resources(stk: Stock, ind: Industry) -> Float1D:
    """Money plus anticipated sales revenue (price of the sales stock)."""
    resources = np.zeros(ind.size)
    for stock_type in (StockType.MONEY, StockType.SALES):
        owner_idx = stock_per_owner(stk, OwnerType.INDUSTRY, stock_type, ind.size)
        held = owner_idx >= 0
        resources[held] += stk.price[owner_idx[held]]
    return resources


def compute_productive_demand(
    stk: Stock,
    com: Commodity,
    ind: Industry,
    *,
    reporter: Reporter,
    eps: float,
    precision: int,
) -> None:
    """
    Register the replenishment demand of every productive stock.

    See Also
    --------
    capsim.phases.exchange.Demand : Full documentation
    """
    info_enabled = log.isEnabledFor(logging.INFO)
    if info_enabled:
        log.info("--- Computing Productive Demand ---")

    stk.replenishment_demand[:] = 0.0
    idx = _productive(stk)

    demand = replenishment_need(stk, com, ind, idx)
    cost = replenishment_cost(stk, com, ind, idx, demand)
    resources = industry_resources(stk, ind)

    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"  Proposed output:\n{np.array2string(ind.output, precision=2)}")
        log.debug(f"  Replenishment cost:\n{np.array2string(cost, precision=2)}")
        log.debug(f"  Resources available:\n{np.array2string(resources, precision=2)}")

    # single-pass proportional scale-back, independently per industry
    short = cost > resources + eps
    if short.any():
        scale = np.ones(ind.size)
        scale[short] = resources[short] / cost[short]
        if info_enabled:
            log.info(
                f"  {short.sum()} industries cannot finance their output; "
                f"scaling back by {np.array2string(scale[short], precision=4)}"
            )
        ind.output[:] = rnd_down(ind.output * scale, precision)

        demand = replenishment_need(stk, com, ind, idx)
        cost = replenishment_cost(stk, com, ind, idx, demand)
        for j in np.flatnonzero(cost > resources + eps):
            reporter.report_warning(
                f"Industry '{ind.name[j]}' is unable to finance output "
                f"{ind.output[j]:,.4f}: cost {cost[j]:,.4f} exceeds resources "
                f"{resources[j]:,.4f}"
            )

    stk.replenishment_demand[idx] = rnd(demand, precision)

    if info_enabled:
        log.info(
            f"  Total productive cost: {cost.sum():,.2f}, "
            f"total resources: {resources.sum():,.2f}"
        )
        log.info("--- Productive Demand complete ---")


def register_labour_response(
    stk: Stock,
    com: Commodity,
    cls: SocialClass,
    gl: Global,
    *,
    reporter: Reporter,
    eps: float,
    precision: int,
) -> None:
    """
    Adjust labour-power supply to demand, then set class revenues.

    See Also
    --------
    capsim.phases.exchange.Demand : Full documentation
    """
    info_enabled = log.isEnabledFor(logging.INFO)
    if info_enabled:
        log.info("--- Registering Labour Supply Response ---")

    lp = labour_power(com)
    if lp < 0:
        reporter.report_warning(
            "No labour power in this economy; supply cannot respond to demand"
        )
    else:
        sellers = np.flatnonzero(
            (stk.owner_type == OwnerType.SOCIAL_CLASS)
            & (stk.stock_type == StockType.SALES)
            & (stk.commodity == lp)
        )
        # overstocked buyers net out against the others
        demand = float(stk.replenishment_demand[stk.commodity == lp].sum())
        supply = float(stk.quantity[sellers].sum())
        if info_enabled:
            log.info(
                f"  Labour power demand: {demand:,.2f}, supply: {supply:,.2f} "
                f"({gl.labour_supply_response.value})"
            )

        if gl.labour_supply_response is LabourResponse.FLEXIBLE and demand > supply + eps:
            if supply <= eps:
                reporter.report_warning(
                    f"Labour power demand {demand:,.4f} cannot be met: "
                    "nobody supplies labour power"
                )
            else:
                ratio = demand / supply
                for i in sellers:
                    modify_to(stk, com, i, stk.quantity[i] * ratio, precision=precision)
                if info_enabled:
                    log.info(f"  Labour supply scaled up by {ratio:,.4f}")

    # revenue = expected wage (price of the labour-power sales stock) + carried
    sales_idx = stock_per_owner(stk, OwnerType.SOCIAL_CLASS, StockType.SALES, cls.size)
    wage = np.zeros(cls.size)
    sells = sales_idx >= 0
    wage[sells] = stk.price[sales_idx[sells]]
    cls.revenue[:] = rnd(cls.revenue + wage, precision)

    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"  Class revenues:\n{np.array2string(cls.revenue, precision=2)}")
    if info_enabled:
        log.info("--- Labour Supply Response complete ---")


def compute_social_class_demand(
    stk: Stock, cls: SocialClass, *, precision: int
) -> None:
    """
    Demand of every consumption stock: class revenue times its coefficient.

    See Also
    --------
    capsim.phases.exchange.Demand : Full documentation
    """
    idx = np.flatnonzero(
        (stk.owner_type == OwnerType.SOCIAL_CLASS)
        & (stk.stock_type == StockType.CONSUMPTION)
    )
    stk.replenishment_demand[idx] = rnd(
        cls.revenue[stk.owner[idx]] * stk.consumption_coefficient[idx], precision
    )
    if log.isEnabledFor(logging.INFO):
        log.info(
            f"  Social class consumption demand: "
            f"{stk.replenishment_demand[idx].sum():,.2f}"
        )
