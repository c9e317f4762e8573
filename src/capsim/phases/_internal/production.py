"""
System functions for the production super-phase.

See Also
--------
capsim.phases.production.IndustriesProduce
capsim.phases.production.Prices
capsim.phases.production.ClassesReproduce
"""

from __future__ import annotations

import numpy as np

from capsim import logging
from capsim.economy import Global
from capsim.helpers import labour_power, sales_stock
from capsim.ops import add_output, modify_by, modify_to, recalculate_aggregates, rnd
from capsim.phases._internal.accounting import commodity_totals, persist_profit
from capsim.reporting import Reporter
from capsim.roles import (
    Commodity,
    Industry,
    Origin,
    OwnerType,
    SocialClass,
    Stock,
    StockType,
)

log = logging.getLogger(__name__)


def industries_produce(
    stk: Stock,
    com: Commodity,
    ind: Industry,
    gl: Global,
    *,
    reporter: Reporter,
    eps: float,
    precision: int,
) -> None:
    """
    Use up productive stocks and add the output to each industry's sales stock.

    See Also
    --------
    capsim.phases.production.IndustriesProduce : Full documentation
    """
    info_enabled = log.isEnabledFor(logging.INFO)
    if info_enabled:
        log.info("--- Industries Produce ---")

    industrial = com.origin == Origin.INDUSTRIALLY_PRODUCED
    com.stock_used_up[industrial] = 0.0
    com.stock_produced[industrial] = 0.0
    stk.stock_used_up[:] = 0.0

    for j in range(ind.size):
        out = ind.commodity[j]
        sales = sales_stock(stk, OwnerType.INDUSTRY, j)
        if sales < 0:
            reporter.report_warning(f"Industry '{ind.name[j]}' has no sales stock")
            continue

        inputs = np.flatnonzero(
            (stk.owner_type == OwnerType.INDUSTRY)
            & (stk.owner == j)
            & (stk.stock_type == StockType.PRODUCTIVE)
        )
        value_added = 0.0
        for i in inputs:
            c = stk.commodity[i]
            used = float(rnd(ind.output[j] * stk.production_coefficient[i], precision))
            if com.origin[c] == Origin.SOCIALLY_PRODUCED:
                value_added += used * gl.melt
            else:
                value_added += used * com.unit_value[c]

            if stk.quantity[i] < used - eps:
                reporter.report_warning(
                    f"Industry '{ind.name[j]}' uses {used:,.4f} '{com.name[c]}' "
                    f"but holds only {stk.quantity[i]:,.4f}"
                )
            modify_by(stk, com, i, -used, precision=precision)
            stk.stock_used_up[i] = used
            com.stock_used_up[c] += used

        produced = float(rnd(ind.output[j], precision))
        add_output(stk, sales, produced, value_added, precision=precision)
        com.stock_produced[out] += produced

        if log.isEnabledFor(logging.DEBUG):
            log.debug(
                f"  '{ind.name[j]}' produced {produced:,.4f} '{com.name[out]}' "
                f"adding value {value_added:,.4f}"
            )

    com.surplus_product[industrial] = np.round(
        com.stock_produced[industrial] - com.stock_used_up[industrial], precision
    )
    persist_profit(stk, ind)

    if info_enabled:
        log.info(
            f"  Output by industry:\n{np.array2string(ind.output, precision=2)}"
        )
        log.info(
            f"  Surplus product:\n"
            f"{np.array2string(com.surplus_product, precision=2)}"
        )
        log.info("--- Industries Produce complete ---")


def recompute_unit_values(
    stk: Stock, com: Commodity, *, eps: float, precision: int
) -> None:
    """
    Re-derive unit values and prices of industrial commodities from totals.

    See Also
    --------
    capsim.phases.production.Prices : Full documentation
    """
    totals = commodity_totals(stk, com, precision=precision)
    mask = (com.origin == Origin.INDUSTRIALLY_PRODUCED) & (totals.quantity > eps)
    com.unit_value[mask] = np.round(totals.value[mask] / totals.quantity[mask], precision)
    com.unit_price[mask] = np.round(totals.price[mask] / totals.quantity[mask], precision)
    recalculate_aggregates(stk, com, precision=precision)

    if log.isEnabledFor(logging.INFO):
        log.info(
            f"  Unit values:\n{np.array2string(com.unit_value, precision=4)}\n"
            f"  Unit prices:\n{np.array2string(com.unit_price, precision=4)}"
        )


def classes_reproduce(
    stk: Stock, com: Commodity, cls: SocialClass, *, precision: int
) -> None:
    """
    Classes consume their goods and regenerate their labour power.

    See Also
    --------
    capsim.phases.production.ClassesReproduce : Full documentation
    """
    info_enabled = log.isEnabledFor(logging.INFO)
    if info_enabled:
        log.info("--- Classes Reproduce ---")

    social = com.origin == Origin.SOCIALLY_PRODUCED
    com.stock_used_up[social] = 0.0
    com.stock_produced[social] = 0.0

    consumption = np.flatnonzero(
        (stk.owner_type == OwnerType.SOCIAL_CLASS)
        & (stk.stock_type == StockType.CONSUMPTION)
    )
    consumed = 0.0
    for i in consumption:
        c = stk.commodity[i]
        used = float(rnd(stk.quantity[i] / com.turnover_time[c], precision))
        modify_by(stk, com, i, -used, precision=precision)
        stk.stock_used_up[i] = used
        com.stock_used_up[c] += used
        consumed += used

    lp = labour_power(com)
    if lp >= 0:
        sellers = np.flatnonzero(
            (stk.owner_type == OwnerType.SOCIAL_CLASS)
            & (stk.stock_type == StockType.SALES)
            & (stk.commodity == lp)
        )
        for i in sellers:
            k = stk.owner[i]
            modify_to(
                stk, com, i,
                cls.population[k] * cls.participation_ratio[k],
                precision=precision,
            )
            com.stock_produced[lp] += stk.quantity[i]

    if info_enabled:
        log.info(
            f"  Consumed: {consumed:,.2f}, "
            f"labour power available: "
            f"{com.stock_produced[lp] if lp >= 0 else 0.0:,.2f}"
        )
        log.info("--- Classes Reproduce complete ---")
