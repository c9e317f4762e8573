"""
Aggregate bookkeeping shared by the phases and the session.

See Also
--------
capsim.simulation.Simulation.check_invariants
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from capsim import logging
from capsim.roles import Commodity, Industry, OwnerType, SocialClass, Stock, StockType
from capsim.typing import Float1D

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CommodityTotals:
    """Per-commodity totals over every stock (index = commodity id)."""

    quantity: Float1D
    value: Float1D
    price: Float1D
    supply: Float1D  # sales stocks only
    demand: Float1D  # net replenishment demand; overstocked holders count negative


def commodity_totals(stk: Stock, com: Commodity, *, precision: int) -> CommodityTotals:
    """
    Sum quantity, value, price, supply and demand per commodity.

    Pure function of the stocks; calling it twice without intervening
    mutation returns identical totals.
    """
    n = com.size
    c = stk.commodity
    sales = stk.stock_type == StockType.SALES

    def total(weights: Float1D) -> Float1D:
        return np.round(np.bincount(c, weights=weights, minlength=n), precision)

    return CommodityTotals(
        quantity=total(stk.quantity),
        value=total(stk.value),
        price=total(stk.price),
        supply=total(np.where(sales, stk.quantity, 0.0)),
        demand=total(stk.replenishment_demand),
    )


def current_capital(stk: Stock, ind: Industry) -> Float1D:
    """Price of everything each industry owns (money, sales and inputs)."""
    owned = stk.owner_type == OwnerType.INDUSTRY
    return np.bincount(stk.owner[owned], weights=stk.price[owned], minlength=ind.size)


def set_capitals(stk: Stock, ind: Industry) -> None:
    """Snapshot current capital as the initial capital of the coming period."""
    ind.initial_capital[:] = current_capital(stk, ind)
    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"  Initial capital set:\n"
            f"{np.array2string(ind.initial_capital, precision=2)}"
        )


def persist_profit(stk: Stock, ind: Industry) -> None:
    """Record profit since the start of the period."""
    ind.profit[:] = current_capital(stk, ind) - ind.initial_capital


def check_invariants(
    stk: Stock, com: Commodity, *, eps: float, precision: int
) -> list[str]:
    """
    Check ``total value == total quantity * unit value`` for every commodity.

    Violations are logged at ERROR level and returned; they never abort
    the simulation.
    """
    totals = commodity_totals(stk, com, precision=precision)
    expected = totals.quantity * com.unit_value
    bad = np.flatnonzero(np.abs(totals.value - expected) > eps * np.maximum(1.0, expected))
    violations = []
    for c in bad:
        msg = (
            f"Commodity '{com.name[c]}': total value {totals.value[c]:,.4f} != "
            f"quantity {totals.quantity[c]:,.4f} x unit value {com.unit_value[c]:,.4f}"
        )
        log.error(msg)
        violations.append(str(com.name[c]))
    return violations


def negative_money_owners(
    stk: Stock, ind: Industry, cls: SocialClass, *, eps: float
) -> list[str]:
    """Names of owners whose money stock is below ``-eps``."""
    idx = np.flatnonzero((stk.stock_type == StockType.MONEY) & (stk.quantity < -eps))
    names = []
    for i in idx:
        owners = ind.name if stk.owner_type[i] == OwnerType.INDUSTRY else cls.name
        names.append(f"{owners[stk.owner[i]]} ({stk.quantity[i]:,.4f})")
    return names
