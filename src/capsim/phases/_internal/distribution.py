"""
System functions for the distribution super-phase.

See Also
--------
capsim.phases.distribution.Revenue
capsim.phases.distribution.Accumulate
"""

from __future__ import annotations

import numpy as np

from capsim import logging
from capsim.economy import Global
from capsim.errors import TransferError
from capsim.helpers import money_commodity, money_stock, stock_per_owner
from capsim.ops import rnd, rnd_down, transfer
from capsim.phases._internal.accounting import (
    current_capital,
    persist_profit,
    set_capitals,
)
from capsim.policies import DistributionPolicy
from capsim.reporting import Reporter
from capsim.roles import (
    Commodity,
    Industry,
    OwnerType,
    SocialClass,
    Stock,
    StockType,
)
from capsim.typing import Float1D

log = logging.getLogger(__name__)


def distribute_revenue(
    stk: Stock,
    com: Commodity,
    ind: Industry,
    cls: SocialClass,
    gl: Global,
    policy: DistributionPolicy,
    *,
    reporter: Reporter,
    eps: float,
    precision: int,
) -> Float1D:
    """
    Pay each industry's distributed profit to the property-owning classes.

    Returns the payout of each industry.

    See Also
    --------
    capsim.phases.distribution.Revenue : Full documentation
    """
    info_enabled = log.isEnabledFor(logging.INFO)
    if info_enabled:
        log.info("--- Distributing Revenue ---")

    persist_profit(stk, ind)
    payout = np.asarray(rnd(policy.payout(ind.profit, gl), precision), dtype=np.float64)

    ind_money = stock_per_owner(stk, OwnerType.INDUSTRY, StockType.MONEY, ind.size)
    cash = np.where(ind_money >= 0, stk.price[np.maximum(ind_money, 0)], 0.0)
    over = payout > cash + eps
    for j in np.flatnonzero(over):
        reporter.report_warning(
            f"Industry '{ind.name[j]}' should pay out {payout[j]:,.4f} "
            f"but holds only {cash[j]:,.4f} money"
        )
    payout[over] = rnd_down(np.maximum(cash[over], 0.0), precision)

    total_share = float(cls.property_share.sum())
    if total_share <= 0.0:
        if payout.sum() > eps:
            reporter.report_warning(
                "No social class holds property; profit stays with industries"
            )
        payout[:] = 0.0
        return payout

    share = cls.property_share / total_share
    recipients = np.flatnonzero(share > 0.0)
    money_unit = com.unit_price[money_commodity(com)]

    for j in np.flatnonzero(payout > eps):
        for k in recipients:
            amount = float(rnd(payout[j] * share[k], precision))
            target = money_stock(stk, OwnerType.SOCIAL_CLASS, int(k))
            try:
                transfer(
                    stk, com, int(ind_money[j]), target, amount / money_unit,
                    eps=eps, precision=precision,
                )
            except TransferError as exc:
                reporter.report_warning(
                    f"Industry '{ind.name[j]}' could not pay {amount:,.4f} to "
                    f"class '{cls.name[k]}': {exc}"
                )
                continue
            cls.revenue[k] = rnd(cls.revenue[k] + amount, precision)

    if info_enabled:
        log.info(
            f"  Profit:\n{np.array2string(ind.profit, precision=2)}\n"
            f"  Paid out:\n{np.array2string(payout, precision=2)}"
        )
        log.info("--- Revenue complete ---")
    return payout


def unit_cost(stk: Stock, com: Commodity, ind: Industry) -> Float1D:
    """Money cost of one unit of output: sum of coefficient x turnover x price."""
    idx = np.flatnonzero(
        (stk.owner_type == OwnerType.INDUSTRY) & (stk.stock_type == StockType.PRODUCTIVE)
    )
    c = stk.commodity[idx]
    cost = stk.production_coefficient[idx] * com.turnover_time[c] * com.unit_price[c]
    return np.bincount(stk.owner[idx], weights=cost, minlength=ind.size)


def accumulate(
    stk: Stock,
    com: Commodity,
    ind: Industry,
    *,
    reporter: Reporter,
    precision: int,
) -> None:
    """
    Invest retained profit in next period's output, then reset capitals.

    See Also
    --------
    capsim.phases.distribution.Accumulate : Full documentation
    """
    retained = np.maximum(current_capital(stk, ind) - ind.initial_capital, 0.0)
    cost = unit_cost(stk, com, ind)

    free = cost <= 0.0
    for j in np.flatnonzero(free & (retained > 0.0)):
        reporter.report_warning(
            f"Industry '{ind.name[j]}' has no input costs; retained profit "
            f"{retained[j]:,.4f} is not invested"
        )
    growth = np.where(free, 0.0, retained / np.where(free, 1.0, cost))
    ind.output[:] = rnd(ind.output + growth, precision)
    set_capitals(stk, ind)

    if log.isEnabledFor(logging.INFO):
        log.info(
            f"  Retained profit:\n{np.array2string(retained, precision=2)}\n"
            f"  Next output:\n{np.array2string(ind.output, precision=2)}"
        )
