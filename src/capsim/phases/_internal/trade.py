"""
System functions for the trade phase.

See Also
--------
capsim.phases.exchange.Trade : Phase class (primary documentation source)
"""

from __future__ import annotations

import numpy as np

from capsim import logging
from capsim.errors import TransferError
from capsim.helpers import (
    first_class_seller,
    money_stock,
    owner_name,
    producer_of,
    sales_stock,
)
from capsim.ops import purchase, rnd, rnd_down
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


def find_seller(stk: Stock, com: Commodity, ind: Industry, c: int, *, eps: float) -> int:
    """
    Sales stock that sells commodity ``c`` (-1 if nobody does).

    Industrially produced goods are sold by their producer; socially
    produced goods by the first social class offering a positive quantity.
    """
    if com.origin[c] == Origin.INDUSTRIALLY_PRODUCED:
        j = producer_of(ind, c)
        return sales_stock(stk, OwnerType.INDUSTRY, j) if j >= 0 else -1
    return first_class_seller(stk, c, eps)


def _buy(
    stk: Stock,
    com: Commodity,
    ind: Industry,
    cls: SocialClass,
    *,
    seller: int,
    buyer: int,
    quantity: float,
    reporter: Reporter,
    eps: float,
    precision: int,
) -> float:
    """Run one purchase; report and skip it when it cannot settle."""
    buyer_money = money_stock(stk, OwnerType(stk.owner_type[buyer]), int(stk.owner[buyer]))
    seller_money = money_stock(
        stk, OwnerType(stk.owner_type[seller]), int(stk.owner[seller])
    )
    try:
        amount = purchase(
            stk,
            com,
            seller=seller,
            buyer=buyer,
            seller_money=seller_money,
            buyer_money=buyer_money,
            quantity=quantity,
            eps=eps,
            precision=precision,
        )
    except TransferError as exc:
        reporter.report_warning(
            f"{owner_name(stk, ind, cls, buyer)} could not buy "
            f"{quantity:,.4f} {com.name[stk.commodity[buyer]]}: {exc}"
        )
        return 0.0

    stk.replenishment_demand[buyer] = rnd(
        stk.replenishment_demand[buyer] - quantity, precision
    )
    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            f"    {owner_name(stk, ind, cls, buyer)} bought {quantity:,.4f} "
            f"{com.name[stk.commodity[buyer]]} from "
            f"{owner_name(stk, ind, cls, seller)} for {amount:,.4f}"
        )
    return amount


def productive_trade(
    stk: Stock,
    com: Commodity,
    ind: Industry,
    cls: SocialClass,
    *,
    reporter: Reporter,
    eps: float,
    precision: int,
) -> float:
    """
    Buy every industry's productive inputs.

    Returns the money that changed hands.

    See Also
    --------
    capsim.phases.exchange.Trade : Full documentation
    """
    info_enabled = log.isEnabledFor(logging.INFO)
    if info_enabled:
        log.info("--- Productive Trade ---")

    idx = np.flatnonzero(
        (stk.owner_type == OwnerType.INDUSTRY)
        & (stk.stock_type == StockType.PRODUCTIVE)
        & (stk.replenishment_demand > eps)
    )
    spent = 0.0
    for i in idx:
        c = int(stk.commodity[i])
        seller = find_seller(stk, com, ind, c, eps=eps)
        if seller < 0:
            reporter.report_warning(
                f"Nobody sells '{com.name[c]}' to {owner_name(stk, ind, cls, i)}"
            )
            continue

        # a seller short of the full demand fails the whole purchase
        spent += _buy(
            stk, com, ind, cls,
            seller=seller, buyer=int(i), quantity=float(stk.replenishment_demand[i]),
            reporter=reporter, eps=eps, precision=precision,
        )

    if info_enabled:
        log.info(f"  {idx.size} productive purchases worth {spent:,.2f}")
        log.info("--- Productive Trade complete ---")
    return spent


def consumption_trade(
    stk: Stock,
    com: Commodity,
    ind: Industry,
    cls: SocialClass,
    *,
    reporter: Reporter,
    eps: float,
    precision: int,
) -> float:
    """
    Social classes buy their consumption goods out of revenue.

    Returns the money spent.

    See Also
    --------
    capsim.phases.exchange.Trade : Full documentation
    """
    info_enabled = log.isEnabledFor(logging.INFO)
    if info_enabled:
        log.info("--- Consumption Trade ---")

    spent = 0.0
    for k in range(cls.size):
        money = money_stock(stk, OwnerType.SOCIAL_CLASS, k)
        cash = float(stk.price[money]) if money >= 0 else 0.0
        if cls.revenue[k] > cash + eps:
            reporter.report_warning(
                f"Class '{cls.name[k]}' has revenue {cls.revenue[k]:,.4f} "
                f"but only {cash:,.4f} money"
            )

        idx = np.flatnonzero(
            (stk.owner_type == OwnerType.SOCIAL_CLASS)
            & (stk.owner == k)
            & (stk.stock_type == StockType.CONSUMPTION)
            & (stk.replenishment_demand > eps)
        )
        for i in idx:
            c = int(stk.commodity[i])
            seller = find_seller(stk, com, ind, c, eps=eps)
            if seller < 0:
                reporter.report_warning(
                    f"Nobody sells consumer good '{com.name[c]}' to class "
                    f"'{cls.name[k]}'"
                )
                continue

            quantity = float(stk.replenishment_demand[i])
            cash = float(stk.price[money]) if money >= 0 else 0.0
            affordable = float(rnd_down(cash / com.unit_price[c], precision))
            if quantity > affordable + eps:
                reporter.report_warning(
                    f"Class '{cls.name[k]}' cannot afford {quantity:,.4f} "
                    f"'{com.name[c]}'; buying {affordable:,.4f}"
                )
                quantity = affordable
            if quantity <= eps:  # reported above
                continue

            amount = _buy(
                stk, com, ind, cls,
                seller=seller, buyer=int(i), quantity=quantity,
                reporter=reporter, eps=eps, precision=precision,
            )
            cls.revenue[k] = rnd(max(cls.revenue[k] - amount, 0.0), precision)
            spent += amount

    if info_enabled:
        log.info(f"  Consumption spending: {spent:,.2f}")
        log.info("--- Consumption Trade complete ---")
    return spent
