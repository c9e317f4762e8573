"""
System functions for the constrain phase.

See Also
--------
capsim.phases.exchange.Constrain : Phase class (primary documentation source)
"""

from __future__ import annotations

import numpy as np

from capsim import logging
from capsim.ops import rnd, rnd_down
from capsim.phases._internal.demand import replenishment_need
from capsim.roles import Commodity, Industry, OwnerType, Stock, StockType
from capsim.typing import Float1D

log = logging.getLogger(__name__)


def compute_allocation_shares(stk: Stock, com: Commodity, *, eps: float) -> Float1D:
    """
    Share of its demand each commodity can satisfy.

    share = supply / demand where net demand exceeds supply (+eps),
    else 1. Stored on ``com.allocation_share`` and returned.
    """
    n = com.size
    c = stk.commodity
    sales = stk.stock_type == StockType.SALES
    supply = np.bincount(c, weights=np.where(sales, stk.quantity, 0.0), minlength=n)
    demand = np.bincount(c, weights=stk.replenishment_demand, minlength=n)

    share = np.ones(n)
    short = demand > supply + eps
    share[short] = np.maximum(supply[short], 0.0) / demand[short]
    com.allocation_share[:] = share

    if log.isEnabledFor(logging.INFO):
        for k in np.flatnonzero(short):
            log.info(
                f"  '{com.name[k]}' is scarce: demand {demand[k]:,.2f}, "
                f"supply {supply[k]:,.2f} -> allocation share {share[k]:.4f}"
            )
    return share


def constrain_industries(
    stk: Stock,
    com: Commodity,
    ind: Industry,
    *,
    eps: float,
    precision: int,
) -> None:
    """
    Scale each industry's output to its scarcest input, then re-register demand.

    The binding share is the smallest allocation share among the inputs
    the industry actually demands. Demand recomputed at the reduced output
    never exceeds the rationed amount.

    See Also
    --------
    capsim.phases.exchange.Constrain : Full documentation
    """
    idx = np.flatnonzero(
        (stk.owner_type == OwnerType.INDUSTRY) & (stk.stock_type == StockType.PRODUCTIVE)
    )
    wanted = stk.replenishment_demand[idx] > eps
    input_share = np.where(wanted, com.allocation_share[stk.commodity[idx]], 1.0)

    binding = np.ones(ind.size)
    np.minimum.at(binding, stk.owner[idx], input_share)

    rationed = binding < 1.0 - eps
    if not rationed.any():
        return

    ind.output[rationed] = rnd_down(ind.output[rationed] * binding[rationed], precision)
    if log.isEnabledFor(logging.INFO):
        for j in np.flatnonzero(rationed):
            log.info(
                f"  Industry '{ind.name[j]}' output constrained by "
                f"{binding[j]:.4f} to {ind.output[j]:,.2f}"
            )

    affected = np.isin(stk.owner[idx], np.flatnonzero(rationed))
    sub = idx[affected]
    stk.replenishment_demand[sub] = rnd(
        replenishment_need(stk, com, ind, sub), precision
    )


def constrain_social_classes(
    stk: Stock, com: Commodity, *, precision: int
) -> None:
    """
    Scale every positive consumption demand by its commodity's allocation share.

    See Also
    --------
    capsim.phases.exchange.Constrain : Full documentation
    """
    idx = np.flatnonzero(
        (stk.owner_type == OwnerType.SOCIAL_CLASS)
        & (stk.stock_type == StockType.CONSUMPTION)
        & (stk.replenishment_demand > 0.0)
    )
    share = com.allocation_share[stk.commodity[idx]]
    stk.replenishment_demand[idx] = rnd_down(
        stk.replenishment_demand[idx] * share, precision
    )
