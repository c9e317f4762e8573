# src/capsim/roles/stock.py
from enum import IntEnum

from capsim.core.decorators import role
from capsim.typing import Float1D, Idx1D, Int1D


class OwnerType(IntEnum):
    INDUSTRY = 0
    SOCIAL_CLASS = 1


class StockType(IntEnum):
    MONEY = 0
    PRODUCTIVE = 1
    SALES = 2
    CONSUMPTION = 3


@role
class Stock:
    """
    Stock role: a quantity of one commodity held by one owner for one purpose.

    ``owner`` indexes industries or social classes depending on
    ``owner_type``; ``commodity`` indexes the Commodity role. ``value`` and
    ``price`` are kept proportional to quantity at the commodity's unit
    value and unit price by :mod:`capsim.ops`.

    ``production_coefficient`` is set on productive stocks (units of input
    per unit of output), ``consumption_coefficient`` on consumption stocks
    (share of revenue spent on the good). ``replenishment_demand`` is
    recomputed every period and may be negative when overstocked.
    """

    owner: Idx1D
    owner_type: Int1D
    commodity: Idx1D
    stock_type: Int1D
    quantity: Float1D
    value: Float1D
    price: Float1D
    production_coefficient: Float1D
    consumption_coefficient: Float1D
    replenishment_demand: Float1D
    stock_used_up: Float1D
