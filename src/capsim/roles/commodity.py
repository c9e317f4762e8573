# src/capsim/roles/commodity.py
from enum import IntEnum

from capsim.core.decorators import role
from capsim.typing import Float1D, Int1D, Str1D


class Origin(IntEnum):
    """Where a commodity comes from."""

    INDUSTRIALLY_PRODUCED = 0
    SOCIALLY_PRODUCED = 1


class Function(IntEnum):
    """What a commodity is used for."""

    PRODUCTIVE_INPUT = 0
    CONSUMER_GOOD = 1
    MONEY = 2


@role
class Commodity:
    """
    Commodity (use value) role.

    One entry per type of good, including money and labour power.
    ``origin`` and ``function`` hold :class:`Origin` / :class:`Function`
    codes. The used-up and produced accumulators are reset by the
    production phases; ``surplus_product`` is produced minus used up.
    ``allocation_share`` is the rationing share set by the constrain phase
    (1.0 when supply covers demand).
    """

    name: Str1D
    origin: Int1D
    function: Int1D
    unit_value: Float1D
    unit_price: Float1D
    turnover_time: Float1D
    stock_used_up: Float1D
    stock_produced: Float1D
    surplus_product: Float1D
    allocation_share: Float1D
