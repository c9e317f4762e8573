"""
Stock mutation primitives.

Every change to a stock's quantity goes through one of these functions so
that value and price stay proportional to quantity:

- :func:`modify_to` / :func:`modify_by` set or shift the quantity and
  re-derive value and price from the commodity's unit value and price.
- :func:`add_output` is the value-only mutation used by production: the
  sales stock grows by the output and by the value added, without
  re-deriving value from the (not yet updated) unit value.
- :func:`transfer` and :func:`purchase` move goods (and money) between
  stocks, validating every leg before applying any of them.

Examples
--------
>>> ops.modify_by(stk, com, i, -10.0, precision=4)
>>> spent = ops.purchase(stk, com, seller=3, buyer=7,
...                      seller_money=0, buyer_money=5,
...                      quantity=10.0, eps=1e-4, precision=4)
"""

from __future__ import annotations

import numpy as np

from capsim.errors import TransferError
from capsim.roles import Commodity, Stock
from capsim.typing import Float1D

__all__ = [
    "rnd",
    "rnd_down",
    "modify_to",
    "modify_by",
    "add_output",
    "recalculate_aggregates",
    "transfer",
    "purchase",
]


def rnd(x: float | Float1D, precision: int) -> float | Float1D:
    """Round to the model's fixed decimal precision."""
    if np.isscalar(x):
        return round(float(x), precision)  # type: ignore[arg-type]
    return np.round(x, precision)


def rnd_down(x: Float1D, precision: int) -> Float1D:
    """Round down to the fixed precision; a scaled-back value never exceeds its cap."""
    scale = 10.0**precision
    return np.floor(np.asarray(x) * scale + 1e-9) / scale


def modify_to(
    stk: Stock, com: Commodity, i: int, quantity: float, *, precision: int
) -> None:
    """Set stock ``i`` to ``quantity`` and re-derive its value and price."""
    c = stk.commodity[i]
    q = rnd(quantity, precision)
    stk.quantity[i] = q
    stk.value[i] = rnd(q * com.unit_value[c], precision)
    stk.price[i] = rnd(q * com.unit_price[c], precision)


def modify_by(
    stk: Stock, com: Commodity, i: int, delta: float, *, precision: int
) -> None:
    """Shift stock ``i`` by ``delta`` and re-derive its value and price."""
    modify_to(stk, com, i, stk.quantity[i] + delta, precision=precision)


def add_output(
    stk: Stock, i: int, quantity: float, value_added: float, *, precision: int
) -> None:
    """
    Grow sales stock ``i`` by freshly produced output.

    Quantity grows by ``quantity``; value and price both grow by
    ``value_added`` (goods leave production priced at their value).
    """
    stk.quantity[i] = rnd(stk.quantity[i] + quantity, precision)
    stk.value[i] = rnd(stk.value[i] + value_added, precision)
    stk.price[i] = rnd(stk.price[i] + value_added, precision)


def recalculate_aggregates(stk: Stock, com: Commodity, *, precision: int) -> None:
    """
    Re-derive every stock's value and price from its quantity.

    Idempotent: a second call without intervening mutation changes nothing.
    """
    c = stk.commodity
    stk.value[:] = np.round(stk.quantity * com.unit_value[c], precision)
    stk.price[:] = np.round(stk.quantity * com.unit_price[c], precision)


def _check_available(stk: Stock, i: int, quantity: float, eps: float, what: str) -> None:
    if i < 0:
        raise TransferError(f"No {what} stock to draw {quantity:,.4f} from")
    if stk.quantity[i] < quantity - eps:
        raise TransferError(
            f"{what.capitalize()} stock {i} holds {stk.quantity[i]:,.4f}, "
            f"cannot give {quantity:,.4f}"
        )


def transfer(
    stk: Stock,
    com: Commodity,
    source: int,
    target: int,
    quantity: float,
    *,
    eps: float,
    precision: int,
) -> None:
    """
    Move ``quantity`` units from stock ``source`` to stock ``target``.

    Raises
    ------
    TransferError
        If either stock is missing, the commodities differ, or the source
        holds less than ``quantity`` (beyond ``eps``).
    """
    if target < 0:
        raise TransferError("No target stock to receive the transfer")
    _check_available(stk, source, quantity, eps, "source")
    if stk.commodity[source] != stk.commodity[target]:
        raise TransferError(
            f"Stocks {source} and {target} hold different commodities"
        )
    modify_by(stk, com, source, -quantity, precision=precision)
    modify_by(stk, com, target, quantity, precision=precision)


def purchase(
    stk: Stock,
    com: Commodity,
    *,
    seller: int,
    buyer: int,
    seller_money: int,
    buyer_money: int,
    quantity: float,
    eps: float,
    precision: int,
) -> float:
    """
    Exchange ``quantity`` goods for ``quantity * unit price`` money.

    Goods move from the seller's sales stock to the buyer's stock, money
    from the buyer's money stock to the seller's. Both legs are checked
    before either is applied, so a failed purchase changes nothing.

    Returns
    -------
    float
        Money paid.

    Raises
    ------
    TransferError
        If a stock is missing or the seller lacks goods / the buyer lacks
        money (beyond ``eps``).
    """
    if buyer < 0 or seller_money < 0 or buyer_money < 0:
        raise TransferError("Purchase is missing a buyer or money stock")
    _check_available(stk, seller, quantity, eps, "sales")
    if stk.commodity[seller] != stk.commodity[buyer]:
        raise TransferError(
            f"Seller stock {seller} and buyer stock {buyer} hold different commodities"
        )
    amount = float(rnd(quantity * com.unit_price[stk.commodity[seller]], precision))
    money_units = amount / com.unit_price[stk.commodity[buyer_money]]
    _check_available(stk, buyer_money, money_units, eps, "money")

    modify_by(stk, com, seller, -quantity, precision=precision)
    modify_by(stk, com, buyer, quantity, precision=precision)
    modify_by(stk, com, buyer_money, -money_units, precision=precision)
    modify_by(stk, com, seller_money, money_units, precision=precision)
    return amount
