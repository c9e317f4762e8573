# src/capsim/helpers.py
"""
Lookup queries over the entity roles.

All functions are read-only; indices are positions within the role
arrays of the current version, ``-1`` meaning "not found".
"""

from __future__ import annotations

import numpy as np

from capsim.roles import (
    Commodity,
    Function,
    Industry,
    Origin,
    OwnerType,
    SocialClass,
    Stock,
    StockType,
)
from capsim.typing import Idx1D


def commodity_index(com: Commodity, name: str) -> int:
    """Index of the commodity called ``name`` (-1 if absent)."""
    hits = np.flatnonzero(com.name == name)
    return int(hits[0]) if hits.size else -1


def money_commodity(com: Commodity) -> int:
    """Index of the commodity that functions as money (-1 if absent)."""
    hits = np.flatnonzero(com.function == Function.MONEY)
    return int(hits[0]) if hits.size else -1


def labour_power(com: Commodity) -> int:
    """
    Index of labour power: the first socially produced productive input.

    Returns -1 when the economy has no such commodity.
    """
    mask = (com.origin == Origin.SOCIALLY_PRODUCED) & (
        com.function == Function.PRODUCTIVE_INPUT
    )
    hits = np.flatnonzero(mask)
    return int(hits[0]) if hits.size else -1


def stock_index(
    stk: Stock,
    owner_type: OwnerType,
    owner: int,
    commodity: int,
    stock_type: StockType,
) -> int:
    """Index of the stock with the given identity (-1 if absent)."""
    mask = (
        (stk.owner_type == owner_type)
        & (stk.owner == owner)
        & (stk.commodity == commodity)
        & (stk.stock_type == stock_type)
    )
    hits = np.flatnonzero(mask)
    return int(hits[0]) if hits.size else -1


def owner_stocks(
    stk: Stock,
    owner_type: OwnerType,
    owner: int,
    stock_type: StockType | None = None,
) -> Idx1D:
    """Indices of every stock held by one owner, optionally of one type."""
    mask = (stk.owner_type == owner_type) & (stk.owner == owner)
    if stock_type is not None:
        mask &= stk.stock_type == stock_type
    return np.flatnonzero(mask)


def stock_per_owner(
    stk: Stock,
    owner_type: OwnerType,
    stock_type: StockType,
    n_owners: int,
) -> Idx1D:
    """
    Vector mapping each owner to its (first) stock of ``stock_type``.

    Owners without such a stock map to -1. Used for money and sales
    stocks, of which every owner has at most one.
    """
    out = np.full(n_owners, -1, dtype=np.intp)
    idx = np.flatnonzero((stk.owner_type == owner_type) & (stk.stock_type == stock_type))
    # reverse so the first stock of each owner wins the assignment
    out[stk.owner[idx][::-1]] = idx[::-1]
    return out


def money_stock(stk: Stock, owner_type: OwnerType, owner: int) -> int:
    idx = owner_stocks(stk, owner_type, owner, StockType.MONEY)
    return int(idx[0]) if idx.size else -1


def sales_stock(stk: Stock, owner_type: OwnerType, owner: int) -> int:
    idx = owner_stocks(stk, owner_type, owner, StockType.SALES)
    return int(idx[0]) if idx.size else -1


def producer_of(ind: Industry, commodity: int) -> int:
    """Industry producing ``commodity`` (-1 for socially produced goods)."""
    hits = np.flatnonzero(ind.commodity == commodity)
    return int(hits[0]) if hits.size else -1


def first_class_seller(stk: Stock, commodity: int, eps: float) -> int:
    """
    First social-class sales stock offering ``commodity`` with positive quantity.

    Single-seller-wins: later classes are never consulted even when the
    first cannot cover the whole demand.
    """
    mask = (
        (stk.owner_type == OwnerType.SOCIAL_CLASS)
        & (stk.stock_type == StockType.SALES)
        & (stk.commodity == commodity)
        & (stk.quantity > eps)
    )
    hits = np.flatnonzero(mask)
    return int(hits[0]) if hits.size else -1


def owner_name(
    stk: Stock, ind: Industry, cls: SocialClass, i: int
) -> str:
    """Display name of the owner of stock ``i``."""
    names = ind.name if stk.owner_type[i] == OwnerType.INDUSTRY else cls.name
    return str(names[stk.owner[i]])
