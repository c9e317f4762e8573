# tests/helpers/invariants.py
"""
High-level invariants that must hold after *every* ``Simulation.step``.
They deliberately stay coarse-grained so they remain valid even when the
micro-rules evolve.
"""
from __future__ import annotations

import numpy as np

from capsim.roles import StockType
from capsim.simulation import Simulation


def assert_basic_invariants(sim: Simulation) -> None:
    """
    Raise ``AssertionError`` if a fundamental accounting relationship is
    violated in the working state.
    """
    stk, com = sim.stk, sim.com
    eps = sim.config.epsilon

    # Finite numbers everywhere
    for arr in (stk.quantity, stk.value, stk.price, com.unit_value, com.unit_price):
        assert np.isfinite(arr).all()

    # Stocks are never (materially) negative
    assert (stk.quantity >= -eps).all()

    # Price proportional to quantity (sales stocks hold fresh output
    # valued at cost until the prices phase runs)
    held = stk.stock_type != StockType.SALES
    np.testing.assert_allclose(
        stk.price[held], (stk.quantity * com.unit_price[stk.commodity])[held], atol=1e-3
    )

    # Money stocks only hold the money commodity
    money = stk.stock_type == StockType.MONEY
    assert (stk.commodity[money] == stk.commodity[money][0]).all()

    # The version pointer and the store agree
    assert sim.store.current_version(sim.project) == sim.version
