# tests/unit/phases/internal/test_accounting.py
"""
Unit tests for aggregate bookkeeping.
"""
from __future__ import annotations

import numpy as np
import pytest

from capsim.helpers import commodity_index
from capsim.ops import modify_to
from capsim.phases._internal.accounting import (
    check_invariants,
    commodity_totals,
    current_capital,
    negative_money_owners,
    persist_profit,
)
from capsim.roles import StockType
from tests.helpers.factories import EPS, PRECISION, make_economy, stock


def test_totals_sum_every_stock() -> None:
    scn = make_economy()
    totals = commodity_totals(scn.stk, scn.com, precision=PRECISION)

    money = commodity_index(scn.com, "Money")
    lp = commodity_index(scn.com, "Labour Power")
    assert totals.quantity[money] == pytest.approx(2500.0)
    assert totals.quantity[lp] == pytest.approx(1000.0)
    assert totals.value[lp] == pytest.approx(500.0)
    assert totals.supply[lp] == pytest.approx(1000.0)
    # money is never offered for sale
    assert totals.supply[money] == 0.0


def test_totals_net_overstocked_demand() -> None:
    scn = make_economy()
    mp = stock(scn, "Department I", "Means of Production", StockType.PRODUCTIVE)
    lp_one = stock(scn, "Department I", "Labour Power", StockType.PRODUCTIVE)
    lp_two = stock(scn, "Department II", "Labour Power", StockType.PRODUCTIVE)
    scn.stk.replenishment_demand[mp] = 300.0
    scn.stk.replenishment_demand[lp_one] = -50.0
    scn.stk.replenishment_demand[lp_two] = 200.0

    totals = commodity_totals(scn.stk, scn.com, precision=PRECISION)

    assert totals.demand[commodity_index(scn.com, "Means of Production")] == 300.0
    # an overstocked holder offsets other demand for the same commodity
    assert totals.demand[commodity_index(scn.com, "Labour Power")] == 150.0


def test_totals_are_repeatable() -> None:
    scn = make_economy()
    first = commodity_totals(scn.stk, scn.com, precision=PRECISION)
    second = commodity_totals(scn.stk, scn.com, precision=PRECISION)
    np.testing.assert_array_equal(first.value, second.value)
    np.testing.assert_array_equal(first.price, second.price)


def test_capital_and_profit() -> None:
    scn = make_economy()
    # money 1000 + sales 1000 at price 1
    np.testing.assert_allclose(current_capital(scn.stk, scn.ind), [2000.0, 2000.0])

    modify_to(
        scn.stk, scn.com, stock(scn, "Department II", "Money", StockType.MONEY),
        1300.0, precision=PRECISION,
    )
    persist_profit(scn.stk, scn.ind)
    np.testing.assert_allclose(scn.ind.profit, [0.0, 300.0])


def test_consistent_economy_has_no_violations() -> None:
    scn = make_economy()
    assert check_invariants(scn.stk, scn.com, eps=EPS, precision=PRECISION) == []


def test_value_drift_is_reported(caplog: pytest.LogCaptureFixture) -> None:
    scn = make_economy()
    sales = stock(scn, "Department I", "Means of Production", StockType.SALES)
    scn.stk.value[sales] += 10.0

    with caplog.at_level("ERROR", logger="capsim"):
        bad = check_invariants(scn.stk, scn.com, eps=EPS, precision=PRECISION)

    assert bad == ["Means of Production"]
    assert "total value" in caplog.text


def test_negative_money_owners_are_named() -> None:
    scn = make_economy()
    assert negative_money_owners(scn.stk, scn.ind, scn.cls, eps=EPS) == []

    i = stock(scn, "Workers", "Money", StockType.MONEY)
    scn.stk.quantity[i] = -5.0
    names = negative_money_owners(scn.stk, scn.ind, scn.cls, eps=EPS)
    assert len(names) == 1
    assert names[0].startswith("Workers")
