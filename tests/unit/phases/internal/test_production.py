# tests/unit/phases/internal/test_production.py
"""
Unit tests for the production system functions.
"""
from __future__ import annotations

import pytest

from capsim.helpers import commodity_index
from capsim.ops import modify_to
from capsim.phases._internal.accounting import current_capital, set_capitals
from capsim.phases._internal.production import (
    classes_reproduce,
    industries_produce,
    recompute_unit_values,
)
from capsim.reporting import Reporter
from capsim.roles import StockType
from tests.helpers.factories import EPS, PRECISION, make_economy, small_economy, stock

MP = "Means of Production"
LP = "Labour Power"
CG = "Consumption Goods"


def _producing_economy(input_quantity: float = 50.0):
    """25 units of output from 50 means of production at value 2 and 10 hours."""
    scn = make_economy(
        small_economy(
            output=25.0,
            coefficient=2.0,
            input_quantity=input_quantity,
            unit_value=2.0,
            labour_coefficient=0.4,
            melt=1.5,
        )
    )
    lp = stock(scn, "Department I", LP, StockType.PRODUCTIVE)
    modify_to(scn.stk, scn.com, lp, 10.0, precision=PRECISION)
    set_capitals(scn.stk, scn.ind)
    return scn


def _produce(scn, reporter=None):
    reporter = reporter if reporter is not None else Reporter()
    industries_produce(
        scn.stk, scn.com, scn.ind, scn.gl,
        reporter=reporter, eps=EPS, precision=PRECISION,
    )
    return reporter


def test_inputs_transfer_value_and_labour_adds_value() -> None:
    scn = _producing_economy()
    reporter = _produce(scn)

    sales = stock(scn, "Department I", MP, StockType.SALES)
    # 50 x 2 transferred + 10 x 1.5 added
    assert scn.stk.quantity[sales] == pytest.approx(25.0)
    assert scn.stk.value[sales] == pytest.approx(115.0)
    assert scn.stk.price[sales] == pytest.approx(115.0)

    mp_stock = stock(scn, "Department I", MP, StockType.PRODUCTIVE)
    lp_stock = stock(scn, "Department I", LP, StockType.PRODUCTIVE)
    assert scn.stk.quantity[mp_stock] == 0.0
    assert scn.stk.quantity[lp_stock] == 0.0
    assert scn.stk.stock_used_up[mp_stock] == pytest.approx(50.0)
    assert scn.stk.stock_used_up[lp_stock] == pytest.approx(10.0)
    assert reporter.warnings == []


def test_used_produced_and_surplus_are_accumulated() -> None:
    scn = _producing_economy()
    _produce(scn)

    mp = commodity_index(scn.com, MP)
    assert scn.com.stock_used_up[mp] == pytest.approx(50.0)
    assert scn.com.stock_produced[mp] == pytest.approx(25.0)
    assert scn.com.surplus_product[mp] == pytest.approx(-25.0)


def test_profit_is_persisted_after_production() -> None:
    scn = _producing_economy()
    before = scn.ind.initial_capital.copy()
    _produce(scn)

    # money 500 untouched; 100 + 10 of inputs became 115 of output
    assert scn.ind.profit[0] == pytest.approx(5.0)
    assert scn.ind.profit[0] == pytest.approx(
        current_capital(scn.stk, scn.ind)[0] - before[0]
    )


def test_short_input_is_reported() -> None:
    scn = _producing_economy(input_quantity=20.0)
    reporter = _produce(scn)
    assert any("holds only" in w for w in reporter.warnings)


def test_unit_values_follow_totals() -> None:
    scn = _producing_economy()
    _produce(scn)
    recompute_unit_values(scn.stk, scn.com, eps=EPS, precision=PRECISION)

    mp = commodity_index(scn.com, MP)
    lp = commodity_index(scn.com, LP)
    assert scn.com.unit_value[mp] == pytest.approx(4.6)
    assert scn.com.unit_price[mp] == pytest.approx(4.6)
    # socially produced commodities keep their unit value
    assert scn.com.unit_value[lp] == pytest.approx(1.0)

    sales = stock(scn, "Department I", MP, StockType.SALES)
    assert scn.stk.value[sales] == pytest.approx(115.0)


def test_commodity_without_stock_keeps_unit_value() -> None:
    scn = make_economy(small_economy())
    cg = commodity_index(scn.com, CG)
    scn.com.unit_value[cg] = 3.0
    recompute_unit_values(scn.stk, scn.com, eps=EPS, precision=PRECISION)
    assert scn.com.unit_value[cg] == 3.0


@pytest.mark.parametrize("turnover, left", [(1.0, 0.0), (2.0, 250.0)])
def test_classes_consume_and_regenerate_labour_power(turnover, left) -> None:
    scn = make_economy()
    cg = commodity_index(scn.com, CG)
    lp = commodity_index(scn.com, LP)
    scn.com.turnover_time[cg] = turnover
    for cls in ("Workers", "Capitalists"):
        modify_to(
            scn.stk, scn.com, stock(scn, cls, CG, StockType.CONSUMPTION), 500.0,
            precision=PRECISION,
        )
    labour = stock(scn, "Workers", LP, StockType.SALES)
    modify_to(scn.stk, scn.com, labour, 0.0, precision=PRECISION)

    classes_reproduce(scn.stk, scn.com, scn.cls, precision=PRECISION)

    for cls in ("Workers", "Capitalists"):
        assert scn.stk.quantity[stock(scn, cls, CG, StockType.CONSUMPTION)] == left
    assert scn.stk.quantity[labour] == pytest.approx(1000.0)
    assert scn.stk.price[labour] == pytest.approx(500.0)
    assert scn.com.stock_produced[lp] == pytest.approx(1000.0)
