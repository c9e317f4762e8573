"""Unit tests for lookup helpers."""

import numpy as np

from capsim import helpers
from capsim.roles import OwnerType, StockType
from tests.helpers.factories import EPS, make_economy, small_economy, stock


def test_commodity_lookups():
    scn = make_economy()
    assert helpers.commodity_index(scn.com, "Labour Power") == 3
    assert helpers.commodity_index(scn.com, "Gold") == -1
    assert helpers.money_commodity(scn.com) == 0
    assert helpers.labour_power(scn.com) == 3


def test_stock_lookups():
    scn = make_economy()
    i = stock(scn, "Department II", "Money", StockType.MONEY)
    assert helpers.money_stock(scn.stk, OwnerType.INDUSTRY, 1) == i
    assert helpers.sales_stock(scn.stk, OwnerType.SOCIAL_CLASS, 1) == -1
    assert helpers.stock_index(scn.stk, OwnerType.INDUSTRY, 0, 2, StockType.SALES) == -1
    assert len(helpers.owner_stocks(scn.stk, OwnerType.INDUSTRY, 0)) == 4
    assert len(
        helpers.owner_stocks(scn.stk, OwnerType.INDUSTRY, 0, StockType.PRODUCTIVE)
    ) == 2


def test_stock_per_owner_marks_missing_owners():
    scn = make_economy()
    sales = helpers.stock_per_owner(scn.stk, OwnerType.SOCIAL_CLASS, StockType.SALES, 2)
    assert sales[0] == stock(scn, "Workers", "Labour Power", StockType.SALES)
    assert sales[1] == -1


def test_producer_and_class_seller():
    scn = make_economy(small_economy(labour_supply=0.0))
    assert helpers.producer_of(scn.ind, 1) == 0
    assert helpers.producer_of(scn.ind, 3) == -1
    # the only labour seller has nothing to offer
    assert helpers.first_class_seller(scn.stk, 3, EPS) == -1

    scn = make_economy(small_economy(labour_supply=10.0))
    assert helpers.first_class_seller(scn.stk, 3, EPS) == stock(
        scn, "Workers", "Labour Power", StockType.SALES
    )


def test_owner_name():
    scn = make_economy()
    i = stock(scn, "Capitalists", "Money", StockType.MONEY)
    assert helpers.owner_name(scn.stk, scn.ind, scn.cls, i) == "Capitalists"
    assert helpers.owner_name(scn.stk, scn.ind, scn.cls, 0) == "Department I"
    assert np.all(scn.stk.owner[helpers.owner_stocks(scn.stk, OwnerType.SOCIAL_CLASS, 1)] == 1)
