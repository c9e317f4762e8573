"""
Reusable builders for scenario mappings and loaded economies.

* Scenario builders return plain mappings in the scenario YAML format,
  so tests can tweak any field before loading.
* :func:`make_economy` loads a mapping and normalises it the way
  ``Simulation.init`` does (aggregates recomputed, capitals set).

Example
-------
>>> scn = make_economy(small_economy(output=100.0, money=50.0))
>>> i = stock(scn, "Department I", "Means of Production", StockType.PRODUCTIVE)
"""

from __future__ import annotations

import copy
from importlib import resources
from typing import Any

import yaml

from capsim.helpers import commodity_index, stock_index
from capsim.ops import recalculate_aggregates
from capsim.phases._internal.accounting import set_capitals
from capsim.roles import OwnerType, StockType
from capsim.scenario import Scenario, load_scenario

PRECISION = 4
EPS = 1e-4


# ───────────────────────── scenario mappings ────────────────────────── #


def simple_reproduction(**overrides: Any) -> dict[str, Any]:
    """The bundled stationary scenario as a mapping; top-level keys overridable."""
    text = (resources.files("capsim") / "scenarios" / "simple_reproduction.yml").read_text()
    data = yaml.safe_load(text)
    data.update(copy.deepcopy(overrides))
    return data


def small_economy(
    *,
    output: float = 100.0,
    coefficient: float = 2.0,
    money: float = 500.0,
    sales: float = 0.0,
    input_quantity: float = 0.0,
    unit_value: float = 1.0,
    labour_coefficient: float = 0.0,
    labour_supply: float = 0.0,
    melt: float = 1.0,
    labour_response: str = "flexible",
) -> dict[str, Any]:
    """
    One producing industry that feeds on its own output and on labour power.

    ``Department I`` makes Means of Production with ``coefficient`` units
    of it (and ``labour_coefficient`` units of labour power) per unit of
    output. ``Department II`` makes Consumption Goods but holds nothing.
    Workers supply ``labour_supply`` units of labour power at price 1.
    """
    return {
        "project": 7,
        "description": "Small economy",
        "global": {
            "melt": melt,
            "labour_supply_response": labour_response,
            "profit_share": 1.0,
        },
        "commodities": [
            {"name": "Money", "origin": "socially_produced", "function": "money"},
            {
                "name": "Means of Production",
                "origin": "industrially_produced",
                "function": "productive_input",
                "unit_value": unit_value,
                "unit_price": unit_value,
            },
            {
                "name": "Consumption Goods",
                "origin": "industrially_produced",
                "function": "consumer_good",
            },
            {
                "name": "Labour Power",
                "origin": "socially_produced",
                "function": "productive_input",
            },
        ],
        "industries": [
            {
                "name": "Department I",
                "commodity": "Means of Production",
                "output": output,
                "money": money,
                "sales": sales,
                "productive": {
                    "Means of Production": {
                        "quantity": input_quantity,
                        "coefficient": coefficient,
                    },
                    "Labour Power": {"quantity": 0, "coefficient": labour_coefficient},
                },
            },
            {
                "name": "Department II",
                "commodity": "Consumption Goods",
                "output": 0,
                "money": 0,
                "sales": 0,
            },
        ],
        "social_classes": [
            {
                "name": "Workers",
                "population": labour_supply,
                "participation_ratio": 1.0,
                "money": 0,
                "sales": labour_supply,
                "consumption": {"Consumption Goods": {"coefficient": 1.0}},
            },
            {
                "name": "Capitalists",
                "population": 10,
                "property_share": 1.0,
                "money": 0,
                "consumption": {"Consumption Goods": {"coefficient": 1.0}},
            },
        ],
    }


# ───────────────────────── loaded economies ────────────────────────── #


def make_economy(data: dict[str, Any] | None = None) -> Scenario:
    """Load ``data`` (default: simple reproduction) and normalise its stocks."""
    scn = load_scenario(data if data is not None else simple_reproduction())
    recalculate_aggregates(scn.stk, scn.com, precision=PRECISION)
    set_capitals(scn.stk, scn.ind)
    return scn


def stock(scn: Scenario, owner: str, commodity: str, stock_type: StockType) -> int:
    """Index of the stock identified by owner name, commodity name and type."""
    if owner in scn.ind.name:
        owner_type, names = OwnerType.INDUSTRY, list(scn.ind.name)
    else:
        owner_type, names = OwnerType.SOCIAL_CLASS, list(scn.cls.name)
    i = stock_index(
        scn.stk,
        owner_type,
        names.index(owner),
        commodity_index(scn.com, commodity),
        stock_type,
    )
    assert i >= 0, f"no {stock_type.name.lower()} stock of {commodity} for {owner}"
    return i
