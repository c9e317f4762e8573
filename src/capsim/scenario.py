# src/capsim/scenario.py
"""
Scenario loading.

A scenario describes one project's starting economy: the global
parameters, the commodities, the industries with their money, sales and
productive stocks, and the social classes with their money, labour-power
and consumption stocks. Scenarios are YAML documents (or already parsed
mappings); a few are bundled under ``capsim/scenarios``.

Examples
--------
>>> scn = load_scenario("simple_reproduction")
>>> scn.com.name.tolist()
['Money', 'Means of Production', 'Consumption Goods', 'Labour Power']
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

import numpy as np
import yaml

from capsim import logging
from capsim.economy import Global, LabourResponse
from capsim.errors import ScenarioError
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

log = logging.getLogger(__name__)

__all__ = ["Scenario", "load_scenario", "bundled_scenarios"]


@dataclass(slots=True)
class Scenario:
    """Entity roles and metadata of a freshly loaded project."""

    project: int
    description: str
    com: Commodity
    stk: Stock
    ind: Industry
    cls: SocialClass
    gl: Global


def bundled_scenarios() -> list[str]:
    """Names of the scenarios shipped with the package."""
    folder = resources.files("capsim") / "scenarios"
    return sorted(
        entry.name.rsplit(".", 1)[0]
        for entry in folder.iterdir()
        if entry.name.endswith((".yml", ".yaml"))
    )


def _read_source(source: str | Path | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(source, Mapping):
        return dict(source)
    path = Path(source)
    if not path.exists() and str(source) in bundled_scenarios():
        bundled = resources.files("capsim") / "scenarios" / f"{source}.yml"
        text = bundled.read_text(encoding="utf-8")
        data = yaml.safe_load(text)
    elif path.is_file():
        with path.open("rt", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    else:
        raise ScenarioError(
            f"Scenario '{source}' is neither a file nor a bundled scenario "
            f"({bundled_scenarios()})"
        )
    if not isinstance(data, Mapping):
        raise ScenarioError(f"Scenario root must be a mapping, got {type(data)!r}")
    return dict(data)


def _enum(enum_cls: Any, text: str, what: str) -> Any:
    try:
        return enum_cls[str(text).upper()]
    except KeyError:
        choices = [m.name.lower() for m in enum_cls]
        raise ScenarioError(f"Unknown {what} '{text}'; expected one of {choices}") from None


def _unique_names(items: list[Mapping[str, Any]], what: str) -> list[str]:
    names = []
    for item in items:
        if "name" not in item:
            raise ScenarioError(f"Every {what} needs a 'name'")
        names.append(str(item["name"]))
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise ScenarioError(f"Duplicate {what} names: {dupes}")
    return names


def _non_negative(value: Any, what: str) -> float:
    try:
        val = float(value)
    except (TypeError, ValueError):
        raise ScenarioError(f"{what} must be a number, got {value!r}") from None
    if val < 0:
        raise ScenarioError(f"{what} must be >= 0, got {val}")
    return val


def load_scenario(source: str | Path | Mapping[str, Any]) -> Scenario:
    """
    Build entity roles from a scenario file, bundled name or mapping.

    Stocks are created with quantities only; value and price are derived
    afterwards by the session's start-up aggregate recalculation.

    Raises
    ------
    ScenarioError
        If the document is malformed, names collide or refer to unknown
        entities, or the economy lacks a money commodity.
    """
    data = _read_source(source)
    for key in ("commodities", "industries", "social_classes"):
        if not isinstance(data.get(key), list):
            raise ScenarioError(f"Scenario must have a '{key}' list")

    # commodities
    # ------------------------------------------------------------------
    com_items = data["commodities"]
    com_names = _unique_names(com_items, "commodity")
    com_idx = {n: i for i, n in enumerate(com_names)}
    n_com = len(com_items)
    com = Commodity(
        name=np.array(com_names, dtype=np.str_),
        origin=np.array(
            [_enum(Origin, c.get("origin", "industrially_produced"), "origin")
             for c in com_items],
            dtype=np.int64,
        ),
        function=np.array(
            [_enum(Function, c.get("function", "productive_input"), "function")
             for c in com_items],
            dtype=np.int64,
        ),
        unit_value=np.array(
            [_non_negative(c.get("unit_value", 1.0), f"{c['name']} unit_value")
             for c in com_items]
        ),
        unit_price=np.array(
            [_non_negative(c.get("unit_price", c.get("unit_value", 1.0)),
                           f"{c['name']} unit_price")
             for c in com_items]
        ),
        turnover_time=np.array(
            [float(c.get("turnover_time", 1.0)) for c in com_items]
        ),
        stock_used_up=np.zeros(n_com),
        stock_produced=np.zeros(n_com),
        surplus_product=np.zeros(n_com),
        allocation_share=np.ones(n_com),
    )
    if (com.turnover_time <= 0).any():
        raise ScenarioError("Commodity turnover_time must be positive")

    money = np.flatnonzero(com.function == Function.MONEY)
    if money.size != 1:
        raise ScenarioError(
            f"Scenario needs exactly one money commodity, found {money.size}"
        )
    money_c = int(money[0])
    if com.unit_price[money_c] <= 0:
        raise ScenarioError("The money commodity must have a positive unit price")
    labour = np.flatnonzero(
        (com.origin == Origin.SOCIALLY_PRODUCED)
        & (com.function == Function.PRODUCTIVE_INPUT)
    )
    labour_c = int(labour[0]) if labour.size else -1

    def lookup(name: Any, where: str) -> int:
        if str(name) not in com_idx:
            raise ScenarioError(f"{where} refers to unknown commodity '{name}'")
        return com_idx[str(name)]

    # stocks are accumulated row by row
    rows: list[tuple[int, int, int, int, float, float, float]] = []

    def add_stock(
        owner_type: OwnerType,
        owner: int,
        commodity: int,
        stock_type: StockType,
        quantity: Any,
        what: str,
        production: float = 0.0,
        consumption: float = 0.0,
    ) -> None:
        rows.append(
            (
                owner,
                owner_type,
                commodity,
                stock_type,
                _non_negative(quantity, what),
                production,
                consumption,
            )
        )

    # industries
    # ------------------------------------------------------------------
    ind_items = data["industries"]
    ind_names = _unique_names(ind_items, "industry")
    ind_commodity = []
    for j, item in enumerate(ind_items):
        c = lookup(item.get("commodity"), f"Industry '{item['name']}'")
        if com.origin[c] != Origin.INDUSTRIALLY_PRODUCED:
            raise ScenarioError(
                f"Industry '{item['name']}' produces '{com_names[c]}', "
                "which is not industrially produced"
            )
        if c in ind_commodity:
            raise ScenarioError(f"Commodity '{com_names[c]}' has two producers")
        ind_commodity.append(c)

        add_stock(OwnerType.INDUSTRY, j, money_c, StockType.MONEY,
                  item.get("money", 0.0), f"{item['name']} money")
        add_stock(OwnerType.INDUSTRY, j, c, StockType.SALES,
                  item.get("sales", 0.0), f"{item['name']} sales")
        for input_name, entry in (item.get("productive") or {}).items():
            ci = lookup(input_name, f"Industry '{item['name']}'")
            if com.function[ci] == Function.MONEY:
                raise ScenarioError(f"Money cannot be a productive input of '{item['name']}'")
            entry = entry if isinstance(entry, Mapping) else {"coefficient": entry}
            add_stock(
                OwnerType.INDUSTRY, j, ci, StockType.PRODUCTIVE,
                entry.get("quantity", 0.0), f"{item['name']} {input_name}",
                production=_non_negative(
                    entry.get("coefficient", 0.0), f"{item['name']} {input_name} coefficient"
                ),
            )

    ind = Industry(
        name=np.array(ind_names, dtype=np.str_),
        commodity=np.array(ind_commodity, dtype=np.intp),
        output=np.array(
            [_non_negative(i.get("output", 0.0), f"{i['name']} output") for i in ind_items]
        ),
        initial_capital=np.zeros(len(ind_items)),
        profit=np.zeros(len(ind_items)),
    )

    # social classes
    # ------------------------------------------------------------------
    cls_items = data["social_classes"]
    cls_names = _unique_names(cls_items, "social class")
    for k, item in enumerate(cls_items):
        add_stock(OwnerType.SOCIAL_CLASS, k, money_c, StockType.MONEY,
                  item.get("money", 0.0), f"{item['name']} money")
        if "sales" in item:
            if labour_c < 0:
                raise ScenarioError(
                    f"Class '{item['name']}' sells labour power but the "
                    "scenario defines none"
                )
            add_stock(OwnerType.SOCIAL_CLASS, k, labour_c, StockType.SALES,
                      item["sales"], f"{item['name']} labour power")
        for good, entry in (item.get("consumption") or {}).items():
            cg = lookup(good, f"Class '{item['name']}'")
            entry = entry if isinstance(entry, Mapping) else {"coefficient": entry}
            add_stock(
                OwnerType.SOCIAL_CLASS, k, cg, StockType.CONSUMPTION,
                entry.get("quantity", 0.0), f"{item['name']} {good}",
                consumption=_non_negative(
                    entry.get("coefficient", 0.0), f"{item['name']} {good} coefficient"
                ),
            )

    cls = SocialClass(
        name=np.array(cls_names, dtype=np.str_),
        revenue=np.array([float(c.get("revenue", 0.0)) for c in cls_items]),
        population=np.array(
            [_non_negative(c.get("population", 0.0), f"{c['name']} population")
             for c in cls_items]
        ),
        participation_ratio=np.array(
            [_non_negative(c.get("participation_ratio", 0.0),
                           f"{c['name']} participation_ratio")
             for c in cls_items]
        ),
        property_share=np.array(
            [_non_negative(c.get("property_share", 0.0), f"{c['name']} property_share")
             for c in cls_items]
        ),
    )

    n_stk = len(rows)
    cols = list(zip(*rows)) if rows else [()] * 7
    stk = Stock(
        owner=np.array(cols[0], dtype=np.intp),
        owner_type=np.array(cols[1], dtype=np.int64),
        commodity=np.array(cols[2], dtype=np.intp),
        stock_type=np.array(cols[3], dtype=np.int64),
        quantity=np.array(cols[4], dtype=np.float64),
        value=np.zeros(n_stk),
        price=np.zeros(n_stk),
        production_coefficient=np.array(cols[5], dtype=np.float64),
        consumption_coefficient=np.array(cols[6], dtype=np.float64),
        replenishment_demand=np.zeros(n_stk),
        stock_used_up=np.zeros(n_stk),
    )

    # global
    # ------------------------------------------------------------------
    g = data.get("global") or {}
    try:
        response = LabourResponse(str(g.get("labour_supply_response", "flexible")).lower())
    except ValueError:
        raise ScenarioError(
            f"Unknown labour_supply_response '{g.get('labour_supply_response')}'"
        ) from None
    gl = Global(
        melt=_non_negative(g.get("melt", 1.0), "melt"),
        labour_supply_response=response,
        profit_share=_non_negative(g.get("profit_share", 1.0), "profit_share"),
        currency_symbol=str(g.get("currency_symbol", "$")),
    )
    if gl.profit_share > 1.0:
        raise ScenarioError(f"profit_share must be <= 1, got {gl.profit_share}")

    project = int(data.get("project", 1))
    description = str(data.get("description", ""))
    log.debug(
        "Loaded scenario '%s': %d commodities, %d industries, %d classes, %d stocks",
        description,
        n_com,
        ind.size,
        cls.size,
        n_stk,
    )
    return Scenario(project, description, com, stk, ind, cls, gl)
