"""Unit tests for the Role base class."""

from dataclasses import dataclass

import numpy as np

from capsim.core import Role
from capsim.typing import Float1D


def _inventory_cls():
    @dataclass(slots=True)
    class Inventory(Role):
        name: np.ndarray
        amount: Float1D

    return Inventory


def test_size_is_length_of_first_field(clean_registry):
    Inventory = _inventory_cls()
    inv = Inventory(name=np.array(["a", "b", "c"]), amount=np.zeros(3))
    assert inv.size == 3


def test_copy_shares_no_memory(clean_registry):
    Inventory = _inventory_cls()
    inv = Inventory(name=np.array(["a", "b"]), amount=np.array([1.0, 2.0]))

    dup = inv.copy()
    dup.amount[0] = 99.0

    assert type(dup) is Inventory
    assert inv.amount[0] == 1.0
    assert not np.shares_memory(inv.amount, dup.amount)


def test_record_returns_python_scalars(clean_registry):
    Inventory = _inventory_cls()
    inv = Inventory(name=np.array(["a", "b"]), amount=np.array([1.5, 2.5]))

    rec = inv.record(1)

    assert rec == {"name": "b", "amount": 2.5}
    assert type(rec["amount"]) is float


def test_repr_shows_name_and_size(clean_registry):
    Inventory = _inventory_cls()
    inv = Inventory(name=np.array(["a"]), amount=np.zeros(1))
    assert repr(inv) == "Inventory(fields=2, size=1)"
