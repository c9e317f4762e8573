"""
Natural keys of ledger entities.

Entities are stored column-wise, so the store identifies an entity by
its natural key rather than its array position:

- commodity, industry, social class: ``name``
- stock: ``(owner name, commodity name, stock type)``, the stock type as
  lowercase text (``"money"``, ``"productive"``, ``"sales"``,
  ``"consumption"``)
- global: ``None`` (singleton)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Hashable, Mapping

from capsim.roles import OwnerType, StockType


class EntityKind(str, Enum):
    COMMODITY = "commodity"
    STOCK = "stock"
    INDUSTRY = "industry"
    SOCIAL_CLASS = "social_class"
    GLOBAL = "global"


def entity_keys(kind: EntityKind, snapshot: Mapping[EntityKind, Any]) -> list[Hashable]:
    """Natural key of every entity of ``kind`` in ``snapshot``, in array order."""
    if kind is EntityKind.GLOBAL:
        return [None]
    if kind is not EntityKind.STOCK:
        return [str(n) for n in snapshot[kind].name]

    stk = snapshot[EntityKind.STOCK]
    com_names = snapshot[EntityKind.COMMODITY].name
    ind_names = snapshot[EntityKind.INDUSTRY].name
    cls_names = snapshot[EntityKind.SOCIAL_CLASS].name
    keys: list[Hashable] = []
    for i in range(stk.size):
        owners = ind_names if stk.owner_type[i] == OwnerType.INDUSTRY else cls_names
        keys.append(
            (
                str(owners[stk.owner[i]]),
                str(com_names[stk.commodity[i]]),
                StockType(int(stk.stock_type[i])).name.lower(),
            )
        )
    return keys
