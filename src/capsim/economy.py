from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any


class LabourResponse(str, Enum):
    """How labour-power supply reacts when demand exceeds it."""

    FLEXIBLE = "flexible"
    FIXED = "fixed"


@dataclass(slots=True)
class Global:
    """
    Pure *state* container for economy-wide scalars (one per version).
    """

    melt: float  # monetary expression of labour time
    labour_supply_response: LabourResponse
    profit_share: float  # fraction of profit paid out by the fixed-share policy
    currency_symbol: str = "$"

    @property
    def size(self) -> int:
        return 1

    def copy(self) -> Global:
        return replace(self)

    def record(self, i: int = 0) -> dict[str, Any]:
        rec = asdict(self)
        rec["labour_supply_response"] = self.labour_supply_response.value
        return rec
