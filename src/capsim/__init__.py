"""
capsim - Circular-Flow Capitalism Simulation
============================================

capsim simulates a simplified circular-flow economy: industries buy
means of production and labour power, produce commodities and sell them,
social classes consume and supply labour, and profit is distributed and
accumulated. Every intermediate state is persisted as an immutable
version, so the history of a project stays inspectable.

Quick Start
-----------
>>> import capsim
>>> sim = capsim.Simulation.init()          # bundled simple_reproduction
>>> sim.run(n_periods=3)
>>> sim.version                             # 1 start + 3 periods x 8 phases
25

Step one phase at a time:

>>> sim.step()
'demand'
>>> sim.step_phase("exchange")              # refused: 'constrain' is next
Traceback (most recent call last):
...
ValueError: Cannot run super-phase 'exchange' now; ...

Key Concepts
------------
**Roles**
  Commodity, Stock, Industry and SocialClass store their entities
  column-wise in NumPy arrays; Global holds the economy-wide scalars.

**Phase Graph**
  Three super-phases (exchange → production → distribution) own eight
  executable leaf phases: demand, constrain, trade, industries_produce,
  prices, classes_reproduce, revenue, accumulate.

**Ledger**
  Each executed leaf phase is written to a :class:`LedgerStore` as a new
  version; comparators for deltas are resolved on demand.

See Also
--------
capsim.simulation : Session facade
capsim.results : Version history and deltas
defaults.yml : Default configuration parameters
default_phases.yml : Default phase graph

Notes
-----
- Configuration precedence: defaults.yml → user config → kwargs
- Quantities, values and prices are rounded to ``rounding_precision``
"""

from __future__ import annotations

__version__: str = "0.3.0"

from . import logging, ops  # noqa: E402 (circular‑safe)
from .core import (  # noqa: E402 (circular‑safe)
    Phase,
    PhaseGraph,
    PhaseGraphBuilder,
    Role,
    get_phase,
    get_role,
    list_phases,
    list_roles,
    phase,
    role,
)
from .economy import Global, LabourResponse  # noqa: E402
from .errors import (  # noqa: E402
    CapsimError,
    ConfigurationError,
    DuplicateVersionError,
    ScenarioError,
    StoreError,
    TransferError,
    UnsupportedPolicyError,
)
from .ledger import EntityKind, InMemoryLedgerStore, LedgerStore, TimeStamp  # noqa: E402
from .reporting import Reporter  # noqa: E402
from .results import SimulationHistory  # noqa: E402
from .scenario import load_scenario  # noqa: E402
from .simulation import Simulation  # noqa: E402  (circular‑safe)

__all__ = [
    "__version__",
    # Core classes
    "Simulation",
    "SimulationHistory",
    "Role",
    "Phase",
    "PhaseGraph",
    "PhaseGraphBuilder",
    "Global",
    "LabourResponse",
    # Ledger
    "EntityKind",
    "LedgerStore",
    "InMemoryLedgerStore",
    "TimeStamp",
    "Reporter",
    "load_scenario",
    # Decorators
    "role",
    "phase",
    # Registry
    "get_role",
    "get_phase",
    "list_roles",
    "list_phases",
    # Errors
    "CapsimError",
    "StoreError",
    "DuplicateVersionError",
    "TransferError",
    "ConfigurationError",
    "UnsupportedPolicyError",
    "ScenarioError",
    # Modules
    "logging",
    "ops",
]
