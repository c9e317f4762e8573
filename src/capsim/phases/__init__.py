"""Phase classes of the circular-flow cycle.

Each phase wraps system functions from ``capsim.phases._internal`` and is
auto-registered under its snake_case name when its module is imported:

- exchange.py → demand, constrain, trade
- production.py → industries_produce, prices, classes_reproduce
- distribution.py → revenue, accumulate
"""

# Import all phases to trigger auto-registration
from capsim.phases.distribution import Accumulate, Revenue
from capsim.phases.exchange import Constrain, Demand, Trade
from capsim.phases.production import ClassesReproduce, IndustriesProduce, Prices

__all__ = [
    "Demand",
    "Constrain",
    "Trade",
    "IndustriesProduce",
    "Prices",
    "ClassesReproduce",
    "Revenue",
    "Accumulate",
]
