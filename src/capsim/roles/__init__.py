"""Entity families of the circular-flow economy."""

from capsim.roles.commodity import Commodity, Function, Origin
from capsim.roles.industry import Industry
from capsim.roles.social_class import SocialClass
from capsim.roles.stock import OwnerType, Stock, StockType

__all__ = [
    "Commodity",
    "Function",
    "Industry",
    "Origin",
    "OwnerType",
    "SocialClass",
    "Stock",
    "StockType",
]
