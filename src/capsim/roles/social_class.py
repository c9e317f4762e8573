# src/capsim/roles/social_class.py
from capsim.core.decorators import role
from capsim.typing import Float1D, Str1D


@role
class SocialClass:
    """
    Social class role.

    ``revenue`` is disposable income carried between phases.
    ``population`` counts members; ``participation_ratio`` is the labour
    power each member supplies per period; ``property_share`` is the
    class's share of distributed profit.
    """

    name: Str1D
    revenue: Float1D
    population: Float1D
    participation_ratio: Float1D
    property_share: Float1D
