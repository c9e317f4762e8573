# src/capsim/roles/industry.py
from capsim.core.decorators import role
from capsim.typing import Float1D, Idx1D, Str1D


@role
class Industry:
    """
    Industry role.

    Each industry produces one commodity (``commodity``) at a proposed,
    then constrained, ``output`` level. ``initial_capital`` is the value of
    everything it owns at the start of the period; ``profit`` is the
    change since then, persisted after production and at revenue time.
    """

    name: Str1D
    commodity: Idx1D
    output: Float1D
    initial_capital: Float1D
    profit: Float1D
