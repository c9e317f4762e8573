"""
Configuration dataclass for simulation parameters.

Config instances are created by :meth:`Simulation.init` after merging
the package defaults, the user config and keyword overrides, and after
:class:`ConfigValidator` has accepted the result.

Design Notes
------------
- Immutable (frozen=True) to prevent accidental modification
- Memory-efficient (slots=True)
- No methods; validation lives in ConfigValidator
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Config:
    """
    Immutable configuration of one simulation session.

    Parameters
    ----------
    epsilon : float
        Tolerance for money, quantity and cost comparisons (positive).
    rounding_precision : int
        Decimal places quantities, values and prices are rounded to.
    n_periods : int
        Default run length of :meth:`Simulation.run`.
    scenario : str
        Bundled scenario name or path of the scenario YAML.
    distribution_policy : str, optional
        Profit distribution policy name. Default: "fixed_share".
    price_dynamics : str, optional
        Price recomputation rule of the prices phase. Default: "simple".
    labour_supply_response : str or None, optional
        "flexible" or "fixed" to override the scenario's setting.
    comparator : str, optional
        Reference version used for deltas. Default: "previous".
    phase_graph_path : str or None, optional
        Custom phase graph YAML.

    Examples
    --------
    >>> import capsim
    >>> sim = capsim.Simulation.init(epsilon=1e-6)
    >>> sim.config.epsilon
    1e-06
    """

    epsilon: float
    rounding_precision: int
    n_periods: int
    scenario: str

    distribution_policy: str = "fixed_share"
    price_dynamics: str = "simple"
    labour_supply_response: str | None = None
    comparator: str = "previous"
    phase_graph_path: str | None = None
