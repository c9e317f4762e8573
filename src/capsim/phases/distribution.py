"""
Distribution phases: revenue and accumulation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from capsim.core.decorators import phase

if TYPE_CHECKING:
    from capsim.simulation import Simulation


@phase
class Revenue:
    """
    Pay distributed profit out to the property-owning classes.

    The configured distribution policy decides how much of each
    industry's profit is paid; the payout is capped by the industry's
    money and split across classes in proportion to their property share.
    Unsupported policies are refused before anything changes.

    Rule
    ----
        Π   =  K - K_0
        P   =  policy(Π),  capped at M
        rev_k ←  rev_k + P · share_k

    K: Current Capital, K_0: Initial Capital, M: Industry Money
    """

    def validate(self, sim: Simulation) -> None:
        from capsim.policies import get_policy

        get_policy(sim.config.distribution_policy)

    def execute(self, sim: Simulation) -> None:
        from capsim.phases._internal.distribution import distribute_revenue
        from capsim.policies import get_policy

        distribute_revenue(
            sim.stk, sim.com, sim.ind, sim.cls, sim.gl,
            get_policy(sim.config.distribution_policy),
            reporter=sim.reporter,
            eps=sim.config.epsilon,
            precision=sim.config.rounding_precision,
        )


@phase
class Accumulate:
    """
    Invest retained profit in next period's output.

    Rule
    ----
        Q   ←  Q + max(K - K_0, 0) / Σ (a · T · p)
        K_0 ←  K
    """

    def execute(self, sim: Simulation) -> None:
        from capsim.phases._internal.distribution import accumulate

        accumulate(
            sim.stk, sim.com, sim.ind,
            reporter=sim.reporter, precision=sim.config.rounding_precision,
        )
