"""
Pluggable profit-distribution policies.

A policy decides how much of each industry's profit the revenue phase
pays out to the social classes. Policies register by name; the name
selected in the configuration is resolved once per revenue phase.

Supported: ``fixed_share`` (pay ``profit_share`` of positive profit) and
``none`` (pay nothing). ``equalise`` and ``dynamic`` are recognised
names whose allocation rules are not implemented; selecting them is a
configuration error raised before the revenue phase mutates anything.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

import numpy as np

from capsim.economy import Global
from capsim.errors import UnsupportedPolicyError
from capsim.typing import Float1D

_POLICY_REGISTRY: dict[str, type[DistributionPolicy]] = {}

UNSUPPORTED_POLICIES = frozenset({"equalise", "dynamic"})


class DistributionPolicy(ABC):
    """Base class of distribution policies (auto-registered by ``name``)."""

    name: ClassVar[str] = ""

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if cls.name:
            _POLICY_REGISTRY[cls.name] = cls

    @abstractmethod
    def payout(self, profit: Float1D, gl: Global) -> Float1D:
        """Money each industry should pay out, before capping by its cash."""


class FixedShare(DistributionPolicy):
    """Pay out ``Global.profit_share`` of every positive profit."""

    name = "fixed_share"

    def payout(self, profit: Float1D, gl: Global) -> Float1D:
        return np.maximum(profit, 0.0) * gl.profit_share


class NoDistribution(DistributionPolicy):
    """Pay nothing: all profit is retained for accumulation."""

    name = "none"

    def payout(self, profit: Float1D, gl: Global) -> Float1D:
        return np.zeros_like(profit)


def known_policies() -> list[str]:
    """Every policy name the configuration accepts."""
    return sorted(set(_POLICY_REGISTRY) | UNSUPPORTED_POLICIES)


def get_policy(name: str) -> DistributionPolicy:
    """
    Instantiate the policy registered under ``name``.

    Raises
    ------
    UnsupportedPolicyError
        If ``name`` is a recognised but unimplemented policy.
    ValueError
        If ``name`` is unknown.
    """
    if name in UNSUPPORTED_POLICIES:
        raise UnsupportedPolicyError(
            f"Distribution policy '{name}' is not ready yet; "
            f"choose one of {sorted(_POLICY_REGISTRY)}"
        )
    if name not in _POLICY_REGISTRY:
        raise ValueError(
            f"Unknown distribution policy '{name}'. "
            f"Available policies: {known_policies()}"
        )
    return _POLICY_REGISTRY[name]()
