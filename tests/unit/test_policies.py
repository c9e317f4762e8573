"""Unit tests for profit-distribution policies."""

import numpy as np
import pytest

from capsim.economy import Global, LabourResponse
from capsim.errors import ConfigurationError, UnsupportedPolicyError
from capsim.policies import (
    DistributionPolicy,
    FixedShare,
    NoDistribution,
    get_policy,
    known_policies,
)


@pytest.fixture
def gl():
    return Global(melt=1.0, labour_supply_response=LabourResponse.FLEXIBLE, profit_share=0.5)


def test_fixed_share_pays_share_of_positive_profit(gl):
    payout = FixedShare().payout(np.array([100.0, -40.0, 0.0]), gl)
    np.testing.assert_allclose(payout, [50.0, 0.0, 0.0])


def test_no_distribution_pays_nothing(gl):
    np.testing.assert_array_equal(NoDistribution().payout(np.array([100.0]), gl), [0.0])


def test_lookup_by_name():
    assert isinstance(get_policy("fixed_share"), FixedShare)
    assert isinstance(get_policy("none"), NoDistribution)


@pytest.mark.parametrize("name", ["equalise", "dynamic"])
def test_recognised_but_unready_policies(name):
    assert name in known_policies()
    with pytest.raises(UnsupportedPolicyError, match="not ready"):
        get_policy(name)


def test_unsupported_policy_is_a_configuration_error():
    assert issubclass(UnsupportedPolicyError, ConfigurationError)
    assert issubclass(UnsupportedPolicyError, ValueError)


def test_unknown_policy():
    with pytest.raises(ValueError, match="Unknown distribution policy"):
        get_policy("tithe")


def test_subclasses_register_by_name(gl):
    class Everything(DistributionPolicy):
        name = "everything"

        def payout(self, profit, gl):
            return np.maximum(profit, 0.0)

    from capsim.policies import _POLICY_REGISTRY

    try:
        assert "everything" in known_policies()
        assert isinstance(get_policy("everything"), Everything)
    finally:
        _POLICY_REGISTRY.pop("everything", None)
