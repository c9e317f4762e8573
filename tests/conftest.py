"""Pytest configuration and fixtures for capsim tests."""

import os

import pytest

import capsim.phases  # noqa: F401 - register all phases
from capsim import logging
from capsim.core.registry import clear_registry
from capsim.simulation import Simulation


@pytest.fixture
def clean_registry():
    """
    Save registry state, clear it for the test, then restore it.

    Request it explicitly in tests that define throwaway roles or phases.

    DO NOT use autouse=True, as it would interfere with integration tests
    that rely on the real phases being registered.
    """
    # noinspection PyProtectedMember
    from capsim.core.registry import _PHASE_REGISTRY, _ROLE_REGISTRY

    saved_roles = dict(_ROLE_REGISTRY)
    saved_phases = dict(_PHASE_REGISTRY)

    clear_registry()

    yield

    _ROLE_REGISTRY.clear()
    _ROLE_REGISTRY.update(saved_roles)
    _PHASE_REGISTRY.clear()
    _PHASE_REGISTRY.update(saved_phases)


@pytest.fixture
def sim() -> Simulation:
    """The bundled simple-reproduction economy, freshly initialised."""
    return Simulation.init(logging={"default_level": "ERROR"})


@pytest.fixture(autouse=True)
def mute_capsim_logs(caplog):
    # COVERAGE_RUN=true runs at DEBUG so every logging branch executes
    if os.environ.get("COVERAGE_RUN") == "true":
        level = logging.DEBUG
    else:
        level = logging.ERROR

    caplog.set_level(level, logger="capsim")
    logging.getLogger("capsim").setLevel(level)
