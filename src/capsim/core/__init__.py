"""Core building blocks: roles, phases, registry and the phase graph."""

from typing import Any, Callable

from capsim.core.decorators import phase as phase_decorator
from capsim.core.decorators import role as role_decorator
from capsim.core.graph import PhaseDescriptor, PhaseGraph, PhaseGraphBuilder
from capsim.core.phase import Phase
from capsim.core.registry import (
    get_phase,
    get_role,
    list_phases,
    list_roles,
)
from capsim.core.role import Role

# Submodule imports above bind ``capsim.core.phase`` / ``capsim.core.role``
# to the modules; rebind the public names to the decorators.
phase: Callable[..., Any] = phase_decorator
role: Callable[..., Any] = role_decorator

__all__ = [
    "Phase",
    "PhaseDescriptor",
    "PhaseGraph",
    "PhaseGraphBuilder",
    "Role",
    "get_phase",
    "get_role",
    "list_phases",
    "list_roles",
    "phase",
    "role",
]
