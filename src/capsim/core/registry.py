"""Registry system for roles and phases."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from capsim.core.phase import Phase
    from capsim.core.role import Role

_ROLE_REGISTRY: dict[str, type[Role]] = {}
_PHASE_REGISTRY: dict[str, type[Phase]] = {}


def get_role(name: str) -> type[Role]:
    """
    Retrieve a role class from the registry by name.

    Raises
    ------
    KeyError
        If the role name is not found in the registry.
    """
    if name not in _ROLE_REGISTRY:
        available = ", ".join(sorted(_ROLE_REGISTRY.keys()))
        raise KeyError(
            f"Role '{name}' not found in registry. Available roles: {available}"
        )
    return _ROLE_REGISTRY[name]


def get_phase(name: str) -> type[Phase]:
    """
    Retrieve a phase class from the registry by name.

    Parameters
    ----------
    name : str
        snake_case phase name, e.g. ``"industries_produce"``.

    Returns
    -------
    type[Phase]
        The registered phase class.

    Raises
    ------
    KeyError
        If the phase name is not found in the registry.
    """
    if name not in _PHASE_REGISTRY:
        available = ", ".join(sorted(_PHASE_REGISTRY.keys()))
        raise KeyError(
            f"Phase '{name}' not found in registry. Available phases: {available}"
        )
    return _PHASE_REGISTRY[name]


def list_roles() -> list[str]:
    """Return sorted list of all registered role names."""
    return sorted(_ROLE_REGISTRY.keys())


def list_phases() -> list[str]:
    """Return sorted list of all registered phase names."""
    return sorted(_PHASE_REGISTRY.keys())


def clear_registry() -> None:
    """
    Clear all registrations (useful for testing).

    WARNING: This is a destructive operation. Only use in test teardown.
    """
    _ROLE_REGISTRY.clear()
    _PHASE_REGISTRY.clear()
