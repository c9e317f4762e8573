"""Version records of the ledger."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class TimeStamp:
    """
    Identifies one persisted state of a project.

    Attributes
    ----------
    version : int
        Sequential id within the project (the start state is version 1).
    project : int
        Project the version belongs to.
    period : int
        Simulation period during which the version was written.
    description : str
        Name of the phase that produced the state (``"start"`` for the
        initial version).
    super_state : str or None
        Super-phase of that phase, for hierarchical display.
    predecessor : int or None
        Version this one was derived from.
    """

    version: int
    project: int
    period: int
    description: str
    super_state: str | None = None
    predecessor: int | None = None
