"""Phase (system) base class definition."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from capsim.simulation import Simulation


def _camel_to_snake(name: str) -> str:
    """Convert CamelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


@dataclass(slots=True)
class Phase(ABC):
    """
    Base class for every executable step of the circular-flow cycle.

    A Phase encapsulates one block of economic bookkeeping (demand,
    trade, production, ...) that mutates the session's working entities
    in place. The phase engine persists the result as a new version
    after :meth:`execute` returns.

    Design Guidelines
    -----------------
    - Implement :meth:`execute`; keep the arithmetic in a system function
      under ``capsim.phases._internal``
    - Override :meth:`validate` to refuse execution before any mutation
      (for instance when an unsupported policy is configured)

    Notes
    -----
    Phases register automatically under their snake_case class name; the
    phase graph refers to them by that name.
    """

    name: ClassVar[str] = ""

    def __init_subclass__(cls, name: str = "", **kwargs: Any) -> None:
        """
        Auto-register Phase subclasses in the global registry.

        Parameters
        ----------
        name : str, optional
            Custom name for the phase.
            If not provided, uses the class name converted to snake_case.
        **kwargs
            Additional keyword arguments passed to parent __init_subclass__.
        """
        super(Phase, cls).__init_subclass__(**kwargs)

        if name != "":
            cls.name = name
        elif cls.name == "":
            cls.name = _camel_to_snake(cls.__name__)

        from capsim.core.registry import _PHASE_REGISTRY

        _PHASE_REGISTRY[cls.name] = cls

    def get_logger(self) -> logging.Logger:
        """
        Get the logger of this phase.

        Returns
        -------
        logging.Logger
            Logger named ``capsim.phases.{phase_name}``; its level can be
            set per phase through the ``logging.phases`` configuration key.
        """
        return logging.getLogger(f"capsim.phases.{self.name}")

    def validate(self, sim: Simulation) -> None:
        """
        Check that the phase may run against the current session.

        Raise to refuse execution. Called before :meth:`execute`, so a
        refusal leaves the working state untouched.
        """

    @abstractmethod
    def execute(self, sim: Simulation) -> None:
        """
        Execute the phase's logic, mutating ``sim``'s working entities.

        Parameters
        ----------
        sim : Simulation
            The session holding entities, configuration and reporter.
        """

    def __repr__(self) -> str:
        """Provide informative repr."""
        return f"{self.__class__.__name__}(name={self.name!r})"
