"""Role (entity family) base class definition."""

from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, fields
from typing import Any, ClassVar

import numpy as np


@dataclass(slots=True)
class Role(ABC):
    """
    Base class for every entity family of the economy.

    A Role is a dataclass of one-dimensional NumPy arrays; index ``i`` of
    every array describes entity ``i`` of the family at one version.
    ``Stock.quantity[3]`` is the quantity held by stock 3.

    Design Guidelines
    -----------------
    - All state variables are NumPy arrays of equal length
    - Mutation happens in system functions and :mod:`capsim.ops`, never in
      role methods
    - Use the ``@role`` decorator to define and register new roles

    Notes
    -----
    ``__init_subclass__`` registers every subclass in the global registry
    under its class name (or the ``name`` keyword).
    """

    role_name: ClassVar[str | None] = None

    def __init_subclass__(cls, name: str | None = None, **kwargs: Any) -> None:
        """
        Auto-register Role subclasses in the global registry.

        Parameters
        ----------
        name : str, optional
            Custom name for the role. If not provided, uses the class name.
        **kwargs
            Additional keyword arguments passed to parent __init_subclass__.
        """
        super(Role, cls).__init_subclass__(**kwargs)

        # @dataclass(slots=True) builds a second class and re-enters this hook
        # without the keyword, so keep a name that is already set.
        if name is not None:
            cls.role_name = name
        elif cls.role_name is None:
            cls.role_name = cls.__name__

        from capsim.core.registry import _ROLE_REGISTRY

        _ROLE_REGISTRY[cls.role_name] = cls

    @property
    def size(self) -> int:
        """Number of entities in the family."""
        first = fields(self)[0]
        return int(np.asarray(getattr(self, first.name)).shape[0])

    def copy(self) -> Role:
        """Return a deep copy whose arrays share no memory with ``self``."""
        return type(self)(
            **{f.name: np.array(getattr(self, f.name), copy=True) for f in fields(self)}
        )

    def record(self, i: int) -> dict[str, Any]:
        """
        Return entity ``i`` as a plain ``{field: python scalar}`` mapping.

        Parameters
        ----------
        i : int
            Entity index within the family.
        """
        return {f.name: getattr(self, f.name)[i].item() for f in fields(self)}

    def __repr__(self) -> str:
        """Show role name, field count and entity count."""
        role_name = self.role_name or self.__class__.__name__
        return f"{role_name}(fields={len(fields(self))}, size={self.size})"
