# src/capsim/core/decorators.py
"""
Decorators for simplified Role and Phase definition.

Instead of::

    @dataclass(slots=True)
    class Commodity(Role):
        unit_value: Float1D

you can write::

    @role
    class Commodity:
        unit_value: Float1D

The decorators make the class inherit from Role/Phase (if it does not
already), apply ``@dataclass(slots=True)`` and leave registration to the
base class ``__init_subclass__`` hook.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def _rebase(cls: type, base: type) -> type:
    """Recreate ``cls`` as a direct subclass of ``base`` (slots-safe)."""
    namespace = {
        "__module__": cls.__module__,
        "__qualname__": cls.__qualname__,
        "__doc__": cls.__doc__,
        "__annotations__": getattr(cls, "__annotations__", {}),
    }
    for attr_name in dir(cls):
        if not attr_name.startswith("__"):
            namespace[attr_name] = getattr(cls, attr_name)
    return type(cls.__name__, (base,), namespace)


def role(
    cls: type[T] | None = None,
    *,
    name: str | None = None,
    **dataclass_kwargs: Any,
) -> type[T] | Callable[[type[T]], type[T]]:
    """
    Decorator to define a Role with automatic inheritance and dataclass.

    Parameters
    ----------
    cls : type | None
        The class to decorate (provided automatically when used without parens)
    name : str | None
        Optional custom registry name. If None, uses the class name.
    **dataclass_kwargs : Any
        Additional keyword arguments for ``@dataclass`` (``slots=True`` by
        default).

    Returns
    -------
    type | Callable
        The decorated class or a decorator function
    """
    from capsim.core.role import Role

    dataclass_kwargs.setdefault("slots", True)

    def decorator(cls: type[T]) -> type[T]:
        if not issubclass(cls, Role):
            cls = _rebase(cls, Role)  # type: ignore[assignment]
        if name is not None:
            cls.role_name = name  # type: ignore[attr-defined]
        return dataclass(**dataclass_kwargs)(cls)

    if cls is None:
        return decorator
    return decorator(cls)


def phase(
    cls: type[T] | None = None,
    *,
    name: str | None = None,
    **dataclass_kwargs: Any,
) -> type[T] | Callable[[type[T]], type[T]]:
    """
    Decorator to define a Phase with automatic inheritance and dataclass.

    Parameters
    ----------
    cls : type | None
        The class to decorate (provided automatically when used without parens)
    name : str | None
        Optional custom name. If None, uses the class name in snake_case.
    **dataclass_kwargs : Any
        Additional keyword arguments for ``@dataclass`` (``slots=True`` by
        default).

    Returns
    -------
    type | Callable
        The decorated class or a decorator function

    Examples
    --------
    >>> @phase
    ... class Prices:
    ...     def execute(self, sim):
    ...         ...
    """
    from capsim.core.phase import Phase

    dataclass_kwargs.setdefault("slots", True)

    def decorator(cls: type[T]) -> type[T]:
        if not issubclass(cls, Phase):
            cls = _rebase(cls, Phase)  # type: ignore[assignment]
        if name is not None:
            cls.name = name  # type: ignore[attr-defined]
        return dataclass(**dataclass_kwargs)(cls)

    if cls is None:
        return decorator
    return decorator(cls)
