"""
Immutable phase graph for the circular-flow cycle.

The cycle has two tiers. *Super-phases* (exchange, production,
distribution) follow one another in a ring; each owns an ordered chain
of *leaf* phases, the executable steps. The successor of the last leaf
of a super-phase is the next super-phase, whose first leaf is the next
executable step.

The graph is assembled once by :class:`PhaseGraphBuilder` (usually from
``default_phases.yml``) and frozen into a :class:`PhaseGraph`; nothing
mutates it afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterator, Literal, Mapping

import yaml

from capsim.core.registry import get_phase

if TYPE_CHECKING:
    from capsim.core.phase import Phase


@dataclass(slots=True, frozen=True)
class PhaseDescriptor:
    """
    One node of the phase graph.

    Attributes
    ----------
    name : str
        Phase identifier (snake_case).
    successor : str
        Name of the phase that follows this one in its tier.
    parent : str or None
        Super-phase owning this leaf; None for super-phases.
    children : tuple[str, ...]
        Ordered leaves of a super-phase; empty for leaves.
    phase_cls : type[Phase] or None
        Registered computation for a leaf; None for super-phases.
    """

    name: str
    successor: str
    parent: str | None = None
    children: tuple[str, ...] = ()
    phase_cls: type[Phase] | None = None

    @property
    def is_super(self) -> bool:
        return bool(self.children)


@dataclass(slots=True, frozen=True)
class PhaseGraph:
    """
    Frozen mapping ``name -> PhaseDescriptor`` with traversal helpers.

    Build instances with :class:`PhaseGraphBuilder` or :meth:`from_yaml`.
    """

    descriptors: Mapping[str, PhaseDescriptor]
    super_phases: tuple[str, ...]
    leaf_steps: tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        leaves = tuple(
            child
            for super_name in self.super_phases
            for child in self.descriptors[super_name].children
        )
        object.__setattr__(self, "leaf_steps", leaves)
        object.__setattr__(
            self, "descriptors", MappingProxyType(dict(self.descriptors))
        )

    # lookup
    # ------------------------------------------------------------------
    def __getitem__(self, name: str) -> PhaseDescriptor:
        try:
            return self.descriptors[name]
        except KeyError:
            raise KeyError(
                f"Unknown phase '{name}'. Known phases: {sorted(self.descriptors)}"
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self.descriptors

    def __iter__(self) -> Iterator[str]:
        return iter(self.leaf_steps)

    def __len__(self) -> int:
        return len(self.leaf_steps)

    def is_super(self, name: str) -> bool:
        return self[name].is_super

    def parent(self, name: str) -> str | None:
        return self[name].parent

    def children(self, name: str) -> tuple[str, ...]:
        return self[name].children

    def phase_cls(self, name: str) -> type[Phase]:
        cls = self[name].phase_cls
        if cls is None:
            raise KeyError(f"Phase '{name}' is a super-phase and has no computation")
        return cls

    # traversal
    # ------------------------------------------------------------------
    def successor(self, name: str) -> str:
        """Return the fixed successor of ``name`` in its own tier."""
        return self[name].successor

    def next_step(self, name: str) -> str:
        """
        Return the next *executable* leaf after ``name``.

        A super-phase successor is resolved to its first child, so calling
        this repeatedly walks the leaf cycle.
        """
        nxt = self.successor(name)
        descriptor = self[nxt]
        return descriptor.children[0] if descriptor.is_super else nxt

    @property
    def first_step(self) -> str:
        return self.leaf_steps[0]

    @property
    def last_step(self) -> str:
        """Leaf that closes a period (``accumulate`` by default)."""
        return self.leaf_steps[-1]

    def cycle_length(self, tier: Literal["leaf", "super"] = "leaf") -> int:
        """Number of steps after which ``successor``/``next_step`` returns home."""
        return len(self.super_phases) if tier == "super" else len(self.leaf_steps)

    # construction
    # ------------------------------------------------------------------
    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> PhaseGraph:
        """
        Build a graph from a parsed YAML document.

        Expected shape::

            super_phases: [exchange, production, distribution]
            phases:
              exchange: [demand, constrain, trade]
              ...
        """
        if not isinstance(data, Mapping):
            raise ValueError(
                f"Phase graph must be a mapping, got {type(data).__name__}"
            )
        for key in ("super_phases", "phases"):
            if key not in data:
                raise ValueError(f"Phase graph must have '{key}' key")

        builder = PhaseGraphBuilder()
        phases = data["phases"]
        for super_name in data["super_phases"]:
            builder.add_super_phase(super_name)
            for child in phases.get(super_name, []) or []:
                builder.add_phase(child, parent=super_name)
        for super_name in phases:
            if super_name not in data["super_phases"]:
                raise ValueError(
                    f"Phases listed under unknown super-phase '{super_name}'"
                )
        return builder.build()

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> PhaseGraph:
        """Build a graph from a YAML file (see :meth:`from_mapping`)."""
        with open(Path(yaml_path)) as f:
            data = yaml.safe_load(f)
        return cls.from_mapping(data)


class PhaseGraphBuilder:
    """
    Collects super-phases and their leaves, then freezes them into a graph.

    Examples
    --------
    >>> graph = (
    ...     PhaseGraphBuilder()
    ...     .add_super_phase("exchange")
    ...     .add_phase("demand", parent="exchange")
    ...     .build()
    ... )
    """

    def __init__(self) -> None:
        self._supers: list[str] = []
        self._children: dict[str, list[str]] = {}

    def add_super_phase(self, name: str) -> PhaseGraphBuilder:
        if name in self._children or self._owner(name) is not None:
            raise ValueError(f"Duplicate phase name '{name}'")
        self._supers.append(name)
        self._children[name] = []
        return self

    def add_phase(self, name: str, *, parent: str) -> PhaseGraphBuilder:
        if parent not in self._children:
            raise ValueError(f"Phase '{name}' refers to unknown super-phase '{parent}'")
        if name in self._children or self._owner(name) is not None:
            raise ValueError(f"Duplicate phase name '{name}'")
        self._children[parent].append(name)
        return self

    def _owner(self, name: str) -> str | None:
        for super_name, children in self._children.items():
            if name in children:
                return super_name
        return None

    def build(self) -> PhaseGraph:
        """
        Validate and freeze the collected phases.

        Raises
        ------
        ValueError
            If the graph is empty, a super-phase has no leaves, or a leaf
            is not a registered phase.
        """
        if not self._supers:
            raise ValueError("Phase graph has no super-phases")

        descriptors: dict[str, PhaseDescriptor] = {}
        n_super = len(self._supers)
        for i, super_name in enumerate(self._supers):
            children = self._children[super_name]
            if not children:
                raise ValueError(f"Super-phase '{super_name}' has no phases")
            next_super = self._supers[(i + 1) % n_super]
            descriptors[super_name] = PhaseDescriptor(
                name=super_name, successor=next_super, children=tuple(children)
            )
            for j, child in enumerate(children):
                try:
                    phase_cls = get_phase(child)
                except KeyError as exc:
                    raise ValueError(str(exc.args[0])) from None
                successor = children[j + 1] if j + 1 < len(children) else next_super
                descriptors[child] = PhaseDescriptor(
                    name=child,
                    successor=successor,
                    parent=super_name,
                    phase_cls=phase_cls,
                )

        return PhaseGraph(descriptors=descriptors, super_phases=tuple(self._supers))
