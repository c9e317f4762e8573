"""
Versioned storage of entity snapshots.

The phase engine only needs the operations of :class:`LedgerStore`;
what sits behind them (memory, files, a database) is up to the
implementation. :class:`InMemoryLedgerStore` keeps an arena of snapshots
keyed by ``(project, version)``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Hashable, Mapping

from capsim import logging
from capsim.errors import DuplicateVersionError, StoreError
from capsim.ledger.keys import EntityKind, entity_keys
from capsim.ledger.timestamp import TimeStamp
from capsim.roles import StockType

log = logging.getLogger(__name__)

Snapshot = Mapping[EntityKind, Any]


def _normalize_key(kind: EntityKind, key: Hashable) -> Hashable:
    if kind is EntityKind.STOCK and isinstance(key, tuple) and len(key) == 3:
        owner, commodity, stock_type = key
        if isinstance(stock_type, StockType):
            stock_type = stock_type.name.lower()
        return (owner, commodity, str(stock_type).lower())
    return key


class LedgerStore(ABC):
    """
    Boundary between the phase engine and persistent storage.

    Implementations must make :meth:`write_new_version` atomic: either
    every entity family of the version becomes visible, or none does.
    Reads return copies; mutating them never alters stored state.
    """

    @abstractmethod
    def read_entities(self, kind: EntityKind, project: int, version: int) -> Any:
        """Return a copy of the whole ``kind`` family at ``version``."""

    @abstractmethod
    def write_new_version(
        self, project: int, timestamp: TimeStamp, entities: Snapshot
    ) -> None:
        """
        Persist every entity family under ``timestamp.version``.

        Raises
        ------
        DuplicateVersionError
            If the version already exists.
        StoreError
            If the write cannot be completed; nothing is persisted.
        """

    @abstractmethod
    def current_version(self, project: int) -> int:
        """Return the version the project's pointer designates."""

    @abstractmethod
    def set_current_version(self, project: int, version: int) -> None:
        """Move the project's pointer to an existing version."""

    @abstractmethod
    def timestamps(self, project: int) -> list[TimeStamp]:
        """Return every version record of the project, oldest first."""

    def read_entity(
        self, kind: EntityKind | str, project: int, version: int, key: Hashable
    ) -> dict[str, Any] | None:
        """
        Return one entity as a record, looked up by natural key.

        Returns None when no entity of ``kind`` has that key.
        """
        kind = EntityKind(kind)
        snapshot = self.read_snapshot(project, version)
        keys = entity_keys(kind, snapshot)
        key = _normalize_key(kind, key)
        if key not in keys:
            return None
        return snapshot[kind].record(keys.index(key))

    def read_snapshot(self, project: int, version: int) -> dict[EntityKind, Any]:
        """Return copies of every entity family at ``version``."""
        return {kind: self.read_entities(kind, project, version) for kind in EntityKind}

    def timestamp(self, project: int, version: int) -> TimeStamp:
        for ts in self.timestamps(project):
            if ts.version == version:
                return ts
        raise StoreError(f"Project {project} has no version {version}")


class InMemoryLedgerStore(LedgerStore):
    """
    Append-only arena of snapshots held in memory.

    Examples
    --------
    >>> store = InMemoryLedgerStore()
    >>> sim = Simulation.init(store=store)
    >>> [ts.description for ts in store.timestamps(sim.project)]
    ['start']
    """

    def __init__(self) -> None:
        self._arena: dict[tuple[int, int], dict[EntityKind, Any]] = {}
        self._stamps: dict[int, dict[int, TimeStamp]] = {}
        self._current: dict[int, int] = {}

    def _entry(self, project: int, version: int) -> dict[EntityKind, Any]:
        try:
            return self._arena[(project, version)]
        except KeyError:
            raise StoreError(f"Project {project} has no version {version}") from None

    def read_entities(self, kind: EntityKind, project: int, version: int) -> Any:
        return self._entry(project, version)[EntityKind(kind)].copy()

    def write_new_version(
        self, project: int, timestamp: TimeStamp, entities: Snapshot
    ) -> None:
        if timestamp.project != project:
            raise StoreError(
                f"Timestamp belongs to project {timestamp.project}, not {project}"
            )
        if (project, timestamp.version) in self._arena:
            raise DuplicateVersionError(project, timestamp.version)
        missing = [kind.value for kind in EntityKind if kind not in entities]
        if missing:
            raise StoreError(f"Version {timestamp.version} is missing {missing}")

        # copy everything first so a failure leaves the arena untouched
        copies = {kind: entities[kind].copy() for kind in EntityKind}
        self._arena[(project, timestamp.version)] = copies
        self._stamps.setdefault(project, {})[timestamp.version] = timestamp
        log.debug(
            "  Stored version %d of project %d (%s)",
            timestamp.version,
            project,
            timestamp.description,
        )

    def current_version(self, project: int) -> int:
        if project not in self._current:
            raise StoreError(f"Project {project} has no current version")
        return self._current[project]

    def set_current_version(self, project: int, version: int) -> None:
        self._entry(project, version)
        self._current[project] = version

    def timestamps(self, project: int) -> list[TimeStamp]:
        stamps = self._stamps.get(project, {})
        return [stamps[v] for v in sorted(stamps)]

    def __contains__(self, item: object) -> bool:
        return item in self._arena
