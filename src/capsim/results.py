"""
Version history of a simulation project.

This module reads raw entity values back out of a :class:`LedgerStore`,
one value per stored version, and computes deltas against a comparator
version resolved on demand (comparators are never stored with the
entities).

Note: pandas and matplotlib are optional dependencies. They are only
required by :meth:`SimulationHistory.to_dataframe` and
:meth:`SimulationHistory.plot` respectively.
Install with: pip install capsim[pandas] or pip install capsim[plot]
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING, Any

import numpy as np

from capsim.ledger import EntityKind, LedgerStore, TimeStamp
from capsim.typing import Float1D

if TYPE_CHECKING:  # pragma: no cover
    from pandas import DataFrame

__all__ = ["SimulationHistory", "comparator_version"]


def _import_pandas() -> Any:
    """
    Lazily import pandas with helpful error message if not installed.

    Raises
    ------
    ImportError
        If pandas is not installed.
    """
    try:
        import pandas as pd

        return pd
    except ImportError:  # pragma: no cover
        raise ImportError(
            "pandas is required for DataFrame export. "
            "Install it with: pip install pandas"
        ) from None


def comparator_version(
    stamps: Sequence[TimeStamp],
    version: int,
    mode: str = "previous",
    custom: int | None = None,
) -> int:
    """
    Resolve the reference version a delta at ``version`` is taken against.

    Parameters
    ----------
    stamps : sequence of TimeStamp
        Every version record of the project, oldest first.
    version : int
        Version whose values are being compared.
    mode : {"previous", "period_start", "period_end", "custom"}
        - ``previous``: the version's predecessor
        - ``period_start``: the last version before the version's period
          began (the initial version during the first period)
        - ``period_end``: the latest stored version of the same period
        - ``custom``: ``custom``, falling back to the predecessor while unset
    custom : int, optional
        Fixed reference version of the ``custom`` mode.

    Returns
    -------
    int
        Reference version; ``version`` itself when it has no predecessor.

    Raises
    ------
    KeyError
        If ``version`` is not among ``stamps``.
    ValueError
        If ``mode`` is unknown.
    """
    by_version = {ts.version: ts for ts in stamps}
    if version not in by_version:
        raise KeyError(f"Unknown version {version}")
    stamp = by_version[version]
    previous = stamp.predecessor if stamp.predecessor is not None else version

    if mode == "previous":
        return previous
    if mode == "custom":
        return custom if custom is not None else previous
    if mode == "period_start":
        earlier = [ts.version for ts in stamps if ts.period < stamp.period]
        return max(earlier) if earlier else min(by_version)
    if mode == "period_end":
        return max(ts.version for ts in stamps if ts.period == stamp.period)
    raise ValueError(f"Unknown comparator mode '{mode}'")


class SimulationHistory:
    """
    Read-only view of every stored version of one project.

    Parameters
    ----------
    store : LedgerStore
        Store holding the project's versions.
    project : int
        Project number.
    mode : str, default "previous"
        Default comparator mode of :meth:`delta`.
    custom : int, optional
        Reference version of the ``custom`` comparator mode.

    Examples
    --------
    >>> sim = capsim.Simulation.init()
    >>> sim.run(2)
    >>> hist = SimulationHistory(sim.store, sim.project)
    >>> hist.series("industry", "Department I", "output")
    array([1000., 1000., ...])
    """

    def __init__(
        self,
        store: LedgerStore,
        project: int,
        mode: str = "previous",
        custom: int | None = None,
    ) -> None:
        self.store = store
        self.project = project
        self.mode = mode
        self.custom = custom

    @property
    def timestamps(self) -> list[TimeStamp]:
        return self.store.timestamps(self.project)

    @property
    def versions(self) -> list[int]:
        return [ts.version for ts in self.timestamps]

    def value_at(
        self, kind: EntityKind | str, key: Hashable, attribute: str, version: int
    ) -> Any:
        """
        Raw value of one attribute of one entity at ``version``.

        Raises
        ------
        KeyError
            If no entity of ``kind`` has ``key`` at that version.
        """
        kind = EntityKind(kind)
        record = self.store.read_entity(kind, self.project, version, key)
        if record is None:
            raise KeyError(f"No {kind.value} {key!r} at version {version}")
        return record[attribute]

    def series(
        self, kind: EntityKind | str, key: Hashable, attribute: str
    ) -> Float1D:
        """Values of one attribute over every version, oldest first."""
        return np.array(
            [self.value_at(kind, key, attribute, v) for v in self.versions],
            dtype=np.float64,
        )

    def delta(
        self,
        kind: EntityKind | str,
        key: Hashable,
        attribute: str,
        version: int,
        against: int | None = None,
    ) -> float:
        """
        Change of an attribute at ``version`` relative to a reference version.

        ``against`` defaults to the version resolved by the history's
        comparator mode.
        """
        if against is None:
            against = comparator_version(
                self.timestamps, version, self.mode, self.custom
            )
        now = self.value_at(kind, key, attribute, version)
        then = self.value_at(kind, key, attribute, against)
        return float(now) - float(then)

    def to_dataframe(self, kind: EntityKind | str) -> DataFrame:
        """
        Every entity of ``kind`` at every version, one row per entity and version.

        Columns are ``version``, ``period``, ``phase``, ``key`` and the
        entity's fields.

        Raises
        ------
        ImportError
            If pandas is not installed.
        """
        pd = _import_pandas()
        from capsim.ledger.keys import entity_keys

        kind = EntityKind(kind)
        rows = []
        for ts in self.timestamps:
            snapshot = self.store.read_snapshot(self.project, ts.version)
            for i, key in enumerate(entity_keys(kind, snapshot)):
                row = {
                    "version": ts.version,
                    "period": ts.period,
                    "phase": ts.description,
                    "key": key,
                }
                row.update(snapshot[kind].record(i))
                rows.append(row)
        return pd.DataFrame(rows)

    def plot(
        self,
        kind: EntityKind | str,
        keys: Sequence[Hashable],
        attribute: str,
        ax: Any = None,
    ) -> Any:
        """
        Plot one attribute of several entities against the version number.

        Returns the matplotlib Axes drawn on.
        """
        import matplotlib.pyplot as plt

        if ax is None:
            _, ax = plt.subplots(figsize=(8, 4))
        versions = self.versions
        for key in keys:
            ax.plot(versions, self.series(kind, key, attribute), label=str(key))
        ax.set_xlabel("Version")
        ax.set_ylabel(attribute.replace("_", " ").capitalize())
        ax.legend()
        return ax
