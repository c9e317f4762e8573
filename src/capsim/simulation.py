# src/capsim/simulation.py
from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

import capsim.phases  # noqa: F401 - needed to register phases
from capsim import logging
from capsim.config import Config
from capsim.core.default_graph import create_default_graph
from capsim.core.graph import PhaseGraph
from capsim.core.phase import Phase
from capsim.economy import Global, LabourResponse
from capsim.errors import StoreError
from capsim.ledger import EntityKind, InMemoryLedgerStore, LedgerStore, TimeStamp
from capsim.ops import recalculate_aggregates
from capsim.phases._internal.accounting import (
    CommodityTotals,
    check_invariants,
    commodity_totals,
    negative_money_owners,
    set_capitals,
)
from capsim.reporting import Reporter
from capsim.roles import Commodity, Industry, SocialClass, Stock
from capsim.scenario import load_scenario

__all__ = ["Simulation"]

log = logging.getLogger(__name__)


# helpers
# ---------------------------------------------------------------------------
def _read_yaml(obj: str | Path | Mapping[str, Any] | None) -> Dict[str, Any]:
    """Return a plain dict – {} if *obj* is None."""
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    p = Path(obj)
    with p.open("rt", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"config root must be mapping, got {type(data)!r}")
    return dict(data)


def _package_defaults() -> Dict[str, Any]:
    """Load capsim/defaults.yml"""
    txt = resources.files("capsim").joinpath("defaults.yml").read_text()
    return yaml.safe_load(txt) or {}


# Simulation
# ---------------------------------------------------------------------
@dataclass(slots=True)
class Simulation:
    """
    Session that drives one project through the circular-flow cycle.

    The session holds the *working* entities of the current version.
    Every executed leaf phase mutates them and is then persisted as a new
    version in the ledger store, so one period (8 leaf phases) adds 8
    versions.

    One call to `run` → *n* periods → 3 super-phases each → 8 `step` calls.
    """

    # working state (current version)
    com: Commodity
    stk: Stock
    ind: Industry
    cls: SocialClass
    gl: Global

    # configuration
    config: Config

    # phase graph and one instance per leaf phase
    graph: PhaseGraph
    phases: dict[str, Phase]

    # collaborators
    store: LedgerStore
    reporter: Reporter

    # project bookkeeping
    project: int
    description: str
    period: int
    version: int
    last_phase: str

    # comparator settings (presentation; never stored with the entities)
    comparator: str = "previous"
    custom_version: int | None = None

    # Constructor
    # ---------------------------------------------------------------------
    @classmethod
    def init(
        cls,
        config: str | Path | Mapping[str, Any] | None = None,
        scenario: str | Path | Mapping[str, Any] | None = None,
        store: LedgerStore | None = None,
        reporter: Reporter | None = None,
        **overrides: Any,  # anything here wins last
    ) -> "Simulation":
        """
        Build a Simulation and persist its starting state as version 1.

        Order of precedence (later overrides earlier):

            1. package defaults  (capsim/defaults.yml)
            2. *config*  (Path / str / Mapping / None)
            3. explicit keyword arguments (**overrides)

        Parameters
        ----------
        config : str, Path or Mapping, optional
            User configuration file or mapping.
        scenario : str, Path or Mapping, optional
            Scenario to load; wins over the configured ``scenario``.
        store : LedgerStore, optional
            Version store. Default: a fresh :class:`InMemoryLedgerStore`.
        reporter : Reporter, optional
            Receiver of data warnings and fatal errors.

        Raises
        ------
        ValueError
            If the configuration, the scenario or the phase graph is invalid.
        StoreError
            If the store already holds the scenario's project.
        """
        # 1 + 2 + 3 → one merged dict
        cfg_dict: Dict[str, Any] = _package_defaults()
        cfg_dict.update(_read_yaml(config))
        cfg_dict.update(overrides)
        if scenario is not None:
            cfg_dict["scenario"] = scenario

        # Validate configuration (centralized validation)
        from capsim.config import ConfigValidator

        ConfigValidator.validate_config(cfg_dict)
        ConfigValidator.validate_scenario(cfg_dict["scenario"])

        graph_path = cfg_dict.get("phase_graph_path")
        if graph_path is not None:
            ConfigValidator.validate_phase_graph_path(graph_path)
            ConfigValidator.validate_phase_graph_yaml(graph_path)

        cls._configure_logging(cfg_dict.pop("logging", None) or {})

        scn = load_scenario(cfg_dict["scenario"])
        if cfg_dict.get("labour_supply_response") is not None:
            scn.gl.labour_supply_response = LabourResponse(
                cfg_dict["labour_supply_response"]
            )

        source = cfg_dict["scenario"]
        if isinstance(source, Mapping):
            scenario_name = str(source.get("description", "<inline>"))
        else:
            scenario_name = str(source)
        cfg = Config(
            epsilon=float(cfg_dict["epsilon"]),
            rounding_precision=int(cfg_dict["rounding_precision"]),
            n_periods=int(cfg_dict["n_periods"]),
            scenario=scenario_name,
            distribution_policy=cfg_dict["distribution_policy"],
            price_dynamics=cfg_dict["price_dynamics"],
            labour_supply_response=cfg_dict.get("labour_supply_response"),
            comparator=cfg_dict["comparator"],
            phase_graph_path=graph_path,
        )

        graph = (
            PhaseGraph.from_yaml(graph_path)
            if graph_path is not None
            else create_default_graph()
        )
        phases = {name: graph.phase_cls(name)() for name in graph.leaf_steps}

        sim = cls(
            com=scn.com,
            stk=scn.stk,
            ind=scn.ind,
            cls=scn.cls,
            gl=scn.gl,
            config=cfg,
            graph=graph,
            phases=phases,
            store=store if store is not None else InMemoryLedgerStore(),
            reporter=reporter if reporter is not None else Reporter(),
            project=scn.project,
            description=scn.description,
            period=1,
            version=0,
            last_phase=graph.last_step,
            comparator=cfg.comparator,
        )
        sim._start()
        return sim

    @staticmethod
    def _configure_logging(log_config: Dict[str, Any]) -> None:
        """
        Configure logging levels for capsim loggers.

        Parameters
        ----------
        log_config : dict
            Logging configuration with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG')
            - phases: dict[str, str] (per-phase overrides)
        """
        default_level = log_config.get("default_level", "INFO")
        logging.getLogger("capsim").setLevel(logging.level_from_name(default_level))

        phase_levels = log_config.get("phases") or {}
        for phase_name, level in phase_levels.items():
            logger_name = f"capsim.phases.{phase_name}"
            logging.getLogger(logger_name).setLevel(logging.level_from_name(level))

    def _start(self) -> None:
        """Normalise the loaded stocks and write version 1."""
        precision = self.config.rounding_precision
        recalculate_aggregates(self.stk, self.com, precision=precision)
        set_capitals(self.stk, self.ind)
        self.check_invariants()

        stamp = TimeStamp(
            version=1, project=self.project, period=self.period, description="start"
        )
        self.store.write_new_version(self.project, stamp, self._snapshot())
        self.store.set_current_version(self.project, stamp.version)
        self.version = stamp.version
        log.info(
            f"Project {self.project} '{self.description}' initialised: "
            f"{self.com.size} commodities, {self.ind.size} industries, "
            f"{self.cls.size} social classes, {self.stk.size} stocks"
        )

    def _snapshot(self) -> dict[EntityKind, Any]:
        return {
            EntityKind.COMMODITY: self.com,
            EntityKind.STOCK: self.stk,
            EntityKind.INDUSTRY: self.ind,
            EntityKind.SOCIAL_CLASS: self.cls,
            EntityKind.GLOBAL: self.gl,
        }

    # public API
    # ---------------------------------------------------------------------
    @property
    def next_phase(self) -> str:
        """The only leaf phase that may run next."""
        return self.graph.next_step(self.last_phase)

    def run(self, n_periods: int | None = None) -> None:
        """
        Advance the simulation *n_periods* whole periods
        (defaults to the configured ``n_periods``).

        A period interrupted by :meth:`step` is completed first and does
        not count towards *n_periods*.

        Returns
        -------
        None   (state is mutated in-place)
        """
        while self.last_phase != self.graph.last_step:
            self.step()

        n = n_periods if n_periods is not None else self.config.n_periods
        for _ in range(int(n)):
            log.info(f"===== Period {self.period} =====")
            for super_name in self.graph.super_phases:
                self.step_phase(super_name)

    def step(self) -> str:
        """
        Execute the next leaf phase and persist it as a new version.

        Returns
        -------
        str
            Name of the phase that ran.
        """
        name = self.next_phase
        self._execute(name)
        return name

    def step_phase(self, name: str) -> list[str]:
        """
        Run one super-phase (all of its leaves) or one leaf phase.

        Only the next permissible phase is accepted: a leaf must be
        :attr:`next_phase`, a super-phase must be the one whose first leaf
        is :attr:`next_phase`.

        Returns
        -------
        list[str]
            Names of the leaf phases that ran.

        Raises
        ------
        ValueError
            If ``name`` is not the next permissible phase.
        """
        if name not in self.graph:
            raise ValueError(f"Unknown phase '{name}'")

        expected = self.next_phase
        if self.graph.is_super(name):
            children = self.graph.children(name)
            if children[0] != expected:
                raise ValueError(
                    f"Cannot run super-phase '{name}' now; "
                    f"next phase is '{expected}' "
                    f"(of '{self.graph.parent(expected)}')"
                )
            for child in children:
                self._execute(child)
            return list(children)

        if name != expected:
            raise ValueError(f"Cannot run phase '{name}' now; next phase is '{expected}'")
        self._execute(name)
        return [name]

    def _execute(self, name: str) -> None:
        phase = self.phases[name]
        phase.validate(self)
        log.debug(f"Executing phase '{name}' (period {self.period})")
        phase.execute(self)
        self.check_invariants()
        self.advance_one_step(name, self.graph.parent(name))
        self.last_phase = name
        if name == self.graph.last_step:
            self.period += 1

    def advance_one_step(self, phase_name: str, parent_name: str | None) -> TimeStamp:
        """
        Persist the working state as a new version named after ``phase_name``.

        Money stocks below ``-epsilon`` are reported as data warnings, the
        whole state is written atomically, and only then does the
        current-version pointer move.

        Raises
        ------
        StoreError
            If the store refuses the write. The failure is reported as
            fatal, the pointer stays put and the working state is reloaded
            from the store, discarding the phase's mutations.
        """
        for owner in negative_money_owners(
            self.stk, self.ind, self.cls, eps=self.config.epsilon
        ):
            self.reporter.report_warning(f"Money stock of {owner} is negative")

        stamp = TimeStamp(
            version=self.version + 1,
            project=self.project,
            period=self.period,
            description=phase_name,
            super_state=parent_name,
            predecessor=self.version,
        )
        try:
            self.store.write_new_version(self.project, stamp, self._snapshot())
        except StoreError as exc:
            self.reporter.report_fatal(
                f"Could not persist phase '{phase_name}' as version "
                f"{stamp.version} of project {self.project}: {exc}"
            )
            self.reload()
            raise

        self.store.set_current_version(self.project, stamp.version)
        self.version = stamp.version
        log.debug(f"  Version {stamp.version}: {phase_name} (period {self.period})")
        return stamp

    def reload(self) -> None:
        """Replace the working state with the store's current version."""
        version = self.store.current_version(self.project)
        snapshot = self.store.read_snapshot(self.project, version)
        self.com = snapshot[EntityKind.COMMODITY]
        self.stk = snapshot[EntityKind.STOCK]
        self.ind = snapshot[EntityKind.INDUSTRY]
        self.cls = snapshot[EntityKind.SOCIAL_CLASS]
        self.gl = snapshot[EntityKind.GLOBAL]

        stamp = self.store.timestamp(self.project, version)
        self.version = version
        if stamp.description in self.graph and not self.graph.is_super(
            stamp.description
        ):
            self.last_phase = stamp.description
        else:
            self.last_phase = self.graph.last_step
        self.period = stamp.period + (
            1 if stamp.description == self.graph.last_step else 0
        )
        log.debug(f"Reloaded version {version} ('{stamp.description}')")

    def check_invariants(self) -> list[str]:
        """
        Names of commodities whose total value is not quantity × unit value.

        Violations are logged at ERROR level; they never stop the run.
        """
        return check_invariants(
            self.stk,
            self.com,
            eps=self.config.epsilon,
            precision=self.config.rounding_precision,
        )

    def totals(self) -> CommodityTotals:
        """Per-commodity totals of the working state."""
        return commodity_totals(
            self.stk, self.com, precision=self.config.rounding_precision
        )

    def timestamps(self) -> list[TimeStamp]:
        """Every version record of the project, oldest first."""
        return self.store.timestamps(self.project)

    def set_comparator(self, mode: str, version: int | None = None) -> None:
        """
        Select the reference version deltas are computed against.

        Parameters
        ----------
        mode : {"previous", "period_start", "period_end", "custom"}
            Comparator mode.
        version : int, optional
            Reference version; required for ``custom``.

        Raises
        ------
        ValueError
            If the mode is unknown or ``custom`` lacks a version.
        StoreError
            If ``version`` does not exist.
        """
        from capsim.config import ConfigValidator

        if mode not in ConfigValidator.COMPARATOR_MODES:
            raise ValueError(
                f"Comparator mode must be one of "
                f"{list(ConfigValidator.COMPARATOR_MODES)}, got '{mode}'"
            )
        if mode == "custom":
            if version is None:
                raise ValueError("Comparator 'custom' needs a version")
            self.store.timestamp(self.project, version)
        self.comparator = mode
        self.custom_version = version if mode == "custom" else None

    def comparator_version(self, version: int | None = None) -> int:
        """Reference version of ``version`` (default: current) under the comparator."""
        from capsim.results import comparator_version

        return comparator_version(
            self.timestamps(),
            self.version if version is None else version,
            self.comparator,
            self.custom_version,
        )

    def history(self) -> Any:
        """:class:`~capsim.results.SimulationHistory` of this project."""
        from capsim.results import SimulationHistory

        return SimulationHistory(
            self.store, self.project, self.comparator, self.custom_version
        )

    def get_role(self, name: str) -> Any:
        """
        Get working role instance by name.

        Parameters
        ----------
        name : str
            Role name (case-insensitive): 'Commodity', 'Stock', 'Industry',
            'SocialClass' (or 'social_class'), 'Global'.

        Raises
        ------
        ValueError
            If role name not found.

        Examples
        --------
        >>> sim = Simulation.init()
        >>> ind = sim.get_role("Industry")
        >>> assert ind is sim.ind
        """
        role_map = {
            "commodity": self.com,
            "stock": self.stk,
            "industry": self.ind,
            "socialclass": self.cls,
            "social_class": self.cls,
            "global": self.gl,
        }

        name_lower = name.lower()
        if name_lower not in role_map:
            available = list(role_map.keys())
            raise ValueError(f"Role '{name}' not found. Available roles: {available}")

        return role_map[name_lower]

    def get_phase(self, name: str) -> Phase:
        """
        Get the phase instance run for leaf ``name``.

        Raises
        ------
        KeyError
            If ``name`` is not a leaf of the phase graph.
        """
        if name not in self.phases:
            raise KeyError(
                f"Phase '{name}' not found. Available: {list(self.phases)}"
            )
        return self.phases[name]
