"""Default circular-flow phase graph."""

from importlib import resources
from pathlib import Path

from capsim.core.graph import PhaseGraph


def create_default_graph() -> PhaseGraph:
    """
    Create the default phase graph from ``capsim/default_phases.yml``.

    Returns
    -------
    PhaseGraph
        exchange (demand, constrain, trade) -> production
        (industries_produce, prices, classes_reproduce) -> distribution
        (revenue, accumulate) -> exchange.

    Notes
    -----
    Every leaf must already be registered, so ``capsim.phases`` has to be
    imported first (``import capsim`` does this).
    """
    traversable = resources.files("capsim") / "default_phases.yml"
    with resources.as_file(traversable) as yaml_fs_path:
        return PhaseGraph.from_yaml(Path(yaml_fs_path))
