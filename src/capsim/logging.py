"""
Custom logging configuration for capsim.

Extends Python's standard logging with a DEEP_DEBUG level (5) used for
per-stock traces inside the phase algorithms. Every phase logs through
``capsim.phases.<phase_name>`` so that levels can be tuned phase by
phase from the configuration.

Log Levels
----------
- CRITICAL (50)
- ERROR (40): invariant violations, fatal store errors
- WARNING (30): data errors reported to the user
- INFO (20): phase banners and totals (default)
- DEBUG (10): per-entity detail
- DEEP_DEBUG (5): per-stock traces

Examples
--------
>>> from capsim import logging
>>> log = logging.getLogger("capsim.phases.trade")
>>> log.info("Trade executing")
>>> log.deep("Very verbose output")

Configure per-phase levels:

>>> import capsim
>>> sim = capsim.Simulation.init(
...     logging={"default_level": "INFO", "phases": {"trade": "DEBUG"}}
... )
"""

import logging
from typing import Any

(CRITICAL, ERROR, WARNING, INFO, DEBUG) = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)
DEEP_DEBUG = 5
logging.addLevelName(DEEP_DEBUG, "DEEP")


class SimLogger(logging.Logger):
    """
    Logger with DEEP_DEBUG support.

    Adds :meth:`deep` for very verbose output at level 5.
    """

    def deep(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        Log message at DEEP_DEBUG level (5).

        Parameters
        ----------
        msg : str
            Message format string.
        *args : Any
            Arguments for message formatting.
        **kwargs : Any
            Additional logging kwargs.
        """
        if self.isEnabledFor(DEEP_DEBUG):
            self._log(DEEP_DEBUG, msg, args, **kwargs)


logging.setLoggerClass(SimLogger)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)


def getLogger(name: str | None = None) -> SimLogger:
    """
    Get a SimLogger instance.

    Parameters
    ----------
    name : str, optional
        Logger name. If None, returns root logger.

    Returns
    -------
    SimLogger
        Logger instance with ``deep()`` method.
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def level_from_name(name: str) -> int:
    """Translate a configured level name (incl. ``DEEP_DEBUG``) to its number."""
    upper = name.upper()
    if upper == "DEEP_DEBUG":
        return DEEP_DEBUG
    return int(getattr(logging, upper))
