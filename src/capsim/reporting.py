"""
User-facing reporting of data errors and fatal failures.

The engine never pops dialogs; it hands messages to a :class:`Reporter`.
The default reporter logs them and keeps them in lists so a hosting UI
(or a test) can inspect what happened during a phase.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from capsim import logging

log = logging.getLogger("capsim.reporter")


@dataclass(slots=True)
class Reporter:
    """
    Collects warnings and fatal messages raised by the phase engine.

    Attributes
    ----------
    warnings : list[str]
        Data errors; the phase that reported them carried on.
    fatals : list[str]
        Failures that aborted a transition.
    """

    warnings: list[str] = field(default_factory=list)
    fatals: list[str] = field(default_factory=list)

    def report_warning(self, message: str) -> None:
        """Record a data error and log it at WARNING level."""
        log.warning(message)
        self.warnings.append(message)

    def report_fatal(self, message: str) -> None:
        """Record an aborting failure and log it at ERROR level."""
        log.error(message)
        self.fatals.append(message)

    def clear(self) -> None:
        """Forget all collected messages."""
        self.warnings.clear()
        self.fatals.clear()
