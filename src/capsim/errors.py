"""
Exception taxonomy for capsim.

Data errors inside a phase are *reported* (see :mod:`capsim.reporting`)
and the phase carries on; the exceptions here are raised for the cases
that must stop the caller.
"""

from __future__ import annotations


class CapsimError(Exception):
    """Base class for all capsim errors."""


class StoreError(CapsimError):
    """A ledger store read or write could not be completed."""


class DuplicateVersionError(StoreError):
    """A version with the same (project, version) key already exists."""

    def __init__(self, project: int, version: int) -> None:
        super().__init__(
            f"Version {version} of project {project} already exists in the store"
        )
        self.project = project
        self.version = version


class TransferError(CapsimError):
    """A stock transfer or purchase would leave a stock in an invalid state."""


class ConfigurationError(CapsimError, ValueError):
    """A configuration choice is invalid for the requested operation."""


class UnsupportedPolicyError(ConfigurationError):
    """The selected distribution or price policy is known but not implemented."""


class ScenarioError(CapsimError, ValueError):
    """A scenario definition is malformed or references unknown entities."""
