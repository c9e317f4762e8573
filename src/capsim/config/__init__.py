"""Configuration schema and validation."""

from capsim.config.schema import Config
from capsim.config.validator import ConfigValidator

__all__ = ["Config", "ConfigValidator"]
