"""Centralized configuration validation for capsim."""

from __future__ import annotations

import warnings
from pathlib import Path
from typing import Any


class ConfigValidator:
    """
    Centralized validation for simulation configuration.

    All validation happens once at Simulation.init() to ensure:
    - Type correctness
    - Valid parameter ranges and choices
    - Relationship constraints between parameters
    - Clear error messages with actionable feedback
    """

    VALID_LOG_LEVELS = {"DEEP_DEBUG", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    COMPARATOR_MODES = ("previous", "period_start", "period_end", "custom")
    PRICE_DYNAMICS = ("simple", "equalise", "dynamic")
    LABOUR_RESPONSES = ("flexible", "fixed")
    KNOWN_KEYS = {
        "scenario",
        "n_periods",
        "epsilon",
        "rounding_precision",
        "distribution_policy",
        "price_dynamics",
        "labour_supply_response",
        "comparator",
        "phase_graph_path",
        "logging",
    }

    @staticmethod
    def validate_config(cfg: dict[str, Any]) -> None:
        """
        Validate all configuration parameters.

        Parameters
        ----------
        cfg : dict
            Merged configuration dictionary.

        Raises
        ------
        ValueError
            If any validation check fails.
        """
        ConfigValidator._validate_keys(cfg)
        ConfigValidator._validate_types(cfg)
        ConfigValidator._validate_ranges(cfg)
        ConfigValidator._validate_choices(cfg)
        ConfigValidator._validate_relationships(cfg)

        if "logging" in cfg:
            ConfigValidator._validate_logging(cfg["logging"])

    @staticmethod
    def _validate_keys(cfg: dict[str, Any]) -> None:
        unknown = sorted(set(cfg) - ConfigValidator.KNOWN_KEYS)
        if unknown:
            raise ValueError(
                f"Unknown config parameter(s) {unknown}. "
                f"Valid parameters: {sorted(ConfigValidator.KNOWN_KEYS)}"
            )

    @staticmethod
    def _validate_types(cfg: dict[str, Any]) -> None:
        """
        Ensure correct types for configuration parameters.

        Raises
        ------
        ValueError
            If any parameter has incorrect type.
        """
        for key in ("n_periods", "rounding_precision"):
            if key in cfg and (
                not isinstance(cfg[key], int) or isinstance(cfg[key], bool)
            ):
                raise ValueError(
                    f"Config parameter '{key}' must be int, "
                    f"got {type(cfg[key]).__name__}"
                )

        if "epsilon" in cfg and not isinstance(cfg["epsilon"], (int, float)):
            raise ValueError(
                f"Config parameter 'epsilon' must be float, "
                f"got {type(cfg['epsilon']).__name__}"
            )

        for key in ("distribution_policy", "price_dynamics", "comparator"):
            if key in cfg and not isinstance(cfg[key], str):
                raise ValueError(
                    f"Config parameter '{key}' must be str, "
                    f"got {type(cfg[key]).__name__}"
                )

        # str or None
        for key in ("labour_supply_response", "phase_graph_path"):
            val = cfg.get(key)
            if val is not None and not isinstance(val, str):
                raise ValueError(
                    f"Config parameter '{key}' must be str or None, "
                    f"got {type(val).__name__}"
                )

        # the scenario may also be given inline as a mapping
        if "scenario" in cfg and not isinstance(cfg["scenario"], (str, Path, dict)):
            raise ValueError(
                f"Config parameter 'scenario' must be a name, path or mapping, "
                f"got {type(cfg['scenario']).__name__}"
            )

    @staticmethod
    def _validate_ranges(cfg: dict[str, Any]) -> None:
        """
        Ensure parameters are in valid ranges.

        Raises
        ------
        ValueError
            If any parameter is out of valid range.
        """
        # (min_val, max_val); None means unbounded
        constraints = {
            "n_periods": (1, None),
            "rounding_precision": (0, 12),
            "epsilon": (0.0, 1.0),
        }

        for key, (min_val, max_val) in constraints.items():
            if key not in cfg or cfg[key] is None:
                continue
            val = cfg[key]
            if min_val is not None and val < min_val:
                raise ValueError(
                    f"Config parameter '{key}' must be >= {min_val}, got {val}"
                )
            if max_val is not None and val > max_val:
                raise ValueError(
                    f"Config parameter '{key}' must be <= {max_val}, got {val}"
                )

        if cfg.get("epsilon") == 0:
            raise ValueError("Config parameter 'epsilon' must be > 0, got 0")

    @staticmethod
    def _validate_choices(cfg: dict[str, Any]) -> None:
        """
        Ensure enumerated parameters name a known option.

        ``equalise`` and ``dynamic`` are accepted here: they are known
        options, refused later by the phase that would need them.
        """
        from capsim.policies import known_policies

        choices: dict[str, tuple[str, ...] | list[str]] = {
            "distribution_policy": known_policies(),
            "price_dynamics": ConfigValidator.PRICE_DYNAMICS,
            "comparator": ConfigValidator.COMPARATOR_MODES,
            "labour_supply_response": ConfigValidator.LABOUR_RESPONSES,
        }
        for key, options in choices.items():
            val = cfg.get(key)
            if val is None:
                continue
            if val not in options:
                raise ValueError(
                    f"Config parameter '{key}' must be one of {list(options)}, "
                    f"got '{val}'"
                )

    @staticmethod
    def _validate_relationships(cfg: dict[str, Any]) -> None:
        """Validate cross-parameter constraints (warnings only)."""
        epsilon = cfg.get("epsilon")
        precision = cfg.get("rounding_precision")
        if epsilon is not None and precision is not None:
            granularity = 10.0**-precision
            if epsilon < granularity / 2:
                warnings.warn(
                    f"epsilon ({epsilon}) is finer than the rounding granularity "
                    f"({granularity}). Rounding noise may raise spurious "
                    "data-error warnings.",
                    UserWarning,
                    stacklevel=3,
                )

        if cfg.get("comparator") == "custom":
            warnings.warn(
                "comparator 'custom' has no reference version until "
                "Simulation.set_comparator('custom', version) is called; "
                "the previous version is used meanwhile.",
                UserWarning,
                stacklevel=3,
            )

    @staticmethod
    def _validate_logging(log_config: dict[str, Any]) -> None:
        """
        Validate logging configuration.

        Parameters
        ----------
        log_config : dict
            Logging configuration dictionary with keys:
            - default_level: str (e.g., 'INFO', 'DEBUG')
            - phases: dict[str, str] (per-phase overrides)

        Raises
        ------
        ValueError
            If logging configuration is invalid.
        """
        if not isinstance(log_config, dict):
            raise ValueError(
                f"Logging config must be dict, got {type(log_config).__name__}"
            )

        if "default_level" in log_config:
            level = log_config["default_level"]
            if not isinstance(level, str):
                raise ValueError(
                    f"Logging default_level must be str, got {type(level).__name__}"
                )
            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}'. "
                    f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                )

        phases = log_config.get("phases") or {}
        if not isinstance(phases, dict):
            raise ValueError(
                f"Logging phases must be dict, got {type(phases).__name__}"
            )
        for phase_name, level in phases.items():
            if not isinstance(phase_name, str):
                raise ValueError(
                    f"Phase name must be str, got {type(phase_name).__name__}"
                )
            if not isinstance(level, str):
                raise ValueError(
                    f"Log level for phase '{phase_name}' must be str, "
                    f"got {type(level).__name__}"
                )
            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}' for phase '{phase_name}'. "
                    f"Must be one of {ConfigValidator.VALID_LOG_LEVELS}"
                )

    @staticmethod
    def validate_scenario(scenario: Any) -> None:
        """
        Validate that a scenario reference can be resolved.

        Raises
        ------
        ValueError
            If ``scenario`` is a string that is neither an existing file nor
            a bundled scenario name.
        """
        if isinstance(scenario, dict):
            return
        from capsim.scenario import bundled_scenarios

        path = Path(scenario)
        if path.exists():
            if not path.is_file():
                raise ValueError(f"Scenario path '{scenario}' is not a file")
            return
        if str(scenario) not in bundled_scenarios():
            raise ValueError(
                f"Scenario '{scenario}' does not exist. "
                f"Bundled scenarios: {bundled_scenarios()}"
            )

    @staticmethod
    def validate_phase_graph_path(graph_path: str) -> None:
        """
        Validate phase graph path exists and is readable.

        Raises
        ------
        ValueError
            If path does not exist or is not a file.
        """
        path = Path(graph_path)

        if not path.exists():
            raise ValueError(f"Phase graph path '{graph_path}' does not exist")

        if not path.is_file():
            raise ValueError(f"Phase graph path '{graph_path}' is not a file")

        if path.suffix not in (".yml", ".yaml"):
            warnings.warn(
                f"Phase graph path '{graph_path}' does not have .yml/.yaml extension",
                UserWarning,
                stacklevel=2,
            )

    @staticmethod
    def validate_phase_graph_yaml(yaml_path: str) -> None:
        """
        Validate phase graph YAML structure and phase references.

        Raises
        ------
        ValueError
            If the YAML is not a mapping, lacks ``super_phases`` or
            ``phases``, or lists a phase that is not registered.
        """
        import yaml

        from capsim.core.registry import list_phases

        with open(Path(yaml_path)) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(
                f"Phase graph YAML must be a dictionary, got {type(data).__name__}"
            )
        for key in ("super_phases", "phases"):
            if key not in data:
                raise ValueError(f"Phase graph YAML must have '{key}' key: {yaml_path}")

        if not isinstance(data["super_phases"], list):
            raise ValueError(
                f"'super_phases' must be a list, "
                f"got {type(data['super_phases']).__name__}"
            )
        if not isinstance(data["phases"], dict):
            raise ValueError(
                f"'phases' must be a mapping, got {type(data['phases']).__name__}"
            )

        registered = set(list_phases())
        for super_name, children in data["phases"].items():
            if not isinstance(children, list):
                raise ValueError(
                    f"Phases of super-phase '{super_name}' must be a list, "
                    f"got {type(children).__name__}"
                )
            for name in children:
                if name not in registered:
                    raise ValueError(
                        f"Phase '{name}' (under '{super_name}') not found in "
                        f"registry. Available phases: {sorted(registered)}"
                    )
