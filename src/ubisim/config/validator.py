"""Centralized configuration validation for ubisim."""

from __future__ import annotations

import warnings
from decimal import Decimal
from typing import Any

from ubisim.logging import SYSTEMS


class ConfigValidator:
    """
    Checks a merged run configuration before any month is stepped.

    Runs once from Simulation.init(). The horizon, worker count, seed and
    UBI payment are checked for type and range. Soft problems, such as a
    payment above the household clamp or output paths given to a scenario
    suite run, only warn.
    """

    # Valid log levels for logging configuration
    VALID_LOG_LEVELS = {
        "DEEP",
        "DEEP_DEBUG",
        "DEBUG",
        "INFO",
        "WARNING",
        "ERROR",
        "CRITICAL",
    }

    # Per-adult payments above this are clamped by the household model
    UBI_PAYMENT_CAP = 10_000

    @staticmethod
    def validate_config(cfg: dict[str, Any]) -> None:
        """
        Validate all configuration parameters.

        Parameters
        ----------
        cfg : dict
            Configuration dictionary to validate.

        Raises
        ------
        ValueError
            If any validation check fails.
        """
        # Type checking
        ConfigValidator._validate_types(cfg)

        # Range validation
        ConfigValidator._validate_ranges(cfg)

        # Relationship constraints
        ConfigValidator._validate_relationships(cfg)

        # Logging configuration
        if "logging" in cfg:
            ConfigValidator._validate_logging(cfg["logging"])

    @staticmethod
    def _validate_types(cfg: dict[str, Any]) -> None:
        """
        Ensure correct types for configuration parameters.

        Raises
        ------
        ValueError
            If any parameter has incorrect type.
        """
        int_params = ["months", "n_workers", "seed"]
        number_params = ["ubi", "target_net"]
        bool_params = ["stochastic", "advanced"]
        optional_str_params = ["csv_path", "summary_path", "output_dir"]

        for key in int_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if val is not None and (isinstance(val, bool) or not isinstance(val, int)):
                raise ValueError(
                    f"Config parameter '{key}' must be int, got {type(val).__name__}"
                )

        # Numbers (accept int, float or Decimal; None allowed for ubi)
        for key in number_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if val is None and key == "ubi":
                continue
            if isinstance(val, bool) or not isinstance(val, (int, float, Decimal)):
                raise ValueError(
                    f"Config parameter '{key}' must be a number, "
                    f"got {type(val).__name__}"
                )

        for key in bool_params:
            if key in cfg and not isinstance(cfg[key], bool):
                raise ValueError(
                    f"Config parameter '{key}' must be bool, "
                    f"got {type(cfg[key]).__name__}"
                )

        for key in optional_str_params:
            if key not in cfg:
                continue
            val = cfg[key]
            if val is not None and not isinstance(val, str):
                raise ValueError(
                    f"Config parameter '{key}' must be str or None, "
                    f"got {type(val).__name__}"
                )

        for key in ("logging", "calibration", "economy"):
            if key in cfg and not isinstance(cfg[key], dict):
                raise ValueError(
                    f"Config section '{key}' must be a mapping, "
                    f"got {type(cfg[key]).__name__}"
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
            "months": (1, None),
            "n_workers": (1, None),
            "seed": (0, None),
            "ubi": (0, None),
        }

        for key, (min_val, max_val) in constraints.items():
            if key not in cfg:
                continue

            val = cfg[key]

            # Skip None values for optional parameters
            if val is None:
                continue

            if min_val is not None and val < min_val:
                raise ValueError(
                    f"Config parameter '{key}' must be >= {min_val}, got {val}"
                )

            if max_val is not None and val > max_val:
                raise ValueError(
                    f"Config parameter '{key}' must be <= {max_val}, got {val}"
                )

    @staticmethod
    def _validate_relationships(cfg: dict[str, Any]) -> None:
        """Validate cross-parameter constraints (warnings only)."""
        ubi = cfg.get("ubi")
        if ubi is not None and ubi > ConfigValidator.UBI_PAYMENT_CAP:
            warnings.warn(
                f"ubi ({ubi}) exceeds the per-adult payment cap "
                f"({ConfigValidator.UBI_PAYMENT_CAP}); payments will be clamped.",
                UserWarning,
                stacklevel=3,
            )

        if ubi is None and (cfg.get("csv_path") or cfg.get("summary_path")):
            warnings.warn(
                "csv_path/summary_path are ignored when no ubi is given; "
                "the scenario suite writes into output_dir instead.",
                UserWarning,
                stacklevel=3,
            )

        months = cfg.get("months", 12)
        if isinstance(months, int) and months > 240:
            warnings.warn(
                f"months ({months}) is longer than 20 years; calibration will "
                "re-run the full horizon for every candidate rate.",
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
            - systems: dict[str, str] (per-system overrides)

        Raises
        ------
        ValueError
            If logging configuration is invalid.
        """
        if "default_level" in log_config:
            level = log_config["default_level"]
            if not isinstance(level, str):
                raise ValueError(
                    f"Logging default_level must be str, got {type(level).__name__}"
                )
            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}'. "
                    f"Must be one of {sorted(ConfigValidator.VALID_LOG_LEVELS)}"
                )

        systems = log_config.get("systems")
        if systems is None:
            return
        if not isinstance(systems, dict):
            raise ValueError(
                f"Logging systems must be dict, got {type(systems).__name__}"
            )
        for system_name, level in systems.items():
            if not isinstance(system_name, str):
                raise ValueError(
                    f"System name must be str, got {type(system_name).__name__}"
                )
            if system_name not in SYSTEMS:
                raise ValueError(
                    f"Unknown system '{system_name}' in logging config. "
                    f"Must be one of {', '.join(SYSTEMS)}"
                )
            if not isinstance(level, str):
                raise ValueError(
                    f"Log level for system '{system_name}' must be str, "
                    f"got {type(level).__name__}"
                )
            if level.upper() not in ConfigValidator.VALID_LOG_LEVELS:
                raise ValueError(
                    f"Invalid log level '{level}' for system '{system_name}'. "
                    f"Must be one of {sorted(ConfigValidator.VALID_LOG_LEVELS)}"
                )
