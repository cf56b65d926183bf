"""
Logging for the month stepper and the tax calibrator.

Every sub-update in :mod:`ubisim.systems` logs under its own name,
``ubisim.systems.<system>``, so one system can be traced at DEBUG or
DEEP_DEBUG while the rest of a calibration stays at INFO. Calibration
rounds log under ``calibration``.

Log Levels
----------
- CRITICAL (50): Critical errors
- ERROR (40): Aborted calibration rounds
- WARNING (30): Soft configuration problems
- INFO (20): Calibration rounds and scenario summaries (default)
- DEBUG (10): One line per system per month
- DEEP_DEBUG (5): Per-cohort and per-category detail

Examples
--------
>>> from ubisim import logging
>>> log = logging.getLogger("ubisim.systems.migration")
>>> log.deep("cohort detail")

Trace only migration:

>>> logging.configure_logging(
...     {"default_level": "INFO", "systems": {"migration": "DEBUG"}}
... )
"""

import logging
from collections.abc import Mapping
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

_ROOT_LOGGERS = ("ubisim", "calibration")

# in the order the stepper runs them
SYSTEMS = (
    "labor_market",
    "business",
    "households",
    "prices",
    "finance",
    "trade",
    "migration",
    "government",
)


class UbiLogger(logging.Logger):
    """
    Logger with a ``deep()`` method for per-cohort detail (level 5).

    See Also
    --------
    getLogger : Factory function for obtaining UbiLogger instances
    """

    def deep(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log *msg* at DEEP_DEBUG."""
        if self.isEnabledFor(DEEP_DEBUG):
            self._log(DEEP_DEBUG, msg, args, **kwargs)


logging.setLoggerClass(UbiLogger)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)


def getLogger(name: str | None = None) -> UbiLogger:
    """
    Return the UbiLogger called *name*.

    Parameters
    ----------
    name : str, optional
        Dotted logger name, normally the caller's ``__name__``. None gives
        the root logger.

    Returns
    -------
    UbiLogger
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def system_logger_name(system: str) -> str:
    """
    Logger name of one monthly sub-update.

    Raises
    ------
    ValueError
        If *system* is not one of :data:`SYSTEMS`.
    """
    if system not in SYSTEMS:
        raise ValueError(
            f"Unknown system '{system}'. Must be one of {', '.join(SYSTEMS)}"
        )
    return f"ubisim.systems.{system}"


def _level_value(level: str) -> int:
    level = level.upper()
    if level in ("DEEP", "DEEP_DEBUG"):
        return DEEP_DEBUG
    return int(getattr(logging, level))


def configure_logging(log_config: Mapping[str, Any]) -> None:
    """
    Apply a ``logging`` config section.

    ``default_level`` is set on both the ``ubisim`` and ``calibration``
    loggers. Each entry of ``systems`` (e.g. ``{"migration": "DEEP"}``)
    overrides the level of that sub-update's logger.
    """
    default_level = _level_value(str(log_config.get("default_level", "INFO")))
    for name in _ROOT_LOGGERS:
        logging.getLogger(name).setLevel(default_level)

    for system, level in dict(log_config.get("systems") or {}).items():
        logging.getLogger(system_logger_name(system)).setLevel(_level_value(level))
