"""Configuration module for ubisim."""

from ubisim.config.loader import deep_merge, merged_config, package_defaults, read_yaml
from ubisim.config.schema import RunConfig
from ubisim.config.validator import ConfigValidator

__all__ = [
    "ConfigValidator",
    "RunConfig",
    "deep_merge",
    "merged_config",
    "package_defaults",
    "read_yaml",
]
