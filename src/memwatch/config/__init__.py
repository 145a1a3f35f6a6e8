"""
Configuration management for the memwatch package.

Monitor settings can be built programmatically or loaded from TOML files.
"""

from .loader import load_monitor_config, load_toml_file
from .validators import VALID_SOURCES, build_monitor_config, validate_monitor_config

__all__ = [
    "VALID_SOURCES",
    "build_monitor_config",
    "load_monitor_config",
    "load_toml_file",
    "validate_monitor_config",
]
