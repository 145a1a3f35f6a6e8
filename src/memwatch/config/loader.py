"""
Loading of memwatch settings from TOML files.

Only the ``[monitor]`` table is read; other tables are left to the
embedding application.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..models.config import MonitorConfig
from ..validation import ErrorSeverity, handle_config_error
from .validators import validate_monitor_config

logger = logging.getLogger(__name__)


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Parse a TOML file into a dict.

    Raises:
        FileNotFoundError: If ``file_path`` does not exist
        tomllib.TOMLDecodeError: If the file is not valid TOML (logged as critical)
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    logger.info(f"Reading {description} {file_path}")
    with open(file_path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            handle_config_error(
                error=e,
                context=f"parsing {description} {file_path}",
                severity=ErrorSeverity.CRITICAL,
                logger=logger,
            )
            raise


def load_monitor_config(config_path: Path) -> MonitorConfig:
    """
    Load a MonitorConfig from the ``[monitor]`` table of a TOML file.

    Example file::

        [monitor]
        pids = [1234, "5678"]
        poll_interval_ms = 500
        track_descendants = true
    """
    data = load_toml_file(Path(config_path), "monitor configuration file")
    return validate_monitor_config(data.get("monitor", {}))
