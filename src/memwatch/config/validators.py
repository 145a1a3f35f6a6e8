"""
Configuration validation utilities.

This module turns raw constructor arguments or TOML data into a validated
MonitorConfig.
"""

import logging
import threading
from typing import Any, Dict, Iterable, Optional, Union

from ..models.config import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_SOURCE,
    MonitorConfig,
)
from ..validation import (
    PID_COLLECTION_TYPES,
    InvalidArgumentError,
    is_pid_scalar,
    normalize_pid,
    normalize_pid_collection,
    validate_bool,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

VALID_SOURCES = ["auto", "statm", "psutil"]

# Longest wait threading.Event accepts, in milliseconds.
MAX_POLL_INTERVAL_MS = threading.TIMEOUT_MAX * 1000


def build_monitor_config(
    root_id: Optional[Union[int, str]] = None,
    root_ids: Optional[Iterable[Union[int, str]]] = None,
    poll_interval_ms: Optional[float] = None,
    track_descendants: bool = False,
    max_workers: int = DEFAULT_MAX_WORKERS,
    source: str = DEFAULT_SOURCE,
) -> MonitorConfig:
    """
    Validate constructor arguments and create a MonitorConfig.

    Args:
        root_id: A single process id to watch
        root_ids: A list, tuple or set of process ids to watch
        poll_interval_ms: Poll interval in milliseconds, default when None
        track_descendants: Whether to also watch direct children of the roots
        max_workers: Maximum number of concurrent reads per tick
        source: Memory record source name

    Returns:
        Validated MonitorConfig instance

    Raises:
        InvalidArgumentError: If any argument is malformed or no id is given
    """
    if root_ids is not None and not isinstance(root_ids, PID_COLLECTION_TYPES):
        raise InvalidArgumentError(
            f"root_ids must be a list, tuple or set, got {type(root_ids).__name__}",
            field_name="root_ids",
            value=root_ids,
        )
    if root_id is not None and not is_pid_scalar(root_id):
        raise InvalidArgumentError(
            f"root_id must be a string or integer, got {type(root_id).__name__}",
            field_name="root_id",
            value=root_id,
        )

    candidates = list(root_ids) if root_ids is not None else []
    normalized = normalize_pid_collection(candidates, field_name="root_ids")
    if root_id is not None:
        pid = normalize_pid(root_id, field_name="root_id")
        if pid not in normalized:
            normalized.append(pid)

    if not normalized:
        raise InvalidArgumentError(
            "At least one process id is required: pass root_id or a non-empty root_ids",
            field_name="root_ids",
            value=root_ids,
        )

    if poll_interval_ms is None:
        interval = DEFAULT_POLL_INTERVAL_MS
    else:
        interval = validate_positive_float(
            poll_interval_ms, max_value=MAX_POLL_INTERVAL_MS, field_name="poll_interval_ms"
        )

    config = MonitorConfig(
        root_ids=tuple(normalized),
        poll_interval_ms=interval,
        track_descendants=validate_bool(track_descendants, field_name="track_descendants"),
        max_workers=validate_positive_integer(
            max_workers, min_value=1, max_value=256, field_name="max_workers"
        ),
        source=validate_enum_choice(source, VALID_SOURCES, field_name="source"),
    )
    logger.debug(f"Validated monitor config: {config}")
    return config


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from the ``[monitor]`` TOML table.

    Recognized keys: ``pid``, ``pids``, ``poll_interval_ms``,
    ``track_descendants``, ``max_workers`` and ``source``.

    Raises:
        InvalidArgumentError: If validation fails
    """
    unknown_keys = set(monitor_data) - {
        "pid", "pids", "poll_interval_ms", "track_descendants", "max_workers", "source"
    }
    if unknown_keys:
        logger.warning(f"Ignoring unknown monitor settings: {sorted(unknown_keys)}")

    return build_monitor_config(
        root_id=monitor_data.get("pid"),
        root_ids=monitor_data.get("pids"),
        poll_interval_ms=monitor_data.get("poll_interval_ms"),
        track_descendants=monitor_data.get("track_descendants", False),
        max_workers=monitor_data.get("max_workers", DEFAULT_MAX_WORKERS),
        source=monitor_data.get("source", DEFAULT_SOURCE),
    )
