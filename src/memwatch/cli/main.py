"""
Command-line interface for memwatch.

Polls the memory usage of the given processes and prints one line per tick
with the summed sample, until interrupted or until ``--count`` ticks.
"""

import argparse
import logging
import signal
import sys
import threading
import time
import tomllib
from pathlib import Path
from typing import List, Optional

from ..config import VALID_SOURCES, build_monitor_config, load_monitor_config
from ..models.config import DEFAULT_MAX_WORKERS
from ..models.samples import MemorySample, SnapshotMap
from ..monitoring import MemoryMonitor, merge_samples
from ..validation import ValidationError, handle_cli_error, validate_positive_integer

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"


def format_sample(sample: MemorySample) -> str:
    """Render a sample as ``size=..MB resident=..MB ...``."""
    return " ".join(f"{name}={value:.2f}MB" for name, value in sample.as_dict().items())


def format_snapshot(snapshot: SnapshotMap, per_process: bool = False) -> List[str]:
    """Render a snapshot as output lines: the merged total, then optionally one per PID."""
    timestamp = time.strftime("%H:%M:%S")
    if not snapshot:
        return [f"{timestamp} no observable processes"]

    lines = [f"{timestamp} pids={len(snapshot)} {format_sample(merge_samples(snapshot))}"]
    if per_process:
        for pid, sample in snapshot.items():
            lines.append(f"  {pid:>8} {format_sample(sample)}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memwatch",
        description="Periodically report the memory usage of processes.",
    )
    parser.add_argument(
        "-p",
        "--pid",
        action="append",
        default=[],
        help="Process id to watch. May be given several times.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="TOML file with a [monitor] table.",
    )
    parser.add_argument(
        "-i",
        "--interval-ms",
        type=float,
        help="Poll interval in milliseconds (default 1000).",
    )
    parser.add_argument(
        "--children",
        action="store_true",
        help="Also watch direct children of the given processes.",
    )
    parser.add_argument(
        "--source",
        choices=VALID_SOURCES,
        help="Memory record source (default auto).",
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        default=0,
        help="Stop after this many ticks; 0 runs until interrupted (default).",
    )
    parser.add_argument(
        "--per-process",
        action="store_true",
        help="Print one line per process below each total.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def create_monitor(args: argparse.Namespace) -> MemoryMonitor:
    """
    Build a MemoryMonitor from parsed arguments, merged over the config file if any.

    Raises:
        ValidationError: If the resulting configuration is invalid
        FileNotFoundError: If the config file does not exist
        tomllib.TOMLDecodeError: If the config file is malformed
    """
    root_ids: List[str] = list(args.pid)
    interval = args.interval_ms
    children = args.children
    source = args.source
    max_workers = DEFAULT_MAX_WORKERS

    if args.config:
        file_config = load_monitor_config(args.config)
        root_ids = [str(pid) for pid in file_config.root_ids] + root_ids
        interval = interval if interval is not None else file_config.poll_interval_ms
        children = children or file_config.track_descendants
        source = source or file_config.source
        max_workers = file_config.max_workers

    config = build_monitor_config(
        root_ids=root_ids,
        poll_interval_ms=interval,
        track_descendants=children,
        source=source or "auto",
        max_workers=max_workers,
    )
    return MemoryMonitor.from_config(config)


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: On invalid arguments or configuration.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        validate_positive_integer(args.count, min_value=0, field_name="count")
        monitor = create_monitor(args)
    except (ValidationError, FileNotFoundError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(error=e, context="monitor configuration", exit_code=1, logger=logger)

    done = threading.Event()
    ticks = 0

    def on_snapshot(snapshot: SnapshotMap) -> None:
        nonlocal ticks
        for line in format_snapshot(snapshot, per_process=args.per_process):
            print(line, flush=True)
        ticks += 1
        if args.count and ticks >= args.count:
            done.set()

    def signal_handler(signum, frame):
        logger.info(f"Signal {signal.strsignal(signum)} received, stopping...")
        done.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    monitor.subscribe(on_snapshot)
    monitor.initialize()
    try:
        # Short waits keep the main thread responsive to signals.
        while not done.wait(timeout=0.5):
            pass
    finally:
        monitor.stop()


if __name__ == "__main__":
    main_cli()
