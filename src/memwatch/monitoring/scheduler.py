"""
Periodic task execution.

Each PeriodicTask owns one daemon thread that calls its action every
``interval`` seconds until stopped. The wait between runs is interruptible,
so ``stop`` takes effect without waiting for the next tick.
"""

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Runs ``action`` at a fixed interval on a dedicated daemon thread.

    The first run happens one interval after ``start``. Exceptions raised by
    the action are logged and do not end the loop. A run that takes longer
    than the interval is followed immediately by the next one.
    """

    def __init__(self, name: str, interval: float, action: Callable[[], object]):
        """
        Args:
            name: Thread name, used in log messages
            interval: Seconds between the starts of two runs
            action: Callable invoked on every tick
        """
        self.name = name
        self.interval = interval
        self.action = action

        self.stop_event = threading.Event()
        self.thread: Optional[threading.Thread] = None
        self.running = False
        self.run_count = 0

    def start(self) -> None:
        """Start the task thread."""
        if self.running:
            logger.warning(f"PeriodicTask {self.name} already running")
            return

        self.running = True
        self.stop_event.clear()
        self.thread = threading.Thread(
            target=self._loop,
            name=self.name,
            daemon=True
        )
        self.thread.start()
        logger.debug(f"PeriodicTask {self.name} started (interval {self.interval:.3f}s)")

    def stop(self, timeout: float = 5.0) -> None:
        """
        Stop the task and wait for an in-flight run to finish.

        Safe to call from the action itself; the thread is then not joined.

        Args:
            timeout: Seconds to wait for the thread to exit
        """
        if not self.running:
            return

        self.running = False
        self.stop_event.set()

        if self.thread is None or self.thread is threading.current_thread():
            return
        if self.thread.is_alive():
            self.thread.join(timeout=timeout)
            if self.thread.is_alive():
                logger.warning(f"PeriodicTask {self.name} did not stop within {timeout}s")
            else:
                logger.debug(f"PeriodicTask {self.name} stopped")

    def _loop(self) -> None:
        next_run = time.monotonic() + self.interval
        while not self.stop_event.wait(timeout=self._wait_time(next_run)):
            if time.monotonic() < next_run:
                # Waits are capped at threading.TIMEOUT_MAX; keep waiting.
                continue
            started = time.monotonic()
            try:
                self.action()
            except Exception as e:
                logger.error(f"Error in periodic task {self.name}: {e}", exc_info=True)
            self.run_count += 1

            elapsed = time.monotonic() - started
            if elapsed > self.interval:
                logger.warning(
                    f"Periodic task {self.name} took {elapsed:.3f}s, "
                    f"longer than interval {self.interval:.3f}s"
                )
                next_run = time.monotonic()
            else:
                next_run = started + self.interval
        logger.debug(f"PeriodicTask {self.name} loop finished after {self.run_count} runs")

    @staticmethod
    def _wait_time(next_run: float) -> float:
        return min(max(0.0, next_run - time.monotonic()), threading.TIMEOUT_MAX)
