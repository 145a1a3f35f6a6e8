"""
Helpers for querying external system utilities such as ``getconf``.
"""

import logging
import subprocess
from typing import List, Tuple

logger = logging.getLogger(__name__)


def run_command(command: List[str], timeout: float = 5.0) -> Tuple[int, str, str]:
    """
    Run a short-lived utility and return ``(returncode, stdout, stderr)``.

    Failure to launch the program, or a timeout, is reported as returncode
    -1 with a description in stderr; nothing is raised.
    """
    program = command[0]
    logger.debug(f"Running {command} (timeout {timeout}s)")
    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.debug(f"{program} is not installed")
        return -1, "", f"Command not found '{program}'"
    except subprocess.TimeoutExpired:
        logger.warning(f"{program} did not finish within {timeout}s")
        return -1, "", f"Command timed out '{program}'"
    except OSError as e:
        logger.warning(f"Could not run {program}: {e}")
        return -1, "", str(e)
    return completed.returncode, completed.stdout, completed.stderr
