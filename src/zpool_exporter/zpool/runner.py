import logging
import os
import subprocess
from typing import List, Optional

from zpool_exporter.config.settings import config
from zpool_exporter.zpool.errors import CommandTimeout, ExternalToolFailure

logger = logging.getLogger(__name__)


def run_command(command: List[str], timeout: Optional[float] = None) -> str:
    """
    Runs an external command and returns its stdout.

    Raises CommandTimeout when the command outlives `timeout` seconds
    (defaults to the configured command timeout) and ExternalToolFailure
    when it cannot be started, exits non-zero or prints non UTF-8 output.
    """
    if timeout is None:
        timeout = config.command_timeout
    full_command = " ".join(command)

    try:
        # Parsed output must not depend on the locale
        result = subprocess.run(
            command,
            capture_output=True,
            timeout=timeout,
            env=dict(os.environ, LC_ALL="C"),
        )
    except subprocess.TimeoutExpired:
        logger.error(f"`{full_command}` did not finish within {timeout} seconds")
        raise CommandTimeout(f"`{full_command}` timed out after {timeout} seconds", command=command)
    except OSError as e:
        logger.error(f"Failed to execute `{full_command}`: {e}")
        raise ExternalToolFailure(f"Failed to execute `{full_command}`: {e}", command=command)

    stdout = result.stdout.decode("utf-8", errors="replace")
    stderr = result.stderr.decode("utf-8", errors="replace")

    if result.returncode != 0:
        logger.error(f"Failed to execute `{full_command}`!")
        logger.error(f"stdout:\n{stdout}")
        logger.error(f"stderr:\n{stderr}")
        logger.error(f"exit code: {result.returncode}")
        raise ExternalToolFailure(
            f"`{full_command}` exited with code {result.returncode}",
            command=command,
            returncode=result.returncode,
            stdout=stdout,
            stderr=stderr,
        )

    try:
        return result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ExternalToolFailure(
            f"Output of `{full_command}` is not valid UTF-8: {e}",
            command=command,
            returncode=result.returncode,
            stderr=stderr,
        )


def zpool(*args: str) -> str:
    """Runs the configured zpool binary with the given arguments."""
    return run_command([config.zpool_binary, *args])
