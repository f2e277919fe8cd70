import logging
import os
import signal
import subprocess

from fleetwatch.models.command import CommandOutcome, CommandResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def _kill_process_group(process: subprocess.Popen) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def run_command(command: str, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> CommandResult:
    """
    Run a command line through `sh -c` and return its captured stdout.

    Quoting, pipes and variable expansion are left to the shell. Standard
    error is discarded. Once `timeout_seconds` have passed the whole process
    group (sh and anything it spawned, e.g. ssh) is killed; the outcome is
    then TIMEOUT and any partial output is dropped. A non-zero exit status
    gives a FAILURE outcome.
    """
    try:
        process = subprocess.Popen(
            ["sh", "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            errors="replace",
            start_new_session=True,
        )
    except OSError as exc:
        return CommandResult(
            outcome=CommandOutcome.FAILURE,
            reason=f"could not start sh: {exc}",
        )

    try:
        stdout, _ = process.communicate(timeout=timeout_seconds)
    except subprocess.TimeoutExpired:
        _kill_process_group(process)
        process.communicate()
        logger.debug("Command timed out after %ss: %s", timeout_seconds, command)
        return CommandResult(
            outcome=CommandOutcome.TIMEOUT,
            reason="command timed out",
        )

    if process.returncode != 0:
        return CommandResult(
            outcome=CommandOutcome.FAILURE,
            reason=f"exit status {process.returncode}",
        )

    return CommandResult(outcome=CommandOutcome.OK, stdout=stdout)
