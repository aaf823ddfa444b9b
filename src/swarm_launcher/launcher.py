"""
Launching the external assistant CLI.

Provides the tool presence probe and ClaudeLauncher, which spawns the CLI
with inherited standard streams and waits for it exactly once.
"""

import logging
import shutil
import signal
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence


logger = logging.getLogger(__name__)

ToolProbe = Callable[[str], bool]


class OutcomeKind(Enum):
    """How a launch attempt ended."""
    SUCCEEDED = "succeeded"    # Exit code 0
    FAILED = "failed"          # Non-zero exit code
    SPAWN_ERROR = "spawn_error"  # Process image could not be created
    NOT_FOUND = "not_found"    # Executable missing


@dataclass(frozen=True)
class ProcessOutcome:
    """Result of one launch of the external CLI."""

    kind: OutcomeKind
    exit_code: int | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCEEDED

    @classmethod
    def succeeded(cls) -> "ProcessOutcome":
        return cls(OutcomeKind.SUCCEEDED, exit_code=0)

    @classmethod
    def failed(cls, exit_code: int, reason: str | None = None) -> "ProcessOutcome":
        return cls(OutcomeKind.FAILED, exit_code=exit_code, reason=reason)

    @classmethod
    def from_returncode(cls, returncode: int) -> "ProcessOutcome":
        """
        Map a Popen returncode to an outcome.

        A negative returncode means the child was killed by that signal; it
        becomes the shell convention 128 + signal number.
        """
        if returncode == 0:
            return cls.succeeded()
        if returncode < 0:
            signum = -returncode
            try:
                name = signal.Signals(signum).name
            except ValueError:
                name = f"signal {signum}"
            return cls.failed(128 + signum, reason=f"terminated by {name}")
        return cls.failed(returncode)

    @classmethod
    def spawn_error(cls, reason: str) -> "ProcessOutcome":
        return cls(OutcomeKind.SPAWN_ERROR, reason=reason)

    @classmethod
    def not_found(cls, tool: str) -> "ProcessOutcome":
        return cls(OutcomeKind.NOT_FOUND, reason=f"{tool} not found")


def probe_tool(name: str) -> bool:
    """Check whether an executable is on PATH. Never raises."""
    try:
        found = shutil.which(name)
    except OSError as e:
        logger.debug("Probe for %s failed: %s", name, e)
        return False
    logger.debug("Probe for %s: %s", name, found or "not found")
    return found is not None


class ClaudeLauncher:
    """
    Spawns the external assistant CLI for a prepared argument vector.

    The child inherits stdin/stdout/stderr so interactive sessions work
    unchanged; in non-interactive mode the CLI writes its stream-json
    output straight to our stdout.
    """

    def __init__(self, command: str = "claude"):
        """
        Initialize the launcher.

        Args:
            command: Executable name or path of the CLI
        """
        self.command = command

    def _build_command(self, argv: Sequence[str]) -> list[str]:
        return [self.command, *argv]

    def _spawn(self, cmd: list[str]) -> subprocess.Popen:
        return subprocess.Popen(cmd, shell=False)

    def launch(self, argv: Sequence[str]) -> ProcessOutcome:
        """
        Run the CLI and block until it exits.

        Returns:
            ProcessOutcome describing how the run ended
        """
        cmd = self._build_command(argv)
        try:
            process = self._spawn(cmd)
        except FileNotFoundError:
            return ProcessOutcome.not_found(self.command)
        except OSError as e:
            return ProcessOutcome.spawn_error(e.strerror or str(e))

        logger.debug("Spawned %s (pid %s)", self.command, process.pid)
        try:
            exit_code = process.wait()
        except KeyboardInterrupt:
            process.terminate()
            process.wait()
            raise

        logger.debug("%s exited with code %s", self.command, exit_code)
        return ProcessOutcome.from_returncode(exit_code)
