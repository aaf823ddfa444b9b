"""
Detection of the environment the swarm command runs in.

Provides a snapshot of the signals that force headless operation:
- CI provider variables (GitHub Actions, GitLab, Jenkins, ...)
- A container indicator
- Whether stdin/stdout are attached to a terminal

The snapshot is a plain value so tests can substitute a fixed set.
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


CI_ENV_VARS = (
    "CI",
    "GITHUB_ACTIONS",
    "GITLAB_CI",
    "JENKINS_URL",
    "CIRCLECI",
    "TRAVIS",
    "BUILDKITE",
    "DRONE",
)

CONTAINER_ENV_VAR = "DOCKER_CONTAINER"
DOCKERENV_PATH = Path("/.dockerenv")


@dataclass(frozen=True)
class EnvironmentSignals:
    """Read-only view of the signals consulted for headless detection."""

    env: Mapping[str, str] = field(default_factory=dict)
    stdin_isatty: bool = True
    stdout_isatty: bool = True
    in_container: bool = False

    @property
    def ci_indicators(self) -> list[str]:
        """CI variables that are set to a non-empty value."""
        return [name for name in CI_ENV_VARS if self.env.get(name)]

    @property
    def is_ci(self) -> bool:
        return bool(self.ci_indicators)

    @property
    def is_container(self) -> bool:
        return self.in_container or bool(self.env.get(CONTAINER_ENV_VAR))

    @property
    def is_interactive(self) -> bool:
        """Whether both standard streams are attached to a terminal."""
        return self.stdin_isatty and self.stdout_isatty

    @property
    def is_headless(self) -> bool:
        """Any single signal forces headless operation."""
        return self.is_ci or self.is_container or not self.is_interactive

    def describe(self) -> list[str]:
        """Human-readable reasons for headless detection."""
        reasons = [f"{name} is set" for name in self.ci_indicators]
        if self.is_container:
            reasons.append("running inside a container")
        if not self.stdin_isatty:
            reasons.append("stdin is not a terminal")
        if not self.stdout_isatty:
            reasons.append("stdout is not a terminal")
        return reasons


def _isatty(stream) -> bool:
    try:
        return bool(stream is not None and stream.isatty())
    except (AttributeError, ValueError):
        # Closed or replaced streams
        return False


def detect_environment() -> EnvironmentSignals:
    """
    Snapshot the current process environment.

    Returns:
        EnvironmentSignals built from os.environ, the standard streams
        and the /.dockerenv marker
    """
    return EnvironmentSignals(
        env=dict(os.environ),
        stdin_isatty=_isatty(sys.stdin),
        stdout_isatty=_isatty(sys.stdout),
        in_container=DOCKERENV_PATH.exists(),
    )
