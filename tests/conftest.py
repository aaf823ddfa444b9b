"""
Shared pytest fixtures for swarm_launcher tests.
"""

import io

import pytest
from rich.console import Console

from swarm_launcher.config import LauncherConfig
from swarm_launcher.environment import EnvironmentSignals
from swarm_launcher.launcher import ProcessOutcome


class FakeLauncher:
    """Records launched argument vectors and returns a fixed outcome."""

    def __init__(self, outcome: ProcessOutcome | None = None):
        self.outcome = outcome or ProcessOutcome.succeeded()
        self.calls: list[tuple[str, ...]] = []

    def launch(self, argv):
        self.calls.append(tuple(argv))
        return self.outcome

    @property
    def argv(self) -> tuple[str, ...]:
        """The argv of the only launch."""
        assert len(self.calls) == 1, f"expected one launch, got {len(self.calls)}"
        return self.calls[0]


def make_console() -> Console:
    """A non-terminal console writing to a buffer, wide enough to avoid wrapping."""
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


@pytest.fixture
def interactive_signals():
    """An interactive terminal session with no CI or container markers."""
    return EnvironmentSignals(env={}, stdin_isatty=True, stdout_isatty=True, in_container=False)


@pytest.fixture
def ci_signals():
    """A GitHub Actions run without a terminal."""
    return EnvironmentSignals(
        env={"GITHUB_ACTIONS": "true"},
        stdin_isatty=True,
        stdout_isatty=True,
        in_container=False,
    )


@pytest.fixture
def out():
    return make_console()


@pytest.fixture
def err():
    return make_console()


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def launcher_config(tmp_path):
    """Default config with run records kept inside tmp_path."""
    return LauncherConfig(runs_dir=str(tmp_path / "runs"))


@pytest.fixture
def tool_present():
    return lambda name: True


@pytest.fixture
def tool_absent():
    return lambda name: False
