"""
Swarm Launcher - Coordinate AI agent swarms through Claude Code

Builds a swarm coordination prompt from an objective and option flags, then
launches the Claude Code CLI with it. When the CLI is unavailable, a local
executor plans and records the swarm instead.
"""

__version__ = "0.1.0"

from .builder import (
    ResolvedConfiguration,
    MissingObjectiveError,
    SwarmInvocation,
    UsageError,
    build_argv,
    build_invocation,
    resolve_configuration,
)
from .environment import (
    EnvironmentSignals,
    detect_environment,
)
from .launcher import (
    ClaudeLauncher,
    OutcomeKind,
    ProcessOutcome,
    probe_tool,
)

__all__ = [
    # Version
    "__version__",
    # Builder
    "ResolvedConfiguration",
    "MissingObjectiveError",
    "SwarmInvocation",
    "UsageError",
    "build_argv",
    "build_invocation",
    "resolve_configuration",
    # Environment
    "EnvironmentSignals",
    "detect_environment",
    # Launcher
    "ClaudeLauncher",
    "OutcomeKind",
    "ProcessOutcome",
    "probe_tool",
]
