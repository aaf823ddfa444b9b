"""
Option resolution and argument vector construction for the swarm command.

Pure functions: given the objective, the option flags, the environment
signals and whether the external CLI is available, decide the operating mode
and produce the prompt plus the exact argument vector for the child process.
Nothing here touches the process environment or spawns anything.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .config import DEFAULT_MAX_AGENTS, DEFAULT_MODE, DEFAULT_STRATEGY, LauncherConfig
from .environment import EnvironmentSignals
from .prompts import build_swarm_prompt


logger = logging.getLogger(__name__)

USAGE = "Usage: swarm <objective>"

SKIP_PERMISSIONS_FLAG = "--dangerously-skip-permissions"
PRINT_FLAG = "-p"
OUTPUT_FORMAT_FLAG = "--output-format"
VERBOSE_FLAG = "--verbose"
STREAM_JSON = "stream-json"
JSON = "json"

_FALSE_STRINGS = {"", "0", "false", "no", "off"}


class UsageError(Exception):
    """Raised when the swarm command is invoked with unusable arguments."""


class MissingObjectiveError(UsageError):
    """Raised when no objective text was given."""

    def __init__(self):
        super().__init__(USAGE)


@dataclass(frozen=True)
class ResolvedConfiguration:
    """Settings derived from the options and the environment."""

    strategy: str
    mode: str
    max_agents: int
    output_format: str | None
    headless: bool
    analysis_mode: bool
    auto_permissions: bool
    force_external_tool: bool
    use_executor: bool
    tool_available: bool

    @property
    def non_interactive(self) -> bool:
        """Whether the external CLI runs in print mode with structured output."""
        return self.headless or self.output_format in (STREAM_JSON, JSON)

    @property
    def effective_output_format(self) -> str | None:
        if self.non_interactive:
            return self.output_format or STREAM_JSON
        return self.output_format


@dataclass(frozen=True)
class SwarmInvocation:
    """Everything needed to launch (or fall back from) one swarm run."""

    objective: str
    prompt: str
    argv: tuple[str, ...]
    resolved: ResolvedConfiguration

    @property
    def flags(self) -> tuple[str, ...]:
        return self.argv[1:]


def option_flag(options: Mapping[str, Any], name: str) -> bool:
    """Read a boolean option that may arrive as a bool or a string."""
    value = options.get(name, False)
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _option_text(options: Mapping[str, Any], name: str, default: str) -> str:
    value = options.get(name)
    if value is None or value is False or str(value).strip() == "":
        return default
    return str(value).strip()


def _parse_max_agents(options: Mapping[str, Any], default: int) -> int:
    value = options.get("max-agents")
    if value is None or value == "":
        return default
    try:
        max_agents = int(str(value).strip())
    except ValueError:
        raise UsageError(f"--max-agents must be an integer, got '{value}'")
    if max_agents < 1:
        raise UsageError(f"--max-agents must be at least 1, got {max_agents}")
    return max_agents


def resolve_configuration(
    options: Mapping[str, Any],
    signals: EnvironmentSignals,
    tool_available: bool = True,
    defaults: LauncherConfig | None = None,
) -> ResolvedConfiguration:
    """
    Derive the operating mode from options and environment signals.

    Args:
        options: Raw option mapping (hyphenated names, as on the command line)
        signals: Environment snapshot used for headless detection
        tool_available: Result of probing for the external CLI
        defaults: Project config supplying defaults for unset options

    Returns:
        ResolvedConfiguration
    """
    strategy_default = defaults.strategy if defaults else DEFAULT_STRATEGY
    mode_default = defaults.mode if defaults else DEFAULT_MODE
    max_agents_default = defaults.max_agents if defaults else DEFAULT_MAX_AGENTS

    output_format = options.get("output-format") or None
    force_external_tool = option_flag(options, "claude")

    use_executor = not force_external_tool and (
        option_flag(options, "executor")
        or output_format == JSON
        or not tool_available
    )

    return ResolvedConfiguration(
        strategy=_option_text(options, "strategy", strategy_default),
        mode=_option_text(options, "mode", mode_default),
        max_agents=_parse_max_agents(options, max_agents_default),
        output_format=output_format,
        headless=option_flag(options, "headless") or signals.is_headless,
        analysis_mode=option_flag(options, "analysis") or option_flag(options, "read-only"),
        auto_permissions=not option_flag(options, "no-auto-permissions"),
        force_external_tool=force_external_tool,
        use_executor=use_executor,
        tool_available=tool_available,
    )


def build_argv(prompt: str, resolved: ResolvedConfiguration) -> tuple[str, ...]:
    """Assemble the argument vector: prompt first, then flags in fixed order."""
    argv = [prompt]
    if resolved.auto_permissions:
        argv.append(SKIP_PERMISSIONS_FLAG)
    if resolved.non_interactive:
        argv.extend([PRINT_FLAG, OUTPUT_FORMAT_FLAG, resolved.effective_output_format, VERBOSE_FLAG])
    return tuple(argv)


def join_objective(objective_parts: Sequence[str]) -> str:
    """Join objective words with single spaces; raise if nothing is left."""
    objective = " ".join(str(part) for part in objective_parts).strip()
    if not objective:
        raise MissingObjectiveError()
    return objective


def build_invocation(
    objective_parts: Sequence[str],
    options: Mapping[str, Any],
    signals: EnvironmentSignals,
    tool_available: bool = True,
    defaults: LauncherConfig | None = None,
) -> SwarmInvocation:
    """
    Build the prompt and argument vector for one swarm run.

    Raises:
        MissingObjectiveError: If no objective was given
        UsageError: If an option value is unusable
    """
    objective = join_objective(objective_parts)
    resolved = resolve_configuration(options, signals, tool_available, defaults)
    prompt = build_swarm_prompt(
        objective,
        strategy=resolved.strategy,
        mode=resolved.mode,
        max_agents=resolved.max_agents,
        analysis_mode=resolved.analysis_mode,
    )
    argv = build_argv(prompt, resolved)
    logger.debug("Resolved swarm configuration: %s (argv has %d flags)", resolved, len(argv) - 1)

    return SwarmInvocation(objective=objective, prompt=prompt, argv=argv, resolved=resolved)
