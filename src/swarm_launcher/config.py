"""
Configuration system for swarm-launcher.

Provides LauncherConfig dataclass for swarm defaults and load_config function
for loading configuration from .swarm/config.json.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


# Registry of known strategies and topologies with descriptions for help text
STRATEGIES = {
    "auto": "Let the coordinator pick the approach from the objective (default)",
    "research": "Gather information, compare sources and summarize findings",
    "development": "Design, implement and test new functionality",
    "analysis": "Study existing code or data and report insights",
    "testing": "Write and run tests, report coverage and failures",
    "optimization": "Profile, find bottlenecks and improve performance",
    "maintenance": "Refactor, update dependencies and fix technical debt",
}

MODES = {
    "hierarchical": "Coordinator delegates to team leads who manage workers (default)",
    "centralized": "A single coordinator assigns every task",
    "distributed": "Several coordinators share the workload",
    "mesh": "Agents communicate peer-to-peer and self-assign tasks",
    "hybrid": "Mixes centralized planning with peer-to-peer execution",
}

DEFAULT_STRATEGY = "auto"
DEFAULT_MODE = "hierarchical"
DEFAULT_MAX_AGENTS = 5
DEFAULT_CONFIG_PATH = Path(".swarm/config.json")


class ConfigError(ValueError):
    """Raised when a config file or value is invalid."""


def format_choices_help(registry: dict[str, str], intro: str = "") -> str:
    """Format help text for a registry with all options described."""
    lines = [intro] if intro else []
    for name, desc in registry.items():
        lines.append(f"  {name}: {desc}")
    return "\n".join(lines)


@dataclass
class LauncherConfig:
    """
    Project-level defaults for the swarm command.

    CLI options always take precedence over these values.

    Attributes:
        strategy: Default swarm strategy label
        mode: Default coordination topology label
        max_agents: Default upper bound on agents in the swarm
        cli_tool: Executable name of the external assistant CLI
        runs_dir: Directory where the basic executor records its runs
    """

    strategy: str = DEFAULT_STRATEGY
    mode: str = DEFAULT_MODE
    max_agents: int = DEFAULT_MAX_AGENTS
    cli_tool: str = "claude"
    runs_dir: str = ".swarm/runs"

    def __post_init__(self):
        """Validate configuration values."""
        if self.strategy not in STRATEGIES:
            raise ConfigError(
                f"Invalid strategy: {self.strategy}. "
                f"Valid options: {set(STRATEGIES)}"
            )
        if self.mode not in MODES:
            raise ConfigError(
                f"Invalid mode: {self.mode}. "
                f"Valid options: {set(MODES)}"
            )
        if isinstance(self.max_agents, bool) or not isinstance(self.max_agents, int) or self.max_agents < 1:
            raise ConfigError(
                f"Invalid max_agents: {self.max_agents}. Must be a positive integer"
            )
        if not self.cli_tool:
            raise ConfigError("cli_tool must not be empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LauncherConfig":
        """Create LauncherConfig from a dictionary, using defaults for missing keys."""
        return cls(
            strategy=data.get("strategy", DEFAULT_STRATEGY),
            mode=data.get("mode", DEFAULT_MODE),
            max_agents=data.get("max_agents", DEFAULT_MAX_AGENTS),
            cli_tool=data.get("cli_tool", "claude"),
            runs_dir=data.get("runs_dir", ".swarm/runs"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "strategy": self.strategy,
            "mode": self.mode,
            "max_agents": self.max_agents,
            "cli_tool": self.cli_tool,
            "runs_dir": self.runs_dir,
        }


def load_config(config_path: str | Path | None = None) -> LauncherConfig:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to config file. If None, looks for .swarm/config.json

    Returns:
        LauncherConfig with loaded or default values
    """
    config_path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)

    if not config_path.exists():
        return LauncherConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e.strerror or e}")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {config_path}: expected a JSON object")
    return LauncherConfig.from_dict(data)


def save_config(config: LauncherConfig, config_path: str | Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: LauncherConfig to save
        config_path: Path to config file. If None, saves to .swarm/config.json
    """
    config_path = DEFAULT_CONFIG_PATH if config_path is None else Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config.to_dict(), indent=2))
