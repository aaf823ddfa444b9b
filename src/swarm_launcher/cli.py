"""
CLI entry point for the swarm launcher.
"""

import logging
from typing import Any, Mapping, Sequence

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .builder import (
    JSON,
    USAGE,
    MissingObjectiveError,
    ResolvedConfiguration,
    UsageError,
    build_invocation,
    join_objective,
)
from .config import (
    DEFAULT_CONFIG_PATH,
    MODES,
    STRATEGIES,
    ConfigError,
    LauncherConfig,
    format_choices_help,
    load_config,
    save_config,
)
from .environment import EnvironmentSignals, detect_environment
from .executor import run_fallback
from .launcher import ClaudeLauncher, OutcomeKind, ProcessOutcome, ToolProbe, probe_tool


console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

INSTALL_HINT = "npm install -g @anthropic-ai/claude-code"

SWARM_HELP = f"""🐝 Advanced Swarm System

USAGE:
  swarm-launcher swarm <objective> [options]

EXAMPLES:
  swarm-launcher swarm "Build a REST API"
  swarm-launcher swarm "Research cloud architecture" --strategy research
  swarm-launcher swarm "Analyze codebase" --analysis
  swarm-launcher swarm "Run tests" --headless --output-format stream-json

OPTIONS:
  --strategy <type>       Swarm strategy (default: auto)
  --mode <type>           Coordination mode (default: hierarchical)
  --max-agents <n>        Maximum number of agents (default: 5)
  --executor              Use the built-in executor instead of Claude Code
  --claude                Launch Claude Code even if it is not found on PATH
  --headless              Run non-interactively (auto-detected in CI)
  --output-format <fmt>   Output format: text, json, stream-json
  --no-auto-permissions   Do not pass --dangerously-skip-permissions
  --analysis, --read-only Read-only analysis mode, no file changes
  --dry-run               Show the configuration without launching

STRATEGIES:
{format_choices_help(STRATEGIES)}

MODES:
{format_choices_help(MODES)}
"""


def setup_logging(debug: bool = False) -> None:
    """Route diagnostic logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def _print_usage(out: Console, err: Console) -> None:
    err.print(f"❌ {USAGE}", markup=False, highlight=False)
    out.print(SWARM_HELP, markup=False, highlight=False)


def _print_configuration(out: Console, objective: str, resolved: ResolvedConfiguration) -> None:
    out.print("\n[bold blue]🐝 Launching Swarm System...[/]")
    out.print(f"📋 Objective: {escape(objective)}")
    out.print(f"🎯 Strategy: {escape(resolved.strategy)}")
    out.print(f"🏗️  Mode: {escape(resolved.mode)}")
    out.print(f"🤖 Max Agents: {resolved.max_agents}")
    if resolved.analysis_mode:
        out.print("[cyan]🔍 Analysis Mode: ENABLED (Read-only)[/]")


def _report_outcome(out: Console, err: Console, outcome: ProcessOutcome) -> None:
    if outcome.kind == OutcomeKind.SUCCEEDED:
        out.print("\n[bold green]✅ Swarm session completed successfully[/]")
    elif outcome.kind == OutcomeKind.FAILED:
        if outcome.reason:
            out.print(f"\n[bold yellow]⚠️  Claude Code {outcome.reason} (exit code {outcome.exit_code})[/]")
        else:
            out.print(f"\n[bold yellow]⚠️  Claude Code exited with code {outcome.exit_code}[/]")
    elif outcome.kind == OutcomeKind.SPAWN_ERROR:
        err.print("❌ Failed to launch Claude Code:", outcome.reason, markup=False, highlight=False)


def swarm_command(
    objective_parts: Sequence[str],
    options: Mapping[str, Any],
    *,
    signals: EnvironmentSignals | None = None,
    probe: ToolProbe | None = None,
    launcher: ClaudeLauncher | None = None,
    config: LauncherConfig | None = None,
    config_path: str | None = None,
    out: Console | None = None,
    err: Console | None = None,
) -> ProcessOutcome | None:
    """
    Launch a swarm for the objective.

    Builds the coordinator prompt and runs the external CLI with it, or
    falls back to the local executor when the CLI is unavailable.

    Args:
        objective_parts: Objective words as given on the command line
        options: Option flags keyed by their hyphenated names
        signals: Environment snapshot (defaults to the real process)
        probe: Tool presence check (defaults to a PATH lookup)
        launcher: Process launcher (defaults to ClaudeLauncher for config.cli_tool)
        config: Project defaults (defaults to the file at config_path)
        config_path: Config file to load when config is not given
            (defaults to .swarm/config.json)

    With --output-format json, status lines go to err so stdout carries
    only the JSON record.

    Returns:
        The ProcessOutcome of the run, or None when nothing was run
        (usage error, dry run)

    Raises:
        ConfigError: If the config file cannot be read or is invalid
        SystemExit: With code 1 when the CLI could not be found at launch
    """
    out = out or console
    err = err or err_console
    try:
        join_objective(objective_parts)
    except MissingObjectiveError:
        _print_usage(out, err)
        return None

    if config is None:
        config = load_config(config_path)
    if signals is None:
        signals = detect_environment()
    probe = probe or probe_tool

    tool_available = probe(config.cli_tool)
    try:
        invocation = build_invocation(
            objective_parts, options, signals,
            tool_available=tool_available,
            defaults=config,
        )
    except UsageError as e:
        err.print(f"❌ {e}", markup=False, highlight=False)
        return None

    resolved = invocation.resolved
    status = err if resolved.output_format == JSON else out
    _print_configuration(status, invocation.objective, resolved)

    if options.get("dry-run"):
        out.print("\n[bold]Dry run:[/] would execute")
        out.print(f"  {config.cli_tool} <prompt> {' '.join(invocation.flags)}", markup=False)
        out.print(f"[dim]Prompt length: {len(invocation.prompt)} characters[/]")
        return None

    if resolved.use_executor:
        if not resolved.tool_available:
            status.print("\n[yellow]⚠️  Claude Code CLI not found in PATH[/]")
            status.print(f"[dim]Install it with: {INSTALL_HINT}[/]")
        run_fallback(
            invocation.objective, resolved, out,
            runs_dir=config.runs_dir,
            status_console=status,
        )
        if not resolved.tool_available:
            return ProcessOutcome.not_found(config.cli_tool)
        return ProcessOutcome.succeeded()

    if not resolved.tool_available:
        status.print("\n[yellow]⚠️  Claude Code CLI not found in PATH, launching anyway (--claude)[/]")

    if resolved.non_interactive:
        status.print("\n🤖 Running in non-interactive mode with Claude Code")
        for reason in signals.describe():
            status.print(f"[dim]   • {escape(reason)}[/]")
    else:
        status.print("\n🚀 Launching Claude Code with swarm coordination prompt...")

    launcher = launcher or ClaudeLauncher(config.cli_tool)
    outcome = launcher.launch(invocation.argv)
    logger.debug("Swarm outcome: %s", outcome)

    if outcome.kind == OutcomeKind.NOT_FOUND:
        err.print("❌ Claude Code CLI not found. Install it with:", INSTALL_HINT, markup=False, highlight=False)
        raise SystemExit(1)

    _report_outcome(status, err, outcome)
    return outcome


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Enable debug logging on stderr.")
def main(debug: bool):
    """🐝 Swarm Launcher - Coordinate AI agent swarms through Claude Code

    Builds a swarm coordination prompt from your objective and launches the
    Claude Code CLI with it. Falls back to a built-in executor when Claude
    Code is not installed.

    \b
    Configuration:
      Config file: .swarm/config.json (created by 'swarm-launcher init')
      CLI flags override config file settings.

    \b
    Quick start:
      swarm-launcher init                  Create default config
      swarm-launcher swarm "objective"     Launch a swarm
    """
    setup_logging(debug)


@main.command()
@click.argument("objective", nargs=-1)
@click.option("--strategy", "-s", default=None, help="Swarm strategy (default: auto).")
@click.option("--mode", "-m", default=None, help="Coordination mode (default: hierarchical).")
@click.option("--max-agents", type=click.IntRange(min=1), default=None, help="Maximum number of agents (default: 5).")
@click.option("--executor", is_flag=True, help="Use the built-in executor instead of Claude Code.")
@click.option("--claude", is_flag=True, help="Launch Claude Code even if it is not found on PATH.")
@click.option("--headless", is_flag=True, help="Run non-interactively (auto-detected in CI and containers).")
@click.option(
    "--output-format",
    type=click.Choice(["text", "json", "stream-json"]),
    default=None,
    help="Output format. stream-json runs Claude Code non-interactively; json uses the built-in executor.",
)
@click.option("--no-auto-permissions", is_flag=True, help="Do not skip Claude Code permission prompts.")
@click.option("--analysis", is_flag=True, help="Read-only analysis mode.")
@click.option("--read-only", is_flag=True, help="Alias for --analysis.")
@click.option("--dry-run", is_flag=True, help="Show the configuration without launching.")
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to config file. Default: .swarm/config.json",
)
def swarm(objective: tuple[str, ...], config_path: str | None, **flags):
    """Launch a swarm for OBJECTIVE.

    \b
    Examples:
      swarm-launcher swarm "Build a REST API"
      swarm-launcher swarm "Analyze codebase" --analysis
      swarm-launcher swarm "Fix flaky tests" --strategy testing --mode mesh
    """
    options = {
        name.replace("_", "-"): value
        for name, value in flags.items()
        if value is not None and value is not False
    }

    try:
        outcome = swarm_command(list(objective), options, config_path=config_path)
    except ConfigError as e:
        err_console.print(f"[bold red]Error:[/] {e}")
        raise SystemExit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/]")
        raise SystemExit(130)

    if outcome is None:
        return
    if outcome.kind == OutcomeKind.FAILED:
        raise SystemExit(outcome.exit_code)
    if outcome.kind == OutcomeKind.SPAWN_ERROR:
        raise SystemExit(1)


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """Create .swarm/config.json with default settings.

    \b
    Creates:
      .swarm/             Directory for config and run records
      .swarm/config.json  Default strategy, mode and agent limits
      .swarm/.gitignore   Keeps run records out of version control
    """
    console.print("\n[bold]🐝 Initializing Swarm Launcher[/]\n")

    swarm_dir = DEFAULT_CONFIG_PATH.parent
    if DEFAULT_CONFIG_PATH.exists() and not force:
        console.print("[yellow]⚠️  Swarm launcher already configured[/]")
        console.print("   Use --force to overwrite existing configuration")
        return

    swarm_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"   ✓ Created {swarm_dir}/")

    gitignore_path = swarm_dir / ".gitignore"
    if not gitignore_path.exists():
        gitignore_path.write_text("runs/\n")
        console.print(f"   ✓ Created {gitignore_path}")

    save_config(LauncherConfig())
    console.print(f"   ✓ Created {DEFAULT_CONFIG_PATH}")
    console.print("\n[bold green]✅ Swarm launcher initialized![/]")


@main.group()
def config():
    """View and modify swarm configuration.

    \b
    Commands:
      show    Display current configuration
      set     Update a configuration value
    """
    pass


# Map CLI keys (with hyphens) to config keys (with underscores)
CONFIG_KEYS = {
    "strategy": ("strategy", STRATEGIES),
    "mode": ("mode", MODES),
    "max-agents": ("max_agents", None),
    "cli-tool": ("cli_tool", None),
    "runs-dir": ("runs_dir", None),
}


def _config_exists() -> bool:
    """Check if swarm config exists."""
    return DEFAULT_CONFIG_PATH.exists()


def _require_config() -> None:
    if not _config_exists():
        console.print("[bold red]Error:[/] Swarm launcher not initialized.")
        console.print("Run [cyan]swarm-launcher init[/] first.")
        raise SystemExit(1)


@config.command("show")
def config_show():
    """Display current configuration in a formatted table."""
    _require_config()

    try:
        launcher_config = load_config()
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise SystemExit(1)
    config_dict = launcher_config.to_dict()

    console.print("\n[bold]🐝 Swarm Configuration[/]\n")
    console.print(f"   [dim]Config file:[/] {DEFAULT_CONFIG_PATH}\n")

    from rich.table import Table
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="white")
    table.add_column("Current Value", style="green")
    table.add_column("Valid Options", style="dim")

    for cli_key, (config_key, registry) in CONFIG_KEYS.items():
        if registry:
            valid_options = ", ".join(registry)
        elif config_key == "max_agents":
            valid_options = "(positive integer)"
        else:
            valid_options = "(any)"
        table.add_row(cli_key, str(config_dict.get(config_key, "")), valid_options)

    console.print(table)


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration value.

    \b
    KEY is one of: strategy, mode, max-agents, cli-tool, runs-dir
    VALUE must be valid for the given key.

    \b
    Examples:
      swarm-launcher config set strategy research
      swarm-launcher config set max-agents 8
    """
    _require_config()

    if key not in CONFIG_KEYS:
        valid_keys = ", ".join(CONFIG_KEYS.keys())
        console.print(f"[bold red]Error:[/] Unknown config key '{key}'")
        console.print(f"Valid keys: {valid_keys}")
        raise SystemExit(1)

    config_key, registry = CONFIG_KEYS[key]

    if registry and value not in registry:
        console.print(f"[bold red]Error:[/] Invalid value '{value}' for {key}")
        console.print(f"Valid options: {', '.join(registry)}")
        raise SystemExit(1)

    new_value: Any = value
    if config_key == "max_agents":
        try:
            new_value = int(value)
        except ValueError:
            console.print(f"[bold red]Error:[/] {key} must be an integer")
            raise SystemExit(1)

    try:
        data = load_config().to_dict()
        data[config_key] = new_value
        save_config(LauncherConfig.from_dict(data))
    except ConfigError as e:
        console.print(f"[bold red]Error:[/] {e}")
        raise SystemExit(1)

    console.print(f"[green]✓[/] Set {key} = {value}")


if __name__ == "__main__":
    main()
