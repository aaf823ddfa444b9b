"""
Fallback swarm execution when the external CLI is not used.

Two tiers:
- A compiled executor plugin, registered by another distribution under the
  ``swarm_launcher.executors`` entry point group
- BasicSwarmExecutor, a reduced-capability local run that plans the agent
  roster and records it under .swarm/runs/ without calling any AI tool
"""

import json
import logging
import uuid
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from importlib.metadata import entry_points
from pathlib import Path
from typing import Any, Callable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .builder import JSON, ResolvedConfiguration


logger = logging.getLogger(__name__)

EXECUTOR_ENTRY_POINT_GROUP = "swarm_launcher.executors"

# Roles cycled through after the coordinator, per strategy
STRATEGY_ROLES = {
    "auto": ["researcher", "coder", "analyst", "tester"],
    "research": ["researcher", "analyst", "documenter"],
    "development": ["architect", "coder", "tester", "reviewer"],
    "analysis": ["analyst", "researcher", "documenter"],
    "testing": ["tester", "coder", "reviewer"],
    "optimization": ["analyst", "optimizer", "tester"],
    "maintenance": ["coder", "reviewer", "tester"],
}

# Roles that change files; dropped from read-only rosters
WRITE_ROLES = {"coder", "optimizer", "architect"}

ROLE_FOCUS = {
    "coordinator": "Plan the work, assign tasks and merge results",
    "researcher": "Gather context and prior art for the objective",
    "coder": "Implement the planned changes",
    "analyst": "Inspect code and data, report findings",
    "tester": "Write and run tests for the results",
    "architect": "Design structure and interfaces",
    "reviewer": "Review results for correctness and quality",
    "documenter": "Write up decisions and findings",
    "optimizer": "Profile and remove bottlenecks",
}

CompiledExecutor = Callable[[str, ResolvedConfiguration], Any]


@dataclass
class AgentPlan:
    """One planned agent in a basic swarm run."""

    agent_id: str
    role: str
    focus: str


@dataclass
class SwarmRun:
    """Record of a basic swarm run, persisted as JSON."""

    swarm_id: str
    objective: str
    strategy: str
    mode: str
    max_agents: int
    analysis_mode: bool
    status: str
    created_at: str
    agents: list[AgentPlan] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SwarmRun":
        """Deserialize from dictionary."""
        return cls(
            swarm_id=data["swarm_id"],
            objective=data["objective"],
            strategy=data["strategy"],
            mode=data["mode"],
            max_agents=data["max_agents"],
            analysis_mode=data.get("analysis_mode", False),
            status=data["status"],
            created_at=data["created_at"],
            agents=[AgentPlan(**a) for a in data.get("agents", [])],
        )


def plan_agents(strategy: str, max_agents: int, analysis_mode: bool = False) -> list[AgentPlan]:
    """
    Plan the agent roster: a coordinator, then strategy roles in rotation.

    The roster never exceeds max_agents.
    """
    roles = STRATEGY_ROLES.get(strategy, STRATEGY_ROLES["auto"])
    if analysis_mode:
        roles = [r for r in roles if r not in WRITE_ROLES] or ["analyst"]

    plan = [AgentPlan("agent-1", "coordinator", ROLE_FOCUS["coordinator"])]
    for i in range(1, max_agents):
        role = roles[(i - 1) % len(roles)]
        plan.append(AgentPlan(f"agent-{i + 1}", role, ROLE_FOCUS.get(role, "")))
    return plan


def load_compiled_executor() -> CompiledExecutor | None:
    """Return the first loadable executor plugin, or None if none is installed."""
    for ep in entry_points(group=EXECUTOR_ENTRY_POINT_GROUP):
        try:
            executor = ep.load()
        except (ImportError, AttributeError) as e:
            logger.warning("Skipping swarm executor plugin %s: %s", ep.name, e)
            continue
        logger.debug("Loaded swarm executor plugin %s", ep.name)
        return executor
    return None


class BasicSwarmExecutor:
    """
    Local, reduced-capability swarm execution.

    Plans the roster and records the run so it can be resumed later with the
    external CLI; does not run any agent itself.
    """

    def __init__(
        self,
        runs_dir: Path | str = ".swarm/runs",
        console: Console | None = None,
        status_console: Console | None = None,
    ):
        """
        Initialize the executor.

        Args:
            runs_dir: Directory where run records are written
            console: Console for the run report (table or JSON record)
            status_console: Console for progress output (defaults to console)
        """
        self.runs_dir = Path(runs_dir)
        self.console = console or Console()
        self.status_console = status_console or self.console

    def _new_swarm_id(self) -> str:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
        return f"swarm_{stamp}_{uuid.uuid4().hex[:8]}"

    def _write_run(self, run: SwarmRun) -> Path:
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        path = self.runs_dir / f"{run.swarm_id}.json"
        path.write_text(json.dumps(run.to_dict(), indent=2))
        return path

    def load_run(self, swarm_id: str) -> SwarmRun | None:
        """Load a previously recorded run by id."""
        path = self.runs_dir / f"{swarm_id}.json"
        if not path.exists():
            return None
        return SwarmRun.from_dict(json.loads(path.read_text()))

    def execute(self, objective: str, resolved: ResolvedConfiguration) -> SwarmRun:
        """Plan and record a swarm run, then report it."""
        run = SwarmRun(
            swarm_id=self._new_swarm_id(),
            objective=objective,
            strategy=resolved.strategy,
            mode=resolved.mode,
            max_agents=resolved.max_agents,
            analysis_mode=resolved.analysis_mode,
            status="planned",
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        with self.status_console.status("Planning swarm..."):
            run.agents = plan_agents(resolved.strategy, resolved.max_agents, resolved.analysis_mode)
            path = self._write_run(run)
        logger.debug("Recorded swarm run %s at %s", run.swarm_id, path)

        if resolved.output_format == JSON:
            self.console.print_json(data=run.to_dict())
            return run

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Agent", style="white")
        table.add_column("Role", style="yellow")
        table.add_column("Focus", style="dim")
        for agent in run.agents:
            table.add_row(agent.agent_id, agent.role, agent.focus)

        self.console.print(f"\n[bold]Swarm ID:[/] {run.swarm_id}")
        self.console.print(table)
        self.console.print(f"[green]✓[/] Run recorded at {escape(str(path))}")
        self.console.print(
            "[dim]Install Claude Code to execute the plan: npm install -g @anthropic-ai/claude-code[/]"
        )
        return run


def run_fallback(
    objective: str,
    resolved: ResolvedConfiguration,
    console: Console,
    runs_dir: Path | str = ".swarm/runs",
    loader: Callable[[], CompiledExecutor | None] = load_compiled_executor,
    status_console: Console | None = None,
) -> Any:
    """
    Run the compiled executor plugin if installed, else the basic executor.

    Progress lines go to status_console (defaults to console), so a JSON
    report on console stays parseable.

    Returns:
        Whatever the executor returned (a SwarmRun for the basic executor)
    """
    status = status_console or console
    compiled = loader()
    if compiled is not None:
        status.print("[cyan]Using compiled swarm executor[/]")
        return compiled(objective, resolved)

    status.print("[yellow]Compiled swarm module not found[/]")
    status.print("Starting basic swarm execution...")
    executor = BasicSwarmExecutor(runs_dir=runs_dir, console=console, status_console=status)
    return executor.execute(objective, resolved)
