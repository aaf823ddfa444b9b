"""
Prompt templates for the swarm coordinator.

The external assistant receives a single prompt describing the objective,
the swarm configuration and how agents should coordinate.
"""

STRATEGY_GUIDANCE = {
    "auto": "Analyze the objective and choose the most effective approach. "
            "Spawn the specialists the work actually needs.",
    "research": "Prioritize information gathering. Assign researchers to explore "
                "sources in parallel, then consolidate and cross-check findings.",
    "development": "Plan the architecture first, then implement in small, tested "
                   "increments. Pair each implementation task with its tests.",
    "analysis": "Inspect the existing code or data thoroughly. Report patterns, "
                "risks and recommendations with concrete references.",
    "testing": "Map the behavior under test, write focused tests for each case "
               "and report failures with reproduction steps.",
    "optimization": "Measure before changing anything. Profile, identify the "
                    "largest bottlenecks and verify each improvement.",
    "maintenance": "Keep behavior stable. Refactor in small steps, update "
                   "dependencies carefully and run the test suite after each change.",
}

MODE_GUIDANCE = {
    "hierarchical": "You are the top-level coordinator. Delegate to team leads, "
                    "each responsible for a group of workers, and aggregate their results.",
    "centralized": "You are the single coordinator. Assign every task directly "
                   "and collect every result yourself.",
    "distributed": "Split the objective across several coordinators that own "
                   "independent areas and synchronize at milestones.",
    "mesh": "Agents work as peers. Let them claim tasks, share findings with each "
            "other directly and resolve conflicts by consensus.",
    "hybrid": "Plan centrally, then let agents execute and collaborate as peers, "
              "escalating to the coordinator only when blocked.",
}

GENERIC_STRATEGY_GUIDANCE = "Apply the '{strategy}' strategy as appropriate for the objective."
GENERIC_MODE_GUIDANCE = "Coordinate agents using the '{mode}' topology."

ANALYSIS_PREAMBLE = """\
ANALYSIS MODE CONSTRAINTS:
READ-ONLY MODE ACTIVE - this swarm must not modify anything.
- Do NOT create, edit, move or delete files
- Do NOT run commands that change state (installs, commits, migrations, deployments)
- Only read, search and inspect existing code and data
- Deliver findings as a written report in your final response

"""

SWARM_PROMPT = """{analysis_preamble}You are orchestrating a swarm of AI agents to achieve the following objective.

OBJECTIVE: {objective}

SWARM CONFIGURATION:
- Strategy: {strategy}
- Mode: {mode}
- Max Agents: {max_agents}
- Analysis Mode: {analysis_label}

STRATEGY GUIDANCE:
{strategy_guidance}

COORDINATION:
{mode_guidance}

EXECUTION RULES:
1. Break the objective into tasks sized for a single agent
2. Never run more than {max_agents} agents at the same time
3. Track progress for every task and report blockers immediately
4. Verify each result before marking its task complete
5. Finish with a summary of what was done and what remains

Begin by outlining your plan, then execute it.
"""


def build_swarm_prompt(
    objective: str,
    strategy: str,
    mode: str,
    max_agents: int,
    analysis_mode: bool = False,
) -> str:
    """
    Build the coordinator prompt for the external assistant.

    Unknown strategies and modes still produce a usable prompt with
    generic guidance.
    """
    strategy_guidance = STRATEGY_GUIDANCE.get(
        strategy, GENERIC_STRATEGY_GUIDANCE.format(strategy=strategy)
    )
    mode_guidance = MODE_GUIDANCE.get(mode, GENERIC_MODE_GUIDANCE.format(mode=mode))

    return SWARM_PROMPT.format(
        analysis_preamble=ANALYSIS_PREAMBLE if analysis_mode else "",
        objective=objective,
        strategy=strategy,
        mode=mode,
        max_agents=max_agents,
        analysis_label="ENABLED (Read-only)" if analysis_mode else "DISABLED",
        strategy_guidance=strategy_guidance,
        mode_guidance=mode_guidance,
    )
