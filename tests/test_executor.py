"""
Tests for the fallback swarm executors.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from swarm_launcher.builder import resolve_configuration
from swarm_launcher.executor import (
    EXECUTOR_ENTRY_POINT_GROUP,
    BasicSwarmExecutor,
    SwarmRun,
    load_compiled_executor,
    plan_agents,
    run_fallback,
)


@pytest.fixture
def resolved(interactive_signals):
    return resolve_configuration({"executor": True}, interactive_signals)


class TestPlanAgents:

    def test_coordinator_first(self):
        plan = plan_agents("development", 4)

        assert plan[0].role == "coordinator"
        assert [a.role for a in plan[1:]] == ["architect", "coder", "tester"]

    def test_roster_capped_at_max_agents(self):
        assert len(plan_agents("auto", 3)) == 3
        assert len(plan_agents("research", 9)) == 9

    def test_single_agent_is_coordinator(self):
        plan = plan_agents("testing", 1)

        assert [a.role for a in plan] == ["coordinator"]

    def test_agent_ids_are_unique(self):
        ids = [a.agent_id for a in plan_agents("auto", 7)]

        assert len(ids) == len(set(ids))

    def test_analysis_mode_drops_write_roles(self):
        roles = {a.role for a in plan_agents("development", 6, analysis_mode=True)}

        assert "coder" not in roles
        assert "architect" not in roles

    def test_unknown_strategy_uses_auto_roles(self):
        assert [a.role for a in plan_agents("creative", 3)] == [a.role for a in plan_agents("auto", 3)]


class TestBasicSwarmExecutor:

    def test_records_run(self, tmp_path, out, resolved):
        executor = BasicSwarmExecutor(runs_dir=tmp_path / "runs", console=out)

        run = executor.execute("Build a REST API", resolved)

        path = tmp_path / "runs" / f"{run.swarm_id}.json"
        assert path.exists()
        data = json.loads(path.read_text())
        assert data["objective"] == "Build a REST API"
        assert data["status"] == "planned"
        assert len(data["agents"]) == resolved.max_agents

    def test_load_run_round_trip(self, tmp_path, out, resolved):
        executor = BasicSwarmExecutor(runs_dir=tmp_path, console=out)
        run = executor.execute("Task", resolved)

        loaded = executor.load_run(run.swarm_id)

        assert loaded == run
        assert executor.load_run("swarm_missing") is None

    def test_prints_roster(self, tmp_path, out, resolved):
        run = BasicSwarmExecutor(runs_dir=tmp_path, console=out).execute("Task", resolved)

        output = out.file.getvalue()
        assert run.swarm_id in output
        assert "coordinator" in output

    def test_json_output(self, tmp_path, out, interactive_signals):
        resolved = resolve_configuration({"output-format": "json"}, interactive_signals)

        run = BasicSwarmExecutor(runs_dir=tmp_path, console=out).execute("Task", resolved)

        output = out.file.getvalue()
        printed = json.loads(output[output.index("{"):])
        assert printed["swarm_id"] == run.swarm_id
        assert printed["agents"][0]["role"] == "coordinator"

    def test_swarm_ids_differ(self, tmp_path, out, resolved):
        executor = BasicSwarmExecutor(runs_dir=tmp_path, console=out)

        assert executor.execute("A", resolved).swarm_id != executor.execute("B", resolved).swarm_id


class TestSwarmRun:

    def test_from_dict_defaults_analysis_mode(self):
        run = SwarmRun.from_dict({
            "swarm_id": "swarm_1",
            "objective": "Task",
            "strategy": "auto",
            "mode": "mesh",
            "max_agents": 1,
            "status": "planned",
            "created_at": "2026-01-01T00:00:00+00:00",
        })

        assert run.analysis_mode is False
        assert run.agents == []


class TestLoadCompiledExecutor:

    def test_no_plugins(self):
        with patch("swarm_launcher.executor.entry_points", return_value=[]) as mock_eps:
            assert load_compiled_executor() is None

        mock_eps.assert_called_once_with(group=EXECUTOR_ENTRY_POINT_GROUP)

    def test_first_loadable_plugin_wins(self):
        broken = MagicMock()
        broken.name = "broken"
        broken.load.side_effect = ImportError("missing extension")
        working = MagicMock()
        working.name = "native"
        working.load.return_value = "native-executor"

        with patch("swarm_launcher.executor.entry_points", return_value=[broken, working]):
            assert load_compiled_executor() == "native-executor"


class TestRunFallback:

    def test_basic_execution_when_no_compiled_module(self, tmp_path, out, resolved):
        run = run_fallback("Task", resolved, out, runs_dir=tmp_path, loader=lambda: None)

        output = out.file.getvalue()
        assert "Compiled swarm module not found" in output
        assert "Starting basic swarm execution" in output
        assert isinstance(run, SwarmRun)

    def test_compiled_executor_used_when_installed(self, tmp_path, out, resolved):
        compiled = MagicMock(return_value="done")

        result = run_fallback("Task", resolved, out, runs_dir=tmp_path, loader=lambda: compiled)

        assert result == "done"
        compiled.assert_called_once_with("Task", resolved)
        assert "Compiled swarm module not found" not in out.file.getvalue()
        assert not any(tmp_path.iterdir())
