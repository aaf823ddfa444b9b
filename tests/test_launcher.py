"""
Tests for launching the external CLI.

No test spawns a real process; subprocess.Popen is patched.
"""

from unittest.mock import MagicMock, patch

import pytest

from swarm_launcher.launcher import ClaudeLauncher, OutcomeKind, ProcessOutcome, probe_tool


class TestProbeTool:

    def test_found(self):
        with patch("swarm_launcher.launcher.shutil.which", return_value="/usr/local/bin/claude"):
            assert probe_tool("claude") is True

    def test_not_found(self):
        with patch("swarm_launcher.launcher.shutil.which", return_value=None):
            assert probe_tool("claude") is False

    def test_lookup_error_is_not_fatal(self):
        with patch("swarm_launcher.launcher.shutil.which", side_effect=OSError("boom")):
            assert probe_tool("claude") is False


class TestClaudeLauncher:

    @pytest.fixture
    def mock_popen(self):
        """Create a mock Popen class whose process exits with code 0."""
        mock_process = MagicMock()
        mock_process.pid = 12345
        mock_process.wait.return_value = 0
        with patch("subprocess.Popen", return_value=mock_process) as mock:
            yield mock

    def test_spawns_command_with_argv(self, mock_popen):
        launcher = ClaudeLauncher()

        launcher.launch(["Build a REST API", "--dangerously-skip-permissions"])

        mock_popen.assert_called_once()
        cmd = mock_popen.call_args[0][0]
        assert cmd == ["claude", "Build a REST API", "--dangerously-skip-permissions"]

    def test_inherits_stdio_without_shell(self, mock_popen):
        ClaudeLauncher().launch(["prompt"])

        kwargs = mock_popen.call_args[1]
        assert kwargs.get("shell") is False
        assert "stdin" not in kwargs
        assert "stdout" not in kwargs
        assert "stderr" not in kwargs

    def test_custom_command(self, mock_popen):
        ClaudeLauncher(command="/opt/bin/claude").launch(["prompt"])

        assert mock_popen.call_args[0][0][0] == "/opt/bin/claude"

    def test_exit_zero_succeeds(self, mock_popen):
        outcome = ClaudeLauncher().launch(["prompt"])

        assert outcome == ProcessOutcome.succeeded()
        assert outcome.ok is True

    def test_non_zero_exit_fails(self, mock_popen):
        mock_popen.return_value.wait.return_value = 2

        outcome = ClaudeLauncher().launch(["prompt"])

        assert outcome.kind == OutcomeKind.FAILED
        assert outcome.exit_code == 2
        assert outcome.ok is False

    def test_killed_by_signal_uses_shell_exit_code(self, mock_popen):
        mock_popen.return_value.wait.return_value = -15

        outcome = ClaudeLauncher().launch(["prompt"])

        assert outcome.kind == OutcomeKind.FAILED
        assert outcome.exit_code == 143
        assert outcome.reason == "terminated by SIGTERM"

    def test_unknown_signal_number(self):
        outcome = ProcessOutcome.from_returncode(-200)

        assert outcome.exit_code == 328
        assert outcome.reason == "terminated by signal 200"

    def test_missing_executable_is_not_found(self):
        with patch("subprocess.Popen", side_effect=FileNotFoundError(2, "No such file")):
            outcome = ClaudeLauncher().launch(["prompt"])

        assert outcome.kind == OutcomeKind.NOT_FOUND
        assert "claude" in outcome.reason

    def test_other_os_error_is_spawn_error(self):
        with patch("subprocess.Popen", side_effect=PermissionError(13, "Permission denied")):
            outcome = ClaudeLauncher().launch(["prompt"])

        assert outcome.kind == OutcomeKind.SPAWN_ERROR
        assert outcome.reason == "Permission denied"

    def test_waits_exactly_once(self, mock_popen):
        ClaudeLauncher().launch(["prompt"])

        mock_popen.return_value.wait.assert_called_once()

    def test_interrupt_terminates_child(self, mock_popen):
        process = mock_popen.return_value
        process.wait.side_effect = [KeyboardInterrupt(), 0]

        with pytest.raises(KeyboardInterrupt):
            ClaudeLauncher().launch(["prompt"])

        process.terminate.assert_called_once()
