"""Tests for the ``pomus timer`` commands.

Every test runs against a real ConfigService rooted in tmp_path, so each
invocation recovers from the snapshot the previous one left behind, exactly
like separate processes would.
"""

from __future__ import annotations

import json
import re

from typer.testing import CliRunner

from pomus_cli.commands.timer import app
from pomus_cli.services.session_service import get_publication_sink, get_snapshot_store

runner = CliRunner()


def strip_ansi(text: str) -> str:
    ansi = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi.sub("", text)


def _status(tmp_config) -> dict:
    result = runner.invoke(app, ["status", "-o", "json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


# ---------------------------------------------------------------------------
# start / break
# ---------------------------------------------------------------------------


class TestStart:
    def test_start_focus(self, tmp_config):
        result = runner.invoke(app, ["start"])

        assert result.exit_code == 0, result.output
        assert "Focus started: 25:00" in strip_ansi(result.output)
        data = _status(tmp_config)
        assert data["status"] == "focus"
        assert data["mode"] == "focus"
        assert data["expected_completion"] is not None

    def test_start_writes_snapshot_and_publishes(self, tmp_config):
        runner.invoke(app, ["start"])

        assert get_snapshot_store(tmp_config).load().status == "focus"
        published = get_publication_sink(tmp_config).read()
        assert published.reason == "start"
        assert published.state.status == "focus"

    def test_short_break(self, tmp_config):
        result = runner.invoke(app, ["break"])

        assert "Break started: 05:00" in strip_ansi(result.output)
        assert _status(tmp_config)["status"] == "break"

    def test_long_break(self, tmp_config):
        result = runner.invoke(app, ["break", "--long"])

        assert "Long Break started: 15:00" in strip_ansi(result.output)
        assert _status(tmp_config)["mode"] == "long_break"

    def test_uses_configured_duration(self, tmp_config):
        tmp_config.set("timer.focus_minutes", 50)
        result = runner.invoke(app, ["start"])
        assert "50:00" in strip_ansi(result.output)


# ---------------------------------------------------------------------------
# pause / resume / toggle
# ---------------------------------------------------------------------------


class TestPauseResume:
    def test_pause_and_resume(self, tmp_config):
        runner.invoke(app, ["start"])

        result = runner.invoke(app, ["pause"])
        assert "Paused" in strip_ansi(result.output)
        assert _status(tmp_config)["status"] == "paused"

        result = runner.invoke(app, ["resume"])
        assert "Focus started" in strip_ansi(result.output)
        assert _status(tmp_config)["status"] == "focus"

    def test_pause_when_idle_warns(self, tmp_config):
        result = runner.invoke(app, ["pause"])

        assert result.exit_code == 0
        assert "No running session to pause" in strip_ansi(result.output)
        assert _status(tmp_config)["status"] == "idle"

    def test_resume_when_not_paused_warns(self, tmp_config):
        runner.invoke(app, ["start"])
        result = runner.invoke(app, ["resume"])

        assert "No paused session to resume" in strip_ansi(result.output)
        assert _status(tmp_config)["status"] == "focus"

    def test_toggle_cycles_through_states(self, tmp_config):
        runner.invoke(app, ["toggle"])
        assert _status(tmp_config)["status"] == "focus"

        result = runner.invoke(app, ["toggle"])
        assert "Paused" in strip_ansi(result.output)
        assert _status(tmp_config)["status"] == "paused"

        runner.invoke(app, ["toggle"])
        assert _status(tmp_config)["status"] == "focus"

    def test_paused_published_state_has_no_refresh(self, tmp_config):
        runner.invoke(app, ["start"])
        runner.invoke(app, ["pause"])

        published = get_publication_sink(tmp_config).read()
        assert published.reason == "pause"
        assert published.refresh_after is None


# ---------------------------------------------------------------------------
# stop / skip / reset-cycle
# ---------------------------------------------------------------------------


class TestStopSkip:
    def test_stop(self, tmp_config):
        runner.invoke(app, ["start"])
        result = runner.invoke(app, ["stop"])

        assert "Stopped. Up next: Focus" in strip_ansi(result.output)
        data = _status(tmp_config)
        assert data["status"] == "idle"
        assert data["session_count"] == 0

    def test_stop_when_idle_warns(self, tmp_config):
        result = runner.invoke(app, ["stop"])
        assert "Timer is not running" in strip_ansi(result.output)

    def test_skip_focus_goes_to_paused_break(self, tmp_config):
        runner.invoke(app, ["start"])
        result = runner.invoke(app, ["skip"])

        assert "Skipped to Break (05:00)" in strip_ansi(result.output)
        data = _status(tmp_config)
        assert data["status"] == "paused"
        assert data["mode"] == "short_break"
        assert data["session_count"] == 0

    def test_reset_cycle(self, tmp_config):
        result = runner.invoke(app, ["reset-cycle"])

        assert "Pomodoro cycle reset" in strip_ansi(result.output)
        assert _status(tmp_config)["session_count"] == 0


# ---------------------------------------------------------------------------
# status
# ---------------------------------------------------------------------------


class TestStatus:
    def test_idle_table(self, tmp_config):
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        output = strip_ansi(result.output)
        assert "Idle, up next: Focus" in output
        assert "25:00" in output

    def test_running_table_shows_end_time(self, tmp_config):
        runner.invoke(app, ["start"])
        result = runner.invoke(app, ["status"])
        assert "ends at" in strip_ansi(result.output)

    def test_json_fields(self, tmp_config):
        data = _status(tmp_config)
        assert set(data) >= {
            "status",
            "mode",
            "remaining",
            "remaining_seconds",
            "progress",
            "session_count",
            "total_sessions",
        }
        assert data["total_sessions"] == 4
        assert data["progress"] == 0.0

    def test_yaml_output(self, tmp_config):
        result = runner.invoke(app, ["status", "-o", "yaml"])
        assert "status: idle" in result.output


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRun:
    def test_run_with_start(self, tmp_config, mocker):
        mocker.patch("pomus_cli.commands.timer.create_keyboard_handler")
        display_run = mocker.patch(
            "pomus_cli.commands.timer.TimerDisplay.run", return_value="left"
        )

        result = runner.invoke(app, ["run", "--start"])

        assert result.exit_code == 0, result.output
        display_run.assert_called_once()
        controller = display_run.call_args.args[0]
        assert controller.timer_state.status == "focus"
        assert not controller.is_ticking
        assert "Timer keeps going" in strip_ansi(result.output)

    def test_run_stopped(self, tmp_config, mocker):
        mocker.patch("pomus_cli.commands.timer.create_keyboard_handler")
        mocker.patch("pomus_cli.commands.timer.TimerDisplay.run", return_value="stopped")

        result = runner.invoke(app, ["run"])

        assert "Session stopped" in strip_ansi(result.output)


class TestUnknownCommand:
    def test_typo_suggests_command(self, tmp_config):
        result = runner.invoke(app, ["puase"])

        assert result.exit_code == 1
        assert "Did you mean this?" in strip_ansi(result.output)
        assert "pause" in strip_ansi(result.output)
