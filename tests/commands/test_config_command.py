"""Tests for the ``pomus config`` commands."""

import json
import re

import pytest
from typer.testing import CliRunner

from pomus_cli.commands.config import app, parse_value
from pomus_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND

runner = CliRunner()


def strip_ansi(text: str) -> str:
    ansi = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi.sub("", text)


@pytest.mark.parametrize(
    "raw,parsed",
    [("true", True), ("False", False), ("45", 45), ("red", "red"), ("-3", "-3")],
)
def test_parse_value(raw, parsed):
    assert parse_value(raw) == parsed


class TestView:
    def test_json(self, tmp_config):
        result = runner.invoke(app, ["view", "-o", "json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["timer"]["focus_minutes"] == 25
        assert data["notifications"]["enabled"] is True

    def test_table(self, tmp_config):
        result = runner.invoke(app, ["view"])
        output = strip_ansi(result.output)
        assert "timer" in output
        assert "continuous_mode" in output


class TestGet:
    def test_get_value(self, tmp_config):
        result = runner.invoke(app, ["get", "timer.short_break_minutes"])
        assert result.output.strip() == "5"

    def test_get_section(self, tmp_config):
        result = runner.invoke(app, ["get", "output"])
        assert "icons" in strip_ansi(result.output)

    def test_get_unknown(self, tmp_config):
        result = runner.invoke(app, ["get", "timer.nope"])
        assert result.exit_code == ERROR_NOT_FOUND


class TestSet:
    def test_set_int(self, tmp_config):
        result = runner.invoke(app, ["set", "timer.focus_minutes", "45"])

        assert result.exit_code == 0
        assert tmp_config.timer_settings.focus_minutes == 45

    def test_set_bool(self, tmp_config):
        runner.invoke(app, ["set", "timer.continuous_mode", "true"])
        assert tmp_config.timer_settings.continuous_mode is True

    def test_out_of_range(self, tmp_config):
        result = runner.invoke(app, ["set", "timer.sessions_before_long_break", "12"])

        assert result.exit_code == ERROR_INVALID_ARGS
        assert tmp_config.timer_settings.sessions_before_long_break == 4

    def test_unknown_key(self, tmp_config):
        result = runner.invoke(app, ["set", "timer.nope", "1"])
        assert result.exit_code == ERROR_NOT_FOUND


class TestReset:
    def test_reset_timer_settings(self, tmp_config):
        tmp_config.set("timer.focus_minutes", 60)
        tmp_config.set("output.icons", False)

        result = runner.invoke(app, ["reset", "timer", "--yes"])

        assert result.exit_code == 0
        assert tmp_config.timer_settings.focus_minutes == 25
        assert tmp_config.config.output.icons is False

    def test_reset_all_confirmed(self, tmp_config):
        tmp_config.set("output.icons", False)
        result = runner.invoke(app, ["reset"], input="y\n")

        assert "reset to defaults" in strip_ansi(result.output)
        assert tmp_config.config.output.icons is True

    def test_reset_cancelled(self, tmp_config):
        tmp_config.set("output.icons", False)
        result = runner.invoke(app, ["reset"], input="n\n")

        assert "Cancelled" in strip_ansi(result.output)
        assert tmp_config.config.output.icons is False

    def test_reset_unknown_key(self, tmp_config):
        result = runner.invoke(app, ["reset", "nope", "-y"])
        assert result.exit_code == ERROR_NOT_FOUND
