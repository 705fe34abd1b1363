"""Unit tests for pomus_cli.utils.ui.formatters."""

from __future__ import annotations

import json

import pytest

from pomus_cli.utils.ui import formatters
from pomus_cli.utils.ui.formatters import format_clock, format_duration, format_output


@pytest.mark.parametrize(
    "seconds,expected",
    [
        (1500, "25:00"),
        (1499.2, "25:00"),
        (59.01, "01:00"),
        (0.4, "00:01"),
        (0, "00:00"),
        (-3, "00:00"),
        (7200, "120:00"),
    ],
)
def test_format_clock(seconds, expected):
    assert format_clock(seconds) == expected


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "0h 0m"), (1500, "0h 25m"), (3600, "1h 0m"), (7505.5, "2h 5m"), (-10, "0h 0m")],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


class TestFormatOutput:
    def test_json(self, capsys):
        format_output({"status": "focus", "remaining": "12:30"}, "json")
        assert json.loads(capsys.readouterr().out) == {"status": "focus", "remaining": "12:30"}

    def test_yaml_keeps_key_order(self, capsys):
        format_output({"status": "idle", "mode": "focus"}, "yaml")
        assert capsys.readouterr().out.startswith("status: idle\nmode: focus")

    def test_table_for_list_of_dicts(self, mocker):
        printed = mocker.patch.object(formatters.console, "print")
        format_output([{"id": "abc", "done": True}], "table")

        table = printed.call_args.args[0]
        assert [c.header for c in table.columns] == ["Id", "Done"]

    def test_empty_table(self, mocker):
        printed = mocker.patch.object(formatters.console, "print")
        format_output([], "table")
        assert "No data to display" in printed.call_args.args[0]

    def test_single_item_nested(self, mocker):
        printed = mocker.patch.object(formatters.console, "print")
        format_output({"timer": {"focus_minutes": 25}, "icons": None}, "table")

        lines = [c.args[0] for c in printed.call_args_list]
        assert lines[0] == "[bold]timer[/bold]"
        assert lines[1] == "  [cyan]focus_minutes[/cyan]: 25"
        assert lines[2] == "[cyan]icons[/cyan]: -"
