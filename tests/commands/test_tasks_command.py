"""Tests for the ``pomus tasks`` commands."""

from __future__ import annotations

import json
import re

from typer.testing import CliRunner

from pomus_cli.commands.tasks import app
from pomus_cli.services.session_service import get_task_service
from pomus_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND

runner = CliRunner()


def strip_ansi(text: str) -> str:
    ansi = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")
    return ansi.sub("", text)


def _add(text: str, *extra: str) -> str:
    result = runner.invoke(app, ["add", text, *extra])
    assert result.exit_code == 0, result.output
    return re.search(r"#(\w+)", strip_ansi(result.output)).group(1)


class TestAdd:
    def test_add(self, tmp_config):
        result = runner.invoke(app, ["add", "Write report"])

        assert result.exit_code == 0
        assert "Task added: Write report" in strip_ansi(result.output)
        assert get_task_service(tmp_config).list_tasks()[0].text == "Write report"

    def test_add_with_due(self, tmp_config):
        _add("Review PR", "--due", "2025-03-12")
        task = get_task_service(tmp_config).list_tasks()[0]
        assert task.due_date.isoformat() == "2025-03-12"

    def test_bad_due_date(self, tmp_config):
        result = runner.invoke(app, ["add", "x", "--due", "12/03/2025"])
        assert result.exit_code == ERROR_INVALID_ARGS
        assert "expected YYYY-MM-DD" in strip_ansi(result.output)

    def test_blank_text(self, tmp_config):
        result = runner.invoke(app, ["add", "   "])
        assert result.exit_code == ERROR_INVALID_ARGS


class TestList:
    def test_empty(self, tmp_config):
        result = runner.invoke(app, ["list"])
        assert "No tasks" in strip_ansi(result.output)

    def test_table(self, tmp_config):
        _add("Write report")
        result = runner.invoke(app, ["list"])

        output = strip_ansi(result.output)
        assert "Write report" in output
        assert "0 tasks completed in total" in output

    def test_json(self, tmp_config):
        _add("Write report")
        result = runner.invoke(app, ["list", "-o", "json"])

        data = json.loads(result.output)
        assert data[0]["text"] == "Write report"
        assert data[0]["is_completed"] is False

    def test_bad_status(self, tmp_config):
        result = runner.invoke(app, ["list", "--status", "archived"])
        assert result.exit_code == ERROR_INVALID_ARGS


class TestDoneEditDelete:
    def test_done_and_reopen(self, tmp_config):
        short_id = _add("Write report")

        result = runner.invoke(app, ["done", short_id])
        assert "Completed: Write report" in strip_ansi(result.output)
        assert get_task_service(tmp_config).total_completed == 1

        result = runner.invoke(app, ["done", short_id])
        assert "Reopened: Write report" in strip_ansi(result.output)

    def test_unknown_task(self, tmp_config):
        result = runner.invoke(app, ["done", "doesnotexist"])
        assert result.exit_code == ERROR_NOT_FOUND
        assert "Task not found" in strip_ansi(result.output)

    def test_edit(self, tmp_config):
        short_id = _add("draft")
        result = runner.invoke(app, ["edit", short_id, "--text", "final"])

        assert result.exit_code == 0
        assert get_task_service(tmp_config).list_tasks()[0].text == "final"

    def test_edit_requires_a_change(self, tmp_config):
        short_id = _add("draft")
        result = runner.invoke(app, ["edit", short_id])
        assert result.exit_code == ERROR_INVALID_ARGS

    def test_delete_confirmed(self, tmp_config):
        short_id = _add("draft")
        result = runner.invoke(app, ["delete", short_id], input="y\n")

        assert "Task deleted" in strip_ansi(result.output)
        assert get_task_service(tmp_config).list_tasks("all") == []

    def test_delete_cancelled(self, tmp_config):
        short_id = _add("draft")
        result = runner.invoke(app, ["delete", short_id], input="n\n")

        assert "Cancelled" in strip_ansi(result.output)
        assert len(get_task_service(tmp_config).list_tasks()) == 1


class TestMoveClear:
    def test_move(self, tmp_config):
        _add("a")
        _add("b")
        short_id = _add("c")

        result = runner.invoke(app, ["move", short_id, "1"])

        assert result.exit_code == 0
        assert [t.text for t in get_task_service(tmp_config).list_tasks()] == ["c", "a", "b"]

    def test_move_completed_rejected(self, tmp_config):
        short_id = _add("a")
        runner.invoke(app, ["done", short_id])

        result = runner.invoke(app, ["move", short_id, "1"])
        assert result.exit_code == ERROR_INVALID_ARGS

    def test_clear(self, tmp_config):
        runner.invoke(app, ["done", _add("a")])
        _add("b")

        result = runner.invoke(app, ["clear"])

        assert "Cleared 1 completed tasks" in strip_ansi(result.output)
        assert get_task_service(tmp_config).total_completed == 1
