import json
from dataclasses import replace
from unittest.mock import patch

import pytest
from rich.console import Console

from gradebook import app
from gradebook.models import Group
from gradebook.app import (
    cmd_attendance, cmd_groups, cmd_recovery, cmd_report, fmt_grade, main, select_group,
)


@pytest.fixture
def output(monkeypatch):
    """Swap the app console for a recording one and return a text getter."""
    console = Console(record=True, width=200, color_system=None)
    monkeypatch.setattr(app, "console", console)
    return lambda: console.export_text()


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("gradebook.app.configure_logging"):
        yield


def test_fmt_grade():
    assert fmt_grade(None) == "-"
    assert fmt_grade(7.3) == "[green]7.3[/green]"
    assert fmt_grade(5) == "[red]5.0[/red]"


def test_select_group_single_group_skips_prompt(book):
    with patch("gradebook.app.Prompt.ask") as ask:
        assert select_group(book) == "g1"
    ask.assert_not_called()


def test_select_group_prompts_when_several(book):
    two = replace(book, groups=book.groups + (Group(id="g2", name="3B"),))
    with patch("gradebook.app.Prompt.ask", return_value="2"):
        assert select_group(two) == "g2"


def test_cmd_groups(book, output):
    cmd_groups(book)
    text = output()
    assert "3A" in text
    assert "Mon, Wed" in text
    assert "OK" in text


def test_cmd_report(book, output):
    cmd_report(book)
    text = output()
    assert "Ana" in text
    assert "9.1" in text
    assert "Ordinario (failing)" in text
    assert "25%" in text


def test_cmd_recovery(book, output):
    cmd_recovery(book)
    text = output()
    assert "Beto" in text
    assert "Ana" not in text
    assert "remedial p1, remedial p2, extra" in text


def test_cmd_attendance(book, output):
    cmd_attendance(book)
    text = output()
    assert "2024-01" in text
    assert "75%" in text
    assert "Exam 1" in text


def test_main_quits(backup_file, output):
    with patch("gradebook.app.Prompt.ask", side_effect=["report", "quit"]):
        assert main([backup_file]) == 0
    text = output()
    assert "Beto" in text
    assert "Bye." in text


def test_main_unknown_command(backup_file, output):
    with patch("gradebook.app.Prompt.ask", side_effect=["dance", "q"]):
        main([backup_file])
    assert "Unknown command" in output()


def test_main_reports_command_errors(backup_file, output):
    with patch("gradebook.app.Prompt.ask", side_effect=["report", "quit"]), \
            patch("gradebook.app.group_report", side_effect=RuntimeError("boom")):
        main([backup_file])
    assert "Error: boom" in output()


def test_main_bad_backup(tmp_path, output):
    path = tmp_path / "broken.json"
    path.write_text("{")
    assert main([str(path)]) == 1
    assert "not valid json" in output()


def test_main_null_grades_record(tmp_path, backup_data, output):
    backup_data["grades"]["g1"]["s1"] = None
    path = tmp_path / "backup.json"
    path.write_text(json.dumps(backup_data))
    assert main([str(path)]) == 1
    assert "Malformed backup entry" in output()
