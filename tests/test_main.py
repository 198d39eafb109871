import json

from workflow_app import main
from workflow_app.tracker.models import WorkStatus


def test_log_and_show(controller, capsys):
    assert main.run(["--date", "2024-03-15", "log", "9", "focused"], controller=controller) == 0
    out = capsys.readouterr().out
    assert "2024-03-15  (14 active hours)" in out
    assert "Focus score: 100%" in out
    assert controller.day_record().log == {9: WorkStatus.FOCUSED}


def test_invalid_input_returns_error_code(controller, capsys):
    assert main.run(["log", "30", "NORMAL"], controller=controller) == 2
    assert main.run(["log", "9", "DOZING"], controller=controller) == 2
    assert main.run(["todo", "7", "--text", "x"], controller=controller) == 2
    assert "error:" in capsys.readouterr().err
    assert len(controller.store) == 0


def test_todo_and_range_commands(controller):
    main.run(["todo", "1", "--text", "Plan week", "--done"], controller=controller)
    main.run(["range", "sleep2", "--toggle"], controller=controller)
    record = controller.day_record()
    assert record.todos[1].text == "Plan week"
    assert record.todos[1].completed
    assert record.config.sleep2.enabled


def test_trend_command(controller, capsys):
    controller.update_status(9, WorkStatus.NORMAL)
    main.run(["trend", "--days", "2"], controller=controller)
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    assert lines[-1].startswith("2024-03-15")
    assert "normal= 1" in lines[-1]


def test_export_command(controller, capsys):
    controller.update_status(9, WorkStatus.NORMAL)
    main.run(["export"], controller=controller)
    path = capsys.readouterr().out.strip()
    with open(path, encoding="utf-8") as fh:
        assert json.load(fh)["2024-03-15"]["log"] == {"9": "NORMAL"}
