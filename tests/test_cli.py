import builtins

import pytest

from pipesh.cli import main


def test_cli_exec_outputs(capfd):
    with pytest.raises(SystemExit) as exc:
        main(["exec", "echo hi | tr a-z A-Z"])
    assert exc.value.code == 0
    captured = capfd.readouterr()
    assert "HI" in captured.out


def test_cli_exec_propagates_status(capfd):
    with pytest.raises(SystemExit) as exc:
        main(["exec", "nonexistent_program_xyz"])
    assert exc.value.code == 127
    assert "nonexistent_program_xyz" in capfd.readouterr().err


def test_cli_rejects_bad_config():
    with pytest.raises(SystemExit) as exc:
        main(["exec", "--max-expansion", "0", "true"])
    assert exc.value.code == 2


def test_cli_shell_repl(monkeypatch, capfd):
    inputs = iter(["echo hello", "nonexistent_program_xyz", "echo again", ":q"])
    prompts = []

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        return next(inputs)

    monkeypatch.setattr(builtins, "input", fake_input)
    with pytest.raises(SystemExit) as exc:
        main(["shell", "--prompt", "> "])
    assert exc.value.code == 0
    assert prompts == ["> "] * 4
    captured = capfd.readouterr()
    assert "hello\n" in captured.out
    assert "again\n" in captured.out


def test_cli_shell_end_of_input(monkeypatch, capfd):
    def fake_input(prompt: str) -> str:
        raise EOFError

    monkeypatch.setattr(builtins, "input", fake_input)
    with pytest.raises(SystemExit) as exc:
        main(["shell"])
    assert exc.value.code == 0
    assert "Goodbye!" in capfd.readouterr().out


def test_cli_shell_survives_ctrl_c(monkeypatch, capfd):
    events = iter([KeyboardInterrupt, "echo after", ":q"])

    def fake_input(prompt: str) -> str:
        event = next(events)
        if event is KeyboardInterrupt:
            raise KeyboardInterrupt
        return event

    monkeypatch.setattr(builtins, "input", fake_input)
    with pytest.raises(SystemExit) as exc:
        main(["shell"])
    assert exc.value.code == 0
    assert "after\n" in capfd.readouterr().out
