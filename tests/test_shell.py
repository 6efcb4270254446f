"""Tests for line dispatch and the built-in commands."""

import io
import os
import time

from config import ENTER_FOREGROUND_ONLY
from smallsh.executor import ExitStatus
from smallsh.job_control import JobRegistry
from smallsh.mode import ModeController
from smallsh.shell import Shell


def _shell():
    return Shell(mode=ModeController(stream=io.StringIO()))


class TestDispatch:
    """Verify what each kind of line does."""

    def test_comment_does_nothing(self, capfd) -> None:
        shell = _shell()
        shell.status = ExitStatus(5)
        shell.run_line("# echo hi > x")
        assert shell.status == ExitStatus(5)
        assert capfd.readouterr().out == ""

    def test_blank_line_does_nothing(self, capfd) -> None:
        shell = _shell()
        shell.run_line("   ")
        assert shell.status == ExitStatus(0)
        assert capfd.readouterr().out == ""

    def test_foreground_status_recorded(self) -> None:
        shell = _shell()
        shell.run_line("true")
        assert shell.status == ExitStatus(0)
        shell.run_line("false")
        assert shell.status == ExitStatus(1)

    def test_background_does_not_touch_status(self) -> None:
        shell = _shell()
        shell.status = ExitStatus(4)
        shell.run_line("sleep 0 &")
        assert shell.status == ExitStatus(4)
        assert shell.registry.size == 1
        pid = next(iter(shell.registry))
        os.waitpid(pid, 0)

    def test_foreground_only_mode_ignores_ampersand(self, capfd) -> None:
        shell = _shell()
        shell.mode.handle_toggle()
        shell.run_line("true &")
        assert shell.registry.size == 0
        assert "background pid is" not in capfd.readouterr().out

    def test_pid_substituted_into_arguments(self, tmp_path) -> None:
        shell = _shell()
        target = tmp_path / "pid.txt"
        shell.run_line(f"echo $$ > {target}")
        assert target.read_text() == f"{os.getpid()}\n"

    def test_too_many_arguments_reported(self, capfd) -> None:
        shell = _shell()
        shell.run_line("echo " + " ".join(["a"] * 600))
        assert "too many arguments" in capfd.readouterr().out
        assert shell.status == ExitStatus(0)


class TestBuiltins:
    """Verify cd, status, exit and jobs."""

    def test_status_initially_zero(self, capfd) -> None:
        _shell().run_line("status")
        assert capfd.readouterr().out == "exit value 0\n"

    def test_status_after_failure(self, tmp_path, capfd) -> None:
        script = tmp_path / "fail.sh"
        script.write_text("exit 2\n")
        shell = _shell()
        shell.run_line(f"sh {script}")
        shell.run_line("status")
        assert "exit value 2" in capfd.readouterr().out

    def test_cd_to_path(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(os.getcwd())
        _shell().run_line(f"cd {tmp_path}")
        assert os.getcwd() == os.path.realpath(tmp_path)

    def test_cd_without_path_goes_home(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(os.getcwd())
        monkeypatch.setenv("HOME", str(tmp_path))
        _shell().run_line("cd")
        assert os.getcwd() == os.path.realpath(tmp_path)

    def test_cd_failure_reported(self, tmp_path, capfd) -> None:
        cwd = os.getcwd()
        _shell().run_line(f"cd {tmp_path / 'missing'}")
        assert "cd:" in capfd.readouterr().out
        assert os.getcwd() == cwd

    def test_builtin_ignores_redirection(self, tmp_path) -> None:
        target = tmp_path / "status.txt"
        _shell().run_line(f"status > {target}")
        assert not target.exists()

    def test_exit_stops_loop(self) -> None:
        shell = _shell()
        shell.run_line("exit")
        assert shell.running is False

    def test_jobs_lists_background_pid(self, capfd) -> None:
        shell = _shell()
        shell.run_line("sleep 30 &")
        pid = next(iter(shell.registry))
        try:
            shell.run_line("jobs")
            assert str(pid) in capfd.readouterr().out
        finally:
            os.kill(pid, 9)
            os.waitpid(pid, 0)


class TestMainLoop:
    """Verify the interactive loop end to end."""

    def test_reaps_and_exits(self, tmp_path, monkeypatch, capfd) -> None:
        script = tmp_path / "three.sh"
        script.write_text("exit 3\n")
        shell = _shell()
        monkeypatch.setattr(shell.mode, "install", lambda: None)
        lines = iter([f"sh {script} &"] + ["pause"] * 40 + ["exit"])

        def fake_input(prompt):
            line = next(lines)
            if line == "pause":
                time.sleep(0.1)
                return ""
            return line

        monkeypatch.setattr("builtins.input", fake_input)
        assert shell.main_loop() == 0
        out = capfd.readouterr().out
        assert "background pid is" in out
        assert "is done: exit value 3" in out
        assert shell.registry.size == 0

    def test_end_of_input_exits(self, monkeypatch) -> None:
        shell = _shell()
        monkeypatch.setattr(shell.mode, "install", lambda: None)

        def fake_input(prompt):
            raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)
        assert shell.main_loop() == 0

    def test_deferred_mode_message_before_next_prompt(self, monkeypatch) -> None:
        shell = _shell()
        monkeypatch.setattr(shell.mode, "install", lambda: None)
        lines = iter(["exit"])

        with shell.mode.foreground():
            shell.mode.handle_toggle()

        seen = []

        def fake_input(prompt):
            seen.append(shell.mode.stream.getvalue())
            return next(lines)

        monkeypatch.setattr("builtins.input", fake_input)
        shell.main_loop()
        assert seen[0].count(ENTER_FOREGROUND_ONLY) == 1


class TestConstruction:
    """Verify collaborators passed to the shell are the ones it uses."""

    def test_keeps_empty_registry(self) -> None:
        registry = JobRegistry()
        shell = Shell(mode=ModeController(stream=io.StringIO()), registry=registry)
        assert shell.registry is registry

    def test_keeps_mode(self) -> None:
        mode = ModeController(stream=io.StringIO())
        assert Shell(mode=mode).mode is mode

    def test_background_job_lands_in_given_registry(self) -> None:
        registry = JobRegistry()
        shell = Shell(mode=ModeController(stream=io.StringIO()), registry=registry)
        shell.run_line("true &")
        assert registry.size == 1
        os.waitpid(next(iter(registry)), 0)
