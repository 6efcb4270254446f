import os
import sys

from config import PROMPT
from smallsh.builtin import execute_builtin
from smallsh.errors import ShellError
from smallsh.executor import ExitStatus, spawn_process
from smallsh.job_control import JobRegistry, reap_jobs
from smallsh.mode import ModeController
from smallsh.parser import parse_command


class Shell:
    """State that lives for the whole session"""

    def __init__(self, mode=None, registry=None):
        self.pid = os.getpid()
        self.mode = mode if mode is not None else ModeController()
        self.registry = registry if registry is not None else JobRegistry()
        self.status = ExitStatus()
        self.running = True

    def run_line(self, line):
        """
        Parse one line and run it.
        Returns: ParsedCommand, or None if the line could not be parsed
        """
        try:
            command = parse_command(line, self.pid, self.mode.background_allowed)
        except ShellError as e:
            print(f"smallsh: {e}", flush=True)
            return None

        if command.is_blank():
            return command

        if execute_builtin(self, command):
            return command

        status = spawn_process(command, self.registry, self.mode)
        if status is not None:
            self.status = status
        return command

    def read_line(self):
        """
        Show the prompt and read one line.
        Returns: the line without its newline, or None at end of input
        """
        self.mode.announce()
        try:
            return input(PROMPT)
        except EOFError:
            # End of input ends the session instead of re-prompting
            print()
            return None

    def main_loop(self):
        """Main shell loop"""
        self.mode.install()
        print(f"smallsh pid: {self.pid}", flush=True)

        while self.running:
            reap_jobs(self.registry)
            line = self.read_line()
            if line is None:
                break
            self.run_line(line)

        sys.stdout.flush()
        return 0
