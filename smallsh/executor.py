import os
import signal
import sys
from dataclasses import dataclass

from config import NULL_DEVICE
from smallsh.errors import RedirectionError


@dataclass(frozen=True)
class ExitStatus:
    """How a child process ended: exit code, or the signal that killed it"""
    code: int = 0
    signaled: bool = False

    @classmethod
    def from_wait_status(cls, status):
        if os.WIFSIGNALED(status):
            return cls(os.WTERMSIG(status), signaled=True)
        return cls(os.WEXITSTATUS(status))

    def describe(self):
        if self.signaled:
            return f"terminated by signal {self.code}"
        return f"exit value {self.code}"


class ChildProcess:
    """Handle on a forked child, waited on either blocking or non-blocking"""

    def __init__(self, pid):
        self.pid = pid

    def wait_blocking(self):
        """
        Block until this child terminates.
        Returns: ExitStatus
        """
        _, status = os.waitpid(self.pid, 0)
        return ExitStatus.from_wait_status(status)

    def poll(self):
        """
        Check this child without blocking.
        Returns: ExitStatus, or None while it is still running
        """
        pid, status = os.waitpid(self.pid, os.WNOHANG)
        if pid == 0:
            return None
        return ExitStatus.from_wait_status(status)


def describe_os_error(err):
    """strerror text with its first letter lower-cased"""
    message = err.strerror or str(err)
    return message[:1].lower() + message[1:]


def _redirect(path, flags, target_fd, direction):
    try:
        fd = os.open(path, flags, 0o666)
    except OSError:
        raise RedirectionError(path, direction)
    os.dup2(fd, target_fd)


def _apply_redirection(command):
    if command.input_file:
        _redirect(command.input_file, os.O_RDONLY, 0, "input")
    elif command.background:
        _redirect(NULL_DEVICE, os.O_RDONLY, 0, "input")

    if command.output_file:
        _redirect(command.output_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 1, "output")
    elif command.background:
        _redirect(NULL_DEVICE, os.O_WRONLY | os.O_CREAT, 1, "output")


def _exec_child(command):
    """Runs in the forked child. Never returns."""
    try:
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        _apply_redirection(command)
        os.execvp(command.name, command.argv)
    except RedirectionError as e:
        print(e, flush=True)
    except OSError as e:
        print(f"{command.name}: {describe_os_error(e)}", flush=True)
    finally:
        os._exit(1)


def spawn_process(command, registry, mode):
    """
    Fork and exec one external command.
    Background children are registered and not waited on.
    Returns: ExitStatus for a foreground run, None otherwise
    """
    # Anything still buffered would otherwise be written twice
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        pid = os.fork()
    except OSError as e:
        print(f"fork() failed: {describe_os_error(e)}", flush=True)
        return None

    if pid == 0:
        _exec_child(command)

    if command.background:
        print(f"background pid is {pid}", flush=True)
        registry.add(pid)
        return None

    with mode.foreground():
        status = ChildProcess(pid).wait_blocking()

    if status.signaled:
        print(status.describe(), flush=True)
    return status
