import sys

import psutil

from config import INITIAL_JOB_CAPACITY
from smallsh.executor import ChildProcess


class JobRegistry:
    """
    Pids of background jobs that have not been reaped yet.
    Behaves as a set; capacity doubles when full and never shrinks.
    """

    def __init__(self, capacity=INITIAL_JOB_CAPACITY):
        self.capacity = capacity
        self._pids = []

    def add(self, pid):
        if pid <= 0:
            raise ValueError(f"invalid pid: {pid}")
        if pid in self._pids:
            return
        if len(self._pids) == self.capacity:
            self.capacity *= 2
        self._pids.append(pid)

    def remove(self, pid):
        """Forget pid; unknown pids are ignored"""
        if pid in self._pids:
            self._pids.remove(pid)

    @property
    def size(self):
        return len(self._pids)

    def __len__(self):
        return len(self._pids)

    def __contains__(self, pid):
        return pid in self._pids

    def __iter__(self):
        # Snapshot, so callers may remove while iterating
        return iter(list(self._pids))


def reap_jobs(registry):
    """
    Report and forget every background job that has finished.
    Never blocks; running jobs are left alone.
    Returns: list of (pid, ExitStatus) that were reaped
    """
    reaped = []
    for pid in registry:
        try:
            status = ChildProcess(pid).poll()
        except ChildProcessError:
            print(f"smallsh: lost track of background pid {pid}", file=sys.stderr)
            registry.remove(pid)
            continue

        if status is None:
            continue

        print(f"background pid {pid} is done: {status.describe()}", flush=True)
        registry.remove(pid)
        reaped.append((pid, status))
    return reaped


def show_jobs(registry):
    """List tracked background jobs with their current process state"""
    if not len(registry):
        print("No background jobs.")
        return

    print(f"{'PID':<8} {'State'}")
    print("-" * 24)
    for pid in registry:
        try:
            state = psutil.Process(pid).status()
        except psutil.NoSuchProcess:
            state = "terminated"
        except psutil.AccessDenied:
            state = "unknown"
        print(f"{pid:<8} [{state}]")
