import io
import os
import signal
import sys
from contextlib import contextmanager

from config import ENTER_FOREGROUND_ONLY, EXIT_FOREGROUND_ONLY, PROMPT


class ModeController:
    """
    Foreground-only mode, flipped by SIGTSTP.

    The handler announces the change itself only when no foreground child
    is running. Otherwise the announcement is left for announce(), which
    the main loop calls before every prompt. Each flip is printed once.
    """

    def __init__(self, stream=None):
        self.background_allowed = True
        self.foreground_active = False
        self._announced = True
        self._stream = stream

    @property
    def stream(self):
        return self._stream if self._stream is not None else sys.stdout

    def install(self):
        """Shell ignores SIGINT and toggles the mode on SIGTSTP"""
        signal.signal(signal.SIGINT, signal.SIG_IGN)
        signal.signal(signal.SIGTSTP, self.handle_toggle)

    def handle_toggle(self, signum=None, frame=None):
        self.background_allowed = not self.background_allowed
        if self.foreground_active:
            return
        self.announce(reprompt=True)

    def pending(self):
        """True if a flip has not been announced yet"""
        return self.background_allowed != self._announced

    def announce(self, reprompt=False):
        """
        Print the mode message if the flag changed since the last one.
        Returns: True if something was printed
        """
        if not self.pending():
            return False

        message = EXIT_FOREGROUND_ONLY if self.background_allowed else ENTER_FOREGROUND_ONLY
        text = f"\n{message}\n"
        if reprompt:
            text += PROMPT
        self._write(text)
        self._announced = self.background_allowed
        return True

    def _write(self, text):
        try:
            fd = self.stream.fileno()
        except (AttributeError, io.UnsupportedOperation):
            self.stream.write(text)
            self.stream.flush()
            return
        # Raw write to the descriptor, bypassing the text buffer
        self.stream.flush()
        os.write(fd, text.encode())

    @contextmanager
    def foreground(self):
        """Marks a blocking foreground wait"""
        self.foreground_active = True
        try:
            yield
        finally:
            self.foreground_active = False
