class ShellError(Exception):
    """Base class for errors raised by the shell core"""


class TooManyArgumentsError(ShellError):
    def __init__(self, count, limit):
        super().__init__(f"too many arguments (max {limit})")
        self.count = count
        self.limit = limit


class RedirectionError(ShellError):
    """A redirection target could not be opened in the child"""

    def __init__(self, path, direction):
        super().__init__(f"cannot open {path} for {direction}")
        self.path = path
        self.direction = direction
