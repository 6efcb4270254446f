import os

# Prompt shown before every line of input
PROMPT = os.getenv("SMALLSH_PROMPT", ":")

# Limits
MAX_ARGS = 512
MAX_WORD_LENGTH = 200  # nominal only, longer words are accepted
INPUT_BUFFER_SIZE = 2052

# Background job registry starts at this many slots and doubles when full
INITIAL_JOB_CAPACITY = 10

NULL_DEVICE = os.devnull

SELF_PID_MARKER = "$$"
COMMENT_PREFIX = "#"

ENTER_FOREGROUND_ONLY = "Entering foreground-only mode (& is now ignored)"
EXIT_FOREGROUND_ONLY = "Exiting foreground-only mode"


def home_directory():
    """Directory used by `cd` with no argument"""
    return os.getenv("HOME") or os.path.expanduser("~")
