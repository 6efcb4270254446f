import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from config import COMMENT_PREFIX, MAX_ARGS, SELF_PID_MARKER
from smallsh.errors import TooManyArgumentsError

SPECIAL_CHARS = ("<", ">", "&")

_DELIMITERS = re.compile(r"[ \t]+")


@dataclass
class ParsedCommand:
    """
    Result of parsing one input line.
    argv has every operator token removed; redirection targets and the
    background flag are carried alongside it for this cycle only.
    """
    argv: List[str] = field(default_factory=list)
    input_file: Optional[str] = None
    output_file: Optional[str] = None
    background: bool = False

    @property
    def name(self):
        return self.argv[0] if self.argv else ""

    def is_blank(self):
        """Empty lines and comments do nothing"""
        return not self.name or self.name.startswith(COMMENT_PREFIX)


def tokenize(line):
    """
    Split a line on runs of spaces and tabs.
    A blank line yields a single empty word.
    Returns: list of words
    """
    stripped = line.strip(" \t")
    if not stripped:
        return [""]

    words = _DELIMITERS.split(stripped)
    if len(words) > MAX_ARGS:
        raise TooManyArgumentsError(len(words), MAX_ARGS)
    return words


def is_word(token):
    """A usable redirection target: present, non-empty, not a lone operator"""
    if not token:
        return False
    if token in SPECIAL_CHARS:
        return False
    return True


def substitute_pid(word, pid):
    """Replace the first embedded $$ in word with pid"""
    return word.replace(SELF_PID_MARKER, str(pid), 1)


def parse_directives(words, shell_pid=None, background_allowed=True):
    """
    Strip redirection and background operators from the word list.
    Operators without a valid operand are kept as ordinary words.
    Returns: ParsedCommand
    """
    if shell_pid is None:
        shell_pid = os.getpid()

    command = ParsedCommand()
    i = 0
    while i < len(words):
        tok = words[i]
        nxt = words[i + 1] if i + 1 < len(words) else None

        if tok == "<" and is_word(nxt):
            command.input_file = nxt
            i += 2
        elif tok == ">" and is_word(nxt):
            command.output_file = nxt
            i += 2
        elif tok == "&" and nxt is None:
            command.background = background_allowed
            i += 1
        elif tok == SELF_PID_MARKER:
            command.argv.append(str(shell_pid))
            i += 1
        else:
            command.argv.append(substitute_pid(tok, shell_pid))
            i += 1

    return command


def parse_command(line, shell_pid=None, background_allowed=True):
    """Tokenize and parse a raw input line"""
    return parse_directives(tokenize(line), shell_pid, background_allowed)
