import re
from enum import Enum

from ucibridge.engine.commands import SearchMode

TERMINAL_PREFIX = "bestmove"

# tablebase markers, matched anywhere in the line
HINT_PATTERN = re.compile(r"dtz|tb|tablebase|wdl", re.IGNORECASE)


class LineKind(Enum):
    TERMINAL = "terminal"
    HINT = "hint"
    PLAIN = "plain"


def classify_line(line: str, mode: SearchMode) -> LineKind:
    """
    Classify one engine output line.

    Engines print a variable number of progress lines before answering, so
    only the two marker patterns are recognised: a line starting with
    `bestmove` ends any session; in probe mode a line mentioning a
    tablebase marker ends it too. Everything else is plain transcript.
    """
    if line.startswith(TERMINAL_PREFIX):
        return LineKind.TERMINAL
    if mode is SearchMode.PROBE and HINT_PATTERN.search(line):
        return LineKind.HINT
    return LineKind.PLAIN
